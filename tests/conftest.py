import json
from typing import Any, Callable, List, Optional

import httpx
import pytest

from zendesk_mcp.config import ZendeskConfig
from zendesk_mcp.core.zendesk_client import ZendeskClient


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None,
                 handler: Optional[Callable[[httpx.Request], httpx.Response]] = None):
        self.requests: List[httpx.Request] = []

        def respond(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if handler is not None:
                return handler(request)
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=payload if payload is not None else {"ok": True})

        super().__init__(respond)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def zendesk_config() -> ZendeskConfig:
    return ZendeskConfig(domain="acme.zendesk.com", email="agent@acme.com", token="secret-token")


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client(zendesk_config: ZendeskConfig, transport: RecordingTransport):
    with ZendeskClient(zendesk_config, transport=transport) as zendesk:
        yield zendesk
