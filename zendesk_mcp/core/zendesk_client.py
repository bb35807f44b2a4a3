import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from zendesk_mcp.config import ZendeskConfig

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25


def _ticket_path(ticket_id) -> str:
    # A missing id is forwarded as-is and rejected by the API
    return f"/api/v2/tickets/{'' if ticket_id is None else ticket_id}.json"


class RemoteOutcome(BaseModel):
    """Result of one Zendesk API call: decoded data or a failure description."""

    data: Any = None
    error: Optional[str] = None
    body: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str, body: Optional[str] = None) -> "RemoteOutcome":
        return cls(error=error, body=body)

    def to_payload(self) -> Any:
        if self.ok:
            return self.data
        payload: Dict[str, Any] = {"error": self.error}
        if self.body is not None:
            payload["body"] = self.body
        return payload


class ZendeskClient:
    """
    Thin wrapper over the Zendesk REST API v2.

    Every method issues exactly one HTTPS request and never raises for
    HTTP or transport failures; those come back as a failed RemoteOutcome.
    """

    def __init__(self, config: ZendeskConfig, transport: Optional[httpx.BaseTransport] = None):
        self._http = httpx.Client(
            base_url=config.base_url,
            auth=httpx.BasicAuth(f"{config.email}/token", config.token),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=transport,
        )

    def __enter__(self) -> "ZendeskClient":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self._http.close()

    def search_tickets(self, query: Optional[str], status: Optional[str] = None,
                       limit: int = DEFAULT_LIMIT) -> RemoteOutcome:
        search_query = query if query is not None else ""
        if status:
            search_query += f" status:{status}"

        return self.request("GET", "/api/v2/search.json", params={
            "query": search_query,
            "sort_by": "updated_at",
            "sort_order": "desc",
            "per_page": limit,
        })

    def get_ticket(self, ticket_id: Any) -> RemoteOutcome:
        return self.request("GET", _ticket_path(ticket_id),
                            params={"include": "comments,users"})

    def create_ticket(self, subject: str, description: str, requester_email: str,
                      priority: Optional[str] = None, type: Optional[str] = None) -> RemoteOutcome:
        ticket: Dict[str, Any] = {
            "subject": subject,
            "comment": {"body": description},
            "requester": {"email": requester_email},
        }
        if priority:
            ticket["priority"] = priority
        if type:
            ticket["type"] = type

        return self.request("POST", "/api/v2/tickets.json", json={"ticket": ticket})

    def update_ticket(self, ticket_id: Any, status: Optional[str] = None,
                      priority: Optional[str] = None, comment: Optional[str] = None) -> RemoteOutcome:
        # Only the supplied fields are sent; Zendesk treats null as a change
        ticket: Dict[str, Any] = {}
        if status:
            ticket["status"] = status
        if priority:
            ticket["priority"] = priority
        if comment:
            ticket["comment"] = {"body": comment}

        return self.request("PUT", _ticket_path(ticket_id), json={"ticket": ticket})

    def list_users(self, role: Optional[str] = None, limit: int = DEFAULT_LIMIT) -> RemoteOutcome:
        params: Dict[str, Any] = {"per_page": limit}
        if role:
            params["role"] = role
        return self.request("GET", "/api/v2/users.json", params=params)

    def request(self, method: str, endpoint: str, params: Optional[Dict[str, Any]] = None,
                json: Optional[Dict[str, Any]] = None) -> RemoteOutcome:
        """
        Performs a single request against the Zendesk API and classifies the result.
        """
        try:
            response = self._http.request(method, endpoint, params=params, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Zendesk request {method} {endpoint} failed: {e}")
            return RemoteOutcome.failure(f"Request failed: {e}")

        if not 200 <= response.status_code < 300:
            logger.error(f"Zendesk request {method} {endpoint} returned HTTP {response.status_code}")
            return RemoteOutcome.failure(
                f"HTTP {response.status_code}: {response.reason_phrase}", body=response.text)

        try:
            return RemoteOutcome(data=response.json())
        except ValueError as e:
            logger.error(f"Zendesk response for {method} {endpoint} is not JSON: {e}")
            return RemoteOutcome.failure(f"Request failed: {e}", body=response.text)
