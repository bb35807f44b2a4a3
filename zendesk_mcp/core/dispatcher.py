import json
import logging
from typing import Any, Callable, Dict

from zendesk_mcp.config import ServerConfig
from zendesk_mcp.core.mcp_types import (
    METHOD_NOT_FOUND,
    PROTOCOL_VERSION,
    JsonRpcRequest,
    JsonRpcResponse,
    ResourceContent,
    ResourceReadResult,
    TextContent,
    ToolCallResult,
)
from zendesk_mcp.core.zendesk_client import ZendeskClient
from zendesk_mcp.resources.registry import ResourceNotFoundError, ResourceRegistry, resource_registry
from zendesk_mcp.tools.registry import ToolNotFoundError, ToolRegistry, registry
# Import tools and resources to register them
import zendesk_mcp.tools.zendesk_tools  # noqa: F401
import zendesk_mcp.resources.zendesk_resources  # noqa: F401

logger = logging.getLogger(__name__)


class JsonRpcError(Exception):
    def __init__(self, code, message, data=None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self):
        error = {"code": self.code, "message": self.message}
        if self.data:
            error["data"] = self.data
        return error


def _pretty(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, default=str)


class Dispatcher:
    """
    Routes one decoded JSON-RPC message to its method handler.

    Protocol-level problems (missing or unknown method) become error
    responses. Unknown tools and resources are answered with a successful
    response whose text carries the error, and remote failures arrive as
    ordinary content. Anything else propagates to the caller.
    """

    def __init__(self, client: ZendeskClient, server: ServerConfig = ServerConfig(),
                 tools: ToolRegistry = registry, resources: ResourceRegistry = resource_registry):
        self.client = client
        self.server = server
        self.tools = tools
        self.resources = resources
        self._methods: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            "initialize": self.initialize,
            "ping": self.ping,
            "tools/list": self.list_tools,
            "tools/call": self.call_tool,
            "resources/list": self.list_resources,
            "resources/read": self.read_resource,
        }

    def handle(self, message: Any) -> Dict[str, Any]:
        """Returns the wire form of the response to a decoded message."""
        request_id = message.get("id") if isinstance(message, dict) else None
        try:
            result = self.handle_rpc_request(message)
        except JsonRpcError as e:
            logger.warning(f"Request {request_id!r} rejected: {e.message}")
            return JsonRpcResponse.failure(request_id, e.to_dict()).to_dict()
        return JsonRpcResponse.success(request_id, result).to_dict()

    def handle_rpc_request(self, message):
        method = message.get("method") if isinstance(message, dict) else None
        handler = self._methods.get(method) if isinstance(method, str) else None
        if handler is None:
            raise JsonRpcError(METHOD_NOT_FOUND, "Method not found")

        # Malformed params surface as ValidationError, an internal error for the caller
        rpc = JsonRpcRequest.model_validate(message)

        logger.debug(f"Dispatching {rpc.method} (id={rpc.id!r})")
        return handler(rpc.params or {})

    def initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'protocolVersion': PROTOCOL_VERSION,
            'capabilities': {
                'tools': {},
                'resources': {}
            },
            'serverInfo': {
                'name': self.server.name,
                'version': self.server.version
            }
        }

    def ping(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def list_tools(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'tools': [t.model_dump(exclude_none=True) for t in self.tools.get_definitions()]
        }

    def list_resources(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'resources': [r.model_dump(exclude_none=True) for r in self.resources.get_definitions()]
        }

    def call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        tool_name = params.get('name')
        arguments = params.get('arguments') or {}

        try:
            payload = self.tools.call_tool(tool_name, self.client, arguments).to_payload()
        except ToolNotFoundError:
            logger.warning(f"Unknown tool requested: {tool_name}")
            payload = {"error": f"Unknown tool: {tool_name if tool_name is not None else ''}"}

        return ToolCallResult(content=[TextContent(text=_pretty(payload))]).model_dump()

    def read_resource(self, params: Dict[str, Any]) -> Dict[str, Any]:
        uri = params.get('uri')

        try:
            payload = self.resources.read_resource(uri, self.client).to_payload()
        except ResourceNotFoundError:
            logger.warning(f"Unknown resource requested: {uri}")
            payload = {"error": f"Unknown resource: {uri if uri is not None else ''}"}

        return ResourceReadResult(contents=[ResourceContent(uri=uri, text=_pretty(payload))]).model_dump()
