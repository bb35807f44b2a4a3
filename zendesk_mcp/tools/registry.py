from typing import Callable, Dict, Any, Optional
from zendesk_mcp.core.mcp_types import ToolDefinition, ToolInputSchema
from zendesk_mcp.core.zendesk_client import RemoteOutcome, ZendeskClient


class ToolNotFoundError(LookupError):
    pass


ToolHandler = Callable[[ZendeskClient, Dict[str, Any]], RemoteOutcome]


class ToolRegistry:
    def __init__(self):
        self._tools: Dict[str, ToolHandler] = {}
        self._definitions: Dict[str, ToolDefinition] = {}

    def register(self, name: str, description: str, input_schema: Dict[str, Any]):
        def decorator(func: ToolHandler):
            if name in self._tools:
                raise ValueError(f"Tool {name} already registered")
            self._tools[name] = func
            self._definitions[name] = ToolDefinition(
                name=name,
                description=description,
                inputSchema=ToolInputSchema(**input_schema)
            )
            return func
        return decorator

    def get_tool(self, name) -> Optional[ToolHandler]:
        if not isinstance(name, str):
            return None
        return self._tools.get(name)

    def get_definitions(self) -> list[ToolDefinition]:
        return list(self._definitions.values())

    def call_tool(self, name: str, client: ZendeskClient, arguments: Dict[str, Any]) -> RemoteOutcome:
        func = self.get_tool(name)
        if not func:
            raise ToolNotFoundError(f"Tool {name} not found")
        return func(client, arguments)


registry = ToolRegistry()
