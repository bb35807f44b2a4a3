from typing import Callable, Dict, Optional
from zendesk_mcp.core.mcp_types import ResourceDefinition
from zendesk_mcp.core.zendesk_client import RemoteOutcome, ZendeskClient


class ResourceNotFoundError(LookupError):
    pass


ResourceReader = Callable[[ZendeskClient], RemoteOutcome]


class ResourceRegistry:
    def __init__(self):
        self._readers: Dict[str, ResourceReader] = {}
        self._definitions: Dict[str, ResourceDefinition] = {}

    def register(self, uri: str, name: str, description: str, mime_type: str = "application/json"):
        def decorator(func: ResourceReader):
            if uri in self._readers:
                raise ValueError(f"Resource {uri} already registered")
            self._readers[uri] = func
            self._definitions[uri] = ResourceDefinition(
                uri=uri,
                name=name,
                description=description,
                mimeType=mime_type
            )
            return func
        return decorator

    def get_reader(self, uri) -> Optional[ResourceReader]:
        if not isinstance(uri, str):
            return None
        return self._readers.get(uri)

    def get_definitions(self) -> list[ResourceDefinition]:
        return list(self._definitions.values())

    def read_resource(self, uri: str, client: ZendeskClient) -> RemoteOutcome:
        func = self.get_reader(uri)
        if not func:
            raise ResourceNotFoundError(f"Resource {uri} not found")
        return func(client)


resource_registry = ResourceRegistry()
