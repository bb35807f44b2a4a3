from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict

PROTOCOL_VERSION = "2024-11-05"

# JSON-RPC error codes
PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class JsonRpcRequest(BaseModel):
    # jsonrpc is echoed by clients but never checked
    jsonrpc: Optional[Any] = None
    method: str
    params: Optional[Dict[str, Any]] = None
    id: Optional[Any] = None


class JsonRpcResponse(BaseModel):
    jsonrpc: str = "2.0"
    result: Optional[Any] = None
    error: Optional[Dict[str, Any]] = None
    id: Optional[Any] = None

    @classmethod
    def success(cls, request_id: Any, result: Any) -> "JsonRpcResponse":
        return cls(result=result, id=request_id)

    @classmethod
    def failure(cls, request_id: Any, error: Dict[str, Any]) -> "JsonRpcResponse":
        return cls(error=error, id=request_id)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: id is always present, and exactly one of result/error."""
        if self.error is not None:
            return {"jsonrpc": self.jsonrpc, "id": self.id, "error": self.error}
        return {"jsonrpc": self.jsonrpc, "id": self.id, "result": self.result}


class ToolInputSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = "object"
    properties: Dict[str, Any]
    required: Optional[List[str]] = None


class ToolDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    inputSchema: ToolInputSchema


class ResourceDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    uri: str
    name: str
    description: Optional[str] = None
    mimeType: str = "application/json"


class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolCallResult(BaseModel):
    content: List[TextContent]


class ResourceContent(BaseModel):
    uri: Optional[Any] = None
    mimeType: str = "application/json"
    text: str


class ResourceReadResult(BaseModel):
    contents: List[ResourceContent]
