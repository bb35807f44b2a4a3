import json
import logging
from typing import Any, Dict, TextIO

from zendesk_mcp.core.dispatcher import Dispatcher
from zendesk_mcp.core.mcp_types import INTERNAL_ERROR, PARSE_ERROR, JsonRpcResponse

logger = logging.getLogger(__name__)


class StdioServer:
    """
    Line-oriented JSON-RPC loop: one request per input line, one response
    per output line, strictly in order.
    """

    def __init__(self, dispatcher: Dispatcher):
        self.dispatcher = dispatcher

    def serve(self, reader: TextIO, writer: TextIO) -> None:
        logger.info("Starting Zendesk MCP Server")
        while True:
            line = reader.readline()
            if not line:
                break
            self._write(writer, self.handle_line(line))
        logger.info("Input closed, stopping Zendesk MCP Server")

    def handle_line(self, line: str) -> Dict[str, Any]:
        try:
            message = json.loads(line.strip())
        except (ValueError, RecursionError) as e:
            logger.error(f"Invalid JSON received: {e}")
            return JsonRpcResponse.failure(None, {"code": PARSE_ERROR, "message": "Parse error"}).to_dict()

        try:
            return self.dispatcher.handle(message)
        except Exception as e:
            logger.exception(f"Error handling request: {e}")
            request_id = message.get("id") if isinstance(message, dict) else None
            return JsonRpcResponse.failure(
                request_id, {"code": INTERNAL_ERROR, "message": f"Internal error: {e}"}).to_dict()

    def _write(self, writer, response):
        # ASCII-only wire line: lone surrogates in ids or names stay escaped
        writer.write(json.dumps(response, default=str) + "\n")
        writer.flush()
