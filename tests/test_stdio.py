"""Tests for the stdio read/dispatch/write loop."""

import io
import json

import pytest

from conftest import RecordingTransport
from zendesk_mcp.core.dispatcher import Dispatcher
from zendesk_mcp.core.stdio import StdioServer
from zendesk_mcp.core.zendesk_client import ZendeskClient


@pytest.fixture
def server(client) -> StdioServer:
    return StdioServer(Dispatcher(client))


def _run(server: StdioServer, *lines: str) -> list:
    reader = io.StringIO("".join(line + "\n" for line in lines))
    writer = io.StringIO()
    server.serve(reader, writer)
    return [json.loads(line) for line in writer.getvalue().splitlines()]


class TestStdioServer:
    def test_one_response_per_line_in_order(self, server):
        responses = _run(
            server,
            json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize"}),
            json.dumps({"jsonrpc": "2.0", "id": "two", "method": "tools/list"}),
            json.dumps({"jsonrpc": "2.0", "id": 3, "method": "resources/list"}),
        )
        assert [r["id"] for r in responses] == [1, "two", 3]
        assert all("result" in r and "error" not in r for r in responses)

    def test_parse_error_does_not_stop_the_loop(self, server):
        responses = _run(server, "{not json", json.dumps({"id": 2, "method": "ping"}))
        assert responses[0] == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}
        assert responses[1] == {"jsonrpc": "2.0", "id": 2, "result": {}}

    def test_blank_line_is_a_parse_error(self, server):
        responses = _run(server, "")
        assert responses[0]["error"]["code"] == -32700

    def test_unknown_method(self, server):
        responses = _run(server, json.dumps({"id": 7, "method": "nope"}))
        assert responses == [{"jsonrpc": "2.0", "id": 7, "error": {"code": -32601, "message": "Method not found"}}]

    def test_internal_error_keeps_id_and_continues(self, server):
        responses = _run(
            server,
            json.dumps({"id": 8, "method": "tools/call", "params": {"name": "get_ticket", "arguments": [1]}}),
            json.dumps({"id": 9, "method": "ping"}),
        )
        assert responses[0]["id"] == 8
        assert responses[0]["error"]["code"] == -32603
        assert responses[0]["error"]["message"].startswith("Internal error:")
        assert "get" in responses[0]["error"]["message"]
        assert responses[1]["result"] == {}

    def test_remote_404_is_success_shaped(self, zendesk_config):
        transport = RecordingTransport(status_code=404, text='{"error":"RecordNotFound"}')
        with ZendeskClient(zendesk_config, transport=transport) as client:
            responses = _run(StdioServer(Dispatcher(client)), json.dumps({
                "id": 5, "method": "tools/call",
                "params": {"name": "get_ticket", "arguments": {"ticket_id": 1}},
            }))
        assert "error" not in responses[0]
        payload = json.loads(responses[0]["result"]["content"][0]["text"])
        assert payload == {"error": "HTTP 404: Not Found", "body": '{"error":"RecordNotFound"}'}

    def test_end_of_input_stops_cleanly(self, server):
        writer = io.StringIO()
        server.serve(io.StringIO(""), writer)
        assert writer.getvalue() == ""

    def test_each_response_is_flushed(self, server):
        class CountingWriter(io.StringIO):
            flushes = 0

            def flush(self):
                self.flushes += 1
                super().flush()

        writer = CountingWriter()
        reader = io.StringIO('{"id": 1, "method": "ping"}\n{"id": 2, "method": "ping"}\n')
        server.serve(reader, writer)
        assert writer.flushes == 2
        assert len(writer.getvalue().splitlines()) == 2

    def test_unicode_passes_through(self, server, transport):
        _run(server, json.dumps({
            "id": 1, "method": "tools/call",
            "params": {"name": "search_tickets", "arguments": {"query": "café"}},
        }))
        assert transport.last.url.params["query"] == "café"

    def test_lone_surrogate_survives_strict_utf8_output(self, server):
        reader = io.StringIO('{"id": "\\ud800", "method": "ping"}\n'
                             '{"id": 2, "method": "tools/call", "params": {"name": "\\udfff"}}\n'
                             '{"id": 3, "method": "ping"}\n')
        raw = io.BytesIO()
        writer = io.TextIOWrapper(raw, encoding="utf-8", errors="strict")
        server.serve(reader, writer)

        lines = raw.getvalue().decode("ascii").splitlines()
        assert len(lines) == 3
        assert lines[0] == '{"jsonrpc": "2.0", "id": "\\ud800", "result": {}}'
        assert json.loads(lines[1])["id"] == 2
        assert json.loads(json.loads(lines[1])["result"]["content"][0]["text"]) == {"error": "Unknown tool: \udfff"}
        assert json.loads(lines[2]) == {"jsonrpc": "2.0", "id": 3, "result": {}}
