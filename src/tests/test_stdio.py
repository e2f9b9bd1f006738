import io
import json

from stdio.run_stdio_server import StdioChannel
from tools.cloud_arch import TOOL_NAME


def _frames(*messages):
    return io.StringIO("".join(json.dumps(m) + "\n" for m in messages))


def _call(req_id, name, arguments):
    return {"jsonrpc": "2.0", "id": req_id, "method": "tools/call", "params": {"name": name, "arguments": arguments}}


def _responses(out: io.StringIO):
    return [json.loads(line) for line in out.getvalue().splitlines()]


def test_responses_follow_request_order_even_when_first_is_slow(echo_protocol):
    out = io.StringIO()
    reader = _frames(
        _call("r1", "echo", {"value": "one", "delay": 0.2}),
        _call("r2", "echo", {"value": "two"}),
        _call("r3", "echo", {"value": "three"}),
    )
    StdioChannel(echo_protocol, reader=reader, writer=out).serve()

    responses = _responses(out)
    assert [r["id"] for r in responses] == ["r1", "r2", "r3"]
    assert [r["result"]["content"][0]["text"] for r in responses] == ["one", "two", "three"]


def test_full_handshake_and_tool_call(protocol, first_question):
    out = io.StringIO()
    reader = _frames(
        {"jsonrpc": "2.0", "id": 0, "method": "initialize", "params": {}},
        {"jsonrpc": "2.0", "method": "notifications/initialized"},
        {"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
        _call(2, TOOL_NAME, first_question),
    )
    handled = StdioChannel(protocol, reader=reader, writer=out).serve()

    responses = _responses(out)
    assert handled == 4
    assert [r["id"] for r in responses] == [0, 1, 2]
    payload = json.loads(responses[2]["result"]["content"][0]["text"])
    assert payload["state"] == {}


def test_bad_lines_do_not_stop_the_channel(protocol):
    out = io.StringIO()
    reader = io.StringIO("\n{broken\n" + json.dumps(_call(1, "nonexistent_tool", {})) + "\n")
    StdioChannel(protocol, reader=reader, writer=out).serve()

    parse_error, unknown = _responses(out)
    assert parse_error["error"]["code"] == -32700
    assert unknown["result"]["isError"] is True


def test_session_is_single_and_closed_at_eof(protocol):
    channel = StdioChannel(protocol, reader=io.StringIO(""), writer=io.StringIO())
    assert channel.session.id.startswith("stdio-")
    channel.serve()
    assert channel.session.closed is True
