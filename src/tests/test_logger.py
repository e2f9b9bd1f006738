"""Logging must never break request handling.

Covers:
- Output goes to the configured stream, never stdout
- A stderr that fails on write (broken pipe, closed file) is absorbed
"""

from __future__ import annotations

import io
import json

import pytest

from services.dispatcher import RequestDispatcher
from stdio.run_stdio_server import StdioChannel
from tools.registry import build_registry
from utils.logger import configure_logging, log_event


class BrokenPipeStream(io.StringIO):
    def write(self, s):
        raise BrokenPipeError(32, "Broken pipe")


def _closed_stream():
    stream = io.StringIO()
    stream.close()
    return stream


def _broken_streams():
    return [BrokenPipeStream(), _closed_stream()]


class TestOutput:
    def test_events_go_to_configured_stream(self, capsys):
        err = io.StringIO()
        configure_logging("DEBUG", stream=err)

        log_event("info", "SSE session opened", session_id="a1b2", open_sessions=1)

        text = err.getvalue()
        assert "SSE session opened" in text
        assert "session_id=a1b2" in text
        assert capsys.readouterr().out == ""

    def test_json_format(self):
        err = io.StringIO()
        configure_logging("INFO", fmt="json", stream=err)

        log_event("warn", "No session found for message", session_id="zzzz")

        record = json.loads(err.getvalue().splitlines()[-1])
        assert record["event"] == "No session found for message"
        assert record["level"] == "warning"
        assert record["session_id"] == "zzzz"

    def test_level_filtering(self):
        err = io.StringIO()
        configure_logging("WARNING", stream=err)

        log_event("info", "quiet")
        log_event("error", "loud")

        assert "quiet" not in err.getvalue()
        assert "loud" in err.getvalue()


class TestBrokenStderr:
    @pytest.mark.parametrize("stream", _broken_streams(), ids=["broken-pipe", "closed"])
    def test_dispatch_still_returns_envelope(self, stream):
        configure_logging("DEBUG", stream=stream)

        env = RequestDispatcher(build_registry()).dispatch("nonexistent_tool", {})

        assert env.isError is True
        assert env.content[0].text == "Unknown tool: nonexistent_tool"

    @pytest.mark.parametrize("stream", _broken_streams(), ids=["broken-pipe", "closed"])
    def test_stdio_channel_keeps_serving(self, stream, protocol):
        configure_logging("DEBUG", stream=stream)
        out = io.StringIO()
        frames = [
            {"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {"name": "nonexistent_tool", "arguments": {}}},
            {"jsonrpc": "2.0", "id": 2, "method": "ping"},
        ]
        reader = io.StringIO("".join(json.dumps(f) + "\n" for f in frames))

        StdioChannel(protocol, reader=reader, writer=out).serve()

        responses = [json.loads(l) for l in out.getvalue().splitlines()]
        assert [r["id"] for r in responses] == [1, 2]
        assert responses[0]["result"]["isError"] is True
