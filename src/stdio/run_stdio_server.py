import sys
import json
import uuid
from typing import Optional, TextIO

from services.protocol import McpProtocol
from utils.logger import log_event
from utils.state import Session


class StdioChannel:
  """
  The single implicit session bound to the process's standard streams.
  Requests are read one line at a time and each response is written and
  flushed before the next line is read, so output order is input order.
  """

  def __init__(self, protocol: McpProtocol, reader: Optional[TextIO] = None, writer: Optional[TextIO] = None):
    self.protocol = protocol
    self.reader = reader if reader is not None else sys.stdin
    self.session = Session(id=f"stdio-{uuid.uuid4().hex}", sink=writer if writer is not None else sys.stdout)

  def send(self, message: dict) -> None:
    self.session.sink.write(json.dumps(message, ensure_ascii=False) + "\n")
    self.session.sink.flush()

  def serve(self) -> int:
    """Run until EOF on the input stream. Returns the number of frames handled."""
    log_event("info", "Cloud Architect MCP Server running on stdio", session_id=self.session.id)
    handled = 0
    for line in self.reader:
      line = line.strip()
      if not line:
        continue
      resp = self.protocol.handle_line(line)
      handled += 1
      if resp is not None:
        self.send(resp)
    self.session.closed = True
    log_event("info", "stdin closed, stopping", session_id=self.session.id, frames=handled)
    return handled


def run_stdio_server(protocol: McpProtocol) -> None:
  """
  Run the MCP server over stdio (JSON-RPC).
  Read requests from stdin, process them, and send responses to stdout.
  """
  StdioChannel(protocol).serve()
