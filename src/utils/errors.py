class CloudArchError(Exception):
    """Base class for errors raised by the server."""


class UnknownToolError(CloudArchError, LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UnroutableSessionError(CloudArchError, LookupError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"No session found for sessionId: {session_id}")
        self.session_id = session_id


class StartupError(CloudArchError, RuntimeError):
    """The selected transport could not be started."""
