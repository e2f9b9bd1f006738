from dataclasses import dataclass
from typing import Optional

from utils.env import get_bool_variable, get_env_variable, get_int_variable
from utils.errors import StartupError

TRANSPORTS = ("stdio", "sse")


@dataclass(frozen=True)
class Settings:
    transport: str = "stdio"
    host: str = "0.0.0.0"
    port: int = 8000
    messages_path: str = "/messages"
    keepalive_seconds: float = 15.0
    log_level: str = "INFO"
    log_format: str = "console"

    @property
    def use_sse(self) -> bool:
        return self.transport == "sse"

    def validate(self) -> "Settings":
        if self.transport not in TRANSPORTS:
            raise StartupError(f"Unknown transport {self.transport!r}; expected one of {', '.join(TRANSPORTS)}")
        if not 1 <= self.port <= 65535:
            raise StartupError(f"Port must be between 1 and 65535, got {self.port}")
        if not self.messages_path.startswith("/"):
            raise StartupError(f"Messages path must start with '/', got {self.messages_path!r}")
        if self.keepalive_seconds <= 0:
            raise StartupError("Keep-alive interval must be positive")
        return self


def load_settings(
    transport: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    log_level: Optional[str] = None,
) -> Settings:
    """
    Build settings from the environment (and `.env`), letting explicit
    arguments from the command line take precedence.
    """
    try:
        env_transport = "sse" if get_bool_variable("CLOUD_ARCH_SSE", False) else get_env_variable("CLOUD_ARCH_TRANSPORT", "stdio")
        settings = Settings(
            transport=(transport or env_transport).lower(),
            host=host or get_env_variable("CLOUD_ARCH_HOST", "0.0.0.0"),
            port=port if port is not None else get_int_variable("CLOUD_ARCH_PORT", 8000),
            messages_path=get_env_variable("CLOUD_ARCH_MESSAGES_PATH", "/messages"),
            keepalive_seconds=float(get_int_variable("CLOUD_ARCH_KEEPALIVE_SECONDS", 15)),
            log_level=(log_level or get_env_variable("LOG_LEVEL", "INFO")).upper(),
            log_format=get_env_variable("LOG_FORMAT", "console").lower(),
        )
    except EnvironmentError as e:
        raise StartupError(str(e)) from e
    return settings.validate()
