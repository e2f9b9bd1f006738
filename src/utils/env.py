import os
from dotenv import load_dotenv
from typing import Optional

load_dotenv()

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off", ""}


def get_env_variable(key: str, default: Optional[str] = None) -> str:
    """
    Utility to get environment variables with optional default.

    Args:
        key (str): The environment variable key.
        default (str, optional): A default value if the key is not found.

    Returns:
        str: The value of the environment variable.

    Raises:
        EnvironmentError: If the variable is not set and no default is provided.
    """
    value = os.getenv(key, default)
    if value is None:
        raise EnvironmentError(f"Required environment variable '{key}' not set.")
    return value


def get_int_variable(key: str, default: int) -> int:
    raw = get_env_variable(key, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        raise EnvironmentError(f"Environment variable '{key}' must be an integer, got {raw!r}.")


def get_bool_variable(key: str, default: bool = False) -> bool:
    raw = get_env_variable(key, "true" if default else "false").strip().lower()
    if raw in TRUTHY:
        return True
    if raw in FALSY:
        return False
    raise EnvironmentError(f"Environment variable '{key}' must be a boolean, got {raw!r}.")
