"""
Configuration

Settings are read from the environment, with a local .env file loaded
first if present.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_API_URL = "http://127.0.0.1:8000"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    timeout: float = DEFAULT_TIMEOUT


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def load_settings() -> Settings:
    """
    Build settings from MERKLE_TREE_* environment variables.

    Raises:
        ValueError: If MERKLE_TREE_PORT or MERKLE_TREE_TIMEOUT is not numeric
    """
    return Settings(
        api_url=os.getenv("MERKLE_TREE_API_URL", DEFAULT_API_URL).rstrip("/"),
        host=os.getenv("MERKLE_TREE_HOST", DEFAULT_HOST),
        port=_env_number("MERKLE_TREE_PORT", DEFAULT_PORT, int),
        log_level=os.getenv("MERKLE_TREE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        timeout=_env_number("MERKLE_TREE_TIMEOUT", DEFAULT_TIMEOUT, float),
    )
