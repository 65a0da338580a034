from __future__ import annotations

import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv

from shared.protocol.constants import (
    CLOSE_TIMEOUT,
    DEFAULT_CLIENT_NAME,
    DEFAULT_HOST,
    DEFAULT_PORT,
    MAX_MESSAGE_SIZE,
)

DEFAULT_CONFIG: Dict[str, Any] = {
    "host": DEFAULT_HOST,
    "port": DEFAULT_PORT,
    "close_timeout": CLOSE_TIMEOUT,
    "request_timeout": 10.0,
    "client_name": DEFAULT_CLIENT_NAME,
    "max_message_size": MAX_MESSAGE_SIZE,
    "log_level": "INFO",
}

CLIENT_CONFIG: Dict[str, Any] = DEFAULT_CONFIG.copy()


class ConfigError(Exception):
    """Raised when configuration values are invalid."""

    pass


def load_config(env_path: str = ".env") -> Dict[str, Any]:
    """Load client configuration from env file/environment variables."""
    if os.path.exists(env_path):
        load_dotenv(env_path)

    for key, default_value in DEFAULT_CONFIG.items():
        env_key = f"CLIENT_{key.upper()}"
        value = os.getenv(env_key, default_value)
        CLIENT_CONFIG[key] = _coerce_type(value, type(default_value))

    _validate_config()
    logging.getLogger().setLevel(CLIENT_CONFIG["log_level"])
    return CLIENT_CONFIG


def _coerce_type(value: Any, target_type: type) -> Any:
    if isinstance(value, target_type):
        return value
    try:
        if target_type is bool:
            return str(value).lower() in ("1", "true", "yes", "on")
        return target_type(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Cannot convert {value} to {target_type}") from exc


def _validate_config() -> None:
    if not (1 <= int(CLIENT_CONFIG["port"]) <= 65535):
        raise ConfigError("port must be between 1 and 65535")
    if CLIENT_CONFIG["close_timeout"] <= 0:
        raise ConfigError("close_timeout must be positive")
    if CLIENT_CONFIG["request_timeout"] < 0:
        raise ConfigError("request_timeout must not be negative")
    if CLIENT_CONFIG["max_message_size"] <= 0:
        raise ConfigError("max_message_size must be positive")
    if not CLIENT_CONFIG["client_name"]:
        raise ConfigError("client_name must not be empty")


__all__ = ["CLIENT_CONFIG", "DEFAULT_CONFIG", "ConfigError", "load_config"]
