from __future__ import annotations

import os
from typing import Any, Dict

from dotenv import load_dotenv

from server.storage.memory import DEFAULT_MEMORY_SIZE
from shared.protocol.constants import DEFAULT_PORT, MAX_MESSAGE_SIZE

DEFAULT_SERVER_CONFIG: Dict[str, Any] = {
    "host": "127.0.0.1",
    "port": DEFAULT_PORT,
    "devices": "SD2SNES COM3",
    "memory_size": DEFAULT_MEMORY_SIZE,
    "app_version": "7.42.0",
    "firmware": "1.11.0",
    "max_message_size": MAX_MESSAGE_SIZE,
    "log_level": "INFO",
}

SERVER_CONFIG = DEFAULT_SERVER_CONFIG.copy()


def load_server_config(env_path: str = ".env") -> Dict[str, Any]:
    if os.path.exists(env_path):
        load_dotenv(env_path)
    SERVER_CONFIG["host"] = os.getenv("SERVER_HOST", SERVER_CONFIG["host"])
    SERVER_CONFIG["port"] = int(os.getenv("SERVER_PORT", SERVER_CONFIG["port"]))
    SERVER_CONFIG["devices"] = os.getenv("SERVER_DEVICES", SERVER_CONFIG["devices"])
    SERVER_CONFIG["memory_size"] = int(str(os.getenv("SERVER_MEMORY_SIZE", SERVER_CONFIG["memory_size"])), 0)
    SERVER_CONFIG["app_version"] = os.getenv("SERVER_APP_VERSION", SERVER_CONFIG["app_version"])
    SERVER_CONFIG["firmware"] = os.getenv("SERVER_FIRMWARE", SERVER_CONFIG["firmware"])
    SERVER_CONFIG["max_message_size"] = int(os.getenv("SERVER_MAX_MESSAGE_SIZE", SERVER_CONFIG["max_message_size"]))
    SERVER_CONFIG["log_level"] = os.getenv("SERVER_LOG_LEVEL", SERVER_CONFIG["log_level"])
    return SERVER_CONFIG


__all__ = ["SERVER_CONFIG", "load_server_config"]
