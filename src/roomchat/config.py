"""
Server Configuration

Reads the server settings from the process environment.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 7500
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class ServerConfig:
    """
    Settings for one server process.

    Attributes:
        room_keys: Room tokens accepted by the server, in configured order
        host: Address the WebSocket server binds to
        port: Port the WebSocket server listens on
        log_level: Name of the root logging level
    """

    room_keys: List[str]
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build the configuration from environment variables.

        ROOM_KEYS is a JSON array of tokens and is required. PORT,
        WEBSOCKET_HOST and LOG_LEVEL fall back to defaults.

        Args:
            environ: Mapping to read from, defaults to ``os.environ``

        Returns:
            ServerConfig: The parsed configuration

        Raises:
            ConfigurationError: If a variable is missing or malformed
        """
        if environ is None:
            environ = os.environ

        return cls(
            room_keys=parse_room_keys(environ.get("ROOM_KEYS")),
            host=environ.get("WEBSOCKET_HOST", DEFAULT_HOST),
            port=parse_port(environ.get("PORT")),
            log_level=environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )


def parse_room_keys(raw: Optional[str]) -> List[str]:
    """
    Parse the ROOM_KEYS value.

    Args:
        raw: JSON text of an array of strings

    Returns:
        list: The tokens in configured order

    Raises:
        ConfigurationError: If the value is missing or not a list of strings
    """
    if raw is None:
        raise ConfigurationError("ROOM_KEYS is not set")
    try:
        keys = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"ROOM_KEYS is not valid JSON: {e}") from e
    if not isinstance(keys, list):
        raise ConfigurationError("ROOM_KEYS must be a JSON array")
    if not all(isinstance(key, str) for key in keys):
        raise ConfigurationError("ROOM_KEYS must only contain strings")
    if not keys:
        logger.warning("ROOM_KEYS is empty, no client will be able to join")
    return keys


def parse_port(raw: Optional[str]) -> int:
    if raw is None or raw == "":
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"PORT is not an integer: {raw!r}") from e
    if not 0 < port < 65536:
        raise ConfigurationError(f"PORT out of range: {port}")
    return port
