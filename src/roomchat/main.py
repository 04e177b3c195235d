#!/usr/bin/env python3
"""
Room Chat Server

Multi-room chat server authenticating clients with pre-shared room tokens.
"""

import asyncio
import logging
import sys

from .auth import AuthGate
from .config import ServerConfig
from .exceptions import ConfigurationError
from .identifiers import IdentifierAllocator
from .room_state import RoomStore, TokenRegistry
from .session import SessionManager
from .utils.broadcast import EventBroadcaster
from .websocket_server import WebSocketServer

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_server(config: ServerConfig) -> WebSocketServer:
    """
    Build the chat core and the WebSocket server around it.

    Args:
        config: The server configuration

    Returns:
        WebSocketServer: A server ready to be started
    """
    registry = TokenRegistry(config.room_keys)
    room_store = RoomStore(registry)
    session_manager = SessionManager(
        room_store, IdentifierAllocator(), EventBroadcaster()
    )
    return WebSocketServer(
        AuthGate(registry), session_manager, config.host, config.port
    )


async def run_server(config: ServerConfig):
    """
    Run the chat server until cancelled.

    Args:
        config: The server configuration
    """
    ws_server = create_server(config)
    await ws_server.start()
    logger.info("Server Status: Online")

    try:
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        logger.info("Server shutdown requested")
    finally:
        await ws_server.stop()
        logger.info("Chat server stopped")


def main():
    """Main entry point for the chat server."""
    try:
        config = ServerConfig.from_env()
    except ConfigurationError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(config.log_level)
    logger.info("Starting room chat server...")

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Shutting down chat server...")
        sys.exit(0)


if __name__ == "__main__":
    main()
