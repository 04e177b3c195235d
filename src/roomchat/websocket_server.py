"""
WebSocket Server

Accepts client connections, authenticates them during the opening
handshake and feeds their events into the chat core.
"""

import asyncio
import json
import logging
from http import HTTPStatus
from typing import Optional, Set, Tuple
from urllib.parse import parse_qs, urlsplit

from websockets.asyncio.server import ServerConnection, broadcast, serve
from websockets.exceptions import ConnectionClosed
from websockets.frames import CloseCode
from websockets.http11 import Request, Response

from .auth import AuthGate
from .exceptions import AuthenticationError, InputValidationError
from .schemas import ChatEvent
from .session import ClientSession, SessionManager

logger = logging.getLogger(__name__)


def read_credentials(request: Request) -> Tuple[Optional[str], Optional[str]]:
    """
    Extract the room token and username from the handshake request.

    Clients connect to ``/?AuthToken=<token>&UserName=<name>``.

    Args:
        request: The HTTP upgrade request

    Returns:
        tuple: (token, user_name), either may be None when absent
    """
    query = parse_qs(urlsplit(request.path).query)
    token = query.get("AuthToken", [None])[0]
    user_name = query.get("UserName", [None])[0]
    return token, user_name


class WebSocketConnection:
    """
    Adapts a ``ServerConnection`` to the chat core's Connection interface.

    ``send`` writes through the library's ``broadcast`` which never waits for
    the peer, and ``close`` schedules the closing handshake in the
    background.
    """

    def __init__(self, websocket: ServerConnection):
        self._websocket = websocket
        self._tasks: Set[asyncio.Task] = set()
        self.closing = False

    def send(self, frame: str):
        broadcast([self._websocket], frame)

    def close(self, reason: str = ""):
        if self.closing:
            return
        self.closing = True
        task = asyncio.ensure_future(
            self._websocket.close(CloseCode.POLICY_VIOLATION, reason)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


class WebSocketServer:
    """
    WebSocket server for handling client connections.

    Connection attempts are checked by the AuthGate before the upgrade
    completes, so a rejected client never reaches the session manager.
    """

    def __init__(
        self,
        auth_gate: AuthGate,
        session_manager: SessionManager,
        host: str,
        port: int,
    ):
        """
        Initialize the WebSocket server.

        Args:
            auth_gate: Gate that validates connection attempts
            session_manager: Session manager for accepted connections
            host: Host address to bind to
            port: Port to listen on, 0 picks a free port
        """
        self.auth_gate = auth_gate
        self.session_manager = session_manager
        self.host = host
        self.port = port
        self.server = None

    async def start(self):
        """Start the WebSocket server."""
        self.server = await serve(
            self.handle_client,
            self.host,
            self.port,
            process_request=self.process_request,
        )
        # Resolve the real port when bound to port 0
        self.port = self.server.sockets[0].getsockname()[1]
        logger.info(f"WebSocket server started on ws://{self.host}:{self.port}")

    async def stop(self):
        """Stop the WebSocket server."""
        if self.server:
            self.server.close()
            await self.server.wait_closed()
            logger.info("WebSocket server stopped")

    def process_request(
        self, connection: ServerConnection, request: Request
    ) -> Optional[Response]:
        """
        Authenticate a connection attempt during the opening handshake.

        Args:
            connection: The connection being opened
            request: The HTTP upgrade request

        Returns:
            Response: HTTP 401 with the reason when authentication fails,
                      None to continue the handshake
        """
        token, user_name = read_credentials(request)
        try:
            self.auth_gate.authenticate(token, user_name)
        except AuthenticationError as e:
            logger.warning(
                f"Rejected connection from {connection.remote_address}: {e}"
            )
            return connection.respond(HTTPStatus.UNAUTHORIZED, f"{e}\n")
        return None

    async def handle_client(self, websocket: ServerConnection):
        """
        Handle an authenticated client connection.

        Args:
            websocket: The WebSocket connection
        """
        connection = WebSocketConnection(websocket)
        try:
            token, user_name = self.auth_gate.authenticate(
                *read_credentials(websocket.request)
            )
        except AuthenticationError as e:
            logger.warning(f"Connection reached handler without auth: {e}")
            await websocket.close(CloseCode.POLICY_VIOLATION, str(e))
            return

        session = self.session_manager.on_connect(connection, token, user_name)
        try:
            async for message in websocket:
                if connection.closing:
                    break
                try:
                    self.process_message(session, message)
                except Exception as e:
                    logger.exception(
                        f"Unexpected error processing frame from {user_name}: {e}"
                    )
                    session.on_error(e)
        except ConnectionClosed:
            logger.debug(f"Connection of {user_name} closed")
        except Exception as e:
            logger.exception(f"Error handling client {user_name}: {e}")
        finally:
            session.on_disconnect()

    def process_message(self, session: ClientSession, message):
        """
        Process an incoming frame from a client.

        Args:
            session: The client's session handle
            message: The raw frame (JSON text)
        """
        try:
            data = json.loads(message)
        except (ValueError, TypeError) as e:
            session.on_error(InputValidationError(f"Invalid JSON received: {e}"))
            return

        if not isinstance(data, dict):
            session.on_error(InputValidationError("Frame must be a JSON object"))
            return

        message_type = data.get("type")
        if message_type == ChatEvent.CHAT_MESSAGE.value:
            session.on_message(data.get("data"))
        else:
            session.on_error(
                InputValidationError(f"Unknown message type: {message_type}")
            )
