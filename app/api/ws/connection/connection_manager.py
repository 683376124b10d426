import asyncio
import logging
import uuid
from typing import Dict, Optional, Set
from fastapi import WebSocket
from starlette.websockets import WebSocketState
from codemove import Connection, RoomHub

logger = logging.getLogger(__name__)


def _is_open(websocket: WebSocket) -> bool:
    return (
        websocket.application_state == WebSocketState.CONNECTED
        and websocket.client_state == WebSocketState.CONNECTED
    )


class ConnectionManager:
    """
    Binds accepted WebSockets to protocol Connections.

    The manager owns the transport side (accepting, sending, closing sockets);
    everything about rooms is delegated to the RoomHub.
    """

    def __init__(self, hub: RoomHub):
        self.hub = hub
        self.active_connections: Dict[str, WebSocket] = {}
        self._cleanups: Set[asyncio.Task] = set()

    async def connect(self, websocket: WebSocket) -> Connection:
        """
        Accept a new WebSocket connection and register it with the hub.

        Args:
            websocket: The WebSocket connection to accept

        Returns:
            Connection: The protocol-level connection wrapping the socket
        """
        await websocket.accept()

        connection_id = uuid.uuid4().hex
        self.active_connections[connection_id] = websocket

        async def close():
            if _is_open(websocket):
                await websocket.close(code=1011, reason="Delivery failed")

        connection = Connection(connection_id, send=websocket.send_json, close=close)
        self.hub.attach(connection)
        logger.info(f"Connection {connection_id} opened")
        return connection

    async def disconnect(self, connection: Connection):
        """
        Run leave cleanup for a connection and forget its socket.

        The cleanup runs in its own task so the remaining members are still
        notified when the socket handler calling us is being cancelled.

        Args:
            connection: The connection to remove
        """
        cleanup = asyncio.ensure_future(self.hub.disconnect(connection))
        self._cleanups.add(cleanup)
        cleanup.add_done_callback(self._cleanups.discard)
        try:
            await asyncio.shield(cleanup)
        finally:
            self.active_connections.pop(connection.connection_id, None)

    def get_websocket(self, connection_id: str) -> Optional[WebSocket]:
        return self.active_connections.get(connection_id)

    def get_total_connections(self) -> int:
        """
        Get the total number of active connections.

        Returns:
            Total number of active connections
        """
        return len(self.active_connections)

    async def close_all(self):
        """Close every open socket and run its disconnect cleanup."""
        if self._cleanups:
            await asyncio.gather(*self._cleanups, return_exceptions=True)
        await self.hub.close_all()
        for connection_id, websocket in list(self.active_connections.items()):
            if _is_open(websocket):
                try:
                    await websocket.close(code=1001, reason="Server shutting down")
                except Exception as e:
                    logger.debug(f"Error closing socket {connection_id}: {e}")
        self.active_connections.clear()
