"""
RoomHub: connection lifecycle and delivery on top of RoomRegistry.

Each connection submits intents (join, leave, code change, solution) through
handle(); the hub applies them via the registry and then delivers the
resulting notifications outside the room's critical section. A disconnect,
whether graceful or caused by a failed delivery, runs leave cleanup exactly
once per connection.
"""
import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from codemove import protocol
from codemove.connection import Connection
from codemove.errors import AuthorizationError, ProtocolViolation, TransportFailure
from codemove.fanout import Notification
from codemove.registry import RoomRegistry
from codemove.roles import RoleAssignment

logger = logging.getLogger(__name__)


class RoomHub:

    def __init__(
        self,
        registry: Optional[RoomRegistry] = None,
        send_timeout: float = 5.0,
        max_code_length: int = protocol.DEFAULT_MAX_CODE_LENGTH,
    ):
        self.registry = registry if registry is not None else RoomRegistry()
        self.send_timeout = send_timeout
        self.max_code_length = max_code_length
        self.connections: Dict[str, Connection] = {}

    def attach(self, connection: Connection):
        """Make a connection reachable for deliveries."""
        self.connections[connection.connection_id] = connection

    async def handle(self, connection: Connection, frame) -> None:
        """
        Parse and apply one inbound frame.

        Request errors are reported to the sender as an `error` message and
        never end the session.
        """
        try:
            message = protocol.parse_message(frame, self.max_code_length)
            await self.dispatch(connection, message)
        except (ProtocolViolation, AuthorizationError) as exc:
            logger.warning(f"Rejected frame from {connection.connection_id}: {exc.code} {exc.detail}")
            await self.deliver([
                Notification(connection.connection_id, protocol.error(exc.code, exc.detail))
            ])

    async def dispatch(self, connection: Connection, message) -> None:
        if isinstance(message, protocol.JoinRoom):
            await self.join(connection, message.room_id)
        elif isinstance(message, protocol.LeaveRoom):
            await self.leave(connection, message.room_id)
        elif isinstance(message, protocol.CodeChange):
            await self.change_code(connection, message.room_id, message.new_code)
        elif isinstance(message, protocol.MentorSolution):
            await self.publish_solution(connection, message.room_id, message.mentor_solution)
        elif isinstance(message, protocol.CheckSolution):
            await self.check_solution(connection, message.room_id)

    async def join(self, connection: Connection, room_id: str) -> Optional[RoleAssignment]:
        """
        Put a connection in `room_id`, leaving its current room first.

        Returns None if the connection closed before it could be admitted.
        """
        cid = connection.connection_id
        if connection.closed:
            logger.debug(f"Ignoring join of closed connection {cid} to room {room_id}")
            return None
        current = self.registry.room_of(cid)
        if current is not None and current != room_id:
            logger.info(f"Connection {cid} switches from room {current} to {room_id}")
            await self.leave(connection, current)
            if connection.closed:
                return None

        outcome = await self.registry.join(room_id, cid)
        if connection.closed:
            # disconnect() ran while we were joining and found nothing to clean up
            await self.deliver(await self.registry.leave(room_id, cid))
            return None
        connection.room_id = room_id
        await self.deliver(outcome.notifications)
        return outcome.assignment

    async def leave(self, connection: Connection, room_id: str):
        notifications = await self.registry.leave(room_id, connection.connection_id)
        if connection.room_id == room_id:
            connection.room_id = None
        await self.deliver(notifications)

    async def change_code(self, connection: Connection, room_id: str, code: str):
        notifications = await self.registry.update_student_code(room_id, connection.connection_id, code)
        await self.deliver(notifications)

    async def publish_solution(self, connection: Connection, room_id: str, solution: str):
        notifications = await self.registry.update_solution(room_id, connection.connection_id, solution)
        await self.deliver(notifications)

    async def check_solution(self, connection: Connection, room_id: str) -> bool:
        match = await self.registry.check_solution(room_id, connection.connection_id)
        await self.deliver([Notification(connection.connection_id, protocol.solution_checked(match))])
        return match

    async def disconnect(self, connection: Connection):
        """
        Leave cleanup for a connection that is going away.

        Safe to call any number of times; only the first call does anything.
        """
        if not connection.mark_closed():
            return
        cid = connection.connection_id
        notifications: List[Notification] = []
        try:
            room_id = self.registry.room_of(cid)
            if room_id is not None:
                notifications = await self.registry.leave(room_id, cid)
        finally:
            self.connections.pop(cid, None)
            connection.room_id = None
            logger.info(f"Connection {cid} disconnected")
        await self.deliver(notifications)

    async def deliver(self, notifications: Iterable[Notification]):
        """
        Send each notification to its target.

        A failing target does not stop delivery to the others; it is
        disconnected once the batch is done.
        """
        failed: List[Connection] = []
        for notification in notifications:
            connection = self.connections.get(notification.target)
            if connection is None or connection.closed:
                logger.debug(f"Skipping {notification.message['type']} for gone connection {notification.target}")
                continue
            try:
                await self._send(connection, notification.message)
            except TransportFailure as exc:
                logger.warning(f"Delivery to {exc.connection_id} failed: {exc.detail}")
                if connection not in failed:
                    failed.append(connection)

        for connection in failed:
            await self._drop(connection)

    async def _send(self, connection: Connection, message: dict):
        try:
            await asyncio.wait_for(connection.send(message), timeout=self.send_timeout)
        except asyncio.TimeoutError as exc:
            raise TransportFailure(connection.connection_id, f"send timed out after {self.send_timeout}s") from exc
        except TransportFailure:
            raise
        except Exception as exc:
            raise TransportFailure(connection.connection_id, str(exc) or type(exc).__name__) from exc

    async def _drop(self, connection: Connection):
        await self.disconnect(connection)
        try:
            await connection.close()
        except Exception as e:
            logger.debug(f"Error closing transport of {connection.connection_id}: {e}")

    async def close_all(self):
        """Disconnect every attached connection, e.g. on shutdown. Transports are left to their owner."""
        for connection in list(self.connections.values()):
            await self.disconnect(connection)
