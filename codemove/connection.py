from typing import Any, Awaitable, Callable, Optional

SendFn = Callable[[dict], Awaitable[Any]]
CloseFn = Callable[[], Awaitable[Any]]


class Connection:
    """
    One live participant channel.

    The transport is injected: `send` delivers a single message dict and
    `close` (optional) tears the transport down. This keeps the hub testable
    without a real socket.
    """

    def __init__(self, connection_id: str, send: SendFn, close: Optional[CloseFn] = None):
        self.connection_id = connection_id
        self._send = send
        self._close = close
        self.room_id: Optional[str] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def mark_closed(self) -> bool:
        """Flip the closed flag. Returns True only for the first caller."""
        if self._closed:
            return False
        self._closed = True
        return True

    async def send(self, message: dict):
        await self._send(message)

    async def close(self):
        if self._close is not None:
            await self._close()

    def __repr__(self):
        return f"Connection({self.connection_id!r}, room={self.room_id!r})"
