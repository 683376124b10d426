import asyncio

import pytest

from codemove import Connection, RoleAssignor, RoomHub, RoomRegistry


class FakeConnection(Connection):
    """Connection whose transport records every message it is handed."""

    def __init__(self, connection_id: str, fail: bool = False, delay: float = 0):
        super().__init__(connection_id, send=self._record, close=self._on_close)
        self.sent: list[dict] = []
        self.fail = fail
        self.delay = delay
        self.close_calls = 0

    async def _record(self, message: dict):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ConnectionResetError("peer went away")
        self.sent.append(message)

    async def _on_close(self):
        self.close_calls += 1

    def of_type(self, kind: str) -> list[dict]:
        return [m for m in self.sent if m["type"] == kind]

    def types(self) -> list[str]:
        return [m["type"] for m in self.sent]

    def clear(self):
        self.sent.clear()


@pytest.fixture
def registry():
    return RoomRegistry(strict=True)


@pytest.fixture
def hub(registry):
    return RoomHub(registry, send_timeout=0.5)


@pytest.fixture
def reclaim_hub():
    return RoomHub(RoomRegistry(RoleAssignor(allow_mentor_reclaim=True), strict=True))


@pytest.fixture
def connect(hub):
    """Factory attaching fake connections to the default hub."""

    def _connect(connection_id: str, **kwargs) -> FakeConnection:
        connection = FakeConnection(connection_id, **kwargs)
        hub.attach(connection)
        return connection

    return _connect


def join(room_id: str) -> dict:
    return {"type": "joinRoom", "roomId": room_id}


def leave(room_id: str) -> dict:
    return {"type": "leaveRoom", "roomId": room_id}


def code_change(room_id: str, code: str) -> dict:
    return {"type": "codeChange", "roomId": room_id, "newCode": code}


def solution(room_id: str, text: str) -> dict:
    return {"type": "mentorSolution", "roomId": room_id, "mentorSolution": text}


def check(room_id: str) -> dict:
    return {"type": "checkSolution", "roomId": room_id}
