"""
RoomRegistry: the single owner of every RoomState.

All mutations of a room happen inside that room's asyncio.Lock, so two
connections racing to be the first joiner of a fresh room are serialized and
only one of them can become mentor. Rooms are independent: different rooms
never share a lock. Each operation returns the notifications it produced;
delivering them is the caller's job, after the lock has been released.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional

from codemove.errors import AuthorizationError, InvariantViolation, ProtocolViolation
from codemove.fanout import FanoutRouter, Notification
from codemove.match import evaluate_published
from codemove.roles import Mentor, RoleAssignment, RoleAssignor, Student
from codemove.room import RoomState

logger = logging.getLogger(__name__)


@dataclass
class _RoomSlot:
    state: RoomState
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


@dataclass
class JoinOutcome:
    assignment: RoleAssignment
    notifications: List[Notification]


class RoomRegistry:
    """
    Maps room ids to RoomState, creating rooms on first join and deleting
    them as soon as their last member leaves.
    """

    def __init__(
        self,
        assignor: Optional[RoleAssignor] = None,
        router: Optional[FanoutRouter] = None,
        strict: bool = False,
    ):
        """
        Args:
            assignor: Role policy; defaults to first-joiner-is-mentor, no reclaim
            router: Fan-out rules used to build notifications
            strict: Raise on invariant violations instead of only logging them
        """
        self.assignor = assignor if assignor is not None else RoleAssignor()
        self.router = router if router is not None else FanoutRouter()
        self.strict = strict
        self._rooms: Dict[str, _RoomSlot] = {}
        self._memberships: Dict[str, str] = {}

    @asynccontextmanager
    async def _locked(self, room_id: str, create: bool = False) -> AsyncIterator[Optional[RoomState]]:
        """
        Enter the critical section of `room_id`.

        Yields None if the room does not exist and `create` is False. If the
        room is deleted while we wait for its lock, the lookup starts over so
        we never mutate a room that is no longer registered.
        """
        while True:
            slot = self._rooms.get(room_id)
            if slot is None:
                if not create:
                    yield None
                    return
                slot = _RoomSlot(RoomState(room_id=room_id))
                self._rooms[room_id] = slot
                logger.info(f"Created room {room_id}")
            async with slot.lock:
                if self._rooms.get(room_id) is slot:
                    yield slot.state
                    return
            logger.debug(f"Room {room_id} was removed while waiting for its lock, retrying")

    def _verify(self, room: RoomState):
        try:
            room.check_invariants()
        except InvariantViolation as exc:
            logger.critical(f"Invariant violation: {exc.detail}")
            if self.strict:
                raise

    async def join(self, room_id: str, connection_id: str) -> JoinOutcome:
        """
        Add a connection to a room, creating the room if needed.

        Raises:
            ProtocolViolation: if room_id is empty or the connection is still
                a member of a different room
        """
        if not room_id:
            raise ProtocolViolation("joinRoom requires a roomId")
        current = self._memberships.get(connection_id)
        if current is not None and current != room_id:
            raise ProtocolViolation(f"connection {connection_id} is already in room {current}")

        async with self._locked(room_id, create=True) as room:
            if room.has_member(connection_id):
                role = Mentor() if room.is_mentor(connection_id) else Student(connection_id)
                logger.debug(f"Connection {connection_id} re-joined room {room_id}")
                return JoinOutcome(
                    RoleAssignment(role, room.member_count),
                    self.router.rejoined(room, connection_id, role),
                )

            role = self.assignor.assign(room, connection_id)
            if isinstance(role, Mentor):
                room.mentor_id = connection_id
            else:
                room.students[connection_id] = ""
            room.member_count += 1
            room.touch()
            self._memberships[connection_id] = room_id
            self._verify(room)

            logger.info(f"Connection {connection_id} joined room {room_id} as {role.name} (count={room.member_count})")
            return JoinOutcome(
                RoleAssignment(role, room.member_count),
                self.router.joined(room, connection_id, role),
            )

    async def leave(self, room_id: str, connection_id: str) -> List[Notification]:
        """Remove a connection from a room. Leaving a room you are not in is a no-op."""
        async with self._locked(room_id) as room:
            if room is None or not room.has_member(connection_id):
                logger.debug(f"Ignoring leave of {connection_id} from room {room_id}: not a member")
                return []

            if room.is_mentor(connection_id):
                role = Mentor()
                self.assignor.vacate(room, connection_id)
            else:
                role = Student(connection_id)
                del room.students[connection_id]
            room.member_count -= 1
            room.touch()
            if self._memberships.get(connection_id) == room_id:
                del self._memberships[connection_id]
            self._verify(room)

            logger.info(f"Connection {connection_id} left room {room_id} as {role.name} (count={room.member_count})")
            if room.member_count == 0:
                del self._rooms[room_id]
                logger.info(f"Removed empty room {room_id}")
                return []
            return self.router.left(room, connection_id, role)

    async def update_student_code(self, room_id: str, student_id: str, code: str) -> List[Notification]:
        """
        Replace a student's code buffer.

        A room or slot that no longer exists makes this a no-op.

        Raises:
            ProtocolViolation: if the sender is the room's mentor
        """
        async with self._locked(room_id) as room:
            if room is None:
                logger.debug(f"Dropping code update from {student_id}: room {room_id} is gone")
                return []
            if room.is_mentor(student_id):
                raise ProtocolViolation("the mentor has no student code buffer")
            if student_id not in room.students:
                logger.debug(f"Dropping code update from {student_id}: not a student of room {room_id}")
                return []
            room.students[student_id] = code
            room.touch()
            return self.router.code_changed(room, student_id, code)

    async def update_solution(self, room_id: str, connection_id: str, solution: str) -> List[Notification]:
        """
        Publish the mentor's solution to every student of the room.

        Raises:
            AuthorizationError: if the caller is not the current mentor of room_id
        """
        async with self._locked(room_id) as room:
            if room is None or not room.is_mentor(connection_id):
                raise AuthorizationError(f"only the mentor of room {room_id} may publish a solution")
            room.solution = solution
            room.touch()
            logger.info(f"Mentor {connection_id} published a solution in room {room_id}")
            return self.router.solution_published(room, solution)

    async def check_solution(self, room_id: str, student_id: str) -> bool:
        """
        Compare a student's stored buffer with the room's solution.

        Read-only and advisory; nothing is recorded.

        Raises:
            ProtocolViolation: if the caller is not a student of room_id
        """
        async with self._locked(room_id) as room:
            if room is None or student_id not in room.students:
                raise ProtocolViolation(f"{student_id} is not a student of room {room_id}")
            return evaluate_published(room.students[student_id], room.solution)

    def room_of(self, connection_id: str) -> Optional[str]:
        return self._memberships.get(connection_id)

    def get_room(self, room_id: str) -> Optional[RoomState]:
        slot = self._rooms.get(room_id)
        return slot.state if slot is not None else None

    def get_room_info(self, room_id: str) -> Optional[dict]:
        room = self.get_room(room_id)
        return room.info() if room is not None else None

    def get_all_rooms_info(self) -> List[dict]:
        return [slot.state.info() for slot in self._rooms.values()]

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)
