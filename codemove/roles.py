"""
Role assignment for room participants.

The first connection to join an empty room becomes mentor, everyone after it
becomes a student. Once the mentor leaves, nobody is promoted; whether a new
joiner may claim the vacant mentor slot is controlled by allow_mentor_reclaim.
"""
import logging
from dataclasses import dataclass
from typing import ClassVar, Union

from codemove.room import RoomState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mentor:
    name: ClassVar[str] = "mentor"


@dataclass(frozen=True)
class Student:
    student_id: str
    name: ClassVar[str] = "student"


Role = Union[Mentor, Student]


@dataclass(frozen=True)
class RoleAssignment:
    """Result of a join: the role the connection holds and the room size."""
    role: Role
    count: int


class RoleAssignor:
    def __init__(self, allow_mentor_reclaim: bool = False):
        self.allow_mentor_reclaim = allow_mentor_reclaim

    def assign(self, room: RoomState, connection_id: str) -> Role:
        """
        Decide the role of a connection joining `room`.

        Must be called inside the room's critical section, before the
        connection is recorded, so exactly one caller ever sees the mentor
        slot as free.
        """
        if room.mentor_id is None:
            if not room.mentor_departed:
                return Mentor()
            if self.allow_mentor_reclaim:
                logger.info(f"Connection {connection_id} reclaims mentor slot of room {room.room_id}")
                return Mentor()
        return Student(connection_id)

    def vacate(self, room: RoomState, connection_id: str) -> None:
        """Record that the mentor left; the slot is not handed to anyone."""
        if room.mentor_id == connection_id:
            room.mentor_id = None
            room.mentor_departed = True
