# room.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from codemove.errors import InvariantViolation


@dataclass
class RoomState:
    """
    Authoritative record of one room.

    Only RoomRegistry mutates instances, and only inside the room's lock.
    """
    room_id: str
    mentor_id: Optional[str] = None
    students: Dict[str, str] = field(default_factory=dict)
    solution: Optional[str] = None
    member_count: int = 0
    mentor_departed: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)

    def touch(self):
        self.last_activity = datetime.now()

    def has_member(self, connection_id: str) -> bool:
        """Check if a connection is the mentor or a student of this room."""
        return connection_id == self.mentor_id or connection_id in self.students

    def is_mentor(self, connection_id: str) -> bool:
        return self.mentor_id is not None and self.mentor_id == connection_id

    def member_ids(self):
        """All joined connection ids, mentor first."""
        members = [self.mentor_id] if self.mentor_id is not None else []
        members.extend(self.students)
        return members

    def expected_count(self) -> int:
        return (1 if self.mentor_id is not None else 0) + len(self.students)

    def check_invariants(self):
        """Raise InvariantViolation if bookkeeping drifted from membership."""
        if self.member_count != self.expected_count():
            raise InvariantViolation(
                f"room {self.room_id}: member_count={self.member_count} "
                f"but mentor={self.mentor_id is not None} students={len(self.students)}"
            )
        if self.mentor_id is not None and self.mentor_id in self.students:
            raise InvariantViolation(
                f"room {self.room_id}: mentor {self.mentor_id} also holds a student slot"
            )

    def info(self) -> dict:
        return {
            "room_id": self.room_id,
            "member_count": self.member_count,
            "student_count": len(self.students),
            "has_mentor": self.mentor_id is not None,
            "mentor_departed": self.mentor_departed,
            "has_solution": self.solution is not None,
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity.isoformat(),
        }
