"""
Fan-out rules: who hears about which room event.

Students never receive anything about another student. Student code only
ever goes to the mentor slot; the mentor's solution only ever goes to
students. Every method here is pure: it reads a RoomState snapshot taken
inside the room's critical section and returns the notifications to send
once that section has been released.
"""
from dataclasses import dataclass
from typing import List, Optional

from codemove import protocol
from codemove.roles import Mentor, Role, Student
from codemove.room import RoomState


@dataclass(frozen=True)
class Notification:
    target: str
    message: dict


class FanoutRouter:

    def joined(self, room: RoomState, connection_id: str, role: Role) -> List[Notification]:
        """Notifications for a connection that has just been added to `room`."""
        out = [Notification(connection_id, protocol.assign_role(role.name, room.member_count))]

        if isinstance(role, Student):
            if room.solution is not None:
                out.append(Notification(connection_id, protocol.mentor_solution(room.solution)))
            if room.mentor_id is not None:
                out.append(Notification(
                    room.mentor_id,
                    protocol.new_student_editor(role.student_id, room.students[role.student_id]),
                ))
        else:
            # A mentor claiming a room that already has students sees all of them.
            for student_id, code in room.students.items():
                out.append(Notification(connection_id, protocol.new_student_editor(student_id, code)))

        out.extend(self._count_update(room, exclude=connection_id))
        return out

    def rejoined(self, room: RoomState, connection_id: str, role: Role) -> List[Notification]:
        """Resync a connection that asked to join a room it already belongs to."""
        out = [Notification(connection_id, protocol.assign_role(role.name, room.member_count))]
        if isinstance(role, Student) and room.solution is not None:
            out.append(Notification(connection_id, protocol.mentor_solution(room.solution)))
        return out

    def left(self, room: RoomState, connection_id: str, role: Role) -> List[Notification]:
        """Notifications for the members remaining after `connection_id` left."""
        out = []
        if isinstance(role, Mentor):
            out.extend(Notification(member, protocol.mentor_left()) for member in room.member_ids())
        elif room.mentor_id is not None:
            out.append(Notification(room.mentor_id, protocol.remove_student_editor(connection_id)))
        out.extend(self._count_update(room))
        return out

    def code_changed(self, room: RoomState, student_id: str, code: str) -> List[Notification]:
        if room.mentor_id is None:
            return []
        return [Notification(room.mentor_id, protocol.code_update(student_id, code))]

    def solution_published(self, room: RoomState, solution: str) -> List[Notification]:
        return [
            Notification(student_id, protocol.mentor_solution(solution))
            for student_id in room.students
        ]

    def _count_update(self, room: RoomState, exclude: Optional[str] = None) -> List[Notification]:
        message = protocol.user_count_updated(room.member_count)
        return [
            Notification(member, message)
            for member in room.member_ids()
            if member != exclude
        ]
