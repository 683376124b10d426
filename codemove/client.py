"""
Client-side mirror of a room, fed by server messages.

A participant keeps its own view of the room: its role, the member count,
its own code (students) or every student's code (mentor), and the latest
published solution. Match checks run against this local view.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from codemove import protocol
from codemove.match import evaluate_published

logger = logging.getLogger(__name__)


@dataclass
class RoomView:
    room_id: str
    role: Optional[str] = None
    count: int = 0
    my_code: str = ""
    solution: Optional[str] = None
    student_code: Dict[str, str] = field(default_factory=dict)
    mentor_left: bool = False
    matched: bool = False
    last_error: Optional[dict] = None

    @property
    def is_mentor(self) -> bool:
        return self.role == "mentor"

    def apply(self, message: dict):
        """Fold one server message into the view."""
        kind = message.get("type")
        if kind == protocol.ASSIGN_ROLE:
            self.role = message["role"]
            self.count = message["count"]
            if not self.is_mentor:
                self.my_code = ""
        elif kind == protocol.USER_COUNT_UPDATED:
            self.count = message["count"]
        elif kind in (protocol.NEW_STUDENT_EDITOR, protocol.CODE_UPDATE):
            code = message["code"] if kind == protocol.NEW_STUDENT_EDITOR else message["newCode"]
            self.student_code[message["studentId"]] = code
        elif kind == protocol.REMOVE_STUDENT_EDITOR:
            self.student_code.pop(message["studentId"], None)
        elif kind == protocol.MENTOR_SOLUTION:
            self.solution = message["mentorSolution"]
        elif kind == protocol.MENTOR_LEFT:
            self.mentor_left = True
        elif kind == protocol.SOLUTION_CHECKED:
            self.matched = message["match"]
        elif kind == protocol.ERROR:
            self.last_error = message
            logger.warning(f"Server rejected a request: {message.get('code')} {message.get('detail')}")
        else:
            logger.debug(f"Ignoring unknown message: {message}")

    def edit(self, code: str) -> Optional[dict]:
        """Replace our own buffer; returns the frame to send, if any."""
        self.my_code = code
        self.matched = False
        if self.is_mentor:
            return None
        return {"type": protocol.CODE_CHANGE, "roomId": self.room_id, "newCode": code}

    def publish(self, solution: str) -> dict:
        self.solution = solution
        return {"type": protocol.MENTOR_SOLUTION, "roomId": self.room_id, "mentorSolution": solution}

    def check_solution(self) -> bool:
        """Advisory local check of our code against the last solution we saw."""
        self.matched = evaluate_published(self.my_code, self.solution)
        return self.matched

    def join_frame(self) -> dict:
        return {"type": protocol.JOIN_ROOM, "roomId": self.room_id}

    def leave_frame(self) -> dict:
        return {"type": protocol.LEAVE_ROOM, "roomId": self.room_id}
