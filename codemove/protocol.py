"""
Wire protocol for the room WebSocket.

Every frame is a JSON object tagged by "type". Inbound frames are validated
with pydantic; outbound frames are plain dicts built by the helpers below.
"""
import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from codemove.errors import ProtocolViolation

# Client -> Server message types
JOIN_ROOM = "joinRoom"
LEAVE_ROOM = "leaveRoom"
CODE_CHANGE = "codeChange"
MENTOR_SOLUTION = "mentorSolution"
CHECK_SOLUTION = "checkSolution"

# Server -> Client message types
ASSIGN_ROLE = "assignRole"
USER_COUNT_UPDATED = "userCountUpdated"
NEW_STUDENT_EDITOR = "newStudentEditor"
REMOVE_STUDENT_EDITOR = "removeStudentEditor"
CODE_UPDATE = "codeUpdate"
MENTOR_LEFT = "mentorLeft"
SOLUTION_CHECKED = "solutionChecked"
ERROR = "error"

DEFAULT_MAX_CODE_LENGTH = 100_000

RoomId = Annotated[str, Field(min_length=1, alias="roomId")]


class _Inbound(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class JoinRoom(_Inbound):
    type: Literal["joinRoom"]
    room_id: RoomId


class LeaveRoom(_Inbound):
    type: Literal["leaveRoom"]
    room_id: RoomId


class CodeChange(_Inbound):
    type: Literal["codeChange"]
    room_id: RoomId
    new_code: str = Field(alias="newCode")


class MentorSolution(_Inbound):
    type: Literal["mentorSolution"]
    room_id: RoomId
    mentor_solution: str = Field(alias="mentorSolution")


class CheckSolution(_Inbound):
    type: Literal["checkSolution"]
    room_id: RoomId


InboundMessage = Annotated[
    Union[JoinRoom, LeaveRoom, CodeChange, MentorSolution, CheckSolution],
    Field(discriminator="type"),
]

_inbound_adapter = TypeAdapter(InboundMessage)


def parse_message(raw: Any, max_code_length: int = DEFAULT_MAX_CODE_LENGTH) -> InboundMessage:
    """
    Validate one inbound frame.

    Args:
        raw: A decoded JSON object or the raw text of the frame
        max_code_length: Upper bound on code and solution text

    Raises:
        ProtocolViolation: if the frame is not a known, well-formed message
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ProtocolViolation(f"frame is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ProtocolViolation("frame must be a JSON object")

    try:
        message = _inbound_adapter.validate_python(raw)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'frame'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ProtocolViolation(f"invalid {raw.get('type', 'message')}: {errors}") from exc

    text = getattr(message, "new_code", None)
    if text is None:
        text = getattr(message, "mentor_solution", None)
    if text is not None and len(text) > max_code_length:
        raise ProtocolViolation(f"{message.type} exceeds {max_code_length} characters")
    return message


def assign_role(role: str, count: int) -> dict:
    return {"type": ASSIGN_ROLE, "role": role, "count": count}


def user_count_updated(count: int) -> dict:
    return {"type": USER_COUNT_UPDATED, "count": count}


def new_student_editor(student_id: str, code: str) -> dict:
    return {"type": NEW_STUDENT_EDITOR, "studentId": student_id, "code": code}


def remove_student_editor(student_id: str) -> dict:
    return {"type": REMOVE_STUDENT_EDITOR, "studentId": student_id}


def code_update(student_id: str, new_code: str) -> dict:
    return {"type": CODE_UPDATE, "studentId": student_id, "newCode": new_code}


def mentor_solution(solution: str) -> dict:
    return {"type": MENTOR_SOLUTION, "mentorSolution": solution}


def mentor_left() -> dict:
    return {"type": MENTOR_LEFT}


def solution_checked(match: bool) -> dict:
    return {"type": SOLUTION_CHECKED, "match": match}


def error(code: str, detail: str) -> dict:
    return {"type": ERROR, "code": code, "detail": detail}
