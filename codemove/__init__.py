from .connection import Connection
from .errors import (
    AuthorizationError,
    CodeMoveError,
    InvariantViolation,
    ProtocolViolation,
    TransportFailure,
)
from .fanout import FanoutRouter, Notification
from .hub import RoomHub
from .match import evaluate
from .parse_args import parse_args
from .registry import RoomRegistry
from .roles import Mentor, Role, RoleAssignment, RoleAssignor, Student
from .room import RoomState

__all__ = [
    "AuthorizationError",
    "CodeMoveError",
    "Connection",
    "FanoutRouter",
    "InvariantViolation",
    "Mentor",
    "Notification",
    "ProtocolViolation",
    "Role",
    "RoleAssignment",
    "RoleAssignor",
    "RoomHub",
    "RoomRegistry",
    "RoomState",
    "Student",
    "TransportFailure",
    "evaluate",
    "parse_args",
]
