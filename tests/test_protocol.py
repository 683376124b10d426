import json

import pytest

from codemove import protocol
from codemove.errors import ProtocolViolation


def test_parses_join_from_text_frame():
    message = protocol.parse_message('{"type": "joinRoom", "roomId": "R1"}')
    assert isinstance(message, protocol.JoinRoom)
    assert message.room_id == "R1"


def test_parses_bytes_frame():
    message = protocol.parse_message(json.dumps({"type": "leaveRoom", "roomId": "R1"}).encode())
    assert isinstance(message, protocol.LeaveRoom)


def test_parses_code_change_and_solution():
    change = protocol.parse_message({"type": "codeChange", "roomId": "R1", "newCode": ""})
    assert change.new_code == ""
    published = protocol.parse_message({"type": "mentorSolution", "roomId": "R1", "mentorSolution": "x=1"})
    assert published.mentor_solution == "x=1"


def test_unknown_fields_are_ignored():
    message = protocol.parse_message({"type": "checkSolution", "roomId": "R1", "extra": True})
    assert isinstance(message, protocol.CheckSolution)


@pytest.mark.parametrize(
    "frame",
    [
        {"type": "joinRoom"},
        {"type": "joinRoom", "roomId": ""},
        {"type": "joinRoom", "roomId": 7},
        {"type": "codeChange", "roomId": "R1"},
        {"type": "shout", "roomId": "R1"},
        {"roomId": "R1"},
        ["joinRoom", "R1"],
        "not json",
    ],
)
def test_malformed_frames_are_protocol_violations(frame):
    with pytest.raises(ProtocolViolation):
        protocol.parse_message(frame)


def test_code_longer_than_limit_is_rejected():
    frame = {"type": "codeChange", "roomId": "R1", "newCode": "x" * 11}
    with pytest.raises(ProtocolViolation, match="exceeds 10"):
        protocol.parse_message(frame, max_code_length=10)
    assert protocol.parse_message(frame, max_code_length=11).new_code == "x" * 11


def test_outbound_messages_use_wire_field_names():
    assert protocol.assign_role("mentor", 1) == {"type": "assignRole", "role": "mentor", "count": 1}
    assert protocol.new_student_editor("B", "") == {"type": "newStudentEditor", "studentId": "B", "code": ""}
    assert protocol.code_update("B", "x") == {"type": "codeUpdate", "studentId": "B", "newCode": "x"}
    assert protocol.mentor_solution("x") == {"type": "mentorSolution", "mentorSolution": "x"}
    assert protocol.mentor_left() == {"type": "mentorLeft"}
    assert protocol.error("PROTOCOL_VIOLATION", "bad") == {
        "type": "error",
        "code": "PROTOCOL_VIOLATION",
        "detail": "bad",
    }
