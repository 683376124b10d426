from codemove.client import RoomView


def test_mentor_view_tracks_student_editors():
    view = RoomView("R1")
    view.apply({"type": "assignRole", "role": "mentor", "count": 1})
    view.apply({"type": "newStudentEditor", "studentId": "B", "code": ""})
    view.apply({"type": "codeUpdate", "studentId": "B", "newCode": "let x"})
    view.apply({"type": "userCountUpdated", "count": 2})

    assert view.is_mentor
    assert view.count == 2
    assert view.student_code == {"B": "let x"}

    view.apply({"type": "removeStudentEditor", "studentId": "B"})
    assert view.student_code == {}


def test_student_edit_produces_code_change_frame():
    view = RoomView("R1")
    view.apply({"type": "assignRole", "role": "student", "count": 2})
    frame = view.edit("let x=1")
    assert frame == {"type": "codeChange", "roomId": "R1", "newCode": "let x=1"}


def test_mentor_edit_is_not_sent():
    view = RoomView("R1", role="mentor")
    assert view.edit("scratch") is None


def test_local_match_check_is_strict():
    view = RoomView("R1", role="student")
    assert view.check_solution() is False

    view.apply({"type": "mentorSolution", "mentorSolution": "x=1"})
    view.edit("x =1")
    assert view.check_solution() is False
    view.edit("x=1")
    assert view.check_solution() is True

    view.edit("x=1 ")
    assert view.matched is False


def test_mentor_left_and_errors_are_recorded():
    view = RoomView("R1", role="student")
    view.apply({"type": "mentorLeft"})
    view.apply({"type": "error", "code": "AUTHORIZATION_ERROR", "detail": "nope"})
    assert view.mentor_left
    assert view.last_error["code"] == "AUTHORIZATION_ERROR"
