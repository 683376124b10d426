from codemove.fanout import FanoutRouter
from codemove.roles import Mentor, Student
from codemove.room import RoomState


def make_room(**kwargs) -> RoomState:
    room = RoomState(room_id="R1", **kwargs)
    room.member_count = room.expected_count()
    return room


router = FanoutRouter()


def targets(notifications, kind=None):
    return [n.target for n in notifications if kind is None or n.message["type"] == kind]


def test_student_code_goes_to_mentor_only():
    room = make_room(mentor_id="A", students={"B": "x", "C": ""})
    out = router.code_changed(room, "B", "x")
    assert targets(out) == ["A"]
    assert out[0].message == {"type": "codeUpdate", "studentId": "B", "newCode": "x"}


def test_student_code_without_mentor_goes_nowhere():
    room = make_room(students={"B": "x", "C": ""}, mentor_departed=True)
    assert router.code_changed(room, "B", "x") == []


def test_solution_goes_to_every_student_and_not_the_mentor():
    room = make_room(mentor_id="A", students={"B": "", "C": ""})
    out = router.solution_published(room, "sol")
    assert sorted(targets(out)) == ["B", "C"]
    assert all(n.message == {"type": "mentorSolution", "mentorSolution": "sol"} for n in out)


def test_student_join_announces_editor_to_mentor_only():
    room = make_room(mentor_id="A", students={"B": "", "C": ""})
    out = router.joined(room, "C", Student("C"))

    assert targets(out, "assignRole") == ["C"]
    assert targets(out, "newStudentEditor") == ["A"]
    assert sorted(targets(out, "userCountUpdated")) == ["A", "B"]
    assert "B" not in targets(out, "newStudentEditor")


def test_student_join_catches_up_on_published_solution():
    room = make_room(mentor_id="A", students={"B": ""}, solution="sol")
    out = router.joined(room, "B", Student("B"))
    assert [n.message["type"] for n in out if n.target == "B"] == ["assignRole", "mentorSolution"]


def test_reclaiming_mentor_sees_existing_students():
    room = make_room(mentor_id="C", students={"B": "let x"})
    out = router.joined(room, "C", Mentor())
    editors = [n.message for n in out if n.message["type"] == "newStudentEditor"]
    assert editors == [{"type": "newStudentEditor", "studentId": "B", "code": "let x"}]
    assert targets(out, "newStudentEditor") == ["C"]


def test_student_leave_tells_mentor_and_updates_counts():
    room = make_room(mentor_id="A", students={"C": ""})
    out = router.left(room, "B", Student("B"))
    assert targets(out, "removeStudentEditor") == ["A"]
    assert sorted(targets(out, "userCountUpdated")) == ["A", "C"]
    assert out[-1].message["count"] == 2


def test_mentor_leave_tells_every_remaining_member():
    room = make_room(students={"B": "", "C": ""}, mentor_departed=True)
    out = router.left(room, "A", Mentor())
    assert sorted(targets(out, "mentorLeft")) == ["B", "C"]
    assert targets(out, "removeStudentEditor") == []


def test_no_student_ever_hears_about_another_student():
    room = make_room(mentor_id="A", students={"B": "", "C": "", "D": ""})
    events = (
        router.joined(room, "D", Student("D"))
        + router.code_changed(room, "C", "x")
        + router.left(room, "B", Student("B"))
    )
    for n in events:
        if n.target != "A":
            assert "studentId" not in n.message
