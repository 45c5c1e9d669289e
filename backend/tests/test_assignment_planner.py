from datetime import date

import pytest

from app.core.exceptions import ConflictError, InvalidInputError, ResourceNotFoundError
from app.services.assignment_planner import ALREADY_ASSIGNED, AssignmentPlanner
from app.services.roster import (
    RosterAbsence,
    RosterDuty,
    RosterPeriod,
    RosterScheduleEntry,
    RosterSnapshot,
    RosterTeacher,
)

MONDAY = date(2024, 3, 4)
TUESDAY = date(2024, 3, 5)


def build_planner():
    # Period ids deliberately disagree with their order.
    periods = [
        RosterPeriod(id=30, order=3, start_time="10:10", end_time="10:50"),
        RosterPeriod(id=10, order=1, start_time="08:30", end_time="09:10"),
        RosterPeriod(id=20, order=2, start_time="09:20", end_time="10:00"),
    ]
    roster = RosterSnapshot.build(
        teachers=[
            RosterTeacher(id=1, name="Ayşe", surname="Yılmaz", branch="Matematik"),
            RosterTeacher(id=2, name="Ali", surname="Öztürk", branch="Fizik"),
            RosterTeacher(id=3, name="Fatma", surname="Yıldız", branch="Matematik"),
            RosterTeacher(id=4, name="Mehmet", surname="Kaya", branch="Tarih"),
        ],
        periods=periods,
        schedule=[
            RosterScheduleEntry(id=1, teacher_id=1, class_id=2, subject_id=1, period_id=30, day_of_week=1),
            RosterScheduleEntry(id=2, teacher_id=1, class_id=1, subject_id=1, period_id=10, day_of_week=1),
            RosterScheduleEntry(id=3, teacher_id=1, class_id=1, subject_id=1, period_id=20, day_of_week=2),
            RosterScheduleEntry(id=4, teacher_id=4, class_id=3, subject_id=2, period_id=10, day_of_week=1),
            RosterScheduleEntry(id=5, teacher_id=2, class_id=4, subject_id=3, period_id=20, day_of_week=1),
        ],
        duties=[RosterDuty(id=1, teacher_id=3, location_id=1, day_of_week=1, period_id=30)],
        absences=[
            RosterAbsence(id=1, teacher_id=1, start_date=MONDAY, end_date=MONDAY),
            RosterAbsence(id=2, teacher_id=4, start_date=MONDAY, end_date=MONDAY),
        ],
        subject_names={1: "Matematik", 2: "Tarih", 3: "Fizik"},
        class_names={1: "9/A", 2: "10/B", 3: "11/A", 4: "12/A"},
    )
    return AssignmentPlanner(roster)


def test_coverage_needed_orders_by_period_order():
    planner = build_planner()

    entries = planner.coverage_needed(1, MONDAY)

    assert [item.id for item in entries] == [2, 1]


def test_coverage_needed_is_empty_on_days_without_lessons():
    planner = build_planner()

    assert planner.coverage_needed(1, date(2024, 3, 6)) == []
    assert [item.id for item in planner.coverage_needed(1, TUESDAY)] == [3]


def test_coverage_needed_rejects_unknown_teacher():
    with pytest.raises(ResourceNotFoundError):
        build_planner().coverage_needed(99, MONDAY)


def test_assign_appends_to_caller_list():
    planner = build_planner()
    assignments = []

    assignment = planner.assign(2, 3, MONDAY, assignments)

    assert assignments == [assignment]
    assert assignment.absent_teacher_id == 1
    assert assignment.substitute_teacher_id == 3
    assert assignment.period_id == 10
    assert assignment.date == MONDAY


def test_assign_rejects_entry_without_absence_or_on_wrong_weekday():
    planner = build_planner()

    with pytest.raises(InvalidInputError):
        planner.assign(5, 3, MONDAY, [])
    with pytest.raises(InvalidInputError):
        planner.assign(2, 3, TUESDAY, [])
    with pytest.raises(ResourceNotFoundError):
        planner.assign(99, 3, MONDAY, [])


def test_assign_reports_blocking_status():
    planner = build_planner()

    with pytest.raises(ConflictError) as on_duty:
        planner.assign(1, 3, MONDAY, [])
    assert on_duty.value.reason == "on_duty"
    assert on_duty.value.status_code == 409

    with pytest.raises(ConflictError) as absent:
        planner.assign(2, 4, MONDAY, [])
    assert absent.value.reason == "absent"


def test_assign_rejects_own_class():
    planner = build_planner()
    monday_entry_in_period_2 = RosterScheduleEntry(
        id=6, teacher_id=1, class_id=3, subject_id=1, period_id=20, day_of_week=1
    )
    roster = RosterSnapshot.build(
        teachers=planner.roster.teachers,
        periods=planner.roster.periods,
        schedule=[*planner.roster.schedule, monday_entry_in_period_2],
        absences=planner.roster.absences,
    )

    with pytest.raises(ConflictError) as exc_info:
        AssignmentPlanner(roster).assign(6, 2, MONDAY, [])

    assert exc_info.value.reason == "has_own_class"


def test_substitute_cannot_cover_two_lessons_in_one_period():
    planner = build_planner()
    assignments = []
    planner.assign(2, 3, MONDAY, assignments)

    with pytest.raises(ConflictError) as exc_info:
        planner.assign(4, 3, MONDAY, assignments)

    assert exc_info.value.reason == "already_substituting"
    assert len(assignments) == 1


def test_covered_lesson_must_be_unassigned_first():
    planner = build_planner()
    assignments = []
    planner.assign(2, 2, MONDAY, assignments)

    with pytest.raises(ConflictError) as exc_info:
        planner.assign(2, 3, MONDAY, assignments)

    assert exc_info.value.reason == ALREADY_ASSIGNED

    planner.unassign(MONDAY, 2, assignments)
    replacement = planner.assign(2, 3, MONDAY, assignments)
    assert assignments == [replacement]


def test_unassign_is_idempotent():
    planner = build_planner()
    assignments = []
    planner.assign(2, 3, MONDAY, assignments)

    removed = planner.unassign(MONDAY, 2, assignments)
    again = planner.unassign(MONDAY, 2, assignments)

    assert removed is not None
    assert again is None
    assert assignments == []


def test_coverage_pairs_entries_with_assignments():
    planner = build_planner()
    assignments = []
    made = planner.assign(1, 2, MONDAY, assignments)

    coverage = planner.coverage(1, MONDAY, assignments)

    assert [(entry.id, assignment) for entry, assignment in coverage] == [(2, None), (1, made)]
