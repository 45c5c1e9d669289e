from datetime import date

from sqlalchemy import func, select

from app.db.sample_data import CLASSES, PERIODS, TEACHERS, seed_sample_roster
from app.models.absence import Absence
from app.models.schedule import ScheduleEntry
from app.services.assignment_planner import AssignmentPlanner
from app.services.auto_fill import auto_fill
from app.services.roster_store import load_assignments, load_roster, persist_assignment


def test_sample_roster_loads_once(db):
    assert seed_sample_roster(db) is True
    assert seed_sample_roster(db) is False

    roster = load_roster(db)
    assert len(roster.teachers) == len(TEACHERS)
    assert len(roster.periods) == len(PERIODS)
    lessons = db.execute(select(func.count(ScheduleEntry.id))).scalar_one()
    assert lessons == 5 * len(PERIODS) * len(CLASSES)


def test_auto_fill_on_sample_roster(db):
    seed_sample_roster(db)
    monday = date(2024, 3, 4)
    db.add(Absence(teacher_id=1, start_date=monday, end_date=monday))
    db.commit()

    roster = load_roster(db)
    planner = AssignmentPlanner(roster)
    result = auto_fill(planner, 1, monday, load_assignments(db, monday))
    for assignment in result.created:
        persist_assignment(db, assignment, roster)
    db.commit()

    needed = {item.id for item in planner.coverage_needed(1, monday)}
    assert needed
    assert {item.schedule_entry_id for item in result.assigned} | {
        item.schedule_entry_id for item in result.skipped
    } == needed

    stored = load_assignments(db, monday)
    assert len(stored) == len(result.assigned)
    slots = [(item.substitute_teacher_id, item.period_id) for item in stored]
    assert len(slots) == len(set(slots))
