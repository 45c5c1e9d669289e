from __future__ import annotations

from datetime import date
import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError
from app.models.absence import Absence
from app.models.duty import Duty
from app.models.schedule import ScheduleEntry
from app.models.school import Period, SchoolClass, Subject
from app.models.substitution import Substitution
from app.models.teacher import Teacher
from app.services.assignment_planner import ALREADY_ASSIGNED
from app.services.extra_lessons import delete_substitution_entries, record_substitution_entries
from app.services.roster import (
    RosterAbsence,
    RosterDuty,
    RosterPeriod,
    RosterScheduleEntry,
    RosterSnapshot,
    RosterTeacher,
    SubstitutionAssignment,
)

logger = logging.getLogger(__name__)


def load_roster(db: Session) -> RosterSnapshot:
    teachers = [
        RosterTeacher(id=item.id, name=item.name, surname=item.surname, branch=item.branch)
        for item in db.execute(select(Teacher).order_by(Teacher.id)).scalars()
    ]
    periods = [
        RosterPeriod(id=item.id, order=item.order, start_time=item.start_time, end_time=item.end_time)
        for item in db.execute(select(Period).order_by(Period.order)).scalars()
    ]
    schedule = [
        RosterScheduleEntry(
            id=item.id,
            teacher_id=item.teacher_id,
            class_id=item.class_id,
            subject_id=item.subject_id,
            period_id=item.period_id,
            day_of_week=item.day_of_week,
        )
        for item in db.execute(select(ScheduleEntry).order_by(ScheduleEntry.id)).scalars()
    ]
    duties = [
        RosterDuty(
            id=item.id,
            teacher_id=item.teacher_id,
            location_id=item.location_id,
            day_of_week=item.day_of_week,
            period_id=item.period_id,
        )
        for item in db.execute(select(Duty).order_by(Duty.id)).scalars()
    ]
    absences = [
        RosterAbsence(
            id=item.id,
            teacher_id=item.teacher_id,
            start_date=item.start_date,
            end_date=item.end_date,
            reason=item.reason,
        )
        for item in db.execute(select(Absence).order_by(Absence.id)).scalars()
    ]
    subject_names = {item.id: item.name for item in db.execute(select(Subject)).scalars()}
    class_names = {item.id: item.name for item in db.execute(select(SchoolClass)).scalars()}
    return RosterSnapshot.build(
        teachers=teachers,
        periods=periods,
        schedule=schedule,
        duties=duties,
        absences=absences,
        subject_names=subject_names,
        class_names=class_names,
    )


def to_assignment(record: Substitution) -> SubstitutionAssignment:
    return SubstitutionAssignment(
        absent_teacher_id=record.absent_teacher_id,
        substitute_teacher_id=record.substitute_teacher_id,
        schedule_entry_id=record.schedule_id,
        period_id=record.period_id,
        date=record.date,
        id=record.id,
    )


def list_substitutions(db: Session, on_date: date) -> list[Substitution]:
    return list(
        db.execute(
            select(Substitution)
            .where(Substitution.date == on_date)
            .order_by(Substitution.period_id, Substitution.id)
        ).scalars()
    )


def load_assignments(db: Session, on_date: date) -> list[SubstitutionAssignment]:
    return [to_assignment(item) for item in list_substitutions(db, on_date)]


def persist_assignment(
    db: Session,
    assignment: SubstitutionAssignment,
    roster: RosterSnapshot,
    *,
    assigned_by: str | None = None,
) -> Substitution:
    record = Substitution(
        absent_teacher_id=assignment.absent_teacher_id,
        substitute_teacher_id=assignment.substitute_teacher_id,
        schedule_id=assignment.schedule_entry_id,
        period_id=assignment.period_id,
        date=assignment.date,
        assigned_by=assigned_by,
    )
    db.add(record)
    # The INSERT runs here, so the uniqueness constraints fire before commit.
    _write_or_conflict(db, db.flush)
    record_substitution_entries(db, record, roster)
    return record


def remove_substitution(db: Session, substitution_id: int | None) -> Substitution | None:
    record = db.get(Substitution, substitution_id) if substitution_id is not None else None
    if record is None:
        return None
    delete_substitution_entries(db, [record.id])
    db.delete(record)
    return record


def remove_substitutions_for_teacher(db: Session, teacher_id: int, dates: list[date]) -> list[int]:
    if not dates:
        return []
    ids = list(
        db.execute(
            select(Substitution.id).where(
                Substitution.absent_teacher_id == teacher_id,
                Substitution.date.in_(dates),
            )
        ).scalars()
    )
    if ids:
        delete_substitution_entries(db, ids)
        db.execute(delete(Substitution).where(Substitution.id.in_(ids)))
    return ids


def commit_or_conflict(db: Session) -> None:
    """Commit, turning a uniqueness violation from a concurrent writer into a 409."""
    _write_or_conflict(db, db.commit)


def _write_or_conflict(db: Session, write) -> None:
    try:
        write()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Substitution write rejected by a uniqueness constraint: %s", exc.orig)
        raise ConflictError(
            ALREADY_ASSIGNED,
            "The lesson or the substitute's period was taken by a concurrent assignment",
        ) from exc
