from datetime import date, datetime
import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.exceptions import ConflictError
from app.schemas.substitution import (
    AutoFillOut,
    AutoFillRequest,
    CoverageItemOut,
    SkippedEntryOut,
    SubstitutionCreate,
    SubstitutionOut,
    TeacherAvailabilityOut,
)
from app.services.assignment_planner import AssignmentPlanner
from app.services.audit import log_activity
from app.services.auto_fill import auto_fill
from app.services.availability import resolve_availability
from app.services.roster import RosterSnapshot, SubstitutionAssignment
from app.services.roster_store import (
    commit_or_conflict,
    list_substitutions,
    load_assignments,
    load_roster,
    persist_assignment,
    remove_substitution,
    to_assignment,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _build_substitution_out(
    assignment: SubstitutionAssignment,
    roster: RosterSnapshot,
    *,
    record_id: int | None = None,
    assigned_by: str | None = None,
    created_at: datetime | None = None,
) -> SubstitutionOut:
    entry = roster.schedule_entry(assignment.schedule_entry_id)
    return SubstitutionOut(
        id=record_id if record_id is not None else assignment.id,
        date=assignment.date,
        absent_teacher_id=assignment.absent_teacher_id,
        absent_teacher_name=roster.teacher(assignment.absent_teacher_id).full_name,
        substitute_teacher_id=assignment.substitute_teacher_id,
        substitute_teacher_name=roster.teacher(assignment.substitute_teacher_id).full_name,
        schedule_entry_id=assignment.schedule_entry_id,
        period_id=assignment.period_id,
        period_order=roster.period(assignment.period_id).order,
        class_name=roster.class_names.get(entry.class_id),
        subject_name=roster.subject_names.get(entry.subject_id),
        assigned_by=assigned_by,
        created_at=created_at,
    )


@router.get("/substitutions/availability", response_model=list[TeacherAvailabilityOut])
def get_availability(
    on_date: date = Query(alias="date"),
    period_id: int = Query(ge=1),
    db: Session = Depends(get_db),
) -> list[TeacherAvailabilityOut]:
    roster = load_roster(db)
    statuses = resolve_availability(on_date, period_id, roster, load_assignments(db, on_date))
    output: list[TeacherAvailabilityOut] = []
    for teacher_id, availability in statuses.items():
        teacher = roster.teacher(teacher_id)
        output.append(
            TeacherAvailabilityOut(
                teacher_id=teacher.id,
                teacher_name=teacher.full_name,
                branch=teacher.branch,
                status=availability,
            )
        )
    return output


@router.get("/substitutions", response_model=list[SubstitutionOut])
def list_substitutions_for_date(
    on_date: date = Query(alias="date"),
    db: Session = Depends(get_db),
) -> list[SubstitutionOut]:
    roster = load_roster(db)
    return [
        _build_substitution_out(
            to_assignment(record),
            roster,
            assigned_by=record.assigned_by,
            created_at=record.created_at,
        )
        for record in list_substitutions(db, on_date)
    ]


@router.get("/substitutions/coverage", response_model=list[CoverageItemOut])
def get_coverage(
    on_date: date = Query(alias="date"),
    absent_teacher_id: int = Query(ge=1),
    db: Session = Depends(get_db),
) -> list[CoverageItemOut]:
    roster = load_roster(db)
    planner = AssignmentPlanner(roster)
    output: list[CoverageItemOut] = []
    for entry, assignment in planner.coverage(absent_teacher_id, on_date, load_assignments(db, on_date)):
        period = roster.period(entry.period_id)
        output.append(
            CoverageItemOut(
                schedule_entry_id=entry.id,
                period_id=period.id,
                period_order=period.order,
                start_time=period.start_time,
                end_time=period.end_time,
                class_name=roster.class_names.get(entry.class_id),
                subject_name=roster.subject_names.get(entry.subject_id),
                substitution=_build_substitution_out(assignment, roster) if assignment else None,
            )
        )
    return output


@router.post("/substitutions", response_model=SubstitutionOut, status_code=status.HTTP_201_CREATED)
def create_substitution(payload: SubstitutionCreate, db: Session = Depends(get_db)) -> SubstitutionOut:
    roster = load_roster(db)
    planner = AssignmentPlanner(roster)
    assignments = load_assignments(db, payload.date)
    try:
        assignment = planner.assign(
            payload.schedule_entry_id,
            payload.substitute_teacher_id,
            payload.date,
            assignments,
        )
    except ConflictError as exc:
        logger.info("Substitution rejected (%s): %s", exc.reason, exc.message)
        raise

    record = persist_assignment(db, assignment, roster, assigned_by=payload.assigned_by)
    log_activity(
        db,
        actor=payload.assigned_by,
        action="substitution.assign",
        entity_type="schedule_entry",
        entity_id=assignment.schedule_entry_id,
        details={
            "date": payload.date.isoformat(),
            "absent_teacher_id": assignment.absent_teacher_id,
            "substitute_teacher_id": assignment.substitute_teacher_id,
        },
    )
    commit_or_conflict(db)
    db.refresh(record)
    return _build_substitution_out(
        assignment,
        roster,
        record_id=record.id,
        assigned_by=record.assigned_by,
        created_at=record.created_at,
    )


@router.delete("/substitutions/{on_date}/{schedule_entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_substitution(on_date: date, schedule_entry_id: int, db: Session = Depends(get_db)) -> Response:
    planner = AssignmentPlanner(load_roster(db))
    unassigned = planner.unassign(on_date, schedule_entry_id, load_assignments(db, on_date))
    removed = remove_substitution(db, unassigned.id) if unassigned is not None else None
    if removed is not None:
        log_activity(
            db,
            actor=removed.assigned_by,
            action="substitution.unassign",
            entity_type="schedule_entry",
            entity_id=schedule_entry_id,
            details={
                "date": on_date.isoformat(),
                "substitute_teacher_id": removed.substitute_teacher_id,
            },
        )
        db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/substitutions/auto-fill", response_model=AutoFillOut)
def run_auto_fill(payload: AutoFillRequest, db: Session = Depends(get_db)) -> AutoFillOut:
    roster = load_roster(db)
    planner = AssignmentPlanner(roster)
    assignments = load_assignments(db, payload.date)
    result = auto_fill(planner, payload.absent_teacher_id, payload.date, assignments)

    for assignment in result.created:
        persist_assignment(db, assignment, roster, assigned_by=payload.assigned_by)
    log_activity(
        db,
        actor=payload.assigned_by,
        action="substitution.auto_fill",
        entity_type="teacher",
        entity_id=payload.absent_teacher_id,
        details={
            "date": payload.date.isoformat(),
            "assigned": [item.schedule_entry_id for item in result.assigned],
            "skipped": [item.schedule_entry_id for item in result.skipped],
        },
    )
    commit_or_conflict(db)

    # Stored rows carry ids and audit fields for new and earlier coverage alike.
    records = {item.schedule_id: item for item in list_substitutions(db, payload.date)}
    assigned: list[SubstitutionOut] = []
    for assignment in result.assigned:
        record = records[assignment.schedule_entry_id]
        assigned.append(
            _build_substitution_out(
                assignment,
                roster,
                record_id=record.id,
                assigned_by=record.assigned_by,
                created_at=record.created_at,
            )
        )
    return AutoFillOut(
        assigned=assigned,
        skipped=[
            SkippedEntryOut(schedule_entry_id=item.schedule_entry_id, reason=item.reason)
            for item in result.skipped
        ],
    )
