from datetime import date, timedelta
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.exceptions import ResourceNotFoundError
from app.models.absence import Absence
from app.models.teacher import Teacher
from app.schemas.absence import AbsenceCreate, AbsenceDeleteOut, AbsenceOut
from app.services.audit import log_activity
from app.services.roster_store import remove_substitutions_for_teacher

router = APIRouter()
logger = logging.getLogger(__name__)


def _absence_out(absence: Absence, teacher: Teacher | None) -> AbsenceOut:
    return AbsenceOut(
        id=absence.id,
        teacher_id=absence.teacher_id,
        teacher_name=teacher.full_name if teacher else None,
        start_date=absence.start_date,
        end_date=absence.end_date,
        reason=absence.reason,
        created_at=absence.created_at,
    )


def _dates_between(start: date, end: date) -> list[date]:
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


@router.get("/absences", response_model=list[AbsenceOut])
def list_absences(
    on_date: date | None = Query(default=None, alias="date"),
    teacher_id: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
) -> list[AbsenceOut]:
    query = select(Absence)
    if on_date is not None:
        query = query.where(Absence.start_date <= on_date, Absence.end_date >= on_date)
    if teacher_id is not None:
        query = query.where(Absence.teacher_id == teacher_id)
    absences = list(db.execute(query.order_by(Absence.start_date, Absence.id)).scalars())

    teacher_ids = {item.teacher_id for item in absences}
    teachers = {
        item.id: item
        for item in db.execute(select(Teacher).where(Teacher.id.in_(teacher_ids))).scalars()
    }
    return [_absence_out(item, teachers.get(item.teacher_id)) for item in absences]


@router.post("/absences", response_model=AbsenceOut, status_code=status.HTTP_201_CREATED)
def create_absence(payload: AbsenceCreate, db: Session = Depends(get_db)) -> AbsenceOut:
    teacher = db.get(Teacher, payload.teacher_id)
    if teacher is None:
        raise ResourceNotFoundError("Teacher", payload.teacher_id)

    absence = Absence(
        teacher_id=teacher.id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=(payload.reason or "").strip() or None,
    )
    db.add(absence)
    db.flush()
    log_activity(
        db,
        actor=payload.reported_by,
        action="absence.create",
        entity_type="absence",
        entity_id=absence.id,
        details={
            "teacher_id": teacher.id,
            "start_date": payload.start_date.isoformat(),
            "end_date": payload.end_date.isoformat(),
        },
    )
    db.commit()
    db.refresh(absence)
    return _absence_out(absence, teacher)


@router.delete("/absences/{absence_id}", response_model=AbsenceDeleteOut)
def delete_absence(
    absence_id: int,
    reported_by: str | None = Query(default=None, alias="reportedBy", max_length=200),
    db: Session = Depends(get_db),
) -> AbsenceDeleteOut:
    absence = db.get(Absence, absence_id)
    if absence is None:
        raise ResourceNotFoundError("Absence", absence_id)

    # Dates still covered by another absence of the same teacher keep their substitutes.
    others = list(
        db.execute(
            select(Absence).where(
                Absence.teacher_id == absence.teacher_id,
                Absence.id != absence.id,
                Absence.start_date <= absence.end_date,
                Absence.end_date >= absence.start_date,
            )
        ).scalars()
    )
    orphaned = [
        day
        for day in _dates_between(absence.start_date, absence.end_date)
        if not any(other.start_date <= day <= other.end_date for other in others)
    ]
    removed_ids = remove_substitutions_for_teacher(db, absence.teacher_id, orphaned)
    if removed_ids:
        logger.info(
            "Deleting absence %s removed %d substitution(s) for teacher %s",
            absence.id,
            len(removed_ids),
            absence.teacher_id,
        )

    log_activity(
        db,
        actor=reported_by,
        action="absence.delete",
        entity_type="absence",
        entity_id=absence.id,
        details={"teacher_id": absence.teacher_id, "removed_substitution_ids": removed_ids},
    )
    db.delete(absence)
    db.commit()
    return AbsenceDeleteOut(id=absence_id, removed_substitution_ids=removed_ids)
