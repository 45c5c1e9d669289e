from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.exceptions import ResourceNotFoundError
from app.models.extra_lesson import ExtraLesson, ExtraLessonType
from app.models.teacher import Teacher
from app.schemas.extra_lesson import ExtraLessonCreate, ExtraLessonOut, ExtraLessonTotalOut
from app.services.extra_lessons import list_extra_lessons, monthly_totals

router = APIRouter()


@router.get("/extra-lessons", response_model=list[ExtraLessonOut])
def get_extra_lessons(
    teacher_id: int | None = Query(default=None, ge=1),
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=2000, le=2100),
    db: Session = Depends(get_db),
) -> list[ExtraLessonOut]:
    return list_extra_lessons(db, teacher_id=teacher_id, month=month, year=year)


@router.get("/extra-lessons/summary", response_model=list[ExtraLessonTotalOut])
def get_extra_lesson_summary(
    month: int = Query(ge=1, le=12),
    year: int = Query(ge=2000, le=2100),
    db: Session = Depends(get_db),
) -> list[ExtraLessonTotalOut]:
    totals = monthly_totals(list_extra_lessons(db, month=month, year=year))
    teachers = {
        item.id: item
        for item in db.execute(select(Teacher).where(Teacher.id.in_(list(totals)))).scalars()
    }
    output: list[ExtraLessonTotalOut] = []
    for teacher_id in sorted(totals):
        teacher = teachers.get(teacher_id)
        output.append(
            ExtraLessonTotalOut(
                teacher_id=teacher_id,
                teacher_name=teacher.full_name if teacher else str(teacher_id),
                month=month,
                year=year,
                **totals[teacher_id],
            )
        )
    return output


@router.post("/extra-lessons", response_model=ExtraLessonOut, status_code=status.HTTP_201_CREATED)
def create_extra_lesson(payload: ExtraLessonCreate, db: Session = Depends(get_db)) -> ExtraLessonOut:
    if db.get(Teacher, payload.teacher_id) is None:
        raise ResourceNotFoundError("Teacher", payload.teacher_id)
    record = ExtraLesson(
        teacher_id=payload.teacher_id,
        count=payload.count,
        month=payload.month,
        year=payload.year,
        type=ExtraLessonType(payload.type),
        notes=payload.notes,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record
