from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.models.extra_lesson import ExtraLesson, ExtraLessonType
from app.models.substitution import Substitution
from app.services.roster import RosterSnapshot


def record_substitution_entries(db: Session, record: Substitution, roster: RosterSnapshot) -> list[ExtraLesson]:
    """Write the +1 / -1 extra-lesson pair for one covered lesson."""
    day = record.date.strftime("%d.%m.%Y")
    absent = roster.teacher(record.absent_teacher_id)
    substitute = roster.teacher(record.substitute_teacher_id)
    entries = [
        ExtraLesson(
            teacher_id=record.substitute_teacher_id,
            count=1,
            month=record.date.month,
            year=record.date.year,
            type=ExtraLessonType.substitution,
            notes=f"Yerine görevlendirme: {day} ({absent.full_name})",
            substitution_id=record.id,
        ),
        ExtraLesson(
            teacher_id=record.absent_teacher_id,
            count=-1,
            month=record.date.month,
            year=record.date.year,
            type=ExtraLessonType.substitution,
            notes=f"İzin nedeniyle kesinti: {day} ({substitute.full_name})",
            substitution_id=record.id,
        ),
    ]
    db.add_all(entries)
    return entries


def delete_substitution_entries(db: Session, substitution_ids: Iterable[int]) -> None:
    ids = list(substitution_ids)
    if ids:
        db.execute(delete(ExtraLesson).where(ExtraLesson.substitution_id.in_(ids)))


def list_extra_lessons(
    db: Session,
    *,
    teacher_id: int | None = None,
    month: int | None = None,
    year: int | None = None,
) -> list[ExtraLesson]:
    query = select(ExtraLesson)
    if teacher_id is not None:
        query = query.where(ExtraLesson.teacher_id == teacher_id)
    if month is not None:
        query = query.where(ExtraLesson.month == month)
    if year is not None:
        query = query.where(ExtraLesson.year == year)
    return list(db.execute(query.order_by(ExtraLesson.year, ExtraLesson.month, ExtraLesson.id)).scalars())


def monthly_totals(entries: Iterable[ExtraLesson]) -> dict[int, dict[str, int]]:
    totals: dict[int, dict[str, int]] = defaultdict(lambda: {"total": 0, "substitution": 0, "duty": 0, "manual": 0})
    for item in entries:
        bucket = totals[item.teacher_id]
        bucket["total"] += item.count
        bucket[item.type.value] += item.count
    return dict(totals)
