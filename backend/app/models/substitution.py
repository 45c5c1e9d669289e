import datetime as dt

from sqlalchemy import Date, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class Substitution(Base):
    __tablename__ = "substitutions"
    __table_args__ = (
        UniqueConstraint("date", "schedule_id", name="uq_substitution_lesson"),
        UniqueConstraint("date", "substitute_teacher_id", "period_id", name="uq_substitution_teacher_period"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    absent_teacher_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    substitute_teacher_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    schedule_id: Mapped[int] = mapped_column(Integer, nullable=False)
    period_id: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    assigned_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
