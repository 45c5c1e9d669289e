from sqlalchemy import Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class ScheduleEntry(Base):
    __tablename__ = "schedules"
    __table_args__ = (
        UniqueConstraint("teacher_id", "period_id", "day_of_week", name="uq_schedule_teacher_slot"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    class_id: Mapped[int] = mapped_column(Integer, nullable=False)
    subject_id: Mapped[int] = mapped_column(Integer, nullable=False)
    period_id: Mapped[int] = mapped_column(Integer, nullable=False)
    # ISO weekday: 1 (Pazartesi) .. 7 (Pazar)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
