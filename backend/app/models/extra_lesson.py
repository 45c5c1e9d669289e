from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class ExtraLessonType(str, Enum):
    substitution = "substitution"
    duty = "duty"
    manual = "manual"


class ExtraLesson(Base):
    __tablename__ = "extra_lessons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[ExtraLessonType] = mapped_column(SAEnum(ExtraLessonType, name="extra_lesson_type"), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    substitution_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
