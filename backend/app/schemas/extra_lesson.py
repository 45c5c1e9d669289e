from datetime import datetime
from typing import Literal

from pydantic import Field

from app.models.extra_lesson import ExtraLessonType
from app.schemas.common import CamelModel


class ExtraLessonCreate(CamelModel):
    teacher_id: int = Field(ge=1)
    count: int = Field(ge=-50, le=50)
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)
    type: Literal["duty", "manual"] = "manual"
    notes: str | None = Field(default=None, max_length=1000)


class ExtraLessonOut(CamelModel):
    id: int
    teacher_id: int
    count: int
    month: int
    year: int
    type: ExtraLessonType
    notes: str | None = None
    substitution_id: int | None = None
    created_at: datetime | None = None


class ExtraLessonTotalOut(CamelModel):
    teacher_id: int
    teacher_name: str
    month: int
    year: int
    total: int
    substitution: int
    duty: int
    manual: int
