from datetime import date, datetime

from pydantic import Field

from app.schemas.common import CamelModel
from app.services.availability import Availability


class TeacherAvailabilityOut(CamelModel):
    teacher_id: int
    teacher_name: str
    branch: str
    status: Availability


class SubstitutionCreate(CamelModel):
    date: date
    schedule_entry_id: int = Field(ge=1)
    substitute_teacher_id: int = Field(ge=1)
    assigned_by: str | None = Field(default=None, max_length=200)


class AutoFillRequest(CamelModel):
    date: date
    absent_teacher_id: int = Field(ge=1)
    assigned_by: str | None = Field(default=None, max_length=200)


class SubstitutionOut(CamelModel):
    id: int | None = None
    date: date
    absent_teacher_id: int
    absent_teacher_name: str | None = None
    substitute_teacher_id: int
    substitute_teacher_name: str | None = None
    schedule_entry_id: int
    period_id: int
    period_order: int | None = None
    class_name: str | None = None
    subject_name: str | None = None
    assigned_by: str | None = None
    created_at: datetime | None = None


class CoverageItemOut(CamelModel):
    schedule_entry_id: int
    period_id: int
    period_order: int
    start_time: str
    end_time: str
    class_name: str | None = None
    subject_name: str | None = None
    substitution: SubstitutionOut | None = None


class SkippedEntryOut(CamelModel):
    schedule_entry_id: int
    reason: str


class AutoFillOut(CamelModel):
    assigned: list[SubstitutionOut]
    skipped: list[SkippedEntryOut]
