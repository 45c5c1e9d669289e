from datetime import date, datetime

from pydantic import Field, model_validator

from app.schemas.common import CamelModel


class AbsenceCreate(CamelModel):
    teacher_id: int = Field(ge=1)
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=1000)
    reported_by: str | None = Field(default=None, max_length=200)

    @model_validator(mode="after")
    def validate_range(self) -> "AbsenceCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class AbsenceOut(CamelModel):
    id: int
    teacher_id: int
    teacher_name: str | None = None
    start_date: date
    end_date: date
    reason: str | None = None
    created_at: datetime | None = None


class AbsenceDeleteOut(CamelModel):
    id: int
    removed_substitution_ids: list[int]
