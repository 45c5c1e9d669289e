"""In-memory roster snapshot consumed by the substitution engine.

The engine never talks to the database. Callers read the tables once per
operation into a :class:`RosterSnapshot` and hand it, together with the
assignments already made for the date, to the resolver/planner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable

from app.core.exceptions import InvalidInputError, ResourceNotFoundError


def day_of_week(value: date) -> int:
    """ISO weekday of a calendar date: 1 = Monday (Pazartesi) .. 7 = Sunday (Pazar)."""
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        raise InvalidInputError(f"Expected a calendar date, got {value!r}")
    return value.isoweekday()


@dataclass(frozen=True)
class RosterTeacher:
    id: int
    name: str
    surname: str
    branch: str

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"


@dataclass(frozen=True)
class RosterPeriod:
    id: int
    order: int
    start_time: str
    end_time: str


@dataclass(frozen=True)
class RosterScheduleEntry:
    id: int
    teacher_id: int
    class_id: int
    subject_id: int
    period_id: int
    day_of_week: int


@dataclass(frozen=True)
class RosterDuty:
    id: int
    teacher_id: int
    location_id: int
    day_of_week: int
    period_id: int | None = None

    def blocks(self, weekday: int, period_id: int) -> bool:
        return self.day_of_week == weekday and (self.period_id is None or self.period_id == period_id)


@dataclass(frozen=True)
class RosterAbsence:
    id: int
    teacher_id: int
    start_date: date
    end_date: date
    reason: str | None = None

    def covers(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date


@dataclass(frozen=True)
class SubstitutionAssignment:
    absent_teacher_id: int
    substitute_teacher_id: int
    schedule_entry_id: int
    period_id: int
    date: date
    id: int | None = None


@dataclass(frozen=True)
class RosterSnapshot:
    teachers: tuple[RosterTeacher, ...] = ()
    periods: tuple[RosterPeriod, ...] = ()
    schedule: tuple[RosterScheduleEntry, ...] = ()
    duties: tuple[RosterDuty, ...] = ()
    absences: tuple[RosterAbsence, ...] = ()
    subject_names: dict[int, str] = field(default_factory=dict)
    class_names: dict[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Lookups are built once; the snapshot itself stays immutable.
        object.__setattr__(self, "teachers", tuple(sorted(self.teachers, key=lambda item: item.id)))
        object.__setattr__(self, "_teacher_by_id", {item.id: item for item in self.teachers})
        object.__setattr__(self, "_period_by_id", {item.id: item for item in self.periods})
        object.__setattr__(self, "_entry_by_id", {item.id: item for item in self.schedule})

    @classmethod
    def build(
        cls,
        *,
        teachers: Iterable[RosterTeacher],
        periods: Iterable[RosterPeriod],
        schedule: Iterable[RosterScheduleEntry] = (),
        duties: Iterable[RosterDuty] = (),
        absences: Iterable[RosterAbsence] = (),
        subject_names: dict[int, str] | None = None,
        class_names: dict[int, str] | None = None,
    ) -> "RosterSnapshot":
        return cls(
            teachers=tuple(teachers),
            periods=tuple(periods),
            schedule=tuple(schedule),
            duties=tuple(duties),
            absences=tuple(absences),
            subject_names=dict(subject_names or {}),
            class_names=dict(class_names or {}),
        )

    def teacher(self, teacher_id: int) -> RosterTeacher:
        teacher = self._teacher_by_id.get(teacher_id)
        if teacher is None:
            raise ResourceNotFoundError("Teacher", teacher_id)
        return teacher

    def period(self, period_id: int) -> RosterPeriod:
        period = self._period_by_id.get(period_id)
        if period is None:
            raise ResourceNotFoundError("Period", period_id)
        return period

    def schedule_entry(self, entry_id: int) -> RosterScheduleEntry:
        entry = self._entry_by_id.get(entry_id)
        if entry is None:
            raise ResourceNotFoundError("Schedule entry", entry_id)
        return entry

    def has_period(self, period: RosterPeriod) -> bool:
        return self._period_by_id.get(period.id) == period

    def subject_name(self, subject_id: int) -> str:
        return self.subject_names.get(subject_id, "")

    def is_absent(self, teacher_id: int, value: date) -> bool:
        return any(item.teacher_id == teacher_id and item.covers(value) for item in self.absences)
