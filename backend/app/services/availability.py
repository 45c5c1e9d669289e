from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Iterable

from app.core.exceptions import InvalidInputError
from app.services.roster import RosterPeriod, RosterSnapshot, SubstitutionAssignment, day_of_week


class Availability(str, Enum):
    available = "available"
    absent = "absent"
    already_substituting = "already_substituting"
    has_own_class = "has_own_class"
    on_duty = "on_duty"


def _resolve_period(roster: RosterSnapshot, period: RosterPeriod | int) -> RosterPeriod:
    if isinstance(period, RosterPeriod):
        if not roster.has_period(period):
            raise InvalidInputError(
                f"Period {period.id} (order {period.order}) is not part of the school's period set",
                details={"period_id": period.id},
            )
        return period
    return roster.period(period)


def resolve_availability(
    on_date: date,
    period: RosterPeriod | int,
    roster: RosterSnapshot,
    existing_assignments: Iterable[SubstitutionAssignment] = (),
) -> dict[int, Availability]:
    """Classify every teacher for one (date, period) slot.

    Precedence is fixed, first match wins: absent, already substituting in
    this period on this date, teaching their own class, on duty (a duty
    without a period blocks the whole day), available. Teachers are returned
    in ascending id order.
    """
    weekday = day_of_week(on_date)
    slot = _resolve_period(roster, period)

    absent_ids = {item.teacher_id for item in roster.absences if item.covers(on_date)}
    substituting_ids = {
        item.substitute_teacher_id
        for item in existing_assignments
        if item.date == on_date and item.period_id == slot.id
    }
    teaching_ids = {
        item.teacher_id
        for item in roster.schedule
        if item.day_of_week == weekday and item.period_id == slot.id
    }
    duty_ids = {item.teacher_id for item in roster.duties if item.blocks(weekday, slot.id)}

    statuses: dict[int, Availability] = {}
    for teacher in roster.teachers:
        if teacher.id in absent_ids:
            statuses[teacher.id] = Availability.absent
        elif teacher.id in substituting_ids:
            statuses[teacher.id] = Availability.already_substituting
        elif teacher.id in teaching_ids:
            statuses[teacher.id] = Availability.has_own_class
        elif teacher.id in duty_ids:
            statuses[teacher.id] = Availability.on_duty
        else:
            statuses[teacher.id] = Availability.available
    return statuses


def available_teacher_ids(statuses: dict[int, Availability]) -> list[int]:
    return [teacher_id for teacher_id, status in statuses.items() if status == Availability.available]
