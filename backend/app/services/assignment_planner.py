from __future__ import annotations

import logging
from datetime import date

from app.core.exceptions import ConflictError, InvalidInputError
from app.services.availability import Availability, resolve_availability
from app.services.roster import (
    RosterScheduleEntry,
    RosterSnapshot,
    SubstitutionAssignment,
    day_of_week,
)

logger = logging.getLogger(__name__)

ALREADY_ASSIGNED = "already_assigned"

CONFLICT_MESSAGES = {
    Availability.absent: "{name} is absent on {date}",
    Availability.already_substituting: "{name} is already substituting in period {order} on {date}",
    Availability.has_own_class: "{name} teaches their own class in period {order}",
    Availability.on_duty: "{name} is on duty during period {order}",
}


def find_assignment(
    assignments: list[SubstitutionAssignment],
    on_date: date,
    schedule_entry_id: int,
) -> SubstitutionAssignment | None:
    for item in assignments:
        if item.date == on_date and item.schedule_entry_id == schedule_entry_id:
            return item
    return None


class AssignmentPlanner:
    """Covers an absent teacher's lessons on one date.

    Every (date, lesson) pair is either uncovered or covered by exactly one
    substitute, and a substitute never covers two lessons in the same period
    on the same date. The caller owns ``existing_assignments``; ``assign`` and
    ``unassign`` mutate it in place.
    """

    def __init__(self, roster: RosterSnapshot) -> None:
        self.roster = roster

    def coverage_needed(self, absent_teacher_id: int, on_date: date) -> list[RosterScheduleEntry]:
        self.roster.teacher(absent_teacher_id)
        weekday = day_of_week(on_date)
        entries = [
            item
            for item in self.roster.schedule
            if item.teacher_id == absent_teacher_id and item.day_of_week == weekday
        ]
        entries.sort(key=lambda item: (self.roster.period(item.period_id).order, item.id))
        return entries

    def coverage(
        self,
        absent_teacher_id: int,
        on_date: date,
        existing_assignments: list[SubstitutionAssignment],
    ) -> list[tuple[RosterScheduleEntry, SubstitutionAssignment | None]]:
        return [
            (entry, find_assignment(existing_assignments, on_date, entry.id))
            for entry in self.coverage_needed(absent_teacher_id, on_date)
        ]

    def _entry_needing_coverage(self, schedule_entry_id: int, on_date: date) -> RosterScheduleEntry:
        entry = self.roster.schedule_entry(schedule_entry_id)
        if entry.day_of_week != day_of_week(on_date) or not self.roster.is_absent(entry.teacher_id, on_date):
            raise InvalidInputError(
                f"Schedule entry {schedule_entry_id} does not need coverage on {on_date.isoformat()}",
                details={"schedule_entry_id": schedule_entry_id, "date": on_date.isoformat()},
            )
        return entry

    def assign(
        self,
        schedule_entry_id: int,
        substitute_teacher_id: int,
        on_date: date,
        existing_assignments: list[SubstitutionAssignment],
    ) -> SubstitutionAssignment:
        entry = self._entry_needing_coverage(schedule_entry_id, on_date)
        substitute = self.roster.teacher(substitute_teacher_id)
        period = self.roster.period(entry.period_id)

        status = resolve_availability(on_date, period, self.roster, existing_assignments)[substitute.id]
        if status != Availability.available:
            raise ConflictError(
                status.value,
                CONFLICT_MESSAGES[status].format(
                    name=substitute.full_name,
                    order=period.order,
                    date=on_date.isoformat(),
                ),
                details={"schedule_entry_id": entry.id, "substitute_teacher_id": substitute.id},
            )

        if find_assignment(existing_assignments, on_date, entry.id) is not None:
            raise ConflictError(
                ALREADY_ASSIGNED,
                f"Schedule entry {entry.id} is already covered on {on_date.isoformat()}; unassign it first",
                details={"schedule_entry_id": entry.id},
            )

        assignment = SubstitutionAssignment(
            absent_teacher_id=entry.teacher_id,
            substitute_teacher_id=substitute.id,
            schedule_entry_id=entry.id,
            period_id=entry.period_id,
            date=on_date,
        )
        existing_assignments.append(assignment)
        logger.debug(
            "Assigned teacher %s to schedule entry %s (period %s) on %s",
            substitute.id,
            entry.id,
            period.order,
            on_date,
        )
        return assignment

    def unassign(
        self,
        on_date: date,
        schedule_entry_id: int,
        existing_assignments: list[SubstitutionAssignment],
    ) -> SubstitutionAssignment | None:
        current = find_assignment(existing_assignments, on_date, schedule_entry_id)
        if current is None:
            return None
        existing_assignments.remove(current)
        return current
