from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
import logging

from app.core.exceptions import InvalidInputError
from app.services.assignment_planner import AssignmentPlanner, find_assignment
from app.services.availability import available_teacher_ids, resolve_availability
from app.services.roster import RosterScheduleEntry, SubstitutionAssignment

logger = logging.getLogger(__name__)

NO_AVAILABLE_TEACHER = "no_available_teacher"


@dataclass(frozen=True)
class SkippedEntry:
    schedule_entry_id: int
    reason: str = NO_AVAILABLE_TEACHER


@dataclass
class AutoFillResult:
    assigned: list[SubstitutionAssignment] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)
    # Assignments that existed before the run; reported in ``assigned`` as-is.
    preexisting: list[SubstitutionAssignment] = field(default_factory=list)

    @property
    def created(self) -> list[SubstitutionAssignment]:
        return [item for item in self.assigned if item not in self.preexisting]


def _normalize_branch(value: str | None) -> str:
    return (value or "").strip().casefold()


def _pick_substitute(
    planner: AssignmentPlanner,
    entry: RosterScheduleEntry,
    candidate_ids: list[int],
    load: Counter,
) -> int:
    subject = _normalize_branch(planner.roster.subject_name(entry.subject_id))

    def rank(teacher_id: int) -> tuple[int, int, int]:
        branch = _normalize_branch(planner.roster.teacher(teacher_id).branch)
        branch_match = 0 if subject and branch == subject else 1
        return branch_match, load[teacher_id], teacher_id

    return min(candidate_ids, key=rank)


def auto_fill(
    planner: AssignmentPlanner,
    absent_teacher_id: int,
    on_date: date,
    existing_assignments: list[SubstitutionAssignment],
) -> AutoFillResult:
    """Greedily cover every lesson of an absent teacher, earliest period first.

    Earlier periods claim scarce teachers before later ones, and every
    assignment made here reduces availability for the rest of the run.
    Candidates are ranked by branch match with the covered subject, then by
    the number of substitutions they already hold on the date, then by id.
    A lesson nobody can take is skipped; the run never aborts on it.
    """
    teacher = planner.roster.teacher(absent_teacher_id)
    if not planner.roster.is_absent(absent_teacher_id, on_date):
        raise InvalidInputError(
            f"{teacher.full_name} is not absent on {on_date.isoformat()}",
            details={"teacher_id": absent_teacher_id, "date": on_date.isoformat()},
        )

    result = AutoFillResult()
    for entry in planner.coverage_needed(absent_teacher_id, on_date):
        current = find_assignment(existing_assignments, on_date, entry.id)
        if current is not None:
            result.assigned.append(current)
            result.preexisting.append(current)
            continue

        statuses = resolve_availability(on_date, entry.period_id, planner.roster, existing_assignments)
        candidates = available_teacher_ids(statuses)
        if not candidates:
            logger.info("No available substitute for schedule entry %s on %s", entry.id, on_date)
            result.skipped.append(SkippedEntry(schedule_entry_id=entry.id))
            continue

        load = Counter(item.substitute_teacher_id for item in existing_assignments if item.date == on_date)
        chosen = _pick_substitute(planner, entry, candidates, load)
        logger.debug(
            "Auto-fill picked teacher %s for schedule entry %s out of %d candidate(s)",
            chosen,
            entry.id,
            len(candidates),
        )
        result.assigned.append(planner.assign(entry.id, chosen, on_date, existing_assignments))

    logger.info(
        "Auto-fill for teacher %s on %s: %d assigned, %d skipped",
        absent_teacher_id,
        on_date,
        len(result.assigned),
        len(result.skipped),
    )
    return result
