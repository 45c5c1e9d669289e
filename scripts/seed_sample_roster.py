"""Load the sample school roster into the configured database.

Run:
  PYTHONPATH=backend python scripts/seed_sample_roster.py
"""

from __future__ import annotations

from sqlalchemy import func, select

from app.db.bootstrap import ensure_schema
from app.db.sample_data import seed_sample_roster
from app.db.session import SessionLocal
from app.models.duty import Duty
from app.models.schedule import ScheduleEntry
from app.models.teacher import Teacher


def _print_counts(session) -> None:
    for label, model in (("teachers", Teacher), ("schedule entries", ScheduleEntry), ("duties", Duty)):
        total = session.execute(select(func.count(model.id))).scalar_one()
        print(f"{label:>17}: {total}")


def main() -> None:
    ensure_schema()
    with SessionLocal() as session:
        loaded = seed_sample_roster(session)
        print("Sample roster loaded." if loaded else "Roster already present, nothing loaded.")
        _print_counts(session)


if __name__ == "__main__":
    main()
