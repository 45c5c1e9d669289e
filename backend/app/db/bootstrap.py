from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine

from app import models  # noqa: F401
from app.db.base import Base
from app.db.session import engine as default_engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "teachers": {"id", "name", "surname", "branch"},
    "periods": {"id", "order", "start_time", "end_time"},
    "schedules": {"id", "teacher_id", "class_id", "subject_id", "period_id", "day_of_week"},
    "duties": {"id", "teacher_id", "location_id", "day_of_week", "period_id"},
    "absences": {"id", "teacher_id", "start_date", "end_date"},
    "substitutions": {
        "id",
        "absent_teacher_id",
        "substitute_teacher_id",
        "schedule_id",
        "period_id",
        "date",
    },
    "extra_lessons": {"id", "teacher_id", "count", "month", "year", "type", "substitution_id"},
}


def find_schema_gaps(connection: Connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables = sorted(name for name in REQUIRED_COLUMNS if name not in table_names)
    missing_columns: dict[str, list[str]] = {}
    for table_name, required in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(required - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns


def ensure_schema(engine: Engine | None = None) -> None:
    target = engine or default_engine
    try:
        Base.metadata.create_all(bind=target)
        with target.connect() as connection:
            missing_tables, missing_columns = find_schema_gaps(connection)
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Schema bootstrap failed")
        raise RuntimeError("Schema bootstrap failed") from exc

    if missing_tables:
        raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
    if missing_columns:
        flat = [f"{table}.{column}" for table, columns in missing_columns.items() for column in columns]
        raise RuntimeError(f"Missing required columns: {', '.join(flat)}")
    logger.info("Database schema ready (%d tables)", len(Base.metadata.tables))
