import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.api.deps import get_db
from app.db.base import Base
from app.main import app
from app.models.absence import Absence
from app.models.duty import Duty, DutyLocation
from app.models.schedule import ScheduleEntry
from app.models.school import Period, SchoolClass, Subject
from app.models.teacher import Teacher

MONDAY = date(2024, 3, 4)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def school(db):
    """Ayşe (Matematik) is absent on Monday 2024-03-04 with lessons in periods 1 and 3.

    Ali (Fizik) is free all morning; Fatma (Matematik) has a duty in period 3.
    """
    ayse = Teacher(name="Ayşe", surname="Yılmaz", branch="Matematik")
    ali = Teacher(name="Ali", surname="Öztürk", branch="Fizik")
    fatma = Teacher(name="Fatma", surname="Yıldız", branch="Matematik")
    math = Subject(name="Matematik")
    class_9a = SchoolClass(name="9/A")
    class_10b = SchoolClass(name="10/B")
    periods = [
        Period(order=1, start_time="08:30", end_time="09:10"),
        Period(order=2, start_time="09:20", end_time="10:00"),
        Period(order=3, start_time="10:10", end_time="10:50"),
    ]
    hall = DutyLocation(name="A Blok - 1. Kat")
    db.add_all([ayse, ali, fatma, math, class_9a, class_10b, hall, *periods])
    db.flush()

    first = ScheduleEntry(
        teacher_id=ayse.id,
        class_id=class_9a.id,
        subject_id=math.id,
        period_id=periods[0].id,
        day_of_week=1,
    )
    third = ScheduleEntry(
        teacher_id=ayse.id,
        class_id=class_10b.id,
        subject_id=math.id,
        period_id=periods[2].id,
        day_of_week=1,
    )
    duty = Duty(teacher_id=fatma.id, location_id=hall.id, day_of_week=1, period_id=periods[2].id)
    absence = Absence(teacher_id=ayse.id, start_date=MONDAY, end_date=MONDAY, reason="Rapor")
    db.add_all([first, third, duty, absence])
    db.commit()

    return {
        "date": MONDAY.isoformat(),
        "absent_id": ayse.id,
        "ali_id": ali.id,
        "fatma_id": fatma.id,
        "period_ids": [item.id for item in periods],
        "first_entry_id": first.id,
        "third_entry_id": third.id,
        "absence_id": absence.id,
    }
