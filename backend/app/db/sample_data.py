"""Sample roster for a development database.

Eight periods, nine subjects, ten classes, fourteen teachers, a Monday-Friday
schedule and daily duties. Nothing is written when teachers already exist.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.duty import Duty, DutyLocation
from app.models.schedule import ScheduleEntry
from app.models.school import Period, SchoolClass, Subject
from app.models.teacher import Teacher

logger = logging.getLogger(__name__)

PERIODS = [
    (1, "08:30", "09:10"),
    (2, "09:20", "10:00"),
    (3, "10:10", "10:50"),
    (4, "11:20", "12:00"),
    (5, "12:10", "12:50"),
    (6, "13:40", "14:20"),
    (7, "14:30", "15:10"),
    (8, "15:20", "16:00"),
]

SUBJECTS = [
    "Türk Dili ve Edebiyatı",
    "Matematik",
    "Fizik",
    "Kimya",
    "Biyoloji",
    "Tarih",
    "Coğrafya",
    "İngilizce",
    "Sosyal Bilgiler",
]

DUTY_LOCATIONS = ["A Blok - 1. Kat", "A Blok - 2. Kat", "B Blok - Giriş", "B Blok - 1. Kat", "Kantin"]

CLASSES = ["9/A", "9/B", "9/C", "10/A", "10/B", "10/C", "10/D", "11/A", "11/B", "12/A"]

TEACHERS = [
    ("Canan", "Aksoy", "Türk Dili ve Edebiyatı"),
    ("Ebru", "Çelik", "Türk Dili ve Edebiyatı"),
    ("Murat", "Yıldırım", "Biyoloji"),
    ("Ayşe", "Yılmaz", "Matematik"),
    ("Mehmet", "Kaya", "Tarih"),
    ("Ali", "Öztürk", "Fizik"),
    ("Zeynep", "Demir", "Kimya"),
    ("Hakan", "Şahin", "İngilizce"),
    ("Fatma", "Yıldız", "Matematik"),
    ("Ahmet", "Yalçın", "Coğrafya"),
    ("Selim", "Kandemir", "Sosyal Bilgiler"),
    ("Mustafa", "Koç", "Sosyal Bilgiler"),
    ("Nihal", "Tekin", "Türk Dili ve Edebiyatı"),
    ("Kemal", "Yücel", "Türk Dili ve Edebiyatı"),
]

SCHOOL_DAYS = range(1, 6)


def seed_sample_roster(db: Session) -> bool:
    if db.execute(select(func.count(Teacher.id))).scalar_one():
        logger.info("Roster already present, sample data not loaded")
        return False

    periods = [Period(order=order, start_time=start, end_time=end) for order, start, end in PERIODS]
    subjects = [Subject(name=name) for name in SUBJECTS]
    locations = [DutyLocation(name=name) for name in DUTY_LOCATIONS]
    classes = [SchoolClass(name=name) for name in CLASSES]
    teachers = [Teacher(name=name, surname=surname, branch=branch) for name, surname, branch in TEACHERS]
    db.add_all([*periods, *subjects, *locations, *classes, *teachers])
    db.flush()

    subject_by_name = {item.name: item for item in subjects}
    # Within one (day, period) the class index picks distinct teachers, so
    # nobody is scheduled twice in the same slot.
    for day in SCHOOL_DAYS:
        for period in periods:
            for index, school_class in enumerate(classes):
                teacher = teachers[(index + period.order + day) % len(teachers)]
                db.add(
                    ScheduleEntry(
                        teacher_id=teacher.id,
                        class_id=school_class.id,
                        subject_id=subject_by_name[teacher.branch].id,
                        period_id=period.id,
                        day_of_week=day,
                    )
                )
        for index, location in enumerate(locations):
            teacher = teachers[(day * len(locations) + index) % len(teachers)]
            db.add(
                Duty(
                    teacher_id=teacher.id,
                    location_id=location.id,
                    day_of_week=day,
                    period_id=None if index == 0 else periods[index * 2 - 1].id,
                )
            )
    db.commit()
    logger.info("Loaded sample roster: %d teachers, %d classes", len(teachers), len(classes))
    return True
