from app.models.absence import Absence  # noqa: F401
from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.duty import Duty, DutyLocation  # noqa: F401
from app.models.extra_lesson import ExtraLesson, ExtraLessonType  # noqa: F401
from app.models.schedule import ScheduleEntry  # noqa: F401
from app.models.school import Period, SchoolClass, Subject  # noqa: F401
from app.models.substitution import Substitution  # noqa: F401
from app.models.teacher import Teacher  # noqa: F401
