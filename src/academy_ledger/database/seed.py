'''
Startup and demo data.

ensure_bootstrap_admin() guarantees there is always an admin to log in with.
seed_demo_data() fills an empty store with a small academy (two teachers,
three students, a subject catalog and a handful of lessons) by going through
the regular services, so every integrity rule and the pricing resolver apply.
'''
import datetime
from decimal import Decimal
from typing import Optional

from .repository import LedgerRepository
from .db_enums import UserRole, AttendanceStatus
from ..models import user as user_models
from ..models.user import AdminUser, TeacherLink
from ..models.lesson import LessonCreate
from ..models.subject import SubjectWrite
from ..services.user_service import UserService
from ..services.subject_service import SubjectService
from ..services.pricing_service import PricingResolver
from ..services.finance_service import LessonService
from ..common.config import settings
from ..common.logger import log

DEMO_PASSWORD = "password"

DEMO_SUBJECTS = ["Mathematics", "Science", "History", "English", "Art", "Physical Education"]


async def ensure_bootstrap_admin(repo: LedgerRepository) -> Optional[AdminUser]:
    """Creates the configured first admin when the store holds no admin at all."""
    if await repo.list_users(UserRole.ADMIN):
        return None
    log.info(f"No admin found; creating bootstrap admin '{settings.FIRST_ADMIN_USERNAME}'.")
    return await UserService(repo).create_user(user_models.AdminCreate(
        role=UserRole.ADMIN.value,
        username=settings.FIRST_ADMIN_USERNAME,
        password=settings.FIRST_ADMIN_PASSWORD,
        name=settings.FIRST_ADMIN_NAME
    ))


async def seed_demo_data(repo: LedgerRepository, month: Optional[datetime.date] = None) -> dict[str, int]:
    """
    Seeds the demo academy into `repo`. Lessons fall in the month of `month`
    (default: the current month). Returns how many records of each kind were
    created. Refuses to run against a store that already has teachers.
    """
    if await repo.list_users(UserRole.TEACHER):
        log.warning("Store already contains teachers; skipping demo seeding.")
        return {"users": 0, "subjects": 0, "lessons": 0}

    user_service = UserService(repo)
    subject_service = SubjectService(repo)
    lesson_service = LessonService(repo, PricingResolver(repo), subject_service)

    created_users = 1 if await ensure_bootstrap_admin(repo) else 0

    for name in DEMO_SUBJECTS:
        await subject_service.create_subject(SubjectWrite(name=name))

    john = await user_service.create_user(user_models.TeacherCreate(
        role=UserRole.TEACHER.value, username="teacher1", password=DEMO_PASSWORD,
        name="John Doe", default_session_price=Decimal("100")
    ))
    jane = await user_service.create_user(user_models.TeacherCreate(
        role=UserRole.TEACHER.value, username="teacher2", password=DEMO_PASSWORD,
        name="Jane Smith", default_session_price=Decimal("120")
    ))
    alice = await user_service.create_user(user_models.StudentCreate(
        role=UserRole.STUDENT.value, username="student1", password=DEMO_PASSWORD, name="Alice",
        teacher_links=[TeacherLink(teacher_id=john.id, session_price=Decimal("100"))]
    ))
    bob = await user_service.create_user(user_models.StudentCreate(
        role=UserRole.STUDENT.value, username="student2", password=DEMO_PASSWORD, name="Bob",
        teacher_links=[
            TeacherLink(teacher_id=john.id, session_price=Decimal("110")),
            TeacherLink(teacher_id=jane.id, session_price=Decimal("120")),
        ]
    ))
    charlie = await user_service.create_user(user_models.StudentCreate(
        role=UserRole.STUDENT.value, username="student3", password=DEMO_PASSWORD, name="Charlie",
        teacher_links=[TeacherLink(teacher_id=jane.id, session_price=Decimal("125"))]
    ))
    created_users += 5

    month = (month or datetime.date.today()).replace(day=1)
    lessons = [
        (john, alice, "Mathematics", 10, datetime.time(10, 0), AttendanceStatus.PRESENT),
        (john, bob, "Science", 11, datetime.time(11, 0), AttendanceStatus.PRESENT),
        (john, alice, "Mathematics", 17, datetime.time(10, 0), AttendanceStatus.ABSENT),
        (jane, charlie, "History", 12, datetime.time(9, 0), AttendanceStatus.PRESENT),
        (jane, bob, "Art", 15, datetime.time(14, 0), AttendanceStatus.PRESENT),
    ]
    for teacher, student, subject, day, at, status in lessons:
        await lesson_service.create_lesson(
            LessonCreate(student_id=student.id, subject=subject, date=month.replace(day=day), time=at, status=status),
            current_user=teacher
        )

    summary = {"users": created_users, "subjects": len(DEMO_SUBJECTS), "lessons": len(lessons)}
    log.info(f"Demo data seeded: {summary}")
    return summary
