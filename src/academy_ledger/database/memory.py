'''
In-memory LedgerRepository.

Four plain dicts keyed by id (users, subjects, lessons, payments). Used by the
service unit tests and by the demo seeding script. Every record handed in or
out is deep-copied so callers can never mutate stored state by accident.
'''
from typing import Optional
from uuid import UUID

from .db_enums import UserRole
from .repository import LedgerRepository
from ..models.user import User, StudentUser
from ..models.lesson import LessonRecord
from ..models.finance import PaymentRecord
from ..models.subject import SubjectRecord
from ..models.criteria import LessonCriteria, PaymentCriteria


class InMemoryLedgerRepository(LedgerRepository):

    def __init__(
        self,
        users: Optional[list[User]] = None,
        subjects: Optional[list[SubjectRecord]] = None,
        lessons: Optional[list[LessonRecord]] = None,
        payments: Optional[list[PaymentRecord]] = None
    ):
        self.users: dict[UUID, User] = {u.id: u.model_copy(deep=True) for u in users or []}
        self.subjects: dict[UUID, SubjectRecord] = {s.id: s.model_copy() for s in subjects or []}
        self.lessons: dict[UUID, LessonRecord] = {l.id: l.model_copy() for l in lessons or []}
        self.payments: dict[UUID, PaymentRecord] = {p.id: p.model_copy() for p in payments or []}

    # --- Users ---

    async def find_user(self, user_id: UUID) -> Optional[User]:
        user = self.users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def find_user_by_username(self, username: str) -> Optional[User]:
        user = next((u for u in self.users.values() if u.username == username), None)
        return user.model_copy(deep=True) if user else None

    async def list_users(self, role: Optional[UserRole] = None) -> list[User]:
        users = [u for u in self.users.values() if role is None or u.role == role.value]
        users.sort(key=lambda u: (u.name, u.username))
        return [u.model_copy(deep=True) for u in users]

    async def find_students_linked_to(self, teacher_id: UUID) -> list[StudentUser]:
        students = [
            u for u in self.users.values()
            if isinstance(u, StudentUser) and u.link_for(teacher_id) is not None
        ]
        students.sort(key=lambda s: s.name)
        return [s.model_copy(deep=True) for s in students]

    async def add_user(self, user: User) -> User:
        self.users[user.id] = user.model_copy(deep=True)
        return user.model_copy(deep=True)

    async def save_user(self, user: User) -> User:
        if user.id not in self.users:
            raise LookupError(f"User {user.id} does not exist.")
        self.users[user.id] = user.model_copy(deep=True)
        return user.model_copy(deep=True)

    async def delete_user(self, user_id: UUID) -> None:
        self.users.pop(user_id, None)

    async def remove_teacher_links(self, teacher_id: UUID) -> int:
        removed = 0
        for user in self.users.values():
            if isinstance(user, StudentUser):
                kept = [link for link in user.teacher_links if link.teacher_id != teacher_id]
                removed += len(user.teacher_links) - len(kept)
                user.teacher_links = kept
        return removed

    # --- Subjects ---

    async def list_subjects(self) -> list[SubjectRecord]:
        return sorted((s.model_copy() for s in self.subjects.values()), key=lambda s: s.name)

    async def find_subject(self, subject_id: UUID) -> Optional[SubjectRecord]:
        subject = self.subjects.get(subject_id)
        return subject.model_copy() if subject else None

    async def add_subject(self, subject: SubjectRecord) -> SubjectRecord:
        self.subjects[subject.id] = subject.model_copy()
        return subject.model_copy()

    async def save_subject(self, subject: SubjectRecord) -> SubjectRecord:
        if subject.id not in self.subjects:
            raise LookupError(f"Subject {subject.id} does not exist.")
        self.subjects[subject.id] = subject.model_copy()
        return subject.model_copy()

    async def delete_subject(self, subject_id: UUID) -> None:
        self.subjects.pop(subject_id, None)

    # --- Lessons ---

    async def find_lessons(self, criteria: LessonCriteria) -> list[LessonRecord]:
        found = [l for l in self.lessons.values() if criteria.matches(l)]
        found.sort(key=lambda l: (l.date, l.time))
        return [l.model_copy() for l in found]

    async def lesson_exists(self, criteria: LessonCriteria) -> bool:
        return any(criteria.matches(l) for l in self.lessons.values())

    async def add_lesson(self, lesson: LessonRecord) -> LessonRecord:
        self.lessons[lesson.id] = lesson.model_copy()
        return lesson.model_copy()

    # --- Payments ---

    async def find_payments(self, criteria: PaymentCriteria) -> list[PaymentRecord]:
        found = [p for p in self.payments.values() if criteria.matches(p)]
        found.sort(key=lambda p: p.date)
        return [p.model_copy() for p in found]

    async def add_payment(self, payment: PaymentRecord) -> PaymentRecord:
        self.payments[payment.id] = payment.model_copy()
        return payment.model_copy()
