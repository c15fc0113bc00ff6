'''
Repository layer.

LedgerRepository is the storage-agnostic interface every service depends on.
The ledger engine itself only ever calls find_lessons, find_payments and
find_user; the remaining methods serve the directory, subject, lesson and
payment write paths.

SQLAlchemyLedgerRepository is the production implementation over an
AsyncSession; see database/memory.py for the in-memory one.
'''
import abc
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, with_polymorphic

from .engine import get_db_session
from . import models as db_models
from .db_enums import UserRole
from ..models.user import User, AdminUser, TeacherUser, StudentUser, USER_MODEL_FOR_ROLE
from ..models.lesson import LessonRecord
from ..models.finance import PaymentRecord
from ..models.subject import SubjectRecord
from ..models.criteria import LessonCriteria, PaymentCriteria
from ..common.logger import log


class LedgerRepository(abc.ABC):
    """Abstract store for users, subjects, lessons and payments."""

    # --- Users ---
    @abc.abstractmethod
    async def find_user(self, user_id: UUID) -> Optional[User]: ...

    @abc.abstractmethod
    async def find_user_by_username(self, username: str) -> Optional[User]: ...

    @abc.abstractmethod
    async def list_users(self, role: Optional[UserRole] = None) -> list[User]: ...

    @abc.abstractmethod
    async def find_students_linked_to(self, teacher_id: UUID) -> list[StudentUser]: ...

    @abc.abstractmethod
    async def add_user(self, user: User) -> User: ...

    @abc.abstractmethod
    async def save_user(self, user: User) -> User: ...

    @abc.abstractmethod
    async def delete_user(self, user_id: UUID) -> None: ...

    @abc.abstractmethod
    async def remove_teacher_links(self, teacher_id: UUID) -> int:
        """Removes `teacher_id` from every student's links; returns how many were removed."""

    # --- Subjects ---
    @abc.abstractmethod
    async def list_subjects(self) -> list[SubjectRecord]: ...

    @abc.abstractmethod
    async def find_subject(self, subject_id: UUID) -> Optional[SubjectRecord]: ...

    @abc.abstractmethod
    async def add_subject(self, subject: SubjectRecord) -> SubjectRecord: ...

    @abc.abstractmethod
    async def save_subject(self, subject: SubjectRecord) -> SubjectRecord: ...

    @abc.abstractmethod
    async def delete_subject(self, subject_id: UUID) -> None: ...

    # --- Lessons ---
    @abc.abstractmethod
    async def find_lessons(self, criteria: LessonCriteria) -> list[LessonRecord]:
        """Returns the matching lessons ordered by date, then time."""

    @abc.abstractmethod
    async def lesson_exists(self, criteria: LessonCriteria) -> bool: ...

    @abc.abstractmethod
    async def add_lesson(self, lesson: LessonRecord) -> LessonRecord: ...

    # --- Payments ---
    @abc.abstractmethod
    async def find_payments(self, criteria: PaymentCriteria) -> list[PaymentRecord]:
        """Returns the matching payments ordered by date."""

    @abc.abstractmethod
    async def add_payment(self, payment: PaymentRecord) -> PaymentRecord: ...


# Every user query loads all subclasses plus the students' teacher links
_all_users = with_polymorphic(db_models.Users, "*")


class SQLAlchemyLedgerRepository(LedgerRepository):
    """
    Repository over one AsyncSession. It only flushes; committing or rolling
    back is owned by whoever owns the session (get_db_session per request).
    """
    def __init__(self, db: AsyncSession):
        self.db = db

    # --- ORM <-> record helpers ---

    @staticmethod
    def _select_users():
        return select(_all_users).options(
            selectinload(_all_users.Students.teacher_links)
        ).execution_options(populate_existing=True)

    @staticmethod
    def _to_user(orm_user: db_models.Users) -> User:
        return USER_MODEL_FOR_ROLE[orm_user.role].model_validate(orm_user)

    async def _get_orm_user(self, user_id: UUID) -> Optional[db_models.Users]:
        # populate_existing refreshes objects (and their selectin-loaded links)
        # that an earlier bulk statement in this session may have made stale.
        stmt = self._select_users().filter(_all_users.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    @staticmethod
    def _lesson_filters(criteria: LessonCriteria) -> list:
        filters = []
        if criteria.teacher_id is not None:
            filters.append(db_models.Lessons.teacher_id == criteria.teacher_id)
        if criteria.student_id is not None:
            filters.append(db_models.Lessons.student_id == criteria.student_id)
        if criteria.status is not None:
            filters.append(db_models.Lessons.status == criteria.status.value)
        if criteria.subject is not None:
            filters.append(db_models.Lessons.subject == criteria.subject)
        # Dates are whole calendar days, so the floored/ceiled bounds reduce
        # to inclusive comparisons on the day itself.
        if criteria.window.start_date is not None:
            filters.append(db_models.Lessons.date >= criteria.window.start_date)
        if criteria.window.end_date is not None:
            filters.append(db_models.Lessons.date <= criteria.window.end_date)
        return filters

    # --- Users ---

    async def find_user(self, user_id: UUID) -> Optional[User]:
        orm_user = await self._get_orm_user(user_id)
        return self._to_user(orm_user) if orm_user else None

    async def find_user_by_username(self, username: str) -> Optional[User]:
        stmt = self._select_users().filter(_all_users.username == username)
        orm_user = (await self.db.execute(stmt)).scalars().first()
        return self._to_user(orm_user) if orm_user else None

    async def list_users(self, role: Optional[UserRole] = None) -> list[User]:
        stmt = self._select_users()
        if role is not None:
            stmt = stmt.filter(_all_users.role == role.value)
        stmt = stmt.order_by(_all_users.name, _all_users.username)
        result = await self.db.execute(stmt)
        return [self._to_user(u) for u in result.scalars().all()]

    async def find_students_linked_to(self, teacher_id: UUID) -> list[StudentUser]:
        stmt = select(db_models.Students).join(
            db_models.TeacherLinks,
            db_models.TeacherLinks.student_id == db_models.Students.id
        ).filter(
            db_models.TeacherLinks.teacher_id == teacher_id
        ).order_by(db_models.Students.name).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return [self._to_user(s) for s in result.scalars().all()]

    async def add_user(self, user: User) -> User:
        common = dict(id=user.id, username=user.username, name=user.name, hashed_password=user.hashed_password)
        if isinstance(user, TeacherUser):
            orm_user = db_models.Teachers(**common, default_session_price=user.default_session_price)
        elif isinstance(user, StudentUser):
            orm_user = db_models.Students(**common, teacher_links=[
                db_models.TeacherLinks(teacher_id=link.teacher_id, session_price=link.session_price)
                for link in user.teacher_links
            ])
        elif isinstance(user, AdminUser):
            orm_user = db_models.Admins(**common)
        else:
            raise TypeError(f"Unsupported user type {type(user)}")

        self.db.add(orm_user)
        await self.db.flush()
        log.info(f"Stored new {user.role} {user.id}.")
        return self._to_user(orm_user)

    async def save_user(self, user: User) -> User:
        orm_user = await self._get_orm_user(user.id)
        if orm_user is None:
            raise LookupError(f"User {user.id} does not exist.")

        orm_user.username = user.username
        orm_user.name = user.name
        orm_user.hashed_password = user.hashed_password

        if isinstance(user, TeacherUser):
            orm_user.default_session_price = user.default_session_price
        elif isinstance(user, StudentUser):
            # Update links in place: replacing the whole collection would
            # insert the new rows before deleting the old ones and trip the
            # (student_id, teacher_id) unique constraint.
            wanted = {link.teacher_id: link for link in user.teacher_links}
            for orm_link in list(orm_user.teacher_links):
                if orm_link.teacher_id not in wanted:
                    orm_user.teacher_links.remove(orm_link)
                else:
                    orm_link.session_price = wanted.pop(orm_link.teacher_id).session_price
            for link in wanted.values():
                orm_user.teacher_links.append(
                    db_models.TeacherLinks(teacher_id=link.teacher_id, session_price=link.session_price)
                )

        await self.db.flush()
        return self._to_user(orm_user)

    async def delete_user(self, user_id: UUID) -> None:
        orm_user = await self._get_orm_user(user_id)
        if orm_user is None:
            return
        await self.db.delete(orm_user)
        await self.db.flush()

    async def remove_teacher_links(self, teacher_id: UUID) -> int:
        result = await self.db.execute(
            delete(db_models.TeacherLinks).where(db_models.TeacherLinks.teacher_id == teacher_id)
        )
        await self.db.flush()
        # Loaded students still hold the deleted rows in their collections
        self.db.expire_all()
        return result.rowcount or 0

    # --- Subjects ---

    async def list_subjects(self) -> list[SubjectRecord]:
        result = await self.db.execute(select(db_models.Subjects).order_by(db_models.Subjects.name))
        return [SubjectRecord.model_validate(s) for s in result.scalars().all()]

    async def find_subject(self, subject_id: UUID) -> Optional[SubjectRecord]:
        orm_subject = await self.db.get(db_models.Subjects, subject_id)
        return SubjectRecord.model_validate(orm_subject) if orm_subject else None

    async def add_subject(self, subject: SubjectRecord) -> SubjectRecord:
        orm_subject = db_models.Subjects(id=subject.id, name=subject.name)
        self.db.add(orm_subject)
        await self.db.flush()
        return SubjectRecord.model_validate(orm_subject)

    async def save_subject(self, subject: SubjectRecord) -> SubjectRecord:
        orm_subject = await self.db.get(db_models.Subjects, subject.id)
        if orm_subject is None:
            raise LookupError(f"Subject {subject.id} does not exist.")
        orm_subject.name = subject.name
        await self.db.flush()
        return SubjectRecord.model_validate(orm_subject)

    async def delete_subject(self, subject_id: UUID) -> None:
        orm_subject = await self.db.get(db_models.Subjects, subject_id)
        if orm_subject is None:
            return
        await self.db.delete(orm_subject)
        await self.db.flush()

    # --- Lessons ---

    async def find_lessons(self, criteria: LessonCriteria) -> list[LessonRecord]:
        stmt = select(db_models.Lessons).filter(
            *self._lesson_filters(criteria)
        ).order_by(db_models.Lessons.date, db_models.Lessons.time)
        result = await self.db.execute(stmt)
        return [LessonRecord.model_validate(l) for l in result.scalars().all()]

    async def lesson_exists(self, criteria: LessonCriteria) -> bool:
        stmt = select(db_models.Lessons.id).filter(*self._lesson_filters(criteria)).limit(1)
        result = await self.db.execute(stmt)
        return result.scalars().first() is not None

    async def add_lesson(self, lesson: LessonRecord) -> LessonRecord:
        orm_lesson = db_models.Lessons(
            id=lesson.id,
            teacher_id=lesson.teacher_id,
            student_id=lesson.student_id,
            subject=lesson.subject,
            date=lesson.date,
            time=lesson.time,
            status=lesson.status.value,
            session_price=lesson.session_price
        )
        self.db.add(orm_lesson)
        await self.db.flush()
        return LessonRecord.model_validate(orm_lesson)

    # --- Payments ---

    async def find_payments(self, criteria: PaymentCriteria) -> list[PaymentRecord]:
        stmt = select(db_models.Payments)
        if criteria.user_id is not None:
            stmt = stmt.filter(db_models.Payments.user_id == criteria.user_id)
        if criteria.window.start_date is not None:
            stmt = stmt.filter(db_models.Payments.date >= criteria.window.start_date)
        if criteria.window.end_date is not None:
            stmt = stmt.filter(db_models.Payments.date <= criteria.window.end_date)
        stmt = stmt.order_by(db_models.Payments.date)
        result = await self.db.execute(stmt)
        return [PaymentRecord.model_validate(p) for p in result.scalars().all()]

    async def add_payment(self, payment: PaymentRecord) -> PaymentRecord:
        orm_payment = db_models.Payments(
            id=payment.id,
            user_id=payment.user_id,
            amount=payment.amount,
            date=payment.date,
            direction=payment.direction.value
        )
        self.db.add(orm_payment)
        await self.db.flush()
        return PaymentRecord.model_validate(orm_payment)


async def get_ledger_repository(
    db: Annotated[AsyncSession, Depends(get_db_session)]
) -> LedgerRepository:
    """FastAPI dependency: the SQL repository bound to the request's session."""
    return SQLAlchemyLedgerRepository(db)
