'''
Query criteria handed to the repository.

Each criteria object is the storage-agnostic predicate of a find_* call:
the in-memory repository evaluates `matches()` directly, the SQLAlchemy
repository translates the same fields into a WHERE clause.
'''
from datetime import date, datetime, time
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from ..database.db_enums import AttendanceStatus
from .finance import PaymentRecord
from .lesson import LessonRecord


class DateWindow(BaseModel):
    """
    Inclusive calendar-day window. The start bound is floored to 00:00:00 and
    the end bound ceiled to 23:59:59.999999 of its day; a missing bound is
    unbounded on that side. A reversed window simply matches nothing.
    """
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    model_config = ConfigDict(frozen=True)

    @property
    def starts_at(self) -> Optional[datetime]:
        return datetime.combine(self.start_date, time.min) if self.start_date else None

    @property
    def ends_at(self) -> Optional[datetime]:
        return datetime.combine(self.end_date, time.max) if self.end_date else None

    def contains(self, day: date) -> bool:
        moment = datetime.combine(day, time.min)
        if self.starts_at is not None and moment < self.starts_at:
            return False
        if self.ends_at is not None and moment > self.ends_at:
            return False
        return True


class LessonCriteria(BaseModel):
    teacher_id: Optional[UUID] = None
    student_id: Optional[UUID] = None
    status: Optional[AttendanceStatus] = None
    subject: Optional[str] = None
    window: DateWindow = DateWindow()

    model_config = ConfigDict(frozen=True)

    def matches(self, lesson: LessonRecord) -> bool:
        if self.teacher_id is not None and lesson.teacher_id != self.teacher_id:
            return False
        if self.student_id is not None and lesson.student_id != self.student_id:
            return False
        if self.status is not None and lesson.status != self.status:
            return False
        if self.subject is not None and lesson.subject != self.subject:
            return False
        return self.window.contains(lesson.date)


class PaymentCriteria(BaseModel):
    user_id: Optional[UUID] = None
    window: DateWindow = DateWindow()

    model_config = ConfigDict(frozen=True)

    def matches(self, payment: PaymentRecord) -> bool:
        if self.user_id is not None and payment.user_id != self.user_id:
            return False
        return self.window.contains(payment.date)
