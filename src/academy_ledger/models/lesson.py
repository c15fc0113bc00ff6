'''
Pydantic models for lessons.
'''
import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..database.db_enums import AttendanceStatus
from .user import TeacherUser, StudentUser


# --- 1. API Input Models (for POST) ---

class LessonCreate(BaseModel):
    """
    Validates the request body for recording a lesson.
    The teacher is the authenticated user and the price is resolved by the
    backend, so neither is accepted from the client.
    """
    student_id: UUID
    subject: str = Field(..., min_length=1)
    date: datetime.date
    time: datetime.time
    status: AttendanceStatus

    model_config = ConfigDict(extra="forbid")


# --- 2. Stored Record / API Output ---

class LessonRecord(BaseModel):
    """
    A lesson as stored. `session_price` is locked in at creation time and is
    never recomputed.
    """
    id: UUID
    teacher_id: UUID
    student_id: UUID
    subject: str
    date: datetime.date
    time: datetime.time
    status: AttendanceStatus
    session_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class StudentOverview(BaseModel):
    """The student dashboard: linked teachers and every lesson of the student."""
    student: StudentUser
    teachers: list[TeacherUser]
    lessons: list[LessonRecord]
