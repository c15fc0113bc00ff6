'''
Pydantic models for the user directory.

A user is a tagged variant discriminated by `role`:
    User = AdminUser | TeacherUser | StudentUser
Role-specific attributes only exist on their own variant, so a Teacher can
never carry teacher links and a Student never carries a default price.
'''
from decimal import Decimal
from typing import Optional, Literal, Annotated, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from ..database.db_enums import UserRole


# --- 1. Relationship Models ---

class TeacherLink(BaseModel):
    """
    An explicit (teacher_id, session_price) override recorded on a Student.
    Takes precedence over the teacher's default session price.
    """
    teacher_id: UUID
    session_price: Decimal = Field(..., ge=0, decimal_places=2)

    model_config = ConfigDict(from_attributes=True, extra="forbid")


def _unique_teacher_ids(links: Optional[list[TeacherLink]]) -> Optional[list[TeacherLink]]:
    if links is None:
        return links
    seen = set()
    for link in links:
        if link.teacher_id in seen:
            raise ValueError(f"Duplicate teacher link for teacher {link.teacher_id}.")
        seen.add(link.teacher_id)
    return links


# --- 2. Stored User Records (also used as API output) ---

class UserBase(BaseModel):
    """
    Fields shared by every user variant.
    The password hash is excluded from every serialization.
    """
    id: UUID
    username: str
    name: str
    hashed_password: str = Field(default="", exclude=True, repr=False)

    model_config = ConfigDict(from_attributes=True)


class AdminUser(UserBase):
    role: Literal[UserRole.ADMIN.value] = UserRole.ADMIN.value


class TeacherUser(UserBase):
    role: Literal[UserRole.TEACHER.value] = UserRole.TEACHER.value
    default_session_price: Decimal = Field(..., ge=0)


class StudentUser(UserBase):
    role: Literal[UserRole.STUDENT.value] = UserRole.STUDENT.value
    teacher_links: list[TeacherLink] = Field(default_factory=list)

    def link_for(self, teacher_id: UUID) -> Optional[TeacherLink]:
        return next((link for link in self.teacher_links if link.teacher_id == teacher_id), None)


User = Annotated[
    Union[AdminUser, TeacherUser, StudentUser],
    Field(discriminator='role')
]

UserValidator = TypeAdapter(User)

USER_MODEL_FOR_ROLE: dict[str, type[UserBase]] = {
    UserRole.ADMIN.value: AdminUser,
    UserRole.TEACHER.value: TeacherUser,
    UserRole.STUDENT.value: StudentUser,
}


# --- 3. API Input Models (for POST) ---

class _UserCreateBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


class AdminCreate(_UserCreateBase):
    role: Literal[UserRole.ADMIN.value]


class TeacherCreate(_UserCreateBase):
    role: Literal[UserRole.TEACHER.value]
    default_session_price: Decimal = Field(..., ge=0, decimal_places=2)


class StudentCreate(_UserCreateBase):
    role: Literal[UserRole.STUDENT.value]
    teacher_links: list[TeacherLink] = Field(default_factory=list)

    @field_validator("teacher_links")
    @classmethod
    def check_unique_teachers(cls, links):
        return _unique_teacher_ids(links)


UserCreateHint = Annotated[
    Union[AdminCreate, TeacherCreate, StudentCreate],
    Field(discriminator='role')
]

UserCreateValidator = TypeAdapter(UserCreateHint)


# --- 4. API Update Models (for PATCH) ---

class _UserUpdateBase(BaseModel):
    """All fields are optional to allow for partial updates."""
    username: Optional[str] = Field(None, min_length=1, max_length=150)
    password: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1)

    model_config = ConfigDict(extra="forbid")


class AdminUpdate(_UserUpdateBase):
    role: Literal[UserRole.ADMIN.value]


class TeacherUpdate(_UserUpdateBase):
    role: Literal[UserRole.TEACHER.value]
    default_session_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)


class StudentUpdate(_UserUpdateBase):
    role: Literal[UserRole.STUDENT.value]
    # Replaces the whole list when provided
    teacher_links: Optional[list[TeacherLink]] = None

    @field_validator("teacher_links")
    @classmethod
    def check_unique_teachers(cls, links):
        return _unique_teacher_ids(links)


UserUpdateHint = Annotated[
    Union[AdminUpdate, TeacherUpdate, StudentUpdate],
    Field(discriminator='role')
]

UserUpdateValidator = TypeAdapter(UserUpdateHint)
