'''

'''
import uuid
from typing import Optional, Annotated
from uuid import UUID
from fastapi import Depends

from ..database.repository import LedgerRepository, get_ledger_repository
from ..database.db_enums import UserRole
from ..models import user as user_models
from ..models.user import User, TeacherUser, StudentUser, TeacherLink
from ..models.lesson import StudentOverview
from ..models.criteria import LessonCriteria
from ..common.exceptions import NotFoundError, ConflictError, InvalidInputError
from ..common.security_utils import hash_password
from ..common.logger import log


class UserService:
    """
    The user directory: CRUD over Admins, Teachers and Students plus the
    integrity rules the ledger relies on (unique usernames, valid teacher
    links, no deletion of users referenced by a lesson).
    """
    def __init__(self, repo: Annotated[LedgerRepository, Depends(get_ledger_repository)]):
        self.repo = repo

    # --- 1. Lookups ---

    async def get_user(self, user_id: UUID) -> User:
        user = await self.repo.find_user(user_id)
        if user is None:
            log.warning(f"User {user_id} not found.")
            raise NotFoundError(f"User {user_id} not found.")
        return user

    async def find_user(self, user_id: UUID) -> Optional[User]:
        return await self.repo.find_user(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self.repo.find_user_by_username(username)

    async def list_users(self, role: Optional[UserRole] = None) -> list[User]:
        log.info(f"Listing users (role filter: {role.value if role else 'none'}).")
        return await self.repo.list_users(role)

    async def get_teacher(self, teacher_id: UUID) -> TeacherUser:
        user = await self.get_user(teacher_id)
        if not isinstance(user, TeacherUser):
            log.warning(f"User {teacher_id} is a {user.role}, not a Teacher.")
            raise NotFoundError(f"Teacher {teacher_id} not found.")
        return user

    async def get_student(self, student_id: UUID) -> StudentUser:
        user = await self.get_user(student_id)
        if not isinstance(user, StudentUser):
            log.warning(f"User {student_id} is a {user.role}, not a Student.")
            raise NotFoundError(f"Student {student_id} not found.")
        return user

    async def get_assigned_students(self, teacher_id: UUID) -> list[StudentUser]:
        """Students holding a teacher link to `teacher_id`."""
        await self.get_teacher(teacher_id)
        return await self.repo.find_students_linked_to(teacher_id)

    async def get_student_overview(self, student_id: UUID) -> StudentOverview:
        """The student's linked teachers and every lesson they took part in."""
        student = await self.get_student(student_id)
        teachers = []
        for link in student.teacher_links:
            teacher = await self.repo.find_user(link.teacher_id)
            if isinstance(teacher, TeacherUser):
                teachers.append(teacher)
        lessons = await self.repo.find_lessons(LessonCriteria(student_id=student_id))
        return StudentOverview(student=student, teachers=teachers, lessons=lessons)

    # --- 2. Validation Helpers ---

    async def _ensure_username_available(self, username: str, owner_id: Optional[UUID] = None):
        existing = await self.repo.find_user_by_username(username)
        if existing is not None and existing.id != owner_id:
            log.warning(f"Username '{username}' is already taken by user {existing.id}.")
            raise ConflictError("Username already exists.")

    async def _validate_teacher_links(self, links: list[TeacherLink]):
        for link in links:
            teacher = await self.repo.find_user(link.teacher_id)
            if not isinstance(teacher, TeacherUser):
                log.warning(f"Teacher link references {link.teacher_id}, which is not a Teacher.")
                raise InvalidInputError(f"Teacher link references unknown teacher {link.teacher_id}.")

    # --- 3. Writes ---

    async def create_user(self, data: user_models.UserCreateHint) -> User:
        log.info(f"Creating {data.role} '{data.username}'.")
        await self._ensure_username_available(data.username)
        if isinstance(data, user_models.StudentCreate):
            await self._validate_teacher_links(data.teacher_links)

        record = data.model_dump(exclude={"password"})
        record["id"] = uuid.uuid4()
        record["hashed_password"] = hash_password(data.password)
        user = user_models.UserValidator.validate_python(record)
        try:
            return await self.repo.add_user(user)
        except Exception as e:
            log.error(f"Failed to store new user '{data.username}': {e}", exc_info=True)
            raise

    async def update_user(self, user_id: UUID, data: user_models.UserUpdateHint) -> User:
        log.info(f"Updating user {user_id}.")
        existing = await self.get_user(user_id)
        if data.role != existing.role:
            log.warning(f"Rejected role change of user {user_id} from {existing.role} to {data.role}.")
            raise InvalidInputError("A user's role cannot be changed.")

        changes = data.model_dump(exclude_unset=True, exclude={"role", "password"})
        if "username" in changes:
            await self._ensure_username_available(changes["username"], owner_id=user_id)
        if isinstance(data, user_models.StudentUpdate) and data.teacher_links is not None:
            await self._validate_teacher_links(data.teacher_links)
        # Explicit nulls mean "leave unchanged"
        changes = {k: v for k, v in changes.items() if v is not None}

        record = existing.model_dump()
        record["hashed_password"] = hash_password(data.password) if data.password else existing.hashed_password
        record.update(changes)
        updated = user_models.UserValidator.validate_python(record)
        try:
            return await self.repo.save_user(updated)
        except Exception as e:
            log.error(f"Failed to save user {user_id}: {e}", exc_info=True)
            raise

    async def delete_user(self, user_id: UUID, current_user: Optional[User] = None) -> None:
        """
        Deletes a user. Teachers and Students referenced by any lesson cannot
        be deleted; deleting a Teacher also strips it from every student's links.
        """
        log.info(f"Deleting user {user_id}.")
        user = await self.get_user(user_id)
        if current_user is not None and current_user.id == user_id:
            log.warning(f"User {user_id} tried to delete their own account.")
            raise ConflictError("You cannot delete your own account.")

        if isinstance(user, TeacherUser):
            if await self.repo.lesson_exists(LessonCriteria(teacher_id=user_id)):
                log.warning(f"Teacher {user_id} still has lessons; delete blocked.")
                raise ConflictError("Cannot delete teacher with assigned lessons.")
            removed = await self.repo.remove_teacher_links(user_id)
            log.info(f"Removed {removed} teacher link(s) pointing to teacher {user_id}.")
        elif isinstance(user, StudentUser):
            if await self.repo.lesson_exists(LessonCriteria(student_id=user_id)):
                log.warning(f"Student {user_id} still has lessons; delete blocked.")
                raise ConflictError("Cannot delete student with assigned lessons.")

        await self.repo.delete_user(user_id)
        log.info(f"User {user_id} deleted.")
