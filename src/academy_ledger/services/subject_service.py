'''

'''
import uuid
from typing import Annotated, Optional
from uuid import UUID
from fastapi import Depends

from ..database.repository import LedgerRepository, get_ledger_repository
from ..models.subject import SubjectWrite, SubjectRecord
from ..models.criteria import LessonCriteria
from ..common.exceptions import NotFoundError, ConflictError
from ..common.logger import log


class SubjectService:
    """
    The subject catalog. Lessons reference a subject by name, so names are
    unique (case-insensitively) and a name still used by a lesson cannot be
    deleted.
    """
    def __init__(self, repo: Annotated[LedgerRepository, Depends(get_ledger_repository)]):
        self.repo = repo

    async def list_subjects(self) -> list[SubjectRecord]:
        return await self.repo.list_subjects()

    async def get_subject(self, subject_id: UUID) -> SubjectRecord:
        subject = await self.repo.find_subject(subject_id)
        if subject is None:
            log.warning(f"Subject {subject_id} not found.")
            raise NotFoundError(f"Subject {subject_id} not found.")
        return subject

    async def get_subject_by_name(self, name: str) -> Optional[SubjectRecord]:
        """Exact-name lookup, as used by lesson capture."""
        return next((s for s in await self.repo.list_subjects() if s.name == name), None)

    async def _ensure_name_available(self, name: str, owner_id: Optional[UUID] = None):
        wanted = name.casefold()
        for subject in await self.repo.list_subjects():
            if subject.name.casefold() == wanted and subject.id != owner_id:
                log.warning(f"Subject name '{name}' collides with existing subject '{subject.name}'.")
                raise ConflictError("Subject already exists.")

    async def create_subject(self, data: SubjectWrite) -> SubjectRecord:
        log.info(f"Creating subject '{data.name}'.")
        await self._ensure_name_available(data.name)
        return await self.repo.add_subject(SubjectRecord(id=uuid.uuid4(), name=data.name))

    async def rename_subject(self, subject_id: UUID, data: SubjectWrite) -> SubjectRecord:
        log.info(f"Renaming subject {subject_id} to '{data.name}'.")
        subject = await self.get_subject(subject_id)
        await self._ensure_name_available(data.name, owner_id=subject_id)
        # Lessons keep the name they were recorded with
        subject.name = data.name
        return await self.repo.save_subject(subject)

    async def delete_subject(self, subject_id: UUID) -> None:
        subject = await self.get_subject(subject_id)
        if await self.repo.lesson_exists(LessonCriteria(subject=subject.name)):
            log.warning(f"Subject '{subject.name}' is referenced by lessons; delete blocked.")
            raise ConflictError("Cannot delete a subject that is used by existing lessons.")
        await self.repo.delete_subject(subject_id)
        log.info(f"Subject '{subject.name}' deleted.")
