'''

'''
from decimal import Decimal
from typing import Annotated
from uuid import UUID
from fastapi import Depends

from ..database.repository import LedgerRepository, get_ledger_repository
from ..models.user import TeacherUser, StudentUser
from ..common.logger import log


class PricingResolver:
    """
    Determines the session price to lock onto a new lesson.

    A student's explicit teacher link wins over the teacher's default price.
    A missing price never blocks attendance recording: it resolves to 0 and
    is logged as a misconfiguration instead.
    """
    def __init__(self, repo: Annotated[LedgerRepository, Depends(get_ledger_repository)]):
        self.repo = repo

    async def resolve_price(self, teacher_id: UUID, student_id: UUID) -> Decimal:
        student = await self.repo.find_user(student_id)
        if isinstance(student, StudentUser):
            link = student.link_for(teacher_id)
            if link is not None:
                log.info(f"Using link price {link.session_price} for teacher {teacher_id} / student {student_id}.")
                return link.session_price

        teacher = await self.repo.find_user(teacher_id)
        if isinstance(teacher, TeacherUser):
            log.info(f"Using default price {teacher.default_session_price} of teacher {teacher_id}.")
            return teacher.default_session_price

        log.warning(
            f"No session price found for teacher {teacher_id} / student {student_id}. "
            "Resolving to 0; check the directory configuration."
        )
        return Decimal("0")
