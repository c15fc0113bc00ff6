'''

'''
from collections import Counter
from typing import Annotated
from uuid import UUID
from fastapi import Depends

from ..database.repository import LedgerRepository, get_ledger_repository
from ..database.db_enums import ReportDirection
from ..models.user import TeacherUser, StudentUser
from ..models.report import CounterpartLessonCount
from ..models.criteria import LessonCriteria
from ..common.exceptions import NotFoundError
from ..common.logger import log


class ReportService:
    """
    Activity reports over the lesson store. Counts every lesson regardless of
    attendance or date; these are not financial figures and do not go
    through the ledger.
    """
    def __init__(self, repo: Annotated[LedgerRepository, Depends(get_ledger_repository)]):
        self.repo = repo

    async def lessons_by_counterpart(
        self,
        anchor_id: UUID,
        direction: ReportDirection
    ) -> list[CounterpartLessonCount]:
        direction = ReportDirection(direction)
        anchor = await self.repo.find_user(anchor_id)
        if direction == ReportDirection.STUDENTS_OF_TEACHER:
            expected_type, criteria = TeacherUser, LessonCriteria(teacher_id=anchor_id)
        else:
            expected_type, criteria = StudentUser, LessonCriteria(student_id=anchor_id)

        if not isinstance(anchor, expected_type):
            log.warning(f"Report anchor {anchor_id} not found for direction {direction.value}.")
            raise NotFoundError(f"User {anchor_id} not found.")

        lessons = await self.repo.find_lessons(criteria)
        if direction == ReportDirection.STUDENTS_OF_TEACHER:
            counts = Counter(l.student_id for l in lessons)
        else:
            counts = Counter(l.teacher_id for l in lessons)

        report = []
        for counterpart_id, lesson_count in counts.items():
            counterpart = await self.repo.find_user(counterpart_id)
            report.append(CounterpartLessonCount(
                counterpart_id=counterpart_id,
                name=counterpart.name if counterpart else "Unknown",
                lesson_count=lesson_count
            ))
        log.info(f"Lesson report for {anchor_id}: {len(report)} counterpart(s).")
        return report
