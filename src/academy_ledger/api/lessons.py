'''
API endpoints for lesson capture and the lesson log.
'''
from datetime import date
from typing import Annotated, Any
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status

from ..models import user as user_models
from ..models.lesson import LessonCreate, LessonRecord
from ..services.security import verify_token_and_get_user
from ..services.finance_service import LessonService

class LessonsAPI:
    """
    A class to encapsulate endpoints for Lessons. Lessons are immutable once
    recorded, so there is no update or delete route.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/lessons",
            tags=["Lessons"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "",
                self.list_lessons,
                methods=["GET"],
                response_model=list[LessonRecord])
        self.router.add_api_route(
                "",
                self.create_lesson,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=LessonRecord)

    async def list_lessons(
        self,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        lesson_service: Annotated[LessonService, Depends(LessonService)],
        teacher_id: Annotated[UUID | None, Query(description="Optional filter for Teacher ID")] = None,
        student_id: Annotated[UUID | None, Query(description="Optional filter for Student ID")] = None,
        start_date: Annotated[date | None, Query(description="Inclusive start day")] = None,
        end_date: Annotated[date | None, Query(description="Inclusive end day")] = None
    ) -> list[Any]:
        """
        The lesson log, newest first. Teachers and students only see their own.
        """
        return await lesson_service.list_lessons(
            current_user,
            teacher_id=teacher_id,
            student_id=student_id,
            start_date=start_date,
            end_date=end_date
        )

    async def create_lesson(
        self,
        lesson_data: LessonCreate,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        lesson_service: Annotated[LessonService, Depends(LessonService)]
    ) -> Any:
        """
        Records a lesson for one of the teacher's assigned students.
        Restricted to Teachers; the session price is resolved server-side.
        """
        return await lesson_service.create_lesson(lesson_data, current_user)

# Instantiate the class and export its router
lessons_api = LessonsAPI()
router = lessons_api.router
