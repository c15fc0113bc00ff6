'''
API endpoint for activity reports.
'''
from typing import Annotated
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from ..database.db_enums import ReportDirection
from ..models import user as user_models
from ..models.report import CounterpartLessonCount
from ..services.authorization import authorize_admin_or_self
from ..services.security import verify_token_and_get_user
from ..services.report_service import ReportService

class ReportsAPI:
    def __init__(self):
        self.router = APIRouter(
            prefix="/reports",
            tags=["Reports"]
        )
        self._register_routes()

    def _register_routes(self):
        self.router.add_api_route(
                "/lessons-by-counterpart/{anchor_id}",
                self.lessons_by_counterpart,
                methods=["GET"],
                response_model=list[CounterpartLessonCount])

    async def lessons_by_counterpart(
        self,
        anchor_id: UUID,
        direction: Annotated[ReportDirection, Query(description="students_of_teacher or teachers_of_student")],
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        report_service: Annotated[ReportService, Depends(ReportService)]
    ):
        """Lesson counts per counterpart, all attendance outcomes included."""
        authorize_admin_or_self(current_user, anchor_id)
        return await report_service.lessons_by_counterpart(anchor_id, direction)

# Instantiate the class and export its router
reports_api = ReportsAPI()
router = reports_api.router
