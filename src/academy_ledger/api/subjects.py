'''
API endpoints for the subject catalog.
'''
from typing import Annotated
from uuid import UUID
from fastapi import APIRouter, Depends, Response, status

from ..database.db_enums import UserRole
from ..models import user as user_models
from ..models.subject import SubjectWrite, SubjectRecord
from ..services.authorization import authorize_role
from ..services.security import verify_token_and_get_user
from ..services.subject_service import SubjectService

class SubjectsAPI:
    """
    Any authenticated user can read the catalog; only admins change it.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/subjects",
            tags=["Subjects"]
        )
        self._register_routes()

    def _register_routes(self):
        self.router.add_api_route(
                "",
                self.list_subjects,
                methods=["GET"],
                response_model=list[SubjectRecord])
        self.router.add_api_route(
                "",
                self.create_subject,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=SubjectRecord)
        self.router.add_api_route(
                "/{subject_id}",
                self.rename_subject,
                methods=["PATCH"],
                response_model=SubjectRecord)
        self.router.add_api_route(
                "/{subject_id}",
                self.delete_subject,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT)

    async def list_subjects(
        self,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        subject_service: Annotated[SubjectService, Depends(SubjectService)]
    ):
        return await subject_service.list_subjects()

    async def create_subject(
        self,
        subject_data: SubjectWrite,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        subject_service: Annotated[SubjectService, Depends(SubjectService)]
    ):
        authorize_role(current_user, [UserRole.ADMIN])
        return await subject_service.create_subject(subject_data)

    async def rename_subject(
        self,
        subject_id: UUID,
        subject_data: SubjectWrite,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        subject_service: Annotated[SubjectService, Depends(SubjectService)]
    ):
        authorize_role(current_user, [UserRole.ADMIN])
        return await subject_service.rename_subject(subject_id, subject_data)

    async def delete_subject(
        self,
        subject_id: UUID,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        subject_service: Annotated[SubjectService, Depends(SubjectService)]
    ):
        """Blocked with 409 while any lesson still uses the subject's name."""
        authorize_role(current_user, [UserRole.ADMIN])
        await subject_service.delete_subject(subject_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

# Instantiate the class and export its router
subjects_api = SubjectsAPI()
router = subjects_api.router
