'''
API endpoints for the user directory (Admins, Teachers, Students).
'''
from typing import Annotated, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, Response, status

from ..database.db_enums import UserRole
from ..models import user as user_models
from ..models.lesson import StudentOverview
from ..services.authorization import authorize_role, authorize_admin_or_self
from ..services.security import verify_token_and_get_user
from ..services.user_service import UserService


class UserAPI:
    """Directory CRUD. Everything except /users/me is restricted to admins."""
    def __init__(self):
        self.router = APIRouter(
                prefix="/users",
                tags=["Users"])
        self._register_routes()

    def _register_routes(self):
        self.router.add_api_route(
                "/me",
                self.read_users_me,
                methods=["GET"],
                response_model=user_models.User)
        self.router.add_api_route(
                "",
                self.list_users,
                methods=["GET"],
                response_model=list[user_models.User])
        self.router.add_api_route(
                "",
                self.create_user,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=user_models.User)
        self.router.add_api_route(
                "/{user_id}",
                self.get_user,
                methods=["GET"],
                response_model=user_models.User)
        self.router.add_api_route(
                "/{user_id}",
                self.update_user,
                methods=["PATCH"],
                response_model=user_models.User)
        self.router.add_api_route(
                "/{user_id}",
                self.delete_user,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT)

    async def read_users_me(
        self,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)]
    ):
        """
        Returns the profile information for the currently authenticated user.
        """
        return current_user

    async def list_users(
        self,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        user_service: Annotated[UserService, Depends(UserService)],
        role: Annotated[Optional[UserRole], Query(description="Optional role filter")] = None
    ):
        authorize_role(current_user, [UserRole.ADMIN])
        return await user_service.list_users(role)

    async def create_user(
        self,
        user_data: user_models.UserCreateHint,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        user_service: Annotated[UserService, Depends(UserService)]
    ):
        authorize_role(current_user, [UserRole.ADMIN])
        return await user_service.create_user(user_data)

    async def get_user(
        self,
        user_id: UUID,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        user_service: Annotated[UserService, Depends(UserService)]
    ):
        authorize_role(current_user, [UserRole.ADMIN])
        return await user_service.get_user(user_id)

    async def update_user(
        self,
        user_id: UUID,
        update_data: user_models.UserUpdateHint,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        user_service: Annotated[UserService, Depends(UserService)]
    ):
        authorize_role(current_user, [UserRole.ADMIN])
        return await user_service.update_user(user_id, update_data)

    async def delete_user(
        self,
        user_id: UUID,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        user_service: Annotated[UserService, Depends(UserService)]
    ):
        authorize_role(current_user, [UserRole.ADMIN])
        await user_service.delete_user(user_id, current_user)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


class TeachersAPI:
    """Teacher dashboard reads."""
    def __init__(self):
        self.router = APIRouter(
                prefix="/teachers",
                tags=["Teachers"])
        self._register_routes()

    def _register_routes(self):
        self.router.add_api_route(
                "/{teacher_id}/students",
                self.get_assigned_students,
                methods=["GET"],
                response_model=list[user_models.StudentUser])

    async def get_assigned_students(
        self,
        teacher_id: UUID,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        user_service: Annotated[UserService, Depends(UserService)]
    ):
        """Students linked to the teacher. Admins, or the teacher themselves."""
        authorize_admin_or_self(current_user, teacher_id)
        return await user_service.get_assigned_students(teacher_id)


class StudentsAPI:
    """Student dashboard reads."""
    def __init__(self):
        self.router = APIRouter(
                prefix="/students",
                tags=["Students"])
        self._register_routes()

    def _register_routes(self):
        self.router.add_api_route(
                "/{student_id}/overview",
                self.get_overview,
                methods=["GET"],
                response_model=StudentOverview)

    async def get_overview(
        self,
        student_id: UUID,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        user_service: Annotated[UserService, Depends(UserService)]
    ):
        authorize_admin_or_self(current_user, student_id)
        return await user_service.get_student_overview(student_id)


# Instantiate the classes and export their routers
user_api = UserAPI()
teachers_api = TeachersAPI()
students_api = StudentsAPI()

router = APIRouter()
router.include_router(user_api.router)
router.include_router(teachers_api.router)
router.include_router(students_api.router)
