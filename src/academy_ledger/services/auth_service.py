'''

'''
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from .security import JWTHandler
from .user_service import UserService
from ..models import token as token_models
from ..common.security_utils import verify_password
from ..common.logger import log

class LoginService:
    """
    Username/password login. Depends on the UserService to fetch the user.
    """
    def __init__(
        self,
        user_service: Annotated[UserService, Depends(UserService)]
    ):
        self.user_service = user_service

    async def login_user(self, form_data: OAuth2PasswordRequestForm) -> token_models.Token:
        log.info(f"Attempting login for user: {form_data.username}")

        user = await self.user_service.get_user_by_username(form_data.username)
        if not user or not verify_password(form_data.password, user.hashed_password):
            log.warning(f"Login failed for user: {form_data.username} - Incorrect username or password")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect username or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        access_token = JWTHandler.create_access_token(subject=user.id, role=user.role)
        log.info(f"Login successful for user: {form_data.username}")

        return token_models.Token(access_token=access_token)
