'''
Pydantic models for the login response and the JWT claims.
'''
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from ..database.db_enums import UserRole


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    """Claims carried by an access token. `sub` is the user id, which never changes."""
    sub: UUID
    role: UserRole
    exp: datetime
