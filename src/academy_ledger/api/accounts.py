'''
API endpoint for account statements.
'''
from datetime import date
from typing import Annotated, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from ..database.db_enums import UserRole
from ..models import user as user_models
from ..models.finance import AccountStatement
from ..services.authorization import authorize_admin_or_self
from ..services.security import verify_token_and_get_user
from ..services.user_service import UserService
from ..services.finance_service import LedgerService

class AccountsAPI:
    """
    Exposes the ledger engine. The HTTP layer turns the token into an
    explicit (user_id, role) pair; the engine never sees the session.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/accounts",
            tags=["Accounts"]
        )
        self._register_routes()

    def _register_routes(self):
        self.router.add_api_route(
                "/{user_id}/statement",
                self.get_statement,
                methods=["GET"],
                response_model=AccountStatement)

    async def get_statement(
        self,
        user_id: UUID,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        user_service: Annotated[UserService, Depends(UserService)],
        ledger_service: Annotated[LedgerService, Depends(LedgerService)],
        role: Annotated[Optional[UserRole], Query(description="Defaults to the user's own role")] = None,
        start_date: Annotated[Optional[date], Query(description="Inclusive start day")] = None,
        end_date: Annotated[Optional[date], Query(description="Inclusive end day")] = None
    ):
        """
        Admins can read any statement; teachers and students only their own.
        """
        authorize_admin_or_self(current_user, user_id)
        if role is None:
            role = UserRole((await user_service.get_user(user_id)).role)
        return await ledger_service.get_account_statement(user_id, role, start_date, end_date)

# Instantiate the class and export its router
accounts_api = AccountsAPI()
router = accounts_api.router
