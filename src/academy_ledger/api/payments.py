'''
API endpoints for Payments.
'''
from typing import Annotated, Any
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status

from ..models import user as user_models
from ..models.finance import PaymentCreate, PaymentRecord
from ..services.security import verify_token_and_get_user
from ..services.finance_service import PaymentService

class PaymentsAPI:
    """
    A class to encapsulate endpoints for Payments.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/payments",
            tags=["Payments"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "",
                self.list_payments,
                methods=["GET"],
                response_model=list[PaymentRecord])
        self.router.add_api_route(
                "",
                self.create_payment,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=PaymentRecord)

    async def list_payments(
        self,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        payment_service: Annotated[PaymentService, Depends(PaymentService)],
        user_id: Annotated[UUID | None, Query(description="Optional filter for the paid/paying user")] = None
    ) -> list[Any]:
        """
        Admins see every payment; teachers and students only their own.
        """
        return await payment_service.list_payments(current_user, user_id=user_id)

    async def create_payment(
        self,
        payment_data: PaymentCreate,
        current_user: Annotated[user_models.UserBase, Depends(verify_token_and_get_user)],
        payment_service: Annotated[PaymentService, Depends(PaymentService)]
    ) -> Any:
        """
        Records a payment. Restricted to Admins.
        """
        return await payment_service.create_payment(payment_data, current_user)

# Instantiate the class and export its router
payments_api = PaymentsAPI()
router = payments_api.router
