'''
Pydantic models for payments and account statements.
'''
import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ..database.db_enums import UserRole, PaymentDirection, BalanceMeaning, TransactionKind
from .lesson import LessonRecord

# --- 1. API Input Models (for POST) ---

class PaymentCreate(BaseModel):
    """
    Validates the request body for recording a payment.
    `direction` may be omitted; it is then derived from the user's role.
    """
    user_id: UUID
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    date: datetime.date
    direction: Optional[PaymentDirection] = None

    model_config = ConfigDict(extra="forbid")


# --- 2. Stored Record / API Output ---

class PaymentRecord(BaseModel):
    id: UUID
    user_id: UUID
    amount: Decimal
    date: datetime.date
    direction: PaymentDirection

    model_config = ConfigDict(from_attributes=True)


# --- 3. Account Statement (derived, never persisted) ---

class StatementTransaction(BaseModel):
    """
    One row of the itemized statement: a lesson is a debit row, a payment a
    credit row.
    """
    date: datetime.date
    kind: TransactionKind
    reference_id: UUID
    description: str
    debit: Decimal = Decimal(0)
    credit: Decimal = Decimal(0)


class AccountStatement(BaseModel):
    """
    The reconciliation of a user's billable lessons against their payments.

    balance = total_due - total_paid, identical for both roles. Its sign is
    read through `balance_meaning`: for a Teacher a positive balance means the
    academy owes the teacher; for a Student it means the student owes the
    academy.
    """
    user_id: UUID
    role: UserRole
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    lessons: list[LessonRecord]
    payments: list[PaymentRecord]
    total_due: Decimal
    total_paid: Decimal
    balance_meaning: BalanceMeaning
    transactions: list[StatementTransaction] = Field(default_factory=list)

    @computed_field
    @property
    def balance(self) -> Decimal:
        return self.total_due - self.total_paid
