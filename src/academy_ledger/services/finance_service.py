'''
Lessons, payments and the account ledger.

LedgerService is the reconciliation engine: it reads lessons and payments
through the repository interface, never writes, and never looks at who is
logged in. The (user_id, role) context is always passed in explicitly.
'''
import uuid
from datetime import date
from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID
from fastapi import Depends

from ..database.repository import LedgerRepository, get_ledger_repository
from ..database.db_enums import (
    UserRole, AttendanceStatus, PaymentDirection, TransactionKind,
    DIRECTION_FOR_ROLE, BALANCE_MEANING_FOR_ROLE
)
from ..models.user import User, TeacherUser, StudentUser
from ..models.lesson import LessonCreate, LessonRecord
from ..models.finance import PaymentCreate, PaymentRecord, AccountStatement, StatementTransaction
from ..models.criteria import DateWindow, LessonCriteria, PaymentCriteria
from ..common.exceptions import NotFoundError, InvalidInputError, UnauthorizedRoleError
from ..common.logger import log
from .authorization import authorize_role
from .pricing_service import PricingResolver
from .subject_service import SubjectService

# --- Service 1: Lesson Capture ---

class LessonService:
    """
    Records lessons for a teacher's assigned students and serves the lesson
    log. A lesson's price is resolved once, here, and never touched again.
    """
    def __init__(
        self,
        repo: Annotated[LedgerRepository, Depends(get_ledger_repository)],
        pricing: Annotated[PricingResolver, Depends(PricingResolver)],
        subject_service: Annotated[SubjectService, Depends(SubjectService)]
    ):
        self.repo = repo
        self.pricing = pricing
        self.subject_service = subject_service

    async def create_lesson(self, data: LessonCreate, current_user: User) -> LessonRecord:
        authorize_role(current_user, [UserRole.TEACHER])
        log.info(f"Teacher {current_user.id} recording a lesson for student {data.student_id}.")

        student = await self.repo.find_user(data.student_id)
        if not isinstance(student, StudentUser):
            log.warning(f"Lesson rejected: student {data.student_id} not found.")
            raise NotFoundError(f"Student {data.student_id} not found.")
        if student.link_for(current_user.id) is None:
            log.warning(f"Lesson rejected: student {student.id} is not assigned to teacher {current_user.id}.")
            raise InvalidInputError("This student is not assigned to you.")
        if await self.subject_service.get_subject_by_name(data.subject) is None:
            log.warning(f"Lesson rejected: subject '{data.subject}' does not exist.")
            raise NotFoundError(f"Subject '{data.subject}' not found.")

        price = await self.pricing.resolve_price(current_user.id, student.id)
        lesson = LessonRecord(
            id=uuid.uuid4(),
            teacher_id=current_user.id,
            student_id=student.id,
            subject=data.subject,
            date=data.date,
            time=data.time,
            status=data.status,
            session_price=price
        )
        try:
            return await self.repo.add_lesson(lesson)
        except Exception as e:
            log.error(f"Failed to store lesson for student {student.id}: {e}", exc_info=True)
            raise

    async def list_lessons(
        self,
        current_user: User,
        teacher_id: Optional[UUID] = None,
        student_id: Optional[UUID] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> list[LessonRecord]:
        """
        The lesson log, newest first. Admins may filter freely; teachers and
        students are pinned to their own lessons.
        """
        if current_user.role == UserRole.TEACHER.value:
            if teacher_id and teacher_id != current_user.id:
                raise UnauthorizedRoleError("Teachers can only view their own lessons.")
            teacher_id = current_user.id
        elif current_user.role == UserRole.STUDENT.value:
            if student_id and student_id != current_user.id:
                raise UnauthorizedRoleError("Students can only view their own lessons.")
            student_id = current_user.id

        criteria = LessonCriteria(
            teacher_id=teacher_id,
            student_id=student_id,
            window=DateWindow(start_date=start_date, end_date=end_date)
        )
        lessons = await self.repo.find_lessons(criteria)
        lessons.reverse()
        return lessons


# --- Service 2: Payments ---

class PaymentService:
    """Append-only payment log, written by admins only."""

    def __init__(self, repo: Annotated[LedgerRepository, Depends(get_ledger_repository)]):
        self.repo = repo

    async def add_payment(
        self,
        user_id: UUID,
        amount: Decimal,
        payment_date: date,
        direction: Optional[PaymentDirection] = None
    ) -> PaymentRecord:
        """
        Records a payment to a teacher or from a student. `direction` defaults
        from the user's role and must agree with it when given.
        """
        if amount is None or not amount.is_finite() or amount <= 0:
            log.warning(f"Payment rejected: non-positive amount {amount}.")
            raise InvalidInputError("Payment amount must be a finite number greater than zero.")

        user = await self.repo.find_user(user_id)
        if not isinstance(user, (TeacherUser, StudentUser)):
            log.warning(f"Payment rejected: user {user_id} is not a teacher or student.")
            raise NotFoundError(f"Teacher or student {user_id} not found.")

        expected = DIRECTION_FOR_ROLE[UserRole(user.role)]
        if direction is None:
            direction = expected
        elif direction != expected:
            log.warning(f"Payment rejected: direction {direction.value} does not fit a {user.role}.")
            raise InvalidInputError(f"A {user.role} payment must be '{expected.value}'.")

        payment = PaymentRecord(
            id=uuid.uuid4(),
            user_id=user_id,
            amount=amount,
            date=payment_date,
            direction=direction
        )
        log.info(f"Recording payment of {amount} ({direction.value}) for user {user_id}.")
        try:
            return await self.repo.add_payment(payment)
        except Exception as e:
            log.error(f"Failed to store payment for user {user_id}: {e}", exc_info=True)
            raise

    async def create_payment(self, data: PaymentCreate, current_user: User) -> PaymentRecord:
        authorize_role(current_user, [UserRole.ADMIN])
        return await self.add_payment(data.user_id, data.amount, data.date, data.direction)

    async def list_payments(self, current_user: User, user_id: Optional[UUID] = None) -> list[PaymentRecord]:
        if current_user.role != UserRole.ADMIN.value:
            if user_id and user_id != current_user.id:
                raise UnauthorizedRoleError("You can only view your own payments.")
            user_id = current_user.id
        return await self.repo.find_payments(PaymentCriteria(user_id=user_id))


# --- Service 3: Ledger Engine ---

class LedgerService:
    """
    Computes account statements. Depends only on find_user, find_lessons
    and find_payments of the repository.
    """
    def __init__(self, repo: Annotated[LedgerRepository, Depends(get_ledger_repository)]):
        self.repo = repo

    async def get_account_statement(
        self,
        user_id: UUID,
        role: UserRole,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> AccountStatement:
        """
        Reconciles the user's billable lessons against their payments.

        Only Present lessons are billed. Both bounds are inclusive calendar
        days and either may be omitted; a reversed window just yields an
        empty statement. balance = total_due - total_paid for both roles and
        its reading is given by `balance_meaning`.
        """
        role = UserRole(role)
        log.info(f"Computing {role.value} statement for user {user_id} ({start_date} -> {end_date}).")

        user = await self.repo.find_user(user_id)
        if not isinstance(user, (TeacherUser, StudentUser)) or role == UserRole.ADMIN:
            log.warning(f"Statement requested for unknown teacher/student {user_id} as {role.value}.")
            raise NotFoundError(f"Teacher or student {user_id} not found.")
        if user.role != role.value:
            log.warning(f"User {user_id} is a {user.role} but a {role.value} statement was requested.")

        window = DateWindow(start_date=start_date, end_date=end_date)
        if role == UserRole.TEACHER:
            lesson_criteria = LessonCriteria(teacher_id=user_id, status=AttendanceStatus.PRESENT, window=window)
        else:
            lesson_criteria = LessonCriteria(student_id=user_id, status=AttendanceStatus.PRESENT, window=window)

        lessons = await self.repo.find_lessons(lesson_criteria)
        payments = await self.repo.find_payments(PaymentCriteria(user_id=user_id, window=window))

        total_due = sum((l.session_price for l in lessons), Decimal("0"))
        total_paid = sum((p.amount for p in payments), Decimal("0"))

        return AccountStatement(
            user_id=user_id,
            role=role,
            start_date=start_date,
            end_date=end_date,
            lessons=lessons,
            payments=payments,
            total_due=total_due,
            total_paid=total_paid,
            balance_meaning=BALANCE_MEANING_FOR_ROLE[role],
            transactions=self._build_transactions(lessons, payments)
        )

    @staticmethod
    def _build_transactions(
        lessons: list[LessonRecord],
        payments: list[PaymentRecord]
    ) -> list[StatementTransaction]:
        rows = [
            StatementTransaction(
                date=l.date,
                kind=TransactionKind.LESSON,
                reference_id=l.id,
                description=f"Lesson: {l.subject}",
                debit=l.session_price
            )
            for l in lessons
        ]
        rows.extend(
            StatementTransaction(
                date=p.date,
                kind=TransactionKind.PAYMENT,
                reference_id=p.id,
                description="Payment to teacher" if p.direction == PaymentDirection.PAID_TO_TEACHER else "Payment from student",
                credit=p.amount
            )
            for p in payments
        )
        # sort() is stable: lesson rows stay ahead of payments on the same day
        rows.sort(key=lambda row: row.date)
        return rows
