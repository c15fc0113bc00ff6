import datetime
import random
import pytest
from decimal import Decimal

from src.academy_ledger.database.db_enums import (
    UserRole, AttendanceStatus, BalanceMeaning, TransactionKind
)
from src.academy_ledger.database.memory import InMemoryLedgerRepository
from src.academy_ledger.models import user as user_models
from src.academy_ledger.models.lesson import LessonCreate
from src.academy_ledger.models.user import TeacherLink
from src.academy_ledger.services.finance_service import LedgerService, LessonService
from src.academy_ledger.services.user_service import UserService
from src.academy_ledger.common.exceptions import NotFoundError
from tests.database.factories import LessonFactory, PaymentFactory
from tests.constants import (
    TEST_ADMIN_ID,
    TEST_TEACHER_ID,
    TEST_STUDENT_ID,
    TEST_UNKNOWN_ID,
    TEST_PRESENT_LESSON_ID,
    TEST_ABSENT_LESSON_ID,
    TEST_PAYMENT_ID,
    TEST_SUBJECT_NAME,
    JUNE_1, JUNE_10, JUNE_15, JUNE_16, JUNE_30,
)


@pytest.mark.anyio
class TestAccountStatementExamples:
    """The worked June 2024 examples."""

    async def test_june_window_for_teacher(self, june_repo, ledger_service: LedgerService):
        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, JUNE_1, JUNE_30)

        assert statement.total_due == Decimal("100")
        assert statement.total_paid == Decimal("50")
        assert statement.balance == Decimal("50")
        assert [l.id for l in statement.lessons] == [TEST_PRESENT_LESSON_ID]
        assert [p.id for p in statement.payments] == [TEST_PAYMENT_ID]

    async def test_window_after_all_events_is_empty(self, june_repo, ledger_service: LedgerService):
        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, JUNE_16, JUNE_30)

        assert statement.total_due == Decimal("0")
        assert statement.total_paid == Decimal("0")
        assert statement.balance == Decimal("0")
        assert statement.lessons == []
        assert statement.payments == []
        assert statement.transactions == []

    async def test_absent_lesson_never_billed(self, june_repo, ledger_service: LedgerService):
        """No bounds at all: the Absent lesson is still excluded."""
        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER)

        assert TEST_ABSENT_LESSON_ID not in {l.id for l in statement.lessons}
        assert TEST_ABSENT_LESSON_ID not in {t.reference_id for t in statement.transactions}
        assert statement.total_due == Decimal("100")

    async def test_student_statement_uses_student_side(self, june_repo, ledger_service: LedgerService):
        """The payment belongs to the teacher, so the student has paid nothing."""
        statement = await ledger_service.get_account_statement(TEST_STUDENT_ID, UserRole.STUDENT, JUNE_1, JUNE_30)

        assert statement.total_due == Decimal("100")
        assert statement.total_paid == Decimal("0")
        assert statement.balance == Decimal("100")
        assert statement.balance_meaning == BalanceMeaning.STUDENT_OWES_ACADEMY


@pytest.mark.anyio
class TestAccountStatementRules:

    async def test_bounds_are_inclusive_days(self, june_repo, ledger_service: LedgerService):
        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, JUNE_1, JUNE_1)
        assert [l.id for l in statement.lessons] == [TEST_PRESENT_LESSON_ID]

        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, JUNE_10, JUNE_10)
        assert [p.id for p in statement.payments] == [TEST_PAYMENT_ID]
        assert statement.lessons == []

    async def test_open_ended_bounds(self, june_repo, ledger_service: LedgerService):
        only_start = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, start_date=JUNE_10)
        assert only_start.total_due == Decimal("0")
        assert only_start.total_paid == Decimal("50")

        only_end = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, end_date=JUNE_10)
        assert only_end.total_due == Decimal("100")
        assert only_end.total_paid == Decimal("50")

    async def test_reversed_window_is_empty_not_an_error(self, june_repo, ledger_service: LedgerService):
        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, JUNE_30, JUNE_1)
        assert statement.lessons == []
        assert statement.payments == []
        assert statement.balance == Decimal("0")

    async def test_unknown_user_raises_not_found(self, june_repo, ledger_service: LedgerService):
        with pytest.raises(NotFoundError):
            await ledger_service.get_account_statement(TEST_UNKNOWN_ID, UserRole.TEACHER)

    async def test_admin_has_no_statement(self, june_repo, ledger_service: LedgerService):
        with pytest.raises(NotFoundError):
            await ledger_service.get_account_statement(TEST_ADMIN_ID, UserRole.TEACHER)

    async def test_balance_meaning_for_teacher(self, june_repo, ledger_service: LedgerService):
        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER)
        assert statement.role == UserRole.TEACHER
        assert statement.balance_meaning == BalanceMeaning.ACADEMY_OWES_TEACHER

    async def test_balance_is_due_minus_paid_and_serialized(self, june_repo, ledger_service: LedgerService):
        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER)
        assert statement.total_due - statement.total_paid == statement.balance
        assert statement.model_dump()["balance"] == statement.balance

    async def test_overpayment_gives_negative_balance(self, june_repo, ledger_service: LedgerService):
        extra = PaymentFactory.build(user_id=TEST_TEACHER_ID, amount=Decimal("200.00"), date=JUNE_16)
        june_repo.payments[extra.id] = extra

        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER)
        assert statement.balance == Decimal("-150")

    async def test_role_mismatch_filters_by_requested_role(self, june_repo, ledger_service: LedgerService):
        """The teacher never appears as a lesson's student, so nothing is due."""
        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.STUDENT)
        assert statement.lessons == []
        assert statement.total_paid == Decimal("50")


@pytest.mark.anyio
class TestStatementTransactions:

    async def test_rows_are_debits_and_credits_by_date(self, june_repo, ledger_service: LedgerService):
        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER)

        rows = statement.transactions
        assert [r.reference_id for r in rows] == [TEST_PRESENT_LESSON_ID, TEST_PAYMENT_ID]
        assert rows[0].kind == TransactionKind.LESSON
        assert rows[0].debit == Decimal("100") and rows[0].credit == Decimal("0")
        assert rows[0].description == f"Lesson: {TEST_SUBJECT_NAME}"
        assert rows[1].kind == TransactionKind.PAYMENT
        assert rows[1].credit == Decimal("50") and rows[1].debit == Decimal("0")
        assert rows[1].description == "Payment to teacher"

    async def test_same_day_lesson_precedes_payment(self, june_repo, ledger_service: LedgerService):
        payment = PaymentFactory.build(user_id=TEST_TEACHER_ID, date=JUNE_1)
        june_repo.payments[payment.id] = payment

        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER)
        kinds = [(r.date, r.kind) for r in statement.transactions]
        assert kinds[:2] == [(JUNE_1, TransactionKind.LESSON), (JUNE_1, TransactionKind.PAYMENT)]
        assert [r.date for r in statement.transactions] == sorted(r.date for r in statement.transactions)

    async def test_debit_and_credit_sums_match_totals(self, june_repo, ledger_service: LedgerService):
        statement = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER)
        assert sum(r.debit for r in statement.transactions) == statement.total_due
        assert sum(r.credit for r in statement.transactions) == statement.total_paid


@pytest.mark.anyio
class TestAccountStatementProperties:

    async def test_idempotent(self, june_repo, ledger_service: LedgerService):
        first = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, JUNE_1, JUNE_30)
        second = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, JUNE_1, JUNE_30)
        assert first == second

    async def test_aggregates_independent_of_store_order(self, ledger_repo: InMemoryLedgerRepository):
        users = list(ledger_repo.users.values())
        lessons = [
            LessonFactory.build(
                teacher_id=TEST_TEACHER_ID, student_id=TEST_STUDENT_ID,
                date=JUNE_1.replace(day=day),
                status=AttendanceStatus.PRESENT if day % 3 else AttendanceStatus.ABSENT,
                session_price=Decimal(f"{80 + day}.50")
            )
            for day in range(1, 29)
        ]
        payments = [
            PaymentFactory.build(user_id=TEST_TEACHER_ID, date=JUNE_1.replace(day=day), amount=Decimal(f"{day}.25"))
            for day in range(1, 29, 2)
        ]

        results = set()
        rng = random.Random(1234)
        for _ in range(5):
            rng.shuffle(lessons)
            rng.shuffle(payments)
            service = LedgerService(InMemoryLedgerRepository(users=users, lessons=lessons, payments=payments))
            statement = await service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, JUNE_1, JUNE_30)
            results.add((statement.total_due, statement.total_paid, statement.balance))

        assert len(results) == 1

    async def test_price_changes_do_not_rewrite_history(
        self,
        ledger_repo: InMemoryLedgerRepository,
        user_service: UserService,
        lesson_service: LessonService,
        ledger_service: LedgerService,
        test_teacher: user_models.TeacherUser
    ):
        lesson = await lesson_service.create_lesson(
            LessonCreate(
                student_id=TEST_STUDENT_ID, subject=TEST_SUBJECT_NAME, date=JUNE_1,
                time=datetime.time(10, 0), status=AttendanceStatus.PRESENT
            ),
            current_user=test_teacher
        )
        before = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, JUNE_1, JUNE_30)

        await user_service.update_user(TEST_TEACHER_ID, user_models.TeacherUpdate(
            role=UserRole.TEACHER.value, default_session_price=Decimal("500.00")
        ))
        await user_service.update_user(TEST_STUDENT_ID, user_models.StudentUpdate(
            role=UserRole.STUDENT.value,
            teacher_links=[TeacherLink(teacher_id=TEST_TEACHER_ID, session_price=Decimal("300.00"))]
        ))
        after = await ledger_service.get_account_statement(TEST_TEACHER_ID, UserRole.TEACHER, JUNE_1, JUNE_30)

        assert ledger_repo.lessons[lesson.id].session_price == Decimal("90.00")
        assert before.total_due == Decimal("90.00")
        assert after == before
