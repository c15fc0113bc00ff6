'''
Pytest configuration.

This file sets up fixtures for:
1. Forcing the application into TEST_MODE before any app code is imported.
2. A seeded in-memory repository and every service wired to it, for the
   service-level tests.
3. A FastAPI TestClient whose lifespan builds a fresh in-memory SQLite
   database (plus the bootstrap admin) for every test.
4. A small academy created through the HTTP API for endpoint tests.
'''

import os

# Must happen before `settings` is instantiated by the first app import.
os.environ["TEST_MODE"] = "True"
os.environ["SECRET_KEY"] = "test-only-signing-key"
os.environ["FIRST_ADMIN_PASSWORD"] = "admin-test-password"
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from types import SimpleNamespace
from decimal import Decimal

# --- FastAPI & Testing Imports ---
from fastapi.testclient import TestClient

# --- Constant Imports ----
from tests.constants import (
    TEST_ADMIN_ID,
    TEST_TEACHER_ID,
    TEST_OTHER_TEACHER_ID,
    TEST_STUDENT_ID,
    TEST_UNLINKED_STUDENT_ID,
    TEST_TEACHER_DEFAULT_PRICE,
    TEST_OTHER_TEACHER_DEFAULT_PRICE,
    TEST_LINK_PRICE,
    TEST_PASSWORD,
    TEST_SUBJECT_ID,
    TEST_SUBJECT_NAME,
    TEST_PRESENT_LESSON_ID,
    TEST_ABSENT_LESSON_ID,
    TEST_PAYMENT_ID,
    JUNE_1, JUNE_10, JUNE_15,
)
from tests.database.factories import (
    AdminFactory,
    TeacherFactory,
    StudentFactory,
    TeacherLinkFactory,
    SubjectFactory,
    LessonFactory,
    PaymentFactory,
)

# --- Application Imports ---
from src.academy_ledger.main import app
from src.academy_ledger.common.config import settings
from src.academy_ledger.database.db_enums import UserRole, AttendanceStatus, PaymentDirection
from src.academy_ledger.database.memory import InMemoryLedgerRepository
from src.academy_ledger.models import user as user_models
from src.academy_ledger.services.security import JWTHandler
from src.academy_ledger.services.user_service import UserService
from src.academy_ledger.services.subject_service import SubjectService
from src.academy_ledger.services.pricing_service import PricingResolver
from src.academy_ledger.services.finance_service import LessonService, PaymentService, LedgerService
from src.academy_ledger.services.report_service import ReportService


@pytest.fixture(scope="session")
def anyio_backend():
    """
    Override the default 'anyio_backend' fixture.
    1. Forces the backend to 'asyncio' (solves 'trio' error).
    2. Promotes the scope to 'session' (solves 'ScopeMismatch').
    """
    return "asyncio"


# --- 1. In-Memory Directory Fixtures ---

@pytest.fixture(scope="function")
def test_admin() -> user_models.AdminUser:
    return AdminFactory.build(id=TEST_ADMIN_ID, username="admin", name="Admin User")


@pytest.fixture(scope="function")
def test_teacher() -> user_models.TeacherUser:
    return TeacherFactory.build(
        id=TEST_TEACHER_ID, username="teacher1", name="John Doe",
        default_session_price=TEST_TEACHER_DEFAULT_PRICE
    )


@pytest.fixture(scope="function")
def test_other_teacher() -> user_models.TeacherUser:
    return TeacherFactory.build(
        id=TEST_OTHER_TEACHER_ID, username="teacher2", name="Jane Smith",
        default_session_price=TEST_OTHER_TEACHER_DEFAULT_PRICE
    )


@pytest.fixture(scope="function")
def test_student() -> user_models.StudentUser:
    """Linked to test_teacher with an explicit price override."""
    return StudentFactory.build(
        id=TEST_STUDENT_ID, username="student1", name="Alice",
        teacher_links=[TeacherLinkFactory.build(teacher_id=TEST_TEACHER_ID, session_price=TEST_LINK_PRICE)]
    )


@pytest.fixture(scope="function")
def test_unlinked_student() -> user_models.StudentUser:
    """Only linked to test_other_teacher."""
    return StudentFactory.build(
        id=TEST_UNLINKED_STUDENT_ID, username="student2", name="Bob",
        teacher_links=[TeacherLinkFactory.build(
            teacher_id=TEST_OTHER_TEACHER_ID, session_price=TEST_OTHER_TEACHER_DEFAULT_PRICE
        )]
    )


@pytest.fixture(scope="function")
def ledger_repo(
    test_admin, test_teacher, test_other_teacher, test_student, test_unlinked_student
) -> InMemoryLedgerRepository:
    """A directory and subject catalog without any lessons or payments."""
    return InMemoryLedgerRepository(
        users=[test_admin, test_teacher, test_other_teacher, test_student, test_unlinked_student],
        subjects=[SubjectFactory.build(id=TEST_SUBJECT_ID, name=TEST_SUBJECT_NAME)]
    )


@pytest.fixture(scope="function")
def june_records() -> SimpleNamespace:
    """
    The June 2024 scenario for test_teacher / test_student:
    a Present lesson on the 1st, an Absent one on the 15th (both priced 100)
    and a payment of 50 to the teacher on the 10th.
    """
    return SimpleNamespace(
        lessons=[
            LessonFactory.build(
                id=TEST_PRESENT_LESSON_ID, teacher_id=TEST_TEACHER_ID, student_id=TEST_STUDENT_ID,
                date=JUNE_1, status=AttendanceStatus.PRESENT, session_price=Decimal("100.00")
            ),
            LessonFactory.build(
                id=TEST_ABSENT_LESSON_ID, teacher_id=TEST_TEACHER_ID, student_id=TEST_STUDENT_ID,
                date=JUNE_15, status=AttendanceStatus.ABSENT, session_price=Decimal("100.00")
            ),
        ],
        payments=[
            PaymentFactory.build(
                id=TEST_PAYMENT_ID, user_id=TEST_TEACHER_ID, amount=Decimal("50.00"),
                date=JUNE_10, direction=PaymentDirection.PAID_TO_TEACHER
            ),
        ]
    )


@pytest.fixture(scope="function")
def june_repo(ledger_repo: InMemoryLedgerRepository, june_records: SimpleNamespace) -> InMemoryLedgerRepository:
    for lesson in june_records.lessons:
        ledger_repo.lessons[lesson.id] = lesson
    for payment in june_records.payments:
        ledger_repo.payments[payment.id] = payment
    return ledger_repo


# --- 2. Service Fixtures (in-memory repository) ---

@pytest.fixture(scope="function")
def user_service(ledger_repo) -> UserService:
    return UserService(ledger_repo)


@pytest.fixture(scope="function")
def subject_service(ledger_repo) -> SubjectService:
    return SubjectService(ledger_repo)


@pytest.fixture(scope="function")
def pricing_resolver(ledger_repo) -> PricingResolver:
    return PricingResolver(ledger_repo)


@pytest.fixture(scope="function")
def lesson_service(ledger_repo, pricing_resolver, subject_service) -> LessonService:
    return LessonService(ledger_repo, pricing_resolver, subject_service)


@pytest.fixture(scope="function")
def payment_service(ledger_repo) -> PaymentService:
    return PaymentService(ledger_repo)


@pytest.fixture(scope="function")
def ledger_service(ledger_repo) -> LedgerService:
    return LedgerService(ledger_repo)


@pytest.fixture(scope="function")
def report_service(ledger_repo) -> ReportService:
    return ReportService(ledger_repo)


# --- 3. API Fixtures ---

def auth_headers_for(user_id, role: str) -> dict:
    """Creates a JWT token for the given user id and returns auth headers."""
    token = JWTHandler.create_access_token(subject=user_id, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def client() -> TestClient:
    """
    The core fixture for all API tests.

    Entering the TestClient runs the app's lifespan, which creates a brand
    new in-memory SQLite database, its tables and the bootstrap admin.
    Leaving it disposes the engine, and with it the database.
    """
    assert settings.TEST_MODE is True, \
        "TEST_MODE was not set to True! Check your .env file or environment."

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def admin_headers(client: TestClient) -> dict:
    """Logs in as the bootstrap admin created by the lifespan."""
    response = client.post(
        "/auth/login",
        data={"username": settings.FIRST_ADMIN_USERNAME, "password": settings.FIRST_ADMIN_PASSWORD}
    )
    assert response.status_code == 200, response.json()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture(scope="function")
def api_academy(client: TestClient, admin_headers: dict) -> SimpleNamespace:
    """
    Creates, through the API, two teachers (100 and 120), a student linked to
    the first teacher at 90, a student linked only to the second teacher and
    the Mathematics subject.
    """
    def create(payload: dict) -> dict:
        response = client.post("/users", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.json()
        return response.json()

    teacher = create({
        "role": "Teacher", "username": "teacher1", "password": TEST_PASSWORD,
        "name": "John Doe", "default_session_price": "100.00"
    })
    other_teacher = create({
        "role": "Teacher", "username": "teacher2", "password": TEST_PASSWORD,
        "name": "Jane Smith", "default_session_price": "120.00"
    })
    student = create({
        "role": "Student", "username": "student1", "password": TEST_PASSWORD, "name": "Alice",
        "teacher_links": [{"teacher_id": teacher["id"], "session_price": "90.00"}]
    })
    unlinked_student = create({
        "role": "Student", "username": "student2", "password": TEST_PASSWORD, "name": "Bob",
        "teacher_links": [{"teacher_id": other_teacher["id"], "session_price": "120.00"}]
    })
    subject = client.post("/subjects", json={"name": TEST_SUBJECT_NAME}, headers=admin_headers)
    assert subject.status_code == 201, subject.json()

    return SimpleNamespace(
        teacher=teacher,
        other_teacher=other_teacher,
        student=student,
        unlinked_student=unlinked_student,
        subject=subject.json(),
        admin_headers=admin_headers,
        teacher_headers=auth_headers_for(teacher["id"], UserRole.TEACHER.value),
        other_teacher_headers=auth_headers_for(other_teacher["id"], UserRole.TEACHER.value),
        student_headers=auth_headers_for(student["id"], UserRole.STUDENT.value),
    )
