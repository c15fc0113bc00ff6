'''
Static enums shared by the ORM models, the pydantic schemas and the services.
'''
import enum


class ListableEnum(str, enum.Enum):
    """A str Enum that can list all of its values."""
    @classmethod
    def get_all_names(cls) -> list[str]:
        return [member.value for member in cls]


class UserRole(ListableEnum):
    ADMIN = "Admin"
    TEACHER = "Teacher"
    STUDENT = "Student"


class AttendanceStatus(ListableEnum):
    PRESENT = "Present"
    ABSENT = "Absent"


class PaymentDirection(ListableEnum):
    PAID_TO_TEACHER = "paid_to_teacher"
    RECEIVED_FROM_STUDENT = "received_from_student"


class BalanceMeaning(ListableEnum):
    """How a positive statement balance must be read for the queried role."""
    ACADEMY_OWES_TEACHER = "academy_owes_teacher"
    STUDENT_OWES_ACADEMY = "student_owes_academy"


class ReportDirection(ListableEnum):
    STUDENTS_OF_TEACHER = "students_of_teacher"
    TEACHERS_OF_STUDENT = "teachers_of_student"


class TransactionKind(ListableEnum):
    LESSON = "lesson"
    PAYMENT = "payment"


# The one payment direction each billable role may receive
DIRECTION_FOR_ROLE = {
    UserRole.TEACHER: PaymentDirection.PAID_TO_TEACHER,
    UserRole.STUDENT: PaymentDirection.RECEIVED_FROM_STUDENT,
}

BALANCE_MEANING_FOR_ROLE = {
    UserRole.TEACHER: BalanceMeaning.ACADEMY_OWES_TEACHER,
    UserRole.STUDENT: BalanceMeaning.STUDENT_OWES_ACADEMY,
}
