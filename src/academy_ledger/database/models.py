from typing import Optional

from sqlalchemy import Date, DateTime, Enum, ForeignKeyConstraint, Index, Numeric, PrimaryKeyConstraint, String, Text, Time, UniqueConstraint, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
import datetime
import decimal
import uuid

from .db_enums import UserRole, AttendanceStatus, PaymentDirection

class Base(DeclarativeBase):
    pass


class Users(Base):
    __tablename__ = 'users'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='users_pkey'),
        UniqueConstraint('username', name='users_username_key')
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(150))
    name: Mapped[str] = mapped_column(Text)
    hashed_password: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(Enum(*UserRole.get_all_names(), name='user_role'))
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime(True), server_default=func.now())

    # Every query on Users joins the role subtables so no column is lazy-loaded.
    __mapper_args__ = {
        'polymorphic_on': 'role',
        'with_polymorphic': '*',
    }


class Admins(Users):
    __tablename__ = 'admins'
    __table_args__ = (
        ForeignKeyConstraint(['id'], ['users.id'], ondelete='CASCADE', name='admins_id_fkey'),
        PrimaryKeyConstraint('id', name='admins_pkey')
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)

    __mapper_args__ = {'polymorphic_identity': UserRole.ADMIN.value}


class Teachers(Users):
    __tablename__ = 'teachers'
    __table_args__ = (
        ForeignKeyConstraint(['id'], ['users.id'], ondelete='CASCADE', name='teachers_id_fkey'),
        PrimaryKeyConstraint('id', name='teachers_pkey')
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    default_session_price: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2))

    __mapper_args__ = {'polymorphic_identity': UserRole.TEACHER.value}


class Students(Users):
    __tablename__ = 'students'
    __table_args__ = (
        ForeignKeyConstraint(['id'], ['users.id'], ondelete='CASCADE', name='students_id_fkey'),
        PrimaryKeyConstraint('id', name='students_pkey')
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)

    teacher_links: Mapped[list['TeacherLinks']] = relationship(
        'TeacherLinks',
        back_populates='student',
        cascade='all, delete-orphan',
        lazy='selectin'
    )

    __mapper_args__ = {'polymorphic_identity': UserRole.STUDENT.value}


class TeacherLinks(Base):
    __tablename__ = 'teacher_links'
    __table_args__ = (
        ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE', name='teacher_links_student_id_fkey'),
        ForeignKeyConstraint(['teacher_id'], ['teachers.id'], ondelete='CASCADE', name='teacher_links_teacher_id_fkey'),
        PrimaryKeyConstraint('id', name='teacher_links_pkey'),
        UniqueConstraint('student_id', 'teacher_id', name='teacher_links_student_teacher_key'),
        Index('idx_teacher_links_teacher', 'teacher_id')
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    teacher_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    session_price: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2))
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime(True), server_default=func.now())

    student: Mapped['Students'] = relationship('Students', back_populates='teacher_links')


class Subjects(Base):
    __tablename__ = 'subjects'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='subjects_pkey'),
        UniqueConstraint('name', name='subjects_name_key')
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text)


# Lessons and payments reference users by plain id columns; the integrity
# rules between them are enforced by the services.
class Lessons(Base):
    __tablename__ = 'lessons'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='lessons_pkey'),
        Index('idx_lessons_teacher', 'teacher_id'),
        Index('idx_lessons_student', 'student_id'),
        Index('idx_lessons_date', 'date')
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    teacher_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    subject: Mapped[str] = mapped_column(Text)
    date: Mapped[datetime.date] = mapped_column(Date)
    time: Mapped[datetime.time] = mapped_column(Time)
    status: Mapped[str] = mapped_column(Enum(*AttendanceStatus.get_all_names(), name='attendance_status'))
    session_price: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2))
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime(True), server_default=func.now())


class Payments(Base):
    __tablename__ = 'payments'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='payments_pkey'),
        Index('idx_payments_user', 'user_id')
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    amount: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2))
    date: Mapped[datetime.date] = mapped_column(Date)
    direction: Mapped[str] = mapped_column(Enum(*PaymentDirection.get_all_names(), name='payment_direction'))
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime(True), server_default=func.now())
