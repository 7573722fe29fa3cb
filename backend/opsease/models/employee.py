"""Employees, daily attendance and wage payments."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID, UTCDateTime, utcnow


class Department(str, enum.Enum):
    CUTTING = "cutting"
    STITCHING = "stitching"
    QUALITY_CONTROL = "quality_control"
    PACKAGING = "packaging"
    MANAGEMENT = "management"


class EmployeeType(str, enum.Enum):
    STAFF = "staff"
    WORKER = "worker"


class PaymentType(str, enum.Enum):
    """How an employee's wage is computed."""

    DAILY_RATE = "daily_rate"
    PIECE_RATE = "piece_rate"
    MONTHLY_SALARY = "monthly_salary"


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    LATE = "late"


class WorkerPaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"


class WorkerPaymentMethod(str, enum.Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"


def _enum_type(enum_cls: type[enum.Enum], name: str) -> SAEnum:
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        validate_strings=True,
    )


DEPARTMENT_ENUM = _enum_type(Department, "employee_department_enum")
EMPLOYEE_TYPE_ENUM = _enum_type(EmployeeType, "employee_type_enum")
PAYMENT_TYPE_ENUM = _enum_type(PaymentType, "employee_payment_type_enum")
ATTENDANCE_STATUS_ENUM = _enum_type(AttendanceStatus, "attendance_status_enum")
WORKER_PAYMENT_STATUS_ENUM = _enum_type(WorkerPaymentStatus, "worker_payment_status_enum")
WORKER_PAYMENT_METHOD_ENUM = _enum_type(WorkerPaymentMethod, "worker_payment_method_enum")


class Employee(Base):
    """A staff member or shop-floor worker."""

    __tablename__ = "employees"
    __table_args__ = (
        UniqueConstraint("user_id", "employee_code", name="uq_employees_user_code"),
        CheckConstraint("rate >= 0", name="ck_employees_rate_non_negative"),
    )

    id = Column("employee_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    employee_code = Column(String(50), nullable=False)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=True)
    phone = Column(String(40), nullable=True)
    department = Column(DEPARTMENT_ENUM, nullable=False)
    position = Column(String(120), nullable=True)
    employee_type = Column(EMPLOYEE_TYPE_ENUM, nullable=False)
    payment_type = Column(PAYMENT_TYPE_ENUM, nullable=False)
    rate = Column(Numeric(8, 2), nullable=False)
    join_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    attendance = relationship(
        "Attendance",
        back_populates="employee",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    payments = relationship(
        "WorkerPayment",
        back_populates="employee",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Attendance(Base):
    """One attendance record per employee and calendar day."""

    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("employee_id", "attendance_date", name="uq_attendance_employee_date"),
    )

    id = Column("attendance_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    employee_id = Column(
        GUID(), ForeignKey("employees.employee_id", ondelete="CASCADE"), nullable=False
    )
    attendance_date = Column(Date, nullable=False)
    check_in = Column(UTCDateTime(), nullable=True)
    check_out = Column(UTCDateTime(), nullable=True)
    status = Column(ATTENDANCE_STATUS_ENUM, nullable=False)
    work_hours = Column(Numeric(4, 2), nullable=False, default=0)
    overtime = Column(Numeric(4, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)

    employee = relationship("Employee", back_populates="attendance")


class WorkerPayment(Base):
    """Wages owed or paid to an employee for a pay period."""

    __tablename__ = "worker_payments"
    __table_args__ = (
        CheckConstraint("pay_period_start <= pay_period_end", name="ck_worker_payments_period"),
        CheckConstraint("net_amount >= 0", name="ck_worker_payments_net_non_negative"),
    )

    id = Column("worker_payment_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    employee_id = Column(
        GUID(), ForeignKey("employees.employee_id", ondelete="CASCADE"), nullable=False
    )
    pay_period_start = Column(Date, nullable=False)
    pay_period_end = Column(Date, nullable=False)
    regular_hours = Column(Numeric(6, 2), nullable=False, default=0)
    overtime_hours = Column(Numeric(6, 2), nullable=False, default=0)
    pieces_completed = Column(Integer, nullable=False, default=0)
    gross_amount = Column(Numeric(10, 2), nullable=False)
    deductions = Column(Numeric(8, 2), nullable=False, default=0)
    net_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(WORKER_PAYMENT_STATUS_ENUM, nullable=False, default=WorkerPaymentStatus.PENDING)
    payment_date = Column(Date, nullable=True)
    payment_method = Column(WORKER_PAYMENT_METHOD_ENUM, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    employee = relationship("Employee", back_populates="payments")


Index("attendance_user_date_idx", Attendance.user_id, Attendance.attendance_date)
Index("worker_payments_user_status_idx", WorkerPayment.user_id, WorkerPayment.status)
