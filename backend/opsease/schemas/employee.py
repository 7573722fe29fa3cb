from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ..models.employee import (
    AttendanceStatus,
    Department,
    EmployeeType,
    PaymentType,
    WorkerPaymentMethod,
    WorkerPaymentStatus,
)
from .common import ApiModel, PaginatedResponse


class EmployeeBase(ApiModel):
    employee_code: str = Field(..., min_length=1, max_length=50, description="Business employee identifier")
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=40)
    department: Department
    position: Optional[str] = Field(default=None, max_length=120)
    employee_type: EmployeeType
    payment_type: PaymentType
    rate: Decimal = Field(..., ge=0, max_digits=8, decimal_places=2)
    join_date: date
    is_active: bool = True


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(ApiModel):
    employee_code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=40)
    department: Optional[Department] = None
    position: Optional[str] = Field(default=None, max_length=120)
    employee_type: Optional[EmployeeType] = None
    payment_type: Optional[PaymentType] = None
    rate: Optional[Decimal] = Field(default=None, ge=0, max_digits=8, decimal_places=2)
    join_date: Optional[date] = None
    is_active: Optional[bool] = None


class EmployeeRead(EmployeeBase):
    id: str
    created_at: datetime
    updated_at: datetime


class EmployeeListResponse(PaginatedResponse[EmployeeRead]):
    """Paginated employee listing."""


class AttendanceBase(ApiModel):
    employee_id: str
    attendance_date: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: AttendanceStatus
    work_hours: Optional[Decimal] = Field(
        default=None,
        ge=0,
        le=24,
        max_digits=4,
        decimal_places=2,
        description="Derived from check-in and check-out when omitted",
    )
    overtime: Decimal = Field(default=Decimal("0"), ge=0, max_digits=4, decimal_places=2)
    notes: Optional[str] = None


class AttendanceCreate(AttendanceBase):
    pass


class AttendanceUpdate(ApiModel):
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    work_hours: Optional[Decimal] = Field(default=None, ge=0, le=24, max_digits=4, decimal_places=2)
    overtime: Optional[Decimal] = Field(default=None, ge=0, max_digits=4, decimal_places=2)
    notes: Optional[str] = None


class AttendanceRead(AttendanceBase):
    id: str
    work_hours: Decimal
    created_at: datetime


class WorkerPaymentBase(ApiModel):
    employee_id: str
    pay_period_start: date
    pay_period_end: date
    regular_hours: Decimal = Field(default=Decimal("0"), ge=0, max_digits=6, decimal_places=2)
    overtime_hours: Decimal = Field(default=Decimal("0"), ge=0, max_digits=6, decimal_places=2)
    pieces_completed: int = Field(default=0, ge=0)
    gross_amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    deductions: Decimal = Field(default=Decimal("0"), ge=0, max_digits=8, decimal_places=2)
    status: WorkerPaymentStatus = WorkerPaymentStatus.PENDING
    payment_date: Optional[date] = None
    payment_method: Optional[WorkerPaymentMethod] = None
    notes: Optional[str] = None


class WorkerPaymentCreate(WorkerPaymentBase):
    """Payload for recording wages; ``netAmount`` is computed by the server."""

    pass


class WorkerPaymentUpdate(ApiModel):
    regular_hours: Optional[Decimal] = Field(default=None, ge=0, max_digits=6, decimal_places=2)
    overtime_hours: Optional[Decimal] = Field(default=None, ge=0, max_digits=6, decimal_places=2)
    pieces_completed: Optional[int] = Field(default=None, ge=0)
    gross_amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    deductions: Optional[Decimal] = Field(default=None, ge=0, max_digits=8, decimal_places=2)
    status: Optional[WorkerPaymentStatus] = None
    payment_date: Optional[date] = None
    payment_method: Optional[WorkerPaymentMethod] = None
    notes: Optional[str] = None


class WorkerPaymentRead(WorkerPaymentBase):
    id: str
    net_amount: Decimal
    created_at: datetime
    updated_at: datetime


class WorkerPaymentListResponse(PaginatedResponse[WorkerPaymentRead]):
    """Paginated wage payment listing."""
