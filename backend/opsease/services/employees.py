"""Business logic for employees, attendance and wage payments."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from sqlalchemy.orm import Session

from .. import models, schemas
from .common import RecordConflictError, apply_updates, normalize_money

LOGGER = logging.getLogger(__name__)

_MAX_WORK_HOURS = Decimal("24.00")
_SECONDS_PER_HOUR = Decimal("3600")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EmployeeService:
    """CRUD operations for employees."""

    @staticmethod
    def list_employees(
        db: Session,
        user_id: str,
        *,
        include_inactive: bool = False,
        department: Optional[models.Department] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[Iterable[models.Employee], int]:
        query = db.query(models.Employee).filter(models.Employee.user_id == user_id)
        if not include_inactive:
            query = query.filter(models.Employee.is_active == True)  # noqa: E712
        if department is not None:
            query = query.filter(models.Employee.department == department)

        total = query.count()
        items = (
            query.order_by(models.Employee.name)
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def get_employee(db: Session, user_id: str, employee_id: str) -> Optional[models.Employee]:
        return (
            db.query(models.Employee)
            .filter(models.Employee.user_id == user_id, models.Employee.id == employee_id)
            .first()
        )

    @staticmethod
    def _ensure_code_available(
        db: Session, user_id: str, code: str, *, exclude_id: Optional[str] = None
    ) -> None:
        query = db.query(models.Employee.id).filter(
            models.Employee.user_id == user_id, models.Employee.employee_code == code
        )
        if exclude_id is not None:
            query = query.filter(models.Employee.id != exclude_id)
        if query.first() is not None:
            raise RecordConflictError(f"Employee {code} already exists")

    @staticmethod
    def create_employee(
        db: Session, user_id: str, data: schemas.EmployeeCreate
    ) -> models.Employee:
        payload = data.model_dump()
        payload["employee_code"] = payload["employee_code"].strip()
        EmployeeService._ensure_code_available(db, user_id, payload["employee_code"])
        employee = models.Employee(user_id=user_id, **payload)
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee

    @staticmethod
    def update_employee(
        db: Session, employee: models.Employee, data: schemas.EmployeeUpdate
    ) -> models.Employee:
        update_data = data.model_dump(exclude_unset=True)
        for field in (
            "employee_code",
            "name",
            "department",
            "employee_type",
            "payment_type",
            "rate",
            "join_date",
            "is_active",
        ):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        if "employee_code" in update_data:
            update_data["employee_code"] = update_data["employee_code"].strip()
            EmployeeService._ensure_code_available(
                db, employee.user_id, update_data["employee_code"], exclude_id=employee.id
            )
        apply_updates(employee, update_data)
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee


class AttendanceService:
    """Daily attendance, one record per employee and day."""

    @staticmethod
    def derive_work_hours(check_in, check_out) -> Decimal:
        """Hours between check-in and check-out, rounded to two places."""

        if check_in is None or check_out is None:
            return Decimal("0.00")
        check_in, check_out = _as_utc(check_in), _as_utc(check_out)
        if check_out < check_in:
            raise ValueError("check_out cannot be before check_in")
        seconds = Decimal(str((check_out - check_in).total_seconds()))
        hours = normalize_money(seconds / _SECONDS_PER_HOUR)
        if hours > _MAX_WORK_HOURS:
            raise ValueError("A shift cannot be longer than 24 hours")
        return hours

    @staticmethod
    def list_attendance(
        db: Session, user_id: str, *, attendance_date: Optional[date] = None
    ) -> list[models.Attendance]:
        query = db.query(models.Attendance).filter(models.Attendance.user_id == user_id)
        if attendance_date is not None:
            query = query.filter(models.Attendance.attendance_date == attendance_date)
        return query.order_by(
            models.Attendance.attendance_date.desc(), models.Attendance.created_at.desc()
        ).all()

    @staticmethod
    def get_attendance(
        db: Session, user_id: str, attendance_id: str
    ) -> Optional[models.Attendance]:
        return (
            db.query(models.Attendance)
            .filter(
                models.Attendance.user_id == user_id,
                models.Attendance.id == attendance_id,
            )
            .first()
        )

    @staticmethod
    def mark_attendance(
        db: Session, user_id: str, data: schemas.AttendanceCreate
    ) -> models.Attendance:
        employee = EmployeeService.get_employee(db, user_id, data.employee_id)
        if employee is None:
            raise ValueError("Employee not found")
        existing = (
            db.query(models.Attendance.id)
            .filter(
                models.Attendance.employee_id == employee.id,
                models.Attendance.attendance_date == data.attendance_date,
            )
            .first()
        )
        if existing is not None:
            raise RecordConflictError(
                f"Attendance for {employee.name} on {data.attendance_date.isoformat()} already exists"
            )

        payload = data.model_dump()
        if payload["work_hours"] is None:
            payload["work_hours"] = AttendanceService.derive_work_hours(
                data.check_in, data.check_out
            )
        record = models.Attendance(user_id=user_id, **payload)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def update_attendance(
        db: Session, record: models.Attendance, data: schemas.AttendanceUpdate
    ) -> models.Attendance:
        update_data = data.model_dump(exclude_unset=True)
        for field in ("status", "overtime"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        times_changed = "check_in" in update_data or "check_out" in update_data
        if update_data.get("work_hours") is None:
            update_data.pop("work_hours", None)
            if times_changed:
                update_data["work_hours"] = AttendanceService.derive_work_hours(
                    update_data.get("check_in", record.check_in),
                    update_data.get("check_out", record.check_out),
                )
        apply_updates(record, update_data)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record


class WorkerPaymentService:
    """Wage payments owed to employees."""

    @staticmethod
    def _net_amount(gross_amount: Decimal, deductions: Decimal) -> Decimal:
        net = normalize_money(Decimal(gross_amount) - Decimal(deductions))
        if net < 0:
            raise ValueError("Deductions cannot exceed the gross amount")
        return net

    @staticmethod
    def list_payments(
        db: Session,
        user_id: str,
        *,
        status: Optional[models.WorkerPaymentStatus] = None,
        employee_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[Iterable[models.WorkerPayment], int]:
        query = db.query(models.WorkerPayment).filter(models.WorkerPayment.user_id == user_id)
        if status is not None:
            query = query.filter(models.WorkerPayment.status == status)
        if employee_id:
            query = query.filter(models.WorkerPayment.employee_id == employee_id)

        total = query.count()
        items = (
            query.order_by(models.WorkerPayment.created_at.desc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def get_payment(db: Session, user_id: str, payment_id: str) -> Optional[models.WorkerPayment]:
        return (
            db.query(models.WorkerPayment)
            .filter(
                models.WorkerPayment.user_id == user_id,
                models.WorkerPayment.id == payment_id,
            )
            .first()
        )

    @staticmethod
    def create_payment(
        db: Session, user_id: str, data: schemas.WorkerPaymentCreate
    ) -> models.WorkerPayment:
        employee = EmployeeService.get_employee(db, user_id, data.employee_id)
        if employee is None:
            raise ValueError("Employee not found")
        if data.pay_period_start > data.pay_period_end:
            raise ValueError("pay_period_start cannot be after pay_period_end")

        payload = data.model_dump()
        payload["net_amount"] = WorkerPaymentService._net_amount(
            data.gross_amount, data.deductions
        )
        if data.status == models.WorkerPaymentStatus.PAID and data.payment_date is None:
            payload["payment_date"] = date.today()
        payment = models.WorkerPayment(user_id=user_id, **payload)
        db.add(payment)
        db.commit()
        db.refresh(payment)
        LOGGER.info("Recorded wage payment of %s for %s", payment.net_amount, employee.name)
        return payment

    @staticmethod
    def update_payment(
        db: Session, payment: models.WorkerPayment, data: schemas.WorkerPaymentUpdate
    ) -> models.WorkerPayment:
        update_data = data.model_dump(exclude_unset=True)
        for field in (
            "regular_hours",
            "overtime_hours",
            "pieces_completed",
            "gross_amount",
            "deductions",
            "status",
        ):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        if "gross_amount" in update_data or "deductions" in update_data:
            update_data["net_amount"] = WorkerPaymentService._net_amount(
                update_data.get("gross_amount", payment.gross_amount),
                update_data.get("deductions", payment.deductions),
            )
        becomes_paid = (
            update_data.get("status") == models.WorkerPaymentStatus.PAID
            and models.WorkerPaymentStatus(payment.status) != models.WorkerPaymentStatus.PAID
        )
        if becomes_paid and update_data.get("payment_date", payment.payment_date) is None:
            update_data["payment_date"] = date.today()
        apply_updates(payment, update_data)
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment
