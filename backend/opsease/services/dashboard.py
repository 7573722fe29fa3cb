"""Aggregates shown on the operations dashboard."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from .common import normalize_money


class DashboardService:
    """Computes headline figures for a single user."""

    @staticmethod
    def stats(db: Session, user_id: str) -> schemas.DashboardStats:
        today = date.today()

        active_orders = (
            db.query(func.count(models.Order.id))
            .filter(
                models.Order.user_id == user_id,
                models.Order.status == models.OrderStatus.IN_PROGRESS,
            )
            .scalar()
        )
        today_expenses = (
            db.query(func.coalesce(func.sum(models.Expense.amount), 0))
            .filter(models.Expense.user_id == user_id, models.Expense.expense_date == today)
            .scalar()
        )
        low_stock_items = (
            db.query(func.count(models.StockItem.id))
            .filter(
                models.StockItem.user_id == user_id,
                models.StockItem.current_stock <= models.StockItem.reorder_level,
            )
            .scalar()
        )
        present_today = (
            db.query(func.count(models.Attendance.id))
            .filter(
                models.Attendance.user_id == user_id,
                models.Attendance.attendance_date == today,
                models.Attendance.status.in_(
                    [models.AttendanceStatus.PRESENT, models.AttendanceStatus.LATE]
                ),
            )
            .scalar()
        )
        total_employees = (
            db.query(func.count(models.Employee.id))
            .filter(models.Employee.user_id == user_id, models.Employee.is_active == True)  # noqa: E712
            .scalar()
        )

        return schemas.DashboardStats(
            active_orders=active_orders or 0,
            today_expenses=normalize_money(Decimal(str(today_expenses or 0))),
            low_stock_items=low_stock_items or 0,
            present_today=present_today or 0,
            total_employees=total_employees or 0,
        )
