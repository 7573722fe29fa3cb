"""Business logic for expenses."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Tuple

from sqlalchemy.orm import Session

from .. import models, schemas
from .common import apply_updates


class ExpenseService:
    """Encapsulates CRUD operations for expenses."""

    @staticmethod
    def list_expenses(
        db: Session,
        user_id: str,
        *,
        skip: int = 0,
        limit: int = 100,
        category: Optional[models.ExpenseCategory] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[Iterable[models.Expense], int]:
        if start_date and end_date and start_date > end_date:
            raise ValueError("start_date cannot be after end_date")

        query = db.query(models.Expense).filter(models.Expense.user_id == user_id)
        if category:
            query = query.filter(models.Expense.category == category)
        if start_date:
            query = query.filter(models.Expense.expense_date >= start_date)
        if end_date:
            query = query.filter(models.Expense.expense_date <= end_date)

        total = query.count()
        items = (
            query.order_by(models.Expense.expense_date.desc(), models.Expense.created_at.desc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def create_expense(db: Session, user_id: str, data: schemas.ExpenseCreate) -> models.Expense:
        expense = models.Expense(user_id=user_id, **data.model_dump())
        db.add(expense)
        db.commit()
        db.refresh(expense)
        return expense

    @staticmethod
    def get_expense(db: Session, user_id: str, expense_id: str) -> Optional[models.Expense]:
        return (
            db.query(models.Expense)
            .filter(models.Expense.user_id == user_id, models.Expense.id == expense_id)
            .first()
        )

    @staticmethod
    def update_expense(
        db: Session, expense: models.Expense, data: schemas.ExpenseUpdate
    ) -> models.Expense:
        update_data = data.model_dump(exclude_unset=True)
        for field in ("category", "amount", "description", "payment_method", "expense_date"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        apply_updates(expense, update_data)
        db.add(expense)
        db.commit()
        db.refresh(expense)
        return expense

    @staticmethod
    def delete_expense(db: Session, expense: models.Expense) -> None:
        db.delete(expense)
        db.commit()
