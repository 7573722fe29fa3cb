"""Router exposing expense operations."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models.expense import ExpenseCategory
from ..security import UserIdentity, require_user
from ..services import ExpenseService

router = APIRouter(dependencies=[Depends(require_user)])


def _get_expense_or_404(db: Session, identity: UserIdentity, expense_id: str):
    expense = ExpenseService.get_expense(db, identity.user_id, expense_id)
    if expense is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return expense


@router.get("", response_model=schemas.ExpenseListResponse)
def list_expenses(
    skip: int = Query(0, ge=0, description="Number of expenses to skip"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of expenses to return"),
    category: Optional[ExpenseCategory] = Query(None, description="Filter by expense category"),
    start_date: Optional[date] = Query(
        None, alias="startDate", description="Return expenses on or after this date"
    ),
    end_date: Optional[date] = Query(
        None, alias="endDate", description="Return expenses on or before this date"
    ),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.ExpenseListResponse:
    """Return expenses with pagination and filtering."""

    try:
        items, total = ExpenseService.list_expenses(
            db,
            identity.user_id,
            skip=skip,
            limit=limit,
            category=category,
            start_date=start_date,
            end_date=end_date,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return schemas.ExpenseListResponse(items=items, total=total, limit=limit, skip=skip)


@router.post("", response_model=schemas.ExpenseRead, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense_in: schemas.ExpenseCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.ExpenseRead:
    return ExpenseService.create_expense(db, identity.user_id, expense_in)


@router.put("/{expense_id}", response_model=schemas.ExpenseRead)
def update_expense(
    expense_id: str,
    expense_in: schemas.ExpenseUpdate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.ExpenseRead:
    expense = _get_expense_or_404(db, identity, expense_id)
    return ExpenseService.update_expense(db, expense, expense_in)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> None:
    expense = _get_expense_or_404(db, identity, expense_id)
    ExpenseService.delete_expense(db, expense)
