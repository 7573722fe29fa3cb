"""Router exposing wage payments to employees."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models.employee import WorkerPaymentStatus
from ..security import UserIdentity, require_user
from ..services import WorkerPaymentService

router = APIRouter(dependencies=[Depends(require_user)])


@router.get("", response_model=schemas.WorkerPaymentListResponse)
def list_payments(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    status_filter: Optional[WorkerPaymentStatus] = Query(None, alias="status"),
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.WorkerPaymentListResponse:
    items, total = WorkerPaymentService.list_payments(
        db,
        identity.user_id,
        status=status_filter,
        employee_id=employee_id,
        skip=skip,
        limit=limit,
    )
    return schemas.WorkerPaymentListResponse(items=items, total=total, limit=limit, skip=skip)


@router.post("", response_model=schemas.WorkerPaymentRead, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment_in: schemas.WorkerPaymentCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.WorkerPaymentRead:
    try:
        return WorkerPaymentService.create_payment(db, identity.user_id, payment_in)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.put("/{payment_id}", response_model=schemas.WorkerPaymentRead)
def update_payment(
    payment_id: str,
    payment_in: schemas.WorkerPaymentUpdate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.WorkerPaymentRead:
    payment = WorkerPaymentService.get_payment(db, identity.user_id, payment_id)
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    try:
        return WorkerPaymentService.update_payment(db, payment, payment_in)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
