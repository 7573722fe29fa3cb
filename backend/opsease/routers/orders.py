"""Router exposing order operations."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models.order import OrderStatus, OrderType
from ..security import UserIdentity, require_user
from ..services import OrderService, RecordConflictError

router = APIRouter(dependencies=[Depends(require_user)])


def _get_order_or_404(db: Session, identity: UserIdentity, order_id: str):
    order = OrderService.get_order(db, identity.user_id, order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


@router.get("", response_model=schemas.OrderListResponse)
def list_orders(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    order_type: Optional[OrderType] = Query(None, alias="orderType"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.OrderListResponse:
    items, total = OrderService.list_orders(
        db,
        identity.user_id,
        status=status_filter,
        order_type=order_type,
        skip=skip,
        limit=limit,
    )
    return schemas.OrderListResponse(items=items, total=total, limit=limit, skip=skip)


@router.get("/{order_id}", response_model=schemas.OrderRead)
def get_order(
    order_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.OrderRead:
    return _get_order_or_404(db, identity, order_id)


@router.post("", response_model=schemas.OrderRead, status_code=status.HTTP_201_CREATED)
def create_order(
    order_in: schemas.OrderCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.OrderRead:
    try:
        return OrderService.create_order(db, identity.user_id, order_in)
    except RecordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.put("/{order_id}", response_model=schemas.OrderRead)
def update_order(
    order_id: str,
    order_in: schemas.OrderUpdate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.OrderRead:
    order = _get_order_or_404(db, identity, order_id)
    try:
        return OrderService.update_order(db, order, order_in)
    except RecordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> None:
    """Delete an order together with its production plans."""
    order = _get_order_or_404(db, identity, order_id)
    OrderService.delete_order(db, order)
