"""Router exposing stock levels and movements."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models.stock import StockCategory
from ..security import UserIdentity, require_user
from ..services import StockService, StockServiceError

router = APIRouter(dependencies=[Depends(require_user)])


def _get_item_or_404(db: Session, identity: UserIdentity, item_id: str):
    item = StockService.get_item(db, identity.user_id, item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stock item not found")
    return item


@router.get("", response_model=List[schemas.StockItemRead])
def list_stock_items(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    category: Optional[StockCategory] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive search by item name"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Return stock items ordered by name."""
    items, _ = StockService.list_items(
        db,
        identity.user_id,
        category=category,
        search=search,
        skip=skip,
        limit=limit,
    )
    return items


@router.get("/low-stock", response_model=List[schemas.StockItemRead])
def list_low_stock_items(
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Items whose quantity on hand is at or below the reorder level."""
    return StockService.low_stock_items(db, identity.user_id)


@router.get("/{item_id}", response_model=schemas.StockItemRead)
def get_stock_item(
    item_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.StockItemRead:
    return _get_item_or_404(db, identity, item_id)


@router.post("", response_model=schemas.StockItemRead, status_code=status.HTTP_201_CREATED)
def create_stock_item(
    item_in: schemas.StockItemCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.StockItemRead:
    return StockService.create_item(db, identity.user_id, item_in)


@router.put("/{item_id}", response_model=schemas.StockItemRead)
def update_stock_item(
    item_id: str,
    item_in: schemas.StockItemUpdate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.StockItemRead:
    item = _get_item_or_404(db, identity, item_id)
    return StockService.update_item(db, item, item_in)


@router.get("/{item_id}/transactions", response_model=List[schemas.StockTransactionRead])
def list_stock_transactions(
    item_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    item = _get_item_or_404(db, identity, item_id)
    return StockService.list_transactions(db, item)


@router.post(
    "/{item_id}/transactions",
    response_model=schemas.StockTransactionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_stock_transaction(
    item_id: str,
    transaction_in: schemas.StockTransactionCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.StockTransactionRead:
    item = _get_item_or_404(db, identity, item_id)
    try:
        return StockService.record_transaction(db, item, transaction_in)
    except StockServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
