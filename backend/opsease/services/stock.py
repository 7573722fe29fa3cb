"""Business logic for stock items and their movements."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from .common import apply_updates, lock_for_update

LOGGER = logging.getLogger(__name__)


class StockServiceError(ValueError):
    """Raised when a stock movement cannot be applied."""


class StockService:
    """Operations to manage stock levels."""

    @staticmethod
    def list_items(
        db: Session,
        user_id: str,
        *,
        category: Optional[models.StockCategory] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[Iterable[models.StockItem], int]:
        query = db.query(models.StockItem).filter(models.StockItem.user_id == user_id)
        if category is not None:
            query = query.filter(models.StockItem.category == category)
        if search:
            normalized = f"%{search.strip().lower()}%"
            query = query.filter(func.lower(models.StockItem.item_name).like(normalized))

        total = query.count()
        items = (
            query.order_by(models.StockItem.item_name)
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def low_stock_items(db: Session, user_id: str) -> list[models.StockItem]:
        return (
            db.query(models.StockItem)
            .filter(
                models.StockItem.user_id == user_id,
                models.StockItem.current_stock <= models.StockItem.reorder_level,
            )
            .order_by(models.StockItem.item_name)
            .all()
        )

    @staticmethod
    def create_item(db: Session, user_id: str, data: schemas.StockItemCreate) -> models.StockItem:
        item = models.StockItem(user_id=user_id, **data.model_dump())
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def get_item(db: Session, user_id: str, item_id: str) -> Optional[models.StockItem]:
        return (
            db.query(models.StockItem)
            .filter(models.StockItem.user_id == user_id, models.StockItem.id == item_id)
            .first()
        )

    @staticmethod
    def update_item(
        db: Session, item: models.StockItem, data: schemas.StockItemUpdate
    ) -> models.StockItem:
        update_data = data.model_dump(exclude_unset=True)
        for field in ("item_name", "category", "current_stock", "unit", "reorder_level"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        apply_updates(item, update_data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def list_transactions(db: Session, item: models.StockItem) -> list[models.StockTransaction]:
        return (
            db.query(models.StockTransaction)
            .filter(models.StockTransaction.stock_item_id == item.id)
            .order_by(models.StockTransaction.created_at.desc())
            .all()
        )

    @staticmethod
    def record_transaction(
        db: Session,
        item: models.StockItem,
        data: schemas.StockTransactionCreate,
    ) -> models.StockTransaction:
        """Move stock in or out of ``item`` and keep the movement on record."""

        locked = (
            lock_for_update(
                db, db.query(models.StockItem).filter(models.StockItem.id == item.id)
            ).one()
        )
        on_hand = Decimal(locked.current_stock)
        quantity = Decimal(data.quantity)
        if data.transaction_type == models.StockTransactionType.OUT:
            if quantity > on_hand:
                raise StockServiceError(
                    f"Insufficient stock for {locked.item_name}: {on_hand} {locked.unit} available"
                )
            locked.current_stock = on_hand - quantity
        else:
            locked.current_stock = on_hand + quantity

        transaction = models.StockTransaction(
            user_id=locked.user_id,
            stock_item_id=locked.id,
            transaction_type=data.transaction_type,
            quantity=quantity,
            reason=data.reason,
            reference=data.reference,
        )
        db.add(transaction)
        db.commit()
        db.refresh(transaction)
        LOGGER.info(
            "Stock %s for %s: %s %s",
            data.transaction_type.value,
            locked.item_name,
            quantity,
            locked.unit,
        )
        return transaction
