"""Business logic for orders and their production plans."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Tuple

from sqlalchemy.orm import Session, selectinload

from .. import models, schemas
from .common import RecordConflictError, apply_updates, normalize_money

LOGGER = logging.getLogger(__name__)


class OrderService:
    """Operations for sales and purchase orders."""

    @staticmethod
    def list_orders(
        db: Session,
        user_id: str,
        *,
        status: Optional[models.OrderStatus] = None,
        order_type: Optional[models.OrderType] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[Iterable[models.Order], int]:
        query = db.query(models.Order).filter(models.Order.user_id == user_id)
        if status:
            query = query.filter(models.Order.status == status)
        if order_type:
            query = query.filter(models.Order.order_type == order_type)

        total = query.count()
        items = (
            query.order_by(models.Order.created_at.desc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def get_order(db: Session, user_id: str, order_id: str) -> Optional[models.Order]:
        return (
            db.query(models.Order)
            .options(selectinload(models.Order.production_plans))
            .filter(models.Order.user_id == user_id, models.Order.id == order_id)
            .first()
        )

    @staticmethod
    def _product_totals(products: Sequence[schemas.OrderProduct]) -> dict:
        total_quantity = sum(product.quantity for product in products)
        total_value = sum(
            (Decimal(product.quantity) * Decimal(product.unit_price) for product in products),
            Decimal("0"),
        )
        return {
            "products": [product.model_dump(mode="json") for product in products],
            "total_quantity": total_quantity,
            "total_value": normalize_money(total_value),
        }

    @staticmethod
    def _ensure_code_available(
        db: Session, user_id: str, order_code: str, *, exclude_id: Optional[str] = None
    ) -> None:
        query = db.query(models.Order.id).filter(
            models.Order.user_id == user_id, models.Order.order_code == order_code
        )
        if exclude_id is not None:
            query = query.filter(models.Order.id != exclude_id)
        if query.first() is not None:
            raise RecordConflictError(f"Order {order_code} already exists")

    @staticmethod
    def _validate_links(db: Session, user_id: str, values: dict) -> None:
        if values.get("customer_id"):
            exists = (
                db.query(models.Customer.id)
                .filter(
                    models.Customer.user_id == user_id,
                    models.Customer.id == values["customer_id"],
                )
                .first()
            )
            if exists is None:
                raise ValueError("Customer not found")
        if values.get("supplier_id"):
            exists = (
                db.query(models.Supplier.id)
                .filter(
                    models.Supplier.user_id == user_id,
                    models.Supplier.id == values["supplier_id"],
                )
                .first()
            )
            if exists is None:
                raise ValueError("Supplier not found")

    @staticmethod
    def create_order(db: Session, user_id: str, data: schemas.OrderCreate) -> models.Order:
        payload = data.model_dump(exclude={"products"})
        payload["order_code"] = payload["order_code"].strip()
        OrderService._validate_links(db, user_id, payload)
        OrderService._ensure_code_available(db, user_id, payload["order_code"])
        payload.update(OrderService._product_totals(data.products))

        order = models.Order(user_id=user_id, **payload)
        db.add(order)
        db.commit()
        db.refresh(order)
        LOGGER.info("Created order %s for %s", order.order_code, order.party_name)
        return order

    @staticmethod
    def update_order(
        db: Session, order: models.Order, data: schemas.OrderUpdate
    ) -> models.Order:
        update_data = data.model_dump(exclude_unset=True, exclude={"products"})
        for field in ("order_code", "party_name", "delivery_date", "order_date", "status"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        if "order_code" in update_data:
            update_data["order_code"] = update_data["order_code"].strip()
            OrderService._ensure_code_available(
                db, order.user_id, update_data["order_code"], exclude_id=order.id
            )
        OrderService._validate_links(db, order.user_id, update_data)
        if data.products is not None:
            update_data.update(OrderService._product_totals(data.products))

        apply_updates(order, update_data)
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def delete_order(db: Session, order: models.Order) -> None:
        db.delete(order)
        db.commit()


class ProductionPlanService:
    """Operations for per-stage production targets."""

    @staticmethod
    def list_plans(
        db: Session, user_id: str, *, order_id: Optional[str] = None
    ) -> list[models.ProductionPlan]:
        query = db.query(models.ProductionPlan).filter(
            models.ProductionPlan.user_id == user_id
        )
        if order_id:
            query = query.filter(models.ProductionPlan.order_id == order_id)
        return query.order_by(models.ProductionPlan.created_at.desc()).all()

    @staticmethod
    def get_plan(db: Session, user_id: str, plan_id: str) -> Optional[models.ProductionPlan]:
        return (
            db.query(models.ProductionPlan)
            .filter(
                models.ProductionPlan.user_id == user_id,
                models.ProductionPlan.id == plan_id,
            )
            .first()
        )

    @staticmethod
    def _check_progress(target_quantity: int, completed_quantity: int) -> None:
        if completed_quantity > target_quantity:
            raise ValueError("Completed quantity cannot exceed the target quantity")

    @staticmethod
    def _check_dates(start_date, end_date) -> None:
        if start_date and end_date and start_date > end_date:
            raise ValueError("start_date cannot be after end_date")

    @staticmethod
    def create_plan(
        db: Session, user_id: str, data: schemas.ProductionPlanCreate
    ) -> models.ProductionPlan:
        order = OrderService.get_order(db, user_id, data.order_id)
        if order is None:
            raise ValueError("Order not found")
        ProductionPlanService._check_progress(data.target_quantity, data.completed_quantity)
        ProductionPlanService._check_dates(data.start_date, data.end_date)

        plan = models.ProductionPlan(user_id=user_id, **data.model_dump())
        db.add(plan)
        db.commit()
        db.refresh(plan)
        return plan

    @staticmethod
    def update_plan(
        db: Session, plan: models.ProductionPlan, data: schemas.ProductionPlanUpdate
    ) -> models.ProductionPlan:
        update_data = data.model_dump(exclude_unset=True)
        for field in ("stage", "target_quantity", "completed_quantity", "status"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        ProductionPlanService._check_progress(
            update_data.get("target_quantity", plan.target_quantity),
            update_data.get("completed_quantity", plan.completed_quantity),
        )
        ProductionPlanService._check_dates(
            update_data.get("start_date", plan.start_date),
            update_data.get("end_date", plan.end_date),
        )
        apply_updates(plan, update_data)
        db.add(plan)
        db.commit()
        db.refresh(plan)
        return plan
