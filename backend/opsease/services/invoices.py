"""Invoice lifecycle and the ledger entries it generates."""

from __future__ import annotations

import logging
import random
import time
from datetime import date
from decimal import Decimal
from time import perf_counter
from typing import Iterable, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas
from .common import MAX_AMOUNT, RecordConflictError, apply_updates, normalize_money
from .ledger import LedgerService, LedgerValidationError
from .observability import ObservabilityService

LOGGER = logging.getLogger(__name__)

_NUMBER_PREFIX = {
    models.InvoiceType.SALES_INVOICE: "SI",
    models.InvoiceType.PURCHASE_INVOICE: "PI",
}
_MAX_NUMBER_ATTEMPTS = 5


class InvoiceValidationError(ValueError):
    """Raised when an invoice payload cannot be accepted."""


class InvoiceServiceError(RuntimeError):
    """Raised when invoice operations cannot be completed."""


def _ledger_sides(
    invoice_type: models.InvoiceType,
) -> tuple[models.PartyType, models.EntryType, models.EntryType]:
    """Party type, issuance entry type and settlement entry type for an invoice."""

    if models.InvoiceType(invoice_type) == models.InvoiceType.PURCHASE_INVOICE:
        return models.PartyType.SUPPLIER, models.EntryType.CREDIT, models.EntryType.DEBIT
    return models.PartyType.BUYER, models.EntryType.DEBIT, models.EntryType.CREDIT


class InvoiceService:
    """Operations for issuing, updating and settling invoices."""

    @staticmethod
    def list_invoices(
        db: Session,
        user_id: str,
        *,
        status: Optional[models.InvoiceStatus] = None,
        invoice_type: Optional[models.InvoiceType] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[Iterable[models.Invoice], int]:
        query = db.query(models.Invoice).filter(models.Invoice.user_id == user_id)
        if status:
            query = query.filter(models.Invoice.status == status)
        if invoice_type:
            query = query.filter(models.Invoice.invoice_type == invoice_type)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    models.Invoice.invoice_number.ilike(pattern),
                    models.Invoice.buyer_name.ilike(pattern),
                )
            )

        total = query.count()
        items = (
            query.order_by(models.Invoice.created_at.desc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def get_invoice(db: Session, user_id: str, invoice_id: str) -> Optional[models.Invoice]:
        return (
            db.query(models.Invoice)
            .filter(models.Invoice.user_id == user_id, models.Invoice.id == invoice_id)
            .first()
        )

    @staticmethod
    def compute_totals(
        items: Iterable[schemas.InvoiceItem],
        *,
        tax_rate: Decimal,
        shipping_cost: Decimal,
        discount: Decimal,
    ) -> dict:
        """Return the stored item payload and monetary totals for an invoice."""

        stored_items = []
        subtotal = Decimal("0")
        for item in items:
            amount = normalize_money(Decimal(item.quantity) * Decimal(item.rate))
            subtotal += amount
            stored_items.append(
                {
                    "description": item.description,
                    "hsn_code": item.hsn_code,
                    "quantity": str(item.quantity),
                    "rate": str(normalize_money(item.rate)),
                    "amount": str(amount),
                }
            )
        subtotal = normalize_money(subtotal)
        tax_amount = normalize_money(subtotal * Decimal(tax_rate) / Decimal("100"))
        total_amount = normalize_money(
            subtotal + tax_amount + Decimal(shipping_cost) - Decimal(discount)
        )
        if total_amount <= 0:
            raise InvoiceValidationError("Invoice total must be greater than zero")
        if max(subtotal, tax_amount, total_amount) > MAX_AMOUNT:
            raise InvoiceValidationError(f"Invoice total cannot exceed {MAX_AMOUNT}")
        return {
            "items": stored_items,
            "subtotal": subtotal,
            "tax_rate": normalize_money(tax_rate),
            "tax_amount": tax_amount,
            "shipping_cost": normalize_money(shipping_cost),
            "discount": normalize_money(discount),
            "total_amount": total_amount,
        }

    @staticmethod
    def _number_taken(db: Session, user_id: str, invoice_number: str) -> bool:
        return (
            db.query(models.Invoice.id)
            .filter(
                models.Invoice.user_id == user_id,
                models.Invoice.invoice_number == invoice_number,
            )
            .first()
            is not None
        )

    @staticmethod
    def generate_invoice_number(
        db: Session, user_id: str, invoice_type: models.InvoiceType
    ) -> str:
        """Return ``SI``/``PI`` followed by eight digits not yet used by the user."""

        prefix = _NUMBER_PREFIX[models.InvoiceType(invoice_type)]
        for _ in range(_MAX_NUMBER_ATTEMPTS):
            millis = str(int(time.time() * 1000))[-6:]
            candidate = f"{prefix}{millis}{random.randint(0, 99):02d}"
            if not InvoiceService._number_taken(db, user_id, candidate):
                return candidate
        raise InvoiceServiceError("Unable to allocate an invoice number, please retry.")

    @staticmethod
    def _resolve_links(db: Session, user_id: str, values: dict) -> None:
        lookups = (
            ("order_id", models.Order, "Order"),
            ("customer_id", models.Customer, "Customer"),
            ("supplier_id", models.Supplier, "Supplier"),
        )
        for field, model, label in lookups:
            linked_id = values.get(field)
            if not linked_id:
                continue
            exists = (
                db.query(model.id)
                .filter(model.user_id == user_id, model.id == linked_id)
                .first()
            )
            if exists is None:
                raise InvoiceValidationError(f"{label} not found")

    @staticmethod
    def _clean_buyer_name(value: str) -> str:
        cleaned = value.strip() if value else ""
        if not cleaned:
            raise InvoiceValidationError("Buyer name is required")
        return cleaned

    @staticmethod
    def _describe(invoice: models.Invoice, items: list[dict]) -> str:
        kind = (
            "Purchase"
            if models.InvoiceType(invoice.invoice_type) == models.InvoiceType.PURCHASE_INVOICE
            else "Sales"
        )
        descriptions = ", ".join(item["description"] for item in items)
        return f"{kind} Invoice {invoice.invoice_number} - {descriptions}"

    @staticmethod
    def create_invoice(
        db: Session,
        user_id: str,
        data: schemas.InvoiceCreate,
    ) -> models.Invoice:
        """Persist an invoice together with its issuance ledger entry."""

        start = perf_counter()
        tags = {"invoice_type": models.InvoiceType(data.invoice_type).value}
        try:
            payload = data.model_dump(exclude={"items", "invoice_number"})
            payload["buyer_name"] = InvoiceService._clean_buyer_name(payload["buyer_name"])
            InvoiceService._resolve_links(db, user_id, payload)
            payload.update(
                InvoiceService.compute_totals(
                    data.items,
                    tax_rate=data.tax_rate,
                    shipping_cost=data.shipping_cost,
                    discount=data.discount,
                )
            )

            invoice_number = data.invoice_number.strip() if data.invoice_number else None
            if invoice_number:
                if InvoiceService._number_taken(db, user_id, invoice_number):
                    raise RecordConflictError(
                        f"Invoice number {invoice_number} already exists"
                    )
            else:
                invoice_number = InvoiceService.generate_invoice_number(
                    db, user_id, data.invoice_type
                )

            invoice = models.Invoice(user_id=user_id, invoice_number=invoice_number, **payload)
            db.add(invoice)
            db.flush()

            party_type, entry_type, _ = _ledger_sides(invoice.invoice_type)
            LedgerService.record_entry(
                db,
                user_id,
                party_name=invoice.buyer_name,
                party_type=party_type,
                entry_type=entry_type,
                amount=invoice.total_amount,
                description=InvoiceService._describe(invoice, payload["items"]),
                reference=invoice.invoice_number,
                entry_date=invoice.invoice_date,
            )
            db.commit()
        except InvoiceValidationError as exc:
            ObservabilityService.record_rejection(
                db, "invoices.validation_failed", exc, started_at=start, tags=tags
            )
            raise
        except LedgerValidationError as exc:
            db.rollback()
            ObservabilityService.record_rejection(
                db, "invoices.validation_failed", exc, started_at=start, tags=tags
            )
            raise InvoiceValidationError(str(exc)) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            LOGGER.exception("Failed to create invoice for user %s", user_id)
            ObservabilityService.record_failure(
                db, "invoices.persistence_failed", exc, started_at=start, tags=tags
            )
            raise InvoiceServiceError("Unable to create invoice at this time.") from exc

        db.refresh(invoice)
        LOGGER.info("Issued invoice %s for %s", invoice.invoice_number, invoice.buyer_name)
        return invoice

    @staticmethod
    def update_invoice(
        db: Session,
        invoice: models.Invoice,
        data: schemas.InvoiceUpdate,
    ) -> models.Invoice:
        """Apply changes; the first transition to ``paid`` settles the ledger."""

        start = perf_counter()
        tags = {"invoice_type": models.InvoiceType(invoice.invoice_type).value}
        previous_status = models.InvoiceStatus(invoice.status)
        # Settlement posts against the party and total as stored before this update.
        previous_total = Decimal(invoice.total_amount)
        previous_buyer_name = invoice.buyer_name
        try:
            update_data = data.model_dump(exclude_unset=True)
            for field in ("items", "tax_rate", "shipping_cost", "discount", "status", "buyer_name"):
                if field in update_data and update_data[field] is None:
                    update_data.pop(field)
            if "buyer_name" in update_data:
                update_data["buyer_name"] = InvoiceService._clean_buyer_name(
                    update_data["buyer_name"]
                )

            if {"items", "tax_rate", "shipping_cost", "discount"} & update_data.keys():
                items = (
                    data.items
                    if "items" in update_data
                    else [schemas.InvoiceItem.model_validate(item) for item in invoice.items]
                )
                update_data.pop("items", None)
                update_data.update(
                    InvoiceService.compute_totals(
                        items,
                        tax_rate=update_data.get("tax_rate", invoice.tax_rate),
                        shipping_cost=update_data.get("shipping_cost", invoice.shipping_cost),
                        discount=update_data.get("discount", invoice.discount),
                    )
                )

            apply_updates(invoice, update_data)
            db.add(invoice)

            new_status = models.InvoiceStatus(invoice.status)
            if (
                previous_status != models.InvoiceStatus.PAID
                and new_status == models.InvoiceStatus.PAID
            ):
                party_type, _, settlement_type = _ledger_sides(invoice.invoice_type)
                verb = (
                    "made for"
                    if party_type == models.PartyType.SUPPLIER
                    else "received for"
                )
                LedgerService.record_entry(
                    db,
                    invoice.user_id,
                    party_name=previous_buyer_name,
                    party_type=party_type,
                    entry_type=settlement_type,
                    amount=previous_total,
                    description=f"Payment {verb} Invoice {invoice.invoice_number}",
                    reference=invoice.invoice_number,
                    entry_date=date.today(),
                )
                LOGGER.info("Invoice %s marked as paid", invoice.invoice_number)
            db.commit()
        except InvoiceValidationError as exc:
            ObservabilityService.record_rejection(
                db, "invoices.validation_failed", exc, started_at=start, tags=tags
            )
            raise
        except LedgerValidationError as exc:
            db.rollback()
            ObservabilityService.record_rejection(
                db, "invoices.validation_failed", exc, started_at=start, tags=tags
            )
            raise InvoiceValidationError(str(exc)) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            LOGGER.exception("Failed to update invoice %s", invoice.id)
            ObservabilityService.record_failure(
                db, "invoices.persistence_failed", exc, started_at=start, tags=tags
            )
            raise InvoiceServiceError("Unable to update invoice at this time.") from exc

        db.refresh(invoice)
        return invoice

    @staticmethod
    def delete_invoice(db: Session, invoice: models.Invoice) -> None:
        """Remove an invoice; ledger entries it produced are kept."""

        try:
            db.delete(invoice)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise InvoiceServiceError("Unable to delete invoice at this time.") from exc
