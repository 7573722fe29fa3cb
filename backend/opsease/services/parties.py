"""Business logic for customer and supplier master data."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, schemas
from .common import RecordConflictError, apply_updates

LOGGER = logging.getLogger(__name__)


class _PartyService:
    """Shared CRUD for the two party master tables."""

    model: type
    code_field: str
    label: str

    @classmethod
    def _code_column(cls):
        return getattr(cls.model, cls.code_field)

    @classmethod
    def list_parties(
        cls,
        db: Session,
        user_id: str,
        *,
        search: Optional[str] = None,
        active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[Iterable, int]:
        query = db.query(cls.model).filter(cls.model.user_id == user_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    cls.model.company_name.ilike(pattern),
                    cls._code_column().ilike(pattern),
                    cls.model.contact_person.ilike(pattern),
                )
            )
        if active is not None:
            query = query.filter(cls.model.is_active == active)

        total = query.count()
        items = (
            query.order_by(cls.model.created_at.desc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @classmethod
    def get_party(cls, db: Session, user_id: str, party_id: str):
        return (
            db.query(cls.model)
            .filter(cls.model.user_id == user_id, cls.model.id == party_id)
            .first()
        )

    @classmethod
    def _ensure_code_available(
        cls, db: Session, user_id: str, code: str, *, exclude_id: Optional[str] = None
    ) -> None:
        query = db.query(cls.model.id).filter(
            cls.model.user_id == user_id, cls._code_column() == code
        )
        if exclude_id is not None:
            query = query.filter(cls.model.id != exclude_id)
        if query.first() is not None:
            raise RecordConflictError(f"{cls.label} code {code} already exists")

    @classmethod
    def _commit(cls, db: Session, instance) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise RecordConflictError(f"{cls.label} code already exists") from exc
        db.refresh(instance)

    @classmethod
    def create_party(cls, db: Session, user_id: str, data):
        payload = data.model_dump()
        payload[cls.code_field] = payload[cls.code_field].strip()
        payload["company_name"] = payload["company_name"].strip()
        cls._ensure_code_available(db, user_id, payload[cls.code_field])
        party = cls.model(user_id=user_id, **payload)
        db.add(party)
        cls._commit(db, party)
        LOGGER.info("Created %s %s", cls.label.lower(), getattr(party, cls.code_field))
        return party

    @classmethod
    def update_party(cls, db: Session, party, data):
        update_data = data.model_dump(exclude_unset=True)
        for field in (cls.code_field, "company_name", "country", "payment_terms", "is_active"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        if cls.code_field in update_data:
            update_data[cls.code_field] = update_data[cls.code_field].strip()
            cls._ensure_code_available(
                db, party.user_id, update_data[cls.code_field], exclude_id=party.id
            )
        apply_updates(party, update_data)
        db.add(party)
        cls._commit(db, party)
        return party

    @classmethod
    def delete_party(cls, db: Session, party) -> None:
        db.delete(party)
        db.commit()


class CustomerService(_PartyService):
    model = models.Customer
    code_field = "customer_code"
    label = "Customer"


class SupplierService(_PartyService):
    model = models.Supplier
    code_field = "supplier_code"
    label = "Supplier"
