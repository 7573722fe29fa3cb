"""Router exposing invoice operations."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models.invoice import InvoiceStatus, InvoiceType
from ..security import UserIdentity, require_user
from ..services import (
    InvoiceService,
    InvoiceServiceError,
    InvoiceValidationError,
    RecordConflictError,
)

LOGGER = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_user)])


def _get_invoice_or_404(db: Session, identity: UserIdentity, invoice_id: str):
    invoice = InvoiceService.get_invoice(db, identity.user_id, invoice_id)
    if invoice is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice


@router.get("", response_model=schemas.InvoiceListResponse)
def list_invoices(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    invoice_type: Optional[InvoiceType] = Query(None, alias="invoiceType"),
    search: Optional[str] = Query(None, description="Matches invoice number or buyer name"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        items, total = InvoiceService.list_invoices(
            db,
            identity.user_id,
            status=status_filter,
            invoice_type=invoice_type,
            search=search.strip() if search else None,
            skip=skip,
            limit=limit,
        )
    except SQLAlchemyError as exc:
        LOGGER.exception("Failed to list invoices", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Unable to load invoices. Please try again later."},
        )
    return schemas.InvoiceListResponse(items=items, total=total, limit=limit, skip=skip)


@router.get("/{invoice_id}", response_model=schemas.InvoiceRead)
def get_invoice(
    invoice_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.InvoiceRead:
    return _get_invoice_or_404(db, identity, invoice_id)


@router.post("", response_model=schemas.InvoiceRead, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice_in: schemas.InvoiceCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.InvoiceRead:
    """Issue an invoice and post it to the party's ledger."""

    try:
        return InvoiceService.create_invoice(db, identity.user_id, invoice_in)
    except RecordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except InvoiceValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except InvoiceServiceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc


@router.put("/{invoice_id}", response_model=schemas.InvoiceRead)
def update_invoice(
    invoice_id: str,
    invoice_in: schemas.InvoiceUpdate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.InvoiceRead:
    """Update an invoice; marking it paid posts the settlement entry once."""

    invoice = _get_invoice_or_404(db, identity, invoice_id)
    try:
        return InvoiceService.update_invoice(db, invoice, invoice_in)
    except InvoiceValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except InvoiceServiceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    invoice_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> None:
    invoice = _get_invoice_or_404(db, identity, invoice_id)
    try:
        InvoiceService.delete_invoice(db, invoice)
    except InvoiceServiceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc
