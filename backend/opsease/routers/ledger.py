"""Router exposing the buyer and supplier ledger."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models.ledger_entry import PartyType
from ..security import UserIdentity, require_user
from ..services import LedgerService, LedgerServiceError, LedgerValidationError

LOGGER = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_user)])

_LOAD_FAILED = "Unable to load ledger entries. Please try again later."


@router.get("", response_model=List[schemas.LedgerEntryRead])
def list_ledger_entries(
    party_name: Optional[str] = Query(None, alias="partyName", description="Exact party name"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Return ledger entries newest first with balances derived from full history."""

    try:
        return LedgerService.list_entries(db, identity.user_id, party_name)
    except SQLAlchemyError as exc:
        LOGGER.exception("Failed to list ledger entries", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": _LOAD_FAILED},
        )


@router.post("", response_model=schemas.LedgerEntryRead, status_code=status.HTTP_201_CREATED)
def create_ledger_entry(
    entry_in: schemas.LedgerEntryCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.LedgerEntryRead:
    """Append an entry; any balance sent by the client is ignored."""

    try:
        return LedgerService.append_entry(db, identity.user_id, entry_in)
    except LedgerValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except LedgerServiceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc


@router.get("/summary", response_model=schemas.LedgerSummary)
def ledger_summary(
    party_name: Optional[str] = Query(None, alias="partyName"),
    party_type: Optional[PartyType] = Query(None, alias="partyType"),
    search: Optional[str] = Query(None, description="Matches party, description or reference"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Totals of debits and credits over the filtered entries."""

    try:
        entries = LedgerService.list_entries(db, identity.user_id, party_name)
    except SQLAlchemyError as exc:
        LOGGER.exception("Failed to summarize ledger", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": _LOAD_FAILED},
        )
    filtered = LedgerService.filter_entries(entries, search=search, party_type=party_type)
    return LedgerService.summarize(filtered)


@router.get("/parties", response_model=List[schemas.PartyBalance])
def ledger_party_balances(
    party_type: Optional[PartyType] = Query(None, alias="partyType"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Current balance per party."""

    try:
        return LedgerService.party_balances(db, identity.user_id, party_type)
    except SQLAlchemyError as exc:
        LOGGER.exception("Failed to compute party balances", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": _LOAD_FAILED},
        )
