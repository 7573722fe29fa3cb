"""Router containing CRUD operations for customers."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import UserIdentity, require_user
from ..services import CustomerService, RecordConflictError

router = APIRouter(dependencies=[Depends(require_user)])


def _get_customer_or_404(db: Session, identity: UserIdentity, customer_id: str):
    customer = CustomerService.get_party(db, identity.user_id, customer_id)
    if customer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


@router.get("", response_model=schemas.CustomerListResponse)
def list_customers(
    skip: int = Query(0, ge=0, description="Number of customers to skip"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of customers to return"),
    search: Optional[str] = Query(None, description="Case-insensitive search by name, code or contact"),
    active: Optional[bool] = Query(None, description="Filter by active flag"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.CustomerListResponse:
    """Return customers, newest first."""
    items, total = CustomerService.list_parties(
        db,
        identity.user_id,
        search=search.strip() if search else None,
        active=active,
        skip=skip,
        limit=limit,
    )
    return schemas.CustomerListResponse(items=items, total=total, limit=limit, skip=skip)


@router.get("/{customer_id}", response_model=schemas.CustomerRead)
def get_customer(
    customer_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.CustomerRead:
    return _get_customer_or_404(db, identity, customer_id)


@router.post("", response_model=schemas.CustomerRead, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_in: schemas.CustomerCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.CustomerRead:
    try:
        return CustomerService.create_party(db, identity.user_id, customer_in)
    except RecordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.put("/{customer_id}", response_model=schemas.CustomerRead)
def update_customer(
    customer_id: str,
    customer_in: schemas.CustomerUpdate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.CustomerRead:
    customer = _get_customer_or_404(db, identity, customer_id)
    try:
        return CustomerService.update_party(db, customer, customer_in)
    except RecordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> None:
    customer = _get_customer_or_404(db, identity, customer_id)
    CustomerService.delete_party(db, customer)
