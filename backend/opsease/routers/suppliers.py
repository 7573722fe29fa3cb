"""Router containing CRUD operations for suppliers."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import UserIdentity, require_user
from ..services import RecordConflictError, SupplierService

router = APIRouter(dependencies=[Depends(require_user)])


def _get_supplier_or_404(db: Session, identity: UserIdentity, supplier_id: str):
    supplier = SupplierService.get_party(db, identity.user_id, supplier_id)
    if supplier is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
    return supplier


@router.get("", response_model=schemas.SupplierListResponse)
def list_suppliers(
    skip: int = Query(0, ge=0, description="Number of suppliers to skip"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of suppliers to return"),
    search: Optional[str] = Query(None, description="Case-insensitive search by name, code or contact"),
    active: Optional[bool] = Query(None, description="Filter by active flag"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.SupplierListResponse:
    """Return suppliers, newest first."""
    items, total = SupplierService.list_parties(
        db,
        identity.user_id,
        search=search.strip() if search else None,
        active=active,
        skip=skip,
        limit=limit,
    )
    return schemas.SupplierListResponse(items=items, total=total, limit=limit, skip=skip)


@router.get("/{supplier_id}", response_model=schemas.SupplierRead)
def get_supplier(
    supplier_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.SupplierRead:
    return _get_supplier_or_404(db, identity, supplier_id)


@router.post("", response_model=schemas.SupplierRead, status_code=status.HTTP_201_CREATED)
def create_supplier(
    supplier_in: schemas.SupplierCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.SupplierRead:
    try:
        return SupplierService.create_party(db, identity.user_id, supplier_in)
    except RecordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.put("/{supplier_id}", response_model=schemas.SupplierRead)
def update_supplier(
    supplier_id: str,
    supplier_in: schemas.SupplierUpdate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.SupplierRead:
    supplier = _get_supplier_or_404(db, identity, supplier_id)
    try:
        return SupplierService.update_party(db, supplier, supplier_in)
    except RecordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_supplier(
    supplier_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> None:
    supplier = _get_supplier_or_404(db, identity, supplier_id)
    SupplierService.delete_party(db, supplier)
