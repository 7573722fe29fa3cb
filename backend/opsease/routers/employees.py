"""Router containing CRUD operations for employees."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models.employee import Department
from ..security import UserIdentity, require_user
from ..services import EmployeeService, RecordConflictError

router = APIRouter(dependencies=[Depends(require_user)])


def _get_employee_or_404(db: Session, identity: UserIdentity, employee_id: str):
    employee = EmployeeService.get_employee(db, identity.user_id, employee_id)
    if employee is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return employee


@router.get("", response_model=schemas.EmployeeListResponse)
def list_employees(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    include_inactive: bool = Query(False, alias="includeInactive"),
    department: Optional[Department] = Query(None),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.EmployeeListResponse:
    """Return employees by name; inactive ones only when asked for."""
    items, total = EmployeeService.list_employees(
        db,
        identity.user_id,
        include_inactive=include_inactive,
        department=department,
        skip=skip,
        limit=limit,
    )
    return schemas.EmployeeListResponse(items=items, total=total, limit=limit, skip=skip)


@router.get("/{employee_id}", response_model=schemas.EmployeeRead)
def get_employee(
    employee_id: str,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.EmployeeRead:
    return _get_employee_or_404(db, identity, employee_id)


@router.post("", response_model=schemas.EmployeeRead, status_code=status.HTTP_201_CREATED)
def create_employee(
    employee_in: schemas.EmployeeCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.EmployeeRead:
    try:
        return EmployeeService.create_employee(db, identity.user_id, employee_in)
    except RecordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.put("/{employee_id}", response_model=schemas.EmployeeRead)
def update_employee(
    employee_id: str,
    employee_in: schemas.EmployeeUpdate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.EmployeeRead:
    employee = _get_employee_or_404(db, identity, employee_id)
    try:
        return EmployeeService.update_employee(db, employee, employee_in)
    except RecordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
