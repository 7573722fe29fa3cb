"""Router exposing daily attendance."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import UserIdentity, require_user
from ..services import AttendanceService, RecordConflictError

router = APIRouter(dependencies=[Depends(require_user)])


@router.get("", response_model=List[schemas.AttendanceRead])
def list_attendance(
    attendance_date: Optional[date] = Query(None, alias="date", description="Only this day"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    return AttendanceService.list_attendance(
        db, identity.user_id, attendance_date=attendance_date
    )


@router.post("", response_model=schemas.AttendanceRead, status_code=status.HTTP_201_CREATED)
def mark_attendance(
    attendance_in: schemas.AttendanceCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.AttendanceRead:
    try:
        return AttendanceService.mark_attendance(db, identity.user_id, attendance_in)
    except RecordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.put("/{attendance_id}", response_model=schemas.AttendanceRead)
def update_attendance(
    attendance_id: str,
    attendance_in: schemas.AttendanceUpdate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.AttendanceRead:
    record = AttendanceService.get_attendance(db, identity.user_id, attendance_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Attendance record not found"
        )
    try:
        return AttendanceService.update_attendance(db, record, attendance_in)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
