"""Router exposing dashboard aggregates."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import UserIdentity, require_user
from ..services import DashboardService

router = APIRouter(dependencies=[Depends(require_user)])


@router.get("/stats", response_model=schemas.DashboardStats)
def dashboard_stats(
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.DashboardStats:
    return DashboardService.stats(db, identity.user_id)
