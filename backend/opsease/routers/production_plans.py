"""Router exposing production plan operations."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import UserIdentity, require_user
from ..services import ProductionPlanService

router = APIRouter(dependencies=[Depends(require_user)])


@router.get("", response_model=List[schemas.ProductionPlanRead])
def list_production_plans(
    order_id: Optional[str] = Query(None, alias="orderId"),
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    return ProductionPlanService.list_plans(db, identity.user_id, order_id=order_id)


@router.post("", response_model=schemas.ProductionPlanRead, status_code=status.HTTP_201_CREATED)
def create_production_plan(
    plan_in: schemas.ProductionPlanCreate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.ProductionPlanRead:
    try:
        return ProductionPlanService.create_plan(db, identity.user_id, plan_in)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.put("/{plan_id}", response_model=schemas.ProductionPlanRead)
def update_production_plan(
    plan_id: str,
    plan_in: schemas.ProductionPlanUpdate,
    identity: UserIdentity = Depends(require_user),
    db: Session = Depends(get_db),
) -> schemas.ProductionPlanRead:
    plan = ProductionPlanService.get_plan(db, identity.user_id, plan_id)
    if plan is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Production plan not found"
        )
    try:
        return ProductionPlanService.update_plan(db, plan, plan_in)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
