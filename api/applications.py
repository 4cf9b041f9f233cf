from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.responses import customer_to_response, status_to_response
from database import get_db
from middleware.auth import CurrentUser, require_roles
from schemas.application import ApplicationCreate, EntityCheck, StatusOverride
from schemas.auth import SessionUser, UserRole
from services import applications as svc
from services.errors import ValidationFailed
from services.lifecycle import override_status
from services.references import is_valid_reference

router = APIRouter(prefix="/api", tags=["applications"])


@router.post("/customer", status_code=201)
async def create_application(
    body: ApplicationCreate,
    user: SessionUser = Depends(require_roles(UserRole.RELATIONSHIP_MANAGER)),
    db: AsyncSession = Depends(get_db),
):
    customer = await svc.create_application(db, body, user)
    return {
        "success": True,
        "message": "Customer and loan application created successfully",
        "data": customer_to_response(customer),
    }


@router.get("/customer/{customer_id}")
async def get_application(customer_id: str, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return customer_to_response(await svc.get_customer(db, customer_id))


@router.get("/manage")
async def list_applications(
    user: CurrentUser,
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return [customer_to_response(c) for c in await svc.list_customers(db, status)]


@router.get("/check")
async def check_application(ref: str = Query(..., min_length=1), db: AsyncSession = Depends(get_db)):
    """Public status lookup by reference number; staff list applications through /manage."""
    ref = ref.strip()
    if not is_valid_reference(ref):
        raise ValidationFailed("Invalid application reference number")
    return status_to_response(await svc.find_by_reference(db, ref))


@router.get("/pending")
async def list_pending(
    user: CurrentUser,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    search: str = "",
    db: AsyncSession = Depends(get_db),
):
    customers, pagination = await svc.list_pending(db, page=page, limit=limit, search=search)
    return {
        "success": True,
        "data": [customer_to_response(c) for c in customers],
        "pagination": pagination,
    }


@router.post("/check-entity")
async def check_entity(body: EntityCheck, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return {"exists": await svc.entity_exists(db, body.number, body.type)}


@router.post("/update-status")
async def update_status(body: StatusOverride, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    customer = await override_status(db, body.customer_id, body.status, user, reason=body.reason)
    return customer_to_response(customer)
