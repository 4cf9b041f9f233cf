from __future__ import annotations

import logging
import math
import uuid
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models import Customer
from schemas.application import ApplicationCreate
from schemas.auth import SessionUser
from services.errors import NotFound, ValidationFailed
from services.references import next_reference
from services.status_registry import ApplicationStatus, parse_status
from services.validation import check_application

logger = logging.getLogger(__name__)

REFERENCE_ATTEMPTS = 3
MAX_PAGE_SIZE = 100


async def _customer_number_taken(session: AsyncSession, customer_number: str) -> bool:
    result = await session.execute(select(Customer.id).where(Customer.customer_number == customer_number))
    return result.scalar_one_or_none() is not None


async def create_application(session: AsyncSession, body: ApplicationCreate, user: SessionUser) -> Customer:
    """Register a customer's application as PENDING with a fresh reference number."""
    check_application(body)
    fields = body.model_dump(by_alias=False)

    for attempt in range(1, REFERENCE_ATTEMPTS + 1):
        if await _customer_number_taken(session, body.customer_number):
            raise ValidationFailed("Customer with this customer number already exists")
        reference = await next_reference(session)
        customer = Customer(
            id=str(uuid.uuid4()),
            application_reference_number=reference,
            application_status=ApplicationStatus.PENDING.value,
            relation_manager_id=user.id,
            version=1,
            **fields,
        )
        session.add(customer)
        try:
            await session.flush()
        except IntegrityError:
            # Another intake claimed the same reference; this request has written nothing else yet
            await session.rollback()
            logger.warning("Reference %s already taken (attempt %d)", reference, attempt)
            continue
        await session.refresh(customer)
        logger.info("Application %s created for customer %s by %s", reference, body.customer_number, user.id)
        return customer
    raise ValidationFailed("Could not allocate an application reference number, please retry")


async def get_customer(session: AsyncSession, customer_id: str) -> Customer:
    customer = await session.get(Customer, customer_id)
    if customer is None:
        raise NotFound("Application not found")
    return customer


async def find_by_reference(session: AsyncSession, reference: str) -> Customer:
    result = await session.execute(select(Customer).where(Customer.application_reference_number == reference))
    customer = result.scalar_one_or_none()
    if customer is None:
        raise NotFound("Application not found with this reference number")
    return customer


async def list_customers(session: AsyncSession, status: Optional[str] = None) -> list[Customer]:
    """All applications newest first; ``status`` of None or "all" means no filter."""
    stmt = select(Customer)
    if status and status.lower() != "all":
        target = parse_status(status)
        if target is None:
            raise ValidationFailed("Invalid status")
        stmt = stmt.where(Customer.application_status == target.value)
    result = await session.execute(stmt.order_by(Customer.created_at.desc()))
    return list(result.scalars().all())


async def list_pending(
    session: AsyncSession, page: int = 1, limit: int = 10, search: str = ""
) -> tuple[list[Customer], dict[str, Any]]:
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    conditions = [Customer.application_status == ApplicationStatus.PENDING.value]
    if search:
        pattern = f"%{search.lower()}%"
        conditions.append(
            or_(
                func.lower(Customer.customer_number).like(pattern),
                func.lower(Customer.first_name).like(pattern),
                func.lower(Customer.last_name).like(pattern),
                func.lower(Customer.application_reference_number).like(pattern),
                func.lower(Customer.tin_number).like(pattern),
            )
        )
    total = (await session.execute(select(func.count(Customer.id)).where(*conditions))).scalar_one()
    result = await session.execute(
        select(Customer)
        .where(*conditions)
        .order_by(Customer.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    total_pages = math.ceil(total / limit) if total else 0
    pagination = {
        "page": page,
        "limit": limit,
        "totalCount": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }
    return list(result.scalars().all()), pagination


async def entity_exists(session: AsyncSession, number: str, kind: str) -> bool:
    # Companies and individuals share the customer number space
    return await _customer_number_taken(session, number)
