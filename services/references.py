"""
Application reference numbers: ``<PREFIX>-<YYYYMM>-<NNNN>``.
The four-digit suffix is a per-month sequence, not a random draw; the unique
index on the column catches the rare race between two concurrent intakes.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from models import Customer
from services.errors import ValidationFailed

MAX_SEQUENCE = 9999

REFERENCE_PATTERN = re.compile(r"^[A-Z]+-\d{6}-\d{4}$")


def format_reference(when: datetime, sequence: int, prefix: Optional[str] = None) -> str:
    """
    >>> format_reference(datetime(2025, 3, 9), 7)
    'DASHEN-202503-0007'
    """
    if not 1 <= sequence <= MAX_SEQUENCE:
        raise ValidationFailed(f"Reference sequence {sequence} out of range 1-{MAX_SEQUENCE}")
    return f"{prefix or settings.reference_prefix}-{when:%Y%m}-{sequence:04d}"


def is_valid_reference(reference: Optional[str]) -> bool:
    return bool(reference) and REFERENCE_PATTERN.match(reference) is not None


async def next_reference(session: AsyncSession, when: Optional[datetime] = None) -> str:
    """Next unused reference for the month of ``when`` (defaults to now, UTC)."""
    when = when or datetime.now(timezone.utc)
    month_prefix = f"{settings.reference_prefix}-{when:%Y%m}-"
    result = await session.execute(
        select(func.max(Customer.application_reference_number)).where(
            Customer.application_reference_number.like(f"{month_prefix}%")
        )
    )
    last = result.scalar_one_or_none()
    sequence = int(last.rsplit("-", 1)[1]) + 1 if last else 1
    if sequence > MAX_SEQUENCE:
        raise ValidationFailed(f"Reference numbers exhausted for {when:%Y-%m}")
    return format_reference(when, sequence)
