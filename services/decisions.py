"""
Committee decisions. Members each cast one vote per application while it is in
MEMBER_REVIEW; the approval committee's binding decision is a single row per
application, written by the lifecycle together with the status change.
"""
from __future__ import annotations

import logging
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models import Customer, Decision, DecisionHistory, MemberDecision
from schemas.auth import SessionUser
from schemas.decision import MemberDecisionCreate
from services.errors import NotFound, TransitionConflict, ValidationFailed
from services.status_registry import ApplicationStatus
from services.validation import require_reason

logger = logging.getLogger(__name__)

DECISION_VALUES = (
    ApplicationStatus.APPROVED.value,
    ApplicationStatus.REJECTED.value,
    ApplicationStatus.COMMITTE_REVERSED.value,
)
# Contact details of the responsible unit travel with binding outcomes only
FINAL_OUTCOMES = frozenset({ApplicationStatus.APPROVED.value, ApplicationStatus.REJECTED.value})


def _check_decision_value(decision: Optional[str]) -> str:
    value = (decision or "").strip().upper()
    if value not in DECISION_VALUES:
        raise ValidationFailed("Invalid decision value")
    return value


async def record_final_decision(
    session: AsyncSession,
    customer: Customer,
    decision: str,
    reason: Optional[str],
    user: SessionUser,
    committee_member: Optional[str] = None,
) -> Decision:
    """Set the application's current committee decision and append it to the history.

    The caller owns the transaction.
    """
    now = datetime.now(timezone.utc)
    result = await session.execute(
        select(Decision).where(Decision.application_reference_number == customer.application_reference_number)
    )
    record = result.scalar_one_or_none()
    if record is None:
        record = Decision(
            id=f"dec-{uuid.uuid4().hex[:12]}",
            customer_id=customer.id,
            application_reference_number=customer.application_reference_number,
        )
        session.add(record)
    record.decision = decision
    record.decision_reason = (reason or "").strip() or None
    record.committee_member = committee_member or user.name or user.id
    record.decision_date = now
    if decision in FINAL_OUTCOMES:
        record.responsible_unit_name = user.name
        record.responsible_unit_email = user.email
        record.responsible_unit_phone = user.responsible_phone
    await session.flush()
    session.add(
        DecisionHistory(
            id=f"dech-{uuid.uuid4().hex[:12]}",
            decision_id=record.id,
            application_reference_number=record.application_reference_number,
            decision=record.decision,
            decision_reason=record.decision_reason,
            committee_member=record.committee_member,
            decided_by=user.id,
            decision_date=now,
        )
    )
    await session.flush()
    await session.refresh(record)
    return record


async def get_final_decision(session: AsyncSession, reference: str) -> Decision:
    result = await session.execute(select(Decision).where(Decision.application_reference_number == reference))
    record = result.scalar_one_or_none()
    if record is None:
        raise NotFound("Decision not found")
    return record


async def list_decision_history(session: AsyncSession, reference: str) -> list[DecisionHistory]:
    """Every committee outcome for the application, oldest first."""
    result = await session.execute(
        select(DecisionHistory)
        .where(DecisionHistory.application_reference_number == reference)
        .order_by(DecisionHistory.decision_date, DecisionHistory.created_at)
    )
    entries = list(result.scalars().all())
    if not entries:
        raise NotFound("Decision not found")
    return entries


async def cast_member_vote(session: AsyncSession, body: MemberDecisionCreate, user: SessionUser) -> MemberDecision:
    decision = _check_decision_value(body.decision)
    require_reason(decision, body.decision_reason)

    result = await session.execute(
        select(Customer.application_status).where(
            Customer.application_reference_number == body.application_reference_number
        )
    )
    status = result.scalar_one_or_none()
    if status is None:
        raise NotFound("Application not found")
    if status != ApplicationStatus.MEMBER_REVIEW.value:
        raise TransitionConflict(f"Application is not open for member votes (current status {status})")

    existing = await session.execute(
        select(MemberDecision.id).where(
            MemberDecision.application_reference_number == body.application_reference_number,
            MemberDecision.user_id == user.id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise TransitionConflict("A decision from this member already exists for this application")

    vote = MemberDecision(
        id=f"mdec-{uuid.uuid4().hex[:12]}",
        application_reference_number=body.application_reference_number,
        user_id=user.id,
        user_name=user.name,
        user_email=user.email,
        decision=decision,
        decision_reason=(body.decision_reason or "").strip() or None,
        decision_date=datetime.now(timezone.utc),
    )
    session.add(vote)
    try:
        await session.flush()
    except IntegrityError as e:
        raise TransitionConflict("A decision from this member already exists for this application") from e
    await session.refresh(vote)
    logger.info("Member %s voted %s on %s", user.id, decision, body.application_reference_number)
    return vote


async def get_member_vote(session: AsyncSession, reference: str, user_id: str) -> MemberDecision:
    result = await session.execute(
        select(MemberDecision).where(
            MemberDecision.application_reference_number == reference,
            MemberDecision.user_id == user_id,
        )
    )
    vote = result.scalar_one_or_none()
    if vote is None:
        raise NotFound("Decision not found for this user")
    return vote


async def list_member_votes(session: AsyncSession, reference: str) -> list[MemberDecision]:
    result = await session.execute(
        select(MemberDecision)
        .where(MemberDecision.application_reference_number == reference)
        .order_by(MemberDecision.created_at.desc(), MemberDecision.decision_date.desc())
    )
    votes = list(result.scalars().all())
    if not votes:
        raise NotFound("No decisions found for this application")
    return votes


def tally(votes: list[MemberDecision]) -> dict[str, Any]:
    counts = Counter(v.decision for v in votes)
    return {value: counts.get(value, 0) for value in DECISION_VALUES} | {"total": len(votes)}
