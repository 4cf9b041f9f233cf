"""
Loan analysis records: analyst documents and narrative, supervisor scores.

Who may write depends on where the application is in its lifecycle:
- credit analysts edit while the file is UNDER_REVIEW, FINAL_ANALYSIS or COMMITTE_REVERSED;
- relationship managers only answer with ``rm_recommendation`` while it is RM_RECCOMENDATION;
- supervisors score while it is CONDITIONAL or SUPERVISOR_REVIEWING.
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Customer, LoanAnalysis
from schemas.analysis import AnalysisSave, ReviewSave
from schemas.auth import SessionUser, UserRole
from services.errors import NotFound, PermissionDenied, TransitionConflict, ValidationFailed
from services.scoring import clamp_score, overall_score
from services.status_registry import ApplicationStatus as S

logger = logging.getLogger(__name__)

SCORE_COLUMNS = (
    "pestel_analysis_score",
    "swot_analysis_score",
    "risk_assessment_score",
    "esg_assessment_score",
    "financial_need_score",
)

ANALYST_EDIT_STATUSES = frozenset({S.UNDER_REVIEW, S.FINAL_ANALYSIS, S.COMMITTE_REVERSED})
RM_EDIT_STATUSES = frozenset({S.RM_RECCOMENDATION})
REVIEW_STATUSES = frozenset({S.CONDITIONAL, S.SUPERVISOR_REVIEWING})

RM_FIELDS = frozenset({"rm_recommendation"})
REVIEW_DECISIONS = ("APPROVED", "REJECTED")


async def get_analysis(session: AsyncSession, reference: str) -> LoanAnalysis:
    if not reference:
        raise ValidationFailed("Application reference number is required")
    result = await session.execute(
        select(LoanAnalysis).where(LoanAnalysis.application_reference_number == reference)
    )
    analysis = result.scalar_one_or_none()
    if analysis is None:
        raise NotFound("Loan analysis not found")
    return analysis


async def _customer_for(session: AsyncSession, reference: Optional[str]) -> Customer:
    if not reference:
        raise ValidationFailed("applicationReferenceNumber is required")
    result = await session.execute(select(Customer).where(Customer.application_reference_number == reference))
    customer = result.scalar_one_or_none()
    if customer is None:
        raise NotFound("Customer not found")
    return customer


def _require_status(customer: Customer, allowed: frozenset, what: str) -> None:
    if customer.application_status not in {s.value for s in allowed}:
        logger.warning(
            "Refused to %s on %s: status is %s", what, customer.application_reference_number, customer.application_status
        )
        raise TransitionConflict(f"Cannot {what} while the application is {customer.application_status}")


async def _get_or_create(session: AsyncSession, reference: str) -> LoanAnalysis:
    """The analysis record comes into existence on its first write."""
    result = await session.execute(
        select(LoanAnalysis).where(LoanAnalysis.application_reference_number == reference)
    )
    analysis = result.scalar_one_or_none()
    if analysis is None:
        analysis = LoanAnalysis(id=f"la-{uuid.uuid4().hex[:12]}", application_reference_number=reference)
        session.add(analysis)
        logger.info("Loan analysis opened for %s", reference)
    return analysis


async def save_analysis(
    session: AsyncSession, reference: str, body: AnalysisSave, user: SessionUser
) -> tuple[Customer, LoanAnalysis]:
    """Upsert analyst documents and narrative; fields left out of the body keep their value."""
    updates = body.model_dump(exclude_none=True, exclude={"application_reference_number", "transition"})
    is_rm = user.role == UserRole.RELATIONSHIP_MANAGER.value
    if is_rm and set(updates) - RM_FIELDS:
        raise PermissionDenied("Relationship managers may only set rmRecommendation")

    customer = await _customer_for(session, reference)
    if is_rm:
        _require_status(customer, RM_EDIT_STATUSES, "add a recommendation")
    else:
        _require_status(customer, ANALYST_EDIT_STATUSES, "edit the analysis")

    analysis = await _get_or_create(session, reference)
    for key, value in updates.items():
        setattr(analysis, key, value)
    await session.flush()
    await session.refresh(analysis)
    return customer, analysis


async def save_review(session: AsyncSession, body: ReviewSave) -> tuple[Customer, LoanAnalysis]:
    """Store supervisor scores (clamped to 0-100) and recompute the overall score."""
    decision = None
    if body.decision is not None:
        decision = body.decision.strip().upper()
        if decision not in REVIEW_DECISIONS:
            raise ValidationFailed("Invalid review decision")

    customer = await _customer_for(session, body.application_reference_number)
    _require_status(customer, REVIEW_STATUSES, "score the analysis")

    analysis = await _get_or_create(session, body.application_reference_number)
    for column, score in zip(SCORE_COLUMNS, body.scores()):
        if score is not None:
            setattr(analysis, column, clamp_score(score))
    analysis.overall_score = overall_score(getattr(analysis, c) for c in SCORE_COLUMNS)
    if body.review_notes is not None:
        analysis.review_notes = body.review_notes
    if decision is not None:
        analysis.decision = decision
    await session.flush()
    await session.refresh(analysis)
    logger.info("Supervisor review saved for %s (overall %.1f)", body.application_reference_number, analysis.overall_score)
    return customer, analysis
