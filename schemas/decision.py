from typing import Optional

from pydantic import Field

from schemas.base import CamelModel


class TransitionRequest(CamelModel):
    """Body of ``PATCH /api/customer/{id}/{action}``; which fields matter depends on the action."""

    credit_analyst_comment: Optional[str] = None
    rm_recommendation: Optional[str] = None
    decision: Optional[str] = None
    decision_reason: Optional[str] = None
    committee_member: Optional[str] = None
    expected_version: Optional[int] = None


class DecisionCreate(CamelModel):
    """Final committee decision; recorded together with the status change."""

    customer_id: str = Field(..., min_length=1)
    application_reference_number: str = Field(..., min_length=1)
    decision: str = Field(..., min_length=1)
    decision_reason: Optional[str] = None
    committee_member: Optional[str] = None
    expected_version: Optional[int] = None


class MemberDecisionCreate(CamelModel):
    application_reference_number: str = Field(..., min_length=1)
    decision: str = Field(..., min_length=1)
    decision_reason: Optional[str] = None
