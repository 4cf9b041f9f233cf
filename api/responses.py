"""Serialize ORM rows to the camelCase JSON the frontend consumes."""
from typing import Any

from models import Customer, Decision, DecisionHistory, LoanAnalysis, MemberDecision
from services.scoring import score_class, score_color
from services.status_registry import badge_for
from utils.case import row_to_camel

# Fields an applicant may see without a session
PUBLIC_STATUS_FIELDS = ("application_reference_number", "application_status", "decision_reason", "updated_at")


def customer_to_response(customer: Customer) -> dict[str, Any]:
    data = row_to_camel(customer)
    data["statusBadge"] = badge_for(customer.application_status).model_dump()
    return data


def status_to_response(customer: Customer) -> dict[str, Any]:
    """Status view for the public reference lookup; carries no personal data."""
    skip = [col.key for col in Customer.__table__.columns if col.key not in PUBLIC_STATUS_FIELDS]
    data = row_to_camel(customer, exclude=skip)
    data["statusBadge"] = badge_for(customer.application_status).model_dump()
    return data


def analysis_to_response(analysis: LoanAnalysis) -> dict[str, Any]:
    data = row_to_camel(analysis)
    data["overallScoreColor"] = score_color(analysis.overall_score) if analysis.overall_score is not None else None
    data["overallScoreClass"] = score_class(analysis.overall_score) if analysis.overall_score is not None else None
    return data


def decision_to_response(decision: Decision | DecisionHistory) -> dict[str, Any]:
    return row_to_camel(decision)


def member_vote_to_response(vote: MemberDecision) -> dict[str, Any]:
    data = row_to_camel(vote, exclude=("user_name", "user_email"))
    data["user"] = {"id": vote.user_id, "name": vote.user_name, "email": vote.user_email}
    return data
