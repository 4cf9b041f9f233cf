"""
Application status values and their display badges.
Status strings are stored and exchanged verbatim, including the historical
spellings (RM_RECCOMENDATION, COMMITTE_REVIEW, COMMITTE_REVERSED).
"""
from __future__ import annotations

from enum import Enum

from schemas.status import StatusBadge


class ApplicationStatus(str, Enum):
    PENDING = "PENDING"
    UNDER_REVIEW = "UNDER_REVIEW"
    RM_RECCOMENDATION = "RM_RECCOMENDATION"
    ANALYSIS_COMPLETED = "ANALYSIS_COMPLETED"
    CONDITIONAL = "CONDITIONAL"
    SUPERVISOR_REVIEWING = "SUPERVISOR_REVIEWING"
    SUPERVISED = "SUPERVISED"
    FINAL_ANALYSIS = "FINAL_ANALYSIS"
    MEMBER_REVIEW = "MEMBER_REVIEW"
    COMMITTE_REVIEW = "COMMITTE_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMMITTE_REVERSED = "COMMITTE_REVERSED"


TERMINAL_STATUSES = frozenset({ApplicationStatus.APPROVED, ApplicationStatus.REJECTED})

FALLBACK_COLOR = "bg-gray-100 text-gray-800"

STATUS_BADGES: dict[ApplicationStatus, StatusBadge] = {
    ApplicationStatus.PENDING: StatusBadge(status="PENDING", label="Pending", color="bg-yellow-100 text-yellow-800"),
    ApplicationStatus.UNDER_REVIEW: StatusBadge(
        status="UNDER_REVIEW", label="Under Review", color="bg-blue-100 text-blue-800"
    ),
    ApplicationStatus.RM_RECCOMENDATION: StatusBadge(
        status="RM_RECCOMENDATION", label="RM Recommendation", color="bg-orange-100 text-orange-800"
    ),
    ApplicationStatus.ANALYSIS_COMPLETED: StatusBadge(
        status="ANALYSIS_COMPLETED", label="Analysis Completed", color="bg-teal-100 text-teal-800"
    ),
    ApplicationStatus.CONDITIONAL: StatusBadge(
        status="CONDITIONAL", label="Conditional", color="bg-violet-100 text-violet-800"
    ),
    ApplicationStatus.SUPERVISOR_REVIEWING: StatusBadge(
        status="SUPERVISOR_REVIEWING", label="Supervisor Reviewing", color="bg-pink-100 text-pink-800"
    ),
    ApplicationStatus.SUPERVISED: StatusBadge(
        status="SUPERVISED", label="Supervised", color="bg-indigo-100 text-indigo-800"
    ),
    ApplicationStatus.FINAL_ANALYSIS: StatusBadge(
        status="FINAL_ANALYSIS", label="Final Analysis", color="bg-cyan-100 text-cyan-800"
    ),
    ApplicationStatus.MEMBER_REVIEW: StatusBadge(
        status="MEMBER_REVIEW", label="Member Review", color="bg-amber-100 text-amber-800"
    ),
    ApplicationStatus.COMMITTE_REVIEW: StatusBadge(
        status="COMMITTE_REVIEW", label="Committee Review", color="bg-purple-100 text-purple-800"
    ),
    ApplicationStatus.APPROVED: StatusBadge(status="APPROVED", label="Approved", color="bg-green-100 text-green-800"),
    ApplicationStatus.REJECTED: StatusBadge(status="REJECTED", label="Rejected", color="bg-red-100 text-red-800"),
    ApplicationStatus.COMMITTE_REVERSED: StatusBadge(
        status="COMMITTE_REVERSED", label="Committee Reversed", color="bg-rose-100 text-rose-800"
    ),
}


def is_known_status(status: str | None) -> bool:
    return status in ApplicationStatus._value2member_map_


def parse_status(status: str | None) -> ApplicationStatus | None:
    """Case-insensitive lookup; None for anything outside the registry."""
    if not status:
        return None
    return ApplicationStatus._value2member_map_.get(status.strip().upper())


def badge_for(status: str | None) -> StatusBadge:
    """Badge for a status; unknown values get a gray badge labeled with the raw string."""
    known = ApplicationStatus._value2member_map_.get(status or "")
    if known is not None:
        return STATUS_BADGES[known]
    raw = status or ""
    return StatusBadge(status=raw, label=raw, color=FALLBACK_COLOR)


def all_badges() -> list[StatusBadge]:
    return [STATUS_BADGES[s] for s in ApplicationStatus]
