from schemas.analysis import AnalysisSave, ReviewSave
from schemas.application import ApplicationCreate, EntityCheck, StatusOverride
from schemas.auth import SessionPayload, SessionUser, UserRole
from schemas.decision import DecisionCreate, MemberDecisionCreate, TransitionRequest
from schemas.status import StatusBadge

__all__ = [
    "AnalysisSave",
    "ApplicationCreate",
    "DecisionCreate",
    "EntityCheck",
    "MemberDecisionCreate",
    "ReviewSave",
    "SessionPayload",
    "SessionUser",
    "StatusBadge",
    "StatusOverride",
    "TransitionRequest",
    "UserRole",
]
