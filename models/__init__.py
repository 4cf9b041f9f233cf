from models.analysis import LoanAnalysis
from models.customer import Customer
from models.decision import Decision, DecisionHistory, MemberDecision

__all__ = [
    "Customer",
    "Decision",
    "DecisionHistory",
    "LoanAnalysis",
    "MemberDecision",
]
