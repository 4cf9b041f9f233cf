from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint, func

from database import Base


class Decision(Base):
    """Current binding committee decision; at most one per application.

    Every outcome, including ones later superseded, is also kept in DecisionHistory.
    """

    __tablename__ = "decisions"

    id = Column(String(64), primary_key=True, index=True)
    customer_id = Column(String(64), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    application_reference_number = Column(String(32), unique=True, nullable=False, index=True)
    decision = Column(String(32), nullable=False)
    decision_reason = Column(Text, nullable=True)
    committee_member = Column(String(256), nullable=True)
    responsible_unit_name = Column(String(256), nullable=True)
    responsible_unit_email = Column(String(256), nullable=True)
    responsible_unit_phone = Column(String(64), nullable=True)
    decision_date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class MemberDecision(Base):
    """An individual committee member's vote on an application."""

    __tablename__ = "member_decisions"
    __table_args__ = (
        UniqueConstraint("application_reference_number", "user_id", name="uq_member_decision_per_user"),
    )

    id = Column(String(64), primary_key=True, index=True)
    application_reference_number = Column(
        String(32),
        ForeignKey("customers.application_reference_number", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String(64), nullable=False, index=True)
    user_name = Column(String(256), nullable=True)
    user_email = Column(String(256), nullable=True)
    decision = Column(String(32), nullable=False)
    decision_reason = Column(Text, nullable=True)
    decision_date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class DecisionHistory(Base):
    """Append-only log of committee outcomes; rows are never updated."""

    __tablename__ = "decision_history"

    id = Column(String(64), primary_key=True, index=True)
    decision_id = Column(String(64), ForeignKey("decisions.id", ondelete="CASCADE"), nullable=False, index=True)
    application_reference_number = Column(String(32), nullable=False, index=True)
    decision = Column(String(32), nullable=False)
    decision_reason = Column(Text, nullable=True)
    committee_member = Column(String(256), nullable=True)
    decided_by = Column(String(64), nullable=True)
    decision_date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
