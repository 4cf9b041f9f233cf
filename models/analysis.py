from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text, func

from database import Base


class LoanAnalysis(Base):
    __tablename__ = "loan_analyses"

    id = Column(String(64), primary_key=True, index=True)
    application_reference_number = Column(
        String(32),
        ForeignKey("customers.application_reference_number", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )

    financial_profile_url = Column(String(1024), nullable=True)
    pestel_analysis_url = Column(String(1024), nullable=True)
    swot_analysis_url = Column(String(1024), nullable=True)
    risk_assessment_url = Column(String(1024), nullable=True)
    esg_assessment_url = Column(String(1024), nullable=True)
    financial_need_url = Column(String(1024), nullable=True)

    analyst_conclusion = Column(Text, nullable=True)
    analyst_recommendation = Column(Text, nullable=True)
    rm_recommendation = Column(Text, nullable=True)
    review_notes = Column(Text, nullable=True)

    # Supervisor scores, 0-100 each; overall is their mean
    pestel_analysis_score = Column(Float, nullable=True)
    swot_analysis_score = Column(Float, nullable=True)
    risk_assessment_score = Column(Float, nullable=True)
    esg_assessment_score = Column(Float, nullable=True)
    financial_need_score = Column(Float, nullable=True)
    overall_score = Column(Float, nullable=True)
    decision = Column(String(32), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
