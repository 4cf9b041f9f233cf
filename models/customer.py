from sqlalchemy import Column, Date, DateTime, Float, Integer, String, Text, func

from database import Base


class Customer(Base):
    """A customer together with their single loan application."""

    __tablename__ = "customers"

    id = Column(String(64), primary_key=True, index=True)
    customer_number = Column(String(64), unique=True, nullable=False, index=True)
    # Assigned once at creation, never rewritten
    application_reference_number = Column(String(32), unique=True, nullable=False, index=True)
    application_status = Column(String(32), nullable=False, default="PENDING", index=True)
    decision_reason = Column(Text, nullable=True)
    # Bumped on every status write; callers may pass it back to detect lost updates
    version = Column(Integer, nullable=False, default=1)

    # Personal / contact
    first_name = Column(String(128), nullable=False)
    middle_name = Column(String(128), nullable=True)
    last_name = Column(String(128), nullable=False)
    mothers_name = Column(String(128), nullable=True)
    gender = Column(String(16), nullable=True)
    marital_status = Column(String(32), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    national_id = Column(String(64), nullable=True)
    phone = Column(String(32), nullable=False)
    email = Column(String(256), nullable=True)
    region = Column(String(128), nullable=True)
    zone = Column(String(128), nullable=True)
    city = Column(String(128), nullable=True)
    subcity = Column(String(128), nullable=True)
    woreda = Column(String(128), nullable=True)

    # Business
    tin_number = Column(String(64), nullable=True)
    company_name = Column(String(256), nullable=True)
    annual_revenue = Column(Float, nullable=True)
    monthly_income = Column(Float, nullable=True)
    status = Column(String(32), nullable=True)
    account_type = Column(String(64), nullable=True)
    major_line_business = Column(String(256), nullable=False)
    major_line_business_url = Column(String(1024), nullable=True)
    other_line_business = Column(String(256), nullable=True)
    other_line_business_url = Column(String(1024), nullable=True)
    date_of_establishment_mlb = Column(Date, nullable=False)
    date_of_establishment_olb = Column(Date, nullable=True)

    # Loan terms
    purpose_of_loan = Column(Text, nullable=False)
    loan_type = Column(String(128), nullable=False)
    loan_amount = Column(Float, nullable=False)
    loan_period = Column(Integer, nullable=False)
    mode_of_repayment = Column(String(128), nullable=False)
    economic_sector = Column(String(128), nullable=True)
    customer_segmentation = Column(String(128), nullable=True)
    credit_initiation_center = Column(String(256), nullable=True)

    # Document pointers (external storage URLs)
    nationalid_url = Column(String(1024), nullable=True)
    agreement_form_url = Column(String(1024), nullable=True)
    application_form_url = Column(String(1024), nullable=True)
    shareholders_details_url = Column(String(1024), nullable=True)
    credit_profile_url = Column(String(1024), nullable=True)
    transaction_profile_url = Column(String(1024), nullable=True)
    collateral_profile_url = Column(String(1024), nullable=True)
    financial_profile_url = Column(String(1024), nullable=True)

    # Workflow assignments and hand-off notes
    relation_manager_id = Column(String(64), nullable=True, index=True)
    credit_analyst_id = Column(String(64), nullable=True, index=True)
    supervisor_id = Column(String(64), nullable=True, index=True)
    committee_manager_id = Column(String(64), nullable=True, index=True)
    credit_analyst_comment = Column(Text, nullable=True)
    rm_recommendation = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
