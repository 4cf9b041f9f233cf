from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import Field

from schemas.base import CamelModel


class ApplicationCreate(CamelModel):
    """Relationship manager intake: customer profile plus loan request."""

    customer_number: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    middle_name: Optional[str] = None
    last_name: str = Field(..., min_length=1)
    mothers_name: Optional[str] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    date_of_birth: Optional[date] = None
    national_id: Optional[str] = None
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None
    region: Optional[str] = None
    zone: Optional[str] = None
    city: Optional[str] = None
    subcity: Optional[str] = None
    woreda: Optional[str] = None

    tin_number: Optional[str] = None
    company_name: Optional[str] = None
    annual_revenue: Optional[float] = None
    monthly_income: Optional[float] = None
    status: Optional[str] = None
    account_type: Optional[str] = None
    major_line_business: str = Field(..., min_length=1)
    major_line_business_url: Optional[str] = None
    other_line_business: Optional[str] = None
    other_line_business_url: Optional[str] = None
    date_of_establishment_mlb: date = Field(..., alias="dateOfEstablishmentMLB")
    date_of_establishment_olb: Optional[date] = Field(None, alias="dateOfEstablishmentOLB")

    purpose_of_loan: str = Field(..., min_length=1)
    loan_type: str = Field(..., min_length=1)
    loan_amount: float
    loan_period: int = Field(..., gt=0)
    mode_of_repayment: str = Field(..., min_length=1)
    economic_sector: Optional[str] = None
    customer_segmentation: Optional[str] = None
    credit_initiation_center: Optional[str] = None

    nationalid_url: Optional[str] = None
    agreement_form_url: Optional[str] = None
    application_form_url: Optional[str] = None
    shareholders_details_url: Optional[str] = None
    credit_profile_url: Optional[str] = None
    transaction_profile_url: Optional[str] = None
    collateral_profile_url: Optional[str] = None
    financial_profile_url: Optional[str] = None


class EntityCheck(CamelModel):
    number: str
    type: Literal["customer", "company"]


class StatusOverride(CamelModel):
    customer_id: str
    status: str
    reason: Optional[str] = None
