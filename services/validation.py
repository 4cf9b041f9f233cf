"""
Intake and decision rules enforced before anything is written.
Each ``check_*`` raises ValidationFailed with a user-facing message; the ``is_*``
helpers are the boolean forms used by the checks and by clients.
"""
from __future__ import annotations

import calendar
from datetime import date
from pathlib import Path
from typing import Optional

from config import settings
from schemas.application import ApplicationCreate
from services.errors import ValidationFailed

REASON_REQUIRED_DECISIONS = frozenset({"REJECTED", "COMMITTE_REVERSED"})

ALLOWED_DOCUMENT_TYPES = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}

MIN_BUSINESS_AGE_MONTHS = 1
MAX_BUSINESS_AGE_YEARS = 100


def months_before(day: date, months: int) -> date:
    """Same calendar day ``months`` earlier, clamped to the end of shorter months."""
    total = day.year * 12 + (day.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def is_valid_loan_amount(amount: Optional[float]) -> bool:
    if amount is None:
        return False
    return settings.min_loan_amount <= amount <= settings.max_loan_amount


def check_loan_amount(amount: Optional[float]) -> None:
    if amount is None:
        raise ValidationFailed("Loan amount is required")
    if amount < settings.min_loan_amount:
        raise ValidationFailed(f"Minimum loan amount is {settings.min_loan_amount:,} ETB")
    if amount > settings.max_loan_amount:
        raise ValidationFailed(f"Maximum loan amount is {settings.max_loan_amount:,} ETB")


def is_valid_establishment_date(established: Optional[date], today: Optional[date] = None) -> bool:
    """A business must be at least one month old and at most 100 years old."""
    if established is None:
        return False
    today = today or date.today()
    latest = months_before(today, MIN_BUSINESS_AGE_MONTHS)
    earliest = months_before(today, MAX_BUSINESS_AGE_YEARS * 12)
    return earliest <= established <= latest


def check_establishment_date(established: Optional[date], label: str, today: Optional[date] = None) -> None:
    if established is None:
        raise ValidationFailed(f"{label} establishment date is required")
    if not is_valid_establishment_date(established, today):
        raise ValidationFailed(
            f"{label} establishment date must be between {MAX_BUSINESS_AGE_YEARS} years "
            f"and {MIN_BUSINESS_AGE_MONTHS} month before today"
        )


def reason_required(decision: Optional[str]) -> bool:
    return decision in REASON_REQUIRED_DECISIONS


def require_reason(decision: Optional[str], reason: Optional[str]) -> None:
    """Rejections and reversals must say why."""
    if reason_required(decision) and not (reason or "").strip():
        if decision == "COMMITTE_REVERSED":
            raise ValidationFailed("Please provide feedback for what analysis is needed")
        raise ValidationFailed("Please provide a decision reason for rejection")


def check_document(filename: Optional[str], content_type: Optional[str], size: int) -> str:
    """Validate an uploaded document; returns its normalized extension."""
    if not filename:
        raise ValidationFailed("File name is required")
    ext = Path(filename).suffix.lower()
    expected_type = ALLOWED_DOCUMENT_TYPES.get(ext)
    if expected_type is None:
        raise ValidationFailed("Only PDF, JPEG and PNG files are allowed")
    if content_type and content_type != "application/octet-stream" and content_type != expected_type:
        raise ValidationFailed(f"File content type {content_type} does not match {ext}")
    if size <= 0:
        raise ValidationFailed("File is empty")
    if size > settings.max_upload_bytes:
        raise ValidationFailed(f"File exceeds the {settings.max_upload_mb} MB limit")
    return ext


def check_application(body: ApplicationCreate, today: Optional[date] = None) -> None:
    """Cross-field intake rules the schema cannot express on its own."""
    check_loan_amount(body.loan_amount)
    check_establishment_date(body.date_of_establishment_mlb, "Major line of business", today)
    if body.date_of_establishment_olb is not None:
        check_establishment_date(body.date_of_establishment_olb, "Other line of business", today)
    if body.other_line_business_url and not body.other_line_business:
        raise ValidationFailed("Other line of business document supplied without a description")
