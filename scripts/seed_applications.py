"""
Seed demo loan applications at different points of the lifecycle.
Run: python -m scripts.seed_applications (from the project root).
"""
import asyncio
import os
import sys
from datetime import date

# Add parent so we can import from the project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from database import AsyncSessionLocal, init_db
from models import Customer
from schemas.application import ApplicationCreate
from schemas.auth import SessionUser
from schemas.decision import TransitionRequest
from services.applications import create_application
from services.lifecycle import apply_transition

RM = SessionUser(id="seed-rm", role="RELATIONSHIP_MANAGER", name="Seed RM", email="rm@example.com")
ANALYST = SessionUser(id="seed-analyst", role="CREDIT_ANALYST", name="Seed Analyst", email="ca@example.com")
SUPERVISOR = SessionUser(id="seed-supervisor", role="SUPERVISOR", name="Seed Supervisor", email="sv@example.com")
COMMITTEE = SessionUser(
    id="seed-committee", role="APPROVAL_COMMITTE", name="Credit Committee", email="committee@example.com"
)

TO_MEMBER_REVIEW = [
    (ANALYST, "take", None),
    (ANALYST, "save", None),
    (SUPERVISOR, "oka", None),
    (SUPERVISOR, "review", None),
    (ANALYST, "final", None),
    (ANALYST, "edit", None),
]

APPLICATIONS_DATA = [
    {
        "customer": {
            "customer_number": "SEED-0001",
            "first_name": "Almaz",
            "last_name": "Tesfaye",
            "phone": "0911000001",
            "company_name": "Almaz Coffee Export",
            "major_line_business": "Coffee export",
            "date_of_establishment_mlb": date(2012, 4, 1),
            "purpose_of_loan": "Working capital for harvest season",
            "loan_type": "Revolving",
            "loan_amount": 2_500_000,
            "loan_period": 12,
            "mode_of_repayment": "Quarterly",
            "economic_sector": "Agriculture",
        },
        "steps": [],
    },
    {
        "customer": {
            "customer_number": "SEED-0002",
            "first_name": "Dawit",
            "last_name": "Bekele",
            "phone": "0911000002",
            "major_line_business": "Construction materials",
            "date_of_establishment_mlb": date(2018, 9, 15),
            "purpose_of_loan": "Truck purchase",
            "loan_type": "Term loan",
            "loan_amount": 4_000_000,
            "loan_period": 36,
            "mode_of_repayment": "Monthly",
        },
        "steps": [
            (ANALYST, "take", None),
            (ANALYST, "ask", TransitionRequest(credit_analyst_comment="Please confirm the truck supplier quote")),
        ],
    },
    {
        "customer": {
            "customer_number": "SEED-0003",
            "first_name": "Selam",
            "last_name": "Haile",
            "phone": "0911000003",
            "major_line_business": "Textile retail",
            "date_of_establishment_mlb": date(2010, 1, 10),
            "purpose_of_loan": "Shop expansion",
            "loan_type": "Term loan",
            "loan_amount": 800_000,
            "loan_period": 24,
            "mode_of_repayment": "Monthly",
        },
        "steps": TO_MEMBER_REVIEW,
    },
    {
        "customer": {
            "customer_number": "SEED-0004",
            "first_name": "Hana",
            "last_name": "Girma",
            "phone": "0911000004",
            "major_line_business": "Dairy processing",
            "date_of_establishment_mlb": date(2005, 6, 30),
            "purpose_of_loan": "Cold storage",
            "loan_type": "Term loan",
            "loan_amount": 6_000_000,
            "loan_period": 48,
            "mode_of_repayment": "Monthly",
        },
        "steps": TO_MEMBER_REVIEW
        + [(COMMITTEE, "decision", TransitionRequest(decision="APPROVED", committee_member="Credit Committee"))],
    },
]


async def seed():
    await init_db()
    async with AsyncSessionLocal() as session:
        for data in APPLICATIONS_DATA:
            number = data["customer"]["customer_number"]
            existing = await session.execute(select(Customer.id).where(Customer.customer_number == number))
            if existing.scalar_one_or_none():
                print(f"Customer {number} already exists, skipping")
                continue
            customer = await create_application(session, ApplicationCreate(**data["customer"]), RM)
            for user, action, body in data["steps"]:
                customer = await apply_transition(session, customer.id, action, user, body)
            print(f"Seeded {customer.application_reference_number}: {customer.application_status}")
        await session.commit()
    print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
