from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.responses import analysis_to_response, customer_to_response
from database import get_db
from middleware.auth import CurrentUser, require_roles
from schemas.analysis import AnalysisSave, ReviewSave
from schemas.auth import SessionUser, UserRole
from schemas.decision import TransitionRequest
from services import analysis as svc
from services.lifecycle import apply_transition

router = APIRouter(prefix="/api", tags=["loan-analysis"])


def _response(customer, analysis) -> dict:
    return {
        "success": True,
        "loanAnalysis": analysis_to_response(analysis),
        "application": customer_to_response(customer),
    }


async def _save(db: AsyncSession, reference: str, body: AnalysisSave, user: SessionUser) -> dict:
    customer, analysis = await svc.save_analysis(db, reference, body, user)
    if body.transition:
        # An RM answer hands its recommendation to the "answer" action as well
        transition = TransitionRequest(rm_recommendation=body.rm_recommendation)
        customer = await apply_transition(db, customer.id, body.transition, user, transition)
    return _response(customer, analysis)


# Declared before /loan-analysis/{reference} so "review" is not taken for a reference
@router.post("/loan-analysis/review")
async def save_review(
    body: ReviewSave,
    user: SessionUser = Depends(require_roles(UserRole.SUPERVISOR)),
    db: AsyncSession = Depends(get_db),
):
    customer, analysis = await svc.save_review(db, body)
    if body.transition:
        customer = await apply_transition(db, customer.id, body.transition, user)
    return _response(customer, analysis)


@router.get("/loan-analysis/{reference}")
async def get_analysis(reference: str, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return analysis_to_response(await svc.get_analysis(db, reference))


@router.post("/loan-analysis/{reference}")
async def save_analysis(
    reference: str,
    body: AnalysisSave,
    user: SessionUser = Depends(require_roles(UserRole.CREDIT_ANALYST, UserRole.RELATIONSHIP_MANAGER)),
    db: AsyncSession = Depends(get_db),
):
    return await _save(db, reference, body, user)


@router.post("/save-analysis")
async def save_analysis_by_body(
    body: AnalysisSave,
    user: SessionUser = Depends(require_roles(UserRole.CREDIT_ANALYST, UserRole.RELATIONSHIP_MANAGER)),
    db: AsyncSession = Depends(get_db),
):
    return await _save(db, body.application_reference_number, body, user)
