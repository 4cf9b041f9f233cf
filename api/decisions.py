from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.responses import customer_to_response, decision_to_response, member_vote_to_response
from database import get_db
from middleware.auth import CurrentUser, require_roles
from schemas.auth import SessionUser, UserRole
from schemas.decision import DecisionCreate, MemberDecisionCreate, TransitionRequest
from services import decisions as svc
from services.applications import get_customer
from services.errors import ValidationFailed
from services.lifecycle import apply_transition

router = APIRouter(prefix="/api", tags=["decisions"])


@router.get("/decision/{reference}")
async def get_decision(reference: str, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return decision_to_response(await svc.get_final_decision(db, reference))


@router.get("/decision/{reference}/history")
async def get_decision_history(reference: str, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    """Every committee outcome recorded for the application, including superseded ones."""
    return [decision_to_response(entry) for entry in await svc.list_decision_history(db, reference)]


@router.post("/decisions", status_code=201)
async def record_decision(body: DecisionCreate, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    """Binding committee decision: decision row and status change commit together or not at all."""
    customer = await get_customer(db, body.customer_id)
    if customer.application_reference_number != body.application_reference_number:
        raise ValidationFailed("Application reference number does not match the customer")
    customer = await apply_transition(
        db,
        body.customer_id,
        "decision",
        user,
        TransitionRequest(
            decision=body.decision,
            decision_reason=body.decision_reason,
            committee_member=body.committee_member,
            expected_version=body.expected_version,
        ),
    )
    decision = await svc.get_final_decision(db, customer.application_reference_number)
    return {
        "message": "Decision recorded successfully",
        "decision": decision_to_response(decision),
        "application": customer_to_response(customer),
    }


@router.post("/members", status_code=201)
async def cast_member_vote(
    body: MemberDecisionCreate,
    user: SessionUser = Depends(require_roles(UserRole.COMMITTE_MEMBER)),
    db: AsyncSession = Depends(get_db),
):
    vote = await svc.cast_member_vote(db, body, user)
    return {"message": "Decision recorded successfully", "decision": member_vote_to_response(vote)}


@router.get("/member/{reference}")
async def get_my_vote(reference: str, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return member_vote_to_response(await svc.get_member_vote(db, reference, user.id))


@router.get("/view/{reference}")
async def list_votes(
    reference: str,
    user: SessionUser = Depends(require_roles(UserRole.APPROVAL_COMMITTE)),
    db: AsyncSession = Depends(get_db),
):
    votes = await svc.list_member_votes(db, reference)
    return {
        "decisions": [member_vote_to_response(v) for v in votes],
        "tally": svc.tally(votes),
    }
