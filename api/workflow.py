from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.responses import customer_to_response
from database import get_db
from middleware.auth import CurrentUser
from schemas.decision import TransitionRequest
from services.lifecycle import RULES, apply_transition, list_by_status, list_queue
from services.status_registry import all_badges

router = APIRouter(prefix="/api", tags=["workflow"])


@router.get("/statuses")
async def list_statuses():
    return [b.model_dump() for b in all_badges()]


@router.get("/transitions")
async def list_transitions():
    """The lifecycle rule table, for clients deciding which actions to offer."""
    return [
        {
            "action": r.action,
            "roles": sorted(role.value for role in r.roles),
            "from": [s.value for s in r.sources],
            "to": [s.value for s in r.targets],
            "requires": r.required_note,
            "description": r.description,
        }
        for r in RULES.values()
    ]


@router.patch("/customer/{customer_id}/{action}")
async def transition_application(
    customer_id: str,
    action: str,
    user: CurrentUser,
    body: Optional[TransitionRequest] = None,
    db: AsyncSession = Depends(get_db),
):
    customer = await apply_transition(db, customer_id, action, user, body)
    return {
        "message": "Application status updated successfully",
        "data": customer_to_response(customer),
    }


async def _queue(name: str, user, db: AsyncSession):
    return [customer_to_response(c) for c in await list_queue(db, name, user)]


@router.get("/final")
async def final_queue(user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await _queue("final", user, db)


@router.get("/reversed")
async def reversed_queue(user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await _queue("reversed", user, db)


@router.get("/revised")
async def revised_queue(user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await _queue("revised", user, db)


@router.get("/supervisor")
async def supervisor_queue(user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await _queue("supervisor", user, db)


@router.get("/members-queue")
async def members_queue(user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await _queue("members", user, db)


@router.get("/finaldecision")
async def final_decision_queue(user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await _queue("finaldecision", user, db)


@router.get("/get")
async def applications_by_status(status: str, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return [customer_to_response(c) for c in await list_by_status(db, status)]
