"""
Application status lifecycle: which role may move an application from which
status to which, what each move requires, and the role queues.

Every status write goes through ``apply_transition``, a single conditional
UPDATE guarded by the allowed source statuses (and optionally the caller's last
seen ``version``), so two reviewers acting on the same application cannot both
succeed. A final committee decision row is written in the same transaction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models import Customer
from schemas.auth import SessionUser, UserRole
from schemas.decision import TransitionRequest
from services.decisions import record_final_decision
from services.errors import NotFound, PermissionDenied, TransitionConflict, ValidationFailed
from services.status_registry import ApplicationStatus as S
from services.status_registry import TERMINAL_STATUSES, parse_status
from services.validation import require_reason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionRule:
    action: str
    roles: frozenset
    sources: tuple
    targets: tuple
    # TransitionRequest attribute that must be non-blank, copied onto the same-named Customer column
    required_note: Optional[str] = None
    # Customer column that records the acting user's id
    assigns: Optional[str] = None
    description: str = ""

    @property
    def is_decision(self) -> bool:
        return len(self.targets) > 1


@dataclass(frozen=True)
class Queue:
    name: str
    statuses: tuple
    roles: frozenset = field(default_factory=frozenset)
    # Restrict to applications whose given Customer column equals the caller's id
    assigned_column: Optional[str] = None


RULES: dict[str, TransitionRule] = {
    rule.action: rule
    for rule in (
        TransitionRule(
            "take",
            frozenset({UserRole.CREDIT_ANALYST}),
            (S.PENDING,),
            (S.UNDER_REVIEW,),
            assigns="credit_analyst_id",
            description="Credit analyst picks up a pending application",
        ),
        TransitionRule(
            "ask",
            frozenset({UserRole.CREDIT_ANALYST}),
            (S.UNDER_REVIEW,),
            (S.RM_RECCOMENDATION,),
            required_note="credit_analyst_comment",
            description="Credit analyst asks the relationship manager for a recommendation",
        ),
        TransitionRule(
            "answer",
            frozenset({UserRole.RELATIONSHIP_MANAGER}),
            (S.RM_RECCOMENDATION,),
            (S.UNDER_REVIEW,),
            required_note="rm_recommendation",
            description="Relationship manager answers and returns the file to analysis",
        ),
        TransitionRule(
            "save",
            frozenset({UserRole.CREDIT_ANALYST}),
            (S.UNDER_REVIEW,),
            (S.CONDITIONAL,),
            description="Credit analyst completes the analysis",
        ),
        TransitionRule(
            "oka",
            frozenset({UserRole.SUPERVISOR}),
            (S.CONDITIONAL,),
            (S.SUPERVISOR_REVIEWING,),
            assigns="supervisor_id",
            description="Supervisor takes the analysed application",
        ),
        TransitionRule(
            "review",
            frozenset({UserRole.SUPERVISOR}),
            (S.SUPERVISOR_REVIEWING,),
            (S.SUPERVISED,),
            description="Supervisor finishes scoring",
        ),
        TransitionRule(
            "final",
            frozenset({UserRole.CREDIT_ANALYST}),
            (S.SUPERVISED,),
            (S.FINAL_ANALYSIS,),
            description="Credit analyst revises after supervision",
        ),
        TransitionRule(
            "edit",
            frozenset({UserRole.CREDIT_ANALYST}),
            (S.FINAL_ANALYSIS,),
            (S.MEMBER_REVIEW,),
            description="Credit analyst sends the final analysis to committee members",
        ),
        TransitionRule(
            "view",
            frozenset({UserRole.APPROVAL_COMMITTE}),
            (S.MEMBER_REVIEW,),
            (S.COMMITTE_REVIEW,),
            assigns="committee_manager_id",
            description="Approval committee closes member voting",
        ),
        TransitionRule(
            "rev",
            frozenset({UserRole.CREDIT_ANALYST}),
            (S.COMMITTE_REVERSED,),
            (S.COMMITTE_REVIEW,),
            description="Credit analyst resubmits a reversed application to committee",
        ),
        TransitionRule(
            "decision",
            frozenset({UserRole.APPROVAL_COMMITTE}),
            (S.MEMBER_REVIEW, S.COMMITTE_REVIEW),
            (S.APPROVED, S.REJECTED, S.COMMITTE_REVERSED),
            description="Approval committee issues the binding decision",
        ),
    )
}

QUEUES: dict[str, Queue] = {
    q.name: q
    for q in (
        Queue("final", (S.FINAL_ANALYSIS,), frozenset({UserRole.CREDIT_ANALYST})),
        Queue("reversed", (S.COMMITTE_REVERSED,), frozenset({UserRole.CREDIT_ANALYST})),
        Queue("revised", (S.SUPERVISED,), frozenset({UserRole.CREDIT_ANALYST}), assigned_column="credit_analyst_id"),
        Queue("supervisor", (S.CONDITIONAL, S.SUPERVISOR_REVIEWING), frozenset({UserRole.SUPERVISOR})),
        Queue("members", (S.MEMBER_REVIEW,), frozenset({UserRole.COMMITTE_MEMBER})),
        Queue("finaldecision", (S.COMMITTE_REVIEW,), frozenset({UserRole.APPROVAL_COMMITTE})),
    )
}


def get_rule(action: str) -> TransitionRule:
    rule = RULES.get(action)
    if rule is None:
        raise NotFound(f"Unknown action: {action}")
    return rule


def authorize(user: SessionUser, roles: frozenset, what: str) -> None:
    """Admins may do anything; banned accounts nothing."""
    if user.role == UserRole.BANNED.value:
        raise PermissionDenied("Account is banned")
    if user.role == UserRole.ADMIN.value:
        return
    if user.role not in {r.value for r in roles}:
        logger.warning("User %s with role %s refused: %s", user.id, user.role, what)
        raise PermissionDenied(f"Role {user.role} may not {what}")


def resolve_target(rule: TransitionRule, requested: Optional[str]) -> S:
    """Single-target actions ignore an omitted target; decisions must name one."""
    if not rule.is_decision:
        target = rule.targets[0]
        if requested and parse_status(requested) != target:
            raise ValidationFailed(f"Action {rule.action} moves to {target.value}, not {requested}")
        return target
    if not requested:
        raise ValidationFailed("Decision is required")
    target = parse_status(requested)
    if target not in rule.targets:
        raise ValidationFailed("Invalid decision value")
    return target


def validate_request(rule: TransitionRule, body: TransitionRequest) -> S:
    """Everything that can be checked without the database."""
    target = resolve_target(rule, body.decision)
    if rule.is_decision:
        require_reason(target.value, body.decision_reason)
    if rule.required_note and not (getattr(body, rule.required_note) or "").strip():
        raise ValidationFailed(f"{rule.required_note} is required for {rule.action}")
    return target


async def apply_transition(
    session: AsyncSession,
    customer_id: str,
    action: str,
    user: SessionUser,
    body: Optional[TransitionRequest] = None,
) -> Customer:
    body = body or TransitionRequest()
    rule = get_rule(action)
    target = validate_request(rule, body)
    authorize(user, rule.roles, f"perform {action}")

    values: dict = {
        "application_status": target.value,
        "version": Customer.version + 1,
    }
    if rule.assigns:
        values[rule.assigns] = user.id
    if rule.required_note:
        values[rule.required_note] = getattr(body, rule.required_note).strip()
    if rule.is_decision:
        values["decision_reason"] = (body.decision_reason or "").strip() or None

    stmt = update(Customer).where(
        Customer.id == customer_id,
        Customer.application_status.in_([s.value for s in rule.sources]),
    )
    if body.expected_version is not None:
        stmt = stmt.where(Customer.version == body.expected_version)
    result = await session.execute(stmt.values(**values).execution_options(synchronize_session=False))

    if result.rowcount == 0:
        await _raise_for_missed_update(session, customer_id, rule, body.expected_version)

    customer = (
        await session.execute(
            select(Customer).where(Customer.id == customer_id).execution_options(populate_existing=True)
        )
    ).scalar_one()

    if rule.is_decision:
        await record_final_decision(
            session,
            customer,
            target.value,
            body.decision_reason,
            user,
            committee_member=body.committee_member,
        )

    logger.info(
        "Application %s moved to %s by %s (%s) via %s",
        customer.application_reference_number,
        target.value,
        user.id,
        user.role,
        action,
    )
    return customer


async def _raise_for_missed_update(
    session: AsyncSession, customer_id: str, rule: TransitionRule, expected_version: Optional[int]
) -> None:
    result = await session.execute(
        select(Customer.application_status, Customer.version).where(Customer.id == customer_id)
    )
    row = result.one_or_none()
    if row is None:
        raise NotFound("Application not found")
    status, version = row
    if expected_version is not None and version != expected_version:
        logger.warning("Stale update on %s: version %s, caller saw %s", customer_id, version, expected_version)
        raise TransitionConflict(
            f"Application was modified by someone else (version {version}, expected {expected_version})"
        )
    if status in {s.value for s in TERMINAL_STATUSES}:
        raise TransitionConflict(f"Application is already {status}")
    allowed = ", ".join(s.value for s in rule.sources)
    logger.warning("Refused %s on %s: status is %s", rule.action, customer_id, status)
    raise TransitionConflict(f"Application already taken or not in {allowed} (current status {status})")


async def override_status(
    session: AsyncSession, customer_id: str, status: str, user: SessionUser, reason: Optional[str] = None
) -> Customer:
    """Administrative correction outside the rule table."""
    authorize(user, frozenset(), "override application status")
    target = parse_status(status)
    if target is None:
        raise ValidationFailed(f"Invalid status: {status}")
    customer = await session.get(Customer, customer_id)
    if customer is None:
        raise NotFound("Application not found")
    previous = customer.application_status
    customer.application_status = target.value
    customer.version = customer.version + 1
    if reason:
        customer.decision_reason = reason
    await session.flush()
    await session.refresh(customer)
    logger.warning(
        "Status of %s overridden %s -> %s by %s", customer.application_reference_number, previous, target.value, user.id
    )
    return customer


def get_queue(name: str) -> Queue:
    queue = QUEUES.get(name)
    if queue is None:
        raise NotFound(f"Unknown queue: {name}")
    return queue


async def list_queue(session: AsyncSession, name: str, user: SessionUser) -> list[Customer]:
    queue = get_queue(name)
    authorize(user, queue.roles, f"read the {name} queue")
    stmt = select(Customer).where(Customer.application_status.in_([s.value for s in queue.statuses]))
    if queue.assigned_column and user.role != UserRole.ADMIN.value:
        stmt = stmt.where(getattr(Customer, queue.assigned_column) == user.id)
    result = await session.execute(stmt.order_by(Customer.updated_at.desc()))
    return list(result.scalars().all())


async def list_by_status(session: AsyncSession, status: str) -> list[Customer]:
    target = parse_status(status)
    if target is None:
        raise ValidationFailed("Invalid status")
    result = await session.execute(
        select(Customer).where(Customer.application_status == target.value).order_by(Customer.created_at.desc())
    )
    return list(result.scalars().all())
