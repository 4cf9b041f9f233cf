"""
Session lookup against the external auth provider.

Each request forwards its cookies / Authorization header to
``settings.session_url`` and receives ``{"user": {id, role, email, name}}``.
Nothing is cached between requests. Set AUTH_DISABLED=true to run without the
provider (local development), acting as a dev user with DEV_USER_ROLE.
"""
import logging
from typing import Annotated

import httpx
from fastapi import Depends, HTTPException, Request, status

from config import settings
from schemas.auth import SessionPayload, SessionUser, UserRole

logger = logging.getLogger(__name__)

_FORWARDED_HEADERS = ("cookie", "authorization")


async def fetch_session(request: Request) -> SessionPayload:
    headers = {k: v for k, v in request.headers.items() if k.lower() in _FORWARDED_HEADERS}
    try:
        async with httpx.AsyncClient(timeout=settings.session_timeout_seconds) as client:
            response = await client.get(settings.session_url, headers=headers)
    except httpx.HTTPError as exc:
        logger.error("Session provider unreachable at %s: %s", settings.session_url, exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service unavailable",
        ) from exc
    if response.status_code == status.HTTP_401_UNAUTHORIZED or response.status_code == status.HTTP_403_FORBIDDEN:
        return SessionPayload()
    if response.status_code >= 400:
        logger.error("Session provider returned %s", response.status_code)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service unavailable",
        )
    return SessionPayload.model_validate(response.json() or {})


async def get_current_user(request: Request) -> SessionUser:
    """FastAPI dependency: resolve the caller's session for this request."""
    if settings.auth_disabled:
        return SessionUser(id="dev-user", role=settings.dev_user_role, email="dev@localhost", name="Dev User")

    payload = await fetch_session(request)
    if payload.user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized. Please log in.")
    if payload.user.role == UserRole.BANNED.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is banned")
    return payload.user


CurrentUser = Annotated[SessionUser, Depends(get_current_user)]


def require_roles(*allowed_roles: UserRole):
    """Dependency factory: restrict a route to specific roles (admins always pass).

    Usage:
        @router.post("/customer", dependencies=[Depends(require_roles(UserRole.RELATIONSHIP_MANAGER))])
    """
    allowed = {r.value for r in allowed_roles} | {UserRole.ADMIN.value}

    async def _check(user: CurrentUser) -> SessionUser:
        if user.role not in allowed:
            logger.warning("User %s with role %s denied; requires %s", user.id, user.role, sorted(allowed))
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return _check
