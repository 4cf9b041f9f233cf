from enum import Enum
from typing import Optional

from pydantic import BaseModel


class UserRole(str, Enum):
    RELATIONSHIP_MANAGER = "RELATIONSHIP_MANAGER"
    CREDIT_ANALYST = "CREDIT_ANALYST"
    SUPERVISOR = "SUPERVISOR"
    COMMITTE_MEMBER = "COMMITTE_MEMBER"
    APPROVAL_COMMITTE = "APPROVAL_COMMITTE"
    ADMIN = "ADMIN"
    BANNED = "BANNED"


class SessionUser(BaseModel):
    """The ``user`` object returned by the session provider."""

    id: str
    role: str
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    # The provider stores "<avatar>-<phone>" here for committee accounts
    image: Optional[str] = None

    model_config = {"extra": "ignore"}

    @property
    def responsible_phone(self) -> Optional[str]:
        if self.phone:
            return self.phone
        if self.image and "-" in self.image:
            return self.image.split("-")[1] or None
        return None


class SessionPayload(BaseModel):
    user: Optional[SessionUser] = None

    model_config = {"extra": "ignore"}
