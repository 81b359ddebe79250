from datetime import datetime
from enum import Enum
from pydantic import Field, field_validator
from typing import Optional

from .base import ClubRecord
from .role import Role, parse_role


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Profile(ClubRecord):
    """A club member's profile."""
    id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Role = Role.USER
    handicap_index: Optional[float] = Field(None, ge=-10, le=54)
    home_club: Optional[str] = None
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    created_at: Optional[datetime] = None

    @field_validator('role', mode='before')
    @classmethod
    def normalize_role(cls, v):
        return parse_role(v)

    @property
    def display_name(self) -> str:
        return self.full_name or "Unknown Player"

    @property
    def is_admin(self) -> bool:
        return self.role.is_admin

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED
