import re
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Optional


class Role(str, Enum):
    """Access level of a club member."""
    USER = "User"
    ADMIN = "Admin"
    SUPER_ADMIN = "Super Admin"

    @property
    def is_admin(self) -> bool:
        return self in (Role.ADMIN, Role.SUPER_ADMIN)

    @property
    def is_super_admin(self) -> bool:
        return self is Role.SUPER_ADMIN


_ROLE_BY_KEY = {
    "user": Role.USER,
    "admin": Role.ADMIN,
    "super_admin": Role.SUPER_ADMIN,
}


def normalize_role_key(raw: Optional[str]) -> str:
    """'Super Admin' -> 'super_admin'."""
    return re.sub(r"\s+", "_", (raw or "").strip().lower())


def parse_role(raw: Optional[str]) -> Role:
    """Parse a stored role string. Unknown or empty values are plain users."""
    if isinstance(raw, Role):
        return raw
    return _ROLE_BY_KEY.get(normalize_role_key(raw), Role.USER)


class Identity(BaseModel):
    """The authenticated caller: who they are and what they may do."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role.is_admin

    @property
    def is_super_admin(self) -> bool:
        return self.role.is_super_admin
