"""Caller identity supplied by the authorization boundary."""

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "admin"
    STOREKEEPER = "storekeeper"


class Actor(BaseModel):
    """Verified caller. Credentials are checked elsewhere; this is trusted as given."""

    user_id: str
    role: Role
    verified: bool = True
    disabled: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


SYSTEM_ACTOR = Actor(user_id="system", role=Role.ADMIN)
