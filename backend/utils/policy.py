# backend/utils/policy.py
import enum
from typing import Optional

from models.users import User
from services.errors import ForbiddenError, UnauthorizedError


class Capability(str, enum.Enum):
    ADMIN = "admin"   # role gate for catalog and order administration
    OWNER = "owner"   # caller owns the row being touched
    PUBLIC = "public" # no identity needed


def is_admin(user: Optional[User]) -> bool:
    return bool(user) and (user.role or "").lower() == "admin"


def authorize(user: Optional[User], required: Capability, owner_id: Optional[int] = None) -> Capability:
    """
    Single access decision for every procedure.

    Returns the capability that was granted, or raises UnauthorizedError when
    an identity is needed but missing and ForbiddenError when the identity is
    not enough. OWNER is strict: an admin who did not author the row is refused.
    """
    if required is Capability.PUBLIC:
        return Capability.PUBLIC

    if user is None or user.id is None:
        raise UnauthorizedError("Not authenticated")

    if required is Capability.ADMIN:
        if not is_admin(user):
            raise ForbiddenError("Admin access required")
        return Capability.ADMIN

    if required is Capability.OWNER:
        if owner_id is None or owner_id != user.id:
            raise ForbiddenError("You can only modify your own content")
        return Capability.OWNER

    raise ValueError(f"Unknown capability: {required}")
