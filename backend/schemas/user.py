from typing import Optional
from datetime import datetime

from schemas.common import ORMBase


# Output schema for the session user
class UserResponse(ORMBase):
    id: int
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    last_signed_in: Optional[datetime] = None
