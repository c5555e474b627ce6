# backend/services/users.py
import logging
from typing import Optional

from database import Store
from models.users import User, utcnow
from services.errors import InvalidInputError

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: Store, owner_open_id: str = ""):
        self.store = store
        self.owner_open_id = owner_open_id

    def get_by_open_id(self, open_id: str) -> Optional[User]:
        if not self.store.available:
            return None
        with self.store.session() as db:
            return db.query(User).filter(User.open_id == open_id).first()

    def upsert_user(
        self,
        open_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        login_method: Optional[str] = None,
        role: Optional[str] = None,
    ) -> User:
        """
        Insert or refresh a user keyed by its external identity.

        Only the fields that are passed are written. The owner identity is
        always stored as admin unless a role is given explicitly.
        """
        if not open_id:
            raise InvalidInputError("User open_id is required for upsert")

        if role is None and self.owner_open_id and open_id == self.owner_open_id:
            role = "admin"

        with self.store.transaction() as db:
            user = db.query(User).filter(User.open_id == open_id).first()
            if user is None:
                user = User(open_id=open_id, role=role or "user")
                db.add(user)
                logger.info("Creating user %s", open_id)
            elif role is not None:
                user.role = role

            if name is not None:
                user.name = name
            if email is not None:
                user.email = email
            if login_method is not None:
                user.login_method = login_method
            user.last_signed_in = utcnow()

            db.flush()
            db.refresh(user)
            return user
