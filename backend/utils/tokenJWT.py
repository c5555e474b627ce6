# utils/tokenJWT.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from config import Settings
from database import Store, get_store
from models.users import User
from services.errors import StoreUnavailableError, UnauthorizedError
from services.users import UserService

logger = logging.getLogger(__name__)

# Bearer header is optional; browsers send the session cookie instead
bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# Generate a new JWT session token for an external identity
def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_session_token(open_id: str, settings: Settings, name: Optional[str] = None) -> str:
    return create_access_token({"sub": open_id, "name": name or ""}, settings)


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials], settings: Settings) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


# Resolve the session user, or None for anonymous callers and bad tokens
def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Optional[User]:
    token = _extract_token(request, credentials, settings)
    if not token:
        return None

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("Rejected session token: %s", e)
        return None

    open_id = payload.get("sub")
    # Ensure the identity is present in the token payload
    if not open_id:
        return None
    # A valid session cannot be resolved without the store
    if not store.available:
        raise StoreUnavailableError("Database not available")

    return UserService(store).get_by_open_id(open_id)


# Require an authenticated caller
def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise UnauthorizedError("Not authenticated")
    return user
