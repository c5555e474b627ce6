# backend/routes/auth.py
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from config import Settings
from models.users import User
from schemas.common import MutationResult
from schemas.user import UserResponse
from utils.tokenJWT import get_optional_user, get_settings

router = APIRouter(prefix="/auth", tags=["Auth"])


def _cookie_options(request: Request) -> dict:
    # Cross-site cookies are only accepted over https
    secure = request.url.scheme == "https" or request.headers.get("x-forwarded-proto") == "https"
    return {"path": "/", "httponly": True, "secure": secure, "samesite": "none" if secure else "lax"}


# Current session user, or null for anonymous callers
@router.get("/me", response_model=Optional[UserResponse])
def me(current_user: Optional[User] = Depends(get_optional_user)):
    return current_user


# Drop the session cookie
@router.post("/logout", response_model=MutationResult)
def logout(request: Request, response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(settings.SESSION_COOKIE_NAME, **_cookie_options(request))
    return {"success": True}
