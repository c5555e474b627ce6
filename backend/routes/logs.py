# backend/routes/logs.py
from fastapi import APIRouter, Depends, Query
from typing import List, Optional, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from database import Store, get_store
from models.log import Log
from models.users import User
from utils.policy import Capability, authorize
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/logs", tags=["Logs"])

# --- SCHEMAS ---
class LogResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    action: str
    resource: str
    status: str
    ts: datetime
    meta: Optional[Any] = None

    model_config = ConfigDict(from_attributes=True)

class LogPage(BaseModel):
    items: List[LogResponse]
    total: int
    page: int
    page_size: int

# --- ENDPOINT ---
@router.get("", response_model=LogPage)
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Filter by action"),
    user_id: Optional[int] = Query(None, description="Filter by user ID"),
    resource: Optional[str] = Query(None, description="Filter by resource"),
    status: Optional[str] = Query(None, description="Filter by status (SUCCESS/FAIL)"),
    store: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    authorize(current_user, Capability.ADMIN)

    if not store.available:
        return {"items": [], "total": 0, "page": page, "page_size": page_size}

    with store.session() as db:
        query = db.query(Log)

        if action:
            query = query.filter(Log.action.ilike(f"%{action}%"))
        if user_id is not None:
            query = query.filter(Log.user_id == user_id)
        if resource:
            query = query.filter(Log.resource.ilike(f"%{resource}%"))
        if status:
            query = query.filter(Log.status == status)

        # Newest first
        query = query.order_by(Log.ts.desc(), Log.id.desc())

        total = query.count()
        logs = query.offset((page - 1) * page_size).limit(page_size).all()

    return {
        "items": logs,
        "total": total,
        "page": page,
        "page_size": page_size,
    }
