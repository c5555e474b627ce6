from typing import Optional
from sqlalchemy.orm import Session
from models.log import Log

# Stages the entry on the caller's session; it commits (or rolls back) with the surrounding transaction
def write_log(db: Session, *, user_id: Optional[int], action: str, resource: str, status="SUCCESS", meta=None):
    entry = Log(user_id=user_id, action=action, resource=resource, status=status, meta=meta or {})
    db.add(entry)
    return entry
