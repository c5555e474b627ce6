# backend/models/users.py
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base


def utcnow():
    return datetime.now(timezone.utc)


# Represents an account resolved from the external identity provider
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    open_id = Column(String(64), unique=True, nullable=False, index=True) # External identity
    name = Column(String, nullable=True)
    email = Column(String(320), nullable=True)
    login_method = Column(String(64), nullable=True)
    role = Column(String(16), nullable=False, default="user") # "user" or "admin"

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    last_signed_in = Column(DateTime(timezone=True), default=utcnow)
