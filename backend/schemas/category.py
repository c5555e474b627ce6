# backend/schemas/category.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.common import ORMBase

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreate(ORMBase):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)
    display_order: int = 0


# Schema for PATCH requests - all fields optional
class CategoryUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=50)
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryOut(ORMBase):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    display_order: int
    is_active: bool
    created_at: Optional[datetime] = None
