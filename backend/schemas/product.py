# backend/schemas/product.py
from pydantic import Field
from typing import Optional
from datetime import datetime

from schemas.common import ORMBase


# Schema for creating a new product; price is in minor currency units
class ProductCreate(ORMBase):
    category_id: int = Field(gt=0)
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: int = Field(ge=0)
    image_url: Optional[str] = None
    stock: int = Field(default=0, ge=0)


# Schema for partial product updates
class ProductUpdate(ORMBase):
    """Schema for PATCH requests - all fields optional."""
    category_id: Optional[int] = Field(None, gt=0)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


# Full product representation including ID
class ProductOut(ORMBase):
    id: int
    category_id: int
    name: str
    description: Optional[str] = None
    price: int
    image_url: Optional[str] = None
    stock: int
    is_active: bool
    created_at: Optional[datetime] = None
