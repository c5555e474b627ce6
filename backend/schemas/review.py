from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from schemas.common import ORMBase


class ReviewCreate(BaseModel):
    product_id: int = Field(gt=0)
    rating: int = Field(ge=1, le=5)
    title: Optional[str] = Field(default=None, max_length=200)
    comment: Optional[str] = None
    is_verified_purchase: bool = False


class ReviewOut(ORMBase):
    id: int
    product_id: int
    user_id: int
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    is_verified_purchase: bool
    created_at: datetime


class AverageRating(BaseModel):
    average: float
    count: int
