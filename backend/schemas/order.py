from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from models.order import OrderStatus
from schemas.common import ORMBase, MutationResult


# Input schema for a line item snapshot submitted at checkout
class OrderItemIn(BaseModel):
    product_id: int = Field(gt=0)
    product_name: str = Field(min_length=1, max_length=200)
    price: int = Field(ge=0)
    quantity: int = Field(ge=1)


# Input schema for creating a new order
class OrderCreatePayload(BaseModel):
    total_amount: int = Field(ge=0)
    phone_number: Optional[str] = Field(default=None, max_length=32)
    notes: Optional[str] = None
    items: List[OrderItemIn] = Field(min_length=1)


# Output schema for an individual order line item
class OrderItemOut(ORMBase):
    id: int
    product_id: Optional[int] = None
    product_name: str
    price: int
    quantity: int


# Output schema representing the full order details
class OrderResponse(ORMBase):
    id: int
    user_id: int
    total_amount: int
    phone_number: Optional[str] = None
    notes: Optional[str] = None
    status: OrderStatus
    created_at: datetime
    items: List[OrderItemOut] = []


class OrderCreated(MutationResult):
    order_id: int


# Schema for updating order status
class OrderStatusPatch(BaseModel):
    status: OrderStatus
