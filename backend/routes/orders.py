# backend/routes/orders.py
from typing import List

from fastapi import APIRouter, Depends

from database import Store, get_store
from models.users import User
from schemas.order import OrderCreatePayload, OrderCreated, OrderResponse, OrderStatusPatch
from services.orders import OrderService
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_service(store: Store = Depends(get_store)) -> OrderService:
    return OrderService(store)


# Checkout: persist the submitted lines as one order and empty the cart
@router.post("", response_model=OrderCreated, status_code=201)
def create_order(
    payload: OrderCreatePayload,
    svc: OrderService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    order_id = svc.create(
        user_id=current_user.id,
        total_amount=payload.total_amount,
        items=[item.model_dump() for item in payload.items],
        phone_number=payload.phone_number,
        notes=payload.notes,
    )
    return {"success": True, "order_id": order_id}


# Orders of the caller, oldest first
@router.get("/mine", response_model=List[OrderResponse])
def list_my_orders(
    svc: OrderService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    return svc.my_orders(current_user.id)


# Every order in the shop (Admin only)
@router.get("", response_model=List[OrderResponse])
def list_all_orders(
    svc: OrderService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    return svc.all(current_user)


# Manually update order status (Admin only)
@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    payload: OrderStatusPatch,
    svc: OrderService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    return svc.update_status(current_user, order_id, payload.status)
