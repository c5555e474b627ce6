# backend/routes/cart.py
from fastapi import APIRouter, Depends

from database import Store, get_store
from models.users import User
from schemas.cart import CartAddItem, CartOut
from schemas.common import MutationResult
from services.cart import CartService
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/cart", tags=["Cart"])


def get_service(store: Store = Depends(get_store)) -> CartService:
    return CartService(store)


@router.get("", response_model=CartOut)
def get_cart(
    svc: CartService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    return svc.get(current_user.id)


@router.post("/add", response_model=MutationResult)
def add_to_cart(
    payload: CartAddItem,
    svc: CartService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    svc.add(current_user.id, payload.product_id, payload.quantity)
    return {"success": True}


@router.delete("/items/{item_id}", response_model=MutationResult)
def delete_cart_item(
    item_id: int,
    svc: CartService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    svc.remove(current_user.id, item_id)
    return {"success": True}


@router.delete("", response_model=MutationResult)
def clear_cart(
    svc: CartService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    svc.clear(current_user.id)
    return {"success": True}
