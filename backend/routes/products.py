# backend/routes/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from database import Store, get_store
from models.users import User
import schemas.product as product_schemas
from schemas.common import CreatedResult, MutationResult
from services.catalog import ProductService
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/products", tags=["Products"])


def get_service(store: Store = Depends(get_store)) -> ProductService:
    return ProductService(store)


# =========================
# PUBLIC CATALOG
# =========================
@router.get("", response_model=List[product_schemas.ProductOut])
def list_products(svc: ProductService = Depends(get_service)):
    return svc.list_active()


@router.get("/category/{category_id}", response_model=List[product_schemas.ProductOut])
def list_products_by_category(category_id: int, svc: ProductService = Depends(get_service)):
    return svc.get_by_category(category_id)


@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: int, svc: ProductService = Depends(get_service)):
    product = svc.get_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# =========================
# ADMIN
# =========================
@router.post("", response_model=CreatedResult, status_code=201)
def add_product(
    payload: product_schemas.ProductCreate,
    svc: ProductService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    product = svc.create(current_user, payload.model_dump())
    return {"success": True, "id": product.id}


@router.patch("/{product_id}", response_model=MutationResult)
def edit_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    svc: ProductService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    svc.update(current_user, product_id, payload.model_dump(exclude_unset=True, exclude_none=True))
    return {"success": True}


@router.delete("/{product_id}", response_model=MutationResult)
def delete_product(
    product_id: int,
    svc: ProductService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    svc.delete(current_user, product_id)
    return {"success": True}
