# backend/routes/categories.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from database import Store, get_store
from models.users import User
from schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from schemas.common import CreatedResult, MutationResult
from services.catalog import CategoryService
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/categories", tags=["Categories"])


def get_service(store: Store = Depends(get_store)) -> CategoryService:
    return CategoryService(store)


@router.get("", response_model=List[CategoryOut])
def list_categories(svc: CategoryService = Depends(get_service)):
    return svc.list_active()


@router.get("/slug/{slug}", response_model=CategoryOut)
def get_category_by_slug(slug: str, svc: CategoryService = Depends(get_service)):
    category = svc.get_by_slug(slug)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.post("", response_model=CreatedResult, status_code=201)
def create_category(
    payload: CategoryCreate,
    svc: CategoryService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    category = svc.create(current_user, payload.model_dump())
    return {"success": True, "id": category.id}


@router.patch("/{category_id}", response_model=MutationResult)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    svc: CategoryService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    svc.update(current_user, category_id, payload.model_dump(exclude_unset=True, exclude_none=True))
    return {"success": True}


# Removes the category together with all of its products
@router.delete("/{category_id}", response_model=MutationResult)
def delete_category(
    category_id: int,
    svc: CategoryService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    svc.delete(current_user, category_id)
    return {"success": True}
