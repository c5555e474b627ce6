# backend/routes/reviews.py
from typing import List

from fastapi import APIRouter, Depends

from database import Store, get_store
from models.users import User
from schemas.common import CreatedResult, MutationResult
from schemas.review import AverageRating, ReviewCreate, ReviewOut
from services.reviews import ReviewService
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_service(store: Store = Depends(get_store)) -> ReviewService:
    return ReviewService(store)


# Reviews of a product, newest first
@router.get("/product/{product_id}", response_model=List[ReviewOut])
def get_product_reviews(product_id: int, svc: ReviewService = Depends(get_service)):
    return svc.get_by_product(product_id)


@router.get("/product/{product_id}/average", response_model=AverageRating)
def get_product_average_rating(product_id: int, svc: ReviewService = Depends(get_service)):
    return svc.get_average_rating(product_id)


@router.post("", response_model=CreatedResult, status_code=201)
def create_review(
    payload: ReviewCreate,
    svc: ReviewService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    review = svc.create(user_id=current_user.id, **payload.model_dump())
    return {"success": True, "id": review.id}


# Only the author can delete a review
@router.delete("/{review_id}", response_model=MutationResult)
def delete_review(
    review_id: int,
    svc: ReviewService = Depends(get_service),
    current_user: User = Depends(get_current_user),
):
    svc.delete(current_user, review_id)
    return {"success": True}
