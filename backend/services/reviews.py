# backend/services/reviews.py
import logging
from typing import Dict, List, Optional, Union

from sqlalchemy import func

from database import Store
from models.product import Product
from models.review import Review
from models.users import User
from services.errors import InvalidInputError, NotFoundError
from utils.policy import Capability, authorize

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, store: Store):
        self.store = store

    def get_by_product(self, product_id: int) -> List[Review]:
        if not self.store.available:
            return []
        with self.store.session() as db:
            return (
                db.query(Review)
                .filter(Review.product_id == product_id)
                .order_by(Review.created_at.desc(), Review.id.desc())
                .all()
            )

    def get_average_rating(self, product_id: int) -> Dict[str, Union[float, int]]:
        """Mean rating and review count; 0/0 when there is nothing to average."""
        if not self.store.available:
            return {"average": 0.0, "count": 0}

        with self.store.session() as db:
            average, count = (
                db.query(func.avg(Review.rating), func.count(Review.id))
                .filter(Review.product_id == product_id)
                .one()
            )

        return {
            "average": float(average) if average is not None else 0.0,
            "count": int(count or 0),
        }

    def create(
        self,
        user_id: int,
        product_id: int,
        rating: int,
        title: Optional[str] = None,
        comment: Optional[str] = None,
        is_verified_purchase: bool = False,
    ) -> Review:
        if not 1 <= rating <= 5:
            raise InvalidInputError("Rating must be between 1 and 5")

        with self.store.transaction() as db:
            if db.get(Product, product_id) is None:
                raise NotFoundError("Product not found")

            review = Review(
                product_id=product_id,
                user_id=user_id,
                rating=rating,
                title=title,
                comment=comment,
                is_verified_purchase=is_verified_purchase,
            )
            db.add(review)
            db.flush()

        logger.info("Review %s (rating %s) added to product %s by user %s", review.id, rating, product_id, user_id)
        return review

    def delete(self, actor: Optional[User], review_id: int) -> None:
        with self.store.transaction() as db:
            review = db.get(Review, review_id)
            if not review:
                raise NotFoundError("Review not found")
            # Only the author may remove a review, admins included
            authorize(actor, Capability.OWNER, owner_id=review.user_id)
            db.delete(review)
        logger.info("Review %s deleted by user %s", review_id, actor.id)
