# backend/services/cart.py
import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError

from database import Store
from models.cart import CartItem
from models.product import Product
from services.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class CartService:
    """
    Cart use cases, always scoped to the calling user.

    get is the only query; add, remove and clear are commands. A user holds at
    most one row per product: adding a product that is already in the cart
    bumps the quantity of the existing row.
    """

    def __init__(self, store: Store):
        self.store = store

    # query
    def get(self, user_id: int) -> Dict[str, Any]:
        if not self.store.available:
            return {"items": [], "total": 0}

        with self.store.session() as db:
            rows = (
                db.query(
                    CartItem.id,
                    CartItem.product_id,
                    CartItem.quantity,
                    Product.name.label("product_name"),
                    Product.price.label("product_price"),
                    Product.image_url.label("product_image"),
                )
                .outerjoin(Product, CartItem.product_id == Product.id)
                .filter(CartItem.user_id == user_id)
                .order_by(CartItem.id)
                .all()
            )

        items = [dict(r._mapping) for r in rows]
        # Current catalog prices, not the price at add time
        total = sum(i["product_price"] * i["quantity"] for i in items if i["product_price"] is not None)
        return {"items": items, "total": total}

    # commands
    def add(self, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
        if quantity < 1:
            raise InvalidInputError("Quantity must be at least 1")

        try:
            return self._merge_or_insert(user_id, product_id, quantity)
        except IntegrityError:
            # A parallel add inserted the same (user, product) row first; merge into it
            logger.info("Cart row for user %s product %s appeared concurrently, merging", user_id, product_id)
            return self._merge_or_insert(user_id, product_id, quantity)

    def _merge_or_insert(self, user_id: int, product_id: int, quantity: int) -> CartItem:
        with self.store.transaction() as db:
            if db.get(Product, product_id) is None:
                raise NotFoundError("Product not found")

            item = (
                db.query(CartItem)
                .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
                .first()
            )

            if item:
                logger.info(
                    "Product %s already in cart of user %s, quantity %s -> %s",
                    product_id, user_id, item.quantity, item.quantity + quantity,
                )
                item.quantity += quantity
            else:
                item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
                db.add(item)
            db.flush()
        return item

    def remove(self, user_id: int, cart_item_id: int) -> int:
        # The owner filter is part of the delete predicate: foreign rows are untouched
        with self.store.transaction() as db:
            deleted = (
                db.query(CartItem)
                .filter(CartItem.id == cart_item_id, CartItem.user_id == user_id)
                .delete(synchronize_session=False)
            )
        return deleted

    def clear(self, user_id: int) -> int:
        with self.store.transaction() as db:
            deleted = (
                db.query(CartItem)
                .filter(CartItem.user_id == user_id)
                .delete(synchronize_session=False)
            )
        logger.info("Cleared %s cart rows for user %s", deleted, user_id)
        return deleted

