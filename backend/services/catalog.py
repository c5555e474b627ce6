# backend/services/catalog.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from database import Store
from models.category import Category
from models.product import Product
from models.users import User
from services.errors import ConflictError, NotFoundError
from utils.audit import write_log
from utils.policy import Capability, authorize

logger = logging.getLogger(__name__)


def _apply_patch(row, changes: Dict[str, Any]) -> List[str]:
    # Partial update: only the supplied keys are written
    for key, value in changes.items():
        setattr(row, key, value)
    return sorted(changes)


class CategoryService:
    """
    Storefront categories.

    Reads are public and degrade to empty results when the store is not
    configured. Mutations need the admin capability.
    """

    def __init__(self, store: Store):
        self.store = store

    # query
    def list_active(self) -> List[Category]:
        if not self.store.available:
            return []
        with self.store.session() as db:
            return (
                db.query(Category)
                .filter(Category.is_active.is_(True))
                .order_by(Category.display_order, Category.id)
                .all()
            )

    def get_by_slug(self, slug: str) -> Optional[Category]:
        if not self.store.available:
            return None
        with self.store.session() as db:
            return db.query(Category).filter(Category.slug == slug).first()

    # commands
    def create(self, actor: Optional[User], data: Dict[str, Any]) -> Category:
        authorize(actor, Capability.ADMIN)
        try:
            with self.store.transaction() as db:
                category = Category(**data)
                db.add(category)
                db.flush()
                write_log(db, user_id=actor.id, action="CATEGORY_CREATE", resource="categories",
                          meta={"id": category.id, "slug": category.slug})
        except IntegrityError:
            raise ConflictError("Category slug already exists")

        logger.info("Category %s created by user %s", category.id, actor.id)
        return category

    def update(self, actor: Optional[User], category_id: int, changes: Dict[str, Any]) -> Category:
        authorize(actor, Capability.ADMIN)
        try:
            with self.store.transaction() as db:
                category = db.get(Category, category_id)
                if not category:
                    raise NotFoundError("Category not found")
                fields = _apply_patch(category, changes)
                db.flush()
                write_log(db, user_id=actor.id, action="CATEGORY_UPDATE", resource="categories",
                          meta={"id": category_id, "fields": fields})
        except IntegrityError:
            raise ConflictError("Category slug already exists")
        return category

    def delete(self, actor: Optional[User], category_id: int) -> None:
        authorize(actor, Capability.ADMIN)
        with self.store.transaction() as db:
            category = db.get(Category, category_id)
            if not category:
                raise NotFoundError("Category not found")
            # Products go with it through ON DELETE CASCADE
            db.delete(category)
            write_log(db, user_id=actor.id, action="CATEGORY_DELETE", resource="categories",
                      meta={"id": category_id, "slug": category.slug})
        logger.info("Category %s deleted by user %s", category_id, actor.id)


class ProductService:
    def __init__(self, store: Store):
        self.store = store

    # query
    def list_active(self) -> List[Product]:
        if not self.store.available:
            return []
        with self.store.session() as db:
            return db.query(Product).filter(Product.is_active.is_(True)).order_by(Product.id).all()

    def get_by_category(self, category_id: int) -> List[Product]:
        if not self.store.available:
            return []
        with self.store.session() as db:
            return db.query(Product).filter(Product.category_id == category_id).order_by(Product.id).all()

    def get_by_id(self, product_id: int) -> Optional[Product]:
        if not self.store.available:
            return None
        with self.store.session() as db:
            return db.get(Product, product_id)

    # commands
    def _ensure_category(self, db, category_id: int) -> None:
        if db.get(Category, category_id) is None:
            raise NotFoundError("Category not found")

    def create(self, actor: Optional[User], data: Dict[str, Any]) -> Product:
        authorize(actor, Capability.ADMIN)
        with self.store.transaction() as db:
            self._ensure_category(db, data["category_id"])
            product = Product(**data)
            db.add(product)
            db.flush()
            write_log(db, user_id=actor.id, action="PRODUCT_CREATE", resource="products",
                      meta={"id": product.id, "category_id": product.category_id})

        logger.info("Product %s created by user %s", product.id, actor.id)
        return product

    def update(self, actor: Optional[User], product_id: int, changes: Dict[str, Any]) -> Product:
        authorize(actor, Capability.ADMIN)
        with self.store.transaction() as db:
            product = db.get(Product, product_id)
            if not product:
                raise NotFoundError("Product not found")
            if "category_id" in changes:
                self._ensure_category(db, changes["category_id"])
            fields = _apply_patch(product, changes)
            db.flush()
            write_log(db, user_id=actor.id, action="PRODUCT_UPDATE", resource="products",
                      meta={"id": product_id, "fields": fields})
        return product

    def delete(self, actor: Optional[User], product_id: int) -> None:
        authorize(actor, Capability.ADMIN)
        with self.store.transaction() as db:
            product = db.get(Product, product_id)
            if not product:
                raise NotFoundError("Product not found")
            db.delete(product)
            write_log(db, user_id=actor.id, action="PRODUCT_DELETE", resource="products",
                      meta={"id": product_id, "name": product.name})
        logger.info("Product %s deleted by user %s", product_id, actor.id)
