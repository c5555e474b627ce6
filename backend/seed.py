# backend/seed.py
"""Fill an empty catalog with the default categories and products."""
import logging

from config import Settings, settings as default_settings
from database import Store
from models.category import Category
from models.product import Product
from services.users import UserService
from utils.tokenJWT import create_session_token

logger = logging.getLogger(__name__)

CATEGORIES = [
    {"name": "Cars", "slug": "cars", "description": "Assorted cars", "icon": "🚗", "display_order": 1},
    {"name": "Packages", "slug": "packages", "description": "Featured bundles", "icon": "📦", "display_order": 2},
    {"name": "Priority", "slug": "priority", "description": "Priority services", "icon": "⭐", "display_order": 3},
    {"name": "Workshops", "slug": "workshops", "description": "Workshops", "icon": "🔧", "display_order": 4},
    {"name": "Restaurants", "slug": "restaurants", "description": "Restaurants and cafes", "icon": "🍔", "display_order": 5},
    {"name": "Characters", "slug": "characters", "description": "Featured characters", "icon": "👤", "display_order": 6},
]

# category is referenced by slug, prices in minor units
PRODUCTS = [
    {"category": "cars", "name": "Sports car", "description": "A fast sports car", "price": 50000, "stock": 10},
    {"category": "cars", "name": "Luxury car", "description": "A comfortable luxury car", "price": 80000, "stock": 5},
    {"category": "packages", "name": "Starter pack", "description": "Everything a beginner needs", "price": 10000, "stock": 50},
    {"category": "packages", "name": "Pro pack", "description": "Advanced bundle for veterans", "price": 25000, "stock": 30},
    {"category": "priority", "name": "VIP priority", "description": "VIP priority service", "price": 15000, "stock": 20},
    {"category": "workshops", "name": "Mechanics workshop", "description": "Fully equipped workshop", "price": 35000, "stock": 8},
]


def seed_catalog(store: Store) -> bool:
    """Returns False when the catalog already has categories."""
    with store.transaction() as db:
        # not forcing: only seed if empty
        if db.query(Category).first():
            return False

        by_slug = {}
        for data in CATEGORIES:
            category = Category(**data)
            db.add(category)
            by_slug[category.slug] = category
        db.flush()

        for data in PRODUCTS:
            data = dict(data)
            category = by_slug[data.pop("category")]
            db.add(Product(category_id=category.id, **data))
    return True


def main(settings: Settings = default_settings) -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    store = Store(settings.DATABASE_URL)
    if not store.available:
        logger.error("DATABASE_URL is not set, nothing to seed")
        return

    try:
        store.create_all()
        if seed_catalog(store):
            logger.info("Seeded %s categories and %s products", len(CATEGORIES), len(PRODUCTS))
        else:
            logger.info("Catalog already populated, skipping")

        if settings.OWNER_OPEN_ID:
            owner = UserService(store, settings.OWNER_OPEN_ID).upsert_user(
                settings.OWNER_OPEN_ID, name="Owner", login_method="seed"
            )
            print(f"Owner session token (user {owner.id}): {create_session_token(owner.open_id, settings)}")
    finally:
        store.dispose()


if __name__ == "__main__":
    main()
