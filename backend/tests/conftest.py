from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func

from config import Settings
from database import Store
from main import create_app
from models.category import Category
from models.product import Product
from services.users import UserService
from utils.tokenJWT import create_session_token

OWNER_OPEN_ID = "owner-open-id"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret",
        OWNER_OPEN_ID=OWNER_OPEN_ID,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def store(settings):
    store = Store(settings.DATABASE_URL)
    store.create_all()
    yield store
    store.dispose()


@pytest.fixture
def client(settings, store):
    with TestClient(create_app(settings, store)) as c:
        yield c


@pytest.fixture
def users(store):
    svc = UserService(store, owner_open_id=OWNER_OPEN_ID)
    return SimpleNamespace(
        admin=svc.upsert_user(OWNER_OPEN_ID, name="Admin User", login_method="oauth"),
        alice=svc.upsert_user("alice-open-id", name="Alice", email="alice@example.com"),
        bob=svc.upsert_user("bob-open-id", name="Bob"),
    )


def _headers(user, settings):
    return {"Authorization": f"Bearer {create_session_token(user.open_id, settings)}"}


@pytest.fixture
def admin_headers(users, settings):
    return _headers(users.admin, settings)


@pytest.fixture
def alice_headers(users, settings):
    return _headers(users.alice, settings)


@pytest.fixture
def bob_headers(users, settings):
    return _headers(users.bob, settings)


@pytest.fixture
def catalog(store):
    with store.transaction() as db:
        cars = Category(name="Cars", slug="cars", icon="🚗", display_order=2)
        packages = Category(name="Packages", slug="packages", icon="📦", display_order=1)
        hidden = Category(name="Hidden", slug="hidden", display_order=0, is_active=False)
        db.add_all([cars, packages, hidden])
        db.flush()

        sports_car = Product(category_id=cars.id, name="Sports car", price=100, stock=10)
        luxury_car = Product(category_id=cars.id, name="Luxury car", price=250, stock=5)
        starter_pack = Product(category_id=packages.id, name="Starter pack", price=40, stock=50, is_active=False)
        db.add_all([sports_car, luxury_car, starter_pack])
        db.flush()

    return SimpleNamespace(
        cars=cars, packages=packages, hidden=hidden,
        sports_car=sports_car, luxury_car=luxury_car, starter_pack=starter_pack,
    )


@pytest.fixture
def count_rows(store):
    def _count(model, *criteria):
        with store.session() as db:
            return db.query(func.count(model.id)).filter(*criteria).scalar()
    return _count
