import pytest
from sqlalchemy.exc import IntegrityError

from models.cart import CartItem
from models.log import Log
from models.order import Order, OrderItem
from services.errors import InvalidInputError, StoreUnavailableError
from services.orders import OrderService


def _line(product, quantity=1, price=None):
    return {
        "product_id": product.id,
        "product_name": product.name,
        "price": product.price if price is None else price,
        "quantity": quantity,
    }


def test_checkout_creates_order_with_items(client, alice_headers, catalog, users, count_rows):
    payload = {
        "total_amount": 200,
        "phone_number": "+48 600 100 200",
        "items": [{"product_id": catalog.sports_car.id, "product_name": "A", "price": 100, "quantity": 2}],
    }
    res = client.post("/orders", json=payload, headers=alice_headers)
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True

    assert count_rows(Order) == 1
    assert count_rows(OrderItem, OrderItem.order_id == body["order_id"]) == 1

    orders = client.get("/orders/mine", headers=alice_headers).json()
    assert len(orders) == 1
    order = orders[0]
    assert order["id"] == body["order_id"]
    assert order["user_id"] == users.alice.id
    assert order["status"] == "pending"
    assert order["total_amount"] == 200
    assert order["phone_number"] == "+48 600 100 200"
    assert order["items"] == [{
        "id": order["items"][0]["id"],
        "product_id": catalog.sports_car.id,
        "product_name": "A",
        "price": 100,
        "quantity": 2,
    }]


def test_checkout_empties_the_cart(client, alice_headers, bob_headers, catalog, users, count_rows):
    client.post("/cart/add", json={"product_id": catalog.sports_car.id, "quantity": 2}, headers=alice_headers)
    client.post("/cart/add", json={"product_id": catalog.sports_car.id}, headers=bob_headers)

    res = client.post("/orders", json={"total_amount": 200, "items": [_line(catalog.sports_car, 2)]},
                      headers=alice_headers)
    assert res.status_code == 201

    assert count_rows(CartItem, CartItem.user_id == users.alice.id) == 0
    assert count_rows(CartItem, CartItem.user_id == users.bob.id) == 1


def test_total_must_match_lines(client, alice_headers, catalog, count_rows):
    res = client.post("/orders", json={"total_amount": 150, "items": [_line(catalog.sports_car, 2)]},
                      headers=alice_headers)
    assert res.status_code == 400
    assert count_rows(Order) == 0


def test_empty_order_is_rejected(client, alice_headers, count_rows):
    res = client.post("/orders", json={"total_amount": 0, "items": []}, headers=alice_headers)
    assert res.status_code == 422
    assert count_rows(Order) == 0


def test_anonymous_checkout(client, catalog):
    res = client.post("/orders", json={"total_amount": 100, "items": [_line(catalog.sports_car)]})
    assert res.status_code == 401


def test_failed_item_insert_rolls_back_everything(client, alice_headers, catalog, users, count_rows):
    client.post("/cart/add", json={"product_id": catalog.sports_car.id}, headers=alice_headers)

    payload = {
        "total_amount": 150,
        "items": [
            _line(catalog.sports_car),
            {"product_id": 999, "product_name": "Ghost", "price": 50, "quantity": 1},
        ],
    }
    res = client.post("/orders", json=payload, headers=alice_headers)
    assert res.status_code == 400

    assert count_rows(Order) == 0
    assert count_rows(OrderItem) == 0
    assert count_rows(Log, Log.action == "ORDER_CREATE") == 0
    # the cart survives a failed checkout
    assert count_rows(CartItem, CartItem.user_id == users.alice.id) == 1


def test_my_orders_are_oldest_first_and_private(client, alice_headers, bob_headers, catalog):
    first = client.post("/orders", json={"total_amount": 100, "items": [_line(catalog.sports_car)]},
                        headers=alice_headers).json()["order_id"]
    client.post("/orders", json={"total_amount": 250, "items": [_line(catalog.luxury_car)]},
                headers=bob_headers)
    second = client.post("/orders", json={"total_amount": 250, "items": [_line(catalog.luxury_car)]},
                         headers=alice_headers).json()["order_id"]

    mine = client.get("/orders/mine", headers=alice_headers).json()
    assert [o["id"] for o in mine] == [first, second]


def test_only_admin_lists_all_orders(client, admin_headers, alice_headers, bob_headers, catalog):
    client.post("/orders", json={"total_amount": 100, "items": [_line(catalog.sports_car)]}, headers=alice_headers)
    client.post("/orders", json={"total_amount": 100, "items": [_line(catalog.sports_car)]}, headers=bob_headers)

    assert client.get("/orders", headers=alice_headers).status_code == 403
    res = client.get("/orders", headers=admin_headers)
    assert res.status_code == 200
    assert len(res.json()) == 2


@pytest.fixture
def order_id(client, alice_headers, catalog):
    res = client.post("/orders", json={"total_amount": 100, "items": [_line(catalog.sports_car)]},
                      headers=alice_headers)
    return res.json()["order_id"]


def test_admin_moves_order_through_statuses(client, admin_headers, order_id, count_rows):
    res = client.patch(f"/orders/{order_id}/status", json={"status": "processing"}, headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["status"] == "processing"

    res = client.patch(f"/orders/{order_id}/status", json={"status": "completed"}, headers=admin_headers)
    assert res.json()["status"] == "completed"
    assert count_rows(Log, Log.action == "ORDER_STATUS_CHANGE") == 2


def test_terminal_status_is_final(client, admin_headers, order_id):
    client.patch(f"/orders/{order_id}/status", json={"status": "cancelled"}, headers=admin_headers)
    res = client.patch(f"/orders/{order_id}/status", json={"status": "pending"}, headers=admin_headers)
    assert res.status_code == 400


def test_status_update_checks(client, admin_headers, alice_headers, order_id):
    assert client.patch(f"/orders/{order_id}/status", json={"status": "completed"},
                        headers=alice_headers).status_code == 403
    assert client.patch(f"/orders/{order_id}/status", json={"status": "shipped"},
                        headers=admin_headers).status_code == 422
    assert client.patch("/orders/999/status", json={"status": "completed"},
                        headers=admin_headers).status_code == 404


def test_checkout_is_audited(client, alice_headers, users, order_id, store):
    with store.session() as db:
        entry = db.query(Log).filter(Log.action == "ORDER_CREATE").one()
    assert entry.user_id == users.alice.id
    assert entry.meta["order_id"] == order_id
    assert entry.meta["total"] == 100


def test_lost_order_table_reports_unavailable(client, alice_headers, catalog, store, users, count_rows):
    OrderItem.__table__.drop(store.engine)

    with pytest.raises(StoreUnavailableError):
        OrderService(store).create(users.alice.id, 100, [_line(catalog.sports_car)])

    res = client.post("/orders", json={"total_amount": 100, "items": [_line(catalog.sports_car)]},
                      headers=alice_headers)
    assert res.status_code == 503
    assert count_rows(Order) == 0


def test_unknown_product_keeps_integrity_error_as_cause(store, users):
    with pytest.raises(InvalidInputError) as exc:
        OrderService(store).create(users.alice.id, 10, [
            {"product_id": 999, "product_name": "Ghost", "price": 10, "quantity": 1},
        ])
    assert isinstance(exc.value.__cause__, IntegrityError)
