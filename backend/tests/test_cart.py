from models.cart import CartItem
from services.cart import CartService


def test_cart_requires_a_session(client, catalog):
    assert client.get("/cart").status_code == 401
    assert client.post("/cart/add", json={"product_id": catalog.sports_car.id}).status_code == 401


def test_empty_cart(client, alice_headers):
    res = client.get("/cart", headers=alice_headers)
    assert res.status_code == 200
    assert res.json() == {"items": [], "total": 0}


def test_add_defaults_to_one_and_joins_product(client, alice_headers, catalog):
    res = client.post("/cart/add", json={"product_id": catalog.sports_car.id}, headers=alice_headers)
    assert res.status_code == 200
    assert res.json() == {"success": True}

    cart = client.get("/cart", headers=alice_headers).json()
    assert len(cart["items"]) == 1
    line = cart["items"][0]
    assert line["product_id"] == catalog.sports_car.id
    assert line["quantity"] == 1
    assert line["product_name"] == "Sports car"
    assert line["product_price"] == 100
    assert cart["total"] == 100


def test_adding_same_product_merges_quantities(client, alice_headers, catalog, count_rows):
    pid = catalog.sports_car.id
    client.post("/cart/add", json={"product_id": pid, "quantity": 2}, headers=alice_headers)
    client.post("/cart/add", json={"product_id": pid, "quantity": 3}, headers=alice_headers)

    assert count_rows(CartItem, CartItem.product_id == pid) == 1
    cart = client.get("/cart", headers=alice_headers).json()
    assert cart["items"][0]["quantity"] == 5
    assert cart["total"] == 500


def test_total_spans_lines(client, alice_headers, catalog):
    client.post("/cart/add", json={"product_id": catalog.sports_car.id, "quantity": 2}, headers=alice_headers)
    client.post("/cart/add", json={"product_id": catalog.luxury_car.id}, headers=alice_headers)
    assert client.get("/cart", headers=alice_headers).json()["total"] == 2 * 100 + 250


def test_add_unknown_product(client, alice_headers, catalog, count_rows):
    res = client.post("/cart/add", json={"product_id": 999}, headers=alice_headers)
    assert res.status_code == 404
    assert count_rows(CartItem) == 0


def test_add_rejects_zero_quantity(client, alice_headers, catalog):
    res = client.post("/cart/add", json={"product_id": catalog.sports_car.id, "quantity": 0}, headers=alice_headers)
    assert res.status_code == 422


def test_carts_are_private(client, alice_headers, bob_headers, catalog):
    client.post("/cart/add", json={"product_id": catalog.sports_car.id}, headers=alice_headers)
    assert client.get("/cart", headers=bob_headers).json()["items"] == []


def test_remove_own_item(client, alice_headers, catalog):
    client.post("/cart/add", json={"product_id": catalog.sports_car.id}, headers=alice_headers)
    client.post("/cart/add", json={"product_id": catalog.luxury_car.id}, headers=alice_headers)
    item_id = client.get("/cart", headers=alice_headers).json()["items"][0]["id"]

    res = client.delete(f"/cart/items/{item_id}", headers=alice_headers)
    assert res.status_code == 200

    items = client.get("/cart", headers=alice_headers).json()["items"]
    assert [i["product_id"] for i in items] == [catalog.luxury_car.id]


def test_removing_someone_elses_item_is_a_no_op(client, alice_headers, bob_headers, catalog, count_rows):
    client.post("/cart/add", json={"product_id": catalog.sports_car.id}, headers=alice_headers)
    item_id = client.get("/cart", headers=alice_headers).json()["items"][0]["id"]

    res = client.delete(f"/cart/items/{item_id}", headers=bob_headers)
    assert res.status_code == 200
    assert count_rows(CartItem, CartItem.id == item_id) == 1


def test_clear_only_empties_callers_cart(client, alice_headers, bob_headers, catalog, users, count_rows):
    client.post("/cart/add", json={"product_id": catalog.sports_car.id}, headers=alice_headers)
    client.post("/cart/add", json={"product_id": catalog.luxury_car.id}, headers=alice_headers)
    client.post("/cart/add", json={"product_id": catalog.sports_car.id}, headers=bob_headers)

    assert client.delete("/cart", headers=alice_headers).status_code == 200

    assert count_rows(CartItem, CartItem.user_id == users.alice.id) == 0
    assert count_rows(CartItem, CartItem.user_id == users.bob.id) == 1


def test_concurrent_insert_is_merged(monkeypatch, store, users, catalog, count_rows):
    user_id, product_id = users.alice.id, catalog.sports_car.id
    merge_or_insert = CartService._merge_or_insert
    calls = []

    def racing(self, uid, pid, quantity):
        calls.append(quantity)
        if len(calls) == 1:
            # another request inserts the row first, so this insert hits the unique constraint
            with store.transaction() as db:
                db.add(CartItem(user_id=uid, product_id=pid, quantity=2))
            with store.transaction() as db:
                db.add(CartItem(user_id=uid, product_id=pid, quantity=quantity))
        return merge_or_insert(self, uid, pid, quantity)

    monkeypatch.setattr(CartService, "_merge_or_insert", racing)

    item = CartService(store).add(user_id, product_id, 3)

    assert len(calls) == 2
    assert item.quantity == 5
    assert count_rows(CartItem, CartItem.user_id == user_id, CartItem.product_id == product_id) == 1
