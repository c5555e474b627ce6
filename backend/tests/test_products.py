from models.cart import CartItem
from models.order import OrderItem
from models.product import Product


def test_list_hides_inactive_products(client, catalog):
    res = client.get("/products")
    assert res.status_code == 200
    assert [p["name"] for p in res.json()] == ["Sports car", "Luxury car"]


def test_get_by_category_includes_inactive(client, catalog):
    res = client.get(f"/products/category/{catalog.packages.id}")
    assert [p["name"] for p in res.json()] == ["Starter pack"]


def test_get_by_id(client, catalog):
    res = client.get(f"/products/{catalog.luxury_car.id}")
    assert res.status_code == 200
    assert res.json()["price"] == 250
    assert client.get("/products/999").status_code == 404


def test_admin_creates_product(client, admin_headers, catalog):
    payload = {"category_id": catalog.cars.id, "name": "Rally car", "price": 30000, "stock": 3}
    res = client.post("/products", json=payload, headers=admin_headers)
    assert res.status_code == 201

    product = client.get(f"/products/{res.json()['id']}").json()
    assert product["name"] == "Rally car"
    assert product["is_active"] is True


def test_create_requires_existing_category(client, admin_headers):
    payload = {"category_id": 42, "name": "Orphan", "price": 1}
    assert client.post("/products", json=payload, headers=admin_headers).status_code == 404


def test_negative_price_is_rejected(client, admin_headers, catalog):
    payload = {"category_id": catalog.cars.id, "name": "Bad", "price": -1}
    assert client.post("/products", json=payload, headers=admin_headers).status_code == 422


def test_non_admin_cannot_create_product(client, alice_headers, catalog, count_rows):
    payload = {"category_id": catalog.cars.id, "name": "Rally car", "price": 30000}
    res = client.post("/products", json=payload, headers=alice_headers)
    assert res.status_code == 403
    assert count_rows(Product) == 3


def test_update_only_touches_supplied_fields(client, admin_headers, catalog):
    res = client.patch(f"/products/{catalog.sports_car.id}", json={"stock": 0}, headers=admin_headers)
    assert res.status_code == 200

    product = client.get(f"/products/{catalog.sports_car.id}").json()
    assert product["stock"] == 0
    assert product["price"] == 100
    assert product["name"] == "Sports car"


def test_update_can_move_product_between_categories(client, admin_headers, catalog):
    client.patch(f"/products/{catalog.sports_car.id}", json={"category_id": catalog.packages.id}, headers=admin_headers)
    names = [p["name"] for p in client.get(f"/products/category/{catalog.packages.id}").json()]
    assert "Sports car" in names


def test_delete_product_keeps_order_history(client, admin_headers, alice_headers, catalog, count_rows):
    product_id = catalog.sports_car.id
    client.post("/orders", json={
        "total_amount": 100,
        "items": [{"product_id": product_id, "product_name": "Sports car", "price": 100, "quantity": 1}],
    }, headers=alice_headers)
    client.post("/cart/add", json={"product_id": product_id}, headers=alice_headers)

    res = client.delete(f"/products/{product_id}", headers=admin_headers)
    assert res.status_code == 200

    assert count_rows(Product, Product.id == product_id) == 0
    assert count_rows(CartItem, CartItem.product_id == product_id) == 0
    # the order line survives with its snapshot, detached from the catalog
    assert count_rows(OrderItem, OrderItem.product_name == "Sports car") == 1
    assert count_rows(OrderItem, OrderItem.product_id.is_(None)) == 1


def test_delete_missing_product(client, admin_headers):
    assert client.delete("/products/999", headers=admin_headers).status_code == 404
