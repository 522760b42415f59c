"""Tests for the HTTP API."""

import pytest

from models.log import Log
from models.product import Product


@pytest.fixture
def alice(make_user):
    return make_user("alice@shop.io")


@pytest.fixture
def admin(make_user):
    return make_user("admin@shop.io", role="admin")


class TestAuth:
    def test_register_login_and_role(self, client):
        response = client.post("/register", json={"email": "New@Shop.io", "password": "secret123"})
        assert response.status_code == 201
        assert response.json()["role"] == "user"
        assert response.json()["email"] == "new@shop.io"

        response = client.post("/login", json={"email": "new@shop.io", "password": "secret123"})
        assert response.status_code == 200
        token = response.json()["access_token"]

        response = client.get("/me/role", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["is_admin"] is False

    def test_duplicate_registration(self, client, alice):
        response = client.post("/register", json={"email": "alice@shop.io", "password": "secret123"})
        assert response.status_code == 400

    def test_password_longer_than_bcrypt_limit(self, client):
        response = client.post("/register", json={"email": "long@shop.io", "password": "x" * 80})
        assert response.status_code == 422

        # 37 two-byte characters: within max_length but over 72 bytes
        response = client.post("/register", json={"email": "long@shop.io", "password": "é" * 37})
        assert response.status_code == 422

        response = client.post("/register", json={"email": "long@shop.io", "password": "x" * 72})
        assert response.status_code == 201

    def test_long_password_login_is_rejected_cleanly(self, client, alice):
        response = client.post("/login", json={"email": "alice@shop.io", "password": "x" * 80})
        assert response.status_code == 401

    def test_wrong_password(self, client, alice):
        response = client.post("/login", json={"email": "alice@shop.io", "password": "nope"})
        assert response.status_code == 401

    def test_missing_token(self, client):
        assert client.get("/cart").status_code == 401
        assert client.post("/orders").status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/cart", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestShop:
    def test_catalog_is_public(self, client, make_product):
        make_product(name="Converse Chuck Taylor", price="59.99")
        make_product(name="Nike Air Max 270", price="129.99", brand="Nike")
        make_product(name="Hidden", price="10.00", is_active=False)

        response = client.get("/shop/products")
        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Nike Air Max 270", "Converse Chuck Taylor"]

        response = client.get("/shop/products", params={"price_range": "under-100"})
        assert [p["price"] for p in response.json()] == [59.99]

    def test_invalid_price_range(self, client):
        assert client.get("/shop/products", params={"price_range": "cheap"}).status_code == 422

    def test_inactive_product_detail_is_404(self, client, make_product):
        product = make_product(is_active=False)
        assert client.get(f"/shop/products/{product.id}").status_code == 404


class TestCart:
    def test_add_twice_then_update_and_remove(self, client, alice, make_product, auth_headers):
        headers = auth_headers(alice)
        product = make_product(price="59.99", stock=5)

        client.post("/cart/add", json={"product_id": product.id, "size": "8"}, headers=headers)
        response = client.post("/cart/add", json={"product_id": product.id, "size": "8"}, headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert len(body["items"]) == 1
        assert body["items"][0]["qty"] == 2
        assert body["total"] == 119.98

        line_id = body["items"][0]["id"]
        response = client.put(f"/cart/items/{line_id}", json={"qty": 0}, headers=headers)
        assert response.status_code == 400
        assert client.get("/cart", headers=headers).json()["items"][0]["qty"] == 2

        response = client.put(f"/cart/items/{line_id}", json={"qty": 6}, headers=headers)
        assert response.status_code == 409

        response = client.delete(f"/cart/items/{line_id}", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0.0}

    def test_other_owners_line(self, client, alice, make_user, make_product, auth_headers):
        bob = make_user("bob@shop.io")
        product = make_product()
        body = client.post("/cart/add", json={"product_id": product.id, "size": "8"},
                           headers=auth_headers(alice)).json()

        response = client.delete(f"/cart/items/{body['items'][0]['id']}", headers=auth_headers(bob))
        assert response.status_code == 404

    def test_clear(self, client, alice, make_product, auth_headers):
        headers = auth_headers(alice)
        product = make_product()
        client.post("/cart/add", json={"product_id": product.id, "size": "8"}, headers=headers)

        assert client.delete("/cart", headers=headers).json()["items"] == []
        assert client.get("/cart", headers=headers).json()["items"] == []

    def test_failures_are_audited(self, client, db, alice, make_product, auth_headers):
        product = make_product(stock=1)
        client.post("/cart/add", json={"product_id": product.id, "size": "8", "qty": 2},
                    headers=auth_headers(alice))

        entry = db.query(Log).filter(Log.action == "CART_ADD").one()
        assert entry.status == "FAIL"
        assert entry.user_id == alice.id


class TestCheckout:
    def test_place_order_and_history(self, client, db, alice, make_product, auth_headers):
        headers = auth_headers(alice)
        cheap = make_product(name="Converse", price="59.99", stock=5)
        pricey = make_product(name="Nike", price="129.99", stock=5, brand="Nike")
        client.post("/cart/add", json={"product_id": cheap.id, "size": "8"}, headers=headers)
        client.post("/cart/add", json={"product_id": pricey.id, "size": "9", "qty": 2}, headers=headers)

        response = client.post("/orders", json={
            "shipping_address": {"street": "1 Main St", "zip": "00-001", "city": "Warsaw"},
        }, headers=headers)
        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "pending"
        assert order["total_amount"] == 319.97
        assert order["shipping_address"]["city"] == "Warsaw"
        assert sorted((i["product_name"], i["qty"]) for i in order["items"]) == [("Converse", 1), ("Nike", 2)]

        assert client.get("/cart", headers=headers).json()["items"] == []
        db.expire_all()
        assert db.get(Product, pricey.id).stock_quantity == 3

        history = client.get("/orders", headers=headers).json()
        assert [o["id"] for o in history] == [order["id"]]
        assert client.get(f"/orders/{order['id']}", headers=headers).status_code == 200

    def test_empty_cart(self, client, alice, auth_headers):
        response = client.post("/orders", headers=auth_headers(alice))
        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_stock_exhausted_leaves_cart(self, client, db, alice, make_product, auth_headers):
        headers = auth_headers(alice)
        product = make_product(stock=2)
        client.post("/cart/add", json={"product_id": product.id, "size": "8", "qty": 2}, headers=headers)
        db.get(Product, product.id).stock_quantity = 1
        db.commit()

        response = client.post("/orders", headers=headers)

        assert response.status_code == 409
        assert len(client.get("/cart", headers=headers).json()["items"]) == 1
        assert client.get("/orders", headers=headers).json() == []

    def test_order_of_another_user(self, client, alice, make_user, make_product, auth_headers):
        product = make_product()
        client.post("/cart/add", json={"product_id": product.id, "size": "8"}, headers=auth_headers(alice))
        order_id = client.post("/orders", headers=auth_headers(alice)).json()["id"]

        bob = make_user("bob@shop.io")
        assert client.get(f"/orders/{order_id}", headers=auth_headers(bob)).status_code == 404


class TestAdminSurface:
    def test_regular_user_is_forbidden(self, client, alice, auth_headers):
        headers = auth_headers(alice)
        assert client.get("/admin/products", headers=headers).status_code == 403
        assert client.post("/admin/products", json={"name": "x", "price": 1}, headers=headers).status_code == 403
        assert client.get("/admin/stats/summary", headers=headers).status_code == 403
        assert client.get("/logs", headers=headers).status_code == 403

    def test_role_comes_from_database_not_token(self, client, alice):
        from utils.tokenJWT import create_access_token

        token = create_access_token({"sub": alice.email, "role": "admin"})
        response = client.get("/admin/products", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403

    def test_manage_catalog(self, client, admin, auth_headers):
        headers = auth_headers(admin)
        response = client.post("/admin/products", json={
            "name": "Puma RS-X", "price": 99.99, "brand": "Puma", "sizes": ["8", "9"], "stock_quantity": 25,
        }, headers=headers)
        assert response.status_code == 201
        product_id = response.json()["id"]

        response = client.patch(f"/admin/products/{product_id}", json={"price": 89.99}, headers=headers)
        assert response.json()["price"] == 89.99

        response = client.post(f"/admin/products/{product_id}/toggle-active", headers=headers)
        assert response.json()["is_active"] is False
        assert client.get("/shop/products").json() == []

        response = client.post(f"/admin/products/{product_id}/toggle-active", json={"is_active": True},
                               headers=headers)
        assert response.json()["is_active"] is True

    def test_order_status_and_stats(self, client, admin, alice, make_product, auth_headers):
        product = make_product(stock=3)
        client.post("/cart/add", json={"product_id": product.id, "size": "8"}, headers=auth_headers(alice))
        order_id = client.post("/orders", headers=auth_headers(alice)).json()["id"]
        headers = auth_headers(admin)

        response = client.patch(f"/admin/orders/{order_id}/status", json={"status": "delivered"}, headers=headers)
        assert response.json()["status"] == "delivered"
        response = client.patch(f"/admin/orders/{order_id}/status", json={"status": "pending"}, headers=headers)
        assert response.status_code == 400
        response = client.patch(f"/admin/orders/{order_id}/status", json={"status": "lost"}, headers=headers)
        assert response.status_code == 422

        summary = client.get("/admin/stats/summary", headers=headers).json()
        assert summary == {"total_products": 1, "total_users": 2, "total_orders": 1, "low_stock_products": 1}
        assert len(client.get("/admin/stats/daily", headers=headers).json()["data"]) == 30

        assert [o["id"] for o in client.get("/admin/orders", headers=headers).json()] == [order_id]
        assert client.get(f"/orders/{order_id}", headers=headers).status_code == 200

    def test_role_assignment_and_logs(self, client, admin, alice, auth_headers):
        headers = auth_headers(admin)
        response = client.put(f"/admin/users/{alice.id}/role", json={"role": "admin"}, headers=headers)
        assert response.status_code == 200
        assert client.get("/me/role", headers=auth_headers(alice)).json()["is_admin"] is True

        response = client.put(f"/admin/users/{admin.id}/role", json={"role": "user"}, headers=headers)
        assert response.status_code == 400

        logs = client.get("/logs", params={"action": "ROLE_CHANGE"}, headers=headers).json()
        assert logs["total"] == 1
        assert logs["items"][0]["meta"] == {"target_user_id": alice.id, "role": "admin"}
