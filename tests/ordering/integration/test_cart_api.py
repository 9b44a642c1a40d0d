"""Integration tests for the cart endpoints."""

CUSTOMER = {"X-User-Id": "user-001"}
OTHER_CUSTOMER = {"X-User-Id": "user-002"}


class TestCartApi:
    def test_cart_requires_a_user(self, client):
        response = client.get("/cart")
        assert response.status_code == 401

    def test_empty_cart(self, client):
        response = client.get("/cart", headers=CUSTOMER)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["items"] == []
        assert body["data"]["total"] == 0.0

    def test_add_item(self, client, product):
        product_id = product(price=100000.0)

        response = client.post(
            "/cart/items",
            json={"product_id": product_id, "quantity": 2, "size": "M", "color": "Black"},
            headers=CUSTOMER,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Item added to cart successfully"
        item = body["data"]["items"][0]
        assert item["quantity"] == 2
        assert item["size"] == "M"
        assert body["data"]["subtotal"] == 200000.0
        assert body["data"]["shipping"] == 30000.0
        assert body["data"]["total"] == 230000.0

    def test_add_unknown_product(self, client):
        response = client.post("/cart/items", json={"product_id": "nope", "quantity": 1}, headers=CUSTOMER)

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "product_not_found"

    def test_add_more_than_stock(self, client, product):
        product_id = product(stock=1)
        response = client.post("/cart/items", json={"product_id": product_id, "quantity": 2}, headers=CUSTOMER)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "insufficient_stock"

    def test_add_zero_quantity(self, client, product):
        product_id = product()
        response = client.post("/cart/items", json={"product_id": product_id, "quantity": 0}, headers=CUSTOMER)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_quantity"

    def test_update_and_remove(self, client, product):
        product_id = product()
        added = client.post("/cart/items", json={"product_id": product_id, "quantity": 1}, headers=CUSTOMER).json()
        line_id = added["data"]["items"][0]["id"]

        updated = client.put(f"/cart/items/{line_id}", json={"quantity": 3}, headers=CUSTOMER)
        assert updated.status_code == 200
        assert updated.json()["data"]["items"][0]["quantity"] == 3

        removed = client.delete(f"/cart/items/{line_id}", headers=CUSTOMER)
        assert removed.status_code == 200
        assert removed.json()["data"]["items"] == []

    def test_update_unknown_line(self, client):
        response = client.put("/cart/items/nope", json={"quantity": 3}, headers=CUSTOMER)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "cart_item_not_found"

    def test_clear(self, client, product):
        product_id = product()
        client.post("/cart/items", json={"product_id": product_id, "quantity": 1}, headers=CUSTOMER)

        response = client.delete("/cart", headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["data"]["total_items"] == 0

    def test_carts_are_per_user(self, client, product):
        product_id = product()
        client.post("/cart/items", json={"product_id": product_id, "quantity": 1}, headers=CUSTOMER)

        response = client.get("/cart", headers=OTHER_CUSTOMER)

        assert response.json()["data"]["items"] == []
