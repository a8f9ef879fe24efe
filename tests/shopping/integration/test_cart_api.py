"""Integration tests for /cart and /favorites endpoints via TestClient."""

import pytest


@pytest.fixture()
def headers(user, auth_headers):
    return auth_headers(user)


@pytest.fixture()
def tee(make_product):
    return make_product(name="Classic Tee", price=300.0)


def _add(client, headers, product, quantity=1, size="M", color=None):
    payload = {"product_id": str(product.id), "quantity": quantity, "size": size}
    if color:
        payload["color"] = color
    return client.post("/cart/add", json=payload, headers=headers)


class TestCart:
    def test_cart_requires_login(self, client):
        assert client.get("/cart").status_code == 401

    def test_empty_cart_is_created_on_first_view(self, client, user, headers):
        response = client.get("/cart", headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user_id"] == str(user.id)
        assert data["items"] == []
        assert data["total_amount"] == 0

    def test_add_returns_cart_with_product_details(self, client, headers, tee):
        response = _add(client, headers, tee, quantity=2, color={"name": "Navy", "hex": "#000080"})

        assert response.status_code == 200
        data = response.json()["data"]
        line = data["items"][0]
        assert line["quantity"] == 2
        assert line["color_name"] == "Navy"
        assert line["product"]["name"] == "Classic Tee"
        assert data["total_items"] == 2
        assert data["total_amount"] == 600.0

    def test_add_beyond_stock_is_400(self, client, headers, tee):
        response = _add(client, headers, tee, quantity=6)

        assert response.status_code == 400
        assert response.json()["message"] == "Insufficient stock"

    def test_add_zero_quantity_is_400(self, client, headers, tee):
        assert _add(client, headers, tee, quantity=0).status_code == 400

    def test_update_and_remove_line(self, client, headers, tee):
        item_id = _add(client, headers, tee).json()["data"]["items"][0]["id"]

        response = client.put(f"/cart/item/{item_id}", json={"quantity": 3}, headers=headers)
        assert response.json()["data"]["items"][0]["quantity"] == 3

        response = client.delete(f"/cart/item/{item_id}", headers=headers)
        assert response.json()["data"]["items"] == []

    def test_update_unknown_line_is_404(self, client, headers, tee):
        _add(client, headers, tee)

        response = client.put("/cart/item/missing", json={"quantity": 3}, headers=headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Item not found in cart"

    def test_clear(self, client, headers, tee, make_product):
        _add(client, headers, tee)
        _add(client, headers, make_product(name="Polo"))

        response = client.delete("/cart/clear", headers=headers)

        assert response.status_code == 200
        assert response.json()["data"]["total_items"] == 0


class TestFavorites:
    def test_add_check_remove(self, client, headers, tee):
        response = client.post(f"/favorites/{tee.id}", headers=headers)
        assert response.status_code == 200
        assert [p["name"] for p in response.json()["data"]] == ["Classic Tee"]

        assert client.get(f"/favorites/check/{tee.id}", headers=headers).json() == {
            "success": True,
            "is_favorite": True,
        }

        response = client.delete(f"/favorites/{tee.id}", headers=headers)
        assert response.json()["data"] == []
        assert client.get(f"/favorites/check/{tee.id}", headers=headers).json()["is_favorite"] is False

    def test_duplicate_is_400(self, client, headers, tee):
        client.post(f"/favorites/{tee.id}", headers=headers)
        response = client.post(f"/favorites/{tee.id}", headers=headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Product already in favorites"

    def test_list_starts_empty(self, client, headers):
        response = client.get("/favorites", headers=headers)
        assert response.json() == {"success": True, "message": None, "data": []}

    def test_unknown_product_is_404(self, client, headers):
        assert client.post("/favorites/missing", headers=headers).status_code == 404
