"""Integration tests for /users endpoints via TestClient."""

import jwt
import pytest


@pytest.fixture()
def headers(user, auth_headers):
    return auth_headers(user)


NEW_ADDRESS = {
    "full_name": "Ravi Kumar",
    "phone": "9123456780",
    "address_line1": "44 Park Street",
    "city": "Kolkata",
    "state": "West Bengal",
    "pincode": "700016",
}


class TestAuthentication:
    def test_no_token_is_401(self, client):
        response = client.get("/users/profile")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Not authorized, no token",
            "error": "Not authorized, no token",
        }

    def test_garbage_token_is_401(self, client):
        response = client.get("/users/profile", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, token failed"

    def test_forged_token_is_401(self, client, user):
        forged = jwt.encode({"sub": str(user.id), "exp": 4102444800}, "wrong-secret", algorithm="HS256")
        response = client.get("/users/profile", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == 401

    def test_token_for_unknown_user_is_401(self, client):
        from storefront.account.security import issue_token

        headers = {"Authorization": f"Bearer {issue_token('no-such-user')}"}

        response = client.get("/users/profile", headers=headers)
        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, user not found"


class TestProfile:
    def test_get_profile(self, client, user, headers):
        response = client.get("/users/profile", headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["username"] == user.username
        assert len(data["addresses"]) == 1

    def test_update_profile(self, client, headers):
        response = client.put("/users/profile", headers=headers, json={"username": "asha_r"})

        assert response.status_code == 200
        assert response.json()["message"] == "Profile updated successfully"
        assert response.json()["data"]["username"] == "asha_r"

    def test_invalid_contact_rejected(self, client, headers):
        response = client.put("/users/profile", headers=headers, json={"contact": "123"})
        assert response.status_code == 400


class TestAddresses:
    def test_list_addresses(self, client, headers):
        response = client.get("/users/addresses", headers=headers)

        assert response.status_code == 200
        assert response.json()["data"][0]["is_default"] is True

    def test_add_address_returns_full_list(self, client, headers):
        response = client.post("/users/addresses", headers=headers, json=NEW_ADDRESS)

        assert response.status_code == 201
        addresses = response.json()["data"]
        assert len(addresses) == 2
        assert sum(1 for a in addresses if a["is_default"]) == 1

    def test_set_default(self, client, headers):
        added = client.post("/users/addresses", headers=headers, json=NEW_ADDRESS).json()["data"]
        new_id = next(a["id"] for a in added if a["city"] == "Kolkata")

        response = client.put(f"/users/addresses/{new_id}/set-default", headers=headers)

        defaults = [a["id"] for a in response.json()["data"] if a["is_default"]]
        assert defaults == [new_id]

    def test_update_address(self, client, user, headers):
        address_id = str(user.addresses[0].id)
        response = client.put(f"/users/addresses/{address_id}", headers=headers, json={"city": "Chennai"})

        assert response.status_code == 200
        assert response.json()["data"][0]["city"] == "Chennai"

    def test_delete_address(self, client, user, headers):
        response = client.delete(f"/users/addresses/{user.addresses[0].id}", headers=headers)

        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_unknown_address_is_404(self, client, headers):
        response = client.delete("/users/addresses/missing", headers=headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Address not found"
