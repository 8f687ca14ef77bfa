import pytest

from ecommerce.services.institutions import (
    get_all_institutions,
    get_institution_by_code,
    get_institution_by_id,
)

API = "/api/v1"

ORDER_BODY = {
    "full_name": "Jane Roe",
    "phone_number": "600123123",
    "address": "1 Main Street",
    "institution": "Institution 12 (formerly 99)",
    "delivery_to": "John Roe",
    "description": "Two boxes",
}


@pytest.fixture
def create_courier_order(client):
    """Factory that submits a courier order, optionally authenticated."""
    def _create(headers=None, **fields):
        response = client.post(f"{API}/courier/orders", json={**ORDER_BODY, **fields}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


class TestInstitutions:
    """Tests for the institution catalog."""

    def test_lookup_helpers(self):
        """Test lookup by id and by code."""
        first = get_all_institutions()[0]

        assert get_institution_by_id(first["id"]) == first
        assert get_institution_by_code(first["code"]) == first
        assert get_institution_by_id(999) is None
        assert get_institution_by_code("NOPE") is None

    def test_endpoint(self, client):
        """Test the dropdown list exposes id, name and code."""
        body = client.get(f"{API}/courier/institutions").json()

        assert body["count"] == len(get_all_institutions())
        assert set(body["data"][0]) == {"id", "name", "code"}


class TestCourierOrderCreate:
    """Tests for POST /courier/orders."""

    def test_anonymous_order(self, client):
        """Test that anyone can submit an order."""
        response = client.post(f"{API}/courier/orders", json=ORDER_BODY)

        assert response.status_code == 201
        body = response.json()
        assert body["order_id"] == body["data"]["courier_order_id"]
        assert body["data"]["status"] == "PENDING"
        assert body["data"]["user_id"] is None

    def test_authenticated_order_is_linked(self, client, user_headers, create_courier_order):
        """Test that a logged-in user owns the order."""
        order = create_courier_order(headers=user_headers)

        assert order["user"]["email"] == "user@example.com"

    @pytest.mark.parametrize("field", ["full_name", "phone_number", "address", "institution", "delivery_to"])
    def test_blank_required_field(self, client, field):
        """Test that every required field rejects blank values."""
        response = client.post(f"{API}/courier/orders", json={**ORDER_BODY, field: "   "})

        assert response.status_code == 422

    def test_fields_are_trimmed(self, create_courier_order):
        order = create_courier_order(full_name="  Jane Roe  ")

        assert order["full_name"] == "Jane Roe"


class TestCourierOrderRead:
    """Tests for reading courier orders."""

    def test_my_orders(self, client, user_headers, other_user_headers, create_courier_order):
        """Test that users only see their own orders."""
        create_courier_order(headers=user_headers)
        create_courier_order(headers=user_headers, delivery_to="Second")
        create_courier_order(headers=other_user_headers)
        create_courier_order()

        body = client.get(f"{API}/courier/orders/my", headers=user_headers).json()

        assert body["total"] == 2
        assert body["stats"] is None

    def test_my_orders_requires_authentication(self, client):
        assert client.get(f"{API}/courier/orders/my").status_code == 401

    def test_owner_and_admin_can_read(self, client, user_headers, other_user_headers, admin_headers, create_courier_order):
        """Test the visibility of a single order."""
        order = create_courier_order(headers=user_headers)
        url = f"{API}/courier/orders/{order['courier_order_id']}"

        assert client.get(url, headers=user_headers).status_code == 200
        assert client.get(url, headers=admin_headers).status_code == 200
        assert client.get(url, headers=other_user_headers).status_code == 404

    def test_admin_list_with_stats(self, client, admin_headers, create_courier_order):
        """Test the admin listing, its stats and the status filter."""
        first = create_courier_order()
        create_courier_order(full_name="Bob Smith")
        create_courier_order(institution="Institution 57")
        client.patch(
            f"{API}/courier/orders/{first['courier_order_id']}/status",
            json={"status": "DELIVERED"},
            headers=admin_headers,
        )

        everything = client.get(f"{API}/courier/orders", headers=admin_headers).json()
        delivered = client.get(f"{API}/courier/orders", params={"status": "DELIVERED"}, headers=admin_headers).json()
        search = client.get(f"{API}/courier/orders", params={"search": "bob"}, headers=admin_headers).json()

        assert everything["total"] == 3
        assert everything["stats"] == {"total": 3, "pending": 2, "processing": 0, "delivered": 1, "cancelled": 0}
        assert delivered["total"] == 1
        # El reparto por estado no depende del filtro de estado
        assert delivered["stats"]["pending"] == 2
        assert [o["full_name"] for o in search["data"]] == ["Bob Smith"]

    def test_admin_list_requires_admin(self, client, user_headers):
        assert client.get(f"{API}/courier/orders", headers=user_headers).status_code == 403

    def test_admin_list_invalid_status(self, client, admin_headers):
        response = client.get(f"{API}/courier/orders", params={"status": "LOST"}, headers=admin_headers)

        assert response.status_code == 422


class TestCourierOrderAdmin:
    """Tests for status changes and deletion."""

    def test_update_status(self, client, admin_headers, create_courier_order):
        order = create_courier_order()

        response = client.patch(
            f"{API}/courier/orders/{order['courier_order_id']}/status",
            json={"status": "PROCESSING"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "PROCESSING"

    def test_update_invalid_status(self, client, admin_headers, create_courier_order):
        """Test that only known statuses are accepted."""
        order = create_courier_order()

        response = client.patch(
            f"{API}/courier/orders/{order['courier_order_id']}/status",
            json={"status": "SHIPPED"},
            headers=admin_headers,
        )

        assert response.status_code == 422

    def test_update_not_found(self, client, admin_headers):
        response = client.patch(f"{API}/courier/orders/999/status", json={"status": "PENDING"}, headers=admin_headers)

        assert response.status_code == 404

    def test_delete(self, client, admin_headers, create_courier_order):
        order = create_courier_order()
        url = f"{API}/courier/orders/{order['courier_order_id']}"

        assert client.delete(url, headers=admin_headers).status_code == 200
        assert client.get(url, headers=admin_headers).status_code == 404
        assert client.delete(url, headers=admin_headers).status_code == 404
