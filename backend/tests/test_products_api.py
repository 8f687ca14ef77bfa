API = "/api/v1"


class TestProductRead:
    """Tests for listing and reading products."""

    def test_list_sorted_by_price(self, client, create_product):
        """Test ascending and descending price order."""
        create_product("Drill", 120)
        create_product("Hammer", 20)
        create_product("Saw", 45)

        asc = client.get(f"{API}/products/", params={"sort_by": "price", "sort_order": "asc"}).json()
        desc = client.get(f"{API}/products/", params={"sort_by": "price", "sort_order": "desc"}).json()

        assert [p["name"] for p in asc["data"]] == ["Hammer", "Saw", "Drill"]
        assert [p["name"] for p in desc["data"]] == ["Drill", "Saw", "Hammer"]
        assert asc["total"] == 3

    def test_sorted_by_name(self, client, create_product):
        """Test alphabetical ordering."""
        create_product("Saw", 45)
        create_product("Drill", 120)

        body = client.get(f"{API}/products/", params={"sort_by": "name", "sort_order": "asc"}).json()

        assert [p["name"] for p in body["data"]] == ["Drill", "Saw"]

    def test_invalid_sort_field(self, client):
        """Test that only whitelisted sort fields are accepted."""
        assert client.get(f"{API}/products/", params={"sort_by": "stock"}).status_code == 422

    def test_search(self, client, create_product):
        """Test case-insensitive search in name and description."""
        create_product("Drill", 120, description="Cordless 18V")
        create_product("Hammer", 20)

        by_name = client.get(f"{API}/products/", params={"search": "hamm"}).json()
        by_description = client.get(f"{API}/products/", params={"search": "CORDLESS"}).json()

        assert [p["name"] for p in by_name["data"]] == ["Hammer"]
        assert [p["name"] for p in by_description["data"]] == ["Drill"]

    def test_category_filter(self, client, create_category, create_product):
        """Test that category_id filters to exactly that category."""
        tools = create_category("Tools")
        hammers = create_category("Hammers", parent_id=tools["category_id"])
        create_product("Toolbox", 50, category_id=tools["category_id"])
        create_product("Hammer", 20, category_id=hammers["category_id"])

        body = client.get(f"{API}/products/", params={"category_id": tools["category_id"]}).json()

        assert [p["name"] for p in body["data"]] == ["Toolbox"]
        assert body["data"][0]["category"]["slug"] == "tools"

    def test_pagination(self, client, create_product):
        """Test page metadata."""
        for i in range(3):
            create_product(f"Product {i}", 10 + i)

        body = client.get(
            f"{API}/products/", params={"page": 2, "limit": 2, "sort_by": "price", "sort_order": "asc"}
        ).json()

        assert body["count"] == 1
        assert body["pagination"] == {"page": 2, "limit": 2, "total_pages": 2}
        assert body["data"][0]["name"] == "Product 2"

    def test_detail(self, client, create_product):
        """Test reading a product by id with its owner."""
        product = create_product("Drill", 120, stock=4)

        body = client.get(f"{API}/products/{product['product_id']}").json()

        assert body["name"] == "Drill"
        assert body["stock"] == 4
        assert body["user"]["email"] == "admin@example.com"

    def test_detail_not_found(self, client):
        """Test 404 for an unknown product."""
        assert client.get(f"{API}/products/999").status_code == 404


class TestProductWrite:
    """Tests for creating, updating and deleting products."""

    def test_create_as_user(self, client, user_headers):
        """Test that any authenticated user can create and owns the product."""
        response = client.post(
            f"{API}/products/", json={"name": "Ladder", "price": 80, "stock": 2}, headers=user_headers
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user"]["email"] == "user@example.com"
        assert data["category"] is None

    def test_create_requires_authentication(self, client):
        """Test that anonymous creation is rejected."""
        assert client.post(f"{API}/products/", json={"name": "Ladder", "price": 80}).status_code == 401

    def test_create_validation(self, client, user_headers):
        """Test non-positive price and negative stock."""
        bad_bodies = [
            {"name": "Ladder", "price": 0},
            {"name": "Ladder", "price": 10, "stock": -1},
            {"name": "  ", "price": 10},
        ]
        for body in bad_bodies:
            assert client.post(f"{API}/products/", json=body, headers=user_headers).status_code == 422

    def test_create_with_unknown_category(self, client, user_headers):
        """Test that the referenced category must exist."""
        response = client.post(
            f"{API}/products/", json={"name": "Ladder", "price": 80, "category_id": 999}, headers=user_headers
        )

        assert response.status_code == 400

    def test_owner_can_update(self, client, user_headers):
        """Test a partial update by the owner."""
        created = client.post(
            f"{API}/products/", json={"name": "Ladder", "price": 80, "stock": 2}, headers=user_headers
        ).json()["data"]

        response = client.put(
            f"{API}/products/{created['product_id']}", json={"price": 75.5}, headers=user_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["price"] == 75.5
        assert data["stock"] == 2
        assert data["name"] == "Ladder"

    def test_other_user_cannot_update(self, client, user_headers, other_user_headers):
        """Test that a non-owner gets 403."""
        created = client.post(
            f"{API}/products/", json={"name": "Ladder", "price": 80}, headers=user_headers
        ).json()["data"]

        response = client.put(
            f"{API}/products/{created['product_id']}", json={"price": 1}, headers=other_user_headers
        )

        assert response.status_code == 403

    def test_admin_can_update_any_product(self, client, user_headers, admin_headers):
        """Test that an admin can update a product owned by someone else."""
        created = client.post(
            f"{API}/products/", json={"name": "Ladder", "price": 80}, headers=user_headers
        ).json()["data"]

        response = client.put(
            f"{API}/products/{created['product_id']}", json={"name": "Step ladder"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Step ladder"

    def test_update_not_found(self, client, user_headers):
        assert client.put(f"{API}/products/999", json={"price": 1}, headers=user_headers).status_code == 404

    def test_owner_cannot_delete(self, client, user_headers):
        """Test that deletion is reserved to admins, even for the owner."""
        created = client.post(
            f"{API}/products/", json={"name": "Ladder", "price": 80}, headers=user_headers
        ).json()["data"]

        response = client.delete(f"{API}/products/{created['product_id']}", headers=user_headers)

        assert response.status_code == 403

    def test_admin_deletes(self, client, admin_headers, create_product):
        """Test that an admin can delete a product."""
        product = create_product("Drill", 120)

        response = client.delete(f"{API}/products/{product['product_id']}", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"{API}/products/{product['product_id']}").status_code == 404

    def test_delete_not_found(self, client, admin_headers):
        assert client.delete(f"{API}/products/999", headers=admin_headers).status_code == 404
