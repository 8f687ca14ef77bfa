import pytest

API = "/api/v1"


@pytest.fixture
def products(create_product):
    """Drill at 100 and Hammer at 25."""
    return {
        "drill": create_product("Drill", 100),
        "hammer": create_product("Hammer", 25),
    }


@pytest.fixture
def create_package(client, admin_headers):
    """Factory that creates a package through the API and returns its JSON."""
    def _create(name, price, items, **fields):
        response = client.post(
            f"{API}/packages/",
            json={"name": name, "price": price, "items": items, **fields},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def starter_kit(products, create_package):
    # 1 taladro + 2 martillos = 150 por separado, se vende a 120
    return create_package(
        "Starter kit",
        120,
        [
            {"product_id": products["drill"]["product_id"], "quantity": 1},
            {"product_id": products["hammer"]["product_id"], "quantity": 2},
        ],
        tags=["tools", "starter"],
    )


class TestPackageCreate:
    """Tests for POST /packages."""

    def test_create(self, starter_kit):
        """Test the package is created with its items."""
        assert starter_kit["name"] == "Starter kit"
        assert starter_kit["is_active"] is True
        assert len(starter_kit["items"]) == 2
        assert starter_kit["tags"] == ["tools", "starter"]

    def test_unknown_product(self, client, admin_headers, products):
        """Test that the first missing product id is reported."""
        response = client.post(
            f"{API}/packages/",
            json={
                "name": "Broken kit",
                "price": 10,
                "items": [
                    {"product_id": products["drill"]["product_id"]},
                    {"product_id": 998},
                    {"product_id": 999},
                ],
            },
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert "998" in response.json()["detail"]

    def test_requires_items(self, client, admin_headers):
        """Test that a package needs at least one item."""
        response = client.post(
            f"{API}/packages/", json={"name": "Empty", "price": 10, "items": []}, headers=admin_headers
        )

        assert response.status_code == 422

    def test_requires_admin(self, client, user_headers, products):
        """Test that regular users cannot create packages."""
        response = client.post(
            f"{API}/packages/",
            json={"name": "Kit", "price": 10, "items": [{"product_id": products["drill"]["product_id"]}]},
            headers=user_headers,
        )

        assert response.status_code == 403


class TestPackageRead:
    """Tests for the package views."""

    def test_summary(self, client, starter_kit):
        """Test priced items and the discount summary."""
        body = client.get(f"{API}/packages/{starter_kit['package_id']}").json()

        summary = body["summary"]
        assert summary["total_items"] == 2
        assert summary["total_products"] == 3
        assert summary["original_total"] == 150
        assert summary["final_price"] == 120
        assert summary["discount"] == 30
        assert summary["discount_percentage"] == 20
        assert summary["savings"].startswith("You save")
        assert sorted(item["item_total"] for item in body["items"]) == [50, 100]
        assert body["user"]["email"] == "admin@example.com"

    def test_summary_with_original_price(self, client, products, create_package):
        """Test that an explicit original price is the reference."""
        package = create_package(
            "Pro kit", 150, [{"product_id": products["drill"]["product_id"]}], original_price=200
        )

        summary = client.get(f"{API}/packages/{package['package_id']}").json()["summary"]

        assert summary["original_total"] == 200
        assert summary["discount"] == 50
        assert summary["discount_percentage"] == 25

    def test_summary_with_custom_price(self, client, products, create_package):
        """Test that a custom item price replaces the catalog price."""
        package = create_package(
            "Custom kit", 80, [{"product_id": products["drill"]["product_id"], "custom_price": 90}]
        )

        body = client.get(f"{API}/packages/{package['package_id']}").json()

        assert body["items"][0]["unit_price"] == 90
        assert body["summary"]["discount"] == 10

    def test_not_found(self, client):
        assert client.get(f"{API}/packages/999").status_code == 404

    def test_details(self, client, starter_kit):
        """Test the customer view: formatted items and savings."""
        body = client.get(f"{API}/packages/{starter_kit['package_id']}/details").json()

        assert body["package"]["original_price"] == 150
        assert body["summary"]["items_total"] == 150
        assert body["summary"]["package_price"] == 120
        assert body["summary"]["savings"] == 30
        assert body["summary"]["savings_percentage"] == 20
        assert body["summary"]["per_product_savings"] == 10
        hammer = next(item for item in body["items"] if item["name"] == "Hammer")
        assert hammer["quantity"] == 2
        assert hammer["total"] == 50

    def test_details_savings_ignore_original_price(self, client, products, create_package):
        """Test that savings are measured against the separate purchase."""
        package = create_package(
            "Pricey kit", 120, [{"product_id": products["drill"]["product_id"]}], original_price=500
        )

        body = client.get(f"{API}/packages/{package['package_id']}/details").json()

        assert body["package"]["original_price"] == 500
        # Más caro que comprar por separado: sin ahorro
        assert body["summary"]["savings"] == 0
        assert body["summary"]["savings_percentage"] == 0

    def test_details_of_inactive_package(self, client, admin_headers, starter_kit):
        """Test that inactive packages are hidden from the customer view."""
        client.put(
            f"{API}/packages/{starter_kit['package_id']}",
            json={"name": "Starter kit", "price": 120, "is_active": False},
            headers=admin_headers,
        )

        response = client.get(f"{API}/packages/{starter_kit['package_id']}/details")

        assert response.status_code == 404

    def test_list(self, client, starter_kit, products, create_package):
        """Test listing with item_count and price filters."""
        create_package("Single drill", 95, [{"product_id": products["drill"]["product_id"]}])

        body = client.get(f"{API}/packages/", params={"sort_by": "price", "sort_order": "asc"}).json()
        cheap = client.get(f"{API}/packages/", params={"max_price": 100}).json()

        assert body["total"] == 2
        assert [(p["name"], p["item_count"]) for p in body["data"]] == [("Single drill", 1), ("Starter kit", 2)]
        assert [p["name"] for p in cheap["data"]] == ["Single drill"]

    def test_list_search_by_tag(self, client, starter_kit):
        """Test that search matches an exact tag."""
        body = client.get(f"{API}/packages/", params={"search": "starter"}).json()

        assert [p["name"] for p in body["data"]] == ["Starter kit"]

    def test_list_hides_inactive_by_default(self, client, admin_headers, starter_kit):
        """Test the default is_active filter and asking for inactive ones."""
        client.put(
            f"{API}/packages/{starter_kit['package_id']}",
            json={"name": "Starter kit", "price": 120, "is_active": False},
            headers=admin_headers,
        )

        default = client.get(f"{API}/packages/").json()
        inactive = client.get(f"{API}/packages/", params={"is_active": False}).json()

        assert default["total"] == 0
        assert inactive["total"] == 1


class TestPackageUpdate:
    """Tests for PUT /packages/{id}."""

    def test_full_update(self, client, admin_headers, starter_kit):
        """Test replacing the package data keeps its items."""
        response = client.put(
            f"{API}/packages/{starter_kit['package_id']}",
            json={"name": "Starter kit v2", "price": 110, "description": "New", "stock": 5},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Starter kit v2"
        assert data["price"] == 110
        assert data["stock"] == 5
        assert data["is_active"] is True
        assert len(data["items"]) == 2

    def test_update_requires_name_and_price(self, client, admin_headers, starter_kit):
        """Test that PUT is a full update."""
        response = client.put(
            f"{API}/packages/{starter_kit['package_id']}", json={"description": "x"}, headers=admin_headers
        )

        assert response.status_code == 422

    def test_update_not_found(self, client, admin_headers):
        response = client.put(f"{API}/packages/999", json={"name": "X", "price": 1}, headers=admin_headers)

        assert response.status_code == 404


class TestPackageItems:
    """Tests for item management inside a package."""

    def test_add_item(self, client, admin_headers, starter_kit, create_product):
        """Test adding a product to an existing package."""
        saw = create_product("Saw", 40)

        response = client.post(
            f"{API}/packages/{starter_kit['package_id']}/items",
            json={"product_id": saw["product_id"], "quantity": 1},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["product"]["name"] == "Saw"
        summary = client.get(f"{API}/packages/{starter_kit['package_id']}").json()["summary"]
        assert summary["total_items"] == 3

    def test_add_unknown_product(self, client, admin_headers, starter_kit):
        response = client.post(
            f"{API}/packages/{starter_kit['package_id']}/items",
            json={"product_id": 999},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_add_to_unknown_package(self, client, admin_headers, products):
        response = client.post(
            f"{API}/packages/999/items",
            json={"product_id": products["drill"]["product_id"]},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_update_item(self, client, admin_headers, starter_kit):
        """Test changing quantity and custom price of an item."""
        hammer_item = next(i for i in starter_kit["items"] if i["product"]["name"] == "Hammer")

        response = client.put(
            f"{API}/packages/{starter_kit['package_id']}/items/{hammer_item['item_id']}",
            json={"quantity": 3, "custom_price": 20},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Package item updated successfully"
        assert body["item_price"] == 20
        assert body["total_price"] == 60
        assert body["data"]["quantity"] == 3

    def test_item_of_another_package(self, client, admin_headers, starter_kit, products, create_package):
        """Test that an item id must belong to the package in the path."""
        other = create_package("Other", 90, [{"product_id": products["drill"]["product_id"]}])
        foreign_item_id = other["items"][0]["item_id"]
        url = f"{API}/packages/{starter_kit['package_id']}/items/{foreign_item_id}"

        assert client.put(url, json={"quantity": 2}, headers=admin_headers).status_code == 404
        assert client.delete(url, headers=admin_headers).status_code == 404

    def test_remove_item(self, client, admin_headers, starter_kit):
        """Test removing an item from the package."""
        item_id = starter_kit["items"][0]["item_id"]

        response = client.delete(
            f"{API}/packages/{starter_kit['package_id']}/items/{item_id}", headers=admin_headers
        )

        assert response.status_code == 200
        body = client.get(f"{API}/packages/{starter_kit['package_id']}").json()
        assert [item["item_id"] for item in body["items"]] != [item_id]
        assert len(body["items"]) == 1
