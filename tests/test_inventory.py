import pytest


async def create_inventory(client, product_id, current_stock=10, reorder_level=5):
    return await client.post(
        "/api/inventory",
        json={"product_id": product_id, "current_stock": current_stock, "reorder_level": reorder_level},
    )


class TestInventoryWrites:

    async def test_create_and_fetch(self, client, product):
        created = await create_inventory(client, product["product_id"])
        assert created.status_code == 201
        inventory_id = created.json()["inventory_id"]

        by_id = await client.get(f"/api/inventory/{inventory_id}")
        by_product = await client.get(f"/api/inventory/product/{product['product_id']}")

        assert by_id.json()["current_stock"] == 10
        assert by_product.json()["inventory_id"] == inventory_id

    async def test_one_row_per_product(self, client, product):
        await create_inventory(client, product["product_id"])
        duplicate = await create_inventory(client, product["product_id"])
        assert duplicate.status_code == 409
        assert duplicate.json() == {"error": "Inventory for this product already exists"}

    async def test_product_must_exist(self, client):
        response = await create_inventory(client, 4040)
        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    @pytest.mark.parametrize(
        "payload, message",
        [
            ({"product_id": 0, "current_stock": 1, "reorder_level": 1}, "Valid product ID is required"),
            ({"product_id": 1, "current_stock": -1, "reorder_level": 1}, "Current stock cannot be negative"),
            ({"product_id": 1, "current_stock": 1, "reorder_level": -2}, "Reorder level cannot be negative"),
        ],
    )
    async def test_validation(self, client, payload, message):
        response = await client.post("/api/inventory", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": message}

    async def test_update_and_stock_level(self, client, product):
        inventory_id = (await create_inventory(client, product["product_id"])).json()["inventory_id"]

        updated = await client.put(
            f"/api/inventory/{inventory_id}",
            json={"product_id": product["product_id"], "current_stock": 3, "reorder_level": 8},
        )
        assert updated.status_code == 200
        assert updated.json()["reorder_level"] == 8

        restocked = await client.put(f"/api/inventory/{inventory_id}/stock", json={"current_stock": 40})
        assert restocked.status_code == 200
        assert restocked.json()["current_stock"] == 40
        assert restocked.json()["last_restock_date"] is not None

    async def test_stock_cannot_go_negative(self, client, product):
        inventory_id = (await create_inventory(client, product["product_id"])).json()["inventory_id"]
        response = await client.put(f"/api/inventory/{inventory_id}/stock", json={"current_stock": -4})
        assert response.status_code == 400
        assert response.json() == {"error": "Current stock cannot be negative"}

    async def test_missing_rows(self, client, product):
        assert (await client.get("/api/inventory/99")).json() == {"error": "Inventory item not found"}
        missing_for_product = await client.get(f"/api/inventory/product/{product['product_id']}")
        assert missing_for_product.status_code == 404
        assert missing_for_product.json() == {"error": "Inventory for product not found"}
        assert (await client.put("/api/inventory/99/stock", json={"current_stock": 1})).status_code == 404
        assert (await client.delete("/api/inventory/99")).status_code == 404

    async def test_delete(self, client, product):
        inventory_id = (await create_inventory(client, product["product_id"])).json()["inventory_id"]
        assert (await client.delete(f"/api/inventory/{inventory_id}")).status_code == 204
        assert (await client.get(f"/api/inventory/{inventory_id}")).status_code == 404


class TestLowStockThresholds:

    async def test_at_reorder_level_is_low_for_inventory_only(self, client, product):
        await create_inventory(client, product["product_id"], current_stock=5, reorder_level=5)

        inventory_low = (await client.get("/api/inventory/low-stock")).json()
        report_low = (await client.get("/api/reports/low-stock")).json()
        dashboard = (await client.get("/api/dashboard")).json()

        assert [item["product_id"] for item in inventory_low] == [product["product_id"]]
        assert report_low == []
        assert dashboard["low_stock_count"] == 0
        assert dashboard["low_stock_items"] == []

    async def test_below_reorder_level_is_low_everywhere(self, client, product, other_product):
        await create_inventory(client, product["product_id"], current_stock=1, reorder_level=5)
        await create_inventory(client, other_product["product_id"], current_stock=0, reorder_level=10)

        inventory_low = (await client.get("/api/inventory/low-stock")).json()
        details = (await client.get("/api/inventory/low-stock/details")).json()
        report_low = (await client.get("/api/reports/low-stock")).json()

        # Largest shortfall first
        assert [item["product_id"] for item in inventory_low] == [other_product["product_id"], product["product_id"]]
        assert details[0]["product_name"] == "Ear Muffs"
        assert details[0]["price"] == 25.5
        assert report_low[0] == {
            "id": report_low[0]["id"],
            "product_id": other_product["product_id"],
            "name": "Ear Muffs",
            "current_stock": 0,
            "reorder_level": 10,
            "unit_price": 25.5,
        }
