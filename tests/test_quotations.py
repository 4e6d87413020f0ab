import asyncio
import time

import pytest
from sqlalchemy import func, select

from services.quotation_service import pdf
from services.quotation_service.models import Quotation, QuotationItem


async def count_rows(session_factory, model):
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar()


async def create_quotation(client, quotation, items):
    return await client.post("/api/quotations", json={"quotation": quotation, "items": items})


class TestCreateQuotation:

    async def test_validity_defaults_to_thirty_days_after_quote_date(self, client, customer):
        response = await create_quotation(
            client,
            {"customer_id": customer["customer_id"], "quote_date": "2026-01-10T09:00:00"},
            [],
        )

        assert response.status_code == 201
        quotation = response.json()["quotation"]
        assert quotation["quote_date"].startswith("2026-01-10T09:00:00")
        assert quotation["validity_date"].startswith("2026-02-09T09:00:00")

    async def test_total_is_sum_of_supplied_line_totals(self, client, customer, product, other_product):
        items = [
            {"product_id": product["product_id"], "quantity": 10, "unit_price": 10, "line_total": 100.00},
            {"product_id": other_product["product_id"], "quantity": 2, "unit_price": 25.25, "line_total": 50.50},
        ]
        response = await create_quotation(client, {"customer_id": customer["customer_id"], "total_amount": 0}, items)

        assert response.status_code == 201
        body = response.json()
        assert body["quotation"]["total_amount"] == pytest.approx(150.50)
        assert [item["line_total"] for item in body["items"]] == [100.0, 50.5]

    async def test_missing_line_total_is_computed(self, client, customer, product):
        items = [{"product_id": product["product_id"], "quantity": 3, "unit_price": 10, "discount": 5}]
        response = await create_quotation(client, {"customer_id": customer["customer_id"]}, items)

        body = response.json()
        assert body["items"][0]["line_total"] == 25
        assert body["quotation"]["total_amount"] == 25

    async def test_supplied_total_is_kept(self, client, customer, product):
        items = [{"product_id": product["product_id"], "quantity": 1, "unit_price": 10, "line_total": 10}]
        response = await create_quotation(client, {"customer_id": customer["customer_id"], "total_amount": 9.5}, items)
        assert response.json()["quotation"]["total_amount"] == 9.5

    async def test_defaults_status_and_allows_no_items(self, client, customer):
        response = await create_quotation(client, {"customer_id": customer["customer_id"]}, [])

        assert response.status_code == 201
        body = response.json()
        assert body["quotation"]["status"] == "PENDING"
        assert body["quotation"]["total_amount"] == 0
        assert body["items"] == []

    async def test_customer_id_is_required(self, client):
        response = await create_quotation(client, {"customer_id": 0}, [])
        assert response.status_code == 400
        assert response.json() == {"error": "Customer ID is required"}

    async def test_failing_item_persists_nothing(self, client, session_factory, customer, product):
        items = [
            {"product_id": product["product_id"], "quantity": 1, "unit_price": 10},
            {"product_id": 8080, "quantity": 1, "unit_price": 10},
        ]
        response = await create_quotation(client, {"customer_id": customer["customer_id"]}, items)

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}
        assert await count_rows(session_factory, Quotation) == 0
        assert await count_rows(session_factory, QuotationItem) == 0


class TestQuotationLifecycle:

    async def test_get_and_list_by_customer(self, client, customer, product):
        other = (await client.post("/api/customers", json={"company_name": "Northwind"})).json()
        mine = await create_quotation(
            client,
            {"customer_id": customer["customer_id"], "quote_date": "2026-02-01T00:00:00"},
            [{"product_id": product["product_id"], "quantity": 1, "unit_price": 10}],
        )
        await create_quotation(client, {"customer_id": other["customer_id"], "quote_date": "2026-03-01T00:00:00"}, [])
        quotation_id = mine.json()["quotation"]["quotation_id"]

        full = await client.get(f"/api/quotations/{quotation_id}")
        assert full.status_code == 200
        assert len(full.json()["items"]) == 1

        everything = (await client.get("/api/quotations")).json()
        assert [q["customer_id"] for q in everything] == [other["customer_id"], customer["customer_id"]]

        filtered = (await client.get("/api/quotations", params={"customer_id": customer["customer_id"]})).json()
        assert [q["quotation_id"] for q in filtered] == [quotation_id]

    async def test_put_replaces_header_and_items(self, client, customer, product, other_product):
        created = await create_quotation(
            client,
            {"customer_id": customer["customer_id"]},
            [{"product_id": product["product_id"], "quantity": 1, "unit_price": 10}],
        )
        quotation_id = created.json()["quotation"]["quotation_id"]

        response = await client.put(
            f"/api/quotations/{quotation_id}",
            json={
                "quotation": {"customer_id": customer["customer_id"], "total_amount": 51, "status": "Approved"},
                "items": [{"product_id": other_product["product_id"], "quantity": 2, "unit_price": 25.5}],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["quotation"]["total_amount"] == 51
        assert body["quotation"]["status"] == "Approved"
        assert [item["product_id"] for item in body["items"]] == [other_product["product_id"]]

    async def test_put_without_items_keeps_existing_rows(self, client, customer, product):
        created = await create_quotation(
            client,
            {"customer_id": customer["customer_id"]},
            [{"product_id": product["product_id"], "quantity": 1, "unit_price": 10}],
        )
        quotation_id = created.json()["quotation"]["quotation_id"]

        response = await client.put(
            f"/api/quotations/{quotation_id}",
            json={"quotation": {"customer_id": customer["customer_id"], "total_amount": 10}},
        )

        assert response.status_code == 200
        assert len(response.json()["items"]) == 1

    async def test_put_with_new_items_and_no_total_sums_line_totals(self, client, customer, product, other_product):
        created = await create_quotation(
            client,
            {"customer_id": customer["customer_id"]},
            [{"product_id": product["product_id"], "quantity": 1, "unit_price": 10}],
        )
        quotation_id = created.json()["quotation"]["quotation_id"]

        response = await client.put(
            f"/api/quotations/{quotation_id}",
            json={
                "quotation": {"customer_id": customer["customer_id"]},
                "items": [
                    {"product_id": product["product_id"], "quantity": 3, "unit_price": 10, "line_total": 30},
                    {"product_id": other_product["product_id"], "quantity": 2, "unit_price": 25.5, "discount": 1},
                ],
            },
        )

        assert response.status_code == 200
        assert response.json()["quotation"]["total_amount"] == 80

        fetched = (await client.get(f"/api/quotations/{quotation_id}")).json()
        assert fetched["quotation"]["total_amount"] == 80

    async def test_status_has_no_transition_guard(self, client, customer):
        created = await create_quotation(client, {"customer_id": customer["customer_id"]}, [])
        quotation_id = created.json()["quotation"]["quotation_id"]

        for status in ("Rejected", "Pending", "Expired", "Approved"):
            response = await client.post(f"/api/quotations/{quotation_id}/status", json={"status": status})
            assert response.status_code == 200
            assert response.json()["status"] == status

    async def test_status_must_be_known(self, client, customer):
        created = await create_quotation(client, {"customer_id": customer["customer_id"]}, [])
        quotation_id = created.json()["quotation"]["quotation_id"]

        response = await client.post(f"/api/quotations/{quotation_id}/status", json={"status": "Accepted"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid status. Must be one of: Pending, Approved, Rejected, Expired"}

    async def test_status_of_missing_quotation(self, client):
        response = await client.post("/api/quotations/404/status", json={"status": "Approved"})
        assert response.status_code == 404
        assert response.json() == {"error": "Quotation not found"}

    async def test_delete_removes_items(self, client, session_factory, customer, product):
        created = await create_quotation(
            client,
            {"customer_id": customer["customer_id"]},
            [{"product_id": product["product_id"], "quantity": 1, "unit_price": 10}],
        )
        quotation_id = created.json()["quotation"]["quotation_id"]

        response = await client.delete(f"/api/quotations/{quotation_id}")

        assert response.status_code == 204
        assert await count_rows(session_factory, Quotation) == 0
        assert await count_rows(session_factory, QuotationItem) == 0
        assert (await client.delete(f"/api/quotations/{quotation_id}")).status_code == 404


class TestQuotationPdf:

    async def test_renders_attachment(self, client, customer, product, monkeypatch):
        created = await create_quotation(
            client,
            {"customer_id": customer["customer_id"]},
            [{"product_id": product["product_id"], "quantity": 1200, "unit_price": 10, "discount": 600}],
        )
        quotation_id = created.json()["quotation"]["quotation_id"]
        rendered = {}

        def fake_from_string(html, output_path, options=None, configuration=None):
            rendered["html"] = html
            rendered["output_path"] = output_path
            return b"%PDF-1.4 test"

        monkeypatch.setattr(pdf.pdfkit, "from_string", fake_from_string)

        response = await client.get(f"/api/quotations/{quotation_id}/pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == f"attachment; filename=quotation_{quotation_id}.pdf"
        assert response.content == b"%PDF-1.4 test"
        assert rendered["output_path"] is False
        assert "Acme Industrial" in rendered["html"]
        assert "Safety Helmet" in rendered["html"]
        assert "11,400.00" in rendered["html"]
        assert "5.0%" in rendered["html"]

    async def test_renderer_failure(self, client, customer, monkeypatch):
        created = await create_quotation(client, {"customer_id": customer["customer_id"]}, [])
        quotation_id = created.json()["quotation"]["quotation_id"]

        def broken(*args, **kwargs):
            raise OSError("No wkhtmltopdf executable found")

        monkeypatch.setattr(pdf.pdfkit, "from_string", broken)

        response = await client.get(f"/api/quotations/{quotation_id}/pdf")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate PDF"}

    async def test_rendering_does_not_block_other_requests(self, client, customer, monkeypatch):
        created = await create_quotation(client, {"customer_id": customer["customer_id"]}, [])
        quotation_id = created.json()["quotation"]["quotation_id"]

        def slow_from_string(html, output_path, options=None, configuration=None):
            time.sleep(1.0)
            return b"%PDF-1.4 slow"

        monkeypatch.setattr(pdf.pdfkit, "from_string", slow_from_string)

        async def health_while_rendering():
            await asyncio.sleep(0.05)
            started = time.perf_counter()
            response = await client.get("/api/health")
            return response, time.perf_counter() - started

        pdf_response, (health, health_latency) = await asyncio.gather(
            client.get(f"/api/quotations/{quotation_id}/pdf"),
            health_while_rendering(),
        )

        assert pdf_response.status_code == 200
        assert pdf_response.content == b"%PDF-1.4 slow"
        assert health.status_code == 200
        assert health_latency < 0.5

    async def test_missing_quotation(self, client):
        response = await client.get("/api/quotations/12/pdf")
        assert response.status_code == 404


@pytest.mark.parametrize(
    "quantity, unit_price, discount, expected",
    [(1, 100, 0, "-"), (1, 100, 10, "10.0%"), (1000, 100, 5, "0.0050%"), (0, 100, 5, "-")],
)
def test_discount_percent(quantity, unit_price, discount, expected):
    assert pdf.discount_percent(quantity, unit_price, discount) == expected


def test_format_money():
    assert pdf.format_money(1234567.891) == "1,234,567.89"
    assert pdf.format_money(None) == "0.00"
