import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from shared.errors import (
    DuplicateKeyError,
    InternalFailure,
    InvalidTransitionError,
    NotFoundError,
    ServiceError,
    ValidationError,
    classify_integrity_error,
    store_errors,
    transaction,
)


class FakeDriverError(Exception):
    def __init__(self, message, sqlstate=None):
        super().__init__(message)
        self.sqlstate = sqlstate


def integrity_error(message, sqlstate=None):
    return IntegrityError("INSERT ...", {}, FakeDriverError(message, sqlstate))


class TestClassification:

    def test_unique_violation(self):
        error = classify_integrity_error(integrity_error("duplicate key", "23505"), "customer")
        assert isinstance(error, DuplicateKeyError)
        assert error.status_code == 409
        assert error.public_message == "A customer with this information already exists"

    def test_unique_violation_with_detail(self):
        error = classify_integrity_error(
            integrity_error("duplicate key", "23505"), "user", duplicate_detail="Email already exists"
        )
        assert error.message == "Email already exists"

    def test_foreign_key_violation_names_the_column_parent(self):
        message = 'violates foreign key constraint\nDETAIL:  Key (quotation_id)=(9) is not present in table "quotations".'
        error = classify_integrity_error(
            integrity_error(message, "23503"),
            "order",
            parents={"customer_id": "customer", "quotation_id": "quotation"},
        )
        assert isinstance(error, NotFoundError)
        assert error.entity == "quotation"
        assert error.public_message == "Quotation not found"

    def test_foreign_key_violation_falls_back_to_parent(self):
        error = classify_integrity_error(integrity_error("FOREIGN KEY constraint failed"), "contact", parent="customer")
        assert isinstance(error, NotFoundError)
        assert error.entity == "customer"

    def test_check_violation(self):
        error = classify_integrity_error(
            integrity_error("CHECK constraint failed: ck_inventory_current_stock"), "inventory"
        )
        assert isinstance(error, ValidationError)
        assert error.status_code == 400

    def test_sqlite_unique_message(self):
        error = classify_integrity_error(integrity_error("UNIQUE constraint failed: products.product_name"), "product")
        assert isinstance(error, DuplicateKeyError)

    def test_anything_else_is_internal(self):
        error = classify_integrity_error(integrity_error("not null violated", "23502"), "order")
        assert isinstance(error, InternalFailure)
        assert error.status_code == 500
        assert error.cause is not None


class TestStoreErrors:

    def test_translates_integrity_errors(self):
        with pytest.raises(NotFoundError):
            with store_errors("create contact", "contact", parent="customer"):
                raise integrity_error("x", "23503")

    def test_translates_other_store_failures(self):
        with pytest.raises(InternalFailure) as excinfo:
            with store_errors("list orders", "order"):
                raise OperationalError("SELECT ...", {}, FakeDriverError("connection lost"))
        assert excinfo.value.message == "failed to list orders"

    def test_leaves_domain_errors_alone(self):
        with pytest.raises(InvalidTransitionError):
            with store_errors("update order status", "order"):
                raise InvalidTransitionError("cancelled orders cannot be updated")


class FakeSession:
    def __init__(self):
        self.commits = 0
        self.rollbacks = 0

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1


class TestTransaction:

    async def test_commits_on_success(self):
        session = FakeSession()
        async with transaction(session, "create order"):
            pass
        assert (session.commits, session.rollbacks) == (1, 0)

    async def test_rolls_back_domain_errors(self):
        session = FakeSession()
        with pytest.raises(NotFoundError):
            async with transaction(session, "delete order"):
                raise NotFoundError("order")
        assert (session.commits, session.rollbacks) == (0, 1)

    async def test_wraps_store_errors(self):
        session = FakeSession()
        with pytest.raises(InternalFailure) as excinfo:
            async with transaction(session, "create order"):
                raise OperationalError("INSERT ...", {}, FakeDriverError("disk full"))
        assert excinfo.value.message == "failed to create order"
        assert session.rollbacks == 1

    async def test_rolls_back_unexpected_errors(self):
        session = FakeSession()
        with pytest.raises(RuntimeError):
            async with transaction(session, "create order"):
                raise RuntimeError("boom")
        assert session.rollbacks == 1


def test_every_variant_is_a_service_error():
    for error in (
        NotFoundError("order"),
        DuplicateKeyError("order"),
        InvalidTransitionError("x"),
        ValidationError("field", "x"),
        InternalFailure("x"),
    ):
        assert isinstance(error, ServiceError)


class TestHttpRendering:

    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_unknown_route_uses_error_body(self, client):
        response = await client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    async def test_malformed_path_parameter(self, client):
        response = await client.get("/api/customers/not-a-number")
        assert response.status_code == 400
        assert "customer_id" in response.json()["error"]

    async def test_malformed_body(self, client):
        response = await client.post("/api/orders", content=b"{not json", headers={"content-type": "application/json"})
        assert response.status_code == 400
        assert "error" in response.json()

    async def test_metrics_endpoint(self, client):
        response = await client.get("/metrics")
        assert response.status_code == 200
        assert "scms_orders_created_total" in response.text

    async def test_request_id_is_echoed(self, client):
        response = await client.get("/api/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["x-request-id"] == "req-42"

        generated = await client.get("/api/health")
        assert len(generated.headers["x-request-id"]) == 32
