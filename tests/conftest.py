import os

# Settings are read at import time, so the environment is prepared before the app loads
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["OTLP_ENDPOINT"] = ""
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["LOGIN_RATE_LIMIT"] = "1000/minute"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from shared.config.database import Base, build_engine, get_db


@pytest.fixture
async def engine():
    test_engine = build_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
async def customer(client):
    response = await client.post("/api/customers", json={"company_name": "Acme Industrial", "industry": "Mining"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
async def product(client):
    response = await client.post("/api/products", json={"product_name": "Safety Helmet", "price": 10})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
async def other_product(client):
    response = await client.post("/api/products", json={"product_name": "Ear Muffs", "price": 25.5})
    assert response.status_code == 201
    return response.json()
