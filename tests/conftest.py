import asyncio
import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

TESTS_DIR = Path(__file__).resolve().parent

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TESTS_DIR / 'test_storefront.db'}"
os.environ["SECRET_KEY"] = "test-secret-key-for-session-tokens"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

from storefront.core.database import engine  # noqa: E402
from storefront.main import app  # noqa: E402
from storefront.models import Base  # noqa: E402
from storefront.services.storage import StorageService, StoredImage, get_storage_service  # noqa: E402

API = "/api/v1"
PASSWORD = "secret123"


class FakeStorage:
    """In-memory stand-in for the S3 storage service."""

    def __init__(self):
        self.objects = {}
        self.deleted = []
        self.fail_deletes = False

    async def upload_image(self, file_content, folder="products", file_extension="jpg"):
        storage_key = StorageService.build_key(folder, file_extension)
        self.objects[storage_key] = file_content
        return StoredImage(url=f"https://cdn.test/{storage_key}", storage_key=storage_key)

    async def delete_image(self, storage_key):
        self.deleted.append(storage_key)
        if self.fail_deletes:
            return False
        self.objects.pop(storage_key, None)
        return True


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def _drop_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def prepare_database():
    asyncio.run(_reset_schema())
    yield
    asyncio.run(_drop_schema())


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_storage_service] = lambda: storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def image(name, primary=False):
    return {
        "url": f"https://cdn.test/products/{name}.jpg",
        "storage_key": f"products/{name}.jpg",
        "is_primary": primary,
    }


def product_payload(**overrides):
    payload = {
        "name": "Toyota Corolla 2019",
        "price": 450000,
        "images": [image("corolla-front")],
        "description": "One owner, full service history",
        "category": "cars",
        "specs": {"year": "2019", "mileage": "45000 km"},
    }
    payload.update(overrides)
    return payload


def register(client, business_name="Joe's Auto Repair!!", email="joe@example.com", **extra):
    body = {
        "name": "Joe",
        "email": email,
        "password": PASSWORD,
        "business_name": business_name,
    }
    body.update(extra)
    return client.post(f"{API}/auth/register", json=body)


def login(client, email, password=PASSWORD):
    return client.post(f"{API}/auth/login", json={"email": email, "password": password})


def register_owner(client, business_name="Joe's Auto Repair!!", email="joe@example.com"):
    """Register a business and log in; returns ids, slug and auth headers."""
    registered = register(client, business_name=business_name, email=email)
    assert registered.status_code == 201, registered.text
    token = login(client, email).json()["access_token"]
    owner = registered.json()
    owner["headers"] = {"Authorization": f"Bearer {token}"}
    return owner


def create_product(client, owner, **overrides):
    response = client.post(
        f"{API}/products", json=product_payload(**overrides), headers=owner["headers"]
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def owner(client):
    return register_owner(client)


@pytest.fixture
def other_owner(client):
    return register_owner(client, business_name="Mary's Boutique", email="mary@example.com")
