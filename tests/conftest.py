from __future__ import annotations

import os

import pytest

# SQLite has no schemas; must be set before app.config is imported
os.environ["DATABASE_SCHEMA"] = ""
os.environ["ENVIRONMENT"] = "test"

from fastapi.testclient import TestClient  # noqa: E402

from app.config.settings import Settings  # noqa: E402
from app.main import create_app  # noqa: E402
from app.services.provisioning import BatchProvisioner, ProvisioningRequest  # noqa: E402
from tests.fakes import OWNER_ID, SHOP_ID, FakeDirectory, FakeRecordStore  # noqa: E402


@pytest.fixture()
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture()
def store() -> FakeRecordStore:
    store = FakeRecordStore()
    store.shops[OWNER_ID] = {"name": "Owner shop"}
    return store


@pytest.fixture()
def settings() -> Settings:
    return Settings(environment="test", database_schema=None)


@pytest.fixture()
def provisioner(directory, store) -> BatchProvisioner:
    return BatchProvisioner(directory, store, max_attempts=500, password_length=8)


@pytest.fixture()
def make_request():
    def _make(count: int = 3, domain: str = "co.com", **overrides) -> ProvisioningRequest:
        values = dict(
            shop_id=SHOP_ID,
            shop_owner_id=OWNER_ID,
            count=count,
            domain=domain,
            role="employee",
            permissions=["view_products"],
        )
        values.update(overrides)
        return ProvisioningRequest(**values)

    return _make


@pytest.fixture()
def client(settings, directory, store):
    app = create_app(settings=settings, directory=directory, record_store=store)
    with TestClient(app) as test_client:
        yield test_client
