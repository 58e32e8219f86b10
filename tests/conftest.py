import pytest
from fastapi.testclient import TestClient

from field_ops.api.app import create_app
from field_ops.config.settings import AppSettings, default_settings_record
from field_ops.schemas import CustomerIn
from field_ops.services import customers
from field_ops.services.document_store import DocumentStore, MemoryBackend


@pytest.fixture
def app_settings(tmp_path):
    """Settings that never touch the working directory"""
    return AppSettings(
        DATA_FILE=str(tmp_path / "db.json"),
        DEFAULT_TAX_RATE="7.75",
        DEFAULT_COMPANY_NAME="Test Plumbing",
        _env_file=None,
    )


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend, app_settings):
    return DocumentStore(backend, default_settings=default_settings_record(app_settings))


@pytest.fixture
def customer(store):
    return customers.create_customer(store, CustomerIn(
        name="Dana Reyes",
        email="dana@example.com",
        phone="555-0100",
        address="12 Elm St",
        city="Springfield",
    ))


@pytest.fixture
def client(app_settings, store):
    app = create_app(settings=app_settings, store=store)
    with TestClient(app) as test_client:
        yield test_client
