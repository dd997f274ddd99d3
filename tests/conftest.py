import pytest
from fastapi.testclient import TestClient

from donation_backend.app import create_app
from donation_backend.config import Settings
from donation_backend.files import PhotoStore
from donation_backend.service import RecipientService
from donation_backend.store import RecipientStore


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'donations.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
    )


@pytest.fixture
def client(settings):
    """HTTP client against a fresh app; the context manager runs startup."""
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def store(settings):
    store = RecipientStore(settings.DATABASE_URL)
    assert store.connect()
    yield store
    store.dispose()


@pytest.fixture
def service(store, settings):
    photos = PhotoStore(settings.UPLOAD_DIR)
    photos.ensure_directory()
    return RecipientService(store, photos)
