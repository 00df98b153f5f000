import fakeredis
import pytest
from fastapi.testclient import TestClient

from research_links.config import settings
from research_links.main import app
from research_links.models import LinkMetadata
from research_links.services import links as link_store
from research_links.store import get_store, count_key

ADMIN_KEY = "test-admin-key"


@pytest.fixture
def store():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def client(store, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_KEY", ADMIN_KEY)
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"x-admin-key": ADMIN_KEY}


def add_link(store, slug, target="https://example.com", clicks=0, **meta):
    """Seed a link directly in the store"""
    metadata = LinkMetadata(
        title=meta.get("title"),
        description=meta.get("description"),
        tags=meta.get("tags", []),
        permanent=meta.get("permanent", False),
        created_at=meta.get("created_at"),
        start_date=meta.get("start_date"),
    )
    link_store.save_link(store, slug, target, metadata)
    if clicks:
        store.set(count_key(slug), clicks)
