import redis

from research_links.store import count_key
from .conftest import add_link


def test_redirect_is_permanent_and_counts_once(client, store):
    add_link(store, "paper", "https://example.com/paper")

    response = client.get("/paper", follow_redirects=False)

    assert response.status_code == 301
    assert response.headers["location"] == "https://example.com/paper"
    assert response.headers["x-robots-tag"] == "noindex"
    assert store.get(count_key("paper")) == "1"

    client.get("/paper", follow_redirects=False)
    assert store.get(count_key("paper")) == "2"


def test_redirect_is_case_insensitive(client, store):
    add_link(store, "my-paper", "https://example.com")

    response = client.get("/My-PAPER", follow_redirects=False)

    assert response.status_code == 301
    assert store.get(count_key("my-paper")) == "1"


def test_unknown_slug_is_404_and_not_counted(client, store):
    response = client.get("/missing", follow_redirects=False)

    assert response.status_code == 404
    assert response.text == "Not found"
    assert response.headers["x-robots-tag"] == "noindex"
    assert store.get(count_key("missing")) is None


def test_invalid_slug_is_404(client, store):
    response = client.get("/bad.slug", follow_redirects=False)
    assert response.status_code == 404


def test_counter_failure_does_not_block_redirect(client, store, monkeypatch):
    add_link(store, "paper", "https://example.com/paper")

    def broken_incr(*args, **kwargs):
        raise redis.exceptions.ConnectionError("counter down")

    monkeypatch.setattr(store, "incr", broken_incr)

    response = client.get("/paper", follow_redirects=False)

    assert response.status_code == 301
    assert response.headers["location"] == "https://example.com/paper"


def test_root_returns_ok(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "OK"


def test_store_failure_on_lookup_is_500(client, store, monkeypatch):
    def broken_get(*args, **kwargs):
        raise redis.exceptions.ConnectionError("store down")

    monkeypatch.setattr(store, "get", broken_get)

    response = client.get("/paper", follow_redirects=False)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal Server Error"}
