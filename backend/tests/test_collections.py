from research_links.store import collection_key
from .conftest import add_link


def _create(client, headers, **payload):
    return client.post("/api/collections", json=payload, headers=headers)


def test_create_and_list(client, store, admin_headers):
    response = _create(client, admin_headers, id="thesis", name="Thesis", projects=["a", "b"], tags="ml, nlp")

    assert response.status_code == 200
    assert response.json() == {"success": True, "id": "thesis"}

    collections = client.get("/api/collections", headers=admin_headers).json()["collections"]
    assert len(collections) == 1
    collection = collections[0]
    assert collection["id"] == "thesis"
    assert collection["projects"] == ["a", "b"]
    assert collection["tags"] == ["ml", "nlp"]
    assert collection["createdAt"] == collection["updatedAt"]


def test_create_validation(client, admin_headers):
    assert _create(client, admin_headers, id="x").status_code == 400
    response = _create(client, admin_headers, id="bad id", name="Bad")
    assert response.status_code == 400
    assert "alphanumeric" in response.json()["detail"]


def test_create_duplicate(client, admin_headers):
    _create(client, admin_headers, id="dup", name="First")
    assert _create(client, admin_headers, id="dup", name="Second").status_code == 409


def test_update_only_sent_fields(client, store, admin_headers):
    _create(client, admin_headers, id="c1", name="Name", description="Keep me", projects=["a"])

    response = client.put("/api/collections", json={"id": "c1", "name": "Renamed"}, headers=admin_headers)

    assert response.status_code == 200
    data = store.hgetall(collection_key("c1"))
    assert data["name"] == "Renamed"
    assert data["description"] == "Keep me"
    assert data["projects"] == "a"
    assert data["updatedAt"]


def test_update_missing(client, admin_headers):
    response = client.put("/api/collections", json={"id": "nope", "name": "x"}, headers=admin_headers)
    assert response.status_code == 404


def test_delete(client, store, admin_headers):
    _create(client, admin_headers, id="gone", name="Gone")

    response = client.delete("/api/collections", params={"id": "gone"}, headers=admin_headers)

    assert response.json() == {"success": True}
    assert store.exists(collection_key("gone")) == 0
    assert client.delete("/api/collections", headers=admin_headers).status_code == 400


def test_public_collections_drop_dangling_slugs(client, store, admin_headers):
    add_link(store, "a", title="A")
    _create(client, admin_headers, id="mixed", name="Mixed", projects=["a", "deleted"])
    _create(client, admin_headers, id="empty", name="Empty", projects=["deleted"])

    body = client.get("/api/directory/collections").json()

    assert body["total"] == 1
    collection = body["collections"][0]
    assert collection["id"] == "mixed"
    assert [p["slug"] for p in collection["projects"]] == ["a"]
    assert collection["projects"][0]["title"] == "A"
    assert collection["projects"][0]["shortUrl"] == "/a"
