import httpx
import pytest

from research_links.config import settings
from research_links.services import links as link_store
from research_links.services.ingest import ImportedWork, dedupe_works, extract_value, normalize_title
from research_links.services.openreview import get_openreview_submissions, is_submission, parse_note
from research_links.services.orcid import get_orcid_works, parse_work
from .conftest import add_link


def _orcid_summary(put_code, title, journal="", year="2023", doi=None, url=None):
    summary = {
        "put-code": put_code,
        "title": {"title": {"value": title}},
        "journal-title": {"value": journal} if journal else None,
        "publication-date": {"year": {"value": year}, "month": {"value": "05"}, "day": None},
        "external-ids": {"external-id": []},
        "url": {"value": url} if url else None,
    }
    if doi:
        summary["external-ids"]["external-id"].append(
            {"external-id-type": "doi", "external-id-url": {"value": doi}}
        )
    return {"work-summary": [summary]}


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_normalize_title():
    assert normalize_title("  Deep-Learning:  A Survey! ") == "deep learning a survey"
    assert normalize_title("") == ""


def test_extract_value():
    assert extract_value({"value": "x"}) == "x"
    assert extract_value("y") == "y"
    assert extract_value({"value": 3}) == ""
    assert extract_value(None) == ""


def test_dedupe_prefers_proceedings_then_recency():
    works = [
        ImportedWork("orcid-1", "https://a", "Same Title", published=(2024, 1, 1)),
        ImportedWork("orcid-2", "https://b", "Other", published=(2020, 1, 1)),
        ImportedWork("orcid-3", "https://c", "same title!", published=(2020, 1, 1), proceedings=True),
        ImportedWork("orcid-4", "https://d", "Other", published=(2022, 1, 1)),
        ImportedWork("orcid-5", "https://e", "", published=(2022, 1, 1)),
        ImportedWork("orcid-6", "https://f", "", published=(2022, 1, 1)),
    ]

    assert [w.slug for w in dedupe_works(works)] == ["orcid-3", "orcid-4", "orcid-5", "orcid-6"]


def test_parse_orcid_work_targets():
    with_doi = parse_work(_orcid_summary(1, "T", doi="https://doi.org/10.1/x", url="https://u")["work-summary"][0], "0000")
    with_url = parse_work(_orcid_summary(2, "T", url="https://u")["work-summary"][0], "0000")
    bare = parse_work(_orcid_summary(3, "T", journal="Proceedings of X")["work-summary"][0], "0000")

    assert with_doi.target == "https://doi.org/10.1/x"
    assert with_url.target == "https://u"
    assert bare.target == "https://orcid.org/0000"
    assert bare.tags == ["Proceedings of X"]
    assert bare.description == "Proceedings of X"
    assert bare.proceedings is True
    assert bare.published == (2023, 5, 0)


def test_orcid_import_caches_links(store):
    def handler(request):
        assert request.url.path == "/v3.0/0000-0001/works"
        assert request.headers["accept"] == "application/json"
        return httpx.Response(200, json={"group": [
            _orcid_summary(11, "A Paper", journal="Journal", year="2021"),
            _orcid_summary(12, "A paper", journal="Proceedings of Conf", year="2020"),
            _orcid_summary(13, "Another", url="https://example.org/another"),
            {"work-summary": []},
        ]})

    entries = get_orcid_works(store, "0000-0001", client=_client(handler))

    assert [e["slug"] for e in entries] == ["orcid-12", "orcid-13"]
    assert entries[0]["source"] == "orcid"
    assert store.get("link:orcid-13") == "https://example.org/another"
    meta = link_store.get_metadata(store, "orcid-12")
    assert meta.tags == ["Proceedings of Conf"]
    assert meta.permanent is False
    assert meta.created_at


def test_orcid_import_keeps_stored_metadata(store):
    add_link(store, "orcid-11", "https://old.example", title="Edited title", tags=["mine"])

    def handler(request):
        return httpx.Response(200, json={"group": [_orcid_summary(11, "Fetched", journal="J")]})

    entries = get_orcid_works(store, "0000-0001", client=_client(handler))

    assert entries[0]["title"] == "Edited title"
    assert entries[0]["tags"] == ["mine"]
    assert entries[0]["description"] == "J"
    assert link_store.get_metadata(store, "orcid-11").title == "Edited title"
    assert store.get("link:orcid-11") == "https://old.example"


@pytest.mark.parametrize("handler", [
    lambda request: httpx.Response(503),
    lambda request: httpx.Response(200, content=b"not json"),
])
def test_orcid_failures_return_empty(store, handler):
    assert get_orcid_works(store, "0000-0001", client=_client(handler)) == []


def test_orcid_network_error_returns_empty(store):
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    assert get_orcid_works(store, "0000-0001", client=_client(handler)) == []


def test_is_submission():
    assert is_submission({"invitations": ["Conf/2024/-/Submission"]})
    assert is_submission({"content": {
        "title": {"value": "T"}, "abstract": {"value": "A"}, "venue": {"value": "ICLR"},
    }})
    assert not is_submission({"content": {"title": {"value": "T"}, "abstract": {"value": "A"}}})
    assert not is_submission({"invitations": ["Conf/-/Submission"], "ddate": 1})
    assert not is_submission({"invitations": ["Conf/-/Comment"]})


def test_parse_note():
    work = parse_note({
        "id": "abc",
        "cdate": 1700000000000,
        "invitations": ["Conf/-/Proceedings"],
        "content": {"title": {"value": "T"}, "abstract": {"value": "A"}, "pdf": {"value": "/pdf/x.pdf"}},
    })

    assert work.slug == "openreview-abc"
    assert work.target == "https://openreview.net/pdf?id=abc"
    assert work.tags == ["OpenReview"]
    assert work.published == (1700000000000,)
    assert work.proceedings is True

    forum = parse_note({"id": "def", "content": {"venue": {"value": "NeurIPS"}}})
    assert forum.target == "https://openreview.net/forum?id=def"
    assert forum.tags == ["NeurIPS"]


def test_openreview_import(store, monkeypatch):
    monkeypatch.setattr(settings, "OPENREVIEW_USERNAME", None)
    monkeypatch.setattr(settings, "OPENREVIEW_PASSWORD", None)

    def handler(request):
        if request.url.path == "/profiles":
            assert request.url.params["id"] == "~Jane_Doe1"
            return httpx.Response(200, json={"profiles": [{"id": "~Jane_Doe1"}]})
        assert request.url.path == "/notes"
        assert request.url.params["content.authorids"] == "~Jane_Doe1"
        return httpx.Response(200, json={"notes": [
            {"id": "n1", "cdate": 2, "invitations": ["Conf/-/Submission"],
             "content": {"title": {"value": "Paper"}, "abstract": {"value": "A"}}},
            {"id": "n2", "cdate": 1, "invitations": ["Conf/-/Comment"], "content": {}},
        ]})

    entries = get_openreview_submissions(store, "~Jane_Doe1", client=_client(handler))

    assert [e["slug"] for e in entries] == ["openreview-n1"]
    assert store.get("link:openreview-n1") == "https://openreview.net/forum?id=n1"


def test_openreview_login_sends_token(store, monkeypatch):
    monkeypatch.setattr(settings, "OPENREVIEW_USERNAME", "user")
    monkeypatch.setattr(settings, "OPENREVIEW_PASSWORD", "secret")
    seen = []

    def handler(request):
        if request.url.path == "/login":
            return httpx.Response(200, json={"token": "tok"})
        seen.append(request.headers.get("authorization"))
        if request.url.path == "/profiles":
            return httpx.Response(200, json={"profiles": [{"id": "~P1"}]})
        return httpx.Response(200, json={"notes": []})

    assert get_openreview_submissions(store, "~P1", client=_client(handler)) == []
    assert seen == ["Bearer tok", "Bearer tok"]


def test_openreview_failure_returns_empty(store, monkeypatch):
    monkeypatch.setattr(settings, "OPENREVIEW_USERNAME", None)

    def handler(request):
        return httpx.Response(500)

    assert get_openreview_submissions(store, "~P1", client=_client(handler)) == []


def test_ingest_endpoint_requires_configuration(client, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "ORCID_ID", None)
    monkeypatch.setattr(settings, "OPENREVIEW_ID", None)

    assert client.post("/api/ingest/orcid", headers=admin_headers).status_code == 400
    assert client.post("/api/ingest/openreview", headers=admin_headers).status_code == 400


def test_ingest_endpoint(client, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "ORCID_ID", "0000-0001")
    monkeypatch.setattr(
        "research_links.api.ingest.get_orcid_works",
        lambda store, orcid_id: [{"slug": "orcid-1"}],
    )

    body = client.post("/api/ingest/orcid", headers=admin_headers).json()

    assert body == {"source": "orcid", "total": 1, "works": [{"slug": "orcid-1"}]}


@pytest.mark.parametrize("payload", [
    ["not", "a", "dict"],
    {"group": [{"work-summary": [{"put-code": 1, "title": "plain string"}]}]},
    {"group": "nope"},
])
def test_orcid_malformed_payload_returns_empty(store, payload):
    def handler(request):
        return httpx.Response(200, json=payload)

    assert get_orcid_works(store, "0000-0001", client=_client(handler)) == []


@pytest.mark.parametrize("profiles", [
    {"profiles": [{"content": {}}]},
    {"profiles": ["~P1"]},
    ["unexpected"],
])
def test_openreview_malformed_profile_returns_empty(store, monkeypatch, profiles):
    monkeypatch.setattr(settings, "OPENREVIEW_USERNAME", None)

    def handler(request):
        if request.url.path == "/profiles":
            return httpx.Response(200, json=profiles)
        return httpx.Response(200, json={"notes": []})

    assert get_openreview_submissions(store, "~P1", client=_client(handler)) == []


def test_openreview_malformed_notes_return_empty(store, monkeypatch):
    monkeypatch.setattr(settings, "OPENREVIEW_USERNAME", None)

    def handler(request):
        if request.url.path == "/profiles":
            return httpx.Response(200, json={"profiles": [{"id": "~P1"}]})
        return httpx.Response(200, json={"notes": [{"id": "n1", "content": "not a dict"}]})

    assert get_openreview_submissions(store, "~P1", client=_client(handler)) == []


def test_ingest_endpoint_survives_malformed_source(client, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "OPENREVIEW_ID", "~P1")
    monkeypatch.setattr(settings, "OPENREVIEW_USERNAME", None)

    def handler(request):
        return httpx.Response(200, json={"profiles": [{"content": {}}]})

    monkeypatch.setattr(
        "research_links.api.ingest.get_openreview_submissions",
        lambda store, user_id: get_openreview_submissions(store, user_id, client=_client(handler)),
    )

    body = client.post("/api/ingest/openreview", headers=admin_headers).json()

    assert body == {"source": "openreview", "total": 0, "works": []}
