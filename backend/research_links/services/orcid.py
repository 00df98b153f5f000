import logging
from typing import List, Optional

import httpx
import redis

from ..config import settings
from .ingest import ImportedWork, cache_works, dedupe_works, extract_value

logger = logging.getLogger(__name__)

ORCID_API_URL = "https://pub.orcid.org/v3.0"


def _date_part(date: dict, part: str) -> int:
    try:
        return int(extract_value(date.get(part)) or 0)
    except ValueError:
        return 0


def parse_work(work: dict, orcid_id: str) -> Optional[ImportedWork]:
    """Turn one ORCID work-summary into an ImportedWork"""
    put_code = work.get("put-code")
    if put_code is None:
        return None

    title = extract_value((work.get("title") or {}).get("title"))
    journal = extract_value(work.get("journal-title"))
    description = work.get("short-description") or journal

    external_ids = (work.get("external-ids") or {}).get("external-id") or []
    doi = next((i for i in external_ids if i.get("external-id-type") == "doi"), None)
    doi_url = extract_value(doi.get("external-id-url")) if doi else ""
    target = doi_url or extract_value(work.get("url")) or f"https://orcid.org/{orcid_id}"

    date = work.get("publication-date") or {}

    return ImportedWork(
        slug=f"orcid-{put_code}",
        target=target,
        title=title,
        description=description or "",
        tags=[journal] if journal else [],
        published=(_date_part(date, "year"), _date_part(date, "month"), _date_part(date, "day")),
        proceedings="proceedings" in journal.lower(),
    )


def parse_works(payload: dict, orcid_id: str) -> List[ImportedWork]:
    """First work-summary of every group in a /works response"""
    works = []
    for group in payload.get("group") or []:
        summaries = group.get("work-summary") or []
        if not summaries:
            continue
        work = parse_work(summaries[0], orcid_id)
        if work is not None:
            works.append(work)
    return works


def fetch_orcid_works(orcid_id: str, client: Optional[httpx.Client] = None) -> List[ImportedWork]:
    """
    Fetch the public works of an ORCID record.

    Returns an empty list when the API cannot be reached or answers
    with an unexpected payload.
    """
    url = f"{ORCID_API_URL}/{orcid_id}/works"

    try:
        if client is None:
            with httpx.Client(timeout=settings.HTTP_TIMEOUT) as own_client:
                response = own_client.get(url, headers={"Accept": "application/json"})
        else:
            response = client.get(url, headers={"Accept": "application/json"})
    except httpx.HTTPError as e:
        logger.error("Error fetching ORCID works for %s: %s", orcid_id, e)
        return []

    if response.status_code != 200:
        logger.error("Error fetching ORCID works for %s: HTTP %d", orcid_id, response.status_code)
        return []

    try:
        payload = response.json()
    except ValueError:
        logger.error("ORCID returned invalid JSON for %s", orcid_id)
        return []

    try:
        works = parse_works(payload, orcid_id)
    except (KeyError, TypeError, AttributeError) as e:
        logger.error("Malformed ORCID response for %s: %r", orcid_id, e)
        return []

    logger.info("Fetched %d ORCID works for %s", len(works), orcid_id)
    return works


def get_orcid_works(
    store: redis.Redis,
    orcid_id: Optional[str],
    client: Optional[httpx.Client] = None
) -> List[dict]:
    """Fetch, deduplicate and cache ORCID works as links"""
    if not orcid_id:
        return []

    works = dedupe_works(fetch_orcid_works(orcid_id, client))
    return cache_works(store, works)
