import logging
from typing import List, Optional

import httpx
import redis

from ..config import settings
from .ingest import ImportedWork, cache_works, dedupe_works, extract_value

logger = logging.getLogger(__name__)

OPENREVIEW_API_URL = "https://api2.openreview.net"
OPENREVIEW_SITE_URL = "https://openreview.net"

SUBMISSION_INVITATIONS = ("/-/Submission", "/-/Blind_Submission", "/-/Paper", "/-/Proceedings")


class OpenReviewError(Exception):
    """Raised when the OpenReview API answers with an error"""
    pass


def get_auth_token(client: httpx.Client, username: str, password: str) -> Optional[str]:
    """Log in and return a bearer token, None on failure"""
    try:
        response = client.post(
            f"{OPENREVIEW_API_URL}/login",
            json={"id": username, "password": password},
        )
    except httpx.HTTPError as e:
        logger.error("Error getting OpenReview auth token: %s", e)
        return None

    if response.status_code != 200:
        logger.error("Error authenticating with OpenReview: HTTP %d", response.status_code)
        return None

    try:
        return response.json().get("token")
    except (ValueError, AttributeError):
        logger.error("OpenReview login returned an unexpected body")
        return None


def is_submission(note: dict) -> bool:
    """
    A note is a submission if it carries a submission-like invitation
    or has title, abstract and a pdf or venue. Deleted notes never are.
    """
    if note.get("ddate"):
        return False

    invitations = note.get("invitations") or []
    if any(marker in inv for inv in invitations for marker in SUBMISSION_INVITATIONS):
        return True

    content = note.get("content") or {}
    return bool(
        extract_value(content.get("title"))
        and extract_value(content.get("abstract"))
        and (extract_value(content.get("pdf")) or extract_value(content.get("venue")))
    )


def parse_note(note: dict) -> ImportedWork:
    """Turn one OpenReview note into an ImportedWork"""
    content = note.get("content") or {}
    note_id = note["id"]
    venue = extract_value(content.get("venue"))
    invitations = note.get("invitations") or []
    created = note.get("cdate") or note.get("tcdate") or 0
    if not isinstance(created, (int, float)):
        created = 0

    if extract_value(content.get("pdf")):
        target = f"{OPENREVIEW_SITE_URL}/pdf?id={note_id}"
    else:
        target = f"{OPENREVIEW_SITE_URL}/forum?id={note_id}"

    return ImportedWork(
        slug=f"openreview-{note_id}",
        target=target,
        title=extract_value(content.get("title")),
        description=extract_value(content.get("abstract")),
        tags=[venue or "OpenReview"],
        published=(created,),
        proceedings=(
            any("/-/Proceedings" in inv for inv in invitations)
            or "proceedings" in venue.lower()
        ),
    )


def _get_json(client: httpx.Client, url: str, params: dict, headers: dict) -> dict:
    response = client.get(url, params=params, headers=headers)
    if response.status_code != 200:
        raise OpenReviewError(f"HTTP {response.status_code} from {url}")
    return response.json()


def fetch_submissions(
    user_id: str,
    client: httpx.Client,
    username: Optional[str] = None,
    password: Optional[str] = None
) -> List[ImportedWork]:
    headers = {"User-Agent": "research-links/1.0"}

    if username and password:
        token = get_auth_token(client, username, password)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        else:
            logger.warning("OpenReview login failed, continuing unauthenticated")

    profiles = _get_json(client, f"{OPENREVIEW_API_URL}/profiles", {"id": user_id}, headers)
    if not profiles.get("profiles"):
        logger.error("No OpenReview profile found for %s", user_id)
        return []

    profile = profiles["profiles"][0]
    profile_id = profile.get("id") if isinstance(profile, dict) else None
    if not profile_id:
        logger.error("OpenReview profile for %s has no id", user_id)
        return []

    notes = _get_json(
        client,
        f"{OPENREVIEW_API_URL}/notes",
        {
            "content.authorids": profile_id,
            "details": "replyCount,invitation",
            "sort": "cdate:desc",
        },
        headers,
    ).get("notes") or []

    submissions = [parse_note(note) for note in notes if note.get("id") and is_submission(note)]
    logger.info(
        "OpenReview %s: %d notes, %d submissions", profile_id, len(notes), len(submissions)
    )
    return submissions


def get_openreview_submissions(
    store: redis.Redis,
    user_id: Optional[str],
    client: Optional[httpx.Client] = None
) -> List[dict]:
    """
    Fetch, deduplicate and cache OpenReview submissions as links.

    Returns an empty list when the API cannot be reached.
    """
    if not user_id:
        return []

    try:
        if client is None:
            with httpx.Client(timeout=settings.HTTP_TIMEOUT) as own_client:
                works = fetch_submissions(
                    user_id, own_client, settings.OPENREVIEW_USERNAME, settings.OPENREVIEW_PASSWORD
                )
        else:
            works = fetch_submissions(
                user_id, client, settings.OPENREVIEW_USERNAME, settings.OPENREVIEW_PASSWORD
            )
    except (httpx.HTTPError, OpenReviewError, ValueError) as e:
        logger.error("Error fetching OpenReview submissions for %s: %s", user_id, e)
        return []
    except (KeyError, TypeError, AttributeError) as e:
        logger.error("Malformed OpenReview response for %s: %r", user_id, e)
        return []

    return cache_works(store, dedupe_works(works))
