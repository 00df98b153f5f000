"""
Import publications from ORCID and OpenReview into the link store.

Run this script whenever new works should appear in the directory:
    python sync_sources.py

Ids are read from ORCID_ID and OPENREVIEW_ID (environment or .env).
Metadata already stored for a work is never overwritten.
"""

from research_links.config import settings
from research_links.services.openreview import get_openreview_submissions
from research_links.services.orcid import get_orcid_works
from research_links.store import get_redis, check_redis_health, close_redis


def sync_orcid(store) -> int:
    """Import ORCID works"""
    if not settings.ORCID_ID:
        print("ORCID_ID not set, skipping ORCID.")
        return 0

    print(f"Fetching ORCID works for {settings.ORCID_ID}...")
    works = get_orcid_works(store, settings.ORCID_ID)
    print(f"  - {len(works)} ORCID works cached")
    return len(works)


def sync_openreview(store) -> int:
    """Import OpenReview submissions"""
    if not settings.OPENREVIEW_ID:
        print("OPENREVIEW_ID not set, skipping OpenReview.")
        return 0

    print(f"Fetching OpenReview submissions for {settings.OPENREVIEW_ID}...")
    works = get_openreview_submissions(store, settings.OPENREVIEW_ID)
    print(f"  - {len(works)} OpenReview submissions cached")
    return len(works)


def main() -> int:
    store = get_redis()

    if not check_redis_health(store):
        print(f"Cannot reach Redis at {settings.REDIS_URL}")
        return 1

    try:
        total = sync_orcid(store) + sync_openreview(store)
    finally:
        close_redis()

    print(f"\nSync complete: {total} works in the directory.")
    return 0


if __name__ == "__main__":
    print("=" * 50)
    print("Research Links - Source Sync")
    print("=" * 50)

    raise SystemExit(main())
