import re


SLUG_PATTERN = re.compile(r"^[a-z0-9\-_]+$")
LEADING_SEPARATORS = re.compile(r"^[\s/]+")
COLLECTION_ID_PATTERN = re.compile(r"^[a-z0-9\-_]+$", re.IGNORECASE)

# Slug prefixes of imported records
SOURCE_PREFIXES = (
    ("orcid-", "orcid"),
    ("openreview-", "openreview"),
)
SOURCES = ("manual", "orcid", "openreview")


def normalize_slug(slug: str) -> str:
    """
    Normalize a slug for storage and lookup.

    Drops leading whitespace and slashes, trims and lowercases, so
    normalize_slug(normalize_slug(s)) == normalize_slug(s).
    """
    if not slug:
        return ""

    return LEADING_SEPARATORS.sub("", slug).strip().lower()


def validate_slug(slug: str) -> tuple[bool, str]:
    """
    Validate a slug after normalization.

    Args:
        slug: The raw slug

    Returns:
        Tuple of (is_valid, error_message)
    """
    key = normalize_slug(slug)

    if not key:
        return False, "slug is required"

    if not SLUG_PATTERN.match(key):
        return False, "invalid slug"

    return True, ""


def is_valid_collection_id(collection_id: str) -> bool:
    return bool(collection_id) and COLLECTION_ID_PATTERN.match(collection_id) is not None


def source_of(slug: str) -> str:
    """Classify a slug by where its link came from"""
    for prefix, source in SOURCE_PREFIXES:
        if slug.startswith(prefix):
            return source
    return "manual"
