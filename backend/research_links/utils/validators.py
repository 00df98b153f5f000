import re
from typing import Iterable, List, Optional, Union
from urllib.parse import urlparse


TARGET_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def is_valid_target(url: Optional[str]) -> tuple[bool, str]:
    """
    Validate a redirect target: an http(s) URL with a host, at most
    2048 characters.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url:
        return False, "target is required"

    if len(url) > 2048 or not TARGET_SCHEME.match(url) or not urlparse(url).netloc:
        return False, "target must start with http(s)://"

    return True, ""


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-joined field, dropping empty entries"""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def join_tags(tags: Union[str, Iterable[str], None]) -> str:
    """Join tags given as a list or a comma-separated string"""
    if tags is None:
        return ""
    if isinstance(tags, str):
        return ",".join(split_csv(tags))
    return ",".join(tag.strip() for tag in tags if tag and tag.strip())


def merge_tags(existing: List[str], extra: Iterable[str]) -> List[str]:
    """Case-sensitive set union, first-seen order kept"""
    merged = []
    for tag in list(existing) + list(extra):
        if tag and tag not in merged:
            merged.append(tag)
    return merged
