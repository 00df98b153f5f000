import csv
import io
from typing import List, Optional

import yaml

from ..models import Link
from . import links as link_store

EXPORT_FIELDS = [
    "slug",
    "target",
    "title",
    "description",
    "tags",
    "source",
    "clicks",
    "permanent",
    "createdAt",
    "startDate",
    "endDate",
    "githubRepo",
]


def build_rows(links: List[Link], source: Optional[str] = None) -> List[dict]:
    """Flatten links into export rows, newest first"""
    rows = []
    for link in link_store.sort_newest_first(links):
        if source and link.source != source:
            continue

        meta = link.metadata
        rows.append({
            "slug": link.slug,
            "target": link.target,
            "title": meta.title or "",
            "description": meta.description or "",
            "tags": ",".join(meta.tags),
            "source": link.source,
            "clicks": link.clicks,
            "permanent": meta.permanent,
            "createdAt": meta.created_at or "",
            "startDate": meta.start_date or "",
            "endDate": meta.end_date or "",
            "githubRepo": meta.github_repo or "",
        })
    return rows


def to_csv(rows: List[dict]) -> str:
    """Render rows as CSV; fields with commas, quotes or newlines are quoted"""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=EXPORT_FIELDS, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({
            **row,
            "permanent": "true" if row["permanent"] else "false",
        })
    return buf.getvalue()


def to_yaml(rows: List[dict]) -> str:
    return yaml.safe_dump(rows, allow_unicode=True, default_flow_style=False, sort_keys=False, width=120)
