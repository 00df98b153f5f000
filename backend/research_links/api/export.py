from datetime import date
from typing import Optional

import redis
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from ..core.security import require_admin
from ..services import links as link_store
from ..services.export import build_rows, to_csv, to_yaml
from ..store import get_store
from ..utils.dates import utc_now_iso

router = APIRouter()

MEDIA_TYPES = {
    "csv": "text/csv",
    "yaml": "application/x-yaml",
}


@router.get("/export")
async def export_links(
    format: str = "json",
    source: Optional[str] = None,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Export all links as JSON, CSV or YAML.

    CSV and YAML are sent as file attachments.
    """
    if format not in ("json", "csv", "yaml"):
        raise HTTPException(status_code=400, detail="format must be json, csv or yaml")

    rows = build_rows(link_store.get_all_links(store), source)

    if format == "json":
        return {
            "export": rows,
            "metadata": {
                "total": len(rows),
                "generatedAt": utc_now_iso(),
                "format": "json",
                "source": source or "all",
            },
        }

    content = to_csv(rows) if format == "csv" else to_yaml(rows)
    filename = f"research-export-{date.today().isoformat()}.{format}"

    return Response(
        content=content,
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
