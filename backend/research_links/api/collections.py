from typing import Optional

import redis
from fastapi import APIRouter, Depends, HTTPException

from ..core.security import require_admin
from ..core.slugs import is_valid_collection_id
from ..schemas.collection import CollectionCreate, CollectionUpdate
from ..services import collections as collection_store
from ..store import get_store

router = APIRouter()

INVALID_ID = "id must contain only alphanumeric characters, hyphens, and underscores"


@router.get("/collections")
async def get_collections(
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """List all collections"""
    collections = collection_store.list_collections(store)
    return {"collections": [c.as_dict() for c in collections]}


@router.post("/collections")
async def create_collection(
    payload: CollectionCreate,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Create a collection.

    Fails with 409 if the id is taken.
    """
    if not payload.id or not payload.name:
        raise HTTPException(status_code=400, detail="id and name are required")

    if not is_valid_collection_id(payload.id):
        raise HTTPException(status_code=400, detail=INVALID_ID)

    if collection_store.collection_exists(store, payload.id):
        raise HTTPException(status_code=409, detail="collection already exists")

    collection_store.create_collection(
        store,
        payload.id,
        payload.name,
        description=payload.description,
        projects=payload.projects,
        tags=payload.tags,
    )

    return {"success": True, "id": payload.id}


@router.put("/collections")
async def update_collection(
    payload: CollectionUpdate,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """Update the fields sent for an existing collection"""
    if not payload.id:
        raise HTTPException(status_code=400, detail="id is required")

    if not is_valid_collection_id(payload.id):
        raise HTTPException(status_code=400, detail=INVALID_ID)

    if not collection_store.collection_exists(store, payload.id):
        raise HTTPException(status_code=404, detail="collection not found")

    fields = payload.model_dump(exclude_unset=True, exclude={"id"})
    collection_store.update_collection(store, payload.id, fields)

    return {"success": True, "id": payload.id}


@router.delete("/collections")
async def delete_collection(
    id: Optional[str] = None,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """Delete a collection; the links it groups are untouched"""
    if not id:
        raise HTTPException(status_code=400, detail="id is required")

    if not is_valid_collection_id(id):
        raise HTTPException(status_code=400, detail=INVALID_ID)

    collection_store.delete_collection(store, id)
    return {"success": True}
