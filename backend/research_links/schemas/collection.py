from pydantic import BaseModel
from typing import List, Optional, Union


class CollectionCreate(BaseModel):
    """Schema for creating a collection"""
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    projects: Union[List[str], str, None] = None
    tags: Union[List[str], str, None] = None


class CollectionUpdate(CollectionCreate):
    """Schema for updating a collection; only fields sent are applied"""
    pass
