from pydantic import BaseModel, Field
from typing import Any, Optional


class TagAssign(BaseModel):
    """Schema for adding or removing tags on several links; both must be arrays"""
    slugs: Any = None
    tags: Any = None


class TagRename(BaseModel):
    old_tag: Optional[str] = Field(None, alias="oldTag")
    new_tag: Optional[str] = Field(None, alias="newTag")

    class Config:
        populate_by_name = True


class TagDelete(BaseModel):
    tag: Optional[str] = None
