from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional, Union


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return str(value)


class LinkFields(BaseModel):
    """
    Link fields shared by create and update payloads.

    Loose input is coerced instead of rejected so a bulk request can
    report each item on its own.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Union[List[str], str, None] = None
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    github_repo: Optional[str] = Field(None, alias="githubRepo")

    class Config:
        populate_by_name = True

    @field_validator("title", "description", "start_date", "end_date", "github_repo", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _text(v)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v):
        if isinstance(v, list):
            return [str(tag) for tag in v if tag is not None]
        if not v:
            return None
        return _text(v)


class LinkCreate(LinkFields):
    """Schema for creating or replacing a link"""
    slug: Optional[str] = Field(None, description="Short path segment")
    target: Optional[str] = Field(None, description="Destination URL")
    permanent: bool = False

    @field_validator("slug", "target", mode="before")
    @classmethod
    def strings_only(cls, v):
        return v if isinstance(v, str) else None

    @field_validator("permanent", mode="before")
    @classmethod
    def truthy(cls, v):
        return bool(v)


class LinkBulkCreate(BaseModel):
    """Schema for creating several links at once; items are checked one by one"""
    links: Any = None


class LinkUpdate(LinkFields):
    """Schema for a partial metadata update; only fields sent are applied"""
    target: Optional[str] = None
    permanent: Optional[bool] = None

    @field_validator("target", mode="before")
    @classmethod
    def coerce_target(cls, v):
        return _text(v)

    @field_validator("permanent", mode="before")
    @classmethod
    def truthy(cls, v):
        return None if v is None else bool(v)


class LinkBulkUpdate(BaseModel):
    """Schema for applying one update to several links"""
    slugs: Any = None
    updates: Any = None
