from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.slugs import source_of
from ..utils.validators import split_csv


@dataclass
class LinkMetadata:
    """Descriptive fields stored in the meta:<slug> hash"""
    title: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    permanent: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    github_repo: Optional[str] = None

    @classmethod
    def from_hash(cls, data: Dict[str, str]) -> "LinkMetadata":
        return cls(
            title=data.get("title") or None,
            description=data.get("description") or None,
            tags=split_csv(data.get("tags")),
            permanent=data.get("permanent") == "1",
            created_at=data.get("createdAt") or None,
            updated_at=data.get("updatedAt") or None,
            start_date=data.get("startDate") or None,
            end_date=data.get("endDate") or None,
            github_repo=data.get("githubRepo") or None,
        )

    def to_hash(self) -> Dict[str, str]:
        data = {"permanent": "1" if self.permanent else "0"}
        optional = {
            "title": self.title,
            "description": self.description,
            "tags": ",".join(self.tags),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "githubRepo": self.github_repo,
        }
        data.update({k: v for k, v in optional.items() if v})
        return data

    def as_dict(self) -> dict:
        return {
            "permanent": self.permanent,
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "githubRepo": self.github_repo,
        }


@dataclass
class Link:
    """A slug -> target mapping with its click count and metadata"""
    slug: str
    target: str
    clicks: int = 0
    metadata: LinkMetadata = field(default_factory=LinkMetadata)

    @property
    def source(self) -> str:
        return source_of(self.slug)

    @property
    def short_path(self) -> str:
        return f"/{self.slug}"

    def as_admin_entry(self) -> dict:
        return {
            "slug": self.slug,
            "target": self.target,
            "clicks": self.clicks,
            "source": self.source,
            "metadata": self.metadata.as_dict(),
        }

    def as_directory_entry(self) -> dict:
        meta = self.metadata
        return {
            "slug": self.slug,
            "target": self.target,
            "clicks": self.clicks,
            "shortUrl": self.short_path,
            "title": meta.title,
            "description": meta.description,
            "tags": list(meta.tags),
            "source": self.source,
            "createdAt": meta.created_at,
            "startDate": meta.start_date,
            "endDate": meta.end_date,
            "githubRepo": meta.github_repo,
        }

    def __repr__(self):
        return f"<Link {self.slug} -> {self.target}>"
