from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..utils.validators import split_csv


@dataclass
class Collection:
    """Named grouping of link slugs, stored in the collection:<id> hash"""
    id: str
    name: str = ""
    description: str = ""
    projects: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_hash(cls, collection_id: str, data: Dict[str, str]) -> "Collection":
        return cls(
            id=collection_id,
            name=data.get("name", ""),
            description=data.get("description", ""),
            projects=split_csv(data.get("projects")),
            tags=split_csv(data.get("tags")),
            created_at=data.get("createdAt") or None,
            updated_at=data.get("updatedAt") or None,
        )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "projects": list(self.projects),
            "tags": list(self.tags),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def __repr__(self):
        return f"<Collection {self.id} ({len(self.projects)} projects)>"
