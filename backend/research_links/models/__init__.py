from .link import Link, LinkMetadata
from .collection import Collection

__all__ = ["Link", "LinkMetadata", "Collection"]
