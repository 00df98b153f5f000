from .link import LinkCreate, LinkBulkCreate, LinkUpdate, LinkBulkUpdate
from .collection import CollectionCreate, CollectionUpdate
from .tag import TagAssign, TagRename, TagDelete

__all__ = [
    "LinkCreate", "LinkBulkCreate", "LinkUpdate", "LinkBulkUpdate",
    "CollectionCreate", "CollectionUpdate",
    "TagAssign", "TagRename", "TagDelete",
]
