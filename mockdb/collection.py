# mockdb/collection.py
"""
Collections: the nodes of the database hierarchy.

A collection knows its own short name, its parent and its database. Its
full name is computed by walking up the parent links. Child collections
are not stored on the node; they are found by asking the database
registry for keys one segment below this collection's path.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, List, Optional, Type

from .configurable import Configurable
from .errors import ErrorCode, XMLDBError
from .registry import DELIMITER, join_path
from .resources import BaseResource, BinaryResource, ResourceTable, XMLResource

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionData:
    """
    Identity of a collection.

    Attributes:
        db: The owning database
        name: Single path segment; must not be blank or contain a slash
        creation: Creation timestamp (UTC)
    """
    db: "Database"
    name: str
    creation: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if self.db is None:
            raise ValueError("Collection requires a database")
        if self.name is None or not self.name.strip() or DELIMITER in self.name:
            raise ValueError("Collection is blank or contains a slash")


class Collection(Configurable):
    """
    A collection of resources and child collections.

    Usage:
        db = Database().add_collection("db")
        collection = db.get_collection_by_path("db")
        res = collection.create_resource("doc.xml", XMLResource)
        res.set_content("<doc/>")
        collection.store_resource(res)
    """

    def __init__(self, data: CollectionData, parent: Optional["Collection"] = None):
        super().__init__()
        self._data = data
        self._parent = parent
        self._resources = ResourceTable()
        self._closed = False

    def name(self) -> str:
        """Short name, without any parent names."""
        return self._data.name

    def path(self) -> str:
        """Registry key of this collection: names joined by '/', no leading slash."""
        names: List[str] = []
        self.traverse_hierarchy(names.append)
        return join_path(*names)

    def traverse_hierarchy(self, action: Callable[[str], None]):
        """Apply action to each name from the root collection down to this one."""
        if self._parent is not None:
            self._parent.traverse_hierarchy(action)
        action(self.name())

    def get_name(self) -> str:
        return DELIMITER + self.path()

    def get_database(self) -> "Database":
        return self._data.db

    def get_parent_collection(self) -> Optional["Collection"]:
        return self._parent

    def get_creation_time(self) -> datetime:
        return self._data.creation

    # Hierarchy

    def add_collection(self, child: str):
        """Add a collection below this one. child may span several segments."""
        self._data.db.add_collection(join_path(self.path(), child))

    def get_child_collection(self, name: str) -> Optional["Collection"]:
        return self._data.db.get_collection_by_path(join_path(self.path(), name))

    def list_child_collections(self) -> List[str]:
        """Short names of the direct children."""
        return [node.name() for _, node in self._data.db.registry.children(self.path())]

    def get_child_collection_count(self) -> int:
        return len(self._data.db.registry.children(self.path()))

    # Resources

    def create_resource(self, id: str, resource_type: Type[BaseResource]) -> BaseResource:
        """
        Create a new, unstored resource of the given type.

        Raises:
            XMLDBError: INVALID_RESOURCE for anything but XMLResource or BinaryResource
        """
        if resource_type is BinaryResource:
            return BinaryResource(id, self)
        if resource_type is XMLResource:
            return XMLResource(id, self)
        raise XMLDBError(ErrorCode.INVALID_RESOURCE, f"Unsupported resource type: {resource_type}")

    def add_resource(self, id: str,
                     create_action: Callable[[str, "Collection"], BaseResource]) -> BaseResource:
        """Create a resource with create_action(id, self) and store it."""
        resource = create_action(id, self)
        self._resources.store(resource)
        return resource

    def store_resource(self, resource: BaseResource):
        self._resources.store(resource)

    def remove_resource(self, resource: BaseResource):
        self._resources.remove(resource.get_id())

    def get_resource(self, id: str) -> Optional[BaseResource]:
        return self._resources.get(id)

    def get_resource_count(self) -> int:
        return self._resources.count()

    def list_resources(self) -> List[str]:
        return self._resources.ids()

    def create_id(self) -> str:
        raise XMLDBError(ErrorCode.NOT_IMPLEMENTED)

    # Services

    def has_service(self, service_type: type) -> bool:
        return False

    def find_service(self, service_type: type):
        """Look up an optional service. No services exist, so always None."""
        return None

    def get_service(self, service_type: type):
        raise XMLDBError(ErrorCode.NOT_IMPLEMENTED)

    # Lifecycle

    def is_open(self) -> bool:
        return not self._closed

    def close(self):
        """Mark closed. Children and resources are unaffected."""
        self._closed = True
        logger.debug(f"Closed collection {self.get_name()}")

    def __str__(self) -> str:
        return self.name()

    def __repr__(self) -> str:
        return f"Collection({self.get_name()!r})"
