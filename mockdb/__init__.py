# mockdb - In-memory XML:DB database for tests
#
# A test double for code written against the XML:DB client API. Collections
# form a slash delimited hierarchy and hold XML or binary resources; nothing
# is persisted.
#
# Core concepts:
# - Database: Resolves connection URIs, guarded by an authentication predicate
# - CollectionRegistry: Flat map of path -> collection behind the hierarchy
# - Collection: A node of the hierarchy, owning a table of resources
# - Resource: An XML or binary document stored in a collection

from .errors import ErrorCode, XMLDBError
from .configurable import Configurable
from .registry import CollectionRegistry, sanitize_path, split_path
from .resources import (
    BaseResource,
    BinaryResource,
    XMLResource,
    ResourceTable,
    ResourceIterator,
)
from .collection import Collection, CollectionData
from .database import Database, URI_PREFIX, DEFAULT_NAME
from .layout import Layout

__all__ = [
    # Errors
    "ErrorCode",
    "XMLDBError",
    # Core
    "Configurable",
    "CollectionRegistry",
    "sanitize_path",
    "split_path",
    "Collection",
    "CollectionData",
    "Database",
    "URI_PREFIX",
    "DEFAULT_NAME",
    # Resources
    "BaseResource",
    "BinaryResource",
    "XMLResource",
    "ResourceTable",
    "ResourceIterator",
    # Configuration
    "Layout",
]

__version__ = "0.1.0"
