# mockdb/resources.py
"""
Resources stored in collections.

Two content types exist:
- XMLResource: textual (XML) content held as a str
- BinaryResource: raw bytes, copied on every read and write

Each collection keeps its resources in a ResourceTable keyed by id.
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import IO, TYPE_CHECKING, Dict, Iterator, List, Optional
from xml.sax import SAXNotSupportedException

from .errors import ErrorCode, XMLDBError

if TYPE_CHECKING:
    from .collection import Collection

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class BaseResource(ABC):
    """
    Metadata shared by all resource types.

    Attributes:
        id: Unique within the owning collection
        creation: When the resource was created
        last_modification: Updated on every content write
        closed: Set by close(), never reset
    """

    def __init__(self, id: str, parent_collection: "Collection",
                 creation: Optional[datetime] = None):
        self._id = id
        self._parent_collection = parent_collection
        self._creation = creation or _now()
        self._last_modification = self._creation
        self._closed = False

    def _touch(self):
        """Record a content change."""
        self._last_modification = max(_now(), self._last_modification)

    def get_id(self) -> str:
        return self._id

    def get_parent_collection(self) -> "Collection":
        return self._parent_collection

    def get_creation_time(self) -> datetime:
        return self._creation

    def get_last_modification_time(self) -> datetime:
        return self._last_modification

    def is_closed(self) -> bool:
        return self._closed

    def close(self):
        self._closed = True

    @abstractmethod
    def get_content(self):
        """Return the stored content."""

    @abstractmethod
    def set_content(self, value):
        """Replace the content and record the change."""

    @abstractmethod
    def get_content_as_stream(self, sink: IO[bytes]):
        """Write the content to a binary sink."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._id!r})"


class BinaryResource(BaseResource):
    """Resource holding raw bytes."""

    def __init__(self, id: str, parent_collection: "Collection",
                 creation: Optional[datetime] = None):
        super().__init__(id, parent_collection, creation)
        self._content: Optional[bytearray] = None

    def get_content(self) -> Optional[bytes]:
        """Return a copy of the stored bytes."""
        if self._content is None:
            return None
        return bytes(self._content)

    def set_content(self, value: bytes):
        """Store a private copy of value."""
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise XMLDBError(ErrorCode.VENDOR_ERROR, "Content must be bytes")
        self._content = bytearray(value)
        self._touch()

    def get_content_as_stream(self, sink: IO[bytes]):
        """Write the stored bytes to sink."""
        try:
            sink.write(bytes(self._content or b""))
        except OSError as e:
            raise XMLDBError(ErrorCode.VENDOR_ERROR, str(e)) from e


class XMLResource(BaseResource):
    """Resource holding XML text. DOM and SAX access are not supported."""

    def __init__(self, id: str, parent_collection: "Collection",
                 creation: Optional[datetime] = None):
        super().__init__(id, parent_collection, creation)
        self._content: Optional[str] = None

    def get_document_id(self) -> str:
        return self.get_id()

    def get_content(self) -> Optional[str]:
        return self._content

    def set_content(self, value: str):
        if not isinstance(value, str):
            raise XMLDBError(ErrorCode.VENDOR_ERROR, "Content must be of type String")
        self._content = value
        self._touch()

    def get_content_as_stream(self, sink: IO[bytes]):
        """Write the content to sink as UTF-8."""
        try:
            sink.write((self._content or "").encode("utf-8"))
        except OSError as e:
            raise XMLDBError(ErrorCode.VENDOR_ERROR, str(e)) from e

    def set_content_as_stream(self, source: IO[bytes]):
        """Replace the content with the UTF-8 text read from source, then close it."""
        try:
            with source:
                data = source.read()
        except OSError as e:
            raise XMLDBError(ErrorCode.VENDOR_ERROR, str(e)) from e
        # Malformed sequences become U+FFFD
        self._content = data.decode("utf-8", errors="replace")
        self._touch()

    def get_content_as_dom(self):
        raise XMLDBError(ErrorCode.NOT_IMPLEMENTED)

    def set_content_as_dom(self, content):
        raise XMLDBError(ErrorCode.NOT_IMPLEMENTED)

    def get_content_as_sax(self, handler):
        raise XMLDBError(ErrorCode.NOT_IMPLEMENTED)

    def set_content_as_sax(self):
        raise XMLDBError(ErrorCode.NOT_IMPLEMENTED)

    def set_sax_feature(self, feature: str, value: bool):
        raise SAXNotSupportedException(feature)

    def get_sax_feature(self, feature: str) -> bool:
        return False

    def set_xml_reader(self, xml_reader):
        pass


RESOURCE_TYPES = {
    "xml": XMLResource,
    "binary": BinaryResource,
}


class ResourceTable:
    """
    Per-collection mapping of resource id -> resource.

    Single operations are thread-safe. Sequences of operations
    (count then store, for example) are not atomic.
    """

    def __init__(self):
        self._resources: Dict[str, BaseResource] = {}
        self._lock = threading.Lock()

    def store(self, resource: BaseResource):
        """Insert or overwrite by id."""
        with self._lock:
            self._resources[resource.get_id()] = resource
        logger.debug(f"Stored resource: {resource.get_id()}")

    def remove(self, id: str):
        """Delete by id. Unknown ids are ignored."""
        with self._lock:
            self._resources.pop(id, None)

    def get(self, id: str) -> Optional[BaseResource]:
        return self._resources.get(id)

    def count(self) -> int:
        return len(self._resources)

    def ids(self) -> List[str]:
        """Snapshot of the stored ids, in no particular order."""
        with self._lock:
            return list(self._resources.keys())

    def __contains__(self, id: str) -> bool:
        return id in self._resources

    def __len__(self) -> int:
        return self.count()


class ResourceIterator:
    """Iterator over query results. This database has no queries, so it is always empty."""

    def has_more_resources(self) -> bool:
        return False

    def next_resource(self) -> Optional[BaseResource]:
        return None

    def __iter__(self) -> Iterator[BaseResource]:
        return iter(())
