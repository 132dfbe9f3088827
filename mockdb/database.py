# mockdb/database.py
"""
In-memory database: the entry point for collection lookups.

Connection URIs have the form

    xmldb:<database name>:[//<authority>]/<collection path>

The authority (host, port, [IPv6] host) is accepted but ignored; only the
scheme (which must equal the database name) and the path are used.

Example:
    db = Database("test").add_collection("db/sub1")
    db.get_collection("xmldb:test:/db/").get_name()               # "/db"
    db.get_collection("xmldb:test://host:1234/db/sub1").get_name() # "/db/sub1"
    db.get_collection("xmldb:other:/db")                           # None
"""

import logging
import re
from typing import Callable, List, Mapping, Optional, Tuple
from urllib.parse import urlsplit

from .collection import Collection, CollectionData
from .configurable import Configurable
from .errors import ErrorCode, XMLDBError
from .registry import CollectionRegistry, sanitize_path

logger = logging.getLogger(__name__)

URI_PREFIX = "xmldb:"
DEFAULT_NAME = "test"
CONFORMANCE_LEVEL = "0"

_SCHEME = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")

AuthenticationPredicate = Callable[[Optional[str], Optional[str]], bool]
Initializer = Callable[[Collection], None]


def _allow_all(user: Optional[str], password: Optional[str]) -> bool:
    return True


def _parse_uri(uri: str) -> Optional[Tuple[str, str]]:
    """
    Split a connection URI into (scheme, path).

    Returns None if the URI lacks the xmldb: prefix or cannot be parsed.
    """
    if uri is None or not uri.startswith(URI_PREFIX):
        return None
    remainder = uri[len(URI_PREFIX):]
    match = _SCHEME.match(remainder)
    if match is None:
        return None
    try:
        path = urlsplit(remainder).path
    except ValueError:
        return None
    return match.group(1), path


class Database(Configurable):
    """
    The root of an in-memory collection hierarchy.

    Usage:
        db = Database("mydb", authentication=lambda user, password: user == "admin")
        db.add_collection("/root/child/")
        db.get_collection("xmldb:mydb:/root/child", {"user": "admin"})
    """

    def __init__(self, name: Optional[str] = None,
                 authentication: Optional[AuthenticationPredicate] = None):
        """
        Args:
            name: Database name, used as the URI scheme. Blank means "test".
            authentication: Called as authentication(user, password) on every
                URI lookup; may be stateful. Defaults to accepting everyone.
        """
        super().__init__()
        self._name = name if name else DEFAULT_NAME
        self._authentication = authentication or _allow_all
        self.registry: CollectionRegistry[Collection] = CollectionRegistry()

    def get_name(self) -> str:
        return self._name

    def get_conformance_level(self) -> str:
        return CONFORMANCE_LEVEL

    def add_collection(self, path: str, initializer: Optional[Initializer] = None) -> "Database":
        """
        Add a collection and any missing parents.

        Existing collections are left untouched. The initializer is called
        once for every collection this call creates, including parents that
        did not exist yet. It runs after the collection is registered, so it may
        add child collections.

        Returns:
            self, for chaining
        """
        self.registry.add_path(path, self.create_collection, initializer)
        return self

    def create_collection(self, name: str, parent: Optional[Collection]) -> Collection:
        return Collection(CollectionData(self, name), parent)

    def get_collection_by_path(self, path: str) -> Optional[Collection]:
        return self.registry.get(path)

    def collections(self) -> List[Tuple[str, Collection]]:
        """Snapshot of every (path key, collection) pair."""
        return self.registry.items()

    def accepts_uri(self, uri: str) -> bool:
        """True if uri is an xmldb: URI naming this database. Never raises."""
        parsed = _parse_uri(uri)
        return parsed is not None and parsed[0] == self._name

    def get_collection(self, uri: str,
                       info: Optional[Mapping[str, str]] = None) -> Optional[Collection]:
        """
        Resolve a connection URI to a collection.

        Args:
            uri: Connection URI
            info: Optional properties; "user" and "password" are passed to
                the authentication predicate

        Returns:
            The collection, or None if the URI belongs to another database
            or names no collection

        Raises:
            XMLDBError: PERMISSION_DENIED if the credentials are rejected
        """
        parsed = _parse_uri(uri)
        if parsed is None:
            return None
        scheme, path = parsed
        if scheme != self._name:
            return None

        user = info.get("user") if info is not None else None
        password = info.get("password") if info is not None else None
        if not self._authentication(user, password):
            raise XMLDBError(ErrorCode.PERMISSION_DENIED, f"Access denied for user {user!r}")

        logger.debug(f"Resolving {uri} to collection {sanitize_path(path)!r}")
        return self.registry.get(path)

    def __repr__(self) -> str:
        return f"Database({self._name!r}, collections={len(self.registry)})"
