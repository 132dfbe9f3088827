# mockdb/registry.py
"""
Collection registry.

The registry is the flat structure behind the collection hierarchy: it maps
canonical path keys ("db", "db/sub1", ...) to collection nodes. A key never
has a leading or trailing slash. Nodes are only ever added, never removed.

Example:
    registry = CollectionRegistry()
    node = registry.add_path("/db/sub1/", lambda name, parent: Node(name, parent))
    registry.get("db/sub1") is node    # True
    registry.children("db")            # [("db/sub1", node)]
"""

import logging
import re
import threading
from typing import Callable, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

DELIMITER = "/"

_TRAILING_DELIMITERS = re.compile(r"/+$")

N = TypeVar("N")


def sanitize_path(path: str) -> str:
    """
    Turn a user supplied path into a registry key.

    Strips a single leading slash and every trailing slash:
    "/db/sub1//" -> "db/sub1".
    """
    if path.startswith(DELIMITER):
        path = path[1:]
    return _TRAILING_DELIMITERS.sub("", path)


def split_path(path: str) -> List[str]:
    """Split a path into its segments, dropping blank ones."""
    return [segment for segment in path.split(DELIMITER) if segment.strip()]


def join_path(*segments: str) -> str:
    return DELIMITER.join(segments)


class CollectionRegistry(Generic[N]):
    """
    Thread-safe mapping of path key -> collection node.

    Creation is insert-if-absent and atomic per key: when several threads
    race to add the same path, the factory and on_create run exactly once
    for that key and every caller gets the same node back.
    """

    def __init__(self):
        self._nodes: Dict[str, N] = {}
        self._lock = threading.Lock()

    def add_path(
        self,
        path: str,
        factory: Callable[[str, Optional[N]], N],
        on_create: Optional[Callable[[N], None]] = None,
    ) -> Optional[N]:
        """
        Create every missing prefix of path.

        Args:
            path: Slash delimited path; blank segments are ignored
            factory: Called as factory(segment, parent) for each key that
                does not exist yet. parent is None for a first level node.
            on_create: Called with each node this call created, after it is
                registered and outside the registry lock, so it may add
                further paths.

        Returns:
            The node for the full path, or None if path has no segments
        """
        parent: Optional[N] = None
        prefix: List[str] = []
        for segment in split_path(path):
            prefix.append(segment)
            parent, created = self._get_or_create(join_path(*prefix), segment, parent, factory)
            if created and on_create is not None:
                on_create(parent)
        return parent

    def _get_or_create(self, key: str, segment: str, parent: Optional[N],
                       factory) -> Tuple[N, bool]:
        """Return (node, created). factory must not call back into the registry."""
        node = self._nodes.get(key)
        if node is not None:
            return node, False
        with self._lock:
            node = self._nodes.get(key)
            if node is not None:
                return node, False
            node = factory(segment, parent)
            self._nodes[key] = node
        logger.debug(f"Created collection node: {key}")
        return node, True

    def get(self, path: str) -> Optional[N]:
        """Look up a node by path. Never creates."""
        return self._nodes.get(sanitize_path(path))

    def children(self, path: str) -> List[Tuple[str, N]]:
        """
        Direct children of path.

        Scans every key for "<path>/<segment>", so the cost grows with the
        size of the registry, not with the number of children.
        """
        pattern = re.compile(f"^{re.escape(sanitize_path(path))}/([^/]+)$")
        return [(key, node) for key, node in self.items() if pattern.match(key)]

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._nodes.keys())

    def items(self) -> List[Tuple[str, N]]:
        """Snapshot of (key, node) pairs."""
        with self._lock:
            return list(self._nodes.items())

    def __contains__(self, path: str) -> bool:
        return sanitize_path(path) in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
