# mockdb/layout.py
"""
YAML database layouts.

A layout describes a database fixture: its name, its collections and the
resources stored in them.

    name: test
    collections:
      - db/sub1
      - path: db/sub2
        resources:
          - id: doc.xml
            type: xml
            content: "<doc/>"
          - id: logo.png
            type: binary
            base64: "iVBORw0KGgo="

Binary resources take either `content` (stored as UTF-8) or `base64`.
"""

import base64
import binascii
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .database import AuthenticationPredicate, Database
from .registry import join_path, split_path
from .resources import RESOURCE_TYPES

logger = logging.getLogger(__name__)


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string, got {type(value).__name__}: {value!r}")
    return value


@dataclass
class ResourceSpec:
    """A resource to create in a collection."""
    id: str
    type: str = "xml"
    content: Optional[str] = None
    base64: Optional[str] = None

    def payload(self):
        """Content in the form the resource type stores."""
        if self.type == "binary":
            if self.base64 is not None:
                try:
                    return base64.b64decode(self.base64, validate=True)
                except binascii.Error as e:
                    raise ValueError(f"Invalid base64 for resource {self.id}: {e}") from e
            return (self.content or "").encode("utf-8")
        return self.content or ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "type": self.type}
        if self.content is not None:
            data["content"] = self.content
        if self.base64 is not None:
            data["base64"] = self.base64
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResourceSpec":
        if not isinstance(data, dict) or "id" not in data:
            raise ValueError(f"Resource entry needs an id: {data!r}")
        resource_type = data.get("type", "xml")
        if resource_type not in RESOURCE_TYPES:
            raise ValueError(f"Unknown resource type: {resource_type}")
        return cls(
            id=str(data["id"]),
            type=resource_type,
            content=_optional_str(data, "content"),
            base64=_optional_str(data, "base64"),
        )


@dataclass
class CollectionSpec:
    """A collection path and the resources it holds."""
    path: str
    resources: List[ResourceSpec] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        if not self.resources:
            return {"path": self.path}
        return {"path": self.path, "resources": [r.to_dict() for r in self.resources]}

    @classmethod
    def from_dict(cls, data: Any) -> "CollectionSpec":
        # A bare string is shorthand for a collection without resources
        if isinstance(data, str):
            return cls(path=data)
        if not isinstance(data, dict) or not isinstance(data.get("path"), str):
            raise ValueError(f"Collection entry needs a string path: {data!r}")
        resources = data.get("resources") or []
        if not isinstance(resources, list):
            raise ValueError(f"Resources of {data['path']} must be a list")
        return cls(
            path=data["path"],
            resources=[ResourceSpec.from_dict(r) for r in resources],
        )


@dataclass
class Layout:
    """Parsed database layout."""
    name: Optional[str] = None
    collections: List[CollectionSpec] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "Layout":
        """Parse a layout from a YAML string."""
        try:
            data = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid layout YAML: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Layout must be a mapping")
        collections = data.get("collections") or []
        if not isinstance(collections, list):
            raise ValueError("Layout collections must be a list")
        return cls(
            name=_optional_str(data, "name"),
            collections=[CollectionSpec.from_dict(c) for c in collections],
        )

    @classmethod
    def from_file(cls, path: Path | str) -> "Layout":
        """Load a layout from a YAML file."""
        with open(path, "r") as f:
            return cls.from_yaml(f.read())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "collections": [c.to_dict() for c in self.collections],
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    def build(self, authentication: Optional[AuthenticationPredicate] = None) -> Database:
        """Create a database populated with this layout."""
        db = Database(self.name, authentication)
        for entry in self.collections:
            db.add_collection(entry.path)
            collection = db.get_collection_by_path(join_path(*split_path(entry.path)))
            if collection is None:
                raise ValueError(f"Collection path has no segments: {entry.path!r}")
            for res in entry.resources:
                resource = collection.create_resource(res.id, RESOURCE_TYPES[res.type])
                resource.set_content(res.payload())
                collection.store_resource(resource)
        logger.debug(f"Built database {db.get_name()} with {len(db.registry)} collections")
        return db
