# mockdb/configurable.py
"""Property bag shared by databases and collections."""

from typing import Dict, Optional


class Configurable:
    """Plain name -> string property storage."""

    def __init__(self):
        self._properties: Dict[str, str] = {}

    def get_property(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a property, or default when it was never set."""
        return self._properties.get(name, default)

    def set_property(self, name: str, value: str):
        self._properties[name] = value
