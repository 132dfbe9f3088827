# mockdb/errors.py
"""
Error codes and the exception raised by the database API.

Absence (an unknown collection or resource) is reported as None by the
lookup operations. XMLDBError is reserved for contract violations and for
operations this in-memory database does not implement.
"""

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """XML:DB error codes."""
    UNKNOWN_ERROR = 0
    VENDOR_ERROR = 1
    NOT_IMPLEMENTED = 2
    WRONG_CONTENT_TYPE = 3
    PERMISSION_DENIED = 4
    INVALID_URI = 5
    NO_SUCH_SERVICE = 100
    NO_SUCH_COLLECTION = 200
    INVALID_COLLECTION = 201
    COLLECTION_CLOSED = 300
    NO_SUCH_RESOURCE = 400
    INVALID_RESOURCE = 401
    UNKNOWN_RESOURCE_TYPE = 402
    NO_SUCH_DATABASE = 500
    INVALID_DATABASE = 501


class XMLDBError(Exception):
    """
    Failure reported by a database, collection or resource.

    Attributes:
        error_code: The ErrorCode describing the failure
        message: Optional human-readable detail
    """

    def __init__(self, error_code: ErrorCode, message: Optional[str] = None):
        self.error_code = ErrorCode(error_code)
        self.message = message
        super().__init__(message or self.error_code.name)

    def __repr__(self) -> str:
        return f"XMLDBError({self.error_code.name}, {self.message!r})"
