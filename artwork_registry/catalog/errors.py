"""
Error taxonomy for the artwork catalog.

Every service operation either returns or raises one of these. The HTTP layer
maps ``status_code``; the CLI prints ``message``.
"""

from typing import Any, Dict, Optional


class ArtworkRegistryError(Exception):
    """Base class for catalog errors."""

    code = "REGISTRY_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(ArtworkRegistryError):
    """A referenced Artwork, Usage, Artist or Character does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(
            f"{kind} '{identifier}' not found",
            {"kind": kind, "id": identifier},
        )


class ConflictError(ArtworkRegistryError):
    """A uniqueness constraint was violated."""

    code = "CONFLICT"
    status_code = 409

    def __init__(self, kind: str, field: str, value: Any):
        self.kind = kind
        self.field = field
        self.value = value
        super().__init__(
            f"{kind} with {field} '{value}' already exists",
            {"kind": kind, "field": field, "value": value},
        )


class ValidationError(ArtworkRegistryError):
    """Malformed input, rejected before the store is touched."""

    code = "VALIDATION_ERROR"
    status_code = 422

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}", {"field": field})


class StorageUnavailableError(ArtworkRegistryError):
    """The backing database could not complete the operation."""

    code = "STORAGE_UNAVAILABLE"
    status_code = 503

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(
            f"Storage unavailable during {operation}: {reason}",
            {"operation": operation},
        )
