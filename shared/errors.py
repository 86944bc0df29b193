"""
Shared error handling for the ACL evaluator.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class AclException(Exception):
    """Base exception for the ACL evaluator."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(AclException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class DuplicateEntityError(AclException):
    """An entity with the same identifier is already registered."""

    kind = "entity"

    def __init__(self, entity_id: str, message: Optional[str] = None):
        super().__init__(
            "DUPLICATE_ENTITY",
            message or f"{self.kind.capitalize()} '{entity_id}' already exists",
            {"kind": self.kind, "id": entity_id}
        )


class DuplicateRoleError(DuplicateEntityError):
    """Role already exists in the registry."""

    kind = "role"


class DuplicateResourceError(DuplicateEntityError):
    """Resource already exists in the tree."""

    kind = "resource"


class UnknownEntityError(AclException):
    """Referenced entity is not registered."""

    kind = "entity"

    def __init__(self, entity_id: Any, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        payload = {"kind": self.kind, "id": entity_id}
        payload.update(details or {})
        super().__init__(
            "UNKNOWN_ENTITY",
            message or f"{self.kind.capitalize()} '{entity_id}' not found",
            payload
        )


class UnknownRoleError(UnknownEntityError):
    """Role not found."""

    kind = "role"


class UnknownResourceError(UnknownEntityError):
    """Resource not found."""

    kind = "resource"


class UnknownParentError(UnknownEntityError):
    """Parent of a new role or resource not found."""

    kind = "parent"

    def __init__(self, parent_id: Any, child_id: Any, parent_kind: str):
        super().__init__(
            parent_id,
            f"Parent {parent_kind} '{parent_id}' for '{child_id}' not found",
            {"child": child_id, "parent_kind": parent_kind}
        )


class InvalidIdentityError(AclException):
    """Identity object cannot report its roles."""

    def __init__(self, message: str = "Identity must provide a callable get_roles()", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_IDENTITY", message, details)


class NoIdentityError(AclException):
    """No identity has been set."""

    def __init__(self, message: str = "User identity is not set", details: Optional[Dict[str, Any]] = None):
        super().__init__("NO_IDENTITY", message, details)


class InvalidEffectError(AclException):
    """Unsupported rule effect."""

    def __init__(self, effect: Any):
        super().__init__("INVALID_EFFECT", f"Unsupported rule effect: {effect!r}", {"effect": repr(effect)})


class UnknownOperationError(AclException):
    """Unsupported rule operation."""

    def __init__(self, operation: Any):
        super().__init__("UNKNOWN_OPERATION", f"Unsupported rule operation: {operation!r}", {"operation": repr(operation)})
