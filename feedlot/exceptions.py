"""
Custom exception hierarchy for the Feedlot health application.

Every failure the lifecycle core can report is one of these, so the REST layer
and any other caller can tell a user mistake from a store outage.
"""
from typing import Iterable, Optional


class FeedlotError(Exception):
    """Base exception class for all Feedlot errors.

    Args:
        message: Human-readable error message
        code: Optional error code for programmatic handling
    """

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for JSON responses.

        Returns:
            Dictionary containing error message and code
        """
        result = {"error": self.message}
        if self.code:
            result["code"] = self.code
        return result


class ValidationError(FeedlotError):
    """Raised when a submitted form is missing or has malformed fields.

    Attributes:
        fields: Names of the offending fields, in submission order
    """

    def __init__(self, message: str, fields: Optional[Iterable[str]] = None, code: Optional[str] = None):
        super().__init__(message, code or "VALIDATION_ERROR")
        self.fields = list(fields or [])

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.fields:
            result["fields"] = self.fields
        return result


class BusinessError(FeedlotError):
    """Raised when business rules are violated."""
    pass


class InvalidTransitionError(BusinessError):
    """Raised when an action is not permitted for the animal's current status.

    The current status is carried so the caller can explain the refusal.
    """

    def __init__(self, action, current_status, code: Optional[str] = None):
        action_name = getattr(action, 'value', action)
        status_name = getattr(current_status, 'value', current_status)
        message = f"Cannot {action_name} an animal whose status is '{status_name}'"
        super().__init__(message, code or "ALREADY_TERMINAL")
        self.action = action
        self.current_status = current_status

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["current_status"] = getattr(self.current_status, 'value', self.current_status)
        return result


class ResourceNotFoundError(FeedlotError):
    """Raised when a requested resource does not exist.

    Used for 404-type errors when querying for entities by ID.
    """

    def __init__(self, resource_type: str, resource_id: any, code: Optional[str] = None):
        message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(message, code or "RESOURCE_NOT_FOUND")
        self.resource_type = resource_type
        self.resource_id = resource_id


class AuthenticationError(FeedlotError):
    """Raised when a write is attempted without a signed-in staff member."""

    def __init__(self, message: str = "Authentication required", code: Optional[str] = None):
        super().__init__(message, code or "AUTHENTICATION_REQUIRED")


class RepositoryError(FeedlotError):
    """Raised when the record store fails. Never retried automatically."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message, code or "REPOSITORY_ERROR")


class DataIntegrityError(RepositoryError):
    """Raised when a stored row holds a value the domain does not recognise."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message, code or "DATA_INTEGRITY")


class PartialWriteWarning(FeedlotError):
    """Raised when the event record was saved but the animal update failed.

    The record exists; only the animal's derived status/counters are stale.
    """

    def __init__(self, message: str, record=None, code: Optional[str] = None):
        super().__init__(message, code or "PARTIAL_WRITE")
        self.record = record

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.record is not None and hasattr(self.record, 'to_dict'):
            result["record"] = self.record.to_dict()
        return result
