"""Custom exception hierarchy for SoloTerm.

All exceptions inherit from SoloTermError, enabling unified error handling
at the application boundary while preserving domain-specific context.

Reorder boundary conditions (top of a list, bottom of a list) are not
errors and never raise; see ``soloterm.characters.ordering``.

Example:
    >>> from soloterm.core.exceptions import NotFoundError
    >>> raise NotFoundError("Attribute not found", entity="attribute", entity_id=42)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError


@dataclass
class FieldError:
    """All validation messages reported for a single field.

    Attributes:
        field: Name of the field in error.
        messages: One or more human-readable messages.
    """

    field: str
    messages: list[str] = field(default_factory=list)

    def formatted(self) -> str:
        """Format as ``"field: message1, message2"``."""
        return f"{self.field}: {', '.join(self.messages)}"


def field_errors_from(exc: PydanticValidationError) -> list[FieldError]:
    """Group a pydantic error's entries into one FieldError per field.

    Fields keep the order pydantic reports them in, which is declaration
    order.
    """
    by_field: dict[str, FieldError] = {}
    for error in exc.errors():
        name = ".".join(str(part) for part in error["loc"])
        by_field.setdefault(name, FieldError(name)).messages.append(error["msg"])
    return list(by_field.values())


class SoloTermError(Exception):
    """Base exception for all SoloTerm errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(SoloTermError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(SoloTermError):
    """Raised when one or more field constraints are violated.

    Nothing is persisted when this is raised. The structured list of field
    errors produced by the validator is available verbatim on ``errors``.

    Attributes:
        errors: Field errors reported by the validator.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[FieldError] | None = None,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            errors: Field errors collected by a validator.
            field_name: Name of a single field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        self.errors: list[FieldError] = list(errors or [])
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        if self.errors:
            combined_details["fields"] = [error.field for error in self.errors]
        super().__init__(message, details=combined_details)

    def messages_for(self, field: str) -> str:
        """Return the formatted messages for one field, or an empty string."""
        for error in self.errors:
            if error.field == field:
                return error.formatted()
        return ""


# =============================================================================
# Persistence Exceptions
# =============================================================================


class NotFoundError(SoloTermError):
    """Raised when an operation references a nonexistent or zero id."""

    def __init__(
        self,
        message: str,
        *,
        entity: str | None = None,
        entity_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with entity context.

        Args:
            message: Human-readable error description.
            entity: Kind of record that was looked up (e.g. 'attribute').
            entity_id: The id that could not be resolved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if entity:
            combined_details["entity"] = entity
        if entity_id is not None:
            combined_details["entity_id"] = entity_id
        super().__init__(message, details=combined_details)


class PersistenceError(SoloTermError):
    """Raised when the underlying store fails.

    The originating ``sqlite3.Error`` is chained as ``__cause__``.
    Persistence errors are never retried.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize persistence error with operation context.

        Args:
            message: Human-readable error description.
            operation: The storage operation that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if operation:
            combined_details["operation"] = operation
        super().__init__(message, details=combined_details)


__all__ = [
    "FieldError",
    "field_errors_from",
    "SoloTermError",
    "ConfigurationError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
]
