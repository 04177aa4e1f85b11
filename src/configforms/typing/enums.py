"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class SpecKind(_EnumMixin):
    """Closed set of value spec kinds."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    LIST = "list"
    OBJECT = "object"
    UNION = "union"
    POINTER = "pointer"


class ListSubtype(_EnumMixin):
    """Element kinds a list spec may hold."""

    STRING = "string"
    NUMBER = "number"
    ENUM = "enum"
    OBJECT = "object"
    UNION = "union"


class PointerSubtype(_EnumMixin):
    """Where a pointer reads its value from."""

    PACKAGE = "package"
    SYSTEM = "system"


class ErrorKind(_EnumMixin):
    """Reason a value failed validation."""

    REQUIRED = "required"
    WRONG_TYPE = "wrong_type"
    PATTERN = "pattern"
    NOT_NUMBER = "not_number"
    NOT_INTEGER = "not_integer"
    NUMBER_NOT_IN_RANGE = "number_not_in_range"
    NOT_IN_ENUM = "not_in_enum"
    LIST_NOT_IN_RANGE = "list_not_in_range"
    LIST_NOT_UNIQUE = "list_not_unique"
    UNKNOWN_VARIANT = "unknown_variant"


class SubmitStatus(_EnumMixin):
    """Outcome of a submit attempt."""

    SUCCEEDED = "succeeded"
    INVALID = "invalid"
    FAILED = "failed"


class SessionState(_EnumMixin):
    """Lifecycle of an edit session."""

    OPEN = "open"
    SUBMITTING = "submitting"
    CLOSED = "closed"
