"""Validation and submit outcome models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from configforms.typing.enums import ErrorKind, SubmitStatus


class Verdict(BaseModel):
    """Result of checking one value against one spec."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    valid: bool
    kind: ErrorKind | None = None
    reason: str | None = None

    @classmethod
    def invalid(cls, kind: ErrorKind, reason: str) -> Verdict:
        """Build a failed verdict.

        Args:
            kind (ErrorKind): Failure category.
            reason (str): Message shown next to the field.

        Returns:
            Verdict: Failed verdict.
        """
        return cls(valid=False, kind=kind, reason=reason)


VALID = Verdict(valid=True)


class FieldError(BaseModel):
    """Validation failure attached to a node of the editable tree."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: tuple[str, ...]
    kind: ErrorKind
    message: str

    @property
    def location(self) -> str:
        """Return dotted path, ``<root>`` for the tree root."""
        return ".".join(self.path) or "<root>"


class SubmitResult(BaseModel):
    """Outcome of one submit attempt."""

    model_config = ConfigDict(extra="forbid")

    status: SubmitStatus
    value: Any = None
    response: Any = None
    error: str | None = None
    errors: list[FieldError] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Return whether the handler accepted the value."""
        return self.status == SubmitStatus.SUCCEEDED
