"""Collaborator interfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping


class SubmitHandler(Protocol):
    """Receives the serialized value of a finished edit session."""

    async def __call__(self, value: dict[str, Any]) -> Any:
        """Persist the value.

        Args:
            value: Serialized configuration value.

        Raises:
            SubmitError: If the value was rejected.

        Returns:
            Any: Handler response, passed back to the caller.
        """


class SnapshotListener(Protocol):
    """Notified whenever a new package snapshot is published."""

    def __call__(self, snapshot: Mapping[str, Mapping[str, Any]]) -> None:
        """React to a new snapshot.

        Args:
            snapshot: Package id to exposed attributes.
        """
