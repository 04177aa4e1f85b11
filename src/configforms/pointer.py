"""Pointer resolution against the externally supplied package snapshot."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from configforms.logging import get_logger
from configforms.typing.enums import PointerSubtype

if TYPE_CHECKING:
    from collections.abc import Callable

    from configforms.typing.models import PointerValueSpec
    from configforms.typing.protocol import SnapshotListener

Snapshot = Mapping[str, Mapping[str, Any]]

SYSTEM_ENTRY = "system"
INTERFACE_ADDRESSES = "interface-addresses"

logger = get_logger(__name__)


@dataclass(frozen=True)
class Unresolved:
    """Pointer target not available yet; displayable, never a validation failure."""

    reason: str

    def __bool__(self) -> bool:
        """Unresolved pointers are falsy."""
        return False


def resolve_pointer(spec: PointerValueSpec, snapshot: Snapshot) -> Any | Unresolved:
    """Read the value a pointer refers to.

    Package pointers look the ``package-id`` up in the snapshot and read
    ``target`` from its attributes; when an ``interface`` is named the target
    is read from that interface's entry under ``interface-addresses``. System
    pointers read ``target`` from the ``system`` entry.

    Args:
        spec (PointerValueSpec): Pointer spec.
        snapshot (Snapshot): Package id to exposed attributes.

    Returns:
        Any | Unresolved: The target value, or why it could not be read.
    """
    owner = SYSTEM_ENTRY if spec.subtype == PointerSubtype.SYSTEM else spec.package_id
    attributes = snapshot.get(owner or "")
    if not isinstance(attributes, Mapping):
        return Unresolved(reason=f"'{owner}' is not installed")

    scope: object = attributes
    if spec.interface:
        interfaces = attributes.get(INTERFACE_ADDRESSES)
        scope = interfaces.get(spec.interface) if isinstance(interfaces, Mapping) else None
        if not isinstance(scope, Mapping):
            return Unresolved(reason=f"'{owner}' does not expose interface '{spec.interface}'")

    if not isinstance(scope, Mapping) or scope.get(spec.target) is None:
        return Unresolved(reason=f"'{spec.target}' of '{owner}' is not available yet")
    return scope[spec.target]


class SnapshotFeed:
    """Holder of the latest pushed package snapshot.

    The feed keeps only the current snapshot; resolved values are never cached,
    so a pointer read after ``publish`` always reflects the new state.
    """

    def __init__(self, snapshot: Snapshot | None = None) -> None:
        """Initialize the feed.

        Args:
            snapshot: Initial snapshot, empty when omitted.
        """
        self._snapshot: Snapshot = MappingProxyType(dict(snapshot or {}))
        self._listeners: list[SnapshotListener] = []

    @property
    def current(self) -> Snapshot:
        """Return the latest snapshot (read-only)."""
        return self._snapshot

    def publish(self, snapshot: Snapshot) -> None:
        """Replace the snapshot and notify subscribers.

        Args:
            snapshot: New package snapshot.
        """
        self._snapshot = MappingProxyType(dict(snapshot))
        logger.debug("Package snapshot published", extra={"packages": sorted(self._snapshot)})
        for listener in list(self._listeners):
            listener(self._snapshot)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener.

        Args:
            listener: Callback receiving each new snapshot.

        Returns:
            Callable[[], None]: Function removing the subscription.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def resolve(self, spec: PointerValueSpec) -> Any | Unresolved:
        """Resolve a pointer against the current snapshot."""
        return resolve_pointer(spec, self._snapshot)
