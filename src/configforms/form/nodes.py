"""Editable node tree mirroring a value spec tree.

Nodes hold raw, in-progress values. Verdicts are derived from the current
values every time they are read, so a node is never out of date after an
edit. Container nodes only report their own constraint in ``verdict``;
``iter_errors`` walks the whole subtree.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any

from configforms.form.switcher import switch_variant
from configforms.logging import get_logger
from configforms.pointer import Unresolved
from configforms.typing.models import VALID, FieldError
from configforms.validation import check_list_shape, validate

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from configforms.pointer import SnapshotFeed
    from configforms.typing.models import (
        ListValueSpec,
        ObjectValueSpec,
        PointerValueSpec,
        UnionValueSpec,
        ValueSpec,
        Verdict,
    )

    ElementCompiler = Callable[[ValueSpec, object], "FormNode"]
    FieldsCompiler = Callable[[Mapping[str, ValueSpec], object], "FormFields"]

logger = get_logger(__name__)


class _Missing(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing.MISSING
"""Marks an absent initial value, as opposed to an explicit ``None``."""


class FormNode(ABC):
    """One editable node, compiled from one spec node."""

    spec: ValueSpec

    @property
    @abstractmethod
    def value(self) -> Any:
        """Return the raw value tree of this node (no normalization)."""

    @property
    def verdict(self) -> Verdict:
        """Return the verdict for this node's own constraints."""
        return VALID

    def children(self) -> Iterator[tuple[str, FormNode]]:
        """Yield ``(key, child)`` pairs."""
        yield from ()

    def iter_errors(self, path: tuple[str, ...] = ()) -> Iterator[FieldError]:
        """Yield every validation failure in this subtree.

        Args:
            path: Location of this node.

        Yields:
            FieldError: Failures, parents before children.
        """
        verdict = self.verdict
        if not verdict.valid and verdict.kind is not None:
            yield FieldError(path=path, kind=verdict.kind, message=verdict.reason or "Invalid")
        for key, child in self.children():
            yield from child.iter_errors((*path, key))

    @property
    def valid(self) -> bool:
        """Return whether the whole subtree is valid."""
        return next(self.iter_errors(), None) is None


FormFields = dict[str, FormNode]


class ScalarNode(FormNode):
    """String, number, boolean or enum value."""

    def __init__(self, spec: ValueSpec, value: Any) -> None:
        """Initialize the node.

        Args:
            spec: Scalar spec.
            value: Seed value.
        """
        self.spec = spec
        self._value = value

    @property
    def value(self) -> Any:
        """Return the raw value."""
        return self._value

    def set_value(self, value: Any) -> Verdict:
        """Apply an edit and return the resulting verdict.

        Args:
            value: New raw value, e.g. the text typed into a number field.

        Returns:
            Verdict: Verdict for the new value.
        """
        self._value = value
        return self.verdict

    @property
    def verdict(self) -> Verdict:
        """Return the verdict for the current value."""
        return validate(self.spec, self._value)


class ListNode(FormNode):
    """Ordered, growable list of element nodes."""

    spec: ListValueSpec

    def __init__(self, spec: ListValueSpec, items: list[FormNode], compile_element: ElementCompiler) -> None:
        """Initialize the node.

        Args:
            spec: List spec.
            items: Compiled element nodes.
            compile_element: Compiler used for appended elements.
        """
        self.spec = spec
        self.items = items
        self._compile_element = compile_element

    @property
    def value(self) -> list[Any]:
        """Return element values in order."""
        return [item.value for item in self.items]

    @property
    def verdict(self) -> Verdict:
        """Return cardinality and uniqueness verdict."""
        return check_list_shape(self.spec, self.value)

    def children(self) -> Iterator[tuple[str, FormNode]]:
        """Yield elements keyed by position."""
        for index, item in enumerate(self.items):
            yield str(index), item

    def append(self, initial: object = MISSING) -> FormNode:
        """Append an element seeded from the element spec's default.

        Args:
            initial: Optional seed value for the new element.

        Returns:
            FormNode: The new element.
        """
        item = self._compile_element(self.spec.spec, initial)
        self.items.append(item)
        logger.debug("List entry added", extra={"field": self.spec.name, "count": len(self.items)})
        return item

    def remove(self, index: int) -> FormNode:
        """Remove the element at ``index``.

        Args:
            index: Position of the element.

        Raises:
            IndexError: If no element exists at ``index``.

        Returns:
            FormNode: The removed element.
        """
        item = self.items.pop(index)
        logger.debug("List entry removed", extra={"field": self.spec.name, "count": len(self.items)})
        return item

    def __len__(self) -> int:
        """Return element count."""
        return len(self.items)

    def __getitem__(self, index: int) -> FormNode:
        """Return the element at ``index``."""
        return self.items[index]


class ObjectNode(FormNode):
    """Fixed mapping of named child nodes."""

    spec: ObjectValueSpec

    def __init__(self, spec: ObjectValueSpec, fields: FormFields) -> None:
        """Initialize the node.

        Args:
            spec: Object spec.
            fields: Child nodes keyed like ``spec.spec``.
        """
        self.spec = spec
        self.fields = fields

    @property
    def value(self) -> dict[str, Any]:
        """Return child values by key."""
        return {key: node.value for key, node in self.fields.items()}

    def children(self) -> Iterator[tuple[str, FormNode]]:
        """Yield fields."""
        yield from self.fields.items()

    def __getitem__(self, key: str) -> FormNode:
        """Return the child node for ``key``."""
        return self.fields[key]


class UnionNode(FormNode):
    """Tagged union with a per-variant cache of compiled field sets.

    ``cache`` maps each visited variant token to the field nodes last edited
    under it. The active variant's fields are the same objects as its cache
    entry.
    """

    spec: UnionValueSpec

    def __init__(
        self,
        spec: UnionValueSpec,
        token: str,
        fields: FormFields,
        compile_fields: FieldsCompiler,
    ) -> None:
        """Initialize the node.

        Args:
            spec: Union spec.
            token: Active variant.
            fields: Compiled fields of the active variant.
            compile_fields: Compiler used for variants visited for the first time.
        """
        self.spec = spec
        self._token = token
        self.fields = fields
        self.cache: dict[str, FormFields] = {token: fields}
        self.compile_fields = compile_fields

    @property
    def token(self) -> str:
        """Return the active discriminant."""
        return self._token

    def select(self, token: str) -> FormFields:
        """Switch the active variant, restoring cached edits when available.

        Args:
            token: Variant to activate.

        Raises:
            UnknownVariantError: If the union does not declare ``token``.

        Returns:
            FormFields: Fields of the now active variant.
        """
        return switch_variant(self, token)

    def activate(self, token: str, fields: FormFields) -> None:
        """Install ``fields`` as the active variant. Used by the switcher."""
        self._token = token
        self.fields = fields

    @property
    def value(self) -> dict[str, Any]:
        """Return the discriminant and active field values."""
        return {self.spec.tag.id: self._token, **{key: node.value for key, node in self.fields.items()}}

    def children(self) -> Iterator[tuple[str, FormNode]]:
        """Yield fields of the active variant only."""
        yield from self.fields.items()

    def __getitem__(self, key: str) -> FormNode:
        """Return the active variant's node for ``key``."""
        return self.fields[key]


class PointerNode(FormNode):
    """Read-only node whose value is resolved from the package snapshot on demand."""

    spec: PointerValueSpec

    def __init__(self, spec: PointerValueSpec, feed: SnapshotFeed) -> None:
        """Initialize the node.

        Args:
            spec: Pointer spec.
            feed: Snapshot feed read at every access.
        """
        self.spec = spec
        self._feed = feed

    @property
    def resolved(self) -> Any | Unresolved:
        """Return the target value or why it is unavailable."""
        return self._feed.resolve(self.spec)

    @property
    def available(self) -> bool:
        """Return whether the target currently resolves."""
        return not isinstance(self.resolved, Unresolved)

    @property
    def value(self) -> Any:
        """Return the target value, ``None`` while unresolved."""
        resolved = self.resolved
        return None if isinstance(resolved, Unresolved) else resolved
