"""Compile a value spec and a current value into an editable node tree."""

from __future__ import annotations

import secrets
from collections.abc import Mapping
from typing import TYPE_CHECKING

from configforms.form.nodes import (
    MISSING,
    FormNode,
    ListNode,
    ObjectNode,
    PointerNode,
    ScalarNode,
    UnionNode,
)
from configforms.logging import get_logger
from configforms.pointer import SnapshotFeed
from configforms.typing.models import (
    BooleanValueSpec,
    DefaultString,
    EnumValueSpec,
    ListValueSpec,
    NumberValueSpec,
    ObjectValueSpec,
    PointerValueSpec,
    StringValueSpec,
    UnionValueSpec,
)

if TYPE_CHECKING:
    from configforms.form.nodes import FormFields
    from configforms.typing.models import ValueSpec

logger = get_logger(__name__)


def compile_form(spec: ValueSpec, initial: object = MISSING, *, feed: SnapshotFeed | None = None) -> FormNode:
    """Build the editable tree for a spec, seeded with the current value.

    Compilation never fails on the value: parts whose shape does not match the
    spec fall back to schema defaults and unknown keys are ignored.

    Args:
        spec (ValueSpec): Spec tree, already checked for defects.
        initial (object): Current value, or ``MISSING`` to start from defaults.
        feed (SnapshotFeed | None): Snapshot feed read by pointer nodes.

    Returns:
        FormNode: Root of the editable tree.
    """
    node = FormCompiler(feed or SnapshotFeed()).compile(spec, initial)
    logger.debug("Form compiled", extra={"kind": spec.type, "field": spec.name})
    return node


def generate_default_string(default: DefaultString) -> str:
    """Draw a random string for a generated default.

    Args:
        default (DefaultString): Charset and length.

    Returns:
        str: Random string.
    """
    alphabet = default.alphabet
    return "".join(secrets.choice(alphabet) for _ in range(default.length))


class FormCompiler:
    """Dispatches on spec kind; holds the snapshot feed shared by pointer nodes."""

    def __init__(self, feed: SnapshotFeed) -> None:
        """Initialize the compiler.

        Args:
            feed: Snapshot feed handed to pointer nodes.
        """
        self.feed = feed

    def compile(self, spec: ValueSpec, initial: object = MISSING) -> FormNode:
        """Compile one spec node.

        Args:
            spec: Spec node.
            initial: Current value for this node, or ``MISSING``.

        Returns:
            FormNode: Compiled node.
        """
        match spec:
            case StringValueSpec():
                return ScalarNode(spec, self._seed_string(spec, initial))
            case NumberValueSpec():
                accepted = _is_number(initial) or (initial is None and spec.nullable)
                return ScalarNode(spec, initial if accepted else spec.default)
            case BooleanValueSpec():
                return ScalarNode(spec, initial if isinstance(initial, bool) else spec.default)
            case EnumValueSpec():
                accepted = initial in spec.values or (initial is None and spec.nullable)
                return ScalarNode(spec, initial if accepted else spec.default)
            case ListValueSpec():
                return self._compile_list(spec, initial)
            case ObjectValueSpec():
                return ObjectNode(spec, self.compile_fields(spec.spec, initial))
            case UnionValueSpec():
                return self._compile_union(spec, initial)
            case PointerValueSpec():
                return PointerNode(spec, self.feed)

    def compile_fields(self, fields: Mapping[str, ValueSpec], initial: object) -> FormFields:
        """Compile a field mapping, seeding each child from ``initial[key]``.

        Args:
            fields: Field key to spec.
            initial: Mapping of current values; anything else counts as empty.

        Returns:
            FormFields: Field key to compiled node.
        """
        values = initial if isinstance(initial, Mapping) else {}
        return {key: self.compile(child, values.get(key, MISSING)) for key, child in fields.items()}

    def _seed_string(self, spec: StringValueSpec, initial: object) -> object:
        if isinstance(initial, str) or (initial is None and spec.nullable):
            return initial
        if isinstance(spec.default, DefaultString):
            return generate_default_string(spec.default)
        return spec.default

    def _compile_list(self, spec: ListValueSpec, initial: object) -> ListNode:
        seeds = initial if isinstance(initial, list) else spec.default
        items = [self.compile(spec.spec, seed) for seed in seeds]
        return ListNode(spec, items, self.compile)

    def _compile_union(self, spec: UnionValueSpec, initial: object) -> UnionNode:
        token = initial.get(spec.tag.id) if isinstance(initial, Mapping) else None
        if isinstance(token, str) and token in spec.variants:
            fields = self.compile_fields(spec.variants[token], initial)
        else:
            token = spec.default
            fields = self.compile_fields(spec.variants[token], {})
        return UnionNode(spec, token, fields, self.compile_fields)


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)
