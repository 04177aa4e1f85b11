"""Convert an edited node tree back into a typed value tree."""

from __future__ import annotations

from typing import Any

from configforms.form.nodes import FormNode, ListNode, ObjectNode, PointerNode, ScalarNode, UnionNode
from configforms.logging import get_logger
from configforms.typing.models import NumberValueSpec, StringValueSpec
from configforms.validation import parse_number

logger = get_logger(__name__)


def serialize(node: FormNode) -> Any:
    """Normalize raw values in place, then read the tree back as plain values.

    Normalization runs before the read so that verdicts shown after a submit
    describe exactly what was serialized: nullable empty strings become
    ``None`` and numeric text becomes ``int`` or ``float``. Inactive union
    variants are never emitted.

    Args:
        node (FormNode): Root of the editable tree.

    Returns:
        Any: Value tree matching the node's spec.
    """
    value = _convert(node)
    logger.debug("Form serialized", extra={"field": node.spec.name, "valid": node.valid})
    return value


def _convert(node: FormNode) -> Any:
    match node:
        case ScalarNode():
            _normalize_scalar(node)
            return node.value
        case ListNode():
            return [_convert(item) for item in node.items]
        case UnionNode():
            return {node.spec.tag.id: node.token, **_convert_fields(node.fields)}
        case ObjectNode():
            return _convert_fields(node.fields)
        case PointerNode():
            return node.value
    raise TypeError(f"Unsupported node type: {type(node).__name__}")


def _convert_fields(fields: dict[str, FormNode]) -> dict[str, Any]:
    return {key: _convert(child) for key, child in fields.items()}


def _normalize_scalar(node: ScalarNode) -> None:
    spec = node.spec
    raw = node.value
    if isinstance(spec, StringValueSpec):
        if raw == "" and spec.nullable:
            node.set_value(None)
    elif isinstance(spec, NumberValueSpec):
        if raw is None or (raw == "" and spec.nullable):
            node.set_value(None)
            return
        number = parse_number(raw)
        # Unparseable input is kept so its verdict still reports it.
        if number is None:
            return
        if isinstance(number, float) and number.is_integer() and spec.integral:
            number = int(number)
        node.set_value(number)
