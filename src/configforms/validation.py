"""Per-kind validation of plain values against value specs.

Every function here is pure and total: malformed input yields an invalid
verdict, never an exception. Schema-level problems (bad patterns or ranges)
are rejected when the spec is parsed, so they cannot surface here.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from configforms.typing.enums import ErrorKind, ListSubtype
from configforms.typing.models import (
    VALID,
    BooleanValueSpec,
    EnumValueSpec,
    ListValueSpec,
    NumberValueSpec,
    ObjectValueSpec,
    PointerValueSpec,
    StringValueSpec,
    UnionValueSpec,
    Verdict,
)

if TYPE_CHECKING:
    from configforms.typing.models import ValueSpec

_REQUIRED = Verdict.invalid(ErrorKind.REQUIRED, "Required")
_NUMBER_TEXT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def validate(spec: ValueSpec, value: object) -> Verdict:
    """Check a plain value against a spec.

    Args:
        spec (ValueSpec): Spec node.
        value (object): Candidate value; numbers may still be in their editable string form.

    Returns:
        Verdict: Valid, or invalid with a reason.
    """
    match spec:
        case StringValueSpec():
            return _validate_string(spec, value)
        case NumberValueSpec():
            return _validate_number(spec, value)
        case BooleanValueSpec():
            if isinstance(value, bool):
                return VALID
            return Verdict.invalid(ErrorKind.WRONG_TYPE, "Must be true or false")
        case EnumValueSpec():
            return _validate_enum(spec, value)
        case ListValueSpec():
            return _validate_list(spec, value)
        case ObjectValueSpec():
            if not isinstance(value, Mapping):
                return Verdict.invalid(ErrorKind.WRONG_TYPE, "Must be an object")
            return _validate_fields(spec.spec, value)
        case UnionValueSpec():
            return _validate_union(spec, value)
        case PointerValueSpec():
            return VALID


def parse_number(value: object) -> int | float | None:
    """Parse an editable number.

    Args:
        value (object): Number or its plain ASCII decimal text, optionally with an exponent.

    Returns:
        int | float | None: Parsed number, or None when the value is not a finite number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if _NUMBER_TEXT_RE.fullmatch(text) is None:
        return None
    if text.lstrip("+-").isdigit():
        return int(text)
    number = float(text)
    return number if math.isfinite(number) else None


def check_list_shape(spec: ListValueSpec, items: list[Any]) -> Verdict:
    """Check list-level constraints: cardinality and uniqueness.

    Args:
        spec (ListValueSpec): List spec.
        items (list[Any]): Plain element values.

    Returns:
        Verdict: List-level verdict, ignoring element validity.
    """
    if not spec.range.contains(len(items)):
        return Verdict.invalid(ErrorKind.LIST_NOT_IN_RANGE, f"Must contain {spec.range.describe()} entries")
    duplicate = _find_duplicate(spec, items)
    if duplicate is not None:
        first, second = duplicate
        return Verdict.invalid(
            ErrorKind.LIST_NOT_UNIQUE,
            f"Entries {first + 1} and {second + 1} must be unique",
        )
    return VALID


def _validate_string(spec: StringValueSpec, value: object) -> Verdict:
    if value is None or value == "":
        return VALID if spec.nullable else _REQUIRED
    if not isinstance(value, str):
        return Verdict.invalid(ErrorKind.WRONG_TYPE, "Must be text")
    if spec.regex is not None and spec.regex.fullmatch(value) is None:
        return Verdict.invalid(ErrorKind.PATTERN, spec.pattern_description or f"Must match {spec.pattern}")
    return VALID


def _validate_number(spec: NumberValueSpec, value: object) -> Verdict:
    if value is None or value == "":
        return VALID if spec.nullable else _REQUIRED
    number = parse_number(value)
    if number is None:
        return Verdict.invalid(ErrorKind.NOT_NUMBER, "Must be a number")
    if spec.integral and not (isinstance(number, int) or number.is_integer()):
        return Verdict.invalid(ErrorKind.NOT_INTEGER, "Must be an integer")
    if not spec.range.contains(number):
        return Verdict.invalid(ErrorKind.NUMBER_NOT_IN_RANGE, f"Must be {spec.range.describe()}")
    return VALID


def _validate_enum(spec: EnumValueSpec, value: object) -> Verdict:
    if value is None:
        return VALID if spec.nullable else _REQUIRED
    if value not in spec.values:
        labels = ", ".join(spec.label(token) for token in spec.values)
        return Verdict.invalid(ErrorKind.NOT_IN_ENUM, f"Must be one of: {labels}")
    return VALID


def _validate_list(spec: ListValueSpec, value: object) -> Verdict:
    if not isinstance(value, list):
        return Verdict.invalid(ErrorKind.WRONG_TYPE, "Must be a list")
    shape = check_list_shape(spec, value)
    if not shape.valid:
        return shape
    for index, item in enumerate(value):
        verdict = validate(spec.spec, item)
        if not verdict.valid:
            return verdict.model_copy(update={"reason": f"Entry {index + 1}: {verdict.reason}"})
    return VALID


def _validate_fields(fields: Mapping[str, ValueSpec], value: Mapping[str, Any]) -> Verdict:
    # Keys without a spec entry are ignored.
    for key, child in fields.items():
        verdict = validate(child, value.get(key))
        if not verdict.valid:
            return verdict.model_copy(update={"reason": f"{child.name}: {verdict.reason}"})
    return VALID


def _validate_union(spec: UnionValueSpec, value: object) -> Verdict:
    if not isinstance(value, Mapping):
        return Verdict.invalid(ErrorKind.WRONG_TYPE, "Must be an object")
    token = value.get(spec.tag.id)
    if not isinstance(token, str) or token not in spec.variants:
        labels = ", ".join(spec.variant_label(known) for known in spec.variants)
        return Verdict.invalid(ErrorKind.UNKNOWN_VARIANT, f"{spec.tag.name} must be one of: {labels}")
    return _validate_fields(spec.variants[token], value)


def _find_duplicate(spec: ListValueSpec, items: list[Any]) -> tuple[int, int] | None:
    element = spec.spec
    if spec.subtype == ListSubtype.ENUM:
        rule: object = None
        same = _equal
    elif isinstance(element, ObjectValueSpec | UnionValueSpec) and element.unique_by is not None:
        rule = element.unique_by
        same = _conflicts
    else:
        return None
    for second in range(1, len(items)):
        for first in range(second):
            if same(rule, items[first], items[second]):
                return first, second
    return None


def _equal(_rule: object, left: object, right: object) -> bool:
    return left == right


def _conflicts(rule: object, left: object, right: object) -> bool:
    """Return whether two elements collide under a ``unique-by`` rule."""
    if rule is None or not isinstance(left, Mapping) or not isinstance(right, Mapping):
        return False
    if isinstance(rule, str):
        return rule in left and rule in right and left[rule] == right[rule]
    if not isinstance(rule, Mapping):
        return False
    combinator = next(iter(rule))
    matches = [_conflicts(sub_rule, left, right) for sub_rule in rule[combinator]]
    if combinator == "any":
        return any(matches)
    return bool(matches) and all(matches)
