from __future__ import annotations

from typing import Any

import pytest

from configforms.typing.enums import ErrorKind
from configforms.typing.models import (
    BooleanValueSpec,
    EnumValueSpec,
    ListValueSpec,
    NumberValueSpec,
    ObjectValueSpec,
    PointerValueSpec,
    StringValueSpec,
    UnionValueSpec,
)
from configforms.validation import parse_number, validate

PORT = NumberValueSpec.model_validate(
    {"type": "number", "name": "Port", "range": "[0,9999]", "integral": True},
)
ALIAS = StringValueSpec.model_validate(
    {"type": "string", "name": "Alias", "pattern": "^[a-zA-Z]+$", "pattern-description": "Letters only"},
)


def _list(range_: str, element: dict[str, Any], **extra: Any) -> ListValueSpec:
    return ListValueSpec.model_validate(
        {"type": "list", "name": "Items", "subtype": element["type"], "range": range_, "spec": element, **extra},
    )


@pytest.mark.parametrize("value", [100, 0, 9999, "100", " 42 ", 100.0, "1e3"])
def test_integral_number_in_range_is_valid(value: object) -> None:
    assert validate(PORT, value).valid


@pytest.mark.parametrize(
    ("value", "kind", "reason"),
    [
        (100.5, ErrorKind.NOT_INTEGER, "Must be an integer"),
        (-1, ErrorKind.NUMBER_NOT_IN_RANGE, "Must be between 0 and 9999"),
        (10000, ErrorKind.NUMBER_NOT_IN_RANGE, "Must be between 0 and 9999"),
        ("abc", ErrorKind.NOT_NUMBER, "Must be a number"),
        ("1_000", ErrorKind.NOT_NUMBER, "Must be a number"),
        ("١٢", ErrorKind.NOT_NUMBER, "Must be a number"),
        (True, ErrorKind.NOT_NUMBER, "Must be a number"),
        (float("nan"), ErrorKind.NOT_NUMBER, "Must be a number"),
        (None, ErrorKind.REQUIRED, "Required"),
        ("", ErrorKind.REQUIRED, "Required"),
    ],
)
def test_number_failures(value: object, kind: ErrorKind, reason: str) -> None:
    verdict = validate(PORT, value)

    assert not verdict.valid
    assert verdict.kind is kind
    assert verdict.reason == reason


def test_nullable_number_accepts_empty() -> None:
    spec = NumberValueSpec.model_validate({"type": "number", "name": "Fee", "nullable": True})
    assert validate(spec, None).valid
    assert validate(spec, "").valid


def test_string_pattern_is_full_match() -> None:
    assert validate(ALIAS, "hello").valid
    verdict = validate(ALIAS, "hello1")
    assert verdict.kind is ErrorKind.PATTERN
    assert verdict.reason == "Letters only"

    unanchored = StringValueSpec.model_validate({"type": "string", "name": "Id", "pattern": "[a-z]+"})
    assert validate(unanchored, "abc").valid
    assert validate(unanchored, "abc1").kind is ErrorKind.PATTERN


def test_string_pattern_without_description_names_the_pattern() -> None:
    spec = StringValueSpec.model_validate({"type": "string", "name": "Id", "pattern": "^[0-9]+$"})
    assert validate(spec, "x").reason == "Must match ^[0-9]+$"


def test_empty_string_requires_nullable() -> None:
    assert validate(ALIAS, "").kind is ErrorKind.REQUIRED
    nullable = ALIAS.model_copy(update={"nullable": True})
    assert validate(nullable, "").valid
    assert validate(nullable, None).valid


def test_string_rejects_non_text() -> None:
    assert validate(ALIAS, 5).kind is ErrorKind.WRONG_TYPE


def test_boolean_requires_bool() -> None:
    spec = BooleanValueSpec.model_validate({"type": "boolean", "name": "Advanced", "default": False})
    assert validate(spec, True).valid
    assert validate(spec, "true").kind is ErrorKind.WRONG_TYPE


def test_enum_membership_uses_labels_in_reason() -> None:
    spec = EnumValueSpec.model_validate(
        {
            "type": "enum",
            "name": "Network",
            "values": ["mainnet", "testnet"],
            "value-names": {"mainnet": "Main", "testnet": "Test"},
        },
    )

    assert validate(spec, "testnet").valid
    verdict = validate(spec, "regtest")
    assert verdict.kind is ErrorKind.NOT_IN_ENUM
    assert verdict.reason == "Must be one of: Main, Test"
    assert validate(spec, None).kind is ErrorKind.REQUIRED


def test_nullable_enum_accepts_none() -> None:
    spec = EnumValueSpec.model_validate(
        {
            "type": "enum",
            "name": "Network",
            "nullable": True,
            "values": ["mainnet", "testnet"],
            "value-names": {"null": "Auto"},
        },
    )

    assert validate(spec, None).valid
    assert validate(spec, "regtest").reason == "Must be one of: mainnet, testnet"


def test_list_cardinality() -> None:
    spec = _list("[1,3]", {"type": "string", "name": "Host"})

    assert validate(spec, []).kind is ErrorKind.LIST_NOT_IN_RANGE
    assert validate(spec, []).reason == "Must contain between 1 and 3 entries"
    assert validate(spec, ["a"]).valid
    assert validate(spec, ["a", "b", "c"]).valid
    assert validate(spec, ["a", "b", "c", "d"]).kind is ErrorKind.LIST_NOT_IN_RANGE


def test_list_entries_are_validated_independently() -> None:
    spec = _list("[1,3]", {"type": "string", "name": "Host", "pattern": "^[a-z]+$"})

    verdict = validate(spec, ["abc", "AB1"])
    assert verdict.kind is ErrorKind.PATTERN
    assert verdict.reason == "Entry 2: Must match ^[a-z]+$"
    assert validate(spec, "abc").kind is ErrorKind.WRONG_TYPE


def test_enum_list_rejects_duplicates() -> None:
    spec = _list("[0,*)", {"type": "enum", "name": "Flag", "values": ["a", "b"]})

    assert validate(spec, ["a", "b"]).valid
    verdict = validate(spec, ["a", "b", "a"])
    assert verdict.kind is ErrorKind.LIST_NOT_UNIQUE
    assert verdict.reason == "Entries 1 and 3 must be unique"


def test_string_list_allows_duplicates() -> None:
    spec = _list("[0,*)", {"type": "string", "name": "Host"})
    assert validate(spec, ["a", "a"]).valid


PEER = {
    "type": "object",
    "name": "Peer",
    "spec": {
        "host": {"type": "string", "name": "Host"},
        "port": {"type": "number", "name": "Port", "integral": True},
    },
}


@pytest.mark.parametrize(
    ("unique_by", "items", "valid"),
    [
        ("host", [{"host": "a", "port": 1}, {"host": "a", "port": 2}], False),
        ("host", [{"host": "a", "port": 1}, {"host": "b", "port": 1}], True),
        ({"all": ["host", "port"]}, [{"host": "a", "port": 1}, {"host": "a", "port": 2}], True),
        ({"all": ["host", "port"]}, [{"host": "a", "port": 1}, {"host": "a", "port": 1}], False),
        ({"any": ["host", "port"]}, [{"host": "a", "port": 1}, {"host": "b", "port": 1}], False),
    ],
)
def test_object_list_unique_by(unique_by: object, items: list[dict[str, Any]], valid: bool) -> None:
    spec = _list("[0,*)", {**PEER, "unique-by": unique_by})

    verdict = validate(spec, items)
    assert verdict.valid is valid
    if not valid:
        assert verdict.kind is ErrorKind.LIST_NOT_UNIQUE


def test_object_ignores_unknown_keys_and_prefixes_reasons() -> None:
    spec = ObjectValueSpec.model_validate(PEER)

    assert validate(spec, {"host": "a", "port": 1, "extra": object()}).valid
    verdict = validate(spec, {"port": 1})
    assert verdict.kind is ErrorKind.REQUIRED
    assert verdict.reason == "Host: Required"
    assert validate(spec, ["a"]).kind is ErrorKind.WRONG_TYPE


def test_union_checks_tag_then_active_fields() -> None:
    spec = UnionValueSpec.model_validate(
        {
            "type": "union",
            "tag": {"id": "type", "name": "Node Type", "variant-names": {"internal": "Internal"}},
            "default": "internal",
            "variants": {"internal": {}, "external": {"host": {"type": "string", "name": "Host"}}},
        },
    )

    assert validate(spec, {"type": "internal"}).valid
    assert validate(spec, {"type": "external", "host": "node.example.com"}).valid
    assert validate(spec, {"type": "external"}).reason == "Host: Required"
    verdict = validate(spec, {"type": "lnd"})
    assert verdict.kind is ErrorKind.UNKNOWN_VARIANT
    assert verdict.reason == "Node Type must be one of: Internal, external"


def test_pointer_is_always_valid() -> None:
    spec = PointerValueSpec.model_validate(
        {"type": "pointer", "name": "Address", "package-id": "bitcoind", "target": "lan-address"},
    )
    assert validate(spec, None).valid


@pytest.mark.parametrize(
    ("raw", "parsed"),
    [
        (7, 7),
        (2.5, 2.5),
        ("12", 12),
        ("-3.25", -3.25),
        (" 1e3 ", 1000.0),
        (".5", 0.5),
        ("x", None),
        (False, None),
        ("inf", None),
        ([], None),
        ("1_000", None),
        ("١٢", None),
    ],
)
def test_parse_number(raw: object, parsed: float | None) -> None:
    result = parse_number(raw)
    assert result == parsed
    if parsed is not None:
        assert type(result) is type(parsed)
