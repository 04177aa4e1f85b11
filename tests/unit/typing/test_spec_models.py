from __future__ import annotations

import pytest
from pydantic import ValidationError

from configforms.typing.enums import ListSubtype, PointerSubtype, SpecKind
from configforms.typing.models import (
    DefaultString,
    EnumValueSpec,
    ListValueSpec,
    NumberValueSpec,
    NumRange,
    PointerValueSpec,
    StringValueSpec,
    UnionValueSpec,
)


def test_num_range_parses_inclusive_bounds() -> None:
    bounds = NumRange.parse("[0,9999]")

    assert bounds == NumRange(low=0, high=9999, low_inclusive=True, high_inclusive=True)
    assert bounds.describe() == "between 0 and 9999"
    assert str(bounds) == "[0,9999]"


def test_num_range_parses_unbounded_side() -> None:
    bounds = NumRange.parse("[1,*)")

    assert bounds.high is None
    assert bounds.contains(1)
    assert bounds.contains(10**12)
    assert not bounds.contains(0)
    assert bounds.describe() == ">= 1"


def test_num_range_exclusive_bounds() -> None:
    bounds = NumRange.parse("(0, 10)")

    assert not bounds.contains(0)
    assert not bounds.contains(10)
    assert bounds.contains(0.5)
    assert bounds.describe() == "> 0 and < 10"


def test_num_range_fully_unbounded() -> None:
    bounds = NumRange.parse("(*,*)")

    assert bounds == NumRange()
    assert bounds.contains(-1e300)
    assert bounds.describe() == "any value"
    assert str(bounds) == "(*,*)"


def test_num_range_keeps_fractional_bounds_in_text() -> None:
    assert str(NumRange.parse("[0.5,2]")) == "[0.5,2]"


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("0-10", "Malformed range '0-10'"),
        ("[a,1]", "Malformed range bound 'a'"),
        ("[5,1]", "min greater than max"),
        ("[1,2,3]", "Malformed range"),
        ("[nan,5]", "must be a finite number"),
        ("[0,inf]", "must be a finite number"),
    ],
)
def test_num_range_rejects_malformed_notation(text: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        NumRange.parse(text)


def test_number_spec_parses_range_once() -> None:
    spec = NumberValueSpec.model_validate(
        {"type": "number", "name": "Port", "range": "[1,65535]", "integral": True, "unknown-attr": 1},
    )

    assert spec.range.high == 65535
    assert spec.kind is SpecKind.NUMBER
    assert spec.model_dump()["range"] == "[1,65535]"


def test_number_spec_defaults_to_unbounded_range() -> None:
    spec = NumberValueSpec.model_validate({"type": "number", "name": "Fee"})
    assert spec.range == NumRange()


def test_string_spec_compiles_pattern() -> None:
    spec = StringValueSpec.model_validate(
        {"type": "string", "name": "Alias", "pattern": "^[a-z]+$", "pattern-description": "Lowercase"},
    )

    assert spec.regex is not None
    assert spec.regex.fullmatch("abc")
    assert spec.pattern_description == "Lowercase"


def test_string_spec_rejects_bad_pattern() -> None:
    with pytest.raises(ValidationError, match="Malformed pattern"):
        StringValueSpec.model_validate({"type": "string", "name": "Alias", "pattern": "([a-z"})


def test_default_string_expands_charset() -> None:
    default = DefaultString.model_validate({"charset": "a-c,_,x-z", "len": 8})

    assert default.length == 8
    assert default.alphabet == "abc_xyz"


@pytest.mark.parametrize("payload", [{"charset": "z-a", "len": 4}, {"charset": "a-z", "len": 0}])
def test_default_string_rejects_bad_generator(payload: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        DefaultString.model_validate(payload)


def test_string_spec_accepts_generated_default() -> None:
    spec = StringValueSpec.model_validate(
        {"type": "string", "name": "Password", "default": {"charset": "a-z,0-9", "len": 22}},
    )
    assert isinstance(spec.default, DefaultString)


def test_enum_spec_labels() -> None:
    spec = EnumValueSpec.model_validate(
        {"type": "enum", "name": "Network", "values": ["main", "test"], "value-names": {"main": "Mainnet"}},
    )

    assert spec.label("main") == "Mainnet"
    assert spec.label("test") == "test"


def test_enum_spec_rejects_labels_for_unknown_tokens() -> None:
    with pytest.raises(ValidationError, match="undeclared tokens: regtest"):
        EnumValueSpec.model_validate(
            {"type": "enum", "name": "Network", "values": ["main"], "value-names": {"regtest": "Regtest"}},
        )


def test_union_spec_inherits_name_from_tag() -> None:
    spec = UnionValueSpec.model_validate(
        {
            "type": "union",
            "tag": {"id": "type", "name": "Node Type", "description": "Where the node runs"},
            "default": "internal",
            "variants": {"internal": {}, "external": {}},
        },
    )

    assert spec.name == "Node Type"
    assert spec.description == "Where the node runs"
    assert spec.variant_label("external") == "external"


def test_pointer_spec_defaults_to_package_subtype() -> None:
    spec = PointerValueSpec.model_validate(
        {"type": "pointer", "name": "Address", "package-id": "bitcoind", "target": "lan-address"},
    )

    assert spec.subtype is PointerSubtype.PACKAGE
    assert spec.package_id == "bitcoind"


def test_pointer_spec_requires_package_id() -> None:
    with pytest.raises(ValidationError, match="requires a package-id"):
        PointerValueSpec.model_validate({"type": "pointer", "name": "Address", "target": "lan-address"})


def test_list_spec_completes_element_spec() -> None:
    spec = ListValueSpec.model_validate(
        {
            "type": "list",
            "name": "Peers",
            "description": "Peer hosts",
            "subtype": "string",
            "spec": {"pattern": "^[a-z.]+$"},
        },
    )

    assert spec.subtype is ListSubtype.STRING
    assert isinstance(spec.spec, StringValueSpec)
    assert spec.spec.name == "Peers"
    assert spec.range == NumRange(low=0, low_inclusive=True)


def test_list_spec_rejects_mismatched_element_type() -> None:
    with pytest.raises(ValidationError, match="does not match element type"):
        ListValueSpec.model_validate(
            {
                "type": "list",
                "name": "Ports",
                "subtype": "number",
                "spec": {"type": "string", "name": "Port"},
            },
        )
