from __future__ import annotations

from typing import Any

import pytest

from configforms.form import FormNode, compile_form, serialize
from configforms.pointer import SnapshotFeed
from configforms.schema import load_config_spec, load_value_spec
from configforms.typing.enums import ErrorKind
from configforms.validation import validate


@pytest.fixture
def config_spec(node_document: dict[str, Any]):
    return load_config_spec(node_document)


def test_nullable_empty_string_serializes_to_null(config_spec) -> None:
    root = compile_form(config_spec)
    root["alias"].set_value("")

    value = serialize(root)

    assert value["alias"] is None
    assert root["alias"].value is None


def test_numeric_text_is_parsed(config_spec) -> None:
    root = compile_form(config_spec)
    root["rpc-port"].set_value("100")

    assert serialize(root)["rpc-port"] == 100
    assert root["rpc-port"].value == 100


def test_integral_float_becomes_int_only_for_integral_fields() -> None:
    integral = load_value_spec({"type": "number", "name": "Port", "integral": True})
    fractional = load_value_spec({"type": "number", "name": "Fee"})

    integral_node = compile_form(integral, 5)
    integral_node.set_value("5.0")
    fractional_node = compile_form(fractional, 5)
    fractional_node.set_value("5.0")

    assert serialize(integral_node) == 5
    assert isinstance(serialize(integral_node), int)
    assert serialize(fractional_node) == 5.0
    assert isinstance(serialize(fractional_node), float)


def test_unparseable_number_is_kept_and_still_reported(config_spec) -> None:
    root = compile_form(config_spec)
    root["rpc-port"].set_value("abc")

    assert serialize(root)["rpc-port"] == "abc"
    assert root["rpc-port"].verdict.kind is ErrorKind.NOT_NUMBER


def test_nullable_number_empty_text_serializes_to_null() -> None:
    spec = load_value_spec({"type": "number", "name": "Fee", "nullable": True})
    node = compile_form(spec)
    node.set_value("")

    assert serialize(node) is None


def test_inactive_variants_are_not_emitted(config_spec) -> None:
    root = compile_form(config_spec)
    node = root["node"]
    node.select("external")
    node["host"].set_value("node.example.com")
    node.select("internal")

    assert serialize(root)["node"] == {"type": "internal", "address": None}


def test_pointer_serializes_resolved_value(config_spec, bitcoind_snapshot: dict[str, Any]) -> None:
    root = compile_form(config_spec, feed=SnapshotFeed(bitcoind_snapshot))
    assert serialize(root)["node"] == {"type": "internal", "address": "bitcoind.local:8332"}


def test_serialized_value_validates_against_spec(config_spec) -> None:
    root = compile_form(config_spec)
    root["rpc-port"].set_value(" 9000 ")
    root["alias"].set_value("")
    root["peers"].append("a.example.com")
    root["node"].select("external")
    root["node"]["host"].set_value("node.example.com")
    root["node"]["port"].set_value("8333")

    value = serialize(root)

    assert root.valid
    assert validate(config_spec, value).valid
    assert value["node"] == {"type": "external", "host": "node.example.com", "port": 8333}


def test_unknown_node_type_is_rejected() -> None:
    class _Stray(FormNode):
        spec = load_value_spec({"type": "boolean", "name": "Stray", "default": False})

        @property
        def value(self) -> bool:
            return False

    with pytest.raises(TypeError, match="Unsupported node type: _Stray"):
        serialize(_Stray())
