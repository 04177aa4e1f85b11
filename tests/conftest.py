"""Pytest marker auto-assignment by folder, plus shared spec fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from configforms import logger


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except Exception:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


@pytest.fixture
def node_document() -> dict[str, Any]:
    """Top-level config document of a bitcoin-node-like package."""
    return {
        "rpc-port": {
            "type": "number",
            "name": "RPC Port",
            "range": "[0,9999]",
            "integral": True,
            "default": 8332,
            "units": "port",
        },
        "alias": {
            "type": "string",
            "name": "Alias",
            "nullable": True,
            "pattern": "^[a-zA-Z]+$",
            "pattern-description": "Letters only",
        },
        "advanced": {
            "type": "boolean",
            "name": "Advanced",
            "default": False,
        },
        "network": {
            "type": "enum",
            "name": "Network",
            "values": ["mainnet", "testnet"],
            "value-names": {"mainnet": "Main", "testnet": "Test"},
            "default": "mainnet",
        },
        "peers": {
            "type": "list",
            "name": "Peers",
            "subtype": "string",
            "range": "[0,3]",
            "default": [],
            "spec": {"pattern": "^[a-z.]+$", "pattern-description": "Host name"},
        },
        "node": {
            "type": "union",
            "tag": {
                "id": "type",
                "name": "Node Type",
                "variant-names": {"internal": "Internal", "external": "External"},
            },
            "default": "internal",
            "variants": {
                "internal": {
                    "address": {
                        "type": "pointer",
                        "name": "Address",
                        "subtype": "package",
                        "package-id": "bitcoind",
                        "target": "lan-address",
                        "interface": "rpc",
                    },
                },
                "external": {
                    "host": {
                        "type": "string",
                        "name": "Host",
                        "pattern": "^[a-z.]+$",
                    },
                    "port": {
                        "type": "number",
                        "name": "Port",
                        "range": "[1,65535]",
                        "integral": True,
                        "default": 8332,
                    },
                },
            },
        },
    }


@pytest.fixture
def bitcoind_snapshot() -> dict[str, Any]:
    """Package snapshot exposing the bitcoind RPC interface."""
    return {
        "bitcoind": {
            "interface-addresses": {
                "rpc": {"lan-address": "bitcoind.local:8332", "tor-address": "abc.onion:8332"},
            },
        },
    }
