"""configforms package."""

from configforms.exceptions import (
    AsyncExecutionError,
    DependencyError,
    PackageError,
    SchemaDefectError,
    SessionError,
    SettingsError,
    SpecStoreError,
    SubmitError,
    UnknownVariantError,
)
from configforms.logging import configure_logging, get_logger
from configforms.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("configforms")

from configforms.async_runner import run_async  # noqa: E402
from configforms.form import MISSING, compile_form, serialize  # noqa: E402
from configforms.pointer import SnapshotFeed, Unresolved, resolve_pointer  # noqa: E402
from configforms.schema import load_config_spec, load_value_spec  # noqa: E402
from configforms.session import FormSession  # noqa: E402
from configforms.validation import validate  # noqa: E402

__all__ = [
    "MISSING",
    "AsyncExecutionError",
    "DependencyError",
    "FormSession",
    "PackageError",
    "SchemaDefectError",
    "SessionError",
    "Settings",
    "SettingsError",
    "SnapshotFeed",
    "SpecStoreError",
    "SubmitError",
    "UnknownVariantError",
    "Unresolved",
    "__version__",
    "compile_form",
    "configure_logging",
    "get_logger",
    "get_settings",
    "load_config_spec",
    "load_value_spec",
    "logger",
    "resolve_pointer",
    "run_async",
    "serialize",
    "validate",
]
