"""Schema ingestion and load-time defect detection."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, NoReturn

from pydantic import TypeAdapter, ValidationError

from configforms.exceptions import SchemaDefectError
from configforms.logging import get_logger
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
    ValueSpec,
)
from configforms.validation import validate

if TYPE_CHECKING:
    from typing import Any

_VALUE_SPEC_ADAPTER: TypeAdapter[ValueSpec] = TypeAdapter(ValueSpec)

logger = get_logger(__name__)


def load_value_spec(payload: object) -> ValueSpec:
    """Parse a value spec document and reject defective schemas.

    Args:
        payload (object): Decoded spec document for one node.

    Raises:
        SchemaDefectError: If the document is malformed or a default breaks its own constraints.

    Returns:
        ValueSpec: Parsed spec tree.
    """
    try:
        spec = _VALUE_SPEC_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        defect = _defect_from_validation_error(exc)
        logger.warning("Schema rejected", extra={"path": defect.path, "reason": defect.message})
        raise defect from exc
    check_defaults(spec)
    return spec


def load_config_spec(fields: Mapping[str, Any], *, name: str = "Config") -> ObjectValueSpec:
    """Parse a package's top-level config spec (a mapping of fields).

    Args:
        fields (Mapping[str, Any]): Field key to spec document.
        name (str): Label of the root object.

    Raises:
        SchemaDefectError: If the payload is not a mapping or is defective.

    Returns:
        ObjectValueSpec: Root object spec.
    """
    if not isinstance(fields, Mapping):
        raise SchemaDefectError(message="Config spec must be a mapping of fields")
    spec = load_value_spec({"type": "object", "name": name, "spec": dict(fields)})
    if not isinstance(spec, ObjectValueSpec):  # pragma: no cover - discriminator guarantees it
        raise SchemaDefectError(message="Config spec root must be an object")
    return spec


def check_defaults(spec: ValueSpec, path: tuple[str, ...] = ()) -> None:
    """Ensure every declared default satisfies its own field's constraints.

    Args:
        spec (ValueSpec): Spec tree.
        path (tuple[str, ...]): Location of ``spec`` in the tree.

    Raises:
        SchemaDefectError: On the first default that fails validation.
    """
    match spec:
        case StringValueSpec() | NumberValueSpec():
            if spec.default is not None and not isinstance(spec.default, DefaultString):
                _require_valid_default(spec, spec.default, path)
        case EnumValueSpec():
            if spec.default is None and not spec.nullable:
                _raise_defect(SchemaDefectError(message="Enum needs a default unless it is nullable", path=path))
            if spec.default is not None:
                _require_valid_default(spec, spec.default, path)
        case ListValueSpec():
            if "default" in spec.model_fields_set:
                _require_valid_default(spec, spec.default, path)
            element = spec.spec
            # Enum list elements may omit a default; entries are chosen on append.
            if isinstance(element, EnumValueSpec) and element.default is None:
                return
            check_defaults(element, (*path, "[]"))
        case ObjectValueSpec():
            for key, child in spec.spec.items():
                check_defaults(child, (*path, key))
        case UnionValueSpec():
            for token, fields in spec.variants.items():
                for key, child in fields.items():
                    check_defaults(child, (*path, token, key))
        case BooleanValueSpec() | PointerValueSpec():
            return


def _require_valid_default(spec: ValueSpec, default: object, path: tuple[str, ...]) -> None:
    verdict = validate(spec, default)
    if verdict.valid:
        return
    _raise_defect(SchemaDefectError(message=f"Default {default!r} is invalid: {verdict.reason}", path=path))


def _raise_defect(defect: SchemaDefectError) -> NoReturn:
    logger.warning("Schema rejected", extra={"path": defect.path, "reason": defect.message})
    raise defect


def _defect_from_validation_error(exc: ValidationError) -> SchemaDefectError:
    errors = exc.errors()
    first = errors[0]
    path = tuple(str(part) for part in first["loc"])
    message = first["msg"]
    if len(errors) > 1:
        message = f"{message} (and {len(errors) - 1} more)"
    return SchemaDefectError(message=message, path=path)
