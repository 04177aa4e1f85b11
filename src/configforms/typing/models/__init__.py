"""Core domain model exports."""

from configforms.typing.models.results import VALID, FieldError, SubmitResult, Verdict
from configforms.typing.models.spec import (
    BooleanValueSpec,
    DefaultString,
    EnumValueSpec,
    ListValueSpec,
    NumberValueSpec,
    NumRange,
    ObjectValueSpec,
    PointerValueSpec,
    StringValueSpec,
    UnionTag,
    UnionValueSpec,
    ValueSpec,
)

__all__ = [
    "VALID",
    "BooleanValueSpec",
    "DefaultString",
    "EnumValueSpec",
    "FieldError",
    "ListValueSpec",
    "NumRange",
    "NumberValueSpec",
    "ObjectValueSpec",
    "PointerValueSpec",
    "StringValueSpec",
    "SubmitResult",
    "UnionTag",
    "UnionValueSpec",
    "ValueSpec",
    "Verdict",
]
