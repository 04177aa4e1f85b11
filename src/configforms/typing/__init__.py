"""Typing-centric domain modules."""

from configforms.typing.enums import ErrorKind, ListSubtype, PointerSubtype, SessionState, SpecKind, SubmitStatus
from configforms.typing.models import (
    VALID,
    BooleanValueSpec,
    DefaultString,
    EnumValueSpec,
    FieldError,
    ListValueSpec,
    NumberValueSpec,
    NumRange,
    ObjectValueSpec,
    PointerValueSpec,
    StringValueSpec,
    SubmitResult,
    UnionTag,
    UnionValueSpec,
    ValueSpec,
    Verdict,
)
from configforms.typing.protocol import SnapshotListener, SubmitHandler

__all__ = [
    "VALID",
    "BooleanValueSpec",
    "DefaultString",
    "EnumValueSpec",
    "ErrorKind",
    "FieldError",
    "ListSubtype",
    "ListValueSpec",
    "NumRange",
    "NumberValueSpec",
    "ObjectValueSpec",
    "PointerSubtype",
    "PointerValueSpec",
    "SessionState",
    "SnapshotListener",
    "SpecKind",
    "StringValueSpec",
    "SubmitHandler",
    "SubmitResult",
    "SubmitStatus",
    "UnionTag",
    "UnionValueSpec",
    "ValueSpec",
    "Verdict",
]
