"""Configuration value spec models.

A package publishes its configurable settings as a tree of value specs. Each
node is tagged by ``type`` and parsed into one of the models below; pydantic
selects the model through the ``type`` discriminator, so consumers can walk a
tree with a single ``match`` on ``spec.type``.

Structural constraints that do not need the validator (ranges, patterns,
union tags, enum labels) are checked here while the document is parsed.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_serializer, field_validator, model_validator

from configforms.typing.enums import ListSubtype, PointerSubtype, SpecKind

_RANGE_RE = re.compile(r"^\s*([\[(])\s*([^,]*?)\s*,\s*([^,]*?)\s*([\])])\s*$")
_UNBOUNDED = {"", "*"}


def _parse_bound(raw: str) -> float | None:
    if raw in _UNBOUNDED:
        return None
    try:
        bound = float(Decimal(raw))
    except InvalidOperation as exc:
        raise ValueError(f"Malformed range bound '{raw}'") from exc
    if not math.isfinite(bound):
        raise ValueError(f"Range bound '{raw}' must be a finite number")
    return bound


def _format_bound(bound: float) -> str:
    return str(int(bound)) if bound.is_integer() else str(bound)


class NumRange(BaseModel):
    """Numeric interval parsed from the ``"[min,max]"`` notation.

    Square brackets are inclusive, parentheses exclusive, and ``*`` (or an
    empty side) leaves that side unbounded.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    low: float | None = None
    high: float | None = None
    low_inclusive: bool = False
    high_inclusive: bool = False

    @classmethod
    def parse(cls, text: str) -> NumRange:
        """Parse range notation.

        Args:
            text (str): Range string such as ``"[0,9999]"`` or ``"[1,*)"``.

        Raises:
            ValueError: If the notation is malformed or min exceeds max.

        Returns:
            NumRange: Parsed interval.
        """
        match = _RANGE_RE.match(text)
        if match is None:
            raise ValueError(f"Malformed range '{text}'")
        opening, low, high, closing = match.groups()
        bounds = cls(
            low=_parse_bound(low),
            high=_parse_bound(high),
            low_inclusive=opening == "[",
            high_inclusive=closing == "]",
        )
        if bounds.low is not None and bounds.high is not None and bounds.low > bounds.high:
            raise ValueError(f"Range '{text}' has min greater than max")
        return bounds

    def contains(self, number: float) -> bool:
        """Return whether the number lies inside the interval."""
        if self.low is not None and (number < self.low or (number == self.low and not self.low_inclusive)):
            return False
        return not (
            self.high is not None and (number > self.high or (number == self.high and not self.high_inclusive))
        )

    def describe(self) -> str:
        """Return a human readable description of the interval."""
        if self.low is None and self.high is None:
            return "any value"
        if self.low is not None and self.high is not None and self.low_inclusive and self.high_inclusive:
            return f"between {_format_bound(self.low)} and {_format_bound(self.high)}"
        parts: list[str] = []
        if self.low is not None:
            parts.append(f"{'>=' if self.low_inclusive else '>'} {_format_bound(self.low)}")
        if self.high is not None:
            parts.append(f"{'<=' if self.high_inclusive else '<'} {_format_bound(self.high)}")
        return " and ".join(parts)

    def __str__(self) -> str:
        """Return range notation."""
        low = "*" if self.low is None else _format_bound(self.low)
        high = "*" if self.high is None else _format_bound(self.high)
        return f"{'[' if self.low_inclusive else '('}{low},{high}{']' if self.high_inclusive else ')'}"


class _ValueSpecBase(BaseModel):
    """Attributes shared by every value spec."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    description: str | None = None
    warning: str | None = None

    @property
    def kind(self) -> SpecKind:
        """Return the spec kind."""
        return SpecKind(self.type)  # type: ignore[attr-defined]


class DefaultString(BaseModel):
    """Generated default: a random string of ``len`` characters from ``charset``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    charset: str
    length: int = Field(alias="len", gt=0)

    @field_validator("charset")
    @classmethod
    def _validate_charset(cls, value: str) -> str:
        if not _expand_charset(value):
            raise ValueError("Charset must contain at least one character")
        return value

    @property
    def alphabet(self) -> str:
        """Return every character the charset allows."""
        return _expand_charset(self.charset)


def _expand_charset(charset: str) -> str:
    """Expand ``"a-z,A-Z,_"`` style charsets into the characters they denote."""
    chars: list[str] = []
    for part in charset.split(","):
        if len(part) == 3 and part[1] == "-":  # noqa: PLR2004
            start, end = ord(part[0]), ord(part[2])
            if start > end:
                raise ValueError(f"Charset range '{part}' is reversed")
            chars.extend(chr(code) for code in range(start, end + 1))
        else:
            chars.extend(part)
    return "".join(dict.fromkeys(chars))


class StringValueSpec(_ValueSpecBase):
    """Free text value, optionally constrained by a regex."""

    type: Literal["string"]
    nullable: bool = False
    masked: bool = False
    copyable: bool = False
    textarea: bool = False
    placeholder: str | None = None
    pattern: str | None = None
    pattern_description: str | None = Field(default=None, alias="pattern-description")
    default: str | DefaultString | None = None

    _regex: re.Pattern[str] | None = PrivateAttr(default=None)

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, value: str | None) -> str | None:
        """Ensure the pattern compiles.

        Args:
            value (str | None): Raw regex.

        Raises:
            ValueError: If the regex is malformed.

        Returns:
            str | None: The unchanged pattern.
        """
        if value is None:
            return value
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Malformed pattern '{value}': {exc}") from exc
        return value

    def model_post_init(self, __context: object, /) -> None:
        """Compile the pattern once."""
        self._regex = re.compile(self.pattern) if self.pattern is not None else None

    @property
    def regex(self) -> re.Pattern[str] | None:
        """Return compiled pattern."""
        return self._regex


class NumberValueSpec(_ValueSpecBase):
    """Numeric value bounded by a range."""

    type: Literal["number"]
    nullable: bool = False
    range: NumRange = Field(default_factory=NumRange)
    integral: bool = False
    units: str | None = None
    placeholder: str | None = None
    default: int | float | None = None

    @field_validator("range", mode="before")
    @classmethod
    def _parse_range(cls, value: object) -> object:
        return NumRange.parse(value) if isinstance(value, str) else value

    @field_serializer("range")
    def _serialize_range(self, value: NumRange) -> str:
        return str(value)


class BooleanValueSpec(_ValueSpecBase):
    """Toggle. The default is mandatory."""

    type: Literal["boolean"]
    default: bool


class EnumValueSpec(_ValueSpecBase):
    """One token out of a closed, ordered set."""

    type: Literal["enum"]
    values: list[str] = Field(min_length=1)
    value_names: dict[str, str] = Field(default_factory=dict, alias="value-names")
    nullable: bool = False
    default: str | None = None

    @model_validator(mode="after")
    def _check_value_names(self) -> EnumValueSpec:
        """Ensure labels only refer to declared tokens.

        Raises:
            ValueError: If a label names an unknown token or a nullable enum lacks a null label.

        Returns:
            EnumValueSpec: Validated spec.
        """
        unknown = sorted(set(self.value_names) - set(self.values) - {"null"})
        if unknown:
            raise ValueError(f"value-names refers to undeclared tokens: {', '.join(unknown)}")
        if self.nullable and "null" not in self.value_names:
            raise ValueError("Nullable enum must provide a 'null' entry in value-names")
        return self

    def label(self, token: str) -> str:
        """Return display label for a token."""
        return self.value_names.get(token, token)


def check_unique_by(value: object) -> object:
    """Validate a ``unique-by`` rule: null, a key, or ``{"any"|"all": [rules]}``.

    Raises:
        ValueError: If the rule is malformed.

    Returns:
        object: The unchanged rule.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict) and len(value) == 1:
        combinator = next(iter(value))
        rules = value[combinator]
        if combinator in {"any", "all"} and isinstance(rules, list):
            for rule in rules:
                check_unique_by(rule)
            return value
    raise ValueError(f"Malformed unique-by rule: {value!r}")


class ObjectValueSpec(_ValueSpecBase):
    """Fixed set of named child fields."""

    type: Literal["object"]
    spec: dict[str, ValueSpec]
    display_as: str | None = Field(default=None, alias="display-as")
    unique_by: Any = Field(default=None, alias="unique-by")

    @field_validator("unique_by")
    @classmethod
    def _validate_unique_by(cls, value: object) -> object:
        return check_unique_by(value)


class UnionTag(BaseModel):
    """Discriminant descriptor of a union."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    variant_names: dict[str, str] = Field(default_factory=dict, alias="variant-names")
    name: str
    description: str | None = None
    warning: str | None = None


class UnionValueSpec(_ValueSpecBase):
    """Tagged union: the tag selects which variant field set is active."""

    type: Literal["union"]
    tag: UnionTag
    variants: dict[str, dict[str, ValueSpec]]
    default: str
    display_as: str | None = Field(default=None, alias="display-as")
    unique_by: Any = Field(default=None, alias="unique-by")

    @field_validator("unique_by")
    @classmethod
    def _validate_unique_by(cls, value: object) -> object:
        return check_unique_by(value)

    @model_validator(mode="before")
    @classmethod
    def _inherit_tag_labels(cls, data: object) -> object:
        """Use the tag labels when the union itself is unnamed."""
        if isinstance(data, dict) and isinstance(data.get("tag"), dict):
            tag = data["tag"]
            data = {
                "name": tag.get("name", tag.get("id", "")),
                "description": tag.get("description"),
                "warning": tag.get("warning"),
                **data,
            }
        return data

    @model_validator(mode="after")
    def _check_variants(self) -> UnionValueSpec:
        """Ensure the default is declared and the tag key is free in every variant.

        Raises:
            ValueError: If the union contradicts itself.

        Returns:
            UnionValueSpec: Validated spec.
        """
        if not self.variants:
            raise ValueError("Union must declare at least one variant")
        if self.default not in self.variants:
            raise ValueError(f"Union default '{self.default}' is not a declared variant")
        for token, fields in self.variants.items():
            if self.tag.id in fields:
                raise ValueError(f"Tag id '{self.tag.id}' collides with a field of variant '{token}'")
        return self

    def variant_label(self, token: str) -> str:
        """Return display label for a variant token."""
        return self.tag.variant_names.get(token, token)


class PointerValueSpec(_ValueSpecBase):
    """Read-only value taken from another package's exposed state."""

    type: Literal["pointer"]
    subtype: PointerSubtype = PointerSubtype.PACKAGE
    target: str
    package_id: str | None = Field(default=None, alias="package-id")
    interface: str | None = None

    @model_validator(mode="after")
    def _check_package_id(self) -> PointerValueSpec:
        if self.subtype == PointerSubtype.PACKAGE and not self.package_id:
            raise ValueError("Package pointer requires a package-id")
        return self


class ListValueSpec(_ValueSpecBase):
    """Homogeneous list; the element spec is typed by ``subtype``."""

    type: Literal["list"]
    subtype: ListSubtype
    range: NumRange = Field(default_factory=lambda: NumRange(low=0, low_inclusive=True))
    default: list[Any] = Field(default_factory=list)
    spec: ValueSpec

    @field_validator("range", mode="before")
    @classmethod
    def _parse_range(cls, value: object) -> object:
        return NumRange.parse(value) if isinstance(value, str) else value

    @model_validator(mode="before")
    @classmethod
    def _complete_element_spec(cls, data: object) -> object:
        """Element specs omit ``type`` and labels; derive them from the list."""
        if not isinstance(data, dict):
            return data
        element = data.get("spec")
        if isinstance(element, dict) and "type" not in element:
            data = {
                **data,
                "spec": {
                    "type": data.get("subtype"),
                    "name": data.get("name", ""),
                    "description": data.get("description"),
                    **element,
                },
            }
        return data

    @model_validator(mode="after")
    def _check_element_kind(self) -> ListValueSpec:
        if self.spec.type != self.subtype.value:
            raise ValueError(f"List subtype '{self.subtype}' does not match element type '{self.spec.type}'")
        return self

    @field_serializer("range")
    def _serialize_range(self, value: NumRange) -> str:
        return str(value)


ValueSpec = Annotated[
    StringValueSpec
    | NumberValueSpec
    | BooleanValueSpec
    | EnumValueSpec
    | ListValueSpec
    | ObjectValueSpec
    | UnionValueSpec
    | PointerValueSpec,
    Field(discriminator="type"),
]

for _model in (ListValueSpec, ObjectValueSpec, UnionValueSpec):
    _model.model_rebuild()
