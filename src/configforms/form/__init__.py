"""Editable form tree: compilation, union switching and serialization."""

from configforms.form.compiler import FormCompiler, compile_form, generate_default_string
from configforms.form.nodes import (
    MISSING,
    FormFields,
    FormNode,
    ListNode,
    ObjectNode,
    PointerNode,
    ScalarNode,
    UnionNode,
)
from configforms.form.serializer import serialize
from configforms.form.switcher import switch_variant

__all__ = [
    "MISSING",
    "FormCompiler",
    "FormFields",
    "FormNode",
    "ListNode",
    "ObjectNode",
    "PointerNode",
    "ScalarNode",
    "UnionNode",
    "compile_form",
    "generate_default_string",
    "serialize",
    "switch_variant",
]
