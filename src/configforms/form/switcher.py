"""Union variant switching with per-variant state caching."""

from __future__ import annotations

from typing import TYPE_CHECKING

from configforms.exceptions import UnknownVariantError
from configforms.logging import get_logger

if TYPE_CHECKING:
    from configforms.form.nodes import FormFields, UnionNode

logger = get_logger(__name__)


def switch_variant(node: UnionNode, token: str) -> FormFields:
    """Move a union to another variant.

    The outgoing variant's fields are stored in the cache under its token,
    replacing whatever was cached before. The incoming variant is restored
    from the cache when it was visited earlier in the session; otherwise it is
    compiled fresh from its schema defaults.

    Args:
        node (UnionNode): Union node to switch.
        token (str): Variant to activate.

    Raises:
        UnknownVariantError: If the union does not declare ``token``.

    Returns:
        FormFields: Fields of the now active variant.
    """
    variants = node.spec.variants
    if token not in variants:
        raise UnknownVariantError(token=token, known=tuple(variants))
    if token == node.token:
        return node.fields

    previous = node.token
    node.cache[previous] = node.fields
    fields = node.cache.get(token)
    restored = fields is not None
    if fields is None:
        fields = node.compile_fields(variants[token], {})
        node.cache[token] = fields
    node.activate(token, fields)

    logger.debug(
        "Union variant switched",
        extra={"field": node.spec.name, "from": previous, "to": token, "restored": restored},
    )
    return fields
