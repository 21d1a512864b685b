"""Primary-key extraction from the ``metaData.sources`` provenance block."""

from __future__ import annotations

import logging
from typing import Any

from capturespec.models.schema import (
    CompositeKey,
    EnvelopedSchema,
    KeySpec,
    NormalizedSchema,
    SingleKey,
)
from capturespec.transform.casing import to_camel_case

logger = logging.getLogger("capturespec.transform.keys")


def _child(node: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _metadata_node(schema: NormalizedSchema) -> dict[str, Any] | None:
    """Find the provenance subtree: envelope level, then top level."""
    candidates: list[Any] = []
    if isinstance(schema, EnvelopedSchema):
        candidates.append(schema.properties.get("metaData"))
    candidates.append(_child(schema.document, "properties", "metaData"))
    candidates.append(schema.document.get("metaData"))
    for candidate in candidates:
        if isinstance(candidate, dict):
            return candidate
    return None


def _source_item_properties(metadata: dict[str, Any]) -> dict[str, Any] | None:
    sources = _child(metadata, "properties", "sources")
    if not isinstance(sources, dict):
        sources = metadata.get("sources")
    items = _child(sources, "items")
    if isinstance(items, list):
        items = next((i for i in items if isinstance(i, dict)), None)
    props = _child(items, "properties")
    return props if isinstance(props, dict) else None


def extract_keys(schema: NormalizedSchema) -> KeySpec | None:
    """Return the declared primary key, or ``None`` when none is declared.

    A composite declaration (``sourcePrimaryKeyFields.items.enum``) wins over a
    single one (``sourcePrimaryKeyField.const``).  Names are camelCased.
    """
    metadata = _metadata_node(schema)
    if metadata is None:
        return None
    props = _source_item_properties(metadata)
    if props is None:
        return None

    composite = _child(props, "sourcePrimaryKeyFields", "items", "enum")
    if isinstance(composite, list):
        names = [to_camel_case(n) for n in composite if isinstance(n, str) and n]
        if names:
            logger.debug("Declared composite key %s -> %s", composite, names)
            return CompositeKey(fields=names)

    single = _child(props, "sourcePrimaryKeyField", "const")
    if isinstance(single, str) and single:
        logger.debug("Declared single key %s -> %s", single, to_camel_case(single))
        return SingleKey(field=to_camel_case(single))
    return None


def fallback_key_name(spec_name: str) -> str:
    """Generated key for schemas without a declared key (``QuotePack`` → ``quotePackId``)."""
    if not spec_name:
        return ""
    return spec_name[0].lower() + spec_name[1:] + "Id"
