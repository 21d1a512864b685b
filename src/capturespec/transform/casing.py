"""PascalCase → camelCase conversion applied at the storage-write boundary."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger("capturespec.transform.casing")

# System names that are already in storage form and must never be rewritten.
CASE_EXCEPTIONS = frozenset({"id", "partitionKey", "metaData", "createTime", "updateTime"})


def to_camel_case(name: str) -> str:
    """Lowercase the first character of ``name`` (``QuoteId`` → ``quoteId``)."""
    if name in CASE_EXCEPTIONS or not name:
        return name
    return name[0].lower() + name[1:]


def convert_schema_properties(schema: Any) -> Any:
    """Return a copy of ``schema`` with camelCased property names.

    ``required`` is remapped through the old→new map built while renaming, so
    it stays consistent with the renamed properties.  A name already in
    storage form is never replaced: a renamed property that would collide
    with it (``Id`` next to ``id``) is dropped, also from ``required``.
    Nested object schemas (``properties``) and array ``items`` are converted
    the same way.
    """
    if not isinstance(schema, dict):
        return schema

    converted: dict[str, Any] = {}
    for key, value in schema.items():
        if key == "items":
            converted[key] = (
                [convert_schema_properties(v) for v in value]
                if isinstance(value, list)
                else convert_schema_properties(value)
            )
        else:
            converted[key] = value

    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return converted

    taken = {key for key in properties if to_camel_case(key) == key}
    renamed: dict[str, Any] = {}
    old_to_new: dict[str, str] = {}
    dropped: set[str] = set()
    for key, value in properties.items():
        new_key = to_camel_case(key)
        if new_key != key and (new_key in taken or new_key in renamed):
            logger.warning("Dropping property '%s': collides with '%s'", key, new_key)
            dropped.add(key)
            continue
        old_to_new[key] = new_key
        renamed[new_key] = convert_schema_properties(value)
    converted["properties"] = renamed

    required = schema.get("required")
    if isinstance(required, list):
        converted["required"] = [
            old_to_new.get(name, to_camel_case(name)) if isinstance(name, str) else name
            for name in required
            if not (isinstance(name, str) and name in dropped)
        ]
    return converted
