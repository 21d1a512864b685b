"""Format normalization: registry payload (JSON-Schema or AVRO) → schema shape."""

from __future__ import annotations

import copy
import logging
from typing import Any

from capturespec.models.artifact import ArtifactType
from capturespec.models.schema import (
    DISCRIMINATOR_FIELD,
    ENVELOPE_KEY,
    EnvelopedSchema,
    FlatSchema,
    NormalizedSchema,
)

logger = logging.getLogger("capturespec.transform.normalizer")

_AVRO_PRIMITIVES: dict[str, str] = {
    "string": "string",
    "bytes": "string",
    "enum": "string",
    "fixed": "string",
    "int": "number",
    "long": "number",
    "float": "number",
    "double": "number",
    "boolean": "boolean",
    "array": "array",
    "record": "object",
    "map": "object",
}

_TIMESTAMP_LOGICAL_TYPES = frozenset({"timestamp-millis", "timestamp-micros"})


# ---------------------------------------------------------------------------
# AVRO
# ---------------------------------------------------------------------------


def _avro_type_schema(avro_type: Any) -> dict[str, Any]:
    """Map a non-union Avro type to a JSON-Schema fragment."""
    if isinstance(avro_type, str):
        return {"type": _AVRO_PRIMITIVES.get(avro_type, "string")}
    if isinstance(avro_type, dict):
        if avro_type.get("logicalType") in _TIMESTAMP_LOGICAL_TYPES:
            return {"type": "string", "format": "date-time"}
        return {"type": _AVRO_PRIMITIVES.get(str(avro_type.get("type")), "string")}
    return {"type": "string"}


def _avro_field_schema(field: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """Return ``(json_schema, nullable)`` for one Avro record field."""
    avro_type = field.get("type")
    nullable = False
    if isinstance(avro_type, list):
        nullable = "null" in avro_type
        branches = [t for t in avro_type if t != "null"]
        avro_type = branches[0] if branches else "null"
        if avro_type == "null":
            return {"type": "null"}, True

    schema = _avro_type_schema(avro_type)
    if nullable:
        schema["type"] = [schema["type"], "null"]
    if field.get("doc"):
        schema["description"] = field["doc"]
    return schema, nullable


def _avro_record_to_document(record: dict[str, Any]) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []
    for field in record.get("fields", []):
        if not isinstance(field, dict) or not field.get("name"):
            continue
        schema, nullable = _avro_field_schema(field)
        properties[field["name"]] = schema
        if not nullable:
            required.append(field["name"])

    document: dict[str, Any] = {"type": "object"}
    if record.get("name"):
        document["title"] = record["name"]
    if record.get("doc"):
        document["description"] = record["doc"]
    document["properties"] = properties
    document["required"] = required
    return document


def _unwrap_avro_cdc(record: dict[str, Any]) -> dict[str, Any]:
    """Return the ``after`` record of a Debezium envelope, or ``record`` itself."""
    for field in record.get("fields", []):
        if not isinstance(field, dict) or field.get("name") != "after":
            continue
        field_type = field.get("type")
        candidates = field_type if isinstance(field_type, list) else [field_type]
        for candidate in candidates:
            if (
                isinstance(candidate, dict)
                and candidate.get("type") == "record"
                and isinstance(candidate.get("fields"), list)
            ):
                logger.debug("Unwrapped CDC AVRO envelope '%s'", record.get("name"))
                return candidate
    return record


# ---------------------------------------------------------------------------
# JSON-Schema
# ---------------------------------------------------------------------------


def _unwrap_json_cdc(document: dict[str, Any]) -> dict[str, Any]:
    """Return the ``after`` value schema of a Debezium envelope, or ``document``."""
    properties = document.get("properties")
    if not isinstance(properties, dict):
        return document
    after = properties.get("after")
    if not isinstance(after, dict):
        return document

    value_schema: dict[str, Any] | None = None
    branches = after.get("anyOf")
    if isinstance(branches, list):
        value_schema = next(
            (
                b
                for b in branches
                if isinstance(b, dict)
                and b.get("type") == "object"
                and isinstance(b.get("properties"), dict)
            ),
            None,
        )
    elif isinstance(after.get("properties"), dict):
        value_schema = after
    if value_schema is None:
        return document

    logger.debug("Unwrapped CDC JSON envelope '%s'", document.get("title"))
    unwrapped: dict[str, Any] = {"type": "object"}
    title = value_schema.get("title") or document.get("title")
    if title:
        unwrapped["title"] = title
    unwrapped["properties"] = value_schema["properties"]
    unwrapped["required"] = list(value_schema.get("required") or [])
    return unwrapped


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _detect_shape(document: dict[str, Any]) -> NormalizedSchema:
    properties = document.get("properties")
    if not isinstance(properties, dict):
        return FlatSchema(properties={}, required=[], document=document)

    envelope = properties.get(ENVELOPE_KEY)
    if isinstance(envelope, dict) and isinstance(envelope.get("properties"), dict):
        return EnvelopedSchema(
            discriminator_field=DISCRIMINATOR_FIELD,
            envelope_key=ENVELOPE_KEY,
            properties=envelope["properties"],
            required=_string_list(envelope.get("required")),
            document=document,
        )
    return FlatSchema(
        properties=properties,
        required=_string_list(document.get("required")),
        document=document,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(raw: Any, artifact_type: ArtifactType | str) -> NormalizedSchema:
    """Convert a registry payload into a flat or enveloped schema shape.

    Never raises on missing structure: a payload with neither ``properties``
    nor ``fields`` yields a flat shape with no properties.
    """
    if not isinstance(raw, dict):
        logger.warning("Schema payload is %s, not an object; using empty schema", type(raw).__name__)
        return FlatSchema()

    payload = copy.deepcopy(raw)
    if ArtifactType(artifact_type) == ArtifactType.AVRO and isinstance(payload.get("fields"), list):
        document = _avro_record_to_document(_unwrap_avro_cdc(payload))
    else:
        document = _unwrap_json_cdc(payload)

    shape = _detect_shape(document)
    logger.debug(
        "Normalized %s payload as %s schema with %d properties",
        artifact_type,
        shape.kind,
        len(shape.properties),
    )
    return shape
