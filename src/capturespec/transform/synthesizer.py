"""Container schema synthesis: entity properties merged into the system template."""

from __future__ import annotations

import copy
from typing import Any

from capturespec.models.schema import ContainerSchema, KeySpec
from capturespec.transform.fields import is_reserved
from capturespec.transform.keys import fallback_key_name

DEFAULT_SCHEMA_VERSION = "1"

_NULLABLE_DATE_TIME: dict[str, Any] = {"type": ["string", "null"], "format": "date-time"}


def _id_property() -> dict[str, Any]:
    return {
        "type": "string",
        "description": (
            "Document ID. Mirrors the resolved source primary key value "
            "(or the combination of key values for composite keys)."
        ),
    }


def _partition_key_property() -> dict[str, Any]:
    return {
        "type": "string",
        "description": (
            "Container partition key, set by the integrator. Independent of any "
            "partitioning in the source system; empty for data landing in the common area."
        ),
    }


def _metadata_property() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "sources": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "sourceDatabase": {"type": "string"},
                        "sourceTable": {"type": "string"},
                        "sourcePrimaryKeyField": {"type": "string"},
                        "sourcePrimaryKeyFields": {
                            "type": "array",
                            "items": {"type": "string"},
                        },
                        "sourceCreateTime": dict(_NULLABLE_DATE_TIME),
                        "sourceUpdateTime": dict(_NULLABLE_DATE_TIME),
                        "sourceEtag": {"type": ["string", "null"]},
                    },
                },
            },
        },
    }


def _timestamp_property() -> dict[str, Any]:
    return {**_NULLABLE_DATE_TIME, "description": "Populated by the storage service"}


def synthesize(
    entity_properties: dict[str, Any],
    key_spec: KeySpec | None,
    version: str | None = None,
    spec_name: str = "",
) -> ContainerSchema:
    """Build the container schema for one entity.

    Property order is fixed: ``id``, ``partitionKey``, the entity fields,
    ``metaData``, ``createTime``, ``updateTime``.  Entity fields that collide
    with a reserved name (system fields, ``TxnType``, ``Txn``), as written or
    once camelCased, are dropped.  ``required`` is exactly the key's field
    names, or the generated ``<specName>Id`` when no key was declared.
    """
    properties: dict[str, Any] = {
        "id": _id_property(),
        "partitionKey": _partition_key_property(),
    }
    for name, subschema in entity_properties.items():
        if is_reserved(name):
            continue
        properties[name] = copy.deepcopy(subschema)
    properties["metaData"] = _metadata_property()
    properties["createTime"] = _timestamp_property()
    properties["updateTime"] = _timestamp_property()

    if key_spec is not None:
        required = key_spec.names
    else:
        fallback = fallback_key_name(spec_name)
        required = [fallback] if fallback else []

    return ContainerSchema(
        schema_version=version or DEFAULT_SCHEMA_VERSION,
        properties=properties,
        required=required,
    )
