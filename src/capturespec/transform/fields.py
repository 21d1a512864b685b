"""Entity field classification: filterable names and the properties to merge."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from capturespec.models.schema import (
    DISCRIMINATOR_FIELD,
    ENVELOPE_KEY,
    EnvelopedSchema,
    NormalizedSchema,
)
from capturespec.transform.casing import to_camel_case

SYSTEM_FIELDS = ("id", "partitionKey", "metaData", "createTime", "updateTime")
RESERVED_FIELDS = frozenset((*SYSTEM_FIELDS, DISCRIMINATOR_FIELD, ENVELOPE_KEY))


def is_reserved(name: str, reserved: Iterable[str] = RESERVED_FIELDS) -> bool:
    """True when ``name`` is reserved as written or once camelCased for storage.

    ``Id`` and ``CreateTime`` count as reserved: at submission they would
    become ``id`` and ``createTime`` and collide with the system fields.
    """
    storage_name = to_camel_case(name)
    return any(name == r or storage_name == to_camel_case(r) for r in reserved)


@dataclass
class FieldClassification:
    """Entity-level fields left after removing reserved names, in declared order."""

    allowed_filters: list[str] = field(default_factory=list)
    entity_properties: dict[str, Any] = field(default_factory=dict)


def classify_fields(schema: NormalizedSchema) -> FieldClassification:
    """Split the entity level into filter names and mergeable subschemas.

    Required fields are not derived here; they come from the key extractor.
    """
    reserved = set(RESERVED_FIELDS)
    if isinstance(schema, EnvelopedSchema):
        reserved.update((schema.discriminator_field, schema.envelope_key))

    result = FieldClassification()
    for name, subschema in schema.properties.items():
        if is_reserved(name, reserved):
            continue
        result.allowed_filters.append(name)
        result.entity_properties[name] = subschema
    return result
