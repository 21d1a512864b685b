"""Tests for the entity field classifier."""

from __future__ import annotations

import pytest

from capturespec.models.artifact import ArtifactType
from capturespec.models.schema import EnvelopedSchema, FlatSchema
from capturespec.transform.fields import RESERVED_FIELDS, classify_fields, is_reserved
from capturespec.transform.normalizer import normalize
from tests.conftest import LOC_SCHEMA, QUOTE_LINE_SCHEMA


class TestClassifyFields:
    def test_flat_order_preserved(self) -> None:
        result = classify_fields(normalize(LOC_SCHEMA, ArtifactType.JSON))
        assert result.allowed_filters == ["LocId", "LocName"]
        assert list(result.entity_properties) == ["LocId", "LocName"]

    def test_enveloped_uses_inner_level(self) -> None:
        result = classify_fields(normalize(QUOTE_LINE_SCHEMA, ArtifactType.JSON))
        # "id" and "metaData" are reserved; composite key fields stay filterable
        assert result.allowed_filters == ["QuoteId", "LineId", "Amount"]
        assert result.entity_properties["LineId"] == {"type": "integer"}

    def test_reserved_names_removed(self) -> None:
        props = {name: {"type": "string"} for name in RESERVED_FIELDS}
        props["Keep"] = {"type": "string"}
        result = classify_fields(FlatSchema(properties=props))
        assert result.allowed_filters == ["Keep"]
        assert list(result.entity_properties) == ["Keep"]

    def test_custom_envelope_names_reserved(self) -> None:
        schema = EnvelopedSchema(
            discriminator_field="Kind",
            envelope_key="Body",
            properties={"Kind": {}, "Body": {}, "Value": {}},
        )
        assert classify_fields(schema).allowed_filters == ["Value"]

    def test_schema_required_ignored(self) -> None:
        result = classify_fields(FlatSchema(properties={"A": {}, "B": {}}, required=["B"]))
        assert result.allowed_filters == ["A", "B"]

    def test_empty_schema(self) -> None:
        result = classify_fields(FlatSchema())
        assert result.allowed_filters == []
        assert result.entity_properties == {}

    def test_reserved_never_in_filters(self) -> None:
        for raw in (LOC_SCHEMA, QUOTE_LINE_SCHEMA):
            result = classify_fields(normalize(raw, ArtifactType.JSON))
            assert not set(result.allowed_filters) & RESERVED_FIELDS

    def test_case_variants_of_system_fields_removed(self) -> None:
        props = {
            "Id": {"type": "integer"},
            "PartitionKey": {},
            "MetaData": {},
            "CreateTime": {"type": "integer"},
            "UpdateTime": {},
            "Name": {"type": "string"},
        }
        result = classify_fields(FlatSchema(properties=props))
        assert result.allowed_filters == ["Name"]
        assert list(result.entity_properties) == ["Name"]


class TestIsReserved:
    @pytest.mark.parametrize("name", ["id", "Id", "createTime", "CreateTime", "TxnType", "txnType", "Txn"])
    def test_reserved(self, name: str) -> None:
        assert is_reserved(name)

    @pytest.mark.parametrize("name", ["ID", "Identifier", "CreatedAt", "Name", ""])
    def test_not_reserved(self, name: str) -> None:
        assert not is_reserved(name)

    def test_custom_reserved_set(self) -> None:
        assert is_reserved("Kind", {"kind"})
        assert not is_reserved("Kind", {"Body"})
