"""Tests for primary-key extraction."""

from __future__ import annotations

from typing import Any

import pytest

from capturespec.models.artifact import ArtifactType
from capturespec.models.schema import CompositeKey, SingleKey
from capturespec.transform.keys import extract_keys, fallback_key_name
from capturespec.transform.normalizer import normalize
from tests.conftest import LOC_SCHEMA, QUOTE_COMPONENT_TYPES_SCHEMA, QUOTE_LINE_SCHEMA


def _with_source_props(source_props: dict[str, Any], *, enveloped: bool = False) -> dict[str, Any]:
    metadata = {"properties": {"sources": {"items": {"properties": source_props}}}}
    if enveloped:
        return {
            "properties": {
                "TxnType": {"type": "string"},
                "Txn": {"properties": {"metaData": metadata}},
            }
        }
    return {"properties": {"metaData": metadata}}


class TestSingleKey:
    def test_top_level_metadata(self) -> None:
        key = extract_keys(normalize(LOC_SCHEMA, ArtifactType.JSON))
        assert key == SingleKey(field="locId")

    @pytest.mark.parametrize("declared", ["QuoteId", "quoteId", "QUOTEId"])
    def test_first_letter_lowercased(self, declared: str) -> None:
        raw = _with_source_props({"sourcePrimaryKeyField": {"const": declared}})
        key = extract_keys(normalize(raw, ArtifactType.JSON))
        assert isinstance(key, SingleKey)
        assert key.field[0].islower()
        assert key.field[1:] == declared[1:]

    def test_properties_metadata(self) -> None:
        raw = _with_source_props({"sourcePrimaryKeyField": {"const": "OrderNo"}})
        assert extract_keys(normalize(raw, ArtifactType.JSON)) == SingleKey(field="orderNo")

    def test_enveloped_metadata(self) -> None:
        raw = _with_source_props({"sourcePrimaryKeyField": {"const": "OrderNo"}}, enveloped=True)
        assert extract_keys(normalize(raw, ArtifactType.JSON)) == SingleKey(field="orderNo")

    def test_system_name_kept(self) -> None:
        raw = _with_source_props({"sourcePrimaryKeyField": {"const": "id"}})
        assert extract_keys(normalize(raw, ArtifactType.JSON)) == SingleKey(field="id")


class TestCompositeKey:
    def test_composite_wins_over_single(self) -> None:
        key = extract_keys(normalize(QUOTE_LINE_SCHEMA, ArtifactType.JSON))
        assert key == CompositeKey(fields=["quoteId", "lineId"])
        assert key.names == ["quoteId", "lineId"]

    def test_empty_enum_falls_back_to_single(self) -> None:
        raw = _with_source_props(
            {
                "sourcePrimaryKeyField": {"const": "QuoteId"},
                "sourcePrimaryKeyFields": {"items": {"enum": []}},
            }
        )
        assert extract_keys(normalize(raw, ArtifactType.JSON)) == SingleKey(field="quoteId")

    def test_non_string_members_ignored(self) -> None:
        raw = _with_source_props({"sourcePrimaryKeyFields": {"items": {"enum": ["A", 1, "", "B"]}}})
        assert extract_keys(normalize(raw, ArtifactType.JSON)) == CompositeKey(fields=["a", "b"])

    def test_sources_items_as_list(self) -> None:
        raw = {
            "properties": {
                "metaData": {
                    "sources": {"items": [{"properties": {"sourcePrimaryKeyField": {"const": "Code"}}}]}
                }
            }
        }
        assert extract_keys(normalize(raw, ArtifactType.JSON)) == SingleKey(field="code")


class TestNoDeclaredKey:
    def test_no_metadata(self) -> None:
        assert extract_keys(normalize(QUOTE_COMPONENT_TYPES_SCHEMA, ArtifactType.JSON)) is None

    @pytest.mark.parametrize(
        "raw",
        [
            {"properties": {"metaData": {"type": "object"}}},
            {"properties": {"metaData": {"properties": {"sources": "nope"}}}},
            _with_source_props({}),
            _with_source_props({"sourcePrimaryKeyField": {"const": ""}}),
            _with_source_props({"sourcePrimaryKeyField": {"type": "string"}}),
            _with_source_props({"sourcePrimaryKeyField": {"const": 42}}),
        ],
    )
    def test_partial_structure_yields_none(self, raw: dict[str, Any]) -> None:
        assert extract_keys(normalize(raw, ArtifactType.JSON)) is None


class TestFallbackKeyName:
    def test_generated_name(self) -> None:
        assert fallback_key_name("QuoteComponentType") == "quoteComponentTypeId"

    def test_already_camel(self) -> None:
        assert fallback_key_name("loc") == "locId"

    def test_empty(self) -> None:
        assert fallback_key_name("") == ""
