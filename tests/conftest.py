"""Shared test fixtures for capturespec."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from capturespec.models.artifact import ArtifactRef, ArtifactType
from capturespec.parser.loader import SchemaTextLoader
from capturespec.persistence.client import PersistenceClient
from capturespec.registry.cache import TTLCache
from capturespec.registry.client import RegistryClient
from capturespec.transform.pipeline import TemplatePipeline

REGISTRY_URL = "http://registry.test/apis/registry/v3"
PERSISTENCE_URL = "http://persistence.test/api"

ONLINE = "bfs.online"
BID_TOOLS = "paradigm.bidtools"


# ---------------------------------------------------------------------------
# Sample registry payloads
# ---------------------------------------------------------------------------

# Online group, flat shape, provenance block at the top level.
LOC_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "LocId": {"type": "string"},
        "LocName": {"type": "string", "description": "Display name"},
    },
    "required": ["LocName"],
    "metaData": {
        "sources": {
            "items": {
                "properties": {
                    "sourcePrimaryKeyField": {"const": "LocId"},
                },
            },
        },
    },
}

# Online group, enveloped shape with a composite key (and a stray single key).
QUOTE_LINE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "TxnType": {"type": "string", "enum": ["I", "U", "D"]},
        "Txn": {
            "type": "object",
            "properties": {
                "QuoteId": {"type": "string"},
                "LineId": {"type": "integer"},
                "Amount": {"type": "number"},
                "id": {"type": "integer"},
                "metaData": {
                    "type": "object",
                    "properties": {
                        "sources": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "sourcePrimaryKeyField": {"const": "QuoteId"},
                                    "sourcePrimaryKeyFields": {
                                        "type": "array",
                                        "items": {"enum": ["QuoteId", "LineId"]},
                                    },
                                },
                            },
                        },
                    },
                },
            },
            "required": ["Amount"],
        },
    },
}

# Bid-tools group, flat shape, no declared key.
QUOTE_COMPONENT_TYPES_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "Code": {"type": "string"},
        "Description": {"type": ["string", "null"]},
    },
}

AVRO_CUSTOMER_RECORD: dict[str, Any] = {
    "type": "record",
    "name": "Customer",
    "doc": "Customer master row",
    "fields": [
        {"name": "CustomerId", "type": "long"},
        {"name": "Name", "type": "string", "doc": "Legal name"},
        {"name": "Email", "type": ["null", "string"], "default": None},
        {"name": "CreatedAt", "type": {"type": "long", "logicalType": "timestamp-millis"}},
    ],
}

AVRO_CDC_ENVELOPE: dict[str, Any] = {
    "type": "record",
    "name": "Envelope",
    "fields": [
        {"name": "before", "type": ["null", "Value"], "default": None},
        {
            "name": "after",
            "type": [
                "null",
                {
                    "type": "record",
                    "name": "Value",
                    "fields": [
                        {"name": "OrderId", "type": "int"},
                        {"name": "Total", "type": ["null", "double"]},
                    ],
                },
            ],
        },
        {"name": "op", "type": "string"},
    ],
}

JSON_CDC_ENVELOPE: dict[str, Any] = {
    "title": "Orders.Envelope",
    "type": "object",
    "properties": {
        "before": {"anyOf": [{"type": "null"}, {"type": "object", "properties": {}}]},
        "after": {
            "anyOf": [
                {"type": "null"},
                {
                    "type": "object",
                    "title": "Orders.Value",
                    "properties": {
                        "OrderId": {"type": "integer"},
                        "Status": {"type": "string"},
                    },
                    "required": ["OrderId"],
                },
            ],
        },
        "op": {"type": "string"},
    },
}


# ---------------------------------------------------------------------------
# Registry listings
# ---------------------------------------------------------------------------

ONLINE_LISTING: dict[str, Any] = {
    "artifacts": [
        {"artifactId": "TxServices_Informix_loc.response", "artifactType": "JSON"},
        {"artifactId": "TxServices_SQLServer_QuoteLine.response", "artifactType": "JSON"},
        {"artifactId": "Customer.proto", "artifactType": "PROTOBUF"},
    ],
    "count": 3,
}

BID_TOOLS_LISTING: dict[str, Any] = {
    "artifacts": [
        {
            "artifactId": "QuoteComponentTypes",
            "artifactType": "JSON",
            "name": "Quote Component Types",
            "createdOn": "2025-01-10T08:00:00Z",
        },
        {"artifactId": "paradigm.bidtools.ppapdb_import.bfs.Customers.Value", "artifactType": "AVRO"},
    ],
    "count": 2,
}

CONTENT: dict[tuple[str, str], dict[str, Any]] = {
    (ONLINE, "TxServices_Informix_loc.response"): LOC_SCHEMA,
    (ONLINE, "TxServices_SQLServer_QuoteLine.response"): QUOTE_LINE_SCHEMA,
    (BID_TOOLS, "QuoteComponentTypes"): QUOTE_COMPONENT_TYPES_SCHEMA,
    (BID_TOOLS, "paradigm.bidtools.ppapdb_import.bfs.Customers.Value"): AVRO_CUSTOMER_RECORD,
}


def artifact(
    artifact_id: str,
    group_id: str = ONLINE,
    artifact_type: ArtifactType = ArtifactType.JSON,
    version: str | None = None,
) -> ArtifactRef:
    return ArtifactRef(
        group_id=group_id,
        artifact_id=artifact_id,
        artifact_type=artifact_type,
        version=version,
    )


# ---------------------------------------------------------------------------
# Fake HTTP services
# ---------------------------------------------------------------------------


class FakeRegistry:
    """MockTransport handler serving the sample listings and content."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, text="registry down")
        parts = request.url.path.split("/")
        # .../groups/{g}/artifacts[/{a}/versions/{v}/content]
        idx = parts.index("groups")
        group_id = parts[idx + 1]
        if parts[-1] == "artifacts":
            listing = {ONLINE: ONLINE_LISTING, BID_TOOLS: BID_TOOLS_LISTING}.get(
                group_id, {"artifacts": [], "count": 0}
            )
            return httpx.Response(200, json=listing)
        content = CONTENT.get((group_id, parts[idx + 3]))
        if content is None:
            return httpx.Response(404, json={"title": "Not found"})
        return httpx.Response(200, text=json.dumps(content))


class FakePersistence:
    """MockTransport handler for ``POST /data-capture-specs``."""

    def __init__(self) -> None:
        self.bodies: list[dict[str, Any]] = []
        self.existing: set[str] = set()
        self.fail_with: int | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.bodies.append(body)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"status": {"message": "Service unavailable"}})
        name = body["dataCaptureSpecName"]
        if name in self.existing:
            return httpx.Response(
                409,
                json={"status": {"code": 409, "message": f"Data Capture Spec '{name}' already exists"}},
            )
        self.existing.add(name)
        return httpx.Response(
            201,
            json={
                "status": {"code": 201, "message": "Created"},
                "data": {"DataCaptureSpec": {"dataCaptureSpecId": f"dcs-{len(self.bodies)}", "version": 1}},
            },
        )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def loader() -> SchemaTextLoader:
    return SchemaTextLoader()


@pytest.fixture
def pipeline() -> TemplatePipeline:
    return TemplatePipeline()


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def fake_persistence() -> FakePersistence:
    return FakePersistence()


@pytest.fixture
def registry_client(fake_registry: FakeRegistry) -> RegistryClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake_registry), base_url=REGISTRY_URL)
    return RegistryClient(http, [BID_TOOLS, ONLINE], cache=TTLCache(ttl_seconds=1800))


@pytest.fixture
def persistence_client(fake_persistence: FakePersistence) -> PersistenceClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake_persistence), base_url=PERSISTENCE_URL)
    return PersistenceClient(http)
