"""Schema shapes, key specs, naming and the synthesized container schema."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

ENVELOPE_KEY = "Txn"
DISCRIMINATOR_FIELD = "TxnType"


class FlatSchema(BaseModel):
    """Entity fields live directly under the top-level ``properties``."""

    kind: Literal["flat"] = "flat"
    properties: dict[str, Any] = {}
    required: list[str] = []
    document: dict[str, Any] = {}


class EnvelopedSchema(BaseModel):
    """Entity fields are nested one level down, next to a type discriminator.

    ``properties`` holds the envelope's own ``properties`` (the real entity
    fields); ``document`` keeps the full tree as received.
    """

    kind: Literal["enveloped"] = "enveloped"
    discriminator_field: str = DISCRIMINATOR_FIELD
    envelope_key: str = ENVELOPE_KEY
    properties: dict[str, Any] = {}
    required: list[str] = []
    document: dict[str, Any] = {}


NormalizedSchema = Annotated[FlatSchema | EnvelopedSchema, Field(discriminator="kind")]


class SingleKey(BaseModel):
    kind: Literal["single"] = "single"
    field: str

    @property
    def names(self) -> list[str]:
        return [self.field]


class CompositeKey(BaseModel):
    kind: Literal["composite"] = "composite"
    fields: list[str]

    @property
    def names(self) -> list[str]:
        return list(self.fields)


KeySpec = Annotated[SingleKey | CompositeKey, Field(discriminator="kind")]


class NamingResult(BaseModel):
    """Logical (singular) spec name and storage (plural) container name."""

    spec_name: str
    container_name: str


class ContainerSchema(BaseModel):
    """The storage-ready document schema handed to the persistence layer."""

    schema_version: str = Field("1", alias="schemaVersion")
    type: Literal["object"] = "object"
    properties: dict[str, Any] = {}
    required: list[str] = []
    unevaluated_properties: Literal[True] = Field(True, alias="unevaluatedProperties")

    model_config = {"populate_by_name": True}

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document form, keys in their fixed order."""
        return self.model_dump(by_alias=True)
