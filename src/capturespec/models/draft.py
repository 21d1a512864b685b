"""Spec drafts and the persistence payload built from them."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from capturespec.models.artifact import ArtifactRef
from capturespec.models.schema import KeySpec

DEFAULT_PROFILE = "data-capture"


class SpecDraft(BaseModel):
    """Snapshot of a data capture spec produced by one template load.

    Drafts are frozen.  A template load always builds a brand-new draft and
    hand edits go through :meth:`edit`, so nothing from a previous artifact can
    leak into the next one.

    ``key`` records the key the registry artifact declared (``None`` when a
    key was generated) and is never changed by hand edits.  The key that is
    submitted is ``primary_key_fields``, which the user may edit.
    """

    artifact: ArtifactRef | None = None
    generation: int = 0

    spec_name: str = ""
    container_name: str = ""
    key: KeySpec | None = Field(default=None, description="Registry-declared key; read-only")
    primary_key_fields: list[str] = []
    partition_key_field: str = ""
    partition_key_value: str = ""
    allowed_filters: list[str] = []
    required_fields: list[str] = []
    container_schema_text: str = ""

    tenant_id: str = ""
    data_source_id: str = ""
    is_active: bool = True
    version: int = 1
    profile: str = DEFAULT_PROFILE

    model_config = {"frozen": True, "extra": "forbid"}

    def edit(self, **changes: Any) -> SpecDraft:
        """Return a copy with ``changes`` applied (validated).

        Unknown field names raise ``ValidationError``.  Changing ``key`` raises
        ``ValueError``; edit ``primary_key_fields`` instead.
        """
        if "key" in changes and changes["key"] != self.key:
            raise ValueError("key is the registry-declared key; edit primary_key_fields instead")
        data = self.model_dump()
        data.update(changes)
        return SpecDraft.model_validate(data)


class SubmissionPayload(BaseModel):
    """Body of the persistence API's create-spec call (camelCase on the wire)."""

    data_capture_spec_name: str = Field(alias="dataCaptureSpecName")
    container_name: str = Field(alias="containerName")
    tenant_id: str = Field("", alias="tenantId")
    data_source_id: str = Field("", alias="dataSourceId")
    is_active: bool = Field(True, alias="isActive")
    version: int = 1
    profile: str = DEFAULT_PROFILE
    source_primary_key_field: str = Field(alias="sourcePrimaryKeyField")
    source_primary_key_fields: list[str] = Field(default=[], alias="sourcePrimaryKeyFields")
    partition_key_field: str = Field(alias="partitionKeyField")
    partition_key_value: str = Field("", alias="partitionKeyValue")
    allowed_filters: list[str] = Field(default=[], alias="allowedFilters")
    required_fields: list[str] = Field(default=[], alias="requiredFields")
    container_schema: dict[str, Any] = Field(alias="containerSchema")

    model_config = {"populate_by_name": True}

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
