"""Registry artifact identity."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class ArtifactType(StrEnum):
    AVRO = "AVRO"
    JSON = "JSON"


class ArtifactRef(BaseModel):
    """A schema artifact as listed by the registry.

    Identity (group, artifact id, type, version) is fixed once selected.
    ``version`` is only set for groups whose artifacts are published under an
    explicit version; the registry client falls back to ``latest`` otherwise.
    """

    group_id: str = Field(alias="groupId")
    artifact_id: str = Field(alias="artifactId")
    artifact_type: ArtifactType = Field(alias="artifactType")
    version: str | None = None
    name: str | None = None
    description: str | None = None
    created_on: str | None = Field(None, alias="createdOn")
    modified_on: str | None = Field(None, alias="modifiedOn")

    model_config = {"populate_by_name": True, "frozen": True}
