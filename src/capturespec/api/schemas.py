"""API request/response Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from capturespec.models.artifact import ArtifactRef
from capturespec.models.draft import SpecDraft


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""


class ErrorDetail(BaseModel):
    """A single validation error detail."""

    code: str
    message: str
    path: str | None = None
    suggestions: list[str] = []


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


class ArtifactGroupResponse(BaseModel):
    """Artifacts of one registry group."""

    group_id: str
    heading: str
    artifacts: list[ArtifactRef] = []


class ArtifactListResponse(BaseModel):
    """Response for GET /artifacts."""

    groups: list[ArtifactGroupResponse] = []
    count: int = 0


# ---------------------------------------------------------------------------
# Templates & drafts
# ---------------------------------------------------------------------------


class TemplateLoadRequest(BaseModel):
    """Request body for POST /templates."""

    artifact_id: str
    group_id: str | None = Field(default=None, description="Disambiguates ids shared by groups")
    tenant_id: str = ""
    data_source_id: str = ""


class DraftResponse(BaseModel):
    """A draft plus the field names its schema text declares."""

    draft: SpecDraft
    available_fields: list[str] = []


class SchemaTextRequest(BaseModel):
    """Request body for POST /drafts/schema-text."""

    draft: SpecDraft
    schema_text: str


class DraftRequest(BaseModel):
    """Request body for POST /drafts/finalize and POST /specs."""

    draft: SpecDraft


class SubmissionResponse(BaseModel):
    """Response for POST /specs."""

    status: str
    spec_name: str
    message: str
    spec_id: str | None = None
    version: int | None = None
