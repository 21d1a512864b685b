"""Artifact listing endpoints: GET /artifacts, DELETE /artifacts/cache."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from capturespec.api.deps import get_template_service
from capturespec.api.schemas import ArtifactGroupResponse, ArtifactListResponse
from capturespec.registry.client import RegistryError
from capturespec.service.template_service import TemplateService

router = APIRouter()


@router.get("", response_model=ArtifactListResponse)
async def list_artifacts(
    group: str | None = None,
    service: TemplateService = Depends(get_template_service),  # noqa: B008
) -> ArtifactListResponse:
    """List registry artifacts grouped for template selection."""
    try:
        groups = await service.list_artifact_groups(group)
    except RegistryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from None
    return ArtifactListResponse(
        groups=[
            ArtifactGroupResponse(group_id=g.group_id, heading=g.heading, artifacts=g.artifacts)
            for g in groups
        ],
        count=sum(len(g.artifacts) for g in groups),
    )


@router.delete("/cache", status_code=204)
async def clear_artifact_cache(
    service: TemplateService = Depends(get_template_service),  # noqa: B008
) -> None:
    """Drop the cached artifact listing so the next listing hits the registry."""
    service.clear_artifact_cache()
