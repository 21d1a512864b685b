"""Template loading endpoint: POST /templates."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from capturespec.api.deps import get_template_service
from capturespec.api.schemas import DraftResponse, ErrorDetail, TemplateLoadRequest
from capturespec.parser.loader import SchemaTextError
from capturespec.registry.client import RegistryError
from capturespec.service.template_service import TemplateService

router = APIRouter()


@router.post("", response_model=DraftResponse)
async def load_template(
    body: TemplateLoadRequest,
    service: TemplateService = Depends(get_template_service),  # noqa: B008
) -> DraftResponse:
    """Run the template pipeline on a registry artifact and return a fresh draft."""
    try:
        artifact = await service.resolve_artifact(body.artifact_id, body.group_id)
    except KeyError:
        raise HTTPException(
            status_code=404, detail=f"Artifact '{body.artifact_id}' not found"
        ) from None
    except RegistryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from None

    try:
        draft = await service.load_template(
            artifact, tenant_id=body.tenant_id, data_source_id=body.data_source_id
        )
    except RegistryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from None
    except SchemaTextError as exc:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Registry artifact is not a valid schema document",
                "errors": [ErrorDetail(**exc.error.model_dump()).model_dump()],
            },
        ) from None
    return DraftResponse(
        draft=draft,
        available_fields=service.pipeline.available_fields(draft.container_schema_text),
    )
