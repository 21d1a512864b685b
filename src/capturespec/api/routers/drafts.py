"""Draft editing endpoints: POST /drafts/schema-text, POST /drafts/finalize."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from capturespec.api.deps import get_template_service
from capturespec.api.schemas import DraftRequest, DraftResponse, ErrorDetail, SchemaTextRequest
from capturespec.models.draft import SubmissionPayload
from capturespec.parser.loader import SchemaTextError
from capturespec.service.template_service import TemplateService
from capturespec.transform.pipeline import DraftValidationError

router = APIRouter()


def schema_text_http_error(exc: SchemaTextError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "message": "Invalid JSON in Container Schema",
            "errors": [ErrorDetail(**exc.error.model_dump()).model_dump()],
        },
    )


def draft_http_error(exc: DraftValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "message": "Draft is not ready for submission",
            "errors": [ErrorDetail(**e.model_dump()).model_dump() for e in exc.errors],
        },
    )


@router.post("/schema-text", response_model=DraftResponse)
async def apply_schema_text(
    body: SchemaTextRequest,
    service: TemplateService = Depends(get_template_service),  # noqa: B008
) -> DraftResponse:
    """Replace a draft's container schema text after checking that it parses."""
    try:
        draft = service.apply_schema_text(body.draft, body.schema_text)
    except SchemaTextError as exc:
        raise schema_text_http_error(exc) from None
    return DraftResponse(
        draft=draft,
        available_fields=service.pipeline.available_fields(draft.container_schema_text),
    )


@router.post("/finalize", response_model=SubmissionPayload)
async def finalize_draft(
    body: DraftRequest,
    service: TemplateService = Depends(get_template_service),  # noqa: B008
) -> SubmissionPayload:
    """Preview the case-normalized payload that submission would send."""
    try:
        return service.finalize_for_submission(body.draft)
    except DraftValidationError as exc:
        raise draft_http_error(exc) from None
    except SchemaTextError as exc:
        raise schema_text_http_error(exc) from None
