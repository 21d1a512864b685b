"""Spec submission endpoint: POST /specs."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from capturespec.api.deps import get_template_service
from capturespec.api.routers.drafts import draft_http_error, schema_text_http_error
from capturespec.api.schemas import DraftRequest, SubmissionResponse
from capturespec.parser.loader import SchemaTextError
from capturespec.persistence.client import PersistenceError
from capturespec.service.template_service import SubmissionStatus, TemplateService
from capturespec.transform.pipeline import DraftValidationError

router = APIRouter()


@router.post("", response_model=SubmissionResponse, status_code=201)
async def submit_spec(
    body: DraftRequest,
    response: Response,
    service: TemplateService = Depends(get_template_service),  # noqa: B008
) -> SubmissionResponse:
    """Case-normalize a draft and store it.  An existing spec answers 200 ``exists``."""
    try:
        outcome = await service.submit(body.draft)
    except DraftValidationError as exc:
        raise draft_http_error(exc) from None
    except SchemaTextError as exc:
        raise schema_text_http_error(exc) from None
    except PersistenceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from None
    if outcome.status == SubmissionStatus.EXISTS:
        response.status_code = 200
    return SubmissionResponse(
        status=outcome.status.value,
        spec_name=outcome.spec_name,
        message=outcome.message,
        spec_id=outcome.spec_id,
        version=outcome.version,
    )
