"""Async client for the persistence API that stores data capture specs."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from capturespec.models.draft import SubmissionPayload
from capturespec.settings import Settings

logger = logging.getLogger("capturespec.persistence")

_SPECS_PATH = "/data-capture-specs"


class PersistenceError(RuntimeError):
    """Persistence API unreachable or the write failed."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class SpecConflictError(PersistenceError):
    """The spec already exists (HTTP 409)."""


class CreatedSpec(BaseModel):
    id: str
    version: int | None = None


def _error_message(resp: httpx.Response, default: str) -> str:
    """Pull ``status.message`` out of the API's error envelope when present."""
    try:
        body = resp.json()
    except ValueError:
        return f"{default}: {resp.status_code} {resp.reason_phrase}"
    status = body.get("status") if isinstance(body, dict) else None
    if isinstance(status, dict) and status.get("message"):
        return str(status["message"])
    return default


class PersistenceClient:
    """Creates specs through ``POST /data-capture-specs``."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    @classmethod
    def from_settings(cls, settings: Settings) -> PersistenceClient:
        http = httpx.AsyncClient(
            base_url=settings.persistence_api_url,
            timeout=settings.http_timeout_seconds,
            headers={"Accept": "application/json"},
        )
        return cls(http)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def create_spec(self, payload: SubmissionPayload) -> CreatedSpec:
        """Store a spec.

        Raises :class:`SpecConflictError` when it already exists and
        :class:`PersistenceError` on any other failure.
        """
        body = payload.to_wire()
        logger.info(
            "Creating spec '%s' (container=%s, tenant=%s)",
            payload.data_capture_spec_name,
            payload.container_name,
            payload.tenant_id,
        )
        try:
            resp = await self._http.post(_SPECS_PATH, json=body)
        except httpx.HTTPError as exc:
            logger.warning("Persistence request failed: %s", exc)
            raise PersistenceError(f"Persistence API unreachable: {exc}") from exc

        if resp.status_code == 409:
            message = _error_message(resp, "Data Capture Specification already exists")
            logger.info("Spec '%s' already exists", payload.data_capture_spec_name)
            raise SpecConflictError(message, status=409)
        if resp.is_error:
            message = _error_message(resp, "Failed to create data capture spec")
            logger.warning("Persistence API returned %d: %s", resp.status_code, message)
            raise PersistenceError(message, status=resp.status_code)

        try:
            data: Any = resp.json()
        except ValueError as exc:
            raise PersistenceError("Persistence API sent an invalid response body") from exc
        inner = data.get("data") if isinstance(data, dict) else None
        created = inner.get("DataCaptureSpec") if isinstance(inner, dict) else None
        if not isinstance(created, dict) or not created.get("dataCaptureSpecId"):
            raise PersistenceError("Persistence API response is missing the created spec")
        return CreatedSpec(id=str(created["dataCaptureSpecId"]), version=created.get("version"))
