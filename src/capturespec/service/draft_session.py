"""Holds the caller's current draft and discards superseded template loads."""

from __future__ import annotations

import logging
from typing import Any

from capturespec.models.artifact import ArtifactRef
from capturespec.models.draft import SpecDraft
from capturespec.service.template_service import SubmissionOutcome, TemplateService

logger = logging.getLogger("capturespec.service.session")


class NoDraftError(LookupError):
    """Raised when an operation needs a current draft and there is none."""


class DraftSession:
    """One editor's view: a current draft replaced wholesale on every selection.

    Each :meth:`select` takes a new generation number.  When an older fetch
    completes after a newer selection has started, its draft (or its error)
    is dropped and ``None`` is returned, so a slow response can never
    overwrite the user's latest choice.
    """

    def __init__(self, service: TemplateService, *, tenant_id: str = "", data_source_id: str = "") -> None:
        self._service = service
        self._tenant_id = tenant_id
        self._data_source_id = data_source_id
        self._generation = 0
        self._draft: SpecDraft | None = None

    @property
    def draft(self) -> SpecDraft | None:
        return self._draft

    @property
    def generation(self) -> int:
        return self._generation

    def _require_draft(self) -> SpecDraft:
        if self._draft is None:
            raise NoDraftError("No template loaded")
        return self._draft

    async def select(self, artifact: ArtifactRef) -> SpecDraft | None:
        """Load ``artifact`` as the new current draft; ``None`` if superseded."""
        self._generation += 1
        generation = self._generation
        try:
            draft = await self._service.load_template(
                artifact,
                tenant_id=self._tenant_id,
                data_source_id=self._data_source_id,
                generation=generation,
            )
        except Exception:
            if generation != self._generation:
                logger.info("Dropping failed load of superseded selection %d", generation)
                return None
            raise
        if generation != self._generation:
            logger.info(
                "Discarding template %s (generation %d, current %d)",
                artifact.artifact_id,
                generation,
                self._generation,
            )
            return None
        self._draft = draft
        return draft

    def edit(self, **changes: Any) -> SpecDraft:
        """Apply hand edits to the current draft."""
        self._draft = self._require_draft().edit(**changes)
        return self._draft

    def apply_schema_text(self, text: str) -> SpecDraft:
        """Replace the schema text; the draft is unchanged if ``text`` is malformed."""
        self._draft = self._service.apply_schema_text(self._require_draft(), text)
        return self._draft

    async def submit(self) -> SubmissionOutcome:
        return await self._service.submit(self._require_draft())

    def reset(self) -> None:
        """Forget the current draft and invalidate any in-flight load."""
        self._generation += 1
        self._draft = None
