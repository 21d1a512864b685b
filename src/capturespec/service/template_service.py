"""Template service — core service layer shared by the REST API and library callers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from capturespec.models.artifact import ArtifactRef
from capturespec.models.draft import SpecDraft, SubmissionPayload
from capturespec.persistence.client import PersistenceClient, SpecConflictError
from capturespec.registry.client import RegistryClient
from capturespec.transform.naming import BID_TOOLS_GROUP, ONLINE_GROUP, display_name
from capturespec.transform.pipeline import TemplatePipeline

logger = logging.getLogger("capturespec.service")

_GROUP_ORDER = (BID_TOOLS_GROUP, ONLINE_GROUP)
_GROUP_HEADINGS = {
    BID_TOOLS_GROUP: "Bid Tools Templates",
    ONLINE_GROUP: "BFS Online Templates",
}

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class ArtifactGroup:
    """Artifacts of one registry group, ready for a template picker."""

    group_id: str
    heading: str
    artifacts: list[ArtifactRef] = field(default_factory=list)


class SubmissionStatus(StrEnum):
    CREATED = "created"
    EXISTS = "exists"


@dataclass
class SubmissionOutcome:
    """Result of submitting a draft.  A conflict is an outcome, not a failure."""

    status: SubmissionStatus
    spec_name: str
    message: str
    spec_id: str | None = None
    version: int | None = None


# ---------------------------------------------------------------------------
# Artifact selection helpers
# ---------------------------------------------------------------------------


def group_artifacts(artifacts: list[ArtifactRef]) -> list[ArtifactGroup]:
    """Group by registry group: bid-tools first, online second, others by name."""
    grouped: dict[str, list[ArtifactRef]] = {}
    for artifact in artifacts:
        grouped.setdefault(artifact.group_id or "other", []).append(artifact)

    def _group_rank(group_id: str) -> tuple[int, str]:
        if group_id in _GROUP_ORDER:
            return _GROUP_ORDER.index(group_id), ""
        return len(_GROUP_ORDER), group_id

    return [
        ArtifactGroup(
            group_id=group_id,
            heading=_GROUP_HEADINGS.get(group_id, group_id),
            artifacts=sorted(grouped[group_id], key=lambda a: display_name(a).lower()),
        )
        for group_id in sorted(grouped, key=_group_rank)
    ]


def find_artifact(artifacts: list[ArtifactRef], artifact_id: str, group_id: str | None = None) -> ArtifactRef:
    """Look up an artifact by id (and group).  Raises ``KeyError`` if not found."""
    for artifact in artifacts:
        if artifact.artifact_id == artifact_id and group_id in (None, artifact.group_id):
            return artifact
    raise KeyError(f"No artifact '{artifact_id}' in the registry listing")


# ---------------------------------------------------------------------------
# TemplateService
# ---------------------------------------------------------------------------


class TemplateService:
    """Fetches artifacts, runs the template pipeline and submits finished drafts.

    Holds no draft state: every :meth:`load_template` returns an independent
    draft.  Use :class:`~capturespec.service.draft_session.DraftSession` when
    the caller keeps a "current" draft across selections.
    """

    def __init__(
        self,
        registry: RegistryClient,
        persistence: PersistenceClient,
        pipeline: TemplatePipeline | None = None,
    ) -> None:
        self._registry = registry
        self._persistence = persistence
        self._pipeline = pipeline or TemplatePipeline()

    @property
    def pipeline(self) -> TemplatePipeline:
        return self._pipeline

    # -- artifact selection --------------------------------------------------

    async def list_artifacts(self, group_filter: str | None = None) -> list[ArtifactRef]:
        return await self._registry.list_artifacts(group_filter)

    async def list_artifact_groups(self, group_filter: str | None = None) -> list[ArtifactGroup]:
        return group_artifacts(await self._registry.list_artifacts(group_filter))

    async def resolve_artifact(self, artifact_id: str, group_id: str | None = None) -> ArtifactRef:
        """Find ``artifact_id`` in the (cached) listing.  Raises ``KeyError``."""
        return find_artifact(await self._registry.list_artifacts(), artifact_id, group_id)

    def clear_artifact_cache(self) -> None:
        self._registry.clear_cache()

    # -- pipeline ------------------------------------------------------------

    async def load_template(
        self,
        artifact: ArtifactRef,
        *,
        tenant_id: str = "",
        data_source_id: str = "",
        generation: int = 0,
    ) -> SpecDraft:
        """Fetch ``artifact`` from the registry and build a fresh draft from it."""
        logger.info("Loading template %s/%s", artifact.group_id, artifact.artifact_id)
        raw = await self._registry.get_artifact_content(
            artifact.group_id, artifact.artifact_id, artifact.version
        )
        return self._pipeline.build_draft(
            artifact,
            raw,
            tenant_id=tenant_id,
            data_source_id=data_source_id,
            generation=generation,
        )

    def apply_schema_text(self, draft: SpecDraft, text: str) -> SpecDraft:
        return self._pipeline.apply_schema_text(draft, text)

    def finalize_for_submission(self, draft: SpecDraft) -> SubmissionPayload:
        return self._pipeline.finalize_for_submission(draft)

    async def submit(self, draft: SpecDraft) -> SubmissionOutcome:
        """Finalize and store ``draft``.

        Validation and schema-text errors propagate before any network call;
        :class:`~capturespec.persistence.client.PersistenceError` propagates
        for failed writes.  An existing spec yields ``status="exists"``.
        """
        payload = self._pipeline.finalize_for_submission(draft)
        try:
            created = await self._persistence.create_spec(payload)
        except SpecConflictError as exc:
            return SubmissionOutcome(
                status=SubmissionStatus.EXISTS,
                spec_name=payload.data_capture_spec_name,
                message=str(exc),
            )
        return SubmissionOutcome(
            status=SubmissionStatus.CREATED,
            spec_name=payload.data_capture_spec_name,
            message=f'Data Capture Specification "{payload.data_capture_spec_name}" created',
            spec_id=created.id,
            version=created.version,
        )
