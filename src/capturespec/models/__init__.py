"""Pydantic domain models for capturespec."""

from capturespec.models.artifact import ArtifactRef, ArtifactType
from capturespec.models.draft import SpecDraft, SubmissionPayload
from capturespec.models.errors import SpecError
from capturespec.models.schema import (
    CompositeKey,
    ContainerSchema,
    EnvelopedSchema,
    FlatSchema,
    KeySpec,
    NamingResult,
    NormalizedSchema,
    SingleKey,
)

__all__ = [
    "ArtifactRef",
    "ArtifactType",
    "CompositeKey",
    "ContainerSchema",
    "EnvelopedSchema",
    "FlatSchema",
    "KeySpec",
    "NamingResult",
    "NormalizedSchema",
    "SingleKey",
    "SpecDraft",
    "SpecError",
    "SubmissionPayload",
]
