"""Template transformation pipeline for capturespec."""

from capturespec.transform.pipeline import DraftValidationError, TemplatePipeline, TemplateResult

__all__ = [
    "DraftValidationError",
    "TemplatePipeline",
    "TemplateResult",
]
