"""Dependency injection for FastAPI — TemplateService singleton."""

from __future__ import annotations

from capturespec.service.template_service import TemplateService

_template_service: TemplateService | None = None


def init_template_service(service: TemplateService) -> None:
    """Set the global TemplateService (called at app startup)."""
    global _template_service  # noqa: PLW0603
    _template_service = service


def get_template_service() -> TemplateService:
    """FastAPI ``Depends`` provider for TemplateService."""
    if _template_service is None:
        raise RuntimeError("TemplateService not initialised — call init_template_service() first")
    return _template_service


def reset_template_service() -> None:
    """Clear the global TemplateService (for tests)."""
    global _template_service  # noqa: PLW0603
    _template_service = None
