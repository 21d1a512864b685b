"""Structured error models shared by validation and the REST API."""

from __future__ import annotations

from pydantic import BaseModel


class SpecError(BaseModel):
    """A structured error with an optional JSON path and suggestions."""

    code: str
    message: str
    path: str | None = None
    suggestions: list[str] = []

