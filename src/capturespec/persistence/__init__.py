"""Persistence API collaborator."""

from capturespec.persistence.client import (
    CreatedSpec,
    PersistenceClient,
    PersistenceError,
    SpecConflictError,
)

__all__ = [
    "CreatedSpec",
    "PersistenceClient",
    "PersistenceError",
    "SpecConflictError",
]
