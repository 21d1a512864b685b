"""Schema registry collaborator: HTTP client and its artifact-list cache."""

from capturespec.registry.cache import TTLCache
from capturespec.registry.client import RegistryClient, RegistryError

__all__ = [
    "RegistryClient",
    "RegistryError",
    "TTLCache",
]
