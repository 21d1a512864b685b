"""Text boundary for schema documents."""

from capturespec.parser.loader import SchemaTextError, SchemaTextLoader

__all__ = [
    "SchemaTextError",
    "SchemaTextLoader",
]
