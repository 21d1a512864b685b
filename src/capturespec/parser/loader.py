"""JSON schema-text loader with safety limits and readable parse errors."""

from __future__ import annotations

import json
from typing import Any

from capturespec.models.errors import SpecError

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_NODE_COUNT = 50_000
_MAX_DEPTH = 64


class SchemaTextError(ValueError):
    """Raised when schema text cannot be accepted.

    Covers malformed JSON, a non-object top level and documents that break
    the size/nesting limits.  ``error`` carries the structured form for API
    responses.
    """

    def __init__(self, error: SpecError) -> None:
        self.error = error
        super().__init__(error.message)


class SchemaTextLoader:
    """Parses schema documents from JSON text.

    Used at the two text boundaries of the system: registry payloads and the
    hand-edited container schema of a draft.
    """

    # -- safety checks -------------------------------------------------------

    @staticmethod
    def _check_size(content: str) -> None:
        if len(content) > _MAX_DOCUMENT_SIZE:
            raise SchemaTextError(
                SpecError(
                    code="SCHEMA_SAFETY_ERROR",
                    message=(
                        f"Schema document exceeds maximum size "
                        f"({len(content):,} chars > {_MAX_DOCUMENT_SIZE:,} limit)"
                    ),
                )
            )

    @staticmethod
    def _check_shape(data: Any, limit: int = _MAX_NODE_COUNT) -> None:
        """Post-parse check: reject documents with too many nodes or too deep."""
        count = 0
        stack: list[tuple[Any, int]] = [(data, 1)]
        while stack:
            node, depth = stack.pop()
            count += 1
            if count > limit:
                raise SchemaTextError(
                    SpecError(
                        code="SCHEMA_SAFETY_ERROR",
                        message=f"Schema document exceeds maximum node count ({limit:,})",
                    )
                )
            if depth > _MAX_DEPTH:
                raise SchemaTextError(
                    SpecError(
                        code="SCHEMA_SAFETY_ERROR",
                        message=f"Schema document exceeds maximum nesting depth ({_MAX_DEPTH})",
                    )
                )
            if isinstance(node, dict):
                stack.extend((value, depth + 1) for value in node.values())
            elif isinstance(node, list):
                stack.extend((item, depth + 1) for item in node)

    # -- public loading API --------------------------------------------------

    def load_string(self, content: str, source: str = "<schema>") -> dict[str, Any]:
        """Parse ``content`` into a dict.  Raises :class:`SchemaTextError`."""
        self._check_size(content)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise SchemaTextError(
                SpecError(
                    code="SCHEMA_PARSE_ERROR",
                    message=(
                        f"Invalid JSON in {source}: {exc.msg} "
                        f"(line {exc.lineno}, column {exc.colno})"
                    ),
                )
            ) from None
        except RecursionError:
            raise SchemaTextError(
                SpecError(
                    code="SCHEMA_SAFETY_ERROR",
                    message=f"Schema document in {source} is nested too deeply",
                )
            ) from None
        if not isinstance(data, dict):
            raise SchemaTextError(
                SpecError(
                    code="SCHEMA_NOT_OBJECT",
                    message=f"{source} must be a JSON object, got {type(data).__name__}",
                )
            )
        self._check_shape(data)
        return data

    @staticmethod
    def dump(document: dict[str, Any]) -> str:
        """Render a schema document the way drafts store it (2-space indent)."""
        return json.dumps(document, indent=2, ensure_ascii=False)
