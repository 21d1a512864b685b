"""Orchestrates the template pipeline: payload → shape → keys/naming/fields → schema → draft."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from capturespec.models.artifact import ArtifactRef
from capturespec.models.draft import SpecDraft, SubmissionPayload
from capturespec.models.errors import SpecError
from capturespec.models.schema import ContainerSchema, KeySpec, NamingResult, NormalizedSchema
from capturespec.parser.loader import SchemaTextError, SchemaTextLoader
from capturespec.transform.casing import convert_schema_properties, to_camel_case
from capturespec.transform.fields import FieldClassification, classify_fields
from capturespec.transform.keys import extract_keys, fallback_key_name
from capturespec.transform.naming import resolve_naming
from capturespec.transform.normalizer import normalize
from capturespec.transform.synthesizer import synthesize

logger = logging.getLogger("capturespec.transform.pipeline")


class DraftValidationError(ValueError):
    """Raised when a draft is not fit for submission."""

    def __init__(self, errors: list[SpecError]) -> None:
        self.errors = errors
        super().__init__("; ".join(e.message for e in errors))


@dataclass
class TemplateResult:
    """Every intermediate product of one pipeline run."""

    schema: NormalizedSchema
    naming: NamingResult
    key: KeySpec | None
    fields: FieldClassification
    container_schema: ContainerSchema

    @property
    def key_names(self) -> list[str]:
        return list(self.container_schema.required)


class TemplatePipeline:
    """Stateless transform from a registry artifact to a :class:`SpecDraft`.

    Names stay exactly as the registry declared them until
    :meth:`finalize_for_submission`, which is the only place the case
    normalizer runs.
    """

    def __init__(self) -> None:
        self._loader = SchemaTextLoader()

    # -- template loading ----------------------------------------------------

    def run(self, artifact: ArtifactRef, raw: Any) -> TemplateResult:
        """Run normalization, key extraction, naming, classification and synthesis."""
        schema = normalize(raw, artifact.artifact_type)
        naming = resolve_naming(artifact.artifact_id, artifact.group_id)
        key = extract_keys(schema)
        fields = classify_fields(schema)
        container_schema = synthesize(
            fields.entity_properties,
            key,
            version=artifact.version,
            spec_name=naming.spec_name,
        )
        if key is None:
            logger.info(
                "No declared key in %s/%s; using generated key '%s'",
                artifact.group_id,
                artifact.artifact_id,
                fallback_key_name(naming.spec_name),
            )
        logger.debug(
            "Template %s/%s: spec=%s container=%s filters=%s required=%s",
            artifact.group_id,
            artifact.artifact_id,
            naming.spec_name,
            naming.container_name,
            fields.allowed_filters,
            container_schema.required,
        )
        return TemplateResult(
            schema=schema,
            naming=naming,
            key=key,
            fields=fields,
            container_schema=container_schema,
        )

    def build_draft(
        self,
        artifact: ArtifactRef,
        raw: Any,
        *,
        tenant_id: str = "",
        data_source_id: str = "",
        generation: int = 0,
    ) -> SpecDraft:
        """Run the pipeline and return a brand-new draft for ``artifact``."""
        result = self.run(artifact, raw)
        return SpecDraft(
            artifact=artifact,
            generation=generation,
            spec_name=result.naming.spec_name,
            container_name=result.naming.container_name,
            key=result.key,
            primary_key_fields=result.key_names,
            partition_key_field="id",
            partition_key_value="",
            allowed_filters=list(result.fields.allowed_filters),
            required_fields=result.key_names,
            container_schema_text=self._loader.dump(result.container_schema.to_document()),
            tenant_id=tenant_id,
            data_source_id=data_source_id,
        )

    # -- hand edits ----------------------------------------------------------

    def apply_schema_text(self, draft: SpecDraft, text: str) -> SpecDraft:
        """Replace the draft's schema text after checking it parses.

        Raises :class:`SchemaTextError`; ``draft`` itself is never modified.
        """
        self._loader.load_string(text, source="container schema")
        return draft.edit(container_schema_text=text)

    def available_fields(self, text: str) -> list[str]:
        """Property names (or AVRO field names) declared by schema text."""
        if not text:
            return []
        try:
            schema = self._loader.load_string(text, source="container schema")
        except SchemaTextError as exc:
            logger.debug("Cannot list fields: %s", exc)
            return []
        properties = schema.get("properties")
        if isinstance(properties, dict):
            return list(properties)
        fields = schema.get("fields")
        if isinstance(fields, list):
            return [f["name"] for f in fields if isinstance(f, dict) and f.get("name")]
        return []

    # -- submission ----------------------------------------------------------

    @staticmethod
    def check_draft(draft: SpecDraft) -> list[SpecError]:
        """Return submission errors for ``draft`` (empty when it can be sent)."""
        errors: list[SpecError] = []

        def _require(ok: bool, code: str, message: str, path: str, suggestions: list[str] | None = None) -> None:
            if not ok:
                errors.append(SpecError(code=code, message=message, path=path, suggestions=suggestions or []))

        _require(bool(draft.spec_name.strip()), "MISSING_SPEC_NAME",
                 "Data Capture Specification Name is required", "specName")
        _require(bool(draft.container_name.strip()), "MISSING_CONTAINER_NAME",
                 "Container Name is required", "containerName")
        _require(draft.version >= 1, "INVALID_VERSION",
                 "Version must be at least 1", "version")
        _require(bool(draft.container_schema_text.strip()), "MISSING_CONTAINER_SCHEMA",
                 "Container Schema is required", "containerSchema")
        _require(bool(draft.required_fields), "MISSING_REQUIRED_FIELDS",
                 "Please select at least one Required Field", "requiredFields",
                 [f for f in draft.primary_key_fields if f.strip()])
        _require(any(f.strip() for f in draft.primary_key_fields), "MISSING_PRIMARY_KEY",
                 "Source Primary Key Field is required", "sourcePrimaryKeyField")
        _require(bool(draft.partition_key_field.strip()), "MISSING_PARTITION_KEY_FIELD",
                 "Partition Key Field is required", "partitionKeyField")
        return errors

    def finalize_for_submission(self, draft: SpecDraft) -> SubmissionPayload:
        """Case-normalize the draft into the persistence payload.

        Raises :class:`DraftValidationError` for an incomplete draft and
        :class:`SchemaTextError` for malformed schema text.
        """
        errors = self.check_draft(draft)
        if errors:
            raise DraftValidationError(errors)

        schema = self._loader.load_string(draft.container_schema_text, source="container schema")
        container_schema = convert_schema_properties(schema)
        key_fields = [to_camel_case(f) for f in draft.primary_key_fields if f.strip()]
        allowed_filters = [to_camel_case(f) for f in draft.allowed_filters]
        required_fields = [to_camel_case(f) for f in draft.required_fields]
        logger.debug("Case-normalized filters %s -> %s", draft.allowed_filters, allowed_filters)

        return SubmissionPayload(
            data_capture_spec_name=draft.spec_name,
            container_name=draft.container_name,
            tenant_id=draft.tenant_id,
            data_source_id=draft.data_source_id,
            is_active=draft.is_active,
            version=draft.version,
            profile=draft.profile,
            source_primary_key_field=key_fields[0],
            source_primary_key_fields=key_fields,
            partition_key_field=draft.partition_key_field,
            partition_key_value=draft.partition_key_value,
            allowed_filters=allowed_filters,
            required_fields=required_fields,
            container_schema=container_schema,
        )
