"""Thin async client for an Apicurio-style schema registry (v3 REST API)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from capturespec.models.artifact import ArtifactRef
from capturespec.parser.loader import SchemaTextLoader
from capturespec.registry.cache import TTLCache
from capturespec.settings import Settings

logger = logging.getLogger("capturespec.registry")

ARTIFACTS_CACHE_KEY = "apicurio_artifacts_cache"


class RegistryError(RuntimeError):
    """Registry unreachable or answered with an error status."""

    def __init__(self, message: str, *, status: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.url = url


def _segment(value: str) -> str:
    return quote(value, safe="")


class RegistryClient:
    """Lists artifacts per group and fetches artifact content.

    List results are cached by the client (see :class:`TTLCache`); content
    fetches are not.  Failures are raised as :class:`RegistryError`, never
    retried and never cached.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        groups: Sequence[str],
        *,
        list_limit: int = 100,
        cache: TTLCache | None = None,
    ) -> None:
        self._http = http
        self._groups = list(groups)
        self._list_limit = list_limit
        self._cache = cache
        self._loader = SchemaTextLoader()

    @classmethod
    def from_settings(cls, settings: Settings) -> RegistryClient:
        http = httpx.AsyncClient(
            base_url=settings.registry_url,
            timeout=settings.http_timeout_seconds,
            headers={"Accept": "application/json"},
        )
        cache = TTLCache(
            ttl_seconds=settings.artifact_cache_ttl_seconds,
            path=settings.artifact_cache_file,
        )
        return cls(http, settings.registry_groups, list_limit=settings.registry_list_limit, cache=cache)

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def groups(self) -> list[str]:
        return list(self._groups)

    # -- helpers -------------------------------------------------------------

    async def _get(self, url: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._http.get(url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Registry request failed: GET %s: %s", url, exc)
            raise RegistryError(f"Schema registry unreachable: {exc}", url=url) from exc
        if resp.is_error:
            body = resp.text[:500]
            logger.warning("Registry returned %d for GET %s: %s", resp.status_code, url, body)
            raise RegistryError(
                f"Schema registry returned {resp.status_code} for {url}: {body}",
                status=resp.status_code,
                url=url,
            )
        return resp

    async def _fetch_group(self, group_id: str) -> list[dict[str, Any]]:
        url = f"/groups/{_segment(group_id)}/artifacts"
        resp = await self._get(url, params={"limit": self._list_limit})
        try:
            data = resp.json()
        except ValueError as exc:
            raise RegistryError(f"Schema registry sent invalid JSON for {url}", url=url) from exc

        items: list[dict[str, Any]] = []
        for raw in data.get("artifacts", []) if isinstance(data, dict) else []:
            try:
                artifact = ArtifactRef.model_validate({"groupId": group_id, **raw})
            except (ValidationError, TypeError):
                logger.debug("Skipping unsupported artifact entry in %s: %r", group_id, raw)
                continue
            items.append(artifact.model_dump(mode="json", by_alias=True, exclude_none=True))
        logger.info("Loaded %d artifacts from group %s", len(items), group_id)
        return items

    async def _fetch_groups(self, groups: list[str]) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        for group_id in groups:
            items.extend(await self._fetch_group(group_id))
        return items

    # -- public API ----------------------------------------------------------

    async def list_artifacts(self, group_filter: str | None = None) -> list[ArtifactRef]:
        """List supported (AVRO/JSON) artifacts of the configured groups.

        ``group_filter`` restricts the listing to one group, which need not be
        one of the configured groups.
        """
        groups = [group_filter] if group_filter else self._groups
        key = f"{ARTIFACTS_CACHE_KEY}:{group_filter}" if group_filter else ARTIFACTS_CACHE_KEY

        async def _fetch() -> list[dict[str, Any]]:
            return await self._fetch_groups(groups)

        if self._cache is None:
            items = await _fetch()
        else:
            items = await self._cache.get_or_fetch(key, _fetch)
        return [ArtifactRef.model_validate(item) for item in items]

    async def get_artifact_content(
        self, group_id: str, artifact_id: str, version: str | None = None
    ) -> dict[str, Any]:
        """Fetch the raw schema document of one artifact version (``latest`` by default)."""
        url = (
            f"/groups/{_segment(group_id)}/artifacts/{_segment(artifact_id)}"
            f"/versions/{_segment(version or 'latest')}/content"
        )
        resp = await self._get(url)
        logger.info("Loaded schema %s/%s (version=%s)", group_id, artifact_id, version or "latest")
        return self._loader.load_string(resp.text, source=artifact_id)

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()
