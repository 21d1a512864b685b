"""Spec/container naming derived from artifact ids, per source convention."""

from __future__ import annotations

import re
from enum import StrEnum

from capturespec.models.artifact import ArtifactRef
from capturespec.models.schema import NamingResult

ONLINE_GROUP = "bfs.online"
BID_TOOLS_GROUP = "paradigm.bidtools"

_ORIGIN_PREFIXES = ("TxServices_SQLServer_", "TxServices_Informix_", "CDC_SQLServer_")
_SUFFIXES = (".response", ".request", ".Value")
_UUID_RE = re.compile(r"^[a-f0-9-]{36}$", re.IGNORECASE)


class SourceConvention(StrEnum):
    """Naming convention implied by a registry group."""

    ONLINE_TRANSACTION = "online-transaction"
    BID_TOOLS = "bid-tools"
    DEFAULT = "default"

    @classmethod
    def for_group(cls, group_id: str) -> SourceConvention:
        if group_id == ONLINE_GROUP:
            return cls.ONLINE_TRANSACTION
        if group_id == BID_TOOLS_GROUP:
            return cls.BID_TOOLS
        return cls.DEFAULT


def _strip_vendor_prefix(name: str) -> str:
    # paradigm.bidtools.ppapdb_import.bfs.QuotePacks -> QuotePacks
    return name.rsplit(".", 1)[-1]


def extract_artifact_name(artifact_id: str) -> str:
    """Reduce an artifact id to its entity base name.

    >>> extract_artifact_name("TxServices_SQLServer_QuotePacks.response")
    'QuotePacks'
    >>> extract_artifact_name("paradigm.bidtools.ppapdb_import.bfs.QuotePacks.Value")
    'QuotePacks'
    """
    if _UUID_RE.match(artifact_id):
        return artifact_id

    name = artifact_id
    for suffix in _SUFFIXES:
        if name.endswith(suffix):
            name = name[: -len(suffix)]
            break
    for prefix in _ORIGIN_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix):]
            break
    return _strip_vendor_prefix(name) or artifact_id


def display_name(artifact: ArtifactRef) -> str:
    """Registry-provided name if any, else the extracted base name."""
    return artifact.name or extract_artifact_name(artifact.artifact_id)


def resolve_naming(artifact_id: str, group_id: str) -> NamingResult:
    """Derive the singular spec name and the plural container name.

    Plurals are naive (one trailing ``s``); irregular plurals are out of reach
    of this heuristic and are left as they come.
    """
    base = extract_artifact_name(artifact_id)
    match SourceConvention.for_group(group_id):
        case SourceConvention.ONLINE_TRANSACTION:
            return NamingResult(spec_name=base, container_name=base + "s")
        case _:  # BID_TOOLS and DEFAULT: the base name is already plural
            singular = base[:-1] if base.endswith("s") else base
            return NamingResult(spec_name=singular, container_name=base)
