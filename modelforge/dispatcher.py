# File: modelforge/dispatcher.py
"""
ModelForge - Generation Dispatcher
===================================
Single entry point mapping an ``ArtifactKind`` to its generator:

    >>> from modelforge import generate, ArtifactKind
    >>> sql = generate(ArtifactKind.SQL_SQLITE, model)

``generate`` is total over the eleven kinds and never raises for a
structurally valid model.  It keeps no state; ``ArtifactCache`` is an
explicit, opt-in memo keyed by a content hash of the model for callers that
regenerate the same snapshot repeatedly.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from modelforge.errors import UnknownArtifactKindError
from modelforge.generators import (
    generate_context,
    generate_controllers,
    generate_dtos,
    generate_entity_classes,
    generate_openapi,
    generate_repositories,
    generate_services,
    generate_sql,
)
from modelforge.models import ArtifactKind, DatabaseDialect, DataModel
from modelforge.utils import sha256_hex

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.dispatcher")

# ---------------------------------------------------------------------------
# Artifact metadata
# ---------------------------------------------------------------------------

ARTIFACT_CONTENT_TYPES: Dict[ArtifactKind, str] = {
    ArtifactKind.ENTITY_CLASSES: "csharp",
    ArtifactKind.CONTEXT_CONFIGURATION: "csharp",
    ArtifactKind.DTOS: "csharp",
    ArtifactKind.CONTROLLERS: "csharp",
    ArtifactKind.REPOSITORIES: "csharp",
    ArtifactKind.SERVICES: "csharp",
    ArtifactKind.SQL_SQLSERVER: "sql",
    ArtifactKind.SQL_POSTGRES: "sql",
    ArtifactKind.SQL_MYSQL: "sql",
    ArtifactKind.SQL_SQLITE: "sql",
    ArtifactKind.OPENAPI: "json",
}

ARTIFACT_FILE_NAMES: Dict[ArtifactKind, str] = {
    ArtifactKind.ENTITY_CLASSES: "Entities.cs",
    ArtifactKind.CONTEXT_CONFIGURATION: "DbContext.cs",
    ArtifactKind.DTOS: "Dtos.cs",
    ArtifactKind.CONTROLLERS: "Controllers.cs",
    ArtifactKind.REPOSITORIES: "Repositories.cs",
    ArtifactKind.SERVICES: "Services.cs",
    ArtifactKind.SQL_SQLSERVER: "schema.sqlserver.sql",
    ArtifactKind.SQL_POSTGRES: "schema.postgres.sql",
    ArtifactKind.SQL_MYSQL: "schema.mysql.sql",
    ArtifactKind.SQL_SQLITE: "schema.sqlite.sql",
    ArtifactKind.OPENAPI: "openapi.json",
}

SQL_KIND_DIALECTS: Dict[ArtifactKind, DatabaseDialect] = {
    ArtifactKind.SQL_SQLSERVER: DatabaseDialect.SQLSERVER,
    ArtifactKind.SQL_POSTGRES: DatabaseDialect.POSTGRESQL,
    ArtifactKind.SQL_MYSQL: DatabaseDialect.MYSQL,
    ArtifactKind.SQL_SQLITE: DatabaseDialect.SQLITE,
}

_SOURCE_GENERATORS: Dict[ArtifactKind, Callable[[DataModel], str]] = {
    ArtifactKind.ENTITY_CLASSES: generate_entity_classes,
    ArtifactKind.CONTEXT_CONFIGURATION: generate_context,
    ArtifactKind.DTOS: generate_dtos,
    ArtifactKind.CONTROLLERS: generate_controllers,
    ArtifactKind.REPOSITORIES: generate_repositories,
    ArtifactKind.SERVICES: generate_services,
    ArtifactKind.OPENAPI: generate_openapi,
}


def resolve_kind(kind: Union[ArtifactKind, str]) -> ArtifactKind:
    """Coerce *kind* to ``ArtifactKind`` or raise ``UnknownArtifactKindError``."""
    try:
        return ArtifactKind(kind)
    except ValueError as exc:
        valid: str = ", ".join(k.value for k in ArtifactKind)
        raise UnknownArtifactKindError(
            f"Unknown artifact kind: {kind!r}", hint=f"expected one of {valid}"
        ) from exc


def sql_kind_for(dialect: DatabaseDialect) -> ArtifactKind:
    """The SQL artifact kind of *dialect* (the model's default migration)."""
    dialect = DatabaseDialect(dialect)
    for kind, kind_dialect in SQL_KIND_DIALECTS.items():
        if kind_dialect is dialect:
            return kind
    raise UnknownArtifactKindError(f"No SQL artifact for dialect {dialect.value!r}")


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def generate(
    kind: Union[ArtifactKind, str],
    model: DataModel,
    *,
    include_drops: bool = True,
) -> str:
    """
    Generate one artifact from *model*.

    Args:
        kind: Artifact kind (enum member or its string value).
        model: The model snapshot; never mutated.
        include_drops: SQL kinds only, prefix the script with
            ``DROP TABLE IF EXISTS`` statements.

    Raises:
        UnknownArtifactKindError: *kind* is not one of the eleven kinds.
    """
    resolved: ArtifactKind = resolve_kind(kind)
    dialect: Optional[DatabaseDialect] = SQL_KIND_DIALECTS.get(resolved)
    if dialect is not None:
        return generate_sql(model, dialect, include_drops=include_drops)
    return _SOURCE_GENERATORS[resolved](model)


def generate_all(
    model: DataModel,
    kinds: Optional[Iterable[Union[ArtifactKind, str]]] = None,
    *,
    include_drops: bool = True,
) -> "OrderedDict[ArtifactKind, str]":
    """Generate several artifacts (all eleven by default), in request order."""
    selected: List[ArtifactKind] = (
        list(ArtifactKind) if kinds is None else [resolve_kind(k) for k in kinds]
    )
    results: "OrderedDict[ArtifactKind, str]" = OrderedDict()
    for kind in selected:
        results[kind] = generate(kind, model, include_drops=include_drops)
    logger.debug("Generated %d artifacts for model %r.", len(results), model.name)
    return results


# ---------------------------------------------------------------------------
# Opt-in memo
# ---------------------------------------------------------------------------


def model_fingerprint(model: DataModel) -> str:
    """SHA-256 of the model's canonical JSON."""
    return sha256_hex(model.model_dump_json(by_alias=True))


class ArtifactCache:
    """
    LRU memo of generated artifacts keyed by
    ``(kind, include_drops, model_fingerprint(model))``.

    Purely a performance aid: a hit returns exactly what ``generate`` would
    return for the same snapshot.
    """

    def __init__(self, max_entries: int = 128) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries: int = max_entries
        self._entries: "OrderedDict[Tuple[ArtifactKind, bool, str], str]" = OrderedDict()
        self.hits: int = 0
        self.misses: int = 0

    def get_or_generate(
        self,
        kind: Union[ArtifactKind, str],
        model: DataModel,
        *,
        include_drops: bool = True,
    ) -> str:
        resolved: ArtifactKind = resolve_kind(kind)
        key: Tuple[ArtifactKind, bool, str] = (resolved, include_drops, model_fingerprint(model))

        cached: Optional[str] = self._entries.get(key)
        if cached is not None:
            self._entries.move_to_end(key)
            self.hits += 1
            return cached

        self.misses += 1
        content: str = generate(resolved, model, include_drops=include_drops)
        self._entries[key] = content
        if len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
        return content

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"<ArtifactCache {len(self._entries)}/{self._max_entries} entries, "
            f"{self.hits} hits, {self.misses} misses>"
        )


__all__: List[str] = [
    "ArtifactKind",
    "ARTIFACT_CONTENT_TYPES",
    "ARTIFACT_FILE_NAMES",
    "SQL_KIND_DIALECTS",
    "resolve_kind",
    "sql_kind_for",
    "generate",
    "generate_all",
    "model_fingerprint",
    "ArtifactCache",
]
