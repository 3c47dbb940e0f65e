# File: modelforge/models.py
"""
ModelForge - Core Data Models
==============================
Pydantic V2 models describing the entity-relationship **DataModel** that the
editing layer hands to the generation engine, plus the settings that steer a
generation run.

The engine only ever *reads* these objects: every model is frozen, and a
``DataModel`` instance is treated as an immutable snapshot for the duration
of one generation call.

Input compatibility:
    The editing UI serialises models as camelCase JSON (``sourceEntityId``,
    ``isPrimaryKey``, ``tableName`` ...).  All models use a camelCase alias
    generator with ``populate_by_name=True`` so both the UI payload and
    snake_case keyword arguments are accepted.  Unknown keys are ignored.

Structural validation only:
    Pydantic checks shapes and enum values.  Referential integrity (relation
    endpoints, index targets, single primary key) is *not* enforced here:
    the model is edited live and is routinely in a transiently inconsistent
    state, which the generators tolerate.  ``modelforge.validators`` reports
    such problems without blocking generation.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.models")

# ---------------------------------------------------------------------------
# Enums: closed sets used across the entire project
# ---------------------------------------------------------------------------


class FieldType(str, Enum):
    """Abstract field types offered by the model designer."""

    STRING = "string"
    INT = "int"
    LONG = "long"
    DECIMAL = "decimal"
    DOUBLE = "double"
    FLOAT = "float"
    BOOL = "bool"
    DATETIME = "DateTime"
    DATEONLY = "DateOnly"
    TIMEONLY = "TimeOnly"
    GUID = "Guid"
    BYTES = "byte[]"
    JSON = "json"


class Cardinality(str, Enum):
    """Relation cardinalities."""

    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


class ReferentialAction(str, Enum):
    """Foreign-key ON DELETE / ON UPDATE behaviour."""

    CASCADE = "cascade"
    SET_NULL = "set-null"
    NO_ACTION = "no-action"
    RESTRICT = "restrict"


class DatabaseDialect(str, Enum):
    """Supported SQL dialects."""

    SQLSERVER = "sqlserver"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class ArtifactKind(str, Enum):
    """Every text artifact the dispatcher can produce."""

    ENTITY_CLASSES = "entity-classes"
    CONTEXT_CONFIGURATION = "context-configuration"
    DTOS = "dtos"
    CONTROLLERS = "controllers"
    REPOSITORIES = "repositories"
    SERVICES = "services"
    SQL_SQLSERVER = "sql-sqlserver"
    SQL_POSTGRES = "sql-postgres"
    SQL_MYSQL = "sql-mysql"
    SQL_SQLITE = "sql-sqlite"
    OPENAPI = "openapi"


# Alternative spellings accepted from older model files / other editors.
_FIELD_TYPE_ALIASES: Dict[str, str] = {
    "byte-array": "byte[]",
    "bytes": "byte[]",
}

_REFERENTIAL_ACTION_ALIASES: Dict[str, str] = {
    "setnull": "set-null",
    "set null": "set-null",
    "set_null": "set-null",
    "noaction": "no-action",
    "no action": "no-action",
    "no_action": "no-action",
}

_DIALECT_ALIASES: Dict[str, str] = {
    "mssql": "sqlserver",
    "sql-server": "sqlserver",
    "postgres": "postgresql",
}


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
)


# ---------------------------------------------------------------------------
# Field-level primitives
# ---------------------------------------------------------------------------


class FieldConstraints(BaseModel):
    """Constraint set attached to a single field (value object)."""

    model_config = _SHARED_CONFIG

    is_required: bool = Field(default=False, description="NOT NULL / non-optional.")
    is_unique: bool = Field(default=False, description="Has a UNIQUE constraint?")
    is_primary_key: bool = Field(default=False, description="Part of the primary key?")
    is_auto_generated: bool = Field(
        default=False, description="Identity / serial / generated on insert."
    )
    max_length: Optional[int] = Field(default=None, ge=0, description="Max string length.")
    min_length: Optional[int] = Field(default=None, ge=0, description="Min string length.")
    precision: Optional[int] = Field(default=None, ge=0, description="Decimal precision.")
    scale: Optional[int] = Field(default=None, ge=0, description="Decimal scale.")
    default_value: Optional[str] = Field(
        default=None,
        description="Opaque default token, interpreted per type by each generator.",
    )
    regex: Optional[str] = Field(default=None, description="Validation pattern (verbatim).")

    @field_validator("default_value", mode="before")
    @classmethod
    def _stringify_default(cls, v: Any) -> Optional[str]:
        # JSON editors send numbers and booleans unquoted.
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, bool):
            return "true" if v else "false"
        return str(v)


class EntityField(BaseModel):
    """One typed, constrained attribute of an entity."""

    model_config = _SHARED_CONFIG

    id: str = Field(..., description="Stable identifier.")
    name: str = Field(..., min_length=1, description="Field name as typed by the user.")
    type: FieldType = Field(..., description="Abstract field type.")
    constraints: FieldConstraints = Field(default_factory=FieldConstraints)
    description: Optional[str] = Field(default=None, description="Free-text documentation.")
    order: int = Field(
        default=0,
        description="Display-order hint. Generators iterate the fields list in "
        "array order; this value is advisory metadata only.",
    )

    @field_validator("type", mode="before")
    @classmethod
    def _normalise_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _FIELD_TYPE_ALIASES.get(v.lower(), v)
        return v

    def __repr__(self) -> str:
        pk_flag: str = " PK" if self.constraints.is_primary_key else ""
        req_flag: str = " required" if self.constraints.is_required else ""
        return f"<Field {self.name}: {self.type.value}{pk_flag}{req_flag}>"


class Position(BaseModel):
    """Canvas position (cosmetic, ignored by generators)."""

    model_config = _SHARED_CONFIG

    x: float = 0.0
    y: float = 0.0


# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------


class Entity(BaseModel):
    """
    One modelled table / class.

    ``fields`` preserves insertion order, which is the emission order of
    every generator.  ``is_abstract`` is carried through faithfully but not
    consumed by any generator.
    """

    model_config = _SHARED_CONFIG

    id: str = Field(..., description="Stable identifier, independent of the name.")
    name: str = Field(..., min_length=1, description="Entity name (unique within a model).")
    table_name: Optional[str] = Field(
        default=None, description="Custom table name (defaults to the pluralised name)."
    )
    schema_name: Optional[str] = Field(
        default=None, alias="schema", description="Database schema / namespace qualifier."
    )
    description: Optional[str] = Field(default=None, description="Free-text documentation.")
    fields: List[EntityField] = Field(default_factory=list, description="Ordered fields.")
    color: Optional[str] = Field(default=None, description="Display colour (cosmetic).")
    position: Optional[Position] = Field(default=None, description="Canvas position (cosmetic).")
    is_abstract: bool = Field(default=False, description="Carried, not consumed.")

    def __repr__(self) -> str:
        return f"<Entity {self.name} ({len(self.fields)} fields)>"


# ---------------------------------------------------------------------------
# Relation & Index
# ---------------------------------------------------------------------------


class Relation(BaseModel):
    """
    Directed association from a source entity to a target entity.

    For one-to-one and one-to-many the source is the dependent side that
    holds the foreign key; for many-to-many neither side holds a column and
    a join table is implied.
    """

    model_config = _SHARED_CONFIG

    id: str = Field(..., description="Stable identifier.")
    name: str = Field(default="", description="Relation label.")
    source_entity_id: str = Field(..., description="Dependent / FK-holding entity.")
    target_entity_id: str = Field(..., description="Referenced entity.")
    cardinality: Cardinality = Field(default=Cardinality.ONE_TO_MANY)
    source_field_id: Optional[str] = Field(default=None, description="Join-column hint.")
    target_field_id: Optional[str] = Field(default=None, description="Join-column hint.")
    foreign_key_name: Optional[str] = Field(
        default=None, description="Custom FK property name (defaults to {Target}Id)."
    )
    on_delete: ReferentialAction = Field(default=ReferentialAction.NO_ACTION)
    on_update: ReferentialAction = Field(default=ReferentialAction.NO_ACTION)

    @field_validator("on_delete", "on_update", mode="before")
    @classmethod
    def _normalise_action(cls, v: Any) -> Any:
        if v is None or v == "":
            return ReferentialAction.NO_ACTION
        if isinstance(v, str):
            key: str = v.strip().lower()
            return _REFERENTIAL_ACTION_ALIASES.get(key, key)
        return v

    def __repr__(self) -> str:
        return (
            f"<Relation {self.source_entity_id} -> {self.target_entity_id} "
            f"({self.cardinality.value})>"
        )


class Index(BaseModel):
    """Model-level (possibly composite) index on one entity."""

    model_config = _SHARED_CONFIG

    id: str = Field(..., description="Stable identifier.")
    name: str = Field(..., min_length=1, description="Index name.")
    entity_id: str = Field(..., description="Owning entity.")
    field_ids: List[str] = Field(default_factory=list, description="Ordered field ids.")
    is_unique: bool = Field(default=False)
    is_clustered: bool = Field(default=False, description="Only meaningful for SQL Server.")


# ---------------------------------------------------------------------------
# DataModel (root aggregate)
# ---------------------------------------------------------------------------


class DataModel(BaseModel):
    """
    Root aggregate: entities, relations and indexes being edited.

    ``entities`` order drives the emission order of every generator.
    """

    model_config = _SHARED_CONFIG

    id: str = Field(default="", description="Model identifier.")
    name: str = Field(default="DataModel", description="Model name (drives namespaces).")
    description: Optional[str] = Field(default=None)
    version: str = Field(default="1.0.0", description="Model version (OpenAPI info.version).")
    created_at: Optional[datetime] = Field(default=None)
    updated_at: Optional[datetime] = Field(default=None)
    database_type: DatabaseDialect = Field(
        default=DatabaseDialect.SQLSERVER,
        description="Dialect used for the default migration and json column types.",
    )
    entities: List[Entity] = Field(default_factory=list)
    relations: List[Relation] = Field(default_factory=list)
    indexes: List[Index] = Field(default_factory=list)

    @field_validator("database_type", mode="before")
    @classmethod
    def _normalise_dialect(cls, v: Any) -> Any:
        if v is None or v == "":
            return DatabaseDialect.SQLSERVER
        if isinstance(v, str):
            key: str = v.strip().lower()
            return _DIALECT_ALIASES.get(key, key)
        return v

    @property
    def entity_count(self) -> int:
        return len(self.entities)

    @property
    def field_count(self) -> int:
        return sum(len(e.fields) for e in self.entities)

    def __repr__(self) -> str:
        return (
            f"<DataModel {self.name!r} {len(self.entities)} entities, "
            f"{len(self.relations)} relations, {len(self.indexes)} indexes>"
        )


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Settings for a file-based generation run (CLI / ``ModelGenerator``).

    The dispatcher itself only needs a ``DataModel``; these options control
    which artifacts are exported and how.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )

    include_drop_statements: bool = Field(
        default=True, description="Prefix SQL scripts with DROP TABLE IF EXISTS."
    )
    dialect_override: Optional[DatabaseDialect] = Field(
        default=None,
        description="Replaces the model's database_type for json column types.",
    )
    kinds: List[ArtifactKind] = Field(
        default_factory=lambda: list(ArtifactKind),
        description="Artifact kinds to export.",
    )
    strict: bool = Field(
        default=False, description="Abort the run when validation reports errors."
    )
    write_manifest: bool = Field(default=True, description="Write manifest.json.")
    clean_output: bool = Field(
        default=False, description="Remove previous files from the output directory."
    )

    @field_validator("kinds")
    @classmethod
    def _unique_kinds(cls, v: List[ArtifactKind]) -> List[ArtifactKind]:
        if not v:
            raise ValueError("At least one artifact kind must be selected.")
        seen: List[ArtifactKind] = []
        for kind in v:
            if kind not in seen:
                seen.append(kind)
        return seen


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FieldType",
    "Cardinality",
    "ReferentialAction",
    "DatabaseDialect",
    "ArtifactKind",
    "FieldConstraints",
    "EntityField",
    "Position",
    "Entity",
    "Relation",
    "Index",
    "DataModel",
    "GenerationConfig",
]

logger.debug("modelforge.models loaded — %d public symbols.", len(__all__))
