# File: modelforge/attributes.py
"""
ModelForge - Attribute & Constraint Renderer
=============================================
Turns a field's ``FieldConstraints`` into target-syntax fragments:

* C# types with nullability, data-annotation attributes and property
  initialisers (entity classes and DTOs),
* SQL column types, column definitions and DEFAULT clauses per dialect,
* per-dialect identifier quoting.

Default-value tokens are opaque strings.  Only a few are recognised
(``newguid``/``newid`` for Guid, ``now``/``getdate``/``utcnow``/``getutcdate``
for DateTime); anything else is emitted as-is without type checking.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List, Optional, Tuple

from modelforge.models import DatabaseDialect, Entity, EntityField, FieldType
from modelforge.queries import table_name
from modelforge.type_maps import JSON_COLUMN_TYPES, csharp_base_type, sql_base_type

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.attributes")

DEFAULT_PRECISION: int = 18
DEFAULT_SCALE: int = 2

_NEW_GUID_TOKENS: FrozenSet[str] = frozenset({"newguid", "newid"})
_LOCAL_NOW_TOKENS: FrozenSet[str] = frozenset({"now", "getdate"})
_UTC_NOW_TOKENS: FrozenSet[str] = frozenset({"utcnow", "getutcdate"})
_TRUE_TOKENS: FrozenSet[str] = frozenset({"true", "1", "yes"})

_IDENTITY_TYPES: FrozenSet[FieldType] = frozenset({FieldType.INT, FieldType.LONG})

_LOCAL_NOW_SQL: Dict[DatabaseDialect, str] = {
    DatabaseDialect.SQLSERVER: "GETDATE()",
    DatabaseDialect.POSTGRESQL: "CURRENT_TIMESTAMP",
    DatabaseDialect.MYSQL: "CURRENT_TIMESTAMP",
    DatabaseDialect.SQLITE: "(datetime('now'))",
}

_UTC_NOW_SQL: Dict[DatabaseDialect, str] = {
    DatabaseDialect.SQLSERVER: "GETUTCDATE()",
    DatabaseDialect.POSTGRESQL: "(CURRENT_TIMESTAMP AT TIME ZONE 'UTC')",
    DatabaseDialect.MYSQL: "(UTC_TIMESTAMP())",
    DatabaseDialect.SQLITE: "(datetime('now'))",
}

_NEW_GUID_SQL: Dict[DatabaseDialect, str] = {
    DatabaseDialect.SQLSERVER: "NEWID()",
    DatabaseDialect.POSTGRESQL: "gen_random_uuid()",
    DatabaseDialect.MYSQL: "(UUID())",
}


def _is_nullable(field: EntityField) -> bool:
    return not (field.constraints.is_required or field.constraints.is_primary_key)


def _token(field: EntityField) -> Optional[str]:
    """The default-value token, or None when unset or empty."""
    value: Optional[str] = field.constraints.default_value
    return value if value else None


def precision_scale(field: EntityField) -> Tuple[int, int]:
    """Precision and scale with the 18 / 2 defaults filled in."""
    c = field.constraints
    precision: int = c.precision if c.precision is not None else DEFAULT_PRECISION
    scale: int = c.scale if c.scale is not None else DEFAULT_SCALE
    return precision, scale


def needs_precision(field: EntityField) -> bool:
    """Decimal fields carrying an explicit precision or scale."""
    c = field.constraints
    return field.type is FieldType.DECIMAL and bool(c.precision or c.scale)


# ---------------------------------------------------------------------------
# C# rendering
# ---------------------------------------------------------------------------


def csharp_string_literal(value: str) -> str:
    escaped: str = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def csharp_type(field: EntityField, force_nullable: bool = False) -> str:
    """C# type, suffixed with ``?`` unless the field is required or a key."""
    base: str = csharp_base_type(field.type)
    if force_nullable or _is_nullable(field):
        return f"{base}?"
    return base


def validation_attributes(field: EntityField, include_required: bool = True) -> List[str]:
    """Write-time validation annotations (required marker, length, pattern)."""
    c = field.constraints
    attrs: List[str] = []

    # Value types are non-null by type; only strings need [Required].
    if include_required and c.is_required and not c.is_primary_key and field.type is FieldType.STRING:
        attrs.append("[Required]")

    if field.type is FieldType.STRING:
        if c.max_length and c.min_length:
            attrs.append(f"[StringLength({c.max_length}, MinimumLength = {c.min_length})]")
        elif c.max_length:
            attrs.append(f"[MaxLength({c.max_length})]")
        elif c.min_length:
            attrs.append(f"[MinLength({c.min_length})]")

    if c.regex:
        # C# verbatim string: only the double quote needs escaping.
        pattern: str = c.regex.replace('"', '""')
        attrs.append(f'[RegularExpression(@"{pattern}")]')

    return attrs


def field_attributes(
    field: EntityField, dialect: DatabaseDialect = DatabaseDialect.SQLSERVER
) -> List[str]:
    """Every data annotation placed on an entity-class property."""
    c = field.constraints
    attrs: List[str] = []

    if c.is_primary_key:
        attrs.append("[Key]")
        if c.is_auto_generated and field.type in (FieldType.INT, FieldType.LONG, FieldType.GUID):
            attrs.append("[DatabaseGenerated(DatabaseGeneratedOption.Identity)]")

    attrs.extend(validation_attributes(field))

    if needs_precision(field):
        precision, scale = precision_scale(field)
        attrs.append(f"[Precision({precision}, {scale})]")

    if field.type is FieldType.JSON:
        attrs.append(f'[Column(TypeName = "{JSON_COLUMN_TYPES[DatabaseDialect(dialect)]}")]')

    return attrs


def default_value_expression(field: EntityField) -> str:
    """
    Property initialiser such as `` = true;`` (empty string when none).

    Required strings without a default get `` = string.Empty;``.
    """
    token: Optional[str] = _token(field)

    if token is None:
        if field.type is FieldType.STRING and field.constraints.is_required:
            return " = string.Empty;"
        return ""

    lowered: str = token.strip().lower()

    if field.type is FieldType.STRING:
        return f" = {csharp_string_literal(token)};"
    if field.type is FieldType.BOOL:
        return " = true;" if lowered in _TRUE_TOKENS else " = false;"
    if field.type is FieldType.GUID:
        if lowered in _NEW_GUID_TOKENS:
            return " = Guid.NewGuid();"
        return f" = Guid.Parse({csharp_string_literal(token)});"
    if field.type is FieldType.DATETIME:
        if lowered in _LOCAL_NOW_TOKENS:
            return " = DateTime.Now;"
        if lowered in _UTC_NOW_TOKENS:
            return " = DateTime.UtcNow;"
        return ""
    return f" = {token};"


# ---------------------------------------------------------------------------
# SQL rendering
# ---------------------------------------------------------------------------


def quote_identifier(name: str, dialect: DatabaseDialect = DatabaseDialect.SQLSERVER) -> str:
    """``[x]`` for SQL Server, backticks for MySQL, double quotes otherwise."""
    dialect = DatabaseDialect(dialect)
    if dialect is DatabaseDialect.SQLSERVER:
        return f"[{name}]"
    if dialect is DatabaseDialect.MYSQL:
        return f"`{name}`"
    return f'"{name}"'


def qualified_table_name(entity: Entity, dialect: DatabaseDialect) -> str:
    """Quoted table name, prefixed with the quoted schema where supported."""
    dialect = DatabaseDialect(dialect)
    quoted: str = quote_identifier(table_name(entity), dialect)
    # SQLite has no schemas, only attached databases.
    if entity.schema_name and dialect is not DatabaseDialect.SQLITE:
        return f"{quote_identifier(entity.schema_name, dialect)}.{quoted}"
    return quoted


def sql_type(field: EntityField, dialect: DatabaseDialect = DatabaseDialect.SQLSERVER) -> str:
    """Column type including string length and decimal precision."""
    dialect = DatabaseDialect(dialect)
    c = field.constraints

    if field.type is FieldType.STRING:
        if dialect is DatabaseDialect.SQLITE:
            return "TEXT"
        if c.max_length:
            if dialect is DatabaseDialect.SQLSERVER:
                return f"NVARCHAR({c.max_length})"
            return f"VARCHAR({c.max_length})"
        return "NVARCHAR(MAX)" if dialect is DatabaseDialect.SQLSERVER else "TEXT"

    if field.type is FieldType.DECIMAL:
        if dialect is DatabaseDialect.SQLITE:
            return "REAL"
        precision, scale = precision_scale(field)
        return f"DECIMAL({precision}, {scale})"

    return sql_base_type(field.type, dialect)


def sql_string_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def sql_default_clause(field: EntityField, dialect: DatabaseDialect = DatabaseDialect.SQLSERVER) -> str:
    """`` DEFAULT ...`` for the field's token; empty for auto-generated fields."""
    dialect = DatabaseDialect(dialect)
    token: Optional[str] = _token(field)
    if token is None or field.constraints.is_auto_generated:
        return ""

    lowered: str = token.strip().lower()

    if field.type is FieldType.STRING:
        return f" DEFAULT {sql_string_literal(token)}"
    if field.type is FieldType.BOOL:
        truthy: bool = lowered in _TRUE_TOKENS
        if dialect is DatabaseDialect.POSTGRESQL:
            return " DEFAULT TRUE" if truthy else " DEFAULT FALSE"
        return " DEFAULT 1" if truthy else " DEFAULT 0"
    if field.type is FieldType.DATETIME:
        if lowered in _LOCAL_NOW_TOKENS:
            return f" DEFAULT {_LOCAL_NOW_SQL[dialect]}"
        if lowered in _UTC_NOW_TOKENS:
            return f" DEFAULT {_UTC_NOW_SQL[dialect]}"
        return ""
    if field.type is FieldType.GUID:
        if lowered in _NEW_GUID_TOKENS:
            generator: Optional[str] = _NEW_GUID_SQL.get(dialect)
            return f" DEFAULT {generator}" if generator else ""
        return f" DEFAULT {sql_string_literal(token)}"
    return f" DEFAULT {token}"


def sql_column_definition(
    field: EntityField, dialect: DatabaseDialect = DatabaseDialect.SQLSERVER
) -> str:
    """
    Everything after the column name in a CREATE TABLE line.

    ``{type} {NOT NULL|NULL}`` followed by PRIMARY KEY, identity / serial /
    AUTO_INCREMENT handling, UNIQUE and the DEFAULT clause.  On SQLite an
    auto-generated integer key is rewritten to the whole
    ``INTEGER PRIMARY KEY AUTOINCREMENT`` clause.
    """
    dialect = DatabaseDialect(dialect)
    c = field.constraints
    auto_identity: bool = c.is_auto_generated and field.type in _IDENTITY_TYPES

    if dialect is DatabaseDialect.SQLITE and auto_identity and c.is_primary_key:
        return "INTEGER PRIMARY KEY AUTOINCREMENT"

    column_type: str = sql_type(field, dialect)
    if auto_identity and dialect is DatabaseDialect.SQLSERVER:
        column_type = f"{column_type} IDENTITY(1,1)"
    elif auto_identity and dialect is DatabaseDialect.POSTGRESQL:
        column_type = "BIGSERIAL" if field.type is FieldType.LONG else "SERIAL"

    parts: List[str] = [column_type, "NULL" if _is_nullable(field) else "NOT NULL"]

    if c.is_primary_key:
        parts.append("PRIMARY KEY")
    if auto_identity and dialect is DatabaseDialect.MYSQL:
        parts.append("AUTO_INCREMENT")
    if c.is_unique and not c.is_primary_key:
        parts.append("UNIQUE")

    definition: str = " ".join(parts)

    if c.is_auto_generated and field.type is FieldType.GUID:
        generator: Optional[str] = _NEW_GUID_SQL.get(dialect)
        if generator:
            definition += f" DEFAULT {generator}"

    return definition + sql_default_clause(field, dialect)


__all__: List[str] = [
    "DEFAULT_PRECISION",
    "DEFAULT_SCALE",
    "needs_precision",
    "precision_scale",
    "csharp_string_literal",
    "csharp_type",
    "validation_attributes",
    "field_attributes",
    "default_value_expression",
    "quote_identifier",
    "qualified_table_name",
    "sql_type",
    "sql_string_literal",
    "sql_default_clause",
    "sql_column_definition",
]
