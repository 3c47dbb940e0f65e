# File: modelforge/type_maps.py
"""
ModelForge - Type Mapping Tables
=================================
Static lookup tables from the closed ``FieldType`` enum to every target type
system the generators write: C#, the four SQL dialects, and the OpenAPI
``(type, format)`` pair.

Every table must be total over ``FieldType``.  ``_check_total`` runs when
the module is imported, so adding an enum member without extending each
table fails immediately on import instead of producing a silent fallback at
generation time.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Tuple

from modelforge.errors import TypeMappingError
from modelforge.models import DatabaseDialect, FieldType, ReferentialAction

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.type_maps")

# OpenAPI (type, format); format is None when the type needs none.
OpenApiType = Tuple[str, Optional[str]]

# ---------------------------------------------------------------------------
# C#
# ---------------------------------------------------------------------------

CSHARP_TYPE_MAP: Dict[FieldType, str] = {
    FieldType.STRING: "string",
    FieldType.INT: "int",
    FieldType.LONG: "long",
    FieldType.DECIMAL: "decimal",
    FieldType.DOUBLE: "double",
    FieldType.FLOAT: "float",
    FieldType.BOOL: "bool",
    FieldType.DATETIME: "DateTime",
    FieldType.DATEONLY: "DateOnly",
    FieldType.TIMEONLY: "TimeOnly",
    FieldType.GUID: "Guid",
    FieldType.BYTES: "byte[]",
    FieldType.JSON: "string",
}

# ---------------------------------------------------------------------------
# SQL dialects
# ---------------------------------------------------------------------------

SQLSERVER_TYPE_MAP: Dict[FieldType, str] = {
    FieldType.STRING: "NVARCHAR",
    FieldType.INT: "INT",
    FieldType.LONG: "BIGINT",
    FieldType.DECIMAL: "DECIMAL",
    FieldType.DOUBLE: "FLOAT",
    FieldType.FLOAT: "REAL",
    FieldType.BOOL: "BIT",
    FieldType.DATETIME: "DATETIME2",
    FieldType.DATEONLY: "DATE",
    FieldType.TIMEONLY: "TIME",
    FieldType.GUID: "UNIQUEIDENTIFIER",
    FieldType.BYTES: "VARBINARY(MAX)",
    FieldType.JSON: "NVARCHAR(MAX)",
}

POSTGRES_TYPE_MAP: Dict[FieldType, str] = {
    FieldType.STRING: "VARCHAR",
    FieldType.INT: "INTEGER",
    FieldType.LONG: "BIGINT",
    FieldType.DECIMAL: "NUMERIC",
    FieldType.DOUBLE: "DOUBLE PRECISION",
    FieldType.FLOAT: "REAL",
    FieldType.BOOL: "BOOLEAN",
    FieldType.DATETIME: "TIMESTAMP",
    FieldType.DATEONLY: "DATE",
    FieldType.TIMEONLY: "TIME",
    FieldType.GUID: "UUID",
    FieldType.BYTES: "BYTEA",
    FieldType.JSON: "JSONB",
}

MYSQL_TYPE_MAP: Dict[FieldType, str] = {
    FieldType.STRING: "VARCHAR",
    FieldType.INT: "INT",
    FieldType.LONG: "BIGINT",
    FieldType.DECIMAL: "DECIMAL",
    FieldType.DOUBLE: "DOUBLE",
    FieldType.FLOAT: "FLOAT",
    FieldType.BOOL: "TINYINT(1)",
    FieldType.DATETIME: "DATETIME",
    FieldType.DATEONLY: "DATE",
    FieldType.TIMEONLY: "TIME",
    FieldType.GUID: "CHAR(36)",
    FieldType.BYTES: "LONGBLOB",
    FieldType.JSON: "JSON",
}

SQLITE_TYPE_MAP: Dict[FieldType, str] = {
    FieldType.STRING: "TEXT",
    FieldType.INT: "INTEGER",
    FieldType.LONG: "INTEGER",
    FieldType.DECIMAL: "REAL",
    FieldType.DOUBLE: "REAL",
    FieldType.FLOAT: "REAL",
    FieldType.BOOL: "INTEGER",
    FieldType.DATETIME: "TEXT",
    FieldType.DATEONLY: "TEXT",
    FieldType.TIMEONLY: "TEXT",
    FieldType.GUID: "TEXT",
    FieldType.BYTES: "BLOB",
    FieldType.JSON: "TEXT",
}

_SQL_TYPE_MAPS: Dict[DatabaseDialect, Dict[FieldType, str]] = {
    DatabaseDialect.SQLSERVER: SQLSERVER_TYPE_MAP,
    DatabaseDialect.POSTGRESQL: POSTGRES_TYPE_MAP,
    DatabaseDialect.MYSQL: MYSQL_TYPE_MAP,
    DatabaseDialect.SQLITE: SQLITE_TYPE_MAP,
}

# ---------------------------------------------------------------------------
# OpenAPI
# ---------------------------------------------------------------------------

OPENAPI_TYPE_MAP: Dict[FieldType, OpenApiType] = {
    FieldType.STRING: ("string", None),
    FieldType.INT: ("integer", "int32"),
    FieldType.LONG: ("integer", "int64"),
    FieldType.DECIMAL: ("number", "decimal"),
    FieldType.DOUBLE: ("number", "double"),
    FieldType.FLOAT: ("number", "float"),
    FieldType.BOOL: ("boolean", None),
    FieldType.DATETIME: ("string", "date-time"),
    FieldType.DATEONLY: ("string", "date"),
    FieldType.TIMEONLY: ("string", "time"),
    FieldType.GUID: ("string", "uuid"),
    FieldType.BYTES: ("string", "byte"),
    FieldType.JSON: ("object", None),
}

# ---------------------------------------------------------------------------
# Referential actions & dialect extras
# ---------------------------------------------------------------------------

# EF Core ``DeleteBehavior`` member names.
DELETE_BEHAVIOR_MAP: Dict[ReferentialAction, str] = {
    ReferentialAction.CASCADE: "Cascade",
    ReferentialAction.RESTRICT: "Restrict",
    ReferentialAction.SET_NULL: "SetNull",
    ReferentialAction.NO_ACTION: "NoAction",
}

_STANDARD_KEYWORDS: Dict[ReferentialAction, str] = {
    ReferentialAction.CASCADE: "CASCADE",
    ReferentialAction.RESTRICT: "RESTRICT",
    ReferentialAction.SET_NULL: "SET NULL",
    ReferentialAction.NO_ACTION: "NO ACTION",
}

# SQL Server has no RESTRICT; NO ACTION is its equivalent.
SQL_REFERENTIAL_KEYWORDS: Dict[DatabaseDialect, Dict[ReferentialAction, str]] = {
    DatabaseDialect.SQLSERVER: {
        **_STANDARD_KEYWORDS,
        ReferentialAction.RESTRICT: "NO ACTION",
    },
    DatabaseDialect.POSTGRESQL: dict(_STANDARD_KEYWORDS),
    DatabaseDialect.MYSQL: dict(_STANDARD_KEYWORDS),
    DatabaseDialect.SQLITE: dict(_STANDARD_KEYWORDS),
}

# Column type for json fields in ``[Column(TypeName = ...)]`` / ``HasColumnType``.
JSON_COLUMN_TYPES: Dict[DatabaseDialect, str] = {
    DatabaseDialect.SQLSERVER: "nvarchar(max)",
    DatabaseDialect.POSTGRESQL: "jsonb",
    DatabaseDialect.MYSQL: "json",
    DatabaseDialect.SQLITE: "text",
}


# ---------------------------------------------------------------------------
# Lookup functions
# ---------------------------------------------------------------------------


def sql_type_map(dialect: DatabaseDialect) -> Dict[FieldType, str]:
    """Return the SQL type table for *dialect*."""
    try:
        return _SQL_TYPE_MAPS[DatabaseDialect(dialect)]
    except (KeyError, ValueError) as exc:
        raise TypeMappingError(f"Unsupported database dialect: {dialect!r}") from exc


def lookup(table: Mapping[FieldType, object], field_type: FieldType, table_name: str):
    """Index *table* by *field_type*, raising ``TypeMappingError`` on a gap."""
    try:
        return table[field_type]
    except KeyError as exc:
        raise TypeMappingError(
            f"Field type {field_type!r} has no entry in the {table_name} type map.",
            hint="the engine and the model schema are out of sync",
        ) from exc


def csharp_base_type(field_type: FieldType) -> str:
    return lookup(CSHARP_TYPE_MAP, field_type, "C#")


def sql_base_type(field_type: FieldType, dialect: DatabaseDialect) -> str:
    return lookup(sql_type_map(dialect), field_type, f"{DatabaseDialect(dialect).value} SQL")


def openapi_type(field_type: FieldType) -> OpenApiType:
    return lookup(OPENAPI_TYPE_MAP, field_type, "OpenAPI")


# ---------------------------------------------------------------------------
# Import-time completeness check
# ---------------------------------------------------------------------------


def _check_total() -> None:
    tables: Dict[str, Mapping[FieldType, object]] = {
        "C#": CSHARP_TYPE_MAP,
        "SQL Server": SQLSERVER_TYPE_MAP,
        "PostgreSQL": POSTGRES_TYPE_MAP,
        "MySQL": MYSQL_TYPE_MAP,
        "SQLite": SQLITE_TYPE_MAP,
        "OpenAPI": OPENAPI_TYPE_MAP,
    }
    for name, table in tables.items():
        missing: List[str] = [ft.value for ft in FieldType if ft not in table]
        if missing:
            raise TypeMappingError(
                f"The {name} type map is missing entries for: {', '.join(missing)}"
            )

    for dialect in DatabaseDialect:
        if dialect not in _SQL_TYPE_MAPS or dialect not in JSON_COLUMN_TYPES:
            raise TypeMappingError(f"Dialect {dialect.value!r} has no type tables.")
        keywords = SQL_REFERENTIAL_KEYWORDS.get(dialect, {})
        if any(action not in keywords for action in ReferentialAction):
            raise TypeMappingError(
                f"Dialect {dialect.value!r} lacks referential action keywords."
            )

    if any(action not in DELETE_BEHAVIOR_MAP for action in ReferentialAction):
        raise TypeMappingError("DELETE_BEHAVIOR_MAP does not cover every action.")


_check_total()


__all__: List[str] = [
    "OpenApiType",
    "CSHARP_TYPE_MAP",
    "SQLSERVER_TYPE_MAP",
    "POSTGRES_TYPE_MAP",
    "MYSQL_TYPE_MAP",
    "SQLITE_TYPE_MAP",
    "OPENAPI_TYPE_MAP",
    "DELETE_BEHAVIOR_MAP",
    "SQL_REFERENTIAL_KEYWORDS",
    "JSON_COLUMN_TYPES",
    "sql_type_map",
    "lookup",
    "csharp_base_type",
    "sql_base_type",
    "openapi_type",
]
