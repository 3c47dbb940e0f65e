"""
tests/test_type_maps.py
Tests for modelforge.type_maps: every table is total over FieldType and
lookups fail loudly on a gap.
"""

from __future__ import annotations

import pytest

from modelforge.errors import ModelForgeError, TypeMappingError
from modelforge.models import DatabaseDialect, FieldType, ReferentialAction
from modelforge.type_maps import (
    CSHARP_TYPE_MAP,
    DELETE_BEHAVIOR_MAP,
    JSON_COLUMN_TYPES,
    OPENAPI_TYPE_MAP,
    SQL_REFERENTIAL_KEYWORDS,
    csharp_base_type,
    lookup,
    openapi_type,
    sql_base_type,
    sql_type_map,
)


class TestTotality:
    """Each of the five target type systems covers every field type."""

    @pytest.mark.parametrize("field_type", list(FieldType))
    def test_csharp(self, field_type: FieldType) -> None:
        assert csharp_base_type(field_type)

    @pytest.mark.parametrize("dialect", list(DatabaseDialect))
    @pytest.mark.parametrize("field_type", list(FieldType))
    def test_sql(self, dialect: DatabaseDialect, field_type: FieldType) -> None:
        assert sql_base_type(field_type, dialect)

    @pytest.mark.parametrize("field_type", list(FieldType))
    def test_openapi(self, field_type: FieldType) -> None:
        type_name, _ = openapi_type(field_type)
        assert type_name in ("string", "integer", "number", "boolean", "object")

    def test_referential_tables_cover_every_action(self) -> None:
        for action in ReferentialAction:
            assert action in DELETE_BEHAVIOR_MAP
            for dialect in DatabaseDialect:
                assert action in SQL_REFERENTIAL_KEYWORDS[dialect]

    def test_json_column_types_cover_every_dialect(self) -> None:
        assert set(JSON_COLUMN_TYPES) == set(DatabaseDialect)


class TestMappings:
    """Spot checks of individual entries."""

    def test_csharp_entries(self) -> None:
        assert CSHARP_TYPE_MAP[FieldType.GUID] == "Guid"
        assert CSHARP_TYPE_MAP[FieldType.BYTES] == "byte[]"
        assert CSHARP_TYPE_MAP[FieldType.JSON] == "string"

    @pytest.mark.parametrize(
        "dialect, expected",
        [
            (DatabaseDialect.SQLSERVER, "UNIQUEIDENTIFIER"),
            (DatabaseDialect.POSTGRESQL, "UUID"),
            (DatabaseDialect.MYSQL, "CHAR(36)"),
            (DatabaseDialect.SQLITE, "TEXT"),
        ],
    )
    def test_guid_per_dialect(self, dialect: DatabaseDialect, expected: str) -> None:
        assert sql_base_type(FieldType.GUID, dialect) == expected

    def test_bool_per_dialect(self) -> None:
        assert sql_base_type(FieldType.BOOL, DatabaseDialect.SQLSERVER) == "BIT"
        assert sql_base_type(FieldType.BOOL, DatabaseDialect.POSTGRESQL) == "BOOLEAN"
        assert sql_base_type(FieldType.BOOL, DatabaseDialect.MYSQL) == "TINYINT(1)"
        assert sql_base_type(FieldType.BOOL, DatabaseDialect.SQLITE) == "INTEGER"

    def test_openapi_formats(self) -> None:
        assert OPENAPI_TYPE_MAP[FieldType.DATETIME] == ("string", "date-time")
        assert OPENAPI_TYPE_MAP[FieldType.GUID] == ("string", "uuid")
        assert OPENAPI_TYPE_MAP[FieldType.BOOL] == ("boolean", None)

    def test_delete_behaviors(self) -> None:
        assert DELETE_BEHAVIOR_MAP[ReferentialAction.CASCADE] == "Cascade"
        assert DELETE_BEHAVIOR_MAP[ReferentialAction.SET_NULL] == "SetNull"

    def test_sqlserver_has_no_restrict(self) -> None:
        keywords = SQL_REFERENTIAL_KEYWORDS[DatabaseDialect.SQLSERVER]
        assert keywords[ReferentialAction.RESTRICT] == "NO ACTION"
        assert SQL_REFERENTIAL_KEYWORDS[DatabaseDialect.POSTGRESQL][ReferentialAction.RESTRICT] == "RESTRICT"

    def test_string_dialect_accepted(self) -> None:
        assert sql_type_map("postgresql")[FieldType.JSON] == "JSONB"


class TestErrors:
    """Gaps raise TypeMappingError instead of returning a placeholder."""

    def test_lookup_gap(self) -> None:
        with pytest.raises(TypeMappingError) as exc_info:
            lookup({}, FieldType.STRING, "empty")
        assert "empty" in str(exc_info.value)
        assert exc_info.value.hint

    def test_unknown_dialect(self) -> None:
        with pytest.raises(TypeMappingError):
            sql_type_map("oracle")  # type: ignore[arg-type]

    def test_error_hierarchy(self) -> None:
        assert issubclass(TypeMappingError, ModelForgeError)
        assert issubclass(TypeMappingError, ValueError)
