"""
tests/test_models.py
Tests for the pydantic models: camelCase input, alias normalisation,
immutability and GenerationConfig checks.
"""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError as PydanticValidationError

from modelforge.models import (
    ArtifactKind,
    Cardinality,
    DatabaseDialect,
    DataModel,
    Entity,
    EntityField,
    FieldConstraints,
    FieldType,
    GenerationConfig,
    ReferentialAction,
    Relation,
)


# ===========================================================================
# Input parsing
# ===========================================================================


class TestDataModelParsing:
    """camelCase payloads from the editor."""

    def test_camel_case_payload(self, user_order_model: DataModel) -> None:
        assert user_order_model.name == "Shop"
        assert user_order_model.entity_count == 2
        assert user_order_model.field_count == 4
        user = user_order_model.entities[0]
        assert user.fields[0].constraints.is_primary_key is True
        assert user.fields[1].constraints.max_length == 255
        relation = user_order_model.relations[0]
        assert relation.source_entity_id == "e-order"
        assert relation.on_delete is ReferentialAction.CASCADE

    def test_snake_case_keywords_accepted(self) -> None:
        field = EntityField(
            id="f1",
            name="Email",
            type=FieldType.STRING,
            constraints=FieldConstraints(is_required=True, max_length=10),
        )
        assert field.constraints.is_required is True

    def test_defaults(self) -> None:
        model = DataModel()
        assert model.name == "DataModel"
        assert model.version == "1.0.0"
        assert model.database_type is DatabaseDialect.SQLSERVER
        assert model.entities == []

    def test_unknown_keys_ignored(self) -> None:
        entity = Entity.model_validate({"id": "e", "name": "X", "somethingElse": 1})
        assert entity.name == "X"

    def test_schema_alias(self) -> None:
        entity = Entity.model_validate({"id": "e", "name": "X", "schema": "sales"})
        assert entity.schema_name == "sales"

    def test_relation_defaults(self) -> None:
        relation = Relation.model_validate(
            {"id": "r", "sourceEntityId": "a", "targetEntityId": "b"}
        )
        assert relation.cardinality is Cardinality.ONE_TO_MANY
        assert relation.on_delete is ReferentialAction.NO_ACTION
        assert relation.on_update is ReferentialAction.NO_ACTION

    def test_empty_field_name_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            EntityField.model_validate({"id": "f", "name": "", "type": "string"})

    def test_unknown_field_type_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            EntityField.model_validate({"id": "f", "name": "X", "type": "varchar"})


# ===========================================================================
# Normalisation
# ===========================================================================


class TestNormalisation:
    """Alias spellings accepted for enums and defaults."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("set null", ReferentialAction.SET_NULL),
            ("SetNull", ReferentialAction.SET_NULL),
            ("no_action", ReferentialAction.NO_ACTION),
            ("", ReferentialAction.NO_ACTION),
            ("Cascade", ReferentialAction.CASCADE),
        ],
    )
    def test_referential_action_aliases(self, raw: str, expected: ReferentialAction) -> None:
        relation = Relation.model_validate(
            {"id": "r", "sourceEntityId": "a", "targetEntityId": "b", "onDelete": raw}
        )
        assert relation.on_delete is expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("postgres", DatabaseDialect.POSTGRESQL),
            ("mssql", DatabaseDialect.SQLSERVER),
            ("MySQL", DatabaseDialect.MYSQL),
            (None, DatabaseDialect.SQLSERVER),
        ],
    )
    def test_dialect_aliases(self, raw: Any, expected: DatabaseDialect) -> None:
        model = DataModel.model_validate({"databaseType": raw})
        assert model.database_type is expected

    def test_field_type_alias(self) -> None:
        field = EntityField.model_validate({"id": "f", "name": "Blob", "type": "bytes"})
        assert field.type is FieldType.BYTES

    @pytest.mark.parametrize("raw, expected", [(True, "true"), (False, "false"), (42, "42"), (1.5, "1.5")])
    def test_default_value_stringified(self, raw: Any, expected: str) -> None:
        constraints = FieldConstraints.model_validate({"defaultValue": raw})
        assert constraints.default_value == expected


# ===========================================================================
# Immutability
# ===========================================================================


class TestImmutability:
    """Generators only ever read model snapshots."""

    def test_entity_is_frozen(self, user_order_model: DataModel) -> None:
        with pytest.raises(PydanticValidationError):
            user_order_model.entities[0].name = "Renamed"  # type: ignore[misc]

    def test_model_copy_leaves_original(self, user_order_model: DataModel) -> None:
        copy = user_order_model.model_copy(update={"database_type": DatabaseDialect.MYSQL})
        assert copy.database_type is DatabaseDialect.MYSQL
        assert user_order_model.database_type is DatabaseDialect.SQLSERVER


# ===========================================================================
# GenerationConfig
# ===========================================================================


class TestGenerationConfig:
    """Run settings."""

    def test_defaults_select_every_kind(self) -> None:
        config = GenerationConfig()
        assert config.kinds == list(ArtifactKind)
        assert config.include_drop_statements is True
        assert config.strict is False

    def test_camel_case_keys(self) -> None:
        config = GenerationConfig.model_validate(
            {"includeDropStatements": False, "dialectOverride": "sqlite", "kinds": ["openapi"]}
        )
        assert config.include_drop_statements is False
        assert config.dialect_override is DatabaseDialect.SQLITE
        assert config.kinds == [ArtifactKind.OPENAPI]

    def test_duplicate_kinds_removed(self) -> None:
        config = GenerationConfig.model_validate({"kinds": ["dtos", "openapi", "dtos"]})
        assert config.kinds == [ArtifactKind.DTOS, ArtifactKind.OPENAPI]

    def test_empty_kinds_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            GenerationConfig.model_validate({"kinds": []})

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            GenerationConfig.model_validate({"outputFormat": "zip"})

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            GenerationConfig.model_validate({"kinds": ["graphql"]})
