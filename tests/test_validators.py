"""
tests/test_validators.py
Tests for the model validation pipeline.
"""

from __future__ import annotations

from typing import Any, Dict

from modelforge.models import DataModel, GenerationConfig
from modelforge.validators import (
    ValidationError,
    ValidationResult,
    validate_entity_names,
    validate_fields,
    validate_full,
    validate_generation_config,
    validate_indexes,
    validate_metadata,
    validate_primary_keys,
    validate_relations,
)


def _field(field_id: str, name: str, field_type: str = "string", **constraints: Any) -> Dict[str, Any]:
    return {"id": field_id, "name": name, "type": field_type, "constraints": constraints}


# ===========================================================================
# ValidationResult
# ===========================================================================


class TestValidationResult:
    """Container behaviour."""

    def test_empty_result_is_valid(self) -> None:
        result = ValidationResult()
        assert result
        assert result.is_valid
        assert len(result) == 0
        assert result.summary() == "Validation: 0 error(s), 0 warning(s), 0 total item(s)."

    def test_levels(self) -> None:
        result = ValidationResult()
        result.add_error("E1", "broken")
        result.add_warning("W1", "odd", {"entity": "User"})
        result.add_info("I1", "fyi")
        assert not result
        assert (result.error_count, result.warning_count, len(result.infos)) == (1, 1, 1)
        assert result.codes == ["E1", "W1", "I1"]
        assert result.summary() == "Validation: 1 error(s), 1 warning(s), 3 total item(s)."

    def test_merge(self) -> None:
        first, second = ValidationResult(), ValidationResult()
        first.add_warning("W1", "a")
        second.add_error("E1", "b")
        first.merge(second)
        assert first.codes == ["W1", "E1"]
        assert first.has_errors and first.has_warnings

    def test_item_formatting(self) -> None:
        item = ValidationError("warning", "W1", "odd", {"entity": "User"})
        assert str(item) == "[WARNING] W1: odd"
        assert item.to_dict() == {
            "level": "warning",
            "code": "W1",
            "message": "odd",
            "context": {"entity": "User"},
        }

    def test_report_hides_info_by_default(self) -> None:
        result = ValidationResult()
        result.add_warning("W1", "odd", {"entity": "User"})
        result.add_info("I1", "fyi")
        report = result.format_report()
        assert "[W1] odd" in report
        assert "entity: User" in report
        assert "I1" not in report
        assert "[I1] fyi" in result.format_report(include_info=True)


# ===========================================================================
# Model validators
# ===========================================================================


class TestEntityNames:
    def test_valid_model(self, user_order_model: DataModel) -> None:
        assert len(validate_entity_names(user_order_model)) == 0

    def test_duplicate_class_and_table(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["entities"].append({"id": "e-user-2", "name": "user"})
        result = validate_entity_names(DataModel.model_validate(user_order_dict))
        assert "DUPLICATE_ENTITY_NAME" in result.codes
        assert "DUPLICATE_TABLE_NAME" in result.codes
        assert result.has_errors

    def test_custom_table_clash(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["entities"][1]["tableName"] = "users"
        result = validate_entity_names(DataModel.model_validate(user_order_dict))
        assert result.codes == ["DUPLICATE_TABLE_NAME"]

    def test_duplicate_id(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["entities"][1]["id"] = "e-user"
        result = validate_entity_names(DataModel.model_validate(user_order_dict))
        assert result.codes == ["DUPLICATE_ENTITY_ID"]

    def test_invalid_identifier(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["entities"].append({"id": "e-x", "name": "2fa token"})
        user_order_dict["entities"].append({"id": "e-y", "name": "???"})
        result = validate_entity_names(DataModel.model_validate(user_order_dict))
        assert result.codes == ["INVALID_ENTITY_NAME", "INVALID_ENTITY_NAME"]
        assert not result.has_errors


class TestFields:
    def test_duplicate_field_names(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["entities"][0]["fields"].append(_field("f-dup", "email"))
        result = validate_fields(DataModel.model_validate(user_order_dict))
        assert result.codes == ["DUPLICATE_FIELD_NAME"]

    def test_constraint_ranges(self, user_order_dict: Dict[str, Any]) -> None:
        fields = user_order_dict["entities"][1]["fields"]
        fields.append(_field("f-code", "Code", minLength=10, maxLength=5))
        fields.append(_field("f-rate", "Rate", "decimal", precision=4, scale=6))
        result = validate_fields(DataModel.model_validate(user_order_dict))
        assert result.codes == ["INVALID_LENGTH_RANGE", "SCALE_EXCEEDS_PRECISION"]
        assert result.warning_count == 2

    def test_ignored_constraints(self, user_order_dict: Dict[str, Any]) -> None:
        fields = user_order_dict["entities"][1]["fields"]
        fields.append(_field("f-qty", "Quantity", "int", maxLength=3))
        fields.append(_field("f-when", "PlacedAt", "DateTime", isAutoGenerated=True))
        result = validate_fields(DataModel.model_validate(user_order_dict))
        assert result.codes == ["LENGTH_IGNORED", "AUTO_GENERATION_IGNORED"]
        assert len(result.infos) == 2

    def test_field_named_like_entity(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["entities"][1]["fields"].append(_field("f-o", "order"))
        result = validate_fields(DataModel.model_validate(user_order_dict))
        assert result.codes == ["FIELD_NAMED_LIKE_ENTITY"]


class TestPrimaryKeys:
    def test_missing(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["entities"][1]["fields"] = [_field("f-total", "Total", "decimal")]
        result = validate_primary_keys(DataModel.model_validate(user_order_dict))
        assert result.codes == ["MISSING_PRIMARY_KEY"]
        assert "falls back to a Guid key" in result.warnings[0].message

    def test_multiple(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["entities"][0]["fields"][1]["constraints"]["isPrimaryKey"] = True
        result = validate_primary_keys(DataModel.model_validate(user_order_dict))
        assert result.codes == ["MULTIPLE_PRIMARY_KEYS"]
        assert result.warnings[0].context["fields"] == ["Id", "Email"]


class TestRelations:
    def test_valid(self, user_order_model: DataModel) -> None:
        assert len(validate_relations(user_order_model)) == 0

    def test_dangling(self, dangling_model: DataModel) -> None:
        result = validate_relations(dangling_model)
        assert result.codes == ["DANGLING_RELATION"]
        assert "missing target entity" in result.warnings[0].message

    def test_join_table_note(self, student_course_model: DataModel) -> None:
        result = validate_relations(student_course_model)
        assert result.codes == ["JOIN_TABLE_NOT_GENERATED"]
        assert "'StudentCourse'" in result.infos[0].message

    def test_duplicate_foreign_key(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["relations"].append(
            {
                "id": "r-order-user-2",
                "sourceEntityId": "e-order",
                "targetEntityId": "e-user",
                "cardinality": "one-to-many",
            }
        )
        result = validate_relations(DataModel.model_validate(user_order_dict))
        assert result.codes == ["DUPLICATE_FOREIGN_KEY"]

    def test_custom_fk_name_resolves_clash(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["relations"].append(
            {
                "id": "r-order-user-2",
                "sourceEntityId": "e-order",
                "targetEntityId": "e-user",
                "cardinality": "one-to-many",
                "foreignKeyName": "ApprovedById",
            }
        )
        assert len(validate_relations(DataModel.model_validate(user_order_dict))) == 0

    def test_self_reference_is_valid(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["relations"] = [
            {
                "id": "r-self",
                "sourceEntityId": "e-user",
                "targetEntityId": "e-user",
                "cardinality": "one-to-many",
            }
        ]
        result = validate_relations(DataModel.model_validate(user_order_dict))
        assert len(result) == 0


class TestIndexes:
    def test_unknown_entity(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["indexes"] = [{"id": "i", "name": "IX", "entityId": "e-ghost", "fieldIds": ["f"]}]
        result = validate_indexes(DataModel.model_validate(user_order_dict))
        assert result.codes == ["INDEX_UNKNOWN_ENTITY"]

    def test_unknown_fields(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["indexes"] = [
            {"id": "i1", "name": "IX_Partial", "entityId": "e-user", "fieldIds": ["f-user-email", "f-x"]},
            {"id": "i2", "name": "IX_Empty", "entityId": "e-user", "fieldIds": ["f-y"]},
        ]
        result = validate_indexes(DataModel.model_validate(user_order_dict))
        assert result.codes == ["INDEX_UNKNOWN_FIELD", "INDEX_UNKNOWN_FIELD", "EMPTY_INDEX"]
        assert result.warnings[0].context["field_ids"] == ["f-x"]

    def test_clustered_outside_sqlserver(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["indexes"] = [
            {"id": "i", "name": "IX", "entityId": "e-user", "fieldIds": ["f-user-email"], "isClustered": True}
        ]
        assert len(validate_indexes(DataModel.model_validate(user_order_dict))) == 0
        user_order_dict["databaseType"] = "sqlite"
        result = validate_indexes(DataModel.model_validate(user_order_dict))
        assert result.codes == ["CLUSTERED_INDEX_IGNORED"]


class TestMetadata:
    def test_abstract_and_order(self, user_order_dict: Dict[str, Any]) -> None:
        user = user_order_dict["entities"][0]
        user["isAbstract"] = True
        user["fields"][0]["order"] = 5
        user["fields"][1]["order"] = 1
        result = validate_metadata(DataModel.model_validate(user_order_dict))
        assert result.codes == ["ABSTRACT_NOT_APPLIED", "FIELD_ORDER_IGNORED"]
        assert not result.has_warnings


# ===========================================================================
# Full pipeline
# ===========================================================================


class TestValidateFull:
    def test_reference_model(self, shop_model: DataModel) -> None:
        result = validate_full(shop_model)
        assert result.is_valid
        assert result.codes == ["JOIN_TABLE_NOT_GENERATED"]

    def test_dialect_override_note(self, user_order_model: DataModel) -> None:
        config = GenerationConfig(dialect_override="postgresql")
        assert validate_generation_config(user_order_model, config).codes == ["DIALECT_OVERRIDDEN"]
        assert "DIALECT_OVERRIDDEN" in validate_full(user_order_model, config).codes
        same = GenerationConfig(dialect_override="sqlserver")
        assert len(validate_generation_config(user_order_model, same)) == 0

    def test_errors_fail_validation(self, user_order_dict: Dict[str, Any]) -> None:
        user_order_dict["entities"][1]["name"] = "User"
        result = validate_full(DataModel.model_validate(user_order_dict))
        assert not result
        assert result.error_count == 2
