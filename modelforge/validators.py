# File: modelforge/validators.py
"""
ModelForge - Model Validators
==============================
A **pure-function validation pipeline** over ``modelforge.models.DataModel``.

Pydantic only checks shapes.  The checks below look at the model as a whole
(duplicate names, primary keys, relation endpoints, index targets) and
report what the generators will silently work around.  Generation never
depends on the report: the engine degrades gracefully on an incomplete
model, and only a ``strict`` run refuses to export when errors are present.

Usage by downstream modules:
    from modelforge.validators import validate_full
    result = validate_full(model, config)
    if result.has_errors:
        ...
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Any, Dict, List, Optional, Set

from modelforge.models import (
    Cardinality,
    DatabaseDialect,
    DataModel,
    Entity,
    FieldType,
    GenerationConfig,
)
from modelforge.queries import (
    FK_CARDINALITIES,
    class_name,
    entity_index,
    field_by_id,
    foreign_key_name,
    join_table_name,
    property_name,
    resolved_relations,
    table_name,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight issue descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    @property
    def is_info(self) -> bool:
        return self.level == "info"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ValidationResult:
    """Accumulates ``ValidationError`` instances produced by the pipeline."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def add_info(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def infos(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_info]

    @property
    def all_items(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def has_warnings(self) -> bool:
        return any(e.is_warning for e in self._items)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self._items if e.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self._items if e.is_warning)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {self.error_count} error(s), "
            f"{self.warning_count} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            if not include_info and item.is_info:
                continue
            prefix: str = {"error": "❌", "warning": "⚠️", "info": "ℹ️"}.get(item.level, "•")
            lines.append(f"  {prefix} [{item.code}] {item.message}")
            for k, v in item.context.items():
                lines.append(f"       {k}: {v}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Identifier rules
# ---------------------------------------------------------------------------

_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _identifier_problem(identifier: str) -> Optional[str]:
    if not identifier:
        return "is empty after removing characters outside [A-Za-z0-9_]"
    if not _IDENTIFIER_RE.match(identifier):
        return "does not start with a letter or underscore"
    return None


# ---------------------------------------------------------------------------
# Individual validators, each returning its own ValidationResult
# ---------------------------------------------------------------------------


def validate_entity_names(model: DataModel) -> ValidationResult:
    """Entity names must be usable identifiers and unique once converted."""
    result = ValidationResult()

    for entity in model.entities:
        problem: Optional[str] = _identifier_problem(class_name(entity))
        if problem:
            result.add_warning(
                "INVALID_ENTITY_NAME",
                f"Entity name '{entity.name}' {problem}.",
                {"entity": entity.name, "class_name": class_name(entity)},
            )

    class_counts: Counter = Counter(class_name(e) for e in model.entities)
    for name, count in class_counts.items():
        if count > 1:
            result.add_error(
                "DUPLICATE_ENTITY_NAME",
                f"{count} entities map to the class name '{name}'.",
                {"class_name": name, "count": count},
            )

    table_counts: Counter = Counter(table_name(e).lower() for e in model.entities)
    for name, count in table_counts.items():
        if count > 1:
            result.add_error(
                "DUPLICATE_TABLE_NAME",
                f"{count} entities map to the table '{name}'.",
                {"table": name, "count": count},
            )

    id_counts: Counter = Counter(e.id for e in model.entities)
    for entity_id, count in id_counts.items():
        if count > 1:
            result.add_error(
                "DUPLICATE_ENTITY_ID",
                f"Entity id '{entity_id}' is used {count} times; only the first is addressable.",
                {"entity_id": entity_id},
            )

    return result


def validate_fields(model: DataModel) -> ValidationResult:
    """Field names, constraint ranges and constraint applicability."""
    result = ValidationResult()

    for entity in model.entities:
        entity_class: str = class_name(entity)
        counts: Counter = Counter(property_name(f) for f in entity.fields)
        for name, count in counts.items():
            if count > 1:
                result.add_error(
                    "DUPLICATE_FIELD_NAME",
                    f"Entity '{entity.name}' has {count} fields named '{name}'.",
                    {"entity": entity.name, "field": name},
                )

        for field in entity.fields:
            prop: str = property_name(field)
            ctx: Dict[str, Any] = {"entity": entity.name, "field": field.name}
            problem: Optional[str] = _identifier_problem(prop)
            if problem:
                result.add_warning("INVALID_FIELD_NAME", f"Field name '{field.name}' {problem}.", ctx)
            elif prop == entity_class:
                result.add_warning(
                    "FIELD_NAMED_LIKE_ENTITY",
                    f"Field '{entity.name}.{field.name}' has the same name as its class.",
                    ctx,
                )

            c = field.constraints
            if c.min_length is not None and c.max_length is not None and c.min_length > c.max_length:
                result.add_warning(
                    "INVALID_LENGTH_RANGE",
                    f"Field '{entity.name}.{field.name}' has minLength {c.min_length} "
                    f"greater than maxLength {c.max_length}.",
                    ctx,
                )
            if (c.max_length or c.min_length) and field.type is not FieldType.STRING:
                result.add_info(
                    "LENGTH_IGNORED",
                    f"Length bounds on non-string field '{entity.name}.{field.name}' are ignored.",
                    ctx,
                )
            if c.precision is not None and c.scale is not None and c.scale > c.precision:
                result.add_warning(
                    "SCALE_EXCEEDS_PRECISION",
                    f"Field '{entity.name}.{field.name}' has scale {c.scale} "
                    f"greater than precision {c.precision}.",
                    ctx,
                )
            if c.is_auto_generated and field.type not in (FieldType.INT, FieldType.LONG, FieldType.GUID):
                result.add_info(
                    "AUTO_GENERATION_IGNORED",
                    f"Auto-generation on {field.type.value} field "
                    f"'{entity.name}.{field.name}' has no effect.",
                    ctx,
                )

    return result


def validate_primary_keys(model: DataModel) -> ValidationResult:
    """Each entity should have exactly one primary key field."""
    result = ValidationResult()

    for entity in model.entities:
        keys = [f for f in entity.fields if f.constraints.is_primary_key]
        if not keys:
            result.add_warning(
                "MISSING_PRIMARY_KEY",
                f"Entity '{entity.name}' has no primary key; generated code "
                f"falls back to a Guid key named 'Id'.",
                {"entity": entity.name},
            )
        elif len(keys) > 1:
            result.add_warning(
                "MULTIPLE_PRIMARY_KEYS",
                f"Entity '{entity.name}' marks {len(keys)} fields as primary key; "
                f"only '{keys[0].name}' is used.",
                {"entity": entity.name, "fields": [f.name for f in keys]},
            )

    return result


def validate_relations(model: DataModel) -> ValidationResult:
    """Relation endpoints, FK name clashes and implied join tables."""
    result = ValidationResult()
    entities: Dict[str, Entity] = entity_index(model)

    for relation in model.relations:
        missing: List[str] = [
            side
            for side, entity_id in (
                ("source", relation.source_entity_id),
                ("target", relation.target_entity_id),
            )
            if entity_id not in entities
        ]
        if missing:
            result.add_warning(
                "DANGLING_RELATION",
                f"Relation '{relation.name or relation.id}' references a missing "
                f"{' and '.join(missing)} entity and is skipped by every generator.",
                {
                    "relation": relation.id,
                    "source_entity_id": relation.source_entity_id,
                    "target_entity_id": relation.target_entity_id,
                },
            )

    seen_fks: Dict[str, Set[str]] = {}
    for rr in resolved_relations(model):
        relation = rr.relation
        if relation.cardinality is Cardinality.MANY_TO_MANY:
            result.add_info(
                "JOIN_TABLE_NOT_GENERATED",
                f"Many-to-many relation {rr.source.name} -> {rr.target.name} is mapped "
                f"to join table '{join_table_name(rr.source, rr.target)}', which the "
                f"SQL scripts do not create.",
                {"relation": relation.id},
            )
            continue

        if relation.cardinality in FK_CARDINALITIES:
            fk: str = foreign_key_name(relation, rr.target)
            names: Set[str] = seen_fks.setdefault(rr.source.id, set())
            if fk in names:
                result.add_warning(
                    "DUPLICATE_FOREIGN_KEY",
                    f"Entity '{rr.source.name}' receives the foreign key '{fk}' from more "
                    f"than one relation; relations with the same target are generated once, "
                    f"set a custom foreign key name to keep them apart.",
                    {"entity": rr.source.name, "foreign_key": fk},
                )
            names.add(fk)

    return result


def validate_indexes(model: DataModel) -> ValidationResult:
    """Indexes must point at existing entities and fields."""
    result = ValidationResult()
    entities: Dict[str, Entity] = entity_index(model)

    for index in model.indexes:
        entity: Optional[Entity] = entities.get(index.entity_id)
        if entity is None:
            result.add_warning(
                "INDEX_UNKNOWN_ENTITY",
                f"Index '{index.name}' references a missing entity and is skipped.",
                {"index": index.name, "entity_id": index.entity_id},
            )
            continue

        unknown: List[str] = [fid for fid in index.field_ids if field_by_id(entity, fid) is None]
        if unknown:
            result.add_warning(
                "INDEX_UNKNOWN_FIELD",
                f"Index '{index.name}' on '{entity.name}' references "
                f"{len(unknown)} missing field(s).",
                {"index": index.name, "field_ids": unknown},
            )
        if len(unknown) == len(index.field_ids):
            result.add_warning(
                "EMPTY_INDEX",
                f"Index '{index.name}' on '{entity.name}' has no usable fields and is skipped.",
                {"index": index.name},
            )

        if index.is_clustered and model.database_type is not DatabaseDialect.SQLSERVER:
            result.add_info(
                "CLUSTERED_INDEX_IGNORED",
                f"Index '{index.name}' is clustered; only SQL Server output honours this.",
                {"index": index.name},
            )

    return result


def validate_metadata(model: DataModel) -> ValidationResult:
    """Model data that is carried but not consumed by the generators."""
    result = ValidationResult()

    for entity in model.entities:
        if entity.is_abstract:
            result.add_info(
                "ABSTRACT_NOT_APPLIED",
                f"Entity '{entity.name}' is marked abstract; generated code treats it "
                f"as a regular entity.",
                {"entity": entity.name},
            )

        orders: List[int] = [f.order for f in entity.fields]
        if orders != sorted(orders):
            result.add_info(
                "FIELD_ORDER_IGNORED",
                f"Fields of '{entity.name}' have 'order' values that differ from their "
                f"list position; generated code follows the list position.",
                {"entity": entity.name},
            )

    return result


def validate_generation_config(model: DataModel, config: GenerationConfig) -> ValidationResult:
    """Cross-checks between a model and the run configuration."""
    result = ValidationResult()

    if config.dialect_override is not None and config.dialect_override is not model.database_type:
        result.add_info(
            "DIALECT_OVERRIDDEN",
            f"Model dialect '{model.database_type.value}' is overridden by "
            f"'{config.dialect_override.value}'.",
            {},
        )

    return result


# ---------------------------------------------------------------------------
# Aggregators
# ---------------------------------------------------------------------------


def validate_model(model: DataModel) -> ValidationResult:
    """Run every model-level validator."""
    result = ValidationResult()
    result.merge(validate_entity_names(model))
    result.merge(validate_fields(model))
    result.merge(validate_primary_keys(model))
    result.merge(validate_relations(model))
    result.merge(validate_indexes(model))
    result.merge(validate_metadata(model))
    return result


def validate_full(model: DataModel, config: Optional[GenerationConfig] = None) -> ValidationResult:
    """
    **Master validation entry point.**

    Runs every model validator plus the configuration cross-checks.  This is
    the single function ``generator.py`` and ``cli.py`` call before
    generation.
    """
    logger.info(
        "Starting full validation — %d entities, %d relations, %d indexes",
        len(model.entities),
        len(model.relations),
        len(model.indexes),
    )

    result: ValidationResult = validate_model(model)
    if config is not None:
        result.merge(validate_generation_config(model, config))

    for item in result.warnings:
        logger.warning("%s", item)

    if result.has_errors:
        logger.error("Validation FAILED with %d error(s). %s", result.error_count, result.summary())
    else:
        logger.info("Validation PASSED. %s", result.summary())

    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_entity_names",
    "validate_fields",
    "validate_primary_keys",
    "validate_relations",
    "validate_indexes",
    "validate_metadata",
    "validate_generation_config",
    "validate_model",
    "validate_full",
]

logger.debug("modelforge.validators loaded — %d public symbols.", len(__all__))
