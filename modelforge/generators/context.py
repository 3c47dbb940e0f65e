# File: modelforge/generators/context.py
"""
ModelForge - DbContext Generator
=================================
Emits the ``{Namespace}DbContext`` class: one ``DbSet`` per entity and an
``OnModelCreating`` override with a fluent configuration block per entity
(table, key, unique fields, precision / column types, relationships) and
one statement per model-level index.

FK property names and navigation names come from ``modelforge.queries`` so
they match the entity classes exactly.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from modelforge.attributes import needs_precision, precision_scale
from modelforge.models import Cardinality, DataModel, Entity, EntityField, FieldType, Index
from modelforge.queries import (
    ResolvedRelation,
    class_name,
    collection_name,
    entity_index,
    field_by_id,
    foreign_key_name,
    inverse_navigation_name,
    join_table_name,
    outgoing_resolved,
    primary_key_field,
    property_name,
    reference_navigation_name,
    table_name,
)
from modelforge.type_maps import DELETE_BEHAVIOR_MAP, JSON_COLUMN_TYPES
from modelforge.utils import auto_generated_header, join_lines, namespace_for

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.generators.context")

_INDENT: str = "    "
_DOUBLE_INDENT: str = "        "
_TRIPLE_INDENT: str = "            "
_QUAD_INDENT: str = "                "


def context_name(model: DataModel) -> str:
    return f"{namespace_for(model.name)}DbContext"


def _relationship_lines(rr: ResolvedRelation, model: DataModel) -> List[str]:
    source: str = class_name(rr.source)
    relation = rr.relation

    if relation.cardinality is Cardinality.MANY_TO_MANY:
        # The target class has no inverse collection; see queries.NAVIGATION_SHAPES.
        return [
            f"{_TRIPLE_INDENT}entity.HasMany(e => e.{collection_name(rr.target)})",
            f"{_QUAD_INDENT}.WithMany()",
            f'{_QUAD_INDENT}.UsingEntity(j => j.ToTable("{join_table_name(rr.source, rr.target)}"));',
        ]

    fk: str = foreign_key_name(relation, rr.target)
    behavior: str = DELETE_BEHAVIOR_MAP[relation.on_delete]
    reference: str = reference_navigation_name(rr, model)
    inverse: str = inverse_navigation_name(rr, model)
    if relation.cardinality is Cardinality.ONE_TO_ONE:
        return [
            f"{_TRIPLE_INDENT}entity.HasOne(e => e.{reference})",
            f"{_QUAD_INDENT}.WithOne(t => t.{inverse})",
            f"{_QUAD_INDENT}.HasForeignKey<{source}>(e => e.{fk})",
            f"{_QUAD_INDENT}.OnDelete(DeleteBehavior.{behavior});",
        ]
    return [
        f"{_TRIPLE_INDENT}entity.HasOne(e => e.{reference})",
        f"{_QUAD_INDENT}.WithMany(t => t.{inverse})",
        f"{_QUAD_INDENT}.HasForeignKey(e => e.{fk})",
        f"{_QUAD_INDENT}.OnDelete(DeleteBehavior.{behavior});",
    ]


def _entity_configuration(entity: Entity, model: DataModel) -> List[str]:
    name: str = class_name(entity)
    lines: List[str] = [
        f"{_DOUBLE_INDENT}// {name} configuration",
        f"{_DOUBLE_INDENT}modelBuilder.Entity<{name}>(entity =>",
        f"{_DOUBLE_INDENT}{{",
    ]

    if entity.schema_name:
        lines.append(f'{_TRIPLE_INDENT}entity.ToTable("{table_name(entity)}", "{entity.schema_name}");')
    else:
        lines.append(f'{_TRIPLE_INDENT}entity.ToTable("{table_name(entity)}");')
    lines.append("")

    pk: Optional[EntityField] = primary_key_field(entity)
    if pk is not None:
        lines.append(f"{_TRIPLE_INDENT}entity.HasKey(e => e.{property_name(pk)});")
        lines.append("")

    unique_fields: List[EntityField] = [
        f for f in entity.fields if f.constraints.is_unique and not f.constraints.is_primary_key
    ]
    if unique_fields:
        lines.append(f"{_TRIPLE_INDENT}// Unique constraints")
        for field in unique_fields:
            lines.append(f"{_TRIPLE_INDENT}entity.HasIndex(e => e.{property_name(field)})")
            lines.append(f"{_QUAD_INDENT}.IsUnique();")
        lines.append("")

    configured: List[EntityField] = [
        f for f in entity.fields if needs_precision(f) or f.type is FieldType.JSON
    ]
    if configured:
        lines.append(f"{_TRIPLE_INDENT}// Property configurations")
        for field in configured:
            lines.append(f"{_TRIPLE_INDENT}entity.Property(e => e.{property_name(field)})")
            if field.type is FieldType.DECIMAL:
                precision, scale = precision_scale(field)
                lines.append(f"{_QUAD_INDENT}.HasPrecision({precision}, {scale});")
            else:
                column_type: str = JSON_COLUMN_TYPES[model.database_type]
                lines.append(f'{_QUAD_INDENT}.HasColumnType("{column_type}");')
        lines.append("")

    relations: List[ResolvedRelation] = outgoing_resolved(entity, model)
    if relations:
        lines.append(f"{_TRIPLE_INDENT}// Relationships")
        for rr in relations:
            lines.extend(_relationship_lines(rr, model))
            lines.append("")

    if lines[-1] == "":
        lines.pop()
    lines.append(f"{_DOUBLE_INDENT}}});")
    return lines


def _index_configuration(index: Index, entities: Dict[str, Entity]) -> List[str]:
    entity: Optional[Entity] = entities.get(index.entity_id)
    if entity is None:
        return []

    members: List[str] = []
    for field_id in index.field_ids:
        field: Optional[EntityField] = field_by_id(entity, field_id)
        if field is not None:
            members.append(f"e.{property_name(field)}")
    if not members:
        return []

    expression: str = members[0] if len(members) == 1 else f"new {{ {', '.join(members)} }}"
    lines: List[str] = [
        f"{_DOUBLE_INDENT}modelBuilder.Entity<{class_name(entity)}>()",
        f"{_TRIPLE_INDENT}.HasIndex(e => {expression})",
    ]
    if index.is_unique:
        lines.append(f"{_TRIPLE_INDENT}.IsUnique()")
    if index.is_clustered:
        lines.append(f"{_TRIPLE_INDENT}.IsClustered()")
    lines.append(f'{_TRIPLE_INDENT}.HasDatabaseName("{index.name}");')
    return lines


def generate_context(model: DataModel) -> str:
    """The DbContext class for *model* as one C# source file."""
    namespace: str = namespace_for(model.name)
    name: str = context_name(model)

    lines: List[str] = list(auto_generated_header(model.name))
    lines.append("")
    lines.append("using Microsoft.EntityFrameworkCore;")
    lines.append(f"using {namespace}.Entities;")
    lines.append("")
    lines.append(f"namespace {namespace}.Data;")
    lines.append("")
    lines.append(f"public class {name} : DbContext")
    lines.append("{")
    lines.append(f"{_INDENT}public {name}(DbContextOptions<{name}> options) : base(options)")
    lines.append(f"{_INDENT}{{")
    lines.append(f"{_INDENT}}}")
    lines.append("")

    lines.append(f"{_INDENT}// DbSet properties")
    if not model.entities:
        lines.append(f"{_INDENT}// No entities defined in this model.")
    for entity in model.entities:
        entity_class: str = class_name(entity)
        lines.append(
            f"{_INDENT}public DbSet<{entity_class}> {collection_name(entity)} "
            f"{{ get; set; }} = null!;"
        )
    lines.append("")

    lines.append(f"{_INDENT}protected override void OnModelCreating(ModelBuilder modelBuilder)")
    lines.append(f"{_INDENT}{{")
    lines.append(f"{_DOUBLE_INDENT}base.OnModelCreating(modelBuilder);")

    for entity in model.entities:
        lines.append("")
        lines.extend(_entity_configuration(entity, model))

    entities: Dict[str, Entity] = entity_index(model)
    index_blocks: List[List[str]] = [
        block for block in (_index_configuration(i, entities) for i in model.indexes) if block
    ]
    if index_blocks:
        lines.append("")
        lines.append(f"{_DOUBLE_INDENT}// Index configurations")
        for i, block in enumerate(index_blocks):
            if i:
                lines.append("")
            lines.extend(block)

    lines.append(f"{_INDENT}}}")
    lines.append("}")

    logger.debug(
        "Generated %s with %d entity configurations and %d indexes.",
        name,
        len(model.entities),
        len(index_blocks),
    )
    return join_lines(lines)


__all__: List[str] = ["context_name", "generate_context"]
