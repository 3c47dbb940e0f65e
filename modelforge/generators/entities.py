# File: modelforge/generators/entities.py
"""
ModelForge - Entity-Class Generator
====================================
Emits one EF Core entity class per ``Entity`` in model order.

Per entity:
    1. declared fields as annotated properties, in field array order,
    2. synthesized nullable FK properties for outgoing one-to-one and
       one-to-many relations not already covered by a declared field,
    3. navigation properties from ``queries.navigations_for``.
"""

from __future__ import annotations

import logging
from typing import List

from modelforge.attributes import csharp_type, default_value_expression, field_attributes
from modelforge.models import DataModel, Entity
from modelforge.queries import (
    Navigation,
    class_name,
    collection_name,
    navigations_for,
    property_name,
    synthesized_foreign_keys,
    table_name,
)
from modelforge.type_maps import csharp_base_type
from modelforge.utils import auto_generated_header, join_lines, namespace_for

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.generators.entities")

_INDENT: str = "    "

USINGS: List[str] = [
    "using System;",
    "using System.Collections.Generic;",
    "using System.ComponentModel.DataAnnotations;",
    "using System.ComponentModel.DataAnnotations.Schema;",
    "using Microsoft.EntityFrameworkCore;",
]


def _summary(text: str, indent: str = "") -> List[str]:
    lines: List[str] = [f"{indent}/// <summary>"]
    lines.extend(f"{indent}/// {line}".rstrip() for line in text.strip().splitlines())
    lines.append(f"{indent}/// </summary>")
    return lines


def _table_attribute(entity: Entity) -> List[str]:
    name: str = table_name(entity)
    if entity.schema_name:
        return [f'[Table("{name}", Schema = "{entity.schema_name}")]']
    if name != collection_name(entity):
        return [f'[Table("{name}")]']
    return []


def _navigation_lines(nav: Navigation) -> List[str]:
    if nav.is_collection:
        return [
            f"{_INDENT}public virtual ICollection<{nav.type_name}> {nav.name} "
            f"{{ get; set; }} = new List<{nav.type_name}>();"
        ]
    lines: List[str] = []
    if nav.foreign_key:
        lines.append(f'{_INDENT}[ForeignKey("{nav.foreign_key}")]')
    lines.append(f"{_INDENT}public virtual {nav.type_name}? {nav.name} {{ get; set; }}")
    return lines


def generate_entity_class(entity: Entity, model: DataModel) -> List[str]:
    """Lines of a single entity class."""
    lines: List[str] = []

    if entity.description:
        lines.extend(_summary(entity.description))
    lines.extend(_table_attribute(entity))
    lines.append(f"public class {class_name(entity)}")
    lines.append("{")

    # --- Declared fields ---
    if entity.fields:
        lines.append(f"{_INDENT}// Properties")
    for field in entity.fields:
        if field.description:
            lines.extend(_summary(field.description, _INDENT))
        for attr in field_attributes(field, model.database_type):
            lines.append(f"{_INDENT}{attr}")
        lines.append(
            f"{_INDENT}public {csharp_type(field)} {property_name(field)} "
            f"{{ get; set; }}{default_value_expression(field)}"
        )
        lines.append("")

    # --- Synthesized foreign keys ---
    foreign_keys = synthesized_foreign_keys(entity, model)
    if foreign_keys:
        lines.append(f"{_INDENT}// Foreign Keys")
    for fk in foreign_keys:
        lines.append(f"{_INDENT}// Foreign Key to {class_name(fk.target)}")
        lines.append(f"{_INDENT}public {csharp_base_type(fk.key_type)}? {fk.name} {{ get; set; }}")
        lines.append("")

    # --- Navigation properties ---
    navigations: List[Navigation] = navigations_for(entity, model)
    if navigations:
        lines.append(f"{_INDENT}// Navigation Properties")
    for nav in navigations:
        lines.extend(_navigation_lines(nav))
        lines.append("")

    if lines[-1] == "":
        lines.pop()
    lines.append("}")
    return lines


def generate_entity_classes(model: DataModel) -> str:
    """All entity classes of *model* as one C# source file."""
    namespace: str = namespace_for(model.name)

    lines: List[str] = list(auto_generated_header(model.name))
    lines.append("")
    lines.extend(USINGS)
    lines.append("")
    lines.append(f"namespace {namespace}.Entities;")
    lines.append("")

    if not model.entities:
        lines.append("// No entities defined in this model.")
        return join_lines(lines)

    for i, entity in enumerate(model.entities):
        if i:
            lines.append("")
        lines.extend(generate_entity_class(entity, model))

    logger.debug("Generated %d entity classes.", len(model.entities))
    return join_lines(lines)


__all__: List[str] = ["generate_entity_class", "generate_entity_classes"]
