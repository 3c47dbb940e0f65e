# File: modelforge/generators/dtos.py
"""
ModelForge - DTO Generator
===========================
Three data-transfer shapes per entity:

``Create{Entity}Dto``
    Every field except the primary key, with write-time validation
    attributes, plus the synthesized FK properties.
``Update{Entity}Dto``
    The same members, all nullable (partial update); no ``[Required]``.
``{Entity}ResponseDto``
    Every field including the primary key, plus FK properties, without
    validation attributes.

Property names and FK names match the entity classes; the OpenAPI
component schemas mirror these shapes field for field.
"""

from __future__ import annotations

import logging
from typing import List

from modelforge.attributes import csharp_type, default_value_expression, validation_attributes
from modelforge.models import DataModel, Entity, EntityField
from modelforge.queries import ForeignKey, class_name, property_name, synthesized_foreign_keys
from modelforge.type_maps import csharp_base_type
from modelforge.utils import auto_generated_header, join_lines, namespace_for, section_banner

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.generators.dtos")

_INDENT: str = "    "


def create_dto_name(entity: Entity) -> str:
    return f"Create{class_name(entity)}Dto"


def update_dto_name(entity: Entity) -> str:
    return f"Update{class_name(entity)}Dto"


def response_dto_name(entity: Entity) -> str:
    return f"{class_name(entity)}ResponseDto"


def writable_fields(entity: Entity) -> List[EntityField]:
    """Fields accepted on create / update (everything but the key)."""
    return [f for f in entity.fields if not f.constraints.is_primary_key]


def _property(type_name: str, name: str, initializer: str = "") -> str:
    return f"{_INDENT}public {type_name} {name} {{ get; set; }}{initializer}"


def _fk_lines(foreign_keys: List[ForeignKey]) -> List[str]:
    lines: List[str] = []
    for fk in foreign_keys:
        lines.append(_property(f"{csharp_base_type(fk.key_type)}?", fk.name))
        lines.append("")
    return lines


def _close(lines: List[str]) -> List[str]:
    if lines[-1] == "":
        lines.pop()
    lines.append("}")
    return lines


def _create_dto(entity: Entity, foreign_keys: List[ForeignKey]) -> List[str]:
    lines: List[str] = [f"public class {create_dto_name(entity)}", "{"]
    for field in writable_fields(entity):
        lines.extend(f"{_INDENT}{attr}" for attr in validation_attributes(field))
        lines.append(
            _property(csharp_type(field), property_name(field), default_value_expression(field))
        )
        lines.append("")
    lines.extend(_fk_lines(foreign_keys))
    return _close(lines)


def _update_dto(entity: Entity, foreign_keys: List[ForeignKey]) -> List[str]:
    lines: List[str] = [f"public class {update_dto_name(entity)}", "{"]
    for field in writable_fields(entity):
        lines.extend(
            f"{_INDENT}{attr}" for attr in validation_attributes(field, include_required=False)
        )
        lines.append(_property(csharp_type(field, force_nullable=True), property_name(field)))
        lines.append("")
    lines.extend(_fk_lines(foreign_keys))
    return _close(lines)


def _response_dto(entity: Entity, foreign_keys: List[ForeignKey]) -> List[str]:
    lines: List[str] = [f"public class {response_dto_name(entity)}", "{"]
    for field in entity.fields:
        type_name: str = csharp_type(field)
        initializer: str = " = string.Empty;" if type_name == "string" else ""
        lines.append(_property(type_name, property_name(field), initializer))
        lines.append("")
    lines.extend(_fk_lines(foreign_keys))
    return _close(lines)


def generate_entity_dtos(entity: Entity, model: DataModel) -> List[str]:
    foreign_keys: List[ForeignKey] = synthesized_foreign_keys(entity, model)
    lines: List[str] = section_banner(f"{class_name(entity)} DTOs")
    lines.append("")
    lines.extend(_create_dto(entity, foreign_keys))
    lines.append("")
    lines.extend(_update_dto(entity, foreign_keys))
    lines.append("")
    lines.extend(_response_dto(entity, foreign_keys))
    return lines


def generate_dtos(model: DataModel) -> str:
    """Create / Update / Response DTOs for every entity as one C# file."""
    lines: List[str] = list(auto_generated_header(model.name))
    lines.append("")

    if not model.entities:
        lines.append("// No entities to generate DTOs for")
        return join_lines(lines)

    namespace: str = namespace_for(model.name)
    lines.append("using System;")
    lines.append("using System.ComponentModel.DataAnnotations;")
    lines.append("")
    lines.append(f"namespace {namespace}.DTOs;")
    lines.append("")

    for i, entity in enumerate(model.entities):
        if i:
            lines.append("")
        lines.extend(generate_entity_dtos(entity, model))

    logger.debug("Generated DTOs for %d entities.", len(model.entities))
    return join_lines(lines)


__all__: List[str] = [
    "create_dto_name",
    "update_dto_name",
    "response_dto_name",
    "writable_fields",
    "generate_entity_dtos",
    "generate_dtos",
]
