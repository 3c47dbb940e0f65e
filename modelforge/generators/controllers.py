# File: modelforge/generators/controllers.py
"""
ModelForge - Controller Generator
==================================
One ASP.NET Core API controller per entity with List (paged), GetById,
Create, Update and Delete actions.  Controllers only validate, log and
delegate to ``I{Entity}Service``; persistence lives in the generated
service and repository layers.
"""

from __future__ import annotations

import logging
from typing import List

from modelforge.generators.dtos import create_dto_name, response_dto_name, update_dto_name
from modelforge.models import DataModel, Entity
from modelforge.queries import class_name, collection_name, primary_key_name, primary_key_type
from modelforge.utils import auto_generated_header, join_lines, namespace_for, to_camel_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.generators.controllers")

_INDENT: str = "    "
_DOUBLE_INDENT: str = "        "
_TRIPLE_INDENT: str = "            "

DEFAULT_PAGE: int = 1
DEFAULT_PAGE_SIZE: int = 20


def controller_name(entity: Entity) -> str:
    return f"{collection_name(entity)}Controller"


def _doc(summary: str) -> List[str]:
    return [f"{_INDENT}/// <summary>", f"{_INDENT}/// {summary}", f"{_INDENT}/// </summary>"]


def _invalid_model_guard() -> List[str]:
    return [
        f"{_DOUBLE_INDENT}if (!ModelState.IsValid)",
        f"{_DOUBLE_INDENT}{{",
        f"{_TRIPLE_INDENT}return BadRequest(ModelState);",
        f"{_DOUBLE_INDENT}}}",
        "",
    ]


def _not_found_guard(condition: str, message: str) -> List[str]:
    return [
        f"{_DOUBLE_INDENT}if ({condition})",
        f"{_DOUBLE_INDENT}{{",
        f'{_TRIPLE_INDENT}_logger.LogWarning("{message}", id);',
        f"{_TRIPLE_INDENT}return NotFound();",
        f"{_DOUBLE_INDENT}}}",
    ]


def generate_entity_controller(entity: Entity) -> List[str]:
    """Lines of the controller class for *entity*."""
    name: str = class_name(entity)
    plural: str = collection_name(entity)
    controller: str = controller_name(entity)
    service: str = f"_{to_camel_case(name)}Service"
    service_param: str = f"{to_camel_case(name)}Service"
    key_type: str = primary_key_type(entity)
    key_name: str = primary_key_name(entity)
    response: str = response_dto_name(entity)

    lines: List[str] = [
        "[ApiController]",
        '[Route("api/[controller]")]',
        '[Produces("application/json")]',
        f"public class {controller} : ControllerBase",
        "{",
        f"{_INDENT}private readonly I{name}Service {service};",
        f"{_INDENT}private readonly ILogger<{controller}> _logger;",
        "",
        f"{_INDENT}public {controller}(",
        f"{_DOUBLE_INDENT}I{name}Service {service_param},",
        f"{_DOUBLE_INDENT}ILogger<{controller}> logger)",
        f"{_INDENT}{{",
        f"{_DOUBLE_INDENT}{service} = {service_param};",
        f"{_DOUBLE_INDENT}_logger = logger;",
        f"{_INDENT}}}",
        "",
    ]

    # --- List ---
    lines.extend(_doc(f"Get all {plural}"))
    lines.extend([
        f"{_INDENT}[HttpGet]",
        f"{_INDENT}[ProducesResponseType(typeof(IEnumerable<{response}>), StatusCodes.Status200OK)]",
        f"{_INDENT}public async Task<ActionResult<IEnumerable<{response}>>> GetAll(",
        f"{_DOUBLE_INDENT}[FromQuery] int page = {DEFAULT_PAGE},",
        f"{_DOUBLE_INDENT}[FromQuery] int pageSize = {DEFAULT_PAGE_SIZE})",
        f"{_INDENT}{{",
        f"{_DOUBLE_INDENT}var items = await {service}.GetAllAsync(page, pageSize);",
        f"{_DOUBLE_INDENT}return Ok(items);",
        f"{_INDENT}}}",
        "",
    ])

    # --- GetById ---
    lines.extend(_doc(f"Get {name} by ID"))
    lines.extend([
        f'{_INDENT}[HttpGet("{{id}}")]',
        f"{_INDENT}[ProducesResponseType(typeof({response}), StatusCodes.Status200OK)]",
        f"{_INDENT}[ProducesResponseType(StatusCodes.Status404NotFound)]",
        f"{_INDENT}public async Task<ActionResult<{response}>> GetById({key_type} id)",
        f"{_INDENT}{{",
        f"{_DOUBLE_INDENT}var item = await {service}.GetByIdAsync(id);",
    ])
    lines.extend(_not_found_guard("item == null", f"{name} with ID {{Id}} not found"))
    lines.extend([
        f"{_DOUBLE_INDENT}return Ok(item);",
        f"{_INDENT}}}",
        "",
    ])

    # --- Create ---
    lines.extend(_doc(f"Create a new {name}"))
    lines.extend([
        f"{_INDENT}[HttpPost]",
        f"{_INDENT}[ProducesResponseType(typeof({response}), StatusCodes.Status201Created)]",
        f"{_INDENT}[ProducesResponseType(StatusCodes.Status400BadRequest)]",
        f"{_INDENT}public async Task<ActionResult<{response}>> Create("
        f"[FromBody] {create_dto_name(entity)} dto)",
        f"{_INDENT}{{",
    ])
    lines.extend(_invalid_model_guard())
    lines.extend([
        f"{_DOUBLE_INDENT}var item = await {service}.CreateAsync(dto);",
        f'{_DOUBLE_INDENT}_logger.LogInformation("Created {name} with ID {{Id}}", item.{key_name});',
        f"{_DOUBLE_INDENT}return CreatedAtAction(nameof(GetById), new {{ id = item.{key_name} }}, item);",
        f"{_INDENT}}}",
        "",
    ])

    # --- Update ---
    lines.extend(_doc(f"Update an existing {name}"))
    lines.extend([
        f'{_INDENT}[HttpPut("{{id}}")]',
        f"{_INDENT}[ProducesResponseType(typeof({response}), StatusCodes.Status200OK)]",
        f"{_INDENT}[ProducesResponseType(StatusCodes.Status404NotFound)]",
        f"{_INDENT}[ProducesResponseType(StatusCodes.Status400BadRequest)]",
        f"{_INDENT}public async Task<ActionResult<{response}>> Update("
        f"{key_type} id, [FromBody] {update_dto_name(entity)} dto)",
        f"{_INDENT}{{",
    ])
    lines.extend(_invalid_model_guard())
    lines.append(f"{_DOUBLE_INDENT}var item = await {service}.UpdateAsync(id, dto);")
    lines.extend(_not_found_guard("item == null", f"{name} with ID {{Id}} not found for update"))
    lines.extend([
        "",
        f'{_DOUBLE_INDENT}_logger.LogInformation("Updated {name} with ID {{Id}}", id);',
        f"{_DOUBLE_INDENT}return Ok(item);",
        f"{_INDENT}}}",
        "",
    ])

    # --- Delete ---
    lines.extend(_doc(f"Delete a {name}"))
    lines.extend([
        f'{_INDENT}[HttpDelete("{{id}}")]',
        f"{_INDENT}[ProducesResponseType(StatusCodes.Status204NoContent)]",
        f"{_INDENT}[ProducesResponseType(StatusCodes.Status404NotFound)]",
        f"{_INDENT}public async Task<ActionResult> Delete({key_type} id)",
        f"{_INDENT}{{",
        f"{_DOUBLE_INDENT}var success = await {service}.DeleteAsync(id);",
    ])
    lines.extend(_not_found_guard("!success", f"{name} with ID {{Id}} not found for deletion"))
    lines.extend([
        "",
        f'{_DOUBLE_INDENT}_logger.LogInformation("Deleted {name} with ID {{Id}}", id);',
        f"{_DOUBLE_INDENT}return NoContent();",
        f"{_INDENT}}}",
        "}",
    ])
    return lines


def generate_controllers(model: DataModel) -> str:
    """CRUD controllers for every entity as one C# file."""
    lines: List[str] = list(auto_generated_header(model.name))
    lines.append("")

    if not model.entities:
        lines.append("// No entities to generate controllers for")
        return join_lines(lines)

    namespace: str = namespace_for(model.name)
    lines.extend([
        "using System.Collections.Generic;",
        "using System.Threading.Tasks;",
        "using Microsoft.AspNetCore.Http;",
        "using Microsoft.AspNetCore.Mvc;",
        "using Microsoft.Extensions.Logging;",
        f"using {namespace}.DTOs;",
        f"using {namespace}.Services;",
        "",
        f"namespace {namespace}.Controllers;",
        "",
    ])

    for i, entity in enumerate(model.entities):
        if i:
            lines.append("")
        lines.extend(generate_entity_controller(entity))

    logger.debug("Generated %d controllers.", len(model.entities))
    return join_lines(lines)


__all__: List[str] = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "controller_name",
    "generate_entity_controller",
    "generate_controllers",
]
