# File: modelforge/generators/repositories.py
"""
ModelForge - Repository & Service Generator
============================================
Two artifacts generated from one module because the service layer calls
repository methods by name:

Repositories
    ``IRepository<T>`` / ``Repository<T>`` (generic, cancellation-aware,
    each mutation saves immediately) plus ``I{Entity}Repository`` /
    ``{Entity}Repository`` narrowing ``GetByIdAsync`` to the entity key
    type and adding ``GetByIdWithRelationsAsync``.  The eager-loading shape
    of the latter is left to the consuming code base: only a marker comment
    is emitted where ``.Include()`` calls belong.

Services
    ``I{Entity}Service`` / ``{Entity}Service`` mapping between entities and
    DTOs through an injected AutoMapper ``IMapper``.  Mapping profiles are
    not generated.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from modelforge.generators.context import context_name
from modelforge.generators.dtos import create_dto_name, response_dto_name, update_dto_name
from modelforge.models import DataModel, Entity
from modelforge.queries import class_name, primary_key_name, primary_key_type
from modelforge.utils import (
    auto_generated_header,
    indent_lines,
    join_lines,
    namespace_for,
    section_banner,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.generators.repositories")

_INDENT: str = "    "
_DOUBLE_INDENT: str = "        "
_TRIPLE_INDENT: str = "            "

_CT: str = "CancellationToken cancellationToken = default"

INCLUDE_MARKER: str = "// Add .Include() calls for related entities here"

# (signature, body) of every generic repository member, in emission order.
_GENERIC_MEMBERS: List[Tuple[str, List[str]]] = [
    (
        f"Task<T?> GetByIdAsync<TKey>(TKey id, {_CT})",
        ["return await _dbSet.FindAsync(new object[] { id! }, cancellationToken);"],
    ),
    (
        f"Task<IEnumerable<T>> GetAllAsync({_CT})",
        ["return await _dbSet.ToListAsync(cancellationToken);"],
    ),
    (
        f"Task<IEnumerable<T>> GetPagedAsync(int page, int pageSize, {_CT})",
        [
            "return await _dbSet",
            "    .Skip((page - 1) * pageSize)",
            "    .Take(pageSize)",
            "    .ToListAsync(cancellationToken);",
        ],
    ),
    (
        f"Task<IEnumerable<T>> FindAsync(Expression<Func<T, bool>> predicate, {_CT})",
        ["return await _dbSet.Where(predicate).ToListAsync(cancellationToken);"],
    ),
    (
        f"Task<T?> FirstOrDefaultAsync(Expression<Func<T, bool>> predicate, {_CT})",
        ["return await _dbSet.FirstOrDefaultAsync(predicate, cancellationToken);"],
    ),
    (
        f"Task<bool> AnyAsync(Expression<Func<T, bool>> predicate, {_CT})",
        ["return await _dbSet.AnyAsync(predicate, cancellationToken);"],
    ),
    (
        f"Task<int> CountAsync({_CT})",
        ["return await _dbSet.CountAsync(cancellationToken);"],
    ),
    (
        f"Task<int> CountAsync(Expression<Func<T, bool>> predicate, {_CT})",
        ["return await _dbSet.CountAsync(predicate, cancellationToken);"],
    ),
    (
        f"Task<T> AddAsync(T entity, {_CT})",
        [
            "var entry = await _dbSet.AddAsync(entity, cancellationToken);",
            "await _context.SaveChangesAsync(cancellationToken);",
            "return entry.Entity;",
        ],
    ),
    (
        f"Task<IEnumerable<T>> AddRangeAsync(IEnumerable<T> entities, {_CT})",
        [
            "await _dbSet.AddRangeAsync(entities, cancellationToken);",
            "await _context.SaveChangesAsync(cancellationToken);",
            "return entities;",
        ],
    ),
    (
        f"Task UpdateAsync(T entity, {_CT})",
        [
            "_dbSet.Update(entity);",
            "await _context.SaveChangesAsync(cancellationToken);",
        ],
    ),
    (
        f"Task DeleteAsync(T entity, {_CT})",
        [
            "_dbSet.Remove(entity);",
            "await _context.SaveChangesAsync(cancellationToken);",
        ],
    ),
    (
        f"Task DeleteRangeAsync(IEnumerable<T> entities, {_CT})",
        [
            "_dbSet.RemoveRange(entities);",
            "await _context.SaveChangesAsync(cancellationToken);",
        ],
    ),
]


def _method(signature: str, body: List[str]) -> List[str]:
    lines: List[str] = [f"{_INDENT}{signature}", f"{_INDENT}{{"]
    lines.extend(indent_lines(body, level=2))
    lines.append(f"{_INDENT}}}")
    return lines


def _join_members(members: List[List[str]]) -> List[str]:
    lines: List[str] = []
    for i, member in enumerate(members):
        if i:
            lines.append("")
        lines.extend(member)
    return lines


# ---------------------------------------------------------------------------
# Repository tier
# ---------------------------------------------------------------------------


def generic_repository_interface() -> List[str]:
    lines: List[str] = [
        "/// <summary>",
        "/// Generic repository interface",
        "/// </summary>",
        "public interface IRepository<T> where T : class",
        "{",
    ]
    lines.extend(f"{_INDENT}{signature};" for signature, _ in _GENERIC_MEMBERS)
    lines.append("}")
    return lines


def generic_repository(db_context: str) -> List[str]:
    lines: List[str] = [
        "/// <summary>",
        "/// Generic repository implementation",
        "/// </summary>",
        "public class Repository<T> : IRepository<T> where T : class",
        "{",
        f"{_INDENT}protected readonly {db_context} _context;",
        f"{_INDENT}protected readonly DbSet<T> _dbSet;",
        "",
        f"{_INDENT}public Repository({db_context} context)",
        f"{_INDENT}{{",
        f"{_DOUBLE_INDENT}_context = context;",
        f"{_DOUBLE_INDENT}_dbSet = context.Set<T>();",
        f"{_INDENT}}}",
        "",
    ]
    lines.extend(
        _join_members(
            [_method(f"public virtual async {signature}", body) for signature, body in _GENERIC_MEMBERS]
        )
    )
    lines.append("}")
    return lines


def entity_repository_interface(entity: Entity) -> List[str]:
    name: str = class_name(entity)
    key_type: str = primary_key_type(entity)
    return [
        f"public interface I{name}Repository : IRepository<{name}>",
        "{",
        f"{_INDENT}Task<{name}?> GetByIdAsync({key_type} id, {_CT});",
        f"{_INDENT}Task<{name}?> GetByIdWithRelationsAsync({key_type} id, {_CT});",
        "}",
    ]


def entity_repository(entity: Entity, db_context: str) -> List[str]:
    name: str = class_name(entity)
    key_type: str = primary_key_type(entity)
    key_name: str = primary_key_name(entity)
    lines: List[str] = [
        f"public class {name}Repository : Repository<{name}>, I{name}Repository",
        "{",
        f"{_INDENT}public {name}Repository({db_context} context) : base(context)",
        f"{_INDENT}{{",
        f"{_INDENT}}}",
        "",
    ]
    lines.extend(
        _join_members([
            _method(
                f"public async Task<{name}?> GetByIdAsync({key_type} id, {_CT})",
                [f"return await _dbSet.FirstOrDefaultAsync(e => e.{key_name} == id, cancellationToken);"],
            ),
            _method(
                f"public async Task<{name}?> GetByIdWithRelationsAsync({key_type} id, {_CT})",
                [
                    "return await _dbSet",
                    f"    {INCLUDE_MARKER}",
                    f"    .FirstOrDefaultAsync(e => e.{key_name} == id, cancellationToken);",
                ],
            ),
        ])
    )
    lines.append("}")
    return lines


def generate_repositories(model: DataModel) -> str:
    """Generic and per-entity repositories as one C# file."""
    lines: List[str] = list(auto_generated_header(model.name))
    lines.append("")

    if not model.entities:
        lines.append("// No entities to generate repositories for")
        return join_lines(lines)

    namespace: str = namespace_for(model.name)
    db_context: str = context_name(model)
    lines.extend([
        "using System;",
        "using System.Collections.Generic;",
        "using System.Linq;",
        "using System.Linq.Expressions;",
        "using System.Threading;",
        "using System.Threading.Tasks;",
        "using Microsoft.EntityFrameworkCore;",
        f"using {namespace}.Data;",
        f"using {namespace}.Entities;",
        "",
        f"namespace {namespace}.Repositories;",
        "",
    ])

    lines.extend(section_banner("Generic Repository Interface"))
    lines.append("")
    lines.extend(generic_repository_interface())
    lines.append("")

    lines.extend(section_banner("Generic Repository Implementation"))
    lines.append("")
    lines.extend(generic_repository(db_context))
    lines.append("")

    lines.extend(section_banner("Entity-specific Repository Interfaces"))
    for entity in model.entities:
        lines.append("")
        lines.extend(entity_repository_interface(entity))
    lines.append("")

    lines.extend(section_banner("Entity-specific Repository Implementations"))
    for entity in model.entities:
        lines.append("")
        lines.extend(entity_repository(entity, db_context))

    logger.debug("Generated repositories for %d entities.", len(model.entities))
    return join_lines(lines)


# ---------------------------------------------------------------------------
# Service tier
# ---------------------------------------------------------------------------


def entity_service_interface(entity: Entity) -> List[str]:
    name: str = class_name(entity)
    key_type: str = primary_key_type(entity)
    response: str = response_dto_name(entity)
    return [
        f"public interface I{name}Service",
        "{",
        f"{_INDENT}Task<IEnumerable<{response}>> GetAllAsync(int page = 1, int pageSize = 20);",
        f"{_INDENT}Task<{response}?> GetByIdAsync({key_type} id);",
        f"{_INDENT}Task<{response}> CreateAsync({create_dto_name(entity)} dto);",
        f"{_INDENT}Task<{response}?> UpdateAsync({key_type} id, {update_dto_name(entity)} dto);",
        f"{_INDENT}Task<bool> DeleteAsync({key_type} id);",
        "}",
    ]


def entity_service(entity: Entity) -> List[str]:
    name: str = class_name(entity)
    key_type: str = primary_key_type(entity)
    response: str = response_dto_name(entity)
    lines: List[str] = [
        f"public class {name}Service : I{name}Service",
        "{",
        f"{_INDENT}private readonly I{name}Repository _repository;",
        f"{_INDENT}private readonly IMapper _mapper;",
        "",
        f"{_INDENT}public {name}Service(I{name}Repository repository, IMapper mapper)",
        f"{_INDENT}{{",
        f"{_DOUBLE_INDENT}_repository = repository;",
        f"{_DOUBLE_INDENT}_mapper = mapper;",
        f"{_INDENT}}}",
        "",
    ]
    lines.extend(
        _join_members([
            _method(
                f"public async Task<IEnumerable<{response}>> GetAllAsync(int page = 1, int pageSize = 20)",
                [
                    "var entities = await _repository.GetPagedAsync(page, pageSize);",
                    f"return _mapper.Map<IEnumerable<{response}>>(entities);",
                ],
            ),
            _method(
                f"public async Task<{response}?> GetByIdAsync({key_type} id)",
                [
                    "var entity = await _repository.GetByIdAsync(id);",
                    "if (entity == null) return null;",
                    f"return _mapper.Map<{response}>(entity);",
                ],
            ),
            _method(
                f"public async Task<{response}> CreateAsync({create_dto_name(entity)} dto)",
                [
                    f"var entity = _mapper.Map<{name}>(dto);",
                    "entity = await _repository.AddAsync(entity);",
                    f"return _mapper.Map<{response}>(entity);",
                ],
            ),
            _method(
                f"public async Task<{response}?> UpdateAsync({key_type} id, {update_dto_name(entity)} dto)",
                [
                    "var entity = await _repository.GetByIdAsync(id);",
                    "if (entity == null) return null;",
                    "",
                    "_mapper.Map(dto, entity);",
                    "await _repository.UpdateAsync(entity);",
                    f"return _mapper.Map<{response}>(entity);",
                ],
            ),
            _method(
                f"public async Task<bool> DeleteAsync({key_type} id)",
                [
                    "var entity = await _repository.GetByIdAsync(id);",
                    "if (entity == null) return false;",
                    "",
                    "await _repository.DeleteAsync(entity);",
                    "return true;",
                ],
            ),
        ])
    )
    lines.append("}")
    return lines


def generate_services(model: DataModel) -> str:
    """Per-entity service interfaces and implementations as one C# file."""
    lines: List[str] = list(auto_generated_header(model.name))
    lines.append("")

    if not model.entities:
        lines.append("// No entities to generate services for")
        return join_lines(lines)

    namespace: str = namespace_for(model.name)
    lines.extend([
        "using System;",
        "using System.Collections.Generic;",
        "using System.Threading.Tasks;",
        "using AutoMapper;",
        f"using {namespace}.DTOs;",
        f"using {namespace}.Entities;",
        f"using {namespace}.Repositories;",
        "",
        f"namespace {namespace}.Services;",
        "",
    ])

    lines.extend(section_banner("Service Interfaces"))
    for entity in model.entities:
        lines.append("")
        lines.extend(entity_service_interface(entity))
    lines.append("")

    lines.extend(section_banner("Service Implementations"))
    for entity in model.entities:
        lines.append("")
        lines.extend(entity_service(entity))

    logger.debug("Generated services for %d entities.", len(model.entities))
    return join_lines(lines)


__all__: List[str] = [
    "INCLUDE_MARKER",
    "generic_repository_interface",
    "generic_repository",
    "entity_repository_interface",
    "entity_repository",
    "generate_repositories",
    "entity_service_interface",
    "entity_service",
    "generate_services",
]
