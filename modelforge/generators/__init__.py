# File: modelforge/generators/__init__.py
"""
ModelForge - Generators
========================
Seven independent, pure generators.  Each takes a ``DataModel`` snapshot
and returns one text artifact; none of them mutates the model or keeps
state between calls.
"""

from modelforge.generators.context import generate_context
from modelforge.generators.controllers import generate_controllers
from modelforge.generators.dtos import generate_dtos
from modelforge.generators.entities import generate_entity_classes
from modelforge.generators.openapi import generate_openapi
from modelforge.generators.repositories import generate_repositories, generate_services
from modelforge.generators.sql import generate_sql

__all__ = [
    "generate_entity_classes",
    "generate_context",
    "generate_dtos",
    "generate_controllers",
    "generate_repositories",
    "generate_services",
    "generate_sql",
    "generate_openapi",
]
