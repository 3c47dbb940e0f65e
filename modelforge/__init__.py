# File: modelforge/__init__.py
"""
ModelForge - Data Model to Code Generator
==========================================

Turns a visual entity/relation model into ready-to-compile C# (entities,
EF Core ``DbContext``, DTOs, ASP.NET Core controllers, repositories and
services), SQL DDL for SQL Server, PostgreSQL, MySQL and SQLite, and an
OpenAPI 3.0 document.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ ModelGenerator │────▶│    dispatcher    │
    │   (cli.py)   │     │ (generator.py) │     │  (generators/)   │
    └──────────────┘     └───────┬────────┘     └──────────────────┘
                                 │
                    ┌────────────┼────────────┐
                    ▼            ▼            ▼
             ┌──────────┐ ┌───────────┐ ┌───────────┐
             │validators│ │  models   │ │ exporters │
             └──────────┘ └───────────┘ └───────────┘

Usage::

    # As a library
    from modelforge import generate, ArtifactKind, DataModel
    model = DataModel.model_validate(raw)
    print(generate(ArtifactKind.SQL_POSTGRES, model))

    # From the command line
    python -m modelforge --model shop.yaml --output ./generated -v
"""

from __future__ import annotations

from typing import List

__version__: str = "0.1.0"
__license__: str = "MIT"

from modelforge.models import (  # noqa: E402
    ArtifactKind,
    Cardinality,
    DatabaseDialect,
    DataModel,
    Entity,
    EntityField,
    FieldConstraints,
    FieldType,
    GenerationConfig,
    Index,
    Position,
    ReferentialAction,
    Relation,
)
from modelforge.errors import (  # noqa: E402
    ModelForgeError,
    TypeMappingError,
    UnknownArtifactKindError,
)
from modelforge.dispatcher import (  # noqa: E402
    ArtifactCache,
    generate,
    generate_all,
)
from modelforge.validators import ValidationResult, validate_full  # noqa: E402
from modelforge.exporters import ArtifactExporter, ExportManifest, ExportResult  # noqa: E402
from modelforge.generator import (  # noqa: E402
    GenerationReport,
    ModelGenerator,
    load_model_file,
    parse_raw_model,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: List[str] = [
    # Version info
    "__version__",
    "__license__",
    # Dispatch
    "generate",
    "generate_all",
    "ArtifactCache",
    # Models
    "ArtifactKind",
    "Cardinality",
    "DatabaseDialect",
    "DataModel",
    "Entity",
    "EntityField",
    "FieldConstraints",
    "FieldType",
    "GenerationConfig",
    "Index",
    "Position",
    "ReferentialAction",
    "Relation",
    # Errors
    "ModelForgeError",
    "TypeMappingError",
    "UnknownArtifactKindError",
    # Validation
    "validate_full",
    "ValidationResult",
    # Pipeline
    "ModelGenerator",
    "GenerationReport",
    "load_model_file",
    "parse_raw_model",
    "ArtifactExporter",
    "ExportManifest",
    "ExportResult",
]
