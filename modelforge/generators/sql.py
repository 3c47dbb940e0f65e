# File: modelforge/generators/sql.py
"""
ModelForge - SQL DDL Generator
===============================
One algorithm, four dialects.  Statement order:

    1. ``DROP TABLE IF EXISTS`` per entity, reverse model order (optional)
    2. ``CREATE TABLE`` per entity, model order, declared columns followed
       by synthesized FK columns
    3. FK constraints for one-to-one / one-to-many relations: ``ALTER TABLE
       ... ADD CONSTRAINT`` on SQL Server, PostgreSQL and MySQL; inline
       table constraints on SQLite, which cannot add them afterwards
    4. ``CREATE [UNIQUE] INDEX`` per model-level index

Many-to-many relations imply a join table that this script does not
create; a trailing comment names each one.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from modelforge.attributes import (
    qualified_table_name,
    quote_identifier,
    sql_column_definition,
    sql_type,
)
from modelforge.models import (
    Cardinality,
    DatabaseDialect,
    DataModel,
    Entity,
    EntityField,
    Index,
    ReferentialAction,
)
from modelforge.queries import (
    ForeignKey,
    distinct_relations,
    entity_index,
    field_by_id,
    foreign_keys,
    join_table_name,
    primary_key_field,
    primary_key_name,
    property_name,
    synthesized_foreign_keys,
    table_name,
)
from modelforge.type_maps import SQL_REFERENTIAL_KEYWORDS, sql_base_type
from modelforge.utils import auto_generated_header, join_lines, section_banner

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.generators.sql")

_INDENT: str = "    "

DIALECT_LABELS: Dict[DatabaseDialect, str] = {
    DatabaseDialect.SQLSERVER: "SQL Server",
    DatabaseDialect.POSTGRESQL: "PostgreSQL",
    DatabaseDialect.MYSQL: "MySQL",
    DatabaseDialect.SQLITE: "SQLite",
}


def constraint_name(entity: Entity, fk: ForeignKey) -> str:
    """``FK_{Table}_{TargetTable}_{FkColumn}``."""
    return f"FK_{table_name(entity)}_{table_name(fk.target)}_{fk.name}"


def _fk_column_type(fk: ForeignKey, dialect: DatabaseDialect) -> str:
    pk: Optional[EntityField] = primary_key_field(fk.target)
    if pk is not None:
        return sql_type(pk, dialect)
    return sql_base_type(fk.key_type, dialect)


def _fk_clause(entity: Entity, fk: ForeignKey, dialect: DatabaseDialect) -> str:
    keywords: Dict[ReferentialAction, str] = SQL_REFERENTIAL_KEYWORDS[dialect]
    name: str = quote_identifier(constraint_name(entity, fk), dialect)
    column: str = quote_identifier(fk.name, dialect)
    referenced: str = quote_identifier(primary_key_name(fk.target), dialect)
    clause: str = (
        f"CONSTRAINT {name} FOREIGN KEY ({column}) "
        f"REFERENCES {qualified_table_name(fk.target, dialect)} ({referenced}) "
        f"ON DELETE {keywords[fk.relation.on_delete]}"
    )
    if fk.relation.on_update is not ReferentialAction.NO_ACTION:
        clause += f" ON UPDATE {keywords[fk.relation.on_update]}"
    return clause


def _drop_statement(entity: Entity, dialect: DatabaseDialect) -> str:
    suffix: str = " CASCADE" if dialect is DatabaseDialect.POSTGRESQL else ""
    return f"DROP TABLE IF EXISTS {qualified_table_name(entity, dialect)}{suffix};"


def _create_table(entity: Entity, model: DataModel, dialect: DatabaseDialect) -> List[str]:
    members: List[str] = []
    for field in entity.fields:
        members.append(
            f"{_INDENT}{quote_identifier(property_name(field), dialect)} "
            f"{sql_column_definition(field, dialect)}"
        )
    for fk in synthesized_foreign_keys(entity, model):
        members.append(
            f"{_INDENT}{quote_identifier(fk.name, dialect)} {_fk_column_type(fk, dialect)} NULL"
        )
    if dialect is DatabaseDialect.SQLITE:
        members.extend(
            f"{_INDENT}{_fk_clause(entity, fk, dialect)}" for fk in foreign_keys(entity, model)
        )

    lines: List[str] = [
        f"-- {table_name(entity)}",
        f"CREATE TABLE {qualified_table_name(entity, dialect)} (",
    ]
    if members:
        lines.extend(m + "," for m in members[:-1])
        lines.append(members[-1])
    else:
        lines.append(f"{_INDENT}-- No columns defined")
    lines.append(");")
    return lines


def _create_index(
    index: Index, entity: Entity, columns: List[str], dialect: DatabaseDialect
) -> str:
    keywords: List[str] = ["CREATE"]
    if index.is_unique:
        keywords.append("UNIQUE")
    # Clustering is a SQL Server concept.
    if index.is_clustered and dialect is DatabaseDialect.SQLSERVER:
        keywords.append("CLUSTERED")
    keywords.append("INDEX")
    quoted_columns: str = ", ".join(quote_identifier(c, dialect) for c in columns)
    return (
        f"{' '.join(keywords)} {quote_identifier(index.name, dialect)} "
        f"ON {qualified_table_name(entity, dialect)} ({quoted_columns});"
    )


def generate_sql(
    model: DataModel,
    dialect: DatabaseDialect = DatabaseDialect.SQLSERVER,
    include_drops: bool = True,
) -> str:
    """DDL script creating every entity table in *dialect*."""
    dialect = DatabaseDialect(dialect)
    label: str = DIALECT_LABELS[dialect]

    lines: List[str] = auto_generated_header(model.name, comment="--")
    lines.append(f"-- Dialect: {label}")
    lines.append("")

    if not model.entities:
        lines.append("-- No entities defined in this model.")
        return join_lines(lines)

    # --- Drops ---
    if include_drops:
        lines.extend(section_banner("Drop Tables", comment="--"))
        for entity in reversed(model.entities):
            lines.append(_drop_statement(entity, dialect))
        lines.append("")

    # --- Tables ---
    lines.extend(section_banner("Create Tables", comment="--"))
    for entity in model.entities:
        lines.extend(_create_table(entity, model, dialect))
        lines.append("")

    # --- Foreign keys ---
    if dialect is not DatabaseDialect.SQLITE:
        statements: List[str] = []
        for entity in model.entities:
            for fk in foreign_keys(entity, model):
                statements.append(
                    f"ALTER TABLE {qualified_table_name(entity, dialect)} ADD "
                    f"{_fk_clause(entity, fk, dialect)};"
                )
        if statements:
            lines.extend(section_banner("Foreign Keys", comment="--"))
            lines.extend(statements)
            lines.append("")

    # --- Indexes ---
    entities: Dict[str, Entity] = entity_index(model)
    index_statements: List[str] = []
    for index in model.indexes:
        entity: Optional[Entity] = entities.get(index.entity_id)
        if entity is None:
            continue
        columns: List[str] = []
        for field_id in index.field_ids:
            field: Optional[EntityField] = field_by_id(entity, field_id)
            if field is not None:
                columns.append(property_name(field))
        if not columns:
            continue
        index_statements.append(_create_index(index, entity, columns, dialect))
    if index_statements:
        lines.extend(section_banner("Indexes", comment="--"))
        lines.extend(index_statements)
        lines.append("")

    # --- Many-to-many notes ---
    join_notes: List[str] = [
        f"-- {rr.source.name} <-> {rr.target.name}: join table "
        f"{quote_identifier(join_table_name(rr.source, rr.target), dialect)} is not created by this script."
        for rr in distinct_relations(model)
        if rr.relation.cardinality is Cardinality.MANY_TO_MANY
    ]
    if join_notes:
        lines.extend(section_banner("Many-to-Many Join Tables", comment="--"))
        lines.extend(join_notes)
        lines.append("")

    if lines[-1] == "":
        lines.pop()

    logger.debug("Generated %s DDL for %d tables.", label, len(model.entities))
    return join_lines(lines)


__all__: List[str] = ["DIALECT_LABELS", "constraint_name", "generate_sql"]
