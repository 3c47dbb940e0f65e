# File: modelforge/queries.py
"""
ModelForge - Model Query Helpers
=================================
Read-only lookups over a ``DataModel`` shared by every generator.

Relationship topology lives here so that all generators agree on it:

* which entity owns a foreign key and what the FK property is called
  (``foreign_key_name``, ``foreign_keys``, ``synthesized_foreign_keys``),
* which navigation properties an entity exposes and what they are called
  (``navigations_for``, ``reference_navigation_name``),
* what the implied many-to-many join table is called (``join_table_name``).

Relations whose source or target entity does not exist are *dangling*.
``resolved_relations`` and everything built on it skip them silently, so a
model caught mid-edit still generates.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence, Set, Tuple

from modelforge.models import Cardinality, DataModel, Entity, EntityField, FieldType, Relation
from modelforge.type_maps import csharp_base_type
from modelforge.utils import sanitize_identifier, to_pascal_case, to_plural

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.queries")

# Fallback key when an entity declares no primary key.
FALLBACK_KEY_NAME: str = "Id"
FALLBACK_KEY_TYPE: FieldType = FieldType.GUID


# ---------------------------------------------------------------------------
# Result containers
# ---------------------------------------------------------------------------


class EntityRelations(NamedTuple):
    outgoing: List[Relation]
    incoming: List[Relation]


class ResolvedRelation(NamedTuple):
    """A relation whose two endpoints both exist."""

    relation: Relation
    source: Entity
    target: Entity


class ForeignKey(NamedTuple):
    """
    FK property held by the source of a one-to-one / one-to-many relation.

    ``declared`` is True when the entity already has a field with the same
    property name; such keys are wired up but not synthesized again.
    """

    name: str
    relation: Relation
    target: Entity
    key_type: FieldType
    declared: bool


class Direction(str, Enum):
    OUTGOING = "outgoing"
    INCOMING = "incoming"


class NavigationShape(str, Enum):
    REFERENCE = "reference"
    COLLECTION = "collection"
    NONE = "none"


class Navigation(NamedTuple):
    name: str
    type_name: str
    shape: NavigationShape
    direction: Direction
    relation: Relation
    foreign_key: Optional[str] = None

    @property
    def is_collection(self) -> bool:
        return self.shape is NavigationShape.COLLECTION


# Every (cardinality, direction) pair is listed.  Incoming many-to-many is
# NONE: the collection is emitted once, from the source side.
NAVIGATION_SHAPES: Dict[Tuple[Cardinality, Direction], NavigationShape] = {
    (Cardinality.ONE_TO_ONE, Direction.OUTGOING): NavigationShape.REFERENCE,
    (Cardinality.ONE_TO_MANY, Direction.OUTGOING): NavigationShape.REFERENCE,
    (Cardinality.MANY_TO_MANY, Direction.OUTGOING): NavigationShape.COLLECTION,
    (Cardinality.ONE_TO_ONE, Direction.INCOMING): NavigationShape.REFERENCE,
    (Cardinality.ONE_TO_MANY, Direction.INCOMING): NavigationShape.COLLECTION,
    (Cardinality.MANY_TO_MANY, Direction.INCOMING): NavigationShape.NONE,
}

FK_CARDINALITIES: Tuple[Cardinality, ...] = (Cardinality.ONE_TO_ONE, Cardinality.ONE_TO_MANY)


# ---------------------------------------------------------------------------
# Entity / field lookups
# ---------------------------------------------------------------------------


def primary_key_field(entity: Entity) -> Optional[EntityField]:
    """First field flagged as primary key, in array order."""
    for field in entity.fields:
        if field.constraints.is_primary_key:
            return field
    return None


def entity_by_id(model: DataModel, entity_id: str) -> Optional[Entity]:
    for entity in model.entities:
        if entity.id == entity_id:
            return entity
    return None


def entity_index(model: DataModel) -> Dict[str, Entity]:
    """Map entity id -> entity (first occurrence wins on duplicate ids)."""
    index: Dict[str, Entity] = {}
    for entity in model.entities:
        index.setdefault(entity.id, entity)
    return index


def field_by_id(entity: Entity, field_id: str) -> Optional[EntityField]:
    for field in entity.fields:
        if field.id == field_id:
            return field
    return None


def relations_of(entity: Entity, relations: Sequence[Relation]) -> EntityRelations:
    """Partition *relations* by endpoint; self-relations land in both lists."""
    outgoing: List[Relation] = [r for r in relations if r.source_entity_id == entity.id]
    incoming: List[Relation] = [r for r in relations if r.target_entity_id == entity.id]
    return EntityRelations(outgoing, incoming)


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


def class_name(entity: Entity) -> str:
    return sanitize_identifier(to_pascal_case(entity.name))


def collection_name(entity: Entity) -> str:
    """Plural class name; also the DbSet accessor and collection navigation name."""
    return to_plural(class_name(entity))


def property_name(field: EntityField) -> str:
    return sanitize_identifier(to_pascal_case(field.name))


def table_name(entity: Entity) -> str:
    """Custom table name when set, otherwise the pluralised class name."""
    if entity.table_name and entity.table_name.strip():
        return entity.table_name.strip()
    return collection_name(entity)


def primary_key_name(entity: Entity) -> str:
    pk: Optional[EntityField] = primary_key_field(entity)
    return property_name(pk) if pk is not None else FALLBACK_KEY_NAME


def primary_key_field_type(entity: Entity) -> FieldType:
    pk: Optional[EntityField] = primary_key_field(entity)
    return pk.type if pk is not None else FALLBACK_KEY_TYPE


def primary_key_type(entity: Entity) -> str:
    """Non-nullable C# type of the entity key (``Guid`` without a PK)."""
    return csharp_base_type(primary_key_field_type(entity))


def foreign_key_name(relation: Relation, target: Entity) -> str:
    """Custom FK name from the relation, or ``{Target}Id``."""
    if relation.foreign_key_name and relation.foreign_key_name.strip():
        return sanitize_identifier(to_pascal_case(relation.foreign_key_name.strip()))
    return f"{class_name(target)}Id"


def join_table_name(source: Entity, target: Entity) -> str:
    """Implied many-to-many join table, ``SourceTarget`` in relation order."""
    return f"{class_name(source)}{class_name(target)}"


# ---------------------------------------------------------------------------
# Relationship topology
# ---------------------------------------------------------------------------


def resolved_relations(model: DataModel) -> List[ResolvedRelation]:
    """All relations whose endpoints exist, in model order."""
    index: Dict[str, Entity] = entity_index(model)
    resolved: List[ResolvedRelation] = []
    for relation in model.relations:
        source: Optional[Entity] = index.get(relation.source_entity_id)
        target: Optional[Entity] = index.get(relation.target_entity_id)
        if source is None or target is None:
            logger.debug("Skipping dangling relation %s.", relation.id)
            continue
        resolved.append(ResolvedRelation(relation, source, target))
    return resolved


def dangling_relations(model: DataModel) -> List[Relation]:
    index: Dict[str, Entity] = entity_index(model)
    return [
        r
        for r in model.relations
        if r.source_entity_id not in index or r.target_entity_id not in index
    ]


def distinct_relations(model: DataModel) -> List[ResolvedRelation]:
    """
    Resolved relations with repeats collapsed, in model order.

    Two 1:1 / 1:N relations from the same source that land on the same FK
    property and target describe one column and one constraint; two
    many-to-many relations between the same pair describe one join table.
    Only the first of each is kept.
    """
    seen: Set[Tuple[str, ...]] = set()
    result: List[ResolvedRelation] = []
    for rr in resolved_relations(model):
        if rr.relation.cardinality in FK_CARDINALITIES:
            key: Tuple[str, ...] = (rr.source.id, foreign_key_name(rr.relation, rr.target), rr.target.id)
        else:
            key = (rr.source.id, "*", rr.target.id)
        if key in seen:
            logger.debug("Collapsing repeated relation %s.", rr.relation.id)
            continue
        seen.add(key)
        result.append(rr)
    return result


def outgoing_resolved(entity: Entity, model: DataModel) -> List[ResolvedRelation]:
    return [rr for rr in distinct_relations(model) if rr.source.id == entity.id]


def incoming_resolved(entity: Entity, model: DataModel) -> List[ResolvedRelation]:
    return [rr for rr in distinct_relations(model) if rr.target.id == entity.id]


def foreign_keys(entity: Entity, model: DataModel) -> List[ForeignKey]:
    """FK properties of *entity*, one per distinct outgoing 1:1 / 1:N relation."""
    declared_names = {property_name(f) for f in entity.fields}
    keys: List[ForeignKey] = []
    for rr in outgoing_resolved(entity, model):
        if rr.relation.cardinality not in FK_CARDINALITIES:
            continue
        name: str = foreign_key_name(rr.relation, rr.target)
        keys.append(
            ForeignKey(
                name=name,
                relation=rr.relation,
                target=rr.target,
                key_type=primary_key_field_type(rr.target),
                declared=name in declared_names,
            )
        )
    return keys


def synthesized_foreign_keys(entity: Entity, model: DataModel) -> List[ForeignKey]:
    """FK properties that must be added because no declared field covers them."""
    seen: List[str] = []
    result: List[ForeignKey] = []
    for fk in foreign_keys(entity, model):
        if fk.declared or fk.name in seen:
            continue
        seen.append(fk.name)
        result.append(fk)
    return result


# ---------------------------------------------------------------------------
# Navigation naming
# ---------------------------------------------------------------------------


def _is_self_relation(rr: ResolvedRelation) -> bool:
    return rr.source.id == rr.target.id


def _shares_target(rr: ResolvedRelation, model: DataModel) -> bool:
    """True when another distinct FK relation runs between the same two entities."""
    siblings: int = sum(
        1
        for other in distinct_relations(model)
        if other.relation.cardinality in FK_CARDINALITIES
        and other.source.id == rr.source.id
        and other.target.id == rr.target.id
    )
    return siblings > 1


def reference_navigation_name(rr: ResolvedRelation, model: DataModel) -> str:
    """
    Source-side reference navigation of a 1:1 / 1:N relation.

    Normally ``{Target}``.  A self-relation uses the relation name, or
    ``Parent{Class}``, since a member may not share its class name.  When
    several FK relations run to the same target, those with a custom FK name
    take its stem (``ApprovedById`` -> ``ApprovedBy``).
    """
    target: str = class_name(rr.target)
    if _is_self_relation(rr):
        label: str = sanitize_identifier(to_pascal_case(rr.relation.name)) if rr.relation.name.strip() else ""
        return label if label and label != target else f"Parent{target}"
    fk: str = foreign_key_name(rr.relation, rr.target)
    if fk == f"{target}Id" or not _shares_target(rr, model):
        return target
    if fk.endswith("Id") and len(fk) > 2:
        return fk[:-2]
    return f"{fk}Navigation"


def inverse_navigation_name(rr: ResolvedRelation, model: DataModel) -> str:
    """Target-side navigation of a 1:1 / 1:N relation (collection for 1:N)."""
    if rr.relation.cardinality is Cardinality.ONE_TO_MANY:
        base: str = collection_name(rr.source)
    else:
        base = class_name(rr.source)
    reference: str = reference_navigation_name(rr, model)
    if _is_self_relation(rr):
        return f"Child{base}" if reference == f"Parent{class_name(rr.target)}" else f"{reference}{base}"
    if reference == class_name(rr.target):
        return base
    return f"{reference}{base}"


def navigations_for(entity: Entity, model: DataModel) -> List[Navigation]:
    """Navigation properties of *entity*: outgoing first, then incoming."""
    navigations: List[Navigation] = []

    for rr in outgoing_resolved(entity, model):
        shape = NAVIGATION_SHAPES[(rr.relation.cardinality, Direction.OUTGOING)]
        if shape is NavigationShape.NONE:
            continue
        if shape is NavigationShape.COLLECTION:
            name = collection_name(rr.target)
            fk = None
        else:
            name = reference_navigation_name(rr, model)
            fk = foreign_key_name(rr.relation, rr.target)
        navigations.append(
            Navigation(name, class_name(rr.target), shape, Direction.OUTGOING, rr.relation, fk)
        )

    for rr in incoming_resolved(entity, model):
        shape = NAVIGATION_SHAPES[(rr.relation.cardinality, Direction.INCOMING)]
        if shape is NavigationShape.NONE:
            continue
        navigations.append(
            Navigation(
                inverse_navigation_name(rr, model), class_name(rr.source), shape, Direction.INCOMING, rr.relation
            )
        )

    return navigations


__all__: List[str] = [
    "FALLBACK_KEY_NAME",
    "FALLBACK_KEY_TYPE",
    "EntityRelations",
    "ResolvedRelation",
    "ForeignKey",
    "Direction",
    "NavigationShape",
    "Navigation",
    "NAVIGATION_SHAPES",
    "FK_CARDINALITIES",
    "primary_key_field",
    "entity_by_id",
    "entity_index",
    "field_by_id",
    "relations_of",
    "class_name",
    "collection_name",
    "property_name",
    "table_name",
    "primary_key_name",
    "primary_key_field_type",
    "primary_key_type",
    "foreign_key_name",
    "join_table_name",
    "resolved_relations",
    "distinct_relations",
    "dangling_relations",
    "outgoing_resolved",
    "incoming_resolved",
    "foreign_keys",
    "synthesized_foreign_keys",
    "reference_navigation_name",
    "inverse_navigation_name",
    "navigations_for",
]
