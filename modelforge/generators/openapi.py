# File: modelforge/generators/openapi.py
"""
ModelForge - OpenAPI Generator
===============================
Builds an OpenAPI 3.0.3 document as plain dicts and serialises it with
``json.dumps(indent=2)``.

Component schemas mirror the generated DTOs field for field
(``{Entity}ResponseDto``, ``Create{Entity}Dto``, ``Update{Entity}Dto``) with
camelCase property names.  Each entity gets a collection path
``/api/{entities}`` (GET list, POST create) and an item path
``/api/{entities}/{id}`` (GET, PUT, DELETE).
"""

from __future__ import annotations

import json
import math
import logging
from typing import Any, Dict, List, Optional

from modelforge.generators.controllers import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from modelforge.generators.dtos import (
    create_dto_name,
    response_dto_name,
    update_dto_name,
    writable_fields,
)
from modelforge.models import DataModel, Entity, EntityField, FieldType
from modelforge.queries import (
    ForeignKey,
    class_name,
    collection_name,
    primary_key_field_type,
    property_name,
    synthesized_foreign_keys,
)
from modelforge.type_maps import openapi_type
from modelforge.utils import to_camel_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.generators.openapi")

OPENAPI_VERSION: str = "3.0.3"
JSON_MEDIA_TYPE: str = "application/json"

SERVERS: List[Dict[str, str]] = [
    {"url": "https://api.example.com/v1", "description": "Production server"},
    {"url": "http://localhost:5000", "description": "Development server"},
]

_INTEGER_TYPES = (FieldType.INT, FieldType.LONG)
_NUMBER_TYPES = (FieldType.DECIMAL, FieldType.DOUBLE, FieldType.FLOAT)


# ---------------------------------------------------------------------------
# Schema helpers
# ---------------------------------------------------------------------------


def _type_schema(field_type: FieldType) -> Dict[str, Any]:
    type_name, type_format = openapi_type(field_type)
    schema: Dict[str, Any] = {"type": type_name}
    if type_format:
        schema["format"] = type_format
    return schema


def _default_value(field: EntityField) -> Optional[Any]:
    """Typed ``default`` for the schema, or None when the token does not fit."""
    token: Optional[str] = field.constraints.default_value
    if not token:
        return None
    try:
        if field.type is FieldType.STRING:
            return token
        if field.type is FieldType.BOOL:
            return token.strip().lower() in ("true", "1", "yes")
        if field.type in _INTEGER_TYPES:
            return int(token)
        if field.type in _NUMBER_TYPES:
            number: float = float(token)
            return number if math.isfinite(number) else None
    except ValueError:
        return None
    return None


def field_schema(field: EntityField, nullable: bool) -> Dict[str, Any]:
    c = field.constraints
    schema: Dict[str, Any] = _type_schema(field.type)
    if nullable:
        schema["nullable"] = True
    if c.min_length is not None:
        schema["minLength"] = c.min_length
    if c.max_length is not None:
        schema["maxLength"] = c.max_length
    if c.regex:
        schema["pattern"] = c.regex
    default: Optional[Any] = _default_value(field)
    if default is not None:
        schema["default"] = default
    if field.description:
        schema["description"] = field.description
    return schema


def _fk_properties(foreign_keys: List[ForeignKey]) -> Dict[str, Any]:
    properties: Dict[str, Any] = {}
    for fk in foreign_keys:
        schema: Dict[str, Any] = _type_schema(fk.key_type)
        schema["nullable"] = True
        properties[to_camel_case(fk.name)] = schema
    return properties


def _object_schema(
    properties: Dict[str, Any], required: List[str], description: Optional[str] = None
) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object"}
    if description:
        schema["description"] = description
    if required:
        schema["required"] = required
    schema["properties"] = properties
    return schema


def _is_nullable(field: EntityField) -> bool:
    return not (field.constraints.is_required or field.constraints.is_primary_key)


def response_schema(entity: Entity, foreign_keys: List[ForeignKey]) -> Dict[str, Any]:
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for field in entity.fields:
        name: str = to_camel_case(property_name(field))
        properties[name] = field_schema(field, nullable=_is_nullable(field))
        if not _is_nullable(field):
            required.append(name)
    properties.update(_fk_properties(foreign_keys))
    return _object_schema(properties, required, entity.description)


def create_schema(entity: Entity, foreign_keys: List[ForeignKey]) -> Dict[str, Any]:
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for field in writable_fields(entity):
        name: str = to_camel_case(property_name(field))
        properties[name] = field_schema(field, nullable=_is_nullable(field))
        if not _is_nullable(field):
            required.append(name)
    properties.update(_fk_properties(foreign_keys))
    return _object_schema(properties, required)


def update_schema(entity: Entity, foreign_keys: List[ForeignKey]) -> Dict[str, Any]:
    properties: Dict[str, Any] = {}
    for field in writable_fields(entity):
        properties[to_camel_case(property_name(field))] = field_schema(field, nullable=True)
    properties.update(_fk_properties(foreign_keys))
    return _object_schema(properties, [])


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def _ref(schema_name: str) -> Dict[str, str]:
    return {"$ref": f"#/components/schemas/{schema_name}"}


def _json_content(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {JSON_MEDIA_TYPE: {"schema": schema}}


def collection_path(entity: Entity) -> str:
    return f"/api/{to_camel_case(collection_name(entity))}"


def entity_paths(entity: Entity) -> Dict[str, Any]:
    name: str = class_name(entity)
    plural: str = collection_name(entity)
    response_ref: Dict[str, str] = _ref(response_dto_name(entity))
    tags: List[str] = [plural]
    id_parameter: Dict[str, Any] = {
        "name": "id",
        "in": "path",
        "required": True,
        "description": f"{name} ID",
        "schema": _type_schema(primary_key_field_type(entity)),
    }
    not_found: Dict[str, str] = {"description": "Not Found"}
    bad_request: Dict[str, str] = {"description": "Bad Request"}

    collection: Dict[str, Any] = {
        "get": {
            "tags": tags,
            "summary": f"Get all {plural}",
            "operationId": f"getAll{plural}",
            "parameters": [
                {
                    "name": "page",
                    "in": "query",
                    "required": False,
                    "description": "Page number",
                    "schema": {"type": "integer", "default": DEFAULT_PAGE},
                },
                {
                    "name": "pageSize",
                    "in": "query",
                    "required": False,
                    "description": "Page size",
                    "schema": {"type": "integer", "default": DEFAULT_PAGE_SIZE},
                },
            ],
            "responses": {
                "200": {
                    "description": "Success",
                    "content": _json_content({"type": "array", "items": response_ref}),
                },
            },
        },
        "post": {
            "tags": tags,
            "summary": f"Create a new {name}",
            "operationId": f"create{name}",
            "requestBody": {
                "required": True,
                "content": _json_content(_ref(create_dto_name(entity))),
            },
            "responses": {
                "201": {"description": "Created", "content": _json_content(response_ref)},
                "400": bad_request,
            },
        },
    }

    item: Dict[str, Any] = {
        "get": {
            "tags": tags,
            "summary": f"Get {name} by ID",
            "operationId": f"get{name}ById",
            "parameters": [id_parameter],
            "responses": {
                "200": {"description": "Success", "content": _json_content(response_ref)},
                "404": not_found,
            },
        },
        "put": {
            "tags": tags,
            "summary": f"Update {name}",
            "operationId": f"update{name}",
            "parameters": [id_parameter],
            "requestBody": {
                "required": True,
                "content": _json_content(_ref(update_dto_name(entity))),
            },
            "responses": {
                "200": {"description": "Success", "content": _json_content(response_ref)},
                "400": bad_request,
                "404": not_found,
            },
        },
        "delete": {
            "tags": tags,
            "summary": f"Delete {name}",
            "operationId": f"delete{name}",
            "parameters": [id_parameter],
            "responses": {
                "204": {"description": "No Content"},
                "404": not_found,
            },
        },
    }

    base: str = collection_path(entity)
    return {base: collection, f"{base}/{{id}}": item}


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def build_openapi_document(model: DataModel) -> Dict[str, Any]:
    """The OpenAPI document for *model* as a JSON-compatible dict."""
    title: str = f"{model.name} API"

    if not model.entities:
        return {
            "openapi": OPENAPI_VERSION,
            "info": {"title": title, "description": "No entities defined", "version": model.version},
            "paths": {},
            "components": {"schemas": {}},
        }

    schemas: Dict[str, Any] = {}
    paths: Dict[str, Any] = {}
    for entity in model.entities:
        foreign_keys: List[ForeignKey] = synthesized_foreign_keys(entity, model)
        schemas[response_dto_name(entity)] = response_schema(entity, foreign_keys)
        schemas[create_dto_name(entity)] = create_schema(entity, foreign_keys)
        schemas[update_dto_name(entity)] = update_schema(entity, foreign_keys)
        paths.update(entity_paths(entity))

    return {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": title,
            "description": model.description or f"API for {model.name} data model",
            "version": model.version,
        },
        "servers": [dict(server) for server in SERVERS],
        "paths": paths,
        "components": {"schemas": schemas},
    }


def generate_openapi(model: DataModel) -> str:
    """The OpenAPI document serialised as indented JSON."""
    document: Dict[str, Any] = build_openapi_document(model)
    logger.debug("Generated OpenAPI document with %d paths.", len(document["paths"]))
    return json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)


__all__: List[str] = [
    "OPENAPI_VERSION",
    "SERVERS",
    "field_schema",
    "response_schema",
    "create_schema",
    "update_schema",
    "collection_path",
    "entity_paths",
    "build_openapi_document",
    "generate_openapi",
]
