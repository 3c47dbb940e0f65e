"""
tests/conftest.py
Shared fixtures for the modelforge test suite.

Models are built from camelCase dicts exactly as the editing UI sends
them, so every fixture also exercises the pydantic alias handling.
No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import json
import pathlib
from typing import Any, Dict

import pytest
import yaml

from modelforge.models import DataModel


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
MODEL_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "model_example.yaml"


# ---------------------------------------------------------------------------
# Reference model (model_example.yaml)
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def raw_example_dict() -> Dict[str, Any]:
    """Load the reference model_example.yaml once per session."""
    assert MODEL_EXAMPLE_PATH.exists(), (
        f"Reference model not found at {MODEL_EXAMPLE_PATH}. "
        "Make sure model_example.yaml is in the project root."
    )
    with open(MODEL_EXAMPLE_PATH, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    assert isinstance(data, dict), "Top-level YAML must be a mapping."
    return data


@pytest.fixture()
def example_dict(raw_example_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Deep copy so each test can mutate freely."""
    return copy.deepcopy(raw_example_dict)


@pytest.fixture()
def shop_model(example_dict: Dict[str, Any]) -> DataModel:
    return DataModel.model_validate(example_dict["model"])


# ---------------------------------------------------------------------------
# Small models
# ---------------------------------------------------------------------------


@pytest.fixture()
def user_order_dict() -> Dict[str, Any]:
    """User (Guid key, unique email) and Order with a 1:N cascade relation to User."""
    return {
        "id": "m-1",
        "name": "Shop",
        "version": "2.0.0",
        "entities": [
            {
                "id": "e-user",
                "name": "User",
                "fields": [
                    {
                        "id": "f-user-id",
                        "name": "Id",
                        "type": "Guid",
                        "constraints": {
                            "isPrimaryKey": True,
                            "isRequired": True,
                            "isAutoGenerated": True,
                        },
                    },
                    {
                        "id": "f-user-email",
                        "name": "Email",
                        "type": "string",
                        "constraints": {"isRequired": True, "isUnique": True, "maxLength": 255},
                    },
                ],
            },
            {
                "id": "e-order",
                "name": "Order",
                "fields": [
                    {
                        "id": "f-order-id",
                        "name": "Id",
                        "type": "Guid",
                        "constraints": {"isPrimaryKey": True, "isAutoGenerated": True},
                    },
                    {
                        "id": "f-order-total",
                        "name": "Total",
                        "type": "decimal",
                        "constraints": {"isRequired": True},
                    },
                ],
            },
        ],
        "relations": [
            {
                "id": "r-order-user",
                "name": "placed by",
                "sourceEntityId": "e-order",
                "targetEntityId": "e-user",
                "cardinality": "one-to-many",
                "onDelete": "cascade",
            }
        ],
        "indexes": [],
    }


@pytest.fixture()
def user_order_model(user_order_dict: Dict[str, Any]) -> DataModel:
    return DataModel.model_validate(user_order_dict)


@pytest.fixture()
def student_course_model() -> DataModel:
    """Student and Course joined by a many-to-many relation."""
    return DataModel.model_validate(
        {
            "name": "School",
            "entities": [
                {
                    "id": "e-student",
                    "name": "Student",
                    "fields": [
                        {
                            "id": "f-student-id",
                            "name": "Id",
                            "type": "int",
                            "constraints": {"isPrimaryKey": True, "isAutoGenerated": True},
                        },
                        {
                            "id": "f-student-name",
                            "name": "Name",
                            "type": "string",
                            "constraints": {"isRequired": True},
                        },
                    ],
                },
                {
                    "id": "e-course",
                    "name": "Course",
                    "fields": [
                        {
                            "id": "f-course-id",
                            "name": "Id",
                            "type": "int",
                            "constraints": {"isPrimaryKey": True, "isAutoGenerated": True},
                        },
                        {
                            "id": "f-course-title",
                            "name": "Title",
                            "type": "string",
                            "constraints": {"isRequired": True, "maxLength": 200},
                        },
                    ],
                },
            ],
            "relations": [
                {
                    "id": "r-student-course",
                    "sourceEntityId": "e-student",
                    "targetEntityId": "e-course",
                    "cardinality": "many-to-many",
                }
            ],
        }
    )


@pytest.fixture()
def empty_model() -> DataModel:
    return DataModel.model_validate({"id": "m-empty", "name": "Empty"})


@pytest.fixture()
def dangling_model() -> DataModel:
    """One entity plus a relation whose target was deleted."""
    return DataModel.model_validate(
        {
            "name": "Dangling",
            "entities": [
                {
                    "id": "e-user",
                    "name": "User",
                    "fields": [
                        {
                            "id": "f-user-id",
                            "name": "Id",
                            "type": "int",
                            "constraints": {"isPrimaryKey": True},
                        }
                    ],
                }
            ],
            "relations": [
                {
                    "id": "r-ghost",
                    "sourceEntityId": "e-user",
                    "targetEntityId": "e-deleted",
                    "cardinality": "one-to-many",
                }
            ],
        }
    )


@pytest.fixture()
def decimal_model() -> DataModel:
    """Product with a decimal price of precision 10, scale 2."""
    return DataModel.model_validate(
        {
            "name": "Catalog",
            "entities": [
                {
                    "id": "e-product",
                    "name": "Product",
                    "fields": [
                        {
                            "id": "f-product-id",
                            "name": "Id",
                            "type": "int",
                            "constraints": {"isPrimaryKey": True, "isAutoGenerated": True},
                        },
                        {
                            "id": "f-product-price",
                            "name": "Price",
                            "type": "decimal",
                            "constraints": {"isRequired": True, "precision": 10, "scale": 2},
                        },
                    ],
                }
            ],
        }
    )


@pytest.fixture()
def employee_dict() -> Dict[str, Any]:
    """Employee with an unnamed 1:N self-relation (employee -> manager)."""
    return {
        "name": "Staff",
        "entities": [
            {
                "id": "e-employee",
                "name": "Employee",
                "fields": [
                    {
                        "id": "f-employee-id",
                        "name": "Id",
                        "type": "int",
                        "constraints": {"isPrimaryKey": True, "isAutoGenerated": True},
                    },
                    {
                        "id": "f-employee-name",
                        "name": "Name",
                        "type": "string",
                        "constraints": {"isRequired": True, "maxLength": 100},
                    },
                ],
            }
        ],
        "relations": [
            {
                "id": "r-employee-manager",
                "sourceEntityId": "e-employee",
                "targetEntityId": "e-employee",
                "cardinality": "one-to-many",
            }
        ],
    }


@pytest.fixture()
def employee_model(employee_dict: Dict[str, Any]) -> DataModel:
    return DataModel.model_validate(employee_dict)


# ---------------------------------------------------------------------------
# Model files on disk
# ---------------------------------------------------------------------------


@pytest.fixture()
def model_yaml_path(user_order_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """The user/order model wrapped in a ``model:`` key, as YAML."""
    path = tmp_path / "model.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump({"model": user_order_dict}, fh, default_flow_style=False, allow_unicode=True)
    return path


@pytest.fixture()
def model_json_path(user_order_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """The bare user/order model as JSON."""
    path = tmp_path / "model.json"
    path.write_text(json.dumps(user_order_dict, indent=2), encoding="utf-8")
    return path


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "generated"
    return path
