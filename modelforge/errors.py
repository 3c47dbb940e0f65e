# File: modelforge/errors.py
"""
ModelForge - Exception hierarchy
=================================

Generation itself never raises for an editable-but-incomplete model
(dangling relations, missing primary keys, empty models all degrade
gracefully).  The exceptions below are reserved for programming errors:
an engine/schema version mismatch in the type tables, or a caller asking
the dispatcher for an artifact kind that does not exist.
"""

from __future__ import annotations

from typing import List, Optional


class ModelForgeError(Exception):
    """Base class for every exception raised by modelforge."""

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.hint: Optional[str] = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class TypeMappingError(ModelForgeError, ValueError):
    """A field type has no entry in one of the type tables."""


class UnknownArtifactKindError(ModelForgeError, ValueError):
    """The dispatcher was asked for an artifact kind it does not know."""


__all__: List[str] = [
    "ModelForgeError",
    "TypeMappingError",
    "UnknownArtifactKindError",
]
