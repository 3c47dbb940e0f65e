# File: modelforge/utils.py
"""
ModelForge - Utility Functions & Helpers
=========================================
String transformation, file I/O, and timing utilities used throughout the
generation pipeline.

Naming rules:
- ``to_pascal_case`` / ``to_camel_case`` split on ``-``, ``_`` and
  whitespace only; the casing *inside* a segment is preserved, so an
  already-cased single word passes through unchanged.
- ``to_plural`` is a deliberately small heuristic.  Irregular plurals
  ("Person" -> "People") are NOT handled; "Person" becomes "Persons".
- ``sanitize_identifier`` strips everything outside ``[A-Za-z0-9_]``.

All string-conversion functions are pure and decorated with
``@lru_cache(maxsize=None)``; generators call them for every entity, field
and relation on every regeneration.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import List, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_SEGMENT_SPLIT_RE: re.Pattern[str] = re.compile(r"[-_\s]+")
_NON_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"[^A-Za-z0-9_]")

_VOWELS: str = "aeiouAEIOU"

# Fallback namespace when a model name sanitises to nothing.
DEFAULT_NAMESPACE: str = "DataModel"


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """
    Convert a string to PascalCase.

    Examples:
        >>> to_pascal_case("order_item")
        'OrderItem'
        >>> to_pascal_case("first name")
        'FirstName'
        >>> to_pascal_case("OrderItem")
        'OrderItem'
    """
    if not name:
        return ""
    segments: List[str] = [s for s in _SEGMENT_SPLIT_RE.split(name) if s]
    return "".join(s[0].upper() + s[1:] for s in segments)


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Convert a string to camelCase.

    Examples:
        >>> to_camel_case("order_item")
        'orderItem'
        >>> to_camel_case("UserId")
        'userId'
    """
    pascal: str = to_pascal_case(name)
    if not pascal:
        return ""
    return pascal[0].lower() + pascal[1:]


@functools.lru_cache(maxsize=None)
def to_plural(name: str) -> str:
    """
    Naive English pluralisation sufficient for table and collection names.

    Rule order:
        1. consonant + ``y``      -> ``ies``   (Category -> Categories)
        2. ``s``/``x``/``ch``/``sh`` -> + ``es`` (Box -> Boxes)
        3. ``fe``                 -> ``ves``   (Knife -> Knives)
        4. ``f``                  -> ``ves``   (Leaf -> Leaves)
        5. otherwise              -> + ``s``
    """
    if not name:
        return ""

    if name.endswith("y") and len(name) > 1 and name[-2] not in _VOWELS:
        return name[:-1] + "ies"
    if name.endswith(("s", "x", "ch", "sh")):
        return name + "es"
    if name.endswith("fe"):
        return name[:-2] + "ves"
    if name.endswith("f"):
        return name[:-1] + "ves"
    return name + "s"


@functools.lru_cache(maxsize=None)
def sanitize_identifier(name: str) -> str:
    """Strip every character outside ``[A-Za-z0-9_]``."""
    return _NON_IDENTIFIER_RE.sub("", name)


@functools.lru_cache(maxsize=None)
def namespace_for(model_name: str) -> str:
    """Root namespace for generated source, derived from the model name."""
    namespace: str = to_pascal_case(sanitize_identifier(model_name))
    return namespace or DEFAULT_NAMESPACE


# ---------------------------------------------------------------------------
# Line & indentation helpers
# ---------------------------------------------------------------------------


def indent_lines(lines: Sequence[str], level: int = 1, size: int = 4) -> List[str]:
    """Indent a list of lines, leaving blank lines untouched."""
    prefix: str = " " * (level * size)
    return [prefix + line if line else line for line in lines]


def join_lines(lines: Sequence[str]) -> str:
    """Join generated lines with ``\\n`` (no trailing newline)."""
    return "\n".join(lines)


def section_banner(title: str, comment: str = "//") -> List[str]:
    """Three-line comment banner used to separate blocks in generated files."""
    rule: str = "=" * 43
    return [f"{comment} {rule}", f"{comment} {title}", f"{comment} {rule}"]


def auto_generated_header(model_name: str, comment: str = "//") -> List[str]:
    """Leading comment marking a file as generated output."""
    return [
        f"{comment} <auto-generated>",
        f"{comment}     Generated by ModelForge from model '{model_name}'.",
        f"{comment}     Changes to this file will be lost when the code is regenerated.",
        f"{comment} </auto-generated>",
    ]


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create *path* and any missing parents."""
    path.mkdir(parents=True, exist_ok=True)


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path* as UTF-8 and return the number of bytes written.

    With ``atomic=True`` the data goes to a temporary file in the same
    directory first and is moved into place with ``os.replace``.
    """
    ensure_directory(path.parent)
    data: bytes = content.encode("utf-8")

    if not atomic:
        path.write_bytes(data)
        return len(data)

    fd, tmp_name = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except OSError:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.debug("Wrote %s (%d bytes).", path, len(data))
    return len(data)


# ---------------------------------------------------------------------------
# Hashing & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a UTF-8 string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count lines in a string (a trailing newline does not add a line)."""
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Context manager measuring wall-clock time of a block.

    Usage::

        with Timer("generation") as t:
            ...
        print(t.elapsed)
    """

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self._start: float = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()
        logger.debug("%s took %.4fs.", self.label, self.elapsed)

    @property
    def elapsed(self) -> float:
        """Seconds elapsed; live while the block is still running."""
        end: float = self._end if self._end is not None else time.perf_counter()
        return end - self._start

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEFAULT_NAMESPACE",
    "to_pascal_case",
    "to_camel_case",
    "to_plural",
    "sanitize_identifier",
    "namespace_for",
    "indent_lines",
    "join_lines",
    "section_banner",
    "auto_generated_header",
    "ensure_directory",
    "write_file",
    "sha256_hex",
    "count_lines",
    "Timer",
]
