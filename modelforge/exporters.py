# File: modelforge/exporters.py
"""
ModelForge - Artifact Exporter (File-System Manager)
=====================================================

Responsible for:
    1. Creating the output directory safely.
    2. Writing each generated artifact atomically (write-to-temp then rename)
       under its conventional file name (``Entities.cs``, ``openapi.json``...).
    3. Producing a ``manifest.json`` with per-file size, line count and
       SHA-256 for reproducibility checks.

Re-running on the same directory is always safe.  A failed write is
recorded and the remaining artifacts are still written; nothing here
raises for a single bad file.
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from modelforge.dispatcher import ARTIFACT_CONTENT_TYPES, ARTIFACT_FILE_NAMES, model_fingerprint
from modelforge.models import ArtifactKind, DataModel
from modelforge.utils import Timer, count_lines, ensure_directory, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.exporters")

MANIFEST_FILE_NAME: str = "manifest.json"

# Entries a clean pass never removes.
_PRESERVED_NAMES = frozenset({".git", ".gitignore", ".gitkeep"})


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single exported file."""

    kind: str
    relative_path: str
    content_type: str
    size_bytes: int
    line_count: int
    sha256: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "relative_path": self.relative_path,
            "content_type": self.content_type,
            "size_bytes": self.size_bytes,
            "line_count": self.line_count,
            "sha256": self.sha256,
        }


@dataclass(frozen=False, slots=True)
class ExportManifest:
    """
    Complete manifest of all exported files.

    Serialisable to JSON for build reproducibility verification.
    """

    model_name: str = ""
    model_version: str = ""
    model_fingerprint: str = ""
    generator_version: str = ""
    export_timestamp: str = ""
    output_directory: str = ""
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    files: List[FileRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert manifest to a JSON-serialisable dictionary."""
        return {
            "model_name": self.model_name,
            "model_version": self.model_version,
            "model_fingerprint": self.model_fingerprint,
            "generator_version": self.generator_version,
            "export_timestamp": self.export_timestamp,
            "output_directory": self.output_directory,
            "total_files": self.total_files,
            "total_bytes": self.total_bytes,
            "total_lines": self.total_lines,
            "files": [f.to_dict() for f in self.files],
        }

    def to_json(self, indent_size: int = 2) -> str:
        """Serialise manifest to pretty-printed JSON."""
        return json.dumps(self.to_dict(), indent=indent_size, ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Final result returned by ``ArtifactExporter.export()``."""

    success: bool
    manifest: ExportManifest
    errors: Tuple[str, ...]
    warnings: Tuple[str, ...]
    elapsed_seconds: float


# ---------------------------------------------------------------------------
# ArtifactExporter
# ---------------------------------------------------------------------------


class ArtifactExporter:
    """
    Writes generated artifacts to an output directory.

    Usage::

        exporter = ArtifactExporter(Path("./out"))
        result = exporter.export(generate_all(model), model)
        print(result.manifest.to_json())

    Not thread-safe.  Use one exporter per output directory and per run.
    """

    def __init__(
        self,
        output_dir: Path,
        *,
        clean_before_export: bool = False,
        atomic_writes: bool = True,
        write_manifest: bool = True,
    ) -> None:
        self._output_dir: Path = Path(output_dir).resolve()
        self._clean_before_export: bool = clean_before_export
        self._atomic_writes: bool = atomic_writes
        self._write_manifest: bool = write_manifest

        self._errors: List[str] = []
        self._warnings: List[str] = []
        self._file_records: List[FileRecord] = []

        logger.debug(
            "ArtifactExporter initialised: output_dir=%s, atomic=%s, clean=%s.",
            self._output_dir,
            self._atomic_writes,
            self._clean_before_export,
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def export(
        self,
        artifacts: Mapping[ArtifactKind, str],
        model: Optional[DataModel] = None,
    ) -> ExportResult:
        """
        Write every artifact and, if enabled, the manifest.

        Args:
            artifacts: Mapping of artifact kind to generated text.
            model: The source model, used for manifest metadata.

        Returns:
            ExportResult with success flag, manifest, and error details.
        """
        self._errors = []
        self._warnings = []
        self._file_records = []

        with Timer("export") as timer:
            try:
                self._pre_export_cleanup()
                ensure_directory(self._output_dir)
                self._write_artifacts(artifacts)
            except OSError as exc:
                error_msg: str = f"Fatal export error: {type(exc).__name__}: {exc}"
                self._errors.append(error_msg)
                logger.error(error_msg, exc_info=True)

            manifest: ExportManifest = self._build_manifest(model)
            if self._write_manifest and not self._errors:
                self._write_manifest_file(manifest)

        success: bool = len(self._errors) == 0
        result: ExportResult = ExportResult(
            success=success,
            manifest=manifest,
            errors=tuple(self._errors),
            warnings=tuple(self._warnings),
            elapsed_seconds=timer.elapsed,
        )

        if success:
            logger.info(
                "Export completed successfully: %d files, %d bytes, %.3fs.",
                manifest.total_files,
                manifest.total_bytes,
                timer.elapsed,
            )
        else:
            logger.error(
                "Export completed with %d error(s) in %.3fs.",
                len(self._errors),
                timer.elapsed,
            )
        return result

    # -----------------------------------------------------------------
    # Internal: directory management
    # -----------------------------------------------------------------

    def _pre_export_cleanup(self) -> None:
        """Clean output directory if configured to do so."""
        if not self._clean_before_export or not self._output_dir.exists():
            return

        logger.info("Cleaning output directory: %s", self._output_dir)
        for item in self._output_dir.iterdir():
            if item.name in _PRESERVED_NAMES:
                continue
            try:
                if item.is_dir():
                    shutil.rmtree(item)
                else:
                    item.unlink()
            except OSError as exc:
                warning_msg: str = f"Could not remove {item}: {exc}"
                self._warnings.append(warning_msg)
                logger.warning(warning_msg)

    # -----------------------------------------------------------------
    # Internal: file writing
    # -----------------------------------------------------------------

    def _write_artifacts(self, artifacts: Mapping[ArtifactKind, str]) -> None:
        for kind, content in artifacts.items():
            kind = ArtifactKind(kind)
            rel_path: str = ARTIFACT_FILE_NAMES[kind]
            try:
                self._file_records.append(self._write_single_file(kind, rel_path, content))
            except OSError as exc:
                error_msg: str = f"Failed to write {rel_path}: {type(exc).__name__}: {exc}"
                self._errors.append(error_msg)
                logger.error(error_msg)

        logger.info("Wrote %d artifact files to %s.", len(self._file_records), self._output_dir)

    def _write_single_file(self, kind: ArtifactKind, rel_path: str, content: str) -> FileRecord:
        """Write one artifact and return its FileRecord."""
        full_path: Path = self._output_dir / rel_path
        size_bytes: int = write_file(full_path, content, atomic=self._atomic_writes)
        line_count: int = count_lines(content)

        logger.debug("Wrote file: %s (%d bytes, %d lines).", rel_path, size_bytes, line_count)

        return FileRecord(
            kind=kind.value,
            relative_path=rel_path,
            content_type=ARTIFACT_CONTENT_TYPES[kind],
            size_bytes=size_bytes,
            line_count=line_count,
            sha256=sha256_hex(content),
        )

    # -----------------------------------------------------------------
    # Internal: manifest
    # -----------------------------------------------------------------

    def _build_manifest(self, model: Optional[DataModel]) -> ExportManifest:
        from modelforge import __version__

        records: List[FileRecord] = list(self._file_records)
        return ExportManifest(
            model_name=model.name if model is not None else "",
            model_version=model.version if model is not None else "",
            model_fingerprint=model_fingerprint(model) if model is not None else "",
            generator_version=__version__,
            export_timestamp=datetime.now(timezone.utc).isoformat(),
            output_directory=str(self._output_dir),
            total_files=len(records),
            total_bytes=sum(r.size_bytes for r in records),
            total_lines=sum(r.line_count for r in records),
            files=records,
        )

    def _write_manifest_file(self, manifest: ExportManifest) -> None:
        path: Path = self._output_dir / MANIFEST_FILE_NAME
        try:
            write_file(path, manifest.to_json() + "\n", atomic=self._atomic_writes)
            logger.debug("Manifest written to %s.", path)
        except OSError as exc:
            warning_msg: str = f"Could not write manifest: {exc}"
            self._warnings.append(warning_msg)
            logger.warning(warning_msg)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "MANIFEST_FILE_NAME",
    "FileRecord",
    "ExportManifest",
    "ExportResult",
    "ArtifactExporter",
]

logger.debug("modelforge.exporters loaded — %d public symbols.", len(__all__))
