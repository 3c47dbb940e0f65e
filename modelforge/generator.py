# File: modelforge/generator.py
"""
ModelForge - Generation Pipeline (Orchestrator)
================================================

Connects every phase of a file-based run:

    Model File → Parse → Validation → Artifact Generation → File Export

Workflow::

    1. Load the model file (JSON or YAML).
    2. Parse into ``DataModel`` + ``GenerationConfig`` (models.py).
    3. Run the validation pipeline (validators.py).
    4. Generate each requested artifact through the dispatcher.
    5. Hand the texts to ``ArtifactExporter`` (exporters.py).
    6. Return a ``GenerationReport`` with metrics and status.

Validation findings are surfaced, never swallowed, but they only stop the
run in ``strict`` mode.  A failure in one artifact does not prevent the
others from being generated.
"""

from __future__ import annotations

import json
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError as PydanticValidationError

from modelforge.dispatcher import generate
from modelforge.errors import ModelForgeError
from modelforge.exporters import ArtifactExporter, ExportManifest, ExportResult
from modelforge.models import ArtifactKind, DataModel, GenerationConfig
from modelforge.utils import Timer, count_lines
from modelforge.validators import ValidationResult, validate_full

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge.generator")

_MODEL_KEYS: Tuple[str, ...] = ("model", "dataModel", "data_model")
_CONFIG_KEYS: Tuple[str, ...] = ("config", "generationConfig", "generation_config")


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by ``ModelGenerator.generate()``.

    ``success`` is False when loading, generation or export failed, or when
    a strict run found validation errors.  Warnings never fail a run.
    """

    success: bool = False
    model_name: str = ""
    output_directory: str = ""
    blocked_by_validation: bool = False

    # Metrics
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_entities_processed: int = 0
    total_elapsed_seconds: float = 0.0

    # Sub-reports
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    input_errors: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)
    generated_kinds: List[str] = field(default_factory=list)

    manifest: Optional[ExportManifest] = None

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'=' * 60}")
        lines.append("  ModelForge — Generation Report")
        lines.append(f"{'=' * 60}")
        lines.append(f"  Status:             {status}")
        lines.append(f"  Model:              {self.model_name}")
        lines.append(f"  Output:             {self.output_directory}")
        lines.append(f"  Entities processed: {self.total_entities_processed}")
        lines.append(f"  Files generated:    {self.total_files}")
        lines.append(f"  Total lines:        {self.total_lines:,}")
        lines.append(f"  Total bytes:        {self.total_bytes:,}")
        lines.append(f"  Total time:         {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'─' * 60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<28s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        sections: List[Tuple[str, str, List[str]]] = [
            ("Input Errors", "✗", self.input_errors),
            ("Validation Errors", "✗", self.validation_errors),
            ("Validation Warnings", "⚠", self.validation_warnings),
            ("Generation Errors", "✗", self.generation_errors),
            ("Export Errors", "✗", self.export_errors),
        ]
        for title, icon, items in sections:
            if not items:
                continue
            lines.append(f"{'─' * 60}")
            lines.append(f"  {title} ({len(items)}):")
            for item in items:
                lines.append(f"    {icon} {item}")

        lines.append(f"{'=' * 60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Model file loading
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object at top level, got {type(data).__name__}.")
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping at top level, got {type(data).__name__}.")
    return data


def load_model_file(path: Path) -> Dict[str, Any]:
    """
    Load a model file (JSON or YAML), dispatching on the extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Model path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s' — trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


def parse_raw_model(raw: Dict[str, Any]) -> Tuple[DataModel, GenerationConfig]:
    """
    Parse a raw dictionary into a ``DataModel`` and a ``GenerationConfig``.

    Accepted shapes:
        - a bare model object (``{"name": ..., "entities": [...]}``)
        - ``{"model": {...}, "config": {...}}``

    Raises:
        ValueError: If the input is not a mapping or fails validation.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a mapping at top level, got {type(raw).__name__}.")

    model_data: Optional[Dict[str, Any]] = None
    for key in _MODEL_KEYS:
        if isinstance(raw.get(key), dict):
            model_data = raw[key]
            break

    config_data: Dict[str, Any] = {}
    for key in _CONFIG_KEYS:
        if key in raw:
            if not isinstance(raw[key], dict):
                raise ValueError(f"'{key}' must be a mapping.")
            config_data = raw[key]
            break

    if model_data is None:
        # The whole document is the model; a config key next to it is not model data.
        model_data = {k: v for k, v in raw.items() if k not in _CONFIG_KEYS}
        if not config_data:
            logger.info("No generation config found in input — using defaults.")

    try:
        model: DataModel = DataModel.model_validate(model_data)
    except PydanticValidationError as exc:
        raise ValueError(f"Model validation failed: {exc}") from exc

    try:
        config: GenerationConfig = GenerationConfig.model_validate(config_data)
    except PydanticValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc

    return model, config


def apply_dialect_override(model: DataModel, config: GenerationConfig) -> DataModel:
    """A copy of *model* whose ``database_type`` follows ``config.dialect_override``."""
    if config.dialect_override is None or config.dialect_override is model.database_type:
        return model
    logger.info(
        "Overriding model dialect %s with %s.",
        model.database_type.value,
        config.dialect_override.value,
    )
    return model.model_copy(update={"database_type": config.dialect_override})


# ---------------------------------------------------------------------------
# ModelGenerator (pipeline orchestrator)
# ---------------------------------------------------------------------------


class ModelGenerator:
    """
    Pipeline orchestrator for file-based generation runs.

    Usage::

        generator = ModelGenerator()

        report = generator.generate_from_file(Path("shop.yaml"), Path("./out"))

        report = generator.generate(model, GenerationConfig(), Path("./out"))

        print(report.summary())

    The generator is reusable; create once, call generate() many times.
    """

    # -----------------------------------------------------------------
    # Public: generate from file
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        model_path: Path,
        output_dir: Path,
        *,
        config_overrides: Optional[Dict[str, Any]] = None,
    ) -> GenerationReport:
        """
        Full pipeline: load file → validate → generate → export.

        Args:
            model_path: Path to a JSON/YAML model file.
            output_dir: Directory receiving the artifacts.
            config_overrides: Values replacing the file's config entries
                (snake_case or camelCase keys).
        """
        model_path = Path(model_path)
        report: GenerationReport = GenerationReport()
        report.output_directory = str(Path(output_dir).resolve())
        pipeline_start: float = time.perf_counter()

        with Timer("load_model") as t_load:
            try:
                raw: Dict[str, Any] = load_model_file(model_path)
                model, config = parse_raw_model(raw)
                if config_overrides:
                    config = _apply_overrides(config, config_overrides)
            except (OSError, ValueError) as exc:
                report.input_errors.append(str(exc))
                report.step_metrics.append(
                    GenerationStepMetric(
                        step_name="Load Model File",
                        success=False,
                        elapsed_seconds=t_load.elapsed,
                        detail=str(exc),
                    )
                )
                logger.error("Could not load %s: %s", model_path, exc)
                return self._finalise_report(report, time.perf_counter() - pipeline_start)

        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Load Model File",
                success=True,
                elapsed_seconds=t_load.elapsed,
                detail=f"{len(model.entities)} entities from {model_path.name}",
            )
        )
        logger.info(
            "Loaded model %r: %d entities, %d relations.",
            model.name,
            len(model.entities),
            len(model.relations),
        )

        return self._run_pipeline(model, config, Path(output_dir), report, pipeline_start)

    # -----------------------------------------------------------------
    # Public: generate from in-memory objects
    # -----------------------------------------------------------------

    def generate(
        self,
        model: DataModel,
        config: Optional[GenerationConfig] = None,
        output_dir: Path = Path("."),
    ) -> GenerationReport:
        """Full pipeline from an already parsed model and config."""
        report: GenerationReport = GenerationReport()
        report.output_directory = str(Path(output_dir).resolve())
        return self._run_pipeline(
            model, config or GenerationConfig(), Path(output_dir), report, time.perf_counter()
        )

    # -----------------------------------------------------------------
    # Internal: pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        model: DataModel,
        config: GenerationConfig,
        output_dir: Path,
        report: GenerationReport,
        pipeline_start: float,
    ) -> GenerationReport:
        model = apply_dialect_override(model, config)
        report.model_name = model.name
        report.total_entities_processed = len(model.entities)

        result: ValidationResult = self._step_validate(model, config, report)
        if result.has_errors and config.strict:
            report.blocked_by_validation = True
            logger.error("Strict mode: generation aborted by %d validation error(s).", result.error_count)
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        artifacts: "OrderedDict[ArtifactKind, str]" = self._step_generate(model, config, report)
        if not artifacts:
            report.generation_errors.append("No artifacts were generated — aborting export.")
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        self._step_export(artifacts, model, config, output_dir, report)
        return self._finalise_report(report, time.perf_counter() - pipeline_start)

    def _step_validate(
        self,
        model: DataModel,
        config: GenerationConfig,
        report: GenerationReport,
    ) -> ValidationResult:
        with Timer("validation") as t:
            result: ValidationResult = validate_full(model, config)

        report.validation_errors.extend(str(e) for e in result.errors)
        report.validation_warnings.extend(str(w) for w in result.warnings)

        if result.has_errors:
            detail: str = f"{result.error_count} error(s)"
        elif result.has_warnings:
            detail = f"{result.warning_count} warning(s)"
        else:
            detail = "all checks passed"

        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Validate Model",
                success=result.is_valid,
                elapsed_seconds=t.elapsed,
                detail=detail,
            )
        )
        return result

    def _step_generate(
        self,
        model: DataModel,
        config: GenerationConfig,
        report: GenerationReport,
    ) -> "OrderedDict[ArtifactKind, str]":
        """Generate each requested kind; one failing kind does not stop the rest."""
        artifacts: "OrderedDict[ArtifactKind, str]" = OrderedDict()

        with Timer("generation") as t:
            for kind in config.kinds:
                try:
                    artifacts[kind] = generate(
                        kind, model, include_drops=config.include_drop_statements
                    )
                    report.generated_kinds.append(kind.value)
                except (ModelForgeError, ValueError, KeyError) as exc:
                    error_msg: str = f"{kind.value}: {type(exc).__name__}: {exc}"
                    report.generation_errors.append(error_msg)
                    logger.error("Generation failed for %s", error_msg, exc_info=True)

        total_lines: int = sum(count_lines(text) for text in artifacts.values())
        detail: str = f"{len(artifacts)} artifacts, ~{total_lines:,} lines"
        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Generate Artifacts",
                success=not report.generation_errors,
                elapsed_seconds=t.elapsed,
                detail=detail,
            )
        )
        logger.info("Artifact generation complete: %s in %.3fs.", detail, t.elapsed)
        return artifacts

    def _step_export(
        self,
        artifacts: "OrderedDict[ArtifactKind, str]",
        model: DataModel,
        config: GenerationConfig,
        output_dir: Path,
        report: GenerationReport,
    ) -> None:
        with Timer("export") as t:
            exporter: ArtifactExporter = ArtifactExporter(
                output_dir,
                clean_before_export=config.clean_output,
                write_manifest=config.write_manifest,
            )
            export_result: ExportResult = exporter.export(artifacts, model)

        report.total_files = export_result.manifest.total_files
        report.total_bytes = export_result.manifest.total_bytes
        report.total_lines = export_result.manifest.total_lines
        report.export_errors.extend(export_result.errors)
        report.manifest = export_result.manifest

        report.step_metrics.append(
            GenerationStepMetric(
                step_name="Export to Filesystem",
                success=export_result.success,
                elapsed_seconds=t.elapsed,
                detail=(
                    f"{export_result.manifest.total_files} files, "
                    f"{export_result.manifest.total_bytes:,} bytes"
                ),
            )
        )

    @staticmethod
    def _finalise_report(report: GenerationReport, total_elapsed: float) -> GenerationReport:
        """Set final status and timing on the report."""
        report.total_elapsed_seconds = total_elapsed
        report.success = not (
            report.input_errors
            or report.blocked_by_validation
            or report.generation_errors
            or report.export_errors
        )
        return report


def _apply_overrides(config: GenerationConfig, overrides: Dict[str, Any]) -> GenerationConfig:
    """Re-validate *config* with the non-None entries of *overrides* applied."""
    merged: Dict[str, Any] = config.model_dump()
    merged.update({key: value for key, value in overrides.items() if value is not None})
    return GenerationConfig.model_validate(merged)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ModelGenerator",
    "GenerationReport",
    "GenerationStepMetric",
    "load_model_file",
    "parse_raw_model",
    "apply_dialect_override",
]

logger.debug("modelforge.generator loaded.")
