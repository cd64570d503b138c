# File: entitygen/generator.py
"""
EntityGen - Generation Pipeline (Orchestrator)
===============================================

Connects the phases of a run:

    Schema file → Parse (models.py) → Emit per entity (emitter.py) → Export

Workflow::

    1. Load the model description from JSON/YAML (or accept in-memory objects).
    2. Parse into ``ModelInfo`` + ``GenerationConfig``.
    3. Render each entity with ``ClassEmitter``.
    4. Hand the rendered files to ``ProjectExporter`` (unless dry-run).
    5. Return a ``GenerationReport`` with metrics and status.

Error handling strategy:
    - Load/parse problems stop the run and are reported, not raised.
    - Rendering is isolated per entity; one failing entity is recorded and
      the remaining entities are still generated.
    - Export errors are recorded in the report.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from entitygen.exporters import ExportManifest, ExportResult, ProjectExporter
from entitygen.emitter import ClassEmitter
from entitygen.models import GenerationConfig, ModelInfo
from entitygen.utils import Timer, count_lines

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entitygen.generator")


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
    """Everything a caller needs to know about one run."""

    success: bool = False
    namespace: str = ""
    output_directory: str = ""
    dry_run: bool = False

    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_entities_processed: int = 0
    total_elapsed_seconds: float = 0.0

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)
    skipped_entities: List[str] = field(default_factory=list)
    rendered_files: Dict[str, str] = field(default_factory=dict)

    manifest: Optional[ExportManifest] = None

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        lines.append("=" * 60)
        lines.append("  EntityGen — Generation Report")
        lines.append("=" * 60)
        lines.append(f"  Status:             {status}{' (dry run)' if self.dry_run else ''}")
        lines.append(f"  Namespace:          {self.namespace}")
        lines.append(f"  Output:             {self.output_directory}")
        lines.append(f"  Entities processed: {self.total_entities_processed}")
        lines.append(f"  Files generated:    {self.total_files}")
        lines.append(f"  Total lines:        {self.total_lines:,}")
        lines.append(f"  Total bytes:        {self.total_bytes:,}")
        lines.append(f"  Total time:         {self.total_elapsed_seconds:.3f}s")

        if self.step_metrics:
            lines.append("─" * 60)
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<22s} "
                    f"{step.elapsed_seconds:>7.3f}s  {step.detail}"
                )

        for title, entries in (
            ("Generation Errors", self.generation_errors),
            ("Export Errors", self.export_errors),
            ("Skipped Entities", self.skipped_entities),
        ):
            if entries:
                lines.append("─" * 60)
                lines.append(f"  {title} ({len(entries)}):")
                for entry in entries:
                    lines.append(f"    ✗ {entry}")

        lines.append("=" * 60)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Schema loader helpers
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


def load_schema_file(path: Path) -> Dict[str, Any]:
    """
    Load a model description file (JSON or YAML), dispatching on extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Schema path is not a file: {path}")

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


def parse_raw_schema(raw: Dict[str, Any]) -> Tuple[ModelInfo, GenerationConfig]:
    """
    Parse a raw mapping into validated models.

    Expected top-level keys:
        - "model" (mapping with ``default_schema`` / ``entities``) or
          "entities" (bare list)
        - "config" or "generation_config" (optional)

    Raises:
        ValueError: If required keys are missing or validation fails.
    """
    model_data: Dict[str, Any]
    if isinstance(raw.get("model"), dict):
        model_data = raw["model"]
    elif isinstance(raw.get("entities"), list):
        model_data = {"entities": raw["entities"]}
        if "default_schema" in raw:
            model_data["default_schema"] = raw["default_schema"]
    else:
        raise ValueError(
            "Cannot find a model definition in input. "
            "Expected top-level key: 'model' (mapping) or 'entities' (list)."
        )

    config_data: Dict[str, Any] = {}
    for key in ("config", "generation_config"):
        if isinstance(raw.get(key), dict):
            config_data = raw[key]
            break
    else:
        logger.info("No generation config found in input — using defaults.")

    try:
        model: ModelInfo = ModelInfo.model_validate(model_data)
    except ValidationError as exc:
        raise ValueError(f"Model validation failed: {exc}") from exc

    try:
        config: GenerationConfig = GenerationConfig.model_validate(config_data)
    except ValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc

    return model, config


# ---------------------------------------------------------------------------
# EntityGenerator (orchestrator)
# ---------------------------------------------------------------------------


class EntityGenerator:
    """
    Runs the whole pipeline for a model.

    Usage::

        generator = EntityGenerator()
        report = generator.generate_from_file(Path("model.yaml"), Path("./Models"))
        print(report.summary())

    Reusable: create once, call ``generate`` many times.
    """

    def __init__(self, *, clean_output: bool = False, dry_run: bool = False) -> None:
        self._clean_output: bool = clean_output
        self._dry_run: bool = dry_run

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def render_all(
        self,
        model: ModelInfo,
        config: GenerationConfig,
        report: Optional[GenerationReport] = None,
    ) -> Dict[str, str]:
        """
        Render every entity of *model* to ``{relative_path: source}``.

        Entities that fail to render are logged, listed in *report* (when
        given) and left out of the result.
        """
        emitter: ClassEmitter = ClassEmitter(indent_size=config.indent_size)
        rendered: Dict[str, str] = {}

        for entity in model.entities:
            try:
                source: str = emitter.generate(
                    entity, config.namespace, config.use_data_annotations
                )
            except Exception as exc:
                error_msg: str = f"{entity.name}: {type(exc).__name__}: {exc}"
                logger.error("Failed to generate entity %s", error_msg, exc_info=True)
                if report is not None:
                    report.generation_errors.append(error_msg)
                    report.skipped_entities.append(entity.name)
                continue

            rendered[f"{entity.name}{config.file_extension}"] = source
            logger.debug("Rendered entity '%s': %d lines.", entity.name, count_lines(source))

        return rendered

    def generate_from_file(
        self,
        schema_path: Path,
        output_dir: Path,
        *,
        config_overrides: Optional[Dict[str, Any]] = None,
    ) -> GenerationReport:
        """Full pipeline: load file → parse → render → export."""
        report: GenerationReport = GenerationReport(dry_run=self._dry_run)
        report.output_directory = str(output_dir.resolve())

        with Timer("load_schema") as t_load:
            try:
                raw_data: Dict[str, Any] = load_schema_file(schema_path)
                if config_overrides:
                    config_key: str = next(
                        (k for k in ("config", "generation_config") if isinstance(raw_data.get(k), dict)),
                        "config",
                    )
                    raw_data[config_key] = {**raw_data.get(config_key, {}), **config_overrides}
                model, config = parse_raw_schema(raw_data)
            except (FileNotFoundError, ValueError) as exc:
                load_error: Optional[str] = str(exc)
            else:
                load_error = None

        report.step_metrics.append(GenerationStepMetric(
            step_name="Load Schema",
            success=load_error is None,
            elapsed_seconds=t_load.elapsed,
            detail=load_error or f"{len(model.entities)} entities from {schema_path.name}",
        ))
        if load_error is not None:
            logger.error("Failed to load schema: %s", load_error)
            report.generation_errors.append(load_error)
            return self._finalise_report(report, t_load.elapsed)

        logger.info(
            "Loaded %s: %d entities, namespace=%s.",
            schema_path,
            len(model.entities),
            config.namespace,
        )
        report = self._run_pipeline(model, config, output_dir, report)
        report.total_elapsed_seconds += t_load.elapsed
        return report

    def generate(
        self,
        model: ModelInfo,
        config: GenerationConfig,
        output_dir: Path,
    ) -> GenerationReport:
        """Full pipeline from already-parsed objects."""
        report: GenerationReport = GenerationReport(dry_run=self._dry_run)
        report.output_directory = str(output_dir.resolve())
        return self._run_pipeline(model, config, output_dir, report)

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        model: ModelInfo,
        config: GenerationConfig,
        output_dir: Path,
        report: GenerationReport,
    ) -> GenerationReport:
        report.namespace = config.namespace

        with Timer("render") as t_render:
            rendered: Dict[str, str] = self.render_all(model, config, report)

        report.total_entities_processed = len(model.entities)
        report.rendered_files = rendered
        report.step_metrics.append(GenerationStepMetric(
            step_name="Render Entities",
            success=not report.generation_errors,
            elapsed_seconds=t_render.elapsed,
            detail=f"{len(rendered)}/{len(model.entities)} entities",
        ))
        logger.info(
            "Rendered %d of %d entities in %.3fs.",
            len(rendered),
            len(model.entities),
            t_render.elapsed,
        )

        elapsed: float = t_render.elapsed

        if self._dry_run:
            report.total_files = len(rendered)
            report.total_lines = sum(count_lines(c) for c in rendered.values())
            report.total_bytes = sum(len(c.encode("utf-8")) for c in rendered.values())
            logger.info("Dry-run mode: %d files not written.", len(rendered))
            return self._finalise_report(report, elapsed)

        if not rendered:
            report.generation_errors.append("No files were generated — aborting export.")
            return self._finalise_report(report, elapsed)

        exporter: ProjectExporter = ProjectExporter(
            config, output_dir, clean_before_export=self._clean_output
        )
        export_result: ExportResult = exporter.export(rendered)

        report.total_files = export_result.manifest.total_files
        report.total_bytes = export_result.manifest.total_bytes
        report.total_lines = export_result.manifest.total_lines
        report.export_errors.extend(export_result.errors)
        report.manifest = export_result.manifest
        report.step_metrics.append(GenerationStepMetric(
            step_name="Export to Filesystem",
            success=export_result.success,
            elapsed_seconds=export_result.elapsed_seconds,
            detail=(
                f"{export_result.manifest.total_files} files, "
                f"{export_result.manifest.total_bytes:,} bytes"
            ),
        ))

        return self._finalise_report(report, elapsed + export_result.elapsed_seconds)

    @staticmethod
    def _finalise_report(report: GenerationReport, total_elapsed: float) -> GenerationReport:
        report.total_elapsed_seconds = total_elapsed
        report.success = not report.generation_errors and not report.export_errors
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "EntityGenerator",
    "GenerationReport",
    "GenerationStepMetric",
    "load_schema_file",
    "parse_raw_schema",
]

logger.debug("entitygen.generator loaded.")
