# File: entitygen/exporters.py
"""
EntityGen - File Exporter
==========================

Writes rendered entity classes to disk:
    1. Optionally empties the output directory first.
    2. Writes every file atomically (temp file + rename).
    3. Refuses to replace existing files unless overwriting is enabled.
    4. Records size, line count and SHA-256 per file in a manifest, which
       can be written beside the output as ``entitygen-manifest.json``.

I/O failures are collected per file; one unwritable file doesn't stop the
rest of the batch.
"""

from __future__ import annotations

import json
import logging
import shutil
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Tuple

from entitygen.models import GenerationConfig
from entitygen.utils import Timer, count_lines, ensure_directory, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entitygen.exporters")

MANIFEST_FILENAME: str = "entitygen-manifest.json"

# never removed by clean_before_export
_PRESERVED_NAMES: FrozenSet[str] = frozenset({".git", ".gitignore", ".gitkeep"})


# ---------------------------------------------------------------------------
# Export records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """One class file that made it to disk."""

    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str


@dataclass(frozen=False, slots=True)
class ExportManifest:
    """What one export wrote, in write order."""

    namespace: str = ""
    generator_version: str = ""
    export_timestamp: str = ""
    output_directory: str = ""
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    files: List[FileRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = asdict(self)
        # absolute paths would make the manifest machine-specific
        for entry in data["files"]:
            entry.pop("absolute_path", None)
        return data

    def to_json(self, indent_size: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent_size, ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Outcome of ``ProjectExporter.export()``."""

    success: bool
    manifest: ExportManifest
    errors: Tuple[str, ...]
    warnings: Tuple[str, ...] = ()
    elapsed_seconds: float = 0.0


# ---------------------------------------------------------------------------
# ProjectExporter
# ---------------------------------------------------------------------------


class ProjectExporter:
    """
    Writes a ``{relative_path: source}`` mapping of rendered classes under
    one output directory.

    Usage::

        exporter = ProjectExporter(config, output_dir=Path("./Models"))
        result = exporter.export({"Blog.cs": source})
        if not result.success:
            print(result.errors)

    Not thread-safe.  Use one exporter per export.
    """

    def __init__(
        self,
        config: GenerationConfig,
        output_dir: Path,
        *,
        clean_before_export: bool = False,
    ) -> None:
        self._config: GenerationConfig = config
        self._output_dir: Path = output_dir.resolve()
        self._clean_before_export: bool = clean_before_export

        self._errors: List[str] = []
        self._warnings: List[str] = []
        self._written: List[FileRecord] = []

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def export(self, sources: Dict[str, str]) -> ExportResult:
        """Write *sources* and return the outcome with its manifest."""
        with Timer("export") as timer:
            if self._prepare_output_dir():
                for rel_path, source in sources.items():
                    self._export_one(rel_path, source)
                logger.info(
                    "Wrote %d of %d class files to %s.",
                    len(self._written),
                    len(sources),
                    self._output_dir,
                )
                if self._config.generate_manifest:
                    self._write_manifest_file()

        manifest: ExportManifest = self._build_manifest()
        if self._errors:
            logger.error(
                "Export finished with %d error(s) in %.3fs.", len(self._errors), timer.elapsed
            )
        else:
            logger.info(
                "Export finished: %d files, %d bytes in %.3fs.",
                manifest.total_files,
                manifest.total_bytes,
                timer.elapsed,
            )

        return ExportResult(
            success=not self._errors,
            manifest=manifest,
            errors=tuple(self._errors),
            warnings=tuple(self._warnings),
            elapsed_seconds=timer.elapsed,
        )

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    def _prepare_output_dir(self) -> bool:
        """Clean (when asked) and create the output directory."""
        try:
            if self._clean_before_export and self._output_dir.is_dir():
                self._clean_output_dir()
            ensure_directory(self._output_dir)
        except OSError as exc:
            self._fail(f"Cannot prepare output directory {self._output_dir}: {exc}")
            return False
        return True

    def _clean_output_dir(self) -> None:
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
                message: str = f"Could not remove {item}: {exc}"
                self._warnings.append(message)
                logger.warning(message)

    def _export_one(self, rel_path: str, source: str) -> None:
        target: Path = self._output_dir / rel_path
        if target.exists() and not self._config.overwrite_existing:
            self._fail(
                f"Refusing to overwrite existing file {rel_path} "
                f"(enable overwrite_existing or pass --overwrite)."
            )
            return

        try:
            size_bytes: int = write_file(target, source)
        except OSError as exc:
            self._fail(f"Failed to write {rel_path}: {type(exc).__name__}: {exc}")
            return

        self._written.append(FileRecord(
            relative_path=rel_path,
            absolute_path=str(target),
            size_bytes=size_bytes,
            line_count=count_lines(source),
            sha256=sha256_hex(source),
        ))
        logger.debug("Exported %s (%d bytes).", rel_path, size_bytes)

    def _fail(self, message: str) -> None:
        self._errors.append(message)
        logger.error(message)

    def _build_manifest(self) -> ExportManifest:
        import entitygen

        return ExportManifest(
            namespace=self._config.namespace,
            generator_version=entitygen.__version__,
            export_timestamp=time.strftime("%Y-%m-%dT%H:%M:%S%z"),
            output_directory=str(self._output_dir),
            total_files=len(self._written),
            total_bytes=sum(r.size_bytes for r in self._written),
            total_lines=sum(r.line_count for r in self._written),
            files=list(self._written),
        )

    def _write_manifest_file(self) -> None:
        manifest_path: Path = self._output_dir / MANIFEST_FILENAME
        try:
            write_file(manifest_path, self._build_manifest().to_json())
        except OSError as exc:
            self._warnings.append(f"Could not write manifest: {exc}")
            logger.warning("Could not write manifest %s: %s", manifest_path, exc)
        else:
            logger.debug("Manifest written to %s.", manifest_path)


__all__: List[str] = [
    "MANIFEST_FILENAME",
    "ProjectExporter",
    "ExportManifest",
    "ExportResult",
    "FileRecord",
]

logger.debug("entitygen.exporters loaded.")
