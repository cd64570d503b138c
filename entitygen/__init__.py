# File: entitygen/__init__.py
"""
EntityGen — Entity Class Generator
===================================

Turns a reverse-engineered relational model (entities, scalar properties,
navigations) into C# entity classes, one compilation unit per entity, with
optional data-annotation attributes describing the mapping.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────┐
    │  CLI / Entry │────▶│ EntityGenerator │────▶│ ClassEmitter │
    │   (cli.py)   │     │ (generator.py)  │     │ (emitter.py) │
    └──────────────┘     └───────┬────────┘     └──────┬───────┘
                                 │                     │
                    ┌────────────┴───┐      ┌──────────┼───────────┐
                    ▼                ▼      ▼          ▼           ▼
             ┌──────────┐   ┌───────────┐ ┌──────┐ ┌────────┐ ┌───────────┐
             │  models  │   │ exporters │ │markup│ │ csharp │ │annotations│
             └──────────┘   └───────────┘ └──────┘ └────────┘ └───────────┘

Usage::

    # As a library
    from entitygen import ClassEmitter, ModelInfo
    model = ModelInfo.model_validate(data)
    source = ClassEmitter().generate(model.entities[0], "Blogging.Models", True)

    # From the command line
    python -m entitygen --schema model.yaml --output ./Models --data-annotations
"""

from __future__ import annotations

__version__: str = "0.1.0"
__license__: str = "MIT"

from entitygen.models import (
    ClrType,
    EntityInfo,
    ForeignKeyInfo,
    GenerationConfig,
    ModelInfo,
    Multiplicity,
    NavigationDirection,
    NavigationInfo,
    PropertyInfo,
)
from entitygen.markup import MarkupBuilder, strip_suffix
from entitygen.csharp import CSharpFormatter
from entitygen.annotations import RelationalAnnotationProvider
from entitygen.emitter import ClassEmitter
from entitygen.utils import IndentedStringBuilder, Timer
from entitygen.exporters import ExportManifest, ExportResult, ProjectExporter
from entitygen.generator import (
    EntityGenerator,
    GenerationReport,
    load_schema_file,
    parse_raw_schema,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    "__version__",
    "__license__",
    # Core
    "ClassEmitter",
    "MarkupBuilder",
    "strip_suffix",
    "CSharpFormatter",
    "RelationalAnnotationProvider",
    # Models
    "ClrType",
    "EntityInfo",
    "ForeignKeyInfo",
    "GenerationConfig",
    "ModelInfo",
    "Multiplicity",
    "NavigationDirection",
    "NavigationInfo",
    "PropertyInfo",
    # Pipeline
    "EntityGenerator",
    "GenerationReport",
    "load_schema_file",
    "parse_raw_schema",
    "ProjectExporter",
    "ExportManifest",
    "ExportResult",
    # Utilities
    "IndentedStringBuilder",
    "Timer",
]
