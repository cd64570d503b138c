"""
tests/conftest.py
Shared fixtures for the entitygen test suite.

Fixtures are plain dicts (as they would come out of a YAML/JSON model file)
plus the validated models built from them.  Real file I/O happens inside
pytest's tmp_path directories; no mocking libraries are used.
"""

from __future__ import annotations

import copy
import json
import logging
import pathlib
from typing import Any, Dict, Iterator

import pytest
import yaml

from entitygen.models import EntityInfo, GenerationConfig, ModelInfo


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _restore_entitygen_logger() -> Iterator[None]:
    """cli_main() detaches the package logger from root; put it back for caplog."""
    pkg_logger: logging.Logger = logging.getLogger("entitygen")
    saved = (pkg_logger.level, list(pkg_logger.handlers), pkg_logger.propagate)
    yield
    pkg_logger.setLevel(saved[0])
    pkg_logger.handlers[:] = saved[1]
    pkg_logger.propagate = saved[2]


# ---------------------------------------------------------------------------
# Raw model data fixtures
# ---------------------------------------------------------------------------


_BLOGGING_MODEL: Dict[str, Any] = {
    "entities": [
        {
            "name": "Blog",
            "table_name": "Blogs",
            "properties": [
                {"name": "Id", "type": "int", "column_ordinal": 0},
                {
                    "name": "Title",
                    "type": "string",
                    "max_length": 200,
                    "nullable": False,
                    "column_ordinal": 1,
                },
            ],
            "navigations": [
                {
                    "name": "Posts",
                    "target": "Post",
                    "multiplicity": "collection",
                    "direction": "principal_to_dependent",
                    "foreign_key": {"properties": ["BlogId"]},
                    "inverse": "Blog",
                }
            ],
        },
        {
            "name": "Post",
            "properties": [
                {"name": "Id", "type": "int", "column_ordinal": 0},
                {"name": "BlogId", "type": "int", "column_ordinal": 1},
            ],
            "navigations": [
                {
                    "name": "Blog",
                    "target": "Blog",
                    "direction": "dependent_to_principal",
                    "foreign_key": {"properties": ["BlogId"]},
                    "inverse": "Posts",
                }
            ],
        },
    ],
}


@pytest.fixture()
def blogging_model_dict() -> Dict[str, Any]:
    """Blog 1 → * Post, both navigations declared, Blog mapped to 'Blogs'."""
    return copy.deepcopy(_BLOGGING_MODEL)


@pytest.fixture()
def blogging_model(blogging_model_dict: Dict[str, Any]) -> ModelInfo:
    return ModelInfo.model_validate(blogging_model_dict)


@pytest.fixture()
def blog(blogging_model: ModelInfo) -> EntityInfo:
    entity = blogging_model.get_entity("Blog")
    assert entity is not None
    return entity


@pytest.fixture()
def post(blogging_model: ModelInfo) -> EntityInfo:
    entity = blogging_model.get_entity("Post")
    assert entity is not None
    return entity


@pytest.fixture()
def generation_config() -> GenerationConfig:
    return GenerationConfig(namespace="Blogging.Models", use_data_annotations=True)


# ---------------------------------------------------------------------------
# Schema file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def schema_document(blogging_model_dict: Dict[str, Any]) -> Dict[str, Any]:
    """A complete model file: config section plus model section."""
    return {
        "config": {"namespace": "Blogging.Models", "use_data_annotations": True},
        "model": blogging_model_dict,
    }


@pytest.fixture()
def schema_yaml_path(schema_document: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "model.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(schema_document, fh, default_flow_style=False, allow_unicode=True)
    return path


@pytest.fixture()
def schema_json_path(schema_document: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "model.json"
    path.write_text(json.dumps(schema_document), encoding="utf-8")
    return path


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Provide a clean output directory inside tmp_path."""
    out = tmp_path / "generated_output"
    out.mkdir(parents=True, exist_ok=True)
    return out
