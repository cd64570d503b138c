"""
tests/test_generator.py
Integration tests for the generation pipeline (entitygen.generator) and
the file exporter it drives.

Covers:
- Loading model files (YAML, JSON, unknown extension, malformed input)
- parse_raw_schema() input shapes
- Full runs writing classes and the manifest
- Dry-run, overwrite protection and per-entity failure isolation
"""

from __future__ import annotations

import json
import pathlib
from typing import Any, Dict

import pytest

from entitygen.exporters import MANIFEST_FILENAME, ProjectExporter
from entitygen.generator import (
    EntityGenerator,
    GenerationReport,
    load_schema_file,
    parse_raw_schema,
)
from entitygen.models import GenerationConfig, ModelInfo


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoadSchemaFile:
    def test_yaml(self, schema_yaml_path: pathlib.Path, schema_document: Dict[str, Any]) -> None:
        assert load_schema_file(schema_yaml_path) == schema_document

    def test_json(self, schema_json_path: pathlib.Path, schema_document: Dict[str, Any]) -> None:
        assert load_schema_file(schema_json_path) == schema_document

    def test_unknown_extension_falls_back(
        self, tmp_path: pathlib.Path, schema_document: Dict[str, Any]
    ) -> None:
        path = tmp_path / "model.txt"
        path.write_text(json.dumps(schema_document), encoding="utf-8")
        assert load_schema_file(path) == schema_document

    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_schema_file(tmp_path / "absent.yaml")

    def test_invalid_json(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_schema_file(path)

    def test_top_level_must_be_mapping(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="YAML mapping"):
            load_schema_file(path)


class TestParseRawSchema:
    def test_model_and_config(self, schema_document: Dict[str, Any]) -> None:
        model, config = parse_raw_schema(schema_document)
        assert model.entity_names == ["Blog", "Post"]
        assert config.namespace == "Blogging.Models"
        assert config.use_data_annotations

    def test_bare_entities_list(self, blogging_model_dict: Dict[str, Any]) -> None:
        raw = {
            "entities": blogging_model_dict["entities"],
            "default_schema": "dbo",
            "generation_config": {"namespace": "App"},
        }
        model, config = parse_raw_schema(raw)
        assert model.default_schema == "dbo"
        assert config.namespace == "App"

    def test_missing_model(self) -> None:
        with pytest.raises(ValueError, match="Cannot find a model definition"):
            parse_raw_schema({"config": {"namespace": "X"}})

    def test_missing_namespace(self, blogging_model_dict: Dict[str, Any]) -> None:
        with pytest.raises(ValueError, match="Config validation failed"):
            parse_raw_schema({"model": blogging_model_dict})

    def test_invalid_model(self, blogging_model_dict: Dict[str, Any]) -> None:
        blogging_model_dict["entities"][1]["navigations"][0]["target"] = "Ghost"
        with pytest.raises(ValueError, match="Model validation failed"):
            parse_raw_schema({"model": blogging_model_dict, "config": {"namespace": "X"}})


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class TestEntityGenerator:
    def test_render_all(self, blogging_model: ModelInfo, generation_config: GenerationConfig) -> None:
        rendered = EntityGenerator().render_all(blogging_model, generation_config)
        assert list(rendered) == ["Blog.cs", "Post.cs"]
        assert "public partial class Blog" in rendered["Blog.cs"]
        assert '[Table("Blogs")]' in rendered["Blog.cs"]

    def test_generate_writes_files(
        self,
        blogging_model: ModelInfo,
        generation_config: GenerationConfig,
        output_dir: pathlib.Path,
    ) -> None:
        report = EntityGenerator().generate(blogging_model, generation_config, output_dir)

        assert report.success, report.summary()
        assert report.total_files == 2
        assert report.total_entities_processed == 2
        blog_text = (output_dir / "Blog.cs").read_text(encoding="utf-8")
        assert blog_text == report.rendered_files["Blog.cs"]
        assert (output_dir / "Post.cs").is_file()

        manifest = json.loads((output_dir / MANIFEST_FILENAME).read_text(encoding="utf-8"))
        assert manifest["namespace"] == "Blogging.Models"
        assert [f["relative_path"] for f in manifest["files"]] == ["Blog.cs", "Post.cs"]

    def test_generate_from_file(
        self, schema_yaml_path: pathlib.Path, output_dir: pathlib.Path
    ) -> None:
        report = EntityGenerator().generate_from_file(schema_yaml_path, output_dir)
        assert report.success, report.summary()
        assert [s.step_name for s in report.step_metrics] == [
            "Load Schema",
            "Render Entities",
            "Export to Filesystem",
        ]

    def test_config_overrides(self, schema_json_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        report = EntityGenerator().generate_from_file(
            schema_json_path,
            output_dir,
            config_overrides={"namespace": "Other.Ns", "use_data_annotations": False,
                              "file_extension": "txt", "generate_manifest": False},
        )
        assert report.success, report.summary()
        text = (output_dir / "Blog.txt").read_text(encoding="utf-8")
        assert "namespace Other.Ns" in text
        assert "[Table" not in text
        assert not (output_dir / MANIFEST_FILENAME).exists()

    def test_load_failure_is_reported(self, tmp_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        report = EntityGenerator().generate_from_file(tmp_path / "missing.yaml", output_dir)
        assert not report.success
        assert report.step_metrics[0].step_name == "Load Schema"
        assert not report.step_metrics[0].success
        assert report.generation_errors

    def test_dry_run_writes_nothing(
        self,
        blogging_model: ModelInfo,
        generation_config: GenerationConfig,
        output_dir: pathlib.Path,
    ) -> None:
        report = EntityGenerator(dry_run=True).generate(blogging_model, generation_config, output_dir)
        assert report.success
        assert report.dry_run
        assert report.total_files == 2
        assert report.total_lines > 0
        assert list(output_dir.iterdir()) == []
        assert "(dry run)" in report.summary()

    def test_refuses_to_overwrite(
        self,
        blogging_model: ModelInfo,
        generation_config: GenerationConfig,
        output_dir: pathlib.Path,
    ) -> None:
        (output_dir / "Blog.cs").write_text("// hand-edited\n", encoding="utf-8")

        report = EntityGenerator().generate(blogging_model, generation_config, output_dir)

        assert not report.success
        assert not report.generation_errors
        assert any("Blog.cs" in e for e in report.export_errors)
        assert (output_dir / "Blog.cs").read_text(encoding="utf-8") == "// hand-edited\n"
        assert (output_dir / "Post.cs").is_file()

    def test_overwrite_enabled(
        self,
        blogging_model: ModelInfo,
        generation_config: GenerationConfig,
        output_dir: pathlib.Path,
    ) -> None:
        (output_dir / "Blog.cs").write_text("// stale\n", encoding="utf-8")
        config = generation_config.model_copy(update={"overwrite_existing": True})

        report = EntityGenerator().generate(blogging_model, config, output_dir)

        assert report.success, report.summary()
        assert "public partial class Blog" in (output_dir / "Blog.cs").read_text(encoding="utf-8")

    def test_clean_output(
        self,
        blogging_model: ModelInfo,
        generation_config: GenerationConfig,
        output_dir: pathlib.Path,
    ) -> None:
        (output_dir / "Obsolete.cs").write_text("", encoding="utf-8")
        (output_dir / ".gitkeep").write_text("", encoding="utf-8")

        report = EntityGenerator(clean_output=True).generate(
            blogging_model, generation_config, output_dir
        )

        assert report.success, report.summary()
        assert not (output_dir / "Obsolete.cs").exists()
        assert (output_dir / ".gitkeep").exists()

    def test_failing_entity_is_isolated(
        self,
        monkeypatch: pytest.MonkeyPatch,
        blogging_model: ModelInfo,
        generation_config: GenerationConfig,
        output_dir: pathlib.Path,
    ) -> None:
        from entitygen.emitter import ClassEmitter

        original = ClassEmitter.generate

        def flaky(self: ClassEmitter, entity: Any, namespace: str, emit_markup: bool) -> str:
            if entity.name == "Blog":
                raise RuntimeError("boom")
            return original(self, entity, namespace, emit_markup)

        monkeypatch.setattr(ClassEmitter, "generate", flaky)

        report: GenerationReport = EntityGenerator().generate(
            blogging_model, generation_config, output_dir
        )

        assert not report.success
        assert report.skipped_entities == ["Blog"]
        assert "RuntimeError" in report.generation_errors[0]
        assert (output_dir / "Post.cs").is_file()
        assert not (output_dir / "Blog.cs").exists()


class TestProjectExporter:
    def test_manifest_records(self, generation_config: GenerationConfig, output_dir: pathlib.Path) -> None:
        result = ProjectExporter(generation_config, output_dir).export({"A.cs": "x\ny\n"})
        assert result.success
        record = result.manifest.files[0]
        assert (record.relative_path, record.size_bytes, record.line_count) == ("A.cs", 4, 2)
        assert json.loads(result.manifest.to_json())["total_lines"] == 2
