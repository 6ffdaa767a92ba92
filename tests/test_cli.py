import json
from pathlib import Path
from unittest.mock import patch

import yaml
from click.testing import CliRunner

from route_reader.cli import _filter_paths, main
from route_reader.reader.reader import Reader
from sample_resources import PetResource

TESTS_DIR = Path(__file__).parent


class TestCliScan:
    def test_scan_to_yaml_file(self, tmp_path):
        output = tmp_path / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, [
            "scan", "sample_resources:PetResource",
            "--app-dir", str(TESTS_DIR),
            "-o", str(output),
        ])

        assert result.exit_code == 0
        data = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert list(data["paths"]) == ["/pets", "/pets/{petId}"]

    def test_scan_to_json_by_suffix(self, tmp_path):
        output = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "scan", "sample_resources:TagsResource",
            "--app-dir", str(TESTS_DIR),
            "-o", str(output),
        ])

        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["paths"]["/tagged"]["get"]["tags"] == ["Example tag"]

    def test_config_file(self, tmp_path):
        config = tmp_path / "reader.yaml"
        config.write_text("title: Pets\nversion: '3.1'\n")
        output = tmp_path / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, [
            "scan", "sample_resources:PetResource",
            "--app-dir", str(TESTS_DIR),
            "--config", str(config),
            "-o", str(output),
        ])

        assert result.exit_code == 0
        data = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert data["info"] == {"title": "Pets", "version": "3.1"}

    def test_failures_reported_and_strict_exit(self, tmp_path):
        output = tmp_path / "openapi.yaml"
        runner = CliRunner()
        args = [
            "scan", "sample_resources:PetResource", "sample_resources:DuplicateResource",
            "--app-dir", str(TESTS_DIR),
            "-o", str(output),
        ]

        result = runner.invoke(main, args)
        assert result.exit_code == 0
        assert "DuplicateResource.list_again" in result.output

        result = runner.invoke(main, args + ["--strict"])
        assert result.exit_code == 1

    def test_bad_reference(self):
        runner = CliRunner()
        result = runner.invoke(main, ["scan", "sample_resources:Nope", "--app-dir", str(TESTS_DIR)])
        assert result.exit_code == 1
        assert "Nope" in result.output

    @patch("route_reader.cli.Reader")
    def test_workers_passed_to_reader(self, MockReader, tmp_path):
        MockReader.return_value.scan.return_value = Reader().scan([PetResource])
        runner = CliRunner()
        result = runner.invoke(main, [
            "scan", "sample_resources:PetResource",
            "--app-dir", str(TESTS_DIR),
            "--workers", "3",
            "-o", str(tmp_path / "out.yaml"),
        ])

        assert result.exit_code == 0
        MockReader.return_value.scan.assert_called_once_with([PetResource], max_workers=3)


class TestFilterPaths:
    def test_filter_by_method_and_path(self):
        document = Reader().scan([PetResource]).document
        result = _filter_paths(document, ("POST /pets",))
        assert list(result.paths) == ["/pets"]
        assert set(result.paths["/pets"].operations()) == {"post"}

    def test_filter_by_path_only(self):
        document = Reader().scan([PetResource]).document
        result = _filter_paths(document, ("/pets/*",))
        assert list(result.paths) == ["/pets/{petId}"]
        assert set(result.paths["/pets/{petId}"].operations()) == {"get", "delete"}

    def test_filter_no_match(self):
        document = Reader().scan([PetResource]).document
        result = _filter_paths(document, ("DELETE /orders",))
        assert result.paths == {}
