"""Unit tests for the CLI — command registration, validate, publish errors."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from consulpost.cli.app import app

runner = CliRunner()


@pytest.fixture
def write_json(tmp_path: Path):
    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


class TestCliApp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "publish" in result.output
        assert "validate" in result.output

    def test_publish_command_exists(self):
        result = runner.invoke(app, ["publish", "--help"])
        assert result.exit_code == 0


class TestValidateCommand:
    def test_valid_config(self, write_json):
        config = write_json("consul.json", {
            "address": "{{ user('host') }}:8500",
            "metadata": {"build": "42"},
        })
        result = runner.invoke(
            app, ["validate", "-c", str(config), "--var", "host=consul.internal"]
        )
        assert result.exit_code == 0, result.output
        assert "consul.internal:8500" in result.output
        assert "Configuration is valid" in result.output

    def test_missing_address(self, write_json):
        config = write_json("consul.json", {"datacenter": "dc1"})
        result = runner.invoke(app, ["validate", "-c", str(config)])
        assert result.exit_code == 1
        assert "address must be set" in result.output

    def test_var_file(self, write_json):
        config = write_json("consul.json", {"address": "{{ user('host') }}"})
        variables = write_json("vars.json", {"host": "from-file:8500"})
        result = runner.invoke(
            app, ["validate", "-c", str(config), "--var-file", str(variables)]
        )
        assert result.exit_code == 0, result.output
        assert "from-file:8500" in result.output

    def test_markup_in_values_printed_literally(self, write_json):
        config = write_json("consul.json", {
            "address": "consul:8500",
            "key_prefix": "[bold]images",
            "metadata": {"owner": "[red]ops"},
        })
        result = runner.invoke(app, ["validate", "-c", str(config)])
        assert result.exit_code == 0, result.output
        assert "[bold]images" in result.output
        assert "owner=[red]ops" in result.output

    def test_markup_in_errors_printed_literally(self, write_json):
        config = write_json("consul.json", {"address": "{{ user('[bold]host') }}"})
        result = runner.invoke(app, ["validate", "-c", str(config)])
        assert result.exit_code == 1
        assert "unknown user var: [bold]host" in result.output

    def test_bad_var_syntax(self, write_json):
        config = write_json("consul.json", {"address": "consul:8500"})
        result = runner.invoke(app, ["validate", "-c", str(config), "--var", "novalue"])
        assert result.exit_code != 0


class TestPublishCommand:
    def test_unsupported_builder(self, write_json):
        config = write_json("consul.json", {"address": "consul.test:8500"})
        result = runner.invoke(app, [
            "publish",
            "-c", str(config),
            "-b", "mitchellh.docker",
            "-a", "us-east-1:ami-1",
        ])
        assert result.exit_code == 1
        assert "Unsupported artifact type" in result.output

    def test_malformed_identifier(self, write_json):
        config = write_json("consul.json", {"address": "consul.test:8500"})
        result = runner.invoke(app, [
            "publish",
            "-c", str(config),
            "-b", "mitchellh.amazonebs",
            "-a", "us-east-1-ami-1",
        ])
        assert result.exit_code == 1
        assert "Poorly formatted artifact ID" in result.output

    def test_invalid_config(self, write_json):
        config = write_json("consul.json", {"token": "{{ user('missing') }}"})
        result = runner.invoke(app, [
            "publish",
            "-c", str(config),
            "-b", "mitchellh.amazonebs",
            "-a", "us-east-1:ami-1",
        ])
        assert result.exit_code == 1
        assert "Error processing token" in result.output
        assert "address must be set" in result.output
