"""
Tests for the composer-ast command line interface.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import json
import logging

import pytest
from click.testing import CliRunner

from composer_ast.cli.main import cli
from composer_ast.logging import PACKAGE_LOGGER


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by `tree` commands after each test."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_composer_handler", False):
            logger.removeHandler(handler)


def test_lists_command_groups(runner) -> None:
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "tree" in result.output
    assert "config" in result.output


def test_unknown_command(runner) -> None:
    result = runner.invoke(cli, ["vector"])
    assert result.exit_code != 0


class TestTreeCommands:
    """Tests for `composer-ast tree ...`."""

    def test_parse(self, runner, source_file) -> None:
        result = runner.invoke(cli, ["tree", "parse", str(source_file)])
        assert result.exit_code == 0, result.output
        raw = json.loads(result.output)
        assert raw["type"] == "CompilationUnit"
        assert raw["children"][0]["type"] == "IfElseStatement"

    def test_parse_to_file(self, runner, source_file, tmp_path) -> None:
        out = tmp_path / "raw.json"
        result = runner.invoke(cli, ["tree", "parse", str(source_file), "--out", str(out)])
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text(encoding="utf-8"))["type"] == "CompilationUnit"

    def test_parse_invalid_source(self, runner, tmp_path) -> None:
        bad = tmp_path / "bad.bal"
        bad.write_text("if (a {\n", encoding="utf-8")
        result = runner.invoke(cli, ["tree", "parse", str(bad)])
        assert result.exit_code == 1
        assert "Error parsing source" in result.output

    def test_render(self, runner, source_file, tmp_path, if_else_source) -> None:
        raw_file = tmp_path / "raw.json"
        runner.invoke(cli, ["tree", "parse", str(source_file), "--out", str(raw_file)])
        result = runner.invoke(cli, ["tree", "render", str(raw_file)])
        assert result.exit_code == 0, result.output
        assert result.output == if_else_source

    def test_render_invalid_json(self, runner, tmp_path) -> None:
        raw_file = tmp_path / "raw.json"
        raw_file.write_text("{", encoding="utf-8")
        result = runner.invoke(cli, ["tree", "render", str(raw_file)])
        assert result.exit_code == 1

    def test_render_unknown_type(self, runner, tmp_path) -> None:
        raw_file = tmp_path / "raw.json"
        raw_file.write_text(json.dumps({"type": "ForStatement"}), encoding="utf-8")
        result = runner.invoke(cli, ["tree", "render", str(raw_file)])
        assert result.exit_code == 1
        assert "ForStatement" in result.output

    def test_check(self, runner, source_file) -> None:
        result = runner.invoke(cli, ["tree", "check", str(source_file)])
        assert result.exit_code == 0, result.output
        assert "Round-trip OK" in result.output

    def test_set_condition_prints(self, runner, source_file, if_else_source) -> None:
        result = runner.invoke(
            cli, ["tree", "set-condition", str(source_file), "--path", "0/1", "--expr", "x > 5"]
        )
        assert result.exit_code == 0, result.output
        assert result.output == if_else_source.replace("c < 2", "x > 5")
        assert source_file.read_text(encoding="utf-8") == if_else_source

    def test_set_condition_in_place(self, runner, source_file, if_else_source) -> None:
        result = runner.invoke(
            cli,
            ["tree", "set-condition", str(source_file), "--path", "0/0", "--expr", "ok", "--in-place"],
        )
        assert result.exit_code == 0, result.output
        assert source_file.read_text(encoding="utf-8") == if_else_source.replace(
            "if (a)", "if (ok)"
        )

    def test_set_condition_on_non_conditional(self, runner, source_file) -> None:
        result = runner.invoke(
            cli, ["tree", "set-condition", str(source_file), "--path", "0", "--expr", "ok"]
        )
        assert result.exit_code == 1
        assert "not a conditional statement" in result.output

    @pytest.mark.parametrize("path", ["9", "0/body"])
    def test_set_condition_bad_path(self, runner, source_file, path) -> None:
        result = runner.invoke(
            cli, ["tree", "set-condition", str(source_file), "--path", path, "--expr", "ok"]
        )
        assert result.exit_code == 1

    def test_set_condition_bad_expression(self, runner, source_file, if_else_source) -> None:
        result = runner.invoke(
            cli,
            ["tree", "set-condition", str(source_file), "--path", "0/1", "--expr", "x >", "--in-place"],
        )
        assert result.exit_code == 1
        assert "Error setting condition" in result.output
        assert source_file.read_text(encoding="utf-8") == if_else_source

    def test_invalid_config_file(self, runner, source_file, tmp_path) -> None:
        config_file = tmp_path / "composer.json"
        config_file.write_text(json.dumps({"max_depth": 0}), encoding="utf-8")
        result = runner.invoke(
            cli, ["tree", "--config", str(config_file), "check", str(source_file)]
        )
        assert result.exit_code == 1
        assert "Error loading configuration" in result.output

    def test_config_limits_depth(self, runner, source_file, tmp_path) -> None:
        config_file = tmp_path / "composer.json"
        config_file.write_text(json.dumps({"max_depth": 2}), encoding="utf-8")
        result = runner.invoke(
            cli,
            ["tree", "--config", str(config_file), "--log-level", "critical", "check", str(source_file)],
        )
        assert result.exit_code == 1
        assert "Error building tree" in result.output


class TestConfigCommands:
    """Tests for `composer-ast config ...`."""

    def test_generate_and_validate(self, runner, tmp_path) -> None:
        out = tmp_path / "composer.json"
        result = runner.invoke(
            cli, ["config", "generate", "--out", str(out), "--lenient", "--undo-limit", "7"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["strict_structure"] is False
        assert data["undo_limit"] == 7

        result = runner.invoke(cli, ["config", "validate", str(out)])
        assert result.exit_code == 0
        assert "Validation OK" in result.output

    def test_generate_invalid_value(self, runner, tmp_path) -> None:
        out = tmp_path / "composer.json"
        result = runner.invoke(cli, ["config", "generate", "--out", str(out), "--max-depth", "0"])
        assert result.exit_code == 1
        assert not out.exists()

    def test_validate_rejects_unknown_key(self, runner, tmp_path) -> None:
        path = tmp_path / "composer.json"
        path.write_text(json.dumps({"strict": True}), encoding="utf-8")
        result = runner.invoke(cli, ["config", "validate", str(path)])
        assert result.exit_code == 1
        assert "Validation failed" in result.output


def test_version(runner) -> None:
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "composer-ast" in result.output
    assert "1.0.0" in result.output
