"""Tests for the vetter CLI commands."""

import pytest
from click.testing import CliRunner

from vetter.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("VETTER_MAX_DEPTH", "VETTER_MAX_RESULTS", "VETTER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestCheck:
    def test_valid_value(self, runner):
        result = runner.invoke(cli, ["check", "INT_1 && . > 0", "--value", "5"])

        assert result.exit_code == 0
        assert "`current` is valid" in result.output

    def test_invalid_value(self, runner):
        result = runner.invoke(
            cli, ["check", "INT_1 && . > 0", "--value=-3", "--name", "n"]
        )

        assert result.exit_code == 1
        assert "For argument `n`, `n > 0` is not TRUE (FALSE)" in result.output

    def test_several_messages(self, runner):
        result = runner.invoke(cli, ["check", ". > 0 || is_str(.)", "--value=-1"])

        assert result.exit_code == 1
        assert "at least one of these should pass" in result.output
        assert "  - `is_str(current)` is not TRUE (FALSE)" in result.output

    def test_template_variable(self, runner):
        result = runner.invoke(
            cli,
            [
                "check", "shape",
                "--var", 'shape={"id": 0}',
                "--value", '{"id": "a"}',
                "--name", "rec",
            ],
        )

        assert result.exit_code == 1
        assert '`rec["id"]` should be type "int" (is "str")' in result.output

    def test_token_definition(self, runner):
        result = runner.invoke(
            cli, ["check", "POS", "--token", "POS=. > 0", "--value", "1"]
        )

        assert result.exit_code == 0

    def test_value_file(self, runner, tmp_path):
        path = tmp_path / "value.yaml"
        path.write_text("- 1\n- 2\n")

        result = runner.invoke(
            cli, ["check", 'each_is(., "int")', "--value-file", str(path)]
        )

        assert result.exit_code == 0

    def test_value_and_value_file(self, runner, tmp_path):
        path = tmp_path / "value.yaml"
        path.write_text("1\n")

        result = runner.invoke(
            cli, ["check", ". > 0", "--value", "1", "--value-file", str(path)]
        )

        assert result.exit_code == 2
        assert "not both" in result.output

    def test_bad_assignment(self, runner):
        result = runner.invoke(cli, ["check", "x", "--var", "novalue", "--value", "1"])

        assert result.exit_code == 2
        assert "NAME=VALUE" in result.output

    def test_malformed_target(self, runner):
        result = runner.invoke(cli, ["check", ". >", "--value", "1"])

        assert result.exit_code == 2
        assert "Error:" in result.output

    def test_expression_error(self, runner):
        result = runner.invoke(cli, ["check", ". > limit", "--value", "1"])

        assert result.exit_code == 2
        assert "Undefined name: limit" in result.output

    def test_config_file(self, runner, tmp_path):
        path = tmp_path / "vetter.yaml"
        path.write_text("max_depth: 1\n")

        result = runner.invoke(
            cli,
            ["check", ". > 0 && . > 1 && . > 2", "--value", "5", "--config", str(path)],
        )

        assert result.exit_code == 2
        assert "Internal error" in result.output

    def test_settings_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("VETTER_MAX_RESULTS", "1")

        result = runner.invoke(cli, ["check", ". > 0 && . > 1", "--value", "5"])

        assert result.exit_code == 2


class TestListings:
    def test_functions(self, runner):
        result = runner.invoke(cli, ["functions"])

        assert result.exit_code == 0
        assert "is_int(value)" in result.output
        assert "collection" in result.output

    def test_tokens(self, runner):
        result = runner.invoke(cli, ["tokens"])

        assert result.exit_code == 0
        assert "INT_1_POS" in result.output
        assert "<value> should be a positive integer" in result.output
