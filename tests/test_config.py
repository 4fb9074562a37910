"""Tests for Settings."""

import dataclasses

import pytest

from vetter.config import Settings


class TestDefaults:
    def test_defaults(self):
        settings = Settings()

        assert settings.max_depth == 200
        assert settings.max_results == 10000
        assert settings.max_sub_depth == 65
        assert settings.fuzzy_int_max_len == 100
        assert settings.bullet == "  - "

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().max_depth = 5

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_depth": 0},
            {"max_results": -1},
            {"max_sub_depth": "3"},
            {"max_depth": True},
            {"fuzzy_int_max_len": -1},
            {"bullet": 3},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            Settings(**kwargs)


class TestFromMapping:
    def test_partial(self):
        assert Settings.from_mapping({"max_depth": 5}) == Settings(max_depth=5)

    def test_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown setting"):
            Settings.from_mapping({"depth": 5})


class TestFromEnv:
    def test_explicit_environ(self):
        settings = Settings.from_env(
            {"VETTER_MAX_DEPTH": "10", "VETTER_BULLET": "* ", "OTHER": "x"}
        )

        assert settings.max_depth == 10
        assert settings.bullet == "* "
        assert settings.max_results == 10000

    def test_process_environment(self, monkeypatch):
        monkeypatch.setenv("VETTER_FUZZY_INT_MAX_LEN", "0")

        assert Settings.from_env().fuzzy_int_max_len == 0

    def test_not_an_integer(self):
        with pytest.raises(ValueError, match="VETTER_MAX_RESULTS must be an integer"):
            Settings.from_env({"VETTER_MAX_RESULTS": "many"})


class TestFromYaml:
    def test_flat(self, tmp_path):
        path = tmp_path / "vetter.yaml"
        path.write_text("max_depth: 7\nbullet: '> '\n")

        settings = Settings.from_yaml(path)

        assert settings.max_depth == 7
        assert settings.bullet == "> "

    def test_nested_under_vetter_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("vetter:\n  max_sub_depth: 4\n")

        assert Settings.from_yaml(str(path)).max_sub_depth == 4

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert Settings.from_yaml(path) == Settings()

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError, match="must be a mapping"):
            Settings.from_yaml(path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("max_levels: 3\n")

        with pytest.raises(ValueError, match="max_levels"):
            Settings.from_yaml(path)
