"""Tests for config loading, defaults, and validation."""

from pathlib import Path

import pytest

from islvideo.config import DEFAULTS, load_config


def _write(tmp_path, text):
    p = tmp_path / "islvideo.yaml"
    p.write_text(text)
    return p


class TestDefaults:
    def test_no_file_uses_defaults(self):
        config = load_config()
        assert config["dataset"]["extension"] == ".mp4"
        assert config["compose"]["max_concurrent"] == 1
        assert config["compose"]["timeout"] == DEFAULTS["compose"]["timeout"]
        assert Path(config["dataset"]["root"]).is_absolute()

    def test_defaults_not_mutated(self):
        load_config(overrides={"compose": {"timeout": 5}})
        assert DEFAULTS["compose"]["timeout"] == 600

    def test_empty_file(self, tmp_path):
        config = load_config(_write(tmp_path, ""))
        assert config["output"]["url_prefix"] == "/generated_videos"


class TestPaths:
    def test_path_vars(self, tmp_path):
        config = load_config(_write(tmp_path, (
            "paths:\n"
            "  public: /srv/isl\n"
            "dataset:\n"
            "  root: ${public}/isl_dataset\n"
            "output:\n"
            "  dir: ${public}/generated_videos\n"
        )))
        assert config["dataset"]["root"] == "/srv/isl/isl_dataset"
        assert config["output"]["dir"] == "/srv/isl/generated_videos"

    def test_relative_to_config_file(self, tmp_path):
        config = load_config(_write(tmp_path, "dataset:\n  root: clips\n"))
        assert config["dataset"]["root"] == str(tmp_path.resolve() / "clips")

    def test_unknown_path_var_raises(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown path variable"):
            load_config(_write(tmp_path, "dataset:\n  root: ${nope}/x\n"))

    def test_overrides_win_and_none_ignored(self, tmp_path):
        config = load_config(
            _write(tmp_path, "output:\n  dir: /from/file\n"),
            overrides={"output": {"dir": "/from/cli"}, "dataset": {"root": None}},
        )
        assert config["output"]["dir"] == "/from/cli"
        assert config["dataset"]["root"] == str(tmp_path.resolve() / "public/isl_dataset")

    def test_url_prefix_normalized(self):
        config = load_config(overrides={"output": {"url_prefix": "videos/"}})
        assert config["output"]["url_prefix"] == "/videos"


class TestValidation:
    def test_unknown_section(self, tmp_path):
        with pytest.raises(ValueError, match="unknown section"):
            load_config(_write(tmp_path, "render:\n  fps: 30\n"))

    def test_section_must_be_mapping(self, tmp_path):
        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(_write(tmp_path, "compose: fast\n"))

    @pytest.mark.parametrize("value", [0, -1, "slow", True])
    def test_timeout_must_be_positive(self, value):
        with pytest.raises(ValueError, match="compose.timeout"):
            load_config(overrides={"compose": {"timeout": value}})

    @pytest.mark.parametrize("value", [0, 1.5, "2"])
    def test_max_concurrent_integer(self, value):
        with pytest.raises(ValueError, match="max_concurrent"):
            load_config(overrides={"compose": {"max_concurrent": value}})

    def test_extension_needs_dot(self):
        with pytest.raises(ValueError, match="extension"):
            load_config(overrides={"dataset": {"extension": "mp4"}})

    def test_extension_lowercased(self):
        config = load_config(overrides={"dataset": {"extension": ".MP4"}})
        assert config["dataset"]["extension"] == ".mp4"
