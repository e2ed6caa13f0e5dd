"""Tests for configuration loading."""

import logging

from codetree.config import CodeTreeConfig, load_config


class TestLoadConfig:
    def test_defaults_without_files(self, tmp_path):
        assert load_config(tmp_path) == CodeTreeConfig()

    def test_codetree_toml(self, tmp_path):
        (tmp_path / ".codetree.toml").write_text(
            '[codetree]\nexclude = ["gen/"]\nmax_depth = 4\nsemantic = false\n'
        )
        config = load_config(tmp_path)
        assert config.exclude == ["gen/"]
        assert config.max_depth == 4
        assert config.semantic is False
        assert config.function_max_depth == 10

    def test_pyproject_fallback(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[tool.codetree]\nworkers = 2\nuse_gitignore = false\n")
        config = load_config(tmp_path)
        assert config.workers == 2
        assert config.use_gitignore is False

    def test_codetree_toml_takes_precedence(self, tmp_path):
        (tmp_path / ".codetree.toml").write_text("[codetree]\nmax_depth = 3\n")
        (tmp_path / "pyproject.toml").write_text("[tool.codetree]\nmax_depth = 7\n")
        assert load_config(tmp_path).max_depth == 3

    def test_invalid_and_unknown_keys_warn(self, tmp_path, caplog):
        (tmp_path / ".codetree.toml").write_text(
            '[codetree]\nmax_depth = "deep"\nworkers = 0\ncolour = "red"\n'
        )
        with caplog.at_level(logging.WARNING, logger="codetree"):
            config = load_config(tmp_path)
        assert config == CodeTreeConfig()
        assert "max_depth" in caplog.text
        assert "workers" in caplog.text
        assert "colour" in caplog.text

    def test_malformed_toml_warns(self, tmp_path, caplog):
        (tmp_path / ".codetree.toml").write_text("[codetree\n")
        with caplog.at_level(logging.WARNING, logger="codetree"):
            assert load_config(tmp_path) == CodeTreeConfig()
        assert ".codetree.toml" in caplog.text
