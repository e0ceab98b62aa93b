"""Tests for asum.global_config module."""

import tomllib
from pathlib import Path

import pytest

from asum.config import verify_config
from asum.global_config import (
    GlobalConfigError,
    default_config_text,
    get_config_file_path,
    get_global_config_dir,
    get_logs_dir,
    write_default_config,
)


class TestGlobalConfigDir:
    """Tests for global config directory functions."""

    def test_get_global_config_dir_returns_path(self):
        """Test that get_global_config_dir returns a Path."""
        result = get_global_config_dir()
        assert isinstance(result, Path)
        assert ".asum" in str(result)


class TestConfigFilePaths:
    """Tests for file path functions."""

    def test_get_config_file_path(self, mocker, temp_dir):
        """Test that the global config file is asum.toml."""
        mocker.patch("asum.global_config._CONFIG_DIR", temp_dir / ".asum")

        result = get_config_file_path()

        assert result == temp_dir / ".asum" / "asum.toml"

    def test_get_logs_dir(self, mocker, temp_dir):
        """Test that logs live under ~/.asum/logs."""
        mocker.patch("asum.global_config._CONFIG_DIR", temp_dir / ".asum")

        assert get_logs_dir() == temp_dir / ".asum" / "logs"


class TestDefaultConfig:
    """Tests for the starter configuration."""

    def test_default_text_is_valid_toml(self):
        """Test that the starter file parses."""
        data = tomllib.loads(default_config_text())
        assert data["general"]["active_provider"] == "ollama"

    def test_write_default_config(self, temp_dir):
        """Test writing the starter file and validating it."""
        path = write_default_config(temp_dir / "nested" / "asum.toml")

        assert path.exists()
        config = verify_config(path)
        assert config.ollama.model == "llama3"

    def test_refuses_to_overwrite(self, temp_dir):
        """Test that an existing file is kept without force."""
        path = temp_dir / "asum.toml"
        path.write_text("# mine\n")

        with pytest.raises(GlobalConfigError) as exc_info:
            write_default_config(path)

        assert "already exists" in str(exc_info.value)
        assert path.read_text() == "# mine\n"

    def test_force_overwrites(self, temp_dir):
        """Test that force replaces an existing file."""
        path = temp_dir / "asum.toml"
        path.write_text("# mine\n")

        write_default_config(path, force=True)

        assert path.read_text() == default_config_text()
