"""Unit tests for configuration and constants."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from define_engine.config import ConfigLoader, EngineConfig
from define_engine.constants import Defaults, Models, OriginTypes


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("DEFINE_MODEL", "CT_DIR", "ALLOW_NON_EXT_EXTENSION", "STRIP_CODED_VALUES"):
        monkeypatch.delenv(key, raising=False)


class TestEngineConfig:
    """Test suite for EngineConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        config = EngineConfig()

        assert config.model == "SDTM"
        assert config.ct_dir == Path(Defaults.CT_DIR)
        assert config.allow_non_extensible_extension is False
        assert config.strip_coded_value_whitespace is True

    def test_config_is_immutable(self):
        """Test that config is frozen and cannot be modified."""
        config = EngineConfig()

        with pytest.raises(FrozenInstanceError):
            config.model = "ADaM"  # type: ignore[misc]

    def test_unknown_model_is_rejected(self):
        """Only supported models are accepted."""
        with pytest.raises(ValueError, match="model must be one of"):
            EngineConfig(model="CDASH")

    def test_origin_types_follow_model(self):
        """ADaM has its own origin types."""
        assert EngineConfig(model=Models.ADAM).origin_types == OriginTypes.BY_MODEL["ADaM"]
        assert "CRF" not in EngineConfig(model=Models.ADAM).origin_types

    def test_config_from_env(self, monkeypatch):
        """Test loading config from environment variables."""
        monkeypatch.setenv("DEFINE_MODEL", "SEND")
        monkeypatch.setenv("CT_DIR", "/env/ct")
        monkeypatch.setenv("ALLOW_NON_EXT_EXTENSION", "yes")
        monkeypatch.setenv("STRIP_CODED_VALUES", "0")

        config = EngineConfig.from_env()

        assert config.model == "SEND"
        assert config.ct_dir == Path("/env/ct")
        assert config.allow_non_extensible_extension is True
        assert config.strip_coded_value_whitespace is False

    def test_invalid_boolean_in_env(self, monkeypatch):
        """Unparseable booleans are reported with their key."""
        monkeypatch.setenv("ALLOW_NON_EXT_EXTENSION", "sometimes")

        with pytest.raises(ValueError, match="ALLOW_NON_EXT_EXTENSION"):
            EngineConfig.from_env()


class TestConfigLoader:
    """Test suite for ConfigLoader."""

    def test_missing_file_uses_defaults(self, tmp_path):
        """Without a config file the environment defaults apply."""
        config = ConfigLoader.load(tmp_path / "absent.toml")

        assert config == EngineConfig()

    def test_load_from_toml(self, tmp_path):
        """TOML sections override the defaults."""
        config_file = tmp_path / "define_engine.toml"
        config_file.write_text(
            '[default]\nmodel = "ADaM"\n\n'
            '[paths]\nct_dir = "terminology"\n\n'
            "[editor]\nallow_non_extensible_extension = true\n"
            'strip_coded_value_whitespace = "no"\n'
        )

        config = ConfigLoader.load(config_file)

        assert config.model == "ADaM"
        assert config.ct_dir == Path("terminology")
        assert config.allow_non_extensible_extension is True
        assert config.strip_coded_value_whitespace is False

    def test_broken_toml_warns_and_falls_back(self, tmp_path):
        """An unreadable config file is skipped with a warning."""
        config_file = tmp_path / "define_engine.toml"
        config_file.write_text("[default\nmodel = ")

        with pytest.warns(UserWarning, match="Failed to load config"):
            config = ConfigLoader.load(config_file)

        assert config == EngineConfig()
