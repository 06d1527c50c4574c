"""Unit tests for configuration manager."""

import json

import pytest

from astro_purpose.config import ConfigManager, Settings
from astro_purpose.utils.aspects import NATAL_ORBS, TRANSIT_ORBS


@pytest.fixture
def temp_config_path(tmp_path):
    """Create a temporary config file path."""
    return tmp_path / "test_config.json"


@pytest.fixture
def config_manager(temp_config_path, monkeypatch):
    """Config manager on a fresh file with no environment overrides."""
    monkeypatch.delenv("SE_EPHE_PATH", raising=False)
    monkeypatch.delenv("ASTRO_PURPOSE_CONFIG", raising=False)
    return ConfigManager(config_path=temp_config_path)


class TestConfigManager:
    """Test configuration management."""

    def test_creates_default_config(self, config_manager, temp_config_path):
        """Test that default config is created if none exists."""
        assert temp_config_path.exists()
        assert config_manager.config["house_system"] == "P"
        assert config_manager.config["eclipse"]["max_attempts"] == 10

    def test_loads_existing_config(self, temp_config_path, monkeypatch):
        """Test loading existing configuration, merged with defaults."""
        monkeypatch.delenv("SE_EPHE_PATH", raising=False)
        with open(temp_config_path, 'w') as f:
            json.dump({"house_system": "K", "node_type": "mean"}, f)

        manager = ConfigManager(config_path=temp_config_path)
        assert manager.get_house_system() == "K"
        assert manager.config["node_type"] == "mean"
        assert manager.config["transit_limit"] == 20

    def test_invalid_json(self, temp_config_path):
        temp_config_path.write_text("{broken")
        with pytest.raises(ValueError, match="Failed to load config"):
            ConfigManager(config_path=temp_config_path)

    def test_not_an_object(self, temp_config_path):
        temp_config_path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="not a JSON object"):
            ConfigManager(config_path=temp_config_path)

    def test_env_config_path(self, tmp_path, monkeypatch):
        path = tmp_path / "from_env.json"
        monkeypatch.setenv("ASTRO_PURPOSE_CONFIG", str(path))
        manager = ConfigManager()
        assert manager.config_path == path
        assert path.exists()


class TestHouseSystem:

    def test_set_house_system(self, config_manager, temp_config_path):
        config_manager.set_house_system("W")
        assert config_manager.get_house_system() == "W"
        with open(temp_config_path) as f:
            assert json.load(f)["house_system"] == "W"

    def test_invalid_house_system(self, config_manager):
        with pytest.raises(ValueError, match="Invalid house system"):
            config_manager.set_house_system("Z")


class TestEphemerisPath:

    def test_moshier_by_default(self, config_manager):
        assert config_manager.get_ephe_path() is None

    def test_missing_directory(self, config_manager, tmp_path):
        with pytest.raises(ValueError, match="does not exist"):
            config_manager.set_ephe_path(str(tmp_path / "nope"))

    def test_set_path(self, config_manager, tmp_path):
        config_manager.set_ephe_path(str(tmp_path))
        assert config_manager.get_ephe_path() == str(tmp_path)

    def test_environment_overrides(self, config_manager, monkeypatch):
        monkeypatch.setenv("SE_EPHE_PATH", "/opt/ephe")
        assert config_manager.get_ephe_path() == "/opt/ephe"


class TestBodiesAndOrbs:

    def test_node_type(self, config_manager):
        config_manager.set_node_type("mean")
        assert config_manager.to_settings().node_type == "mean"
        with pytest.raises(ValueError, match="Invalid node type"):
            config_manager.set_node_type("osculating")

    def test_include_chiron(self, config_manager):
        assert config_manager.to_settings().include_chiron is False
        config_manager.set_include_chiron(True)
        assert config_manager.to_settings().include_chiron is True

    def test_set_natal_orb(self, config_manager):
        config_manager.set_orb("square", 6.5)
        orbs = config_manager.to_settings().orbs
        assert orbs["square"] == 6.5
        assert orbs["trine"] == NATAL_ORBS["trine"]

    def test_set_transit_orb(self, config_manager):
        config_manager.set_orb("conjunction", 3.0, transit=True)
        settings = config_manager.to_settings()
        assert settings.transit_orbs["conjunction"] == 3.0
        assert settings.orbs["conjunction"] == NATAL_ORBS["conjunction"]

    def test_bad_orb(self, config_manager):
        with pytest.raises(ValueError, match="Unknown aspect"):
            config_manager.set_orb("quintile", 2.0)
        with pytest.raises(ValueError, match="non-negative"):
            config_manager.set_orb("square", -1.0)


class TestSettings:

    def test_defaults_match_settings(self, config_manager, temp_config_path):
        settings = config_manager.to_settings()
        defaults = Settings()
        assert settings.house_system == defaults.house_system
        assert settings.eclipse_max_attempts == defaults.eclipse_max_attempts
        assert settings.eclipse_step_days == defaults.eclipse_step_days
        assert settings.eclipse_fallback_days == defaults.eclipse_fallback_days
        assert settings.transit_orbs == TRANSIT_ORBS
        assert settings.data_dir == str(temp_config_path.parent / "data")

    def test_partial_nested_sections(self, temp_config_path, monkeypatch):
        monkeypatch.delenv("SE_EPHE_PATH", raising=False)
        with open(temp_config_path, 'w') as f:
            json.dump({"eclipse": {"max_attempts": 3}, "table_years": {"end": 2050}, "log_level": "debug"}, f)
        settings = ConfigManager(config_path=temp_config_path).to_settings()
        assert settings.eclipse_max_attempts == 3
        assert settings.eclipse_step_days == 180.0
        assert settings.table_start_year == 1900
        assert settings.table_end_year == 2050
        assert settings.log_level == "DEBUG"

    def test_custom_data_dir(self, config_manager, tmp_path):
        config_manager.config["data_dir"] = str(tmp_path / "tables")
        assert config_manager.get_data_dir() == tmp_path / "tables"

    def test_status(self, config_manager):
        status = config_manager.get_status()
        assert status["house_system"] == "P"
        assert status["ephe_path"] is None
