"""
Tests for the configuration manager.
"""

import os

import pytest
import yaml

from school_calendar.config.manager import ConfigManager
from school_calendar.data.schemas import Config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove calendar overrides from the environment."""
    for name in list(os.environ):
        if name.startswith("SCHOOL_CALENDAR_"):
            monkeypatch.delenv(name)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        yaml.dump(
            {
                "calendar": {"uncovered_day_is_working": False},
                "holidays": {"country": "DE", "subdivision": "BY"},
                "api": {"port": 9000},
            }
        ),
        encoding="utf-8",
    )
    return str(path)


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_packaged_defaults(self):
        config = ConfigManager().load_config()
        assert config.uncovered_day_is_working is True
        assert config.holiday_country == "IN"
        assert config.api_port == 8000

    def test_missing_file_uses_defaults(self, tmp_path):
        config = ConfigManager(str(tmp_path / "missing.yaml")).load_config()
        assert config == Config()

    def test_yaml_sections(self, config_file):
        config = ConfigManager(config_file).load_config()
        assert config.uncovered_day_is_working is False
        assert config.holiday_country == "DE"
        assert config.holiday_subdivision == "BY"
        assert config.api_port == 9000
        assert config.output_format == "json"

    def test_env_overrides(self, config_file, monkeypatch):
        monkeypatch.setenv("SCHOOL_CALENDAR_UNCOVERED_DAY_IS_WORKING", "yes")
        monkeypatch.setenv("SCHOOL_CALENDAR_HOLIDAY_COUNTRY", "US")
        monkeypatch.setenv("SCHOOL_CALENDAR_API_PORT", "8123")
        config = ConfigManager(config_file).load_config()
        assert config.uncovered_day_is_working is True
        assert config.holiday_country == "US"
        assert config.api_port == 8123

    def test_invalid_env_value_ignored(self, config_file, monkeypatch):
        monkeypatch.setenv("SCHOOL_CALENDAR_UNCOVERED_DAY_IS_WORKING", "maybe")
        monkeypatch.setenv("SCHOOL_CALENDAR_API_PORT", "eighty")
        config = ConfigManager(config_file).load_config()
        assert config.uncovered_day_is_working is False
        assert config.api_port == 9000

    def test_invalid_config(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.dump({"api": {"port": 70000}}), encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager(str(path)).load_config()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("calendar: [unclosed", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager(str(path)).load_config()

    def test_save_config(self, tmp_path):
        path = tmp_path / "nested" / "settings.yaml"
        manager = ConfigManager(str(path))
        manager.save_config(Config(holiday_country="FR", uncovered_day_is_working=False))

        saved = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert saved["holidays"]["country"] == "FR"
        assert saved["calendar"]["uncovered_day_is_working"] is False
        assert manager.load_config().holiday_country == "FR"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
