"""
Settings for the school calendar: a sectioned YAML file plus SCHOOL_CALENDAR_* variables.
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml
from pydantic import ValidationError

from school_calendar.data.schemas import Config

logger = logging.getLogger(__name__)

# YAML section -> {YAML key: Config field}
SECTION_MAPPING = {
    "calendar": {"uncovered_day_is_working": "uncovered_day_is_working"},
    "holidays": {
        "country": "holiday_country",
        "subdivision": "holiday_subdivision",
        "language": "holiday_language",
    },
    "output": {"format": "output_format", "directory": "output_directory"},
    "api": {"host": "api_host", "port": "api_port"},
    "logging": {"level": "log_level"},
}

ENV_PREFIX = "SCHOOL_CALENDAR_"


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"Not a boolean: {value}")


# Config fields that need conversion from their environment string
ENV_CONVERTERS: Dict[str, Callable[[str], Any]] = {
    "uncovered_day_is_working": parse_bool,
    "api_port": int,
}


class ConfigManager:
    """Reads and writes the calendar settings."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: Settings file to use. Defaults to the packaged settings.yaml.
        """
        self.config_path = config_path or str(Path(__file__).parent / "settings.yaml")

    def load_config(self) -> Config:
        """
        Build the Config from the settings file, then the environment.

        Raises:
            ValueError: If the file cannot be parsed or a value is out of range.
        """
        values = self._read_file()
        values.update(self._read_environment())

        try:
            return Config(**values)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e}") from e

    def _read_file(self) -> Dict[str, Any]:
        path = Path(self.config_path)
        if not path.exists():
            logger.debug(f"No settings file at {path}, using defaults")
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Cannot parse settings file {path}: {e}") from e

        logger.debug(f"Read settings from {path}")
        return self._flatten(raw or {})

    @staticmethod
    def _flatten(raw: Dict[str, Any]) -> Dict[str, Any]:
        """Map the nested sections onto flat Config field names."""
        values = {}
        for section, keys in SECTION_MAPPING.items():
            section_values = raw.get(section) or {}
            for yaml_key, field in keys.items():
                if yaml_key in section_values:
                    values[field] = section_values[yaml_key]
        return values

    def _read_environment(self) -> Dict[str, Any]:
        """
        Collect overrides named SCHOOL_CALENDAR_<FIELD>, e.g.
        SCHOOL_CALENDAR_HOLIDAY_COUNTRY or SCHOOL_CALENDAR_API_PORT.

        Values that cannot be converted are skipped with a warning.
        """
        overrides = {}
        for field in Config.model_fields:
            env_var, raw = self._env_value(field)
            if raw is None:
                continue
            convert = ENV_CONVERTERS.get(field, str)
            try:
                overrides[field] = convert(raw)
            except ValueError:
                logger.warning(f"Ignoring invalid value for {env_var}: {raw!r}")
                continue
            logger.debug(f"{field} overridden by {env_var}")
        return overrides

    @staticmethod
    def _env_value(field: str) -> Tuple[str, Optional[str]]:
        env_var = ENV_PREFIX + field.upper()
        return env_var, os.environ.get(env_var)

    def save_config(self, config: Config, output_path: Optional[str] = None) -> None:
        """Write the Config back as sectioned YAML, to output_path or the current settings file."""
        target = Path(output_path or self.config_path)
        values = config.model_dump()
        document = {
            section: {yaml_key: values[field] for yaml_key, field in keys.items()}
            for section, keys in SECTION_MAPPING.items()
        }

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            yaml.safe_dump(document, f, default_flow_style=False, sort_keys=False)
        logger.info(f"Settings written to {target}")
