"""
dpll_config.py

Central configuration management for the DPLL solver.

Settings are kept in a singleton and persisted as JSON in 'dpll_config.json'
next to this module whenever they are changed through set()/update(). A YAML
file can be overlaid for a single run with load_yaml().
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from component_15_logging_config import get_logger
from dpll_exceptions import ConfigurationException, InvalidConfigError, wrap_exception

logger = get_logger(__name__)


# ============================================================================
# DEFAULT CONFIGURATION
# ============================================================================

DEFAULT_CONFIG = {
    # Solver
    "use_unit_propagation": True,
    "use_pure_literal_elimination": True,
    # Reporting
    "verbose": True,
    "unicode_symbols": True,  # False: NOT/OR/AND instead of ¬/∨/∧
    # Logging
    "console_log_level": "INFO",
    "file_log_level": "DEBUG",
    "performance_logging": True,
}

_BOOLEAN_KEYS = frozenset(
    {
        "use_unit_propagation",
        "use_pure_literal_elimination",
        "verbose",
        "unicode_symbols",
        "performance_logging",
    }
)
_LEVEL_KEYS = frozenset({"console_log_level", "file_log_level"})
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# YAML section -> keys it may contain
_YAML_SECTIONS = {
    "solver": ("use_unit_propagation", "use_pure_literal_elimination"),
    "report": ("verbose", "unicode_symbols"),
    "logging": ("console_log_level", "file_log_level", "performance_logging"),
}


def validate_setting(key: str, value: Any) -> Any:
    """
    Check a single setting and return its normalized value.

    Raises:
        InvalidConfigError: Unknown key or value of the wrong type
    """
    if key not in DEFAULT_CONFIG:
        raise InvalidConfigError(f"Unknown configuration key: {key}", key=key, value=value)

    if key in _BOOLEAN_KEYS:
        if not isinstance(value, bool):
            raise InvalidConfigError(
                f"Setting '{key}' expects a boolean", key=key, value=value
            )
        return value

    if key in _LEVEL_KEYS:
        if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
            raise InvalidConfigError(
                f"Setting '{key}' expects one of {', '.join(LOG_LEVELS)}",
                key=key,
                value=value,
            )
        return value.upper()

    return value


# ============================================================================
# CONFIGURATION MANAGER
# ============================================================================


class DpllConfig:
    """
    Singleton holding the solver configuration.

    Only explicit changes are written to disk; loading never creates the
    file.
    """

    _instance: Optional["DpllConfig"] = None
    _config: Dict[str, Any] = {}
    _config_file: Path = Path(__file__).parent / "dpll_config.json"

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load_config()
        return cls._instance

    def _load_config(self):
        """Load configuration from JSON or fall back to defaults."""
        self._config = DEFAULT_CONFIG.copy()
        if not self._config_file.exists():
            logger.debug("No configuration file found, using defaults")
            return

        try:
            with open(self._config_file, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(
                "Failed to load configuration, using defaults",
                extra={"file": str(self._config_file), "error": str(e)},
            )
            return

        if not isinstance(stored, dict):
            logger.error(
                "Configuration file does not hold a mapping, using defaults",
                extra={"file": str(self._config_file), "type": type(stored).__name__},
            )
            return

        for key, value in stored.items():
            try:
                self._config[key] = validate_setting(key, value)
            except InvalidConfigError as e:
                logger.warning("Ignoring invalid stored setting", extra=e.context)
        logger.info("Configuration loaded", extra={"file": str(self._config_file)})

    def _save_config(self):
        """Persist the current configuration as JSON."""
        try:
            with open(self._config_file, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=4, ensure_ascii=False)
            logger.debug("Configuration saved", extra={"file": str(self._config_file)})
        except OSError as e:
            logger.error(
                "Failed to save configuration",
                extra={"file": str(self._config_file), "error": str(e)},
            )

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Validate, set and persist a single setting."""
        self._config[key] = validate_setting(key, value)
        self._save_config()
        logger.info("Configuration updated", extra={"key": key, "value": value})

    def update(self, settings: Dict[str, Any]):
        """Validate, set and persist several settings at once."""
        validated = {key: validate_setting(key, value) for key, value in settings.items()}
        self._config.update(validated)
        self._save_config()
        logger.info(
            "Configuration updated", extra={"updated_keys": list(settings.keys())}
        )

    def get_all(self) -> Dict[str, Any]:
        return self._config.copy()

    def reset_to_defaults(self):
        self._config = DEFAULT_CONFIG.copy()
        self._save_config()
        logger.warning("Configuration reset to defaults")

    def load_yaml(self, path: Union[str, Path]):
        """
        Overlay settings from a YAML file for the current process.

        The file may contain the sections ``solver``, ``report`` and
        ``logging``; values are validated but not persisted.

        Raises:
            ConfigurationException: File missing, unreadable or not valid YAML
            InvalidConfigError: Unknown keys or wrong value types
        """
        config_file = Path(path)
        if not config_file.exists():
            raise ConfigurationException(
                f"Configuration file not found: {path}", context={"path": str(path)}
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise wrap_exception(
                e, ConfigurationException, "Invalid YAML in configuration file",
                path=str(path),
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise wrap_exception(
                e, ConfigurationException, "Cannot read configuration file",
                path=str(path),
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationException(
                "Configuration file must contain a mapping", context={"path": str(path)}
            )

        overlay: Dict[str, Any] = {}
        for section, values in data.items():
            if section not in _YAML_SECTIONS:
                raise InvalidConfigError(
                    f"Unknown configuration section: {section}", key=section
                )
            if values is None:
                continue
            if not isinstance(values, dict):
                raise InvalidConfigError(
                    f"Section '{section}' must be a mapping", key=section, value=values
                )
            for key, value in values.items():
                if key not in _YAML_SECTIONS[section]:
                    raise InvalidConfigError(
                        f"Setting '{key}' does not belong to section '{section}'",
                        key=key,
                        value=value,
                    )
                overlay[key] = validate_setting(key, value)

        self.override(overlay)
        logger.info("Configuration overlay loaded", extra={"file": str(config_file)})

    def override(self, settings: Dict[str, Any]):
        """Validate and apply settings for the current process without saving."""
        validated = {key: validate_setting(key, value) for key, value in settings.items()}
        self._config.update(validated)
        if validated:
            logger.debug("Configuration overridden", extra={"keys": sorted(validated)})

    # ========================================================================
    # CONVENIENCE PROPERTIES
    # ========================================================================

    @property
    def use_unit_propagation(self) -> bool:
        return bool(self.get("use_unit_propagation", True))

    @property
    def use_pure_literal_elimination(self) -> bool:
        return bool(self.get("use_pure_literal_elimination", True))

    @property
    def verbose(self) -> bool:
        return bool(self.get("verbose", True))

    @property
    def unicode_symbols(self) -> bool:
        return bool(self.get("unicode_symbols", True))

    @property
    def performance_logging(self) -> bool:
        return bool(self.get("performance_logging", True))

    @property
    def console_log_level(self) -> int:
        """Console log level as a logging module constant."""
        return getattr(logging, self.get("console_log_level", "INFO"))

    @property
    def file_log_level(self) -> int:
        """File log level as a logging module constant."""
        return getattr(logging, self.get("file_log_level", "DEBUG"))


# Global singleton instance
config = DpllConfig()


def get_config() -> DpllConfig:
    """Return the global configuration instance."""
    return config
