"""
Configuration Loader
Loads and validates YAML configuration files
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..errors import ConfigurationError
from .app_config import AppConfig

logger = logging.getLogger(__name__)

YOUTUBE_KEYS_ENV = "YOUTUBE_API_KEYS"
GEMINI_KEYS_ENV = "GEMINI_API_KEYS"

MIN_TIMEFRAME_DAYS = 1
MAX_TIMEFRAME_DAYS = 365

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigValidationError(ConfigurationError):
    """Raised when configuration validation fails."""
    pass


class ConfigLoader:
    """
    Loads and validates configuration from YAML files.

    Responsibilities:
    - Read YAML configuration file (a missing file means all defaults)
    - Apply environment overrides for the API key lists
    - Validate types and value ranges
    - Return validated AppConfig instance
    """

    def __init__(self, config_path: Path, env: Optional[Mapping[str, str]] = None):
        """
        Initialize ConfigLoader with path to config file.

        Args:
            config_path: Path to YAML configuration file
            env: Environment mapping (defaults to os.environ)
        """
        self._config_path = config_path
        self._env = os.environ if env is None else env

    def load(self) -> AppConfig:
        """
        Load and validate configuration from YAML file.

        Returns:
            AppConfig: Validated configuration object

        Raises:
            ConfigValidationError: If configuration is invalid
        """
        config_data = self._load_yaml()

        youtube = self._section(config_data, "youtube")
        gemini = self._section(config_data, "gemini")
        sheet = self._section(config_data, "sheet")
        access = self._section(config_data, "access")
        analysis = self._section(config_data, "analysis")
        storage = self._section(config_data, "storage")
        logging_cfg = self._section(config_data, "logging")

        return AppConfig(
            youtube_api_keys=self._validate_keys(youtube, "youtube", YOUTUBE_KEYS_ENV),
            gemini_api_keys=self._validate_keys(gemini, "gemini", GEMINI_KEYS_ENV),
            gemini_model=self._validate_str(gemini, "gemini", "model", "gemini-2.5-flash"),
            gemini_language=self._validate_str(gemini, "gemini", "language", "English"),
            sheet_id=self._validate_optional_str(sheet, "sheet", "sheet_id"),
            sheet_name=self._validate_optional_str(sheet, "sheet", "sheet_name"),
            sheet_timeout=self._validate_number(sheet, "sheet", "timeout", 20.0, minimum=1.0),
            access_required=self._validate_bool(access, "access", "required", True),
            timeframe_days=self._validate_int(analysis, "analysis", "timeframe_days", 30,
                                               MIN_TIMEFRAME_DAYS, MAX_TIMEFRAME_DAYS),
            outlier_multiplier=self._validate_multiplier(analysis),
            top_n=self._validate_int(analysis, "analysis", "top_n", 5, 1),
            max_workers=self._validate_int(analysis, "analysis", "max_workers", 4, 1, 32),
            max_comments=self._validate_int(analysis, "analysis", "max_comments", 50, 1, 100),
            storage_root=self._validate_str(storage, "storage", "root", "./storage"),
            log_level=self._validate_log_level(logging_cfg),
            log_file=self._validate_optional_str(logging_cfg, "logging", "file"),
        )

    def _load_yaml(self) -> Dict[str, Any]:
        """Load YAML file and return parsed data."""
        if not self._config_path.exists():
            logger.info(f"Configuration file not found, using defaults: {self._config_path}")
            return {}

        try:
            with open(self._config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML syntax: {e}")

        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ConfigValidationError(
                "Configuration must be a YAML mapping/dictionary"
            )

        return data

    @staticmethod
    def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = config.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigValidationError(f"Section '{name}' must be a mapping, got {type(section).__name__}")
        return section

    def _validate_keys(self, section: Dict[str, Any], name: str, env_var: str) -> List[str]:
        """API key list; the environment variable (comma-separated) wins over YAML."""
        env_value = self._env.get(env_var)
        if env_value:
            return [k.strip() for k in env_value.split(",") if k.strip()]

        keys = section.get("api_keys", [])
        if keys is None:
            return []
        if isinstance(keys, str):
            keys = [keys]
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise ConfigValidationError(f"{name}.api_keys must be a list of strings")
        return [k.strip() for k in keys if k.strip()]

    @staticmethod
    def _validate_str(section: Dict[str, Any], name: str, field: str, default: str) -> str:
        value = section.get(field, default)
        if value is None:
            return default
        if not isinstance(value, str):
            raise ConfigValidationError(f"{name}.{field} must be string, got {type(value).__name__}")
        if not value.strip():
            raise ConfigValidationError(f"{name}.{field} cannot be empty")
        return value.strip()

    @staticmethod
    def _validate_optional_str(section: Dict[str, Any], name: str, field: str) -> Optional[str]:
        value = section.get(field)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ConfigValidationError(f"{name}.{field} must be string or null, got {type(value).__name__}")
        return value.strip() or None

    @staticmethod
    def _validate_bool(section: Dict[str, Any], name: str, field: str, default: bool) -> bool:
        value = section.get(field, default)
        if not isinstance(value, bool):
            raise ConfigValidationError(f"{name}.{field} must be boolean, got {type(value).__name__}")
        return value

    @staticmethod
    def _validate_int(
        section: Dict[str, Any],
        name: str,
        field: str,
        default: int,
        minimum: int,
        maximum: Optional[int] = None,
    ) -> int:
        value = section.get(field, default)
        # bool is a subclass of int
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigValidationError(
                f"Field '{name}.{field}' must be an integer, got {type(value).__name__}"
            )
        if value < minimum or (maximum is not None and value > maximum):
            bounds = f">= {minimum}" if maximum is None else f"between {minimum} and {maximum}"
            raise ConfigValidationError(f"Field '{name}.{field}' must be {bounds}, got {value}")
        return value

    @staticmethod
    def _validate_number(
        section: Dict[str, Any], name: str, field: str, default: float, minimum: float
    ) -> float:
        value = section.get(field, default)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigValidationError(
                f"Field '{name}.{field}' must be a number, got {type(value).__name__}"
            )
        if value < minimum:
            raise ConfigValidationError(f"Field '{name}.{field}' must be >= {minimum}, got {value}")
        return float(value)

    def _validate_multiplier(self, analysis: Dict[str, Any]) -> float:
        value = self._validate_number(analysis, "analysis", "outlier_multiplier", 1.5, minimum=0.0)
        if value <= 1.0:
            raise ConfigValidationError(
                f"Field 'analysis.outlier_multiplier' must be greater than 1.0, got {value}"
            )
        return value

    @staticmethod
    def _validate_log_level(section: Dict[str, Any]) -> str:
        level = section.get("level", "INFO")
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            raise ConfigValidationError(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
        return level.upper()
