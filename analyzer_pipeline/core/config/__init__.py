"""
Configuration module for the YouTube Channel Analyzer
"""

from .app_config import AppConfig
from .config_loader import ConfigLoader, ConfigValidationError

__all__ = ["AppConfig", "ConfigLoader", "ConfigValidationError"]
