"""
Configuration Management Package

Provides Pydantic-based configuration models and management for LifeMetrics.
"""

from lifemetrics.core.config.models import AppConfig, FilterConfig, OutputConfig
from lifemetrics.core.config.manager import ConfigManager

__all__ = [
    "AppConfig",
    "FilterConfig",
    "OutputConfig",
    "ConfigManager",
]
