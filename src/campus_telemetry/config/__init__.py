"""Configuration management for Campus Telemetry."""

from campus_telemetry.config.schema import AppConfig
from campus_telemetry.config.manager import ConfigManager

__all__ = ["AppConfig", "ConfigManager"]
