"""Configuration loading and validation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from campus_telemetry.config.schema import AppConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads config from YAML defaults plus optional user overrides and validates it."""

    def __init__(
        self,
        defaults_path: Path | None = None,
        user_path: Path | None = None,
    ) -> None:
        self._defaults_path = defaults_path or Path("config.defaults.yaml")
        self._user_path = user_path or Path("config.yaml")
        self._config: AppConfig | None = None
        self._raw: dict[str, Any] = {}

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            raise RuntimeError("Config not loaded. Call load() first.")
        return self._config

    def load(self) -> AppConfig:
        """Load configuration from defaults + user overrides."""
        defaults = self._load_yaml(self._defaults_path)
        overrides = self._load_yaml(self._user_path)
        merged = self._deep_merge(defaults, overrides)
        self._raw = merged
        self._config = AppConfig.model_validate(merged)
        logger.info(
            "Configuration loaded (%d campuses, broadcast every %.1fs)",
            len(self._config.catalog.campuses),
            self._config.broadcast.interval_seconds,
        )
        return self._config

    def get_raw(self) -> dict[str, Any]:
        return dict(self._raw)

    def to_json(self) -> str:
        return self.config.model_dump_json(indent=2, by_alias=True)

    @staticmethod
    def _load_yaml(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        with open(path) as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, returning a new dict."""
        result = dict(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigManager._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
