"""
Configuration loader for the revision log.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.models import LogPaths


logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "log": {
        "data_suffix": ".csv",
        "index_suffix": ".revisions.csv",
        "cache_suffix": ".pkmap.dat",
        "encoding": "utf-8",
        "fsync": False,
    },
    "input": {
        "encoding": "utf-8",
        "primary_key_column": None,
    },
    "runner": {
        "report_interval": 100000,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class RevlogConfig:
    """
    Configuration for the revision log.
    
    Loads an optional YAML file over built-in defaults, then applies
    environment variable overrides.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.
        
        Args:
            config_path: Path to YAML config file (optional)
        """
        self.config_path = Path(config_path) if config_path else None
        loaded = self._load_config() if self.config_path else {}
        self.config = _merge(DEFAULT_CONFIG, loaded)
        self._apply_env_overrides()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")
        
        logger.info(f"Loading config from: {self.config_path}")
        
        with open(self.config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
        
        return config or {}

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to loaded config."""
        pk_column = os.environ.get("REVLOG_PRIMARY_KEY_COLUMN")
        if pk_column:
            self.config["input"]["primary_key_column"] = pk_column
        
        report_interval = os.environ.get("REVLOG_REPORT_INTERVAL")
        if report_interval:
            self.config["runner"]["report_interval"] = int(report_interval)
        
        fsync = os.environ.get("REVLOG_FSYNC")
        if fsync:
            self.config["log"]["fsync"] = _parse_bool(fsync)

    def get_log_config(self) -> Dict[str, Any]:
        """Get log file configuration."""
        return self.config.get("log", {})

    def get_input_config(self) -> Dict[str, Any]:
        """Get input dataset configuration."""
        return self.config.get("input", {})

    def get_runner_config(self) -> Dict[str, Any]:
        """Get runner configuration."""
        return self.config.get("runner", {})

    def get_paths(self, basename: str) -> LogPaths:
        """Build the artifact paths for a basename using the configured suffixes."""
        log_config = self.get_log_config()
        return LogPaths.from_basename(
            basename,
            data_suffix=log_config.get("data_suffix", ".csv"),
            index_suffix=log_config.get("index_suffix", ".revisions.csv"),
            cache_suffix=log_config.get("cache_suffix", ".pkmap.dat"),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dotted key."""
        keys = key.split(".")
        value = self.config
        
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
        
        return value if value is not None else default
