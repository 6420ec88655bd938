"""Configuration loader for habitlist (global + project with TOML-based defaults)."""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Any, Dict

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for Python <3.11
    import tomli as tomllib  # type: ignore


class ConfigLoader:
    """
    Handles configuration loading from multiple sources with priority resolution.

    Priority (highest → lowest):
    1. Command-line arguments (not handled here)
    2. Environment variables (HABITLIST_<SECTION>_<KEY>)
    3. Project config (.habitlist/config.toml)
    4. Global config (~/.config/habitlist/config.toml)
    5. Built-in defaults
    """

    ENV_PREFIX = "HABITLIST_"

    def __init__(self) -> None:
        self.global_dir = self.get_global_config_dir()
        self.project_dir = self.get_project_config_dir()

        self.config: Dict[str, Any] = {}

        self._load_all()

    # ------------------------------------------------------------------ #
    # Public getters
    # ------------------------------------------------------------------ #
    def get(self, key: str, default: Any = None) -> Any:
        """Get config value by dot-separated key."""
        keys = key.split(".")
        value: Any = self.config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
        return value if value is not None else default

    @property
    def store_path(self) -> Path:
        return Path(str(self.get("storage.path", self.global_dir / "store.json"))).expanduser()

    @property
    def store_key(self) -> str:
        return str(self.get("storage.key", "TASKS"))

    @property
    def date_format(self) -> str:
        return str(self.get("display.date_format", "%m/%d/%Y"))

    @property
    def log_level(self) -> str:
        return str(self.get("general.log_level", "info"))

    @property
    def log_file(self) -> Path:
        return Path(str(self.get("general.log_file", self.global_dir / "habitlist.log"))).expanduser()

    # ------------------------------------------------------------------ #
    # Load/merge helpers
    # ------------------------------------------------------------------ #
    def _load_all(self) -> None:
        """Load all configuration files with proper priority."""
        self._load_global_config()

        if self.project_dir:
            self._load_project_config()

        self._apply_env_overrides()

    def _load_global_config(self) -> None:
        """Load global configuration on top of the defaults."""
        self.config = self._get_default_config()
        config_file = self.global_dir / "config.toml"
        if config_file.exists():
            with open(config_file, "rb") as f:
                self._deep_merge(self.config, tomllib.load(f))
        else:
            self._create_default_config()

    def _load_project_config(self) -> None:
        """Load project-specific config and merge with global."""
        config_file = self.project_dir / "config.toml"
        if config_file.exists():
            with open(config_file, "rb") as f:
                project_config = tomllib.load(f)
                self._deep_merge(self.config, project_config)

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides (HABITLIST_SECTION_KEY)."""
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            parts = key[len(self.ENV_PREFIX) :].lower().split("_", 1)
            if len(parts) != 2 or not all(parts):
                continue
            self._set_nested(self.config, ".".join(parts), value)

    # ------------------------------------------------------------------ #
    # Static paths/helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def get_global_config_dir() -> Path:
        """Get platform-specific global config directory following XDG spec."""
        system = platform.system()
        if system == "Windows":
            base = Path(os.environ.get("APPDATA", "~\\AppData\\Roaming")).expanduser()
        elif system == "Darwin":
            xdg = os.environ.get("XDG_CONFIG_HOME")
            base = Path(xdg) if xdg else Path.home() / ".config"
        else:
            base = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()
        return base / "habitlist"

    @staticmethod
    def get_project_config_dir() -> Path | None:
        """Find .habitlist directory in current or parent directories."""
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_dir = parent / ".habitlist"
            if config_dir.is_dir():
                return config_dir
        return None

    # ------------------------------------------------------------------ #
    # Persistence helpers
    # ------------------------------------------------------------------ #
    def _create_default_config(self) -> None:
        self.global_dir.mkdir(parents=True, exist_ok=True)
        config_file = self.global_dir / "config.toml"
        with open(config_file, "w", encoding="utf-8") as f:
            f.write(self._get_default_config_toml())

    # ------------------------------------------------------------------ #
    # Default content
    # ------------------------------------------------------------------ #
    def _get_default_config(self) -> Dict[str, Any]:
        """Built-in defaults."""
        return {
            "general": {
                "log_level": "info",
                "log_file": str(self.global_dir / "habitlist.log"),
            },
            "storage": {
                "path": str(self.global_dir / "store.json"),
                "key": "TASKS",
            },
            "display": {
                "date_format": "%m/%d/%Y",
            },
        }

    def _get_default_config_toml(self) -> str:
        """Default config TOML text for first-run creation."""
        default = self._get_default_config()
        return "\n".join(
            [
                "[general]",
                f'log_level = "{default["general"]["log_level"]}"',
                f"log_file = '{default['general']['log_file']}'",
                "",
                "[storage]",
                f"path = '{default['storage']['path']}'",
                f'key = "{default["storage"]["key"]}"',
                "",
                "[display]",
                f'date_format = "{default["display"]["date_format"]}"',
                "",
            ]
        )

    # ------------------------------------------------------------------ #
    # Utility helpers
    # ------------------------------------------------------------------ #
    def _deep_merge(self, base: dict, override: dict) -> None:
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _set_nested(self, d: dict, path: str, value: Any) -> None:
        keys = path.split(".")
        for key in keys[:-1]:
            d = d.setdefault(key, {})
        d[keys[-1]] = value


Config = ConfigLoader

__all__ = ["ConfigLoader", "Config"]
