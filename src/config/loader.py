"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  — optional static defaults
  2. .env file           — local overrides (not committed)
  3. Environment vars    — set per deployment / shell

:func:`load_config` reads the YAML file first, then deep-merges the
environment-backed :class:`Settings` values on top, but only for fields
that were explicitly set in the environment or .env, so YAML defaults
are not clobbered by Settings' built-in defaults.

Example ``config/config.yaml``::

    search:
      engine: bing
      max_results: 20
    history:
      path: data/history.ser
"""

from pathlib import Path
from typing import Any

import yaml

from src.config.settings import Settings
from src.utils.errors import ConfigurationError

DEFAULT_CONFIG_PATH = "config/config.yaml"

# Settings field → (section, key) in the resolved config dictionary.
_SETTINGS_LAYOUT: dict[str, tuple[str, str]] = {
    "search_engine": ("search", "engine"),
    "search_max_results": ("search", "max_results"),
    "search_timeout": ("search", "timeout"),
    "bing_account_key": ("bing", "account_key"),
    "bing_url_template": ("bing", "url_template"),
    "history_path": ("history", "path"),
    "app_env": ("app", "env"),
    "log_level": ("logging", "level"),
}


def load_config(path: str | Path = DEFAULT_CONFIG_PATH, settings: Settings | None = None) -> dict[str, Any]:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is not an error.
        settings: Pre-built Settings; read from the environment when omitted.

    Returns:
        Fully resolved configuration dictionary with ``search``, ``bing``,
        ``history``, ``app`` and ``logging`` sections.

    Raises:
        ConfigurationError: If the YAML file cannot be parsed or is not a mapping.
    """
    config_path = Path(path)
    yaml_config: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigurationError(message=f"Invalid YAML in {config_path}: {exc}") from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(message=f"{config_path} must contain a mapping at the top level")
        yaml_config = loaded or {}

    settings = settings or Settings()

    defaults: dict[str, Any] = {}
    overrides: dict[str, Any] = {}
    explicitly_set = settings.model_fields_set
    for field_name, (section, key) in _SETTINGS_LAYOUT.items():
        value = getattr(settings, field_name)
        target = overrides if field_name in explicitly_set else defaults
        target.setdefault(section, {})[key] = value

    resolved: dict[str, Any] = defaults
    _deep_merge(resolved, yaml_config)
    _deep_merge(resolved, overrides)
    return resolved


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
