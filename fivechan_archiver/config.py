"""Configuration management for 5chan-archiver.

Loads settings from ~/.config/5chan-archiver/config.yaml with sensible defaults.
All settings are optional - defaults work out of the box.
"""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Callable

import yaml

# ============================================================================
# DEFAULTS
# ============================================================================

DEFAULT_CONFIG = {
    # Board capacity and thread lifecycle
    "archiver": {
        "per_page": 15,                   # Threads per index page
        "pages": 10,                      # Index pages; capacity = per_page * pages
        "bump_limit": 300,                # Replies before a thread is locked
        "archive_purge_seconds": 172800,  # Delay between lock and purge (48h)
        "poll_interval_seconds": 30,      # How often to ask the node for changes
        "state_dir": None,                # None = ~/.local/share/5chan-archiver/...
    },

    # Plebbit RPC node
    "rpc": {
        "url": "http://localhost:9138",
        "timeout": 20,
    },

    # API behavior
    "api": {
        "calls_per_minute": 120,          # Client-side request cap for the RPC node
    },
}

# Environment overrides for the archiver options (CLI flags still win)
ENV_OVERRIDES = {
    "archiver.per_page": "PER_PAGE",
    "archiver.pages": "PAGES",
    "archiver.bump_limit": "BUMP_LIMIT",
    "archiver.archive_purge_seconds": "ARCHIVE_PURGE_SECONDS",
    "archiver.state_dir": "ARCHIVER_STATE_DIR",
    "rpc.url": "PLEBBIT_RPC_URL",
}

# Config file locations (first found wins)
CONFIG_PATHS = [
    Path.home() / ".config/5chan-archiver/config.yaml",
    Path.home() / ".config/5chan-archiver/config.yml",
    Path.home() / ".5chan-archiver.yaml",
    Path("./5chan-archiver.yaml"),
]


# ============================================================================
# CONFIG LOADING
# ============================================================================

_config_cache: dict | None = None


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base, returning new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def find_config_file() -> Path | None:
    """Find the first existing config file."""
    for path in CONFIG_PATHS:
        if path.exists():
            return path
    return None


def load_config(reload: bool = False) -> dict:
    """Load configuration with defaults.

    Returns merged config: defaults + user overrides.
    Config is cached after first load.
    """
    global _config_cache

    if _config_cache is not None and not reload:
        return _config_cache

    config = copy.deepcopy(DEFAULT_CONFIG)

    config_file = find_config_file()
    if config_file:
        try:
            user_config = yaml.safe_load(config_file.read_text()) or {}
            config = _deep_merge(config, user_config)
        except (OSError, yaml.YAMLError) as e:
            print(f"Warning: Could not load config from {config_file}: {e}")

    _config_cache = config
    return config


def get(key: str, default: Any = None) -> Any:
    """Get a config value by dot-separated key.

    Example:
        get("archiver.per_page")  # Returns 15
        get("rpc")                # Returns the whole rpc section
    """
    config = load_config()
    parts = key.split(".")
    value = config
    for part in parts:
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default
    return value


def resolve(key: str, cli_value: Any = None, cast: Callable[[Any], Any] | None = None) -> Any:
    """Resolve an option: CLI value, then environment, then config file/defaults."""
    value = cli_value
    if value is None:
        env_name = ENV_OVERRIDES.get(key)
        raw = os.environ.get(env_name, "").strip() if env_name else ""
        value = raw if raw else get(key)
    if value is not None and cast is not None:
        try:
            return cast(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid value for {key}: {value!r}")
    return value


# ============================================================================
# CLI HELPER
# ============================================================================

def init_config(force: bool = False) -> Path:
    """Create example config file in default location."""
    config_path = CONFIG_PATHS[0]

    if config_path.exists() and not force:
        raise FileExistsError(f"Config already exists: {config_path}")

    config_path.parent.mkdir(parents=True, exist_ok=True)

    example = """# 5chan-archiver configuration
# All settings are optional - defaults work out of the box.
# Environment variables (PER_PAGE, PAGES, BUMP_LIMIT, ARCHIVE_PURGE_SECONDS,
# ARCHIVER_STATE_DIR, PLEBBIT_RPC_URL) and CLI flags override this file.

archiver:
  per_page: 15                   # Threads per index page
  pages: 10                      # Index pages (capacity = per_page * pages)
  bump_limit: 300                # Lock threads at this many replies
  archive_purge_seconds: 172800  # Purge locked threads after 48h
  poll_interval_seconds: 30      # How often to check the board for changes
  # state_dir: ~/archiver-states

rpc:
  url: http://localhost:9138     # Plebbit RPC node
  timeout: 20                    # Seconds per request

api:
  calls_per_minute: 120          # Client-side cap on RPC calls
"""

    config_path.write_text(example)
    return config_path


def show_config() -> None:
    """Print current configuration."""
    config = load_config()
    config_file = find_config_file()

    print("=" * 60)
    print("5chan-archiver configuration")
    print("=" * 60)

    if config_file:
        print(f"Config file: {config_file}")
    else:
        print("Config file: (using defaults)")

    print()
    print(yaml.dump(config, default_flow_style=False, sort_keys=False))
