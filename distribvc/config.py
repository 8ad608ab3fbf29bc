#!/usr/bin/env python3

import os
import json
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import logging
import sys

import yaml

logger = logging.getLogger("distribvc")

DEFAULT_LOG_FORMAT = "%(levelname)s: %(message)s"


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is at emit time."""

    def __init__(self, level=logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


def setup_logging(level: str = "WARNING", fmt: str = DEFAULT_LOG_FORMAT) -> None:
    """Send distribvc log records to stderr at the given level."""
    handler = _StderrHandler()
    handler.setFormatter(logging.Formatter(fmt))
    logger.handlers[:] = [h for h in logger.handlers if not isinstance(h, _StderrHandler)]
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))


@dataclass(frozen=True)
class RepositoryLayout:
    """
    Names of everything distribvc keeps on disk.

    The metadata directory lives at <root>/<repo_dir>; the ignore file
    sits next to it at <root>/<ignore_file>. Tests pass their own
    layout to keep repositories isolated.
    """
    repo_dir: str = ".distribvc"
    commits_dir: str = "commits"
    staging_dir: str = "staging"
    branches_dir: str = "branches"
    head_file: str = "HEAD"
    lock_file: str = "lock"
    ignore_file: str = ".distribvcignore"
    default_branch: str = "master"
    default_ignore_patterns: Tuple[str, ...] = ("*.log", ".DS_Store")

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> 'RepositoryLayout':
        """Build a layout from the 'layout', 'general' and 'ignore' config sections."""
        config = config or {}
        known = {f.name for f in fields(cls)}
        values = {
            k: v for k, v in config.get('layout', {}).items()
            if k in known and v
        }
        if branch := config.get('general', {}).get('default_branch'):
            values['default_branch'] = branch
        patterns = config.get('ignore', {}).get('default_patterns')
        if patterns is not None:
            values['default_ignore_patterns'] = tuple(patterns)
        return cls(**values)


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. DISTRIBVC_CONFIG environment variable
    2. ~/.distribvc/ directory
    """
    if 'DISTRIBVC_CONFIG' in os.environ:
        path = Path(os.environ['DISTRIBVC_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.distribvc'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    layout = RepositoryLayout()
    return {
        "general": {
            "author": "",
            "default_branch": layout.default_branch,
        },
        "layout": {
            "repo_dir": layout.repo_dir,
            "commits_dir": layout.commits_dir,
            "staging_dir": layout.staging_dir,
            "branches_dir": layout.branches_dir,
            "head_file": layout.head_file,
            "lock_file": layout.lock_file,
            "ignore_file": layout.ignore_file,
        },
        "ignore": {
            "default_patterns": list(layout.default_ignore_patterns),
        },
        "logging": {
            "level": "WARNING",
            "format": DEFAULT_LOG_FORMAT,
        },
    }


def load_config(config_path: Optional[Path] = None):
    """Load configuration from file, merged over the defaults."""
    config_path = Path(config_path) if config_path else get_config_path()

    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f)
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            if isinstance(file_config, dict):
                config = merge_configs(config, file_config)
            elif file_config is not None:
                logger.warning(f"Ignoring config {config_path}: top level is not a mapping")
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    return config


def save_config(config, config_path: Optional[Path] = None):
    """Save configuration to file (JSON or YAML by suffix)."""
    config_path = Path(config_path) if config_path else get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() in ['.yaml', '.yml']:
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            if config_path.suffix.lower() == '.toml':
                logger.warning("Writing TOML is not supported. Saving as JSON instead.")
                config_path = config_path.with_suffix('.json')
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Error saving config to {config_path}: {e}")
    return config_path


def merge_configs(base_config, override_config):
    """
    Merge override_config into a copy of base_config.

    Nested sections merge key by key; any other value replaces the
    base value outright.
    """
    merged = dict(base_config)
    for key, value in override_config.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = merge_configs(current, value)
        merged[key] = value
    return merged


def _coerce_env_value(value: str) -> Any:
    lowered = value.lower()
    if lowered in ('true', 'yes', 'on'):
        return True
    if lowered in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def _assign(section: Dict[str, Any], parts: List[str], value: Any) -> bool:
    """Set value at the key path spelled by parts; keys may contain '_'."""
    # Prefer the longest key so 'default_branch' wins over 'default'
    candidates = sorted(section, key=lambda k: -len(k.split('_')))
    for key in candidates:
        width = len(key.split('_'))
        if parts[:width] != key.split('_'):
            continue
        rest = parts[width:]
        if not rest:
            section[key] = value
            return True
        if isinstance(section[key], dict):
            return _assign(section[key], rest, value)
        return False
    return False


def apply_env_overrides(config):
    """
    Apply DISTRIBVC_SECTION_KEY=value environment variables to config.

    For example DISTRIBVC_GENERAL_AUTHOR=alice sets general.author and
    DISTRIBVC_LOGGING_LEVEL=DEBUG sets logging.level. Variables that do
    not name an existing key are ignored; DISTRIBVC_CONFIG is reserved
    for the config file path.
    """
    prefix = "DISTRIBVC_"
    for env_key, raw in os.environ.items():
        if not env_key.startswith(prefix) or env_key == "DISTRIBVC_CONFIG":
            continue
        parts = env_key[len(prefix):].lower().split('_')
        if not _assign(config, parts, _coerce_env_value(raw)):
            logger.debug(f"Ignoring unknown config override {env_key}")
    return config
