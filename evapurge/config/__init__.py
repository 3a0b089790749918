# evapurge/config/__init__.py
"""
Config-file discovery and loading.

Supported sources, in discovery order::

    eva.config.yml | eva.config.yaml | eva.config.json | package.json ("eva" key)

The ``purge`` sub-key is preferred; a file without one is read as a bare
purge section.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from evapurge.config.models import (
    CLI_DEFAULT_CONTENT,
    FILE_DEFAULTS,
    PurgeConfig,
    validate_purge_section,
)
from evapurge.errors import ConfigError
from evapurge.logger import get_logger

__all__ = [
    "CLI_DEFAULT_CONTENT",
    "CONFIG_FILES",
    "PurgeConfig",
    "find_config_file",
    "load_config_file",
    "load_purge_config",
]

logger = get_logger(__name__)

CONFIG_FILES = ("eva.config.yml", "eva.config.yaml", "eva.config.json", "package.json")
_JS_SUFFIXES = {".js", ".cjs", ".mjs", ".ts"}


def _read_mapping(path: Path) -> dict:
    """Parse ``path`` into a mapping; ``{}`` for an empty YAML file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        if path.suffix in {".yml", ".yaml"}:
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e

    if path.name == "package.json":
        data = data.get("eva", {}) if isinstance(data, dict) else {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def find_config_file(cwd: Path | None = None) -> Path | None:
    """First config file in ``cwd``; a package.json only counts with an "eva" key."""
    root = Path(cwd or Path.cwd())
    for name in CONFIG_FILES:
        candidate = root / name
        if not candidate.is_file():
            continue
        if name == "package.json":
            try:
                if "eva" not in json.loads(candidate.read_text(encoding="utf-8")):
                    continue
            except (OSError, json.JSONDecodeError):
                continue
        logger.info(f"Found config file {candidate}")
        return candidate
    return None


def load_config_file(path: str | Path) -> dict:
    """
    Return the raw purge section of a config file.

    Raises
    ------
    ConfigError
        Missing file, JavaScript module, unparseable or invalid content.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    if path.suffix in _JS_SUFFIXES:
        raise ConfigError(
            f"JavaScript config modules are not supported: {path} "
            "(use eva.config.yml or eva.config.json)"
        )

    data = _read_mapping(path)
    section = data.get("purge", data)
    errors = validate_purge_section(section)
    if errors:
        raise ConfigError(f"Invalid EVA CSS configuration in {path.name}:", errors)
    return section


def load_purge_config(path: str | Path, **overrides: Any) -> PurgeConfig:
    """
    Load and validate a file's purge section, lay non-empty ``overrides``
    (command-line flags) on top, then fill the gaps from the file defaults.
    """
    section = load_config_file(path)
    merged = {**section, **{k: v for k, v in overrides.items() if v not in (None, [], "")}}
    defaults = dict(FILE_DEFAULTS)
    if "css" in merged and "output" not in merged:
        # derive "<css>-purged" beside the chosen input instead
        defaults.pop("output")
    cfg = PurgeConfig.model_validate({**defaults, **merged})
    logger.info(f"Loaded purge config from {path}: css={cfg.css} output={cfg.output}")
    return cfg

