"""
Configuration loader — reads dotkit.yml into a Manifest.

The manifest is optional: with no file anywhere above the working
directory the built-in defaults apply.  When a file is found its
directory is also the default dotfiles repository root.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from dotkit.core.errors import DotkitError
from dotkit.core.models.manifest import Manifest

logger = logging.getLogger(__name__)

MANIFEST_FILE = "dotkit.yml"


class ConfigError(DotkitError):
    """Raised when dotkit.yml is unreadable or invalid."""


def find_manifest(start_dir: Path | None = None) -> Path | None:
    """Search for dotkit.yml starting from ``start_dir`` (default: cwd), walking up."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / MANIFEST_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_manifest(path: Path | None = None) -> Manifest:
    """Load and validate the manifest.

    Args:
        path: Explicit path to dotkit.yml.  If None, searches upward and
            falls back to defaults when nothing is found.

    Raises:
        ConfigError: If an explicit path is missing, or any file found
            is not valid YAML or fails validation.
    """
    if path is None:
        path = find_manifest()
        if path is None:
            logger.debug("No %s found, using built-in defaults", MANIFEST_FILE)
            return Manifest()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid manifest {path}: {e}") from e

    logger.info("Loaded manifest %s with %d links", path, len(manifest.links))
    return manifest


def resolve_repo_root(config_path: Path | None, override: Path | None = None) -> Path:
    """Dotfiles repository root: explicit override, else the manifest's dir, else cwd."""
    if override is not None:
        return override.resolve()
    if config_path is not None:
        return config_path.parent.resolve()
    return Path.cwd().resolve()
