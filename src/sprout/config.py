"""Configuration helpers for Sprout.

This module reads the user ``config.json``, validates it with Pydantic
models, and applies ``SPROUT_*`` environment overrides.

Example:
    >>> from sprout.config import apply_env_overrides
    >>> apply_env_overrides({}, {"SPROUT_PACKAGE_MANAGER": "pip"})
    {'package_manager': 'pip'}
"""

import json
import os
from pathlib import Path
from typing import Mapping

from pydantic import ValidationError

from . import paths
from .models import SproutConfig

ENV_OVERRIDES = {
    "SPROUT_DEFAULT_TEMPLATE": "default_template",
    "SPROUT_PACKAGE_MANAGER": "package_manager",
    "SPROUT_PYTHON": "python",
}


class ConfigError(RuntimeError):
    """Raised when the user configuration cannot be read or validated."""

    def __init__(self, path: Path | None, detail: str) -> None:
        self.path = path
        self.detail = detail
        location = f" ({path})" if path is not None else ""
        super().__init__(f"invalid sprout config{location}: {detail}")


def load_json(path: Path) -> dict | None:
    """Load a JSON file if it exists.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed payload as a dict, or ``None`` if the file does not exist.

    Example:
        >>> from pathlib import Path
        >>> load_json(Path("missing.json")) is None
        True
    """
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def apply_env_overrides(payload: dict, environ: Mapping[str, str]) -> dict:
    """Return ``payload`` updated with non-empty ``SPROUT_*`` overrides."""
    merged = dict(payload)
    for env_name, key in ENV_OVERRIDES.items():
        value = environ.get(env_name, "").strip()
        if value:
            merged[key] = value
    return merged


def parse_config(payload: dict, path: Path | None = None) -> SproutConfig:
    """Validate a raw payload into ``SproutConfig``.

    Raises:
        ConfigError: When the payload fails validation.
    """
    try:
        return SproutConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(path, str(exc)) from exc


def load_config(
    path: Path | None = None, environ: Mapping[str, str] | None = None
) -> SproutConfig:
    """Load user configuration with environment overrides applied.

    Args:
        path: Config file path; defaults to the platform user config path.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Validated ``SproutConfig``. A missing file yields defaults.

    Raises:
        ConfigError: When the file is unreadable, not a JSON object, or invalid.
    """
    config_path = path or paths.user_config_path()
    try:
        payload = load_json(config_path)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(config_path, str(exc)) from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError(config_path, "expected a JSON object")
    env = os.environ if environ is None else environ
    return parse_config(apply_env_overrides(payload, env), config_path)
