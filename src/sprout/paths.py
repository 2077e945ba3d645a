"""Path helpers for locating Sprout config and cache directories."""

from pathlib import Path

from platformdirs import user_cache_dir, user_config_dir

SPROUT_APP_NAME = "sprout"
CONFIG_FILENAME = "config.json"
STAGING_DIRNAME = "staging"
VENV_DIRNAME = ".venv"


def sprout_config_dir() -> Path:
    """Return the base Sprout config directory.

    Returns:
        Path to the user config directory for Sprout.

    Example:
        >>> isinstance(sprout_config_dir(), Path)
        True
    """
    return Path(user_config_dir(SPROUT_APP_NAME))


def user_config_path() -> Path:
    """Return the path to the user config file.

    Example:
        >>> user_config_path().name == CONFIG_FILENAME
        True
    """
    return sprout_config_dir() / CONFIG_FILENAME


def staging_root() -> Path:
    """Return the directory holding per-invocation template staging dirs.

    Example:
        >>> staging_root().name == STAGING_DIRNAME
        True
    """
    return Path(user_cache_dir(SPROUT_APP_NAME)) / STAGING_DIRNAME


def venv_dir(project_dir: Path) -> Path:
    """Return the virtual environment directory for a project."""
    return project_dir / VENV_DIRNAME


def venv_python(project_dir: Path) -> Path:
    """Return the interpreter path inside a project's virtual environment.

    Example:
        >>> venv_python(Path("/tmp/app")).parent.parent.name == VENV_DIRNAME
        True
    """
    venv = venv_dir(project_dir)
    if (venv / "Scripts").is_dir():
        return venv / "Scripts" / "python.exe"
    return venv / "bin" / "python"


def ensure_dir(path: Path) -> None:
    """Create ``path`` and its parents if needed."""
    path.mkdir(parents=True, exist_ok=True)
