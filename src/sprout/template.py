"""Template fetching, config loading, and post-init helpers."""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from urllib.parse import unquote, urlparse

from pydantic import ValidationError

from . import exec, log, paths
from .models import DEFAULT_TEMPLATE_PACKAGE, TemplateConfig
from .services.errors import (
    PostInitScriptError,
    TemplateConfigError,
    TemplateCopyError,
    TemplateFetchError,
)

TEMPLATE_CONFIG_FILENAME = "template.config.json"
SITE_DIRNAME = "site"
_VERSION_OPERATORS = ("==", "!=", "<=", ">=", "~=", "===", "<", ">")
_COPY_IGNORE = shutil.ignore_patterns(".git", "__pycache__")
_SITE_SKIP_SUFFIXES = (".dist-info", ".egg-info", ".data")


def resolve_default_template(version: str, *, package: str = DEFAULT_TEMPLATE_PACKAGE) -> str:
    """Return the pip requirement for the default template at ``version``.

    Example:
        >>> resolve_default_template("latest")
        'sprout-template-default'
        >>> resolve_default_template("1.2.0")
        'sprout-template-default==1.2.0'
        >>> resolve_default_template(">=2")
        'sprout-template-default>=2'
    """
    normalized = version.strip()
    if not normalized or normalized == "latest":
        return package
    if normalized.startswith(_VERSION_OPERATORS):
        return f"{package}{normalized}"
    return f"{package}=={normalized}"


def _local_template_path(template: str, base_dir: Path) -> Path | None:
    if template.startswith("file://"):
        return Path(unquote(urlparse(template).path))
    candidate = Path(template).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    if candidate.is_dir():
        return candidate.resolve()
    return None


def locate_template_root(search_root: Path) -> Path:
    """Find the directory holding ``template.config.json`` under ``search_root``.

    The root itself is checked first, then its immediate subdirectories
    (skipping install metadata directories).
    """
    if (search_root / TEMPLATE_CONFIG_FILENAME).is_file():
        return search_root
    candidates = [
        child
        for child in sorted(search_root.iterdir())
        if child.is_dir()
        and not child.name.endswith(_SITE_SKIP_SUFFIXES)
        and (child / TEMPLATE_CONFIG_FILENAME).is_file()
    ]
    if not candidates:
        raise TemplateConfigError(
            f"Couldn't find {TEMPLATE_CONFIG_FILENAME} in the fetched template.",
            recovery_hint="templates must ship a config file at their package root",
        )
    if len(candidates) > 1:
        names = ", ".join(child.name for child in candidates)
        raise TemplateConfigError(f"Fetched template is ambiguous: found configs in {names}.")
    return candidates[0]


def fetch_template(
    template: str,
    staging_dir: Path,
    *,
    base_dir: Path,
    python: str,
    runner: exec.CommandRunner | None = None,
) -> Path:
    """Fetch ``template`` into ``staging_dir`` and return the template root.

    Local directories and ``file://`` URLs are copied; anything else is
    treated as a pip requirement (package name, version spec, VCS or archive
    URL) and installed with ``pip install --target``.

    Raises:
        TemplateFetchError: The template could not be fetched.
        TemplateConfigError: The fetched template has no config file.
    """
    log.info(f"Fetching template {template}...")
    local = _local_template_path(template, base_dir)
    if local is not None:
        if not local.is_dir():
            raise TemplateFetchError(f"Template directory {local} does not exist.")
        destination = staging_dir / (local.name or "template")
        try:
            shutil.copytree(local, destination, ignore=_COPY_IGNORE)
        except OSError as exc:
            raise TemplateFetchError(f"Failed to copy template {template}: {exc}") from exc
        return locate_template_root(destination)

    site_dir = staging_dir / SITE_DIRNAME
    request = exec.CommandRequest(
        argv=(
            python,
            "-m",
            "pip",
            "install",
            "--no-deps",
            "--disable-pip-version-check",
            "--quiet",
            "--target",
            str(site_dir),
            template,
        ),
        cwd=base_dir,
    )
    try:
        exec.run_checked(request, runner=runner)
    except exec.CommandExecutionError as exc:
        raise TemplateFetchError(
            f"Failed to fetch template {template}: {exc}",
            recovery_hint="check the template name, version, and network access",
        ) from exc
    if not site_dir.is_dir():
        raise TemplateFetchError(f"Fetching template {template} produced no files.")
    return locate_template_root(site_dir)


def get_template_config(template_root: Path) -> TemplateConfig:
    """Read and validate ``template.config.json`` from ``template_root``.

    Raises:
        TemplateConfigError: The file is missing, not JSON, or invalid.
    """
    config_path = template_root / TEMPLATE_CONFIG_FILENAME
    if not config_path.is_file():
        raise TemplateConfigError(f"Couldn't find the {config_path} file.")
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise TemplateConfigError(f"Failed to read {config_path}: {exc}") from exc
    try:
        return TemplateConfig.model_validate(payload)
    except ValidationError as exc:
        raise TemplateConfigError(f"Invalid template config {config_path}: {exc}") from exc


def copy_template(template_root: Path, template_dir: str, project_dir: Path) -> None:
    """Copy the contents of ``template_root / template_dir`` into ``project_dir``.

    Raises:
        TemplateCopyError: The source is missing or the copy failed.
    """
    source = template_root / template_dir
    if not source.is_dir():
        raise TemplateCopyError(f"Template directory {template_dir} not found in template.")
    log.debug(f"Copying template from {source}")
    try:
        shutil.copytree(source, project_dir, ignore=_COPY_IGNORE, dirs_exist_ok=True)
    except (OSError, shutil.Error) as exc:
        raise TemplateCopyError(f"Failed to copy template into {project_dir}: {exc}") from exc


def execute_post_install_script(
    template: str,
    template_root: Path,
    script: str,
    project_dir: Path,
    *,
    python: str,
    runner: exec.CommandRunner | None = None,
) -> None:
    """Run the template's post-init ``script`` inside ``project_dir``.

    Raises:
        PostInitScriptError: The script is missing or exited non-zero.
    """
    script_path = template_root / script
    if not script_path.is_file():
        raise PostInitScriptError(f"Post-init script {script} not found in template {template}.")
    log.info("Running template post-init script...")
    env = dict(os.environ)
    env.update(
        {
            "SPROUT_PROJECT_NAME": project_dir.name,
            "SPROUT_PROJECT_DIR": str(project_dir),
            "SPROUT_TEMPLATE": template,
        }
    )
    request = exec.CommandRequest(
        argv=(python, str(script_path)),
        cwd=project_dir,
        env=env,
        capture_output=False,
        text=False,
    )
    try:
        exec.run_checked(request, runner=runner)
    except exec.CommandExecutionError as exc:
        raise PostInitScriptError(f"Post-init script failed: {exc}") from exc


@contextmanager
def staging_directory() -> Iterator[Path]:
    """Yield a fresh staging directory that is removed on exit."""
    root = paths.staging_root()
    paths.ensure_dir(root)
    with tempfile.TemporaryDirectory(
        prefix="template-", dir=root, ignore_cleanup_errors=True
    ) as staging:
        yield Path(staging)
