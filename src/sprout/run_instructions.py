"""Next-step instructions printed after a successful ``sprout init``."""

from __future__ import annotations

import os
from pathlib import Path

from . import log, paths


def _activate_command(project_dir: Path) -> str:
    venv = paths.venv_dir(project_dir)
    if os.name == "nt":
        return f"{venv / 'Scripts' / 'activate'}"
    return f"source {venv / 'bin' / 'activate'}"


def run_instructions(project_dir: Path, project_name: str) -> list[str]:
    """Return the instruction lines for a project created at ``project_dir``.

    Example:
        >>> run_instructions(Path("/tmp/MyApp"), "MyApp")[0]
        'Run instructions for MyApp:'
    """
    return [
        f"Run instructions for {project_name}:",
        f"  cd {project_dir}",
        f"  {_activate_command(project_dir)}",
        "  python -m pytest",
    ]


def print_run_instructions(project_dir: Path, project_name: str) -> None:
    """Log the run instructions for the new project."""
    header, *steps = run_instructions(project_dir, project_name)
    log.success(header)
    for step in steps:
        log.info(step)
