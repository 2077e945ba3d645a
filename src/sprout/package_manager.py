"""Dependency installation for newly created projects."""

from __future__ import annotations

import shutil
from pathlib import Path

from . import exec, log, paths
from .models import PackageManagerName
from .services.errors import DependencyInstallError

PYPROJECT_FILENAME = "pyproject.toml"
REQUIREMENTS_FILENAME = "requirements.txt"
UV_LOCK_FILENAME = "uv.lock"


class PackageManager:
    """Install a project's dependencies with uv or pip.

    Args:
        project_dir: Project root containing the dependency manifest.
        preference: ``auto`` picks uv when the project uses it or it is on
            ``PATH``; ``uv``/``pip`` force a tool.
        python: Interpreter used to create the pip virtual environment.
        runner: Optional command runner override.
    """

    def __init__(
        self,
        project_dir: Path,
        *,
        preference: PackageManagerName = "auto",
        python: str = "python3",
        runner: exec.CommandRunner | None = None,
    ) -> None:
        self.project_dir = project_dir
        self.preference = preference
        self.python = python
        self._runner = runner

    def resolve_tool(self) -> str:
        if self.preference != "auto":
            return self.preference
        if (self.project_dir / UV_LOCK_FILENAME).exists():
            return "uv"
        if shutil.which("uv"):
            return "uv"
        return "pip"

    def _run(self, *argv: str) -> None:
        request = exec.CommandRequest(
            argv=argv,
            cwd=self.project_dir,
            capture_output=False,
            text=False,
        )
        try:
            exec.run_checked(request, runner=self._runner)
        except exec.CommandExecutionError as exc:
            raise DependencyInstallError(
                f"Failed to install dependencies: {exc}",
                recovery_hint="fix the error above, then install dependencies manually",
            ) from exc

    def _install_with_uv(self, *, has_pyproject: bool) -> None:
        if has_pyproject:
            self._run("uv", "sync")
            return
        self._run("uv", "venv", paths.VENV_DIRNAME)
        self._run(
            "uv",
            "pip",
            "install",
            "--python",
            paths.VENV_DIRNAME,
            "-r",
            REQUIREMENTS_FILENAME,
        )

    def _install_with_pip(self, *, has_pyproject: bool) -> None:
        self._run(self.python, "-m", "venv", paths.VENV_DIRNAME)
        venv_python = str(paths.venv_python(self.project_dir))
        if has_pyproject:
            self._run(venv_python, "-m", "pip", "install", "-e", ".")
            return
        self._run(venv_python, "-m", "pip", "install", "-r", REQUIREMENTS_FILENAME)

    def install_all(self) -> None:
        """Install every dependency declared by the project manifest.

        Raises:
            DependencyInstallError: The installer is missing or failed.
        """
        has_pyproject = (self.project_dir / PYPROJECT_FILENAME).is_file()
        has_requirements = (self.project_dir / REQUIREMENTS_FILENAME).is_file()
        if not has_pyproject and not has_requirements:
            log.info("No dependency manifest found; skipping install.")
            return
        tool = self.resolve_tool()
        log.info(f"Installing dependencies with {tool}...")
        if tool == "uv":
            self._install_with_uv(has_pyproject=has_pyproject)
        else:
            self._install_with_pip(has_pyproject=has_pyproject)
