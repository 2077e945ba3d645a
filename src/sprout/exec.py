"""Subprocess helpers for running external commands."""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol

from . import log


@dataclass(frozen=True)
class CommandRequest:
    """Typed command invocation request."""

    argv: tuple[str, ...]
    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    capture_output: bool = True
    text: bool = True


@dataclass(frozen=True)
class CommandResult:
    """Typed command execution result."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


class CommandRunner(Protocol):
    """Runtime command-execution interface."""

    def run(self, request: CommandRequest) -> CommandResult | None: ...


class SubprocessCommandRunner:
    """Default command-runner adapter backed by subprocess."""

    def run(self, request: CommandRequest) -> CommandResult | None:
        run_kwargs: dict[str, object] = {
            "cwd": request.cwd,
            "env": request.env,
            "check": False,
        }
        if request.capture_output:
            run_kwargs["capture_output"] = True
            run_kwargs["text"] = request.text
        try:
            completed = subprocess.run(list(request.argv), **run_kwargs)
        except FileNotFoundError:
            return None

        stdout = completed.stdout if isinstance(completed.stdout, str) else ""
        stderr = completed.stderr if isinstance(completed.stderr, str) else ""
        return CommandResult(
            argv=request.argv,
            returncode=completed.returncode,
            stdout=stdout,
            stderr=stderr,
        )


_DEFAULT_COMMAND_RUNNER: CommandRunner = SubprocessCommandRunner()


@dataclass(eq=False)
class CommandExecutionError(RuntimeError):
    """Raised when a command is missing or exits non-zero."""

    request: CommandRequest
    detail: str
    result: CommandResult | None = None

    def __str__(self) -> str:
        return self.detail


def run_with_runner(
    request: CommandRequest, *, runner: CommandRunner | None = None
) -> CommandResult | None:
    """Execute a typed command request with the given runner."""
    active_runner = runner or _DEFAULT_COMMAND_RUNNER
    return active_runner.run(request)


def _missing_command_detail(request: CommandRequest) -> str:
    argv = request.argv
    if not argv:
        return "missing required command"
    return f"missing required command: {argv[0]} (is it installed and on PATH?)"


def _command_failure_detail(request: CommandRequest, result: CommandResult) -> str:
    """Describe a non-zero exit, with the directory it ran in and its output.

    Output is only available for captured commands; streamed commands
    (installers, post-init scripts) already printed theirs to the terminal.
    """
    output = (result.stderr or result.stdout or "").strip()
    command_text = " ".join(request.argv)
    location = f" in {request.cwd}" if request.cwd is not None else ""
    summary = f"command failed with exit code {result.returncode}{location}: {command_text}"
    if output:
        return f"{summary}\n{output}"
    return summary


def run_checked(
    request: CommandRequest, *, runner: CommandRunner | None = None
) -> CommandResult:
    """Run a command and raise ``CommandExecutionError`` unless it succeeds.

    Args:
        request: Command to execute.
        runner: Optional runner override, mainly for tests.

    Returns:
        The successful ``CommandResult``.
    """
    log.debug(f"$ {' '.join(request.argv)}")
    result = run_with_runner(request, runner=runner)
    if result is None:
        raise CommandExecutionError(
            request=request,
            detail=_missing_command_detail(request),
        )
    if result.returncode != 0:
        raise CommandExecutionError(
            request=request,
            result=result,
            detail=_command_failure_detail(request, result),
        )
    return result
