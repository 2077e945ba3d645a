"""Implementation for the ``sprout init`` command.

``sprout init <name>`` creates ``<name>`` in the current directory from the
default template (or ``--template``), installs dependencies, and prints run
instructions. Failures remove the new directory and map to exit codes.
"""

from __future__ import annotations

import sys
from pathlib import Path

from .. import log
from ..config import ConfigError, load_config
from ..models import CliContext, InitOptions
from ..services.errors import ServiceFailureCode
from ..services.project import initialize
from ..services.result import ServiceFailure

EXIT_CODES: dict[ServiceFailureCode, int] = {
    "unexpected_state": 1,
    "validation_failed": 2,
    "destination_exists": 3,
    "template_failed": 4,
    "external_command_failed": 5,
    "io_failed": 6,
}
CONFIG_ERROR_EXIT_CODE = 1


def exit_code_for(result: object) -> int:
    """Return the process exit code for an init result.

    Example:
        >>> exit_code_for(ServiceFailure(code="destination_exists", message="taken"))
        3
    """
    if isinstance(result, ServiceFailure):
        return EXIT_CODES.get(result.code, 1)
    return 0


def init_project(args: object) -> int:
    """Create a new project from a template.

    Args:
        args: CLI argument object with ``project_name`` and optional
            ``template`` and ``package_manager`` fields.

    Returns:
        Process exit code; ``0`` on success.

    Example:
        $ sprout init MyApp --template ./my-template
    """
    try:
        config = load_config()
    except ConfigError as exc:
        log.error(str(exc))
        return CONFIG_ERROR_EXIT_CODE
    context = CliContext(root=Path.cwd(), config=config)
    options = InitOptions(
        template=getattr(args, "template", None),
        package_manager=getattr(args, "package_manager", None),
    )
    project_name = getattr(args, "project_name", None)
    # --version is read from the raw process arguments by the init service.
    result = initialize(
        [project_name] if project_name else [],
        context,
        options,
        argv=sys.argv,
    )
    if isinstance(result, ServiceFailure):
        if result.recovery_hint:
            log.info(f"hint: {result.recovery_hint}")
        if result.step:
            log.debug(f"failed step: {result.step}")
    return exit_code_for(result)
