"""Create a new project from a template behind a typed service boundary.

The workflow validates the name, creates the project directory, fetches and
copies a template, replaces its placeholder, installs dependencies, and runs
the template's post-init script. The project directory is released through an
``ExitStack`` registered right after it is created, so any later failure
removes it and a successful run keeps it.
"""

from __future__ import annotations

import shutil
import sys
from collections.abc import Callable, Mapping, Sequence
from contextlib import AbstractContextManager, ExitStack
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ... import edit_template, log, run_instructions, template, validate
from ...models import CliContext, InitOptions, TemplateConfig
from ...package_manager import PackageManager
from ..base import BaseService
from ..errors import (
    DirectoryAlreadyExistsError,
    IoFailedError,
    ServiceError,
    UnexpectedStateError,
)
from ..result import (
    ServiceFailure,
    ServiceResult,
    failure_from_error,
    service_failure,
    service_success,
)
from .init_project_args import read_version_flag

STEP_PARSE_OPTIONS = "parse_options"
STEP_VALIDATE_NAME = "validate_name"
STEP_RESOLVE_VERSION = "resolve_version"
STEP_CHECK_DESTINATION = "check_destination"
STEP_CREATE_DIRECTORY = "create_directory"
STEP_RESOLVE_TEMPLATE = "resolve_template"
STEP_FETCH_TEMPLATE = "fetch_template"
STEP_READ_TEMPLATE_CONFIG = "read_template_config"
STEP_COPY_TEMPLATE = "copy_template"
STEP_SUBSTITUTE_PLACEHOLDER = "substitute_placeholder"
STEP_INSTALL_DEPENDENCIES = "install_dependencies"
STEP_POST_INIT_SCRIPT = "post_init_script"
STEP_PRINT_INSTRUCTIONS = "print_run_instructions"


def remove_project_dir(project_dir: Path) -> None:
    """Best-effort recursive removal of ``project_dir``.

    Safe to call repeatedly. Leftovers are reported as a warning.
    """
    shutil.rmtree(project_dir, ignore_errors=True)
    if project_dir.exists():
        log.warning(f"Could not fully remove {project_dir}; delete it manually.")


@dataclass(frozen=True)
class InitializeProjectDependencies:
    """Collaborators used by the init workflow.

    Every collaborator receives the paths it works on explicitly.
    """

    validate_project_name: Callable[[str | None], None]
    resolve_default_template: Callable[[str], str]
    staging_directory: Callable[[], AbstractContextManager[Path]]
    fetch_template: Callable[[str, Path], Path]
    get_template_config: Callable[[Path], TemplateConfig]
    copy_template: Callable[[Path, str, Path], None]
    change_placeholder: Callable[[Path, str, str], None]
    install_dependencies: Callable[[Path], None]
    execute_post_install_script: Callable[[str, Path, str, Path], None]
    print_run_instructions: Callable[[Path, str], None]
    remove_project_dir: Callable[[Path], None]

    @classmethod
    def default(cls, context: CliContext, options: InitOptions) -> InitializeProjectDependencies:
        """Wire the production collaborators for ``context`` and ``options``."""
        config = context.config
        preference = options.package_manager or config.package_manager

        def install_dependencies(project_dir: Path) -> None:
            PackageManager(project_dir, preference=preference, python=config.python).install_all()

        return cls(
            validate_project_name=validate.validate_project_name,
            resolve_default_template=partial(
                template.resolve_default_template, package=config.default_template
            ),
            staging_directory=template.staging_directory,
            fetch_template=partial(
                template.fetch_template, base_dir=context.root, python=config.python
            ),
            get_template_config=template.get_template_config,
            copy_template=template.copy_template,
            change_placeholder=edit_template.change_placeholder_in_template,
            install_dependencies=install_dependencies,
            execute_post_install_script=partial(
                template.execute_post_install_script, python=config.python
            ),
            print_run_instructions=run_instructions.print_run_instructions,
            remove_project_dir=remove_project_dir,
        )


class InitializeProjectRequest(BaseModel):
    """Input contract for the init workflow.

    Attributes:
        args: Positional CLI tokens; the first is the project name.
        context: Ambient CLI context (root directory and config).
        options: Structured ``init`` options.
        argv: Raw process arguments, consulted for ``--version``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    args: tuple[str, ...] = ()
    context: CliContext
    options: InitOptions = Field(default_factory=InitOptions)
    argv: tuple[str, ...] = ()

    @property
    def project_name(self) -> str | None:
        return self.args[0] if self.args else None


@dataclass(frozen=True)
class InitializeProjectOutcome:
    project_dir: Path
    project_name: str
    template: str
    version: str
    template_config: TemplateConfig


class InitializeProjectService(
    BaseService[InitializeProjectRequest, ServiceResult[InitializeProjectOutcome]]
):
    def __init__(self, dependencies: InitializeProjectDependencies) -> None:
        self._deps = dependencies
        self._step: str | None = None

    def run(self, request: InitializeProjectRequest) -> ServiceResult[InitializeProjectOutcome]:
        """Run the workflow and return a typed result; nothing is raised."""
        self._step = None
        try:
            return self(request)
        except Exception as exc:
            error = UnexpectedStateError(str(exc) or exc.__class__.__name__)
            return failure_from_error(error, step=self._step)

    def _enter(self, step: str) -> None:
        self._step = step
        log.trace(f"init step: {step}")

    def _handle_failure(self, error: ServiceError) -> ServiceResult[InitializeProjectOutcome]:
        return failure_from_error(error, step=self._step)

    def _run(self, request: InitializeProjectRequest) -> ServiceResult[InitializeProjectOutcome]:
        self._enter(STEP_VALIDATE_NAME)
        self._deps.validate_project_name(request.project_name)
        project_name = request.project_name or ""

        self._enter(STEP_RESOLVE_VERSION)
        version = read_version_flag(request.argv)

        self._enter(STEP_CHECK_DESTINATION)
        project_dir = request.context.root / project_name
        if project_dir.exists() or project_dir.is_symlink():
            raise DirectoryAlreadyExistsError(project_name)

        with ExitStack() as rollback:
            self._enter(STEP_CREATE_DIRECTORY)
            self._create_project_dir(project_dir, project_name)
            rollback.callback(self._deps.remove_project_dir, project_dir)

            template_id, template_config = self._create_project(
                project_dir, project_name, request.options, version
            )

            self._enter(STEP_PRINT_INSTRUCTIONS)
            self._deps.print_run_instructions(project_dir, project_name)
            rollback.pop_all()

        return service_success(
            InitializeProjectOutcome(
                project_dir=project_dir,
                project_name=project_name,
                template=template_id,
                version=version,
                template_config=template_config,
            )
        )

    def _create_project_dir(self, project_dir: Path, project_name: str) -> None:
        try:
            project_dir.mkdir()
        except FileExistsError as exc:
            raise DirectoryAlreadyExistsError(project_name) from exc
        except OSError as exc:
            raise IoFailedError(f"Failed to create directory {project_dir}: {exc}") from exc

    def _create_project(
        self,
        project_dir: Path,
        project_name: str,
        options: InitOptions,
        version: str,
    ) -> tuple[str, TemplateConfig]:
        self._enter(STEP_RESOLVE_TEMPLATE)
        if options.template:
            log.info("Initializing new project from external template")
            template_id = options.template
        else:
            log.info("Initializing new project")
            template_id = self._deps.resolve_default_template(version)

        with self._deps.staging_directory() as staging_dir:
            self._enter(STEP_FETCH_TEMPLATE)
            template_root = self._deps.fetch_template(template_id, staging_dir)

            self._enter(STEP_READ_TEMPLATE_CONFIG)
            template_config = self._deps.get_template_config(template_root)

            self._enter(STEP_COPY_TEMPLATE)
            self._deps.copy_template(template_root, template_config.template_dir, project_dir)

            self._enter(STEP_SUBSTITUTE_PLACEHOLDER)
            self._deps.change_placeholder(
                project_dir, project_name, template_config.placeholder_name
            )

            self._enter(STEP_INSTALL_DEPENDENCIES)
            self._deps.install_dependencies(project_dir)

            if template_config.post_init_script:
                self._enter(STEP_POST_INIT_SCRIPT)
                self._deps.execute_post_install_script(
                    template_id, template_root, template_config.post_init_script, project_dir
                )

        return template_id, template_config


def _parse_options(options: InitOptions | Mapping[str, object] | None) -> InitOptions:
    if isinstance(options, InitOptions):
        return options
    return InitOptions.model_validate(dict(options or {}))


def _options_error_message(error: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or 'options'}: {item['msg']}"
        for item in error.errors()
    )
    return f"Invalid init options: {details}"


def initialize(
    args: Sequence[str],
    context: CliContext,
    options: InitOptions | Mapping[str, object] | None = None,
    *,
    argv: Sequence[str] | None = None,
    dependencies: InitializeProjectDependencies | None = None,
) -> ServiceResult[InitializeProjectOutcome]:
    """Initialize a new project named ``args[0]`` under ``context.root``.

    Args:
        args: Positional CLI tokens; only the first (project name) is used.
        context: Ambient CLI context.
        options: ``InitOptions`` or a mapping with a ``template`` key.
        argv: Raw process arguments; defaults to ``sys.argv``.
        dependencies: Collaborator overrides; defaults to the production wiring.

    Returns:
        ``ServiceSuccess`` with the created project, or ``ServiceFailure``
        naming the failed step. Failures are logged here.
    """
    result: ServiceResult[InitializeProjectOutcome]
    try:
        parsed_options = _parse_options(options)
    except ValidationError as exc:
        result = service_failure(
            code="validation_failed",
            message=_options_error_message(exc),
            step=STEP_PARSE_OPTIONS,
        )
    else:
        deps = dependencies or InitializeProjectDependencies.default(context, parsed_options)
        request = InitializeProjectRequest(
            args=tuple(args),
            context=context,
            options=parsed_options,
            argv=tuple(sys.argv if argv is None else argv),
        )
        result = InitializeProjectService(deps).run(request)
    if isinstance(result, ServiceFailure):
        log.error(result.message)
    return result
