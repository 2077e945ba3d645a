"""Service failure contracts.

Steps raise ServiceError on expected validation, template, or runtime
failures. Each subclass carries a stable failure code that callers translate
into results, messages, and exit codes.
"""

from __future__ import annotations

from typing import Literal

ServiceFailureCode = Literal[
    "validation_failed",
    "destination_exists",
    "template_failed",
    "external_command_failed",
    "io_failed",
    "unexpected_state",
]


class ServiceError(Exception):
    """Expected service failure: validation, template, or runtime error.

    Use ``raise SomeError(...) from exc`` to chain a causing exception; it is
    available as ``__cause__``.
    """

    code: ServiceFailureCode = "unexpected_state"

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.recovery_hint = recovery_hint


class InvalidNameError(ServiceError):
    """Project name violates the naming rules."""

    code: ServiceFailureCode = "validation_failed"


class ReservedNameError(InvalidNameError):
    """Project name collides with a keyword or importable module."""


class PlaceholderNameError(InvalidNameError):
    """Project name equals the default template placeholder."""


class DirectoryAlreadyExistsError(ServiceError):
    """Destination path is already occupied."""

    code: ServiceFailureCode = "destination_exists"

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Cannot initialize new project because directory {name} already exists.",
            recovery_hint="choose another name or remove the existing entry",
        )
        self.name = name


class TemplateFetchError(ServiceError):
    """Template could not be downloaded or copied into staging."""

    code: ServiceFailureCode = "template_failed"


class TemplateConfigError(ServiceError):
    """Template config file is missing or invalid."""

    code: ServiceFailureCode = "template_failed"


class TemplateCopyError(ServiceError):
    """Template files could not be copied into the project."""

    code: ServiceFailureCode = "io_failed"


class PlaceholderSubstitutionError(ServiceError):
    """Placeholder could not be replaced in the copied template."""

    code: ServiceFailureCode = "io_failed"


class DependencyInstallError(ServiceError):
    """Dependency installation failed."""

    code: ServiceFailureCode = "external_command_failed"


class PostInitScriptError(ServiceError):
    """Template post-init script failed."""

    code: ServiceFailureCode = "external_command_failed"


class IoFailedError(ServiceError):
    """I/O operation failed (directory creation, reads, writes)."""

    code: ServiceFailureCode = "io_failed"


class UnexpectedStateError(ServiceError):
    """Unexpected or inconsistent state."""

    code: ServiceFailureCode = "unexpected_state"
