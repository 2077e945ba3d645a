"""Project name validation for ``sprout init``."""

from __future__ import annotations

import keyword
import re
import sys

from .services.errors import InvalidNameError, PlaceholderNameError, ReservedNameError

NAME_REGEX = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
DEFAULT_PLACEHOLDER_NAME = "HelloWorld"
_RESERVED_NAMES = frozenset(
    name.lower()
    for name in (*keyword.kwlist, *keyword.softkwlist, *sys.stdlib_module_names, "sprout")
)


def validate_project_name(name: str | None) -> None:
    """Raise when ``name`` cannot be used for a new project.

    Args:
        name: Candidate project name.

    Raises:
        InvalidNameError: The name is empty or not an identifier.
        ReservedNameError: The name shadows a keyword or stdlib module.
        PlaceholderNameError: The name contains the default placeholder.

    Example:
        >>> validate_project_name("MyApp") is None
        True
    """
    if not name or not NAME_REGEX.fullmatch(name):
        raise InvalidNameError(
            f'"{name or ""}" is not a valid name for a project. Please use a valid '
            "identifier name (alphanumeric, starting with a letter or underscore).",
            recovery_hint="use letters, digits, and underscores only",
        )
    if name.lower() in _RESERVED_NAMES:
        raise ReservedNameError(
            f'Not a valid name for a project. Please do not use the reserved word "{name}".',
            recovery_hint="pick a name that does not shadow a keyword or module",
        )
    if DEFAULT_PLACEHOLDER_NAME.lower() in name.lower():
        raise PlaceholderNameError(
            f'Project name shouldn\'t contain "{DEFAULT_PLACEHOLDER_NAME}" name in it, '
            "because it is the name of the template placeholder.",
        )
