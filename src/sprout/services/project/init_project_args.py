"""Read the default template version from raw process arguments."""

from __future__ import annotations

from collections.abc import Sequence

DEFAULT_VERSION = "latest"
VERSION_FLAG = "--version"


def read_version_flag(argv: Sequence[str], *, default: str = DEFAULT_VERSION) -> str:
    """Return the ``--version`` value from raw process arguments.

    The value is read from the raw argument list rather than parsed CLI
    options. The last occurrence wins; a bare flag or an empty value falls
    back to ``default``. Parsing stops at ``--``.

    Example:
        >>> read_version_flag(["sprout", "init", "MyApp", "--version", "1.2.0"])
        '1.2.0'
        >>> read_version_flag(["sprout", "init", "MyApp", "--version=2.0"])
        '2.0'
        >>> read_version_flag(["sprout", "init", "MyApp"])
        'latest'
    """
    value: str | None = None
    for index, token in enumerate(argv):
        if token == "--":
            break
        if token == VERSION_FLAG:
            following = argv[index + 1] if index + 1 < len(argv) else None
            if following is None or following.startswith("-"):
                value = None
            else:
                value = following
        elif token.startswith(f"{VERSION_FLAG}="):
            value = token.split("=", 1)[1] or None
    return value or default
