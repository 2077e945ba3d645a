"""Placeholder substitution for freshly copied templates."""

from __future__ import annotations

import re
from pathlib import Path

from . import log
from .services.errors import PlaceholderSubstitutionError

SKIPPED_DIRS = frozenset({".git", ".venv", "__pycache__"})


def _replacements(project_name: str, placeholder: str) -> dict[str, str]:
    replacements = {placeholder: project_name}
    lowered = placeholder.lower()
    if lowered != placeholder:
        replacements[lowered] = project_name.lower()
    return replacements


def _pattern(replacements: dict[str, str]) -> re.Pattern[str]:
    ordered = sorted(replacements, key=len, reverse=True)
    return re.compile("|".join(re.escape(token) for token in ordered))


def _walk(project_dir: Path) -> list[Path]:
    found: list[Path] = []
    pending = [project_dir]
    while pending:
        current = pending.pop()
        for entry in sorted(current.iterdir()):
            if entry.is_dir() and not entry.is_symlink():
                if entry.name in SKIPPED_DIRS:
                    continue
                pending.append(entry)
            found.append(entry)
    return found


def _replace_in_file(path: Path, pattern: re.Pattern[str], replacements: dict[str, str]) -> bool:
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return False
    updated = pattern.sub(lambda match: replacements[match.group(0)], content)
    if updated == content:
        return False
    path.write_text(updated, encoding="utf-8")
    return True


def _occupied_by_other(target: Path, entry: Path) -> bool:
    if not (target.exists() or target.is_symlink()):
        return False
    # Case-insensitive filesystems report a case-only rename target as the entry itself.
    return not (target.exists() and entry.exists() and target.samefile(entry))


def change_placeholder_in_template(project_dir: Path, project_name: str, placeholder: str) -> None:
    """Replace ``placeholder`` with ``project_name`` across ``project_dir``.

    File contents are rewritten in a single pass so the new name is never
    rescanned. Paths are renamed deepest-first so parent renames do not
    invalidate pending child paths.

    Raises:
        PlaceholderSubstitutionError: A file could not be rewritten or renamed,
            or two paths map to the same name after substitution.
    """
    log.info("Updating project name in template files...")
    replacements = _replacements(project_name, placeholder)
    pattern = _pattern(replacements)
    try:
        entries = _walk(project_dir)
        for entry in entries:
            if entry.is_file() and not entry.is_symlink():
                if _replace_in_file(entry, pattern, replacements):
                    log.trace(f"updated {entry.relative_to(project_dir)}")
        for entry in sorted(entries, key=lambda path: len(path.parts), reverse=True):
            renamed = pattern.sub(lambda match: replacements[match.group(0)], entry.name)
            if renamed != entry.name:
                target = entry.with_name(renamed)
                if _occupied_by_other(target, entry):
                    raise PlaceholderSubstitutionError(
                        f"Cannot rename {entry.relative_to(project_dir)} to "
                        f"{target.relative_to(project_dir)}: the target already exists.",
                        recovery_hint="template paths must stay distinct after substitution",
                    )
                entry.rename(target)
    except OSError as exc:
        raise PlaceholderSubstitutionError(
            f"Failed to replace {placeholder} in {project_dir}: {exc}"
        ) from exc
