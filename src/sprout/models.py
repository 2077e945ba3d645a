"""Pydantic models for Sprout configuration and template data."""

from __future__ import annotations

import sys
from pathlib import Path, PurePosixPath
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

PACKAGE_MANAGER_VALUES = ("auto", "uv", "pip")
PackageManagerName = Literal["auto", "uv", "pip"]

DEFAULT_TEMPLATE_PACKAGE = "sprout-template-default"


def _relative_inside(value: str, field_name: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError(f"{field_name} must not be empty")
    candidate = PurePosixPath(normalized.replace("\\", "/"))
    if candidate.is_absolute() or ".." in candidate.parts:
        raise ValueError(f"{field_name} must be a path inside the template")
    return normalized


class TemplateConfig(BaseModel):
    """Instantiation settings shipped in a template's ``template.config.json``.

    Attributes:
        template_dir: Directory inside the template whose contents are copied.
        placeholder_name: Token replaced with the real project name.
        post_init_script: Optional script run after dependencies install.

    Example:
        >>> TemplateConfig.model_validate(
        ...     {"templateDir": "template", "placeholderName": "HelloWorld"}
        ... ).template_dir
        'template'
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    template_dir: str = Field(
        validation_alias=AliasChoices("templateDir", "template_dir"),
    )
    placeholder_name: str = Field(
        validation_alias=AliasChoices("placeholderName", "placeholder_name"),
    )
    post_init_script: str | None = Field(
        default=None,
        validation_alias=AliasChoices("postInitScript", "post_init_script"),
    )

    @field_validator("template_dir")
    @classmethod
    def validate_template_dir(cls, value: str) -> str:
        return _relative_inside(value, "templateDir")

    @field_validator("placeholder_name")
    @classmethod
    def validate_placeholder_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("placeholderName must not be empty")
        return normalized

    @field_validator("post_init_script", mode="before")
    @classmethod
    def normalize_post_init_script(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("post_init_script")
    @classmethod
    def validate_post_init_script(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _relative_inside(value, "postInitScript")


class InitOptions(BaseModel):
    """Structured options recognized by ``sprout init``.

    Attributes:
        template: External template identifier, URL, or local path.
        package_manager: Optional installer override for this invocation.
    """

    model_config = ConfigDict(extra="ignore")

    template: str | None = None
    package_manager: PackageManagerName | None = None

    @field_validator("template", mode="before")
    @classmethod
    def normalize_template(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value


class SproutConfig(BaseModel):
    """User-level Sprout settings.

    Attributes:
        default_template: Package name of the default template.
        package_manager: Installer preference (auto|uv|pip).
        python: Interpreter used for pip, template fetches, and scripts.
    """

    model_config = ConfigDict(extra="allow")

    default_template: str = DEFAULT_TEMPLATE_PACKAGE
    package_manager: PackageManagerName = "auto"
    python: str = Field(default_factory=lambda: sys.executable)

    @field_validator("default_template", mode="before")
    @classmethod
    def normalize_default_template(cls, value: object) -> object:
        if value is None:
            return DEFAULT_TEMPLATE_PACKAGE
        if isinstance(value, str):
            return value.strip() or DEFAULT_TEMPLATE_PACKAGE
        return value

    @field_validator("package_manager", mode="before")
    @classmethod
    def normalize_package_manager(cls, value: object) -> object:
        if value is None:
            return "auto"
        if isinstance(value, str):
            return value.strip().lower() or "auto"
        return value

    @field_validator("python", mode="before")
    @classmethod
    def normalize_python(cls, value: object) -> object:
        if value is None:
            return sys.executable
        if isinstance(value, str):
            return value.strip() or sys.executable
        return value


class CliContext(BaseModel):
    """Ambient CLI context threaded through commands.

    Attributes:
        root: Directory new projects are created in.
        config: Loaded user configuration.
    """

    root: Path
    config: SproutConfig = Field(default_factory=SproutConfig)
