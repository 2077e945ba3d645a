"""Project initialization service modules."""

from .init_project_args import DEFAULT_VERSION, read_version_flag
from .initialize_project import (
    InitializeProjectDependencies,
    InitializeProjectOutcome,
    InitializeProjectRequest,
    InitializeProjectService,
    initialize,
    remove_project_dir,
)

__all__ = [
    "DEFAULT_VERSION",
    "InitializeProjectDependencies",
    "InitializeProjectOutcome",
    "InitializeProjectRequest",
    "InitializeProjectService",
    "initialize",
    "read_version_flag",
    "remove_project_dir",
]
