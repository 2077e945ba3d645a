from .base import BaseService
from .errors import (
    DependencyInstallError,
    DirectoryAlreadyExistsError,
    InvalidNameError,
    IoFailedError,
    PlaceholderNameError,
    PlaceholderSubstitutionError,
    PostInitScriptError,
    ReservedNameError,
    ServiceError,
    TemplateConfigError,
    TemplateCopyError,
    TemplateFetchError,
    UnexpectedStateError,
)
from .result import ServiceFailure, ServiceResult, ServiceSuccess

__all__ = [
    "BaseService",
    "DependencyInstallError",
    "DirectoryAlreadyExistsError",
    "InvalidNameError",
    "IoFailedError",
    "PlaceholderNameError",
    "PlaceholderSubstitutionError",
    "PostInitScriptError",
    "ReservedNameError",
    "ServiceError",
    "ServiceFailure",
    "ServiceResult",
    "ServiceSuccess",
    "TemplateConfigError",
    "TemplateCopyError",
    "TemplateFetchError",
    "UnexpectedStateError",
]
