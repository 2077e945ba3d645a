"""Common service result contracts for orchestration entrypoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import ServiceError, ServiceFailureCode

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceSuccess(Generic[T]):
    """Container for successful service outcomes.

    Args:
        outcome: Typed outcome payload returned by a service.
    """

    outcome: T
    success = True


@dataclass(frozen=True)
class ServiceFailure:
    """Deterministic failure result for expected service errors.

    Args:
        code: Stable failure code for callers and tests.
        message: Human-readable failure summary.
        step: Name of the workflow step that failed, when known.
        recovery_hint: Optional actionable hint for recovery.
    """

    code: ServiceFailureCode
    message: str
    step: str | None = None
    recovery_hint: str | None = None
    success = False


ServiceResult = ServiceSuccess[T] | ServiceFailure


def service_success(outcome: T) -> ServiceSuccess[T]:
    """Create a successful service result.

    Args:
        outcome: Typed outcome payload to return.

    Returns:
        ``ServiceSuccess`` wrapping ``outcome``.
    """

    return ServiceSuccess(outcome=outcome)


def service_failure(
    *,
    code: ServiceFailureCode,
    message: str,
    step: str | None = None,
    recovery_hint: str | None = None,
) -> ServiceFailure:
    """Create a deterministic service failure result.

    Args:
        code: Stable failure code.
        message: Human-readable failure summary.
        step: Workflow step that failed.
        recovery_hint: Optional actionable hint for callers.

    Returns:
        ``ServiceFailure`` describing the expected failure.
    """

    return ServiceFailure(code=code, message=message, step=step, recovery_hint=recovery_hint)


def failure_from_error(error: ServiceError, *, step: str | None = None) -> ServiceFailure:
    """Convert a raised ``ServiceError`` into a ``ServiceFailure`` result."""

    return service_failure(
        code=error.code,
        message=error.message,
        step=step,
        recovery_hint=error.recovery_hint,
    )
