"""
Step policies for multi-step lifecycle workflows.

A workflow is a sequence of remote steps. A BLOCKING step that fails aborts
the workflow before any local write; a BEST_EFFORT step that fails is recorded
and the workflow carries on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from apps.common.exceptions import LifecycleError, RemoteOperationError, RemoteTransportError
from apps.common.types import Err, Ok, Result

from .hestia_commands import HestiaCommand
from .hestia_gateway import (
    FORBIDDEN_GUIDANCE,
    TRANSPORT_GUIDANCE,
    HestiaAPIError,
    HestiaCancelledError,
    HestiaConfigurationError,
    HestiaResponse,
    HestiaResponseTooLargeError,
)

logger = logging.getLogger(__name__)

RESPONSE_TOO_LARGE_MESSAGE = "Hestia response exceeded the size limit"


class StepPolicy(Enum):
    BLOCKING = "blocking"
    BEST_EFFORT = "best_effort"


@dataclass(frozen=True)
class StepOutcome:
    """Result of one remote step"""

    command: str
    policy: StepPolicy
    success: bool
    error: str = ""
    response: HestiaResponse | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"command": self.command, "success": self.success, "error": self.error or None}


@dataclass(frozen=True)
class DomainResult:
    """Per-website outcome of a best-effort domain step"""

    domain: str
    success: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"domain": self.domain, "success": self.success, "error": self.error}


@dataclass
class StepLog:
    """Ordered record of the steps a workflow ran"""

    steps: list[StepOutcome] = field(default_factory=list)

    def record(self, outcome: StepOutcome) -> StepOutcome:
        self.steps.append(outcome)
        return outcome

    @property
    def failed(self) -> list[StepOutcome]:
        return [step for step in self.steps if not step.success]

    def to_list(self) -> list[dict[str, Any]]:
        return [step.to_dict() for step in self.steps]


def to_lifecycle_error(error: HestiaAPIError | HestiaResponse) -> LifecycleError:
    """Translate a gateway failure into the lifecycle error taxonomy"""
    if isinstance(error, HestiaResponse):
        hint = FORBIDDEN_GUIDANCE if error.is_forbidden else ""
        return RemoteOperationError(
            error.error or error.error_message, return_code=error.return_code, forbidden=error.is_forbidden, hint=hint
        )
    if isinstance(error, HestiaConfigurationError):
        return RemoteOperationError(str(error))
    if isinstance(error, HestiaResponseTooLargeError):
        return RemoteOperationError(f"{RESPONSE_TOO_LARGE_MESSAGE} ({error})")
    if isinstance(error, HestiaCancelledError):
        return RemoteTransportError(str(error))
    return RemoteTransportError(TRANSPORT_GUIDANCE, detail=str(error))


def run_step(
    gateway: Any,
    command: HestiaCommand,
    policy: StepPolicy,
    log: StepLog | None = None,
) -> Result[StepOutcome, LifecycleError]:
    """
    Execute one remote step under ``policy``.

    BLOCKING failures come back as ``Err``; BEST_EFFORT failures come back as
    ``Ok(StepOutcome(success=False))`` so the caller records and continues.
    """
    result = gateway.invoke(command)

    if result.is_ok() and result.unwrap().success:
        outcome = StepOutcome(command.program, policy, True, response=result.unwrap())
        if log is not None:
            log.record(outcome)
        return Ok(outcome)

    failure = result.unwrap() if result.is_ok() else result.unwrap_err()
    error = to_lifecycle_error(failure)
    outcome = StepOutcome(
        command.program,
        policy,
        False,
        error=error.message,
        response=failure if isinstance(failure, HestiaResponse) else None,
    )
    if log is not None:
        log.record(outcome)

    if policy is StepPolicy.BLOCKING:
        logger.warning(f"⚠️ [Lifecycle] Blocking step {command.program} failed: {error.message}")
        return Err(error)

    logger.warning(f"⚠️ [Lifecycle] Best-effort step {command.program} failed: {error.message}")
    return Ok(outcome)
