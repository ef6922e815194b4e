"""
Retry, deadline and cancellation handling for Hestia calls.

``ResilientHestiaGateway`` wraps a ``HestiaGateway`` and retries transport
errors only. Application failures (the panel answered with a non-zero return
code) are returned as-is: re-sending a rejected command does not change the
answer, and some commands are not idempotent.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from django.conf import settings

from apps.common.types import Err, Result

from .hestia_commands import HestiaCommand
from .hestia_gateway import (
    HestiaAPIError,
    HestiaCancelledError,
    HestiaConfig,
    HestiaGateway,
    HestiaResponse,
    HestiaTransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_SECONDS = 0.5
MIN_CALL_TIMEOUT = 1.0  # seconds


class CancellationToken:
    """
    Cooperative cancellation flag shared by a workflow and its remote calls.

    A cancelled token stops calls from being dispatched; a call already on the
    wire is allowed to finish.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason = ""

    def cancel(self, reason: str = "cancelled") -> None:
        self.reason = reason
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; returns True if cancelled meanwhile"""
        return self._event.wait(seconds)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retries with exponential backoff: backoff * 2**attempt"""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS
    deadline_seconds: float | None = None  # Whole-call budget across attempts

    @classmethod
    def from_settings(cls) -> RetryPolicy:
        return cls(
            max_attempts=getattr(settings, "HESTIA_MAX_RETRIES", DEFAULT_MAX_ATTEMPTS),
            backoff_seconds=getattr(settings, "HESTIA_RETRY_BACKOFF_SECONDS", DEFAULT_BACKOFF_SECONDS),
            deadline_seconds=getattr(settings, "HESTIA_CALL_DEADLINE_SECONDS", None),
        )

    def delay_for(self, attempt: int) -> float:
        return (2**attempt) * self.backoff_seconds


class ResilientHestiaGateway:
    """
    Decorator around ``HestiaGateway.invoke`` adding retries, a per-call
    deadline and cancellation. Typed operations (``suspend_user`` etc.) are
    forwarded to the wrapped gateway's methods but routed through ``invoke``.
    """

    def __init__(
        self,
        gateway: HestiaGateway,
        policy: RetryPolicy | None = None,
        token: CancellationToken | None = None,
        sleep: Callable[[float], Any] | None = None,
    ):
        self.gateway = gateway
        self.policy = policy or RetryPolicy.from_settings()
        self.token = token or CancellationToken()
        self._sleep = sleep

    @classmethod
    def for_config(
        cls, config: HestiaConfig, token: CancellationToken | None = None, policy: RetryPolicy | None = None
    ) -> ResilientHestiaGateway:
        return cls(HestiaGateway(config), policy=policy, token=token)

    @property
    def config(self) -> HestiaConfig:
        return self.gateway.config

    def _wait(self, seconds: float) -> bool:
        if self._sleep is not None:
            self._sleep(seconds)
            return self.token.is_cancelled
        return self.token.wait(seconds)

    def invoke(self, command: HestiaCommand, timeout: float | None = None) -> Result[HestiaResponse, HestiaAPIError]:
        host = self.gateway.config.host
        started = time.monotonic()
        last_error: HestiaAPIError | None = None
        attempts = 0

        for attempt in range(self.policy.max_attempts):
            if self.token.is_cancelled:
                return Err(HestiaCancelledError(f"{command.program} cancelled: {self.token.reason}", host,
                                                command.program))

            call_timeout = timeout or self.gateway.config.timeout
            if self.policy.deadline_seconds is not None:
                remaining = self.policy.deadline_seconds - (time.monotonic() - started)
                if remaining < MIN_CALL_TIMEOUT:
                    break
                call_timeout = min(call_timeout, remaining)

            attempts += 1
            result = self.gateway.invoke(command, timeout=call_timeout)
            if result.is_ok():
                return result

            last_error = result.unwrap_err()
            if not isinstance(last_error, HestiaTransportError):
                return result

            logger.warning(
                f"⚠️ [Hestia] Attempt {attempt + 1}/{self.policy.max_attempts} for {command.program} failed: {last_error}"
            )

            if attempt < self.policy.max_attempts - 1 and self._wait(self.policy.delay_for(attempt)):
                return Err(HestiaCancelledError(f"{command.program} cancelled: {self.token.reason}", host,
                                                command.program))

        message = f"{command.program} failed after {attempts} attempt(s). Last error: {last_error}"
        if attempts < self.policy.max_attempts:
            deadline = self.policy.deadline_seconds
            message = f"{command.program} exceeded its {deadline}s deadline after {attempts} attempt(s)"
            if last_error is not None:
                message += f". Last error: {last_error}"
        logger.error(f"❌ [Hestia] {message}")
        return Err(HestiaTransportError(message, host, command.program))

    def __getattr__(self, name: str) -> Any:
        # Typed operations: run the wrapped gateway's method with invoke routed through the retry loop
        operation = getattr(type(self.gateway), name, None)
        if operation is None or not callable(operation):
            raise AttributeError(name)

        def call(*args: Any, **kwargs: Any) -> Any:
            return operation(self, *args, **kwargs)

        return call

    def close(self) -> None:
        self.gateway.close()
