"""Error types raised by the handler engine and the execution driver."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from handleff.continuation import Continuation
    from handleff.invocation import EffectInvocation, ResendInvocation


class HandleffError(Exception):
    """Base class for every error raised by handleff itself."""


class DoubleResumeError(HandleffError):
    """Raised when a one-shot continuation is resumed a second time."""

    def __init__(self, continuation: Continuation) -> None:
        self.continuation = continuation
        super().__init__(f"continuation cannot be called twice: {continuation!r}")


class InvalidInvocationError(HandleffError):
    """Raised when a computation yields something that is not an invocation.

    Attributes:
        value: The offending yielded value.
    """

    def __init__(self, value: Any, hint: str | None = None) -> None:
        self.value = value
        message = f"invalid invocation is found: {value!r}"
        if hint:
            message = f"{message}\nHint: {hint}"
        super().__init__(message)


class UncaughtEffectError(HandleffError):
    """Raised when an effect reaches ``execute`` without a matching handler."""

    def __init__(self, invocation: EffectInvocation | ResendInvocation) -> None:
        self.invocation = invocation
        self.effect = invocation.effect
        message = f"uncaught effect is found: {invocation.effect}"
        if invocation.context is not None:
            message = f"{message}\n  raised at {invocation.context.format()}"
        super().__init__(message)


__all__ = [
    "DoubleResumeError",
    "HandleffError",
    "InvalidInvocationError",
    "UncaughtEffectError",
]
