"""Suspension records a computation can yield to its handlers.

Three shapes exist:

- ``EffectInvocation``: a fresh request, built by calling an effect instance.
- ``ResendInvocation``: a request an inner handler layer did not own, carrying
  the continuation an outer layer resumes as if it had been invoked directly.
- ``AsyncEscape``: a request to wait on an external awaitable. Handler layers
  pass it through untouched; only ``execute_async`` can satisfy it.

``ResumeRequest`` is not a suspension: it is how a continuation asks the
machine running it to push the continuation's frames.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from handleff.continuation import Continuation
    from handleff.instance import EffectInstance


@dataclass(frozen=True)
class CreationContext:
    """
    Location where an effect invocation was created.

    Attributes:
        filename: Source file path.
        line: Line number in the source file.
        function: Function name where the effect was invoked.
        code: Optional source code snippet.
    """

    filename: str
    line: int
    function: str
    code: str | None = None

    def format(self) -> str:
        """Format as 'filename:line in function'."""
        return f"{self.filename}:{self.line} in {self.function}"


@dataclass(frozen=True)
class EffectInvocation:
    effect: EffectInstance
    args: tuple[Any, ...] = ()
    context: CreationContext | None = None

    def __repr__(self) -> str:
        return f"EffectInvocation({self.effect}, args={self.args!r})"


@dataclass(frozen=True)
class ResendInvocation:
    effect: EffectInstance
    args: tuple[Any, ...]
    continuation: Continuation
    context: CreationContext | None = None

    def __repr__(self) -> str:
        return f"ResendInvocation({self.effect}, args={self.args!r})"


@dataclass(frozen=True)
class AsyncEscape:
    """Suspend the whole computation until ``action()`` has been awaited.

    The awaited value is sent back to whoever yielded the escape. If the
    awaitable raises, the exception is thrown back at the same point.
    """

    action: Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class ResumeRequest:
    """Ask the machine driving this generator to resume ``continuation``.

    Built by ``Continuation.resume`` and ``Continuation.throw``. The machine
    pushes the continuation's frames on top of the requester, so resuming adds
    no Python stack depth. ``error``, when set, is raised at the suspension
    point instead of sending ``value``.
    """

    continuation: Continuation
    value: Any = None
    error: BaseException | None = None


def is_invocation(value: Any) -> bool:
    return isinstance(value, (EffectInvocation, ResendInvocation))


__all__ = [
    "AsyncEscape",
    "CreationContext",
    "EffectInvocation",
    "ResendInvocation",
    "ResumeRequest",
    "is_invocation",
]
