"""Handler engine: wraps a computation and dispatches the effects it yields.

A ``Handler`` pairs a return handler with a table of effect clauses keyed by
``EffectInstance``. Wrapping a computation with it produces a new generator
whose completion value is ``return_handler(result)`` and whose only visible
suspensions are the invocations no handler inside it owns, forwarded outward
as ``ResendInvocation`` records, and ``AsyncEscape`` requests.

The wrapping generator is a ``Machine``: a trampoline over an explicit stack
of frames. Generators never delegate to one another for dispatch or
resumption, so a long run of effects costs stack entries, not Python
recursion. Per value yielded by the top frame:

1. ``EffectInvocation``: the innermost ``HandlerFrame`` whose table owns the
   effect is found; the frames from it to the top become a direct
   continuation and the clause runs in their place. If no frame owns it, the
   whole stack is resent outward.
2. ``ResendInvocation`` from a nested machine: as above, with the resent
   continuation's frames stacked on top of the captured ones.
3. ``ResumeRequest``: the continuation's frames are pushed back on top of the
   requester.
4. ``AsyncEscape``: passed through; the reply goes back to the top frame.
5. Anything else: the frame is closed and ``InvalidInvocationError`` is raised
   at the frame below it.

Example:
    >>> write = inst("write")
    >>> def on_write(k, text):
    ...     print(text)
    ...     return (yield from k())
    >>> def main():
    ...     yield write("hello world")
    ...     return 1
    >>> execute(handler(write, lambda v: v, on_write)(main))
    hello world
    1
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Generator, Mapping
from typing import Any

from handleff.computation import Computation, to_generator
from handleff.continuation import Continuation, RehandledContinuation
from handleff.errors import InvalidInvocationError
from handleff.frames import Frame, GeneratorFrame, HandlerFrame, close_frames
from handleff.instance import EffectInstance
from handleff.invocation import (
    AsyncEscape,
    EffectInvocation,
    ResendInvocation,
    ResumeRequest,
)

logger = logging.getLogger(__name__)

ReturnHandler = Callable[[Any], Any]
EffectClause = Callable[..., Any]

# (failed, payload): the value or exception delivered to the top frame.
Outcome = tuple[bool, Any]


def _identity(value: Any) -> Any:
    return value


class Handler:
    """A return handler plus a clause table, applied to computations.

    A ``Handler`` is immutable configuration and can wrap any number of
    computations; calling it is the same as ``handle``, so it can be used
    wherever a wrap function ``computation -> generator`` is expected (for
    instance with ``combine_handlers``).

    Attributes:
        return_handler: Applied to the wrapped computation's result. Plain
            function or generator function; the identity when built with
            ``None``.
        clauses: Clause per ``EffectInstance``, called as ``clause(k, *args)``
            with a one-shot continuation ``k``. Plain functions or generator
            functions.
    """

    def __init__(
        self,
        return_handler: ReturnHandler | None,
        clauses: Mapping[EffectInstance, EffectClause],
    ) -> None:
        for effect in clauses:
            if not isinstance(effect, EffectInstance):
                raise TypeError(
                    f"Handler clauses must be keyed by EffectInstance, got {type(effect).__name__}"
                )
        self.return_handler: ReturnHandler = return_handler or _identity
        self.clauses: dict[EffectInstance, EffectClause] = dict(clauses)

    def __call__(self, computation: Computation[Any]) -> Generator[Any, Any, Any]:
        return self.handle(computation)

    def handle(self, computation: Computation[Any]) -> Generator[Any, Any, Any]:
        """Wrap ``computation``; the returned generator runs it under this handler."""
        frames: list[Frame] = [HandlerFrame(self), GeneratorFrame(to_generator(computation))]
        return Machine(frames, owner=self).run()

    def __repr__(self) -> str:
        effects = ", ".join(str(effect) for effect in self.clauses)
        return f"Handler({effects})"


class Machine:
    """Trampoline that steps the top frame of an explicit stack until it is empty.

    ``run`` is itself a generator: whatever no frame on the stack can answer
    (unowned effects as resends, and async escapes) is yielded to whoever
    drives the machine, and the reply is fed back in.
    """

    def __init__(self, frames: list[Frame], owner: Handler | None = None) -> None:
        self.stack = frames
        self.owner = owner

    def run(self) -> Generator[Any, Any, Any]:
        stack = self.stack
        failed, payload = False, None
        while True:
            if not stack:
                if failed:
                    raise payload
                return payload

            frame = stack[-1]
            if isinstance(frame, HandlerFrame):
                stack.pop()
                if not failed:
                    failed, payload = self._call(frame.handler.return_handler, payload)
                continue

            generator = frame.generator
            try:
                op = generator.throw(payload) if failed else generator.send(payload)
            except StopIteration as stop:
                stack.pop()
                failed, payload = False, stop.value
                continue
            except Exception as exc:
                stack.pop()
                failed, payload = True, exc
                continue

            if isinstance(op, ResumeRequest):
                stack.extend(op.continuation.frames)
                if op.error is not None:
                    failed, payload = True, op.error
                else:
                    failed, payload = False, op.value
            elif isinstance(op, (EffectInvocation, ResendInvocation)):
                failed, payload = yield from self._dispatch(op)
            elif isinstance(op, AsyncEscape):
                try:
                    failed, payload = False, (yield op)
                except GeneratorExit:
                    close_frames(stack)
                    raise
                except Exception as exc:
                    failed, payload = True, exc
            else:
                stack.pop()
                generator.close()
                failed, payload = True, InvalidInvocationError(op)

    def _dispatch(
        self, op: EffectInvocation | ResendInvocation
    ) -> Generator[Any, Any, Outcome]:
        stack = self.stack
        inner: Continuation | None = None
        if isinstance(op, ResendInvocation):
            inner = op.continuation
            inner.mark_consumed()

        index = self._owner_index(op.effect)
        if index is None:
            k = self._capture(0, inner)
            if inner is None:
                logger.debug("%r resends %s", self, op.effect)
            else:
                logger.debug("%r passes resent %s outward", self, op.effect)
            try:
                return False, (yield ResendInvocation(op.effect, op.args, k, op.context))
            except Exception as exc:
                return True, exc

        frame = stack[index]
        assert isinstance(frame, HandlerFrame)
        layer = frame.handler
        k = self._capture(index, inner)
        if inner is None:
            logger.debug("%r handles %s", layer, op.effect)
        else:
            logger.debug("%r handles resent %s", layer, op.effect)
        return self._call(layer.clauses[op.effect], k, *op.args)

    def _owner_index(self, effect: EffectInstance) -> int | None:
        stack = self.stack
        for index in range(len(stack) - 1, -1, -1):
            frame = stack[index]
            if isinstance(frame, HandlerFrame) and effect in frame.handler.clauses:
                return index
        return None

    def _capture(self, index: int, inner: Continuation | None) -> Continuation:
        frames = self.stack[index:]
        del self.stack[index:]
        if inner is None:
            return Continuation(frames)
        return RehandledContinuation(frames + list(inner.frames), inner)

    def _call(self, function: Callable[..., Any], *args: Any) -> Outcome:
        try:
            result = function(*args)
        except Exception as exc:
            return True, exc
        if inspect.isgenerator(result):
            self.stack.append(GeneratorFrame(result))
            return False, None
        return False, result

    def __repr__(self) -> str:
        return f"Machine({self.owner!r})"


def handler(
    effect: EffectInstance,
    return_handler: ReturnHandler | None,
    effect_handler: EffectClause,
) -> Handler:
    """Return a handler for a single effect.

    Shortcut for ``handlers(return_handler, {effect: effect_handler})``.
    """
    return handlers(return_handler, {effect: effect_handler})


def handlers(
    return_handler: ReturnHandler | None,
    table: Mapping[EffectInstance, EffectClause],
) -> Handler:
    """Return a handler for the effects in ``table``.

    Args:
        return_handler: Called with the wrapped computation's result. May be a
            plain function or a generator function. ``None`` returns the
            result unchanged.
        table: Clause per effect. Each clause is called as
            ``clause(k, *args)`` where ``k`` is a one-shot continuation.

    Returns:
        Handler, callable as the wrap function ``computation -> generator``.
    """
    return Handler(return_handler, table)


__all__ = ["EffectClause", "Handler", "Machine", "ReturnHandler", "handler", "handlers"]
