"""Execution drivers for fully handled computations.

``execute`` runs a computation whose effects are all handled and returns its
result. ``execute_async`` additionally satisfies ``AsyncEscape`` suspensions
by awaiting them on the running event loop.

Both drivers run the computation inside a top-level ``Machine`` with no
handler frames, so continuations resumed outside any handler (for instance by
``State.run`` after its handler has returned) are still trampolined. They are
the only place where a suspension reaching the top is an error instead of a
resend.
"""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from typing import Any, TypeVar

from loguru import logger as loguru_logger

from handleff.computation import Computation, to_generator
from handleff.errors import HandleffError, InvalidInvocationError, UncaughtEffectError
from handleff.frames import GeneratorFrame
from handleff.handler import Machine
from handleff.invocation import AsyncEscape, ResendInvocation, is_invocation

T = TypeVar("T")

logger = loguru_logger.bind(component="run")


def _start(computation: Computation[Any]) -> Generator[Any, Any, Any]:
    return Machine([GeneratorFrame(to_generator(computation))]).run()


def _escaped(machine: Generator[Any, Any, Any], op: Any) -> HandleffError:
    if isinstance(op, ResendInvocation):
        op.continuation.close()
    machine.close()
    if is_invocation(op):
        logger.debug("uncaught effect {} reached the top", op.effect)
        return UncaughtEffectError(op)
    if isinstance(op, AsyncEscape):
        return InvalidInvocationError(
            op, hint="computations that await external sources must run with execute_async()"
        )
    return InvalidInvocationError(op)


def execute(computation: Computation[T]) -> T:
    """Run ``computation`` to completion and return its result.

    Raises:
        UncaughtEffectError: An effect or resend invocation reached the top.
        InvalidInvocationError: The computation yielded anything else,
            including an ``AsyncEscape``.
    """
    machine = _start(computation)
    try:
        op = next(machine)
    except StopIteration as stop:
        logger.debug("execute completed with {!r}", stop.value)
        return stop.value
    raise _escaped(machine, op)


async def execute_async(computation: Computation[T]) -> T:
    """Run ``computation`` to completion, awaiting its ``AsyncEscape`` requests.

    Awaited values are sent back into the computation; awaited exceptions are
    thrown back in at the same point. Control returns to the event loop between
    steps.

    Raises:
        UncaughtEffectError: An effect or resend invocation reached the top.
        InvalidInvocationError: The computation yielded anything else.
    """
    machine = _start(computation)
    step = machine.send
    arg: Any = None
    steps = 0
    while True:
        try:
            op = step(arg)
        except StopIteration as stop:
            logger.debug(
                "execute_async completed with {!r} after {} escapes", stop.value, steps
            )
            return stop.value

        if not isinstance(op, AsyncEscape):
            raise _escaped(machine, op)

        steps += 1
        logger.debug("escape {}: awaiting {!r}", steps, op.action)
        try:
            step, arg = machine.send, await op.action()
        except Exception as exc:
            logger.debug("escape {}: awaitable failed with {!r}", steps, exc)
            step, arg = machine.throw, exc
        await asyncio.sleep(0)


__all__ = ["execute", "execute_async"]
