"""
handleff - Algebraic effect handlers for Python generators.

A computation is a generator that yields effect invocations. A handler wraps
it, answers the effects it owns through one-shot continuations, and resends
everything else to the handler around it.

Example:
    >>> from handleff import execute, handlers, inst
    >>>
    >>> ask = inst("ask")
    >>>
    >>> def main():
    ...     name = yield ask()
    ...     return f"hello {name}"
    >>>
    >>> with_name = handlers(None, {ask: lambda k: k("world")})
    >>> execute(with_name(main))
    'hello world'
"""

from loguru import logger as _loguru_logger

from handleff.combine import combine_handlers
from handleff.computation import Computation, to_generator
from handleff.continuation import Continuation, RehandledContinuation
from handleff.errors import (
    DoubleResumeError,
    HandleffError,
    InvalidInvocationError,
    UncaughtEffectError,
)
from handleff.handler import Handler, Machine, handler, handlers
from handleff.instance import EffectInstance, inst, new_effect_instance
from handleff.invocation import (
    AsyncEscape,
    CreationContext,
    EffectInvocation,
    ResendInvocation,
    ResumeRequest,
    is_invocation,
)
from handleff.run import execute, execute_async

# Library logging stays silent until the application opts in.
_loguru_logger.disable("handleff")

__all__ = [
    "AsyncEscape",
    "Computation",
    "Continuation",
    "CreationContext",
    "DoubleResumeError",
    "EffectInstance",
    "EffectInvocation",
    "HandleffError",
    "Handler",
    "InvalidInvocationError",
    "Machine",
    "RehandledContinuation",
    "ResendInvocation",
    "ResumeRequest",
    "UncaughtEffectError",
    "combine_handlers",
    "execute",
    "execute_async",
    "handler",
    "handlers",
    "inst",
    "is_invocation",
    "new_effect_instance",
    "to_generator",
]
