"""One-shot continuations handed to effect handler clauses.

A continuation is the slice of the machine stack captured when an effect was
dispatched: every frame from the owning handler's ``HandlerFrame`` up to the
generator that yielded the effect. Calling it returns a generator the handler
clause delegates to::

    def clause(k, *args):
        result = yield from k(value)
        ...

That generator yields a single ``ResumeRequest``; the machine running the
clause pushes the captured frames back and answers the request with the
value the resumed slice finishes with.

One-shot invariant: the consumed flag is checked and set when the
continuation is called, not when the returned generator is first advanced.
A second call raises ``DoubleResumeError``; the first call's run is left
untouched. The flag is a ``threading.Lock`` acquired without blocking and
never released, which gives an atomic test-and-set for continuations raced
from two threads.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Generator, Iterable
from typing import Any

from handleff.errors import DoubleResumeError
from handleff.frames import Frame, GeneratorFrame, close_frames
from handleff.invocation import ResumeRequest

logger = logging.getLogger(__name__)

_continuation_id_counter = itertools.count(1)


def _request(request: ResumeRequest) -> Generator[Any, Any, Any]:
    return (yield request)


class Continuation:
    """Direct continuation: resumes the computation under the handler that caught it.

    Attributes:
        cont_id: Process-wide id, shown in ``repr``.
        frames: Captured stack slice, bottom first. The first frame is the
            owning handler's ``HandlerFrame``, so the handler is back in scope
            once the continuation is resumed.
    """

    def __init__(self, frames: Iterable[Frame]) -> None:
        self.cont_id = next(_continuation_id_counter)
        self.frames: tuple[Frame, ...] = tuple(frames)
        self._consumed = threading.Lock()

    @property
    def consumed(self) -> bool:
        return self._consumed.locked()

    def mark_consumed(self) -> None:
        """Take the continuation, or raise ``DoubleResumeError`` if it was taken."""
        if not self._consumed.acquire(blocking=False):
            raise DoubleResumeError(self)

    def resume(self, value: Any = None) -> Generator[Any, Any, Any]:
        """Resume the suspended computation with ``value``."""
        self.mark_consumed()
        logger.debug("%r resumed with %r", self, value)
        return _request(ResumeRequest(self, value))

    def throw(self, error: BaseException) -> Generator[Any, Any, Any]:
        """Resume the suspended computation by raising ``error`` at its yield."""
        self.mark_consumed()
        logger.debug("%r resumed with error %r", self, error)
        return _request(ResumeRequest(self, error=error))

    def __call__(self, value: Any = None) -> Generator[Any, Any, Any]:
        return self.resume(value)

    def close(self) -> None:
        """Close the captured generators without resuming them."""
        close_frames(self.frames)

    def __repr__(self) -> str:
        name = "?"
        for frame in reversed(self.frames):
            if isinstance(frame, GeneratorFrame):
                generator = frame.generator
                name = getattr(generator, "__qualname__", type(generator).__name__)
                break
        state = "consumed" if self.consumed else "pending"
        return f"<{type(self).__name__} #{self.cont_id} {name} {state}>"


class RehandledContinuation(Continuation):
    """Continuation for an effect that an inner handler layer resent.

    ``inner`` is the continuation the resend carried. Its frames sit on top of
    the frames captured by this layer, so resuming runs the inner computation
    with every handler between it and this layer back in scope. Effects raised
    after the resend is resolved are dispatched against those handlers again
    before escaping further.
    """

    def __init__(self, frames: Iterable[Frame], inner: Continuation) -> None:
        super().__init__(frames)
        self.inner = inner


__all__ = ["Continuation", "RehandledContinuation"]
