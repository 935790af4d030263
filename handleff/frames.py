"""Frames on the machine's explicit stack.

The stack is a list with its top at the end. A ``GeneratorFrame`` is a
suspended generator waiting for a value (or an exception) from the frame
above it. A ``HandlerFrame`` delimits the scope of one handler: effects raised
above it may be answered by its clauses, and a value reaching it goes through
its return handler on the way down.
"""

from __future__ import annotations

import itertools
from collections.abc import Generator, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from handleff.handler import Handler

_frame_id_counter = itertools.count(1)


def _next_frame_id() -> int:
    return next(_frame_id_counter)


@dataclass(frozen=True)
class GeneratorFrame:
    generator: Generator[Any, Any, Any]
    frame_id: int = field(default_factory=_next_frame_id, compare=False)


@dataclass(frozen=True)
class HandlerFrame:
    handler: Handler
    frame_id: int = field(default_factory=_next_frame_id, compare=False)


Frame = Union[GeneratorFrame, HandlerFrame]


def close_frames(frames: Iterable[Frame]) -> None:
    """Close the generators in ``frames``, topmost first, so ``finally`` blocks run."""
    for frame in reversed(list(frames)):
        if isinstance(frame, GeneratorFrame):
            frame.generator.close()


__all__ = ["Frame", "GeneratorFrame", "HandlerFrame", "close_frames"]
