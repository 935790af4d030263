"""Compose several wrap functions into one, innermost argument applied innermost."""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

from handleff.computation import Computation, to_generator

Wrap = Callable[[Computation[Any]], Generator[Any, Any, Any]]


def _identity_wrap(computation: Computation[Any]) -> Generator[Any, Any, Any]:
    return (yield from to_generator(computation))


def combine_handlers(*wraps: Wrap) -> Wrap:
    """Combine handlers into a single wrap function.

    ``combine_handlers(h1, h2, h3)(c)`` behaves as ``h1(lambda: h2(lambda: h3(c)))``:
    ``h3`` sees the effects of ``c`` first, ``h1`` last. With no handlers the
    result delegates to ``c`` unchanged.
    """
    if not wraps:
        return _identity_wrap

    head, *rest = wraps
    inner = combine_handlers(*rest)

    def combined(computation: Computation[Any]) -> Generator[Any, Any, Any]:
        return head(lambda: inner(computation))

    return combined


__all__ = ["Wrap", "combine_handlers"]
