"""shift0/reset delimited control.

``reset`` installs a prompt; ``shift0(f)`` captures the continuation up to the
nearest enclosing ``reset`` of the same prompt and calls ``f(k)`` in place of
the whole delimited computation. ``f`` is a generator function and may resume
``k`` at most once with ``yield from k(value)``.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

from handleff.computation import Computation
from handleff.continuation import Continuation
from handleff.handler import handler
from handleff.instance import new_effect_instance

Body = Callable[[Continuation], Any]


class Prompt:
    def __init__(self) -> None:
        self.shift0_effect = new_effect_instance("Shift0Reset#shift0")
        self._handler = handler(self.shift0_effect, None, lambda k, f: f(k))

    def shift0(self, f: Body) -> Generator[Any, Any, Any]:
        return (yield self.shift0_effect(f))

    def reset(self, computation: Computation[Any]) -> Generator[Any, Any, Any]:
        return self._handler(computation)


def create_prompt() -> Prompt:
    return Prompt()


__all__ = ["Body", "Prompt", "create_prompt"]
