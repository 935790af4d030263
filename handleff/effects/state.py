"""State effect: ``get`` and ``put`` over a single threaded value.

The handler never stores the state. Its clauses only report which operation
suspended the computation, together with the continuation, and ``run`` loops
over those reports: it answers ``get`` with the current value and replaces
it on ``put``. Every ``State`` created by ``create_state`` is therefore
independent, instances nest freely, and a long run of operations resumes
one continuation per step without growing the Python stack.

Usage:
    state = create_state()

    def program():
        yield state.put(1)
        x = yield state.get()
        yield state.put(x + 1)
        return (yield state.get())

    execute(state.run(0, program))
    # == 2
"""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

from handleff.computation import Computation
from handleff.continuation import Continuation
from handleff.handler import handlers
from handleff.instance import new_effect_instance


@dataclass(frozen=True)
class _Get:
    k: Continuation


@dataclass(frozen=True)
class _Put:
    k: Continuation
    value: Any


@dataclass(frozen=True)
class _Done:
    value: Any


class State:
    def __init__(self) -> None:
        self.get = new_effect_instance("State#get")
        self.put = new_effect_instance("State#put")
        self._handler = handlers(_Done, {self.get: _Get, self.put: _Put})

    def run(self, init: Any, computation: Computation[Any]) -> Generator[Any, Any, Any]:
        """Run ``computation`` with ``init`` as the initial state."""
        state = init
        step = yield from self._handler(computation)
        while not isinstance(step, _Done):
            if isinstance(step, _Get):
                step = yield from step.k(state)
            else:
                state = step.value
                step = yield from step.k()
        return step.value

    def __repr__(self) -> str:
        return f"State(get={self.get}, put={self.put})"


def create_state() -> State:
    return State()


__all__ = ["State", "create_state"]
