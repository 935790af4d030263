"""Effect libraries built on the public handleff primitives.

Each library is a set of effect instances plus a handler:

    - State: get/put with the state threaded through continuations
    - Prompt: shift0/reset delimited control
    - AsyncAwait: await Python awaitables, asynchronously or blocking
"""

from handleff.effects.async_await import AsyncAwait, create_async_await
from handleff.effects.prompt import Prompt, create_prompt
from handleff.effects.state import State, create_state

__all__ = [
    "AsyncAwait",
    "Prompt",
    "State",
    "create_async_await",
    "create_prompt",
    "create_state",
]
