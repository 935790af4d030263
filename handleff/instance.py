"""Effect instances: unique runtime tags used as handler dispatch keys."""

from __future__ import annotations

import itertools
from typing import Any

from handleff import utils
from handleff.invocation import EffectInvocation

_uid_counter = itertools.count(0)


class EffectInstance:
    """An opaque effect tag.

    Instances compare and hash by identity, so two instances created with the
    same name are still distinct effects. Calling an instance builds the
    invocation record a computation yields::

        get = new_effect_instance("State#get")
        value = yield get()
    """

    __slots__ = ("uid", "name")

    def __init__(self, name: str = "") -> None:
        self.uid = next(_uid_counter)
        self.name = name

    def __call__(self, *args: Any) -> EffectInvocation:
        context = utils.capture_creation_context() if utils.DEBUG_EFFECTS else None
        return EffectInvocation(effect=self, args=args, context=context)

    def __str__(self) -> str:
        if self.name:
            return f"inst#{self.uid}({self.name})"
        return f"inst#{self.uid}"

    __repr__ = __str__


def new_effect_instance(name: str = "") -> EffectInstance:
    """Return a new effect instance.

    Args:
        name: Optional name, only used in diagnostics.

    Returns:
        EffectInstance distinct from every other instance in the process.
    """
    return EffectInstance(name)


inst = new_effect_instance


__all__ = ["EffectInstance", "inst", "new_effect_instance"]
