"""Adapters between user code and the generator protocol the engine drives."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Generator
from typing import Any, TypeVar, Union, cast

T = TypeVar("T")

Computation = Union[Generator[Any, Any, T], Callable[[], Generator[Any, Any, T]]]


def to_generator(computation: Computation[T]) -> Generator[Any, Any, T]:
    if inspect.isgenerator(computation):
        return cast(Generator[Any, Any, T], computation)
    if callable(computation):
        result = computation()
        if inspect.isgenerator(result):
            return cast(Generator[Any, Any, T], result)
        raise TypeError(f"Callable did not return a generator, got {type(result).__name__}")
    raise TypeError(f"Cannot convert {type(computation).__name__} to generator")


__all__ = ["Computation", "to_generator"]
