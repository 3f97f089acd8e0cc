"""LIO Library - Labeled values.

Provides Labeled, an opaque pairing of a Level and a value, and the
operations to create, inspect and upclassify it.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from .error import FlowViolationError
from .lattice import Level

V = TypeVar("V")


class Labeled(Generic[V]):
    """A value bound to a label.

    The label and value live in closure scope. They can only be reached
    through get_label() and unsafe_get_value(); there is no attribute,
    positional or pickling access path.
    """

    __slots__ = ("get_label", "unsafe_get_value")

    get_label: Callable[[], Level]
    unsafe_get_value: Callable[[], V]

    def __init__(self, level: Level, value: V) -> None:
        if not isinstance(level, Level):
            raise TypeError(f"Expected a Level, got {type(level).__name__}")

        def get_label() -> Level:
            """Get the label (safe operation)."""
            return level

        def unsafe_get_value() -> V:
            """WARNING: extracts the raw value, bypassing flow control."""
            return value

        object.__setattr__(self, "get_label", get_label)
        object.__setattr__(self, "unsafe_get_value", unsafe_get_value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Labeled values are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Labeled values are immutable")

    def __reduce_ex__(self, protocol: Any) -> Any:
        raise TypeError("Labeled values cannot be pickled or copied")

    def __repr__(self) -> str:
        return f"Labeled({self.get_label()!r}, <hidden>)"


def label(level: Level, value: V) -> Labeled[V]:
    """Attaches a label to a value."""
    return Labeled(level, value)


def label_of(lv: Labeled[Any]) -> Level:
    """Projects labeled-value to the label."""
    return lv.get_label()


def unsafe_value_of(lv: Labeled[V]) -> V:
    """Projects labeled-value to the value.

    WARNING: this is UNSAFE because it circumvents information flow control.
    """
    return lv.unsafe_get_value()


def up_label(target: Level, lv: Labeled[V]) -> Labeled[V]:
    """Up-classify the label of a labeled value.

    Raises:
        FlowViolationError: If the current label cannot flow to target.
    """
    current = lv.get_label()
    if not current.can_flow_to(target):
        raise FlowViolationError(current, target, "up_label")
    return Labeled(target, lv.unsafe_get_value())
