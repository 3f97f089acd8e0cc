"""LIO Library - Asynchronous labeled computations.

AsyncLIO wraps a coroutine function instead of a thunk. The label rules are
those of lio.monad; only running a computation differs, which suspends on
the underlying I/O instead of blocking.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from .label import Labeled
from .lattice import BOT, TOP, Level, glb, lub
from .monad import (
    Computation,
    State,
    _box,
    _check_mapped,
    _check_step,
    _plan_bind,
    _require,
    _value_label,
)

logger = logging.getLogger(__name__)

V = TypeVar("V")
W = TypeVar("W")


class AsyncLIO(Computation[V]):
    """Asynchronous labeled computation wrapping a coroutine function."""

    __slots__ = ()

    async def _run(self) -> V:
        self._start()
        try:
            result = await self._action()
        except BaseException:
            self._state = State.FAILED
            raise
        self._state = State.SUCCEEDED
        return result


def ret_async(v: V) -> AsyncLIO[V]:
    """Lift a value: Top context (no effects), Bot data label (public)."""

    async def action() -> V:
        return v

    return AsyncLIO(action, pc=TOP, label=BOT, value_label=_value_label(v))


def unlabel_async(lv: Labeled[V]) -> AsyncLIO[Labeled[V]]:
    """Raise the context to the label of lv; the result stays labeled."""
    _require(lv, Labeled, "unlabel_async")
    level = lv.get_label()

    async def action() -> Labeled[V]:
        return lv

    return AsyncLIO(action, pc=level, label=BOT, value_label=level)


def bind_async(
    m: AsyncLIO[Any],
    f: Callable[[Any], AsyncLIO[W]],
    *,
    pc: Optional[Level] = None,
    label: Optional[Level] = None,
    value_label: Optional[Level] = None,
) -> AsyncLIO[W]:
    """Sequential composition, see lio.monad.bind.

    The continuation is only called once m has settled.

    Raises:
        FlowViolationError: If level(m) cannot flow to the context of f.
    """
    _require(m, AsyncLIO, "bind_async")
    signature, composed_pc, composed_label, composed_value = _plan_bind(
        m, f, pc, label, value_label, "bind_async"
    )

    async def action() -> W:
        result = await m._run()
        c = f(result)
        _check_step(m, result, c, AsyncLIO, signature, "bind_async")
        return await c._run()

    return AsyncLIO(
        action, pc=composed_pc, label=composed_label, value_label=composed_value
    )


def map_async(
    m: AsyncLIO[Labeled[V]], f: Callable[[Labeled[V]], Labeled[W]]
) -> AsyncLIO[Labeled[W]]:
    """Transform the yielded labeled value without lowering its label."""
    _require(m, AsyncLIO, "map_async")

    async def action() -> Labeled[W]:
        lv = await m._run()
        return _check_mapped(m, lv, f(lv), "map_async")

    return AsyncLIO(
        action, pc=m.pc, label=m.label, value_label=m.value_label, floor=m.floor
    )


def to_labeled_async(m: AsyncLIO[Labeled[V]]) -> AsyncLIO[Labeled[Labeled[V]]]:
    """Box the yielded labeled value with its own label."""
    _require(m, AsyncLIO, "to_labeled_async")

    async def action() -> Labeled[Labeled[V]]:
        return _box(m, await m._run(), "to_labeled_async")

    return AsyncLIO(action, pc=m.pc, label=BOT, value_label=m.level, floor=m.floor)


def sequence_async(ms: Sequence[AsyncLIO[V]]) -> AsyncLIO[List[V]]:
    """Run computations one after another, never overlapping."""
    ms = list(ms)
    for m in ms:
        _require(m, AsyncLIO, "sequence_async")

    async def action() -> List[V]:
        results = []
        for m in ms:
            results.append(await m._run())
        return results

    return AsyncLIO(
        action,
        pc=glb(*(m.pc for m in ms)),
        label=lub(*(m.label for m in ms)),
        value_label=lub(*(m.value_label for m in ms)),
    )


async def unsafe_run_async_lio(m: AsyncLIO[V]) -> V:
    """Run a computation and return its bare result.

    WARNING: This bypasses all security checks. Only use at trusted
    boundaries.
    """
    _require(m, AsyncLIO, "unsafe_run_async_lio")
    logger.info("Running computation at trusted boundary: pc=%r label=%r", m.pc, m.label)
    return await m._run()
