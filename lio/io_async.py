"""LIO Library - Asynchronous labeled I/O.

Async counterparts of lio.io, plus concurrent reads from several sources and
writes guarded by a labeled condition.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterable, List, TypeVar

from .label import Labeled, label
from .lattice import BOT, TOP, Level, lub
from .io import Output
from .monad_async import AsyncLIO
from .witness import FlowWitness

logger = logging.getLogger(__name__)

In = TypeVar("In")
Out = TypeVar("Out")

AsyncReader = Callable[[], Awaitable[In]]
AsyncWriter = Callable[[Out], Awaitable[None]]


@dataclass(frozen=True)
class AsyncSource(Generic[In]):
    """An L-labeled source read by a coroutine function."""

    level: Level
    reader: AsyncReader[In]


@dataclass(frozen=True)
class AsyncSink(Generic[Out]):
    """An L-labeled sink written by a coroutine function."""

    level: Level
    writer: AsyncWriter[Out]


def async_src(level: Level, reader: AsyncReader[In]) -> AsyncSource[In]:
    return AsyncSource(level, reader)


def async_snk(level: Level, writer: AsyncWriter[Out]) -> AsyncSink[Out]:
    return AsyncSink(level, writer)


async def _read(source: AsyncSource[In]) -> Labeled[In]:
    value = await source.reader()
    logger.debug("Read from source at %r", source.level)
    return label(source.level, value)


def input_async(source: AsyncSource[In]) -> AsyncLIO[Labeled[In]]:
    """Reads from an L-source; the value is L-labeled."""

    async def action() -> Labeled[In]:
        return await _read(source)

    return AsyncLIO(action, pc=TOP, label=BOT, value_label=source.level)


class AsyncOutput(Output[Out]):
    """Output whose write awaits the sink's coroutine writer."""

    operation = "output_async"

    def _build(self, data: Labeled[Out], pc: Level) -> AsyncLIO[None]:
        async def action() -> None:
            if self._should_write():
                await self.sink.writer(data.unsafe_get_value())
            return None

        return AsyncLIO(
            action, pc=pc, label=BOT, value_label=BOT, floor=self.sink.level
        )


def output_async(sink: AsyncSink[Out]) -> AsyncOutput[Out]:
    """Writes data to an L-sink; data must be able to flow to L."""
    return AsyncOutput(sink)


def output_async_explicit(
    sink: AsyncSink[Out], witness: FlowWitness
) -> AsyncOutput[Out]:
    """Like output_async, with the flow certified by an explicit witness."""
    return AsyncOutput(sink, witness=witness, operation="output_async_explicit")


def conditional_output_async(
    sink: AsyncSink[Out], condition: Labeled[bool]
) -> AsyncOutput[Out]:
    """Writes only when the labeled condition holds.

    The condition must be able to flow to the sink as well as the data:
    whether a write happens is itself observable at the sink.

    Raises:
        FlowViolationError: If the condition cannot flow to the sink.
    """
    return AsyncOutput(
        sink, condition=condition, operation="conditional_output_async"
    )


def parallel_input_async(
    sources: Iterable[AsyncSource[In]],
) -> AsyncLIO[List[Labeled[In]]]:
    """Reads all sources concurrently.

    Results keep the order of `sources` whatever order the reads finish in,
    each labeled at its own source's level; the list as a whole is bounded
    by the join of those levels. If a read fails the whole computation fails
    with that error; the other reads are not cancelled.
    """
    sources = list(sources)

    async def action() -> List[Labeled[In]]:
        return list(await asyncio.gather(*(_read(source) for source in sources)))

    return AsyncLIO(
        action, pc=TOP, label=BOT, value_label=lub(*(s.level for s in sources))
    )
