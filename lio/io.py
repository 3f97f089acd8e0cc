"""LIO Library - Labeled I/O.

Sources and sinks are the boundary between labeled computations and the
outside world. There are too many I/O libraries to support them all, so the
caller supplies the reader and writer functions and this module labels what
comes in and checks what goes out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from .error import FlowViolationError
from .label import Labeled, label
from .lattice import BOT, TOP, Level
from .monad import LIO, Computation, Signature
from .witness import FlowWitness

logger = logging.getLogger(__name__)

In = TypeVar("In")
Out = TypeVar("Out")

Reader = Callable[[], In]
Writer = Callable[[Out], None]


@dataclass(frozen=True)
class Source(Generic[In]):
    """An L-labeled source: reading from it produces L-labeled data."""

    level: Level
    reader: Reader[In]


@dataclass(frozen=True)
class Sink(Generic[Out]):
    """An L-labeled sink: only data that can flow to L may be written."""

    level: Level
    writer: Writer[Out]


def src(level: Level, reader: Reader[In]) -> Source[In]:
    return Source(level, reader)


def snk(level: Level, writer: Writer[Out]) -> Sink[Out]:
    return Sink(level, writer)


def input_from(source: Source[In]) -> LIO[Labeled[In]]:
    """Reads from an L-source; the value is L-labeled.

    Reading raises no context (pc stays TOP).
    """

    def action() -> Labeled[In]:
        value = source.reader()
        logger.debug("Read from source at %r", source.level)
        return label(source.level, value)

    return LIO(action, pc=TOP, label=BOT, value_label=source.level)


class Output(Generic[Out]):
    """Writes labeled data to a sink.

    Calling the writer with labeled data checks the flow to the sink before
    building the write, so the sink's writer is never reached with data it
    may not see. Passing the writer itself to bind() lets the check happen
    when the chain is built.
    """

    operation = "output_to"

    def __init__(
        self,
        sink: Sink[Out],
        *,
        witness: Optional[FlowWitness] = None,
        condition: Optional[Labeled[Any]] = None,
        operation: Optional[str] = None,
    ) -> None:
        self.sink = sink
        self.witness = witness
        self.condition = condition
        if operation is not None:
            self.operation = operation
        if witness is not None and not witness.target.can_flow_to(sink.level):
            raise FlowViolationError(witness.target, sink.level, self.operation)
        if condition is not None:
            if not isinstance(condition, Labeled):
                raise TypeError(f"{self.operation}: condition must be Labeled")
            # Whether the write happens reveals the condition.
            if not condition.get_label().can_flow_to(sink.level):
                raise FlowViolationError(
                    condition.get_label(), sink.level, self.operation
                )

    def _guard(self, level: Level) -> None:
        allowed = level.can_flow_to(self.sink.level)
        if self.witness is not None:
            allowed = allowed and self.witness.covers(level, self.sink.level)
        if not allowed:
            raise FlowViolationError(level, self.sink.level, self.operation)
        logger.debug("%s: %r flows to sink at %r", self.operation, level, self.sink.level)

    def _context(self, level: Level) -> Level:
        if self.condition is None:
            return level
        return level.join(self.condition.get_label())

    def _should_write(self) -> bool:
        return self.condition is None or bool(self.condition.unsafe_get_value())

    def signature(self, level: Level) -> Signature:
        """Labels of the write for data at `level`.

        Raises:
            FlowViolationError: If `level` cannot flow to the sink.
        """
        self._guard(level)
        return Signature(pc=self._context(level), label=BOT, value_label=BOT)

    def __call__(self, data: Labeled[Out]) -> Computation[None]:
        if not isinstance(data, Labeled):
            raise TypeError(
                f"{self.operation}: expected Labeled data, got {type(data).__name__}"
            )
        level = data.get_label()
        self._guard(level)
        return self._build(data, self._context(level))

    def _build(self, data: Labeled[Out], pc: Level) -> Computation[None]:
        def action() -> None:
            if self._should_write():
                self.sink.writer(data.unsafe_get_value())
            return None

        return LIO(action, pc=pc, label=BOT, value_label=BOT, floor=self.sink.level)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sink at {self.sink.level!r})"


def output_to(sink: Sink[Out]) -> Output[Out]:
    """Writes data to an L-sink; data must be able to flow to L."""
    return Output(sink)


def output_with_witness(sink: Sink[Out], witness: FlowWitness) -> Output[Out]:
    """Like output_to, with the flow certified by an explicit witness.

    Raises:
        FlowViolationError: If the witness does not target the sink's level.
    """
    return Output(sink, witness=witness, operation="output_with_witness")


def conditional_output(sink: Sink[Out], condition: Labeled[bool]) -> Output[Out]:
    """Writes only when the labeled condition holds.

    Both the condition and the data must be able to flow to the sink.
    """
    return Output(sink, condition=condition, operation="conditional_output")
