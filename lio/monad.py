"""LIO Library - Labeled computations.

Provides LIO, a single-shot deferred computation carrying a control-context
label (pc) and a data label, and the operations composing it.

Labels are fixed when a computation is constructed and are only used to
constrain composition; the deferred action never consults them. Every
composition checks its flow constraint when it is built, before anything
runs:

- bind(m, f) requires level(m) ⊑ pc(f), where level(m) joins the data label
  of m with the label of the labeled value m yields.
- The composed pc is the meet of both contexts, the data label their join.

Continuations are plain functions, so the labels of the computation they
return are declared through a Signature. When the continuation is reached,
bind re-checks the flow with the actual label of the value and verifies the
returned computation against that Signature before starting it.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from .error import ComputationStateError, FlowViolationError
from .label import Labeled, label
from .lattice import BOT, TOP, Level, glb, lub

logger = logging.getLogger(__name__)

V = TypeVar("V")
W = TypeVar("W")


class State(enum.Enum):
    UNSTARTED = "unstarted"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Signature:
    """Declared labels of the computation a continuation returns.

    Labels left out here default to TOP, admitting any returned computation.
    bind() fills labels a continuation does not declare with the level of the
    incoming computation instead.
    """

    pc: Level
    label: Level = TOP
    value_label: Level = TOP

    def check(self, c: Computation[Any], operation: str) -> None:
        """Verify a returned computation against the declaration.

        Raises:
            FlowViolationError: If c runs under a lower context or produces
                more restricted data than declared.
        """
        if not self.pc.can_flow_to(c.floor):
            raise FlowViolationError(self.pc, c.floor, f"{operation} (context)")
        if not c.label.can_flow_to(self.label):
            raise FlowViolationError(c.label, self.label, f"{operation} (data)")
        if not c.value_label.can_flow_to(self.value_label):
            raise FlowViolationError(
                c.value_label, self.value_label, f"{operation} (value)"
            )


class Continuation(Generic[V, W]):
    """A continuation with declared labels, see continuation()."""

    def __init__(
        self,
        fn: Callable[[V], W],
        pc: Optional[Level] = None,
        label: Optional[Level] = None,
        value_label: Optional[Level] = None,
    ) -> None:
        self.fn = fn
        self.pc = pc
        self.label = label
        self.value_label = value_label

    def __call__(self, value: V) -> W:
        return self.fn(value)

    def signature(self, level: Level) -> Signature:
        """Declared labels; undeclared ones follow the incoming data."""
        return Signature(
            pc=level if self.pc is None else self.pc,
            label=level if self.label is None else self.label,
            value_label=level if self.value_label is None else self.value_label,
        )

    def __repr__(self) -> str:
        return (
            f"Continuation({self.fn!r}, pc={self.pc!r}, label={self.label!r},"
            f" value_label={self.value_label!r})"
        )


def continuation(
    pc: Optional[Level] = None,
    label: Optional[Level] = None,
    value_label: Optional[Level] = None,
) -> Callable[[Callable[[V], W]], Continuation[V, W]]:
    """Decorator declaring the labels of the computation a function returns.

    Example:
        @continuation(pc=alice, label=BOT, value_label=BOT)
        def publish(lv):
            return output_to(alice_sink)(lv)
    """
    def wrap(fn: Callable[[V], W]) -> Continuation[V, W]:
        return Continuation(fn, pc=pc, label=label, value_label=value_label)

    return wrap


class Computation(Generic[V]):
    """Base for synchronous and asynchronous labeled computations.

    States: UNSTARTED -> RUNNING -> SUCCEEDED | FAILED. No replay.

    Attributes:
        pc: Control-context label; effects happen at or above it.
        label: Data label of the result.
        value_label: Upper bound on the label of a yielded Labeled value
            (BOT when the result is not labeled).
        floor: Lower bound on the labels of the channels written to, never
            below pc. Sink writes set it to the sink's level.
    """

    __slots__ = ("pc", "label", "value_label", "floor", "_action", "_state")

    def __init__(
        self,
        action: Callable[[], Any],
        pc: Level = TOP,
        label: Level = BOT,
        value_label: Level = BOT,
        floor: Optional[Level] = None,
    ) -> None:
        self.pc = pc
        self.floor = pc if floor is None else pc.join(floor)
        self.label = label
        self.value_label = value_label
        self._action = action
        self._state = State.UNSTARTED

    @property
    def level(self) -> Level:
        """Data label joined with the label of the yielded labeled value."""
        return self.label.join(self.value_label)

    @property
    def state(self) -> State:
        return self._state

    def _start(self) -> None:
        if self._state is not State.UNSTARTED:
            raise ComputationStateError(self._state)
        self._state = State.RUNNING

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(pc={self.pc!r}, label={self.label!r},"
            f" value_label={self.value_label!r}, state={self._state.value})"
        )


class LIO(Computation[V]):
    """Synchronous labeled computation wrapping a zero-argument thunk."""

    __slots__ = ()

    def _run(self) -> V:
        self._start()
        try:
            result = self._action()
        except BaseException:
            self._state = State.FAILED
            raise
        self._state = State.SUCCEEDED
        return result


def _resolve_signature(
    f: Any,
    level: Level,
    pc: Optional[Level],
    data_label: Optional[Level],
    value_label: Optional[Level],
) -> Signature:
    if pc is not None or data_label is not None or value_label is not None:
        return Signature(
            pc=level if pc is None else pc,
            label=level if data_label is None else data_label,
            value_label=level if value_label is None else value_label,
        )
    declared = getattr(f, "signature", None)
    if callable(declared):
        return declared(level)
    return Signature(pc=level, label=level, value_label=level)


def _plan_bind(
    m: Computation[Any],
    f: Any,
    pc: Optional[Level],
    data_label: Optional[Level],
    value_label: Optional[Level],
    operation: str,
) -> Tuple[Signature, Level, Level, Level]:
    """Check bind's flow constraint and compute the composed labels."""
    signature = _resolve_signature(f, m.level, pc, data_label, value_label)
    if not m.level.can_flow_to(signature.pc):
        raise FlowViolationError(m.level, signature.pc, operation)
    logger.debug("%s: %r flows to context %r", operation, m.level, signature.pc)
    return (
        signature,
        m.pc.meet(signature.pc),
        m.level.join(signature.label),
        signature.value_label,
    )


def _check_step(
    m: Computation[Any],
    result: Any,
    c: Any,
    kind: type,
    signature: Signature,
    operation: str,
) -> None:
    """Check the computation a continuation returned before starting it."""
    if not isinstance(c, kind):
        raise TypeError(
            f"{operation}: continuation must return {kind.__name__},"
            f" got {type(c).__name__}"
        )
    actual = m.label.join(_value_label(result))
    if not actual.can_flow_to(c.pc):
        raise FlowViolationError(actual, c.pc, operation)
    signature.check(c, operation)


def _box(m: Computation[Any], lv: Any, operation: str) -> Labeled[Any]:
    if not isinstance(lv, Labeled):
        raise TypeError(f"{operation}: expected a Labeled result, got {type(lv).__name__}")
    return label(m.label.join(lv.get_label()), lv)


def _check_mapped(
    m: Computation[Any], lv: Any, mapped: Any, operation: str
) -> Labeled[Any]:
    if not isinstance(lv, Labeled) or not isinstance(mapped, Labeled):
        raise TypeError(f"{operation}: expected Labeled values")
    if not lv.get_label().can_flow_to(mapped.get_label()):
        raise FlowViolationError(lv.get_label(), mapped.get_label(), operation)
    if not mapped.get_label().can_flow_to(m.value_label):
        raise FlowViolationError(mapped.get_label(), m.value_label, operation)
    return mapped


def _require(m: Any, kind: type, operation: str) -> None:
    if not isinstance(m, kind):
        raise TypeError(f"{operation}: expected {kind.__name__}, got {type(m).__name__}")


def _value_label(v: Any) -> Level:
    """Label of a labeled value, or join of the labeled items of a list or tuple."""
    if isinstance(v, Labeled):
        return v.get_label()
    if isinstance(v, (list, tuple)):
        return lub(*(item.get_label() for item in v if isinstance(item, Labeled)))
    return BOT


def ret(v: V) -> LIO[V]:
    """Lift a value: Top context (no effects), Bot data label (public)."""
    return LIO(lambda: v, pc=TOP, label=BOT, value_label=_value_label(v))


def unlabel(lv: Labeled[V]) -> LIO[Labeled[V]]:
    """Raise the context to the label of lv.

    The result is still the labeled value; only the context changes.
    """
    _require(lv, Labeled, "unlabel")
    level = lv.get_label()
    return LIO(lambda: lv, pc=level, label=BOT, value_label=level)


def bind(
    m: LIO[Any],
    f: Callable[[Any], LIO[W]],
    *,
    pc: Optional[Level] = None,
    label: Optional[Level] = None,
    value_label: Optional[Level] = None,
) -> LIO[W]:
    """Sequential composition.

    The labels of f's computation come from the keyword arguments, else from
    f.signature(level) (sink writers, @continuation functions). Labels left
    undeclared are taken to be level(m). A continuation reading more
    restricted data must declare it:

        bind(read_alice, lambda lv: input_from(bob_source),
             value_label=alice_and_bob)

    Raises:
        FlowViolationError: If level(m) cannot flow to the context of f.
    """
    _require(m, LIO, "bind")
    signature, composed_pc, composed_label, composed_value = _plan_bind(
        m, f, pc, label, value_label, "bind"
    )

    def action() -> W:
        result = m._run()
        c = f(result)
        _check_step(m, result, c, LIO, signature, "bind")
        return c._run()

    return LIO(
        action, pc=composed_pc, label=composed_label, value_label=composed_value
    )


def to_labeled(m: LIO[Labeled[V]]) -> LIO[Labeled[Labeled[V]]]:
    """Box the yielded labeled value with its own label."""
    _require(m, LIO, "to_labeled")
    return LIO(
        lambda: _box(m, m._run(), "to_labeled"),
        pc=m.pc,
        label=BOT,
        value_label=m.level,
        floor=m.floor,
    )


def map_lio(
    m: LIO[Labeled[V]], f: Callable[[Labeled[V]], Labeled[W]]
) -> LIO[Labeled[W]]:
    """Transform the yielded labeled value without lowering its label."""
    _require(m, LIO, "map_lio")

    def action() -> Labeled[W]:
        lv = m._run()
        return _check_mapped(m, lv, f(lv), "map_lio")

    return LIO(
        action, pc=m.pc, label=m.label, value_label=m.value_label, floor=m.floor
    )


def sequence(ms: Sequence[LIO[V]]) -> LIO[List[V]]:
    """Run computations strictly in order, collecting their results."""
    ms = list(ms)
    for m in ms:
        _require(m, LIO, "sequence")

    def action() -> List[V]:
        return [m._run() for m in ms]

    return LIO(
        action,
        pc=glb(*(m.pc for m in ms)),
        label=lub(*(m.label for m in ms)),
        value_label=lub(*(m.value_label for m in ms)),
    )


def unsafe_run_lio(m: LIO[V]) -> V:
    """Run a computation and return its bare result.

    WARNING: This bypasses all security checks. Only use at trusted
    boundaries (e.g., the main function).
    """
    _require(m, LIO, "unsafe_run_lio")
    logger.info("Running computation at trusted boundary: pc=%r label=%r", m.pc, m.label)
    return m._run()
