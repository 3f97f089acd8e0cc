"""LIO Library - Flow witnesses.

Provides FlowWitness, a checked proof that one level can flow to another.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .error import FlowViolationError
from .lattice import Level

_PROOF = object()


@dataclass(frozen=True)
class FlowWitness:
    """Proof that data at `source` may flow to `target`.

    Only obtainable through FlowWitness.prove().
    """

    source: Level
    target: Level
    _token: object = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self._token is not _PROOF:
            raise TypeError("FlowWitness must be obtained via FlowWitness.prove()")
        if not self.source.can_flow_to(self.target):
            raise FlowViolationError(self.source, self.target, "FlowWitness")

    @classmethod
    def prove(cls, source: Level, target: Level) -> FlowWitness:
        """Check source ⊆ target and return the witness.

        Raises:
            FlowViolationError: If source cannot flow to target.
        """
        if not source.can_flow_to(target):
            raise FlowViolationError(source, target, "FlowWitness.prove")
        return cls(source, target, _PROOF)

    def covers(self, source: Level, target: Level) -> bool:
        """Whether this witness certifies source flowing to target."""
        return (
            source.can_flow_to(self.source)
            and self.target.can_flow_to(target)
        )
