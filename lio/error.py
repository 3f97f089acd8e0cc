"""LIO Library - Exceptions.

Informative exceptions for security policy violations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet

if TYPE_CHECKING:
    from .lattice import Level
    from .monad import State

Principal = str


@dataclass
class FlowViolationError(Exception):
    """Data at `source` would reach a context or channel at `target`."""

    source: "Level"
    target: "Level"
    operation: str

    def __str__(self) -> str:
        return (
            f"Flow denied in {self.operation}: {self.source!r} cannot flow to"
            f" {self.target!r}"
        )


@dataclass
class ComputationStateError(Exception):
    """A single-shot computation was started more than once."""

    state: "State"

    def __str__(self) -> str:
        return f"Computation cannot be run again: already {self.state.value}"


@dataclass
class UnknownPrincipalError(Exception):
    """A level names principals outside the declared universe."""

    unknown: FrozenSet[Principal]
    declared: FrozenSet[Principal]

    def __str__(self) -> str:
        return (
            f"Unknown principals {sorted(self.unknown)}: declared principals"
            f" are {sorted(self.declared)}"
        )
