"""LIO Library - Lattice.

Provides Level, the set-of-principals label, with its lattice operations.

Levels form a lattice under subset ordering:
- can_flow_to = subset inclusion
- Join (⊔) = union (least upper bound)
- Meet (⊓) = intersection (greatest lower bound)
- BOT = empty set (public), TOP = every principal
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import FrozenSet

Principal = str


@dataclass(frozen=True)
class Level:
    """A set of principals associated with some data.

    More principals is MORE restrictive (higher in lattice).
    Flow rule: source.principals ⊆ target.principals.

    `universal` marks TOP, the set of all principals of the computation. It is
    kept symbolic so that TOP sits above every finite level.
    """

    principals: FrozenSet[Principal] = frozenset()
    universal: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.principals, str):
            raise TypeError(
                f"principals must be a collection of names, got {self.principals!r}"
            )
        object.__setattr__(self, "principals", frozenset(self.principals))
        if self.universal:
            object.__setattr__(self, "principals", frozenset())

    def can_flow_to(self, target: Level) -> bool:
        """Check if data can flow to target (source ⊆ target)."""
        if target.universal:
            return True
        if self.universal:
            return False
        return self.principals <= target.principals

    def join(self, other: Level) -> Level:
        """Least upper bound (union of principals)."""
        if self.universal or other.universal:
            return TOP
        return Level(self.principals | other.principals)

    def meet(self, other: Level) -> Level:
        """Greatest lower bound (intersection of principals)."""
        if self.universal:
            return other
        if other.universal:
            return self
        return Level(self.principals & other.principals)

    def __repr__(self) -> str:
        if self.universal:
            return "TOP"
        if not self.principals:
            return "BOT"
        return "Level({%s})" % ", ".join(repr(p) for p in sorted(self.principals))


BOT = Level()
TOP = Level(universal=True)


def level(*principals: Principal) -> Level:
    """Level made of the given principals; no arguments gives BOT."""
    return Level(frozenset(principals))


def can_flow_to(source: Level, target: Level) -> bool:
    return source.can_flow_to(target)


def join(a: Level, b: Level) -> Level:
    return a.join(b)


def meet(a: Level, b: Level) -> Level:
    return a.meet(b)


def lub(*levels: Level) -> Level:
    """Join of any number of levels (BOT for none)."""
    return reduce(join, levels, BOT)


def glb(*levels: Level) -> Level:
    """Meet of any number of levels (TOP for none)."""
    return reduce(meet, levels, TOP)
