"""LIO Library - Principals.

Declared universe of principals a program builds its levels from.
"""

from __future__ import annotations

import itertools
import json
import logging
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterator, Mapping

from .error import UnknownPrincipalError
from .lattice import BOT, TOP, Level, Principal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principals:
    """Finite set of principals relevant to a program."""

    names: FrozenSet[Principal] = frozenset()
    # An open universe accepts any principal name.
    closed: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Principals:
        """Build from a mapping of the form {"principals": [...]}.

        Raises:
            ValueError: If the mapping has no list of principal names.
        """
        names = data.get("principals")
        if not isinstance(names, list) or not all(
            isinstance(name, str) and name for name in names
        ):
            raise ValueError(
                "Expected a 'principals' key holding a list of non-empty names"
            )
        return cls(frozenset(names))

    @classmethod
    def load(cls, path: str) -> Principals:
        """Load the universe from a JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {path}")
        principals = cls.from_mapping(data)
        logger.debug("Loaded %d principals from %s", len(principals.names), path)
        return principals

    def level(self, *names: Principal) -> Level:
        """Level over declared principals.

        Raises:
            UnknownPrincipalError: If any name is not declared.
        """
        unknown = frozenset(names) - self.names
        if unknown and self.closed:
            raise UnknownPrincipalError(unknown, self.names)
        return Level(frozenset(names))

    def parse(self, text: str) -> Level:
        """Parse "Alice,Bob", "top", or "" / "bot" for the public level."""
        text = text.strip()
        if text.lower() == "top":
            return TOP
        if text.lower() in ("", "bot"):
            return BOT
        return self.level(*(name.strip() for name in text.split(",") if name.strip()))

    def levels(self) -> Iterator[Level]:
        """Every finite level over the universe, smallest first."""
        if not self.closed:
            raise ValueError("An open universe has no finite set of levels")
        names = sorted(self.names)
        for size in range(len(names) + 1):
            for combo in itertools.combinations(names, size):
                yield Level(frozenset(combo))
