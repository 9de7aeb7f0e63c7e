"""
cliquetree/symbolic/factor.py

Structure-only factors and conditionals.

A symbolic factor records which keys appear together; a symbolic conditional
records the result of eliminating some of them: the frontal keys first, then
the parent (separator) keys that remain connected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Tuple

Key = Hashable


@dataclass(frozen=True)
class SymbolicFactor:
    """Keys involved in a factor, with no numeric payload."""
    keys: Tuple[Key, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "keys", tuple(self.keys))

    @staticmethod
    def from_keys(factor: Any) -> "SymbolicFactor":
        """Symbolic version of any object exposing `keys`."""
        return SymbolicFactor(tuple(factor.keys))

    def empty(self) -> bool:
        return not self.keys

    def __len__(self) -> int:
        return len(self.keys)


@dataclass(frozen=True)
class SymbolicConditional:
    """
    Result of symbolically eliminating frontal keys.

    Attributes:
        keys: Frontal keys followed by parent keys
        nr_frontals: How many of the leading keys are frontal
    """
    keys: Tuple[Key, ...]
    nr_frontals: int = 1

    def __post_init__(self):
        object.__setattr__(self, "keys", tuple(self.keys))
        if not 0 <= self.nr_frontals <= len(self.keys):
            raise ValueError(f"nr_frontals={self.nr_frontals} out of range for keys {self.keys}")

    @property
    def frontals(self) -> Tuple[Key, ...]:
        return self.keys[:self.nr_frontals]

    @property
    def parents(self) -> Tuple[Key, ...]:
        return self.keys[self.nr_frontals:]

    @property
    def nr_parents(self) -> int:
        return len(self.keys) - self.nr_frontals

    def __len__(self) -> int:
        return len(self.keys)
