"""
cliquetree/inference/factors.py

Capability sets the elimination engine relies on, and the orphan marker.

The engine never looks inside a factor beyond its `keys`, and never inside a
conditional beyond `frontals` / `parents`. Anything satisfying those
protocols can flow through a junction tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Hashable, List, Optional, Protocol, Sequence, Tuple

if TYPE_CHECKING:
    from cliquetree.inference.bayes_tree import BayesTreeClique

Key = Hashable


class Factor(Protocol):
    """Anything with a sequence of keys."""
    keys: Sequence[Key]


class Conditional(Protocol):
    """Result of eliminating frontal keys, conditioned on parent keys."""

    @property
    def frontals(self) -> Sequence[Key]: ...

    @property
    def parents(self) -> Sequence[Key]: ...


EliminationResult = Tuple[Any, Optional[Any]]
EliminateFunction = Callable[[List[Any], List[Key]], EliminationResult]


def is_empty_factor(factor: Any) -> bool:
    """A missing factor, or one over zero keys, carries nothing upward."""
    return factor is None or len(factor.keys) == 0


@dataclass(frozen=True, eq=False)
class OrphanFactor:
    """
    Marker factor carrying an already-eliminated Bayes tree clique.

    When the junction tree gathers a clique's factors and finds one of these,
    the wrapped clique is spliced in as a child of the new clique instead of
    being eliminated again. Its keys are the orphan's separator, so symbolic
    and numeric elimination see the dependency it introduces; `factor` is the
    residual the orphan produced when it was eliminated.
    """
    clique: "BayesTreeClique"

    @property
    def keys(self) -> Tuple[Key, ...]:
        return tuple(self.clique.conditional.parents)

    @property
    def factor(self) -> Any:
        return self.clique.cached_factor

    def __repr__(self) -> str:
        return f"OrphanFactor(separator={self.keys})"
