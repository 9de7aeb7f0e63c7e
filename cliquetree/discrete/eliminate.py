"""
cliquetree/discrete/eliminate.py

Sum-product elimination over discrete Sections.

Eliminating frontal keys F from gathered factors with separator S:

    joint(F, S)          = ⊗ factors
    residual(S)          = ⊕_F joint(F, S)
    conditional(F | S)   = joint(F, S) / residual(S)

The conditional is normalized for every separator value with support; the
residual carries the mass upward.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence, Tuple

import numpy as np

from cliquetree.algebra.section import Key, Section
from cliquetree.inference.factors import OrphanFactor


@dataclass(frozen=True, eq=False)
class DiscreteConditional:
    """
    P(frontals | parents) as a Section whose leading axes are the frontals.

    Attributes:
        section: Table over frontals followed by parents
        nr_frontals: Number of leading frontal axes
    """
    section: Section
    nr_frontals: int

    @property
    def keys(self) -> Tuple[Key, ...]:
        return self.section.domain

    @property
    def frontals(self) -> Tuple[Key, ...]:
        return self.section.domain[:self.nr_frontals]

    @property
    def parents(self) -> Tuple[Key, ...]:
        return self.section.domain[self.nr_frontals:]

    def probability(self, assignment: dict) -> float:
        """P(frontals=assignment | parents=assignment), in probability space."""
        value = self.section.value(assignment)
        return float(self.section.semiring.to_probabilities(np.asarray(value)))

    def __repr__(self) -> str:
        return f"DiscreteConditional(frontals={self.frontals}, parents={self.parents})"


def _numeric_factors(factors: Iterable[Any]) -> List[Section]:
    out: List[Section] = []
    for f in factors:
        if isinstance(f, OrphanFactor):
            f = f.factor
            if f is None:
                continue
        if not isinstance(f, Section):
            raise TypeError(f"Discrete elimination needs Section factors, got {type(f).__name__}")
        out.append(f)
    return out


def eliminate_discrete(
    factors: Sequence[Any],
    ordering: Sequence[Key],
) -> Tuple[DiscreteConditional, Section]:
    """
    Eliminate `ordering` from a set of discrete factors.

    Args:
        factors: Sections (orphan markers contribute their cached residual)
        ordering: Frontal keys, in elimination order

    Returns:
        (conditional, residual) where the residual is a Section on the separator

    Raises:
        ValueError: if an ordering key is missing from the factors
        ZeroDivisionError: if the gathered factors have no mass at all
    """
    sections = _numeric_factors(factors)
    if not sections:
        raise ValueError(f"No factors to eliminate {list(ordering)}")

    joint = sections[0]
    for s in sections[1:]:
        joint = joint.star(s)

    frontals = tuple(ordering)
    missing = [k for k in frontals if k not in joint.domain]
    if missing:
        raise ValueError(f"Keys {missing} do not appear in the factors being eliminated")

    separator = tuple(k for k in joint.domain if k not in frontals)
    joint = joint.restrict(frontals + separator)
    residual = joint.restrict(separator)

    if np.all(joint.semiring.is_zero(residual.data)):
        raise ZeroDivisionError(f"Degenerate clique {list(frontals)}: gathered factors have zero mass")

    conditional = DiscreteConditional(joint.divide(residual), len(frontals))
    return conditional, residual
