"""
cliquetree/algebra/section.py

A Section is a semiring-valued table over an ordered tuple of discrete keys.
It is the factor type of the discrete elimination function: its `keys`
attribute satisfies the factor capability expected by the junction tree.

Key operations:
  - star:     pointwise product on the union of the domains
  - restrict: semiring-sum marginalization onto a subset, in the requested order
  - divide:   pointwise inverse product by a section over a subset of the domain
  - normalize: semiring-specific normalization

Design constraints:
  - Domain ordering is semantic: axes correspond 1-1 to domain entries.
  - Determinism: star() keeps the left operand's order, then appends the
    right operand's new keys in their own order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Optional, Sequence, Tuple

import numpy as np

from cliquetree.algebra.semiring import Semiring, prob_semiring

Key = Hashable


@dataclass(frozen=True, eq=False)
class Section:
    """
    A semiring table over an ordered domain.

    Attributes:
        domain: Ordered keys (axis labels).
        data: ndarray shaped by the key cardinalities in the same order.
        semiring: Semiring implementing mul/div/add_reduce/normalize.
    """
    domain: Tuple[Key, ...]
    data: np.ndarray
    semiring: Semiring = prob_semiring

    def __post_init__(self):
        object.__setattr__(self, "domain", tuple(self.domain))
        object.__setattr__(self, "data", np.asarray(self.data, dtype=np.float64))
        if len(self.domain) != self.data.ndim:
            raise ValueError(
                f"Section domain rank mismatch: |domain|={len(self.domain)} "
                f"but data.ndim={self.data.ndim}"
            )
        if len(set(self.domain)) != len(self.domain):
            raise ValueError(f"Section domain has duplicates: {self.domain}")

    @property
    def keys(self) -> Tuple[Key, ...]:
        return self.domain

    @property
    def cardinalities(self) -> dict:
        return dict(zip(self.domain, self.data.shape))

    @staticmethod
    def from_probabilities(domain: Sequence[Key], table: Any, semiring: Semiring = prob_semiring) -> "Section":
        """Build a section from a table of (unnormalized) probabilities."""
        return Section(tuple(domain), semiring.from_probabilities(np.asarray(table)), semiring)

    @staticmethod
    def unit(domain: Sequence[Key], shape: Sequence[int], semiring: Semiring = prob_semiring) -> "Section":
        """Unit section: constant one on the given domain."""
        return Section(tuple(domain), np.full(tuple(shape), semiring.one), semiring)

    def probabilities(self) -> np.ndarray:
        """Table values mapped back to probability space."""
        return self.semiring.to_probabilities(self.data)

    def dim_of(self, k: Key) -> int:
        return self.data.shape[self.domain.index(k)]

    def _aligned(self, target: Tuple[Key, ...]) -> np.ndarray:
        # Permute our axes into target order, then insert singleton axes for
        # target keys we do not carry; numpy broadcasting does the rest.
        own = [k for k in target if k in self.domain]
        data = self.data
        if own:
            perm = [self.domain.index(k) for k in own]
            if perm != list(range(len(perm))):
                data = np.transpose(data, axes=perm)
        shape = []
        j = 0
        for k in target:
            if k in self.domain:
                shape.append(data.shape[j])
                j += 1
            else:
                shape.append(1)
        return data.reshape(shape)

    def _check_compatible(self, other: "Section") -> None:
        if self.semiring.name != other.semiring.name:
            raise ValueError("Cannot combine sections from different semirings")
        for k in set(self.domain) & set(other.domain):
            if self.dim_of(k) != other.dim_of(k):
                raise ValueError(
                    f"Cardinality mismatch for key {k!r}: {self.dim_of(k)} != {other.dim_of(k)}"
                )

    def star(self, other: "Section") -> "Section":
        """Pointwise product on the union domain."""
        self._check_compatible(other)
        union = self.domain + tuple(k for k in other.domain if k not in self.domain)
        out = self.semiring.mul(self._aligned(union), other._aligned(union))
        return Section(union, out, self.semiring)

    def divide(self, other: "Section") -> "Section":
        """Pointwise division by a section whose domain is a subset of ours."""
        self._check_compatible(other)
        missing = [k for k in other.domain if k not in self.domain]
        if missing:
            raise ValueError(f"divide: keys {missing} not in section domain {self.domain}")
        out = self.semiring.div(self.data, other._aligned(self.domain))
        return Section(self.domain, out, self.semiring)

    def restrict(self, target_domain: Sequence[Key]) -> "Section":
        """
        Marginalize to exactly the keys in target_domain, in that order.

        target_domain must be a subset of self.domain.
        """
        target = tuple(target_domain)
        for k in target:
            if k not in self.domain:
                raise ValueError(f"restrict target key {k!r} not in section domain {self.domain}")
        if target == self.domain:
            return self

        elim = [k for k in self.domain if k not in target]
        perm = [self.domain.index(k) for k in target] + [self.domain.index(k) for k in elim]
        data = np.transpose(self.data, axes=perm)
        if elim:
            data = self.semiring.add_reduce(data, axis=tuple(range(len(target), self.data.ndim)))
        return Section(target, np.asarray(data), self.semiring)

    def normalize(self, axis: Optional[Tuple[int, ...]] = None) -> "Section":
        return Section(self.domain, self.semiring.normalize(self.data, axis=axis), self.semiring)

    def value(self, assignment: dict) -> float:
        """Table entry for a full assignment {key: index}."""
        return float(self.data[tuple(assignment[k] for k in self.domain)])

    def __repr__(self) -> str:
        return f"Section(domain={self.domain}, shape={self.data.shape}, semiring={self.semiring.name})"
