"""
cliquetree/algebra/semiring.py

Semirings used by the discrete elimination function.

A semiring for sum-product elimination provides:
- mul (⊗): combine two aligned tables
- div: inverse of mul, used to turn a joint into a conditional
- add_reduce (⊕): marginalize axes away
- zero / one: additive and multiplicative identities

Both semirings operate on whole numpy arrays; there is no scalar path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, Union

import numpy as np
from scipy.special import logsumexp

Axis = Optional[Union[int, Tuple[int, ...]]]


class Semiring(Protocol):
    """Protocol for array semirings."""
    name: str
    zero: float
    one: float

    def mul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray: ...
    def div(self, a: np.ndarray, b: np.ndarray) -> np.ndarray: ...
    def add_reduce(self, x: np.ndarray, axis: Axis = None) -> np.ndarray: ...
    def normalize(self, x: np.ndarray, axis: Axis = None) -> np.ndarray: ...
    def is_zero(self, x: np.ndarray) -> np.ndarray: ...
    def from_probabilities(self, p: np.ndarray) -> np.ndarray: ...
    def to_probabilities(self, x: np.ndarray) -> np.ndarray: ...


@dataclass(frozen=True)
class ProbSemiring:
    """Nonnegative reals: add=+, mul=*."""
    name: str = "PROB"
    zero: float = 0.0
    one: float = 1.0

    def mul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return np.multiply(a, b)

    def div(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        # 0/0 -> 0: rows of a conditional with no support stay empty
        b_safe = np.where(b == 0.0, 1.0, b)
        return np.where(b == 0.0, 0.0, a / b_safe)

    def add_reduce(self, x: np.ndarray, axis: Axis = None) -> np.ndarray:
        return np.sum(x, axis=axis)

    def normalize(self, x: np.ndarray, axis: Axis = None) -> np.ndarray:
        s = np.sum(x, axis=axis, keepdims=True)
        s = np.where(s == 0.0, 1.0, s)
        return x / s

    def is_zero(self, x: np.ndarray) -> np.ndarray:
        return np.asarray(x) == 0.0

    def from_probabilities(self, p: np.ndarray) -> np.ndarray:
        return np.asarray(p, dtype=np.float64)

    def to_probabilities(self, x: np.ndarray) -> np.ndarray:
        return np.asarray(x, dtype=np.float64)


@dataclass(frozen=True)
class LogProbSemiring:
    """Log-space probabilities: add=logsumexp, mul=+."""
    name: str = "LOGPROB"
    zero: float = -np.inf
    one: float = 0.0

    def mul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return np.add(a, b)

    def div(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        b_safe = np.where(np.isneginf(b), 0.0, b)
        return np.where(np.isneginf(b), -np.inf, a - b_safe)

    def add_reduce(self, x: np.ndarray, axis: Axis = None) -> np.ndarray:
        if x.ndim == 0:
            return x
        with np.errstate(divide="ignore"):
            return logsumexp(x, axis=axis)

    def normalize(self, x: np.ndarray, axis: Axis = None) -> np.ndarray:
        if x.ndim == 0:
            return np.zeros_like(x)
        with np.errstate(divide="ignore"):
            z = logsumexp(x, axis=axis, keepdims=True)
        z = np.where(np.isneginf(z), 0.0, z)
        return x - z

    def is_zero(self, x: np.ndarray) -> np.ndarray:
        return np.isneginf(np.asarray(x))

    def from_probabilities(self, p: np.ndarray) -> np.ndarray:
        with np.errstate(divide="ignore"):
            return np.log(np.asarray(p, dtype=np.float64))

    def to_probabilities(self, x: np.ndarray) -> np.ndarray:
        return np.exp(np.asarray(x, dtype=np.float64))


prob_semiring = ProbSemiring()
logprob_semiring = LogProbSemiring()


def semiring_by_name(name: str) -> Semiring:
    """Look up a semiring by its short name ("prob" or "logprob")."""
    table = {"prob": prob_semiring, "logprob": logprob_semiring}
    try:
        return table[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown semiring: {name!r}") from None
