"""
Algebra module: semirings and named tables used by discrete elimination.
"""

from cliquetree.algebra.semiring import (
    Semiring,
    ProbSemiring,
    LogProbSemiring,
    prob_semiring,
    logprob_semiring,
    semiring_by_name,
)
from cliquetree.algebra.section import Section

__all__ = [
    "Semiring",
    "ProbSemiring",
    "LogProbSemiring",
    "prob_semiring",
    "logprob_semiring",
    "semiring_by_name",
    "Section",
]
