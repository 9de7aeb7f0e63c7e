"""
cliquetree: junction tree construction and multifrontal elimination

Turns a sparse set of factors over shared variables into a Bayes tree of
conditionals that supports exact inference.

Key components:
- traversal: depth-first forest walks (serial and fork-join)
- symbolic: structure-only factors, conditionals and elimination
- inference: elimination tree, junction tree builder and elimination engine,
  Bayes tree output
- algebra: semirings and named tables
- discrete: sum-product elimination function and marginals
"""

__version__ = "1.0.0"
__author__ = "cliquetree contributors"

from cliquetree.algebra.semiring import ProbSemiring, LogProbSemiring, prob_semiring, logprob_semiring
from cliquetree.algebra.section import Section
from cliquetree.symbolic import SymbolicFactor, SymbolicConditional, eliminate_symbolic
from cliquetree.inference import (
    BayesTree,
    BayesTreeClique,
    EliminationConfig,
    EliminationTree,
    EliminationTreeNode,
    JunctionTree,
    JunctionTreeNode,
    OrphanFactor,
    min_degree_ordering,
)
from cliquetree.discrete import DiscreteConditional, eliminate_discrete, marginal
from cliquetree.solver import SolverResult, eliminate_multifrontal, compute_marginals

__all__ = [
    # Semirings
    "ProbSemiring",
    "LogProbSemiring",
    "prob_semiring",
    "logprob_semiring",
    "Section",
    # Symbolic
    "SymbolicFactor",
    "SymbolicConditional",
    "eliminate_symbolic",
    # Trees
    "EliminationTree",
    "EliminationTreeNode",
    "JunctionTree",
    "JunctionTreeNode",
    "BayesTree",
    "BayesTreeClique",
    "OrphanFactor",
    "EliminationConfig",
    "min_degree_ordering",
    # Discrete
    "DiscreteConditional",
    "eliminate_discrete",
    "marginal",
    # Solver
    "SolverResult",
    "eliminate_multifrontal",
    "compute_marginals",
]
