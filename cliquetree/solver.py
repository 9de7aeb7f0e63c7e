"""
cliquetree/solver.py

High-level interface: factors in, Bayes tree out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from cliquetree.algebra.section import Key, Section
from cliquetree.algebra.semiring import semiring_by_name
from cliquetree.discrete.eliminate import eliminate_discrete
from cliquetree.discrete.marginals import marginal
from cliquetree.inference.bayes_tree import BayesTree
from cliquetree.inference.config import EliminationConfig
from cliquetree.inference.elimination_tree import EliminationTree
from cliquetree.inference.factors import EliminateFunction
from cliquetree.inference.junction_tree import JunctionTree
from cliquetree.inference.ordering import min_degree_ordering


@dataclass
class SolverResult:
    """Result from running multifrontal elimination."""
    bayes_tree: BayesTree
    remaining_factors: List[Any]
    junction_tree: JunctionTree
    ordering: List[Key]


def eliminate_multifrontal(
    factors: Sequence[Any],
    ordering: Optional[Sequence[Key]] = None,
    function: EliminateFunction = eliminate_discrete,
    config: Optional[EliminationConfig] = None,
) -> SolverResult:
    """
    Eliminate a factor graph into a Bayes tree.

    Args:
        factors: Factors exposing `keys`
        ordering: Elimination ordering (default: minimum degree over all keys)
        function: Per-clique elimination function
        config: Scheduling options

    Returns:
        SolverResult with the Bayes tree, remaining factors, the junction tree
        that was eliminated and the ordering used
    """
    if ordering is None:
        ordering = min_degree_ordering(factors)
    etree = EliminationTree.from_factors(factors, ordering)
    jtree = JunctionTree.from_elimination_tree(etree)
    bayes_tree, remaining = jtree.eliminate(function, config)
    return SolverResult(bayes_tree=bayes_tree, remaining_factors=remaining,
                        junction_tree=jtree, ordering=list(ordering))


def sections_from_tables(
    factors: Dict[str, Tuple[Tuple[Key, ...], np.ndarray]],
    semiring: str = "prob",
) -> List[Section]:
    """Turn {name: (scope, table)} probability tables into Sections."""
    sr = semiring_by_name(semiring)
    return [Section.from_probabilities(scope, table, sr) for scope, table in factors.values()]


def compute_marginals(
    factors: Dict[str, Tuple[Tuple[Key, ...], np.ndarray]],
    variables: Optional[Sequence[Key]] = None,
    *,
    semiring: str = "prob",
    ordering: Optional[Sequence[Key]] = None,
    config: Optional[EliminationConfig] = None,
) -> Dict[Key, np.ndarray]:
    """
    Compute marginal distributions of discrete variables.

    Args:
        factors: Map from factor name to (scope, table of probabilities)
        variables: Variables to report (default: all)
        semiring: "prob" or "logprob"
        ordering: Elimination ordering (default: minimum degree)
        config: Scheduling options

    Returns:
        Map from variable to its normalized marginal

    Example:
        >>> factors = {
        ...     "f1": (("A",), np.array([0.3, 0.7])),
        ...     "f2": (("A", "B"), np.array([[0.9, 0.1], [0.2, 0.8]])),
        ... }
        >>> compute_marginals(factors)["B"]
        array([0.41, 0.59])
    """
    result = eliminate_multifrontal(sections_from_tables(factors, semiring), ordering, config=config)
    if variables is None:
        variables = result.bayes_tree.keys()
    return {v: marginal(result.bayes_tree, v) for v in variables}
