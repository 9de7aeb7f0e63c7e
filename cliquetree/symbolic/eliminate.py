"""
cliquetree/symbolic/eliminate.py

Symbolic elimination: the structure-only counterpart of a numeric
elimination function.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence, Tuple

from cliquetree.symbolic.factor import Key, SymbolicConditional, SymbolicFactor


def eliminate_symbolic(
    factors: Iterable[Any],
    ordering: Sequence[Key],
) -> Tuple[SymbolicConditional, SymbolicFactor]:
    """
    Eliminate `ordering` from a set of factors, tracking keys only.

    Args:
        factors: Objects exposing `keys` (symbolic or numeric factors alike)
        ordering: Frontal keys to eliminate

    Returns:
        (conditional, residual) where the conditional's parents are every
        other key touched by the factors, in first-appearance order, and the
        residual is a symbolic factor on those parents.

    Raises:
        ValueError: if an ordering key does not appear in any factor
    """
    frontals = tuple(ordering)
    if len(set(frontals)) != len(frontals):
        raise ValueError(f"Ordering has duplicate keys: {frontals}")

    seen: Dict[Key, None] = {}
    for f in factors:
        if f is None:
            continue
        for k in f.keys:
            seen.setdefault(k, None)

    missing = [k for k in frontals if k not in seen]
    if missing:
        raise ValueError(f"Keys {missing} do not appear in the factors being eliminated")

    frontal_set = set(frontals)
    parents = tuple(k for k in seen if k not in frontal_set)
    return SymbolicConditional(frontals + parents, len(frontals)), SymbolicFactor(parents)


def eliminate_sequential_symbolic(
    factors: Iterable[Any],
    ordering: Sequence[Key],
) -> List[SymbolicConditional]:
    """
    Eliminate keys one at a time, returning one conditional per key.

    This is the Bayes-net view of the same structure a junction tree groups
    into cliques; it is handy for checking clique membership.
    """
    pool: List[Any] = [SymbolicFactor.from_keys(f) for f in factors]
    conditionals: List[SymbolicConditional] = []
    for k in ordering:
        involved = [f for f in pool if k in f.keys]
        pool = [f for f in pool if k not in f.keys]
        conditional, residual = eliminate_symbolic(involved, [k])
        conditionals.append(conditional)
        if not residual.empty():
            pool.append(residual)
    return conditionals
