"""
cliquetree/discrete/marginals.py

Marginals from a Bayes tree of discrete conditionals.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from cliquetree.algebra.section import Key, Section
from cliquetree.inference.bayes_tree import BayesTree


def _product(sections) -> Section:
    it = iter(sections)
    acc = next(it)
    for s in it:
        acc = acc.star(s)
    return acc


def marginal(bayes_tree: BayesTree, key: Key) -> np.ndarray:
    """
    Marginal distribution of one key, in probability space.

    Only the cliques on the path from the key's clique to its root are
    touched: every other subtree's conditionals sum out to one.

    Raises:
        KeyError: if `key` was not eliminated into this tree
        ValueError: if the root of that path still depends on uneliminated keys
    """
    path = bayes_tree[key].path_to_root()
    if path[-1].separator:
        raise ValueError(f"Root clique of {key!r} depends on uneliminated keys {path[-1].separator}")
    joint_on_path = _product(c.conditional.section for c in path)
    out = joint_on_path.restrict((key,)).normalize()
    return out.probabilities()


def joint(bayes_tree: BayesTree, order: Optional[Sequence[Key]] = None) -> Section:
    """
    Product of every conditional in the tree.

    Args:
        bayes_tree: Eliminated tree
        order: Axis order of the result (default: as produced by the product)
    """
    acc = _product(c.section for c in bayes_tree.conditionals())
    if order is not None:
        acc = acc.restrict(tuple(order))
    return acc
