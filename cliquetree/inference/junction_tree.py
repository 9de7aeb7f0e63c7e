"""
cliquetree/inference/junction_tree.py

Junction tree: the clique forest built from an elimination tree, and its
elimination into a Bayes tree.

Construction walks the elimination tree once. Every elimination tree node
starts as a singleton clique; in post-order the node is eliminated
symbolically and each child clique is merged into it when eliminating the
node did not grow the separator beyond what the child already needed
(the node has exactly one parent fewer than the child).

Elimination walks the clique forest once. Each clique gathers its own
factors and the residuals of its children, hands them to the caller's
elimination function, stores the conditional in a new Bayes tree clique and
passes the residual up to its parent.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from cliquetree.inference.bayes_tree import BayesTree, BayesTreeClique
from cliquetree.inference.config import EliminationConfig
from cliquetree.inference.elimination_tree import EliminationTree, EliminationTreeNode
from cliquetree.inference.factors import EliminateFunction, Key, OrphanFactor, is_empty_factor
from cliquetree.symbolic.eliminate import eliminate_symbolic
from cliquetree.symbolic.factor import SymbolicConditional, SymbolicFactor
from cliquetree.traversal.forest import clone_forest, depth_first_forest, forest_orders
from cliquetree.traversal.parallel import depth_first_forest_parallel

logger = logging.getLogger(__name__)

SymbolicEliminateFunction = Callable[[List[Any], List[Key]], Tuple[SymbolicConditional, SymbolicFactor]]


@dataclass(eq=False)
class JunctionTreeNode:
    """
    A clique of the junction tree.

    Attributes:
        keys: Frontal keys, later merged children first, own key last
        factors: References to the original factors assigned to this clique
        children: Owned child cliques
        problem_size: Largest symbolic conditional merged into this clique
    """
    keys: List[Key] = field(default_factory=list)
    factors: List[Any] = field(default_factory=list)
    children: List["JunctionTreeNode"] = field(default_factory=list)
    problem_size: int = 0

    def __repr__(self) -> str:
        return (f"JunctionTreeNode(keys={self.keys}, factors={len(self.factors)}, "
                f"children={len(self.children)}, problem_size={self.problem_size})")


class _ConstructorData:
    __slots__ = ("parent_data", "node", "child_conditionals", "child_factors")

    def __init__(self, parent_data: Optional["_ConstructorData"], node: JunctionTreeNode):
        self.parent_data = parent_data
        self.node = node
        self.child_conditionals: List[SymbolicConditional] = []
        self.child_factors: List[SymbolicFactor] = []


class _EliminationData:
    """
    Per-clique elimination state.

    Reserves one slot in the parent's `child_factors` for this clique's
    residual and wires the new Bayes tree clique under the parent's one
    (the dummy root clique never becomes a parent pointer).
    """
    __slots__ = ("parent_data", "index_in_parent", "child_factors", "clique")

    def __init__(self, parent_data: Optional["_EliminationData"]):
        self.parent_data = parent_data
        self.child_factors: List[Any] = []
        self.clique = BayesTreeClique()
        if parent_data is None:
            self.index_in_parent = 0
            return
        self.index_in_parent = len(parent_data.child_factors)
        parent_data.child_factors.append(None)
        if parent_data.parent_data is not None:
            self.clique.parent = parent_data.clique
        parent_data.clique.children.append(self.clique)


class _EliminationPostVisitor:
    """Eliminates one clique once all of its children are done."""

    def __init__(self, function: EliminateFunction, bayes_tree: BayesTree):
        self.function = function
        self.bayes_tree = bayes_tree
        self._index_lock = threading.Lock()

    def __call__(self, node: JunctionTreeNode, data: _EliminationData) -> None:
        gathered: List[Any] = list(node.factors)
        gathered.extend(f for f in data.child_factors if f is not None)

        # Previously eliminated subtrees are adopted as-is
        for f in node.factors:
            if isinstance(f, OrphanFactor):
                data.clique.children.append(f.clique)
                f.clique.parent = data.clique

        conditional, residual = self.function(gathered, list(node.keys))
        data.clique.set_elimination_result((conditional, residual))

        # Orphans keep their entries in whatever index they came from
        with self._index_lock:
            for k in conditional.frontals:
                if self.bayes_tree.nodes.setdefault(k, data.clique) is not data.clique:
                    raise ValueError(f"Key {k!r} is frontal in more than one clique")

        logger.debug("eliminated clique %s (%d factors gathered)", list(node.keys), len(gathered))

        if not is_empty_factor(residual):
            data.parent_data.child_factors[data.index_in_parent] = residual


class JunctionTree:
    """
    Forest of cliques ready for elimination.

    Attributes:
        roots: Root cliques (one per independent component)
        remaining_factors: Factors touching no eliminated key
    """

    def __init__(self, roots: Optional[List[JunctionTreeNode]] = None,
                 remaining_factors: Optional[List[Any]] = None):
        self.roots: List[JunctionTreeNode] = list(roots or [])
        self.remaining_factors: List[Any] = list(remaining_factors or [])

    @classmethod
    def from_elimination_tree(
        cls,
        etree: EliminationTree,
        symbolic_eliminate: SymbolicEliminateFunction = eliminate_symbolic,
    ) -> "JunctionTree":
        """
        Group elimination tree nodes into maximal cliques.

        Args:
            etree: Elimination tree to convert
            symbolic_eliminate: Structure-only elimination used to count each
                key's parents

        Returns:
            JunctionTree whose remaining factors are the elimination tree's
        """
        root_data = _ConstructorData(None, JunctionTreeNode())

        def visitor_pre(node: EliminationTreeNode, parent_data: _ConstructorData) -> _ConstructorData:
            jt_node = JunctionTreeNode(keys=[node.key], factors=list(node.factors))
            parent_data.node.children.append(jt_node)
            return _ConstructorData(parent_data, jt_node)

        def visitor_post(node: EliminationTreeNode, data: _ConstructorData) -> None:
            symbolic_factors: List[Any] = [SymbolicFactor.from_keys(f) for f in node.factors]
            symbolic_factors.extend(data.child_factors)
            conditional, residual = symbolic_eliminate(symbolic_factors, [node.key])

            data.parent_data.child_conditionals.append(conditional)
            data.parent_data.child_factors.append(residual)

            jt_node = data.node
            if len(jt_node.children) != len(data.child_conditionals):
                raise ValueError(
                    f"Elimination tree node {node.key!r}: {len(jt_node.children)} children "
                    f"but {len(data.child_conditionals)} child conditionals"
                )

            my_nr_parents = conditional.nr_parents
            problem_size = len(conditional)
            kept: List[JunctionTreeNode] = []
            merged_keys: List[Key] = []
            merged_factors: List[Any] = []
            adopted: List[JunctionTreeNode] = []
            for child, child_conditional in zip(jt_node.children, data.child_conditionals):
                if my_nr_parents + 1 == child_conditional.nr_parents:
                    # Each merged child goes in front of the keys gathered so far
                    merged_keys = list(child.keys) + merged_keys
                    merged_factors.extend(child.factors)
                    adopted.extend(child.children)
                    problem_size = max(problem_size, child.problem_size)
                    logger.debug("merging clique %s into %r", child.keys, node.key)
                else:
                    kept.append(child)

            jt_node.keys = merged_keys + jt_node.keys
            jt_node.factors.extend(merged_factors)
            jt_node.children = kept + adopted
            jt_node.problem_size = problem_size

        depth_first_forest(etree.roots, root_data, visitor_pre, visitor_post)

        tree = cls(root_data.node.children, etree.remaining_factors)
        if logger.isEnabledFor(logging.INFO):
            nodes = tree.nodes()
            logger.info(
                "built junction tree: %d cliques, %d roots, max problem size %d",
                len(nodes), len(tree.roots), max((n.problem_size for n in nodes), default=0),
            )
        return tree

    @classmethod
    def from_factors(cls, factors: List[Any], ordering: List[Key]) -> "JunctionTree":
        """Convenience: elimination tree of `factors` under `ordering`, then cliques."""
        return cls.from_elimination_tree(EliminationTree.from_factors(factors, ordering))

    def nodes(self) -> List[JunctionTreeNode]:
        """All cliques, parents before children."""
        return list(forest_orders(self.roots)[0])

    def eliminate(
        self,
        function: EliminateFunction,
        config: Optional[EliminationConfig] = None,
    ) -> Tuple[BayesTree, List[Any]]:
        """
        Eliminate every clique bottom-up.

        Args:
            function: `(factors, ordering) -> (conditional, residual)`; an
                exception it raises propagates and no result is produced
            config: Scheduling options (serial by default)

        Returns:
            (bayes_tree, remaining_factors) where the remaining factors are
            this tree's remaining factors followed by the non-empty residuals
            of the root cliques
        """
        if config is None:
            config = EliminationConfig()

        result = BayesTree()
        roots_container = _EliminationData(None)
        visitor_post = _EliminationPostVisitor(function, result)

        def visitor_pre(node: JunctionTreeNode, parent_data: _EliminationData) -> _EliminationData:
            return _EliminationData(parent_data)

        if config.parallel:
            depth_first_forest_parallel(
                self.roots, roots_container, visitor_pre, visitor_post,
                problem_size_threshold=config.problem_size_threshold,
                max_workers=config.max_workers,
            )
        else:
            depth_first_forest(self.roots, roots_container, visitor_pre, visitor_post)

        result.roots.extend(roots_container.clique.children)

        remaining: List[Any] = list(self.remaining_factors)
        remaining.extend(f for f in roots_container.child_factors if f is not None)

        if logger.isEnabledFor(logging.INFO):
            logger.info("eliminated %d keys into %d root cliques, %d remaining factors",
                        len(result.nodes), len(result.roots), len(remaining))
        return result, remaining

    def clone(self) -> "JunctionTree":
        """
        Copy the clique structure.

        Nodes are new; factors are shared references.
        """
        def copy_node(node: JunctionTreeNode) -> JunctionTreeNode:
            return JunctionTreeNode(keys=list(node.keys), factors=list(node.factors),
                                    children=[], problem_size=node.problem_size)

        return JunctionTree(clone_forest(self.roots, copy_node), list(self.remaining_factors))

    __copy__ = clone

    def assign(self, other: "JunctionTree") -> "JunctionTree":
        """Replace this tree's structure with a copy of `other`'s."""
        duplicate = other.clone()
        self.roots = duplicate.roots
        self.remaining_factors = duplicate.remaining_factors
        return self

    def __repr__(self) -> str:
        return f"JunctionTree(roots={len(self.roots)}, remaining_factors={len(self.remaining_factors)})"
