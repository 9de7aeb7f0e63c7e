"""
cliquetree/inference/bayes_tree.py

Bayes tree: the clique tree of conditionals produced by eliminating a
junction tree.

Ownership runs root to leaf: a clique owns its `children` list. The parent
link is a weak reference used for upward lookups only.
"""

from __future__ import annotations

import weakref
from typing import Any, Dict, Iterator, List, Optional, Tuple

import networkx as nx

from cliquetree.inference.factors import Key
from cliquetree.traversal.forest import forest_orders


class BayesTreeClique:
    """
    One clique of a Bayes tree.

    Attributes:
        conditional: Result of eliminating the clique's frontal keys
        cached_factor: The residual passed upward when the clique was
            eliminated, as returned by the elimination function
        children: Owned child cliques
    """

    def __init__(self, conditional: Any = None):
        self.conditional = conditional
        self.cached_factor: Any = None
        self.children: List["BayesTreeClique"] = []
        self._parent: Optional[weakref.ref] = None

    @property
    def parent(self) -> Optional["BayesTreeClique"]:
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, clique: Optional["BayesTreeClique"]) -> None:
        self._parent = weakref.ref(clique) if clique is not None else None

    def set_elimination_result(self, result: Tuple[Any, Any]) -> None:
        conditional, residual = result
        self.conditional = conditional
        self.cached_factor = residual

    @property
    def frontals(self) -> Tuple[Key, ...]:
        return tuple(self.conditional.frontals)

    @property
    def separator(self) -> Tuple[Key, ...]:
        return tuple(self.conditional.parents)

    def path_to_root(self) -> List["BayesTreeClique"]:
        """This clique followed by each ancestor up to its root."""
        path = [self]
        p = self.parent
        while p is not None:
            path.append(p)
            p = p.parent
        return path

    def __repr__(self) -> str:
        if self.conditional is None:
            return "BayesTreeClique(<not eliminated>)"
        return f"BayesTreeClique(frontals={self.frontals}, separator={self.separator})"


class BayesTree:
    """
    Forest of Bayes tree cliques with a key -> clique index.

    Attributes:
        roots: Root cliques
        nodes: Map from each frontal key to the clique it is frontal in
    """

    def __init__(self):
        self.roots: List[BayesTreeClique] = []
        self.nodes: Dict[Key, BayesTreeClique] = {}

    def __getitem__(self, key: Key) -> BayesTreeClique:
        return self.nodes[key]

    def __contains__(self, key: Key) -> bool:
        return key in self.nodes

    def __len__(self) -> int:
        return len(forest_orders(self.roots)[0])

    def cliques(self) -> Iterator[BayesTreeClique]:
        """All cliques, parents before children."""
        return iter(forest_orders(self.roots)[0])

    def conditionals(self) -> List[Any]:
        """Conditionals in elimination order (children before parents)."""
        return [c.conditional for c in forest_orders(self.roots)[1]]

    def keys(self) -> List[Key]:
        return list(self.nodes.keys())

    def to_networkx(self) -> nx.DiGraph:
        """
        Export the clique structure.

        Nodes are integers in preorder with attributes `frontals` and
        `separator`; edges point from parent to child.
        """
        g = nx.DiGraph()
        ids: Dict[int, int] = {}
        for clique in self.cliques():
            nid = len(ids)
            ids[id(clique)] = nid
            g.add_node(nid, frontals=clique.frontals, separator=clique.separator)
            parent = clique.parent
            if parent is not None and id(parent) in ids:
                g.add_edge(ids[id(parent)], nid)
        return g

    def __repr__(self) -> str:
        return f"BayesTree(roots={len(self.roots)}, keys={len(self.nodes)})"
