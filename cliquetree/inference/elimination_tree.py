"""
cliquetree/inference/elimination_tree.py

Elimination tree: one node per ordered key.

Each node owns the factors whose first key in the ordering is its key; a
node's parent is the next key that eliminating it connects to. Children
must be eliminated before their parent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from cliquetree.inference.factors import Key


@dataclass(eq=False)
class EliminationTreeNode:
    """
    Node of an elimination tree.

    Attributes:
        key: The key eliminated at this node
        factors: Factors whose earliest ordered key is `key`
        children: Nodes that must be eliminated first
    """
    key: Key
    factors: List[Any] = field(default_factory=list)
    children: List["EliminationTreeNode"] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"EliminationTreeNode(key={self.key!r}, factors={len(self.factors)}, children={len(self.children)})"


class EliminationTree:
    """
    Forest of elimination tree nodes.

    Attributes:
        roots: Nodes with no parent (one per connected component)
        remaining_factors: Factors touching no ordered key
    """

    def __init__(self, roots: Optional[List[EliminationTreeNode]] = None,
                 remaining_factors: Optional[List[Any]] = None):
        self.roots: List[EliminationTreeNode] = list(roots or [])
        self.remaining_factors: List[Any] = list(remaining_factors or [])

    @classmethod
    def from_factors(cls, factors: Sequence[Any], ordering: Sequence[Key]) -> "EliminationTree":
        """
        Build the elimination tree of `factors` under `ordering`.

        Keys that appear in factors but not in the ordering are left
        uneliminated; factors touching only such keys become remaining factors.

        Raises:
            ValueError: if the ordering repeats a key or names a key no
                factor involves
        """
        order = list(ordering)
        position: Dict[Key, int] = {}
        for i, k in enumerate(order):
            if k in position:
                raise ValueError(f"Ordering has duplicate key {k!r}")
            position[k] = i

        n = len(order)
        nodes = [EliminationTreeNode(key=k) for k in order]
        parent: List[Optional[int]] = [None] * n
        ancestor = list(range(n))

        def find(i: int) -> int:
            root = i
            while ancestor[root] != root:
                root = ancestor[root]
            while ancestor[i] != root:
                ancestor[i], i = root, ancestor[i]
            return root

        incident: List[List[int]] = [[] for _ in range(n)]
        remaining: List[Any] = []
        for fi, f in enumerate(factors):
            cols = sorted({position[k] for k in f.keys if k in position})
            if not cols:
                remaining.append(f)
                continue
            for j in cols:
                incident[j].append(fi)

        unused = [order[j] for j in range(n) if not incident[j]]
        if unused:
            raise ValueError(f"Ordering keys {unused} do not appear in any factor")

        # Last ordered column of each factor processed so far
        prev_col: List[Optional[int]] = [None] * len(factors)
        for j in range(n):
            for fi in incident[j]:
                if prev_col[fi] is None:
                    nodes[j].factors.append(factors[fi])
                else:
                    r = find(prev_col[fi])
                    if r != j:
                        parent[r] = j
                        ancestor[r] = j
                prev_col[fi] = j

        roots: List[EliminationTreeNode] = []
        for j in range(n):
            if parent[j] is None:
                roots.append(nodes[j])
            else:
                nodes[parent[j]].children.append(nodes[j])

        return cls(roots, remaining)

    def __repr__(self) -> str:
        return f"EliminationTree(roots={len(self.roots)}, remaining_factors={len(self.remaining_factors)})"
