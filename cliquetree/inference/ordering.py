"""
cliquetree/inference/ordering.py

Elimination orderings computed on the key interaction graph.
"""

from __future__ import annotations

from itertools import combinations
from typing import Any, List, Sequence

import networkx as nx

from cliquetree.inference.factors import Key


def interaction_graph(factors: Sequence[Any]) -> nx.Graph:
    """
    Undirected graph with one node per key and an edge between keys that
    share a factor. Node attribute `rank` is the order of first appearance.
    """
    g = nx.Graph()
    for f in factors:
        keys = list(f.keys)
        for k in keys:
            if k not in g:
                g.add_node(k, rank=g.number_of_nodes())
        g.add_edges_from(combinations(keys, 2))
    return g


def min_degree_ordering(factors: Sequence[Any]) -> List[Key]:
    """
    Greedy minimum-degree elimination ordering.

    Repeatedly eliminates the key with the fewest neighbours, connecting its
    neighbours (fill-in). Ties go to the key that appeared first.
    """
    g = interaction_graph(factors)
    rank = nx.get_node_attributes(g, "rank")
    order: List[Key] = []
    while g.number_of_nodes():
        k = min(g.nodes, key=lambda v: (g.degree(v), rank[v]))
        g.add_edges_from(combinations(list(g.neighbors(k)), 2))
        g.remove_node(k)
        order.append(k)
    return order
