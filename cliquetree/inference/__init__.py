"""
Inference module: elimination trees, junction trees and Bayes trees.
"""

from cliquetree.inference.factors import (
    Factor,
    Conditional,
    EliminateFunction,
    OrphanFactor,
    is_empty_factor,
)
from cliquetree.inference.config import EliminationConfig
from cliquetree.inference.elimination_tree import EliminationTreeNode, EliminationTree
from cliquetree.inference.ordering import interaction_graph, min_degree_ordering
from cliquetree.inference.bayes_tree import BayesTreeClique, BayesTree
from cliquetree.inference.junction_tree import JunctionTreeNode, JunctionTree

__all__ = [
    # factors
    "Factor",
    "Conditional",
    "EliminateFunction",
    "OrphanFactor",
    "is_empty_factor",
    # config
    "EliminationConfig",
    # elimination tree
    "EliminationTreeNode",
    "EliminationTree",
    # ordering
    "interaction_graph",
    "min_degree_ordering",
    # bayes tree
    "BayesTreeClique",
    "BayesTree",
    # junction tree
    "JunctionTreeNode",
    "JunctionTree",
]
