"""
Traversal module: depth-first forest walks with threaded visitor data.
"""

from cliquetree.traversal.forest import depth_first_forest, forest_orders, clone_forest
from cliquetree.traversal.parallel import depth_first_forest_parallel

__all__ = [
    "depth_first_forest",
    "forest_orders",
    "clone_forest",
    "depth_first_forest_parallel",
]
