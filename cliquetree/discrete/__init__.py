"""
Discrete module: sum-product elimination and marginals over Sections.
"""

from cliquetree.discrete.eliminate import DiscreteConditional, eliminate_discrete
from cliquetree.discrete.marginals import marginal, joint

__all__ = [
    "DiscreteConditional",
    "eliminate_discrete",
    "marginal",
    "joint",
]
