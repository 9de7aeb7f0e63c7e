"""
Symbolic module: structure-only factors, conditionals and elimination.
"""

from cliquetree.symbolic.factor import SymbolicFactor, SymbolicConditional
from cliquetree.symbolic.eliminate import eliminate_symbolic, eliminate_sequential_symbolic

__all__ = [
    "SymbolicFactor",
    "SymbolicConditional",
    "eliminate_symbolic",
    "eliminate_sequential_symbolic",
]
