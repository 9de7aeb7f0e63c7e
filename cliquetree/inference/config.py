"""
cliquetree/inference/config.py

Elimination scheduling options.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EliminationConfig:
    """
    How a junction tree is eliminated.

    Attributes:
        parallel: Run independent subtrees on a thread pool
        problem_size_threshold: Subtrees rooted at a clique whose problem size
            is below this are eliminated serially as one task
        max_workers: Thread pool size (None lets the executor decide)
    """
    parallel: bool = False
    problem_size_threshold: int = 10
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.problem_size_threshold < 0:
            raise ValueError(f"problem_size_threshold must be >= 0, got {self.problem_size_threshold}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")
