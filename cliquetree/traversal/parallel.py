"""
cliquetree/traversal/parallel.py

Fork-join variant of depth_first_forest.

All pre-order visits run serially on the calling thread, so any bookkeeping a
pre visitor does on its parent's data (slot reservation, child wiring) is
race free. Post-order visits are then scheduled bottom-up on a thread pool:
a node's post visitor is submitted only once every child's post visitor has
completed. Subtrees rooted at a node whose `problem_size` is below the
threshold run as a single serial task.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional, Sequence

from cliquetree.traversal.forest import VisitorPost, VisitorPre, depth_first_forest

logger = logging.getLogger(__name__)


class _Task:
    __slots__ = ("parent", "pending", "members", "serial")

    def __init__(self, parent: Optional["_Task"], serial: bool):
        self.parent = parent
        self.pending = 0
        self.members: List[tuple] = []  # (node, data) in post-order
        self.serial = serial


class _State:
    __slots__ = ("data", "task")

    def __init__(self, data: Any, task: Optional[_Task]):
        self.data = data
        self.task = task


def _problem_size(node: Any) -> int:
    return getattr(node, "problem_size", 0)


def depth_first_forest_parallel(
    roots: Sequence[Any],
    root_data: Any,
    visitor_pre: VisitorPre,
    visitor_post: VisitorPost,
    problem_size_threshold: int = 10,
    max_workers: Optional[int] = None,
) -> None:
    """
    Traverse a forest, running independent subtrees' post visitors concurrently.

    Args:
        roots: Forest roots; each node exposes `children` and optionally `problem_size`
        root_data: Data handed to the pre-order visitor of every root
        visitor_pre: Called before the node's children, returns the node data
        visitor_post: Called after all of the node's children, with the node data
        problem_size_threshold: Subtrees rooted below this size run serially
        max_workers: Thread pool size (None lets the executor decide)

    Raises:
        Whatever the first failing post visitor raised; pending work is cancelled.
    """
    tasks: List[_Task] = []

    def _pre(node, parent_state: _State) -> _State:
        data = visitor_pre(node, parent_state.data)
        owner = parent_state.task
        if owner is not None and owner.serial:
            return _State(data, owner)
        task = _Task(owner, serial=_problem_size(node) < problem_size_threshold)
        if owner is not None:
            owner.pending += 1
        tasks.append(task)
        return _State(data, task)

    def _post(node, state: _State) -> None:
        state.task.members.append((node, state.data))

    depth_first_forest(roots, _State(root_data, None), _pre, _post)
    if not tasks:
        return

    def _run(task: _Task) -> None:
        for node, data in task.members:
            visitor_post(node, data)

    ready = [t for t in tasks if t.pending == 0]
    logger.debug("parallel traversal: %d tasks, %d initially ready", len(tasks), len(ready))

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures: Dict[Future, _Task] = {pool.submit(_run, t): t for t in ready}
        try:
            while futures:
                done, _ = wait(futures, return_when=FIRST_COMPLETED)
                for fut in done:
                    task = futures.pop(fut)
                    fut.result()
                    parent = task.parent
                    if parent is None:
                        continue
                    parent.pending -= 1
                    if parent.pending == 0:
                        futures[pool.submit(_run, parent)] = parent
        except BaseException:
            for fut in futures:
                fut.cancel()
            raise
