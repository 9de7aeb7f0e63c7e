"""
cliquetree/traversal/forest.py

Depth-first traversal over a forest of nodes exposing `children`.

Visitors thread per-node data from parent to child and back:
- visitor_pre(node, parent_data) -> node_data, run top-down
- visitor_post(node, node_data), run bottom-up once every child is done

The walk uses an explicit stack, so elimination trees that degenerate into
long chains do not run into the interpreter recursion limit.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar

Node = TypeVar("Node")
Data = TypeVar("Data")

VisitorPre = Callable[[Any, Any], Any]
VisitorPost = Callable[[Any, Any], None]


class _Frame:
    __slots__ = ("node", "parent_data", "data", "expanded")

    def __init__(self, node, parent_data):
        self.node = node
        self.parent_data = parent_data
        self.data = None
        self.expanded = False


def depth_first_forest(
    roots: Sequence[Node],
    root_data: Data,
    visitor_pre: VisitorPre,
    visitor_post: Optional[VisitorPost] = None,
) -> None:
    """
    Traverse every node of a forest exactly once.

    Args:
        roots: Forest roots; each node exposes a `children` sequence
        root_data: Data handed to the pre-order visitor of every root
        visitor_pre: Called before the node's children, returns the node data
        visitor_post: Called after all of the node's children, with the node data
    """
    stack: List[_Frame] = [_Frame(r, root_data) for r in reversed(list(roots))]
    while stack:
        frame = stack[-1]
        if not frame.expanded:
            frame.expanded = True
            frame.data = visitor_pre(frame.node, frame.parent_data)
            for child in reversed(list(frame.node.children)):
                stack.append(_Frame(child, frame.data))
        else:
            stack.pop()
            if visitor_post is not None:
                visitor_post(frame.node, frame.data)


def forest_orders(roots: Sequence[Node]) -> Tuple[Tuple[Node, ...], Tuple[Node, ...]]:
    """
    Compute preorder and postorder node sequences of a forest.

    Returns:
        (preorder, postorder)
    """
    pre: List[Node] = []
    post: List[Node] = []

    def _pre(node, _parent):
        pre.append(node)
        return None

    depth_first_forest(roots, None, _pre, lambda node, _data: post.append(node))
    return tuple(pre), tuple(post)


def clone_forest(roots: Sequence[Node], copy_node: Callable[[Node], Node]) -> List[Node]:
    """
    Duplicate the structure of a forest.

    Args:
        roots: Forest roots
        copy_node: Returns a copy of one node with an empty `children` list

    Returns:
        The cloned roots, in the same order
    """
    new_roots: List[Node] = []

    def _pre(node, parent_copy):
        twin = copy_node(node)
        if parent_copy is None:
            new_roots.append(twin)
        else:
            parent_copy.children.append(twin)
        return twin

    depth_first_forest(roots, None, _pre)
    return new_roots
