"""
Depth-first cycle search shared by every detection strategy.

A strategy is only a successor function: given a node id it returns the
ids to visit next, in order. ``find_cycle`` walks them depth first with an
explicit stack. Each stack frame carries its own immutable path, so a node
seen down one branch never blocks a sibling branch from exploring it.
A node whose whole subtree was explored without a loop is not expanded
again: anything it reaches that closed a loop would have closed one
through the node itself the first time round.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Set, Tuple

from model.accessor import GraphAccessor
from model.meta import (
    CONNECTION_TARGET_POINTERS,
    NEXT_POINTER,
    is_next_connection,
    is_turtle_command,
)

SuccessorFn = Callable[[str], Sequence[str]]

DEFAULT_MAX_DEPTH = 10_000
DEFAULT_MAX_STEPS = 1_000_000


class TraversalLimitError(RuntimeError):
    """A traversal grew past its depth or step ceiling."""

    def __init__(self, message: str, start_id: str, limit: int) -> None:
        super().__init__(message)
        self.start_id = start_id
        self.limit = limit


def find_cycle(
    start_id: str,
    successors: SuccessorFn,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> Optional[Tuple[str, ...]]:
    """
    Return the first loop reachable from ``start_id``, or None.

    The loop is the suffix of the current path starting at the first
    occurrence of the revisited node, closed with that node again, e.g.
    ``("c1", "c2", "c3", "c1")``.

    Raises:
        TraversalLimitError: If a path gets longer than ``max_depth`` or more
            than ``max_steps`` nodes are expanded.
    """
    # (node_id, path, finished): finished frames mark a fully explored subtree
    stack: List[Tuple[str, Tuple[str, ...], bool]] = [(start_id, (), False)]
    # nodes whose every successor was explored without closing a loop
    cleared: Set[str] = set()
    steps = 0

    while stack:
        node_id, path, finished = stack.pop()
        if finished:
            cleared.add(node_id)
            continue
        if node_id in path:
            loop_start = path.index(node_id)
            return path[loop_start:] + (node_id,)
        if node_id in cleared:
            continue

        path = path + (node_id,)
        if len(path) > max_depth:
            raise TraversalLimitError(
                f"Traversal from '{start_id}' exceeded max depth {max_depth}", start_id, max_depth
            )
        steps += 1
        if steps > max_steps:
            raise TraversalLimitError(
                f"Traversal from '{start_id}' exceeded max steps {max_steps}", start_id, max_steps
            )

        stack.append((node_id, path, True))
        # reversed so the first successor is popped first
        for nxt in reversed(list(successors(node_id))):
            stack.append((nxt, path, False))

    return None


def pointer_target(node, pointer_name: str) -> Optional[str]:
    if pointer_name not in node.get_pointer_names():
        return None
    pointer = node.get_pointer(pointer_name)
    if pointer is None or not pointer.to:
        return None
    return pointer.to


def connection_target(connection) -> Optional[str]:
    for pointer_name in CONNECTION_TARGET_POINTERS:
        target = pointer_target(connection, pointer_name)
        if target:
            return target
    return None


def _child_commands(accessor: GraphAccessor, node) -> List[str]:
    commands: List[str] = []
    for child_id in node.get_children_ids():
        child = accessor.get_node(child_id)
        if child is not None and is_turtle_command(child):
            commands.append(child_id)
    return commands


def next_pointer_successors(accessor: GraphAccessor) -> SuccessorFn:
    """``next`` target first, then contained turtle commands in child order."""

    def successors(node_id: str) -> List[str]:
        node = accessor.get_node(node_id)
        if node is None:
            return []
        result: List[str] = []
        target = pointer_target(node, NEXT_POINTER)
        if target:
            result.append(target)
        result.extend(_child_commands(accessor, node))
        return result

    return successors


def containment_successors(accessor: GraphAccessor) -> SuccessorFn:
    """Contained turtle commands only; ``next`` pointers are ignored."""

    def successors(node_id: str) -> List[str]:
        node = accessor.get_node(node_id)
        if node is None:
            return []
        return _child_commands(accessor, node)

    return successors


def connection_successors(accessor: GraphAccessor) -> SuccessorFn:
    """Targets of contained next-connection nodes (dst, then target, then to)."""

    def successors(node_id: str) -> List[str]:
        node = accessor.get_node(node_id)
        if node is None:
            return []
        result: List[str] = []
        for child_id in node.get_children_ids():
            child = accessor.get_node(child_id)
            if child is None or not is_next_connection(child):
                continue
            target = connection_target(child)
            if target:
                result.append(target)
        return result

    return successors
