"""
Single-Path Search Strategies.

Implements the three interchangeable search strategies over a PathGraph:
1. BFS: Level-order search, shortest path by edge count
2. Dijkstra: Binary-heap search over configured edge weights
3. Bidirectional: Level-synchronized BFS from both ends

All strategies work on dense node indices, record parents in a
PathNodeArena, check the time budget on every dequeue, and return a
SearchOutcome of raw steps that the finder turns into result models.
"""

from __future__ import annotations

import heapq
import itertools
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional

from kgraph.graph.model import PathGraph
from kgraph.pathfinding.arena import NO_PARENT, PathNodeArena
from kgraph.pathfinding.types import PathDirection


class RawStep(NamedTuple):
    """One step of a found path, in graph indices."""

    node: int
    edge: Any
    is_reverse: bool
    cumulative_weight: float


@dataclass
class SearchOutcome:
    """What a strategy found."""

    paths: List[List[RawStep]] = field(default_factory=list)
    nodes_visited: int = 0
    timed_out: bool = False


class Deadline:
    """Wall-clock budget for one search."""

    def __init__(self, timeout_ms: float):
        self.timeout_ms = timeout_ms
        self.started = time.perf_counter()

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000

    def expired(self) -> bool:
        return self.elapsed_ms() >= self.timeout_ms


def arena_steps(arena: PathNodeArena, handle: int) -> List[RawStep]:
    """Walk parent links back from ``handle`` and return forward-ordered steps."""
    return [
        RawStep(
            node=arena.node[h],
            edge=arena.edge[h],
            is_reverse=arena.is_reverse[h],
            cumulative_weight=arena.distance[h],
        )
        for h in arena.chain(handle)
    ]


def bfs(
    graph: PathGraph,
    source: int,
    target: int,
    direction: PathDirection,
    max_length: int,
    deadline: Deadline,
) -> SearchOutcome:
    """Breadth-first search. The first discovery of the target is a shortest path."""
    arena = PathNodeArena()
    visited = {source}
    queue = deque([arena.add(source, 0)])
    nodes_visited = 0

    while queue:
        if deadline.expired():
            return SearchOutcome(nodes_visited=nodes_visited, timed_out=True)

        handle = queue.popleft()
        nodes_visited += 1
        distance = arena.distance[handle]
        if distance >= max_length:
            continue

        for entry in graph.neighbors(arena.node[handle], direction):
            if entry.target in visited:
                continue
            visited.add(entry.target)
            child = arena.add(entry.target, distance + 1, handle, entry.edge, entry.is_reverse)
            if entry.target == target:
                return SearchOutcome(
                    paths=[arena_steps(arena, child)],
                    nodes_visited=nodes_visited + 1,
                )
            queue.append(child)

    return SearchOutcome(nodes_visited=nodes_visited)


def dijkstra(
    graph: PathGraph,
    source: int,
    target: int,
    direction: PathDirection,
    max_length: int,
    deadline: Deadline,
) -> SearchOutcome:
    """Dijkstra's algorithm with lazy deletion.

    Records at ``max_length`` hops are not expanded, so every returned path
    stays within the hop limit.
    """
    arena = PathNodeArena()
    counter = itertools.count()
    best: Dict[int, float] = {source: 0.0}
    finalized = set()
    heap = [(0.0, next(counter), arena.add(source, 0.0))]
    nodes_visited = 0

    while heap:
        if deadline.expired():
            return SearchOutcome(nodes_visited=nodes_visited, timed_out=True)

        distance, _, handle = heapq.heappop(heap)
        node = arena.node[handle]
        if node in finalized or distance > best[node]:
            continue
        finalized.add(node)
        nodes_visited += 1

        if node == target:
            return SearchOutcome(paths=[arena_steps(arena, handle)], nodes_visited=nodes_visited)
        if arena.hops[handle] >= max_length:
            continue

        for entry in graph.neighbors(node, direction):
            if entry.target in finalized:
                continue
            candidate = distance + entry.weight
            if candidate < best.get(entry.target, float("inf")):
                best[entry.target] = candidate
                child = arena.add(entry.target, candidate, handle, entry.edge, entry.is_reverse)
                heapq.heappush(heap, (candidate, next(counter), child))

    return SearchOutcome(nodes_visited=nodes_visited)


def bidirectional(
    graph: PathGraph,
    source: int,
    target: int,
    direction: PathDirection,
    max_length: int,
    deadline: Deadline,
) -> SearchOutcome:
    """Bidirectional BFS.

    Whole levels are expanded alternately from each end, so the first
    meeting node gives a shortest path by edge count. The backward side
    follows the flipped direction to respect ``direction`` on the spliced
    path.
    """
    backward_direction = PathDirection(direction).flipped()
    forward_arena = PathNodeArena()
    backward_arena = PathNodeArena()
    forward_seen: Dict[int, int] = {source: forward_arena.add(source, 0)}
    backward_seen: Dict[int, int] = {target: backward_arena.add(target, 0)}
    forward_frontier = [forward_seen[source]]
    backward_frontier = [backward_seen[target]]
    forward_depth = 0
    backward_depth = 0
    nodes_visited = 2

    while forward_frontier and backward_frontier and forward_depth + backward_depth < max_length:
        expand_forward = forward_depth <= backward_depth
        if expand_forward:
            arena, seen, other_seen = forward_arena, forward_seen, backward_seen
            frontier, step_direction, depth = forward_frontier, direction, forward_depth
        else:
            arena, seen, other_seen = backward_arena, backward_seen, forward_seen
            frontier, step_direction, depth = backward_frontier, backward_direction, backward_depth

        next_frontier: List[int] = []
        for handle in frontier:
            if deadline.expired():
                return SearchOutcome(nodes_visited=nodes_visited, timed_out=True)

            for entry in graph.neighbors(arena.node[handle], step_direction):
                if entry.target in seen:
                    continue
                child = arena.add(entry.target, depth + 1, handle, entry.edge, entry.is_reverse)
                seen[entry.target] = child
                nodes_visited += 1

                meeting = other_seen.get(entry.target)
                if meeting is not None:
                    if expand_forward:
                        steps = _splice(forward_arena, child, backward_arena, meeting)
                    else:
                        steps = _splice(forward_arena, meeting, backward_arena, child)
                    return SearchOutcome(paths=[steps], nodes_visited=nodes_visited)
                next_frontier.append(child)

        if expand_forward:
            forward_frontier = next_frontier
            forward_depth += 1
        else:
            backward_frontier = next_frontier
            backward_depth += 1

    return SearchOutcome(nodes_visited=nodes_visited)


def _splice(
    forward_arena: PathNodeArena,
    forward_handle: int,
    backward_arena: PathNodeArena,
    backward_handle: int,
) -> List[RawStep]:
    """Join a forward chain ending at the meeting node with the backward chain from it."""
    steps = arena_steps(forward_arena, forward_handle)
    hops = len(steps) - 1
    current = backward_handle
    while backward_arena.previous[current] != NO_PARENT:
        toward_target = backward_arena.previous[current]
        hops += 1
        # The backward search walked toward_target -> current; the path walks it the other way
        steps.append(
            RawStep(
                node=backward_arena.node[toward_target],
                edge=backward_arena.edge[current],
                is_reverse=not backward_arena.is_reverse[current],
                cumulative_weight=float(hops),
            )
        )
        current = toward_target
    return steps


STRATEGIES = {
    "bfs": bfs,
    "dijkstra": dijkstra,
    "bidirectional": bidirectional,
}


def strategy_for(algorithm: Optional[str]):
    """Search function for an algorithm name, BFS for unknown names."""
    return STRATEGIES.get(str(getattr(algorithm, "value", algorithm)), bfs)
