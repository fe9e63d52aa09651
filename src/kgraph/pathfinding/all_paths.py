"""Enumeration of all optimal paths.

Builds a predecessor DAG of optimal edges over ``(node, hops)`` states (hop
count for BFS-style searches, total weight for Dijkstra) and walks it back
from the target, yielding at most ``max_paths`` distinct simple paths within
``max_length`` edges.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections import deque
from typing import Dict, List, Set, Tuple

from kgraph.graph.model import AdjacencyEntry, PathGraph
from kgraph.pathfinding.search import Deadline, RawStep, SearchOutcome
from kgraph.pathfinding.types import PathDirection

logger = logging.getLogger(__name__)

# Tolerance for treating two weighted distances as equal
DISTANCE_EPSILON = 1e-9

# (node index, edges walked from the source)
State = Tuple[int, int]
Predecessors = Dict[State, List[Tuple[State, AdjacencyEntry]]]


def all_shortest_by_hops(
    graph: PathGraph,
    source: int,
    target: int,
    direction: PathDirection,
    max_length: int,
    max_paths: int,
    deadline: Deadline,
) -> SearchOutcome:
    """All shortest paths by edge count."""
    distance: Dict[int, int] = {source: 0}
    predecessors: Predecessors = {}
    queue = deque([source])
    nodes_visited = 0

    while queue:
        if deadline.expired():
            return SearchOutcome(nodes_visited=nodes_visited, timed_out=True)

        node = queue.popleft()
        nodes_visited += 1
        depth = distance[node]
        if node == target or depth >= max_length:
            continue
        if target in distance and depth >= distance[target]:
            # Every remaining node sits at the target's depth or deeper
            break

        for entry in graph.neighbors(node, direction):
            seen = distance.get(entry.target)
            if seen is None:
                distance[entry.target] = depth + 1
                predecessors[(entry.target, depth + 1)] = [((node, depth), entry)]
                queue.append(entry.target)
            elif seen == depth + 1:
                predecessors[(entry.target, depth + 1)].append(((node, depth), entry))

    if target not in distance:
        return SearchOutcome(nodes_visited=nodes_visited)
    cost = {(node, hops): float(hops) for node, hops in distance.items()}
    return _enumerate(
        predecessors,
        cost,
        (source, 0),
        [(target, distance[target])],
        max_paths,
        deadline,
        nodes_visited,
    )


def all_shortest_by_weight(
    graph: PathGraph,
    source: int,
    target: int,
    direction: PathDirection,
    max_length: int,
    max_paths: int,
    deadline: Deadline,
) -> SearchOutcome:
    """All paths of minimal total weight among those within ``max_length`` edges.

    Distances are kept per ``(node, hops)`` state, so a heavy short path still
    counts when every lighter path is too long. Ties are recorded even once
    the reached state is settled; hops only grow along an edge, so the
    predecessor graph stays acyclic under zero-weight edges.
    """
    counter = itertools.count()
    start: State = (source, 0)
    best: Dict[State, float] = {start: 0.0}
    predecessors: Predecessors = {}
    finalized: Set[State] = set()
    visited: Set[int] = set()
    targets: List[State] = []
    target_distance = None
    heap = [(0.0, next(counter), start)]

    while heap:
        if deadline.expired():
            return SearchOutcome(nodes_visited=len(visited), timed_out=True)

        distance, _, state = heapq.heappop(heap)
        if state in finalized or distance > best[state]:
            continue
        if target_distance is not None and distance > target_distance + DISTANCE_EPSILON:
            break
        finalized.add(state)
        node, hops = state
        visited.add(node)
        if node == target:
            if target_distance is None:
                target_distance = distance
            targets.append(state)
            continue
        if hops >= max_length:
            continue

        for entry in graph.neighbors(node, direction):
            reached = (entry.target, hops + 1)
            candidate = distance + entry.weight
            known = best.get(reached)
            if known is None or candidate < known - DISTANCE_EPSILON:
                best[reached] = candidate
                predecessors[reached] = [(state, entry)]
                heapq.heappush(heap, (candidate, next(counter), reached))
            elif abs(candidate - known) <= DISTANCE_EPSILON:
                predecessors[reached].append((state, entry))

    if not targets:
        return SearchOutcome(nodes_visited=len(visited))
    return _enumerate(
        predecessors,
        best,
        start,
        sorted(targets, key=lambda reached: reached[1]),
        max_paths,
        deadline,
        len(visited),
    )


def _enumerate(
    predecessors: Predecessors,
    cost: Dict[State, float],
    start: State,
    targets: List[State],
    max_paths: int,
    deadline: Deadline,
    nodes_visited: int,
) -> SearchOutcome:
    """Depth-first walk of the predecessor DAG from each target state back to the start.

    Walks that would revisit a node are cut, so only simple paths come out.
    """
    paths: List[List[RawStep]] = []
    # Each frame: (state, steps collected so far in reverse order, nodes on the walk)
    stack: List[Tuple[State, List[RawStep], Set[int]]] = [
        (state, [RawStep(state[0], None, False, cost[state])], {state[0]})
        for state in reversed(targets)
    ]

    while stack and len(paths) < max_paths:
        if deadline.expired():
            logger.warning(f"Path enumeration timed out after {len(paths)} paths")
            return SearchOutcome(paths=paths, nodes_visited=nodes_visited, timed_out=True)

        state, reversed_steps, on_walk = stack.pop()
        if state == start:
            paths.append(_forward(reversed_steps))
            continue

        # Reversed so the first predecessor is explored first
        for previous, entry in reversed(predecessors.get(state, [])):
            if previous[0] in on_walk:
                continue
            stack.append(
                (
                    previous,
                    reversed_steps + [RawStep(previous[0], entry, entry.is_reverse, cost[previous])],
                    on_walk | {previous[0]},
                )
            )

    return SearchOutcome(paths=paths, nodes_visited=nodes_visited)


def _forward(reversed_steps: List[RawStep]) -> List[RawStep]:
    """Turn a target-to-source walk into source-to-target steps.

    In the reversed walk each step carries the entry used to reach the node
    *after* it; shifting edges by one gives the forward attribution.
    """
    ordered = list(reversed(reversed_steps))
    steps: List[RawStep] = [RawStep(ordered[0].node, None, False, ordered[0].cumulative_weight)]
    for position in range(1, len(ordered)):
        entry = ordered[position - 1].edge
        steps.append(
            RawStep(
                node=ordered[position].node,
                edge=entry.edge,
                is_reverse=entry.is_reverse,
                cumulative_weight=ordered[position].cumulative_weight,
            )
        )
    return steps
