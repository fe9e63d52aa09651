"""
Louvain Community Detection.

Multi-level modularity optimization over a weighted undirected graph:
1. Local moving: Move nodes to the neighbouring community with the best gain
2. Aggregation: Collapse communities into super-nodes and repeat

Randomness comes only from a seeded ``random.Random`` passed into the
local-moving phase, so identical seeds reproduce identical partitions.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from kgraph.community.modularity import partition_modularity
from kgraph.community.types import (
    Community,
    CommunityAssignment,
    CommunityDetectionOptions,
    CommunityDetectionResult,
)
from kgraph.graph.model import WeightedGraph, build_weighted_graph

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _compact(membership: List[int]) -> Tuple[List[int], int]:
    """Relabel community ids to 0..k-1 by first occurrence."""
    labels: Dict[int, int] = {}
    compacted = [labels.setdefault(community, len(labels)) for community in membership]
    return compacted, len(labels)


class LouvainDetector:
    """
    Louvain algorithm for community detection.

    Optimizes modularity through two phases per level:
    1. Local optimization: Move nodes to maximize modularity gain
    2. Aggregation: Build new network of communities

    Example:
        >>> detector = LouvainDetector(CommunityDetectionOptions(random_seed=7))
        >>> result = detector.detect(nodes, edges)
        >>> result.modularity
    """

    def __init__(self, options: Optional[CommunityDetectionOptions] = None):
        self.options = options or CommunityDetectionOptions.default()

    def detect(self, nodes: Iterable[Any], edges: Iterable[Any]) -> CommunityDetectionResult:
        """
        Detect communities.

        Args:
            nodes: Node records with an ``id``
            edges: Edge records with ``source``, ``target`` and optional ``weight``

        Returns:
            CommunityDetectionResult with contiguous community ids
        """
        start = time.perf_counter()
        options = self.options
        graph = build_weighted_graph(
            nodes,
            edges,
            use_weights=options.use_weights,
            default_weight=options.default_weight,
        )
        node_count = graph.node_count

        if node_count == 0:
            return CommunityDetectionResult(compute_time_ms=_elapsed_ms(start))

        if graph.total_weight == 0:
            # No edges - each node is its own community
            membership = list(range(node_count))
            return self._build_result(graph, membership, 1, 0, start)

        rng = random.Random(options.random_seed)

        # Super-node -> original node indices
        node_mapping: List[List[int]] = [[i] for i in range(node_count)]
        membership = list(range(node_count))
        current = graph
        level = 0
        iterations = 0

        while True:
            local, passes = self._local_moving(current, rng)
            iterations += 1
            labels, community_count = _compact(local)

            for super_node, originals in enumerate(node_mapping):
                for original in originals:
                    membership[original] = labels[super_node]

            logger.debug(
                f"Level {level}: {current.node_count} nodes -> {community_count} communities "
                f"after {passes} passes"
            )

            if community_count == 1 or community_count == current.node_count:
                break

            current, node_mapping = self._aggregate(current, labels, community_count, node_mapping)
            level += 1

        return self._build_result(graph, membership, iterations, level, start)

    def _local_moving(self, graph: WeightedGraph, rng: random.Random) -> Tuple[List[int], int]:
        """Run local-moving passes until one makes no move or the pass budget is spent."""
        node_count = graph.node_count
        two_m = graph.total_weight
        community = list(range(node_count))
        self_loops = [graph.adjacency[i].get(i, 0.0) for i in range(node_count)]
        community_total = list(graph.degrees)
        community_internal = list(self_loops)
        order = list(range(node_count))

        passes = 0
        while passes < self.options.max_iterations:
            passes += 1
            if self.options.randomize_order:
                rng.shuffle(order)

            moves = 0
            for node in order:
                current_community = community[node]
                ki = graph.degrees[node]

                # Weight from node to each neighbouring community
                neighbor_communities: Dict[int, float] = {}
                for neighbor, weight in graph.adjacency[node].items():
                    if neighbor == node:
                        continue
                    nc = community[neighbor]
                    neighbor_communities[nc] = neighbor_communities.get(nc, 0.0) + weight

                # Take the node out of its community
                weight_to_current = neighbor_communities.get(current_community, 0.0)
                community_total[current_community] -= ki
                community_internal[current_community] -= 2 * weight_to_current + self_loops[node]

                best_community = current_community
                best_gain = self._modularity_gain(
                    weight_to_current, community_total[current_community], ki, two_m
                )
                for candidate, weight_to_candidate in neighbor_communities.items():
                    if candidate == current_community:
                        continue
                    gain = self._modularity_gain(
                        weight_to_candidate, community_total[candidate], ki, two_m
                    )
                    if gain > best_gain and gain > 0:
                        best_gain = gain
                        best_community = candidate

                self._move_node(
                    node,
                    best_community,
                    neighbor_communities.get(best_community, 0.0),
                    ki,
                    self_loops[node],
                    community,
                    community_total,
                    community_internal,
                )
                if best_community != current_community:
                    moves += 1

            if moves == 0:
                break

        logger.debug(
            f"Local moving converged to modularity "
            f"{self._level_modularity(community_internal, community_total, two_m):.4f}"
        )
        return community, passes

    def _modularity_gain(
        self,
        weight_to_target: float,
        sigma_tot: float,
        ki: float,
        two_m: float,
    ) -> float:
        """Gain = k_i,in - resolution * sigma_tot * k_i / 2m."""
        return weight_to_target - self.options.resolution * sigma_tot * ki / two_m

    @staticmethod
    def _move_node(
        node: int,
        to_community: int,
        weight_to_target: float,
        ki: float,
        self_loop: float,
        community: List[int],
        community_total: List[float],
        community_internal: List[float],
    ) -> None:
        """Insert a detached node into a community."""
        community[node] = to_community
        community_total[to_community] += ki
        community_internal[to_community] += 2 * weight_to_target + self_loop

    def _level_modularity(
        self,
        community_internal: List[float],
        community_total: List[float],
        two_m: float,
    ) -> float:
        total = 0.0
        for internal, degree in zip(community_internal, community_total):
            if degree > 0:
                total += internal / two_m - self.options.resolution * (degree / two_m) ** 2
        return total

    @staticmethod
    def _aggregate(
        graph: WeightedGraph,
        labels: List[int],
        community_count: int,
        node_mapping: List[List[int]],
    ) -> Tuple[WeightedGraph, List[List[int]]]:
        """Collapse each community into a super-node.

        Internal edges become self-loops (2x weight), external edges are summed.
        """
        merged: Dict[Tuple[int, int], float] = {}
        for i, j, weight in graph.edges:
            ci, cj = labels[i], labels[j]
            key = (ci, cj) if ci <= cj else (cj, ci)
            merged[key] = merged.get(key, 0.0) + weight

        aggregated = WeightedGraph(
            node_ids=[str(c) for c in range(community_count)],
            index={str(c): c for c in range(community_count)},
            adjacency=[{} for _ in range(community_count)],
            degrees=[0.0] * community_count,
        )
        for (ci, cj), weight in merged.items():
            aggregated.add_edge(ci, cj, weight)

        mapping: List[List[int]] = [[] for _ in range(community_count)]
        for super_node, originals in enumerate(node_mapping):
            mapping[labels[super_node]].extend(originals)
        return aggregated, mapping

    def _build_result(
        self,
        graph: WeightedGraph,
        membership: List[int],
        iterations: int,
        level: int,
        start: float,
    ) -> CommunityDetectionResult:
        # Renumber by first encounter in input node order
        membership, community_count = _compact(membership)

        members: List[List[str]] = [[] for _ in range(community_count)]
        total_degree = [0.0] * community_count
        internal_weight = [0.0] * community_count
        assignments: Dict[str, CommunityAssignment] = {}

        for index, nid in enumerate(graph.node_ids):
            community_id = membership[index]
            members[community_id].append(nid)
            total_degree[community_id] += graph.degrees[index]
            assignments[nid] = CommunityAssignment(
                node_id=nid,
                community_id=community_id,
                confidence=1.0,
                level=level,
            )

        for i, j, weight in graph.edges:
            if membership[i] == membership[j]:
                internal_weight[membership[i]] += weight

        communities = [
            Community(
                id=community_id,
                members=members[community_id],
                internal_weight=internal_weight[community_id],
                total_degree=total_degree[community_id],
            )
            for community_id in range(community_count)
        ]
        communities.sort(key=lambda c: (-c.size, c.id))

        modularity = partition_modularity(graph, membership, self.options.resolution)
        result = CommunityDetectionResult(
            assignments=assignments,
            communities=communities,
            modularity=modularity,
            iterations=iterations,
            levels=level + 1,
            compute_time_ms=_elapsed_ms(start),
        )
        logger.info(
            f"Louvain found {community_count} communities over {result.levels} levels "
            f"(modularity={modularity:.4f}, {result.compute_time_ms:.1f}ms)"
        )
        return result


def detect_communities(
    nodes: Iterable[Any],
    edges: Iterable[Any],
    options: Optional[CommunityDetectionOptions] = None,
    **overrides: Any,
) -> CommunityDetectionResult:
    """Run Louvain detection with optional per-call option overrides.

    Example:
        >>> result = detect_communities(nodes, edges, resolution=1.2, random_seed=3)
    """
    options = options or CommunityDetectionOptions.default()
    if overrides:
        options = replace(options, **overrides)
    return LouvainDetector(options).detect(nodes, edges)
