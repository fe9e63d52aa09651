"""Modularity scoring."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from kgraph.community.types import CommunityAssignment, CommunityDetectionOptions
from kgraph.graph.model import WeightedGraph, build_weighted_graph


def partition_modularity(
    graph: WeightedGraph,
    membership: Sequence[int],
    resolution: float = 1.0,
) -> float:
    """Modularity of a partition of ``graph``.

    Q = (1/2m) * sum over unordered pairs i != j in the same community of
    (w_ij - resolution * k_i * k_j / 2m). Self-loops never form a pair.

    Per community this is W_C - resolution * ((sum k)^2 - sum k^2) / (2 * 2m),
    with W_C the weight of internal non-loop edges.
    """
    two_m = graph.total_weight
    if two_m == 0:
        return 0.0

    internal: Dict[int, float] = {}
    degree_sum: Dict[int, float] = {}
    degree_sq: Dict[int, float] = {}

    for i, j, weight in graph.edges:
        if i != j and membership[i] == membership[j]:
            internal[membership[i]] = internal.get(membership[i], 0.0) + weight

    for node, degree in enumerate(graph.degrees):
        community = membership[node]
        degree_sum[community] = degree_sum.get(community, 0.0) + degree
        degree_sq[community] = degree_sq.get(community, 0.0) + degree * degree

    total = 0.0
    for community, k_sum in degree_sum.items():
        expected = resolution * (k_sum * k_sum - degree_sq[community]) / (2 * two_m)
        total += internal.get(community, 0.0) - expected
    return total / two_m


def calculate_modularity(
    nodes: Iterable[Any],
    edges: Iterable[Any],
    assignments: Mapping[str, Union[int, CommunityAssignment]],
    options: Optional[CommunityDetectionOptions] = None,
) -> float:
    """Modularity of a caller-supplied partition.

    ``assignments`` maps node id to a community id or CommunityAssignment.
    Nodes missing from it are treated as singletons.
    """
    options = options or CommunityDetectionOptions.default()
    graph = build_weighted_graph(
        nodes,
        edges,
        use_weights=options.use_weights,
        default_weight=options.default_weight,
    )

    labels: Dict[Any, int] = {}
    membership: List[int] = []
    for position, nid in enumerate(graph.node_ids):
        value = assignments.get(nid)
        if isinstance(value, CommunityAssignment):
            key: Any = value.community_id
        elif value is None:
            key = ("singleton", position)
        else:
            key = value
        membership.append(labels.setdefault(key, len(labels)))

    return partition_modularity(graph, membership, options.resolution)
