"""Graph Model Module.

Record types, dense adjacency structures and edge weighting shared by the
community detection and path finding engines.

Example:
    >>> from kgraph.graph import build_path_graph, make_weight_function

    >>> graph = build_path_graph(nodes, edges, make_weight_function("uniform"))
    >>> graph.neighbors(graph.index_of("a"), "outgoing")
"""

from kgraph.graph.types import (
    GraphEdge,
    GraphNode,
    coerce_edge,
    coerce_node,
    edge_endpoints,
    edge_predicate,
    edge_weight,
    endpoint_id,
)
from kgraph.graph.weights import (
    AVOIDED_PREDICATE_WEIGHT,
    DEFAULT_EDGE_WEIGHT,
    PREFERRED_PREDICATE_WEIGHT,
    EdgeWeightStrategy,
    make_weight_function,
)
from kgraph.graph.model import (
    AdjacencyEntry,
    PathGraph,
    WeightedGraph,
    build_path_graph,
    build_weighted_graph,
)
from kgraph.graph.loader import GraphData, load_graph_file, parse_graph_payload

__all__ = [
    # Records
    "GraphEdge",
    "GraphNode",
    "coerce_edge",
    "coerce_node",
    "edge_endpoints",
    "edge_predicate",
    "edge_weight",
    "endpoint_id",
    # Weights
    "AVOIDED_PREDICATE_WEIGHT",
    "DEFAULT_EDGE_WEIGHT",
    "PREFERRED_PREDICATE_WEIGHT",
    "EdgeWeightStrategy",
    "make_weight_function",
    # Structures
    "AdjacencyEntry",
    "PathGraph",
    "WeightedGraph",
    "build_path_graph",
    "build_weighted_graph",
    # Loading
    "GraphData",
    "load_graph_file",
    "parse_graph_payload",
]
