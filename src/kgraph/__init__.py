"""kgraph: community detection and path finding for knowledge graphs."""

__version__ = "0.1.0"

from kgraph.community import (
    Community,
    CommunityAssignment,
    CommunityDetectionOptions,
    CommunityDetectionResult,
    LouvainDetector,
    calculate_modularity,
    detect_communities,
)
from kgraph.exceptions import GraphAnalyticsError, GraphLoadError, SettingsError
from kgraph.graph import GraphEdge, GraphNode, load_graph_file
from kgraph.pathfinding import (
    Path,
    PathDirection,
    PathFinder,
    PathFindingAlgorithm,
    PathFindingOptions,
    PathFindingResult,
    PathStep,
    create_path_finder,
)

__all__ = [
    "__version__",
    # Community detection
    "Community",
    "CommunityAssignment",
    "CommunityDetectionOptions",
    "CommunityDetectionResult",
    "LouvainDetector",
    "calculate_modularity",
    "detect_communities",
    # Path finding
    "Path",
    "PathDirection",
    "PathFinder",
    "PathFindingAlgorithm",
    "PathFindingOptions",
    "PathFindingResult",
    "PathStep",
    "create_path_finder",
    # Graph records
    "GraphEdge",
    "GraphNode",
    "load_graph_file",
    # Errors
    "GraphAnalyticsError",
    "GraphLoadError",
    "SettingsError",
]
