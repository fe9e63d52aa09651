"""Path Finding Module.

Finds paths between two nodes with BFS, Dijkstra or bidirectional BFS under
configurable direction and edge weighting rules.

Example:
    >>> from kgraph.pathfinding import PathFinder, PathFindingOptions

    >>> finder = PathFinder()
    >>> finder.set_graph(nodes, edges)
    >>> result = finder.find_path("a", "d")
    >>> if result.found:
    ...     print(" -> ".join(result.paths[0].node_ids))

    >>> # All equally short paths, weighted by predicate
    >>> result = finder.find_path(
    ...     "a", "d",
    ...     algorithm="dijkstra",
    ...     weight_strategy="predicate",
    ...     preferred_predicates=("ex:cites",),
    ...     find_all_paths=True,
    ... )
"""

from kgraph.pathfinding.types import (
    SEARCH_TIMED_OUT,
    SOURCE_NOT_FOUND,
    TARGET_NOT_FOUND,
    Path,
    PathDirection,
    PathFindingAlgorithm,
    PathFindingOptions,
    PathFindingResult,
    PathStep,
)
from kgraph.pathfinding.arena import NO_PARENT, PathNodeArena
from kgraph.pathfinding.finder import PathFinder, create_path_finder

__all__ = [
    # Engine
    "PathFinder",
    "create_path_finder",
    # Types
    "Path",
    "PathDirection",
    "PathFindingAlgorithm",
    "PathFindingOptions",
    "PathFindingResult",
    "PathStep",
    # Arena
    "NO_PARENT",
    "PathNodeArena",
    # Error messages
    "SEARCH_TIMED_OUT",
    "SOURCE_NOT_FOUND",
    "TARGET_NOT_FOUND",
]
