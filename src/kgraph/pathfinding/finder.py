"""Path Finder.

Entry point for path queries between two nodes:
- set_graph(): index nodes/edges once into forward and reverse adjacency
- find_path(): run BFS, Dijkstra or bidirectional BFS with per-call overrides
- set_options() / get_options(): persistent default options

Missing endpoints, unreachable targets and timeouts are reported through
PathFindingResult; nothing here raises for them.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, List, Optional, Tuple

from kgraph.graph.model import PathGraph, build_path_graph
from kgraph.graph.types import edge_id
from kgraph.graph.weights import EdgeWeightStrategy, make_weight_function
from kgraph.pathfinding.all_paths import all_shortest_by_hops, all_shortest_by_weight
from kgraph.pathfinding.search import Deadline, RawStep, SearchOutcome, strategy_for
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

logger = logging.getLogger(__name__)


def _normalize(options: PathFindingOptions) -> PathFindingOptions:
    """Coerce enum-valued fields given as plain strings."""
    try:
        direction = PathDirection(options.direction)
    except ValueError:
        direction = PathDirection.BOTH
    try:
        strategy = EdgeWeightStrategy(options.weight_strategy)
    except ValueError:
        strategy = EdgeWeightStrategy.UNIFORM
    return replace(
        options,
        algorithm=PathFindingAlgorithm.parse(options.algorithm),
        direction=direction,
        weight_strategy=strategy,
        preferred_predicates=tuple(options.preferred_predicates),
        avoided_predicates=tuple(options.avoided_predicates),
    )


class PathFinder:
    """Finds paths between nodes of an in-memory graph.

    Example:
        >>> finder = PathFinder(PathFindingOptions(algorithm=PathFindingAlgorithm.DIJKSTRA))
        >>> finder.set_graph(nodes, edges)
        >>> result = finder.find_path("a", "d", direction="outgoing")
        >>> result.paths[0].node_ids
    """

    def __init__(self, options: Optional[PathFindingOptions] = None):
        self._options = _normalize(options or PathFindingOptions.default())
        self._nodes: List[Any] = []
        self._edges: List[Any] = []
        self._graph = PathGraph()
        self._graph_weight_key: Optional[Tuple[Any, ...]] = None

    @property
    def node_count(self) -> int:
        return self._graph.node_count

    def has_node(self, nid: str) -> bool:
        return nid in self._graph.index

    def set_graph(self, nodes: Iterable[Any], edges: Iterable[Any]) -> None:
        """Replace the graph. Edges with unknown endpoints are dropped."""
        self._nodes = list(nodes)
        self._edges = list(edges)
        self._graph = self._build(self._options)
        self._graph_weight_key = self._options.weight_key()
        logger.debug(
            f"Path graph set: {self._graph.node_count} nodes, "
            f"{sum(len(entries) for entries in self._graph.forward)} edges"
        )

    def set_options(self, options: Optional[PathFindingOptions] = None, **overrides: Any) -> None:
        """Update the default options, rebuilding edge weights when they change."""
        base = options or self._options
        self._options = _normalize(replace(base, **overrides) if overrides else base)
        if self._graph_weight_key is not None and self._options.weight_key() != self._graph_weight_key:
            self._graph = self._build(self._options)
            self._graph_weight_key = self._options.weight_key()

    def get_options(self) -> PathFindingOptions:
        """Copy of the current default options."""
        return replace(self._options)

    def find_path(
        self,
        source_id: str,
        target_id: str,
        options: Optional[PathFindingOptions] = None,
        **overrides: Any,
    ) -> PathFindingResult:
        """
        Find path(s) between two nodes.

        Args:
            source_id: Start node id
            target_id: End node id
            options: Options replacing the defaults for this call
            **overrides: Individual option fields overriding for this call

        Returns:
            PathFindingResult; ``error`` is set for missing endpoints and timeouts
        """
        opts = options or self._options
        if overrides:
            opts = replace(opts, **overrides)
        opts = _normalize(opts)
        deadline = Deadline(opts.timeout_ms)

        graph = self._graph
        if self._graph_weight_key is not None and opts.weight_key() != self._graph_weight_key:
            graph = self._build(opts)

        source = graph.index_of(source_id)
        target = graph.index_of(target_id)
        if source is None:
            return self._error_result(source_id, target_id, opts, deadline, SOURCE_NOT_FOUND)
        if target is None:
            return self._error_result(source_id, target_id, opts, deadline, TARGET_NOT_FOUND)

        if source == target:
            path = self._to_path(graph, source_id, target_id, 0, [RawStep(source, None, False, 0.0)])
            return PathFindingResult(
                found=True,
                paths=[path],
                source_id=source_id,
                target_id=target_id,
                algorithm=opts.algorithm,
                nodes_visited=1,
                search_time_ms=deadline.elapsed_ms(),
            )

        outcome = self._search(graph, source, target, opts, deadline)
        paths = [
            self._to_path(graph, source_id, target_id, position, steps)
            for position, steps in enumerate(outcome.paths)
        ]
        result = PathFindingResult(
            found=bool(paths),
            paths=paths,
            source_id=source_id,
            target_id=target_id,
            algorithm=opts.algorithm,
            nodes_visited=outcome.nodes_visited,
            search_time_ms=deadline.elapsed_ms(),
            timed_out=outcome.timed_out,
            error=SEARCH_TIMED_OUT if outcome.timed_out and not paths else None,
        )

        if outcome.timed_out:
            logger.warning(
                f"Path search {source_id} -> {target_id} timed out after "
                f"{result.search_time_ms:.1f}ms ({result.nodes_visited} nodes visited)"
            )
        else:
            logger.info(
                f"Path search {source_id} -> {target_id} ({opts.algorithm.value}): "
                f"{len(paths)} path(s), {result.nodes_visited} nodes visited"
            )
        return result

    def _build(self, options: PathFindingOptions) -> PathGraph:
        weight_fn = make_weight_function(
            options.weight_strategy,
            options.preferred_predicates,
            options.avoided_predicates,
            options.custom_weight_fn,
        )
        return build_path_graph(self._nodes, self._edges, weight_fn)

    @staticmethod
    def _search(
        graph: PathGraph,
        source: int,
        target: int,
        options: PathFindingOptions,
        deadline: Deadline,
    ) -> SearchOutcome:
        if options.find_all_paths:
            enumerate_paths = (
                all_shortest_by_weight
                if options.algorithm == PathFindingAlgorithm.DIJKSTRA
                else all_shortest_by_hops
            )
            return enumerate_paths(
                graph,
                source,
                target,
                options.direction,
                options.max_length,
                max(options.max_paths, 1),
                deadline,
            )
        search = strategy_for(options.algorithm)
        return search(graph, source, target, options.direction, options.max_length, deadline)

    @staticmethod
    def _to_path(
        graph: PathGraph,
        source_id: str,
        target_id: str,
        position: int,
        raw_steps: List[RawStep],
    ) -> Path:
        steps = [
            PathStep(
                node_id=graph.node_ids[raw.node],
                node=graph.nodes[raw.node],
                edge_id=edge_id(raw.edge) if raw.edge is not None else None,
                edge=raw.edge,
                is_reverse=raw.is_reverse,
                cumulative_weight=raw.cumulative_weight,
            )
            for raw in raw_steps
        ]
        return Path(
            id=f"path-{source_id}-{target_id}-{position}",
            source_id=source_id,
            target_id=target_id,
            source=steps[0].node if steps else None,
            target=steps[-1].node if steps else None,
            steps=steps,
            total_weight=raw_steps[-1].cumulative_weight if raw_steps else 0.0,
        )

    @staticmethod
    def _error_result(
        source_id: str,
        target_id: str,
        options: PathFindingOptions,
        deadline: Deadline,
        message: str,
    ) -> PathFindingResult:
        logger.info(f"Path search {source_id} -> {target_id} rejected: {message}")
        return PathFindingResult(
            found=False,
            source_id=source_id,
            target_id=target_id,
            algorithm=options.algorithm,
            search_time_ms=deadline.elapsed_ms(),
            error=message,
        )


def create_path_finder(options: Optional[PathFindingOptions] = None, **overrides: Any) -> PathFinder:
    """Create a PathFinder, optionally overriding default option fields."""
    options = options or PathFindingOptions.default()
    if overrides:
        options = replace(options, **overrides)
    return PathFinder(options)
