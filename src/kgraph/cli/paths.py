"""Path finding CLI command.

Examples:
    kgraph path graph.json note:a note:d
    kgraph path graph.json note:a note:d --algorithm dijkstra --weights predicate --prefer ex:cites
    kgraph path graph.json note:a note:d --all --max-paths 3 --json
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from typer import Argument, Option

from kgraph.cli.common import console, load_inputs, print_json
from kgraph.configuration.settings import DEFAULT_CONFIG_PATH
from kgraph.graph.weights import EdgeWeightStrategy
from kgraph.pathfinding.finder import PathFinder
from kgraph.pathfinding.types import PathDirection, PathFindingAlgorithm, PathFindingResult

logger = logging.getLogger(__name__)


def path_command(
    graph_file: Path = Argument(..., help="JSON graph file with 'nodes' and 'edges'"),
    source_id: str = Argument(..., help="Start node id"),
    target_id: str = Argument(..., help="End node id"),
    algorithm: Optional[PathFindingAlgorithm] = Option(None, "--algorithm", "-a", help="Search algorithm"),
    direction: Optional[PathDirection] = Option(None, "--direction", "-d", help="Edge directions to follow"),
    max_length: Optional[int] = Option(None, "--max-length", help="Maximum path length in edges"),
    weights: Optional[EdgeWeightStrategy] = Option(None, "--weights", "-w", help="Edge weight strategy"),
    prefer: Optional[List[str]] = Option(None, "--prefer", help="Preferred predicate (repeatable)"),
    avoid: Optional[List[str]] = Option(None, "--avoid", help="Avoided predicate (repeatable)"),
    find_all: bool = Option(False, "--all", help="Return all optimal paths"),
    max_paths: Optional[int] = Option(None, "--max-paths", help="Cap for --all"),
    timeout_ms: Optional[float] = Option(None, "--timeout-ms", help="Search budget in milliseconds"),
    output_json: bool = Option(False, "--json", help="Output as JSON"),
    config_path: Path = Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
) -> None:
    """Find a path between two nodes.

    A missing path is reported, not treated as a failure.
    """
    settings, graph = load_inputs(graph_file, config_path, output_json)

    options = settings.pathfinding.to_options()
    overrides = {
        "algorithm": algorithm,
        "direction": direction,
        "max_length": max_length,
        "weight_strategy": weights,
        "preferred_predicates": tuple(prefer) if prefer else None,
        "avoided_predicates": tuple(avoid) if avoid else None,
        "max_paths": max_paths,
        "timeout_ms": timeout_ms,
    }
    options = replace(options, **{key: value for key, value in overrides.items() if value is not None})
    if find_all:
        options = replace(options, find_all_paths=True)

    finder = PathFinder(options)
    finder.set_graph(graph.nodes, graph.edges)
    result = finder.find_path(source_id, target_id)

    if output_json:
        print_json(_to_payload(result))
        return
    _render(result)


def _to_payload(result: PathFindingResult) -> dict:
    return {
        "success": True,
        "found": result.found,
        "sourceId": result.source_id,
        "targetId": result.target_id,
        "algorithm": result.algorithm.value,
        "nodesVisited": result.nodes_visited,
        "searchTimeMs": result.search_time_ms,
        "timedOut": result.timed_out,
        "error": result.error,
        "paths": [
            {
                "id": p.id,
                "nodeIds": p.node_ids,
                "edgeIds": p.edge_ids,
                "length": p.length,
                "totalWeight": p.total_weight,
            }
            for p in result.paths
        ],
    }


def _render(result: PathFindingResult) -> None:
    console.print(
        f"Path {result.source_id} -> {result.target_id} "
        f"({result.algorithm.value}, {result.nodes_visited} nodes visited, "
        f"{result.search_time_ms:.1f}ms)"
    )
    if result.error:
        console.print(f"[yellow]{result.error}[/yellow]")
    elif result.timed_out:
        console.print("[yellow]Search timed out; showing the paths found so far[/yellow]")
    if not result.found:
        if not result.error:
            console.print("No path found within the given constraints.")
        return

    for path in result.paths:
        hops = []
        for step in path.steps:
            if step.edge_id is None:
                hops.append(step.node_id)
            else:
                arrow = "<-" if step.is_reverse else "->"
                hops.append(f"{arrow} {step.node_id}")
        console.print(" ".join(hops), markup=False)
        console.print(f"[dim]length {path.length}, weight {path.total_weight:g}[/dim]")
