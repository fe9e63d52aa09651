"""Community detection CLI command.

Examples:
    kgraph communities graph.json
    kgraph communities graph.json --resolution 1.5 --seed 7 --json
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

from rich.table import Table
from typer import Argument, Option

from kgraph.cli.common import console, load_inputs, print_json
from kgraph.community.louvain import LouvainDetector
from kgraph.community.types import CommunityDetectionResult
from kgraph.configuration.settings import DEFAULT_CONFIG_PATH

logger = logging.getLogger(__name__)

# Members listed per table row before truncating
MAX_MEMBERS_SHOWN = 8


def detect_command(
    graph_file: Path = Argument(..., help="JSON graph file with 'nodes' and 'edges'"),
    resolution: Optional[float] = Option(None, "--resolution", "-r", help="Resolution parameter"),
    max_iterations: Optional[int] = Option(None, "--max-iterations", help="Local-moving passes per level"),
    seed: Optional[int] = Option(None, "--seed", help="Random seed for node ordering"),
    no_weights: bool = Option(False, "--no-weights", help="Ignore edge weights"),
    no_randomize: bool = Option(False, "--no-randomize", help="Visit nodes in input order"),
    output_json: bool = Option(False, "--json", help="Output as JSON"),
    config_path: Path = Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
) -> None:
    """Partition the graph into communities with the Louvain method."""
    settings, graph = load_inputs(graph_file, config_path, output_json)

    options = settings.community.to_options()
    if resolution is not None:
        options = replace(options, resolution=resolution)
    if max_iterations is not None:
        options = replace(options, max_iterations=max_iterations)
    if seed is not None:
        options = replace(options, random_seed=seed)
    if no_weights:
        options = replace(options, use_weights=False)
    if no_randomize:
        options = replace(options, randomize_order=False)

    result = LouvainDetector(options).detect(graph.nodes, graph.edges)

    if output_json:
        print_json(_to_payload(result))
        return
    _render(result, graph_file)


def _to_payload(result: CommunityDetectionResult) -> dict:
    return {
        "success": True,
        "modularity": result.modularity,
        "iterations": result.iterations,
        "levels": result.levels,
        "computeTimeMs": result.compute_time_ms,
        "communities": [
            {
                "id": c.id,
                "size": c.size,
                "members": c.members,
                "internalWeight": c.internal_weight,
                "totalDegree": c.total_degree,
            }
            for c in result.communities
        ],
        "assignments": {
            node_id: assignment.community_id
            for node_id, assignment in result.assignments.items()
        },
    }


def _render(result: CommunityDetectionResult, graph_file: Path) -> None:
    console.print(f"[bold]Communities in {graph_file.name}[/bold]")
    console.print(
        f"Found {result.community_count} communities "
        f"(modularity {result.modularity:.4f}, {result.levels} levels, "
        f"{result.compute_time_ms:.1f}ms)"
    )
    if not result.communities:
        console.print("[dim]Graph has no nodes.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Internal weight", justify="right")
    table.add_column("Members", style="cyan")

    for community in result.communities:
        members = ", ".join(community.members[:MAX_MEMBERS_SHOWN])
        if community.size > MAX_MEMBERS_SHOWN:
            members += f", ... (+{community.size - MAX_MEMBERS_SHOWN})"
        table.add_row(
            str(community.id),
            str(community.size),
            f"{community.internal_weight:g}",
            members,
        )
    console.print(table)
