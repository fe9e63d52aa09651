"""Shared helpers for kgraph CLI commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from rich.console import Console

from kgraph.configuration.settings import Settings, bootstrap_settings
from kgraph.exceptions import GraphAnalyticsError
from kgraph.graph.loader import GraphData, load_graph_file

logger = logging.getLogger(__name__)

console = Console()


def fail(message: str, output_json: bool) -> None:
    """Report an error in the requested format and exit with status 1."""
    if output_json:
        print(json.dumps({"success": False, "error": message}))
    else:
        console.print(f"[bold red]Error:[/bold red] {message}")
    raise SystemExit(1)


def load_inputs(graph_file: Path, config_path: Path, output_json: bool) -> tuple[Settings, GraphData]:
    """Load settings and the graph file, exiting on failure."""
    try:
        settings = bootstrap_settings(path=config_path)
        graph = load_graph_file(graph_file)
    except GraphAnalyticsError as e:
        logger.warning(f"Cannot load inputs: {e}")
        fail(str(e), output_json)
    return settings, graph


def print_json(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload))
