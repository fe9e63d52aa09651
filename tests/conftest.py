"""Shared graph fixtures.

- two_triangles: {A,B,C} and {D,E,F} joined by the bridge C-D
- chain: A -> B -> C -> D
- weighted_chain: A-B (10), B-C (1), C-D (10)
- disconnected: {a1-a2} and {b1-b2}
- diamond: A -> B -> D and A -> C -> D
- grid: 12 x 12 grid
"""

from __future__ import annotations

import pytest

from tests.fixtures.graphs import Graph, make_edge, make_grid, make_nodes


@pytest.fixture
def two_triangles() -> Graph:
    nodes = make_nodes("A", "B", "C", "D", "E", "F")
    edges = [
        make_edge("A", "B"),
        make_edge("B", "C"),
        make_edge("C", "A"),
        make_edge("D", "E"),
        make_edge("E", "F"),
        make_edge("F", "D"),
        make_edge("C", "D"),
    ]
    return nodes, edges


@pytest.fixture
def chain() -> Graph:
    nodes = make_nodes("A", "B", "C", "D")
    edges = [make_edge("A", "B"), make_edge("B", "C"), make_edge("C", "D")]
    return nodes, edges


@pytest.fixture
def weighted_chain() -> Graph:
    nodes = make_nodes("A", "B", "C", "D")
    edges = [
        make_edge("A", "B", weight=10),
        make_edge("B", "C", weight=1),
        make_edge("C", "D", weight=10),
    ]
    return nodes, edges


@pytest.fixture
def disconnected() -> Graph:
    nodes = make_nodes("a1", "a2", "b1", "b2")
    edges = [make_edge("a1", "a2"), make_edge("b1", "b2")]
    return nodes, edges


@pytest.fixture
def diamond() -> Graph:
    nodes = make_nodes("A", "B", "C", "D")
    edges = [
        make_edge("A", "B"),
        make_edge("A", "C"),
        make_edge("B", "D"),
        make_edge("C", "D"),
    ]
    return nodes, edges


@pytest.fixture
def grid() -> Graph:
    return make_grid(12)
