"""Tests for PathFinder."""

from __future__ import annotations

import pytest

from kgraph.graph.weights import EdgeWeightStrategy
from kgraph.pathfinding.finder import PathFinder, create_path_finder
from kgraph.pathfinding.search import RawStep, SearchOutcome
from kgraph.pathfinding.types import (
    SEARCH_TIMED_OUT,
    SOURCE_NOT_FOUND,
    TARGET_NOT_FOUND,
    PathDirection,
    PathFindingAlgorithm,
    PathFindingOptions,
)
from tests.fixtures.graphs import make_edge, make_grid, make_nodes

ALGORITHMS = [
    PathFindingAlgorithm.BFS,
    PathFindingAlgorithm.DIJKSTRA,
    PathFindingAlgorithm.BIDIRECTIONAL,
]


def finder_for(graph, **overrides) -> PathFinder:
    nodes, edges = graph
    finder = create_path_finder(**overrides)
    finder.set_graph(nodes, edges)
    return finder


class TestFindPathBasics:
    """Shared preconditions and scenarios."""

    def test_chain_bfs(self, chain):
        """BFS over a chain returns the whole chain."""
        result = finder_for(chain).find_path("A", "D")

        assert result.found is True
        assert result.error is None
        assert result.timed_out is False
        path = result.paths[0]
        assert path.length == 3
        assert path.node_ids == ["A", "B", "C", "D"]
        assert path.edge_ids == ["A-B", "B-C", "C-D"]
        assert path.total_weight == 3
        assert path.id == "path-A-D-0"
        assert path.source["id"] == "A"
        assert path.target["id"] == "D"
        assert [step.cumulative_weight for step in path.steps] == [0, 1, 2, 3]
        assert path.steps[0].edge is None

    def test_same_node(self, chain):
        """A node reaches itself with an empty path."""
        result = finder_for(chain).find_path("B", "B")

        assert result.found is True
        assert result.nodes_visited == 1
        assert result.paths[0].length == 0
        assert result.paths[0].node_ids == ["B"]

    def test_single_node_graph(self):
        """A one-node graph still answers the trivial query."""
        result = finder_for((make_nodes("solo"), [])).find_path("solo", "solo")
        assert result.found is True
        assert result.paths[0].node_ids == ["solo"]

    def test_missing_source(self, chain):
        """Unknown sources are reported without searching."""
        result = finder_for(chain).find_path("Z", "A")

        assert result.found is False
        assert result.error == SOURCE_NOT_FOUND
        assert result.nodes_visited == 0
        assert result.timed_out is False

    def test_missing_target(self, chain):
        """Unknown targets are reported without searching."""
        result = finder_for(chain).find_path("A", "Z")
        assert result.found is False
        assert result.error == TARGET_NOT_FOUND

    def test_before_set_graph(self):
        """An empty finder reports the source as missing."""
        result = PathFinder().find_path("a", "b")
        assert result.error == SOURCE_NOT_FOUND

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_disconnected(self, disconnected, algorithm):
        """Unreachable targets are not found, without timing out."""
        result = finder_for(disconnected, algorithm=algorithm).find_path("a1", "b1")

        assert result.found is False
        assert result.timed_out is False
        assert result.error is None
        assert result.nodes_visited > 0
        assert result.algorithm == algorithm


class TestAlgorithmsAgree:
    """All strategies find shortest paths by edge count under uniform weights."""

    @pytest.mark.parametrize(
        "source,target,length",
        [("A", "F", 3), ("A", "E", 3), ("B", "C", 1), ("E", "C", 2)],
    )
    def test_equal_lengths(self, two_triangles, source, target, length):
        """BFS, Dijkstra and bidirectional agree on length."""
        lengths = []
        for algorithm in ALGORITHMS:
            result = finder_for(two_triangles, algorithm=algorithm).find_path(source, target)
            assert result.found is True
            lengths.append(result.paths[0].length)
        assert lengths == [length] * 3

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_grid_corner_to_corner(self, algorithm):
        """Corner-to-corner on a grid takes 2 * (size - 1) edges."""
        result = finder_for(make_grid(8), algorithm=algorithm, max_length=20).find_path(
            "n0_0", "n7_7"
        )
        assert result.found is True
        assert result.paths[0].length == 14
        assert result.paths[0].node_ids[0] == "n0_0"
        assert result.paths[0].node_ids[-1] == "n7_7"

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_paths_are_connected(self, two_triangles, algorithm):
        """Every step's edge joins it to the previous node."""
        result = finder_for(two_triangles, algorithm=algorithm).find_path("A", "F")
        steps = result.paths[0].steps
        for previous, step in zip(steps, steps[1:]):
            assert {step.edge["source"], step.edge["target"]} == {previous.node_id, step.node_id}


class TestLimits:
    """max_length and timeout budgets."""

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_max_length_blocks_longer_paths(self, chain, algorithm):
        """Targets beyond max_length are not found."""
        result = finder_for(chain, algorithm=algorithm, max_length=2).find_path("A", "D")
        assert result.found is False
        assert result.timed_out is False

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_max_length_allows_exact_fit(self, chain, algorithm):
        """A path exactly max_length long is found."""
        result = finder_for(chain, algorithm=algorithm, max_length=3).find_path("A", "D")
        assert result.found is True
        assert result.paths[0].length <= 3

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_zero_timeout(self, grid, algorithm):
        """An exhausted budget reports a timeout, not a missing path."""
        result = finder_for(grid, algorithm=algorithm).find_path("n0_0", "n11_11", timeout_ms=0)

        assert result.found is False
        assert result.timed_out is True
        assert result.error == SEARCH_TIMED_OUT

    def test_zero_timeout_all_paths(self, grid):
        """Enumeration honours the same budget."""
        result = finder_for(grid, find_all_paths=True).find_path("n0_0", "n3_3", timeout_ms=0)
        assert result.timed_out is True


class TestDirection:
    """Direction constraints."""

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_outgoing_follows_edges(self, chain, algorithm):
        """Outgoing search walks edges forward only."""
        finder = finder_for(chain, algorithm=algorithm, direction=PathDirection.OUTGOING)

        forward = finder.find_path("A", "D")
        assert forward.found is True
        assert all(step.is_reverse is False for step in forward.paths[0].steps)

        assert finder.find_path("D", "A").found is False

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_incoming_walks_backwards(self, chain, algorithm):
        """Incoming search walks edges against their direction."""
        finder = finder_for(chain, algorithm=algorithm, direction="incoming")

        backward = finder.find_path("D", "A")
        assert backward.found is True
        assert backward.paths[0].node_ids == ["D", "C", "B", "A"]
        assert all(step.is_reverse for step in backward.paths[0].steps[1:])

        assert finder.find_path("A", "D").found is False

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_both_ignores_direction(self, chain, algorithm):
        """Both-direction search treats edges as undirected."""
        finder = finder_for(chain, algorithm=algorithm, direction=PathDirection.BOTH)
        result = finder.find_path("D", "A")
        assert result.found is True
        assert result.paths[0].node_ids == ["D", "C", "B", "A"]

    def test_per_call_direction(self, chain):
        """A per-call direction overrides the finder default."""
        finder = finder_for(chain, algorithm="bidirectional", direction="both")
        assert finder.find_path("D", "A", direction="outgoing").found is False
        assert finder.find_path("D", "A").found is True


class TestWeighting:
    """Edge weight strategies with Dijkstra."""

    @pytest.fixture
    def shortcut(self):
        """Direct but expensive A-B, cheap detour A-C-B."""
        nodes = make_nodes("A", "B", "C")
        edges = [
            make_edge("A", "B", weight=10, predicate="ex:mentions"),
            make_edge("A", "C", weight=1, predicate="ex:cites"),
            make_edge("C", "B", weight=1, predicate="ex:cites"),
        ]
        return nodes, edges

    def test_property_weights(self, shortcut):
        """Dijkstra takes the cheaper detour under property weights."""
        finder = finder_for(
            shortcut,
            algorithm=PathFindingAlgorithm.DIJKSTRA,
            weight_strategy=EdgeWeightStrategy.PROPERTY,
        )
        path = finder.find_path("A", "B").paths[0]

        assert path.node_ids == ["A", "C", "B"]
        assert path.total_weight == 2.0
        assert [step.cumulative_weight for step in path.steps] == [0.0, 1.0, 2.0]

    def test_bfs_ignores_weights(self, shortcut):
        """BFS always takes the fewest edges."""
        finder = finder_for(shortcut, weight_strategy="property")
        assert finder.find_path("A", "B").paths[0].node_ids == ["A", "B"]

    def test_predicate_weights(self, shortcut):
        """Avoided predicates push Dijkstra onto preferred ones."""
        finder = finder_for(
            shortcut,
            algorithm="dijkstra",
            weight_strategy="predicate",
            preferred_predicates=("ex:cites",),
            avoided_predicates=("ex:mentions",),
        )
        path = finder.find_path("A", "B").paths[0]
        assert path.node_ids == ["A", "C", "B"]
        assert path.total_weight == pytest.approx(1.0)

    def test_custom_weight_function(self, shortcut):
        """A custom function overrides the strategy."""
        finder = finder_for(
            shortcut,
            algorithm="dijkstra",
            weight_strategy="property",
            custom_weight_fn=lambda edge: 1.0,
        )
        assert finder.find_path("A", "B").paths[0].node_ids == ["A", "B"]

    def test_per_call_weight_override(self, shortcut):
        """Weight overrides apply to one call and leave the graph intact."""
        finder = finder_for(shortcut, algorithm="dijkstra")

        assert finder.find_path("A", "B").paths[0].node_ids == ["A", "B"]
        weighted = finder.find_path("A", "B", weight_strategy="property")
        assert weighted.paths[0].node_ids == ["A", "C", "B"]
        assert finder.find_path("A", "B").paths[0].node_ids == ["A", "B"]


class TestAllPaths:
    """find_all_paths enumeration."""

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_diamond_has_two_shortest(self, diamond, algorithm):
        """Both branches of a diamond are returned."""
        finder = finder_for(diamond, algorithm=algorithm, find_all_paths=True)
        result = finder.find_path("A", "D")

        assert result.found is True
        assert sorted(p.node_ids for p in result.paths) == [["A", "B", "D"], ["A", "C", "D"]]
        assert [p.id for p in result.paths] == ["path-A-D-0", "path-A-D-1"]
        assert all(p.length == 2 for p in result.paths)

    def test_max_paths_caps_results(self, diamond):
        """No more than max_paths paths are returned."""
        result = finder_for(diamond, find_all_paths=True, max_paths=1).find_path("A", "D")
        assert len(result.paths) == 1

    def test_weighted_ties_only(self):
        """Dijkstra enumeration keeps only minimal-weight paths."""
        nodes = make_nodes("A", "B", "C", "D")
        edges = [
            make_edge("A", "B", weight=1),
            make_edge("B", "D", weight=1),
            make_edge("A", "C", weight=5),
            make_edge("C", "D", weight=1),
        ]
        finder = finder_for(
            (nodes, edges),
            algorithm="dijkstra",
            weight_strategy="property",
            find_all_paths=True,
        )
        result = finder.find_path("A", "D")
        assert [p.node_ids for p in result.paths] == [["A", "B", "D"]]
        assert result.paths[0].total_weight == 2.0

    def test_enumerated_steps_carry_edges(self, diamond):
        """Enumerated paths attribute each edge to the node it reaches."""
        result = finder_for(diamond, find_all_paths=True).find_path("A", "D")
        for path in result.paths:
            assert path.steps[0].edge is None
            assert path.edge_ids == [
                f"{a}-{b}" for a, b in zip(path.node_ids, path.node_ids[1:])
            ]

    def test_weighted_respects_max_length(self):
        """A heavy short path is kept when every lighter path is too long."""
        nodes = make_nodes("A", "B", "C", "D")
        edges = [
            make_edge("A", "B", weight=1),
            make_edge("B", "C", weight=1),
            make_edge("C", "D", weight=1),
            make_edge("A", "D", weight=10),
        ]
        finder = finder_for(
            (nodes, edges),
            algorithm="dijkstra",
            weight_strategy="property",
            max_length=1,
        )

        single = finder.find_path("A", "D")
        many = finder.find_path("A", "D", find_all_paths=True)

        assert single.found is True
        assert many.found is True
        assert [p.node_ids for p in many.paths] == [["A", "D"]]
        assert many.paths[0].total_weight == 10.0

    def test_weighted_zero_weight_ties(self):
        """Zero-weight edges still yield every tied path."""
        nodes = make_nodes("A", "B", "C")
        edges = [
            make_edge("A", "B", weight=1),
            make_edge("A", "C", weight=1),
            make_edge("C", "B", weight=0),
        ]
        finder = finder_for(
            (nodes, edges),
            algorithm="dijkstra",
            weight_strategy="property",
            direction="outgoing",
            find_all_paths=True,
        )
        result = finder.find_path("A", "B")

        assert [p.node_ids for p in result.paths] == [["A", "B"], ["A", "C", "B"]]
        assert all(p.total_weight == 1.0 for p in result.paths)

    def test_weighted_zero_weight_cycle_paths_are_simple(self):
        """Zero-weight cycles never produce paths that revisit a node."""
        nodes = make_nodes("A", "B", "C", "D")
        edges = [
            make_edge("A", "B", weight=1),
            make_edge("B", "C", weight=0),
            make_edge("B", "D", weight=1),
        ]
        finder = finder_for(
            (nodes, edges),
            algorithm="dijkstra",
            weight_strategy="property",
            find_all_paths=True,
        )
        result = finder.find_path("A", "D")

        assert [p.node_ids for p in result.paths] == [["A", "B", "D"]]

    def test_partial_timeout_keeps_paths(self, chain, monkeypatch):
        """Paths collected before the budget ran out are returned without an error."""
        _, edges = chain
        finder = finder_for(chain, find_all_paths=True)
        partial = SearchOutcome(
            paths=[[RawStep(0, None, False, 0.0), RawStep(1, edges[0], False, 1.0)]],
            nodes_visited=2,
            timed_out=True,
        )
        monkeypatch.setattr(PathFinder, "_search", staticmethod(lambda *args: partial))

        result = finder.find_path("A", "B")

        assert result.found is True
        assert result.timed_out is True
        assert result.error is None
        assert result.paths[0].node_ids == ["A", "B"]
        assert result.paths[0].edge_ids == ["A-B"]

    def test_grid_many_paths(self):
        """Grids have many shortest paths, capped by max_paths."""
        result = finder_for(make_grid(4), find_all_paths=True, max_paths=5).find_path("n0_0", "n3_3")
        assert len(result.paths) == 5
        assert len({tuple(p.node_ids) for p in result.paths}) == 5
        assert all(p.length == 6 for p in result.paths)


class TestOptions:
    """Option management."""

    def test_defaults(self):
        """Documented defaults."""
        options = PathFindingOptions.default()
        assert options.algorithm == PathFindingAlgorithm.BFS
        assert options.max_length == 10
        assert options.direction == PathDirection.BOTH
        assert options.find_all_paths is False
        assert options.max_paths == 5
        assert options.weight_strategy == EdgeWeightStrategy.UNIFORM
        assert options.timeout_ms == 5000

    def test_set_and_get_options(self, chain):
        """set_options persists, get_options returns a copy."""
        finder = finder_for(chain)
        finder.set_options(algorithm="dijkstra", max_length=2)

        options = finder.get_options()
        assert options.algorithm == PathFindingAlgorithm.DIJKSTRA
        assert options.max_length == 2
        assert finder.find_path("A", "D").found is False

        options.max_length = 99
        assert finder.get_options().max_length == 2

    def test_set_options_rebuilds_weights(self):
        """Changing the weight strategy re-weights the current graph."""
        nodes = make_nodes("A", "B", "C")
        edges = [
            make_edge("A", "B", weight=10),
            make_edge("A", "C", weight=1),
            make_edge("C", "B", weight=1),
        ]
        finder = finder_for((nodes, edges), algorithm="dijkstra")
        finder.set_options(weight_strategy="property")
        assert finder.find_path("A", "B").paths[0].node_ids == ["A", "C", "B"]

    def test_unknown_algorithm_falls_back_to_bfs(self, chain):
        """Unrecognized algorithm names run BFS."""
        result = finder_for(chain).find_path("A", "D", algorithm="astar")
        assert result.algorithm == PathFindingAlgorithm.BFS
        assert result.found is True

    def test_node_lookup(self, chain):
        """node_count and has_node reflect the current graph."""
        finder = finder_for(chain)
        assert finder.node_count == 4
        assert finder.has_node("A")
        assert not finder.has_node("Z")

    def test_dangling_edges_dropped(self):
        """Edges to unknown nodes are ignored."""
        finder = finder_for((make_nodes("a", "b"), [make_edge("a", "ghost"), make_edge("a", "b")]))
        assert finder.find_path("a", "b").paths[0].node_ids == ["a", "b"]
        assert finder.find_path("a", "ghost").error == TARGET_NOT_FOUND
