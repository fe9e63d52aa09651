"""Edge weight strategies for path finding."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable, Optional

from kgraph.graph.types import edge_predicate, edge_weight

DEFAULT_EDGE_WEIGHT = 1.0
PREFERRED_PREDICATE_WEIGHT = 0.5
AVOIDED_PREDICATE_WEIGHT = 10.0

WeightFunction = Callable[[Any], float]


class EdgeWeightStrategy(str, Enum):
    """How an edge's traversal cost is derived."""

    UNIFORM = "uniform"
    """Every edge costs 1."""

    PROPERTY = "property"
    """Use the edge's own ``weight``, 1 when absent."""

    PREDICATE = "predicate"
    """Cheaper for preferred predicates, expensive for avoided ones."""


def make_weight_function(
    strategy: EdgeWeightStrategy | str = EdgeWeightStrategy.UNIFORM,
    preferred_predicates: Iterable[str] = (),
    avoided_predicates: Iterable[str] = (),
    custom_weight_fn: Optional[WeightFunction] = None,
) -> WeightFunction:
    """Build the edge weight function for a strategy.

    A caller-supplied ``custom_weight_fn`` always wins over the strategy.
    Unknown strategy names fall back to uniform weighting.
    """
    if custom_weight_fn is not None:
        return custom_weight_fn

    try:
        strategy = EdgeWeightStrategy(strategy)
    except ValueError:
        strategy = EdgeWeightStrategy.UNIFORM

    if strategy == EdgeWeightStrategy.PROPERTY:
        def property_weight(edge: Any) -> float:
            weight = edge_weight(edge)
            return DEFAULT_EDGE_WEIGHT if weight is None else weight

        return property_weight

    if strategy == EdgeWeightStrategy.PREDICATE:
        preferred = frozenset(preferred_predicates)
        avoided = frozenset(avoided_predicates)

        def predicate_weight(edge: Any) -> float:
            predicate = edge_predicate(edge)
            if predicate is not None and predicate in preferred:
                return PREFERRED_PREDICATE_WEIGHT
            if predicate is not None and predicate in avoided:
                return AVOIDED_PREDICATE_WEIGHT
            return DEFAULT_EDGE_WEIGHT

        return predicate_weight

    return lambda edge: DEFAULT_EDGE_WEIGHT
