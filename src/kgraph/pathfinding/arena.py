"""Search record arena.

Search records live in parallel lists addressed by integer handle. Parent
links are handles too, with ``NO_PARENT`` marking the start of a chain, so
path reconstruction is a plain index walk.
"""

from __future__ import annotations

from typing import Any, List, Optional

NO_PARENT = -1


class PathNodeArena:
    """Flat store of search records.

    Each record holds the graph node index, its distance from the search
    origin, the parent record handle, the edge used to reach it, whether that
    edge was walked in reverse, and the hop count from the origin.
    """

    __slots__ = ("node", "distance", "previous", "edge", "is_reverse", "hops")

    def __init__(self) -> None:
        self.node: List[int] = []
        self.distance: List[float] = []
        self.previous: List[int] = []
        self.edge: List[Any] = []
        self.is_reverse: List[bool] = []
        self.hops: List[int] = []

    def __len__(self) -> int:
        return len(self.node)

    def add(
        self,
        node: int,
        distance: float,
        previous: int = NO_PARENT,
        edge: Optional[Any] = None,
        is_reverse: bool = False,
    ) -> int:
        """Append a record and return its handle."""
        hops = 0 if previous == NO_PARENT else self.hops[previous] + 1
        self.node.append(node)
        self.distance.append(distance)
        self.previous.append(previous)
        self.edge.append(edge)
        self.is_reverse.append(is_reverse)
        self.hops.append(hops)
        return len(self.node) - 1

    def chain(self, handle: int) -> List[int]:
        """Handles from the chain start to ``handle``, in forward order."""
        handles: List[int] = []
        while handle != NO_PARENT:
            handles.append(handle)
            handle = self.previous[handle]
        handles.reverse()
        return handles
