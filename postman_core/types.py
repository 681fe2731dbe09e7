"""
Type definitions for the postman solver.

This module provides type aliases and record types shared by the graph,
shortest-path, Eulerian and expansion modules.
"""

from dataclasses import dataclass, field
from typing import Dict, Generic, List, NamedTuple, Tuple, TypeVar, Union

# Type Aliases for clarity
VertexID = int  # Positive integer vertex identifier
EdgeIndex = int  # Stable index into a graph's ordered edge list
Weight = float  # Edge weight (street length)
Coordinate = Tuple[float, float]  # (latitude, longitude) in decimal degrees

# Returned by edge lookups that find nothing
NOT_FOUND: EdgeIndex = -1

P = TypeVar("P")


@dataclass
class Vertex(Generic[P]):
    """A street intersection.

    Attributes:
        vertex_id: Unique positive integer identifier
        label: Display label
        payload: Caller-owned position data, never inspected by the algorithms
        adjacency: Mapping neighbor id -> edge weight
    """

    vertex_id: VertexID
    label: str
    payload: P = None
    adjacency: Dict[VertexID, Weight] = field(default_factory=dict)

    @property
    def degree(self) -> int:
        """Number of incident edges."""
        return len(self.adjacency)

    def is_adjacent_to(self, other: VertexID) -> bool:
        return other in self.adjacency

    def neighbor_ids(self) -> List[VertexID]:
        return list(self.adjacency)


class GraphEdge(NamedTuple):
    """An undirected street segment between two intersections."""

    v1: VertexID
    v2: VertexID
    weight: Weight


@dataclass(frozen=True)
class RealEdge:
    """An original street edge placed in the augmented Eulerian graph.

    Attributes:
        v1: First endpoint
        v2: Second endpoint
        weight: Edge weight
        source_index: Stable index of the edge in the originating graph
    """

    v1: VertexID
    v2: VertexID
    weight: Weight
    source_index: EdgeIndex

    is_virtual = False


@dataclass(frozen=True)
class VirtualEdge:
    """A shortest-path detour between two matched odd-degree vertices.

    ``path`` is the full ordered vertex sequence from ``v1`` to ``v2`` so the
    detour can be unfolded into real hops when the tour is emitted.
    """

    v1: VertexID
    v2: VertexID
    weight: Weight
    path: Tuple[VertexID, ...]

    is_virtual = True

    def unfold_from(self, start: VertexID) -> List[VertexID]:
        """Vertices visited after ``start`` when walking this detour."""
        if self.path[0] == start:
            return list(self.path[1:])
        return list(reversed(self.path[:-1]))


EulerianEdge = Union[RealEdge, VirtualEdge]
