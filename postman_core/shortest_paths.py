"""
Shortest path computation over street graphs.

Provides single-source Dijkstra, all-pairs distance tables backed by numpy,
and predecessor-chain path reconstruction with cycle detection.
"""

import heapq
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Set, Tuple

import numpy as np

from .exceptions import NegativeWeightError, PathNotFoundError, UnknownVertexError
from .graph import StreetGraph
from .logging_config import LogTimer, get_logger
from .types import VertexID, Weight

logger = get_logger(__name__)

Distances = Dict[VertexID, Weight]
Predecessors = Dict[VertexID, Optional[VertexID]]


def single_source_shortest_paths(graph: StreetGraph, source: VertexID) -> Tuple[Distances, Predecessors]:
    """Compute shortest paths from ``source`` to every reachable vertex.

    Args:
        graph: Street graph to search
        source: Starting vertex id

    Returns:
        Tuple of (distances, predecessors) where:
            - distances[v] = shortest distance from source (reachable vertices only)
            - predecessors[v] = previous vertex on the path (None for the source)

    Raises:
        UnknownVertexError: If source is not in the graph
        NegativeWeightError: If any edge weight is negative
    """
    if not graph.has_vertex(source):
        raise UnknownVertexError(source, graph.name)

    for e in graph.edges:
        if e.weight < 0:
            raise NegativeWeightError(e.v1, e.v2, e.weight)

    dist: Distances = {source: 0.0}
    prev: Predecessors = {source: None}
    settled: Set[VertexID] = set()
    h = [(0.0, source)]

    while h:
        d, u = heapq.heappop(h)
        if u in settled:
            continue
        settled.add(u)

        for v, w in graph.adjacency(u).items():
            nd = d + w
            if nd < dist.get(v, float("inf")):
                dist[v] = nd
                prev[v] = u
                heapq.heappush(h, (nd, v))

    return dist, prev


def reconstruct_path(predecessors: Predecessors, source: VertexID, dest: VertexID) -> List[VertexID]:
    """Walk a predecessor chain back from ``dest`` to ``source``.

    Example:
        >>> reconstruct_path({1: None, 2: 1, 3: 2}, 1, 3)
        [1, 2, 3]

    Raises:
        PathNotFoundError: If dest is unreachable or the chain loops
    """
    if source == dest:
        return [source]

    path: List[VertexID] = []
    visited: Set[VertexID] = set()
    current = dest

    while True:
        path.append(current)

        if current == source:
            path.reverse()
            return path

        if current in visited:
            logger.warning(f"Cycle detected during path reconstruction from {source} to {dest} at {current}")
            raise PathNotFoundError(source, dest, "cycle in predecessor chain")
        visited.add(current)

        predecessor = predecessors.get(current)
        if predecessor is None:
            raise PathNotFoundError(source, dest)

        current = predecessor


def shortest_path(graph: StreetGraph, source: VertexID, dest: VertexID) -> Tuple[List[VertexID], Weight]:
    """Shortest path between two vertices as ``(vertex_ids, distance)``."""
    dist, prev = single_source_shortest_paths(graph, source)
    if dest not in dist:
        if not graph.has_vertex(dest):
            raise UnknownVertexError(dest, graph.name)
        raise PathNotFoundError(source, dest)
    return reconstruct_path(prev, source, dest), dist[dest]


class ShortestPathMatrix:
    """All-pairs shortest distances plus per-source predecessor maps.

    Distances are held in a dense ``float64`` array ordered like
    ``vertex_ids``; unreachable pairs hold ``inf``.
    """

    def __init__(self, vertex_ids: List[VertexID]):
        self.vertex_ids = list(vertex_ids)
        self._position = {vid: i for i, vid in enumerate(self.vertex_ids)}
        n = len(self.vertex_ids)
        self.distances = np.full((n, n), np.inf, dtype=np.float64)
        self._predecessors: Dict[VertexID, Predecessors] = {}

    def __len__(self) -> int:
        return len(self.vertex_ids)

    def _pos(self, vertex_id: VertexID) -> int:
        try:
            return self._position[vertex_id]
        except KeyError:
            raise UnknownVertexError(vertex_id) from None

    def set_source(self, source: VertexID, distances: Distances, predecessors: Predecessors) -> None:
        """Store one Dijkstra result."""
        row = self._pos(source)
        for target, d in distances.items():
            self.distances[row, self._pos(target)] = d
        self._predecessors[source] = predecessors

    def distance(self, source: VertexID, dest: VertexID) -> Weight:
        return float(self.distances[self._pos(source), self._pos(dest)])

    def has_path(self, source: VertexID, dest: VertexID) -> bool:
        return bool(np.isfinite(self.distances[self._pos(source), self._pos(dest)]))

    def path(self, source: VertexID, dest: VertexID) -> List[VertexID]:
        """Ordered vertex ids from source to dest inclusive.

        Raises:
            PathNotFoundError: If dest is unreachable from source
        """
        self._pos(dest)
        predecessors = self._predecessors.get(source)
        if predecessors is None:
            raise PathNotFoundError(source, dest, "source not in matrix")
        return reconstruct_path(predecessors, source, dest)

    def as_array(self) -> np.ndarray:
        """Copy of the distance table."""
        return self.distances.copy()


def build_shortest_path_matrix(graph: StreetGraph) -> ShortestPathMatrix:
    """Run Dijkstra from every vertex; O(V * E log V) overall.

    Example:
        >>> matrix = build_shortest_path_matrix(graph)
        >>> matrix.distance(1, 3)
        2.0
    """
    matrix = ShortestPathMatrix(graph.vertex_ids())
    logger.debug(f"Computing shortest path matrix for {len(matrix)} vertices")

    with LogTimer(logger, "Shortest path matrix computation", level=logging.DEBUG):
        for source in matrix.vertex_ids:
            distances, predecessors = single_source_shortest_paths(graph, source)
            matrix.set_source(source, distances, predecessors)

    return matrix


class ShortestPathEngine(ABC):
    """Pluggable shortest-path provider used by the solver and coverage planner."""

    @abstractmethod
    def single_source(self, graph: StreetGraph, source: VertexID) -> Tuple[Distances, Predecessors]:
        """Distances and predecessors from ``source``."""

    @abstractmethod
    def all_pairs(self, graph: StreetGraph) -> ShortestPathMatrix:
        """Full distance table for ``graph``."""


class DijkstraEngine(ShortestPathEngine):
    """Default engine: binary-heap Dijkstra."""

    def single_source(self, graph: StreetGraph, source: VertexID) -> Tuple[Distances, Predecessors]:
        return single_source_shortest_paths(graph, source)

    def all_pairs(self, graph: StreetGraph) -> ShortestPathMatrix:
        return build_shortest_path_matrix(graph)
