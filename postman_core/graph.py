"""
Undirected street graph with degree bookkeeping and connectivity checks.

This module provides the graph model the rest of the solver works on:
- Vertex registration with idempotent duplicate handling
- Edge construction with validation before any mutation
- Odd-degree detection in deterministic (ascending id) order
- BFS connectivity and component counting
- Stable edge indices used for coverage bookkeeping
"""

import math
from collections import Counter, deque
from numbers import Real
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from .exceptions import (
    DuplicateEdgeError,
    DuplicateVertexError,
    InvalidVertexIdError,
    NegativeWeightError,
    SelfLoopEdgeError,
    UnknownVertexError,
)
from .logging_config import get_logger
from .types import NOT_FOUND, EdgeIndex, GraphEdge, Vertex, VertexID, Weight

logger = get_logger(__name__)


class StreetGraph:
    """
    Undirected, positively weighted street network.

    Vertices are intersections keyed by positive integer ids. Edges are kept in
    an ordered list; an edge's position in that list is its permanent index.
    Once built, the graph is treated as read-only by the solvers.
    """

    def __init__(self, name: str = "Street Network", strict: bool = False):
        """
        Initialize an empty graph.

        Args:
            name: Display name used in log and error messages
            strict: Raise DuplicateVertexError on re-registered ids instead of
                logging a warning and ignoring the call
        """
        self.name = name
        self.strict = strict
        self._vertices: Dict[VertexID, Vertex] = {}
        self._edges: List[GraphEdge] = []
        self._pair_index: Dict[FrozenSet[VertexID], EdgeIndex] = {}

    def __repr__(self) -> str:
        return f"StreetGraph(name={self.name!r}, vertices={self.vertex_count}, edges={self.edge_count})"

    def __contains__(self, vertex_id) -> bool:
        return vertex_id in self._vertices

    def __len__(self) -> int:
        return len(self._vertices)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_vertex(self, vertex_id: VertexID, label: Optional[str] = None, payload=None) -> bool:
        """
        Register a vertex.

        Args:
            vertex_id: Positive integer id
            label: Display label (defaults to the id as text)
            payload: Opaque caller data such as a map point

        Returns:
            True if the vertex was added, False if it already existed

        Raises:
            InvalidVertexIdError: If vertex_id is not a positive integer
            DuplicateVertexError: If the id exists and the graph is strict
        """
        if isinstance(vertex_id, bool) or not isinstance(vertex_id, int) or vertex_id <= 0:
            raise InvalidVertexIdError(vertex_id)

        if vertex_id in self._vertices:
            if self.strict:
                raise DuplicateVertexError(vertex_id)
            logger.warning(f"Vertex: {vertex_id} already exists in graph '{self.name}'")
            return False

        self._vertices[vertex_id] = Vertex(
            vertex_id=vertex_id,
            label=str(vertex_id) if label is None else label,
            payload=payload,
        )
        return True

    def add_edge(self, v1: VertexID, v2: VertexID, weight: Weight) -> EdgeIndex:
        """
        Add an undirected edge.

        Every check runs before the graph is touched, so a rejected edge never
        leaves partial adjacency behind.

        Returns:
            The new edge's permanent index

        Raises:
            UnknownVertexError: If either endpoint is not registered
            SelfLoopEdgeError: If v1 == v2
            DuplicateEdgeError: If the unordered pair already has an edge
            NegativeWeightError: If weight is negative, NaN or infinite
        """
        for vid in (v1, v2):
            if vid not in self._vertices:
                raise UnknownVertexError(vid, self.name)

        if v1 == v2:
            raise SelfLoopEdgeError(v1)

        pair = frozenset((v1, v2))
        if pair in self._pair_index:
            raise DuplicateEdgeError(v1, v2)

        if isinstance(weight, bool) or not isinstance(weight, Real) or not math.isfinite(weight) or weight < 0:
            raise NegativeWeightError(v1, v2, weight)

        index = len(self._edges)
        self._vertices[v1].adjacency[v2] = weight
        self._vertices[v2].adjacency[v1] = weight
        self._edges.append(GraphEdge(v1, v2, weight))
        self._pair_index[pair] = index

        return index

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    @property
    def edges(self) -> List[GraphEdge]:
        """Copy of the ordered edge list."""
        return list(self._edges)

    def edge(self, index: EdgeIndex) -> GraphEdge:
        return self._edges[index]

    def has_vertex(self, vertex_id: VertexID) -> bool:
        return vertex_id in self._vertices

    def vertex(self, vertex_id: VertexID) -> Vertex:
        """Get a vertex by id.

        Raises:
            UnknownVertexError: If the id is not registered
        """
        try:
            return self._vertices[vertex_id]
        except KeyError:
            raise UnknownVertexError(vertex_id, self.name) from None

    def vertex_ids(self) -> List[VertexID]:
        """All vertex ids in registration order."""
        return list(self._vertices)

    def neighbors(self, vertex_id: VertexID) -> List[VertexID]:
        return self.vertex(vertex_id).neighbor_ids()

    def degree(self, vertex_id: VertexID) -> int:
        return self.vertex(vertex_id).degree

    def adjacency(self, vertex_id: VertexID) -> Dict[VertexID, Weight]:
        """Neighbor -> weight map of a vertex (read-only by convention)."""
        return self.vertex(vertex_id).adjacency

    def incident_edge_indices(self, vertex_id: VertexID) -> List[EdgeIndex]:
        """Indices of edges touching a vertex, in adjacency order."""
        v = self.vertex(vertex_id)
        return [self._pair_index[frozenset((vertex_id, n))] for n in v.adjacency]

    def total_weight(self) -> Weight:
        return sum(e.weight for e in self._edges)

    # ------------------------------------------------------------------
    # Degree analysis
    # ------------------------------------------------------------------

    def odd_degree_vertices(self) -> List[VertexID]:
        """Ids of odd-degree vertices in ascending order.

        The order decides how odd vertices are numbered for the matching step,
        so it must be stable for reproducible routes.
        """
        return sorted(vid for vid, v in self._vertices.items() if v.degree % 2 == 1)

    def odd_vertex_count_for_edges(self, edge_indices: Iterable[EdgeIndex]) -> int:
        """Count odd-degree vertices of the subgraph made of ``edge_indices``."""
        degrees: Counter = Counter()
        for index in edge_indices:
            e = self._edges[index]
            degrees[e.v1] += 1
            degrees[e.v2] += 1
        return sum(1 for d in degrees.values() if d % 2 == 1)

    # ------------------------------------------------------------------
    # Connectivity
    # ------------------------------------------------------------------

    def reachable_from(self, start: VertexID) -> Set[VertexID]:
        """All vertices reachable from ``start`` via BFS."""
        self.vertex(start)
        visited: Set[VertexID] = {start}
        queue = deque([start])

        while queue:
            current = queue.popleft()
            for neighbor in self._vertices[current].adjacency:
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(neighbor)

        return visited

    def bfs_traverse(self, visit: Optional[Callable[[Vertex, int], None]] = None) -> int:
        """
        Breadth-first traversal over every component.

        Args:
            visit: Optional callback ``visit(vertex, visit_order)``

        Returns:
            Number of connected components
        """
        if not self._vertices:
            logger.info(f"Graph {self.name} is empty.")
            return 0

        visited: Set[VertexID] = set()
        order = 0
        components = 0

        for root in self._vertices:
            if root in visited:
                continue

            components += 1
            visited.add(root)
            queue = deque([root])

            while queue:
                current = queue.popleft()
                vertex = self._vertices[current]
                if visit is not None:
                    visit(vertex, order)
                order += 1

                for neighbor in vertex.adjacency:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        queue.append(neighbor)

        return components

    def connected_component_count(self) -> int:
        return self.bfs_traverse()

    def is_connected(self) -> bool:
        """True iff a single BFS reaches every vertex. An empty graph is not connected."""
        if not self._vertices:
            return False

        start = next(iter(self._vertices))
        return len(self.reachable_from(start)) == len(self._vertices)

    # ------------------------------------------------------------------
    # Edge lookup and subgraphs
    # ------------------------------------------------------------------

    def edge_index(self, v1: VertexID, v2: VertexID) -> EdgeIndex:
        """
        Stable index of the edge joining v1 and v2.

        Returns:
            The edge index, or NOT_FOUND (-1) when no such edge exists. Missing
            lookups are logged rather than raised because iterative callers
            routinely probe pairs outside their working set.
        """
        index = self._pair_index.get(frozenset((v1, v2)), NOT_FOUND)
        if index == NOT_FOUND:
            logger.warning(f"Edge ({v1}, {v2}) not found in graph '{self.name}'")
        return index

    def subgraph_from_edges(
        self, edge_indices: Iterable[EdgeIndex], name: Optional[str] = None
    ) -> Tuple["StreetGraph", Dict[EdgeIndex, EdgeIndex]]:
        """
        Build a standalone graph from a subset of this graph's edges.

        Vertices keep their ids, labels and payloads. Edges are added in the
        order given.

        Returns:
            Tuple of (subgraph, mapping subgraph edge index -> parent edge index)
        """
        sub = StreetGraph(name or f"{self.name} (subgraph)")
        index_map: Dict[EdgeIndex, EdgeIndex] = {}
        ordered = list(edge_indices)

        for index in ordered:
            e = self._edges[index]
            for vid in (e.v1, e.v2):
                if not sub.has_vertex(vid):
                    v = self._vertices[vid]
                    sub.add_vertex(v.vertex_id, v.label, v.payload)

        for index in ordered:
            e = self._edges[index]
            sub_index = sub.add_edge(e.v1, e.v2, e.weight)
            index_map[sub_index] = index

        return sub, index_map
