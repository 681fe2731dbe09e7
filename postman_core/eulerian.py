"""
Eulerian tour construction over an augmented street multigraph.

The augmented graph holds the real street edges plus virtual edges, one
per matched pair of odd-degree vertices. Once every vertex has even degree a
closed walk using each augmented edge exactly once exists; virtual edges are
unfolded into their real shortest paths as the walk is emitted.

Two extraction strategies share one output contract:
- Fleury: greedy edge choice with a BFS bridge test, O(E * (V + E))
- Hierholzer: stack-based circuit splicing, O(E)

Edge usage is tracked in an arena allocated per extraction run and indexed by
augmented edge position, so edge records are never mutated and separate runs
never see each other's state.

References:
- Fleury (1883): Deux problemes de geometrie de situation
- Hierholzer (1873): Ueber die Moeglichkeit, einen Linienzug ohne
  Wiederholung und ohne Unterbrechung zu umfahren
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .exceptions import EulerianConsistencyError
from .logging_config import LogTimer, get_logger
from .types import EulerianEdge, VertexID, Weight

logger = get_logger(__name__)

AdjacencyItem = Tuple[VertexID, int]  # (target vertex, augmented edge position)


@dataclass
class EulerianTour:
    """Result of Eulerian tour extraction."""

    vertex_ids: List[VertexID]  # Unfolded walk, virtual detours expanded
    edges: List[EulerianEdge]  # Augmented edges in traversal order
    start_vertex: VertexID

    @property
    def is_closed(self) -> bool:
        return len(self.vertex_ids) > 0 and self.vertex_ids[0] == self.vertex_ids[-1]

    @property
    def total_weight(self) -> Weight:
        return sum(e.weight for e in self.edges)

    @property
    def virtual_weight(self) -> Weight:
        return sum(e.weight for e in self.edges if e.is_virtual)

    @property
    def num_virtual(self) -> int:
        return sum(1 for e in self.edges if e.is_virtual)


class EulerianTourBuilder:
    """
    Extracts an Eulerian walk from an all-even-degree multigraph.

    Vertices with no incident edges are allowed; they are simply never visited
    unless chosen as the start of an edgeless graph.
    """

    def __init__(self, vertex_ids: Sequence[VertexID], edges: Sequence[EulerianEdge]):
        """
        Build adjacency for the augmented graph.

        Args:
            vertex_ids: Every vertex of the graph, in a stable order
            edges: Real and virtual edges

        Raises:
            EulerianConsistencyError: If there are no vertices or an edge
                references an unknown vertex
        """
        if not vertex_ids:
            raise EulerianConsistencyError("graph has no vertices")

        self.vertex_ids: List[VertexID] = list(vertex_ids)
        self.edges: List[EulerianEdge] = list(edges)
        self._adjacency: Dict[VertexID, List[AdjacencyItem]] = {vid: [] for vid in self.vertex_ids}

        for pos, e in enumerate(self.edges):
            if e.v1 not in self._adjacency or e.v2 not in self._adjacency:
                raise EulerianConsistencyError(f"edge ({e.v1}, {e.v2}) references an unknown vertex")
            self._adjacency[e.v1].append((e.v2, pos))
            self._adjacency[e.v2].append((e.v1, pos))

    def degree(self, vertex_id: VertexID) -> int:
        return len(self._adjacency[vertex_id])

    def odd_degree_vertices(self) -> List[VertexID]:
        return [vid for vid in self.vertex_ids if len(self._adjacency[vid]) % 2 == 1]

    # ------------------------------------------------------------------
    # Start vertex
    # ------------------------------------------------------------------

    def _choose_start(self, start: Optional[VertexID]) -> VertexID:
        odd = self.odd_degree_vertices()
        if odd:
            raise EulerianConsistencyError(
                f"{len(odd)} odd-degree vertices remain after augmentation (e.g. {odd[:5]})"
            )

        if start is not None:
            if start not in self._adjacency:
                raise EulerianConsistencyError(f"start vertex {start} is not in the graph")
            if self.edges and not self._adjacency[start]:
                raise EulerianConsistencyError(f"start vertex {start} has no incident edges")
            return start

        for vid in self.vertex_ids:
            if self._adjacency[vid]:
                return vid
        return self.vertex_ids[0]

    # ------------------------------------------------------------------
    # Fleury
    # ------------------------------------------------------------------

    def _reachable_count(self, start: VertexID, disabled: List[bool]) -> int:
        """Number of vertices reachable from ``start`` over enabled edges."""
        visited: Set[VertexID] = {start}
        queue = deque([start])

        while queue:
            current = queue.popleft()
            for target, pos in self._adjacency[current]:
                if not disabled[pos] and target not in visited:
                    visited.add(target)
                    queue.append(target)

        return len(visited)

    def is_valid_next_edge(
        self, source: VertexID, pos: int, disabled: List[bool], reachable: Optional[int] = None
    ) -> bool:
        """
        Decide whether edge ``pos`` may be taken next from ``source``.

        The edge is valid if it is the only enabled edge left at ``source``, or
        if removing it does not shrink the set reachable from ``source``
        (it is not currently a bridge).

        Args:
            source: Current vertex
            pos: Augmented edge position of the candidate
            disabled: Per-run edge usage arena (restored before returning)
            reachable: Vertices reachable from ``source`` right now, if the
                caller already counted them for this step
        """
        enabled = sum(1 for _, p in self._adjacency[source] if not disabled[p])
        if enabled == 1:
            return True

        before = reachable if reachable is not None else self._reachable_count(source, disabled)
        disabled[pos] = True
        after = self._reachable_count(source, disabled)
        disabled[pos] = False

        return after >= before

    def fleury(self, start: Optional[VertexID] = None) -> EulerianTour:
        """
        Walk the graph with Fleury's bridge-avoiding rule.

        Implemented as a loop so deep street networks cannot hit the
        interpreter's recursion limit.

        Raises:
            EulerianConsistencyError: On odd-degree vertices or unused edges
        """
        current = self._choose_start(start)
        disabled = [False] * len(self.edges)
        route: List[VertexID] = [current]
        used: List[EulerianEdge] = []

        with LogTimer(logger, f"Fleury extraction ({len(self.edges)} edges)", level=logging.DEBUG):
            while True:
                chosen: Optional[AdjacencyItem] = None
                enabled = sum(1 for _, p in self._adjacency[current] if not disabled[p])
                reachable = self._reachable_count(current, disabled) if enabled > 1 else None
                for target, pos in self._adjacency[current]:
                    if not disabled[pos] and self.is_valid_next_edge(current, pos, disabled, reachable):
                        chosen = (target, pos)
                        break

                if chosen is None:
                    break

                target, pos = chosen
                disabled[pos] = True
                edge = self.edges[pos]
                used.append(edge)
                route.extend(_unfold(edge, current, target))
                current = target

        unused = disabled.count(False)
        if unused:
            raise EulerianConsistencyError(f"{unused} edges left unused (augmented graph is not connected)")

        return EulerianTour(vertex_ids=route, edges=used, start_vertex=route[0])

    # ------------------------------------------------------------------
    # Hierholzer
    # ------------------------------------------------------------------

    def hierholzer(self, start: Optional[VertexID] = None) -> EulerianTour:
        """
        Construct the circuit with Hierholzer's algorithm in O(E).

        Raises:
            EulerianConsistencyError: On odd-degree vertices or unused edges
        """
        first = self._choose_start(start)
        used_flags = [False] * len(self.edges)
        next_slot: Dict[VertexID, int] = {vid: 0 for vid in self.vertex_ids}

        # (vertex, position of the edge used to arrive)
        stack: List[Tuple[VertexID, Optional[int]]] = [(first, None)]
        circuit: List[Tuple[VertexID, Optional[int]]] = []

        while stack:
            current = stack[-1][0]
            adjacency = self._adjacency[current]
            i = next_slot[current]
            while i < len(adjacency) and used_flags[adjacency[i][1]]:
                i += 1
            next_slot[current] = i

            if i < len(adjacency):
                target, pos = adjacency[i]
                used_flags[pos] = True
                stack.append((target, pos))
            else:
                circuit.append(stack.pop())

        unused = used_flags.count(False)
        if unused:
            raise EulerianConsistencyError(f"{unused} edges left unused (augmented graph is not connected)")

        circuit.reverse()
        route: List[VertexID] = [first]
        used: List[EulerianEdge] = []
        previous = first

        for vertex, pos in circuit[1:]:
            edge = self.edges[pos]
            used.append(edge)
            route.extend(_unfold(edge, previous, vertex))
            previous = vertex

        return EulerianTour(vertex_ids=route, edges=used, start_vertex=first)


def _unfold(edge: EulerianEdge, source: VertexID, target: VertexID) -> List[VertexID]:
    """Vertices appended to the route when ``edge`` is walked source -> target."""
    if edge.is_virtual:
        return edge.unfold_from(source)
    return [target]


def find_eulerian_tour(
    vertex_ids: Sequence[VertexID],
    edges: Sequence[EulerianEdge],
    start: Optional[VertexID] = None,
    algorithm: str = "fleury",
) -> EulerianTour:
    """
    Convenience function to extract an Eulerian tour.

    Args:
        vertex_ids: All vertices of the augmented graph
        edges: Real and virtual edges (every vertex must have even degree)
        start: Optional starting vertex
        algorithm: "fleury" or "hierholzer"

    Returns:
        EulerianTour with the unfolded vertex sequence
    """
    builder = EulerianTourBuilder(vertex_ids, edges)
    if algorithm == "fleury":
        return builder.fleury(start)
    if algorithm == "hierholzer":
        return builder.hierholzer(start)
    raise ValueError(f"Unknown tour algorithm '{algorithm}'")
