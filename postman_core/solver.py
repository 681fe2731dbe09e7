"""
Chinese Postman solver for undirected street networks.

This module orchestrates the complete pipeline:
1. Validate the graph (present, non-empty, connected)
2. Detect odd-degree vertices
3. Compute the all-pairs shortest path matrix
4. Pair odd vertices with a maximum-weight perfect matching
5. Add one virtual edge per matched pair (a shortest-path detour)
6. Extract an Eulerian tour of the augmented graph and unfold the detours

References:
- Edmonds & Johnson (1973): Matching, Euler tours and the Chinese postman
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .config import SolverConfig
from .eulerian import EulerianTour, find_eulerian_tour
from .exceptions import (
    DisconnectedGraphError,
    InvalidGraphError,
    PathNotFoundError,
    UnknownVertexError,
)
from .graph import StreetGraph
from .logging_config import LogTimer, get_logger
from .matching import (
    MatchingOracle,
    NetworkXMatchingOracle,
    complete_matching_edges,
    validate_matching,
)
from .shortest_paths import DijkstraEngine, ShortestPathEngine, ShortestPathMatrix
from .types import EdgeIndex, EulerianEdge, RealEdge, VertexID, VirtualEdge, Weight

logger = get_logger(__name__)


@dataclass
class CPPSolution:
    """Complete postman route with statistics."""

    route: List[VertexID]  # Unfolded vertex sequence handed to renderers
    tour: EulerianTour
    virtual_edges: List[VirtualEdge]
    matched_pairs: List[Tuple[VertexID, VertexID]]
    required_weight: Weight  # Sum of all street edge weights
    messages: List[str] = field(default_factory=list)

    @property
    def total_weight(self) -> Weight:
        return self.tour.total_weight

    @property
    def deadhead_weight(self) -> Weight:
        """Weight walked a second time along matched detours."""
        return self.tour.virtual_weight

    @property
    def deadhead_percentage(self) -> float:
        total = self.total_weight
        return (self.deadhead_weight / total * 100) if total > 0 else 0.0

    @property
    def is_closed(self) -> bool:
        return self.tour.is_closed


class ChinesePostmanSolver:
    """
    Minimum-weight closed walk covering every street at least once.

    The matching oracle and shortest-path engine are injectable so callers and
    tests can substitute their own implementations.
    """

    def __init__(
        self,
        oracle: Optional[MatchingOracle] = None,
        engine: Optional[ShortestPathEngine] = None,
        config: Optional[SolverConfig] = None,
    ):
        self.oracle = oracle or NetworkXMatchingOracle()
        self.engine = engine or DijkstraEngine()
        self.config = config or SolverConfig()

    def solve(self, graph: StreetGraph, start: Optional[VertexID] = None) -> CPPSolution:
        """
        Solve the Chinese Postman Problem on ``graph``.

        Args:
            graph: Connected street graph
            start: Optional vertex to start the walk from

        Returns:
            CPPSolution whose ``route`` covers every edge at least once

        Raises:
            InvalidGraphError: If graph is None or empty
            DisconnectedGraphError: If the graph has more than one component
            UnknownVertexError: If start is not a vertex of the graph
            MatchingSizeMismatchError: If the oracle returns a bad matching
        """
        if graph is None:
            raise InvalidGraphError()

        if graph.vertex_count == 0:
            raise InvalidGraphError(f"Graph '{graph.name}' has no vertices")

        if start is not None and not graph.has_vertex(start):
            raise UnknownVertexError(start, graph.name)

        if not graph.is_connected():
            raise DisconnectedGraphError(graph.connected_component_count(), graph.vertex_count, graph.name)

        messages: List[str] = []
        virtual_edges: List[VirtualEdge] = []
        matched_pairs: List[Tuple[VertexID, VertexID]] = []

        odd_vertices = graph.odd_degree_vertices()
        if odd_vertices:
            logger.info(
                f"Found {len(odd_vertices)} odd-degree vertices "
                f"(total {graph.vertex_count}) in graph '{graph.name}'"
            )
            matrix = self.engine.all_pairs(graph)
            matched_pairs = self._match_odd_vertices(odd_vertices, matrix)
            virtual_edges = [self._virtual_edge(a, b, matrix) for a, b in matched_pairs]
            messages.append(f"Paired {len(odd_vertices)} odd-degree vertices into {len(virtual_edges)} detours")
        else:
            messages.append("Graph is already Eulerian; no matching needed")

        augmented: List[EulerianEdge] = list(virtual_edges)
        augmented.extend(
            RealEdge(e.v1, e.v2, e.weight, index) for index, e in enumerate(graph.edges)
        )

        with LogTimer(logger, f"Eulerian tour over {len(augmented)} edges"):
            tour = find_eulerian_tour(graph.vertex_ids(), augmented, start, self.config.tour_algorithm)

        solution = CPPSolution(
            route=tour.vertex_ids,
            tour=tour,
            virtual_edges=virtual_edges,
            matched_pairs=matched_pairs,
            required_weight=graph.total_weight(),
            messages=messages,
        )
        messages.append(
            f"Route: {len(solution.route)} stops, {solution.total_weight:.1f} total "
            f"({solution.deadhead_weight:.1f} deadhead = {solution.deadhead_percentage:.1f}%)"
        )
        logger.info(messages[-1])

        return solution

    def _match_odd_vertices(
        self, odd_vertices: Sequence[VertexID], matrix: ShortestPathMatrix
    ) -> List[Tuple[VertexID, VertexID]]:
        """Pair odd vertices; each pair is emitted exactly once."""
        n = len(odd_vertices)
        distances = []
        for i in range(n):
            for j in range(i + 1, n):
                distances.append((i, j, matrix.distance(odd_vertices[i], odd_vertices[j])))

        edges = complete_matching_edges(
            distances,
            transform=self.config.matching_transform,
            scale=self.config.matching_weight_scale,
        )

        with LogTimer(logger, f"Perfect matching over {n} odd vertices"):
            partners = self.oracle.solve(edges, n)
        validate_matching(partners, n)

        processed = set()
        pairs: List[Tuple[VertexID, VertexID]] = []
        for i, j in enumerate(partners):
            if i in processed:
                continue
            pairs.append((odd_vertices[i], odd_vertices[j]))
            processed.add(i)
            processed.add(j)

        return pairs

    @staticmethod
    def _virtual_edge(a: VertexID, b: VertexID, matrix: ShortestPathMatrix) -> VirtualEdge:
        path = matrix.path(a, b)
        return VirtualEdge(v1=a, v2=b, weight=matrix.distance(a, b), path=tuple(path))


def solve_chinese_postman(
    graph: StreetGraph,
    oracle: Optional[MatchingOracle] = None,
    start: Optional[VertexID] = None,
) -> List[VertexID]:
    """
    Convenience function returning only the route vertex sequence.

    Args:
        graph: Connected street graph
        oracle: Optional matching oracle (networkx blossom by default)
        start: Optional starting vertex

    Returns:
        Ordered vertex ids of the postman route
    """
    return ChinesePostmanSolver(oracle=oracle).solve(graph, start).route


def route_edge_counts(graph: StreetGraph, route: Sequence[VertexID]) -> Dict[EdgeIndex, int]:
    """
    Count how many times each street edge is walked by ``route``.

    Raises:
        PathNotFoundError: If two consecutive stops are not joined by an edge
    """
    counts: Counter = Counter()
    for a, b in zip(route, route[1:]):
        if not (graph.has_vertex(a) and graph.vertex(a).is_adjacent_to(b)):
            raise PathNotFoundError(a, b, "consecutive route stops are not joined by a street")
        counts[graph.edge_index(a, b)] += 1
    return dict(counts)


def route_weight(graph: StreetGraph, route: Sequence[VertexID]) -> Weight:
    """Total street weight walked by ``route``."""
    return sum(graph.edge(i).weight * n for i, n in route_edge_counts(graph, route).items())
