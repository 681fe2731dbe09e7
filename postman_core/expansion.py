"""
Incremental subgraph growth for progressive patrol coverage.

Large street networks are carved into small patches that are cheap to solve
one at a time. A patch is grown breadth-first from a seed vertex, one edge at a
time, skipping edges already covered, and stops as soon as it is "nearly
Eulerian" (no odd vertices, or two odd vertices with at least three edges).

This is a bounded local search, not an optimal partitioning: the sweep over
patch sizes only picks the best of a handful of BFS prefixes.
"""

from collections import Counter, deque
from dataclasses import dataclass
from typing import Iterable, List, MutableSet, Optional, Set

from .exceptions import ConfigurationError, UnknownSeedVertexError
from .graph import StreetGraph
from .logging_config import get_logger
from .types import EdgeIndex, VertexID

logger = get_logger(__name__)

DEFAULT_SWEEP = range(6, 26)
MIN_EDGES_FOR_TWO_ODD = 3


@dataclass
class ExpansionResult:
    """One grown patch.

    Attributes:
        seed: Vertex the BFS started from
        max_edges: Edge budget the patch was grown with
        subgraph: Standalone graph holding the patch
        edge_indices: Parent-graph indices of the patch edges, in growth order
        odd_vertex_count: Odd-degree vertices inside the patch
    """

    seed: VertexID
    max_edges: int
    subgraph: StreetGraph
    edge_indices: List[EdgeIndex]
    odd_vertex_count: int

    @property
    def is_empty(self) -> bool:
        return not self.edge_indices

    @property
    def vertex_count(self) -> int:
        return self.subgraph.vertex_count


class SubgraphExpander:
    """Grows patches of a parent street graph."""

    def __init__(self, graph: StreetGraph):
        self.graph = graph

    def expand_from_seed(
        self, seed: VertexID, excluded_edges: Iterable[EdgeIndex], max_edges: int
    ) -> ExpansionResult:
        """
        Grow one patch breadth-first from ``seed``.

        Args:
            seed: Starting vertex
            excluded_edges: Parent edge indices already covered (not modified)
            max_edges: Maximum number of edges in the patch

        Returns:
            ExpansionResult; empty when no uncovered edge is reachable via
            uncovered edges from the seed

        Raises:
            UnknownSeedVertexError: If seed is not in the parent graph
        """
        if not self.graph.has_vertex(seed):
            raise UnknownSeedVertexError(seed, self.graph.name)

        excluded = excluded_edges if isinstance(excluded_edges, (set, frozenset)) else set(excluded_edges)

        visited: Set[VertexID] = set()
        included: List[EdgeIndex] = []
        included_set: Set[EdgeIndex] = set()
        degrees: Counter = Counter()
        odd_count = 0
        queue = deque([seed])
        found = False

        while queue and not found:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)

            next_vertices: List[VertexID] = []
            neighbors = self.graph.neighbors(current)
            for neighbor, index in zip(neighbors, self.graph.incident_edge_indices(current)):
                if index in included_set or index in excluded or len(included) >= max_edges:
                    continue

                included.append(index)
                included_set.add(index)
                if neighbor not in next_vertices:
                    next_vertices.append(neighbor)

                edge = self.graph.edge(index)
                for vid in (edge.v1, edge.v2):
                    degrees[vid] += 1
                    odd_count += 1 if degrees[vid] % 2 == 1 else -1

                if odd_count == 0 or (odd_count == 2 and len(included) >= MIN_EDGES_FOR_TWO_ODD):
                    found = True
                    break

            if not found:
                queue.extend(next_vertices)

        subgraph, _ = self.graph.subgraph_from_edges(included, name=f"Expanding SubGraph from {seed}")
        logger.debug(
            f"Expanded {len(included)}/{max_edges} edges from vertex {seed}: "
            f"{subgraph.vertex_count} vertices, {odd_count} odd"
        )

        return ExpansionResult(
            seed=seed,
            max_edges=max_edges,
            subgraph=subgraph,
            edge_indices=included,
            odd_vertex_count=odd_count,
        )

    def find_optimum_expansion(
        self, seed: VertexID, excluded_edges: Iterable[EdgeIndex], sweep: Optional[Iterable[int]] = None
    ) -> ExpansionResult:
        """
        Try every edge budget in ``sweep`` and keep the best patch.

        Best means fewest odd vertices, ties broken by more vertices. The first
        candidate wins remaining ties.

        Raises:
            UnknownSeedVertexError: If seed is not in the parent graph
            ConfigurationError: If sweep is empty
        """
        excluded = set(excluded_edges)
        best: Optional[ExpansionResult] = None

        for max_edges in sweep if sweep is not None else DEFAULT_SWEEP:
            candidate = self.expand_from_seed(seed, excluded, max_edges)
            if (
                best is None
                or candidate.odd_vertex_count < best.odd_vertex_count
                or (
                    candidate.odd_vertex_count == best.odd_vertex_count
                    and candidate.vertex_count > best.vertex_count
                )
            ):
                best = candidate

        if best is None:
            raise ConfigurationError("Expansion sweep is empty")

        return best


def find_optimum_expansion(
    parent_graph: StreetGraph,
    seed: VertexID,
    excluded_edges: Iterable[EdgeIndex],
    sweep: Optional[Iterable[int]] = None,
) -> ExpansionResult:
    """Convenience wrapper around SubgraphExpander.find_optimum_expansion."""
    return SubgraphExpander(parent_graph).find_optimum_expansion(seed, excluded_edges, sweep)


def mark_covered(excluded_edges: MutableSet[EdgeIndex], result: ExpansionResult) -> None:
    """Record a patch's edges in the caller-owned covered set."""
    excluded_edges.update(result.edge_indices)
