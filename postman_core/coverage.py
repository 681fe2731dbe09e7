"""
Progressive patrol coverage of a large street network.

The planner repeatedly grows a patch around the patrol's current position,
solves the Chinese Postman Problem on that patch, and marks its streets as
covered. When no uncovered street can be reached from the current position
through uncovered streets, it transfers to the nearest uncovered street by
shortest-path distance and resumes growing from there. Every step either
covers at least one street or moves next to one, so coverage only grows.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from .config import SolverConfig
from .exceptions import DisconnectedGraphError, UnknownSeedVertexError
from .expansion import SubgraphExpander, mark_covered
from .graph import StreetGraph
from .logging_config import LogTimer, get_logger
from .shortest_paths import DijkstraEngine, ShortestPathEngine, reconstruct_path
from .solver import ChinesePostmanSolver
from .types import EdgeIndex, VertexID, Weight

logger = get_logger(__name__)


@dataclass
class CoveragePatch:
    """One solved patch of the network.

    Attributes:
        seed: Vertex the patch was grown from
        edge_indices: Parent-graph edges covered by this patch
        route: Postman route inside the patch (starts at seed)
        route_weight: Total weight of ``route``
        transfer: Walk from the previous position to ``seed`` (just ``[seed]``
            when no transfer was needed)
        transfer_weight: Weight of ``transfer``
    """

    seed: VertexID
    edge_indices: List[EdgeIndex]
    route: List[VertexID]
    route_weight: Weight
    transfer: List[VertexID] = field(default_factory=list)
    transfer_weight: Weight = 0.0


@dataclass
class CoveragePlan:
    """Ordered patches plus the global covered-edge set."""

    start: VertexID
    patches: List[CoveragePatch]
    covered_edges: Set[EdgeIndex]
    total_edges: int

    @property
    def is_complete(self) -> bool:
        return len(self.covered_edges) == self.total_edges

    @property
    def coverage_ratio(self) -> float:
        return len(self.covered_edges) / self.total_edges if self.total_edges else 1.0

    @property
    def total_weight(self) -> Weight:
        return sum(p.route_weight + p.transfer_weight for p in self.patches)

    @property
    def transfer_weight(self) -> Weight:
        return sum(p.transfer_weight for p in self.patches)

    def full_route(self) -> List[VertexID]:
        """Single walk stitching every transfer and patch route together."""
        route = [self.start]
        for patch in self.patches:
            route.extend(patch.transfer[1:])
            route.extend(patch.route[1:])
        return route


class PatrolCoveragePlanner:
    """
    Covers a street network patch by patch.

    The covered-edge set is owned by the planner for the duration of ``plan``
    and updated only between expansions.
    """

    def __init__(
        self,
        graph: StreetGraph,
        solver: Optional[ChinesePostmanSolver] = None,
        config: Optional[SolverConfig] = None,
        engine: Optional[ShortestPathEngine] = None,
    ):
        self.graph = graph
        self.config = config or SolverConfig()
        self.solver = solver or ChinesePostmanSolver(config=self.config)
        self.engine = engine or DijkstraEngine()
        self.expander = SubgraphExpander(graph)

    def plan(self, start: VertexID) -> CoveragePlan:
        """
        Plan progressive coverage from ``start``.

        Stops when every street is covered or ``config.max_patches`` patches
        have been produced.

        Raises:
            UnknownSeedVertexError: If start is not in the graph
            DisconnectedGraphError: If the network is not connected
        """
        if not self.graph.has_vertex(start):
            raise UnknownSeedVertexError(start, self.graph.name)

        if not self.graph.is_connected():
            raise DisconnectedGraphError(
                self.graph.connected_component_count(), self.graph.vertex_count, self.graph.name
            )

        covered: Set[EdgeIndex] = set()
        patches: List[CoveragePatch] = []
        position = start
        transfer: List[VertexID] = [start]
        transfer_weight = 0.0
        max_patches = self.config.max_patches

        with LogTimer(logger, f"Progressive coverage of {self.graph.edge_count} edges"):
            while len(covered) < self.graph.edge_count:
                if max_patches is not None and len(patches) >= max_patches:
                    logger.info(f"Stopping after {max_patches} patches")
                    break

                result = self.expander.find_optimum_expansion(position, covered, self.config.expansion_sweep)

                if result.is_empty:
                    target, path, distance = self.nearest_uncovered(position, covered)
                    logger.debug(f"Local expansion stalled at {position}; transferring to {target} ({distance:.1f})")
                    transfer.extend(path[1:])
                    transfer_weight += distance
                    position = target
                    continue

                solution = self.solver.solve(result.subgraph, start=position)
                mark_covered(covered, result)

                patches.append(
                    CoveragePatch(
                        seed=position,
                        edge_indices=list(result.edge_indices),
                        route=solution.route,
                        route_weight=solution.total_weight,
                        transfer=transfer,
                        transfer_weight=transfer_weight,
                    )
                )
                logger.info(
                    f"Patch {len(patches)}: {len(result.edge_indices)} edges from vertex {position}, "
                    f"coverage {len(covered)}/{self.graph.edge_count}"
                )

                position = solution.route[-1]
                transfer = [position]
                transfer_weight = 0.0

        return CoveragePlan(
            start=start,
            patches=patches,
            covered_edges=covered,
            total_edges=self.graph.edge_count,
        )

    def nearest_uncovered(
        self, position: VertexID, covered: Set[EdgeIndex]
    ) -> Tuple[VertexID, List[VertexID], Weight]:
        """
        Find the uncovered street closest to ``position``.

        Returns:
            Tuple of (nearer endpoint of that street, walk to it, walk distance).
            Ties are broken by the lower edge index.

        Raises:
            DisconnectedGraphError: If no uncovered street is reachable
        """
        distances, predecessors = self.engine.single_source(self.graph, position)

        best: Optional[Tuple[Weight, EdgeIndex, VertexID]] = None
        for index, edge in enumerate(self.graph.edges):
            if index in covered:
                continue
            for vid in (edge.v1, edge.v2):
                if vid not in distances:
                    continue
                candidate = (distances[vid], index, vid)
                if best is None or candidate[:2] < best[:2]:
                    best = candidate

        if best is None:
            raise DisconnectedGraphError(
                self.graph.connected_component_count(), self.graph.vertex_count, self.graph.name
            )

        distance, _, target = best
        return target, reconstruct_path(predecessors, position, target), distance


def plan_progressive_coverage(
    graph: StreetGraph, start: VertexID, config: Optional[SolverConfig] = None
) -> CoveragePlan:
    """Convenience function for PatrolCoveragePlanner.plan."""
    return PatrolCoveragePlanner(graph, config=config).plan(start)
