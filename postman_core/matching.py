"""
Perfect matching over odd-degree vertices.

The solver needs a minimum total-distance pairing of odd vertices. Matching
oracles maximize weight instead, so distances are passed through a strictly
decreasing transform before the oracle sees them.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Sequence, Tuple

import networkx as nx

from .exceptions import MatchingSizeMismatchError
from .logging_config import get_logger

logger = get_logger(__name__)

MATCHING_WEIGHT_SCALE = 1000.0
_MIN_DISTANCE = 1e-9

MatchingEdge = Tuple[int, int, float]


def inverse_distance_weight(distance: float, scale: float = MATCHING_WEIGHT_SCALE) -> float:
    """Map a shortest-path distance to a matching weight (shorter = heavier)."""
    return scale / max(distance, _MIN_DISTANCE)


class MatchingOracle(ABC):
    """Maximum-weight perfect matching over nodes ``0..n-1``."""

    @abstractmethod
    def solve(self, edges: Sequence[MatchingEdge], n: int) -> List[int]:
        """
        Pair every node with exactly one partner.

        Args:
            edges: Weighted edges ``(i, j, weight)`` between logical nodes
            n: Number of logical nodes

        Returns:
            List of length n where ``result[i]`` is the partner of node i,
            or an empty list when no perfect matching exists
        """


class NetworkXMatchingOracle(MatchingOracle):
    """Blossom-based matching via ``networkx.max_weight_matching``."""

    def solve(self, edges: Sequence[MatchingEdge], n: int) -> List[int]:
        g = nx.Graph()
        g.add_nodes_from(range(n))
        g.add_weighted_edges_from(edges)

        pairs = nx.max_weight_matching(g, maxcardinality=True, weight="weight")

        partners = [-1] * n
        for i, j in pairs:
            partners[i] = j
            partners[j] = i

        if any(p < 0 for p in partners):
            logger.warning(f"No perfect matching over {n} nodes ({len(pairs)} pairs found)")
            return []

        return partners


def validate_matching(partners: Sequence[int], n: int) -> None:
    """Check that ``partners`` is a perfect matching over ``n`` nodes.

    Raises:
        MatchingSizeMismatchError: On wrong length or inconsistent pairs
    """
    if partners is None or len(partners) != n:
        raise MatchingSizeMismatchError(n, 0 if partners is None else len(partners))

    for i, j in enumerate(partners):
        if not 0 <= j < n or j == i or partners[j] != i:
            raise MatchingSizeMismatchError(n, len(partners), f"node {i} paired with {j}")


def offset_distance_weights(distances: Sequence[Tuple[int, int, float]]) -> List[MatchingEdge]:
    """Weight each pair by ``(max distance + 1) - distance``.

    Every perfect matching has the same number of pairs, so maximizing these
    weights minimizes the total added distance exactly.
    """
    if not distances:
        return []
    ceiling = max(d for _, _, d in distances) + 1.0
    return [(i, j, ceiling - d) for i, j, d in distances]


def complete_matching_edges(
    distances: Iterable[Tuple[int, int, float]],
    transform: str = "offset",
    scale: float = MATCHING_WEIGHT_SCALE,
) -> List[MatchingEdge]:
    """Convert ``(i, j, distance)`` triples into oracle edges.

    Args:
        distances: Pairwise shortest-path distances between logical nodes
        transform: "offset" (exact minimum total distance) or "inverse" (k / d)
        scale: k for the inverse transform
    """
    triples = list(distances)
    if transform == "offset":
        return offset_distance_weights(triples)
    if transform == "inverse":
        return [(i, j, inverse_distance_weight(d, scale)) for i, j, d in triples]
    raise ValueError(f"Unknown matching transform '{transform}'")
