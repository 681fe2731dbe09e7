"""
Centralized configuration for the postman solver.

Solver, expansion and coverage tuning lives in one validated dataclass so the
CLI, the coverage planner and the tests all agree on defaults.
"""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError
from .logging_config import get_logger

logger = get_logger(__name__)

TOUR_ALGORITHMS = ("fleury", "hierholzer")
MATCHING_TRANSFORMS = ("offset", "inverse")


@dataclass
class SolverConfig:
    """Tuning parameters for solving and progressive coverage."""

    # Matching
    matching_transform: str = "offset"  # "offset" (exact) or "inverse" (k / distance)
    matching_weight_scale: float = 1000.0  # k for the inverse transform

    # Tour extraction
    tour_algorithm: str = "fleury"  # "fleury" (bridge avoidance) or "hierholzer"

    # Subgraph expansion sweep (inclusive bounds on max_edges)
    expansion_min_edges: int = 6
    expansion_max_edges: int = 25

    # Progressive coverage
    max_patches: Optional[int] = None  # None = until every edge is covered

    # Graph construction
    strict_vertices: bool = False  # raise on duplicate vertex ids instead of warning

    def __post_init__(self):
        if self.matching_weight_scale <= 0:
            raise ConfigurationError(
                f"matching_weight_scale must be positive, got {self.matching_weight_scale}"
            )

        if self.matching_transform not in MATCHING_TRANSFORMS:
            raise ConfigurationError(
                f"Unknown matching_transform '{self.matching_transform}' "
                f"(expected one of {', '.join(MATCHING_TRANSFORMS)})"
            )

        if self.tour_algorithm not in TOUR_ALGORITHMS:
            raise ConfigurationError(
                f"Unknown tour_algorithm '{self.tour_algorithm}' "
                f"(expected one of {', '.join(TOUR_ALGORITHMS)})"
            )

        if self.expansion_min_edges < 1:
            raise ConfigurationError(
                f"expansion_min_edges must be >= 1, got {self.expansion_min_edges}"
            )

        if self.expansion_max_edges < self.expansion_min_edges:
            raise ConfigurationError(
                f"expansion_max_edges ({self.expansion_max_edges}) is smaller than "
                f"expansion_min_edges ({self.expansion_min_edges})"
            )

        if self.max_patches is not None and self.max_patches < 1:
            raise ConfigurationError(f"max_patches must be >= 1, got {self.max_patches}")

        logger.debug(
            f"Solver configuration: tour={self.tour_algorithm}, "
            f"sweep={self.expansion_min_edges}..{self.expansion_max_edges}, "
            f"k={self.matching_weight_scale}"
        )

    @property
    def expansion_sweep(self) -> range:
        """Range of ``max_edges`` values tried by the optimum expansion search."""
        return range(self.expansion_min_edges, self.expansion_max_edges + 1)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SolverConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**dict(data))
