"""
Postman Core - Chinese Postman Problem solver for patrol route planning

This package provides the algorithmic core behind live patrol-route simulation:
- Undirected street graph with degree and connectivity bookkeeping
- Dijkstra shortest paths and all-pairs distance tables
- Perfect matching of odd-degree vertices (networkx blossom)
- Eulerian tour extraction with bridge avoidance (Fleury) or Hierholzer
- BFS subgraph expansion for progressive coverage of large networks

Version: 1.0.0
"""

import logging

from .config import SolverConfig
from .coverage import CoveragePatch, CoveragePlan, PatrolCoveragePlanner, plan_progressive_coverage
from .eulerian import EulerianTour, EulerianTourBuilder, find_eulerian_tour
from .exceptions import (
    ConfigurationError,
    DisconnectedGraphError,
    DuplicateEdgeError,
    DuplicateVertexError,
    EulerianConsistencyError,
    GraphError,
    InvalidGraphError,
    InvalidVertexIdError,
    MatchingError,
    MatchingSizeMismatchError,
    NegativeWeightError,
    NetworkParseError,
    PathNotFoundError,
    PostmanError,
    RoutingError,
    SelfLoopEdgeError,
    UnknownSeedVertexError,
    UnknownVertexError,
)
from .expansion import ExpansionResult, SubgraphExpander, find_optimum_expansion, mark_covered
from .geo import haversine, planar_distance
from .graph import StreetGraph
from .logging_config import LogTimer, get_logger, setup_logging
from .matching import MatchingOracle, NetworkXMatchingOracle, inverse_distance_weight
from .network_loader import build_graph_from_dict, load_network
from .shortest_paths import (
    DijkstraEngine,
    ShortestPathEngine,
    ShortestPathMatrix,
    build_shortest_path_matrix,
    reconstruct_path,
    shortest_path,
    single_source_shortest_paths,
)
from .solver import CPPSolution, ChinesePostmanSolver, route_edge_counts, route_weight, solve_chinese_postman
from .types import NOT_FOUND, GraphEdge, RealEdge, Vertex, VirtualEdge

logging.getLogger("postman_core").addHandler(logging.NullHandler())

__all__ = [
    # Types
    "NOT_FOUND",
    "Vertex",
    "GraphEdge",
    "RealEdge",
    "VirtualEdge",
    # Graph
    "StreetGraph",
    # Shortest paths
    "single_source_shortest_paths",
    "build_shortest_path_matrix",
    "reconstruct_path",
    "shortest_path",
    "ShortestPathMatrix",
    "ShortestPathEngine",
    "DijkstraEngine",
    # Matching
    "MatchingOracle",
    "NetworkXMatchingOracle",
    "inverse_distance_weight",
    # Eulerian tours
    "EulerianTour",
    "EulerianTourBuilder",
    "find_eulerian_tour",
    # Solver
    "ChinesePostmanSolver",
    "CPPSolution",
    "solve_chinese_postman",
    "route_edge_counts",
    "route_weight",
    # Expansion and coverage
    "SubgraphExpander",
    "ExpansionResult",
    "find_optimum_expansion",
    "mark_covered",
    "PatrolCoveragePlanner",
    "CoveragePlan",
    "CoveragePatch",
    "plan_progressive_coverage",
    # Loading and geography
    "load_network",
    "build_graph_from_dict",
    "haversine",
    "planar_distance",
    # Configuration and logging
    "SolverConfig",
    "setup_logging",
    "get_logger",
    "LogTimer",
    # Exceptions
    "PostmanError",
    "GraphError",
    "RoutingError",
    "MatchingError",
    "DuplicateVertexError",
    "InvalidVertexIdError",
    "UnknownVertexError",
    "SelfLoopEdgeError",
    "DuplicateEdgeError",
    "NegativeWeightError",
    "InvalidGraphError",
    "DisconnectedGraphError",
    "PathNotFoundError",
    "UnknownSeedVertexError",
    "EulerianConsistencyError",
    "MatchingSizeMismatchError",
    "NetworkParseError",
    "ConfigurationError",
]

__version__ = "1.0.0"
