"""
Custom exceptions for the patrol postman solver.

Provides a clear exception hierarchy for better error handling and debugging.
All exceptions inherit from PostmanError for easy catching of all library errors.
"""


class PostmanError(Exception):
    """Base exception for all postman-solver errors."""

    pass


# ==============================================================================
# Input/Parsing Errors
# ==============================================================================


class NetworkParseError(PostmanError):
    """Raised when a street-network document cannot be loaded."""

    def __init__(self, filepath: str, reason: str):
        self.filepath = filepath
        self.reason = reason
        super().__init__(f"Failed to load network '{filepath}': {reason}")


# ==============================================================================
# Graph Construction Errors
# ==============================================================================


class GraphError(PostmanError):
    """Base class for graph-related errors."""

    pass


class DuplicateVertexError(GraphError):
    """Raised when a vertex id is registered twice on a strict graph."""

    def __init__(self, vertex_id):
        self.vertex_id = vertex_id
        super().__init__(f"Vertex {vertex_id} already exists")


class InvalidVertexIdError(GraphError):
    """Raised when a vertex id is not a positive integer."""

    def __init__(self, vertex_id):
        self.vertex_id = vertex_id
        super().__init__(f"Invalid vertex id: {vertex_id!r} (must be a positive integer)")


class UnknownVertexError(GraphError):
    """Raised when an operation references a vertex that is not in the graph."""

    def __init__(self, vertex_id, graph_name: str = ""):
        self.vertex_id = vertex_id
        self.graph_name = graph_name
        msg = f"Vertex {vertex_id} not found"
        if graph_name:
            msg += f" in graph '{graph_name}'"
        super().__init__(msg)


class SelfLoopEdgeError(GraphError):
    """Raised when an edge would connect a vertex to itself."""

    def __init__(self, vertex_id):
        self.vertex_id = vertex_id
        super().__init__(f"Self-loop edge on vertex {vertex_id} is not allowed")


class DuplicateEdgeError(GraphError):
    """Raised when an edge between the same unordered pair already exists."""

    def __init__(self, v1, v2):
        self.v1 = v1
        self.v2 = v2
        super().__init__(f"Edge ({v1}, {v2}) already exists")


class NegativeWeightError(GraphError):
    """Raised when an edge weight is negative or not a finite number."""

    def __init__(self, v1, v2, weight):
        self.v1 = v1
        self.v2 = v2
        self.weight = weight
        super().__init__(f"Edge ({v1}, {v2}) has invalid weight {weight!r}")


class InvalidGraphError(GraphError):
    """Raised when a solver is handed no graph at all."""

    def __init__(self, reason: str = "Graph required for solving the Chinese Postman Problem"):
        self.reason = reason
        super().__init__(reason)


class DisconnectedGraphError(GraphError):
    """Raised when a graph that must be connected is not."""

    def __init__(self, num_components: int, num_vertices: int, graph_name: str = ""):
        self.num_components = num_components
        self.num_vertices = num_vertices
        self.graph_name = graph_name
        label = f" '{graph_name}'" if graph_name else ""
        super().__init__(
            f"Graph{label} is disconnected: {num_vertices} vertices in "
            f"{num_components} components"
        )


# ==============================================================================
# Routing Errors
# ==============================================================================


class RoutingError(PostmanError):
    """Base class for routing-related errors."""

    pass


class PathNotFoundError(RoutingError):
    """Raised when no path exists between two vertices."""

    def __init__(self, from_vertex, to_vertex, reason: str = ""):
        self.from_vertex = from_vertex
        self.to_vertex = to_vertex
        self.reason = reason
        msg = f"No path exists from {from_vertex} to {to_vertex}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class UnknownSeedVertexError(RoutingError):
    """Raised when a subgraph expansion is seeded from a missing vertex."""

    def __init__(self, seed, graph_name: str = ""):
        self.seed = seed
        self.graph_name = graph_name
        msg = f"Seed vertex {seed} not found"
        if graph_name:
            msg += f" in graph '{graph_name}'"
        super().__init__(msg)


class EulerianConsistencyError(RoutingError, AssertionError):
    """Raised when the augmented graph breaks the all-even-degree precondition.

    This signals a bug upstream of tour extraction, not bad user input.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Eulerian consistency check failed: {reason}")


# ==============================================================================
# Matching Errors
# ==============================================================================


class MatchingError(PostmanError):
    """Base class for matching-oracle errors."""

    pass


class MatchingSizeMismatchError(MatchingError):
    """Raised when the matching oracle returns a result of the wrong shape."""

    def __init__(self, expected: int, actual: int, reason: str = ""):
        self.expected = expected
        self.actual = actual
        msg = (
            f"Matching result size should be equal to odd-degree vertex count: "
            f"expected {expected}, got {actual}"
        )
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ==============================================================================
# Configuration Errors
# ==============================================================================


class ConfigurationError(PostmanError):
    """Raised when configuration is invalid."""

    pass
