"""
Unit tests for shortest path computation.

Tests Dijkstra distances, predecessor-chain reconstruction (including cycle
detection) and the numpy-backed all-pairs table.
"""

import unittest
import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from postman_core.exceptions import NegativeWeightError, PathNotFoundError, UnknownVertexError
from postman_core.graph import StreetGraph
from postman_core.shortest_paths import (
    DijkstraEngine,
    build_shortest_path_matrix,
    reconstruct_path,
    shortest_path,
    single_source_shortest_paths,
)


def diamond_graph():
    """
    1 --1-- 2 --1-- 4
    |               |
    +---5-- 3 --1---+
    """
    graph = StreetGraph("diamond")
    for vid in (1, 2, 3, 4):
        graph.add_vertex(vid)
    graph.add_edge(1, 2, 1.0)
    graph.add_edge(2, 4, 1.0)
    graph.add_edge(1, 3, 5.0)
    graph.add_edge(3, 4, 1.0)
    return graph


class TestPathReconstruction(unittest.TestCase):
    """Test cases for predecessor-chain path reconstruction."""

    def test_simple_path(self):
        """Test basic path reconstruction."""
        predecessors = {1: None, 2: 1, 3: 2}
        self.assertEqual(reconstruct_path(predecessors, 1, 3), [1, 2, 3])

    def test_source_equals_target(self):
        """Test path from node to itself."""
        self.assertEqual(reconstruct_path({}, 5, 5), [5])

    def test_direct_connection(self):
        self.assertEqual(reconstruct_path({1: None, 2: 1}, 1, 2), [1, 2])

    def test_unreachable_target(self):
        """Test unreachable target raises."""
        with self.assertRaises(PathNotFoundError) as ctx:
            reconstruct_path({1: None, 2: 1}, 1, 9)
        self.assertEqual(ctx.exception.from_vertex, 1)
        self.assertEqual(ctx.exception.to_vertex, 9)

    def test_cycle_detection(self):
        """Test cycle detection in predecessor map."""
        # Invalid cycle: 3 -> 4 -> 3, never reaching the source
        predecessors = {1: None, 2: 1, 3: 4, 4: 3, 5: 3}
        with self.assertLogs("postman_core.shortest_paths", level="WARNING"):
            with self.assertRaises(PathNotFoundError):
                reconstruct_path(predecessors, 1, 5)

    def test_long_path(self):
        """Test longer path reconstruction."""
        predecessors = {i: i - 1 for i in range(2, 101)}
        predecessors[1] = None
        self.assertEqual(reconstruct_path(predecessors, 1, 100), list(range(1, 101)))


class TestDijkstra(unittest.TestCase):
    """Test single-source shortest paths."""

    def setUp(self):
        self.graph = diamond_graph()

    def test_distances(self):
        dist, prev = single_source_shortest_paths(self.graph, 1)
        self.assertEqual(dist, {1: 0.0, 2: 1.0, 4: 2.0, 3: 3.0})
        self.assertIsNone(prev[1])
        self.assertEqual(prev[3], 4)

    def test_shortest_path_prefers_lighter_route(self):
        path, distance = shortest_path(self.graph, 1, 3)
        self.assertEqual(path, [1, 2, 4, 3])
        self.assertAlmostEqual(distance, 3.0)

    def test_unreachable_vertices_are_absent(self):
        self.graph.add_vertex(10)
        dist, prev = single_source_shortest_paths(self.graph, 1)
        self.assertNotIn(10, dist)
        self.assertNotIn(10, prev)
        with self.assertRaises(PathNotFoundError):
            shortest_path(self.graph, 1, 10)

    def test_unknown_source(self):
        with self.assertRaises(UnknownVertexError):
            single_source_shortest_paths(self.graph, 42)

    def test_unknown_destination(self):
        with self.assertRaises(UnknownVertexError):
            shortest_path(self.graph, 1, 42)

    def test_negative_weight_rejected(self):
        """Edges that slipped past graph validation are still rejected."""
        self.graph._edges[0] = self.graph._edges[0]._replace(weight=-1.0)
        with self.assertRaises(NegativeWeightError):
            single_source_shortest_paths(self.graph, 1)

    def test_engine_delegates(self):
        engine = DijkstraEngine()
        dist, _ = engine.single_source(self.graph, 4)
        self.assertAlmostEqual(dist[1], 2.0)


class TestShortestPathMatrix(unittest.TestCase):
    """Test the all-pairs distance table."""

    def setUp(self):
        self.graph = diamond_graph()
        self.matrix = build_shortest_path_matrix(self.graph)

    def test_symmetric_distances(self):
        for a in self.graph.vertex_ids():
            for b in self.graph.vertex_ids():
                self.assertAlmostEqual(self.matrix.distance(a, b), self.matrix.distance(b, a))

    def test_zero_diagonal(self):
        array = self.matrix.as_array()
        self.assertEqual(array.dtype, np.float64)
        self.assertTrue(np.all(np.diag(array) == 0.0))

    def test_paths(self):
        self.assertEqual(self.matrix.path(3, 1), [3, 4, 2, 1])
        self.assertEqual(self.matrix.path(2, 2), [2])

    def test_as_array_is_a_copy(self):
        array = self.matrix.as_array()
        array[0, 1] = 999.0
        self.assertNotEqual(self.matrix.distance(1, 2), 999.0)

    def test_unreachable_pair_is_inf(self):
        self.graph.add_vertex(10)
        matrix = build_shortest_path_matrix(self.graph)
        self.assertFalse(matrix.has_path(1, 10))
        self.assertEqual(matrix.distance(1, 10), float("inf"))
        with self.assertRaises(PathNotFoundError):
            matrix.path(1, 10)

    def test_unknown_vertex(self):
        with self.assertRaises(UnknownVertexError):
            self.matrix.distance(1, 42)

    def test_size(self):
        self.assertEqual(len(self.matrix), 4)


if __name__ == "__main__":
    unittest.main()
