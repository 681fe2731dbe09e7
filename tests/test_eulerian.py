"""
Unit tests for Eulerian tour extraction.

Tests Fleury and Hierholzer over real and virtual edges, the bridge test,
and consistency failures on malformed augmented graphs.
"""

import random
import sys
import unittest
from collections import Counter
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from postman_core.eulerian import EulerianTourBuilder, find_eulerian_tour
from postman_core.exceptions import EulerianConsistencyError
from postman_core.types import RealEdge, VirtualEdge

ALGORITHMS = ("fleury", "hierholzer")


def real_edges(pairs, weight=1.0):
    return [RealEdge(a, b, weight, i) for i, (a, b) in enumerate(pairs)]


def hop_counts(route):
    return Counter(frozenset(hop) for hop in zip(route, route[1:]))


def random_closed_walk(rng, num_vertices, length):
    walk = [1]
    while len(walk) < length:
        nxt = rng.randint(1, num_vertices)
        if nxt != walk[-1]:
            walk.append(nxt)
    if walk[-1] == 1:
        walk.pop()
    walk.append(1)
    return walk


class TestTourExtraction(unittest.TestCase):
    """Test both extraction strategies on small graphs."""

    def test_triangle(self):
        edges = real_edges([(1, 2), (2, 3), (3, 1)])
        for algorithm in ALGORITHMS:
            with self.subTest(algorithm=algorithm):
                tour = find_eulerian_tour([1, 2, 3], edges, start=1, algorithm=algorithm)
                self.assertEqual(len(tour.vertex_ids), 4)
                self.assertEqual(tour.vertex_ids[0], 1)
                self.assertTrue(tour.is_closed)
                self.assertEqual(hop_counts(tour.vertex_ids), hop_counts([1, 2, 3, 1]))
                self.assertAlmostEqual(tour.total_weight, 3.0)
                self.assertEqual(tour.num_virtual, 0)

    def test_virtual_edge_is_unfolded(self):
        """Path 1-2-3 augmented with a 1..3 detour walks 1,2,3,2,1."""
        detour = VirtualEdge(1, 3, 2.0, (1, 2, 3))
        edges = [detour] + real_edges([(1, 2), (2, 3)])
        for algorithm in ALGORITHMS:
            with self.subTest(algorithm=algorithm):
                tour = find_eulerian_tour([1, 2, 3], edges, start=1, algorithm=algorithm)
                self.assertEqual(tour.vertex_ids, [1, 2, 3, 2, 1])
                self.assertEqual(tour.num_virtual, 1)
                self.assertAlmostEqual(tour.virtual_weight, 2.0)
                self.assertAlmostEqual(tour.total_weight, 4.0)

    def test_virtual_edge_walked_backwards(self):
        detour = VirtualEdge(3, 1, 2.0, (3, 2, 1))
        self.assertEqual(detour.unfold_from(3), [2, 1])
        self.assertEqual(detour.unfold_from(1), [2, 3])

    def test_default_start_is_first_vertex_with_edges(self):
        edges = real_edges([(2, 3), (3, 4), (4, 2)])
        tour = find_eulerian_tour([1, 2, 3, 4], edges)
        self.assertEqual(tour.start_vertex, 2)

    def test_edgeless_graph(self):
        for algorithm in ALGORITHMS:
            with self.subTest(algorithm=algorithm):
                tour = find_eulerian_tour([5], [], algorithm=algorithm)
                self.assertEqual(tour.vertex_ids, [5])
                self.assertEqual(tour.edges, [])

    def test_parallel_edges(self):
        edges = [RealEdge(1, 2, 1.0, 0), VirtualEdge(1, 2, 1.0, (1, 2))]
        for algorithm in ALGORITHMS:
            with self.subTest(algorithm=algorithm):
                tour = find_eulerian_tour([1, 2], edges, start=2, algorithm=algorithm)
                self.assertEqual(tour.vertex_ids, [2, 1, 2])

    def test_random_closed_walks(self):
        """Every edge of a random Eulerian multigraph is used exactly once."""
        rng = random.Random(2024)
        for _ in range(40):
            walk = random_closed_walk(rng, rng.randint(3, 9), rng.randint(4, 30))
            edges = real_edges(list(zip(walk, walk[1:])))
            vertex_ids = sorted(set(walk))
            for algorithm in ALGORITHMS:
                tour = find_eulerian_tour(vertex_ids, edges, start=1, algorithm=algorithm)
                self.assertEqual(len(tour.vertex_ids), len(edges) + 1)
                self.assertTrue(tour.is_closed)
                self.assertEqual(hop_counts(tour.vertex_ids), hop_counts(walk))
                self.assertEqual(sorted(e.source_index for e in tour.edges), list(range(len(edges))))

    def test_unknown_algorithm(self):
        with self.assertRaises(ValueError):
            find_eulerian_tour([1, 2], real_edges([(1, 2), (2, 1)]), algorithm="dfs")


class TestBridgeTest(unittest.TestCase):
    """Test the Fleury next-edge rule."""

    def setUp(self):
        # Triangle 1-2-3 with a pendant edge 1-4
        self.builder = EulerianTourBuilder([1, 2, 3, 4], real_edges([(1, 2), (2, 3), (3, 1), (1, 4)]))

    def test_bridge_is_rejected(self):
        disabled = [False] * 4
        self.assertFalse(self.builder.is_valid_next_edge(1, 3, disabled))
        self.assertEqual(disabled, [False] * 4)

    def test_cycle_edge_is_accepted(self):
        self.assertTrue(self.builder.is_valid_next_edge(1, 0, [False] * 4))

    def test_precounted_reachable_gives_same_answer(self):
        disabled = [False] * 4
        reachable = self.builder._reachable_count(1, disabled)
        self.assertEqual(reachable, 4)
        for pos in range(4):
            if pos == 1:
                continue  # edge 2-3 is not incident to vertex 1
            self.assertEqual(
                self.builder.is_valid_next_edge(1, pos, disabled, reachable),
                self.builder.is_valid_next_edge(1, pos, disabled),
            )
        self.assertEqual(disabled, [False] * 4)

    def test_fleury_counts_reachable_once_per_step(self):
        """Bowtie walked from 2: the step at 1 rejects the 1-3 bridge first."""
        builder = EulerianTourBuilder(
            [1, 2, 3, 4, 5], real_edges([(1, 2), (2, 3), (3, 1), (1, 4), (4, 5), (5, 1)])
        )
        calls = []
        original = builder._reachable_count

        def counting(start, disabled):
            calls.append(start)
            return original(start, disabled)

        builder._reachable_count = counting
        tour = builder.fleury(start=2)

        self.assertEqual(tour.vertex_ids, [2, 1, 4, 5, 1, 3, 2])
        # At 2: one shared count + one candidate; at 1: one shared count + two
        # candidates; single-edge steps need no search
        self.assertEqual(calls, [2, 2, 1, 1, 1])

    def test_last_remaining_edge_is_accepted(self):
        disabled = [True, False, True, False]
        self.assertTrue(self.builder.is_valid_next_edge(2, 1, disabled))


class TestConsistencyErrors(unittest.TestCase):
    """Test failures that indicate a broken augmented graph."""

    def test_odd_degree_vertex(self):
        for algorithm in ALGORITHMS:
            with self.subTest(algorithm=algorithm):
                with self.assertRaises(EulerianConsistencyError):
                    find_eulerian_tour([1, 2, 3], real_edges([(1, 2), (2, 3)]), algorithm=algorithm)

    def test_is_an_assertion_error(self):
        with self.assertRaises(AssertionError):
            find_eulerian_tour([1, 2, 3], real_edges([(1, 2), (2, 3)]))

    def test_no_vertices(self):
        with self.assertRaises(EulerianConsistencyError):
            EulerianTourBuilder([], [])

    def test_edge_with_unknown_endpoint(self):
        with self.assertRaises(EulerianConsistencyError):
            EulerianTourBuilder([1, 2], real_edges([(1, 9)]))

    def test_unknown_start(self):
        with self.assertRaises(EulerianConsistencyError):
            find_eulerian_tour([1, 2, 3], real_edges([(1, 2), (2, 3), (3, 1)]), start=7)

    def test_start_without_edges(self):
        with self.assertRaises(EulerianConsistencyError):
            find_eulerian_tour([1, 2, 3, 4], real_edges([(1, 2), (2, 3), (3, 1)]), start=4)

    def test_disconnected_even_graph(self):
        """Two disjoint triangles leave edges unused."""
        edges = real_edges([(1, 2), (2, 3), (3, 1), (4, 5), (5, 6), (6, 4)])
        for algorithm in ALGORITHMS:
            with self.subTest(algorithm=algorithm):
                with self.assertRaises(EulerianConsistencyError):
                    find_eulerian_tour([1, 2, 3, 4, 5, 6], edges, start=1, algorithm=algorithm)


if __name__ == "__main__":
    unittest.main()
