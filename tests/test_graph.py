"""Tests for ConnectivityGraph."""

from __future__ import annotations

import unittest

from modsnap.placement import ConnectivityGraph, edge_key


class TestConnectivityGraph(unittest.TestCase):

    def setUp(self):
        self.graph = ConnectivityGraph()

    def test_edge_key_is_unordered(self):
        self.assertEqual(edge_key("b:1", "a:1"), ("a:1", "b:1"))
        self.assertEqual(edge_key("a:1", "b:1"), edge_key("b:1", "a:1"))

    def test_connect_is_symmetric(self):
        self.graph.connect("a:1", "b:1")
        self.assertEqual(self.graph.neighbors("a:1"), {"b:1"})
        self.assertEqual(self.graph.neighbors("b:1"), {"a:1"})
        self.assertTrue(self.graph.has_edge("b:1", "a:1"))

    def test_connect_idempotent(self):
        self.graph.connect("a:1", "b:1")
        self.graph.connect("b:1", "a:1")
        self.assertEqual(len(self.graph), 1)
        self.assertEqual(self.graph.edges, [("a:1", "b:1")])

    def test_self_loops_and_empty_ids_ignored(self):
        self.graph.connect("a:1", "a:1")
        self.graph.connect("", "b:1")
        self.assertEqual(len(self.graph), 0)
        self.assertEqual(self.graph.snapped_points, [])

    def test_disconnect_prunes_isolated(self):
        self.graph.connect("a:1", "b:1")
        self.graph.connect("a:1", "c:1")
        self.graph.disconnect("b:1", "a:1")
        self.assertEqual(self.graph.snapped_points, ["a:1", "c:1"])
        self.graph.disconnect("a:1", "c:1")
        self.assertEqual(self.graph.snapped_points, [])
        self.assertEqual(len(self.graph), 0)

    def test_disconnect_missing_edge_is_noop(self):
        self.graph.disconnect("a:1", "b:1")
        self.assertEqual(len(self.graph), 0)

    def test_neighbors_returns_copy(self):
        self.graph.connect("a:1", "b:1")
        self.graph.neighbors("a:1").add("x:9")
        self.assertEqual(self.graph.neighbors("a:1"), {"b:1"})
        self.assertEqual(self.graph.neighbors("nope"), set())

    def test_remove_point(self):
        self.graph.connect("a:1", "c:1")
        self.graph.connect("a:1", "b:1")
        self.graph.connect("c:1", "d:1")
        removed = self.graph.remove_point("a:1")
        self.assertEqual(removed, [("a:1", "b:1"), ("a:1", "c:1")])
        self.assertEqual(self.graph.edges, [("c:1", "d:1")])
        self.assertNotIn("b:1", self.graph.snapped_points)

    def test_remove_module_points(self):
        self.graph.connect("m:a", "n:a")
        self.graph.connect("m:b", "o:a")
        self.graph.connect("n:b", "o:b")
        removed = self.graph.remove_module_points(["m:a", "m:b", "m:c"])
        self.assertEqual(removed, [("m:a", "n:a"), ("m:b", "o:a")])
        self.assertEqual(self.graph.edges, [("n:b", "o:b")])


if __name__ == "__main__":
    unittest.main()
