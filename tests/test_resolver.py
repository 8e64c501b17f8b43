"""Tests for SnapResolver — candidate search, tie-breaks and the flush join."""

from __future__ import annotations

import math
import unittest

from modsnap.placement import (
    ConnectionPointRegistry, PlacementStore, PointInput, SnapResolver, SnapRules,
    SNAP_RULES,
)
from tests.scene_fixture import CORE, EAST, POD, WEST


def _pt(key: str, x: float, z: float = 0.0) -> PointInput:
    return PointInput(key=key, local_position=(x, 0.0, z))


class ResolverCase(unittest.TestCase):
    """Anchor at the origin plus one 6×6 module parked far away at x = 20."""

    rules = SNAP_RULES

    def setUp(self):
        self.store = PlacementStore(self.rules)
        self.registry = ConnectionPointRegistry()
        self.resolver = SnapResolver(self.store, self.registry, self.rules)
        self.anchor_id = self.store.place(CORE)
        self.mid = self.store.place(POD, (20.0, 0.0, 0.0))

    def assertPosition(self, actual, expected):
        for a, e in zip(actual, expected):
            self.assertAlmostEqual(a, e)


class TestNoCandidate(ResolverCase):

    def test_no_points(self):
        self.assertIsNone(self.resolver.resolve_snap(self.mid, (6.1, 0.0, 0.0)))

    def test_no_static_points(self):
        self.registry.register(self.mid, [WEST])
        self.assertIsNone(self.resolver.resolve_snap(self.mid, (6.1, 0.0, 0.0)))

    def test_unknown_module(self):
        self.registry.register(self.anchor_id, [EAST])
        self.assertIsNone(self.resolver.resolve_snap("nope", (6.1, 0.0, 0.0)))

    def test_out_of_range(self):
        self.registry.register(self.anchor_id, [EAST])
        self.registry.register(self.mid, [WEST])
        self.assertIsNone(self.resolver.resolve_snap(self.mid, (6.5, 0.0, 0.0)))

    def test_occupied_points_skipped(self):
        self.registry.register(self.anchor_id, [EAST])
        self.registry.register(self.mid, [WEST])
        self.registry.occupy_pair(f"{self.anchor_id}:east", "elsewhere:x")
        self.assertIsNone(self.resolver.resolve_snap(self.mid, (6.1, 0.0, 0.0)))

    def test_own_points_never_pair(self):
        self.registry.register(self.mid, [_pt("a", -3.0), _pt("b", -3.05)])
        self.assertIsNone(self.resolver.resolve_snap(self.mid, (6.1, 0.0, 0.0)))


class TestThreshold(ResolverCase):

    rules = SnapRules(snap_threshold=0.25)

    def setUp(self):
        super().setUp()
        self.registry.register(self.anchor_id, [EAST])
        self.registry.register(self.mid, [_pt("centre", 0.0)])

    def test_exactly_at_threshold_is_eligible(self):
        result = self.resolver.resolve_snap(self.mid, (3.25, 0.0, 0.0))
        self.assertIsNotNone(result)
        self.assertEqual(result.distance, 0.25)

    def test_just_beyond_threshold(self):
        self.assertIsNone(self.resolver.resolve_snap(self.mid, (3.25 + 1e-6, 0.0, 0.0)))


class TestCandidateChoice(ResolverCase):

    def test_nearest_pair_wins(self):
        self.registry.register(self.anchor_id, [_pt("east", 3.0), _pt("east_far", 3.0, 2.0)])
        self.registry.register(self.mid, [WEST])
        result = self.resolver.resolve_snap(self.mid, (6.2, 0.0, 1.9))
        self.assertEqual(result.static_point_id, f"{self.anchor_id}:east_far")
        self.assertEqual(result.moving_point_id, f"{self.mid}:west")
        self.assertPosition(result.position, (6.0, 0.0, 2.0))

    def test_tie_keeps_first_registered_static_point(self):
        self.registry.register(self.anchor_id, [_pt("north", 3.0, 0.1), _pt("south", 3.0, -0.1)])
        self.registry.register(self.mid, [WEST])
        result = self.resolver.resolve_snap(self.mid, (6.0, 0.0, 0.0))
        self.assertEqual(result.static_point_id, f"{self.anchor_id}:north")

    def test_tie_follows_registration_order(self):
        self.registry.register(self.anchor_id, [_pt("south", 3.0, -0.1), _pt("north", 3.0, 0.1)])
        self.registry.register(self.mid, [WEST])
        result = self.resolver.resolve_snap(self.mid, (6.0, 0.0, 0.0))
        self.assertEqual(result.static_point_id, f"{self.anchor_id}:south")

    def test_tie_across_moving_points(self):
        self.registry.register(self.anchor_id, [EAST])
        self.registry.register(self.mid, [_pt("w1", -3.0, 0.1), _pt("w2", -3.0, -0.1)])
        result = self.resolver.resolve_snap(self.mid, (6.0, 0.0, 0.0))
        self.assertEqual(result.moving_point_id, f"{self.mid}:w1")


class TestFlushJoin(ResolverCase):

    def test_face_points(self):
        self.registry.register(self.anchor_id, [EAST])
        self.registry.register(self.mid, [WEST])
        result = self.resolver.resolve_snap(self.mid, (6.1, 0.0, 0.0))
        self.assertEqual(result.position, (6.0, 0.0, 0.0))
        self.assertAlmostEqual(result.distance, 0.1)

    def test_inset_points_close_the_gap(self):
        """Points 0.5 inside each face still give a zero-gap join."""
        self.registry.register(self.anchor_id, [_pt("east", 2.5)])
        self.registry.register(self.mid, [_pt("west", -2.5)])
        result = self.resolver.resolve_snap(self.mid, (5.1, 0.0, 0.0))
        self.assertEqual(result.position[0], 6.0)

    def test_z_axis_keeps_perpendicular_offset(self):
        self.registry.register(self.anchor_id, [_pt("north", 1.0, 3.0)])
        self.registry.register(self.mid, [_pt("south", 0.0, -3.0)])
        result = self.resolver.resolve_snap(self.mid, (1.1, 0.0, 6.15))
        self.assertAlmostEqual(result.position[0], 1.0)
        self.assertEqual(result.position[2], 6.0)

    def test_rotated_module_uses_projected_extents(self):
        self.store.set_footprint(self.mid, 4.0, 8.0)
        self.store.rotate(self.mid, (20.0, 0.0, 0.0), math.pi / 2)
        self.registry.register(self.anchor_id, [EAST])
        # local -Z face point; at a quarter turn it faces world -X
        self.registry.register(self.mid, [_pt("back", 0.0, -3.0)])
        result = self.resolver.resolve_snap(self.mid, (6.1, 0.0, 0.0))
        self.assertIsNotNone(result)
        self.assertAlmostEqual(result.position[0], 7.0)

    def test_static_module_position_is_respected(self):
        other = self.store.place(POD, (-10.0, 0.0, 0.0))
        self.registry.register(other, [_pt("east", 3.0)])
        self.registry.register(self.mid, [WEST])
        result = self.resolver.resolve_snap(self.mid, (-3.9, 0.0, 0.0))
        self.assertEqual(result.position, (-4.0, 0.0, 0.0))


class TestAlignedPositionForPair(ResolverCase):

    def setUp(self):
        super().setUp()
        self.registry.register(self.anchor_id, [EAST])
        self.registry.register(self.mid, [WEST])
        self.west = f"{self.mid}:west"
        self.east = f"{self.anchor_id}:east"

    def test_matches_resolve(self):
        result = self.resolver.resolve_snap(self.mid, (6.1, 0.0, 0.0))
        aligned = self.resolver.aligned_position_for_pair(self.mid, self.west, self.east)
        self.assertEqual(aligned, result.position)

    def test_idempotent(self):
        first = self.resolver.aligned_position_for_pair(self.mid, self.west, self.east)
        self.store.move(self.mid, first)
        second = self.resolver.aligned_position_for_pair(self.mid, self.west, self.east)
        self.assertEqual(first, second)

    def test_independent_of_current_position(self):
        a = self.resolver.aligned_position_for_pair(self.mid, self.west, self.east)
        self.store.move(self.mid, (15.0, 0.0, 0.4))
        b = self.resolver.aligned_position_for_pair(self.mid, self.west, self.east)
        self.assertEqual(a, b)

    def test_unknown_ids(self):
        self.assertIsNone(self.resolver.aligned_position_for_pair("nope", self.west, self.east))
        self.assertIsNone(self.resolver.aligned_position_for_pair(self.mid, "x:y", self.east))
        self.assertIsNone(self.resolver.aligned_position_for_pair(self.mid, self.west, "x:y"))


if __name__ == "__main__":
    unittest.main()
