import math
import random
import unittest

from path_tracker.errors import EmptyPathError
from path_tracker.follower import heading_error, select_target
from path_tracker.model import PathPoint, normalize_angle

ORIGIN = PathPoint(0.0, 0.0)


def first_reaching(current, path, lookahead):
    for p in path:
        if current.distance_to(p) >= lookahead:
            return p
    return path[-1]


class TestSelectTarget(unittest.TestCase):
    def test_skips_points_inside_lookahead(self):
        """Point at distance 1 is excluded, point at distance 2 is selected"""
        path = [PathPoint(1, 0), PathPoint(2, 0), PathPoint(5, 0)]
        self.assertEqual(select_target(ORIGIN, path, 1.5), PathPoint(2, 0))

    def test_falls_back_to_last_point(self):
        path = [PathPoint(0.5, 0), PathPoint(1, 0)]
        self.assertEqual(select_target(ORIGIN, path, 1.5), PathPoint(1, 0))

    def test_single_point_path(self):
        self.assertEqual(select_target(ORIGIN, [PathPoint(0.2, 0.1)], 1.5), PathPoint(0.2, 0.1))
        self.assertEqual(select_target(ORIGIN, [PathPoint(9, 9)], 1.5), PathPoint(9, 9))

    def test_exact_lookahead_distance_is_selected(self):
        path = [PathPoint(1.0, 0), PathPoint(1.5, 0), PathPoint(3, 0)]
        self.assertEqual(select_target(ORIGIN, path, 1.5), PathPoint(1.5, 0))

    def test_empty_path_raises(self):
        with self.assertRaises(EmptyPathError):
            select_target(ORIGIN, [], 1.5)
        with self.assertRaises(EmptyPathError):
            select_target(ORIGIN, (), 1.5)

    def test_folding_path_keeps_traversal_order(self):
        """A far early point wins over a closer later one"""
        path = [PathPoint(0.5, 0), PathPoint(3, 0), PathPoint(1.6, 0)]
        self.assertEqual(select_target(ORIGIN, path, 1.5), PathPoint(3, 0))

    def test_distance_includes_z(self):
        path = [PathPoint(1.0, 0.0, 1.2), PathPoint(4.0, 0.0)]
        self.assertEqual(select_target(ORIGIN, path, 1.5), PathPoint(1.0, 0.0, 1.2))

    def test_offset_robot_position(self):
        current = PathPoint(10.0, 10.0)
        path = [PathPoint(10.5, 10.0), PathPoint(11.0, 11.0), PathPoint(12.0, 10.0)]
        self.assertEqual(select_target(current, path, 1.5), PathPoint(12.0, 10.0))

    def test_matches_first_index_rule_on_random_paths(self):
        rng = random.Random(5413)
        for _ in range(200):
            path = [
                PathPoint(rng.uniform(-5, 5), rng.uniform(-5, 5), rng.uniform(-1, 1))
                for _ in range(rng.randint(1, 15))
            ]
            current = PathPoint(rng.uniform(-2, 2), rng.uniform(-2, 2))
            lookahead = rng.uniform(0.1, 6.0)
            self.assertEqual(
                select_target(current, path, lookahead), first_reaching(current, path, lookahead)
            )


class TestHeadingError(unittest.TestCase):
    def test_target_straight_ahead(self):
        self.assertEqual(heading_error(ORIGIN, 0.0, PathPoint(2, 0)), 0.0)

    def test_target_to_the_left(self):
        self.assertAlmostEqual(heading_error(ORIGIN, 0.0, PathPoint(0, 2)), math.pi / 2)

    def test_wraps_large_yaw(self):
        self.assertAlmostEqual(heading_error(ORIGIN, 3 * math.pi / 2, PathPoint(1, 0)), math.pi / 2)
        self.assertAlmostEqual(heading_error(ORIGIN, -5 * math.pi / 2, PathPoint(1, 0)), math.pi / 2)

    def test_coincident_target_gives_zero(self):
        here = PathPoint(3.0, -1.0)
        self.assertEqual(heading_error(here, 1.2, PathPoint(3.0, -1.0, 0.5)), 0.0)

    def test_target_behind(self):
        error = heading_error(ORIGIN, 0.0, PathPoint(-1, 0))
        self.assertAlmostEqual(abs(error), math.pi)
        self.assertGreaterEqual(error, -math.pi)
        self.assertLess(error, math.pi)


class TestNormalizeAngle(unittest.TestCase):
    def test_half_open_interval(self):
        self.assertAlmostEqual(normalize_angle(math.pi), -math.pi)
        self.assertAlmostEqual(normalize_angle(-math.pi), -math.pi)
        self.assertEqual(normalize_angle(0.0), 0.0)

    def test_range_and_equivalence(self):
        rng = random.Random(1)
        samples = [rng.uniform(-100, 100) for _ in range(500)] + [-1e-17, 1e-17, 1e6, -1e6]
        for angle in samples:
            wrapped = normalize_angle(angle)
            self.assertGreaterEqual(wrapped, -math.pi)
            self.assertLess(wrapped, math.pi)
            self.assertAlmostEqual(math.sin(wrapped), math.sin(angle), places=6)
            self.assertAlmostEqual(math.cos(wrapped), math.cos(angle), places=6)


if __name__ == "__main__":
    unittest.main()
