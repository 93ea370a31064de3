from __future__ import annotations

import unittest

from routebuilder.errors import InvalidHopError, InvalidPathId
from routebuilder.route.models import Hop, Path
from routebuilder.route.paths import MAX_PATHS, count_paths, group_by_path


def _hop(path_id: int, channel_name: str) -> Hop:
    return Hop(path_id, channel_name, 40, 1000, 100)


class TestGroupByPath(unittest.TestCase):

    def test_keeps_input_order(self):
        hops = [
            _hop(1, "c"),
            _hop(0, "b"),
            _hop(1, "a"),
            _hop(0, "d"),
        ]
        paths = group_by_path(hops)

        self.assertEqual(len(paths), 2)
        self.assertEqual(paths[0], Path(0, (hops[1], hops[3])))
        self.assertEqual(paths[1], Path(1, (hops[0], hops[2])))

    def test_empty_buckets(self):
        hops = [_hop(3, "a")]
        paths = group_by_path(hops)

        self.assertEqual([p.path_id for p in paths], [0, 1, 2, 3])
        self.assertEqual([p.is_empty() for p in paths], [True, True, True, False])

    def test_empty_input(self):
        self.assertEqual(count_paths([]), 0)
        self.assertEqual(group_by_path([]), [])

    def test_negative_path_id(self):
        with self.assertRaises(InvalidPathId):
            group_by_path([_hop(0, "a"), _hop(-1, "b")])

        with self.assertRaises(InvalidPathId):
            group_by_path([_hop(-2, "a")])

    def test_path_id_too_large(self):
        with self.assertRaises(InvalidPathId):
            group_by_path([_hop(0, "a"), _hop(4_000_000_000, "b")])

        paths = group_by_path([_hop(MAX_PATHS - 1, "a")])
        self.assertEqual(len(paths), MAX_PATHS)

    def test_count_paths(self):
        self.assertEqual(count_paths([_hop(0, "a")]), 1)
        self.assertEqual(count_paths([_hop(4, "a"), _hop(1, "b")]), 5)


class TestHop(unittest.TestCase):

    def test_fee_msat(self):
        hop = Hop(0, "a", 40, 1000, 100)
        self.assertEqual(hop.fee_msat(0), 1000)
        self.assertEqual(hop.fee_msat(1_000_000), 1100)
        self.assertEqual(hop.fee_msat(9_999), 1000)
        self.assertEqual(hop.fee_msat(10_000), 1001)

    def test_negative_values(self):
        with self.assertRaises(InvalidHopError):
            Hop(0, "a", -1, 0, 0)
        with self.assertRaises(InvalidHopError):
            Hop(0, "a", 0, -1, 0)
        with self.assertRaises(InvalidHopError):
            Hop(0, "a", 0, 0, -1)


if __name__ == "__main__":
    unittest.main()
