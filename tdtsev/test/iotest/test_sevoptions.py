"""
Tests of tdtsev.io.sevoptions
"""

import math
import unittest

import numpy as np

from tdtsev.io.sevoptions import SevReadOptions
from tdtsev.rawio.sevexceptions import SevConfigurationError


class TestSevReadOptions(unittest.TestCase):
    def test_defaults(self):
        options = SevReadOptions()
        self.assertIsNone(options.channel)
        self.assertIsNone(options.ranges)
        self.assertEqual(options.time_ranges(), [(0.0, math.inf)])

    def test_t1_t2(self):
        options = SevReadOptions.from_kwargs(t1=1, t2=3.5)
        self.assertEqual(options.time_ranges(), [(1.0, 3.5)])

        # t2 = 0 reads to the end
        options = SevReadOptions.from_kwargs(t1=2.0, t2=0)
        self.assertEqual(options.time_ranges(), [(2.0, math.inf)])

    def test_inverted_window_is_accepted(self):
        options = SevReadOptions(t1=3.0, t2=1.0)
        self.assertEqual(options.time_ranges(), [(3.0, 1.0)])

    def test_unknown_option(self):
        with self.assertRaises(SevConfigurationError):
            SevReadOptions.from_kwargs(T1=1.0)

    def test_invalid_values(self):
        for kargs in (
            dict(t1="1"),
            dict(t2=float("nan")),
            dict(fs=-1.0),
            dict(t1=float("inf")),
            dict(channel=-2),
            dict(channel=1.5),
            dict(channel=True),
            dict(event_name=3),
            dict(just_names="yes"),
        ):
            with self.assertRaises(SevConfigurationError):
                SevReadOptions.from_kwargs(**kargs)

    def test_channel_zero_means_all(self):
        self.assertIsNone(SevReadOptions(channel=0).channel)
        self.assertEqual(SevReadOptions(channel=np.int64(4)).channel, 4)

    def test_partial_device_triple(self):
        with self.assertRaises(SevConfigurationError):
            SevReadOptions(device="RS4-41001", tank="Tank1")

    def test_ranges_as_pairs(self):
        options = SevReadOptions(ranges=[(0.5, 1.0), (2, 3)], t1=10.0)
        self.assertEqual(options.ranges, ((0.5, 1.0), (2.0, 3.0)))
        self.assertEqual(options.time_ranges(), [(0.5, 1.0), (2.0, 3.0)])

    def test_ranges_as_columns(self):
        options = SevReadOptions(ranges=np.array([[0.5, 2.0, 4.0], [1.0, 3.0, 5.0]]))
        self.assertEqual(options.ranges, ((0.5, 1.0), (2.0, 3.0), (4.0, 5.0)))

    def test_empty_ranges(self):
        options = SevReadOptions(ranges=[], t1=1.0, t2=2.0)
        self.assertIsNone(options.ranges)
        self.assertEqual(options.time_ranges(), [(1.0, 2.0)])

    def test_invalid_ranges(self):
        for ranges in ([1.0, 2.0, 3.0], [[1.0, 2.0, 3.0]], [(0.0, float("nan"))], [("a", "b")]):
            with self.assertRaises(SevConfigurationError):
                SevReadOptions(ranges=ranges)


if __name__ == "__main__":
    unittest.main()
