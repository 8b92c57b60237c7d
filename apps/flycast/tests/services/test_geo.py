"""Tests for great-circle distance."""

from django.test import SimpleTestCase

from apps.flycast.services.geo import Coordinate, distance_miles

JFK = Coordinate(40.6413, -73.7781)
BOS = Coordinate(42.3656, -71.0096)


class DistanceMilesTests(SimpleTestCase):

    def test_known_distance(self):
        # JFK to Logan is roughly 187 statute miles
        self.assertAlmostEqual(distance_miles(JFK, BOS), 187, delta=3)

    def test_symmetric(self):
        self.assertAlmostEqual(distance_miles(JFK, BOS), distance_miles(BOS, JFK))

    def test_zero_for_same_point(self):
        self.assertAlmostEqual(distance_miles(JFK, JFK), 0.0)

    def test_non_negative_across_antimeridian(self):
        a = Coordinate(0.0, 179.5)
        b = Coordinate(0.0, -179.5)
        # One degree of longitude at the equator is about 69 miles
        self.assertAlmostEqual(distance_miles(a, b), 69.1, delta=0.5)
