"""
Unit Tests for OrbitalElements

Unit conversions, epoch representations and datetime helpers.

Run with:
    python -m pytest tests/test_elements.py -v
"""

import dataclasses
import math
import unittest
from datetime import datetime, timedelta, timezone

from config import ISS_TLE, XPDOTP
from orbit_core.elements import OrbitalElements
from orbit_core.tle_parser import parse_tle


class TestOrbitalElements(unittest.TestCase):
    """Derived accessors of the element record."""

    def setUp(self):
        self.elements = parse_tle(ISS_TLE["line1"], ISS_TLE["line2"], ISS_TLE["name"])

    def test_radian_accessors(self):
        e = self.elements
        self.assertAlmostEqual(e.inclination, math.radians(51.6416), places=14)
        self.assertAlmostEqual(e.raan, math.radians(220.9944), places=14)
        self.assertAlmostEqual(e.arg_perigee, math.radians(122.0101), places=14)
        self.assertAlmostEqual(e.mean_anomaly, math.radians(312.2755), places=14)

    def test_mean_motion_units(self):
        e = self.elements
        self.assertAlmostEqual(e.mean_motion_rad_per_min, 15.49541986 / XPDOTP, places=15)
        self.assertAlmostEqual(e.period_minutes, 1440.0 / 15.49541986, places=10)

    def test_epoch_datetime(self):
        expected = datetime(2023, 9, 16, 13, 49, 9, 120000, tzinfo=timezone.utc)
        delta = (self.elements.epoch_datetime - expected).total_seconds()
        self.assertLess(abs(delta), 1e-3)

    def test_julian_date_at_j2000(self):
        e = dataclasses.replace(self.elements, epoch_year=2000, epoch_day=1.5)
        jd, fraction = e.julian_date
        self.assertEqual(jd, 2451544.5)
        self.assertEqual(fraction, 0.5)
        self.assertEqual(jd + fraction, 2451545.0)

    def test_days_since_1950(self):
        e = dataclasses.replace(self.elements, epoch_year=1950, epoch_day=1.0)
        self.assertEqual(e.epoch_days_since_1950, 1.0)

    def test_minutes_since_epoch(self):
        e = self.elements
        when = e.epoch_datetime + timedelta(minutes=90)
        self.assertAlmostEqual(e.minutes_since_epoch(when), 90.0, places=6)
        self.assertAlmostEqual(e.minutes_since_epoch(e.epoch_datetime - timedelta(hours=1)),
                               -60.0, places=6)

    def test_naive_datetime_is_utc(self):
        e = self.elements
        naive = (e.epoch_datetime + timedelta(minutes=30)).replace(tzinfo=None)
        self.assertAlmostEqual(e.minutes_since_epoch(naive), 30.0, places=6)

    def test_datetime_at_inverts_minutes_since_epoch(self):
        e = self.elements
        when = e.datetime_at(1234.5)
        self.assertAlmostEqual(e.minutes_since_epoch(when), 1234.5, places=6)

    def test_immutable(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            self.elements.eccentricity = 0.1

    def test_defaults(self):
        e = OrbitalElements(2024, 1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 15.0)
        self.assertEqual(e.bstar, 0.0)
        self.assertEqual(e.catalog_number, 0)
        self.assertEqual(e.classification, "U")
        self.assertEqual(e.name, "")


if __name__ == "__main__":
    unittest.main()
