"""
Unit Tests for the Element Initializer

Regime classification, drag reference bands, recovered mean motion and
rejection of invalid element sets. Derived constants are checked against
``sgp4.api.Satrec`` built from the same inputs.

Run with:
    python -m pytest tests/test_initializer.py -v
"""

import dataclasses
import math
import unittest

from config import (
    GPS_TLE,
    ISS_TLE,
    MOLNIYA_TLE,
    SPACETRACK_SDP4_TLE,
    SPACETRACK_SGP4_TLE,
    WGS72,
    WGS84,
)
from orbit_core.elements import OrbitalElements
from orbit_core.errors import (
    ERROR_MEAN_ECCENTRICITY,
    ERROR_MEAN_MOTION,
    ERROR_SUB_ORBITAL,
    InvalidElements,
)
from orbit_core.initializer import drag_parameters, gstime, initialize, recover_mean_motion
from orbit_core.record import Regime, Resonance
from orbit_core.tle_parser import parse_tle
from orbit_core.validation import reference_satrec


def _elements(tle):
    return parse_tle(tle["line1"], tle["line2"], tle.get("name", ""))


class TestRegimeSelection(unittest.TestCase):
    """Near-Earth versus deep-space records."""

    def test_iss_is_near_earth_with_full_drag(self):
        record = initialize(_elements(ISS_TLE))
        self.assertIs(record.regime, Regime.NEAR_EARTH)
        self.assertIsNone(record.deep_space)
        self.assertFalse(record.drag.simplified)
        self.assertNotEqual(record.drag.d2, 0.0)
        self.assertIs(record.resonance, Resonance.NONE)

    def test_low_perigee_uses_simplified_drag(self):
        record = initialize(_elements(SPACETRACK_SGP4_TLE))
        self.assertIs(record.regime, Regime.NEAR_EARTH)
        self.assertLess(record.perigee_altitude_km, 220.0)
        self.assertTrue(record.drag.simplified)
        self.assertEqual(record.drag.d2, 0.0)

    def test_deep_space_records(self):
        for tle, resonance in ((SPACETRACK_SDP4_TLE, Resonance.NONE),
                               (GPS_TLE, Resonance.NONE),
                               (MOLNIYA_TLE, Resonance.HALF_DAY)):
            record = initialize(_elements(tle))
            self.assertIs(record.regime, Regime.DEEP_SPACE, tle["name"])
            self.assertGreaterEqual(record.period_minutes, 225.0)
            self.assertTrue(record.drag.simplified)
            self.assertIsNotNone(record.deep_space)
            self.assertIs(record.resonance, resonance, tle["name"])

    def test_geosynchronous_is_one_day_resonant(self):
        elements = OrbitalElements(2024, 100.5, 0.05, 80.0, 0.0002, 10.0, 200.0, 1.00273791)
        record = initialize(elements)
        self.assertIs(record.resonance, Resonance.ONE_DAY)


class TestDerivedConstants(unittest.TestCase):
    """Initializer output against the reference implementation."""

    def test_against_reference(self):
        for tle in (ISS_TLE, SPACETRACK_SGP4_TLE, SPACETRACK_SDP4_TLE, MOLNIYA_TLE):
            elements = _elements(tle)
            for gravity in (WGS72, WGS84):
                record = initialize(elements, gravity)
                satrec = reference_satrec(elements, gravity)
                self.assertAlmostEqual(record.no_unkozai, satrec.no, places=14)
                self.assertAlmostEqual(record.a, satrec.a, places=12)
                self.assertAlmostEqual(record.gsto, satrec.gsto, places=12)

    def test_recovered_mean_motion_is_slower(self):
        elements = _elements(ISS_TLE)
        no_unkozai, ao = recover_mean_motion(elements.mean_motion_rad_per_min,
                                             elements.eccentricity, elements.inclination, WGS72)
        self.assertLess(no_unkozai, elements.mean_motion_rad_per_min)
        self.assertAlmostEqual(no_unkozai / elements.mean_motion_rad_per_min, 1.0, places=3)
        self.assertAlmostEqual(ao, math.pow(WGS72.xke / no_unkozai, 2.0 / 3.0), places=14)

    def test_gstime_at_j2000(self):
        # 18h 41m 50.54841s at 2000-01-01 12:00 UT1
        self.assertAlmostEqual(gstime(2451545.0), math.radians(280.46061837504), places=9)

    def test_opsmodes_differ_only_in_sidereal_time(self):
        elements = _elements(ISS_TLE)
        improved = initialize(elements, opsmode="i")
        afspc = initialize(elements, opsmode="a")
        self.assertAlmostEqual(improved.gsto, afspc.gsto, places=4)
        self.assertEqual(improved.no_unkozai, afspc.no_unkozai)
        self.assertEqual(improved.drag, afspc.drag)

    def test_unknown_opsmode(self):
        with self.assertRaises(ValueError):
            initialize(_elements(ISS_TLE), opsmode="x")


class TestDragBands(unittest.TestCase):
    """Reference altitude ``s`` by perigee altitude."""

    def test_high_perigee(self):
        s, qzms24 = drag_parameters(400.0, WGS72)
        self.assertAlmostEqual(s, 78.0 / WGS72.radiusearthkm + 1.0, places=15)
        self.assertAlmostEqual(qzms24, (42.0 / WGS72.radiusearthkm) ** 4, places=20)

    def test_middle_band_follows_perigee(self):
        s, _ = drag_parameters(120.0, WGS72)
        self.assertAlmostEqual(s, 42.0 / WGS72.radiusearthkm + 1.0, places=15)

    def test_low_band_floor(self):
        s, qzms24 = drag_parameters(90.0, WGS72)
        self.assertAlmostEqual(s, 20.0 / WGS72.radiusearthkm + 1.0, places=15)
        self.assertAlmostEqual(qzms24, (100.0 / WGS72.radiusearthkm) ** 4, places=20)


class TestInvalidElements(unittest.TestCase):
    """Element sets that cannot be initialized."""

    def setUp(self):
        self.elements = _elements(ISS_TLE)

    def _assert_invalid(self, code, **changes):
        with self.assertRaises(InvalidElements) as ctx:
            initialize(dataclasses.replace(self.elements, **changes))
        self.assertEqual(ctx.exception.code, code)
        return ctx.exception

    def test_non_positive_mean_motion(self):
        self._assert_invalid(ERROR_MEAN_MOTION, mean_motion=0.0)
        self._assert_invalid(ERROR_MEAN_MOTION, mean_motion=-15.0)

    def test_eccentricity_out_of_range(self):
        self._assert_invalid(ERROR_MEAN_ECCENTRICITY, eccentricity=1.5)
        self._assert_invalid(ERROR_MEAN_ECCENTRICITY, eccentricity=1.0)
        self._assert_invalid(ERROR_MEAN_ECCENTRICITY, eccentricity=-0.01)

    def test_non_finite_value(self):
        self._assert_invalid(ERROR_SUB_ORBITAL, inclination_deg=float("nan"))
        self._assert_invalid(ERROR_SUB_ORBITAL, bstar=float("inf"))

    def test_sub_orbital_mean_motion(self):
        exc = self._assert_invalid(ERROR_SUB_ORBITAL, mean_motion=40.0)
        self.assertIn("sub-orbital", str(exc))

    def test_circular_orbit_accepted(self):
        record = initialize(dataclasses.replace(self.elements, eccentricity=0.0))
        self.assertEqual(record.ecco, 0.0)


class TestImmutability(unittest.TestCase):

    def test_record_is_frozen(self):
        record = initialize(_elements(ISS_TLE))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            record.bstar = 0.0
        with self.assertRaises(dataclasses.FrozenInstanceError):
            record.drag.cc1 = 0.0

    def test_same_elements_same_record(self):
        elements = _elements(MOLNIYA_TLE)
        self.assertEqual(initialize(elements), initialize(elements))


if __name__ == "__main__":
    unittest.main()
