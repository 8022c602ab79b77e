"""
Near-Earth Propagation Tests

Validates SGP4 propagation against the SPACETRACK REPORT NO. 3 test vector
and against ``sgp4.api.Satrec`` initialized with identical inputs.

Run with:
    python -m pytest tests/test_propagation.py -v
"""

import dataclasses
import math
import unittest
from datetime import timedelta

import numpy as np

from config import ISS_TLE, SPACETRACK_SGP4_TLE, WGS72OLD, WGS84
from orbit_core import (
    SGP4Propagator,
    initialize,
    parse_tle,
    propagate,
    propagate_at,
    propagate_series,
    propagate_state,
)
from orbit_core.validation import reference_satrec

TOLERANCE_KM = 1e-6
TOLERANCE_KM_S = 1e-6


class ReferenceMixin:
    """Assertions against the reference implementation."""

    def assertMatchesReference(self, record, satrec, minutes):
        for t in minutes:
            code, r_ref, v_ref = satrec.sgp4_tsince(float(t))
            self.assertEqual(code, 0, f"reference failed at t={t}")
            vector = propagate(record, t)
            dr = np.linalg.norm(vector.position - np.array(r_ref))
            dv = np.linalg.norm(vector.velocity - np.array(v_ref))
            self.assertLess(dr, TOLERANCE_KM, f"position differs by {dr} km at t={t}")
            self.assertLess(dv, TOLERANCE_KM_S, f"velocity differs by {dv} km/s at t={t}")


class TestSpacetrackReport(unittest.TestCase):
    """Published SGP4 test case (catalog 88888)."""

    def setUp(self):
        self.elements = parse_tle(SPACETRACK_SGP4_TLE["line1"], SPACETRACK_SGP4_TLE["line2"])
        self.record = initialize(self.elements)

    def test_epoch_vector(self):
        vector = propagate(self.record, 0.0)
        np.testing.assert_allclose(vector.position, SPACETRACK_SGP4_TLE["position_km"], atol=0.01)
        np.testing.assert_allclose(vector.velocity, SPACETRACK_SGP4_TLE["velocity_km_s"], atol=1e-3)

    def test_original_constants_reproduce_report(self):
        record = initialize(self.elements, WGS72OLD, opsmode="a")
        vector = propagate(record, 0.0)
        np.testing.assert_allclose(vector.position, SPACETRACK_SGP4_TLE["position_km"], atol=0.01)


class TestNearEarthAgainstReference(ReferenceMixin, unittest.TestCase):
    """Agreement with sgp4.api.Satrec to 1e-6 km."""

    def setUp(self):
        self.iss = parse_tle(ISS_TLE["line1"], ISS_TLE["line2"], ISS_TLE["name"])
        self.spacetrack = parse_tle(SPACETRACK_SGP4_TLE["line1"], SPACETRACK_SGP4_TLE["line2"])
        self.minutes = np.arange(0.0, 1441.0, 60.0)

    def test_iss_full_drag_model(self):
        record = initialize(self.iss)
        self.assertMatchesReference(record, reference_satrec(self.iss), self.minutes)

    def test_low_perigee_simplified_model(self):
        record = initialize(self.spacetrack)
        self.assertMatchesReference(record, reference_satrec(self.spacetrack), self.minutes)

    def test_backwards_in_time(self):
        record = initialize(self.iss)
        self.assertMatchesReference(record, reference_satrec(self.iss),
                                    [-1440.0, -725.3, -90.0, -0.5])

    def test_gravity_models_and_opsmodes(self):
        for gravity in (WGS72OLD, WGS84):
            for opsmode in ("i", "a"):
                record = initialize(self.iss, gravity, opsmode)
                satrec = reference_satrec(self.iss, gravity, opsmode)
                self.assertMatchesReference(record, satrec, [0.0, 360.0, 1440.0])

    def test_circular_and_retrograde_orbits(self):
        cases = [
            dataclasses.replace(self.iss, eccentricity=0.0),
            dataclasses.replace(self.iss, inclination_deg=98.7, mean_motion=14.2),
            dataclasses.replace(self.iss, inclination_deg=0.0),
            dataclasses.replace(self.iss, inclination_deg=180.0),
        ]
        for elements in cases:
            record = initialize(elements)
            self.assertMatchesReference(record, reference_satrec(elements), [0.0, 100.0, 1000.0])


class TestPropagationSurface(unittest.TestCase):
    """Public calls, determinism and derived quantities."""

    def setUp(self):
        self.elements = parse_tle(ISS_TLE["line1"], ISS_TLE["line2"], ISS_TLE["name"])
        self.record = initialize(self.elements)

    def test_repeat_calls_are_identical(self):
        first = propagate(self.record, 777.7)
        propagate(self.record, -300.0)
        propagate(self.record, 5000.0)
        second = propagate(self.record, 777.7)
        self.assertTrue(np.array_equal(first.position, second.position))
        self.assertTrue(np.array_equal(first.velocity, second.velocity))

    def test_vector_is_read_only(self):
        vector = propagate(self.record, 10.0)
        with self.assertRaises(ValueError):
            vector.position[0] = 0.0
        with self.assertRaises(dataclasses.FrozenInstanceError):
            vector.position = np.zeros(3)

    def test_physical_magnitudes(self):
        vector = propagate(self.record, 45.0)
        self.assertGreater(vector.altitude_km, 380.0)
        self.assertLess(vector.altitude_km, 450.0)
        self.assertGreater(vector.speed_km_s, 7.6)
        self.assertLess(vector.speed_km_s, 7.75)
        self.assertAlmostEqual(vector.radius_km - vector.altitude_km, 6378.135, places=9)

    def test_state_exposes_intermediates(self):
        state = propagate_state(self.record, 123.0)
        self.assertEqual(state.minutes_since_epoch, 123.0)
        self.assertTrue(np.array_equal(state.vector.position,
                                       propagate(self.record, 123.0).position))
        self.assertGreaterEqual(state.mean.eccentricity, 1e-6)
        self.assertLess(state.mean.eccentricity, 1.0 - 1e-6)
        self.assertTrue(0.0 <= state.mean.arg_perigee < 2.0 * math.pi)
        self.assertTrue(0.0 <= state.mean.mean_anomaly < 2.0 * math.pi)
        # E and the true anomaly lie on the same side of the apsidal line
        self.assertEqual(math.sin(state.eccentric_anomaly) >= 0.0,
                         math.sin(state.true_anomaly) >= 0.0)

    def test_secular_drift(self):
        start = propagate_state(self.record, 0.0).mean
        later = propagate_state(self.record, 1440.0).mean
        # Prograde orbit: node regresses, drag lowers the orbit
        self.assertLess(later.raan, start.raan)
        self.assertLess(later.semi_major_axis, start.semi_major_axis)
        self.assertGreater(later.mean_motion, start.mean_motion)

    def test_mean_anomaly_after_one_period(self):
        period = self.record.period_minutes
        for t in (0.0, 500.0):
            before = propagate_state(self.record, t).mean.mean_anomaly
            after = propagate_state(self.record, t + period).mean.mean_anomaly
            delta = math.remainder(after - before, 2.0 * math.pi)
            self.assertLess(abs(delta), 0.01)

    def test_series_matches_single_calls(self):
        minutes = [0.0, 15.0, 30.0, 45.5]
        positions, velocities = propagate_series(self.record, minutes)
        self.assertEqual(positions.shape, (4, 3))
        self.assertEqual(velocities.shape, (4, 3))
        for i, t in enumerate(minutes):
            vector = propagate(self.record, t)
            self.assertTrue(np.array_equal(positions[i], vector.position))
            self.assertTrue(np.array_equal(velocities[i], vector.velocity))

    def test_propagate_at_datetime(self):
        when = self.elements.epoch_datetime + timedelta(minutes=90)
        np.testing.assert_allclose(propagate_at(self.record, when).position,
                                   propagate(self.record, 90.0).position, atol=1e-6)

    def test_non_finite_time(self):
        with self.assertRaises(ValueError):
            propagate(self.record, float("nan"))

    def test_propagator_object(self):
        sat = SGP4Propagator(ISS_TLE["line1"], ISS_TLE["line2"], ISS_TLE["name"])
        self.assertEqual(sat.record, self.record)
        self.assertAlmostEqual(sat.period_minutes, 1440.0 / 15.49541986, delta=0.2)
        self.assertTrue(np.array_equal(sat.propagate(60.0).position,
                                       propagate(self.record, 60.0).position))
        positions, _ = sat.propagate_series([0.0, 60.0])
        self.assertEqual(positions.shape, (2, 3))
        self.assertIn("ISS (ZARYA)", repr(sat))
        self.assertIn("near-earth", repr(sat))

    def test_propagator_from_elements(self):
        sat = SGP4Propagator.from_elements(self.elements, WGS84)
        self.assertIs(sat.record.gravity, WGS84)
        self.assertIs(sat.elements, self.elements)


if __name__ == "__main__":
    unittest.main()
