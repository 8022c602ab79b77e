"""
Decay and Error Reporting Tests

Terminal propagation failures, error codes and messages.

Run with:
    python -m pytest tests/test_decay.py -v
"""

import dataclasses
import unittest

from config import ISS_TLE, MIN_ECCENTRICITY, SPACETRACK_SGP4_TLE
from orbit_core import (
    Decayed,
    PropagationError,
    initialize,
    parse_tle,
    propagate,
    propagate_state,
)
from orbit_core.errors import (
    ERROR_DECAYED,
    ERROR_MEAN_ECCENTRICITY,
    ERROR_MEAN_MOTION,
    SGP4_ERROR_CODES,
    InvalidElements,
    KeplerNonConvergence,
)


class TestDecay(unittest.TestCase):
    """Heavy drag on a low-perigee orbit."""

    def setUp(self):
        elements = parse_tle(SPACETRACK_SGP4_TLE["line1"], SPACETRACK_SGP4_TLE["line2"])
        self.record = initialize(dataclasses.replace(elements, bstar=0.05))

    def test_decayed_after_reentry(self):
        with self.assertRaises(Decayed) as ctx:
            propagate(self.record, 100000.0)
        exc = ctx.exception
        self.assertEqual(exc.minutes_since_epoch, 100000.0)
        self.assertIn(exc.code, (ERROR_MEAN_ECCENTRICITY, ERROR_MEAN_MOTION, ERROR_DECAYED))
        self.assertIsInstance(exc, PropagationError)

    def test_decay_is_terminal_for_later_times(self):
        for t in (100000.0, 200000.0, 1000000.0):
            with self.assertRaises(Decayed):
                propagate(self.record, t)

    def test_earlier_times_still_valid(self):
        vector = propagate(self.record, 0.0)
        self.assertGreater(vector.altitude_km, 0.0)

    def test_message_states_physical_meaning(self):
        with self.assertRaises(Decayed) as ctx:
            propagate(self.record, 100000.0)
        self.assertIn("Physical meaning", str(ctx.exception))
        self.assertIn(f"SGP4 error {ctx.exception.code}", str(ctx.exception))


class TestEccentricityFloor(unittest.TestCase):
    """Mean eccentricity below 1e-6 during propagation."""

    def setUp(self):
        self.elements = parse_tle(ISS_TLE["line1"], ISS_TLE["line2"])

    def test_drag_circularisation_is_decay(self):
        record = initialize(dataclasses.replace(self.elements, eccentricity=2e-6))
        propagate(record, 0.0)
        with self.assertRaises(Decayed) as ctx:
            propagate_state(record, 30000.0)
        self.assertEqual(ctx.exception.code, ERROR_MEAN_ECCENTRICITY)
        self.assertEqual(ctx.exception.minutes_since_epoch, 30000.0)

    def test_circular_epoch_elements_are_floored(self):
        record = initialize(dataclasses.replace(self.elements, eccentricity=0.0))
        self.assertEqual(propagate_state(record, 0.0).mean.eccentricity, MIN_ECCENTRICITY)
        later = propagate_state(record, 30000.0).mean
        self.assertGreaterEqual(later.eccentricity, MIN_ECCENTRICITY)


class TestErrorTypes(unittest.TestCase):
    """Error hierarchy and descriptions."""

    def test_descriptions(self):
        self.assertEqual(Decayed(ERROR_DECAYED, "x", 1.0).description, SGP4_ERROR_CODES[6])
        self.assertEqual(PropagationError(99, "x").description, "Unknown error code 99")

    def test_hierarchy(self):
        for cls in (InvalidElements, Decayed, KeplerNonConvergence):
            self.assertTrue(issubclass(cls, PropagationError))

    def test_kepler_error_carries_inputs(self):
        exc = KeplerNonConvergence(1.5, 0.99, 10)
        self.assertEqual(exc.code, 7)
        self.assertEqual(exc.mean_anomaly, 1.5)
        self.assertEqual(exc.eccentricity, 0.99)
        self.assertIn("did not converge", str(exc))


if __name__ == "__main__":
    unittest.main()
