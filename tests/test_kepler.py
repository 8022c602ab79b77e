"""
Unit Tests for the Kepler Solver

Residual sweep over mean anomaly and eccentricity, revolution handling and
failure modes.

Run with:
    python -m pytest tests/test_kepler.py -v
"""

import math
import unittest

import numpy as np

from orbit_core.errors import ERROR_KEPLER, KeplerNonConvergence, PropagationError
from orbit_core.kepler import solve_kepler


class TestSolveKepler(unittest.TestCase):
    """Newton iteration for E - e sin E = M."""

    def test_circular_orbit(self):
        for m in (0.0, 0.5, 2.0, -1.0):
            self.assertAlmostEqual(solve_kepler(m, 0.0), m, places=14)

    def test_known_value(self):
        ea = solve_kepler(1.0, 0.1)
        self.assertAlmostEqual(ea - 0.1 * math.sin(ea), 1.0, places=13)
        self.assertAlmostEqual(ea, 1.0886, places=4)

    def test_residual_sweep(self):
        mean_anomalies = np.linspace(-3.0 * math.pi, 3.0 * math.pi, 181)
        eccentricities = [0.0, 1e-6, 0.01, 0.1, 0.3, 0.49, 0.5, 0.7, 0.9, 0.99, 0.999, 1.0 - 1e-6]
        for e in eccentricities:
            for m in mean_anomalies:
                ea = solve_kepler(m, e)
                residual = ea - e * math.sin(ea) - m
                self.assertLess(abs(residual), 1e-10, f"e={e} M={m}")

    def test_same_revolution(self):
        m = 4.0 * math.pi + 0.3
        ea = solve_kepler(m, 0.5)
        self.assertTrue(4.0 * math.pi <= ea < 5.0 * math.pi)
        self.assertAlmostEqual(ea - 4.0 * math.pi, solve_kepler(0.3, 0.5), places=12)

    def test_odd_symmetry(self):
        for e in (0.2, 0.8):
            self.assertAlmostEqual(solve_kepler(-1.3, e), -solve_kepler(1.3, e), places=13)

    def test_apsides_are_fixed_points(self):
        self.assertEqual(solve_kepler(0.0, 0.9), 0.0)
        self.assertAlmostEqual(solve_kepler(math.pi, 0.9), math.pi, places=13)

    def test_iteration_cap(self):
        with self.assertRaises(KeplerNonConvergence) as ctx:
            solve_kepler(2.0, 0.99, tolerance=0.0, max_iterations=3)
        self.assertEqual(ctx.exception.code, ERROR_KEPLER)
        self.assertEqual(ctx.exception.iterations, 3)
        self.assertIsInstance(ctx.exception, PropagationError)

    def test_non_elliptical_rejected(self):
        for e in (-0.1, 1.0, 1.5):
            with self.assertRaises(ValueError):
                solve_kepler(1.0, e)


if __name__ == "__main__":
    unittest.main()
