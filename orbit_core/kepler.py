"""
Kepler Equation Solver

Solves E - e*sin(E) = M for the eccentric anomaly by Newton-Raphson.

The mean anomaly is first reduced to [-pi, pi] and solved on [0, pi] by
symmetry. Moderate eccentricities start from E0 = M; from e = 0.5 upward the
start is the real root of the cubic (1 - e)E + (e/6)E^3 = M, which stays
within the quadratic basin of Newton's method up to e = 1 - 1e-6, so the
iteration converges well inside the cap.

References:
    Danby, J. M. A. (1988). Fundamentals of Celestial Mechanics, ch. 6.8
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications
"""

import math

from config import (
    KEPLER_CUBIC_STARTER_ECCENTRICITY,
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE,
    TWOPI,
)
from orbit_core.errors import KeplerNonConvergence


def _cubic_starter(mean_anomaly: float, eccentricity: float) -> float:
    # Real root of E^3 + p E - q = 0 with p > 0, in the stable sinh form
    p = 6.0 * (1.0 - eccentricity) / eccentricity
    q = 6.0 * mean_anomaly / eccentricity
    root_p3 = math.sqrt(p / 3.0)
    return 2.0 * root_p3 * math.sinh(math.asinh(1.5 * q / (p * root_p3)) / 3.0)


def solve_kepler(mean_anomaly: float, eccentricity: float,
                 tolerance: float = KEPLER_TOLERANCE,
                 max_iterations: int = KEPLER_MAX_ITERATIONS) -> float:
    """
    Eccentric anomaly for an elliptical orbit.

    Args:
        mean_anomaly: Mean anomaly M (rad), any value
        eccentricity: Eccentricity, 0 <= e < 1
        tolerance: Stop when the Newton correction is below this (rad)
        max_iterations: Iteration cap

    Returns:
        E (rad) in the same revolution as ``mean_anomaly``

    Raises:
        KeplerNonConvergence: If the cap is reached first
        ValueError: If the eccentricity is not elliptical
    """
    if not 0.0 <= eccentricity < 1.0:
        raise ValueError(f"Kepler solver needs 0 <= e < 1, got {eccentricity}")

    reduced = math.fmod(mean_anomaly, TWOPI)
    if reduced > math.pi:
        reduced -= TWOPI
    elif reduced < -math.pi:
        reduced += TWOPI
    offset = mean_anomaly - reduced
    sign = -1.0 if reduced < 0.0 else 1.0
    m = abs(reduced)

    if eccentricity < KEPLER_CUBIC_STARTER_ECCENTRICITY:
        ea = m
    else:
        ea = _cubic_starter(m, eccentricity)

    for _ in range(max_iterations):
        delta = (m - ea + eccentricity * math.sin(ea)) / (1.0 - eccentricity * math.cos(ea))
        ea += delta
        if abs(delta) < tolerance:
            return offset + sign * ea

    raise KeplerNonConvergence(mean_anomaly, eccentricity, max_iterations)
