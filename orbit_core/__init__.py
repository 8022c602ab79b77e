"""
SGP4/SDP4 Orbit Propagation Package

Analytic propagation of two-line element sets to TEME position and velocity,
with the near-Earth (SGP4) and deep-space (SDP4) variants of the model.

Modules:
    tle_parser: Fixed-column TLE decoding and checksum validation
    elements: Immutable mean orbital elements
    initializer: One-time derivation of the satellite record
    secular: Secular and drag update of the mean elements
    deep_space: Lunar-solar perturbations and geopotential resonance
    kepler: Eccentric anomaly solver
    periodics: Periodic corrections and rotation to TEME
    propagator: Public propagation calls
    validation: Cross-check against the sgp4 reference package

References:
    Hoots, F. R., & Roehrich, R. L. (1980). Spacetrack Report No. 3.
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

from orbit_core.elements import OrbitalElements
from orbit_core.errors import (
    Decayed,
    InvalidElements,
    KeplerNonConvergence,
    PropagationError,
    TLEFormatError,
)
from orbit_core.initializer import initialize
from orbit_core.kepler import solve_kepler
from orbit_core.propagator import (
    SGP4Propagator,
    propagate,
    propagate_at,
    propagate_series,
    propagate_state,
)
from orbit_core.record import Regime, Resonance, SatelliteRecord
from orbit_core.state import InertialVector, PropagationState
from orbit_core.tle_parser import parse_tle, parse_tle_text

__version__ = "1.0.0"

__all__ = [
    "Decayed",
    "InertialVector",
    "InvalidElements",
    "KeplerNonConvergence",
    "OrbitalElements",
    "PropagationError",
    "PropagationState",
    "Regime",
    "Resonance",
    "SGP4Propagator",
    "SatelliteRecord",
    "TLEFormatError",
    "initialize",
    "parse_tle",
    "parse_tle_text",
    "propagate",
    "propagate_at",
    "propagate_series",
    "propagate_state",
    "solve_kepler",
]
