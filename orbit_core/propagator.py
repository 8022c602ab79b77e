"""
SGP4/SDP4 Propagation

Per-call pipeline over an initialized record:

    secular_update -> correct_and_orient (Kepler solve inside)

Nothing is cached between calls, so a record can be shared by any number of
threads propagating different times, and repeated calls for the same time
return identical vectors.

Example:
    >>> from orbit_core import SGP4Propagator
    >>> sat = SGP4Propagator(line1, line2)
    >>> sat.propagate(90.0).position
"""

import logging
import math
from datetime import datetime
from typing import Iterable, Tuple

import numpy as np

from config import DEFAULT_GRAVITY, OPSMODE_IMPROVED, EarthGravity
from orbit_core.elements import OrbitalElements
from orbit_core.initializer import initialize
from orbit_core.periodics import correct_and_orient
from orbit_core.record import SatelliteRecord
from orbit_core.secular import secular_update
from orbit_core.state import InertialVector, PropagationState
from orbit_core.tle_parser import parse_tle

logger = logging.getLogger(__name__)


def propagate_state(record: SatelliteRecord, minutes_since_epoch: float) -> PropagationState:
    """
    Full intermediate state at ``minutes_since_epoch``.

    Raises:
        ValueError: If the time is not a finite number
        Decayed: If the orbit has decayed by that time
        KeplerNonConvergence: If the anomaly solver fails
    """
    t = float(minutes_since_epoch)
    if not math.isfinite(t):
        raise ValueError(f"Minutes since epoch must be finite, got {minutes_since_epoch}")
    mean = secular_update(record, t)
    state = correct_and_orient(record, mean)
    logger.debug(f"Catalog number {record.catalog_number} t={t:.3f} min: {state.vector}")
    return state


def propagate(record: SatelliteRecord, minutes_since_epoch: float) -> InertialVector:
    """
    TEME position (km) and velocity (km/s) at ``minutes_since_epoch``.

    Negative times propagate backwards from epoch.
    """
    return propagate_state(record, minutes_since_epoch).vector


def propagate_at(record: SatelliteRecord, when: datetime) -> InertialVector:
    """Propagate to a datetime (naive values are taken as UTC)."""
    return propagate(record, record.elements.minutes_since_epoch(when))


def propagate_series(record: SatelliteRecord,
                     minutes: Iterable[float]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Propagate a sequence of times.

    Returns:
        (positions, velocities), each an (N, 3) array

    Raises:
        Decayed, KeplerNonConvergence: At the first time that fails
    """
    times = np.asarray(list(minutes), dtype=float)
    positions = np.empty((len(times), 3))
    velocities = np.empty((len(times), 3))
    for i, t in enumerate(times):
        vector = propagate(record, t)
        positions[i] = vector.position
        velocities[i] = vector.velocity
    return positions, velocities


class SGP4Propagator:
    """
    Convenience wrapper holding the elements and the initialized record of
    one satellite.

    Args:
        line1: TLE line 1
        line2: TLE line 2
        name: Optional satellite name
        gravity: Gravity model
        opsmode: 'i' or 'a'
    """

    def __init__(self, line1: str, line2: str, name: str = "",
                 gravity: EarthGravity = DEFAULT_GRAVITY, opsmode: str = OPSMODE_IMPROVED):
        self.elements = parse_tle(line1, line2, name)
        self.record = initialize(self.elements, gravity, opsmode)

    @classmethod
    def from_elements(cls, elements: OrbitalElements, gravity: EarthGravity = DEFAULT_GRAVITY,
                      opsmode: str = OPSMODE_IMPROVED) -> "SGP4Propagator":
        propagator = cls.__new__(cls)
        propagator.elements = elements
        propagator.record = initialize(elements, gravity, opsmode)
        return propagator

    @property
    def period_minutes(self) -> float:
        return self.record.period_minutes

    def propagate(self, minutes_since_epoch: float) -> InertialVector:
        return propagate(self.record, minutes_since_epoch)

    def propagate_at(self, when: datetime) -> InertialVector:
        return propagate_at(self.record, when)

    def propagate_series(self, minutes: Iterable[float]) -> Tuple[np.ndarray, np.ndarray]:
        return propagate_series(self.record, minutes)

    def __repr__(self):
        name = self.elements.name or "unnamed"
        return (f"SGP4Propagator({name}, catalog={self.elements.catalog_number}, "
                f"{self.record.regime.value}, period={self.period_minutes:.2f} min)")
