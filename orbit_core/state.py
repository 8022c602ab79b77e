"""
Propagation State

Per-call results. A ``PropagationState`` is built fresh by every propagate
call and never shared; ``InertialVector`` is the externally visible output.
"""

from dataclasses import dataclass

import numpy as np

from config import WGS72


def _frozen_array(values) -> np.ndarray:
    array = np.array(values, dtype=float)
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class MeanElements:
    """Mean elements after the secular update.

    Angles in radians (node and perigee reduced to one revolution), semi-major
    axis in Earth radii, mean motion in rad/min.
    """

    minutes_since_epoch: float
    semi_major_axis: float
    eccentricity: float
    inclination: float
    raan: float
    arg_perigee: float
    mean_anomaly: float
    mean_motion: float


@dataclass(frozen=True, eq=False)
class InertialVector:
    """Position (km) and velocity (km/s) in the TEME frame."""

    position: np.ndarray
    velocity: np.ndarray
    earth_radius_km: float = WGS72.radiusearthkm

    def __post_init__(self):
        object.__setattr__(self, "position", _frozen_array(self.position))
        object.__setattr__(self, "velocity", _frozen_array(self.velocity))

    @property
    def radius_km(self) -> float:
        return float(np.linalg.norm(self.position))

    @property
    def speed_km_s(self) -> float:
        return float(np.linalg.norm(self.velocity))

    @property
    def altitude_km(self) -> float:
        """Height above the model's equatorial radius (spherical Earth)."""
        return self.radius_km - self.earth_radius_km

    def __repr__(self):
        x, y, z = self.position
        vx, vy, vz = self.velocity
        return (f"InertialVector(r=[{x:.6f}, {y:.6f}, {z:.6f}] km, "
                f"v=[{vx:.9f}, {vy:.9f}, {vz:.9f}] km/s)")


@dataclass(frozen=True, eq=False)
class PropagationState:
    """Everything computed for one requested time."""

    minutes_since_epoch: float
    mean: MeanElements
    eccentric_anomaly: float
    true_anomaly: float
    vector: InertialVector
