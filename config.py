"""
SGP4/SDP4 Configuration and Constants

Physical constants, gravity models, numerical thresholds and reference
element sets used throughout the project.

Gravity Models:
    WGS-72 (default), the original WGS-72 low-precision set and WGS-84, with
    the values used by Vallado et al. (2006, AIAA 2006-6753). Element sets in
    the public catalog are generated with WGS-72, so mixing models gives
    slightly worse predictions than keeping the default.

Thresholds:
    The near-circular and near-equatorial guards below are fixed values.
    Reference implementations differ slightly here; these match the revised
    reference code so that results agree with it to sub-millimetre level.

Reference Element Sets:
    Test cases from SPACETRACK REPORT NO. 3 and the revised verification set,
    plus an ISS element set for demonstrations.

References:
    Hoots, F. R., & Roehrich, R. L. (1980). Spacetrack Report No. 3.
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

import math
from typing import Dict, Any, NamedTuple, Optional


class EarthGravity(NamedTuple):
    """Gravitational constants of one Earth model.

    ``xke`` is sqrt(mu) in Earth radii^1.5 per minute and ``tumin`` its
    inverse (minutes per time unit).
    """

    name: str
    tumin: float
    mu: float  # km^3/s^2
    radiusearthkm: float
    xke: float
    j2: float
    j3: float
    j4: float
    j3oj2: float


def _gravity(name: str, mu: float, radiusearthkm: float, j2: float, j3: float,
             j4: float, xke: Optional[float] = None) -> EarthGravity:
    if xke is None:
        xke = 60.0 / math.sqrt(radiusearthkm * radiusearthkm * radiusearthkm / mu)
    return EarthGravity(name, 1.0 / xke, mu, radiusearthkm, xke, j2, j3, j4, j3 / j2)


WGS72OLD = _gravity("wgs72old", 398600.79964, 6378.135, 0.001082616,
                    -0.00000253881, -0.00000165597, xke=0.0743669161)
WGS72 = _gravity("wgs72", 398600.8, 6378.135, 0.001082616,
                 -0.00000253881, -0.00000165597)
WGS84 = _gravity("wgs84", 398600.5, 6378.137, 0.00108262998905,
                 -0.00000253215306, -0.00000161098761)

GRAVITY_MODELS: Dict[str, EarthGravity] = {
    model.name: model for model in (WGS72OLD, WGS72, WGS84)
}
DEFAULT_GRAVITY: EarthGravity = WGS72


def get_gravity_model(name: str) -> EarthGravity:
    """Look up a gravity model by name (case-insensitive)."""
    try:
        return GRAVITY_MODELS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown gravity model '{name}'. "
            f"Choose one of: {', '.join(sorted(GRAVITY_MODELS))}"
        ) from None


# Angles and time
TWOPI: float = 2.0 * math.pi
DEG2RAD: float = math.pi / 180.0
RAD2DEG: float = 180.0 / math.pi
MINUTES_PER_DAY: float = 1440.0
XPDOTP: float = MINUTES_PER_DAY / TWOPI  # rev/day to rad/min
X2O3: float = 2.0 / 3.0

# Julian date of 1949-12-31 00:00 UT, origin of the model's epoch count
JD_1950_ORIGIN: float = 2433281.5

# Operation modes
OPSMODE_IMPROVED: str = "i"
OPSMODE_AFSPC: str = "a"
OPSMODES = (OPSMODE_IMPROVED, OPSMODE_AFSPC)

# Atmospheric drag model (altitudes in km)
DRAG_REFERENCE_ALTITUDE_KM: float = 78.0
DRAG_UPPER_ALTITUDE_KM: float = 120.0
DRAG_BAND_HIGH_KM: float = 156.0
DRAG_BAND_LOW_KM: float = 98.0
DRAG_FLOOR_ALTITUDE_KM: float = 20.0
SIMPLIFIED_DRAG_PERIGEE_KM: float = 220.0

# Orbits with a period at or above this use the deep-space branch
DEEP_SPACE_PERIOD_MIN: float = 225.0

# Eccentricity limits during propagation
MIN_ECCENTRICITY: float = 1.0e-6
MAX_ECCENTRICITY: float = 1.0 - 1.0e-6
# Decay is declared for mean eccentricity below this value
NEGATIVE_ECCENTRICITY_LIMIT: float = -0.001

# Singularity guards
SMALL_ECCENTRICITY: float = 1.0e-4  # C3 and xmcof are dropped below this
COS_INCLINATION_GUARD: float = 1.5e-12  # |1 + cos i| floor in xlcof
LYDDANE_INCLINATION: float = 0.2  # rad; Lyddane form below this
LUNAR_SOLAR_MIN_INCLINATION: float = 5.2359877e-2  # rad; node terms zeroed

# Kepler solver
KEPLER_TOLERANCE: float = 1.0e-12
KEPLER_MAX_ITERATIONS: int = 10
KEPLER_CUBIC_STARTER_ECCENTRICITY: float = 0.5

# Deep-space resonance
RESONANCE_STEP_MIN: float = 720.0
ONE_DAY_RESONANCE_BAND = (0.0034906585, 0.0052359877)  # rad/min, exclusive
HALF_DAY_RESONANCE_BAND = (8.26e-3, 9.24e-3)  # rad/min, inclusive
HALF_DAY_RESONANCE_MIN_ECCENTRICITY: float = 0.5

# Reference element sets
SPACETRACK_SGP4_TLE: Dict[str, Any] = {
    'name': 'SPACETRACK REPORT 3 SGP4 TEST',
    'norad_id': 88888,
    'line1': '1 88888U          80275.98708465  .00073094  13844-3  66816-4 0     9',
    'line2': '2 88888  72.8435 115.9689 0086731  52.6988 110.5714 16.05824518   103',
    # Published position (km) and velocity (km/s) at epoch
    'position_km': (2328.97048951, -5995.22076416, 1719.97067261),
    'velocity_km_s': (2.91207230, -0.98341546, -7.09081703),
}

SPACETRACK_SDP4_TLE: Dict[str, Any] = {
    'name': 'SPACETRACK REPORT 3 SDP4 TEST',
    'norad_id': 11801,
    'line1': '1 11801U          80230.29629788  .01431103  00000-0  14311-1      13',
    'line2': '2 11801  46.7916 230.4354 7318036  47.4722  10.4117  2.28537848    13',
    'position_km': (7473.37066650, 428.95261765, 5828.74786377),
    'velocity_km_s': (5.10715413, 6.44468284, -0.18613096),
}

ISS_TLE: Dict[str, Any] = {
    'name': 'ISS (ZARYA)',
    'norad_id': 25544,
    'line1': '1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995',
    'line2': '2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598',
}

MOLNIYA_TLE: Dict[str, Any] = {
    'name': 'MOLNIYA 2-14',
    'norad_id': 8195,
    'line1': '1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813',
    'line2': '2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656',
}

GPS_TLE: Dict[str, Any] = {
    'name': 'NAVSTAR 51',
    'norad_id': 28129,
    'line1': '1 28129U 03058A   06175.57071136 -.00000104  00000-0  10000-3 0   459',
    'line2': '2 28129  54.7298 324.8098 0048506 266.2640  93.1663  2.00562768 18443',
}
