"""
Satellite Record

Derived constants produced once per element set by ``initialize`` and reused
by every propagation call. All containers are frozen; a changed element set
gives a new record.

The regime is a tagged variant: ``Regime.NEAR_EARTH`` records carry
``drag`` terms including the higher-order D2..D4 coefficients, while
``Regime.DEEP_SPACE`` records carry ``deep_space`` lunar-solar and resonance
terms and always use the simplified drag model. Coefficient names follow
the reference implementation so the formulas can be checked line by line.

References:
    Vallado, D. A., et al. (2006). "Revisiting Spacetrack Report #3." AIAA 2006-6753
"""

import enum
from dataclasses import dataclass
from typing import Optional

from config import EarthGravity, TWOPI
from orbit_core.elements import OrbitalElements


class Regime(enum.Enum):
    NEAR_EARTH = "near-earth"
    DEEP_SPACE = "deep-space"


class Resonance(enum.Enum):
    """Geopotential resonance class of a deep-space orbit."""

    NONE = 0
    ONE_DAY = 1  # geosynchronous
    HALF_DAY = 2  # 12-hour, e.g. Molniya


@dataclass(frozen=True)
class DragTerms:
    """Secular drag coefficients (C1..C5, D2..D4) and their time polynomials.

    ``simplified`` is set for deep-space orbits and perigees below 220 km; the
    higher-order terms are then zero and unused.
    """

    simplified: bool
    cc1: float
    cc4: float
    cc5: float
    eta: float
    t2cof: float
    omgcof: float = 0.0
    xmcof: float = 0.0
    delmo: float = 0.0
    sinmao: float = 0.0
    d2: float = 0.0
    d3: float = 0.0
    d4: float = 0.0
    t3cof: float = 0.0
    t4cof: float = 0.0
    t5cof: float = 0.0


@dataclass(frozen=True)
class SecularRates:
    """J2/J4 secular rates of the angles (rad/min) and the node drag term."""

    mdot: float
    argpdot: float
    nodedot: float
    nodecf: float


@dataclass(frozen=True)
class PeriodicTerms:
    """Inclination functions used by the long- and short-period corrections."""

    con41: float
    x1mth2: float
    x7thm1: float
    xlcof: float
    aycof: float


@dataclass(frozen=True)
class LunarSolarTerms:
    """Amplitudes of the lunar (x*) and solar (s*) long-period periodics."""

    e3: float
    ee2: float
    se2: float
    se3: float
    sgh2: float
    sgh3: float
    sgh4: float
    sh2: float
    sh3: float
    si2: float
    si3: float
    sl2: float
    sl3: float
    sl4: float
    xgh2: float
    xgh3: float
    xgh4: float
    xh2: float
    xh3: float
    xi2: float
    xi3: float
    xl2: float
    xl3: float
    xl4: float
    zmol: float
    zmos: float


@dataclass(frozen=True)
class ResonanceTerms:
    """Coefficients of the resonance integrator.

    ``kind`` is fixed at initialization. The integrator always starts at epoch
    from ``xlamo`` and the unperturbed mean motion, so no state survives a call.
    """

    kind: Resonance
    xfact: float = 0.0
    xlamo: float = 0.0
    del1: float = 0.0
    del2: float = 0.0
    del3: float = 0.0
    d2201: float = 0.0
    d2211: float = 0.0
    d3210: float = 0.0
    d3222: float = 0.0
    d4410: float = 0.0
    d4422: float = 0.0
    d5220: float = 0.0
    d5232: float = 0.0
    d5421: float = 0.0
    d5433: float = 0.0


@dataclass(frozen=True)
class DeepSpaceTerms:
    lunar_solar: LunarSolarTerms
    dedt: float
    didt: float
    dmdt: float
    dnodt: float
    domdt: float
    resonance: ResonanceTerms


@dataclass(frozen=True)
class SatelliteRecord:
    """Everything propagation needs, derived from one element set.

    Angles are in radians, mean motions in rad/min, lengths in Earth radii
    unless the field name says otherwise.
    """

    elements: OrbitalElements
    gravity: EarthGravity
    opsmode: str
    regime: Regime

    epoch: float  # days since 1949-12-31 00:00 UT
    inclo: float
    nodeo: float
    ecco: float
    argpo: float
    mo: float
    bstar: float

    no_kozai: float
    no_unkozai: float  # n0", recovered mean motion
    a: float  # a0", recovered semi-major axis
    gsto: float  # Greenwich sidereal time at epoch

    rates: SecularRates
    drag: DragTerms
    periodics: PeriodicTerms
    deep_space: Optional[DeepSpaceTerms] = None

    @property
    def period_minutes(self) -> float:
        return TWOPI / self.no_unkozai

    @property
    def perigee_altitude_km(self) -> float:
        return (self.a * (1.0 - self.ecco) - 1.0) * self.gravity.radiusearthkm

    @property
    def apogee_altitude_km(self) -> float:
        return (self.a * (1.0 + self.ecco) - 1.0) * self.gravity.radiusearthkm

    @property
    def resonance(self) -> Resonance:
        if self.deep_space is None:
            return Resonance.NONE
        return self.deep_space.resonance.kind

    @property
    def catalog_number(self) -> int:
        return self.elements.catalog_number
