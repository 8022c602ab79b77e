"""
Element Initializer

One-time derivation of a ``SatelliteRecord`` from mean elements:

1. Recover the un-Kozai mean motion n0" and semi-major axis a0" from the
   catalog (Kozai) mean motion through the J2 correction.
2. Choose the drag reference altitude ``s`` and ``(q0 - s)^4`` from the
   perigee altitude band (above 156 km, 98 to 156 km, below 98 km).
3. Compute the drag coefficients C1..C5, the J2/J4 secular rates and the
   long-period inclination functions.
4. Classify the regime: period of 225 minutes or more is deep space, which
   also initializes the lunar-solar and resonance terms. Near-Earth orbits
   with perigee at or above 220 km get the D2..D4 higher-order drag terms.

References:
    Hoots, F. R., & Roehrich, R. L. (1980). Spacetrack Report No. 3
    Vallado, D. A., et al. (2006). "Revisiting Spacetrack Report #3." AIAA 2006-6753
"""

import logging
import math
from typing import Tuple

from config import (
    COS_INCLINATION_GUARD,
    DEEP_SPACE_PERIOD_MIN,
    DEFAULT_GRAVITY,
    DEG2RAD,
    DRAG_BAND_HIGH_KM,
    DRAG_BAND_LOW_KM,
    DRAG_FLOOR_ALTITUDE_KM,
    DRAG_REFERENCE_ALTITUDE_KM,
    DRAG_UPPER_ALTITUDE_KM,
    JD_1950_ORIGIN,
    OPSMODE_AFSPC,
    OPSMODE_IMPROVED,
    OPSMODES,
    SIMPLIFIED_DRAG_PERIGEE_KM,
    SMALL_ECCENTRICITY,
    TWOPI,
    X2O3,
    EarthGravity,
)
from orbit_core.deep_space import deep_space_init
from orbit_core.elements import OrbitalElements
from orbit_core.errors import (
    ERROR_MEAN_ECCENTRICITY,
    ERROR_MEAN_MOTION,
    ERROR_SUB_ORBITAL,
    InvalidElements,
)
from orbit_core.record import (
    DragTerms,
    PeriodicTerms,
    Regime,
    SatelliteRecord,
    SecularRates,
)

logger = logging.getLogger(__name__)


def _invalid(elements: OrbitalElements, code: int, message: str) -> InvalidElements:
    logger.warning(f"Rejecting elements for catalog number {elements.catalog_number}: {message}")
    return InvalidElements(code, message)


def check_elements(elements: OrbitalElements) -> None:
    """Raise ``InvalidElements`` if the record cannot be initialized."""
    numeric = {
        "epoch_day": elements.epoch_day,
        "inclination_deg": elements.inclination_deg,
        "raan_deg": elements.raan_deg,
        "eccentricity": elements.eccentricity,
        "arg_perigee_deg": elements.arg_perigee_deg,
        "mean_anomaly_deg": elements.mean_anomaly_deg,
        "mean_motion": elements.mean_motion,
        "bstar": elements.bstar,
    }
    for name, value in numeric.items():
        if not math.isfinite(value):
            raise _invalid(elements, ERROR_SUB_ORBITAL, f"{name} is not a finite number ({value})")

    if elements.mean_motion <= 0.0:
        raise _invalid(
            elements, ERROR_MEAN_MOTION,
            f"Mean motion must be positive, got {elements.mean_motion} rev/day. "
            f"Physical meaning: the element set describes no closed orbit.",
        )
    if not 0.0 <= elements.eccentricity < 1.0:
        raise _invalid(
            elements, ERROR_MEAN_ECCENTRICITY,
            f"Eccentricity must be in [0, 1), got {elements.eccentricity}. "
            f"Physical meaning: parabolic, hyperbolic or malformed orbit.",
        )


def recover_mean_motion(no_kozai: float, ecco: float, inclo: float,
                        gravity: EarthGravity) -> Tuple[float, float]:
    """
    Undo the Kozai averaging of the catalog mean motion.

    Args:
        no_kozai: Kozai mean motion (rad/min)
        ecco: Eccentricity
        inclo: Inclination (rad)
        gravity: Gravity model

    Returns:
        (n0", a0"): recovered mean motion (rad/min) and semi-major axis
        (Earth radii)
    """
    eccsq = ecco * ecco
    omeosq = 1.0 - eccsq
    rteosq = math.sqrt(omeosq)
    cosio = math.cos(inclo)
    cosio2 = cosio * cosio

    ak = math.pow(gravity.xke / no_kozai, X2O3)
    d1 = 0.75 * gravity.j2 * (3.0 * cosio2 - 1.0) / (rteosq * omeosq)
    del_ = d1 / (ak * ak)
    adel = ak * (1.0 - del_ * del_ - del_ * (1.0 / 3.0 + 134.0 * del_ * del_ / 81.0))
    if adel <= 0.0:
        raise InvalidElements(
            ERROR_SUB_ORBITAL,
            f"J2 correction collapsed the semi-major axis (a1={ak:.6f} ER). "
            f"Physical meaning: mean motion too high for any orbit above the Earth.",
        )
    del_ = d1 / (adel * adel)
    if 1.0 + del_ <= 0.0:
        raise InvalidElements(ERROR_SUB_ORBITAL, f"Degenerate J2 correction (delta0={del_})")
    no_unkozai = no_kozai / (1.0 + del_)
    ao = math.pow(gravity.xke / no_unkozai, X2O3)
    return no_unkozai, ao


def gstime(jdut1: float) -> float:
    """Greenwich mean sidereal time (rad) from a UT1 Julian date (IAU 1982)."""
    tut1 = (jdut1 - 2451545.0) / 36525.0
    temp = (-6.2e-6 * tut1 * tut1 * tut1 + 0.093104 * tut1 * tut1
            + (876600.0 * 3600 + 8640184.812866) * tut1 + 67310.54841)  # sec
    temp = (temp * DEG2RAD / 240.0) % TWOPI
    if temp < 0.0:
        temp += TWOPI
    return temp


def greenwich_sidereal_time(epoch: float, opsmode: str = OPSMODE_IMPROVED) -> float:
    """
    Sidereal time at epoch (days since 1949-12-31).

    Mode 'a' reproduces the AFSPC formulation counted from 1970.
    """
    if opsmode == OPSMODE_AFSPC:
        ts70 = epoch - 7305.0
        ds70 = math.floor(ts70 + 1.0e-8)
        tfrac = ts70 - ds70
        c1 = 1.72027916940703639e-2
        thgr70 = 1.7321343856509374
        fk5r = 5.07551419432269442e-15
        c1p2p = c1 + TWOPI
        gsto = (thgr70 + c1 * ds70 + c1p2p * tfrac + ts70 * ts70 * fk5r) % TWOPI
        if gsto < 0.0:
            gsto += TWOPI
        return gsto
    return gstime(epoch + JD_1950_ORIGIN)


def drag_parameters(perigee_km: float, gravity: EarthGravity) -> Tuple[float, float]:
    """
    Drag reference radius ``s`` (Earth radii, from the centre) and
    ``(q0 - s)^4`` for a perigee altitude in km.

    Below 156 km ``s`` follows the perigee down, and below 98 km it is held
    at 20 km.
    """
    re = gravity.radiusearthkm
    if perigee_km >= DRAG_BAND_HIGH_KM:
        qzms2ttemp = (DRAG_UPPER_ALTITUDE_KM - DRAG_REFERENCE_ALTITUDE_KM) / re
        qzms2t = qzms2ttemp * qzms2ttemp * qzms2ttemp * qzms2ttemp
        return DRAG_REFERENCE_ALTITUDE_KM / re + 1.0, qzms2t

    sfour = perigee_km - DRAG_REFERENCE_ALTITUDE_KM
    if perigee_km < DRAG_BAND_LOW_KM:
        sfour = DRAG_FLOOR_ALTITUDE_KM
    qzms24temp = (DRAG_UPPER_ALTITUDE_KM - sfour) / re
    qzms24 = qzms24temp * qzms24temp * qzms24temp * qzms24temp
    return sfour / re + 1.0, qzms24


def initialize(elements: OrbitalElements, gravity: EarthGravity = DEFAULT_GRAVITY,
               opsmode: str = OPSMODE_IMPROVED) -> SatelliteRecord:
    """
    Derive the propagation constants for one element set.

    Args:
        elements: Mean elements at epoch
        gravity: Gravity model (WGS-72 matches the public catalog)
        opsmode: 'i' improved sidereal time, 'a' AFSPC-compatible

    Returns:
        Immutable SatelliteRecord

    Raises:
        InvalidElements: If the elements are out of range or degenerate
        ValueError: If ``opsmode`` is unknown
    """
    if opsmode not in OPSMODES:
        raise ValueError(f"Unknown operation mode '{opsmode}', expected one of {OPSMODES}")
    check_elements(elements)

    j2 = gravity.j2
    epoch = elements.epoch_days_since_1950
    ecco = elements.eccentricity
    inclo = elements.inclination
    nodeo = elements.raan
    argpo = elements.arg_perigee
    mo = elements.mean_anomaly
    bstar = elements.bstar
    no_kozai = elements.mean_motion_rad_per_min

    try:
        no_unkozai, ao = recover_mean_motion(no_kozai, ecco, inclo, gravity)
    except InvalidElements as exc:
        logger.warning(f"Rejecting elements for catalog number {elements.catalog_number}: {exc.message}")
        raise

    eccsq = ecco * ecco
    omeosq = 1.0 - eccsq
    rteosq = math.sqrt(omeosq)
    cosio = math.cos(inclo)
    sinio = math.sin(inclo)
    cosio2 = cosio * cosio
    con42 = 1.0 - 5.0 * cosio2
    con41 = -con42 - cosio2 - cosio2
    po = ao * omeosq
    posq = po * po
    rp = ao * (1.0 - ecco)
    gsto = greenwich_sidereal_time(epoch, opsmode)

    perige = (rp - 1.0) * gravity.radiusearthkm
    sfour, qzms24 = drag_parameters(perige, gravity)
    logger.debug(f"Perigee {perige:.3f} km, drag reference s={sfour:.9f} ER")

    if ao <= sfour:
        raise _invalid(
            elements, ERROR_SUB_ORBITAL,
            f"Semi-major axis {(ao - 1.0) * gravity.radiusearthkm:.3f} km altitude lies "
            f"inside the drag reference sphere. Physical meaning: the element set is "
            f"sub-orbital.",
        )

    pinvsq = 1.0 / posq
    tsi = 1.0 / (ao - sfour)
    eta = ao * ecco * tsi
    etasq = eta * eta
    eeta = ecco * eta
    psisq = abs(1.0 - etasq)
    if psisq == 0.0:
        raise _invalid(elements, ERROR_SUB_ORBITAL,
                       "Drag expansion is singular (eta = 1) for these elements.")
    coef = qzms24 * math.pow(tsi, 4.0)
    coef1 = coef / math.pow(psisq, 3.5)
    cc2 = coef1 * no_unkozai * (
        ao * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
        + 0.375 * j2 * tsi / psisq * con41 * (8.0 + 3.0 * etasq * (8.0 + etasq))
    )
    cc1 = bstar * cc2
    cc3 = 0.0
    if ecco > SMALL_ECCENTRICITY:
        cc3 = -2.0 * coef * tsi * gravity.j3oj2 * no_unkozai * sinio / ecco
    x1mth2 = 1.0 - cosio2
    cc4 = 2.0 * no_unkozai * coef1 * ao * omeosq * (
        eta * (2.0 + 0.5 * etasq) + ecco * (0.5 + 2.0 * etasq)
        - j2 * tsi / (ao * psisq) * (
            -3.0 * con41 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
            + 0.75 * x1mth2 * (2.0 * etasq - eeta * (1.0 + etasq)) * math.cos(2.0 * argpo)
        )
    )
    cc5 = 2.0 * coef1 * ao * omeosq * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)

    # Secular rates from J2 and J4
    cosio4 = cosio2 * cosio2
    temp1 = 1.5 * j2 * pinvsq * no_unkozai
    temp2 = 0.5 * temp1 * j2 * pinvsq
    temp3 = -0.46875 * gravity.j4 * pinvsq * pinvsq * no_unkozai
    mdot = (no_unkozai + 0.5 * temp1 * rteosq * con41
            + 0.0625 * temp2 * rteosq * (13.0 - 78.0 * cosio2 + 137.0 * cosio4))
    argpdot = (-0.5 * temp1 * con42
               + 0.0625 * temp2 * (7.0 - 114.0 * cosio2 + 395.0 * cosio4)
               + temp3 * (3.0 - 36.0 * cosio2 + 49.0 * cosio4))
    xhdot1 = -temp1 * cosio
    nodedot = xhdot1 + (0.5 * temp2 * (4.0 - 19.0 * cosio2)
                        + 2.0 * temp3 * (3.0 - 7.0 * cosio2)) * cosio

    omgcof = bstar * cc3 * math.cos(argpo)
    xmcof = 0.0
    if ecco > SMALL_ECCENTRICITY:
        xmcof = -X2O3 * coef * bstar / eeta
    nodecf = 3.5 * omeosq * xhdot1 * cc1
    t2cof = 1.5 * cc1

    # Inclination functions; 1 + cos i vanishes for retrograde equatorial orbits
    if abs(cosio + 1.0) > COS_INCLINATION_GUARD:
        xlcof = -0.25 * gravity.j3oj2 * sinio * (3.0 + 5.0 * cosio) / (1.0 + cosio)
    else:
        xlcof = -0.25 * gravity.j3oj2 * sinio * (3.0 + 5.0 * cosio) / COS_INCLINATION_GUARD
    aycof = -0.5 * gravity.j3oj2 * sinio
    delmotemp = 1.0 + eta * math.cos(mo)
    delmo = delmotemp * delmotemp * delmotemp
    sinmao = math.sin(mo)
    x7thm1 = 7.0 * cosio2 - 1.0

    deep_space = None
    regime = Regime.NEAR_EARTH
    simplified = rp < SIMPLIFIED_DRAG_PERIGEE_KM / gravity.radiusearthkm + 1.0
    if TWOPI / no_unkozai >= DEEP_SPACE_PERIOD_MIN:
        regime = Regime.DEEP_SPACE
        simplified = True
        deep_space = deep_space_init(
            epoch, ecco, argpo, inclo, nodeo, mo, no_unkozai, gravity.xke, gsto,
            mdot, argpdot, nodedot,
        )

    higher_order = {}
    if not simplified:
        cc1sq = cc1 * cc1
        d2 = 4.0 * ao * tsi * cc1sq
        temp = d2 * tsi * cc1 / 3.0
        d3 = (17.0 * ao + sfour) * temp
        d4 = 0.5 * temp * ao * tsi * (221.0 * ao + 31.0 * sfour) * cc1
        higher_order = dict(
            d2=d2,
            d3=d3,
            d4=d4,
            t3cof=d2 + 2.0 * cc1sq,
            t4cof=0.25 * (3.0 * d3 + cc1 * (12.0 * d2 + 10.0 * cc1sq)),
            t5cof=0.2 * (3.0 * d4 + 12.0 * cc1 * d3 + 6.0 * d2 * d2
                         + 15.0 * cc1sq * (2.0 * d2 + cc1sq)),
        )

    record = SatelliteRecord(
        elements=elements,
        gravity=gravity,
        opsmode=opsmode,
        regime=regime,
        epoch=epoch,
        inclo=inclo,
        nodeo=nodeo,
        ecco=ecco,
        argpo=argpo,
        mo=mo,
        bstar=bstar,
        no_kozai=no_kozai,
        no_unkozai=no_unkozai,
        a=ao,
        gsto=gsto,
        rates=SecularRates(mdot=mdot, argpdot=argpdot, nodedot=nodedot, nodecf=nodecf),
        drag=DragTerms(
            simplified=simplified,
            cc1=cc1,
            cc4=cc4,
            cc5=cc5,
            eta=eta,
            t2cof=t2cof,
            omgcof=omgcof,
            xmcof=xmcof,
            delmo=delmo,
            sinmao=sinmao,
            **higher_order,
        ),
        periodics=PeriodicTerms(con41=con41, x1mth2=x1mth2, x7thm1=x7thm1,
                                xlcof=xlcof, aycof=aycof),
        deep_space=deep_space,
    )
    logger.info(
        f"Initialized catalog number {elements.catalog_number}: {regime.value}, "
        f"period {record.period_minutes:.2f} min, perigee {record.perigee_altitude_km:.1f} km, "
        f"resonance {record.resonance.name}"
    )
    return record
