"""
Orientation & Periodic Correction Stage

Turns time-updated mean elements into a TEME position and velocity:

1. Deep space only: lunar-solar long-period periodics, negative inclination
   folded back, inclination functions re-evaluated at the perturbed
   inclination.
2. Long-period J3 periodics, expressed on the equinoctial pair
   (axN, ayN) = e(cos w, sin w) and the mean longitude, so they stay defined
   for circular orbits.
3. Kepler's equation, solved in classical form for the long-period-corrected
   eccentricity and the composite angle u - atan2(ayN, axN).
4. Short-period J2 periodics on radius, argument of latitude, node and
   inclination, applied after step 2 because they use its elements.
5. Rotation from the orbital plane to TEME via the argument of latitude,
   inclination and node.

Termination conditions raise ``Decayed``: perturbed eccentricity outside
[0, 1) (code 3), semi-latus rectum not positive (code 4), osculating radius
below one Earth radius (code 6).

References:
    Hoots, F. R., & Roehrich, R. L. (1980). Spacetrack Report No. 3
    Vallado, D. A., et al. (2006). "Revisiting Spacetrack Report #3." AIAA 2006-6753
"""

import logging
import math
from typing import Tuple

from config import COS_INCLINATION_GUARD, TWOPI
from orbit_core.deep_space import lunar_solar_periodics
from orbit_core.errors import (
    ERROR_DECAYED,
    ERROR_PERTURBED_ECCENTRICITY,
    ERROR_SEMI_LATUS_RECTUM,
    Decayed,
)
from orbit_core.kepler import solve_kepler
from orbit_core.record import PeriodicTerms, Regime, SatelliteRecord
from orbit_core.state import InertialVector, MeanElements, PropagationState

logger = logging.getLogger(__name__)


def _decayed(record: SatelliteRecord, code: int, message: str, t: float) -> Decayed:
    logger.warning(f"Catalog number {record.catalog_number} at t={t:.3f} min: {message}")
    return Decayed(code, message, t)


def inclination_terms(sinip: float, cosip: float, j3oj2: float) -> PeriodicTerms:
    """Long- and short-period inclination functions at inclination i."""
    cosisq = cosip * cosip
    if abs(cosip + 1.0) > COS_INCLINATION_GUARD:
        xlcof = -0.25 * j3oj2 * sinip * (3.0 + 5.0 * cosip) / (1.0 + cosip)
    else:
        xlcof = -0.25 * j3oj2 * sinip * (3.0 + 5.0 * cosip) / COS_INCLINATION_GUARD
    return PeriodicTerms(
        con41=3.0 * cosisq - 1.0,
        x1mth2=1.0 - cosisq,
        x7thm1=7.0 * cosisq - 1.0,
        xlcof=xlcof,
        aycof=-0.5 * j3oj2 * sinip,
    )


def long_period_periodics(am: float, ep: float, argpp: float, nodep: float, mp: float,
                          terms: PeriodicTerms) -> Tuple[float, float, float]:
    """
    J3 long-period terms.

    Returns:
        (axnl, aynl, xl): equinoctial eccentricity components and the
        corrected mean longitude
    """
    axnl = ep * math.cos(argpp)
    temp = 1.0 / (am * (1.0 - ep * ep))
    aynl = ep * math.sin(argpp) + temp * terms.aycof
    xl = mp + argpp + nodep + temp * terms.xlcof * axnl
    return axnl, aynl, xl


def correct_and_orient(record: SatelliteRecord, mean: MeanElements) -> PropagationState:
    """
    Apply periodic corrections to ``mean`` and produce the TEME state.

    Raises:
        Decayed: On the termination conditions listed in the module docstring
        KeplerNonConvergence: If the anomaly solver hits its iteration cap
    """
    t = mean.minutes_since_epoch
    gravity = record.gravity
    am = mean.semi_major_axis
    nm = mean.mean_motion
    ep = mean.eccentricity
    xincp = mean.inclination
    nodep = mean.raan
    argpp = mean.arg_perigee
    mp = mean.mean_anomaly
    terms = record.periodics

    if record.regime is Regime.DEEP_SPACE:
        ep, xincp, nodep, argpp, mp = lunar_solar_periodics(
            record.deep_space.lunar_solar, t, ep, xincp, nodep, argpp, mp, record.opsmode
        )
        if xincp < 0.0:
            xincp = -xincp
            nodep = nodep + math.pi
            argpp = argpp - math.pi
        if ep < 0.0 or ep >= 1.0:
            raise _decayed(
                record, ERROR_PERTURBED_ECCENTRICITY,
                f"Perturbed eccentricity {ep:.9f} outside [0, 1). Physical meaning: "
                f"lunar-solar perturbations have made the orbit unbound or degenerate.",
                t,
            )
        terms = inclination_terms(math.sin(xincp), math.cos(xincp), gravity.j3oj2)
    sinip = math.sin(xincp)
    cosip = math.cos(xincp)

    axnl, aynl, xl = long_period_periodics(am, ep, argpp, nodep, mp, terms)

    el2 = axnl * axnl + aynl * aynl
    pl = am * (1.0 - el2)
    if pl <= 0.0:
        raise _decayed(
            record, ERROR_SEMI_LATUS_RECTUM,
            f"Semi-latus rectum {pl:.6e} ER is not positive. Physical meaning: the "
            f"corrected eccentricity reached 1, the orbit is no longer elliptical.",
            t,
        )

    # Kepler's equation in classical form about the composite perigee angle
    el = math.sqrt(el2)
    perigee_angle = math.atan2(aynl, axnl)
    u = (xl - nodep) % TWOPI
    eccentric_anomaly = solve_kepler(u - perigee_angle, el)
    eo1 = eccentric_anomaly + perigee_angle
    sineo1 = math.sin(eo1)
    coseo1 = math.cos(eo1)

    # Short-period preliminary quantities
    ecose = axnl * coseo1 + aynl * sineo1
    esine = axnl * sineo1 - aynl * coseo1
    rl = am * (1.0 - ecose)
    rdotl = math.sqrt(am) * esine / rl
    rvdotl = math.sqrt(pl) / rl
    betal = math.sqrt(1.0 - el2)
    true_anomaly = math.atan2(betal * math.sin(eccentric_anomaly),
                              math.cos(eccentric_anomaly) - el)
    temp = esine / (1.0 + betal)
    sinu = am / rl * (sineo1 - aynl - axnl * temp)
    cosu = am / rl * (coseo1 - axnl + aynl * temp)
    su = math.atan2(sinu, cosu)
    sin2u = (cosu + cosu) * sinu
    cos2u = 1.0 - 2.0 * sinu * sinu
    temp = 1.0 / pl
    temp1 = 0.5 * gravity.j2 * temp
    temp2 = temp1 * temp

    # Short-period periodics
    mrt = (rl * (1.0 - 1.5 * temp2 * betal * terms.con41)
           + 0.5 * temp1 * terms.x1mth2 * cos2u)
    su = su - 0.25 * temp2 * terms.x7thm1 * sin2u
    xnode = nodep + 1.5 * temp2 * cosip * sin2u
    xinc = xincp + 1.5 * temp2 * cosip * sinip * cos2u
    mvt = rdotl - nm * temp1 * terms.x1mth2 * sin2u / gravity.xke
    rvdot = rvdotl + nm * temp1 * (terms.x1mth2 * cos2u + 1.5 * terms.con41) / gravity.xke

    if mrt < 1.0:
        raise _decayed(
            record, ERROR_DECAYED,
            f"Osculating radius {mrt * gravity.radiusearthkm:.3f} km is inside the Earth. "
            f"Physical meaning: the satellite has re-entered.",
            t,
        )

    vector = orient(mrt, mvt, rvdot, su, xnode, xinc,
                    gravity.radiusearthkm, gravity.radiusearthkm * gravity.xke / 60.0)
    return PropagationState(
        minutes_since_epoch=t,
        mean=mean,
        eccentric_anomaly=eccentric_anomaly,
        true_anomaly=true_anomaly,
        vector=vector,
    )


def orient(mrt: float, mvt: float, rvdot: float, su: float, xnode: float, xinc: float,
           radius_km: float, vkmpersec: float) -> InertialVector:
    """
    Rotate radius and its rates from the orbital plane into TEME.

    ``su`` is the argument of latitude; using it instead of perigee plus true
    anomaly keeps the rotation defined for circular and equatorial orbits.
    """
    sinsu = math.sin(su)
    cossu = math.cos(su)
    snod = math.sin(xnode)
    cnod = math.cos(xnode)
    sini = math.sin(xinc)
    cosi = math.cos(xinc)
    xmx = -snod * cosi
    xmy = cnod * cosi
    ux = xmx * sinsu + cnod * cossu
    uy = xmy * sinsu + snod * cossu
    uz = sini * sinsu
    vx = xmx * cossu - cnod * sinsu
    vy = xmy * cossu - snod * sinsu
    vz = sini * cossu

    mr = mrt * radius_km
    position = (mr * ux, mr * uy, mr * uz)
    velocity = ((mvt * ux + rvdot * vx) * vkmpersec,
                (mvt * uy + rvdot * vy) * vkmpersec,
                (mvt * uz + rvdot * vz) * vkmpersec)
    return InertialVector(position, velocity, radius_km)
