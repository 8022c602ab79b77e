"""
Deep-Space Extension (SDP4)

Lunar-solar and geopotential-resonance terms for orbits with a period of
225 minutes or more.

Initialization (``deep_space_init``) evaluates the solar and lunar viewing
geometry at epoch, derives the lunar-solar secular rates and long-period
amplitudes, and classifies the orbit's resonance:

    Resonance.NONE      no integrated correction
    Resonance.ONE_DAY   geosynchronous, 0.0034906585 < n < 0.0052359877 rad/min
    Resonance.HALF_DAY  12-hour, 8.26e-3 <= n <= 9.24e-3 rad/min and e >= 0.5

Propagation applies the lunar-solar secular rates and, for resonant orbits,
integrates mean motion and mean longitude from epoch in 720-minute
Euler-Maclaurin steps (``deep_space_secular``), then the lunar-solar
long-period periodics (``lunar_solar_periodics``). The integrator restarts
at epoch on every call, so results do not depend on call history.

References:
    Hujsak, R. S. (1979). "A Restricted Four Body Solution for Resonating
    Satellites Without Drag." Spacetrack Report No. 1
    Vallado, D. A., et al. (2006). "Revisiting Spacetrack Report #3." AIAA 2006-6753
"""

import logging
import math
from typing import NamedTuple, Tuple

from config import (
    HALF_DAY_RESONANCE_BAND,
    HALF_DAY_RESONANCE_MIN_ECCENTRICITY,
    LUNAR_SOLAR_MIN_INCLINATION,
    LYDDANE_INCLINATION,
    ONE_DAY_RESONANCE_BAND,
    OPSMODE_AFSPC,
    RESONANCE_STEP_MIN,
    TWOPI,
    X2O3,
)
from orbit_core.record import (
    DeepSpaceTerms,
    LunarSolarTerms,
    Resonance,
    ResonanceTerms,
    SatelliteRecord,
)

logger = logging.getLogger(__name__)

# Solar and lunar mean motions (rad/min) and orbit eccentricities
ZNS = 1.19459e-5
ZES = 0.01675
ZNL = 1.5835218e-4
ZEL = 0.05490
C1SS = 2.9864797e-6
C1L = 4.7968065e-7
# Solar orbit orientation
ZSINIS = 0.39785416
ZCOSIS = 0.91744867
ZCOSGS = 0.1945905
ZSINGS = -0.98088458

# Resonance coefficients
Q22 = 1.7891679e-6
Q31 = 2.1460748e-6
Q33 = 2.2123015e-7
ROOT22 = 1.7891679e-6
ROOT32 = 3.7393792e-7
ROOT44 = 7.3636953e-9
ROOT52 = 1.1428639e-7
ROOT54 = 2.1765803e-9
RPTIM = 4.37526908801129966e-3  # Earth rotation rate, rad/min
FASX2 = 0.13130908
FASX4 = 2.8843198
FASX6 = 0.37448087
G22 = 5.7686396
G32 = 0.95240898
G44 = 1.8014998
G52 = 1.0508330
G54 = 4.4108898

STEP2 = RESONANCE_STEP_MIN * RESONANCE_STEP_MIN / 2.0


class _BodyTerms(NamedTuple):
    """Geometry of one perturbing body (Sun or Moon) relative to the orbit."""

    s1: float
    s2: float
    s3: float
    s4: float
    s5: float
    s6: float
    s7: float
    z1: float
    z2: float
    z3: float
    z11: float
    z12: float
    z13: float
    z21: float
    z22: float
    z23: float
    z31: float
    z32: float
    z33: float


def _body_terms(zcosg, zsing, zcosi, zsini, zcosh, zsinh, cc,
                sinim, cosim, sinomm, cosomm, em, emsq, xnoi) -> _BodyTerms:
    betasq = 1.0 - emsq
    rtemsq = math.sqrt(betasq)

    a1 = zcosg * zcosh + zsing * zcosi * zsinh
    a3 = -zsing * zcosh + zcosg * zcosi * zsinh
    a7 = -zcosg * zsinh + zsing * zcosi * zcosh
    a8 = zsing * zsini
    a9 = zsing * zsinh + zcosg * zcosi * zcosh
    a10 = zcosg * zsini
    a2 = cosim * a7 + sinim * a8
    a4 = cosim * a9 + sinim * a10
    a5 = -sinim * a7 + cosim * a8
    a6 = -sinim * a9 + cosim * a10

    x1 = a1 * cosomm + a2 * sinomm
    x2 = a3 * cosomm + a4 * sinomm
    x3 = -a1 * sinomm + a2 * cosomm
    x4 = -a3 * sinomm + a4 * cosomm
    x5 = a5 * sinomm
    x6 = a6 * sinomm
    x7 = a5 * cosomm
    x8 = a6 * cosomm

    z31 = 12.0 * x1 * x1 - 3.0 * x3 * x3
    z32 = 24.0 * x1 * x2 - 6.0 * x3 * x4
    z33 = 12.0 * x2 * x2 - 3.0 * x4 * x4
    z1 = 3.0 * (a1 * a1 + a2 * a2) + z31 * emsq
    z2 = 6.0 * (a1 * a3 + a2 * a4) + z32 * emsq
    z3 = 3.0 * (a3 * a3 + a4 * a4) + z33 * emsq
    z11 = -6.0 * a1 * a5 + emsq * (-24.0 * x1 * x7 - 6.0 * x3 * x5)
    z12 = -6.0 * (a1 * a6 + a3 * a5) + emsq * (
        -24.0 * (x2 * x7 + x1 * x8) - 6.0 * (x3 * x6 + x4 * x5)
    )
    z13 = -6.0 * a3 * a6 + emsq * (-24.0 * x2 * x8 - 6.0 * x4 * x6)
    z21 = 6.0 * a2 * a5 + emsq * (24.0 * x1 * x5 - 6.0 * x3 * x7)
    z22 = 6.0 * (a4 * a5 + a2 * a6) + emsq * (
        24.0 * (x2 * x5 + x1 * x6) - 6.0 * (x4 * x7 + x3 * x8)
    )
    z23 = 6.0 * a4 * a6 + emsq * (24.0 * x2 * x6 - 6.0 * x4 * x8)
    z1 = z1 + z1 + betasq * z31
    z2 = z2 + z2 + betasq * z32
    z3 = z3 + z3 + betasq * z33

    s3 = cc * xnoi
    s2 = -0.5 * s3 / rtemsq
    s4 = s3 * rtemsq
    s1 = -15.0 * em * s4
    s5 = x1 * x3 + x2 * x4
    s6 = x2 * x3 + x1 * x4
    s7 = x2 * x4 - x1 * x3

    return _BodyTerms(s1, s2, s3, s4, s5, s6, s7,
                      z1, z2, z3, z11, z12, z13, z21, z22, z23, z31, z32, z33)


def _perturber_geometry(epoch: float, ecco: float, argpo: float, inclo: float,
                        nodeo: float, no: float
                        ) -> Tuple[_BodyTerms, _BodyTerms, LunarSolarTerms]:
    """Solar and lunar geometry at epoch plus the long-period amplitudes."""
    snodm = math.sin(nodeo)
    cnodm = math.cos(nodeo)
    sinomm = math.sin(argpo)
    cosomm = math.cos(argpo)
    sinim = math.sin(inclo)
    cosim = math.cos(inclo)
    emsq = ecco * ecco

    # Lunar node and orbit orientation from days since 1900 Jan 0.5
    day = epoch + 18261.5
    xnodce = (4.5236020 - 9.2422029e-4 * day) % TWOPI
    stem = math.sin(xnodce)
    ctem = math.cos(xnodce)
    zcosil = 0.91375164 - 0.03568096 * ctem
    zsinil = math.sqrt(1.0 - zcosil * zcosil)
    zsinhl = 0.089683511 * stem / zsinil
    zcoshl = math.sqrt(1.0 - zsinhl * zsinhl)
    gam = 5.8351514 + 0.0019443680 * day
    zx = 0.39785416 * stem / zsinil
    zy = zcoshl * ctem + 0.91744867 * zsinhl * stem
    zx = gam + math.atan2(zx, zy) - xnodce
    zcosgl = math.cos(zx)
    zsingl = math.sin(zx)

    xnoi = 1.0 / no
    solar = _body_terms(ZCOSGS, ZSINGS, ZCOSIS, ZSINIS, cnodm, snodm, C1SS,
                        sinim, cosim, sinomm, cosomm, ecco, emsq, xnoi)
    lunar = _body_terms(zcosgl, zsingl, zcosil, zsinil,
                        zcoshl * cnodm + zsinhl * snodm,
                        snodm * zcoshl - cnodm * zsinhl, C1L,
                        sinim, cosim, sinomm, cosomm, ecco, emsq, xnoi)

    amplitudes = LunarSolarTerms(
        e3=2.0 * lunar.s1 * lunar.s7,
        ee2=2.0 * lunar.s1 * lunar.s6,
        se2=2.0 * solar.s1 * solar.s6,
        se3=2.0 * solar.s1 * solar.s7,
        sgh2=2.0 * solar.s4 * solar.z32,
        sgh3=2.0 * solar.s4 * (solar.z33 - solar.z31),
        sgh4=-18.0 * solar.s4 * ZES,
        sh2=-2.0 * solar.s2 * solar.z22,
        sh3=-2.0 * solar.s2 * (solar.z23 - solar.z21),
        si2=2.0 * solar.s2 * solar.z12,
        si3=2.0 * solar.s2 * (solar.z13 - solar.z11),
        sl2=-2.0 * solar.s3 * solar.z2,
        sl3=-2.0 * solar.s3 * (solar.z3 - solar.z1),
        sl4=-2.0 * solar.s3 * (-21.0 - 9.0 * emsq) * ZES,
        xgh2=2.0 * lunar.s4 * lunar.z32,
        xgh3=2.0 * lunar.s4 * (lunar.z33 - lunar.z31),
        xgh4=-18.0 * lunar.s4 * ZEL,
        xh2=-2.0 * lunar.s2 * lunar.z22,
        xh3=-2.0 * lunar.s2 * (lunar.z23 - lunar.z21),
        xi2=2.0 * lunar.s2 * lunar.z12,
        xi3=2.0 * lunar.s2 * (lunar.z13 - lunar.z11),
        xl2=-2.0 * lunar.s3 * lunar.z2,
        xl3=-2.0 * lunar.s3 * (lunar.z3 - lunar.z1),
        xl4=-2.0 * lunar.s3 * (-21.0 - 9.0 * emsq) * ZEL,
        zmol=(4.7199672 + 0.22997150 * day - gam) % TWOPI,
        zmos=(6.2565837 + 0.017201977 * day) % TWOPI,
    )
    return solar, lunar, amplitudes


def classify_resonance(no: float, ecco: float) -> Resonance:
    """Resonance class from the recovered mean motion (rad/min)."""
    low, high = ONE_DAY_RESONANCE_BAND
    if low < no < high:
        return Resonance.ONE_DAY
    low, high = HALF_DAY_RESONANCE_BAND
    if low <= no <= high and ecco >= HALF_DAY_RESONANCE_MIN_ECCENTRICITY:
        return Resonance.HALF_DAY
    return Resonance.NONE


def _half_day_resonance(no: float, aonv: float, ecco: float,
                        sinim: float, cosim: float) -> dict:
    em = ecco
    emsq = ecco * ecco
    eoc = em * emsq
    cosisq = cosim * cosim

    g201 = -0.306 - (em - 0.64) * 0.440
    if em <= 0.65:
        g211 = 3.616 - 13.2470 * em + 16.2900 * emsq
        g310 = -19.302 + 117.3900 * em - 228.4190 * emsq + 156.5910 * eoc
        g322 = -18.9068 + 109.7927 * em - 214.6334 * emsq + 146.5816 * eoc
        g410 = -41.122 + 242.6940 * em - 471.0940 * emsq + 313.9530 * eoc
        g422 = -146.407 + 841.8800 * em - 1629.014 * emsq + 1083.4350 * eoc
        g520 = -532.114 + 3017.977 * em - 5740.032 * emsq + 3708.2760 * eoc
    else:
        g211 = -72.099 + 331.819 * em - 508.738 * emsq + 266.724 * eoc
        g310 = -346.844 + 1582.851 * em - 2415.925 * emsq + 1246.113 * eoc
        g322 = -342.585 + 1554.908 * em - 2366.899 * emsq + 1215.972 * eoc
        g410 = -1052.797 + 4758.686 * em - 7193.992 * emsq + 3651.957 * eoc
        g422 = -3581.690 + 16178.110 * em - 24462.770 * emsq + 12422.520 * eoc
        if em > 0.715:
            g520 = -5149.66 + 29936.92 * em - 54087.36 * emsq + 31324.56 * eoc
        else:
            g520 = 1464.74 - 4664.75 * em + 3763.64 * emsq
    if em < 0.7:
        g533 = -919.22770 + 4988.6100 * em - 9064.7700 * emsq + 5542.21 * eoc
        g521 = -822.71072 + 4568.6173 * em - 8491.4146 * emsq + 5337.524 * eoc
        g532 = -853.66600 + 4690.2500 * em - 8624.7700 * emsq + 5341.4 * eoc
    else:
        g533 = -37995.780 + 161616.52 * em - 229838.20 * emsq + 109377.94 * eoc
        g521 = -51752.104 + 218913.95 * em - 309468.16 * emsq + 146349.42 * eoc
        g532 = -40023.880 + 170470.89 * em - 242699.48 * emsq + 115605.82 * eoc

    sini2 = sinim * sinim
    f220 = 0.75 * (1.0 + 2.0 * cosim + cosisq)
    f221 = 1.5 * sini2
    f321 = 1.875 * sinim * (1.0 - 2.0 * cosim - 3.0 * cosisq)
    f322 = -1.875 * sinim * (1.0 + 2.0 * cosim - 3.0 * cosisq)
    f441 = 35.0 * sini2 * f220
    f442 = 39.3750 * sini2 * sini2
    f522 = 9.84375 * sinim * (
        sini2 * (1.0 - 2.0 * cosim - 5.0 * cosisq)
        + 0.33333333 * (-2.0 + 4.0 * cosim + 6.0 * cosisq)
    )
    f523 = sinim * (
        4.92187512 * sini2 * (-2.0 - 4.0 * cosim + 10.0 * cosisq)
        + 6.56250012 * (1.0 + 2.0 * cosim - 3.0 * cosisq)
    )
    f542 = 29.53125 * sinim * (
        2.0 - 8.0 * cosim + cosisq * (-12.0 + 8.0 * cosim + 10.0 * cosisq)
    )
    f543 = 29.53125 * sinim * (
        -2.0 - 8.0 * cosim + cosisq * (12.0 + 8.0 * cosim - 10.0 * cosisq)
    )

    ainv2 = aonv * aonv
    temp1 = 3.0 * no * no * ainv2
    temp = temp1 * ROOT22
    terms = {
        "d2201": temp * f220 * g201,
        "d2211": temp * f221 * g211,
    }
    temp1 = temp1 * aonv
    temp = temp1 * ROOT32
    terms["d3210"] = temp * f321 * g310
    terms["d3222"] = temp * f322 * g322
    temp1 = temp1 * aonv
    temp = 2.0 * temp1 * ROOT44
    terms["d4410"] = temp * f441 * g410
    terms["d4422"] = temp * f442 * g422
    temp1 = temp1 * aonv
    temp = temp1 * ROOT52
    terms["d5220"] = temp * f522 * g520
    terms["d5232"] = temp * f523 * g532
    temp = 2.0 * temp1 * ROOT54
    terms["d5421"] = temp * f542 * g521
    terms["d5433"] = temp * f543 * g533
    return terms


def _one_day_resonance(no: float, aonv: float, ecco: float,
                       sinim: float, cosim: float) -> dict:
    emsq = ecco * ecco
    g200 = 1.0 + emsq * (-2.5 + 0.8125 * emsq)
    g310 = 1.0 + 2.0 * emsq
    g300 = 1.0 + emsq * (-6.0 + 6.60937 * emsq)
    f220 = 0.75 * (1.0 + cosim) * (1.0 + cosim)
    f311 = 0.9375 * sinim * sinim * (1.0 + 3.0 * cosim) - 0.75 * (1.0 + cosim)
    f330 = 1.0 + cosim
    f330 = 1.875 * f330 * f330 * f330
    del1 = 3.0 * no * no * aonv * aonv
    return {
        "del1": del1 * f311 * g310 * Q31 * aonv,
        "del2": 2.0 * del1 * f220 * g200 * Q22,
        "del3": 3.0 * del1 * f330 * g300 * Q33 * aonv,
    }


def deep_space_init(epoch: float, ecco: float, argpo: float, inclo: float,
                    nodeo: float, mo: float, no: float, xke: float, gsto: float,
                    mdot: float, argpdot: float, nodedot: float) -> DeepSpaceTerms:
    """
    Derive lunar-solar and resonance terms for a deep-space orbit.

    Args:
        epoch: Days since 1949 December 31 00:00 UT
        ecco, argpo, inclo, nodeo, mo: Epoch elements (radians)
        no: Recovered mean motion n0" (rad/min)
        xke: Gravity model sqrt(mu) in Earth radii^1.5/min
        gsto: Greenwich sidereal time at epoch (rad)
        mdot, argpdot, nodedot: Geopotential secular rates (rad/min)

    Returns:
        DeepSpaceTerms with the resonance class fixed for the record's lifetime
    """
    solar, lunar, amplitudes = _perturber_geometry(epoch, ecco, argpo, inclo, nodeo, no)
    sinim = math.sin(inclo)
    cosim = math.cos(inclo)
    emsq = ecco * ecco
    near_equatorial = (inclo < LUNAR_SOLAR_MIN_INCLINATION
                       or inclo > math.pi - LUNAR_SOLAR_MIN_INCLINATION)

    # Solar secular rates
    ses = solar.s1 * ZNS * solar.s5
    sis = solar.s2 * ZNS * (solar.z11 + solar.z13)
    sls = -ZNS * solar.s3 * (solar.z1 + solar.z3 - 14.0 - 6.0 * emsq)
    sghs = solar.s4 * ZNS * (solar.z31 + solar.z33 - 6.0)
    shs = -ZNS * solar.s2 * (solar.z21 + solar.z23)
    if near_equatorial:
        shs = 0.0
    if sinim != 0.0:
        shs = shs / sinim
    sgs = sghs - cosim * shs

    # Lunar secular rates
    dedt = ses + lunar.s1 * ZNL * lunar.s5
    didt = sis + lunar.s2 * ZNL * (lunar.z11 + lunar.z13)
    dmdt = sls - ZNL * lunar.s3 * (lunar.z1 + lunar.z3 - 14.0 - 6.0 * emsq)
    sghl = lunar.s4 * ZNL * (lunar.z31 + lunar.z33 - 6.0)
    shll = -ZNL * lunar.s2 * (lunar.z21 + lunar.z23)
    if near_equatorial:
        shll = 0.0
    domdt = sgs + sghl
    dnodt = shs
    if sinim != 0.0:
        domdt = domdt - cosim / sinim * shll
        dnodt = dnodt + shll / sinim

    kind = classify_resonance(no, ecco)
    resonance = ResonanceTerms(kind=kind)
    if kind is not Resonance.NONE:
        theta = gsto % TWOPI
        aonv = math.pow(no / xke, X2O3)
        if kind is Resonance.HALF_DAY:
            resonance = ResonanceTerms(
                kind=kind,
                xlamo=(mo + nodeo + nodeo - theta - theta) % TWOPI,
                xfact=mdot + dmdt + 2.0 * (nodedot + dnodt - RPTIM) - no,
                **_half_day_resonance(no, aonv, ecco, sinim, cosim),
            )
        else:
            xpidot = argpdot + nodedot
            resonance = ResonanceTerms(
                kind=kind,
                xlamo=(mo + nodeo + argpo - theta) % TWOPI,
                xfact=mdot + xpidot - RPTIM + dmdt + domdt + dnodt - no,
                **_one_day_resonance(no, aonv, ecco, sinim, cosim),
            )

    logger.debug(f"Deep-space terms: resonance={kind.name} dedt={dedt:.3e} "
                 f"dmdt={dmdt:.3e} dnodt={dnodt:.3e}")
    return DeepSpaceTerms(
        lunar_solar=amplitudes,
        dedt=dedt,
        didt=didt,
        dmdt=dmdt,
        dnodt=dnodt,
        domdt=domdt,
        resonance=resonance,
    )


def _resonance_rates(res: ResonanceTerms, xli: float, xni: float, atime: float,
                     argpo: float, argpdot: float) -> Tuple[float, float, float]:
    """Mean-longitude rate, mean-motion rate and its derivative at one node."""
    xldot = xni + res.xfact
    if res.kind is Resonance.ONE_DAY:
        xndt = (res.del1 * math.sin(xli - FASX2)
                + res.del2 * math.sin(2.0 * (xli - FASX4))
                + res.del3 * math.sin(3.0 * (xli - FASX6)))
        xnddt = (res.del1 * math.cos(xli - FASX2)
                 + 2.0 * res.del2 * math.cos(2.0 * (xli - FASX4))
                 + 3.0 * res.del3 * math.cos(3.0 * (xli - FASX6)))
        return xndt, xldot, xnddt * xldot

    xomi = argpo + argpdot * atime
    x2omi = xomi + xomi
    x2li = xli + xli
    xndt = (res.d2201 * math.sin(x2omi + xli - G22)
            + res.d2211 * math.sin(xli - G22)
            + res.d3210 * math.sin(xomi + xli - G32)
            + res.d3222 * math.sin(-xomi + xli - G32)
            + res.d4410 * math.sin(x2omi + x2li - G44)
            + res.d4422 * math.sin(x2li - G44)
            + res.d5220 * math.sin(xomi + xli - G52)
            + res.d5232 * math.sin(-xomi + xli - G52)
            + res.d5421 * math.sin(xomi + x2li - G54)
            + res.d5433 * math.sin(-xomi + x2li - G54))
    xnddt = (res.d2201 * math.cos(x2omi + xli - G22)
             + res.d2211 * math.cos(xli - G22)
             + res.d3210 * math.cos(xomi + xli - G32)
             + res.d3222 * math.cos(-xomi + xli - G32)
             + res.d5220 * math.cos(xomi + xli - G52)
             + res.d5232 * math.cos(-xomi + xli - G52)
             + 2.0 * (res.d4410 * math.cos(x2omi + x2li - G44)
                      + res.d4422 * math.cos(x2li - G44)
                      + res.d5421 * math.cos(xomi + x2li - G54)
                      + res.d5433 * math.cos(-xomi + x2li - G54)))
    return xndt, xldot, xnddt * xldot


def integrate_resonance(res: ResonanceTerms, t: float, no: float,
                        argpo: float, argpdot: float) -> Tuple[float, float]:
    """
    Integrate mean motion and resonant mean longitude from epoch to ``t``.

    Fixed 720-minute steps with a second-order Taylor step for the remainder.

    Returns:
        (mean motion rad/min, mean longitude rad) at ``t``
    """
    delt = RESONANCE_STEP_MIN if t > 0.0 else -RESONANCE_STEP_MIN
    atime = 0.0
    xni = no
    xli = res.xlamo
    while True:
        xndt, xldot, xnddt = _resonance_rates(res, xli, xni, atime, argpo, argpdot)
        if abs(t - atime) < RESONANCE_STEP_MIN:
            break
        xli = xli + xldot * delt + xndt * STEP2
        xni = xni + xndt * delt + xnddt * STEP2
        atime = atime + delt

    ft = t - atime
    nm = xni + xndt * ft + xnddt * ft * ft * 0.5
    xl = xli + xldot * ft + xndt * ft * ft * 0.5
    return nm, xl


def deep_space_secular(record: SatelliteRecord, t: float, em: float, argpm: float,
                       inclm: float, mm: float, nodem: float, nm: float
                       ) -> Tuple[float, float, float, float, float, float]:
    """
    Apply lunar-solar secular rates and the resonance correction.

    Returns:
        (em, argpm, inclm, mm, nodem, nm) at ``t``
    """
    ds = record.deep_space
    em = em + ds.dedt * t
    inclm = inclm + ds.didt * t
    argpm = argpm + ds.domdt * t
    nodem = nodem + ds.dnodt * t
    mm = mm + ds.dmdt * t

    res = ds.resonance
    if res.kind is Resonance.NONE:
        return em, argpm, inclm, mm, nodem, nm

    theta = (record.gsto + t * RPTIM) % TWOPI
    nm, xl = integrate_resonance(res, t, record.no_unkozai, record.argpo,
                                 record.rates.argpdot)
    if res.kind is Resonance.ONE_DAY:
        mm = xl - nodem - argpm + theta
    else:
        mm = xl - 2.0 * nodem + 2.0 * theta
    return em, argpm, inclm, mm, nodem, nm


def lunar_solar_periodics(terms: LunarSolarTerms, t: float, ep: float, inclp: float,
                          nodep: float, argpp: float, mp: float, opsmode: str
                          ) -> Tuple[float, float, float, float, float]:
    """
    Add the lunar-solar long-period periodics to the mean elements.

    Below 0.2 rad inclination the node and perigee corrections are applied
    through the Lyddane (non-singular) form.

    Returns:
        (ep, inclp, nodep, argpp, mp)
    """
    zm = terms.zmos + ZNS * t
    zf = zm + 2.0 * ZES * math.sin(zm)
    sinzf = math.sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * math.cos(zf)
    ses = terms.se2 * f2 + terms.se3 * f3
    sis = terms.si2 * f2 + terms.si3 * f3
    sls = terms.sl2 * f2 + terms.sl3 * f3 + terms.sl4 * sinzf
    sghs = terms.sgh2 * f2 + terms.sgh3 * f3 + terms.sgh4 * sinzf
    shs = terms.sh2 * f2 + terms.sh3 * f3

    zm = terms.zmol + ZNL * t
    zf = zm + 2.0 * ZEL * math.sin(zm)
    sinzf = math.sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * math.cos(zf)
    sel = terms.ee2 * f2 + terms.e3 * f3
    sil = terms.xi2 * f2 + terms.xi3 * f3
    sll = terms.xl2 * f2 + terms.xl3 * f3 + terms.xl4 * sinzf
    sghl = terms.xgh2 * f2 + terms.xgh3 * f3 + terms.xgh4 * sinzf
    shll = terms.xh2 * f2 + terms.xh3 * f3

    pe = ses + sel
    pinc = sis + sil
    pl = sls + sll
    pgh = sghs + sghl
    ph = shs + shll

    inclp = inclp + pinc
    ep = ep + pe
    sinip = math.sin(inclp)
    cosip = math.cos(inclp)

    if inclp >= LYDDANE_INCLINATION:
        ph = ph / sinip
        pgh = pgh - cosip * ph
        return ep, inclp, nodep + ph, argpp + pgh, mp + pl

    # Lyddane form: perturb the node through its direction cosines
    sinop = math.sin(nodep)
    cosop = math.cos(nodep)
    alfdp = sinip * sinop + (ph * cosop + pinc * cosip * sinop)
    betdp = sinip * cosop + (-ph * sinop + pinc * cosip * cosop)
    nodep = math.fmod(nodep, TWOPI)
    if nodep < 0.0 and opsmode == OPSMODE_AFSPC:
        nodep = nodep + TWOPI
    xls = mp + argpp + pl + pgh + (cosip - pinc * sinip) * nodep
    xnoh = nodep
    nodep = math.atan2(alfdp, betdp)
    if nodep < 0.0 and opsmode == OPSMODE_AFSPC:
        nodep = nodep + TWOPI
    if abs(xnoh - nodep) > math.pi:
        if nodep < xnoh:
            nodep = nodep + TWOPI
        else:
            nodep = nodep - TWOPI
    mp = mp + pl
    argpp = xls - mp - cosip * nodep
    return ep, inclp, nodep, argpp, mp
