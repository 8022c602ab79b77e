"""
Secular Propagator

Advances the mean elements to ``t`` minutes from epoch: J2/J4 secular rates
of the angles, atmospheric drag decay of semi-major axis and eccentricity,
and for deep-space records the lunar-solar secular rates and resonance
integration. The regime decides the path once, at the top of
``secular_update``.

Termination conditions raise ``Decayed``:

    mean motion not positive              code 2
    drag polynomial in a collapsed to 0   code 6
    mean eccentricity >= 1 - 1e-6 or < -0.001   code 1
    mean perigee at or below the surface  code 6

A mean eccentricity in [-0.001, 1e-6) is held at 1e-6 (circular-orbit floor).
"""

import logging
import math

from config import (
    MAX_ECCENTRICITY,
    MIN_ECCENTRICITY,
    NEGATIVE_ECCENTRICITY_LIMIT,
    TWOPI,
    X2O3,
)
from orbit_core.deep_space import deep_space_secular
from orbit_core.errors import (
    ERROR_DECAYED,
    ERROR_MEAN_ECCENTRICITY,
    ERROR_MEAN_MOTION,
    Decayed,
)
from orbit_core.record import Regime, SatelliteRecord
from orbit_core.state import MeanElements

logger = logging.getLogger(__name__)


def _decayed(record: SatelliteRecord, code: int, message: str, t: float) -> Decayed:
    logger.warning(f"Catalog number {record.catalog_number} at t={t:.3f} min: {message}")
    return Decayed(code, message, t)


def secular_update(record: SatelliteRecord, t: float) -> MeanElements:
    """
    Mean elements at ``t`` minutes since epoch.

    Args:
        record: Initialized satellite record
        t: Minutes since epoch (negative for earlier times)

    Returns:
        MeanElements with node, perigee and mean anomaly reduced to one
        revolution

    Raises:
        Decayed: If the mean orbit has decayed by ``t``
    """
    rates = record.rates
    drag = record.drag

    xmdf = record.mo + rates.mdot * t
    argpdf = record.argpo + rates.argpdot * t
    nodedf = record.nodeo + rates.nodedot * t
    argpm = argpdf
    mm = xmdf
    t2 = t * t
    nodem = nodedf + rates.nodecf * t2
    tempa = 1.0 - drag.cc1 * t
    tempe = record.bstar * drag.cc4 * t
    templ = drag.t2cof * t2

    if not drag.simplified:
        delomg = drag.omgcof * t
        delmtemp = 1.0 + drag.eta * math.cos(xmdf)
        delm = drag.xmcof * (delmtemp * delmtemp * delmtemp - drag.delmo)
        temp = delomg + delm
        mm = xmdf + temp
        argpm = argpdf - temp
        t3 = t2 * t
        t4 = t3 * t
        tempa = tempa - drag.d2 * t2 - drag.d3 * t3 - drag.d4 * t4
        tempe = tempe + record.bstar * drag.cc5 * (math.sin(mm) - drag.sinmao)
        templ = templ + drag.t3cof * t3 + t4 * (drag.t4cof + t * drag.t5cof)

    nm = record.no_unkozai
    em = record.ecco
    inclm = record.inclo
    if record.regime is Regime.DEEP_SPACE:
        em, argpm, inclm, mm, nodem, nm = deep_space_secular(
            record, t, em, argpm, inclm, mm, nodem, nm
        )

    if nm <= 0.0:
        raise _decayed(
            record, ERROR_MEAN_MOTION,
            f"Mean motion {nm:.6e} rad/min is not positive. Physical meaning: the "
            f"resonance integration has driven the orbit out of the model's validity.",
            t,
        )
    if tempa <= 0.0:
        raise _decayed(
            record, ERROR_DECAYED,
            f"Satellite has decayed (drag term collapsed at t={t:.1f} min). "
            f"Physical meaning: atmospheric drag has removed the orbital energy; the "
            f"satellite has re-entered.",
            t,
        )

    am = math.pow(record.gravity.xke / nm, X2O3) * tempa * tempa
    nm = record.gravity.xke / math.pow(am, 1.5)
    em = em - tempe

    if em >= MAX_ECCENTRICITY or em < NEGATIVE_ECCENTRICITY_LIMIT:
        raise _decayed(
            record, ERROR_MEAN_ECCENTRICITY,
            f"Mean eccentricity {em:.9f} left the model range. Physical meaning: drag "
            f"has circularised past zero or the orbit is no longer bound.",
            t,
        )
    if em < MIN_ECCENTRICITY:
        if record.ecco >= MIN_ECCENTRICITY:
            raise _decayed(
                record, ERROR_MEAN_ECCENTRICITY,
                f"Mean eccentricity {em:.3e} fell below {MIN_ECCENTRICITY}. Physical "
                f"meaning: drag has circularised the orbit past the model's floor.",
                t,
            )
        # circular at epoch
        logger.debug(f"Mean eccentricity {em:.3e} held at {MIN_ECCENTRICITY}")
        em = MIN_ECCENTRICITY

    if am * (1.0 - em) <= 1.0:
        raise _decayed(
            record, ERROR_DECAYED,
            f"Mean perigee radius {am * (1.0 - em):.6f} ER is at or below the surface. "
            f"Physical meaning: the satellite has re-entered.",
            t,
        )

    mm = mm + record.no_unkozai * templ
    xlm = mm + argpm + nodem
    nodem = math.fmod(nodem, TWOPI)
    argpm = argpm % TWOPI
    xlm = xlm % TWOPI
    mm = (xlm - argpm - nodem) % TWOPI

    return MeanElements(
        minutes_since_epoch=t,
        semi_major_axis=am,
        eccentricity=em,
        inclination=inclm,
        raan=nodem,
        arg_perigee=argpm,
        mean_anomaly=mm,
        mean_motion=nm,
    )
