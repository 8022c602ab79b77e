"""
Reference Validation

Cross-checks a record against the ``sgp4`` package (Vallado's revised
reference code) initialized through ``Satrec.sgp4init`` with exactly the
same inputs, so both sides see identical epochs, units and gravity models.

Example:
    >>> report = compare_with_reference(record, range(0, 1441, 60))
    >>> report.passed(1e-6)
    True
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import numpy as np
from sgp4 import api as sgp4_api
from sgp4.api import Satrec

from config import DEFAULT_GRAVITY, MINUTES_PER_DAY, OPSMODE_IMPROVED, XPDOTP, EarthGravity
from orbit_core.elements import OrbitalElements
from orbit_core.errors import PropagationError
from orbit_core.propagator import propagate
from orbit_core.record import SatelliteRecord

logger = logging.getLogger(__name__)

_REFERENCE_GRAVITY = {
    "wgs72old": sgp4_api.WGS72OLD,
    "wgs72": sgp4_api.WGS72,
    "wgs84": sgp4_api.WGS84,
}


def reference_satrec(elements: OrbitalElements, gravity: EarthGravity = DEFAULT_GRAVITY,
                     opsmode: str = OPSMODE_IMPROVED) -> Satrec:
    """Build an ``sgp4.api.Satrec`` from the same elements and model options."""
    try:
        whichconst = _REFERENCE_GRAVITY[gravity.name]
    except KeyError:
        raise ValueError(f"No reference gravity model named '{gravity.name}'") from None

    satrec = Satrec()
    satrec.sgp4init(
        whichconst,
        opsmode,
        elements.catalog_number,
        elements.epoch_days_since_1950,
        elements.bstar,
        elements.mean_motion_dot / (XPDOTP * MINUTES_PER_DAY),
        elements.mean_motion_ddot / (XPDOTP * MINUTES_PER_DAY * MINUTES_PER_DAY),
        elements.eccentricity,
        elements.arg_perigee,
        elements.inclination,
        elements.mean_anomaly,
        elements.mean_motion_rad_per_min,
        elements.raan,
    )
    return satrec


@dataclass
class ValidationReport:
    """Largest differences against the reference over the compared times.

    ``disagreements`` lists (minutes, reference error code, own error code or
    None) for times where exactly one side failed.
    """

    catalog_number: int
    count: int = 0
    max_position_km: float = 0.0
    max_velocity_km_s: float = 0.0
    worst_minutes: Optional[float] = None
    disagreements: List[Tuple[float, int, Optional[int]]] = field(default_factory=list)

    def passed(self, tolerance_km: float = 1e-6) -> bool:
        return not self.disagreements and self.max_position_km <= tolerance_km

    def __str__(self):
        return (f"Catalog number {self.catalog_number}: {self.count} times, "
                f"max |dr|={self.max_position_km:.3e} km, "
                f"max |dv|={self.max_velocity_km_s:.3e} km/s, "
                f"{len(self.disagreements)} disagreements")


def compare_with_reference(record: SatelliteRecord, minutes: Iterable[float],
                           satrec: Optional[Satrec] = None) -> ValidationReport:
    """
    Propagate ``record`` and the reference side by side.

    Times where both sides fail are skipped; times where only one fails are
    recorded as disagreements.
    """
    if satrec is None:
        satrec = reference_satrec(record.elements, record.gravity, record.opsmode)

    report = ValidationReport(catalog_number=record.catalog_number)
    for t in minutes:
        t = float(t)
        code, r_ref, v_ref = satrec.sgp4_tsince(t)
        try:
            vector = propagate(record, t)
        except PropagationError as exc:
            if code == 0:
                report.disagreements.append((t, code, exc.code))
                logger.warning(f"{report.catalog_number} t={t}: reference propagated, got {exc}")
            continue
        if code != 0:
            report.disagreements.append((t, code, None))
            logger.warning(f"{report.catalog_number} t={t}: reference failed with code {code}")
            continue

        dr = float(np.linalg.norm(vector.position - np.asarray(r_ref)))
        dv = float(np.linalg.norm(vector.velocity - np.asarray(v_ref)))
        report.count += 1
        if dr > report.max_position_km:
            report.max_position_km = dr
            report.worst_minutes = t
        report.max_velocity_km_s = max(report.max_velocity_km_s, dv)

    logger.info(str(report))
    return report
