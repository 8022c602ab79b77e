"""
Orbital Element Record

Immutable mean elements as distributed in a two-line element set. Values are
stored the way the catalog publishes them (degrees, revolutions per day,
fractional day of year); conversion to the model's internal units happens
through the read-only accessors below.

Constructing a record never validates the physics. ``initialize`` does, so a
record with e.g. ``eccentricity=1.5`` can exist and is rejected there with
``InvalidElements``.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Tuple

from config import DEG2RAD, JD_1950_ORIGIN, MINUTES_PER_DAY, XPDOTP


@dataclass(frozen=True)
class OrbitalElements:
    """Mean orbital elements at epoch.

    Attributes:
        epoch_year: Four-digit epoch year
        epoch_day: Day of year with fraction (1.0 is 1 January 00:00 UTC)
        inclination_deg: Inclination (degrees)
        raan_deg: Right ascension of the ascending node (degrees)
        eccentricity: Eccentricity (dimensionless)
        arg_perigee_deg: Argument of perigee (degrees)
        mean_anomaly_deg: Mean anomaly (degrees)
        mean_motion: Kozai mean motion (rev/day)
        bstar: Drag term (1/Earth radii)
        mean_motion_dot: First derivative of mean motion / 2 (rev/day^2)
        mean_motion_ddot: Second derivative of mean motion / 6 (rev/day^3)
    """

    epoch_year: int
    epoch_day: float
    inclination_deg: float
    raan_deg: float
    eccentricity: float
    arg_perigee_deg: float
    mean_anomaly_deg: float
    mean_motion: float
    bstar: float = 0.0
    mean_motion_dot: float = 0.0
    mean_motion_ddot: float = 0.0
    catalog_number: int = 0
    classification: str = "U"
    international_designator: str = ""
    element_set_number: int = 0
    revolution_number: int = 0
    ephemeris_type: int = 0
    name: str = ""

    @property
    def inclination(self) -> float:
        return self.inclination_deg * DEG2RAD

    @property
    def raan(self) -> float:
        return self.raan_deg * DEG2RAD

    @property
    def arg_perigee(self) -> float:
        return self.arg_perigee_deg * DEG2RAD

    @property
    def mean_anomaly(self) -> float:
        return self.mean_anomaly_deg * DEG2RAD

    @property
    def mean_motion_rad_per_min(self) -> float:
        """Kozai mean motion in rad/min, the initializer's input."""
        return self.mean_motion / XPDOTP

    @property
    def julian_date(self) -> Tuple[float, float]:
        """Epoch as (whole Julian date at 0h UTC, fraction of day)."""
        year = self.epoch_year
        # Julian date of 0 January 0h, valid 1901..2099
        jan0 = 365.0 * year + (year - 1) // 4 + 1721044.5
        whole_day = math.floor(self.epoch_day)
        return jan0 + whole_day, self.epoch_day - whole_day

    @property
    def epoch_days_since_1950(self) -> float:
        """Days since 1949 December 31 00:00 UT, the model's epoch count."""
        jd, fraction = self.julian_date
        return (jd - JD_1950_ORIGIN) + fraction

    @property
    def epoch_datetime(self) -> datetime:
        return datetime(self.epoch_year, 1, 1, tzinfo=timezone.utc) + timedelta(
            days=self.epoch_day - 1.0
        )

    def minutes_since_epoch(self, when: datetime) -> float:
        """Minutes from epoch to ``when``; naive datetimes are taken as UTC."""
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        return (when - self.epoch_datetime).total_seconds() / 60.0

    def datetime_at(self, minutes_since_epoch: float) -> datetime:
        return self.epoch_datetime + timedelta(minutes=minutes_since_epoch)

    @property
    def period_minutes(self) -> float:
        """Nominal period from the catalog mean motion."""
        return MINUTES_PER_DAY / self.mean_motion
