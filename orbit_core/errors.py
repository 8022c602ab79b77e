"""
Propagation Errors

Typed failures raised by the initializer, the propagator and the TLE decoder.
Every failure carries the numeric code of the reference SGP4 implementation
and a message with the physical meaning of the condition, so callers can
decide whether to discard the element set, stop propagating, or retry.

None of these are recovered internally: a wrong position is worse than no
position for tracking and conjunction screening.
"""

from typing import Dict, Optional

SGP4_ERROR_CODES: Dict[int, str] = {
    0: "No error",
    1: "Mean eccentricity < 0.0 or > 1.0",
    2: "Mean motion < 0.0",
    3: "Perturbed eccentricity < 0.0 or > 1.0",
    4: "Semi-latus rectum < 0.0",
    5: "Epoch elements are sub-orbital",
    6: "Satellite has decayed",
    7: "Kepler solver did not converge",
}

ERROR_MEAN_ECCENTRICITY = 1
ERROR_MEAN_MOTION = 2
ERROR_PERTURBED_ECCENTRICITY = 3
ERROR_SEMI_LATUS_RECTUM = 4
ERROR_SUB_ORBITAL = 5
ERROR_DECAYED = 6
ERROR_KEPLER = 7


class PropagationError(Exception):
    """Base class for SGP4/SDP4 failures."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[SGP4 error {code}: {SGP4_ERROR_CODES.get(code, 'Unknown')}] {message}")

    @property
    def description(self) -> str:
        return SGP4_ERROR_CODES.get(self.code, f"Unknown error code {self.code}")


class InvalidElements(PropagationError):
    """Element set cannot be initialized.

    Raised for non-positive mean motion, eccentricity outside [0, 1),
    non-finite values, and epoch orbits too degenerate for the drag model.
    The caller must correct or discard the element set.
    """


class Decayed(PropagationError):
    """The propagated orbit has reached the Earth's surface.

    Terminal for this satellite at this and every later time; earlier times
    may still propagate.
    """

    def __init__(self, code: int, message: str, minutes_since_epoch: float):
        self.minutes_since_epoch = minutes_since_epoch
        super().__init__(code, message)


class KeplerNonConvergence(PropagationError):
    """Newton iteration for the eccentric anomaly hit its iteration cap."""

    def __init__(self, mean_anomaly: float, eccentricity: float, iterations: int):
        self.mean_anomaly = mean_anomaly
        self.eccentricity = eccentricity
        self.iterations = iterations
        super().__init__(
            ERROR_KEPLER,
            f"Kepler's equation did not converge after {iterations} iterations "
            f"(M={mean_anomaly:.12f} rad, e={eccentricity:.9f}). "
            f"Physical meaning: the orbit is numerically degenerate (eccentricity "
            f"close to 1), so no trustworthy eccentric anomaly exists.",
        )


class TLEFormatError(ValueError):
    """A two-line element set does not follow the fixed-column format."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"TLE line {line_number}: {message}"
        super().__init__(message)
