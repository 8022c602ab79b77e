"""
TLE Parser Module

Decodes the fixed-column Two-Line Element format into ``OrbitalElements``.

Column layout (1-based, inclusive):

    Line 1: 1 line number, 3-7 catalog number, 8 classification,
            10-17 international designator, 19-20 epoch year,
            21-32 epoch day, 34-43 ndot/2, 45-52 nddot/6 (implied decimal),
            54-61 B* (implied decimal), 63 ephemeris type,
            65-68 element set number, 69 checksum
    Line 2: 1 line number, 3-7 catalog number, 9-16 inclination,
            18-25 RAAN, 27-33 eccentricity (implied leading decimal),
            35-42 argument of perigee, 44-51 mean anomaly,
            53-63 mean motion, 64-68 revolution number, 69 checksum

References:
    Hoots, F. R., & Roehrich, R. L. (1980). Spacetrack Report No. 3.
    CelesTrak, "NORAD Two-Line Element Set Format".
"""

import logging
from typing import Tuple

from orbit_core.elements import OrbitalElements
from orbit_core.errors import TLEFormatError

logger = logging.getLogger(__name__)

TLE_LINE_LENGTH = 69
# Two-digit years from this value belong to the 1900s (Sputnik era onward)
YEAR_PIVOT = 57
# Alpha-5 leading letters, worth 10 upward
ALPHA5_LETTERS = "ABCDEFGHJKLMNPQRSTUVWXYZ"


def compute_checksum(line: str) -> int:
    """Modulo-10 checksum over the first 68 columns; '-' counts as 1."""
    total = 0
    for char in line[:68]:
        if char.isdigit():
            total += int(char)
        elif char == "-":
            total += 1
    return total % 10


def validate_tle_line(line: str, line_number: int, verify_checksum: bool = True) -> str:
    """
    Check length, line number and checksum of one TLE line.

    Args:
        line: Raw line, trailing whitespace allowed
        line_number: Expected line number (1 or 2)
        verify_checksum: Compare column 69 against the computed checksum

    Returns:
        The line with trailing whitespace removed

    Raises:
        TLEFormatError: If the line violates the format
    """
    line = line.rstrip()
    if len(line) != TLE_LINE_LENGTH:
        raise TLEFormatError(
            f"expected {TLE_LINE_LENGTH} characters, got {len(line)}", line_number
        )
    if line[0] != str(line_number) or line[1] != " ":
        raise TLEFormatError(f"line must start with '{line_number} '", line_number)

    if verify_checksum:
        expected = compute_checksum(line)
        if not line[68].isdigit() or int(line[68]) != expected:
            raise TLEFormatError(
                f"checksum mismatch (column 69 is '{line[68]}', computed {expected})",
                line_number,
            )
    return line


def exp_to_dec(field: str) -> float:
    """
    Decode an implied-decimal exponent field such as ' 12345-3' or '-11606-4'.

    The first character is the sign, the next five the digits after an
    implied leading decimal point, the last two a signed power of ten.
    """
    if not field.strip():
        return 0.0
    sign = field[0]
    mantissa = float((sign if sign == "-" else "") + "." + field[1:6].replace(" ", "0"))
    exponent = int(field[6:8].replace(" ", "") or 0)
    return mantissa * 10.0 ** exponent


def decode_catalog_number(field: str, line_number: int = 1) -> int:
    """
    Decode columns 3-7, including the Alpha-5 form for numbers above 99999.

    Alpha-5 replaces the leading digit with a letter worth 10-33, skipping
    I and O: 'A0001' is 100001 and 'Z9999' is 339999.
    """
    text = field.strip()
    if text and text[0].isalpha():
        letter = text[0].upper()
        if len(text) == 5 and letter in ALPHA5_LETTERS and text[1:].isdigit():
            return (ALPHA5_LETTERS.index(letter) + 10) * 10000 + int(text[1:])
        raise TLEFormatError(f"cannot decode Alpha-5 catalog number from '{field}'",
                             line_number)
    try:
        return int(text or 0)
    except ValueError:
        raise TLEFormatError(f"cannot decode catalog number from '{field}'",
                             line_number) from None


def _field(line: str, start: int, end: int, line_number: int, name: str, cast=float):
    text = line[start:end]
    try:
        if cast is int:
            return int(text.strip() or 0)
        return cast(text)
    except ValueError:
        raise TLEFormatError(f"cannot decode {name} from '{text}'", line_number) from None


def parse_tle(line1: str, line2: str, name: str = "",
              verify_checksum: bool = True) -> OrbitalElements:
    """
    Parse TLE lines into an element record.

    Args:
        line1: First line of TLE
        line2: Second line of TLE
        name: Optional satellite name (line 0 of a three-line set)
        verify_checksum: Reject lines whose checksum digit is wrong

    Returns:
        OrbitalElements with angles in degrees and mean motion in rev/day

    Raises:
        TLEFormatError: On any format violation
    """
    line1 = validate_tle_line(line1, 1, verify_checksum)
    line2 = validate_tle_line(line2, 2, verify_checksum)

    catalog_number = decode_catalog_number(line1[2:7], 1)
    if decode_catalog_number(line2[2:7], 2) != catalog_number:
        raise TLEFormatError(
            f"catalog numbers differ between lines ({line1[2:7]} vs {line2[2:7]})"
        )

    two_digit_year = _field(line1, 18, 20, 1, "epoch year", int)
    epoch_year = 1900 + two_digit_year if two_digit_year >= YEAR_PIVOT else 2000 + two_digit_year

    try:
        nddot = exp_to_dec(line1[44:52])
        bstar = exp_to_dec(line1[53:61])
    except ValueError:
        raise TLEFormatError("cannot decode exponent field", 1) from None

    eccentricity_digits = line2[26:33].replace(" ", "0")
    if not eccentricity_digits.isdigit():
        raise TLEFormatError(f"cannot decode eccentricity from '{line2[26:33]}'", 2)

    elements = OrbitalElements(
        epoch_year=epoch_year,
        epoch_day=_field(line1, 20, 32, 1, "epoch day"),
        inclination_deg=_field(line2, 8, 16, 2, "inclination"),
        raan_deg=_field(line2, 17, 25, 2, "right ascension"),
        eccentricity=float("0." + eccentricity_digits),
        arg_perigee_deg=_field(line2, 34, 42, 2, "argument of perigee"),
        mean_anomaly_deg=_field(line2, 43, 51, 2, "mean anomaly"),
        mean_motion=_field(line2, 52, 63, 2, "mean motion"),
        bstar=bstar,
        mean_motion_dot=_field(line1, 33, 43, 1, "first derivative of mean motion"),
        mean_motion_ddot=nddot,
        catalog_number=catalog_number,
        classification=line1[7].strip() or "U",
        international_designator=line1[9:17].strip(),
        element_set_number=_field(line1, 64, 68, 1, "element set number", int),
        revolution_number=_field(line2, 63, 68, 2, "revolution number", int),
        ephemeris_type=_field(line1, 62, 63, 1, "ephemeris type", int),
        name=name.strip(),
    )
    logger.debug(f"Parsed TLE for catalog number {catalog_number} epoch {epoch_year}/{elements.epoch_day}")
    return elements


def split_tle_text(text: str) -> Tuple[str, str, str]:
    """Split a two- or three-line block into (name, line1, line2)."""
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) == 2:
        return "", lines[0], lines[1]
    if len(lines) == 3:
        name = lines[0].strip()
        if name.startswith("0 "):
            name = name[2:]
        return name, lines[1], lines[2]
    raise TLEFormatError(f"expected 2 or 3 non-blank lines, got {len(lines)}")


def parse_tle_text(text: str, verify_checksum: bool = True) -> OrbitalElements:
    """Parse a two-line or three-line (name first) element set block."""
    name, line1, line2 = split_tle_text(text)
    return parse_tle(line1, line2, name=name, verify_checksum=verify_checksum)
