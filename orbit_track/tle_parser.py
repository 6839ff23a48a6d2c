"""
TLE Parser Module

Splits raw catalog text into two-line element records, decodes and validates
element sets into the state used by the propagator, and projects that state
into human-readable orbital elements.

Parsing is lenient: malformed catalog lines are skipped and never fail the
batch. Decoding is strict: an element set must match the NORAD fixed-width
format byte for byte, checksums included.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, NamedTuple

from sgp4.api import Satrec

from orbit_track.errors import DecodeError

logger = logging.getLogger(__name__)

TLE_LINE_LENGTH = 69
UNKNOWN_NAME = "Unknown"

_CATALOG_NUMBER = re.compile(r"^[ 0-9A-Z][ 0-9]{3}[0-9]$")
_EPOCH = re.compile(r"^\d{2}[ \d]{2}\d\.\d+$")
_FIRST_DERIVATIVE = re.compile(r"^[ +-]\.\d{8}$")
_IMPLIED_DECIMAL = re.compile(r"^[ +-]\d{5}[+-]\d$")
_ANGLE = re.compile(r"^[ \d]{2}\d\.\d{4}$")
_ECCENTRICITY = re.compile(r"^\d{7}$")
_MEAN_MOTION = re.compile(r"^[ \d]\d\.\d{8}$")
_OPTIONAL_INTEGER = re.compile(r"^[ \d]+$")

# (name, start, end, pattern) column layouts, zero-based half-open slices
_LINE1_FIELDS = (
    ("catalog number", 2, 7, _CATALOG_NUMBER),
    ("epoch", 18, 32, _EPOCH),
    ("mean motion first derivative", 33, 43, _FIRST_DERIVATIVE),
    ("mean motion second derivative", 44, 52, _IMPLIED_DECIMAL),
    ("B* drag term", 53, 61, _IMPLIED_DECIMAL),
    ("element set number", 64, 68, _OPTIONAL_INTEGER),
)
_LINE2_FIELDS = (
    ("catalog number", 2, 7, _CATALOG_NUMBER),
    ("inclination", 8, 16, _ANGLE),
    ("right ascension of ascending node", 17, 25, _ANGLE),
    ("eccentricity", 26, 33, _ECCENTRICITY),
    ("argument of perigee", 34, 42, _ANGLE),
    ("mean anomaly", 43, 51, _ANGLE),
    ("mean motion", 52, 63, _MEAN_MOTION),
    ("revolution number", 63, 68, _OPTIONAL_INTEGER),
)


class RawElementRecord(NamedTuple):
    """One catalog entry as found in the raw text."""

    name: str
    line1: str
    line2: str


@dataclass(frozen=True)
class DecodedOrbitalState:
    """
    Decoded element set, created once per satellite and reused for every
    propagation against it.

    Angles are in radians and mean motion in radians/minute, as the sgp4
    library holds them.
    """

    catalog_number: int
    epoch: datetime
    mean_motion: float
    inclination: float
    raan: float
    eccentricity: float
    arg_perigee: float
    mean_anomaly: float
    bstar: float
    satrec: Satrec = field(repr=False, compare=False)

    @property
    def mean_motion_rev_per_day(self) -> float:
        return self.mean_motion * 1440.0 / (2.0 * math.pi)


class TLEParser:
    """
    Parser and decoder for Two-Line Element (TLE) sets.

    Provides methods for:
    - Splitting multi-satellite catalog text into records
    - Validating and decoding element sets for SGP4
    - Checksum computation
    """

    def parse_catalog(self, text: str) -> List[RawElementRecord]:
        """
        Split catalog text into element records.

        Args:
            text: Zero or more two- or three-line blocks, any line endings

        Returns:
            Records in input order; empty when no line pair is found
        """
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        records = []

        i = 0
        while i < len(lines) - 1:
            line1, line2 = lines[i], lines[i + 1]
            if line1.startswith("1 ") and line2.startswith("2 "):
                name = lines[i - 1] if i > 0 else UNKNOWN_NAME
                records.append(RawElementRecord(name, line1, line2))
                i += 2
                continue
            if line1.startswith("1 "):
                logger.debug(f"Skipping unmatched line 1: {line1[:24]}")
            i += 1

        return records

    def decode(self, line1: str, line2: str) -> DecodedOrbitalState:
        """
        Validate and decode an element set.

        Args:
            line1: First line of TLE
            line2: Second line of TLE

        Returns:
            Decoded orbital state holding the initialized Satrec

        Raises:
            DecodeError: if the lines are not well-formed TLE text
        """
        line1 = line1.rstrip()
        line2 = line2.rstrip()

        self._validate_line(line1, "1", _LINE1_FIELDS, line1, line2)
        self._validate_line(line2, "2", _LINE2_FIELDS, line1, line2)

        if line1[2:7] != line2[2:7]:
            raise DecodeError(
                f"Catalog numbers differ: {line1[2:7]!r} vs {line2[2:7]!r}", line1, line2
            )

        try:
            satellite = Satrec.twoline2rv(line1, line2)
        except (ValueError, ZeroDivisionError) as e:
            raise DecodeError(f"SGP4 rejected element set: {e}", line1, line2)

        if satellite.error != 0:
            raise DecodeError(
                f"SGP4 initialization failed with error {satellite.error}", line1, line2
            )

        return DecodedOrbitalState(
            catalog_number=int(satellite.satnum),
            epoch=self.epoch_to_datetime(satellite.epochyr, satellite.epochdays),
            mean_motion=satellite.no_kozai,
            inclination=satellite.inclo,
            raan=satellite.nodeo,
            eccentricity=satellite.ecco,
            arg_perigee=satellite.argpo,
            mean_anomaly=satellite.mo,
            bstar=satellite.bstar,
            satrec=satellite,
        )

    def epoch_to_datetime(self, epoch_year: int, epoch_days: float) -> datetime:
        """
        Convert TLE epoch to datetime.

        Args:
            epoch_year: Two-digit year
            epoch_days: Day of year with fractional part

        Returns:
            Datetime object in UTC
        """
        year = 1900 + epoch_year if epoch_year >= 57 else 2000 + epoch_year
        # Day 1 is Jan 1
        return datetime(year, 1, 1, tzinfo=timezone.utc) + timedelta(days=epoch_days - 1.0)

    def checksum(self, line: str) -> int:
        """Calculate TLE checksum: digits summed, minus signs count one."""
        total = 0
        for char in line[:68]:
            if char.isdigit():
                total += int(char)
            elif char == "-":
                total += 1
        return total % 10

    def _validate_line(self, line, number, fields, line1, line2):
        if len(line) != TLE_LINE_LENGTH:
            raise DecodeError(
                f"Line {number} has {len(line)} characters, expected {TLE_LINE_LENGTH}",
                line1, line2,
            )
        if not line.startswith(number + " "):
            raise DecodeError(f"Line {number} must start with '{number} '", line1, line2)

        for name, start, end, pattern in fields:
            if not pattern.match(line[start:end]):
                raise DecodeError(
                    f"Line {number} {name} field is malformed: {line[start:end]!r}",
                    line1, line2,
                )

        if not line[68].isdigit() or int(line[68]) != self.checksum(line):
            raise DecodeError(
                f"Line {number} checksum mismatch: expected {self.checksum(line)}, "
                f"found {line[68]!r}",
                line1, line2,
            )


_parser = TLEParser()


def parse_catalog(text: str) -> List[RawElementRecord]:
    """Split catalog text into element records (see TLEParser.parse_catalog)."""
    return _parser.parse_catalog(text)


def decode(line1: str, line2: str) -> DecodedOrbitalState:
    """Validate and decode an element set (see TLEParser.decode)."""
    return _parser.decode(line1, line2)


def checksum(line: str) -> int:
    return _parser.checksum(line)


def orbital_elements(state: DecodedOrbitalState) -> Dict[str, Any]:
    """Orbital elements in display units (degrees, revolutions/day)."""
    return {
        "catalog_number": state.catalog_number,
        "epoch": state.epoch.isoformat(),
        "inclination_deg": math.degrees(state.inclination),
        "raan_deg": math.degrees(state.raan),
        "eccentricity": state.eccentricity,
        "arg_perigee_deg": math.degrees(state.arg_perigee),
        "mean_anomaly_deg": math.degrees(state.mean_anomaly),
        "mean_motion_rev_per_day": state.mean_motion_rev_per_day,
        "bstar_drag": state.bstar,
    }


def format_elements(state: DecodedOrbitalState) -> Dict[str, str]:
    """Display strings for a satellite's info panel."""
    elements = orbital_elements(state)
    return {
        "Catalog Number": str(elements["catalog_number"]),
        "Inclination": f"{elements['inclination_deg']:.4f}°",
        "RA of Ascending Node": f"{elements['raan_deg']:.4f}°",
        "Eccentricity": f"{elements['eccentricity']:.7f}",
        "Argument of Perigee": f"{elements['arg_perigee_deg']:.4f}°",
        "Mean Anomaly": f"{elements['mean_anomaly_deg']:.4f}°",
        "Mean Motion": f"{elements['mean_motion_rev_per_day']:.4f} revs/day",
    }
