"""
Error taxonomy for the propagation pipeline.

Failures are contained at the narrowest scope: a bad element set drops one
satellite, a bad instant drops one sample, and only a total catalog fetch
failure reaches the user.
"""

from dataclasses import dataclass
from datetime import datetime


class OrbitTrackError(Exception):
    """Base class for orbit track errors."""


class DecodeError(OrbitTrackError, ValueError):
    """Element set is not well-formed TLE text."""

    def __init__(self, reason: str, line1: str = "", line2: str = ""):
        super().__init__(reason)
        self.reason = reason
        self.line1 = line1
        self.line2 = line2


class DegenerateOrbitError(OrbitTrackError):
    """Orbit has no usable period (mean motion not positive or non-finite)."""


class FetchFailure(OrbitTrackError):
    """Catalog could not be retrieved from any configured source."""


@dataclass(frozen=True)
class PropagationFailure:
    """
    No position is available at ``instant``.

    Returned by value, never raised. ``error_code`` is the sgp4 library
    code (1-6), -1 for an instant outside the validity window or -2 for
    non-finite output.
    """

    error_code: int
    message: str
    instant: datetime
