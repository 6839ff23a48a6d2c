"""
SGP4 Propagation

Wraps the sgp4 library integrator behind a contract that never raises for a
decoded state: every instant yields either an inertial position or a
PropagationFailure value that callers skip or replace with a sentinel.
"""

import logging
import math
from datetime import datetime, timezone
from typing import NamedTuple, Optional, Tuple, Union

from sgp4.api import jday

from config import MAX_EPOCH_AGE_DAYS, SECONDS_PER_DAY
from orbit_track.errors import PropagationFailure
from orbit_track.tle_parser import DecodedOrbitalState

logger = logging.getLogger(__name__)


# SGP4 error code meanings
SGP4_ERROR_CODES = {
    0: "No error",
    1: "Mean eccentricity < 0.0 or > 1.0",
    2: "Mean motion < 0.0",
    3: "Perturbed eccentricity < 0.0 or > 1.0",
    4: "Semi-latus rectum < 0.0",
    5: "Satellite has decayed",
    6: "Satellite has decayed (low altitude)",
}
OUTSIDE_EPOCH_WINDOW = -1
NON_FINITE_RESULT = -2


class InertialPosition(NamedTuple):
    """Position in km in the TEME inertial frame, valid only at its instant."""

    x: float
    y: float
    z: float


def as_utc(instant: datetime) -> datetime:
    """Treat naive datetimes as UTC and normalize aware ones to UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def datetime_to_jd_fr(instant: datetime) -> Tuple[float, float]:
    """
    Convert datetime to Julian date and fraction.

    Args:
        instant: Datetime object (naive means UTC)

    Returns:
        Tuple of (julian_day, fraction)
    """
    dt = as_utc(instant)
    second = dt.second + dt.microsecond / 1e6
    return jday(dt.year, dt.month, dt.day, dt.hour, dt.minute, second)


def propagate(
    state: DecodedOrbitalState,
    instant: datetime,
    max_epoch_age_days: Optional[float] = MAX_EPOCH_AGE_DAYS,
) -> Union[InertialPosition, PropagationFailure]:
    """
    Propagate a decoded element set to an instant.

    Args:
        state: Decoded orbital state
        instant: Target time
        max_epoch_age_days: Refuse instants further than this from the epoch;
            None disables the check

    Returns:
        InertialPosition in km, or PropagationFailure when no position is
        available at this instant
    """
    instant = as_utc(instant)

    if max_epoch_age_days is not None:
        age_days = abs((instant - state.epoch).total_seconds()) / SECONDS_PER_DAY
        if age_days > max_epoch_age_days:
            return PropagationFailure(
                OUTSIDE_EPOCH_WINDOW,
                f"Instant is {age_days:.1f} days from epoch "
                f"(limit {max_epoch_age_days:.1f})",
                instant,
            )

    jd, fr = datetime_to_jd_fr(instant)
    error, position, _velocity = state.satrec.sgp4(jd, fr)

    if error != 0:
        message = SGP4_ERROR_CODES.get(error, f"Unknown error code {error}")
        logger.debug(f"SGP4 error {error} for satellite {state.catalog_number}: {message}")
        return PropagationFailure(error, message, instant)

    if not all(math.isfinite(c) for c in position):
        return PropagationFailure(NON_FINITE_RESULT, "Non-finite position", instant)

    return InertialPosition(*position)
