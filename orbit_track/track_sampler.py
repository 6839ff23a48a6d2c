"""
Ground Track Sampling

Samples a satellite's geodetic position across one or more orbital periods
starting at a reference time, for drawing as a polyline.

The sampler never fails outright: instants the propagator cannot serve or
the calendar cannot represent are omitted, and a degenerate orbit yields an
empty track.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional, Tuple

from config import (
    DEFAULT_NUM_ORBITS,
    DEFAULT_SAMPLES_PER_ORBIT,
    MAX_EPOCH_AGE_DAYS,
    MINUTES_PER_DAY,
)
from orbit_track.errors import DegenerateOrbitError, PropagationFailure
from orbit_track.frames import GeodeticPoint, to_geodetic
from orbit_track.propagator import as_utc, propagate
from orbit_track.tle_parser import DecodedOrbitalState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackOptions:
    """
    Sampling parameters.

    Attributes:
        samples_per_orbit: Number of steps across the whole span
        num_orbits: Orbital periods to cover; may be fractional
        reference_time: Start of the span (default: time of the sample call)
        max_epoch_age_days: Propagation validity window passed to propagate
    """

    samples_per_orbit: int = DEFAULT_SAMPLES_PER_ORBIT
    num_orbits: float = DEFAULT_NUM_ORBITS
    reference_time: Optional[datetime] = None
    max_epoch_age_days: Optional[float] = MAX_EPOCH_AGE_DAYS

    def __post_init__(self):
        if isinstance(self.samples_per_orbit, bool) or not isinstance(self.samples_per_orbit, int):
            raise ValueError(f"samples_per_orbit must be an integer, got {self.samples_per_orbit!r}")
        if self.samples_per_orbit <= 0:
            raise ValueError(f"samples_per_orbit must be > 0, got {self.samples_per_orbit}")
        if not (self.num_orbits > 0 and math.isfinite(self.num_orbits)):
            raise ValueError(f"num_orbits must be a finite number > 0, got {self.num_orbits}")


@dataclass(frozen=True)
class Track:
    """
    Sampled ground track. ``points[i]`` was computed for ``instants[i]``;
    both are in temporal order.
    """

    points: Tuple[GeodeticPoint, ...] = ()
    instants: Tuple[datetime, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[GeodeticPoint]:
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    def __bool__(self) -> bool:
        return bool(self.points)


EMPTY_TRACK = Track()


def orbital_period_minutes(state: DecodedOrbitalState) -> float:
    """
    Orbital period from mean motion.

    Raises:
        DegenerateOrbitError: if mean motion is not positive or the period
            is not finite
    """
    mean_motion = state.mean_motion
    if not (mean_motion > 0):
        raise DegenerateOrbitError(f"Mean motion {mean_motion} rad/min has no period")

    # rad/min -> rev/day, then minutes per revolution
    mean_motion_rev_per_day = mean_motion * MINUTES_PER_DAY / (2.0 * math.pi)
    period = MINUTES_PER_DAY / mean_motion_rev_per_day

    if not math.isfinite(period) or period <= 0:
        raise DegenerateOrbitError(f"Unusable orbital period {period} for mean motion {mean_motion}")
    return period


def sample_track(state: DecodedOrbitalState, options: Optional[TrackOptions] = None) -> Track:
    """
    Sample a ground track.

    Produces up to ``samples_per_orbit + 1`` points at
    ``reference_time + i * step`` for i in 0..samples_per_orbit inclusive,
    where ``step = period * num_orbits / samples_per_orbit``.

    Args:
        state: Decoded orbital state
        options: Sampling parameters (defaults: 120 samples, 1 orbit, now)

    Returns:
        Track, empty for a degenerate or fully failing orbit
    """
    options = options or TrackOptions()

    try:
        period = orbital_period_minutes(state)
    except DegenerateOrbitError as e:
        logger.warning(f"Satellite {state.catalog_number}: {e}, returning empty track")
        return EMPTY_TRACK

    reference_time = as_utc(options.reference_time or datetime.now(timezone.utc))
    total_span = period * options.num_orbits
    step = total_span / options.samples_per_orbit

    points = []
    instants = []
    failures = 0
    for i in range(options.samples_per_orbit + 1):
        try:
            instant = reference_time + timedelta(minutes=i * step)
        except OverflowError:
            # Later instants lie even further out
            failures += options.samples_per_orbit + 1 - i
            logger.warning(
                f"Satellite {state.catalog_number}: track span of {total_span} minutes "
                f"leaves the representable date range after {i} samples"
            )
            break
        position = propagate(state, instant, options.max_epoch_age_days)
        if isinstance(position, PropagationFailure):
            failures += 1
            continue
        points.append(to_geodetic(position, instant))
        instants.append(instant)

    if failures:
        logger.debug(
            f"Satellite {state.catalog_number}: {failures} of "
            f"{options.samples_per_orbit + 1} track samples omitted"
        )

    return Track(tuple(points), tuple(instants))
