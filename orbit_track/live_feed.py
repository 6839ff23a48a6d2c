"""
Live Position Feed

Per-satellite position callback for the renderer's animation loop. Each
feed holds a reference to one immutable decoded state; evaluating it has no
side effects, so feeds for different satellites can be called from any
number of frame callbacks without locking.
"""

from datetime import datetime, timezone
from typing import Optional

from config import (
    MAX_EPOCH_AGE_DAYS,
    SENTINEL_HEIGHT_M,
    SENTINEL_LATITUDE_DEG,
    SENTINEL_LONGITUDE_DEG,
)
from orbit_track.errors import PropagationFailure
from orbit_track.frames import GeodeticPoint, to_geodetic
from orbit_track.propagator import propagate
from orbit_track.tle_parser import DecodedOrbitalState

SENTINEL_POINT = GeodeticPoint(SENTINEL_LATITUDE_DEG, SENTINEL_LONGITUDE_DEG, SENTINEL_HEIGHT_M)


class LivePositionFeed:
    """Pull-based current position of one satellite."""

    __slots__ = ("state", "max_epoch_age_days")

    def __init__(
        self,
        state: DecodedOrbitalState,
        max_epoch_age_days: Optional[float] = MAX_EPOCH_AGE_DAYS,
    ):
        self.state = state
        self.max_epoch_age_days = max_epoch_age_days

    def position_at(self, instant: datetime) -> GeodeticPoint:
        """
        Geodetic position at ``instant``.

        Returns SENTINEL_POINT when the propagator has no position for the
        instant, so a render loop never aborts on one satellite.
        """
        position = propagate(self.state, instant, self.max_epoch_age_days)
        if isinstance(position, PropagationFailure):
            return SENTINEL_POINT
        return to_geodetic(position, instant)

    __call__ = position_at

    def current_position(self) -> GeodeticPoint:
        return self.position_at(datetime.now(timezone.utc))

    def __repr__(self):
        return f"LivePositionFeed(catalog_number={self.state.catalog_number})"
