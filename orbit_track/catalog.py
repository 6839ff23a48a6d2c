"""
Satellite Catalog

Session-level bookkeeping for a batch of satellites: decodes each element
set once, keeps one live position feed per satellite, and owns the mapping
from catalog number to sampled ground track.

Failures stay per satellite: a malformed element set is dropped with a
warning and the rest of the batch loads. A failed catalog fetch leaves the
catalog empty ("no satellites available") instead of raising.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional

from config import MAX_SATELLITES
from orbit_track.catalog_fetch import CatalogFetcher
from orbit_track.errors import DecodeError, FetchFailure
from orbit_track.frames import GeodeticPoint
from orbit_track.live_feed import LivePositionFeed
from orbit_track.tle_parser import (
    DecodedOrbitalState,
    RawElementRecord,
    decode,
    format_elements,
    parse_catalog,
)
from orbit_track.track_sampler import Track, TrackOptions, sample_track

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SatelliteEntry:
    record: RawElementRecord
    state: DecodedOrbitalState
    feed: LivePositionFeed

    @property
    def name(self) -> str:
        return self.record.name


class SatelliteCatalog:
    """
    Satellites loaded for one viewing session.

    Args:
        max_satellites: Entries taken from a batch, in catalog order
        track_options: Default options for track sampling
    """

    def __init__(self, max_satellites: int = MAX_SATELLITES,
                 track_options: Optional[TrackOptions] = None):
        self.max_satellites = max_satellites
        self.track_options = track_options or TrackOptions()
        self.satellites: Dict[int, SatelliteEntry] = {}
        self.tracks: Dict[int, Track] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Mark the session torn down; pending batches are ignored."""
        self._closed = True

    def load_batch(self, text: str, cancelled: Optional[Callable[[], bool]] = None) -> int:
        """
        Parse and decode a raw catalog batch.

        Args:
            text: Raw TLE catalog text
            cancelled: Checked before each satellite; when it returns True
                the remaining satellites are abandoned

        Returns:
            Number of satellites loaded from this batch
        """
        records = parse_catalog(text)[:self.max_satellites]
        loaded = 0

        for record in records:
            if self._closed or (cancelled is not None and cancelled()):
                logger.info(f"Batch load cancelled after {loaded} satellites")
                break
            try:
                state = decode(record.line1, record.line2)
            except DecodeError as e:
                logger.warning(f"Skipping TLE {record.name!r}: {e}")
                continue

            if state.catalog_number in self.satellites:
                logger.debug(f"Replacing satellite {state.catalog_number} ({record.name})")
            self.satellites[state.catalog_number] = SatelliteEntry(
                record, state, LivePositionFeed(state, self.track_options.max_epoch_age_days)
            )
            self.tracks.pop(state.catalog_number, None)
            loaded += 1

        logger.info(f"Loaded {loaded} of {len(records)} satellites")
        return loaded

    async def load_from(self, fetcher: CatalogFetcher) -> int:
        """
        Fetch a catalog batch once and load it.

        Returns:
            Number of satellites loaded; 0 when the fetch failed or the
            session was closed while the fetch was in flight
        """
        try:
            text = await fetcher.fetch_raw_element_sets_async()
        except FetchFailure as e:
            logger.error(f"No satellites available: {e}")
            return 0

        if self._closed:
            logger.info("Session closed during fetch, discarding batch")
            return 0

        return self.load_batch(text)

    def track(self, catalog_number: int, options: Optional[TrackOptions] = None) -> Track:
        """
        Ground track for a satellite.

        Sampled once with the catalog's default options and reused; passing
        ``options`` regenerates and replaces the stored track.
        """
        entry = self.satellites[catalog_number]
        if options is None and catalog_number in self.tracks:
            return self.tracks[catalog_number]

        track = sample_track(entry.state, options or self.track_options)
        self.tracks[catalog_number] = track
        return track

    def feed(self, catalog_number: int) -> LivePositionFeed:
        return self.satellites[catalog_number].feed

    def position_at(self, catalog_number: int, instant: datetime) -> GeodeticPoint:
        return self.satellites[catalog_number].feed.position_at(instant)

    def elements(self, catalog_number: int) -> Dict[str, str]:
        """Display elements plus name and raw lines for the info panel."""
        entry = self.satellites[catalog_number]
        info = {"Name": entry.name}
        info.update(format_elements(entry.state))
        info["Raw TLE"] = f"{entry.record.line1}\n{entry.record.line2}"
        return info

    def names(self) -> List[str]:
        return [entry.name for entry in self.satellites.values()]

    def __len__(self) -> int:
        return len(self.satellites)

    def __contains__(self, catalog_number) -> bool:
        return catalog_number in self.satellites

    def __iter__(self):
        return iter(self.satellites)
