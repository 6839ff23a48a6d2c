"""
Orbit Track Demonstration

This script demonstrates the propagation pipeline end to end:
- Catalog retrieval (Space-Track with CelesTrak fallback)
- TLE parsing and validation
- Ground track sampling over one or more orbits
- Live position evaluation
- Ground track visualization

Usage:
    python demo.py [--offline] [--samples N] [--orbits K] [--limit M]
                   [--plot FILE] [--verbose]

Arguments:
    --offline: Skip the network and use the fallback ISS TLE
    --samples: Samples per orbit (default 120)
    --orbits: Orbits to trace (default 1)
    --limit: Maximum satellites to load (default 50)
    --plot: Write a ground track plot to FILE
    --verbose: Enable debug logging
"""

import argparse
import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from config import (
    DEFAULT_NUM_ORBITS,
    DEFAULT_SAMPLES_PER_ORBIT,
    FALLBACK_ISS_TLE,
    MAX_SATELLITES,
    CatalogConfig,
)
from logging_config import configure_logging, get_logger
from orbit_track.catalog import SatelliteCatalog
from orbit_track.catalog_fetch import CatalogFetcher
from orbit_track.track_sampler import TrackOptions

logger = get_logger(__name__)


def load_catalog(catalog: SatelliteCatalog, offline: bool) -> bool:
    """
    Load the live catalog, or the fallback ISS TLE.

    Returns
    -------
    bool
        True when the fallback TLE was used
    """
    if not offline:
        fetcher = CatalogFetcher(CatalogConfig.from_env())
        if asyncio.run(catalog.load_from(fetcher)) > 0:
            return False
        logger.warning("Catalog unavailable, using fallback ISS TLE")

    fallback = "\n".join(
        [FALLBACK_ISS_TLE["name"], FALLBACK_ISS_TLE["line1"], FALLBACK_ISS_TLE["line2"]]
    )
    catalog.load_batch(fallback)
    return True


def report_satellite(
    catalog: SatelliteCatalog, catalog_number: int, options: TrackOptions
) -> None:
    """
    Log display elements, track envelope and live position for one satellite.

    Parameters
    ----------
    catalog : SatelliteCatalog
        Loaded catalog
    catalog_number : int
        NORAD catalog number
    options : TrackOptions
        Sampling parameters
    """
    for label, value in catalog.elements(catalog_number).items():
        if label != "Raw TLE":
            logger.debug(f"  {label}: {value}")

    track = catalog.track(catalog_number, options)
    entry = catalog.satellites[catalog_number]
    if not track:
        logger.info(f"{entry.name} ({catalog_number}): empty track, nothing to draw")
        return

    latitudes = [p.latitude_deg for p in track]
    heights_km = [p.height_m / 1000.0 for p in track]
    position = catalog.position_at(catalog_number, track.instants[0])

    logger.info(
        f"{entry.name} ({catalog_number}): {len(track)} points, "
        f"lat {min(latitudes):+.1f}..{max(latitudes):+.1f} deg, "
        f"height {min(heights_km):.0f}..{max(heights_km):.0f} km, "
        f"starts at ({position.latitude_deg:+.2f}, {position.longitude_deg:+.2f})"
    )


def plot_ground_tracks(catalog: SatelliteCatalog, output_file: str) -> None:
    """
    Plot every stored ground track on a longitude/latitude grid.

    Parameters
    ----------
    catalog : SatelliteCatalog
        Catalog whose tracks have been sampled
    output_file : str
        Image path
    """
    fig, ax = plt.subplots(figsize=(14, 7))

    for catalog_number, track in catalog.tracks.items():
        if not track:
            continue
        lons = np.array([p.longitude_deg for p in track])
        lats = np.array([p.latitude_deg for p in track])

        # Break the line where it wraps at the antimeridian
        wraps = np.where(np.abs(np.diff(lons)) > 180.0)[0] + 1
        for lon_seg, lat_seg in zip(np.split(lons, wraps), np.split(lats, wraps)):
            ax.plot(lon_seg, lat_seg, linewidth=1.0, alpha=0.7)
        ax.annotate(catalog.satellites[catalog_number].name, (lons[0], lats[0]), fontsize=7)

    ax.set_xlim(-180, 180)
    ax.set_ylim(-90, 90)
    ax.set_xlabel("Longitude (deg)")
    ax.set_ylabel("Latitude (deg)")
    ax.set_title("Satellite Ground Tracks")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_file, dpi=150, bbox_inches="tight")
    logger.info(f"Saved ground track plot to {output_file}")
    plt.close(fig)


def main(argv: Optional[list] = None) -> None:
    """Main demonstration entry point."""
    parser = argparse.ArgumentParser(description="Orbit Track Demonstration")
    parser.add_argument("--offline", action="store_true", help="Use the fallback ISS TLE")
    parser.add_argument("--samples", type=int, default=DEFAULT_SAMPLES_PER_ORBIT,
                        help="Samples per orbit")
    parser.add_argument("--orbits", type=float, default=DEFAULT_NUM_ORBITS,
                        help="Orbits to trace")
    parser.add_argument("--limit", type=int, default=MAX_SATELLITES,
                        help="Maximum satellites to load")
    parser.add_argument("--plot", metavar="FILE", help="Write a ground track plot")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    logger.info("Orbit Track Demonstration")
    logger.info("=" * 60)

    catalog = SatelliteCatalog(max_satellites=args.limit)
    used_fallback = load_catalog(catalog, args.offline)

    for catalog_number in catalog:
        state = catalog.satellites[catalog_number].state
        # The fallback set is old; sample it at its own epoch
        reference_time = state.epoch if used_fallback else datetime.now(timezone.utc)
        options = TrackOptions(
            samples_per_orbit=args.samples,
            num_orbits=args.orbits,
            reference_time=reference_time,
        )
        report_satellite(catalog, catalog_number, options)

    if args.plot:
        plot_ground_tracks(catalog, args.plot)

    logger.info("=" * 60)
    logger.info("Demonstration complete")


if __name__ == "__main__":
    main()
