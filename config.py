"""
Orbit Track Configuration and Constants

This module contains physical constants, sampling defaults, fallback TLE data
and the catalog source configuration used throughout the project.

Constants:
    WGS-84 ellipsoid parameters for geodetic conversion of propagated
    positions. The SGP4 integrator itself carries its own WGS-72 gravity
    model inside the sgp4 library.

Fallback TLE Data:
    Hardcoded ISS TLE for demonstrations and testing when the catalog
    service is unavailable. Tracks are only meaningful near the TLE epoch,
    so demos sample the fallback set at its own epoch.

    Sources for updated TLEs:
    - Space-Track.org (requires free registration)
    - CelesTrak.org (public access)

Environment:
    SPACETRACK_USERNAME / SPACETRACK_PASSWORD  authenticated source credentials
    SPACETRACK_QUERY                           Space-Track gp query path
    CELESTRAK_URL                              public source URL
    CATALOG_TIMEOUT                            HTTP timeout in seconds
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional

# WGS-84 ellipsoid
WGS84_A_KM: float = 6378.137  # Equatorial radius (km)
WGS84_F: float = 1.0 / 298.257223563  # Flattening
WGS84_B_KM: float = WGS84_A_KM * (1.0 - WGS84_F)  # Polar radius (km)
WGS84_E2: float = 2.0 * WGS84_F - WGS84_F * WGS84_F  # First eccentricity squared

MINUTES_PER_DAY: float = 1440.0
SECONDS_PER_DAY: float = 86400.0
J2000_JD: float = 2451545.0

# Track sampling defaults
DEFAULT_SAMPLES_PER_ORBIT: int = 120
DEFAULT_NUM_ORBITS: float = 1

# Propagation is refused this far from the element set epoch (days)
MAX_EPOCH_AGE_DAYS: Optional[float] = 30.0

# Maximum satellites taken from one catalog batch
MAX_SATELLITES: int = 50

# Position reported when no propagated position is available
SENTINEL_LATITUDE_DEG: float = 0.0
SENTINEL_LONGITUDE_DEG: float = 0.0
SENTINEL_HEIGHT_M: float = 0.0

# Catalog sources
SPACETRACK_BASE_URL: str = "https://www.space-track.org"
SPACETRACK_QUERY: str = (
    "/basicspacedata/query/class/gp/COUNTRY_CODE/US/DECAY_DATE/null-val"
    "/orderby/EPOCH%20desc/limit/100/format/3le"
)
CELESTRAK_URL: str = "https://celestrak.org/NORAD/elements/stations.txt"
CATALOG_TIMEOUT_SECONDS: float = 30.0

# Fallback ISS TLE for demonstrations and testing
FALLBACK_ISS_TLE: Dict[str, str] = {
    'name': 'ISS (ZARYA)',
    'line1': '1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995',
    'line2': '2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598',
}


@dataclass(frozen=True)
class CatalogConfig:
    """
    Source configuration for the catalog fetcher.

    Credentials are optional. When both are set the authenticated
    Space-Track source is tried first, otherwise only CelesTrak is used.
    """

    spacetrack_username: Optional[str] = None
    spacetrack_password: Optional[str] = None
    spacetrack_base_url: str = SPACETRACK_BASE_URL
    spacetrack_query: str = SPACETRACK_QUERY
    celestrak_url: str = CELESTRAK_URL
    timeout_seconds: float = CATALOG_TIMEOUT_SECONDS

    @property
    def has_credentials(self) -> bool:
        return bool(
            self.spacetrack_username and self.spacetrack_username.strip()
            and self.spacetrack_password and self.spacetrack_password.strip()
        )

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "CatalogConfig":
        """Build a configuration from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            spacetrack_username=env.get('SPACETRACK_USERNAME'),
            spacetrack_password=env.get('SPACETRACK_PASSWORD'),
            spacetrack_query=env.get('SPACETRACK_QUERY', SPACETRACK_QUERY),
            celestrak_url=env.get('CELESTRAK_URL', CELESTRAK_URL),
            timeout_seconds=float(env.get('CATALOG_TIMEOUT', CATALOG_TIMEOUT_SECONDS)),
        )
