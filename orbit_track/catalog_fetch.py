"""
Catalog Fetch

Retrieves raw TLE catalog text. Space-Track.org is preferred when
credentials are configured; any failure on that path falls back to the
public CelesTrak list. Only when both fail does the caller see an error.

Space-Track.org API usage policy: do not request the same GP data more than
once per hour. The fetcher is meant to be called once per session.
"""

import asyncio
import logging
from typing import Optional

import requests

from config import CatalogConfig
from orbit_track.errors import FetchFailure

logger = logging.getLogger(__name__)

LOGIN_FAILED_MARKER = '"Login":"Failed"'


class CatalogFetcher:
    """
    Fetches raw element set text from the configured catalog sources.

    Args:
        config: Source URLs, credentials and timeout
        session: Optional requests session (a new one is created otherwise)
    """

    def __init__(self, config: CatalogConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def fetch_raw_element_sets(self) -> str:
        """
        Fetch catalog text, preferring the authenticated source.

        Returns:
            Raw multi-line TLE text

        Raises:
            FetchFailure: if every configured source failed
        """
        if self.config.has_credentials:
            try:
                return self._fetch_from_spacetrack()
            except (requests.RequestException, FetchFailure) as e:
                logger.warning(f"Failed to fetch from Space-Track, falling back to CelesTrak: {e}")

        try:
            return self._fetch_from_celestrak()
        except requests.RequestException as e:
            logger.error(f"Failed to fetch from CelesTrak: {e}")
            raise FetchFailure(f"No catalog source available: {e}") from e

    async def fetch_raw_element_sets_async(self) -> str:
        """Run fetch_raw_element_sets in the event loop's default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.fetch_raw_element_sets)

    def _fetch_from_spacetrack(self) -> str:
        """
        Authenticate and run the configured gp query.
        Implements: https://www.space-track.org/documentation#api-authMethod
        """
        base_url = self.config.spacetrack_base_url.rstrip("/")

        response = self.session.post(
            f"{base_url}/ajaxauth/login",
            data={
                'identity': self.config.spacetrack_username,
                'password': self.config.spacetrack_password,
            },
            timeout=self.config.timeout_seconds,
        )
        response.raise_for_status()
        if LOGIN_FAILED_MARKER in response.text:
            raise FetchFailure("Space-Track authentication failed")

        response = self.session.get(
            f"{base_url}{self.config.spacetrack_query}",
            timeout=self.config.timeout_seconds,
        )
        response.raise_for_status()
        logger.info(f"[SpaceTrack] Fetched {len(response.text)} bytes")
        return response.text

    def _fetch_from_celestrak(self) -> str:
        response = self.session.get(self.config.celestrak_url, timeout=self.config.timeout_seconds)
        response.raise_for_status()
        logger.info(f"[CelesTrak] Fetched {len(response.text)} bytes")
        return response.text
