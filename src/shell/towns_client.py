"""Town Feed Client - Imperative Shell.

This module handles HTTP communication with the town feed.
All I/O is contained here; parsing and filtering are in the core module.
"""

import logging
from typing import Any

import requests

from src.core.config import DEFAULT_TOWNS_API_URL
from src.core.town import Town, parse_towns


logger = logging.getLogger(__name__)


# Default timeout for feed requests (seconds)
DEFAULT_TIMEOUT = 30


class TownsFetchError(Exception):
    """Base error for a failed town feed fetch."""


class TownsHTTPError(TownsFetchError):
    """Transport failure: non-2xx status, timeout or connection error.

    Attributes:
        status_code: HTTP status code, 0 when no response was received
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code


class TownsResponseError(TownsFetchError):
    """Malformed response: not JSON, or not an array of town objects."""


class TownsClient:
    """Client for fetching town records from the feed.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_TOWNS_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize town feed client.

        Args:
            base_url: Feed URL prefix; the town count is appended
            timeout: Request timeout in seconds
            session: Optional requests session (module-level requests if None)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.session = session

    def build_url(self, town_count: int) -> str:
        """Build the feed URL for a town count."""
        return f"{self.base_url}{town_count}"

    def _get(self, url: str) -> requests.Response:
        if self.session is not None:
            return self.session.get(url, timeout=self.timeout)
        return requests.get(url, timeout=self.timeout)

    def fetch_raw(self, town_count: int) -> Any:
        """Fetch the decoded JSON body for a town count.

        This method performs HTTP I/O.

        Args:
            town_count: Number of towns to request

        Returns:
            Decoded JSON body

        Raises:
            TownsHTTPError: On timeout, connection failure or non-2xx status
            TownsResponseError: If the body is not valid JSON
        """
        url = self.build_url(town_count)

        logger.info("Fetching %d towns from %s", town_count, url)

        try:
            response = self._get(url)
        except requests.Timeout as e:
            raise TownsHTTPError(f"Request to {url} timed out") from e
        except requests.RequestException as e:
            raise TownsHTTPError(f"Request to {url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TownsHTTPError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TownsResponseError(f"Response from {url} is not valid JSON") from e

    def fetch_towns(self, town_count: int) -> list[Town]:
        """Fetch and parse town records.

        This method performs HTTP I/O.

        Args:
            town_count: Number of towns to request

        Returns:
            Parsed towns, including ones without coordinates

        Raises:
            TownsHTTPError: On transport failure or non-2xx status
            TownsResponseError: If the body is not an array of town objects
        """
        data = self.fetch_raw(town_count)

        try:
            towns = parse_towns(data)
        except ValueError as e:
            raise TownsResponseError(str(e)) from e

        logger.info("Fetched %d towns", len(towns))

        return towns
