"""
AeroDataBox API client (via RapidAPI).

Fetches an airport's departures and arrivals for a single time window:

    GET https://{host}/flights/airports/icao/{code}/{from}/{to}
        ?withLeg=true&direction=Both&withCancelled={bool}
        &withCodeshared=true&withCargo=false&withPrivate=false
        &withLocation=false

{from}/{to} are airport-local times formatted 'YYYY-MM-DDTHH:MM'.

Failure policy: a window that fails for any reason (non-2xx status,
transport error, malformed JSON, unexpected payload shape) contributes no
flights. The failure is logged and counted, never raised, so one bad
window cannot abort an aggregated query.
"""

import logging
import time
from typing import Optional, List

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from flightboard.config import config
from flightboard.ingestion.windows import TimeWindow
from flightboard.models.schedule import FlightRecord, Direction, normalize_response
from flightboard.timeutils import format_upstream_minute

logger = logging.getLogger(__name__)

# Portion of a response body included in log lines
LOG_BODY_CHARS = 500

# Upper bound on the sleep between retry attempts, in seconds
RETRY_BACKOFF_MAX = 2.0


class AeroDataBoxClient:
    """
    Client for the AeroDataBox airport flights endpoint.

    Handles:
    - RapidAPI key/host headers
    - One GET per time window
    - Optional retries for transient upstream errors
    - Per-window failure isolation
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_host: Optional[str] = None,
        timeout: float = 30.0,
        max_retries: int = 0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.api_host = api_host
        self.timeout = timeout
        self.max_retries = max_retries

        # A passed-in session gets the retry adapter mounted in place
        self.session = session or requests.Session()
        if max_retries > 0:
            retry = Retry(
                total=max_retries,
                backoff_factor=0.5,
                status_forcelist=(429, 500, 502, 503, 504),
                allowed_methods=frozenset(['GET']),
                raise_on_status=False,
                backoff_max=RETRY_BACKOFF_MAX,
            )
            self.session.mount('https://', HTTPAdapter(max_retries=retry))

        if not self.is_configured:
            logger.warning('AeroDataBox API credentials not configured - flight lookups disabled')

        # Statistics
        self._request_count = 0
        self._error_count = 0
        self._last_request_time: float = 0

    @classmethod
    def from_config(cls) -> 'AeroDataBoxClient':
        """Create client from application configuration."""
        return cls(
            api_key=config.aerodatabox.api_key,
            api_host=config.aerodatabox.api_host,
            timeout=config.aerodatabox.timeout_seconds,
            max_retries=config.aerodatabox.max_retries,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_host)

    def attempt_timeout(self, budget: Optional[float] = None) -> float:
        """Timeout for one HTTP attempt; a budget is split evenly across retries."""
        if budget is None:
            return self.timeout
        return budget / (self.max_retries + 1)

    def build_url(self, airport_code: str, window: TimeWindow) -> str:
        return (
            f'https://{self.api_host}/flights/airports/icao/{airport_code}/'
            f'{format_upstream_minute(window.start)}/{format_upstream_minute(window.end)}'
        )

    @staticmethod
    def build_params(include_cancelled: bool) -> dict:
        return {
            'withLeg': 'true',
            'direction': 'Both',
            'withCancelled': 'true' if include_cancelled else 'false',
            'withCodeshared': 'true',
            'withCargo': 'false',
            'withPrivate': 'false',
            'withLocation': 'false',
        }

    def fetch_window(
        self,
        airport_code: str,
        window: TimeWindow,
        include_cancelled: bool = False,
        timeout: Optional[float] = None,
    ) -> List[FlightRecord]:
        """
        Fetch and normalize one window of airport flights.

        Args:
            airport_code: ICAO code of the home airport (e.g. 'EGLL')
            window: local-time window, at most 12 hours wide
            include_cancelled: ask upstream to include cancelled flights
            timeout: time budget for this window in seconds, shared by all
                retry attempts (client default per attempt if None)

        Returns:
            Direction-tagged records; empty on any failure.
        """
        if not self.is_configured:
            logger.warning('AeroDataBox API credentials not configured')
            return []

        url = self.build_url(airport_code, window)
        headers = {
            'x-rapidapi-key': self.api_key,
            'x-rapidapi-host': self.api_host,
        }

        logger.info(f'Fetching {airport_code} flights for {window}: {url}')

        try:
            response = self.session.get(
                url,
                params=self.build_params(include_cancelled),
                headers=headers,
                timeout=self.attempt_timeout(timeout),
            )
        except requests.RequestException as e:
            self._error_count += 1
            logger.warning(f'AeroDataBox request failed for {window}: {e}')
            return []
        finally:
            self._request_count += 1
            self._last_request_time = time.time()

        if not response.ok:
            self._error_count += 1
            logger.warning(
                f'AeroDataBox API returned status code: {response.status_code}, '
                f'Body: {response.text[:LOG_BODY_CHARS]}'
            )
            return []

        logger.debug(f'AeroDataBox response: {response.text[:LOG_BODY_CHARS]}...')

        try:
            records = normalize_response(response.json())
        except ValueError as e:
            # requests' JSONDecodeError is a ValueError too
            self._error_count += 1
            logger.warning(f'Could not parse AeroDataBox response for {window}: {e}')
            return []

        departures = sum(1 for r in records if r.direction == Direction.DEPARTURE)
        logger.info(
            f'Fetched {departures} departures and {len(records) - departures} arrivals '
            f'for {airport_code} {window}'
        )
        return records

    @property
    def stats(self) -> dict:
        """Get client statistics."""
        return {
            'requests': self._request_count,
            'errors': self._error_count,
            'last_request_time': self._last_request_time,
            'api_configured': self.is_configured,
        }
