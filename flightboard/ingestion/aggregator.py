"""
Flight aggregator - windowed airport schedule queries.

Pipeline stages:
1. Normalize: order the bounds, truncate to minute precision
2. Split: break the window into <= 12 hour sub-windows
3. Fetch: one upstream call per sub-window, strictly in sequence
4. Merge: concatenate and sort by own-direction scheduled UTC time

Sub-windows are fetched one after another rather than concurrently to stay
within the upstream per-second and per-minute rate limits. Query latency
therefore grows linearly with the number of sub-windows.

The aggregation contract is "always return a list, possibly empty, never
raise": per-window failures are absorbed by the client, anything else is
logged here and turned into an empty result.
"""

import logging
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Optional, List

from flightboard.config import config
from flightboard.ingestion.aerodatabox_client import AeroDataBoxClient
from flightboard.ingestion.windows import MAX_WINDOW_SPAN, split_window
from flightboard.models.schedule import FlightRecord
from flightboard.timeutils import floor_to_minute

logger = logging.getLogger(__name__)

# Sort position for records whose own-direction time is missing/unparseable
LATEST_UTC = datetime.max.replace(tzinfo=timezone.utc)

DEFAULT_LOOKAHEAD = timedelta(hours=12)


def own_direction_utc(record: FlightRecord) -> Optional[datetime]:
    """Scheduled UTC time of the leg matching the record's direction."""
    leg = record.own_leg
    return leg.scheduled_utc if leg else None


def chronological_key(record: FlightRecord) -> datetime:
    return own_direction_utc(record) or LATEST_UTC


class FlightAggregator:
    """
    Orchestrates window splitting and upstream fetching for one airport.

    Exposes the two query entry points used by the API layer:
    - fetch_window(): arbitrary window, cancelled flights optional
    - fetch_default(): 12 hour lookahead from a point in time
    """

    def __init__(
        self,
        client: Optional[AeroDataBoxClient] = None,
        max_span: timedelta = MAX_WINDOW_SPAN,
        default_lookahead: timedelta = DEFAULT_LOOKAHEAD,
    ):
        self.client = client or AeroDataBoxClient.from_config()
        self.max_span = max_span
        self.default_lookahead = default_lookahead

    @classmethod
    def from_config(cls) -> 'FlightAggregator':
        """Create aggregator from application configuration."""
        return cls(
            client=AeroDataBoxClient.from_config(),
            max_span=timedelta(hours=config.aerodatabox.max_window_hours),
            default_lookahead=timedelta(hours=config.aerodatabox.default_lookahead_hours),
        )

    def fetch_window(
        self,
        airport_code: str,
        start: datetime,
        end: datetime,
        include_cancelled: bool = False,
        deadline_seconds: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[FlightRecord]:
        """
        Fetch all flights for airport_code between start and end (local time).

        Args:
            airport_code: ICAO code of the home airport
            start, end: window bounds; swapped if given in reverse order
            include_cancelled: include cancelled flights
            deadline_seconds: overall time budget; once spent, remaining
                sub-windows are skipped and the flights gathered so far
                are returned
            cancel_event: cooperative cancellation; when set, behaves like
                an expired deadline

        Returns:
            Flights sorted by own-direction scheduled UTC time, records
            without a parseable time last.
        """
        if not self.client.is_configured:
            logger.warning('AeroDataBox API credentials not configured')
            return []

        try:
            if end < start:
                start, end = end, start
            start, end = floor_to_minute(start), floor_to_minute(end)

            windows = split_window(start, end, self.max_span)
            deadline = time.monotonic() + deadline_seconds if deadline_seconds is not None else None

            flights: List[FlightRecord] = []
            for index, window in enumerate(windows):
                if cancel_event is not None and cancel_event.is_set():
                    logger.warning(
                        f'Query cancelled after {index}/{len(windows)} windows, '
                        f'returning {len(flights)} flights'
                    )
                    break

                timeout = None
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        logger.warning(
                            f'Query deadline reached after {index}/{len(windows)} windows, '
                            f'returning {len(flights)} flights'
                        )
                        break
                    timeout = min(remaining, self.client.timeout)

                flights.extend(
                    self.client.fetch_window(airport_code, window, include_cancelled, timeout=timeout)
                )

            # Stable sort keeps upstream order for equal times
            flights.sort(key=chronological_key)

            logger.info(f'Total flights fetched: {len(flights)}')
            return flights

        except Exception as e:
            logger.error(f'Error fetching flights for {airport_code}: {e}')
            return []

    def fetch_default(self, airport_code: str, as_of: datetime) -> List[FlightRecord]:
        """Fetch the default lookahead window from as_of, cancelled flights excluded."""
        return self.fetch_window(
            airport_code,
            as_of,
            as_of + self.default_lookahead,
            include_cancelled=False,
        )
