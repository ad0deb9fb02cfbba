"""
Flight schedule API endpoints.

Provides endpoints for:
- GET /api/flights/board - Default 12 hour board for an airport
- GET /api/flights/search - Advanced search over a fetched window
"""

import logging
import time
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple

from flask import Blueprint, jsonify, request, current_app

from flightboard.cache import cached_default_flights
from flightboard.config import config
from flightboard.models.schedule import Direction
from flightboard.services.flight_search import FilterCriteria, filter_and_sort
from flightboard.timeutils import local_now

logger = logging.getLogger(__name__)

flights_bp = Blueprint('flights', __name__, url_prefix='/api/flights')


def _airport_code() -> str:
    code = (request.args.get('airport') or '').strip().upper()
    return code or config.airport.default_airport


def _parse_date_arg(name: str) -> Optional[date]:
    """Parse a YYYY-MM-DD query argument. Raises ValueError if malformed."""
    value = (request.args.get(name) or '').strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f'{name} must be a date in YYYY-MM-DD format') from None


def search_window(criteria: FilterCriteria, now: datetime) -> Tuple[datetime, datetime]:
    """
    Local-time window to fetch for a search.

    Covers whole days when dates are given, otherwise the next 12 hours.
    Raises ValueError if the dates span more than the configured maximum.
    """
    dates = [d for d in (criteria.departure_date, criteria.arrival_date) if d]
    if not dates:
        return now, now + timedelta(hours=config.aerodatabox.default_lookahead_hours)

    days = (max(dates) - min(dates)).days + 1
    if days > config.search.max_days:
        raise ValueError(
            f'Date range covers {days} days; searches are limited to {config.search.max_days} days'
        )

    start = datetime.combine(min(dates), datetime.min.time())
    end = datetime.combine(max(dates), datetime.min.time()) + timedelta(hours=23, minutes=59)
    return start, end


@flights_bp.route('/board', methods=['GET'])
def get_board():
    """
    Departures and arrivals for the next 12 hours.

    Query parameters:
    - airport: ICAO code (default from configuration)

    Served from the board cache; repeated calls within the same local hour
    reuse one upstream fetch for up to the cache TTL.
    """
    start_time = time.perf_counter()

    airport_code = _airport_code()
    as_of = local_now(config.airport.timezone)

    flights = cached_default_flights(
        current_app.config['RESULT_CACHE'],
        current_app.config['FLIGHT_AGGREGATOR'],
        airport_code,
        as_of,
    )

    departures = sum(1 for f in flights if f.direction == Direction.DEPARTURE)
    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'airport': airport_code,
        'local_time': as_of.isoformat(timespec='minutes'),
        'flights': [f.to_dict() for f in flights],
        'count': len(flights),
        'departures_count': departures,
        'arrivals_count': len(flights) - departures,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@flights_bp.route('/search', methods=['GET'])
def search_flights():
    """
    Advanced flight search.

    Query parameters:
    - flight, airline, destination, terminal, status: text filters
    - departure_date, arrival_date: YYYY-MM-DD
    - airport: ICAO code (default from configuration)
    - include_cancelled: boolean (default false)
    """
    start_time = time.perf_counter()

    try:
        criteria = FilterCriteria(
            flight=request.args.get('flight'),
            airline=request.args.get('airline'),
            destination=request.args.get('destination'),
            terminal=request.args.get('terminal'),
            status=request.args.get('status'),
            departure_date=_parse_date_arg('departure_date'),
            arrival_date=_parse_date_arg('arrival_date'),
        )
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    airport_code = _airport_code()
    include_cancelled = request.args.get('include_cancelled', 'false').lower() == 'true'

    try:
        start, end = search_window(criteria, local_now(config.airport.timezone))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    aggregator = current_app.config['FLIGHT_AGGREGATOR']

    candidates = aggregator.fetch_window(
        airport_code,
        start,
        end,
        include_cancelled=include_cancelled,
        deadline_seconds=config.search.deadline_seconds,
    )
    results = filter_and_sort(candidates, criteria)

    notice = None
    if not aggregator.client.is_configured:
        notice = 'Live flight data is unavailable: upstream API credentials are not configured.'
    elif not results:
        notice = f'No flights matched your search at {airport_code}.'

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'results': [f.to_dict() for f in results],
        'count': len(results),
        'used_airport_code': airport_code,
        'window': {
            'from': start.isoformat(timespec='minutes'),
            'to': end.isoformat(timespec='minutes'),
        },
        'has_searched': True,
        'notice': notice,
        'query_time_ms': round(query_time_ms, 2),
    })
