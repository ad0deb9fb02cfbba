"""
Flight search - filtering and ordering of fetched schedule data.

Criteria are a fixed set of optional predicates, each evaluated by its
own small function and ANDed together:

    flight       whitespace-insensitive substring of the flight number
    airline      substring of the airline name
    destination  arrival airport IATA/ICAO (exact) or name (substring)
    terminal     substring of either leg's terminal
    status       exact status
    departure_date / arrival_date
                 calendar date of that leg's scheduled local time

All text comparisons are case-insensitive and the criterion is trimmed
first. A blank or absent criterion matches everything.

Results are always ordered by departure scheduled local time, then by
flight number, whatever the direction of each record. This differs on
purpose from the aggregator's own-direction UTC ordering: a search result
reads as a single departures timeline.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Tuple

from flightboard.models.schedule import FlightLeg, FlightRecord

logger = logging.getLogger(__name__)

# Sort position for records without a parseable departure time
LATEST_LOCAL = datetime.max

Predicate = Callable[[FlightRecord], bool]


def _clean(value: Optional[str]) -> Optional[str]:
    """Trim and lowercase a criterion; None if blank."""
    if value is None:
        return None
    value = value.strip()
    return value.lower() if value else None


def _compact(value: str) -> str:
    return ''.join(value.split()).lower()


@dataclass(frozen=True)
class FilterCriteria:
    """Optional search predicates. Unset fields do not filter."""
    flight: Optional[str] = None
    airline: Optional[str] = None
    destination: Optional[str] = None
    terminal: Optional[str] = None
    status: Optional[str] = None
    departure_date: Optional[date] = None
    arrival_date: Optional[date] = None

    @property
    def is_empty(self) -> bool:
        return not any((
            _clean(self.flight),
            _clean(self.airline),
            _clean(self.destination),
            _clean(self.terminal),
            _clean(self.status),
            self.departure_date,
            self.arrival_date,
        ))

    def predicates(self) -> List[Predicate]:
        """Active predicates, in evaluation order."""
        active: List[Predicate] = []

        flight = _clean(self.flight)
        if flight:
            needle = _compact(flight)
            active.append(lambda r: matches_flight_number(r, needle))

        airline = _clean(self.airline)
        if airline:
            active.append(lambda r: matches_airline(r, airline))

        destination = _clean(self.destination)
        if destination:
            active.append(lambda r: matches_destination(r, destination))

        terminal = _clean(self.terminal)
        if terminal:
            active.append(lambda r: matches_terminal(r, terminal))

        status = _clean(self.status)
        if status:
            active.append(lambda r: matches_status(r, status))

        if self.departure_date:
            departure_date = self.departure_date
            active.append(lambda r: matches_scheduled_date(r.departure, departure_date))

        if self.arrival_date:
            arrival_date = self.arrival_date
            active.append(lambda r: matches_scheduled_date(r.arrival, arrival_date))

        return active


# -----------------------------------------------------------------------------
# Predicates (needles arrive trimmed and lowercased)
# -----------------------------------------------------------------------------

def matches_flight_number(record: FlightRecord, needle: str) -> bool:
    """'BA1234' matches 'BA 1234': whitespace is ignored on both sides."""
    if not record.number:
        return False
    return needle in _compact(record.number)


def matches_airline(record: FlightRecord, needle: str) -> bool:
    name = record.airline_name
    return bool(name) and needle in name.lower()


def matches_destination(record: FlightRecord, needle: str) -> bool:
    leg = record.arrival
    airport = leg.airport if leg else None
    if airport is None:
        return False
    if airport.iata and airport.iata.lower() == needle:
        return True
    if airport.icao and airport.icao.lower() == needle:
        return True
    return bool(airport.name) and needle in airport.name.lower()


def matches_terminal(record: FlightRecord, needle: str) -> bool:
    for leg in (record.departure, record.arrival):
        if leg and leg.terminal and needle in leg.terminal.lower():
            return True
    return False


def matches_status(record: FlightRecord, needle: str) -> bool:
    return bool(record.status) and record.status.lower() == needle


def matches_scheduled_date(leg: Optional[FlightLeg], wanted: date) -> bool:
    """Absent or unparseable times never match."""
    scheduled = leg.scheduled_local if leg else None
    return scheduled is not None and scheduled.date() == wanted


# -----------------------------------------------------------------------------
# Query
# -----------------------------------------------------------------------------

def departure_order_key(record: FlightRecord) -> Tuple[datetime, str]:
    leg = record.departure
    scheduled = leg.scheduled_local if leg else None
    return scheduled or LATEST_LOCAL, record.number or ''


def filter_and_sort(
    records: Iterable[FlightRecord],
    criteria: Optional[FilterCriteria] = None,
) -> List[FlightRecord]:
    """
    Return the records matching every active criterion, in departure order.

    Does not modify the input.
    """
    if criteria is None or criteria.is_empty:
        predicates = []
    else:
        predicates = criteria.predicates()
    matched = [r for r in records if all(p(r) for p in predicates)]
    matched.sort(key=departure_order_key)

    logger.debug(f'Search matched {len(matched)} flights with {len(predicates)} active filters')
    return matched
