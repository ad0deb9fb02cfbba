"""
Local flight record store.

Create/read/update/delete over flights entered by hand. Validation
mirrors the record form: flight number, airline, destination, and both
times are required; terminal and status fall back to defaults.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select

from flightboard.models.base import SessionLocal, get_session
from flightboard.models.flight import Flight, DEFAULT_STATUS, DEFAULT_TERMINAL

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    'flight_number': 'Flight number is required',
    'airline': 'Airline is required',
    'destination': 'Destination is required',
    'departure_time': 'Departure time is required',
    'arrival_time': 'Arrival time is required',
}

DATETIME_FIELDS = ('departure_time', 'arrival_time')
TEXT_FIELDS = ('flight_number', 'airline', 'destination', 'gate', 'terminal', 'status')


class FlightValidationError(ValueError):
    """Raised when submitted flight data is invalid. Carries per-field messages."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__('; '.join(errors.values()))
        self.errors = errors


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def clean_flight_data(data: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Validate and normalize submitted flight fields.

    With partial=True only the supplied fields are checked (updates).

    Raises:
        FlightValidationError: listing every invalid field
    """
    if not isinstance(data, Mapping):
        raise FlightValidationError({'body': 'Flight data must be an object'})

    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}

    for name in TEXT_FIELDS:
        if name not in data:
            continue
        value = data[name]
        if value is not None and not isinstance(value, str):
            errors[name] = f'{name} must be a string'
            continue
        cleaned[name] = value.strip() if value else None

    for name in DATETIME_FIELDS:
        if name not in data:
            continue
        parsed = _parse_datetime(data[name])
        if data[name] and parsed is None:
            errors[name] = f'{name} must be an ISO-8601 datetime'
            continue
        cleaned[name] = parsed

    for name, message in REQUIRED_FIELDS.items():
        if name in errors:
            continue
        if partial and name not in data:
            continue
        if not cleaned.get(name):
            errors[name] = message

    if errors:
        raise FlightValidationError(errors)

    if not partial:
        cleaned['terminal'] = cleaned.get('terminal') or DEFAULT_TERMINAL
        cleaned['status'] = cleaned.get('status') or DEFAULT_STATUS
    return cleaned


class FlightStore:
    """CRUD access to locally managed flights."""

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    def create(self, data: Mapping[str, Any]) -> Flight:
        fields = clean_flight_data(data)
        flight = Flight(**fields)
        with get_session(self.session_factory) as session:
            session.add(flight)
            session.flush()
        logger.info(f'Created flight record {flight.id} ({flight.flight_number})')
        return flight

    def get(self, flight_id: int) -> Optional[Flight]:
        with get_session(self.session_factory) as session:
            return session.get(Flight, flight_id)

    def list_all(self) -> List[Flight]:
        """All records, ordered by departure time."""
        with get_session(self.session_factory) as session:
            stmt = select(Flight).order_by(Flight.departure_time, Flight.id)
            return list(session.scalars(stmt))

    def update(self, flight_id: int, data: Mapping[str, Any]) -> Optional[Flight]:
        """Apply a partial update. Returns None if the record does not exist."""
        fields = clean_flight_data(data, partial=True)
        with get_session(self.session_factory) as session:
            flight = session.get(Flight, flight_id)
            if flight is None:
                return None
            for name, value in fields.items():
                if name == 'terminal':
                    value = value or DEFAULT_TERMINAL
                elif name == 'status':
                    value = value or DEFAULT_STATUS
                setattr(flight, name, value)
        logger.info(f'Updated flight record {flight_id}')
        return flight

    def delete(self, flight_id: int) -> bool:
        with get_session(self.session_factory) as session:
            flight = session.get(Flight, flight_id)
            if flight is None:
                return False
            session.delete(flight)
        logger.info(f'Deleted flight record {flight_id}')
        return True
