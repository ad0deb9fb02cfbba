"""
Models for FlightBoard.

Two families:
1. Schedule dataclasses - immutable, normalized AeroDataBox flights
2. SQLAlchemy ORM - locally managed flight records
"""

from flightboard.models.base import Base, engine, SessionLocal, init_db, get_session
from flightboard.models.flight import Flight
from flightboard.models.schedule import (
    AircraftInfo,
    AirlineInfo,
    AirportInfo,
    Direction,
    FlightLeg,
    FlightRecord,
    MovementTime,
    normalize_response,
)

__all__ = [
    'Base',
    'engine',
    'SessionLocal',
    'init_db',
    'get_session',
    'Flight',
    'AircraftInfo',
    'AirlineInfo',
    'AirportInfo',
    'Direction',
    'FlightLeg',
    'FlightRecord',
    'MovementTime',
    'normalize_response',
]
