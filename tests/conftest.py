"""
Shared fixtures for FlightBoard tests.

Upstream HTTP is never hit: the AeroDataBox client gets a MagicMock
session, and aggregator tests use a scripted in-memory client.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from flightboard.ingestion.aerodatabox_client import AeroDataBoxClient
from flightboard.ingestion.windows import TimeWindow
from flightboard.models.base import Base
from flightboard.models.schedule import Direction, FlightRecord
from flightboard.services.flight_store import FlightStore


# =============================================================================
# RAW UPSTREAM PAYLOADS
# =============================================================================


def raw_leg(
    iata: Optional[str] = None,
    icao: Optional[str] = None,
    name: Optional[str] = None,
    local: Optional[str] = None,
    utc: Optional[str] = None,
    terminal: Optional[str] = None,
    **extra,
) -> dict:
    """One upstream leg object in AeroDataBox camelCase."""
    leg = {
        'airport': {'iata': iata, 'icao': icao, 'name': name},
        'scheduledTime': {'local': local, 'utc': utc},
        'terminal': terminal,
        'quality': ['Basic'],
    }
    leg.update(extra)
    return leg


def raw_flight(
    number: str = 'BA 1234',
    airline: str = 'British Airways',
    status: str = 'Expected',
    departure: Optional[dict] = None,
    arrival: Optional[dict] = None,
) -> dict:
    return {
        'number': number,
        'callSign': 'BAW1234',
        'status': status,
        'codeshareStatus': 'IsOperator',
        'isCargo': False,
        'airline': {'name': airline, 'iata': number[:2], 'icao': None},
        'aircraft': {'model': 'Airbus A320', 'reg': 'G-EUYA', 'modeS': '400A0B'},
        'departure': departure,
        'arrival': arrival,
    }


@pytest.fixture
def airport_payload() -> dict:
    """Two departures and one arrival at EGLL."""
    return {
        'departures': [
            raw_flight(
                number='BA 1234',
                departure=raw_leg('LHR', 'EGLL', 'London Heathrow',
                                  '2024-01-01 10:30+00:00', '2024-01-01 10:30Z', terminal='5'),
                arrival=raw_leg('JFK', 'KJFK', 'New York JFK',
                                '2024-01-01 13:30-05:00', '2024-01-01 18:30Z', terminal='7'),
            ),
            raw_flight(
                number='LH 200',
                airline='Lufthansa',
                status='Delayed',
                departure=raw_leg('LHR', 'EGLL', 'London Heathrow',
                                  '2024-01-01 08:15+00:00', '2024-01-01 08:15Z', terminal='2'),
                arrival=raw_leg('FRA', 'EDDF', 'Frankfurt-am-Main',
                                '2024-01-01 10:55+01:00', '2024-01-01 09:55Z', terminal='1'),
            ),
        ],
        'arrivals': [
            raw_flight(
                number='EK 1',
                airline='Emirates',
                status='Landed',
                departure=raw_leg('DXB', 'OMDB', 'Dubai',
                                  '2024-01-01 02:40+04:00', '2023-12-31 22:40Z'),
                arrival=raw_leg('LHR', 'EGLL', 'London Heathrow',
                                '2024-01-01 06:25+00:00', '2024-01-01 06:25Z', terminal='3'),
            ),
        ],
    }


# =============================================================================
# NORMALIZED RECORDS
# =============================================================================


def make_record(
    number: Optional[str] = 'BA 1234',
    direction: Direction = Direction.DEPARTURE,
    airline: str = 'British Airways',
    status: str = 'Expected',
    departure: Optional[dict] = None,
    arrival: Optional[dict] = None,
) -> FlightRecord:
    """Build a normalized record through the same path as upstream data."""
    data = raw_flight(
        number=number or '',
        airline=airline,
        status=status,
        departure=departure,
        arrival=arrival,
    )
    data['number'] = number
    return FlightRecord.from_dict(data, direction)


@pytest.fixture
def record_factory() -> Callable[..., FlightRecord]:
    return make_record


@pytest.fixture
def leg_factory() -> Callable[..., dict]:
    return raw_leg


# =============================================================================
# UPSTREAM DOUBLES
# =============================================================================


def mock_response(status_code: int = 200, json_data=None, text: str = '') -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def response_factory() -> Callable[..., MagicMock]:
    return mock_response


@pytest.fixture
def mock_session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(mock_session) -> AeroDataBoxClient:
    """Configured client whose HTTP session is a mock."""
    return AeroDataBoxClient(
        api_key='test-key',
        api_host='aerodatabox.p.rapidapi.com',
        timeout=5.0,
        session=mock_session,
    )


class ScriptedClient:
    """
    In-memory stand-in for AeroDataBoxClient.

    Returns records from a {window_start: [records]} script and remembers
    every window it was asked for.
    """

    def __init__(self, script: Optional[Dict[datetime, List[FlightRecord]]] = None,
                 configured: bool = True, timeout: float = 30.0):
        self.script = script or {}
        self.configured = configured
        self.timeout = timeout
        self.calls: List[TimeWindow] = []
        self.timeouts: List[Optional[float]] = []
        self.on_fetch: Optional[Callable[[TimeWindow], None]] = None

    @property
    def is_configured(self) -> bool:
        return self.configured

    def fetch_window(self, airport_code, window, include_cancelled=False, timeout=None):
        self.calls.append(window)
        self.timeouts.append(timeout)
        if self.on_fetch:
            self.on_fetch(window)
        return list(self.script.get(window.start, []))

    @property
    def stats(self) -> dict:
        return {'requests': len(self.calls), 'errors': 0,
                'last_request_time': 0, 'api_configured': self.configured}


@pytest.fixture
def scripted_client() -> ScriptedClient:
    return ScriptedClient()


@pytest.fixture
def scripted_client_factory() -> Callable[..., ScriptedClient]:
    return ScriptedClient


# =============================================================================
# LOCAL STORE
# =============================================================================


@pytest.fixture
def session_factory():
    """Session factory over a fresh in-memory SQLite database."""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def store(session_factory) -> FlightStore:
    return FlightStore(session_factory=session_factory)
