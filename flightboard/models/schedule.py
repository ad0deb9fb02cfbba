"""
Schedule models - normalized AeroDataBox airport flights.

AeroDataBox returns an airport's movements as two buckets:

    {
        "departures": [ {flight}, ... ],
        "arrivals":   [ {flight}, ... ]
    }

Each flight carries a departure and an arrival leg (either may be missing),
and each leg up to four time sources (scheduled, revised, predicted, runway),
each a {"local": ..., "utc": ...} pair. Every field is optional upstream, so
every field here is Optional and consumers must handle the absent case.

Records are immutable. Direction is not part of the upstream schema: it is
assigned once, at construction, from the bucket the record came from.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from flightboard.timeutils import parse_local, parse_utc


class Direction(str, Enum):
    """Side of the movement relative to the queried home airport."""
    DEPARTURE = 'Departure'
    ARRIVAL = 'Arrival'


def _as_mapping(value: Any, name: str) -> Optional[Mapping[str, Any]]:
    """Return value if it is an object, None if absent; reject anything else."""
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError(f'Expected object for {name!r}, got {type(value).__name__}')
    return value


def _as_str(value: Any) -> Optional[str]:
    # Upstream occasionally sends identifiers such as terminals as numbers
    if value is None:
        return None
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f'Expected string, got {type(value).__name__}')


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == 'true'
    return bool(value)


@dataclass(frozen=True)
class MovementTime:
    """A local/UTC pair of opaque time strings."""
    local: Optional[str] = None
    utc: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, name: str = 'time') -> Optional['MovementTime']:
        data = _as_mapping(data, name)
        if data is None:
            return None
        return cls(local=_as_str(data.get('local')), utc=_as_str(data.get('utc')))

    def local_datetime(self) -> Optional[datetime]:
        return parse_local(self.local)

    def utc_datetime(self) -> Optional[datetime]:
        return parse_utc(self.utc)


@dataclass(frozen=True)
class AirportInfo:
    """Airport identity as reported on a leg."""
    icao: Optional[str] = None
    iata: Optional[str] = None
    name: Optional[str] = None
    short_name: Optional[str] = None
    municipality_name: Optional[str] = None
    country_code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional['AirportInfo']:
        data = _as_mapping(data, 'airport')
        if data is None:
            return None
        return cls(
            icao=_as_str(data.get('icao')),
            iata=_as_str(data.get('iata')),
            name=_as_str(data.get('name')),
            short_name=_as_str(data.get('shortName')),
            municipality_name=_as_str(data.get('municipalityName')),
            country_code=_as_str(data.get('countryCode')),
        )


@dataclass(frozen=True)
class FlightLeg:
    """
    One side (departure or arrival) of a flight movement.

    No leg guarantees that all four time sources are present.
    """
    airport: Optional[AirportInfo] = None
    scheduled_time: Optional[MovementTime] = None
    revised_time: Optional[MovementTime] = None
    predicted_time: Optional[MovementTime] = None
    runway_time: Optional[MovementTime] = None
    terminal: Optional[str] = None
    gate: Optional[str] = None
    check_in_desk: Optional[str] = None
    baggage_belt: Optional[str] = None
    runway: Optional[str] = None
    quality: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, name: str = 'leg') -> Optional['FlightLeg']:
        data = _as_mapping(data, name)
        if data is None:
            return None

        quality = data.get('quality') or []
        if not isinstance(quality, list):
            raise ValueError(f'Expected list for {name}.quality')

        return cls(
            airport=AirportInfo.from_dict(data.get('airport')),
            scheduled_time=MovementTime.from_dict(data.get('scheduledTime'), 'scheduledTime'),
            revised_time=MovementTime.from_dict(data.get('revisedTime'), 'revisedTime'),
            predicted_time=MovementTime.from_dict(data.get('predictedTime'), 'predictedTime'),
            runway_time=MovementTime.from_dict(data.get('runwayTime'), 'runwayTime'),
            terminal=_as_str(data.get('terminal')),
            gate=_as_str(data.get('gate')),
            check_in_desk=_as_str(data.get('checkInDesk')),
            baggage_belt=_as_str(data.get('baggageBelt')),
            runway=_as_str(data.get('runway')),
            quality=tuple(str(q) for q in quality),
        )

    @property
    def scheduled_local(self) -> Optional[datetime]:
        return self.scheduled_time.local_datetime() if self.scheduled_time else None

    @property
    def scheduled_utc(self) -> Optional[datetime]:
        return self.scheduled_time.utc_datetime() if self.scheduled_time else None

    def to_dict(self) -> dict:
        airport = self.airport
        return {
            'airport': {
                'icao': airport.icao,
                'iata': airport.iata,
                'name': airport.name,
                'short_name': airport.short_name,
                'municipality_name': airport.municipality_name,
                'country_code': airport.country_code,
            } if airport else None,
            'scheduled_time': _time_to_dict(self.scheduled_time),
            'revised_time': _time_to_dict(self.revised_time),
            'predicted_time': _time_to_dict(self.predicted_time),
            'runway_time': _time_to_dict(self.runway_time),
            'terminal': self.terminal,
            'gate': self.gate,
            'check_in_desk': self.check_in_desk,
            'baggage_belt': self.baggage_belt,
            'runway': self.runway,
            'quality': list(self.quality),
        }


def _time_to_dict(value: Optional[MovementTime]) -> Optional[dict]:
    if value is None:
        return None
    return {'local': value.local, 'utc': value.utc}


@dataclass(frozen=True)
class AirlineInfo:
    name: Optional[str] = None
    iata: Optional[str] = None
    icao: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional['AirlineInfo']:
        data = _as_mapping(data, 'airline')
        if data is None:
            return None
        return cls(
            name=_as_str(data.get('name')),
            iata=_as_str(data.get('iata')),
            icao=_as_str(data.get('icao')),
        )


@dataclass(frozen=True)
class AircraftInfo:
    model: Optional[str] = None
    reg: Optional[str] = None
    mode_s: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional['AircraftInfo']:
        data = _as_mapping(data, 'aircraft')
        if data is None:
            return None
        return cls(
            model=_as_str(data.get('model')),
            reg=_as_str(data.get('reg')),
            mode_s=_as_str(data.get('modeS')),
        )


@dataclass(frozen=True)
class FlightRecord:
    """
    One scheduled movement at the home airport.

    direction is always set: it is supplied by the normalization step
    from the response bucket, never patched in afterwards.
    """
    direction: Direction
    number: Optional[str] = None
    callsign: Optional[str] = None
    airline: Optional[AirlineInfo] = None
    aircraft: Optional[AircraftInfo] = None
    departure: Optional[FlightLeg] = None
    arrival: Optional[FlightLeg] = None
    status: Optional[str] = None
    codeshare_status: Optional[str] = None
    is_cargo: bool = False

    @classmethod
    def from_dict(cls, data: Any, direction: Direction) -> 'FlightRecord':
        """
        Build a record from one upstream flight object.

        Raises ValueError if the object does not have the expected shape.
        """
        data = _as_mapping(data, 'flight')
        if data is None:
            raise ValueError('Flight entry is null')

        return cls(
            direction=direction,
            number=_as_str(data.get('number')),
            callsign=_as_str(data.get('callSign')),
            airline=AirlineInfo.from_dict(data.get('airline')),
            aircraft=AircraftInfo.from_dict(data.get('aircraft')),
            departure=FlightLeg.from_dict(data.get('departure'), 'departure'),
            arrival=FlightLeg.from_dict(data.get('arrival'), 'arrival'),
            status=_as_str(data.get('status')),
            codeshare_status=_as_str(data.get('codeshareStatus')),
            is_cargo=_as_bool(data.get('isCargo', False)),
        )

    @property
    def own_leg(self) -> Optional[FlightLeg]:
        """The leg on the home airport's side of this movement."""
        if self.direction == Direction.DEPARTURE:
            return self.departure
        return self.arrival

    @property
    def airline_name(self) -> Optional[str]:
        return self.airline.name if self.airline else None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'number': self.number,
            'callsign': self.callsign,
            'direction': self.direction.value,
            'status': self.status,
            'codeshare_status': self.codeshare_status,
            'is_cargo': self.is_cargo,
            'airline': {
                'name': self.airline.name,
                'iata': self.airline.iata,
                'icao': self.airline.icao,
            } if self.airline else None,
            'aircraft': {
                'model': self.aircraft.model,
                'reg': self.aircraft.reg,
                'mode_s': self.aircraft.mode_s,
            } if self.aircraft else None,
            'departure': self.departure.to_dict() if self.departure else None,
            'arrival': self.arrival.to_dict() if self.arrival else None,
        }


def normalize_response(payload: Any) -> List[FlightRecord]:
    """
    Turn a raw two-bucket airport response into one direction-tagged list.

    Departures come first, then arrivals, each in upstream order. Missing
    or null buckets contribute nothing.

    Raises ValueError if the payload does not have the expected shape.
    """
    payload = _as_mapping(payload, 'response')
    if payload is None:
        raise ValueError('Empty response payload')

    records: List[FlightRecord] = []
    buckets: Dict[str, Direction] = {
        'departures': Direction.DEPARTURE,
        'arrivals': Direction.ARRIVAL,
    }
    for key, direction in buckets.items():
        entries = payload.get(key)
        if entries is None:
            continue
        if not isinstance(entries, list):
            raise ValueError(f'Expected list for {key!r}, got {type(entries).__name__}')
        records.extend(FlightRecord.from_dict(entry, direction) for entry in entries)

    return records
