"""
Flight model - locally managed flight records.

These rows are entered by operators through the records API. They are
independent of the AeroDataBox schedule data, which is never stored.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from flightboard.models.base import Base

DEFAULT_TERMINAL = '1'
DEFAULT_STATUS = 'Scheduled'


class Flight(Base):
    """A flight added by hand to the local board."""

    __tablename__ = 'flights'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    flight_number: Mapped[str] = mapped_column(
        String(16),
        index=True,
        comment='Flight number (e.g., BA 1234)'
    )

    airline: Mapped[str] = mapped_column(String(100))

    destination: Mapped[str] = mapped_column(
        String(100),
        comment='Destination airport code or name'
    )

    departure_time: Mapped[datetime] = mapped_column(DateTime)
    arrival_time: Mapped[datetime] = mapped_column(DateTime)

    gate: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    terminal: Mapped[str] = mapped_column(String(10), default=DEFAULT_TERMINAL)

    status: Mapped[str] = mapped_column(String(32), default=DEFAULT_STATUS)

    def __repr__(self) -> str:
        return f'<Flight {self.id} {self.flight_number} -> {self.destination}>'

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'id': self.id,
            'flight_number': self.flight_number,
            'airline': self.airline,
            'destination': self.destination,
            'departure_time': self.departure_time.isoformat() if self.departure_time else None,
            'arrival_time': self.arrival_time.isoformat() if self.arrival_time else None,
            'gate': self.gate,
            'terminal': self.terminal,
            'status': self.status,
        }
