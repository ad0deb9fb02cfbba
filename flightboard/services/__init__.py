"""
Query and record services.

Search over fetched schedule data, and storage for locally entered flights.
"""

from flightboard.services.flight_search import FilterCriteria, filter_and_sort
from flightboard.services.flight_store import FlightStore, FlightValidationError

__all__ = ['FilterCriteria', 'filter_and_sort', 'FlightStore', 'FlightValidationError']
