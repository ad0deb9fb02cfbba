"""
API module for FlightBoard.

Provides REST endpoints for:
- Airport board and advanced search (live schedule data)
- Locally managed flight records
- System status
"""

from flightboard.api.flights import flights_bp
from flightboard.api.metrics import metrics_bp
from flightboard.api.records import records_bp

__all__ = ['flights_bp', 'metrics_bp', 'records_bp']
