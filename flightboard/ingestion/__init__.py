"""
Data ingestion module for FlightBoard.

Handles splitting query windows, calling the AeroDataBox API, and merging
per-window results into one chronological flight list.
"""

from flightboard.ingestion.aerodatabox_client import AeroDataBoxClient
from flightboard.ingestion.aggregator import FlightAggregator
from flightboard.ingestion.windows import TimeWindow, split_window

__all__ = ['AeroDataBoxClient', 'FlightAggregator', 'TimeWindow', 'split_window']
