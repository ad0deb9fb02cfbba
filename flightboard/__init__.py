"""
FlightBoard Backend Package.

Airport departures/arrivals board built with Flask, Requests, and SQLAlchemy.

Modules:
    api/         REST endpoints for the board, advanced search, local records, status
    models/      Schedule dataclasses (upstream flights) and the SQLAlchemy Flight model
    ingestion/   AeroDataBox client, time-window splitting, and aggregation
    services/    Flight search (filter/sort) and the local flight record store
    cache.py     Thread-safe TTL cache for default board queries
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
