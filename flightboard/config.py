"""
Configuration management for FlightBoard.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class AeroDataBoxConfig:
    """AeroDataBox (RapidAPI) configuration."""
    api_key: Optional[str] = os.getenv('AERODATABOX_API_KEY') or None
    api_host: Optional[str] = os.getenv('AERODATABOX_API_HOST') or None
    timeout_seconds: float = float(os.getenv('AERODATABOX_TIMEOUT_SECONDS', '30'))
    max_retries: int = int(os.getenv('AERODATABOX_MAX_RETRIES', '0'))

    # Upstream rejects wider single requests
    max_window_hours: int = 12
    default_lookahead_hours: int = 12

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_host)


@dataclass(frozen=True)
class AirportConfig:
    """Home airport settings."""
    default_airport: str = os.getenv('DEFAULT_AIRPORT', 'EGLL')
    timezone: str = os.getenv('DEFAULT_TIMEZONE', 'Europe/London')


@dataclass(frozen=True)
class CacheConfig:
    """Board cache settings."""
    ttl_seconds: int = int(os.getenv('CACHE_TTL_SECONDS', '120'))
    max_entries: int = 256


@dataclass(frozen=True)
class SearchConfig:
    """Advanced search settings."""
    deadline_seconds: float = float(os.getenv('SEARCH_DEADLINE_SECONDS', '60'))
    # Widest date range a single search may cover, in calendar days
    max_days: int = int(os.getenv('SEARCH_MAX_DAYS', '7'))


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration for locally managed flight records."""
    url: str = os.getenv('DATABASE_URL', 'sqlite:///flightboard.db')

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith('sqlite')


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    aerodatabox: AeroDataBoxConfig
    airport: AirportConfig
    cache: CacheConfig
    search: SearchConfig
    database: DatabaseConfig

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        aerodatabox=AeroDataBoxConfig(),
        airport=AirportConfig(),
        cache=CacheConfig(),
        search=SearchConfig(),
        database=DatabaseConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
