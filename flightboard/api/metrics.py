"""
Status API endpoints.

Provides endpoints for:
- GET /api/metrics/status - Upstream, cache, and database status
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, jsonify, current_app
from sqlalchemy import text

from flightboard.config import config
from flightboard.timeutils import local_now

logger = logging.getLogger(__name__)

metrics_bp = Blueprint('metrics', __name__, url_prefix='/api/metrics')


@metrics_bp.route('/status', methods=['GET'])
def get_system_status():
    """
    Get system health and status information.

    Returns:
    - Upstream client statistics
    - Board cache statistics
    - Database connectivity
    - Configuration info
    """
    start_time = time.perf_counter()

    aggregator = current_app.config['FLIGHT_AGGREGATOR']
    cache = current_app.config['RESULT_CACHE']
    session_factory = current_app.config['FLIGHT_STORE'].session_factory

    db_ok = True
    try:
        with session_factory() as session:
            session.execute(text('SELECT 1'))
    except Exception as e:
        db_ok = False
        logger.error(f'Database health check failed: {e}')

    upstream = aggregator.client.stats
    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'status': 'healthy' if (db_ok and upstream['api_configured']) else 'degraded',
        'database': {
            'connected': db_ok,
            'type': 'sqlite' if config.database.is_sqlite else 'other',
        },
        'upstream': upstream,
        'cache': cache.stats,
        'config': {
            'default_airport': config.airport.default_airport,
            'timezone': config.airport.timezone,
            'local_time': local_now(config.airport.timezone).isoformat(timespec='minutes'),
            'cache_ttl_seconds': config.cache.ttl_seconds,
            'max_window_hours': config.aerodatabox.max_window_hours,
            'max_retries': config.aerodatabox.max_retries,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })
