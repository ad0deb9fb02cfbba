"""
FlightBoard Flask Application.

Main entry point for the web application. Initializes:
- Database schema for local flight records
- AeroDataBox aggregator and board cache
- API routes

Usage:
    python -m flightboard.app

Or with gunicorn:
    gunicorn 'flightboard.app:create_app()'
"""

import logging
import os
from typing import Optional

from flask import Flask
from flask_cors import CORS

from flightboard.config import config
from flightboard.models import init_db
from flightboard.api import flights_bp, metrics_bp, records_bp
from flightboard.cache import ResultCache, result_cache
from flightboard.ingestion import FlightAggregator
from flightboard.services import FlightStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(
    aggregator: Optional[FlightAggregator] = None,
    cache: Optional[ResultCache] = None,
    store: Optional[FlightStore] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        aggregator: Flight aggregator (built from config if None)
        cache: Board result cache (module singleton if None)
        store: Local flight record store. When None, the configured
               database is used and its schema is created.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    if store is None:
        logger.info('Initializing database...')
        init_db()
        store = FlightStore()

    app.config['FLIGHT_AGGREGATOR'] = aggregator or FlightAggregator.from_config()
    app.config['RESULT_CACHE'] = cache if cache is not None else result_cache
    app.config['FLIGHT_STORE'] = store

    # Register API blueprints
    app.register_blueprint(flights_bp)
    app.register_blueprint(records_bp)
    app.register_blueprint(metrics_bp)

    if not app.config['FLIGHT_AGGREGATOR'].client.is_configured:
        logger.warning('AeroDataBox credentials missing. Set AERODATABOX_API_KEY and AERODATABOX_API_HOST in .env')

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    port = int(os.environ.get('PORT', 5000))

    logger.info(f'Starting FlightBoard on http://localhost:{port}')
    logger.info(f'Board: http://localhost:{port}/api/flights/board')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
        use_reloader=False,
    )


if __name__ == '__main__':
    run_development_server()
