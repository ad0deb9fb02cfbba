"""
Local flight record API endpoints.

Provides endpoints for:
- GET /api/records - List all records
- POST /api/records - Create a record
- GET /api/records/<id> - Get a single record
- PUT /api/records/<id> - Update a record
- DELETE /api/records/<id> - Delete a record
"""

import logging

from flask import Blueprint, jsonify, request, current_app

from flightboard.services.flight_store import FlightValidationError

logger = logging.getLogger(__name__)

records_bp = Blueprint('records', __name__, url_prefix='/api/records')


def _store():
    return current_app.config['FLIGHT_STORE']


@records_bp.route('', methods=['GET'])
def list_records():
    flights = _store().list_all()
    return jsonify({
        'records': [f.to_dict() for f in flights],
        'count': len(flights),
    })


@records_bp.route('', methods=['POST'])
def create_record():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'JSON body required'}), 400
    if not isinstance(data, dict):
        return jsonify({'error': 'JSON object required'}), 400

    try:
        flight = _store().create(data)
    except FlightValidationError as e:
        return jsonify({'error': 'Invalid flight', 'fields': e.errors}), 400

    return jsonify({
        'success': True,
        'record': flight.to_dict(),
        'message': 'Flight added successfully!',
    }), 201


@records_bp.route('/<int:flight_id>', methods=['GET'])
def get_record(flight_id: int):
    flight = _store().get(flight_id)
    if flight is None:
        return jsonify({'error': 'Flight not found'}), 404
    return jsonify(flight.to_dict())


@records_bp.route('/<int:flight_id>', methods=['PUT'])
def update_record(flight_id: int):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'JSON body required'}), 400
    if not isinstance(data, dict):
        return jsonify({'error': 'JSON object required'}), 400

    try:
        flight = _store().update(flight_id, data)
    except FlightValidationError as e:
        return jsonify({'error': 'Invalid flight', 'fields': e.errors}), 400

    if flight is None:
        return jsonify({'error': 'Flight not found'}), 404
    return jsonify({'success': True, 'record': flight.to_dict()})


@records_bp.route('/<int:flight_id>', methods=['DELETE'])
def delete_record(flight_id: int):
    if not _store().delete(flight_id):
        return jsonify({'error': 'Flight not found'}), 404
    return jsonify({'success': True})
