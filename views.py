"""
HTTP routing and behavior for the voucher service,
separated from app.py for testing purposes.
"""

from datetime import datetime, timezone
import logging
import os

from flask import Flask, jsonify, request

from discovery import RelevanceFilter
from logging_config import setup_logging
from storage_strategy import (VoucherStorageStrategy,
                              get_default_storage_strategy)
from validation import ValidationLookup

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _bad_request(message: str):
    logger.info('Rejected request to %s: %s', request.path, message)
    return jsonify({'success': False, 'error': message}), 400


def create_app(
    testing: bool,
    storage_strategy: VoucherStorageStrategy | None = None
) -> tuple[Flask, RelevanceFilter, ValidationLookup]:
    """Initiate and get the "global" objects for the Flask app."""

    if not testing:
        setup_logging()

    app = Flask(__name__)
    app.testing = testing

    if storage_strategy is None:
        storage_strategy = get_default_storage_strategy()
    relevance_filter = RelevanceFilter(storage_strategy)
    validation_lookup = ValidationLookup(storage_strategy)

    def discovery_response(data):
        """Run a discovery and wrap it in the search envelope."""

        query = data.get('query')
        location = data.get('location')
        if not isinstance(query, str):
            return _bad_request('Missing or wrong type for query')
        if location is not None and not isinstance(location, str):
            return _bad_request('Wrong type for location')

        vouchers = relevance_filter.discover(query, location or None)

        return jsonify({
            'success': True,
            'vouchers': [voucher.to_json() for voucher in vouchers],
            'query': query,
            'location': location,
            'total': len(vouchers),
            'timestamp': _timestamp()
        })

    @app.route('/api/vouchers/real-discovery', methods=['POST'])
    def real_discovery():
        """
        HTTP POST method to find vouchers relevant to a search.

        Args:
            request.json (dict): {'query': str, 'location': str (optional)}

        Returns:
            Search envelope with at most 3 vouchers (possibly none).
        """

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _bad_request('Request body must be a JSON object')
        return discovery_response(data)

    @app.route('/api/vouchers/discover', methods=['GET'])
    def discover():
        """HTTP GET variant of real-discovery, using query parameters."""

        return discovery_response(request.args)

    @app.route('/api/vouchers/validate-code', methods=['POST'])
    def validate_code():
        """
        HTTP POST method to check one store/code pair.

        An unknown store or code is not an error: it comes back as
        isValid=false with status 'not_found'.

        Args:
            request.json (dict): {'store': str, 'code': str}

        Returns:
            The validation result with success=true.
        """

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _bad_request('Request body must be a JSON object')

        store, code = data.get('store'), data.get('code')
        if not isinstance(store, str) or not store.strip():
            return _bad_request('Missing or wrong type for store')
        if not isinstance(code, str) or not code.strip():
            return _bad_request('Missing or wrong type for code')

        result = validation_lookup.validate(store, code.strip())
        return jsonify({'success': True, **result.to_json()})

    @app.route('/api/vouchers/active/<path:store>', methods=['GET'])
    def active_for_store(store):
        """
        HTTP GET method listing a store's currently valid codes.

        The store may contain slashes (e.g. "B/Q"), which clients send
        percent-encoded.
        """

        vouchers = validation_lookup.list_active(store)
        return jsonify({
            'success': True,
            'store': store,
            'vouchers': [voucher.to_json() for voucher in vouchers],
            'total': len(vouchers)
        })

    @app.route('/api/vouchers/active', methods=['GET'])
    def all_active():
        """HTTP GET method listing every store's currently valid codes."""

        vouchers = validation_lookup.list_all_active()
        return jsonify({
            'success': True,
            'vouchers': [voucher.to_json() for voucher in vouchers],
            'total': len(vouchers)
        })

    if testing or os.environ.get('VOUCHER_DEBUG'):

        @app.route('/debug', methods=['GET'])
        def debug():
            """
            HTTP GET method to get debug information.

            Only registered when testing or when VOUCHER_DEBUG is set.
            """

            return jsonify({'storage': storage_strategy.debug_info()})

    @app.errorhandler(500)
    def internal_error(error):
        # Flask has already logged the traceback on app.logger
        return jsonify({'success': False, 'error': 'Voucher service failed'}), 500

    return app, relevance_filter, validation_lookup
