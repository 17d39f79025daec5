"""
Transit catalogue - Flask Web API Blueprint
Statistics, map and itinerary queries over one loaded network
"""

import json
import time
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, Response, jsonify, request
from flask_cors import CORS

from .config import config
from .core_route_service import RequestHandler
from .exceptions import InvalidConfigurationError, RequestFormatError, TransitCatalogueError
from .logger import logger
from .models.domain import ErrorKind
from .readers.json_reader import (
    ERROR_MESSAGE, build_request_handler, clean_nan_values, handle_bus_request,
    itinerary_to_dict, load_document, process_stat_requests,
)

catalogue_bp = Blueprint('catalogue_bp', __name__)

# Global request handler instance
request_handler: Optional[RequestHandler] = None


def initialize_request_handler(document: Optional[Dict[str, Any]] = None, path: Optional[str] = None):
    """Load the network once; `path` defaults to the configured input document"""
    global request_handler
    try:
        if document is None:
            path = path or config.input_path
            if not path:
                raise InvalidConfigurationError("No input document configured (set CATALOGUE_INPUT)")
            with open(path, 'r', encoding='utf-8') as f:
                document = load_document(f.read())
        request_handler = build_request_handler(document)
        logger.info("Request handler initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize request handler: {e}")
        raise
    return request_handler


def _not_found(message: str = ErrorKind.NOT_FOUND.value):
    return jsonify({ERROR_MESSAGE: message}), 404


def _service_unavailable():
    return jsonify({'status': 'error', 'message': 'Request handler not initialized'}), 500


@catalogue_bp.route('/catalogue/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    if request_handler is None:
        return _service_unavailable()
    return jsonify({
        'status': 'healthy',
        'message': 'Transit catalogue is running',
        'routing': request_handler.router is not None,
        'map': request_handler.renderer is not None,
        'timestamp': time.time()
    })


@catalogue_bp.route('/catalogue/buses/<path:name>', methods=['GET'])
def bus_info(name: str):
    """Line statistics"""
    if request_handler is None:
        return _service_unavailable()
    response = handle_bus_request({'id': 0, 'name': name}, request_handler)
    response.pop('request_id')
    if ERROR_MESSAGE in response:
        return _not_found()
    return jsonify(clean_nan_values(response))


@catalogue_bp.route('/catalogue/stops/<path:name>', methods=['GET'])
def stop_info(name: str):
    """Lines serving a stop"""
    if request_handler is None:
        return _service_unavailable()
    buses = request_handler.get_buses_serving_stop(name)
    if buses is None:
        return _not_found()
    return jsonify({'buses': buses})


@catalogue_bp.route('/catalogue/route', methods=['GET'])
def route():
    """Fastest itinerary between two stops"""
    if request_handler is None:
        return _service_unavailable()
    from_stop = request.args.get('from', '').strip()
    to_stop = request.args.get('to', '').strip()
    if not from_stop or not to_stop:
        return jsonify({'error': "Query parameters 'from' and 'to' are required"}), 400
    try:
        result = request_handler.build_itinerary(from_stop, to_stop)
    except InvalidConfigurationError as e:
        return jsonify({'error': str(e)}), 409
    if not result.is_found:
        return _not_found(result.error.value)
    return jsonify(clean_nan_values(itinerary_to_dict(result)))


@catalogue_bp.route('/catalogue/map', methods=['GET'])
def network_map():
    """Rendered SVG map"""
    if request_handler is None:
        return _service_unavailable()
    try:
        svg = request_handler.render_map()
    except InvalidConfigurationError as e:
        return jsonify({'error': str(e)}), 409
    return Response(svg, mimetype='image/svg+xml')


@catalogue_bp.route('/catalogue/stat_requests', methods=['POST'])
def stat_requests():
    """Batch of stat requests in the JSON document format"""
    if request_handler is None:
        return _service_unavailable()
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({'error': 'No data provided'}), 400
    requests_list = data.get('stat_requests') if isinstance(data, dict) else data
    if not isinstance(requests_list, list):
        return jsonify({'error': 'Expected a list of stat requests'}), 400
    try:
        responses = process_stat_requests(requests_list, request_handler)
    except RequestFormatError as e:
        return jsonify({'error': str(e)}), 400
    except TransitCatalogueError as e:
        logger.error(f"/stat_requests error: {e}")
        return jsonify({'error': str(e)}), 409
    body = json.dumps(clean_nan_values(responses), ensure_ascii=False)
    return Response(body, mimetype='application/json')


def create_app(document: Optional[Dict[str, Any]] = None, path: Optional[str] = None) -> Flask:
    """Flask app with the catalogue blueprint and a loaded network"""
    app = Flask(__name__)
    CORS(app)
    initialize_request_handler(document=document, path=path)
    app.register_blueprint(catalogue_bp)
    return app
