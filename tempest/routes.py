from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from tempest.errors import failure_response
from tempest.models import AggregatePolicy, EndpointKind, LogicalRequest
from tempest.services.formatting import (
    extract_air_quality_info,
    extract_daily_forecast_info,
    extract_forecast_info,
    extract_group_info,
    extract_weather_info,
)
from tempest.utils.validation import (
    batch_locations,
    location_params,
    validate_batch,
    validate_coordinates,
    validate_days,
    validate_location,
)

weather_bp = Blueprint('weather', __name__)


def _gateway():
    return current_app.extensions['tempest'].gateway


def _single(kind, shape, **params):
    result = _gateway().fetch(LogicalRequest.create(kind, **params))
    if not result.ok:
        return failure_response(result)
    return jsonify(shape(result.document))


@weather_bp.route('/', methods=['GET'])
def index():
    return jsonify({'status': 'ok'})


@weather_bp.route('/health', methods=['GET'])
def health_check():
    return jsonify({
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "cache_size": _gateway().cache.live_count()
    })


@weather_bp.route('/weather', methods=['GET'])
@validate_location
def current_weather():
    return _single(EndpointKind.CURRENT_WEATHER, extract_weather_info, **location_params())


@weather_bp.route('/forecast', methods=['GET'])
@validate_location
def forecast():
    return _single(EndpointKind.FORECAST, extract_forecast_info, **location_params())


@weather_bp.route('/forecast/daily', methods=['GET'])
@validate_location
@validate_days
def daily_forecast():
    cnt = request.args.get('cnt', default=7, type=int)
    return _single(EndpointKind.DAILY_FORECAST, extract_daily_forecast_info, cnt=cnt, **location_params())


@weather_bp.route('/air_quality', methods=['GET'])
@validate_coordinates
def air_quality():
    return _single(EndpointKind.AIR_QUALITY, extract_air_quality_info,
                   lat=request.args.get('lat', type=float),
                   lon=request.args.get('lon', type=float))


@weather_bp.route('/weather/group', methods=['GET'])
def weather_group():
    ids = [item.strip() for item in request.args.get('ids', '').split(',') if item.strip()]
    if not ids or not all(item.isdigit() for item in ids):
        return jsonify({"error": "ids must be a comma separated list of city ids"}), 400

    result = _gateway().fetch(LogicalRequest.create(EndpointKind.BATCH_WEATHER, id=','.join(ids)))
    if not result.ok:
        return failure_response(result)
    return jsonify({'results': extract_group_info(result.document)})


@weather_bp.route('/details', methods=['GET'])
@validate_location
def details():
    params = location_params()
    outcome = _gateway().run([
        LogicalRequest.create(EndpointKind.CURRENT_WEATHER, **params),
        LogicalRequest.create(EndpointKind.FORECAST, **params),
    ], AggregatePolicy.ALL_OR_NOTHING)

    if not outcome.ok:
        return failure_response(outcome.failure)

    current_data, forecast_data = outcome.documents
    return jsonify({
        'current': extract_weather_info(current_data),
        'forecast': extract_forecast_info(forecast_data),
    })


@weather_bp.route('/batch', methods=['GET'])
@validate_batch
def batch():
    locations = batch_locations()
    outcome = _gateway().run(
        [LogicalRequest.create(EndpointKind.CURRENT_WEATHER, q=location) for location in locations],
        AggregatePolicy.BEST_EFFORT,
    )

    if not outcome.ok:
        return failure_response(outcome.failure)

    return jsonify({'results': [extract_weather_info(document) for document in outcome.documents]})
