from functools import wraps

from flask import current_app, jsonify, request


def _coordinates_error():
    return jsonify({
        "error": "Invalid coordinates range",
        "details": {
            "latitude": "Must be between -90 and 90",
            "longitude": "Must be between -180 and 180"
        }
    }), 400


def location_params():
    """
    Location parameters for the current request.

    ``lat``/``lon`` win over a city name; ``location`` and ``q`` are
    aliases, and DEFAULT_LOCATION is used when nothing is given.
    """
    lat = request.args.get('lat', type=float)
    lon = request.args.get('lon', type=float)
    if lat is not None and lon is not None:
        return {'lat': lat, 'lon': lon}

    location = request.args.get('location') or request.args.get('q') or current_app.config['DEFAULT_LOCATION']
    return {'q': location}


def validate_coordinates(f):
    """
    Require lat and lon query parameters within the valid range.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        lat = request.args.get('lat', type=float)
        lon = request.args.get('lon', type=float)

        if lat is None or lon is None:
            return jsonify({"error": "Missing coordinates parameters"}), 400

        if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
            return _coordinates_error()

        return f(*args, **kwargs)

    return wrapper


def validate_location(f):
    """
    Accept either a city name or a full coordinate pair.
    Coordinates, when given, must both be present and in range.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        has_lat = 'lat' in request.args
        has_lon = 'lon' in request.args
        if has_lat or has_lon:
            lat = request.args.get('lat', type=float)
            lon = request.args.get('lon', type=float)
            if lat is None or lon is None:
                return jsonify({"error": "Both lat and lon must be numbers"}), 400
            if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
                return _coordinates_error()

        return f(*args, **kwargs)

    return wrapper


def validate_days(f):
    """Optional cnt parameter for the daily forecast: 1..16"""

    @wraps(f)
    def wrapper(*args, **kwargs):
        cnt = request.args.get('cnt', default=7, type=int)

        if cnt is None or not (1 <= cnt <= 16):
            return jsonify({
                "error": "Invalid day count",
                "details": "cnt must be an integer between 1 and 16"
            }), 400

        return f(*args, **kwargs)

    return wrapper


def validate_batch(f):
    """Require a comma separated locations list no longer than MAX_BATCH_SIZE"""

    @wraps(f)
    def wrapper(*args, **kwargs):
        locations = batch_locations()
        limit = current_app.config['MAX_BATCH_SIZE']

        if not locations:
            return jsonify({"error": "Missing locations parameter"}), 400

        if len(locations) > limit:
            return jsonify({
                "error": "Too many locations",
                "details": f"At most {limit} locations per request"
            }), 400

        return f(*args, **kwargs)

    return wrapper


def batch_locations():
    raw = request.args.get('locations', '')
    return [item.strip() for item in raw.split(',') if item.strip()]
