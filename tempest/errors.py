import logging

from flask import g, jsonify
from werkzeug.exceptions import HTTPException

from tempest.models import ErrorKind, Failure

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.REQUEST_CONSTRUCTION_FAILED: 400,
    ErrorKind.UPSTREAM_REJECTED: 502,
    ErrorKind.UPSTREAM_UNREACHABLE: 502,
    ErrorKind.TIMEOUT: 504,
}


def status_for(failure: Failure) -> int:
    origin = failure.origin
    if origin.kind is ErrorKind.UPSTREAM_REJECTED and origin.status == 404:
        return 404
    return _STATUS_BY_KIND.get(origin.kind, 502)


def failure_response(failure: Failure):
    """Turn a classified failure into a JSON error response"""
    origin = failure.origin
    body = {
        'error': origin.message,
        'kind': origin.kind.value,
        'request_id': g.get('request_id'),
    }

    if failure.kind is ErrorKind.AGGREGATE_MEMBER_FAILED:
        body['failed_member'] = {
            'index': failure.index,
            **(failure.request.describe() if failure.request else {}),
        }

    return jsonify(body), status_for(failure)


def register_error_handlers(app):
    @app.errorhandler(429)
    def ratelimit_handler(e):
        return jsonify({
            "error": "Rate limit exceeded",
            "message": str(e.description)
        }), 429

    @app.errorhandler(Exception)
    def unexpected_error(e):
        if isinstance(e, HTTPException):
            return e

        app.logger.error(f"Unexpected error in request {g.get('request_id')}", exc_info=e)
        return jsonify({
            'error': 'Internal server error',
            'request_id': g.get('request_id')
        }), 500
