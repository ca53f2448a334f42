import logging
import time
from typing import Dict, Mapping, Optional

import requests

from tempest.models import EndpointKind, ErrorKind, Failure, FetchResult, Success
from tempest.utils.log import log_owm_interaction

logger = logging.getLogger(__name__)

# raised by requests before anything goes on the wire
_CONSTRUCTION_ERRORS = (
    requests.exceptions.URLRequired,
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
)

_LOCATION_REQUIRED = {
    EndpointKind.CURRENT_WEATHER,
    EndpointKind.FORECAST,
    EndpointKind.DAILY_FORECAST,
}


class WeatherAPI:
    """Client for the OpenWeatherMap API: one GET per fetch, no caching"""

    def __init__(self, api_key: str, base_url: str = "https://api.openweathermap.org/data/2.5",
                 timeout: float = 5, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        # no session: every fetch is a standalone requests.get
        self.session = session

    def _check_params(self, kind: EndpointKind, params: Mapping[str, str]) -> Optional[str]:
        """Return a problem description if params cannot form a request"""
        if kind in _LOCATION_REQUIRED:
            if 'q' not in params and not ('lat' in params and 'lon' in params):
                return "Either q or lat and lon is required"
        elif kind is EndpointKind.AIR_QUALITY:
            if not ('lat' in params and 'lon' in params):
                return "lat and lon are required"
        elif kind is EndpointKind.BATCH_WEATHER:
            if not params.get('id'):
                return "id is required"
        return None

    def _build_params(self, kind: EndpointKind, params: Mapping[str, str]) -> Dict[str, str]:
        query = dict(params)
        query['appid'] = self.api_key
        if kind.uses_units:
            query.setdefault('units', 'metric')
        return query

    def fetch(self, kind: EndpointKind, params: Mapping[str, str]) -> FetchResult:
        """
        Perform a single upstream call.

        Args:
            kind: Endpoint to query
            params: Query parameters without the api key

        Returns:
            Success with the decoded JSON document, or a classified Failure

        Raises:
            ValueError: If kind is not an EndpointKind
        """
        if not isinstance(kind, EndpointKind):
            raise ValueError(f"Unknown endpoint kind: {kind!r}")

        problem = self._check_params(kind, params)
        if problem:
            return Failure(ErrorKind.REQUEST_CONSTRUCTION_FAILED, problem)

        url = f"{self.base_url}{kind.path}"
        query = self._build_params(kind, params)

        started = time.monotonic()
        try:
            http = self.session or requests
            response = http.get(url, params=query, timeout=self.timeout)
        except _CONSTRUCTION_ERRORS as e:
            logger.error(f"Could not build request for {kind.value}: {e}")
            return Failure(ErrorKind.REQUEST_CONSTRUCTION_FAILED, f"Error building request: {e}")
        except requests.exceptions.Timeout:
            logger.error(f"OpenWeatherMap API timeout on {kind.path}")
            return Failure(ErrorKind.TIMEOUT,
                           f"No response from OpenWeatherMap API within {self.timeout}s")
        except requests.exceptions.RequestException as e:
            logger.error(f"OpenWeatherMap API unreachable: {e}")
            return Failure(ErrorKind.UPSTREAM_UNREACHABLE, "No response received from OpenWeatherMap API")

        log_owm_interaction(url, query, response.status_code, time.monotonic() - started)

        if not response.ok:
            message = _provider_message(response)
            logger.warning(f"OpenWeatherMap API rejected {kind.path} with {response.status_code}: {message}")
            return Failure(ErrorKind.UPSTREAM_REJECTED, message, status=response.status_code)

        try:
            return Success(response.json())
        except ValueError:
            logger.error(f"OpenWeatherMap API returned a non-JSON body for {kind.path}")
            return Failure(ErrorKind.UPSTREAM_REJECTED, "Malformed response from OpenWeatherMap API",
                           status=response.status_code)

    def close(self):
        if self.session is not None:
            self.session.close()


def _provider_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get('message'):
        return str(body['message'])
    return response.reason or f"HTTP {response.status_code}"
