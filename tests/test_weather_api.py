from unittest.mock import patch

import pytest
import requests

from tempest.models import EndpointKind, ErrorKind
from tempest.services.weather_api import WeatherAPI
from tests.conftest import make_response


@pytest.fixture
def api(session):
    return WeatherAPI(api_key='secret', base_url='https://owm.test/data/2.5', timeout=3, session=session)


class TestWeatherAPI:

    def test_success_returns_document(self, api, session):
        session.get.return_value = make_response(200, {'name': 'London'})

        result = api.fetch(EndpointKind.CURRENT_WEATHER, {'q': 'London'})

        assert result.ok
        assert result.document == {'name': 'London'}
        session.get.assert_called_once_with(
            'https://owm.test/data/2.5/weather',
            params={'q': 'London', 'appid': 'secret', 'units': 'metric'},
            timeout=3,
        )

    def test_air_quality_has_no_units(self, api, session):
        session.get.return_value = make_response(200, {'list': []})

        api.fetch(EndpointKind.AIR_QUALITY, {'lat': '1', 'lon': '2'})

        args, kwargs = session.get.call_args
        assert args[0] == 'https://owm.test/data/2.5/air_pollution'
        assert kwargs['params'] == {'lat': '1', 'lon': '2', 'appid': 'secret'}

    def test_daily_forecast_path(self, api, session):
        session.get.return_value = make_response(200, {'list': []})

        api.fetch(EndpointKind.DAILY_FORECAST, {'q': 'Oslo', 'cnt': '3'})

        assert session.get.call_args[0][0] == 'https://owm.test/data/2.5/forecast/daily'

    def test_not_found_is_rejected_with_provider_message(self, api, session):
        session.get.return_value = make_response(404, {'cod': '404', 'message': 'city not found'},
                                                 reason='Not Found')

        result = api.fetch(EndpointKind.CURRENT_WEATHER, {'q': 'Atlantis'})

        assert not result.ok
        assert result.kind is ErrorKind.UPSTREAM_REJECTED
        assert result.message == 'city not found'
        assert result.status == 404

    def test_rejected_without_json_body_uses_reason(self, api, session):
        session.get.return_value = make_response(503, ValueError('no json'), reason='Service Unavailable')

        result = api.fetch(EndpointKind.FORECAST, {'q': 'London'})

        assert result.kind is ErrorKind.UPSTREAM_REJECTED
        assert result.message == 'Service Unavailable'

    def test_malformed_success_body(self, api, session):
        session.get.return_value = make_response(200, ValueError('no json'))

        result = api.fetch(EndpointKind.FORECAST, {'q': 'London'})

        assert result.kind is ErrorKind.UPSTREAM_REJECTED

    def test_timeout(self, api, session):
        session.get.side_effect = requests.exceptions.ReadTimeout('slow')

        result = api.fetch(EndpointKind.CURRENT_WEATHER, {'q': 'London'})

        assert result.kind is ErrorKind.TIMEOUT

    def test_connect_timeout_is_timeout(self, api, session):
        session.get.side_effect = requests.exceptions.ConnectTimeout('slow')

        assert api.fetch(EndpointKind.CURRENT_WEATHER, {'q': 'London'}).kind is ErrorKind.TIMEOUT

    def test_connection_error_is_unreachable(self, api, session):
        session.get.side_effect = requests.exceptions.ConnectionError('refused')

        result = api.fetch(EndpointKind.CURRENT_WEATHER, {'q': 'London'})

        assert result.kind is ErrorKind.UPSTREAM_UNREACHABLE
        assert result.message == 'No response received from OpenWeatherMap API'

    def test_invalid_url_is_construction_failure(self, api, session):
        session.get.side_effect = requests.exceptions.MissingSchema('no scheme')

        result = api.fetch(EndpointKind.CURRENT_WEATHER, {'q': 'London'})

        assert result.kind is ErrorKind.REQUEST_CONSTRUCTION_FAILED

    @pytest.mark.parametrize('kind, params', [
        (EndpointKind.CURRENT_WEATHER, {}),
        (EndpointKind.FORECAST, {'lat': '1'}),
        (EndpointKind.AIR_QUALITY, {'q': 'London'}),
        (EndpointKind.BATCH_WEATHER, {}),
    ])
    def test_missing_parameters_fail_before_io(self, api, session, kind, params):
        result = api.fetch(kind, params)

        assert result.kind is ErrorKind.REQUEST_CONSTRUCTION_FAILED
        session.get.assert_not_called()

    def test_unknown_kind_is_programmer_error(self, api):
        with pytest.raises(ValueError):
            api.fetch('weather', {'q': 'London'})

    def test_without_session_uses_plain_requests_get(self):
        api = WeatherAPI(api_key='secret', base_url='https://owm.test/data/2.5', timeout=3)

        with patch('requests.get', return_value=make_response(200, {'name': 'London'})) as get:
            result = api.fetch(EndpointKind.CURRENT_WEATHER, {'q': 'London'})

        assert result.document == {'name': 'London'}
        get.assert_called_once()
        api.close()
