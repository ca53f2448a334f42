from unittest.mock import MagicMock

import pytest

from tempest import create_app


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_response(status_code=200, body=None, reason='OK'):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def app(tmp_path, session):
    app = create_app({
        'TESTING': True,
        'OWM_API_KEY': 'test-key',
        'SCHEDULER_ENABLED': False,
        'RATELIMIT_ENABLED': False,
        'LOG_DIR': str(tmp_path),
    })
    app.extensions['tempest'].gateway.fetcher.session = session
    yield app
    app.extensions['tempest'].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()
