import logging

from tempest.utils.log import log_owm_interaction, setup_logging


def test_setup_logging_writes_rotating_file(app, tmp_path):
    setup_logging(app)
    handler = app.logger.handlers[-1]
    try:
        logging.getLogger('tempest.services.gateway').info("hello from the gateway")
        handler.flush()

        assert 'hello from the gateway' in (tmp_path / 'tempest.log').read_text()
    finally:
        app.logger.removeHandler(handler)
        handler.close()


def test_interaction_log_redacts_api_key(caplog):
    with caplog.at_level(logging.INFO, logger='tempest.upstream'):
        log_owm_interaction('https://owm.test/weather', {'q': 'London', 'appid': 'secret'}, 200, 0.25)

    record = caplog.records[-1]
    assert record.data['request_params']['appid'] == 'REDACTED'
    assert 'secret' not in str(record.data)
