import logging
import os
from logging.handlers import RotatingFileHandler

logger = logging.getLogger('tempest.upstream')


def setup_logging(app):
    """Configure logging system"""
    log_dir = app.config['LOG_DIR']
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    log_file = os.path.join(log_dir, 'tempest.log')

    handler = RotatingFileHandler(
        log_file, maxBytes=1000000, backupCount=5
    )
    handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    ))

    # app.logger is the 'tempest' logger, so package modules log through it too
    app.logger.addHandler(handler)
    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)


def log_owm_interaction(url, params, status_code, duration):
    """Log OpenWeatherMap API interactions"""
    log_data = {
        'api_endpoint': url,
        'request_params': {**params, 'appid': 'REDACTED'},  # Hide API key
        'response_status': status_code,
        'processing_time_sec': round(duration, 3)
    }

    logger.info("OpenWeatherMap API Interaction", extra={'data': log_data})
