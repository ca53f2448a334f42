import atexit
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from flask import Flask, g, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from prometheus_client import CollectorRegistry, Counter
from prometheus_flask_exporter import PrometheusMetrics

from .config import Config
from .errors import register_error_handlers
from .routes import weather_bp
from .services.gateway import WeatherGateway
from .services.weather_api import WeatherAPI
from .utils.cache import WeatherCache

__version__ = '1.0.0'

logger = logging.getLogger(__name__)


@dataclass
class Services:
    cache: WeatherCache
    gateway: WeatherGateway
    scheduler: Optional[BackgroundScheduler] = None

    def shutdown(self):
        if self.scheduler is not None and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.gateway.shutdown()


def _start_scheduler(app, cache):
    scheduler = BackgroundScheduler()
    scheduler.add_job(cache.sweep, 'interval', seconds=app.config['CACHE_SWEEP_INTERVAL_SECONDS'],
                      id='cache-sweep')
    scheduler.start()
    app.logger.info(f"Cache sweep every {app.config['CACHE_SWEEP_INTERVAL_SECONDS']}s")
    return scheduler


def create_app(overrides=None):
    """
    Build the Flask application.

    Raises:
        RuntimeError: If no OpenWeatherMap API key is configured
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    if not app.config.get('OWM_API_KEY'):
        raise RuntimeError("OWM_API_KEY is not set")

    registry = CollectorRegistry(auto_describe=True)
    metrics = PrometheusMetrics(app, registry=registry)
    metrics.info('app_info', 'Weather Gateway Info', version=__version__)
    lookups = Counter('tempest_cache_lookups', 'Cache lookups by endpoint and outcome',
                      ['kind', 'outcome'], registry=registry)

    Limiter(get_remote_address, app=app)

    cache = WeatherCache(default_ttl=app.config['CACHE_TTL_SECONDS'])
    fetcher = WeatherAPI(
        api_key=app.config['OWM_API_KEY'],
        base_url=app.config['OWM_BASE_URL'],
        timeout=app.config['UPSTREAM_TIMEOUT_SECONDS'],
    )
    gateway = WeatherGateway(cache, fetcher, ttl=app.config['CACHE_TTL_SECONDS'], lookups=lookups)

    scheduler = _start_scheduler(app, cache) if app.config['SCHEDULER_ENABLED'] else None
    services = Services(cache=cache, gateway=gateway, scheduler=scheduler)
    app.extensions['tempest'] = services
    atexit.register(services.shutdown)

    @app.before_request
    def assign_request_id():
        g.request_id = f"req-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S-%f')}"
        app.logger.info(f"Incoming request {g.request_id} {request.path} from {request.remote_addr}")

    register_error_handlers(app)
    app.register_blueprint(weather_bp)

    return app
