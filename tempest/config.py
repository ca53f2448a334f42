import os


def _flag(name, default):
    return os.getenv(name, default).lower() in ('1', 'true', 'yes', 'on')


# Configuration
class Config:
    OWM_API_KEY = os.getenv('OWM_API_KEY') or os.getenv('OPENWEATHERMAP_API_KEY')
    OWM_BASE_URL = os.getenv('OWM_BASE_URL', 'https://api.openweathermap.org/data/2.5')
    UPSTREAM_TIMEOUT_SECONDS = float(os.getenv('UPSTREAM_TIMEOUT_SECONDS', 5))
    CACHE_TTL_SECONDS = int(os.getenv('CACHE_TTL_SECONDS', 600))
    CACHE_SWEEP_INTERVAL_SECONDS = int(os.getenv('CACHE_SWEEP_INTERVAL_SECONDS', 300))
    MAX_BATCH_SIZE = int(os.getenv('MAX_BATCH_SIZE', 20))
    DEFAULT_LOCATION = os.getenv('DEFAULT_LOCATION', 'London')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    PORT = int(os.getenv('PORT', 3000))
    RATELIMIT_DEFAULT = os.getenv('RATELIMIT_DEFAULT', '2000 per day;100 per hour')
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    SCHEDULER_ENABLED = _flag('SCHEDULER_ENABLED', 'true')
