import logging
import signal
import sys

from dotenv import load_dotenv

# Load environment variables before the config class reads them
load_dotenv()

from tempest import create_app  # noqa: E402
from tempest.utils.log import setup_logging  # noqa: E402


def handle_shutdown(signum, frame):
    """Handle graceful shutdown"""
    logging.getLogger('tempest').info("Shutting down...")
    sys.exit(0)


def main():
    logging.basicConfig(level=logging.INFO)
    try:
        app = create_app()
    except RuntimeError as e:
        logging.error(f"Error: {e}")
        sys.exit(1)

    setup_logging(app)
    signal.signal(signal.SIGTERM, handle_shutdown)
    signal.signal(signal.SIGINT, handle_shutdown)

    app.logger.info(f"TekiTempest API is running on port {app.config['PORT']}")
    app.run(host='0.0.0.0', port=app.config['PORT'])


if __name__ == '__main__':
    main()
