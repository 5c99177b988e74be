# 애플리케이션 실행 진입점

import logging

from yaqdah import create_app
from yaqdah.config.logging_config import setup_logging
from yaqdah.config.settings import load_config
from yaqdah.errors import ConfigError

logger = logging.getLogger(__name__)


def main():
    try:
        config = load_config()
    except ConfigError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"Monitoring not started: {e}")
        return 1

    setup_logging(config)
    app = create_app(config=config)
    logger.info(f"Control server listening on {config['HOST']}:{config['PORT']}")
    app.run(debug=config["DEBUG"], host=config["HOST"], port=config["PORT"], threaded=True)
    return 0
