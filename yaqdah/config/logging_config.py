import logging
import os
from logging.handlers import RotatingFileHandler

# Dispatch and speech run on worker threads, so the thread name is part of every line
LOG_FORMAT = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"

# HTTP client and server chatter stays at WARNING unless DEBUG is on
NOISY_LOGGERS = ("werkzeug", "urllib3", "twilio.http_client")


def setup_logging(config=None):
    """Rotating file plus console logging for the monitor."""
    config = config or {}
    log_level = getattr(logging, config.get("LOG_LEVEL", "INFO"), logging.INFO)
    log_dir = config.get("LOG_DIR", "logs")
    log_file = os.path.join(log_dir, config.get("LOG_FILE", "yaqdah.log"))

    os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=config.get("LOG_MAX_BYTES", 10485760),
        backupCount=config.get("LOG_BACKUP_COUNT", 5),
        encoding="utf-8",
    )
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[file_handler, logging.StreamHandler()],
        force=True,
    )

    if not config.get("DEBUG"):
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging to {log_file} at {logging.getLevelName(log_level)}")
    return logger
