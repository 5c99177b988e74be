from yaqdah.config.settings import load_config, validate_config
from yaqdah.config.logging_config import setup_logging

__all__ = ["load_config", "validate_config", "setup_logging"]
