# 예외 정의


class YaqdahError(Exception):
    """Base error for the monitoring service."""


class ConfigError(YaqdahError):
    """Raised when settings or device permissions prevent monitoring from starting."""
