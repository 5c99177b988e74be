import os
from dotenv import load_dotenv

from yaqdah.errors import ConfigError

DEFAULTS = {
    "GEMINI_MODEL": "gemini-2.0-flash",
    "LANGUAGE": "ar",
    "LOG_LEVEL": "INFO",
    "LOG_DIR": "logs",
    "LOG_FILE": "yaqdah.log",
    "LOG_MAX_BYTES": "10485760",
    "LOG_BACKUP_COUNT": "5",
    "HOST": "0.0.0.0",
    "PORT": "5000",
    # Drowsiness score bands (0.0 = fully alert, 1.0 = eyes shut)
    "DISTRACTED_THRESHOLD": "0.35",
    "DROWSY_THRESHOLD": "0.6",
    "ASLEEP_THRESHOLD": "0.85",
    # Head pose contribution to the score
    "HEAD_WEIGHT": "0.5",
    "HEAD_YAW_LIMIT": "45.0",
    # Minimum seconds between two spoken interventions
    "SPEECH_INTERVAL": "5.0",
    "SPEECH_RATE": "150",
    "ALARM_SOUND": "sounds/alarm.mp3",
    "CAMERA_COUNT": "1",
    "LOCATION_URL": "https://ipinfo.io/json",
}


def _get(name):
    return os.environ.get(name, DEFAULTS.get(name))


def _float(name):
    value = _get(name)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}")


def _int(name):
    value = _get(name)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def _contacts(raw):
    if not raw:
        return []
    return [number.strip() for number in raw.split(",") if number.strip()]


def load_config(env_file=None):
    """환경 변수 및 설정 로드"""
    load_dotenv(env_file)

    config = {
        "GEMINI_API_KEY": os.environ.get("GEMINI_API_KEY"),
        "GEMINI_MODEL": _get("GEMINI_MODEL"),
        "LANGUAGE": _get("LANGUAGE"),
        "DEBUG": os.environ.get("DEBUG", "False").lower() == "true",
        "LOG_LEVEL": _get("LOG_LEVEL").upper(),
        "LOG_DIR": _get("LOG_DIR"),
        "LOG_FILE": _get("LOG_FILE"),
        "LOG_MAX_BYTES": _int("LOG_MAX_BYTES"),
        "LOG_BACKUP_COUNT": _int("LOG_BACKUP_COUNT"),
        "HOST": _get("HOST"),
        "PORT": _int("PORT"),
        "DISTRACTED_THRESHOLD": _float("DISTRACTED_THRESHOLD"),
        "DROWSY_THRESHOLD": _float("DROWSY_THRESHOLD"),
        "ASLEEP_THRESHOLD": _float("ASLEEP_THRESHOLD"),
        "HEAD_WEIGHT": _float("HEAD_WEIGHT"),
        "HEAD_YAW_LIMIT": _float("HEAD_YAW_LIMIT"),
        "SPEECH_INTERVAL": _float("SPEECH_INTERVAL"),
        "SPEECH_RATE": _int("SPEECH_RATE"),
        "ALARM_SOUND": _get("ALARM_SOUND"),
        "CAMERA_COUNT": _int("CAMERA_COUNT"),
        "TWILIO_ACCOUNT_SID": os.environ.get("TWILIO_ACCOUNT_SID"),
        "TWILIO_AUTH_TOKEN": os.environ.get("TWILIO_AUTH_TOKEN"),
        "TWILIO_FROM_NUMBER": os.environ.get("TWILIO_FROM_NUMBER"),
        "EMERGENCY_CONTACTS": _contacts(os.environ.get("EMERGENCY_CONTACTS")),
        "LOCATION_URL": _get("LOCATION_URL"),
        "FIXED_LOCATION": os.environ.get("FIXED_LOCATION"),
    }
    validate_config(config)
    return config


def validate_config(config):
    """Reject settings that would make the score bands or cadence meaningless."""
    bands = (
        config["DISTRACTED_THRESHOLD"],
        config["DROWSY_THRESHOLD"],
        config["ASLEEP_THRESHOLD"],
    )
    if not 0.0 < bands[0] < bands[1] < bands[2] <= 1.0:
        raise ConfigError(f"Score bands must increase strictly within (0, 1]: {bands}")
    if config["SPEECH_INTERVAL"] < 0:
        raise ConfigError("SPEECH_INTERVAL cannot be negative")
    if config["HEAD_YAW_LIMIT"] <= 0:
        raise ConfigError("HEAD_YAW_LIMIT must be positive")
    if config["HEAD_WEIGHT"] < 0:
        raise ConfigError("HEAD_WEIGHT cannot be negative")
    if config["CAMERA_COUNT"] < 0:
        raise ConfigError("CAMERA_COUNT cannot be negative")
    return config
