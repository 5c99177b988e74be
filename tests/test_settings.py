import logging
import os
from logging.handlers import RotatingFileHandler

import pytest

from yaqdah.config.logging_config import setup_logging
from yaqdah.config.settings import DEFAULTS, load_config
from yaqdah.errors import ConfigError

ENV_KEYS = [
    "GEMINI_API_KEY", "LANGUAGE", "DEBUG", "LOG_LEVEL", "PORT", "DISTRACTED_THRESHOLD",
    "DROWSY_THRESHOLD", "ASLEEP_THRESHOLD", "SPEECH_INTERVAL", "EMERGENCY_CONTACTS",
    "CAMERA_COUNT", "HEAD_YAW_LIMIT", "LOG_FILE", "LOG_MAX_BYTES", "LOG_BACKUP_COUNT",
]


@pytest.fixture
def env_file(tmp_path, monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    path = tmp_path / ".env"
    path.write_text("")
    yield path
    # load_dotenv writes straight into os.environ
    for key in ENV_KEYS:
        os.environ.pop(key, None)


def test_defaults(env_file):
    config = load_config(env_file)
    assert config["LANGUAGE"] == "ar"
    assert config["SPEECH_INTERVAL"] == 5.0
    assert config["DISTRACTED_THRESHOLD"] == float(DEFAULTS["DISTRACTED_THRESHOLD"])
    assert config["PORT"] == 5000
    assert config["EMERGENCY_CONTACTS"] == []
    assert config["DEBUG"] is False


def test_values_from_env_file(env_file):
    env_file.write_text(
        "LANGUAGE=en\n"
        "SPEECH_INTERVAL=8\n"
        "DROWSY_THRESHOLD=0.55\n"
        "EMERGENCY_CONTACTS=+15550100, +15550101,\n"
        "LOG_LEVEL=debug\n"
    )
    config = load_config(env_file)
    assert config["LANGUAGE"] == "en"
    assert config["SPEECH_INTERVAL"] == 8.0
    assert config["DROWSY_THRESHOLD"] == 0.55
    assert config["EMERGENCY_CONTACTS"] == ["+15550100", "+15550101"]
    assert config["LOG_LEVEL"] == "DEBUG"


def test_bad_number(env_file, monkeypatch):
    monkeypatch.setenv("SPEECH_INTERVAL", "soon")
    with pytest.raises(ConfigError):
        load_config(env_file)


def test_bands_must_increase(env_file, monkeypatch):
    monkeypatch.setenv("DISTRACTED_THRESHOLD", "0.7")
    monkeypatch.setenv("DROWSY_THRESHOLD", "0.6")
    with pytest.raises(ConfigError):
        load_config(env_file)


def test_negative_interval(env_file, monkeypatch):
    monkeypatch.setenv("SPEECH_INTERVAL", "-1")
    with pytest.raises(ConfigError):
        load_config(env_file)


def test_log_file_settings(env_file):
    env_file.write_text("LOG_FILE=monitor.log\nLOG_MAX_BYTES=2048\nLOG_BACKUP_COUNT=2\n")
    config = load_config(env_file)
    assert config["LOG_FILE"] == "monitor.log"
    assert config["LOG_MAX_BYTES"] == 2048
    assert config["LOG_BACKUP_COUNT"] == 2


def test_bad_log_size(env_file, monkeypatch):
    monkeypatch.setenv("LOG_MAX_BYTES", "10MB")
    with pytest.raises(ConfigError):
        load_config(env_file)


@pytest.fixture
def root_handlers():
    saved = logging.root.handlers[:]
    saved_level = logging.root.level
    yield
    for handler in logging.root.handlers:
        if handler not in saved:
            handler.close()
    logging.root.handlers = saved
    logging.root.setLevel(saved_level)
    logging.getLogger("werkzeug").setLevel(logging.NOTSET)


def test_setup_logging_creates_log_dir(tmp_path, root_handlers):
    log_dir = tmp_path / "logs"
    logger = setup_logging({"LOG_LEVEL": "INFO", "LOG_DIR": str(log_dir)})
    assert log_dir.is_dir()
    assert (log_dir / "yaqdah.log").exists()
    assert isinstance(logger, logging.Logger)
    assert logging.getLogger("werkzeug").level == logging.WARNING


def test_setup_logging_uses_configured_file(tmp_path, root_handlers):
    setup_logging({
        "LOG_LEVEL": "DEBUG",
        "LOG_DIR": str(tmp_path),
        "LOG_FILE": "monitor.log",
        "LOG_MAX_BYTES": 2048,
        "LOG_BACKUP_COUNT": 2,
        "DEBUG": True,
    })
    rotating = [h for h in logging.root.handlers if isinstance(h, RotatingFileHandler)]
    assert len(rotating) == 1
    assert rotating[0].baseFilename == str(tmp_path / "monitor.log")
    assert rotating[0].maxBytes == 2048
    assert rotating[0].backupCount == 2
    assert logging.root.level == logging.DEBUG
    assert logging.getLogger("werkzeug").level == logging.NOTSET


def test_server_refuses_to_start_on_bad_config(monkeypatch):
    from yaqdah import server

    def broken():
        raise ConfigError("PORT must be an integer")

    monkeypatch.setattr(server, "load_config", broken)
    assert server.main() == 1
