"""Tests for configuration and logging setup."""

import logging

import pytest

from tiny_qreg.config import DEFAULT_CONFIG, MAX_QUBITS, EngineConfig
from tiny_qreg.logging_config import get_logger, resolve_level, setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("tiny_qreg")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# EngineConfig
# ---------------------------------------------------------------------------

def test_defaults():
    assert DEFAULT_CONFIG.num_qubits == 3
    assert DEFAULT_CONFIG.renormalize_every == 0
    assert DEFAULT_CONFIG.epsilon > 0


@pytest.mark.parametrize("n", [0, MAX_QUBITS + 1, -2])
def test_num_qubits_bounds(n):
    with pytest.raises(ValueError):
        EngineConfig(num_qubits=n)


def test_negative_values_rejected():
    with pytest.raises(ValueError):
        EngineConfig(epsilon=-1.0)
    with pytest.raises(ValueError):
        EngineConfig(renormalize_every=-1)
    with pytest.raises(ValueError):
        EngineConfig(led_count=0)


@pytest.mark.parametrize("changes", [
    {"display_width": 0},
    {"display_height": 0},
    {"port": -1},
    {"port": 65536},
    {"log_level": "verbose"},
])
def test_invalid_display_port_and_level(changes):
    with pytest.raises(ValueError):
        EngineConfig(**changes)


def test_log_level_name_case_insensitive():
    assert EngineConfig(log_level="debug").log_level == "debug"


def test_from_env_invalid_display():
    with pytest.raises(ValueError, match="display"):
        EngineConfig.from_env({"TINY_QREG_DISPLAY_HEIGHT": "0"})


def test_with_overrides_ignores_none():
    config = EngineConfig().with_overrides(num_qubits=5, port=None)
    assert config.num_qubits == 5
    assert config.port == DEFAULT_CONFIG.port


def test_from_env_empty():
    assert EngineConfig.from_env({}) == EngineConfig()


def test_from_env_values():
    config = EngineConfig.from_env({
        "TINY_QREG_QUBITS": "4",
        "TINY_QREG_EPSILON": "1e-9",
        "TINY_QREG_RENORMALIZE_EVERY": "10",
        "TINY_QREG_HOST": "0.0.0.0",
        "TINY_QREG_PORT": "9000",
        "TINY_QREG_LED_COUNT": "5",
        "TINY_QREG_LOG_LEVEL": "debug",
        "UNRELATED": "x",
    })
    assert config.num_qubits == 4
    assert config.epsilon == 1e-9
    assert config.renormalize_every == 10
    assert config.host == "0.0.0.0"
    assert config.port == 9000
    assert config.led_count == 5
    assert config.log_level == "DEBUG"


def test_from_env_invalid_value():
    with pytest.raises(ValueError, match="TINY_QREG_PORT"):
        EngineConfig.from_env({"TINY_QREG_PORT": "eighty"})


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("TINY_QREG_QUBITS", "2")
    assert EngineConfig.from_env().num_qubits == 2


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def test_get_logger_namespacing():
    assert get_logger("engine").name == "tiny_qreg.engine"
    assert get_logger("tiny_qreg.commands").name == "tiny_qreg.commands"
    assert get_logger("tiny_qreg").name == "tiny_qreg"


def test_setup_logging_level_name():
    logger = setup_logging("DEBUG")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_resolve_level():
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR
    with pytest.raises(ValueError, match="verbose"):
        resolve_level("verbose")


def test_setup_logging_unknown_level():
    with pytest.raises(ValueError):
        setup_logging("LOUD")


def test_setup_logging_file(tmp_path):
    log_file = tmp_path / "logs" / "qreg.log"
    logger = setup_logging(logging.INFO, log_file=log_file)
    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()
    assert "hello" in log_file.read_text()
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_engine_logs_ignored_gate(caplog):
    from tiny_qreg import StatevectorEngine
    setup_logging(logging.DEBUG)
    eng = StatevectorEngine(2)
    with caplog.at_level(logging.DEBUG, logger="tiny_qreg"):
        eng.apply_h(5)
    assert "out of range" in caplog.text
