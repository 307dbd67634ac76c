from pathlib import Path

import pytest
from pydantic import ValidationError

from tobii_stream_engine import DeviceGeneration, EngineSettings


def test_defaults(settings):
    assert settings.library_path is None
    assert settings.device_generations == int(DeviceGeneration.ALL)
    assert settings.forward_native_log is True
    assert settings.pump.timesync_interval_s == 30.0
    assert settings.pump.reconnect_on_connection_loss is True
    assert settings.logging.level == "INFO"


def test_loads_from_environment(monkeypatch):
    monkeypatch.setenv("TOBII__LIBRARY_PATH", "/opt/tobii/libtobii_stream_engine.so")
    monkeypatch.setenv("TOBII__DEVICE_GENERATIONS", str(int(DeviceGeneration.IS4)))
    monkeypatch.setenv("TOBII__PUMP__TIMESYNC_INTERVAL_S", "10")
    monkeypatch.setenv("TOBII__LOGGING__LEVEL", "DEBUG")

    settings = EngineSettings(_env_file=None)
    assert settings.library_path == Path("/opt/tobii/libtobii_stream_engine.so")
    assert settings.device_generations == int(DeviceGeneration.IS4)
    assert settings.pump.timesync_interval_s == 10.0
    assert settings.logging.level == "DEBUG"


def test_invalid_pump_settings_rejected(monkeypatch):
    monkeypatch.setenv("TOBII__PUMP__TIMESYNC_RETRY_S", "-1")
    with pytest.raises(ValidationError):
        EngineSettings(_env_file=None)


def test_version_is_exposed(settings):
    assert isinstance(settings.__version__, str)
