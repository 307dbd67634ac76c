import pytest

from tobii_stream_engine import __main__ as cli
from tobii_stream_engine.native.library import NativeLibrary

from fakes import FakeStreamEngineLibrary


@pytest.fixture
def fake_library(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("TOBII__LIBRARY_PATH", "TOBII__FORWARD_NATIVE_LOG"):
        monkeypatch.delenv(name, raising=False)
    fake = FakeStreamEngineLibrary()
    paths = []

    def load_library(path=None, settings=None):
        paths.append(settings.library_path if settings else path)
        return NativeLibrary(fake)

    monkeypatch.setattr("tobii_stream_engine.api.load_library", load_library)
    fake.paths = paths
    return fake


def test_streams_and_tears_down(fake_library):
    assert cli.main(["--iterations", "2", "--stream", "gaze_point", "--stream", "user_presence"]) == 0
    assert len(fake_library.called("tobii_gaze_point_subscribe")) == 1
    assert len(fake_library.called("tobii_user_presence_subscribe")) == 1
    assert len(fake_library.called("tobii_device_process_callbacks")) == 2
    assert fake_library.devices == {}
    assert fake_library.apis == {}


def test_library_argument_overrides_settings(fake_library, tmp_path):
    cli.main(["--library", str(tmp_path / "lib.so"), "--iterations", "0"])
    assert fake_library.paths == [tmp_path / "lib.so"]


def test_no_devices(fake_library):
    fake_library.urls = []
    assert cli.main(["--iterations", "1"]) == 0
    assert fake_library.called("tobii_device_create") == []


def test_native_failure_exits_nonzero(fake_library):
    fake_library.fail_next("tobii_device_create", 2)
    assert cli.main(["--iterations", "1"]) == 1
    assert fake_library.apis == {}


def test_rejects_unknown_stream(fake_library):
    with pytest.raises(SystemExit):
        cli.main(["--stream", "wearable"])
