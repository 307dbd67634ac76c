"""Shared fixtures.

Every test runs against `FakeStreamEngineLibrary` unless it is marked
`hardware`; those need a real tracker and the native library and only run
with `--run-hardware`.
"""
import pytest

from tobii_stream_engine import EngineSettings, StreamEngine
from tobii_stream_engine.native.library import NativeLibrary
from tobii_stream_engine.pinning import live_slot_count

from fakes import FakeStreamEngineLibrary


def pytest_addoption(parser):
    parser.addoption(
        "--run-hardware",
        action="store_true",
        default=False,
        help="Run tests that need a connected eye tracker.",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "hardware: needs a real eye tracker and native library")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-hardware"):
        return
    skip = pytest.mark.skip(reason="needs --run-hardware")
    for item in items:
        if "hardware" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def settings(monkeypatch) -> EngineSettings:
    for name in ("TOBII__LIBRARY_PATH", "TOBII__FORWARD_NATIVE_LOG", "TOBII__DEVICE_GENERATIONS"):
        monkeypatch.delenv(name, raising=False)
    return EngineSettings(_env_file=None)


@pytest.fixture(params=[(4, 0, 0, 1)], ids=lambda v: f"v{v[0]}")
def fake(request) -> FakeStreamEngineLibrary:
    return FakeStreamEngineLibrary(version=request.param)


@pytest.fixture
def library(fake) -> NativeLibrary:
    return NativeLibrary(fake)


@pytest.fixture
def slots():
    """Fails the test if it leaves pinned slots behind."""
    before = live_slot_count()
    yield
    assert live_slot_count() == before, "pinned slots leaked"


@pytest.fixture
def engine(library, settings, slots):
    engine = StreamEngine(library=library, settings=settings)
    yield engine
    engine.close()


@pytest.fixture
def device(engine, fake):
    return engine.open_device(fake.urls[0])
