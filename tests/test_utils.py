import itertools
import logging
from datetime import datetime, timezone

import pytest

from tobii_stream_engine.utils import ThrottledLogger, TimeProbe


def test_time_probe_maps_engine_clock_to_utc():
    ticks = itertools.count(1_000_000, 100)
    probe = TimeProbe.measure(lambda: next(ticks))
    assert probe.latency_us == 100
    # A timestamp taken 1 s later maps 1000 ms later.
    assert probe.to_utc_ms(2_000_050) - probe.to_utc_ms(1_000_050) == 1000
    assert probe.to_utc_ns(1_000_051) - probe.to_utc_ns(1_000_050) == 1_000


def test_time_probe_datetime_is_utc_with_microseconds():
    probe = TimeProbe(latency_us=0, offset_ns=1_700_000_000_000_000_000)
    moment = probe.to_datetime(1_500)
    assert moment.tzinfo == timezone.utc
    assert moment == datetime(2023, 11, 14, 22, 13, 20, 1_500, tzinfo=timezone.utc)


def test_probes_order_by_latency_only():
    fast = TimeProbe(latency_us=10, offset_ns=5)
    slow = TimeProbe(latency_us=500, offset_ns=5)
    assert fast < slow
    assert min([slow, fast]) is fast
    assert TimeProbe(latency_us=10, offset_ns=1) == TimeProbe(latency_us=10, offset_ns=2)


def test_best_keeps_lowest_latency():
    steps = iter([0, 50, 0, 5, 0, 80])
    assert TimeProbe.best(steps.__next__, samples=3).latency_us == 5


def test_best_needs_samples():
    with pytest.raises(ValueError):
        TimeProbe.best(lambda: 0, samples=0)


def test_throttled_logger_counts_suppressed(caplog):
    log = ThrottledLogger(logging.getLogger("throttle-test"), interval_sec=3600)
    with caplog.at_level(logging.WARNING, logger="throttle-test"):
        assert log.warning("busy %s", "device") is True
        assert log.warning("busy %s", "device") is False
        assert log.warning("busy %s", "device") is False
    assert [r.getMessage() for r in caplog.records] == ["[1] busy device"]


def test_throttled_logger_interval_zero_logs_everything(caplog):
    log = ThrottledLogger(logging.getLogger("throttle-test"), interval_sec=0)
    with caplog.at_level(logging.ERROR, logger="throttle-test"):
        log.error("a")
        log.error("b")
    assert len(caplog.records) == 2
