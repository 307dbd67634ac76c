import threading

import pytest

from tobii_stream_engine import CallbackPump, ConnectionLost, InvalidArgument, PumpSettings, StreamKind


class ManualClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return ManualClock()


def make_pump(engine, device, clock, **settings):
    return CallbackPump(engine, [device], PumpSettings(**settings), clock=clock)


def test_needs_devices(engine):
    with pytest.raises(InvalidArgument):
        CallbackPump(engine, [])


def test_clears_buffers_before_first_wait(engine, device, fake, clock):
    received = []
    device.subscribe(StreamKind.GAZE_POINT, received.append)
    fake.push_gaze_point(1, 0.5, 0.5)

    pump = make_pump(engine, device, clock)
    assert pump.run_once() is False
    assert received == []
    assert len(fake.called("tobii_device_clear_callback_buffers")) == 1


def test_delivers_samples(engine, device, fake, clock):
    received = []
    device.subscribe(StreamKind.GAZE_POINT, received.append)
    fake.push_gaze_point(1, 0.5, 0.5)

    pump = make_pump(engine, device, clock, clear_buffers_on_start=False)
    assert pump.run_once() is True
    assert [s.timestamp_us for s in received] == [1]
    assert pump.iterations == 1


def test_time_sync_runs_first_cycle_then_on_interval(engine, device, fake, clock):
    pump = make_pump(engine, device, clock, timesync_interval_s=30.0)
    pump.run_once()
    assert len(fake.called("tobii_update_timesync")) == 1

    clock.now = 29.0
    pump.run_once()
    assert len(fake.called("tobii_update_timesync")) == 1

    clock.now = 30.0
    pump.run_once()
    assert len(fake.called("tobii_update_timesync")) == 2


def test_busy_time_sync_backs_off(engine, device, fake, clock):
    fake.timesync_busy = 1
    pump = make_pump(engine, device, clock, timesync_interval_s=30.0, timesync_retry_s=1.0)
    pump.run_once()
    assert len(fake.called("tobii_update_timesync")) == 1

    clock.now = 0.5
    pump.run_once()
    assert len(fake.called("tobii_update_timesync")) == 1

    clock.now = 1.0
    pump.run_once()
    assert len(fake.called("tobii_update_timesync")) == 2

    clock.now = 2.0
    pump.run_once()
    assert len(fake.called("tobii_update_timesync")) == 2


def test_reconnects_after_connection_loss(engine, device, fake, clock):
    pump = make_pump(engine, device, clock)
    fake.disconnect()
    assert pump.run_once() is False
    assert len(fake.called("tobii_device_reconnect")) == 1
    assert fake.device().connected


def test_failed_reconnect_retries_next_cycle(engine, device, fake, clock):
    fake.reconnect_failures = 1
    pump = make_pump(engine, device, clock)
    fake.disconnect()
    pump.run_once()
    assert fake.called("tobii_update_timesync") == []
    pump.run_once()
    assert len(fake.called("tobii_device_reconnect")) == 2
    assert len(fake.called("tobii_update_timesync")) == 1


def test_connection_loss_raises_when_reconnect_disabled(engine, device, fake, clock):
    pump = make_pump(engine, device, clock, reconnect_on_connection_loss=False)
    fake.disconnect()
    with pytest.raises(ConnectionLost):
        pump.run_once()


def test_run_counts_iterations(engine, device, clock):
    pump = make_pump(engine, device, clock)
    assert pump.run(iterations=3) == 3
    assert pump.iterations == 3


def test_run_stops_on_event(engine, device, clock):
    stop = threading.Event()
    stop.set()
    pump = make_pump(engine, device, clock)
    assert pump.run(stop_event=stop) == 0


def test_retry_must_not_exceed_interval():
    with pytest.raises(ValueError):
        PumpSettings(timesync_interval_s=1.0, timesync_retry_s=5.0)
