import logging
import threading
import time
from typing import Callable, Optional, Sequence

from .api import StreamEngine
from .configs import PumpSettings
from .device import Device
from .errors import ConnectionLost, InvalidArgument, OperationAborted
from .utils.logging import ThrottledLogger

logger = logging.getLogger(__name__)


class CallbackPump:
    """
    The wait/process drive loop for a set of devices of one engine.

    Each iteration blocks in `wait_for_callbacks`, then drains every device on
    the calling thread, so subscribed callbacks run synchronously here. Time
    sync is refreshed periodically; a busy time sync is retried after a short
    back-off. No threads are started.
    """

    def __init__(
        self,
        engine: StreamEngine,
        devices: Sequence[Device],
        settings: Optional[PumpSettings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if not devices:
            raise InvalidArgument("CallbackPump needs at least one device.")
        self.engine = engine
        self.devices = list(devices)
        self.settings = settings or PumpSettings()
        self._clock = clock
        self._started = False
        self._next_timesync: dict[int, float] = {}
        self._timesync_log = ThrottledLogger(logger, interval_sec=10.0)
        self._connection_log = ThrottledLogger(logger, interval_sec=5.0)
        self.iterations = 0

    def _start(self) -> None:
        self._started = True
        now = self._clock()
        for device in self.devices:
            if self.settings.clear_buffers_on_start:
                device.clear_callback_buffers()
            self._next_timesync[id(device)] = now

    def run_once(self) -> bool:
        """One wait + process cycle. Returns whether data was ready before the timeout."""
        if not self._started:
            self._start()

        try:
            ready = self.engine.wait_for_callbacks(self.devices)
        except ConnectionLost:
            if not self.settings.reconnect_on_connection_loss:
                raise
            ready = False
        for device in self.devices:
            if self._process(device):
                self._maybe_update_time_sync(device)

        self.iterations += 1
        return ready

    def run(
        self,
        iterations: Optional[int] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> int:
        """Runs until `iterations` cycles completed or `stop_event` is set. Returns cycles run."""
        count = 0
        while iterations is None or count < iterations:
            if stop_event is not None and stop_event.is_set():
                break
            self.run_once()
            count += 1
        return count

    def _process(self, device: Device) -> bool:
        """Drains one device. Returns False while its connection is down."""
        try:
            device.process_callbacks()
            return True
        except ConnectionLost as e:
            if not self.settings.reconnect_on_connection_loss:
                raise
            self._connection_log.warning("Connection to %s lost (%s); reconnecting.", device.url, e)
            try:
                device.reconnect()
            except ConnectionLost:
                self._connection_log.warning("Reconnect to %s failed; will retry.", device.url)
                return False
            return True

    def _maybe_update_time_sync(self, device: Device) -> None:
        now = self._clock()
        if now < self._next_timesync.get(id(device), now):
            return
        try:
            device.update_time_sync()
        except OperationAborted:
            self._timesync_log.warning("Time sync busy on %s; retrying later.", device.url)
            self._next_timesync[id(device)] = now + self.settings.timesync_retry_s
            return
        self._next_timesync[id(device)] = now + self.settings.timesync_interval_s
