import logging
from typing import Callable, Iterable, Optional

from .configs import EngineSettings
from .device import Device
from .errors import Disposed, InvalidArgument, TimedOut
from .native.enums import DeviceGeneration, LogLevel
from .native.library import NativeLibrary
from .native.loader import load_library
from .pinning import PinnedSlot
from .version import Version

logger = logging.getLogger(__name__)
native_logger = logging.getLogger("tobii_stream_engine.native")

LogCallback = Callable[[LogLevel, str], None]

_PYTHON_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.TRACE: logging.DEBUG,
}


def forward_to_logging(level: LogLevel, message: str) -> None:
    """Log callback that writes native log lines to the 'tobii_stream_engine.native' logger."""
    native_logger.log(_PYTHON_LEVELS.get(level, logging.INFO), message)


class StreamEngine:
    """
    The root context: one connection to the native stream engine.

    Owns the native api handle and, optionally, the pinned log callback.
    Devices opened from it must be closed before it; `close()` does that
    itself, children first.

    Example:
        with StreamEngine() as engine:
            for url in engine.enumerate_device_urls():
                with engine.open_device(url) as device:
                    device.subscribe(StreamKind.GAZE_POINT, print)
                    for _ in range(10):
                        if engine.wait_for_callbacks([device]):
                            device.process_callbacks()
    """

    def __init__(
        self,
        log: Optional[LogCallback] = None,
        *,
        library: Optional[NativeLibrary] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.settings = settings or EngineSettings()
        self._library = library or load_library(settings=self.settings)
        self._devices: list[Device] = []

        if log is None and self.settings.forward_native_log:
            log = forward_to_logging

        # Pinned before create: the native side may log during creation.
        self._log_slot: Optional[PinnedSlot] = PinnedSlot(log) if log is not None else None
        try:
            self._handle: Optional[int] = self._library.api_create(
                self._log_slot.address if self._log_slot else None
            )
        except Exception:
            if self._log_slot is not None:
                self._log_slot.release()
            raise

        logger.info("Stream engine context created (library %s).", self._library.version)

    def __enter__(self) -> "StreamEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"{len(self._devices)} device(s)"
        return f"<StreamEngine {self._library.version} {state}>"

    @property
    def library(self) -> NativeLibrary:
        return self._library

    @property
    def version(self) -> Version:
        return self._library.version

    @property
    def closed(self) -> bool:
        return self._handle is None

    @property
    def handle(self) -> int:
        if self._handle is None:
            raise Disposed("Stream engine is closed.")
        return self._handle

    @property
    def devices(self) -> tuple[Device, ...]:
        return tuple(self._devices)

    def _adopt(self, device: Device) -> None:
        self._devices.append(device)

    def _forget(self, device: Device) -> None:
        if device in self._devices:
            self._devices.remove(device)

    def close(self) -> None:
        """
        Closes remaining devices, then destroys the native context.

        The log slot is released only once destroy has succeeded. A
        ConflictingState (called from inside a callback) leaves the engine
        open. Closing twice is a no-op.
        """
        if self._handle is None:
            return

        for device in list(self._devices):
            logger.warning("Closing device %s left open at engine shutdown.", device.url)
            device.close()

        self._library.api_destroy(self._handle)
        self._handle = None
        if self._log_slot is not None:
            self._log_slot.release()
            self._log_slot = None
        logger.info("Stream engine context destroyed.")

    def now(self) -> int:
        """Current system clock in microseconds, the clock used to stamp every sample."""
        return self._library.system_clock(self.handle)

    def enumerate_device_urls(
        self, generations: Optional[DeviceGeneration] = None
    ) -> list[str]:
        if generations is None:
            generations = self.settings.device_generations

        urls: list[str] = []
        slot = PinnedSlot(urls.append)
        try:
            self._library.enumerate_local_device_urls(self.handle, slot.address, int(generations))
        finally:
            slot.release()

        logger.debug("Enumerated %d device(s).", len(urls))
        return urls

    def open_device(self, url: str) -> Device:
        if self.closed:
            raise Disposed("Stream engine is closed.")
        return Device(self, url)

    def wait_for_callbacks(self, devices: Iterable[Device]) -> bool:
        """
        Blocks until one of `devices` has queued data or the native timeout fires.

        Returns False on timeout. All devices must belong to this engine.
        """
        devices = list(devices)
        if not devices:
            raise InvalidArgument("At least one device is required.")
        for device in devices:
            if device.engine is not self:
                raise InvalidArgument(f"Device {device.url} belongs to another StreamEngine.")

        handles = [device.handle for device in devices]
        try:
            self._library.wait_for_callbacks(self.handle, handles)
        except TimedOut:
            return False
        return True
