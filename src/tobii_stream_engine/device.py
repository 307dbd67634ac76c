import logging
from typing import TYPE_CHECKING, Optional, Union

from .errors import Disposed, InvalidArgument, Unsupported
from .layouts import decode_device_info
from .models.device import DeviceInfo, DisplayArea, TrackBox
from .native.enums import Capability, EnabledEye, State, StateValueKind, Stream
from .native.library import NativeLibrary
from .subscriptions import SampleCallback, StreamKind, SubscriptionRegistry

if TYPE_CHECKING:
    from .api import StreamEngine

logger = logging.getLogger(__name__)


class Device:
    """
    A session with one eye tracker, owned by the StreamEngine it was opened from.

    Everything here runs on the caller's thread. Subscribed callbacks only
    fire from inside `process_callbacks()`. Calling `close()` or
    `unsubscribe()` from inside such a callback fails with ConflictingState;
    retry once `process_callbacks()` has returned.
    """

    def __init__(self, engine: "StreamEngine", url: str):
        self._engine = engine
        self.url = url
        self._library: NativeLibrary = engine.library
        self._handle: Optional[int] = self._library.device_create(engine.handle, url)
        self.subscriptions = SubscriptionRegistry(self)
        engine._adopt(self)
        logger.info("Opened device %s.", url)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<Device {self.url!r} {state}>"

    def __enter__(self) -> "Device":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def engine(self) -> "StreamEngine":
        return self._engine

    @property
    def library(self) -> NativeLibrary:
        return self._library

    @property
    def closed(self) -> bool:
        return self._handle is None

    @property
    def handle(self) -> int:
        if self._handle is None:
            raise Disposed(f"Device {self.url} is closed.")
        return self._handle

    # --- Lifecycle ---

    def close(self) -> None:
        """
        Releases every subscription, then the device handle.

        If any native call fails the device stays open and the error
        propagates; calling close() again retries. Closing twice is a no-op.
        """
        if self._handle is None:
            return

        self.subscriptions.release_all()
        self._library.device_destroy(self._handle)
        self._handle = None
        self._engine._forget(self)
        logger.info("Closed device %s.", self.url)

    def reconnect(self) -> None:
        """
        Re-establishes a lost connection.

        Subscriptions survive a reconnect on the native side, so they are
        neither dropped nor re-issued here.
        """
        self._library.device_reconnect(self.handle)
        logger.info("Reconnected device %s.", self.url)

    def process_callbacks(self) -> None:
        self._library.device_process_callbacks(self.handle)

    def clear_callback_buffers(self) -> None:
        self._library.device_clear_callback_buffers(self.handle)

    def update_time_sync(self) -> None:
        """Raises OperationAborted when called too often; back off and retry later."""
        self._library.update_timesync(self.handle)

    # --- Streams ---

    def subscribe(self, kind: StreamKind, callback: SampleCallback) -> None:
        self.subscriptions.subscribe(kind, callback)

    def unsubscribe(self, kind: StreamKind, callback: SampleCallback) -> None:
        self.subscriptions.unsubscribe(kind, callback)

    # --- Queries ---

    def info(self) -> DeviceInfo:
        raw = self._library.get_device_info(self.handle)
        return decode_device_info(self._library.shapes.device_info, raw)

    def track_box(self) -> TrackBox:
        """Raises Unsupported on devices without a track box, such as wearables."""
        return self._library.get_track_box(self.handle)

    def enabled_eye(self) -> EnabledEye:
        return self._library.get_enabled_eye(self.handle)

    def display_area(self) -> DisplayArea:
        return self._library.get_display_area(self.handle)

    def capability_supported(self, capability: Capability) -> bool:
        try:
            return self._library.capability_supported(self.handle, capability)
        except InvalidArgument as e:
            raise Unsupported(f"Capability {capability!r} is not known to this library.") from e

    def stream_supported(self, stream: Stream) -> bool:
        try:
            return self._library.stream_supported(self.handle, stream)
        except InvalidArgument as e:
            raise Unsupported(f"Stream {stream!r} is not known to this library.") from e

    # --- State ---

    def get_state_bool(self, state: State) -> bool:
        return self._library.get_state_bool(self.handle, state)

    def get_state_uint(self, state: State) -> int:
        return self._library.get_state_uint32(self.handle, state)

    def get_state_string(self, state: State) -> str:
        return self._library.get_state_string(self.handle, state)

    def get_state(self, state: State) -> Union[bool, int, str]:
        kind = state.value_kind
        if kind == StateValueKind.BOOL:
            return self.get_state_bool(state)
        if kind == StateValueKind.UINT:
            return self.get_state_uint(state)
        return self.get_state_string(state)

    @property
    def power_save_active(self) -> bool:
        return self.get_state_bool(State.POWER_SAVE_ACTIVE)

    @property
    def remote_wake_active(self) -> bool:
        return self.get_state_bool(State.REMOTE_WAKE_ACTIVE)

    @property
    def paused(self) -> bool:
        return self.get_state_bool(State.DEVICE_PAUSED)

    @property
    def exclusive_mode(self) -> bool:
        return self.get_state_bool(State.EXCLUSIVE_MODE)

    @property
    def calibration_active(self) -> bool:
        return self.get_state_bool(State.CALIBRATION_ACTIVE)

    @property
    def calibration_id(self) -> int:
        """0 means the default calibration, i.e. none performed."""
        return self.get_state_uint(State.CALIBRATION_ID)

    @property
    def fault(self) -> str:
        """Comma separated critical errors, or "ok"."""
        return self.get_state_string(State.FAULT)

    @property
    def warning(self) -> str:
        """Comma separated warnings, or "ok"."""
        return self.get_state_string(State.WARNING)
