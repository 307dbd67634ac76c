import ctypes
import logging
from typing import Optional, Sequence

from ..errors import raise_for_status
from ..models.device import DisplayArea, TrackBox
from ..version import Version, resolve_version
from . import callbacks as cb
from .enums import Capability, EnabledEye, State, Stream
from .shapes import CallShapes
from .structs import (
    STATE_STRING_SIZE,
    CustomLogStruct,
    DisplayAreaStruct,
    TrackBoxStruct,
    VersionStruct,
)

logger = logging.getLogger(__name__)

_P = ctypes.POINTER
_HANDLE = ctypes.c_void_p
_INT = ctypes.c_int

# Signatures that are the same in every supported major version.
_PROTOTYPES: dict[str, tuple[object, list]] = {
    "tobii_get_api_version": (_INT, [_P(VersionStruct)]),
    "tobii_error_message": (ctypes.c_char_p, [_INT]),
    "tobii_api_create": (_INT, [_P(_HANDLE), ctypes.c_void_p, _P(CustomLogStruct)]),
    "tobii_api_destroy": (_INT, [_HANDLE]),
    "tobii_system_clock": (_INT, [_HANDLE, _P(ctypes.c_int64)]),
    "tobii_enumerate_local_device_urls_ex": (
        _INT, [_HANDLE, cb.UrlReceiver, ctypes.c_void_p, ctypes.c_uint32]
    ),
    "tobii_device_destroy": (_INT, [_HANDLE]),
    "tobii_device_reconnect": (_INT, [_HANDLE]),
    "tobii_device_process_callbacks": (_INT, [_HANDLE]),
    "tobii_device_clear_callback_buffers": (_INT, [_HANDLE]),
    "tobii_update_timesync": (_INT, [_HANDLE]),
    "tobii_get_device_info": (_INT, [_HANDLE, ctypes.c_void_p]),
    "tobii_get_track_box": (_INT, [_HANDLE, _P(TrackBoxStruct)]),
    "tobii_get_state_bool": (_INT, [_HANDLE, _INT, _P(_INT)]),
    "tobii_get_state_uint32": (_INT, [_HANDLE, _INT, _P(ctypes.c_uint32)]),
    "tobii_get_state_string": (_INT, [_HANDLE, _INT, ctypes.c_void_p]),
    "tobii_capability_supported": (_INT, [_HANDLE, _INT, _P(_INT)]),
    "tobii_stream_supported": (_INT, [_HANDLE, _INT, _P(_INT)]),
    "tobii_get_enabled_eye": (_INT, [_HANDLE, _P(_INT)]),
    "tobii_get_display_area": (_INT, [_HANDLE, _P(DisplayAreaStruct)]),
    "tobii_gaze_point_subscribe": (_INT, [_HANDLE, cb.GazePointCallback, ctypes.c_void_p]),
    "tobii_gaze_point_unsubscribe": (_INT, [_HANDLE]),
    "tobii_gaze_origin_subscribe": (_INT, [_HANDLE, cb.StereoPositionCallback, ctypes.c_void_p]),
    "tobii_gaze_origin_unsubscribe": (_INT, [_HANDLE]),
    "tobii_user_presence_subscribe": (_INT, [_HANDLE, cb.UserPresenceCallback, ctypes.c_void_p]),
    "tobii_user_presence_unsubscribe": (_INT, [_HANDLE]),
    "tobii_head_pose_subscribe": (_INT, [_HANDLE, cb.HeadPoseCallback, ctypes.c_void_p]),
    "tobii_head_pose_unsubscribe": (_INT, [_HANDLE]),
    "tobii_notifications_subscribe": (_INT, [_HANDLE, cb.NotificationCallback, ctypes.c_void_p]),
    "tobii_notifications_unsubscribe": (_INT, [_HANDLE]),
}


def apply_prototypes(cdll: ctypes.CDLL) -> None:
    for name, (restype, argtypes) in _PROTOTYPES.items():
        fn = getattr(cdll, name)
        fn.restype = restype
        fn.argtypes = argtypes


class NativeLibrary:
    """
    Typed facade over the loaded stream engine library.

    `lib` is either a `ctypes.CDLL` or any object exposing the same entry
    point names. The version is read once here and the matching call shapes
    are resolved once; both are immutable afterwards. Every method checks the
    returned status and raises the translated error.
    """

    def __init__(self, lib):
        self._lib = lib
        self._is_cdll = isinstance(lib, ctypes.CDLL)
        if self._is_cdll:
            apply_prototypes(lib)

        self.version: Version = resolve_version(lib)
        self.shapes: CallShapes = CallShapes.for_version(self.version)
        if self._is_cdll:
            self.shapes.apply_prototypes(lib)

        logger.info("Stream engine %s loaded (%s).", self.version, self.shapes)

    @property
    def raw(self):
        return self._lib

    def error_message(self, code: int) -> str:
        text = self._lib.tobii_error_message(code)
        if not text:
            return ""
        return text.decode("utf-8", errors="replace")

    def check(self, code: int, operation: str) -> None:
        if code:
            raise_for_status(code, f"{operation}: {self.error_message(code)}")

    # --- API ---

    def api_create(self, log_context: Optional[int] = None) -> int:
        handle = _HANDLE()
        custom_log = None
        if log_context is not None:
            custom_log = ctypes.pointer(CustomLogStruct(log_context, cb.on_log))
        self.check(
            self._lib.tobii_api_create(ctypes.pointer(handle), None, custom_log),
            "tobii_api_create",
        )
        return handle.value

    def api_destroy(self, api: int) -> None:
        self.check(self._lib.tobii_api_destroy(api), "tobii_api_destroy")

    def system_clock(self, api: int) -> int:
        timestamp = ctypes.c_int64()
        self.check(
            self._lib.tobii_system_clock(api, ctypes.pointer(timestamp)), "tobii_system_clock"
        )
        return timestamp.value

    def enumerate_local_device_urls(self, api: int, context: int, generations: int) -> None:
        self.check(
            self._lib.tobii_enumerate_local_device_urls_ex(
                api, cb.on_device_url, context, generations
            ),
            "tobii_enumerate_local_device_urls_ex",
        )

    def wait_for_callbacks(self, api: int, devices: Sequence[int]) -> None:
        handles = (_HANDLE * len(devices))(*devices)
        self.check(self.shapes.wait_call(self._lib, api, handles), "tobii_wait_for_callbacks")

    # --- Device ---

    def device_create(self, api: int, url: str) -> int:
        handle = _HANDLE()
        self.check(
            self.shapes.create_call(self._lib, api, url.encode("utf-8"), ctypes.pointer(handle)),
            "tobii_device_create",
        )
        return handle.value

    def device_destroy(self, device: int) -> None:
        self.check(self._lib.tobii_device_destroy(device), "tobii_device_destroy")

    def device_reconnect(self, device: int) -> None:
        self.check(self._lib.tobii_device_reconnect(device), "tobii_device_reconnect")

    def device_process_callbacks(self, device: int) -> None:
        self.check(
            self._lib.tobii_device_process_callbacks(device), "tobii_device_process_callbacks"
        )

    def device_clear_callback_buffers(self, device: int) -> None:
        self.check(
            self._lib.tobii_device_clear_callback_buffers(device),
            "tobii_device_clear_callback_buffers",
        )

    def update_timesync(self, device: int) -> None:
        self.check(self._lib.tobii_update_timesync(device), "tobii_update_timesync")

    def get_device_info(self, device: int) -> bytes:
        buf = ctypes.create_string_buffer(self.shapes.device_info.size)
        self.check(self._lib.tobii_get_device_info(device, buf), "tobii_get_device_info")
        return buf.raw

    def get_track_box(self, device: int) -> TrackBox:
        box = TrackBoxStruct()
        self.check(self._lib.tobii_get_track_box(device, ctypes.pointer(box)), "tobii_get_track_box")
        return box.to_model()

    def get_state_bool(self, device: int, state: State) -> bool:
        value = _INT()
        self.check(
            self._lib.tobii_get_state_bool(device, int(state), ctypes.pointer(value)),
            "tobii_get_state_bool",
        )
        return value.value != 0

    def get_state_uint32(self, device: int, state: State) -> int:
        value = ctypes.c_uint32()
        self.check(
            self._lib.tobii_get_state_uint32(device, int(state), ctypes.pointer(value)),
            "tobii_get_state_uint32",
        )
        return value.value

    def get_state_string(self, device: int, state: State) -> str:
        buf = ctypes.create_string_buffer(STATE_STRING_SIZE)
        self.check(
            self._lib.tobii_get_state_string(device, int(state), buf), "tobii_get_state_string"
        )
        return buf.value.decode("utf-8", errors="replace")

    def capability_supported(self, device: int, capability: Capability) -> bool:
        supported = _INT()
        self.check(
            self._lib.tobii_capability_supported(device, int(capability), ctypes.pointer(supported)),
            "tobii_capability_supported",
        )
        return supported.value != 0

    def stream_supported(self, device: int, stream: Stream) -> bool:
        supported = _INT()
        self.check(
            self._lib.tobii_stream_supported(device, int(stream), ctypes.pointer(supported)),
            "tobii_stream_supported",
        )
        return supported.value != 0

    def get_enabled_eye(self, device: int) -> EnabledEye:
        value = _INT()
        self.check(
            self._lib.tobii_get_enabled_eye(device, ctypes.pointer(value)), "tobii_get_enabled_eye"
        )
        return EnabledEye(value.value)

    def get_display_area(self, device: int) -> DisplayArea:
        area = DisplayAreaStruct()
        self.check(
            self._lib.tobii_get_display_area(device, ctypes.pointer(area)), "tobii_get_display_area"
        )
        return area.to_model()

    # --- Streams ---

    def subscribe(self, device: int, entry_point: str, callback, context: int) -> None:
        self.check(getattr(self._lib, entry_point)(device, callback, context), entry_point)

    def unsubscribe(self, device: int, entry_point: str) -> None:
        self.check(getattr(self._lib, entry_point)(device), entry_point)
