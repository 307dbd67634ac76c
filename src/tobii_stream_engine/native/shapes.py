"""
Version-dependent call shapes.

The native ABI changed between major versions 2, 3 and 4: some functions
gained or lost parameters, one stream was renamed and the device info struct
grew. `CallShapes.for_version` picks one strategy per operation, once, from
the frozen version; callers never re-check the version.
"""
import ctypes
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..layouts import DEVICE_INFO_V2, DEVICE_INFO_V3, DeviceInfoLayout
from ..version import Version
from .callbacks import StereoPositionCallback
from .enums import FieldOfUse


class WaitShape(Enum):
    WITH_ENGINE = "with_engine"  # major < 3: (engine=NULL, count, devices)
    WITHOUT_ENGINE = "without_engine"  # major >= 3: (count, devices)


class CreateShape(Enum):
    URL = "url"  # major < 4: (api, url, device**)
    URL_FIELD_OF_USE = "url_field_of_use"  # major >= 4: (api, url, field_of_use, device**)


def _wait_with_engine(lib, api: int, devices) -> int:
    # The first 2.x parameter is a tobii_engine_t*, not the api context. Always NULL.
    return lib.tobii_wait_for_callbacks(None, len(devices), devices)


def _wait_without_engine(lib, api: int, devices) -> int:
    return lib.tobii_wait_for_callbacks(len(devices), devices)


def _create_url(lib, api: int, url: bytes, device) -> int:
    return lib.tobii_device_create(api, url, device)


def _create_url_field_of_use(lib, api: int, url: bytes, device) -> int:
    return lib.tobii_device_create(api, url, int(FieldOfUse.INTERACTIVE), device)


_WAIT: dict[WaitShape, tuple[Callable, list]] = {
    WaitShape.WITH_ENGINE: (
        _wait_with_engine,
        [ctypes.c_void_p, ctypes.c_int, ctypes.POINTER(ctypes.c_void_p)],
    ),
    WaitShape.WITHOUT_ENGINE: (
        _wait_without_engine,
        [ctypes.c_int, ctypes.POINTER(ctypes.c_void_p)],
    ),
}

_CREATE: dict[CreateShape, tuple[Callable, list]] = {
    CreateShape.URL: (
        _create_url,
        [ctypes.c_void_p, ctypes.c_char_p, ctypes.POINTER(ctypes.c_void_p)],
    ),
    CreateShape.URL_FIELD_OF_USE: (
        _create_url_field_of_use,
        [ctypes.c_void_p, ctypes.c_char_p, ctypes.c_int, ctypes.POINTER(ctypes.c_void_p)],
    ),
}


@dataclass(slots=True, frozen=True)
class StreamEntryPoints:
    subscribe: str
    unsubscribe: str


EYE_POSITION_NORMALIZED = StreamEntryPoints(
    "tobii_eye_position_normalized_subscribe", "tobii_eye_position_normalized_unsubscribe"
)
USER_POSITION_GUIDE = StreamEntryPoints(
    "tobii_user_position_guide_subscribe", "tobii_user_position_guide_unsubscribe"
)


@dataclass(slots=True, frozen=True)
class CallShapes:
    wait: WaitShape
    create: CreateShape
    device_info: DeviceInfoLayout
    user_position_guide: StreamEntryPoints

    @classmethod
    def for_version(cls, version: Version) -> "CallShapes":
        return cls(
            wait=WaitShape.WITH_ENGINE if version.major < 3 else WaitShape.WITHOUT_ENGINE,
            create=CreateShape.URL if version.major < 4 else CreateShape.URL_FIELD_OF_USE,
            device_info=DEVICE_INFO_V2 if version.major < 3 else DEVICE_INFO_V3,
            user_position_guide=(
                EYE_POSITION_NORMALIZED if version.major < 3 else USER_POSITION_GUIDE
            ),
        )

    @property
    def wait_call(self) -> Callable:
        return _WAIT[self.wait][0]

    @property
    def create_call(self) -> Callable:
        return _CREATE[self.create][0]

    def apply_prototypes(self, cdll: ctypes.CDLL) -> None:
        """Sets argtypes/restype on the functions whose signature depends on the version."""
        cdll.tobii_wait_for_callbacks.argtypes = _WAIT[self.wait][1]
        cdll.tobii_wait_for_callbacks.restype = ctypes.c_int
        cdll.tobii_device_create.argtypes = _CREATE[self.create][1]
        cdll.tobii_device_create.restype = ctypes.c_int
        fn = getattr(cdll, self.user_position_guide.subscribe)
        fn.argtypes = [ctypes.c_void_p, StereoPositionCallback, ctypes.c_void_p]
        fn.restype = ctypes.c_int
        fn = getattr(cdll, self.user_position_guide.unsubscribe)
        fn.argtypes = [ctypes.c_void_p]
        fn.restype = ctypes.c_int

    def __str__(self) -> str:
        return (
            f"wait={self.wait.value} create={self.create.value} "
            f"device_info={self.device_info.size}B "
            f"user_position_guide={self.user_position_guide.subscribe}"
        )
