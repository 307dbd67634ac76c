"""
Function-pointer prototypes and the trampolines handed to native code.

Every trampoline is a module-level CFUNCTYPE object, so it lives as long as
the process. The per-registration state travels through the `void*` context
argument, which is the address of a PinnedSlot. Native code only calls these
from inside an API call on the calling thread (process_callbacks, enumerate,
api create), never from a thread of its own.
"""
import ctypes
import logging

from ..pinning import PinnedSlot
from ..models.samples import UserPresence
from .enums import LogLevel, UserPresenceStatus, coerce
from .structs import (
    GazePointStruct,
    HeadPoseStruct,
    LogFunc,
    NotificationStruct,
    StereoPositionStruct,
)

logger = logging.getLogger(__name__)

UrlReceiver = ctypes.CFUNCTYPE(None, ctypes.c_char_p, ctypes.c_void_p)
GazePointCallback = ctypes.CFUNCTYPE(None, ctypes.POINTER(GazePointStruct), ctypes.c_void_p)
StereoPositionCallback = ctypes.CFUNCTYPE(None, ctypes.POINTER(StereoPositionStruct), ctypes.c_void_p)
UserPresenceCallback = ctypes.CFUNCTYPE(None, ctypes.c_int, ctypes.c_int64, ctypes.c_void_p)
HeadPoseCallback = ctypes.CFUNCTYPE(None, ctypes.POINTER(HeadPoseStruct), ctypes.c_void_p)
NotificationCallback = ctypes.CFUNCTYPE(None, ctypes.POINTER(NotificationStruct), ctypes.c_void_p)


def _deliver(context, decode, *raw) -> None:
    """Decodes `raw` and hands the result to the target pinned at `context`."""
    target = PinnedSlot.resolve(context)
    if target is None:
        logger.warning("Native callback fired for an unknown context %r; dropped.", context)
        return
    try:
        target(decode(*raw))
    except Exception:
        # Nothing may unwind through the native frame.
        logger.exception("Error in native callback handler %r.", target)


def _contents(pointer):
    return pointer.contents.to_model()


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace") if raw else ""


def _user_presence(status: int, timestamp_us: int) -> UserPresence:
    return UserPresence(coerce(UserPresenceStatus, status), timestamp_us)


@LogFunc
def on_log(context, level, text):
    target = PinnedSlot.resolve(context)
    if target is None:
        logger.warning("Native log callback fired for an unknown context %r; dropped.", context)
        return
    try:
        level = LogLevel(level)
    except ValueError:
        level = LogLevel.INFO
    try:
        target(level, _text(text))
    except Exception:
        logger.exception("Error in native log handler %r.", target)


@UrlReceiver
def on_device_url(url, context):
    if url:
        _deliver(context, _text, url)


@GazePointCallback
def on_gaze_point(gaze_point, context):
    _deliver(context, _contents, gaze_point)


@StereoPositionCallback
def on_gaze_origin(gaze_origin, context):
    _deliver(context, _contents, gaze_origin)


@StereoPositionCallback
def on_user_position_guide(user_position_guide, context):
    _deliver(context, _contents, user_position_guide)


@UserPresenceCallback
def on_user_presence(status, timestamp_us, context):
    _deliver(context, _user_presence, status, timestamp_us)


@HeadPoseCallback
def on_head_pose(head_pose, context):
    _deliver(context, _contents, head_pose)


@NotificationCallback
def on_notification(notification, context):
    _deliver(context, _contents, notification)
