"""
Safe Python access to the Tobii Stream Engine native library.

    from tobii_stream_engine import CallbackPump, StreamEngine, StreamKind

    with StreamEngine() as engine:
        with engine.open_device(engine.enumerate_device_urls()[0]) as device:
            device.subscribe(StreamKind.GAZE_POINT, print)
            CallbackPump(engine, [device]).run(iterations=100)
"""
from .api import StreamEngine, forward_to_logging
from .configs import EngineSettings, LoggingConfig, PumpSettings
from .device import Device
from .errors import (
    ConflictingState,
    ConnectionLost,
    Disposed,
    FailureKind,
    IntegrityError,
    InvalidArgument,
    LibraryNotFound,
    OperationAborted,
    OutOfMemory,
    PermissionDenied,
    ResourceExhausted,
    StreamEngineError,
    TimedOut,
    UnknownError,
    Unsupported,
    translate,
)
from .models import (
    DeviceInfo,
    DisplayArea,
    GazePoint,
    HeadPose,
    Notification,
    StereoPosition,
    TrackBox,
    UserPresence,
)
from .native import (
    Capability,
    DeviceGeneration,
    EnabledEye,
    LogLevel,
    NotificationType,
    State,
    Stream,
    UserPresenceStatus,
    Validity,
)
from .native.loader import load_library
from .pinning import PinnedSlot
from .pump import CallbackPump
from .subscriptions import StreamKind, SubscriptionState
from .version import Version
