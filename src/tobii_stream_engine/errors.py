from enum import Enum, auto
from typing import Optional


class FailureKind(Enum):
    """
    Semantic category of a failed native call.

    Callers branch on the kind, never on the raw status code. The raw code
    stays available on the exception for diagnostics.
    """
    PERMISSION_DENIED = auto()
    UNSUPPORTED = auto()
    CONNECTION_LOST = auto()  # Call Device.reconnect(), do not reopen.
    TIMED_OUT = auto()
    RESOURCE_EXHAUSTED = auto()
    INVALID_ARGUMENT = auto()
    CONFLICTING_STATE = auto()  # Retry after process_callbacks() returns.
    OPERATION_ABORTED = auto()
    UNKNOWN = auto()


# tobii_error_t
NO_ERROR = 0
ERROR_ALLOCATION_FAILED = 7

_KINDS: dict[int, FailureKind] = {
    1: FailureKind.UNKNOWN,  # internal
    2: FailureKind.PERMISSION_DENIED,  # insufficient license
    3: FailureKind.UNSUPPORTED,
    4: FailureKind.UNKNOWN,  # not available
    5: FailureKind.CONNECTION_LOST,
    6: FailureKind.TIMED_OUT,
    7: FailureKind.RESOURCE_EXHAUSTED,
    8: FailureKind.INVALID_ARGUMENT,
    9: FailureKind.CONFLICTING_STATE,  # calibration already started
    10: FailureKind.CONFLICTING_STATE,  # calibration not started
    11: FailureKind.CONFLICTING_STATE,  # already subscribed
    12: FailureKind.CONFLICTING_STATE,  # not subscribed
    13: FailureKind.OPERATION_ABORTED,  # operation failed, e.g. timesync busy
    14: FailureKind.CONFLICTING_STATE,  # conflicting api instances
    15: FailureKind.CONFLICTING_STATE,  # calibration busy
    16: FailureKind.CONFLICTING_STATE,  # callback in progress
    17: FailureKind.CONFLICTING_STATE,  # too many subscribers
    18: FailureKind.CONNECTION_LOST,  # connection failed driver
    19: FailureKind.PERMISSION_DENIED,  # unauthorized
    20: FailureKind.CONFLICTING_STATE,  # firmware upgrade in progress
}


def translate(code: int) -> Optional[FailureKind]:
    """Maps a native status code to its failure kind. Returns None for success."""
    if code == NO_ERROR:
        return None
    return _KINDS.get(code, FailureKind.UNKNOWN)


class StreamEngineError(Exception):
    """Base class for every error raised by the binding."""
    kind: Optional[FailureKind] = None

    def __init__(self, message: str = "", code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"{self.message} (code {self.code})"


class PermissionDenied(StreamEngineError):
    kind = FailureKind.PERMISSION_DENIED


class Unsupported(StreamEngineError):
    kind = FailureKind.UNSUPPORTED


class ConnectionLost(StreamEngineError):
    kind = FailureKind.CONNECTION_LOST


class TimedOut(StreamEngineError):
    kind = FailureKind.TIMED_OUT


class ResourceExhausted(StreamEngineError):
    kind = FailureKind.RESOURCE_EXHAUSTED


class OutOfMemory(ResourceExhausted):
    """The native allocator returned NULL."""


class InvalidArgument(StreamEngineError):
    kind = FailureKind.INVALID_ARGUMENT


class ConflictingState(StreamEngineError):
    kind = FailureKind.CONFLICTING_STATE


class OperationAborted(StreamEngineError):
    kind = FailureKind.OPERATION_ABORTED


class UnknownError(StreamEngineError):
    kind = FailureKind.UNKNOWN


class Disposed(StreamEngineError):
    """An engine, device or subscription was used after it was closed."""


class IntegrityError(StreamEngineError):
    """The native library could not report its own version."""


class LibraryNotFound(StreamEngineError):
    """No loadable copy of the native library was found."""


_EXCEPTIONS: dict[FailureKind, type[StreamEngineError]] = {
    FailureKind.PERMISSION_DENIED: PermissionDenied,
    FailureKind.UNSUPPORTED: Unsupported,
    FailureKind.CONNECTION_LOST: ConnectionLost,
    FailureKind.TIMED_OUT: TimedOut,
    FailureKind.RESOURCE_EXHAUSTED: ResourceExhausted,
    FailureKind.INVALID_ARGUMENT: InvalidArgument,
    FailureKind.CONFLICTING_STATE: ConflictingState,
    FailureKind.OPERATION_ABORTED: OperationAborted,
    FailureKind.UNKNOWN: UnknownError,
}


def error_for_status(code: int, message: str = "") -> Optional[StreamEngineError]:
    """Builds (without raising) the exception matching a native status code."""
    kind = translate(code)
    if kind is None:
        return None
    if code == ERROR_ALLOCATION_FAILED:
        return OutOfMemory(message, code)
    return _EXCEPTIONS[kind](message, code)


def raise_for_status(code: int, message: str = "") -> None:
    error = error_for_status(code, message)
    if error is not None:
        raise error
