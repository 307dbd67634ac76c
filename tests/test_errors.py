import pytest

from tobii_stream_engine.errors import (
    ConflictingState,
    ConnectionLost,
    FailureKind,
    InvalidArgument,
    OperationAborted,
    OutOfMemory,
    PermissionDenied,
    ResourceExhausted,
    StreamEngineError,
    TimedOut,
    UnknownError,
    Unsupported,
    error_for_status,
    raise_for_status,
    translate,
)


def test_success_has_no_kind():
    assert translate(0) is None
    assert error_for_status(0) is None
    raise_for_status(0)


@pytest.mark.parametrize(
    "code, kind",
    [
        (1, FailureKind.UNKNOWN),
        (2, FailureKind.PERMISSION_DENIED),
        (3, FailureKind.UNSUPPORTED),
        (4, FailureKind.UNKNOWN),
        (5, FailureKind.CONNECTION_LOST),
        (6, FailureKind.TIMED_OUT),
        (7, FailureKind.RESOURCE_EXHAUSTED),
        (8, FailureKind.INVALID_ARGUMENT),
        (11, FailureKind.CONFLICTING_STATE),
        (13, FailureKind.OPERATION_ABORTED),
        (16, FailureKind.CONFLICTING_STATE),
        (18, FailureKind.CONNECTION_LOST),
        (19, FailureKind.PERMISSION_DENIED),
        (20, FailureKind.CONFLICTING_STATE),
    ],
)
def test_translate_table(code, kind):
    assert translate(code) == kind


def test_unlisted_codes_are_unknown():
    assert translate(999) == FailureKind.UNKNOWN
    assert translate(-1) == FailureKind.UNKNOWN


@pytest.mark.parametrize(
    "code, exc_type",
    [
        (2, PermissionDenied),
        (3, Unsupported),
        (5, ConnectionLost),
        (6, TimedOut),
        (8, InvalidArgument),
        (13, OperationAborted),
        (16, ConflictingState),
        (1, UnknownError),
    ],
)
def test_raise_for_status_picks_subclass(code, exc_type):
    with pytest.raises(exc_type) as info:
        raise_for_status(code, "boom")
    assert info.value.code == code
    assert info.value.kind == translate(code)
    assert isinstance(info.value, StreamEngineError)


def test_allocation_failure_is_out_of_memory():
    error = error_for_status(7, "alloc")
    assert isinstance(error, OutOfMemory)
    assert isinstance(error, ResourceExhausted)
    assert error.kind == FailureKind.RESOURCE_EXHAUSTED


def test_message_keeps_code():
    error = error_for_status(5, "tobii_device_create: connection failed")
    assert error.message == "tobii_device_create: connection failed"
    assert str(error) == "tobii_device_create: connection failed (code 5)"
    assert str(StreamEngineError("plain")) == "plain"
