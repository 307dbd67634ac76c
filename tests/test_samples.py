import logging

import pytest

from tobii_stream_engine import (
    EnabledEye,
    NotificationType,
    StreamKind,
    UserPresenceStatus,
    Validity,
)
from tobii_stream_engine.native.enums import NotificationValueType
from tobii_stream_engine.native.structs import GazePointStruct


@pytest.fixture
def collect(device):
    def subscribe(kind):
        received = []
        device.subscribe(kind, received.append)
        return received
    return subscribe


def test_gaze_point(device, fake, collect):
    received = collect(StreamKind.GAZE_POINT)
    fake.push_gaze_point(123, 0.25, 0.75)
    fake.push_gaze_point(124, 0.0, 0.0, validity=0)
    device.process_callbacks()

    valid, invalid = received
    assert valid.timestamp_us == 123
    assert valid.position == (0.25, 0.75)
    assert valid.is_valid
    assert invalid.validity == Validity.INVALID
    assert not invalid.is_valid


def test_gaze_origin_per_eye_validity(device, fake, collect):
    received = collect(StreamKind.GAZE_ORIGIN)
    fake.push_stereo("gaze_origin", 5, (1.0, 2.0, 3.0), (4.0, 5.0, 6.0), validity=(1, 0))
    device.process_callbacks()

    (origin,) = received
    assert origin.left_or_none == (1.0, 2.0, 3.0)
    assert origin.right_or_none is None
    assert origin.right == (4.0, 5.0, 6.0)


def test_user_presence(device, fake, collect):
    received = collect(StreamKind.USER_PRESENCE)
    fake.push_user_presence(int(UserPresenceStatus.PRESENT), 77)
    device.process_callbacks()

    (presence,) = received
    assert presence.status == UserPresenceStatus.PRESENT
    assert presence.timestamp_us == 77


def test_head_pose(device, fake, collect):
    received = collect(StreamKind.HEAD_POSE)
    fake.push_head_pose(8, (1.0, 2.0, 3.0), (0.5, 0.25, 0.0))
    device.process_callbacks()

    (pose,) = received
    assert pose.position == (1.0, 2.0, 3.0)
    assert pose.rotation == (0.5, 0.25, 0.0)
    assert pose.rotation_validity == (Validity.VALID, Validity.VALID, Validity.INVALID)


def test_notification_uint(device, fake, collect):
    received = collect(StreamKind.NOTIFICATION)
    fake.push_notification(
        int(NotificationType.CALIBRATION_ID_CHANGED), int(NotificationValueType.UINT), uint_=42
    )
    device.process_callbacks()

    (note,) = received
    assert note.type == NotificationType.CALIBRATION_ID_CHANGED
    assert note.value == 42


def test_notification_state_is_bool(device, fake, collect):
    received = collect(StreamKind.NOTIFICATION)
    fake.push_notification(
        int(NotificationType.DEVICE_PAUSED_STATE_CHANGED), int(NotificationValueType.STATE), state=1
    )
    device.process_callbacks()
    assert received[0].value is True


def test_notification_string(device, fake, collect):
    received = collect(StreamKind.NOTIFICATION)
    fake.push_notification(
        int(NotificationType.FAULTS_CHANGED), int(NotificationValueType.STRING), string_=b"camera"
    )
    device.process_callbacks()
    assert received[0].value == "camera"


def test_notification_enabled_eye(device, fake, collect):
    received = collect(StreamKind.NOTIFICATION)
    fake.push_notification(
        int(NotificationType.CALIBRATION_ENABLED_EYE_CHANGED), int(NotificationValueType.ENABLED_EYE), enabled_eye=0
    )
    device.process_callbacks()
    assert received[0].value == EnabledEye.LEFT


def test_notification_without_value(device, fake, collect):
    received = collect(StreamKind.NOTIFICATION)
    fake.push_notification(int(NotificationType.TRACK_BOX_CHANGED), int(NotificationValueType.NONE))
    device.process_callbacks()
    assert received[0].value is None


def test_unknown_notification_type_is_delivered_as_int(device, fake, collect):
    received = collect(StreamKind.NOTIFICATION)
    fake.push_notification(13, int(NotificationValueType.UINT), uint_=5)
    fake.push_notification(int(NotificationType.CALIBRATION_ID_CHANGED), int(NotificationValueType.UINT), uint_=6)
    device.process_callbacks()

    newer, known = received
    assert newer.type == 13
    assert not isinstance(newer.type, NotificationType)
    assert newer.value == 5
    assert known.type == NotificationType.CALIBRATION_ID_CHANGED


def test_unknown_notification_value_type_has_no_value(device, fake, collect):
    received = collect(StreamKind.NOTIFICATION)
    fake.push_notification(int(NotificationType.FACE_TYPE_CHANGED), 9)
    device.process_callbacks()
    assert received[0].value_type == 9
    assert received[0].value is None


def test_unknown_presence_status_is_delivered_as_int(device, fake, collect):
    received = collect(StreamKind.USER_PRESENCE)
    fake.push_user_presence(3, 42)
    device.process_callbacks()

    (presence,) = received
    assert presence.status == 3
    assert presence.timestamp_us == 42


def test_unknown_validity_is_not_valid(device, fake, collect):
    received = collect(StreamKind.GAZE_POINT)
    fake.push_gaze_point(1, 0.5, 0.5, validity=7)
    device.process_callbacks()
    assert received[0].validity == 7
    assert not received[0].is_valid


def test_decode_failure_is_logged_and_next_sample_delivered(device, fake, collect, monkeypatch, caplog):
    received = collect(StreamKind.GAZE_POINT)
    original = GazePointStruct.to_model

    def to_model(self):
        if self.timestamp_us == 1:
            raise ValueError("corrupt sample")
        return original(self)

    monkeypatch.setattr(GazePointStruct, "to_model", to_model)
    fake.push_gaze_point(1, 0.5, 0.5)
    fake.push_gaze_point(2, 0.5, 0.5)
    with caplog.at_level(logging.ERROR, logger="tobii_stream_engine.native.callbacks"):
        device.process_callbacks()

    assert [s.timestamp_us for s in received] == [2]
    assert any(r.exc_info and isinstance(r.exc_info[1], ValueError) for r in caplog.records)
