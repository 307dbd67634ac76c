"""
Enumerations shared with the native ABI.

Values are passed across the boundary as fixed-width integers and must
match the native headers exactly. Do not reorder.
"""
from enum import IntEnum, IntFlag


class LogLevel(IntEnum):
    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3
    TRACE = 4


class DeviceGeneration(IntFlag):
    G5 = 2
    IS3 = 4
    IS4 = 8
    ALL = 0xFFFFFFFF


class FieldOfUse(IntEnum):
    INTERACTIVE = 1
    ANALYTICAL = 2


class Capability(IntEnum):
    DISPLAY_AREA_WRITABLE = 0
    CALIBRATION_2D = 1
    CALIBRATION_3D = 2
    PERSISTENT_STORAGE = 3
    CALIBRATION_PER_EYE = 4
    COMPOUND_STREAM_WEARABLE_3D_GAZE_COMBINED = 5
    FACE_TYPE = 6
    COMPOUND_STREAM_USER_POSITION_GUIDE_XY = 7
    COMPOUND_STREAM_USER_POSITION_GUIDE_Z = 8
    COMPOUND_STREAM_WEARABLE_LIMITED_IMAGE = 9
    COMPOUND_STREAM_WEARABLE_PUPIL_DIAMETER = 10
    COMPOUND_STREAM_WEARABLE_PUPIL_POSITION = 11
    COMPOUND_STREAM_WEARABLE_EYE_OPENNESS = 12
    COMPOUND_STREAM_WEARABLE_3D_GAZE_PER_EYE = 13
    COMPOUND_STREAM_WEARABLE_USER_POSITION_GUIDE_XY = 14
    # Superseded by IMPROVE_USER_POSITION_HMD and INCREASE_EYE_RELIEF.
    COMPOUND_STREAM_WEARABLE_TRACKING_IMPROVEMENTS = 15
    COMPOUND_STREAM_WEARABLE_CONVERGENCE_DISTANCE = 16
    COMPOUND_STREAM_WEARABLE_IMPROVE_USER_POSITION_HMD = 17
    COMPOUND_STREAM_WEARABLE_INCREASE_EYE_RELIEF = 18


class Stream(IntEnum):
    GAZE_POINT = 0
    GAZE_ORIGIN = 1
    EYE_POSITION_NORMALIZED = 2
    USER_PRESENCE = 3
    HEAD_POSE = 4
    WEARABLE = 5
    GAZE_DATA = 6
    DIGITAL_SYNCPORT = 7
    DIAGNOSTICS_IMAGE = 8
    CUSTOM = 9


class Validity(IntEnum):
    INVALID = 0
    VALID = 1


class UserPresenceStatus(IntEnum):
    UNKNOWN = 0
    AWAY = 1
    PRESENT = 2


class NotificationType(IntEnum):
    CALIBRATION_STATE_CHANGED = 0
    EXCLUSIVE_MODE_STATE_CHANGED = 1
    TRACK_BOX_CHANGED = 2
    DISPLAY_AREA_CHANGED = 3
    FRAMERATE_CHANGED = 4
    POWER_SAVE_STATE_CHANGED = 5
    DEVICE_PAUSED_STATE_CHANGED = 6
    CALIBRATION_ENABLED_EYE_CHANGED = 7
    CALIBRATION_ID_CHANGED = 8
    COMBINED_GAZE_EYE_SELECTION_CHANGED = 9
    FAULTS_CHANGED = 10
    WARNINGS_CHANGED = 11
    FACE_TYPE_CHANGED = 12


class NotificationValueType(IntEnum):
    NONE = 0
    FLOAT = 1
    STATE = 2
    DISPLAY_AREA = 3
    UINT = 4
    ENABLED_EYE = 5
    STRING = 6


class EnabledEye(IntEnum):
    LEFT = 0
    RIGHT = 1
    BOTH = 2


class StateValueKind(IntEnum):
    BOOL = 0
    UINT = 1
    STRING = 2


class State(IntEnum):
    POWER_SAVE_ACTIVE = 0
    REMOTE_WAKE_ACTIVE = 1
    DEVICE_PAUSED = 2
    EXCLUSIVE_MODE = 3
    FAULT = 4
    WARNING = 5
    CALIBRATION_ID = 6
    CALIBRATION_ACTIVE = 7

    @property
    def value_kind(self) -> StateValueKind:
        return _STATE_KINDS[self]


_STATE_KINDS = {
    State.POWER_SAVE_ACTIVE: StateValueKind.BOOL,
    State.REMOTE_WAKE_ACTIVE: StateValueKind.BOOL,
    State.DEVICE_PAUSED: StateValueKind.BOOL,
    State.EXCLUSIVE_MODE: StateValueKind.BOOL,
    State.FAULT: StateValueKind.STRING,
    State.WARNING: StateValueKind.STRING,
    State.CALIBRATION_ID: StateValueKind.UINT,
    State.CALIBRATION_ACTIVE: StateValueKind.BOOL,
}


def coerce(enum_type, value: int):
    """Returns the member for `value`, or the plain int if this binding does not know it."""
    try:
        return enum_type(value)
    except ValueError:
        return int(value)
