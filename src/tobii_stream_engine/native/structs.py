"""ctypes mirrors of the fixed-layout native structs."""
import ctypes

from ..models.device import DisplayArea, TrackBox
from ..models.samples import GazePoint, HeadPose, Notification, StereoPosition
from .enums import EnabledEye, NotificationType, NotificationValueType, Validity, coerce

Float2 = ctypes.c_float * 2
Float3 = ctypes.c_float * 3

STATE_STRING_SIZE = 512

LogFunc = ctypes.CFUNCTYPE(None, ctypes.c_void_p, ctypes.c_int, ctypes.c_char_p)


def _vec(values) -> tuple[float, ...]:
    return tuple(float(v) for v in values)


class VersionStruct(ctypes.Structure):
    _fields_ = [
        ("major", ctypes.c_int),
        ("minor", ctypes.c_int),
        ("revision", ctypes.c_int),
        ("build", ctypes.c_int),
    ]


class CustomLogStruct(ctypes.Structure):
    _fields_ = [
        ("log_context", ctypes.c_void_p),
        ("log_func", LogFunc),
    ]


class GazePointStruct(ctypes.Structure):
    _fields_ = [
        ("timestamp_us", ctypes.c_int64),
        ("validity", ctypes.c_int),
        ("position_xy", Float2),
    ]

    def to_model(self) -> GazePoint:
        return GazePoint(self.timestamp_us, coerce(Validity, self.validity), _vec(self.position_xy))


class StereoPositionStruct(ctypes.Structure):
    """Shared by gaze origin, eye position normalized and user position guide."""
    _fields_ = [
        ("timestamp_us", ctypes.c_int64),
        ("left_validity", ctypes.c_int),
        ("left_xyz", Float3),
        ("right_validity", ctypes.c_int),
        ("right_xyz", Float3),
    ]

    def to_model(self) -> StereoPosition:
        return StereoPosition(
            self.timestamp_us,
            coerce(Validity, self.left_validity),
            _vec(self.left_xyz),
            coerce(Validity, self.right_validity),
            _vec(self.right_xyz),
        )


class HeadPoseStruct(ctypes.Structure):
    _fields_ = [
        ("timestamp_us", ctypes.c_int64),
        ("position_validity", ctypes.c_int),
        ("position_xyz", Float3),
        ("rotation_validity_xyz", ctypes.c_int * 3),
        ("rotation_xyz", Float3),
    ]

    def to_model(self) -> HeadPose:
        return HeadPose(
            self.timestamp_us,
            coerce(Validity, self.position_validity),
            _vec(self.position_xyz),
            tuple(coerce(Validity, v) for v in self.rotation_validity_xyz),
            _vec(self.rotation_xyz),
        )


class TrackBoxStruct(ctypes.Structure):
    _fields_ = [
        ("front_upper_right_xyz", Float3),
        ("front_upper_left_xyz", Float3),
        ("front_lower_left_xyz", Float3),
        ("front_lower_right_xyz", Float3),
        ("back_upper_right_xyz", Float3),
        ("back_upper_left_xyz", Float3),
        ("back_lower_left_xyz", Float3),
        ("back_lower_right_xyz", Float3),
    ]

    def to_model(self) -> TrackBox:
        return TrackBox(*(_vec(getattr(self, name)) for name, _ in self._fields_))


class DisplayAreaStruct(ctypes.Structure):
    _fields_ = [
        ("top_left_mm_xyz", Float3),
        ("top_right_mm_xyz", Float3),
        ("bottom_left_mm_xyz", Float3),
    ]

    def to_model(self) -> DisplayArea:
        return DisplayArea(
            _vec(self.top_left_mm_xyz),
            _vec(self.top_right_mm_xyz),
            _vec(self.bottom_left_mm_xyz),
        )


class NotificationValueUnion(ctypes.Union):
    _fields_ = [
        ("float_", ctypes.c_float),
        ("state", ctypes.c_int),
        ("display_area", DisplayAreaStruct),
        ("uint_", ctypes.c_uint32),
        ("enabled_eye", ctypes.c_int),
        ("string_", ctypes.c_char * STATE_STRING_SIZE),
    ]


class NotificationStruct(ctypes.Structure):
    _fields_ = [
        ("type", ctypes.c_int),
        ("value_type", ctypes.c_int),
        ("value", NotificationValueUnion),
    ]

    def to_model(self) -> Notification:
        value_type = coerce(NotificationValueType, self.value_type)
        v = self.value
        if value_type == NotificationValueType.FLOAT:
            value = float(v.float_)
        elif value_type == NotificationValueType.STATE:
            value = v.state != 0
        elif value_type == NotificationValueType.DISPLAY_AREA:
            value = v.display_area.to_model()
        elif value_type == NotificationValueType.UINT:
            value = int(v.uint_)
        elif value_type == NotificationValueType.ENABLED_EYE:
            value = coerce(EnabledEye, v.enabled_eye)
        elif value_type == NotificationValueType.STRING:
            value = v.string_.decode("utf-8", errors="replace")
        else:
            value = None
        return Notification(coerce(NotificationType, self.type), value_type, value)
