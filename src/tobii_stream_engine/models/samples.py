from dataclasses import dataclass
from typing import Optional, Union

from ..native.enums import (
    EnabledEye,
    NotificationType,
    NotificationValueType,
    UserPresenceStatus,
    Validity,
)
from .device import DisplayArea, Vector3


@dataclass(slots=True, frozen=True)
class GazePoint:
    """
    A single gaze point sample.

    `position` is normalized to the display area, (0, 0) top left and
    (1, 1) bottom right. It is only meaningful when `validity` is VALID.
    """
    timestamp_us: int
    validity: Validity
    position: tuple[float, float]

    @property
    def is_valid(self) -> bool:
        return self.validity == Validity.VALID


@dataclass(slots=True, frozen=True)
class StereoPosition:
    """Per-eye 3D positions. Used by the gaze origin and user position guide streams."""
    timestamp_us: int
    left_validity: Validity
    left: Vector3
    right_validity: Validity
    right: Vector3

    @property
    def left_or_none(self) -> Optional[Vector3]:
        return self.left if self.left_validity == Validity.VALID else None

    @property
    def right_or_none(self) -> Optional[Vector3]:
        return self.right if self.right_validity == Validity.VALID else None


@dataclass(slots=True, frozen=True)
class HeadPose:
    timestamp_us: int
    position_validity: Validity
    position: Vector3
    rotation_validity: tuple[Validity, Validity, Validity]
    rotation: Vector3


@dataclass(slots=True, frozen=True)
class UserPresence:
    status: UserPresenceStatus
    timestamp_us: int


NotificationValue = Union[None, float, bool, int, str, EnabledEye, DisplayArea]


@dataclass(slots=True, frozen=True)
class Notification:
    """
    A device state change. `value` is decoded according to `value_type`.

    Enum fields hold a plain int when the library reports a value this
    binding does not know. An unknown `value_type` leaves `value` as None.
    """
    type: NotificationType
    value_type: NotificationValueType
    value: NotificationValue
