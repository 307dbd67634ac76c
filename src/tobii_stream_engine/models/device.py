from dataclasses import dataclass
from typing import Optional

Vector3 = tuple[float, float, float]


@dataclass(slots=True, frozen=True)
class DeviceInfo:
    """
    Identification block of a device.

    Libraries before major version 3 only report the first four fields; the
    rest are None there.
    """
    serial_number: str
    model: str
    generation: str
    firmware_version: str
    integration_id: Optional[str] = None
    hw_calibration_version: Optional[str] = None
    hw_calibration_date: Optional[str] = None
    lot_id: Optional[str] = None
    integration_type: Optional[str] = None
    runtime_build_version: Optional[str] = None


@dataclass(slots=True, frozen=True)
class TrackBox:
    """Corners of the track box frustum, in mm from the device center."""
    front_upper_right: Vector3
    front_upper_left: Vector3
    front_lower_left: Vector3
    front_lower_right: Vector3
    back_upper_right: Vector3
    back_upper_left: Vector3
    back_lower_left: Vector3
    back_lower_right: Vector3


@dataclass(slots=True, frozen=True)
class DisplayArea:
    top_left: Vector3
    top_right: Vector3
    bottom_left: Vector3
