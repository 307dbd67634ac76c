from .device import DeviceInfo, DisplayArea, TrackBox, Vector3
from .samples import (
    GazePoint,
    HeadPose,
    Notification,
    NotificationValue,
    StereoPosition,
    UserPresence,
)
