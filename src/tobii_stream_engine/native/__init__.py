from .enums import (
    Capability,
    DeviceGeneration,
    EnabledEye,
    FieldOfUse,
    LogLevel,
    NotificationType,
    NotificationValueType,
    State,
    StateValueKind,
    Stream,
    UserPresenceStatus,
    Validity,
)
