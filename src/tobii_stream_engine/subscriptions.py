"""
Per-device stream subscriptions.

Each (device, stream kind) pair owns at most one native registration. The
native callback context is a PinnedSlot that points at the subscription's
dispatcher; application callbacks are fanned out from there in registration
order.

    UNSUBSCRIBED -> SUBSCRIBING -> SUBSCRIBED -> UNSUBSCRIBING -> UNSUBSCRIBED

The slot is pinned before the native subscribe call and released only after
the native unsubscribe call has returned success. Native code may fire the
callback at any point in between.
"""
import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Callable, Optional

from .errors import Disposed
from .native import callbacks as cb
from .native.shapes import StreamEntryPoints
from .pinning import PinnedSlot

if TYPE_CHECKING:
    from .device import Device

logger = logging.getLogger(__name__)

SampleCallback = Callable[[Any], None]


class StreamKind(Enum):
    GAZE_POINT = auto()
    GAZE_ORIGIN = auto()
    USER_PRESENCE = auto()
    HEAD_POSE = auto()
    NOTIFICATION = auto()
    USER_POSITION_GUIDE = auto()


class SubscriptionState(Enum):
    UNSUBSCRIBED = auto()
    SUBSCRIBING = auto()
    SUBSCRIBED = auto()
    UNSUBSCRIBING = auto()


def _entry_points(name: str) -> StreamEntryPoints:
    return StreamEntryPoints(f"tobii_{name}_subscribe", f"tobii_{name}_unsubscribe")


# USER_POSITION_GUIDE is missing on purpose; its names depend on the version.
_FIXED_ENTRY_POINTS: dict[StreamKind, StreamEntryPoints] = {
    StreamKind.GAZE_POINT: _entry_points("gaze_point"),
    StreamKind.GAZE_ORIGIN: _entry_points("gaze_origin"),
    StreamKind.USER_PRESENCE: _entry_points("user_presence"),
    StreamKind.HEAD_POSE: _entry_points("head_pose"),
    StreamKind.NOTIFICATION: _entry_points("notifications"),
}

_TRAMPOLINES = {
    StreamKind.GAZE_POINT: cb.on_gaze_point,
    StreamKind.GAZE_ORIGIN: cb.on_gaze_origin,
    StreamKind.USER_PRESENCE: cb.on_user_presence,
    StreamKind.HEAD_POSE: cb.on_head_pose,
    StreamKind.NOTIFICATION: cb.on_notification,
    StreamKind.USER_POSITION_GUIDE: cb.on_user_position_guide,
}


class Subscription:
    """The native registration of one stream kind on one device."""

    def __init__(self, device: "Device", kind: StreamKind, entry_points: StreamEntryPoints):
        self._device = device
        self.kind = kind
        self.entry_points = entry_points
        self.state = SubscriptionState.UNSUBSCRIBED
        self._callbacks: list[SampleCallback] = []
        self._slot: Optional[PinnedSlot] = None

    @property
    def callbacks(self) -> tuple[SampleCallback, ...]:
        return tuple(self._callbacks)

    @property
    def is_active(self) -> bool:
        return self.state == SubscriptionState.SUBSCRIBED

    def add(self, callback: SampleCallback) -> None:
        if self.state == SubscriptionState.SUBSCRIBED:
            self._callbacks.append(callback)
            return

        self.state = SubscriptionState.SUBSCRIBING
        self._slot = PinnedSlot(self.dispatch)
        try:
            self._device.library.subscribe(
                self._device.handle,
                self.entry_points.subscribe,
                _TRAMPOLINES[self.kind],
                self._slot.address,
            )
        except Exception:
            self._slot.release()
            self._slot = None
            self.state = SubscriptionState.UNSUBSCRIBED
            raise

        self._callbacks.append(callback)
        self.state = SubscriptionState.SUBSCRIBED
        logger.info("Subscribed to %s on %s.", self.kind.name, self._device.url)

    def remove(self, callback: SampleCallback) -> None:
        try:
            self._callbacks.remove(callback)
        except ValueError:
            logger.debug("Callback %r was not registered for %s.", callback, self.kind.name)
            return

        if not self._callbacks and self.state == SubscriptionState.SUBSCRIBED:
            try:
                self._unsubscribe()
            except Exception:
                self._callbacks.append(callback)
                raise

    def release(self) -> None:
        """Drops every callback and the native registration."""
        callbacks, self._callbacks = self._callbacks, []
        if self.state == SubscriptionState.SUBSCRIBED:
            try:
                self._unsubscribe()
            except Exception:
                self._callbacks = callbacks
                raise

    def _unsubscribe(self) -> None:
        self.state = SubscriptionState.UNSUBSCRIBING
        try:
            self._device.library.unsubscribe(self._device.handle, self.entry_points.unsubscribe)
        except Exception:
            # Native code may still call back: keep the slot pinned.
            self.state = SubscriptionState.SUBSCRIBED
            raise

        self._slot.release()
        self._slot = None
        self.state = SubscriptionState.UNSUBSCRIBED
        logger.info("Unsubscribed from %s on %s.", self.kind.name, self._device.url)

    def dispatch(self, sample: Any) -> None:
        for callback in tuple(self._callbacks):
            callback(sample)


class SubscriptionRegistry:
    """Zero or one Subscription per stream kind for a single device."""

    def __init__(self, device: "Device"):
        self._device = device
        self._subscriptions: dict[StreamKind, Subscription] = {}

    def _entry_points_for(self, kind: StreamKind) -> StreamEntryPoints:
        if kind == StreamKind.USER_POSITION_GUIDE:
            return self._device.library.shapes.user_position_guide
        return _FIXED_ENTRY_POINTS[kind]

    def _get(self, kind: StreamKind) -> Subscription:
        subscription = self._subscriptions.get(kind)
        if subscription is None:
            subscription = Subscription(self._device, kind, self._entry_points_for(kind))
            self._subscriptions[kind] = subscription
        return subscription

    def subscribe(self, kind: StreamKind, callback: SampleCallback) -> None:
        if self._device.closed:
            raise Disposed("Device is closed.")
        self._get(kind).add(callback)

    def unsubscribe(self, kind: StreamKind, callback: SampleCallback) -> None:
        if self._device.closed:
            raise Disposed("Device is closed.")
        subscription = self._subscriptions.get(kind)
        if subscription is not None:
            subscription.remove(callback)

    def state(self, kind: StreamKind) -> SubscriptionState:
        subscription = self._subscriptions.get(kind)
        return subscription.state if subscription else SubscriptionState.UNSUBSCRIBED

    def callbacks(self, kind: StreamKind) -> tuple[SampleCallback, ...]:
        subscription = self._subscriptions.get(kind)
        return subscription.callbacks if subscription else ()

    def active_kinds(self) -> list[StreamKind]:
        return [k for k, s in self._subscriptions.items() if s.is_active]

    def release_all(self) -> None:
        """Unsubscribes every live stream. Stops at the first native failure."""
        for subscription in self._subscriptions.values():
            subscription.release()
