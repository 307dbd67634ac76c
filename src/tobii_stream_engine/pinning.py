import itertools
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

# address -> target. Addresses start at 1 so a pinned context is never NULL.
_pinned: dict[int, Any] = {}
_addresses = itertools.count(1)


class PinnedSlot:
    """
    Keeps one Python object reachable from native code.

    Native code only ever sees `address`, an opaque integer handed over as
    the `void* user_data` of a registration. The trampolines turn it back
    into the target with `PinnedSlot.resolve`.

    A slot must only be released after the native side has confirmed that
    it will not call back with this address again (unsubscribe or destroy
    returned success).
    """
    __slots__ = ("_address",)

    def __init__(self, target: Any):
        self._address: Optional[int] = next(_addresses)
        _pinned[self._address] = target
        logger.debug("Pinned slot %d.", self._address)

    @property
    def address(self) -> int:
        if self._address is None:
            raise RuntimeError("Pinned slot has already been released.")
        return self._address

    @property
    def released(self) -> bool:
        return self._address is None

    def release(self) -> None:
        if self._address is None:
            return
        _pinned.pop(self._address, None)
        logger.debug("Released slot %d.", self._address)
        self._address = None

    @staticmethod
    def resolve(address: Optional[int]) -> Any:
        """Returns the pinned target, or None for NULL or a released address."""
        if not address:
            return None
        return _pinned.get(address)

    def __repr__(self) -> str:
        state = "released" if self._address is None else f"address={self._address}"
        return f"<PinnedSlot {state}>"


def live_slot_count() -> int:
    return len(_pinned)
