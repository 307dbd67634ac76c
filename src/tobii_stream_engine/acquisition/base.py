from abc import ABC, abstractmethod
from asyncio import Event, Queue
from typing import Any, final


class EndToken:
    """Sentinel type to signal the end of a stream."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "<EndToken>"


END = EndToken()


class GazeSource(ABC):
    """
    Abstract Base Class for asyncio consumers of a sample stream.

    A GazeSource runs until its stop event is set, putting samples into the
    output queue and finishing with `END`.
    """

    def __init__(self, output_queue: "Queue[Any]", stop_event: Event):
        self._output_queue = output_queue
        self._stop_event = stop_event

    @property
    def output_queue(self) -> "Queue[Any]":
        return self._output_queue

    @abstractmethod
    async def run(self) -> None:
        """
        Acquires samples until the stop event is set.

        Implementations must put `END` into the queue before returning.
        """
        raise NotImplementedError

    @final
    async def stop(self) -> None:
        """
        Signals the source to stop acquiring data.

        This is a final method and should not be overridden. Subclasses can
        perform cleanup in their 'run' method's finally block.
        """
        self._stop_event.set()
