import asyncio
import logging
import threading
from typing import Any, Optional

from ..api import StreamEngine
from ..configs import EngineSettings
from ..native.library import NativeLibrary
from ..pump import CallbackPump
from ..subscriptions import StreamKind
from .base import END, GazeSource

logger = logging.getLogger(__name__)


class StreamEngineGazeSource(GazeSource):
    """
    A GazeSource fed by the first device the stream engine reports.

    The whole native lifecycle (engine, device, subscription, drive loop,
    teardown) runs on one worker thread, since native callbacks only fire on
    the thread that calls process_callbacks. Samples are handed back to the
    event loop with call_soon_threadsafe.
    """

    def __init__(
        self,
        *args,
        kind: StreamKind = StreamKind.GAZE_POINT,
        url: Optional[str] = None,
        library: Optional[NativeLibrary] = None,
        settings: Optional[EngineSettings] = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.kind = kind
        self.url = url
        self._library = library
        self._settings = settings or EngineSettings()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._halt = threading.Event()
        self.device_url: Optional[str] = None

    def _on_sample(self, sample: Any) -> None:
        try:
            self._loop.call_soon_threadsafe(self._output_queue.put_nowait, sample)
        except RuntimeError:
            # The event loop is already closed during shutdown.
            logger.debug("Dropped sample after event loop shutdown.")

    def _drive(self) -> None:
        with StreamEngine(library=self._library, settings=self._settings) as engine:
            url = self.url
            if url is None:
                urls = engine.enumerate_device_urls()
                if not urls:
                    logger.error("No eye trackers found.")
                    return
                url = urls[0]

            with engine.open_device(url) as device:
                self.device_url = url
                logger.info("Streaming %s from %s.", self.kind.name, url)
                device.subscribe(self.kind, self._on_sample)
                try:
                    CallbackPump(engine, [device], self._settings.pump).run(stop_event=self._halt)
                finally:
                    device.unsubscribe(self.kind, self._on_sample)

    async def run(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._halt.clear()
        watcher = asyncio.create_task(self._relay_stop())
        try:
            await asyncio.to_thread(self._drive)
        except Exception:
            logger.exception("Stream engine source failed.")
            raise
        finally:
            self._halt.set()
            watcher.cancel()
            await self._output_queue.put(END)
            logger.info("Stream engine source has stopped.")

    async def _relay_stop(self) -> None:
        await self._stop_event.wait()
        self._halt.set()
