import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .api import StreamEngine
from .configs import EngineSettings
from .errors import StreamEngineError, Unsupported
from .native.enums import Stream
from .pump import CallbackPump
from .subscriptions import StreamKind
from .utils import TimeProbe

# Stream kinds that have a matching tobii_stream_t to probe support with.
_STREAM_IDS = {
    StreamKind.GAZE_POINT: Stream.GAZE_POINT,
    StreamKind.GAZE_ORIGIN: Stream.GAZE_ORIGIN,
    StreamKind.USER_PRESENCE: Stream.USER_PRESENCE,
    StreamKind.HEAD_POSE: Stream.HEAD_POSE,
    StreamKind.USER_POSITION_GUIDE: Stream.EYE_POSITION_NORMALIZED,
}


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tobii-stream-engine",
        description="List connected eye trackers and log their streams.",
    )
    parser.add_argument("--library", type=Path, help="Path to the tobii_stream_engine library.")
    parser.add_argument(
        "--iterations", type=int, default=100,
        help="Number of wait/process cycles to run per device (default: 100).",
    )
    parser.add_argument(
        "--stream", dest="streams", action="append", default=None,
        choices=[kind.name.lower() for kind in StreamKind],
        help="Stream to subscribe to; may be repeated (default: gaze_point).",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)

    # 1. Load Configuration
    try:
        settings = EngineSettings()
    except ValidationError as e:
        print(f"Configuration Error: {e}")
        return 1
    if args.library is not None:
        settings.library_path = args.library

    # 2. Setup Logging
    logging.basicConfig(
        level=settings.logging.level.upper(),
        format=settings.logging.format,
        stream=sys.stdout,
    )
    logger = logging.getLogger("tobii_stream_engine.main")
    logger.info("Starting tobii-stream-engine v%s", settings.__version__)

    kinds = [StreamKind[name.upper()] for name in (args.streams or ["gaze_point"])]

    # 3. Run
    try:
        with StreamEngine(settings=settings) as engine:
            logger.info("Native library version %s", engine.version)
            probe = TimeProbe.best(engine.now)
            logger.info("Engine clock offset to UTC: %d ns (latency %d us)", probe.offset_ns, probe.latency_us)

            urls = engine.enumerate_device_urls()
            if not urls:
                logger.warning("No eye trackers found.")
                return 0

            for url in urls:
                with engine.open_device(url) as device:
                    _run_device(engine, device, kinds, args.iterations, settings, logger, probe)
    except StreamEngineError:
        logger.exception("Stream engine failure.")
        return 1
    finally:
        logger.info("tobii-stream-engine has shut down.")
    return 0


def _run_device(engine, device, kinds, iterations, settings, logger, probe) -> None:
    info = device.info()
    logger.info("Device %s: %s %s (firmware %s)", device.url, info.model, info.serial_number,
                info.firmware_version)

    supported = []
    for kind, stream in _STREAM_IDS.items():
        try:
            if device.stream_supported(stream):
                supported.append(kind.name.lower())
        except Unsupported:
            continue
    logger.info("Supported streams: %s", ", ".join(supported) or "none")

    def make_logger(kind: StreamKind):
        def log_sample(sample) -> None:
            timestamp = getattr(sample, "timestamp_us", None)
            utc = probe.to_datetime(timestamp).isoformat() if timestamp is not None else "-"
            logger.info("%s @%s: %s", kind.name.lower(), utc, sample)
        return log_sample

    callbacks = {}
    for kind in kinds:
        callbacks[kind] = make_logger(kind)
        device.subscribe(kind, callbacks[kind])

    pump = CallbackPump(engine, [device], settings.pump)
    pump.run(iterations=iterations)
    logger.info("Ran %d cycles on %s.", pump.iterations, device.url)

    for kind, callback in callbacks.items():
        device.unsubscribe(kind, callback)


if __name__ == "__main__":
    sys.exit(main())
