import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

EngineClock = Callable[[], int]


@dataclass(slots=True, frozen=True, order=True)
class TimeProbe:
    """
    Offset between the engine system clock (microseconds) and UTC.

    `measure` reads the engine clock on both sides of one UTC reading and
    keeps the midpoint, so `latency_us` bounds the error. Probes order by
    latency only; `best` keeps the tightest of several.
    """
    latency_us: int
    offset_ns: int = field(compare=False)

    @classmethod
    def measure(cls, engine_now_us: EngineClock) -> "TimeProbe":
        before = engine_now_us()
        utc_ns = time.time_ns()
        after = engine_now_us()
        midpoint_us = (before + after) // 2
        return cls(latency_us=after - before, offset_ns=utc_ns - midpoint_us * 1_000)

    @classmethod
    def best(cls, engine_now_us: EngineClock, samples: int = 5) -> "TimeProbe":
        if samples <= 0:
            raise ValueError("samples must be positive.")
        return min(cls.measure(engine_now_us) for _ in range(samples))

    def to_utc_ns(self, timestamp_us: int) -> int:
        return timestamp_us * 1_000 + self.offset_ns

    def to_utc_ms(self, timestamp_us: int) -> int:
        return self.to_utc_ns(timestamp_us) // 1_000_000

    def to_datetime(self, timestamp_us: int) -> datetime:
        seconds, ns = divmod(self.to_utc_ns(timestamp_us), 1_000_000_000)
        return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=ns // 1_000)
