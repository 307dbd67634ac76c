from .clock import TimeProbe
from .logging import ThrottledLogger
