from .base import END, EndToken, GazeSource
from .stream_engine import StreamEngineGazeSource
