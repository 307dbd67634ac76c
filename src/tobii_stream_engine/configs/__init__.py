from .app import EngineSettings, PumpSettings
from .utils import LoggingConfig
