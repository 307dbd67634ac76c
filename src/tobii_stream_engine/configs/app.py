import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, PositiveFloat, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..native.enums import DeviceGeneration
from .utils import LoggingConfig

logger = logging.getLogger(__name__)

try:
    __version__ = version("tobii-stream-engine")
except PackageNotFoundError:
    __version__ = "0.0.0"


class PumpSettings(BaseModel):
    """Policy of the wait/process drive loop."""
    timesync_interval_s: PositiveFloat = Field(
        30.0, description="How often to resynchronize the host and device clocks."
    )
    timesync_retry_s: PositiveFloat = Field(
        1.0, description="Back-off after the device reported that time sync is busy."
    )
    reconnect_on_connection_loss: bool = Field(
        True, description="Call reconnect() when processing reports a lost connection."
    )
    clear_buffers_on_start: bool = Field(
        True, description="Drop samples queued before the loop started."
    )

    @model_validator(mode="after")
    def validate_retry(self) -> "PumpSettings":
        if self.timesync_retry_s > self.timesync_interval_s:
            raise ValueError("Time sync retry must not exceed the time sync interval.")
        return self


class EngineSettings(BaseSettings):
    """
    Settings of the binding, loaded from environment variables and defaults.
    """
    # Native library
    library_path: Optional[Path] = Field(
        None, description="Explicit path to the tobii_stream_engine shared library."
    )
    device_generations: int = Field(
        int(DeviceGeneration.ALL), description="Generation flags used when enumerating devices."
    )
    forward_native_log: bool = Field(
        True, description="Forward native log lines to the 'tobii_stream_engine.native' logger."
    )

    # Drive loop
    pump: PumpSettings = Field(default_factory=PumpSettings)

    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    __version__: str = __version__

    model_config = SettingsConfigDict(
        env_prefix="TOBII__",
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
    )
