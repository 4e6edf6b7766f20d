"""Configuration for detectors and the environment facade"""
from pathlib import Path
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.constants import DEFAULT_CACHE_TIMEOUT, DEFAULT_COMMAND_TIMEOUT, MODE_ENV_VAR


class DetectorOptions(BaseModel):
    """Per-detector options: caching and sync/async mode"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    cache: bool = Field(default=True, description="Cache detection results")
    cache_timeout: int = Field(default=DEFAULT_CACHE_TIMEOUT, ge=0, description="Cache lifetime in milliseconds")
    async_mode: bool = Field(default=False, alias="async", description="detect() returns a coroutine")


class DetectorSettings(BaseSettings):
    """Environment-driven settings, read from ENV_DETECTOR_* variables"""

    model_config = SettingsConfigDict(env_prefix="ENV_DETECTOR_", case_sensitive=False)

    # Detection
    cache_enabled: bool = Field(default=True, description="Enable the detection cache")
    cache_timeout: int = Field(default=DEFAULT_CACHE_TIMEOUT, ge=0, description="Cache lifetime in milliseconds")
    async_mode: bool = Field(default=False, description="Run detectors in async mode")
    command_timeout: float = Field(default=DEFAULT_COMMAND_TIMEOUT, gt=0, description="Timeout for privilege probe commands in seconds")
    mode_variable: str = Field(default=MODE_ENV_VAR, min_length=1, description="Variable holding the environment mode")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="WARNING", description="Log level")
    log_format: Literal["console", "json"] = Field(default="console", description="Log renderer")
    log_file: Optional[Path] = Field(default=None, description="Optional log file")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("log_file")
    @classmethod
    def ensure_log_directory(cls, v):
        """Ensure the parent directory exists for the log file"""
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    def to_detector_options(self) -> DetectorOptions:
        """Build detector options from these settings"""
        return DetectorOptions(
            cache=self.cache_enabled,
            cache_timeout=self.cache_timeout,
            async_mode=self.async_mode,
        )
