"""
Configuration loader for the alpha-mask service.

Environment variables are centralized here to keep the rest of the code
focused on mask processing and to make operational tuning clear.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BACKENDS = {"none", "static", "torchscript", "http"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Segmentation backend selection
    segmentation_backend: str = Field("none")
    segmentation_model_path: Optional[Path] = Field(None)
    segmentation_max_long_edge: int = Field(1024)
    segmentation_threshold: float = Field(0.5)
    segmentation_min_area_fraction: float = Field(0.001)

    # Remote segmentation endpoint
    segmentation_service_url: Optional[str] = Field(None)
    request_timeout_seconds: int = Field(30)

    # API
    max_image_bytes: int = Field(40 * 1024 * 1024)
    log_level: str = Field("INFO")

    # Debugging
    debug: bool = Field(False)
    debug_output_dir: Path = Field(Path("/tmp/maskcut_debug"))

    @field_validator("segmentation_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in BACKENDS:
            raise ValueError("SEGMENTATION_BACKEND must be one of none|static|torchscript|http")
        return v

    @field_validator("segmentation_threshold", "segmentation_min_area_fraction")
    @classmethod
    def validate_unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("value must be within [0, 1]")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings to avoid reparsing env on every call."""
    return Settings()
