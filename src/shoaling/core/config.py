"""Configuration and settings for the shoaling visualizer."""

from pathlib import Path
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CanvasSettings(BaseSettings):
    """Drawing surface geometry.

    All values are in canvas units. The defaults describe the 600x300 surface
    the wave model is tuned for; use `scaled()` for other sizes.
    """

    model_config = SettingsConfigDict(env_prefix="CANVAS_")

    width: float = 600.0
    height: float = 300.0

    # Still-water line (y grows downward)
    sea_level: float = 200.0

    # Distance from the right edge to the shoreline
    shore_margin: float = 50.0

    # Horizontal extent of the slope region (slope 1 -> max, slope 10 -> min)
    max_run: float = 500.0
    min_run: float = 30.0

    # Visual depth range below sea level for 10m..80m of water
    min_depth_px: float = 30.0
    max_depth_px: float = 95.0

    @model_validator(mode="after")
    def check_geometry(self) -> Self:
        """Reject surfaces where the slope region cannot fit."""
        if self.min_run >= self.max_run:
            raise ValueError("min_run must be smaller than max_run")
        if self.min_depth_px >= self.max_depth_px:
            raise ValueError("min_depth_px must be smaller than max_depth_px")
        if self.sea_level >= self.height:
            raise ValueError("sea_level must lie inside the surface")
        return self

    @property
    def shore_x(self) -> float:
        return self.width - self.shore_margin

    def scaled(self, factor: float) -> "CanvasSettings":
        """Return a copy with every length multiplied by `factor`."""
        return self.model_copy(
            update={
                name: getattr(self, name) * factor
                for name in (
                    "width",
                    "height",
                    "sea_level",
                    "shore_margin",
                    "max_run",
                    "min_run",
                    "min_depth_px",
                    "max_depth_px",
                )
            }
        )


class AnimationSettings(BaseSettings):
    """Animation loop configuration."""

    model_config = SettingsConfigDict(env_prefix="ANIM_")

    # Real-world duration of one wave packet (seconds)
    packet_duration_s: float = 5.0

    # Redraw interval of the sea surface and packet (seconds)
    frame_interval_s: float = 1.0 / 60.0

    # Horizontal sampling step of the sea surface (canvas units)
    surface_step: float = 8.0


class AssessmentSettings(BaseSettings):
    """External hazard assessment service configuration."""

    model_config = SettingsConfigDict(env_prefix="GEMINI_")

    api_key: str = ""
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    text_model: str = "gemini-2.5-flash"
    timeout_s: float = 60.0


class HistorySettings(BaseSettings):
    """Simulation history persistence."""

    model_config = SettingsConfigDict(env_prefix="HISTORY_")

    path: Path = Path("~/.cache/shoaling/history.json").expanduser()

    # Oldest records are dropped beyond this count
    max_records: int = 50


class Settings(BaseSettings):
    """Master configuration aggregating all subsystems."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    canvas: CanvasSettings = Field(default_factory=CanvasSettings)
    animation: AnimationSettings = Field(default_factory=AnimationSettings)
    assessment: AssessmentSettings = Field(default_factory=AssessmentSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)

    # Debug mode
    debug: bool = False


def get_settings() -> Settings:
    """Load settings from environment and .env file."""
    return Settings()
