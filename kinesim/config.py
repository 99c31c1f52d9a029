"""Engine configuration."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kinesim.palette import TRAIL_WASH, WHITE, ColorLike, resolve_color
from kinesim.primitives import Color


class CatchUpPolicy(str, Enum):
    """How a body spends time that piled up between its updates.

    FIXED_STEP replays the behavior in interval-sized steps and keeps the
    remainder; SINGLE hands the whole backlog to one call and resets.
    """
    FIXED_STEP = 'fixed_step'
    SINGLE = 'single'


class EngineConfig(BaseModel):
    """Immutable engine settings.

    Attributes:
        pixels_per_meter: Scale from simulation units to surface pixels
        default_catch_up: Policy given to bodies loaded from scenario files
        display_refresh_ms: Wall time between stats display refreshes
        fps_window: Number of frames averaged by the FPS counter
        shortfall_warning_ticks: Consecutive zero-sleep ticks before the
            pacing warning is logged
        max_measured_tick_ms: Upper bound for a measured (variable) tick
        target_fps: Frame pacing target in measured mode
        max_catch_up_steps: Cap on fixed steps per body per tick (None = no cap)
        background: Color used to clear the surface
        trail_wash: Color painted over the previous frame of trailing sprites
    """
    pixels_per_meter: float = Field(10.0, gt=0)
    default_catch_up: CatchUpPolicy = CatchUpPolicy.FIXED_STEP
    display_refresh_ms: float = Field(250.0, gt=0)
    fps_window: int = Field(30, ge=1)
    shortfall_warning_ticks: int = Field(50, ge=1)
    max_measured_tick_ms: float = Field(250.0, gt=0)
    target_fps: float = Field(60.0, gt=0)
    max_catch_up_steps: Optional[int] = Field(None, ge=1)
    background: Color = WHITE
    trail_wash: Color = TRAIL_WASH

    model_config = ConfigDict(frozen=True)

    @field_validator('background', 'trail_wash', mode='before')
    @classmethod
    def parse_color(cls, v: ColorLike) -> Color:
        """Accept names, hex strings and tuples wherever a color is expected."""
        if isinstance(v, dict):
            return Color(**v)
        return resolve_color(v)

    @property
    def frame_interval_ms(self) -> float:
        """Wall time budget for one measured-mode frame."""
        return 1000.0 / self.target_fps
