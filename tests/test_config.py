"""Tests for EngineConfig."""

import pytest
from pydantic import ValidationError

from kinesim.config import CatchUpPolicy, EngineConfig
from kinesim.palette import TRAIL_WASH, WHITE
from kinesim.primitives import Color


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()

        assert config.pixels_per_meter == 10
        assert config.default_catch_up is CatchUpPolicy.FIXED_STEP
        assert config.display_refresh_ms == 250
        assert config.max_catch_up_steps is None
        assert config.background == WHITE
        assert config.trail_wash == TRAIL_WASH

    def test_frame_interval(self):
        assert EngineConfig(target_fps=8).frame_interval_ms == 125.0

    @pytest.mark.parametrize('value', ['red', '#ff0000', (255, 0, 0), {'r': 255, 'g': 0, 'b': 0}])
    def test_color_forms(self, value):
        assert EngineConfig(background=value).background == Color(r=255, g=0, b=0)

    def test_unknown_color_rejected(self):
        with pytest.raises(ValidationError):
            EngineConfig(background='sparkly')

    @pytest.mark.parametrize('field, value', [
        ('pixels_per_meter', 0),
        ('display_refresh_ms', -1),
        ('fps_window', 0),
        ('target_fps', 0),
        ('max_catch_up_steps', 0),
    ])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            EngineConfig(**{field: value})

    def test_policy_from_string(self):
        assert EngineConfig(default_catch_up='single').default_catch_up is CatchUpPolicy.SINGLE

    def test_frozen(self):
        config = EngineConfig()
        with pytest.raises(ValidationError):
            config.pixels_per_meter = 20
