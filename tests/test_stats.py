"""Tests for frame rate counting, stats snapshots and stats displays."""

import pygame
import pytest

from kinesim.logging import LogSink, register_sink
from kinesim.stats import (
    CaptionStatsDisplay,
    EngineStats,
    FrameRateCounter,
    LogStatsDisplay,
    RecordStatsDisplay,
    format_stats,
)


def snapshot(**overrides):
    values = dict(virtual_runtime=2.5, real_runtime=1.25, fps=59.6,
                  ticks=150, bodies=3, running=True)
    values.update(overrides)
    return EngineStats(**values)


class TestFrameRateCounter:
    """Tests for the rolling FPS average."""

    def test_first_tick_has_no_rate(self):
        counter = FrameRateCounter()
        assert counter.tick(10.0) == 0.0
        assert counter.fps == 0.0

    def test_steady_rate(self):
        counter = FrameRateCounter(window_size=4)
        for i in range(10):
            counter.tick(i * 0.25)
        assert counter.fps == pytest.approx(4.0)

    def test_window_forgets_old_frames(self):
        """Only the last window_size deltas count."""
        counter = FrameRateCounter(window_size=2)
        counter.tick(0.0)
        counter.tick(1.0)   # 1 fps
        counter.tick(1.5)   # 2 fps
        counter.tick(2.0)   # 2 fps

        assert counter.fps == pytest.approx(2.0)

    def test_reset(self):
        counter = FrameRateCounter()
        counter.tick(0.0)
        counter.tick(0.1)

        counter.reset()

        assert counter.fps == 0.0
        assert counter.tick(5.0) == 0.0

    def test_zero_delta_does_not_divide_by_zero(self):
        counter = FrameRateCounter()
        counter.tick(1.0)
        counter.tick(1.0)
        assert counter.fps == 0.0


class TestEngineStats:
    def test_speed_ratio(self):
        assert snapshot().speed_ratio == pytest.approx(2.0)

    def test_speed_ratio_without_wall_time(self):
        assert snapshot(real_runtime=0.0).speed_ratio == 0.0

    def test_format(self):
        assert format_stats(snapshot()) == 'engine 2.50s | real 1.25s | 60 fps'

    def test_snapshot_is_frozen(self):
        with pytest.raises(AttributeError):
            snapshot().ticks = 5


class TestDisplays:
    """Tests for the bundled stats displays."""

    def test_log_display(self, capsys):
        LogStatsDisplay('bench').show(snapshot())
        assert capsys.readouterr().out == '[bench] INFO: engine 2.50s | real 1.25s | 60 fps\n'

    def test_record_display_emits_structured_record(self):
        records = []

        class ListSink(LogSink):
            def emit(self, module, record):
                records.append((module, record))

            def flush(self):
                pass

            def close(self):
                pass

        register_sink('stats', ListSink())

        RecordStatsDisplay().show(snapshot())

        module, record = records[0]
        assert module == 'stats'
        assert record['type'] == 'stats'
        assert record['ticks'] == 150
        assert record['virtual_runtime'] == 2.5

    def test_caption_display(self):
        pygame.display.init()
        try:
            pygame.display.set_mode((16, 16))
            display = CaptionStatsDisplay('sim')

            display.show(snapshot())
            assert pygame.display.get_caption()[0] == 'sim - engine 2.50s | real 1.25s | 60 fps'

            display.close()
            assert pygame.display.get_caption()[0] == 'sim'
        finally:
            pygame.display.quit()
