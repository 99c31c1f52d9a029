"""
Engine statistics and stats displays.

Displays are cosmetic: the engine pushes an EngineStats snapshot to each
display every few hundred milliseconds of wall time, independent of the
simulation tick.
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import asdict, dataclass
from typing import Optional

import pygame

from kinesim.logging import emit_record, get_logger


class FrameRateCounter:
    """Rolling average frames-per-second over the last N frames."""

    def __init__(self, window_size: int = 30):
        self._deltas: deque = deque(maxlen=window_size)
        self._last: Optional[float] = None
        self.fps = 0.0

    def reset(self) -> None:
        self._deltas.clear()
        self._last = None
        self.fps = 0.0

    def tick(self, now: float) -> float:
        """Record a frame at wall time `now` (seconds); return its delta."""
        if self._last is None:
            self._last = now
            return 0.0

        dt = now - self._last
        self._last = now
        self._deltas.append(dt)
        avg = sum(self._deltas) / len(self._deltas)
        self.fps = 1.0 / avg if avg > 0 else 0.0
        return dt


@dataclass(frozen=True)
class EngineStats:
    """Read-only snapshot of an engine run."""
    virtual_runtime: float  # seconds of simulated time
    real_runtime: float     # seconds of wall time
    fps: float
    ticks: int
    bodies: int
    running: bool

    @property
    def speed_ratio(self) -> float:
        """Simulated seconds per wall second (1.0 = real time)."""
        if self.real_runtime <= 0:
            return 0.0
        return self.virtual_runtime / self.real_runtime


def format_stats(stats: EngineStats) -> str:
    return (f"engine {stats.virtual_runtime:.2f}s | real {stats.real_runtime:.2f}s"
            f" | {stats.fps:.0f} fps")


class StatsDisplay(ABC):
    """Receives periodic stats snapshots from the engine."""

    @abstractmethod
    def show(self, stats: EngineStats) -> None:
        pass

    def close(self) -> None:
        """Called once when a run ends."""
        pass


class LogStatsDisplay(StatsDisplay):
    """Writes stats lines to a kinesim logger."""

    def __init__(self, module: str = 'stats'):
        self._log = get_logger(module)

    def show(self, stats: EngineStats) -> None:
        self._log.info(format_stats(stats))


class CaptionStatsDisplay(StatsDisplay):
    """Shows stats in the pygame window caption."""

    def __init__(self, title: str = 'kinesim'):
        self.title = title

    def show(self, stats: EngineStats) -> None:
        pygame.display.set_caption(f"{self.title} - {format_stats(stats)}")

    def close(self) -> None:
        pygame.display.set_caption(self.title)


class RecordStatsDisplay(StatsDisplay):
    """Emits stats as structured records (see kinesim.logging sinks)."""

    def __init__(self, module: str = 'stats'):
        self.module = module

    def show(self, stats: EngineStats) -> None:
        emit_record(self.module, {'type': 'stats', **asdict(stats)})
