"""
Engine - owns the bodies and the clock, and drives the tick loop.

Each tick:
1. Hand the tick size to every body (insertion order); bodies decide
   whether their behavior runs and paint themselves as they move
2. Advance virtual time by the tick size
3. Repaint sprites that do not paint on move
4. Refresh stats displays and notify tick listeners
5. Sleep for whatever is left of the tick's wall-time budget

Fixed-tick mode (``run(tick=...)``) uses one caller-supplied tick size for
both simulation and pacing. Measured mode (``run(tick=None)``) feeds the
wall time since the previous tick into the simulation and paces frames
to ``target_fps``.

Everything runs on the caller's thread. ``stop()`` only sets a flag; the
current tick always completes.
"""

import time
from typing import Callable, Iterable, List, Optional, Tuple

from kinesim.body import SimBody
from kinesim.config import EngineConfig
from kinesim.logging import get_logger
from kinesim.stats import EngineStats, FrameRateCounter, StatsDisplay
from kinesim.surface import DrawingSurface

log = get_logger('engine')

TickListener = Callable[['Engine'], None]


class Engine:
    """
    Fixed/measured timestep scheduler for SimBodies.

    Usage:
        surface = PygameSurface.headless(800, 600)
        engine = Engine(surface, [body_a, body_b])
        engine.run(duration=5, tick=0.001)

    Args:
        surface: Shared drawing surface, bound to every registered sprite
        bodies: Initial bodies, registered in order
        config: Engine settings
        clock: Wall clock in seconds (default: time.perf_counter)
        sleep: Sleep function in seconds (default: time.sleep)
    """

    def __init__(
        self,
        surface: DrawingSurface,
        bodies: Iterable[SimBody] = (),
        config: Optional[EngineConfig] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.surface = surface
        self.config = config or EngineConfig()
        self._clock = clock or time.perf_counter
        self._sleep = sleep or time.sleep

        self._bodies: List[SimBody] = []
        self._displays: List[StatsDisplay] = []
        self._tick_listeners: List[TickListener] = []

        # Run session state
        self.running = False
        self.virtual_runtime_ms = 0.0
        self.real_runtime_start: Optional[float] = None
        self._real_runtime_end: Optional[float] = None
        self.tick_count = 0

        self._fps = FrameRateCounter(self.config.fps_window)
        self._last_refresh = 0.0
        self._shortfall_streak = 0
        self._pace_warned = False

        for body in bodies:
            self.register(body)

    # -------------------------------------------------------------------------
    # Bodies
    # -------------------------------------------------------------------------

    @property
    def bodies(self) -> Tuple[SimBody, ...]:
        """Registered bodies in update order."""
        return tuple(self._bodies)

    def register(self, body: SimBody) -> SimBody:
        """
        Add a body and let it show its initial state.

        The body's sprite (if any) is bound to the engine's surface, then the
        behavior runs once with a zero-length step so the body paints itself
        before the next tick.

        Raises:
            ValueError: If the body is already registered
        """
        if body in self._bodies:
            raise ValueError(f"Body {body.name} is already registered")

        self._bodies.append(body)

        sprite = body.sprite
        if sprite is not None:
            sprite.bind(self.surface, self.config.pixels_per_meter, self.config.trail_wash)

        body.step(0.0)
        if sprite is not None and sprite.last_painted_bounds is None:
            sprite.paint()

        log.debug("Registered %s (interval %.4fms, %s)",
                  body.name, body.interval_ms, body.policy.value)
        return body

    def unregister(self, body: SimBody) -> None:
        """Remove a body; it stops updating from the next tick on."""
        self._bodies.remove(body)

    # -------------------------------------------------------------------------
    # Displays and listeners
    # -------------------------------------------------------------------------

    def add_display(self, display: StatsDisplay) -> None:
        self._displays.append(display)

    def add_tick_listener(self, listener: TickListener) -> None:
        """Call `listener(engine)` after every completed tick."""
        self._tick_listeners.append(listener)

    # -------------------------------------------------------------------------
    # Run loop
    # -------------------------------------------------------------------------

    def run(self, duration: Optional[float] = None,
            tick: Optional[float] = None) -> EngineStats:
        """
        Run the simulation until stopped or `duration` is exceeded.

        The tick that pushes virtual time past the duration is still
        simulated, then the loop ends before rendering and pacing it; only
        completed ticks count towards tick_count. run(1, 0.1) completes ten
        ticks and leaves virtual_runtime_ms at 1100.

        Args:
            duration: Simulated seconds to run (None = until stop())
            tick: Fixed tick size in seconds (None = measured mode)

        Returns:
            Stats snapshot at the end of the run

        Raises:
            RuntimeError: If the engine is already running
            ValueError: If duration or tick is not positive
        """
        if self.running:
            raise RuntimeError("Engine is already running")
        if tick is not None and tick <= 0:
            raise ValueError(f"tick must be > 0, got {tick}")
        if duration is not None and duration <= 0:
            raise ValueError(f"duration must be > 0, got {duration}")

        tick_ms = None if tick is None else tick * 1000.0
        duration_ms = None if duration is None else duration * 1000.0

        self._begin_session()
        log.info(
            "Run started: %d bodies, %s, duration %s",
            len(self._bodies),
            f"fixed tick {tick_ms:.3f}ms" if tick_ms is not None else "measured tick",
            f"{duration:.3f}s" if duration is not None else "unbounded",
        )

        previous = self.real_runtime_start
        try:
            while self.running:
                start = self._clock()
                if tick_ms is None:
                    step_ms = self._measured_tick_ms(start - previous)
                else:
                    step_ms = tick_ms
                previous = start

                cap = self.config.max_catch_up_steps
                for body in list(self._bodies):
                    body.compute_if_ready(step_ms, cap)
                self.virtual_runtime_ms += step_ms

                if duration_ms is not None and self.virtual_runtime_ms > duration_ms:
                    break

                self.render()
                self.tick_count += 1

                now = self._clock()
                self._fps.tick(now)
                self._refresh_displays(now)
                self._notify_listeners()

                budget_ms = tick_ms if tick_ms is not None else self.config.frame_interval_ms
                self._pace(start, budget_ms)
        finally:
            self._end_session()

        stats = self.stats()
        log.info("Run finished: %d ticks, virtual %.3fs, real %.3fs",
                 stats.ticks, stats.virtual_runtime, stats.real_runtime)
        return stats

    def stop(self) -> None:
        """Ask the loop to exit after the current tick. Safe to call anytime."""
        if self.running:
            log.debug("Stop requested at virtual %.3fms", self.virtual_runtime_ms)
        self.running = False

    def render(self) -> None:
        """Repaint sprites that are not repainted by their own moves."""
        for body in self._bodies:
            sprite = body.sprite
            if sprite is not None and not sprite.paint_on_move:
                sprite.redraw()

    def _begin_session(self) -> None:
        self.real_runtime_start = self._clock()
        self._real_runtime_end = None
        self.virtual_runtime_ms = 0.0
        self.tick_count = 0
        self._fps.reset()
        self._last_refresh = self.real_runtime_start
        self._shortfall_streak = 0
        self._pace_warned = False
        self.running = True

    def _end_session(self) -> None:
        self.running = False
        self._real_runtime_end = self._clock()
        # Final refresh so displays show where the run ended
        self._refresh_displays(self._real_runtime_end, force=True)
        for display in self._displays:
            try:
                display.close()
            except Exception:
                log.exception("Stats display %s failed to close", type(display).__name__)

    def _measured_tick_ms(self, wall_delta: float) -> float:
        # Clamped so a stall (debugger, window drag) does not become one giant step
        return min(max(wall_delta * 1000.0, 0.0), self.config.max_measured_tick_ms)

    def _pace(self, start: float, budget_ms: float) -> None:
        elapsed_ms = (self._clock() - start) * 1000.0
        remaining_ms = budget_ms - elapsed_ms
        if remaining_ms > 0:
            self._shortfall_streak = 0
            self._sleep(remaining_ms / 1000.0)
            return

        self._shortfall_streak += 1
        if (not self._pace_warned
                and self._shortfall_streak >= self.config.shortfall_warning_ticks):
            self._pace_warned = True
            log.warning(
                "Ticks are taking longer than %.3fms (last %.3fms); "
                "simulation runs slower than real time",
                budget_ms, elapsed_ms,
            )

    def _refresh_displays(self, now: float, force: bool = False) -> None:
        if not self._displays:
            return
        if not force and (now - self._last_refresh) * 1000.0 < self.config.display_refresh_ms:
            return

        self._last_refresh = now
        stats = self.stats()
        for display in self._displays:
            try:
                display.show(stats)
            except Exception:
                log.exception("Stats display %s failed", type(display).__name__)

    def _notify_listeners(self) -> None:
        for listener in list(self._tick_listeners):
            try:
                listener(self)
            except Exception:
                log.exception("Tick listener %r failed", listener)

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------

    @property
    def virtual_runtime(self) -> float:
        """Simulated seconds in the current (or last) run."""
        return self.virtual_runtime_ms / 1000.0

    @property
    def real_runtime(self) -> float:
        """Wall seconds in the current (or last) run."""
        if self.real_runtime_start is None:
            return 0.0
        end = self._real_runtime_end if self._real_runtime_end is not None else self._clock()
        return end - self.real_runtime_start

    @property
    def fps(self) -> float:
        return self._fps.fps

    def stats(self) -> EngineStats:
        return EngineStats(
            virtual_runtime=self.virtual_runtime,
            real_runtime=self.real_runtime,
            fps=self.fps,
            ticks=self.tick_count,
            bodies=len(self._bodies),
            running=self.running,
        )
