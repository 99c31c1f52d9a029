"""
Kinematics demo launcher.

Usage:
    # Run the packaged demo in a window (ESC or close to quit)
    python -m kinesim

    # Pick a scenario and override its run settings
    python -m kinesim step_sizes --tick 0.002
    python -m kinesim path/to/scenario.yaml --duration 20

    # Headless: no window, stats go to the log
    python -m kinesim --headless --duration 5

    # Also write stats snapshots as JSONL records
    KINESIM_LOGGING_STATS_ENABLED=true KINESIM_LOG_DIR=/tmp/kinesim python -m kinesim --headless
"""

import argparse
import time
from pathlib import Path
from typing import List, Optional, Tuple

import pygame

from kinesim.engine import Engine
from kinesim.errors import ScenarioError
from kinesim.logging import (
    NullSink,
    close_all_sinks,
    configure_logging,
    create_sink,
    get_log_dir,
    get_logger,
    register_sink,
)
from kinesim.scenario import (
    SCENARIOS_DIR,
    build_engine,
    default_scenario_path,
    list_scenarios,
    load_scenario,
)
from kinesim.stats import (
    CaptionStatsDisplay,
    LogStatsDisplay,
    RecordStatsDisplay,
    format_stats,
)
from kinesim.surface import PygameSurface

log = get_logger('demo')

HEADLESS_DEFAULT_DURATION = 5.0
WINDOW_FPS = 60


def _parse_resolution(text: str) -> Tuple[int, int]:
    try:
        width, height = text.lower().split('x')
        size = (int(width), int(height))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid resolution {text!r}, expected WIDTHxHEIGHT (e.g. 1280x720)"
        )
    if size[0] <= 0 or size[1] <= 0:
        raise argparse.ArgumentTypeError(f"Resolution must be positive, got {text!r}")
    return size


def _resolve_scenario(name: Optional[str]) -> Path:
    """Accept a path or the name of a packaged scenario."""
    if name is None:
        return default_scenario_path()
    path = Path(name)
    if path.exists():
        return path
    packaged = SCENARIOS_DIR / f"{name}.yaml"
    if packaged.exists():
        return packaged
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='kinesim',
        description='Kinematics demo - colored squares moving under simple physics',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Packaged scenarios: {', '.join(list_scenarios())}",
    )
    parser.add_argument('scenario', nargs='?',
                        help='Scenario YAML path or packaged scenario name (default: demo)')
    parser.add_argument('--duration', '-d', type=float,
                        help='Simulated seconds to run (default: from scenario)')
    parser.add_argument('--tick', '-t', type=float,
                        help='Fixed tick size in seconds (default: from scenario)')
    parser.add_argument('--measured', action='store_true',
                        help='Use measured wall-clock ticks instead of a fixed tick')
    parser.add_argument('--resolution', '-r', type=_parse_resolution, default=(1280, 720),
                        help='Surface size as WIDTHxHEIGHT (default: 1280x720)')
    parser.add_argument('--headless', action='store_true',
                        help='Render off-screen and log stats instead of opening a window')
    parser.add_argument('--log-level', default='INFO',
                        choices=['TRACE', 'DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


class WindowPump:
    """Tick listener that keeps the pygame window alive.

    Flips the display at most WINDOW_FPS times per second and stops the
    engine on window close or ESC.
    """

    def __init__(self, fps: float = WINDOW_FPS):
        self._interval = 1.0 / fps
        self._last_flip = 0.0

    def __call__(self, engine: Engine) -> None:
        now = time.perf_counter()
        if now - self._last_flip < self._interval:
            return
        self._last_flip = now

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                engine.stop()
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                engine.stop()
        pygame.display.flip()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level)

    try:
        scenario = load_scenario(_resolve_scenario(args.scenario))
    except ScenarioError as e:
        log.error("%s", e)
        return 1

    duration = args.duration if args.duration is not None else scenario.run.duration
    tick = args.tick if args.tick is not None else scenario.run.tick
    if args.measured:
        tick = None
    if args.headless and duration is None:
        duration = HEADLESS_DEFAULT_DURATION
        log.info("Headless run without duration, using %.1fs", duration)

    width, height = args.resolution
    background = scenario.engine.background
    if args.headless:
        surface = PygameSurface.headless(width, height, background)
    else:
        pygame.init()
        screen = pygame.display.set_mode((width, height))
        surface = PygameSurface(screen, background)
        surface.clear()

    try:
        engine = build_engine(scenario, surface)
        if args.headless:
            engine.add_display(LogStatsDisplay())
        else:
            engine.add_display(CaptionStatsDisplay(f"kinesim - {scenario.name}"))
            engine.add_tick_listener(WindowPump())

        # KINESIM_LOGGING_STATS_ENABLED=true writes stats snapshots as JSONL
        session = f"{scenario.name}_{time.strftime('%Y%m%d_%H%M%S')}"
        stats_sink = create_sink('stats', session_name=session)
        if not isinstance(stats_sink, NullSink):
            register_sink('stats', stats_sink)
            engine.add_display(RecordStatsDisplay('stats'))
            log.info("Writing stats records to %s", get_log_dir())

        log.info("Scenario %s: %d bodies", scenario.name, len(engine.bodies))
        try:
            stats = engine.run(duration=duration, tick=tick)
        except KeyboardInterrupt:
            stats = engine.stats()
            log.info("Interrupted")
    except ScenarioError as e:
        log.error("%s", e)
        return 1
    finally:
        close_all_sinks()
        if not args.headless:
            pygame.quit()

    log.info("Done: %s (%.2fx real time)", format_stats(stats), stats.speed_ratio)
    return 0
