"""
SimBody - a simulated object with its own update rate.

A body has:
- A position in simulation units (meters, y pointing up)
- An update interval that is independent of the engine's tick
- An accumulator of elapsed time not yet handed to its behavior
- A pluggable behavior ``(dt_seconds) -> None`` that moves it
- Optional move hooks, used by sprites to erase and repaint

The engine calls compute_if_ready() once per tick with the global tick
size; the body decides how many times its behavior actually runs.
"""

import itertools
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from kinesim.config import CatchUpPolicy
from kinesim.logging import get_logger

if TYPE_CHECKING:
    from kinesim.sprite import SquareSprite

log = get_logger('body')

Behavior = Callable[[float], None]
MoveHook = Callable[[], None]

_ids = itertools.count(1)


class SimBody:
    """A simulated body driven by a behavior function.

    Usage:
        body = SimBody(x=10, y=20, interval_ms=10)

        def fall(dt):
            body.y = body.y - 9.81 * dt

        body.set_behavior(fall)
        body.compute_if_ready(25)   # fires twice, keeps 5ms for later
    """

    def __init__(
        self,
        x: float = 0.0,
        y: float = 0.0,
        interval_ms: float = 0.0,
        behavior: Optional[Behavior] = None,
        name: Optional[str] = None,
        policy: CatchUpPolicy = CatchUpPolicy.FIXED_STEP,
        max_steps: Optional[int] = None,
    ):
        if interval_ms < 0:
            raise ValueError(f"interval_ms must be >= 0, got {interval_ms}")
        if max_steps is not None and max_steps < 1:
            raise ValueError(f"max_steps must be >= 1, got {max_steps}")

        self.name = name or f"body-{next(_ids)}"
        self.policy = CatchUpPolicy(policy)
        self.max_steps = max_steps

        self._x = float(x)
        self._y = float(y)
        self._interval_ms = float(interval_ms)
        self._behavior = behavior

        # Time handed to compute_if_ready() but not yet consumed
        self.accumulated_ms = 0.0
        # Time consumed by successful behavior calls
        self.consumed_ms = 0.0
        self.update_count = 0
        self.fault_count = 0

        # Optional hooks around every position change
        self.before_move: Optional[MoveHook] = None
        self.after_move: Optional[MoveHook] = None

        self.sprite: Optional['SquareSprite'] = None

        self._warned_missing = False
        self._warned_backlog = False

    def __repr__(self) -> str:
        return (f"SimBody({self.name!r}, x={self._x:.3f}, y={self._y:.3f}, "
                f"interval_ms={self._interval_ms})")

    # -------------------------------------------------------------------------
    # Behavior
    # -------------------------------------------------------------------------

    @property
    def interval_ms(self) -> float:
        """Minimum time between two behavior calls (fixed at construction)."""
        return self._interval_ms

    @property
    def behavior(self) -> Behavior:
        """The active behavior, or a no-op that warns once if none was set."""
        if self._behavior is None:
            return self._missing_behavior
        return self._behavior

    @property
    def has_behavior(self) -> bool:
        return self._behavior is not None

    def set_behavior(self, behavior: Optional[Behavior]) -> None:
        """Replace the behavior. None reverts to the warning no-op."""
        self._behavior = behavior

    def _missing_behavior(self, dt: float) -> None:
        if not self._warned_missing:
            self._warned_missing = True
            log.warning("Body %s has no behavior; it will not move", self.name)

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    def compute_if_ready(self, elapsed_ms: float,
                         max_steps: Optional[int] = None) -> int:
        """
        Accumulate one engine tick and run the behavior if it is due.

        The behavior fires only once accumulated time exceeds the interval.
        FIXED_STEP runs it in interval-sized steps and keeps the remainder;
        SINGLE runs it once with everything accumulated. A zero interval
        fires once per tick with the whole tick.

        Args:
            elapsed_ms: Size of the engine tick in milliseconds
            max_steps: Step cap used when the body has none of its own

        Returns:
            Number of behavior calls made during this tick

        Raises:
            ValueError: If elapsed_ms is negative
        """
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must be >= 0, got {elapsed_ms}")

        self.accumulated_ms += elapsed_ms
        if not self.accumulated_ms > self._interval_ms:
            return 0

        if self.policy is CatchUpPolicy.SINGLE or self._interval_ms <= 0:
            dt_ms = self.accumulated_ms
            self.accumulated_ms = 0.0
            self._fire(dt_ms)
            return 1

        cap = self.max_steps if self.max_steps is not None else max_steps
        steps = 0
        while self.accumulated_ms > self._interval_ms:
            if cap is not None and steps >= cap:
                self._drop_backlog(cap)
                break
            self.accumulated_ms -= self._interval_ms
            steps += 1
            if not self._fire(self._interval_ms):
                # A failed step drops the backlog instead of retrying it
                self.accumulated_ms = 0.0
                break
        return steps

    def _drop_backlog(self, cap: int) -> None:
        if not self._warned_backlog:
            self._warned_backlog = True
            log.warning(
                "Body %s fell behind by %.3fms (more than %d steps per tick); "
                "dropping backlog",
                self.name, self.accumulated_ms, cap,
            )
        self.accumulated_ms = 0.0

    def _fire(self, dt_ms: float) -> bool:
        return self.step(dt_ms / 1000.0)

    def step(self, dt: float) -> bool:
        """
        Run the behavior once, isolating any failure to this body.

        Args:
            dt: Elapsed simulation time in seconds

        Returns:
            True if the behavior completed, False if it raised
        """
        try:
            self.behavior(dt)
        except Exception:
            self.fault_count += 1
            log.exception("Behavior of body %s failed (dt=%.6fs)", self.name, dt)
            return False
        self.update_count += 1
        self.consumed_ms += dt * 1000.0
        return True

    # -------------------------------------------------------------------------
    # Position
    # -------------------------------------------------------------------------

    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float) -> None:
        self.set_x(value)

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value: float) -> None:
        self.set_y(value)

    @property
    def position(self) -> Tuple[float, float]:
        return (self._x, self._y)

    def set_position(self, x: float, y: float) -> None:
        self._move(x, y)

    def set_x(self, x: float) -> None:
        self._move(x, self._y)

    def set_y(self, y: float) -> None:
        self._move(self._x, y)

    def _move(self, x: float, y: float) -> None:
        # before_move sees the old position, after_move the new one
        if self.before_move is not None:
            self.before_move()
        self._x = float(x)
        self._y = float(y)
        if self.after_move is not None:
            self.after_move()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def attach(self, sprite: 'SquareSprite') -> 'SquareSprite':
        """
        Attach render attributes to this body.

        Sprites that paint on move install themselves as the move hooks,
        so every position change erases the old frame and paints the new one.

        Returns:
            The attached sprite
        """
        if sprite.body is not None and sprite.body is not self:
            raise ValueError(f"Sprite is already attached to {sprite.body.name}")

        if self.sprite is not None and self.sprite is not sprite:
            self.detach()

        self.sprite = sprite
        sprite.body = self
        if sprite.paint_on_move:
            self.before_move = sprite.erase
            self.after_move = sprite.paint
        return sprite

    def detach(self) -> Optional['SquareSprite']:
        """
        Remove the attached sprite and the move hooks it installed.

        Hooks set by anything else are left in place. Nothing is erased.

        Returns:
            The detached sprite, or None if there was none
        """
        sprite = self.sprite
        if sprite is None:
            return None

        if self.before_move == sprite.erase:
            self.before_move = None
        if self.after_move == sprite.paint:
            self.after_move = None
        sprite.body = None
        self.sprite = None
        return sprite
