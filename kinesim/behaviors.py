"""
Kinematics behaviors.

Each behavior factory takes a body plus physics parameters and returns a
closure ``(dt_seconds) -> None`` that integrates the body's motion with
explicit Euler steps:

    v(t + dt) = v(t) + a * dt
    s(t + dt) = s(t) + v(t + dt) * dt

Velocity state lives in the closure. When the body has a sprite, velocities
are reflected at the surface edges using the sprite's bounce factors.

Factories are registered by name so scenario files can refer to them:

    >>> BehaviorRegistry.create('free_fall', body, a=-1.625)
"""

from typing import TYPE_CHECKING, Callable, Dict, List

from kinesim.errors import UnknownBehaviorError

if TYPE_CHECKING:
    from kinesim.body import Behavior, SimBody

BehaviorFactory = Callable[..., 'Behavior']

EARTH_GRAVITY = -9.81
MOON_GRAVITY = -1.625


class BehaviorRegistry:
    """Central registry of behavior factories, keyed by name."""

    _factories: Dict[str, BehaviorFactory] = {}

    @classmethod
    def register(cls, name: str, factory: BehaviorFactory) -> None:
        """Register a factory. An existing name is overwritten."""
        cls._factories[name] = factory

    @classmethod
    def get(cls, name: str) -> BehaviorFactory:
        """
        Retrieve a behavior factory by name.

        Raises:
            UnknownBehaviorError: If no factory with the given name is registered
        """
        if name not in cls._factories:
            available = ", ".join(cls.list_behaviors())
            raise UnknownBehaviorError(
                f"Unknown behavior: '{name}'. "
                f"Available behaviors: {available if available else 'none'}"
            )
        return cls._factories[name]

    @classmethod
    def create(cls, name: str, body: 'SimBody', **params: float) -> 'Behavior':
        """Build a behavior for `body` and install it."""
        behavior = cls.get(name)(body, **params)
        body.set_behavior(behavior)
        return behavior

    @classmethod
    def list_behaviors(cls) -> List[str]:
        return sorted(cls._factories.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._factories

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._factories.pop(name, None)


def behavior(name: str) -> Callable[[BehaviorFactory], BehaviorFactory]:
    """Decorator registering a behavior factory under `name`."""
    def decorator(factory: BehaviorFactory) -> BehaviorFactory:
        BehaviorRegistry.register(name, factory)
        return factory
    return decorator


def bounce_x(body: 'SimBody', vx: float) -> float:
    """Reflect a horizontal velocity at the left/right edges."""
    if body.sprite is None:
        return vx
    return vx * body.sprite.vertical_edge_bounce_factor(vx)


def bounce_y(body: 'SimBody', vy: float) -> float:
    """Reflect a vertical velocity at the bottom/top edges."""
    if body.sprite is None:
        return vy
    return vy * body.sprite.horizontal_edge_bounce_factor(vy)


@behavior('constant_velocity')
def constant_velocity(body: 'SimBody', vx: float = 40.0) -> 'Behavior':
    """Uniform motion along x."""
    def update(dt: float) -> None:
        nonlocal vx
        vx = bounce_x(body, vx)
        body.set_x(body.x + vx * dt)
    return update


@behavior('free_fall')
def free_fall(body: 'SimBody', a: float = EARTH_GRAVITY, vy: float = 0.0) -> 'Behavior':
    """Falling from rest under constant acceleration."""
    def update(dt: float) -> None:
        nonlocal vy
        vy = bounce_y(body, vy + a * dt)
        body.set_y(body.y + vy * dt)
    return update


@behavior('vertical_throw')
def vertical_throw(body: 'SimBody', a_y: float = MOON_GRAVITY,
                   v_y: float = 10.0) -> 'Behavior':
    """Straight upward throw (default: on the moon)."""
    def update(dt: float) -> None:
        nonlocal v_y
        v_y = bounce_y(body, v_y + a_y * dt)
        body.set_y(body.y + v_y * dt)
    return update


@behavior('oblique_throw')
def oblique_throw(body: 'SimBody', a_y: float = EARTH_GRAVITY, v_x: float = 20.0,
                  v_y: float = 0.0) -> 'Behavior':
    """Horizontal launch: constant v_x, accelerated v_y."""
    def update(dt: float) -> None:
        nonlocal v_x, v_y
        v_y = bounce_y(body, v_y + a_y * dt)
        v_x = bounce_x(body, v_x)
        body.set_position(body.x + v_x * dt, body.y + v_y * dt)
    return update


@behavior('accelerated_throw')
def accelerated_throw(body: 'SimBody', a_x: float = 0.2, a_y: float = EARTH_GRAVITY,
                      v_x: float = 0.0, v_y: float = 30.0) -> 'Behavior':
    """Upward throw with a steady sideways acceleration."""
    def update(dt: float) -> None:
        nonlocal v_x, v_y
        v_x = bounce_x(body, v_x + a_x * dt)
        v_y = bounce_y(body, v_y + a_y * dt)
        body.set_position(body.x + v_x * dt, body.y + v_y * dt)
    return update
