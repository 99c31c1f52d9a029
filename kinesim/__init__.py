"""
Kinesim - a small kinematics simulation engine.

Bodies carry their own update interval and a pluggable behavior; the
engine ticks them at a global rate, lets each body catch up on the time
it accumulated, and paints them as colored squares on a drawing surface.
"""

from kinesim.body import SimBody
from kinesim.config import CatchUpPolicy, EngineConfig
from kinesim.engine import Engine
from kinesim.errors import KinesimError, ScenarioError, UnknownBehaviorError
from kinesim.sprite import SquareSprite
from kinesim.stats import EngineStats
from kinesim.surface import DrawingSurface, PygameSurface, RecordingSurface

__all__ = [
    'SimBody',
    'CatchUpPolicy',
    'EngineConfig',
    'Engine',
    'KinesimError',
    'ScenarioError',
    'UnknownBehaviorError',
    'SquareSprite',
    'EngineStats',
    'DrawingSurface',
    'PygameSurface',
    'RecordingSurface',
]
