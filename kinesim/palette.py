"""
Color handling for sprites and surfaces.

Sprites accept colors in whatever form is convenient (CSS-style names,
hex strings, RGB/RGBA tuples, or Color models); surfaces only ever see
resolved Color values.
"""

from typing import List, Tuple, Union

import pygame

from kinesim.primitives import Color

# Anything resolve_color() understands
ColorLike = Union[str, Tuple[int, ...], Color]

WHITE = Color(r=255, g=255, b=255)
BLACK = Color(r=0, g=0, b=0)

# 70% white over the previous frame, the classic fading trail
TRAIL_WASH = Color(r=255, g=255, b=255, a=178)

# Colors used by the demo line-up, in registration order
DEFAULT_PALETTE: List[str] = [
    'blue',
    'green',
    'red',
    'magenta',
    'purple',
    'orange',
    'brown',
    'cyan',
]


def resolve_color(value: ColorLike) -> Color:
    """
    Resolve a color-like value to a Color.

    Args:
        value: Color model, (r, g, b) / (r, g, b, a) tuple, or a string
            pygame understands ('purple', '#ff00ff', ...)

    Returns:
        Resolved Color

    Raises:
        ValueError: If the value cannot be interpreted as a color
    """
    if isinstance(value, Color):
        return value

    if isinstance(value, str):
        try:
            parsed = pygame.Color(value)
        except ValueError as e:
            raise ValueError(f"Unknown color: {value!r}") from e
        return Color(r=parsed.r, g=parsed.g, b=parsed.b, a=parsed.a)

    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        r, g, b = value[0], value[1], value[2]
        a = value[3] if len(value) == 4 else 255
        return Color(r=r, g=g, b=b, a=a)

    raise ValueError(f"Cannot interpret {value!r} as a color")


def palette_color(index: int) -> Color:
    """Get a demo palette color, cycling when index exceeds the palette."""
    return resolve_color(DEFAULT_PALETTE[index % len(DEFAULT_PALETTE)])
