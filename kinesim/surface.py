"""
Drawing surfaces.

The engine and sprites only need a handful of operations: fill a
rectangle, clear a rectangle, and know the surface size. PygameSurface
wraps a pygame.Surface (a window or an off-screen buffer);
RecordingSurface keeps a log of draw commands for tests and embedding.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import pygame

from kinesim.palette import WHITE, ColorLike, resolve_color
from kinesim.primitives import Color


class DrawingSurface(ABC):
    """Abstract 2D drawing surface measured in pixels."""

    @property
    @abstractmethod
    def width(self) -> int:
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def fill_rect(self, x: int, y: int, w: int, h: int, color: ColorLike) -> None:
        """Fill a rectangle; translucent colors blend over what is there."""

    @abstractmethod
    def clear_rect(self, x: int, y: int, w: int, h: int) -> None:
        """Reset a rectangle to the background."""

    def clear(self) -> None:
        """Reset the whole surface to the background."""
        self.clear_rect(0, 0, self.width, self.height)


class PygameSurface(DrawingSurface):
    """DrawingSurface backed by a pygame.Surface.

    Args:
        surface: Target surface (the display surface or an off-screen one)
        background: Color used by clear_rect()
    """

    def __init__(self, surface: pygame.Surface, background: ColorLike = WHITE):
        self._surface = surface
        self.background = resolve_color(background)

    @classmethod
    def headless(cls, width: int, height: int,
                 background: ColorLike = WHITE) -> 'PygameSurface':
        """Create an off-screen surface, cleared to the background."""
        drawing = cls(pygame.Surface((width, height)), background)
        drawing.clear()
        return drawing

    @property
    def surface(self) -> pygame.Surface:
        return self._surface

    @property
    def width(self) -> int:
        return self._surface.get_width()

    @property
    def height(self) -> int:
        return self._surface.get_height()

    def fill_rect(self, x: int, y: int, w: int, h: int, color: ColorLike) -> None:
        if w <= 0 or h <= 0:
            return
        color = resolve_color(color)

        if color.is_translucent:
            # pygame's fill ignores alpha, so blend through a temp surface
            temp_surface = pygame.Surface((w, h), pygame.SRCALPHA)
            temp_surface.fill(color.as_tuple)
            self._surface.blit(temp_surface, (x, y))
        else:
            self._surface.fill(color.as_rgb_tuple, pygame.Rect(x, y, w, h))

    def clear_rect(self, x: int, y: int, w: int, h: int) -> None:
        if w <= 0 or h <= 0:
            return
        self._surface.fill(self.background.as_rgb_tuple, pygame.Rect(x, y, w, h))

    def color_at(self, x: int, y: int) -> Color:
        """Read back a pixel."""
        c = self._surface.get_at((x, y))
        return Color(r=c.r, g=c.g, b=c.b)


@dataclass(frozen=True)
class DrawCommand:
    """One recorded drawing operation."""
    op: str  # 'fill' or 'clear'
    x: int
    y: int
    w: int
    h: int
    color: Optional[Color] = None


class RecordingSurface(DrawingSurface):
    """Headless surface that records every draw command in order."""

    def __init__(self, width: int = 800, height: int = 600):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self.commands: List[DrawCommand] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def fill_rect(self, x: int, y: int, w: int, h: int, color: ColorLike) -> None:
        self.commands.append(DrawCommand('fill', x, y, w, h, resolve_color(color)))

    def clear_rect(self, x: int, y: int, w: int, h: int) -> None:
        self.commands.append(DrawCommand('clear', x, y, w, h))

    def fills(self) -> List[DrawCommand]:
        return [c for c in self.commands if c.op == 'fill']

    def reset(self) -> None:
        self.commands.clear()
