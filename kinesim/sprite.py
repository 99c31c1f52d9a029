"""
SquareSprite - render attributes for a SimBody.

A sprite draws its body as a filled square centered on the body's
position. Simulation space has its origin bottom-left with y pointing up;
surfaces have their origin top-left, so the vertical axis is flipped when
converting meters to pixels.
"""

from typing import TYPE_CHECKING, Optional

from kinesim.palette import TRAIL_WASH, ColorLike, resolve_color
from kinesim.primitives import Color, PixelRect

if TYPE_CHECKING:
    from kinesim.body import SimBody
    from kinesim.surface import DrawingSurface


class SquareSprite:
    """A colored square that follows its body around a drawing surface.

    The surface and scale are not known at construction; the engine binds
    them when the body is registered.

    Args:
        side_length: Side length in meters
        color: Fill color
        trail: Wash the previous frame instead of clearing it
        paint_on_move: Repaint on every position change. When False the
            engine repaints the sprite once per tick instead.
    """

    def __init__(
        self,
        side_length: float = 1.0,
        color: ColorLike = 'blue',
        trail: bool = True,
        paint_on_move: bool = True,
    ):
        if side_length < 0:
            raise ValueError(f"side_length must be >= 0, got {side_length}")

        self.side_length = float(side_length)
        self.color = resolve_color(color)
        self.trail = trail
        self.paint_on_move = paint_on_move

        self.body: Optional['SimBody'] = None
        self.surface: Optional['DrawingSurface'] = None
        self.scale = 10.0
        self.wash: Color = TRAIL_WASH

        # Exact area of the last paint(), erased before the next one
        self.last_painted_bounds: Optional[PixelRect] = None

    def bind(
        self,
        surface: 'DrawingSurface',
        scale: float = 10.0,
        wash: Optional[Color] = None,
    ) -> None:
        """Point the sprite at a drawing surface.

        Args:
            surface: Surface to paint on (shared, not owned)
            scale: Pixels per meter
            wash: Trail color, defaults to TRAIL_WASH
        """
        if scale <= 0:
            raise ValueError(f"scale must be > 0, got {scale}")
        self.surface = surface
        self.scale = float(scale)
        if wash is not None:
            self.wash = wash
        self.last_painted_bounds = None

    @property
    def is_bound(self) -> bool:
        return self.surface is not None and self.body is not None

    @property
    def side_px(self) -> float:
        return self.side_length * self.scale

    def bounds_at(self, x: float, y: float) -> PixelRect:
        """Pixel rectangle covered by the square centered at (x, y) meters."""
        half = self.side_px / 2
        size = int(round(self.side_px))
        left = int(round(x * self.scale - half))
        top = int(round(self.surface.height - y * self.scale - half))
        return PixelRect(x=left, y=top, width=size, height=size)

    def paint(self, color: Optional[ColorLike] = None) -> Optional[PixelRect]:
        """
        Draw the square at the body's current position.

        Args:
            color: One-off color override (the sprite's color is unchanged)

        Returns:
            The painted bounds, or None if the sprite is not bound
        """
        if not self.is_bound:
            return None

        bounds = self.bounds_at(self.body.x, self.body.y)
        fill = self.color if color is None else resolve_color(color)
        self.surface.fill_rect(bounds.x, bounds.y, bounds.width, bounds.height, fill)
        self.last_painted_bounds = bounds
        return bounds

    def erase(self) -> None:
        """Wash or clear exactly what the last paint() covered."""
        bounds = self.last_painted_bounds
        if self.surface is None or bounds is None:
            return

        if self.trail:
            self.surface.fill_rect(bounds.x, bounds.y, bounds.width, bounds.height, self.wash)
        else:
            self.surface.clear_rect(bounds.x, bounds.y, bounds.width, bounds.height)

    def redraw(self) -> Optional[PixelRect]:
        """Erase the previous frame and paint the current one."""
        self.erase()
        return self.paint()

    # -------------------------------------------------------------------------
    # Edge detection
    # -------------------------------------------------------------------------

    def vertical_edge_bounce_factor(self, vx: float) -> int:
        """
        Velocity multiplier for the left and right surface edges.

        Returns -1 when the square touches the left edge while moving left
        or the right edge while moving right, else +1. Uses the current
        position, so the bounce happens before the square leaves the surface.
        """
        if not self.is_bound:
            return 1

        center = self.body.x * self.scale
        half = self.side_px / 2
        if vx < 0 and center - half <= 0:
            return -1
        if vx > 0 and center + half >= self.surface.width:
            return -1
        return 1

    def horizontal_edge_bounce_factor(self, vy: float) -> int:
        """
        Velocity multiplier for the top and bottom surface edges.

        Returns -1 when the square touches the bottom while falling or the
        top while rising, else +1.
        """
        if not self.is_bound:
            return 1

        center = self.body.y * self.scale
        half = self.side_px / 2
        if vy < 0 and center - half <= 0:
            return -1
        if vy > 0 and center + half >= self.surface.height:
            return -1
        return 1
