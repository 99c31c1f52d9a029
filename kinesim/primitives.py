"""
Shared primitive data types for the simulation.

Colors and pixel rectangles used by sprites and drawing surfaces.
Simulation-space values (meters) stay plain floats on the bodies; these
types describe what lands on the surface.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class Color(BaseModel):
    """Immutable RGBA color with validation.

    All color components must be in the range [0, 255] inclusive.

    Examples:
        >>> red = Color(r=255, g=0, b=0)
        >>> wash = Color(r=255, g=255, b=255, a=178)
        >>> wash.is_translucent
        True
    """
    r: int
    g: int
    b: int
    a: int = 255  # Default to fully opaque

    model_config = ConfigDict(frozen=True)

    @field_validator('r', 'g', 'b', 'a')
    @classmethod
    def validate_color_range(cls, v: int) -> int:
        """Validate color components are in valid range [0, 255]."""
        if not 0 <= v <= 255:
            raise ValueError(f'Color component must be in range [0, 255], got {v}')
        return v

    @computed_field
    @property
    def as_tuple(self) -> Tuple[int, int, int, int]:
        """Return color as RGBA tuple for pygame compatibility."""
        return (self.r, self.g, self.b, self.a)

    @computed_field
    @property
    def as_rgb_tuple(self) -> Tuple[int, int, int]:
        """Return color as RGB tuple (without alpha)."""
        return (self.r, self.g, self.b)

    @property
    def is_translucent(self) -> bool:
        return self.a < 255

    def __str__(self) -> str:
        return f"Color(r={self.r}, g={self.g}, b={self.b}, a={self.a})"


class PixelRect(BaseModel):
    """Immutable rectangle in surface pixels.

    Position is the top-left corner (pygame convention). Sprites keep the
    last one they painted so the matching area can be erased later.

    Examples:
        >>> rect = PixelRect(x=95, y=495, width=10, height=10)
        >>> rect.right
        105
        >>> rect.contains(100, 500)
        True
    """
    x: int
    y: int
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, px: int, py: int) -> bool:
        """Check whether a pixel lies inside the rectangle."""
        return self.x <= px < self.right and self.y <= py < self.bottom

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)

    def __str__(self) -> str:
        return f"PixelRect({self.x}, {self.y}, {self.width}x{self.height})"
