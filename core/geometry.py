# --------------------------------------------------
# Geometry Module
# Dimensions, rectangles and the preview <-> source coordinate transform
# --------------------------------------------------
"""
Two pixel spaces are involved when cropping:

* preview space - the letterboxed, usually scaled-down picture on screen
* source space  - the full-resolution pixels of the file on disk

Rectangles never carry their space with them; callers convert explicitly
with :func:`preview_rect_to_source_rect` and
:func:`source_rect_to_preview_rect`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Absorbs float error such as 599.9999999 when flooring scaled edges
_EPSILON = 1e-9


@dataclass(frozen=True)
class Dimension:
    width: int
    height: int

    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    def __str__(self):
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def fits_within(self, dim: Dimension) -> bool:
        """True when the rectangle satisfies the bounds invariant for ``dim``."""
        values = (self.x, self.y, self.width, self.height)
        if not all(math.isfinite(v) for v in values):
            return False
        return (
            self.x >= 0
            and self.y >= 0
            and self.width >= 0
            and self.height >= 0
            and self.right <= dim.width
            and self.bottom <= dim.height
        )

    @classmethod
    def full(cls, dim: Dimension) -> "Rect":
        return cls(0, 0, dim.width, dim.height)

    def __str__(self):
        return f"{self.width}x{self.height}+{self.x}+{self.y}"


# --------------------------------------------------
# Clamping helpers
# --------------------------------------------------
def clamp(value, low, high):
    if math.isnan(value):
        return low
    return max(low, min(value, high))


def clamp_point(point: Point, dim: Dimension) -> Point:
    return Point(clamp(point.x, 0, dim.width), clamp(point.y, 0, dim.height))


def _floor(value):
    return math.floor(value + _EPSILON)


# --------------------------------------------------
# Letterbox fitting
# --------------------------------------------------
def fit_preview_dimension(source_dim: Dimension, container_dim: Dimension) -> Dimension:
    """Largest size with the source aspect ratio that fits the container."""
    sw, sh = source_dim.width, source_dim.height
    cw, ch = container_dim.width, container_dim.height
    if sw <= 0 or sh <= 0:
        raise ValueError(f"Source dimension must be positive, got {source_dim}")
    if cw <= 0 or ch <= 0:
        raise ValueError(f"Container dimension must be positive, got {container_dim}")

    # Compare sw/sh against cw/ch without dividing
    if sw * ch >= sh * cw:
        width = cw
        height = cw * sh // sw
    else:
        height = ch
        width = ch * sw // sh

    return Dimension(max(1, width), max(1, height))


def letterbox_offset(preview_dim: Dimension, container_dim: Dimension) -> Point:
    """Top-left corner of a preview centered inside its container."""
    return Point(
        (container_dim.width - preview_dim.width) // 2,
        (container_dim.height - preview_dim.height) // 2,
    )


def widget_to_preview_point(point: Point, offset: Point) -> Point:
    return Point(point.x - offset.x, point.y - offset.y)


# --------------------------------------------------
# Coordinate transforms
# --------------------------------------------------
def _check_preview(preview_dim: Dimension):
    if not preview_dim.is_valid():
        raise ValueError(f"Preview dimension must be positive, got {preview_dim}")


def preview_rect_to_source_rect(rect: Rect, preview_dim: Dimension, source_dim: Dimension) -> Rect:
    """
    Scale a preview-space rectangle into source space.

    Horizontal and vertical factors are computed independently. Each edge is
    floored and clamped to the source bounds, and the size is derived from
    the clamped edges, so the result can never overrun the source frame.
    """
    _check_preview(preview_dim)

    sx = source_dim.width / preview_dim.width
    sy = source_dim.height / preview_dim.height

    left = clamp(_floor(rect.x * sx), 0, source_dim.width)
    top = clamp(_floor(rect.y * sy), 0, source_dim.height)
    right = clamp(_floor((rect.x + rect.width) * sx), left, source_dim.width)
    bottom = clamp(_floor((rect.y + rect.height) * sy), top, source_dim.height)

    return Rect(int(left), int(top), int(right - left), int(bottom - top))


def source_rect_to_preview_rect(rect: Rect, preview_dim: Dimension, source_dim: Dimension) -> Rect:
    """Inverse of :func:`preview_rect_to_source_rect`, clamped to the preview."""
    _check_preview(preview_dim)
    if not source_dim.is_valid():
        raise ValueError(f"Source dimension must be positive, got {source_dim}")

    sx = preview_dim.width / source_dim.width
    sy = preview_dim.height / source_dim.height

    left = clamp(rect.x * sx, 0, preview_dim.width)
    top = clamp(rect.y * sy, 0, preview_dim.height)
    right = clamp((rect.x + rect.width) * sx, left, preview_dim.width)
    bottom = clamp((rect.y + rect.height) * sy, top, preview_dim.height)

    return Rect(left, top, right - left, bottom - top)
