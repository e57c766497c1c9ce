from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import math
import numpy as np

_SNAP_TOL = 1e-6


def _snap(value: float) -> float:
    nearest = round(value)
    return float(nearest) if abs(value - nearest) < _SNAP_TOL else value


class RectKind(str, Enum):
    NORMALIZED = "normalized"   # fractions of an image extent, all in [0, 1]
    ABSOLUTE = "absolute"       # pixel units in world space


@dataclass(frozen=True)
class Rectangle:
    """
    Origin (bottom-left in world space) + size, tagged with its coordinate kind.
    Use `Rectangle.normalized(...)` for detector output and
    `Rectangle.absolute(...)` for pixel rectangles.
    """
    x: float
    y: float
    width: float
    height: float
    kind: RectKind = RectKind.ABSOLUTE

    def __post_init__(self):
        values = (self.x, self.y, self.width, self.height)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"Rectangle components must be finite, got {values}")
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Rectangle size must be non-negative, got {self.width}x{self.height}")
        if self.kind is RectKind.NORMALIZED and not all(0.0 <= v <= 1.0 for v in values):
            raise ValueError(f"Normalized rectangle components must lie in [0, 1], got {values}")

    @classmethod
    def normalized(cls, x: float, y: float, width: float, height: float) -> Rectangle:
        return cls(float(x), float(y), float(width), float(height), RectKind.NORMALIZED)

    @classmethod
    def absolute(cls, x: float, y: float, width: float, height: float) -> Rectangle:
        return cls(float(x), float(y), float(width), float(height), RectKind.ABSOLUTE)

    @classmethod
    def empty(cls) -> Rectangle:
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def bounding(cls, points: np.ndarray) -> Rectangle:
        """Absolute bounding box of an (N, 2) point array."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if len(pts) == 0:
            return cls.empty()
        x0, y0 = pts.min(axis=0)
        x1, y1 = pts.max(axis=0)
        return cls.absolute(x0, y0, x1 - x0, y1 - y0)

    # ── Geometry ─────────────────────────────────────────────────────
    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def corners(self) -> np.ndarray:
        """Four corners, counter-clockwise in a y-up frame."""
        return np.array([[self.x, self.y],
                         [self.max_x, self.y],
                         [self.max_x, self.max_y],
                         [self.x, self.max_y]], dtype=np.float64)

    def looks_normalized(self) -> bool:
        return all(0.0 <= v <= 1.0 for v in (self.x, self.y, self.width, self.height))

    def intersection(self, other: Rectangle) -> Rectangle:
        if self.kind is not other.kind:
            raise ValueError("Cannot intersect a normalized rectangle with an absolute one")
        x0, y0 = max(self.x, other.x), max(self.y, other.y)
        x1, y1 = min(self.max_x, other.max_x), min(self.max_y, other.max_y)
        if x1 <= x0 or y1 <= y0:
            return Rectangle(0.0, 0.0, 0.0, 0.0, self.kind)
        return Rectangle(x0, y0, x1 - x0, y1 - y0, self.kind)

    def integral(self) -> Rectangle:
        """Smallest whole-pixel rectangle containing this one (near-integers snap first)."""
        x0 = math.floor(_snap(self.x))
        y0 = math.floor(_snap(self.y))
        x1 = math.ceil(_snap(self.max_x))
        y1 = math.ceil(_snap(self.max_y))
        return Rectangle.absolute(x0, y0, x1 - x0, y1 - y0)

    def as_tuple(self):
        return self.x, self.y, self.width, self.height
