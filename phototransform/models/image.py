from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import numpy as np

from .affine_transform import AffineTransform2D
from .rectangle import Rectangle


@dataclass(frozen=True, eq=False)
class Image:
    """
    Immutable image recipe: source pixels plus the geometry applied to them.
    Pixels are never resampled until rendered; transforms just compose.

    The pixel grid spans [0, W] x [0, H] with y pointing up (row 0 is the top
    row of `pixels`). `transform` maps grid space into world space and
    `region`, when set, is the convex crop polygon in grid space.
    """
    pixels: np.ndarray # Shape (H, W, C), dtype uint8, RGB order. Read-only.
    transform: AffineTransform2D = field(default_factory=AffineTransform2D.identity)
    region: np.ndarray | None = None # (N, 2) convex polygon in grid coords; None = whole grid.
    path: Path | None = None # Source of the image, bookkeeping only.

    def __post_init__(self):
        pixels = self.pixels
        if pixels.ndim not in (2, 3):
            raise ValueError(f"Expected an (H, W) or (H, W, C) array, got shape {pixels.shape}")
        if pixels.flags.writeable:
            pixels = pixels.copy()
            pixels.flags.writeable = False
            object.__setattr__(self, "pixels", pixels)
        if self.region is not None:
            region = np.asarray(self.region, dtype=np.float64).reshape(-1, 2)
            if region.flags.writeable:
                region = region.copy()
                region.flags.writeable = False
            object.__setattr__(self, "region", region)

    @property
    def grid_size(self):
        """(width, height) of the source pixel grid."""
        h, w = self.pixels.shape[:2]
        return w, h

    def grid_polygon(self) -> np.ndarray:
        """The crop region, or the full grid rectangle when uncropped."""
        if self.region is not None:
            return self.region
        w, h = self.grid_size
        return Rectangle.absolute(0, 0, w, h).corners()

    def world_polygon(self) -> np.ndarray:
        return self.transform.apply_to_points(self.grid_polygon())

    @property
    def extent(self) -> Rectangle:
        """Bounding rectangle of the visible region in world space."""
        return Rectangle.bounding(self.world_polygon())
