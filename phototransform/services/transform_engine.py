from __future__ import annotations

import logging
import math
import numbers
import os

import numpy as np
from dotenv import load_dotenv

from ..exceptions import ImageProcessingError, TransformFailedError
from ..models.affine_transform import AffineTransform2D
from ..models.color_controls import ColorControls
from ..models.image import Image
from ..models.orientation import Orientation
from ..models.polygon import intersect_convex
from ..models.rectangle import Rectangle, RectKind
from ..models.render_context import RenderContext
from ..repositories.image_repository import ImageRepository
from .image_service import ImageService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def _finite(value) -> bool:
    return (isinstance(value, numbers.Real) and not isinstance(value, bool)
            and math.isfinite(value))


class TransformEngine:
    """
    Stateless image transforms: affine, colour controls, crop, rectangle
    conversion and orientation correction.

    *   Every operation returns a new Image or raises; inputs are never touched.
    *   Rendering goes through an injected RenderContext, or the calling
        thread's own context when none is given.
    """

    def __init__(self, context: RenderContext = None, warn_normalized_crops: bool = None):
        """
        Args:
            context: rendering backend to use. Defaults to one context per thread.
            warn_normalized_crops: log a warning when an absolute crop rectangle
                looks normalized. Defaults to env var.
        """
        if warn_normalized_crops is None:
            warn_normalized_crops = os.getenv("CROP_WARN_NORMALIZED", "true").lower() == "true"
        self.context = context
        self.warn_normalized_crops = warn_normalized_crops
        self.image_repository = ImageRepository()
        self.image_service = ImageService()

    def _context(self) -> RenderContext:
        return self.context or RenderContext.for_current_thread()

    # ─── Affine ────────────────────────────────────────────────────────
    def rotate(self, image: Image, angle: float) -> Image:
        """
        Rotate about the world origin.

        Args:
            image: the input image
            angle: counter-clockwise angle in radians; negative values rotate clockwise
        """
        if not _finite(angle):
            raise TransformFailedError("rotate", f"angle must be a finite number, got {angle!r}")
        return self.apply_affine(image, AffineTransform2D.rotation(angle))

    def translate(self, image: Image, dx: float, dy: float) -> Image:
        if not (_finite(dx) and _finite(dy)):
            raise TransformFailedError("translate", f"offsets must be finite numbers, got ({dx!r}, {dy!r})")
        return self.apply_affine(image, AffineTransform2D.translation(dx, dy))

    def apply_affine(self, image: Image, transform: AffineTransform2D) -> Image:
        """
        Compose `transform` after the image's current geometry.
        The new extent is the bounding box of the transformed region.
        """
        if not isinstance(transform, AffineTransform2D):
            raise TransformFailedError("affine", f"expected AffineTransform2D, got {type(transform).__name__}")
        if not transform.is_finite():
            raise TransformFailedError("affine", "transform has non-finite components")
        if transform.determinant == 0:
            raise TransformFailedError("affine", "transform is singular")
        combined = image.transform.then(transform)
        if not combined.is_finite() or combined.determinant == 0:
            raise TransformFailedError("affine", "combined transform is degenerate")
        return self.image_repository.with_geometry(image, combined, image.region)

    def reanchor(self, image: Image) -> Image:
        """Translate so the extent origin sits at (0, 0)."""
        extent = image.extent
        if extent.x == 0 and extent.y == 0:
            return image
        return self.translate(image, -extent.x, -extent.y)

    # ─── Colour ────────────────────────────────────────────────────────
    def apply_color_adjustment(self, image: Image, saturation: float,
                               contrast: float, brightness: float) -> Image:
        """
        Apply colour controls. Values pass straight through, no clamping.

        Raises:
            FilterConstructionError: parameters cannot form a filter.
            TransformFailedError: the image cannot be rendered.
        """
        controls = ColorControls(saturation=saturation, contrast=contrast, brightness=brightness)
        return self.image_service.apply_color_controls(image, controls, self._context())

    # ─── Crop & rectangles ─────────────────────────────────────────────
    def crop(self, image: Image, rectangle: Rectangle) -> Image:
        """
        Restrict the image to an *absolute* rectangle in world space.

        The result is clipped to the intersection with the current extent
        region. Normalized rectangles must go through `normalized_to_absolute`
        first; they are rejected here, never rescaled.

        Raises:
            TransformFailedError: normalized input, or no overlap with the image.
        """
        if not isinstance(rectangle, Rectangle):
            raise TransformFailedError("crop", f"expected Rectangle, got {type(rectangle).__name__}")
        if rectangle.kind is RectKind.NORMALIZED:
            raise TransformFailedError(
                "crop", "rectangle is normalized; convert it with normalized_to_absolute first")

        extent = image.extent
        if (self.warn_normalized_crops and rectangle.looks_normalized()
                and (extent.width > 1 or extent.height > 1)):
            logger.warning(f"Crop rectangle {rectangle.as_tuple()} looks normalized for an image "
                           f"of extent {extent.as_tuple()}; cropping as absolute pixels")

        try:
            to_grid = image.transform.inverted()
        except ValueError as err:
            raise TransformFailedError("crop", err) from err
        grid_rect = to_grid.apply_to_points(rectangle.corners())
        region = intersect_convex(grid_rect, image.grid_polygon())
        if len(region) == 0:
            raise TransformFailedError(
                "crop", f"rectangle {rectangle.as_tuple()} does not intersect extent {extent.as_tuple()}")
        return self.image_repository.with_geometry(image, image.transform, region)

    @staticmethod
    def normalized_to_absolute(image: Image, rectangle: Rectangle) -> Rectangle:
        """
        Scale a normalized rectangle (e.g. from a detector) by the image's extent
        width and height to obtain pixel coordinates for `crop`.
        """
        if rectangle.kind is not RectKind.NORMALIZED:
            raise ValueError("Rectangle is already absolute")
        extent = image.extent
        return Rectangle.absolute(rectangle.x * extent.width,
                                  rectangle.y * extent.height,
                                  rectangle.width * extent.width,
                                  rectangle.height * extent.height)

    # ─── Orientation ───────────────────────────────────────────────────
    def fix_orientation(self, image: Image, orientation) -> Image:
        """
        Rotate a capture upright and re-anchor it at (0, 0).

        Args:
            image: decoded capture
            orientation: Orientation or its raw value (0-3)

        Raises:
            InvalidOrientationError: unrecognised orientation value.
            TransformFailedError: rotation or re-anchoring failed.
        """
        orientation = Orientation.from_raw(orientation)
        if orientation is Orientation.UPRIGHT:
            return image

        angle = orientation.correction_angle
        logger.debug(f"Fixing orientation {orientation.name}: rotating by {angle:.4f} rad")
        try:
            rotated = self.rotate(image, angle)
            return self.reanchor(rotated)
        except TransformFailedError:
            raise
        except (ImageProcessingError, ValueError) as err:
            raise TransformFailedError("fix orientation", err) from err

    # ─── Output ────────────────────────────────────────────────────────
    def render(self, image: Image) -> np.ndarray:
        return self.image_service.render(image, self._context())
